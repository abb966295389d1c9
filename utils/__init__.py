"""Utility modules for qomoboro.

Modules:
    time_utils: Duration parsing and formatting utilities
    rwlock: Reader/writer lock used by the file store
"""
from utils.time_utils import format_duration, parse_duration

__all__ = ["parse_duration", "format_duration"]
