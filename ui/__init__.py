"""Textual screens and widgets for qomoboro."""
