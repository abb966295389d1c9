"""Errors raised by the file store."""


class StoreError(Exception):
    """Base class for all storage failures."""


class NotFoundError(StoreError):
    """A task id or a required file does not exist."""


class DuplicateIDError(StoreError):
    """A task with the same id is already stored."""


class StoreIOError(StoreError):
    """A filesystem operation failed (permissions, disk full, partial copy)."""


class DecodeError(StoreError):
    """A stored file holds malformed JSON or an incomplete record."""
