"""Custom exceptions for the event store."""


class StoreError(Exception):
    """Database operation failed."""

    pass


class DuplicateEventError(StoreError):
    """An event with the same (event, date) identity already exists."""

    pass
