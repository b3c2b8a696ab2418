"""Persistence-related exceptions."""


class PersistenceError(Exception):
    """Base exception for persistence-related errors."""


class DatabaseError(PersistenceError):
    """Database operation error.

    Attributes:
        operation: Name of the failed operation (e.g. "read", "write").
        key: Cache key involved, if any.
    """

    def __init__(self, operation: str, key: str | None = None, detail: str = "") -> None:
        self.operation = operation
        self.key = key
        target = f" for {key}" if key else ""
        super().__init__(f"Database {operation} failed{target}: {detail}")
