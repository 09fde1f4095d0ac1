"""Database exception hierarchy."""


class DatabaseError(Exception):
    """
    Base exception for errors raised by this package.

    Driver errors raised while running a statement are not wrapped; they
    reach the caller as SQLAlchemy exceptions.
    """


class DatabaseConnectionError(DatabaseError):
    """Connection to the database could not be established."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """
        Initialize connection error.

        Args:
            message: Error message
            original_error: Driver exception that caused the failure
        """
        self.original_error = original_error
        super().__init__(message)
