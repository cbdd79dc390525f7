"""Workout log exceptions."""


class WorkoutLogError(Exception):
    """Base exception for workout log errors."""
    pass


class TextFormatError(WorkoutLogError):
    """Raised when import text cannot be parsed."""

    def __init__(self, message: str, line_number: int | None = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class StorageError(WorkoutLogError):
    """Raised when the workout store cannot be read or written."""
    pass
