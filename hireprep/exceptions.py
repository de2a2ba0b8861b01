"""
Exceptions - Error taxonomy for HirePrep

Each error carries the HTTP status the API layer maps it to, so routes can
translate them without knowing which component raised them.
"""

from typing import List, Optional


class HirePrepError(Exception):
    """Base class for all HirePrep errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(HirePrepError):
    """Raised when input fails shape or enum validation."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class NotFoundError(HirePrepError):
    """Raised when a record id does not exist."""

    status_code = 404


class StorageUnavailableError(HirePrepError):
    """Raised when the data store is not configured or cannot be reached."""

    status_code = 503

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause
