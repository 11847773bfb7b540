"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(AppError):
    """Raised when a requested resource is missing."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=400)


class InvalidCodeError(ValidationError):
    """Raised when a ticket code is too short to look up."""

    def __init__(self, message: str = "Invalid ticket code"):
        super().__init__(message)


class ReferentialIntegrityError(AppError):
    """Raised when a delete would orphan dependent records."""

    def __init__(self, message: str, blocking_count: int = 0):
        super().__init__(message, status_code=400)
        self.blocking_count = blocking_count


class DuplicateCodeError(AppError):
    """Raised by the store when a ticket code already exists at write time."""

    def __init__(self, code: str):
        super().__init__(f"Ticket code {code} already exists", status_code=409)
        self.code = code


class ExhaustedRetriesError(AppError):
    """Raised when no unused ticket code was found within the attempt budget."""

    def __init__(self, attempts: int):
        super().__init__("Failed to generate unique ticket code", status_code=500)
        self.attempts = attempts


class StoreError(AppError):
    """Raised when the store rejects a write for a reason we do not recover from."""

    def __init__(self, message: str = "Store operation failed"):
        super().__init__(message, status_code=500)


def to_response(error: AppError, correlation_id: Optional[str] = None) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    body: Dict[str, Any] = {"error": str(error), "status": "error"}
    if correlation_id:
        body["correlation_id"] = correlation_id
    return {
        "statusCode": error.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }
