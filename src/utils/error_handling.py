"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict


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
        super().__init__(message, status_code=422)


class MalformedEventError(ValidationError):
    """Raised when an inbound chat event lacks required fields."""

    def __init__(self, message: str = "Malformed inbound event"):
        super().__init__(message)


class SignatureVerificationError(AppError):
    """Raised when the webhook signature header does not match the body."""

    def __init__(self, message: str = "Invalid webhook signature"):
        super().__init__(message, status_code=401)


class StorageError(AppError):
    """Raised when the customer state store cannot complete a read or write."""

    def __init__(self, message: str = "Customer state storage failed", status_code: int = 500):
        super().__init__(message, status_code=status_code)


class ConcurrentUpdateError(StorageError):
    """Raised when a snapshot was written by someone else since it was loaded."""

    def __init__(self, message: str = "Customer snapshot was modified concurrently"):
        super().__init__(message, status_code=409)


def to_response(error: AppError) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    return {
        "statusCode": error.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps({"message": str(error), "status": "error"}),
    }
