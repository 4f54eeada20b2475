"""
Custom exceptions for the Campaign CRM API.
Provides consistent error handling across the application.

Every failure category maps to its own exception class so callers can branch
on cause; `main.py` turns each one into a stable JSON error body.
"""
from typing import Any, Dict, List, Optional

from fastapi import status


class CRMException(Exception):
    """Base exception for Campaign CRM"""
    category = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.category, "message": self.message}


class ValidationError(CRMException):
    """Validation failed.

    `errors` carries every violation: field-keyed entries
    (``{"field": ..., "message": ...}``) for schema checks, or row-keyed
    entries (``{"row": ..., "error": ...}``) for CSV imports.
    """
    category = "validation"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None
    ):
        self.errors = list(errors or [])
        if field:
            if not self.errors:
                self.errors.append({"field": field, "message": message})
            message = f"Validation failed for field '{field}': {message}"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class NotFoundError(CRMException):
    """Resource not found (for the requesting owner)"""
    category = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource", resource_id: Optional[str] = None):
        self.resource = resource
        self.resource_id = resource_id
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(message)


class UnauthorizedError(CRMException):
    """Authentication failed"""
    category = "unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class ConflictError(CRMException):
    """Store rejected a write (uniqueness or foreign key)"""
    category = "conflict"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str = "Resource conflicts with existing data"):
        super().__init__(message)


class AlreadyExistsError(ConflictError):
    """Resource already exists"""
    def __init__(self, resource: str = "Resource", field: Optional[str] = None, value: Optional[str] = None):
        if field and value:
            message = f"{resource} with {field} '{value}' already exists"
        else:
            message = f"{resource} already exists"
        super().__init__(message)


class InternalError(CRMException):
    """Unexpected storage or transaction failure"""

    def __init__(self, message: str = "Internal error"):
        super().__init__(message)


class PayloadTooLargeError(CRMException):
    """Upload exceeds the configured size limit"""
    category = "payload_too_large"
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    def __init__(self, limit_bytes: int):
        super().__init__(f"Upload exceeds the {limit_bytes} byte limit")
