"""
Common schemas used across multiple endpoints.
"""
from typing import Any, Dict, List, Optional, Iterable
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error response, one stable `error` category per failure mode."""
    error: str
    message: str
    errors: Optional[List[Dict[str, Any]]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "error": "validation",
                "message": "Validation error",
                "errors": [{"field": "email", "message": "value is not a valid email address"}]
            }
        }


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str = "1.0.0"


def partial_update(data: BaseModel, required: Iterable[str] = ()) -> dict:
    """
    Fields the caller actually supplied.

    An explicit null on a required column is treated as "not supplied", the
    column keeps its value.
    """
    required = set(required)
    return {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field not in required
    }
