"""
Common schemas for API responses.
"""
from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error body produced by the service-error handler."""

    success: bool = False
    message: str
    error_code: Optional[str] = None


class HealthStatus(BaseModel):
    status: str
    database: str
