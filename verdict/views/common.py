"""Common response schemas."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Single error envelope returned by every failing route."""

    error: str
