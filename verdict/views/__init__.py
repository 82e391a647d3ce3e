"""Pydantic schemas used as views in the MVC architecture."""

from .checkout import CheckoutRequest, CheckoutResponse
from .common import ErrorResponse
from .sessions import SessionCreateRequest, SessionCreateResponse, SessionResponse
from .status import ApiStatusResponse

__all__ = [
    "ApiStatusResponse",
    "CheckoutRequest",
    "CheckoutResponse",
    "ErrorResponse",
    "SessionCreateRequest",
    "SessionCreateResponse",
    "SessionResponse",
]
