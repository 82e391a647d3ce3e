"""Schemas for Stripe checkout requests."""

from typing import Optional

from pydantic import BaseModel


class CheckoutRequest(BaseModel):
    email: Optional[str] = None


class CheckoutResponse(BaseModel):
    url: str
