"""Stripe checkout endpoint."""

import logging

from fastapi import APIRouter

from verdict.controllers.dependencies import SubscriptionServiceDep
from verdict.errors import InputValidationError
from verdict.views import CheckoutRequest, CheckoutResponse

router = APIRouter(tags=["checkout"])

logger = logging.getLogger(__name__)


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout(
    payload: CheckoutRequest,
    subscriptions: SubscriptionServiceDep,
) -> CheckoutResponse:
    """Start a subscription checkout and return the hosted payment page URL."""

    email = (payload.email or "").strip()
    if not email:
        raise InputValidationError("Email is required")

    url = await subscriptions.create_checkout_session(email)
    return CheckoutResponse(url=url)
