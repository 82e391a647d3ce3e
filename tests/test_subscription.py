"""Subscription gate and Stripe checkout session creation."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import SecretStr

from verdict.config.settings import settings
from verdict.errors import ConfigurationError, SubscriptionRequiredError
from verdict.services.subscription import (
    InMemorySubscriptionRepository,
    SubscriptionRecord,
    SubscriptionService,
    build_subscription_service,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

STRIPE_CONFIG = settings.stripe.model_copy(
    update={
        "secret_key": SecretStr("sk_test_verdict"),
        "price_id": "price_H5ggYwtDq4fbrJ",
        "public_url": "http://localhost:5000",
        "success_path": "/success",
        "cancel_path": "/canceled",
    }
)


def _record(**overrides) -> SubscriptionRecord:
    fields = dict(
        id=1,
        email="pat@example.com",
        stripe_customer_id="cus_123",
        stripe_price_id="price_H5ggYwtDq4fbrJ",
        active=True,
        expires_at=None,
    )
    fields.update(overrides)
    return SubscriptionRecord(**fields)


def _service(*records: SubscriptionRecord, create_checkout=None):
    repository = InMemorySubscriptionRepository(records)
    service = SubscriptionService(
        repository,
        STRIPE_CONFIG,
        create_checkout=create_checkout,
        clock=lambda: NOW,
    )
    return service, repository


def test_active_subscription_is_valid() -> None:
    service, _ = _service(_record(expires_at=NOW + timedelta(days=3)))

    assert asyncio.run(service.validate_subscription("pat@example.com")) is True


def test_unknown_email_is_invalid() -> None:
    service, _ = _service(_record())

    assert asyncio.run(service.validate_subscription("someone@example.com")) is False


def test_expired_subscription_is_deactivated() -> None:
    service, repository = _service(_record(expires_at=NOW - timedelta(minutes=1)))

    assert asyncio.run(service.validate_subscription("pat@example.com")) is False
    assert asyncio.run(repository.get_active_by_email("pat@example.com")) is None


def test_naive_expiry_is_compared_as_utc() -> None:
    service, _ = _service(_record(expires_at=datetime(2024, 5, 2)))

    assert asyncio.run(service.validate_subscription("pat@example.com")) is True


def test_require_subscription_raises_for_missing_email() -> None:
    service, _ = _service(_record())

    with pytest.raises(SubscriptionRequiredError):
        asyncio.run(service.require_subscription(None))


def test_checkout_session_uses_configured_price_and_urls() -> None:
    captured: dict = {}

    def fake_create(**kwargs):
        captured.update(kwargs)
        return {"id": "cs_test_1", "url": "https://checkout.stripe.com/c/pay/cs_test_1"}

    service, _ = _service(create_checkout=fake_create)

    url = asyncio.run(service.create_checkout_session("pat@example.com"))

    assert url == "https://checkout.stripe.com/c/pay/cs_test_1"
    assert captured["mode"] == "subscription"
    assert captured["customer_email"] == "pat@example.com"
    assert captured["line_items"] == [{"price": "price_H5ggYwtDq4fbrJ", "quantity": 1}]
    assert captured["success_url"] == "http://localhost:5000/success?session_id={CHECKOUT_SESSION_ID}"
    assert captured["cancel_url"] == "http://localhost:5000/canceled"
    assert captured["api_key"] == "sk_test_verdict"


def test_missing_secret_fails_fast() -> None:
    config = STRIPE_CONFIG.model_copy(update={"secret_key": None})

    with pytest.raises(ConfigurationError):
        SubscriptionService(InMemorySubscriptionRepository(), config)



def test_memory_backend_outside_development_warns(caplog: pytest.LogCaptureFixture) -> None:
    production = settings.model_copy(
        update={"environment": "production", "store_backend": "memory", "stripe": STRIPE_CONFIG}
    )

    with caplog.at_level(logging.WARNING, logger="verdict.services.subscription"):
        service = build_subscription_service(production)

    assert "in-memory backend with no entries" in caplog.text
    assert asyncio.run(service.validate_subscription("pat@example.com")) is False


def test_memory_backend_in_development_is_quiet(caplog: pytest.LogCaptureFixture) -> None:
    development = settings.model_copy(
        update={"environment": "development", "store_backend": "memory", "stripe": STRIPE_CONFIG}
    )

    with caplog.at_level(logging.WARNING, logger="verdict.services.subscription"):
        build_subscription_service(development)

    assert "in-memory backend" not in caplog.text
