"""Stripe checkout and subscription gating."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional

import stripe
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ConfigDict
from sqlalchemy import select, update

from verdict.config.settings import Settings, StripeConfig
from verdict.database import session_scope
from verdict.errors import ConfigurationError, SubscriptionRequiredError
from verdict.models.subscription import Subscription as SubscriptionModel

logger = logging.getLogger(__name__)


class SubscriptionRecord(BaseModel):
    """Domain model for a paid subscription"""

    id: int
    email: str
    stripe_customer_id: str
    stripe_price_id: str
    active: bool = True
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


def _is_expired(expires_at: Optional[datetime], now: datetime) -> bool:
    if expires_at is None:
        return False
    if expires_at.tzinfo is None:
        now = now.astimezone(timezone.utc).replace(tzinfo=None)
    return expires_at < now


class SubscriptionRepository(ABC):
    """Persistence contract for subscriptions"""

    @abstractmethod
    async def get_active_by_email(self, email: str) -> Optional[SubscriptionRecord]:
        ...

    @abstractmethod
    async def deactivate(self, subscription_id: int) -> None:
        ...


class InMemorySubscriptionRepository(SubscriptionRepository):
    """Process-local subscriptions, seeded at construction."""

    def __init__(self, subscriptions: Iterable[SubscriptionRecord] = ()) -> None:
        self._by_id = {record.id: record for record in subscriptions}

    async def get_active_by_email(self, email: str) -> Optional[SubscriptionRecord]:
        for record in self._by_id.values():
            if record.email == email and record.active:
                return record.model_copy()
        return None

    async def deactivate(self, subscription_id: int) -> None:
        record = self._by_id.get(subscription_id)
        if record is not None:
            self._by_id[subscription_id] = record.model_copy(update={"active": False})


class SqlAlchemySubscriptionRepository(SubscriptionRepository):
    """SQLAlchemy implementation of the subscription repository"""

    def __init__(self, scope=session_scope) -> None:
        self._scope = scope

    async def get_active_by_email(self, email: str) -> Optional[SubscriptionRecord]:
        async with self._scope() as db:
            result = await db.execute(
                select(SubscriptionModel).where(
                    SubscriptionModel.email == email,
                    SubscriptionModel.active.is_(True),
                )
            )
            row = result.scalar_one_or_none()
            return SubscriptionRecord.model_validate(row) if row else None

    async def deactivate(self, subscription_id: int) -> None:
        async with self._scope() as db:
            await db.execute(
                update(SubscriptionModel)
                .where(SubscriptionModel.id == subscription_id)
                .values(active=False)
            )
            await db.commit()


class SubscriptionService:
    """Create checkout sessions and answer "may this email submit?"."""

    def __init__(
        self,
        repository: SubscriptionRepository,
        config: StripeConfig,
        *,
        create_checkout: Callable[..., Any] | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        secret = config.secret_key.get_secret_value() if config.secret_key else ""
        if not secret:
            raise ConfigurationError("STRIPE_SECRET_KEY is required")
        self._repository = repository
        self._config = config
        self._secret = secret
        self._create_checkout = create_checkout or stripe.checkout.Session.create
        self._clock = clock

    async def create_checkout_session(self, email: str) -> str:
        """Start a Stripe subscription checkout and return its redirect URL."""

        base_url = self._config.public_url.rstrip("/")
        session = await run_in_threadpool(
            self._create_checkout,
            api_key=self._secret,
            payment_method_types=["card"],
            line_items=[{"price": self._config.price_id, "quantity": 1}],
            mode="subscription",
            success_url=f"{base_url}{self._config.success_path}?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{base_url}{self._config.cancel_path}",
            customer_email=email,
        )
        logger.info("Created checkout session for %s", email)
        return session["url"] if isinstance(session, dict) else session.url

    async def validate_subscription(self, email: str) -> bool:
        """True for an active, unexpired subscription; expired rows are deactivated."""

        subscription = await self._repository.get_active_by_email(email)
        if subscription is None:
            return False

        if _is_expired(subscription.expires_at, self._clock()):
            logger.info("Subscription %s for %s expired, deactivating", subscription.id, email)
            await self._repository.deactivate(subscription.id)
            return False

        return True

    async def require_subscription(self, email: str | None) -> None:
        if not email or not await self.validate_subscription(email):
            raise SubscriptionRequiredError()


def build_subscription_service(settings: Settings) -> SubscriptionService:
    """Pick the repository matching ``store_backend``.

    The memory backend starts with no subscriptions, so outside development
    mode every session submission is answered with 402.
    """

    repository: SubscriptionRepository
    if settings.store_backend == "database":
        repository = SqlAlchemySubscriptionRepository()
    else:
        repository = InMemorySubscriptionRepository()
        if not settings.subscription_bypass:
            logger.warning(
                "Subscriptions use the in-memory backend with no entries; "
                "session submissions will require payment until STORE_BACKEND=database "
                "or ENVIRONMENT=development is set"
            )
    return SubscriptionService(repository, settings.stripe)


__all__ = [
    "SubscriptionRecord",
    "SubscriptionRepository",
    "InMemorySubscriptionRepository",
    "SqlAlchemySubscriptionRepository",
    "SubscriptionService",
    "build_subscription_service",
]
