"""SQLAlchemy model for paid subscriptions."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Integer, Text, func, true

from .base import Base


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(Text, nullable=False, unique=True)
    stripe_customer_id = Column(Text, nullable=False)
    stripe_price_id = Column(Text, nullable=False)
    active = Column(Boolean, default=True, server_default=true())
    created_at = Column(DateTime, server_default=func.now())
    expires_at = Column(DateTime, nullable=True)


__all__ = ["Subscription"]
