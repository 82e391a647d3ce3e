"""SQLAlchemy models backing the relational store."""

from .base import Base
from .session import SessionRecord  # noqa: F401
from .subscription import Subscription  # noqa: F401

__all__ = [
    "Base",
    "SessionRecord",
    "Subscription",
]
