"""Service layer helpers for external integrations."""

from .analysis import AnalysisService
from .llm_client import OpenAIChatClient, build_llm_client
from .retry import RetryPolicy
from .session_store import (
    InMemorySessionStore,
    NewSession,
    Session,
    SessionStore,
    SqlAlchemySessionStore,
)
from .subscription import SubscriptionService, build_subscription_service
from .transcribe import TranscribeService, build_transcribe_service

__all__ = [
    "AnalysisService",
    "OpenAIChatClient",
    "build_llm_client",
    "RetryPolicy",
    "SessionStore",
    "InMemorySessionStore",
    "SqlAlchemySessionStore",
    "NewSession",
    "Session",
    "SubscriptionService",
    "build_subscription_service",
    "TranscribeService",
    "build_transcribe_service",
]
