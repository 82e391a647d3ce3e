"""Common FastAPI dependencies reused across controllers.

Services are built once in ``create_app`` and parked on ``app.state``; these
accessors hand them to route handlers so tests can swap any of them through
``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from verdict.config.settings import Settings
from verdict.services import (
    AnalysisService,
    SessionStore,
    SubscriptionService,
    TranscribeService,
)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_transcribe_service(request: Request) -> TranscribeService:
    return request.app.state.transcribe_service


def get_analysis_service(request: Request) -> AnalysisService:
    return request.app.state.analysis_service


def get_subscription_service(request: Request) -> SubscriptionService:
    return request.app.state.subscription_service


SettingsDep = Annotated[Settings, Depends(get_settings)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
TranscribeServiceDep = Annotated[TranscribeService, Depends(get_transcribe_service)]
AnalysisServiceDep = Annotated[AnalysisService, Depends(get_analysis_service)]
SubscriptionServiceDep = Annotated[SubscriptionService, Depends(get_subscription_service)]


__all__ = [
    "get_settings",
    "get_session_store",
    "get_transcribe_service",
    "get_analysis_service",
    "get_subscription_service",
    "SettingsDep",
    "SessionStoreDep",
    "TranscribeServiceDep",
    "AnalysisServiceDep",
    "SubscriptionServiceDep",
]
