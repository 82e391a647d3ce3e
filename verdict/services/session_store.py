"""Session persistence behind a small create/read/update interface."""

from __future__ import annotations

import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import select

from verdict.database import session_scope
from verdict.errors import NotFoundError
from verdict.models.session import SessionRecord

logger = logging.getLogger(__name__)


class NewSession(BaseModel):
    """Fields supplied by a submission; the store fills in the rest."""

    partner1_name: str
    partner2_name: str
    partner1_audio: str
    partner2_audio: str = ""
    mode: str
    is_live_argument: bool = False
    transcription_data: Optional[dict[str, Any]] = None


class Session(BaseModel):
    """Domain model for a stored session"""

    id: int
    partner1_name: str
    partner2_name: str
    partner1_audio: str
    partner2_audio: str
    mode: str
    ai_response: Optional[str] = None
    active: bool = True
    transcription_data: Optional[dict[str, Any]] = None
    is_live_argument: bool = False

    model_config = ConfigDict(from_attributes=True)


class SessionStore(ABC):
    """Persistence contract for sessions"""

    @abstractmethod
    async def create(self, new_session: NewSession) -> Session:
        ...

    @abstractmethod
    async def get(self, session_id: int) -> Optional[Session]:
        ...

    @abstractmethod
    async def update_response(self, session_id: int, ai_response: str) -> Session:
        """Attach the verdict; raises ``NotFoundError`` for unknown ids."""


class InMemorySessionStore(SessionStore):
    """Process-local store; ids start at 1 and are never reused."""

    def __init__(self) -> None:
        self._sessions: dict[int, Session] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def create(self, new_session: NewSession) -> Session:
        async with self._lock:
            session = Session(
                id=next(self._ids),
                active=True,
                ai_response=None,
                **new_session.model_dump(),
            )
            self._sessions[session.id] = session
        return session.model_copy(deep=True)

    async def get(self, session_id: int) -> Optional[Session]:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    async def update_response(self, session_id: int, ai_response: str) -> Session:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise NotFoundError()
            if session.ai_response is not None:
                logger.warning("Overwriting ai_response for session=%s", session_id)
            updated = session.model_copy(update={"ai_response": ai_response}, deep=True)
            self._sessions[session_id] = updated
        return updated.model_copy(deep=True)


class SqlAlchemySessionStore(SessionStore):
    """SQLAlchemy implementation of the session store"""

    def __init__(self, scope=session_scope) -> None:
        self._scope = scope

    async def create(self, new_session: NewSession) -> Session:
        async with self._scope() as db:
            record = SessionRecord(
                **new_session.model_dump(),
                active=True,
                ai_response=None,
            )
            db.add(record)
            await db.commit()
            await db.refresh(record)
            return Session.model_validate(record)

    async def get(self, session_id: int) -> Optional[Session]:
        async with self._scope() as db:
            result = await db.execute(
                select(SessionRecord).where(SessionRecord.id == session_id)
            )
            record = result.scalar_one_or_none()
            return Session.model_validate(record) if record else None

    async def update_response(self, session_id: int, ai_response: str) -> Session:
        async with self._scope() as db:
            result = await db.execute(
                select(SessionRecord).where(SessionRecord.id == session_id)
            )
            record = result.scalar_one_or_none()
            if record is None:
                raise NotFoundError()
            if record.ai_response is not None:
                logger.warning("Overwriting ai_response for session=%s", session_id)
            record.ai_response = ai_response
            await db.commit()
            await db.refresh(record)
            return Session.model_validate(record)


__all__ = [
    "NewSession",
    "Session",
    "SessionStore",
    "InMemorySessionStore",
    "SqlAlchemySessionStore",
]
