"""SQLAlchemy model for counseling sessions."""

from __future__ import annotations

from sqlalchemy import JSON, Boolean, Column, Integer, Text, true, false
from sqlalchemy.dialects.postgresql import JSONB

from .base import Base


class SessionRecord(Base):
    """One submission: both partners' audio, the mode, and the verdict."""

    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    partner1_name = Column(Text, nullable=False)
    partner2_name = Column(Text, nullable=False)
    partner1_audio = Column(Text, nullable=False)
    partner2_audio = Column(Text, nullable=False)
    mode = Column(Text, nullable=False)
    ai_response = Column(Text, nullable=True)
    active = Column(Boolean, default=True, server_default=true())
    transcription_data = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    is_live_argument = Column(Boolean, default=False, server_default=false())


__all__ = ["SessionRecord"]
