"""Typed containers shared across the analysis pipeline.

These live in their own module so the other stages (`transcription`,
`prompts`, `llm`, `flow`) and the services can import them without creating
circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CounselingMode(str, Enum):
    """Analysis persona selecting the system prompt and output format."""

    EVALUATOR = "evaluator"
    COUNSELOR = "counselor"
    DINNER = "dinner"
    ENTERTAINMENT = "entertainment"


class TranscriptSegment(BaseModel):
    text: str
    start: Optional[float] = None
    end: Optional[float] = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class TranscriptWord(BaseModel):
    word: str
    start: Optional[float] = None
    end: Optional[float] = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class TranscriptionResult(BaseModel):
    """Speech-to-text output for one recording."""

    text: str
    segments: list[TranscriptSegment] = Field(default_factory=list)
    words: Optional[list[TranscriptWord]] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def from_text(cls, text: str) -> "TranscriptionResult":
        """Wrap typed text the same way a one-segment recording would look."""

        return cls(text=text, segments=[TranscriptSegment(text=text)])


class AnalysisResult(BaseModel):
    """Envelope stored on the session once the verdict is complete."""

    verdict: str
    timestamp: str

    model_config = ConfigDict(frozen=True)

    @classmethod
    def now(cls, verdict: str) -> "AnalysisResult":
        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        return cls(verdict=verdict, timestamp=timestamp.replace("+00:00", "Z"))


@dataclass(frozen=True)
class PromptBundle:
    system_prompt: str
    user_prompt: str


@dataclass(frozen=True)
class AnalysisRequest:
    """Inputs for one analysis run, after transcription."""

    mode: CounselingMode
    partner1_name: str
    partner2_name: str
    partner1_text: str
    partner2_text: str | None = None
    is_live_argument: bool = False
    session_id: int | None = None


@dataclass(frozen=True)
class AnalysisOutcome:
    ai_response: str


@dataclass(frozen=True)
class ApiStatus:
    has_access: bool
    message: str


__all__ = [
    "CounselingMode",
    "TranscriptSegment",
    "TranscriptWord",
    "TranscriptionResult",
    "AnalysisResult",
    "PromptBundle",
    "AnalysisRequest",
    "AnalysisOutcome",
    "ApiStatus",
]
