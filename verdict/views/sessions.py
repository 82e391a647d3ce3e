"""Pydantic schemas for session submission and retrieval."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from verdict.pipelines.analysis.types import CounselingMode


def _camel(name: str, snake: str, **kwargs: Any) -> Any:
    return Field(
        validation_alias=AliasChoices(name, snake),
        serialization_alias=name,
        **kwargs,
    )


class SessionCreateRequest(BaseModel):
    """Body of `POST /api/sessions`; audio fields carry base64 recordings."""

    email: Optional[str] = None
    partner1Name: str = _camel("partner1Name", "partner1_name", default="")
    partner2Name: str = _camel("partner2Name", "partner2_name", default="")
    partner1Audio: Optional[str] = _camel("partner1Audio", "partner1_audio", default=None)
    partner2Audio: Optional[str] = _camel("partner2Audio", "partner2_audio", default=None)
    mode: CounselingMode
    isLiveArgument: bool = _camel("isLiveArgument", "is_live_argument", default=False)


class SessionCreateResponse(BaseModel):
    aiResponse: str
    sessionId: int


class SessionResponse(BaseModel):
    """Stored session as returned to clients."""

    id: int
    partner1Name: str = _camel("partner1Name", "partner1_name")
    partner2Name: str = _camel("partner2Name", "partner2_name")
    partner1Audio: str = _camel("partner1Audio", "partner1_audio")
    partner2Audio: str = _camel("partner2Audio", "partner2_audio")
    mode: str
    aiResponse: Optional[str] = _camel("aiResponse", "ai_response", default=None)
    active: bool = True
    transcriptionData: Optional[dict[str, Any]] = _camel(
        "transcriptionData", "transcription_data", default=None
    )
    isLiveArgument: bool = _camel("isLiveArgument", "is_live_argument", default=False)

    model_config = ConfigDict(from_attributes=True)
