"""Analysis adapter: transcripts in, verdict envelope out."""

from __future__ import annotations

import json
import logging
from typing import Awaitable, Callable

from verdict.errors import AnalysisFailedError
from verdict.pipelines.analysis.llm import generate_verdict
from verdict.pipelines.analysis.types import (
    AnalysisOutcome,
    AnalysisRequest,
    AnalysisResult,
    ApiStatus,
    CounselingMode,
    TranscriptionResult,
)
from verdict.services.llm_client import OpenAIChatClient
from verdict.telemetry import observe_analysis

logger = logging.getLogger("verdict.pipeline")
transcript_logger = logging.getLogger("verdict.logs.transcript")

CompletionCallback = Callable[[str], Awaitable[None]]


def _parse_transcript_payload(payload: str) -> TranscriptionResult:
    """Accept a serialized TranscriptionResult; plain text is wrapped as one segment."""

    try:
        data = json.loads(payload)
    except ValueError:
        return TranscriptionResult.from_text(payload)
    if isinstance(data, dict):
        return TranscriptionResult.model_validate(data)
    return TranscriptionResult.from_text(payload)


class AnalysisService:
    """Run the prompt + stream stages and fold failures into one boundary error."""

    def __init__(self, client: OpenAIChatClient) -> None:
        self._client = client

    async def check_api_status(self) -> ApiStatus:
        return await self._client.check_status()

    async def analyze_conflict(
        self,
        partner1_payload: str,
        partner2_payload: str | None,
        mode: CounselingMode | str,
        is_live_argument: bool,
        partner1_name: str,
        partner2_name: str,
    ) -> str:
        """Return the serialized ``AnalysisResult`` for two transcript payloads.

        Partner 2 is optional; a missing payload renders as the mode's
        placeholder line in the prompt instead of failing.
        """

        try:
            mode = CounselingMode(mode)
            partner1 = _parse_transcript_payload(partner1_payload)
            partner2 = _parse_transcript_payload(partner2_payload) if partner2_payload else None
            request = AnalysisRequest(
                mode=mode,
                partner1_name=partner1_name,
                partner2_name=partner2_name,
                partner1_text=partner1.text,
                partner2_text=partner2.text if partner2 else None,
                is_live_argument=is_live_argument,
            )
            full_text = await generate_verdict(self._client, request)
        except Exception as exc:
            logger.exception("Analysis error mode=%s", mode)
            observe_analysis(str(getattr(mode, "value", mode)), "failed")
            raise AnalysisFailedError() from exc

        observe_analysis(mode.value, "success")
        return AnalysisResult.now(full_text).model_dump_json()

    async def create_analysis_stream(
        self,
        request: AnalysisRequest,
        on_complete: CompletionCallback | None = None,
    ) -> AnalysisOutcome:
        """Stream a verdict for ``request`` and hand the envelope to ``on_complete``.

        The callback runs once, after the text is fully accumulated. Errors it
        raises reach the caller unchanged.
        """

        try:
            full_text = await generate_verdict(self._client, request)
        except Exception as exc:
            logger.exception("Analysis error session=%s mode=%s", request.session_id, request.mode.value)
            observe_analysis(request.mode.value, "failed")
            raise AnalysisFailedError() from exc

        observe_analysis(request.mode.value, "success")
        transcript_logger.info(
            "verdict | session=%s | mode=%s | text=%s",
            request.session_id,
            request.mode.value,
            full_text,
        )
        if on_complete is not None:
            await on_complete(AnalysisResult.now(full_text).model_dump_json())
        return AnalysisOutcome(ai_response=full_text)


__all__ = ["AnalysisService", "CompletionCallback"]
