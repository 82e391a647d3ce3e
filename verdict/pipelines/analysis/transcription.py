"""Transcription stage: turn the submitted recordings into transcripts."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from .types import TranscriptionResult

logger = logging.getLogger("verdict.pipeline")
transcript_logger = logging.getLogger("verdict.logs.transcript")


class Transcriber(Protocol):
    async def transcribe(self, audio_base64: str) -> TranscriptionResult:
        ...


@dataclass(frozen=True)
class PartnerTranscripts:
    partner1: TranscriptionResult
    partner2: TranscriptionResult | None = None

    def as_data(self) -> dict[str, Any]:
        """Shape stored in the session's ``transcription_data`` column."""

        return {
            "partner1": self.partner1.model_dump(mode="json"),
            "partner2": self.partner2.model_dump(mode="json") if self.partner2 else None,
        }


async def transcribe_partners(
    transcriber: Transcriber,
    *,
    partner1_audio: str,
    partner2_audio: str | None,
    is_live_argument: bool,
) -> PartnerTranscripts:
    """Transcribe one shared recording (live) or both statements concurrently."""

    if is_live_argument or not partner2_audio:
        logger.info("Starting transcription for partner1 (live=%s)", is_live_argument)
        partner1 = await transcriber.transcribe(partner1_audio)
        partner2 = None
    else:
        logger.info("Starting transcription for both partners")
        partner1, partner2 = await asyncio.gather(
            transcriber.transcribe(partner1_audio),
            transcriber.transcribe(partner2_audio),
        )

    transcript_logger.info("partner1 | text=%s", partner1.text)
    if partner2 is not None:
        transcript_logger.info("partner2 | text=%s", partner2.text)
    return PartnerTranscripts(partner1=partner1, partner2=partner2)


__all__ = ["PartnerTranscripts", "Transcriber", "transcribe_partners"]
