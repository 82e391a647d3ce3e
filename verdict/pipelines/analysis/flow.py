"""High-level orchestration map for the session analysis pipeline.

The HTTP controller in ``verdict/controllers/sessions.py`` contains the
asynchronous choreography that ties everything together; this module
documents the canonical execution order:

1. ``gate`` – subscription check (skipped in development mode).
2. ``validation`` – names, mode, and the audio each mode requires.
3. ``transcription`` – decode, transcode, probe, and upload each recording.
4. ``persistence`` – create the session row with the transcripts attached.
5. ``prompts`` – build the mode-specific system/user prompts.
6. ``llm`` – stream the model output and join it into one verdict.
7. ``completion`` – store the timestamped verdict envelope on the session.

Data only flows forward; no stage reads state produced after it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the pipeline."""

    order: int
    name: str
    module: str
    summary: str


class SessionAnalysisPipeline:
    """Utility wrapper for documenting the `POST /api/sessions` flow."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Subscription Gate",
            "verdict.services.subscription",
            "Reject submissions without an active subscription unless in development mode.",
        ),
        PipelineStage(
            2,
            "Validation",
            "verdict.controllers.sessions",
            "Require names, a known mode, and audio for each partner the mode needs.",
        ),
        PipelineStage(
            3,
            "Transcription",
            "verdict.pipelines.analysis.transcription",
            "Transcribe the shared recording, or both statements concurrently.",
        ),
        PipelineStage(
            4,
            "Session Persistence",
            "verdict.services.session_store",
            "Create the session record with transcripts attached.",
        ),
        PipelineStage(
            5,
            "Prompt Assembly",
            "verdict.pipelines.analysis.prompts",
            "Render the persona system prompt and the FORMAT-bearing user prompt.",
        ),
        PipelineStage(
            6,
            "LLM Streaming",
            "verdict.pipelines.analysis.llm",
            "Stream deltas from the chat model and reject an empty answer.",
        ),
        PipelineStage(
            7,
            "Completion",
            "verdict.services.analysis",
            "Wrap the verdict with a timestamp and store it on the session.",
        ),
    ]

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)


__all__ = ["SessionAnalysisPipeline", "PipelineStage"]
