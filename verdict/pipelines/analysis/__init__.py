"""Session analysis pipeline package.

Modules are organised by the order in which `POST /api/sessions` executes:

1. `transcription` – transcribe the partners' recordings.
2. `prompts` – assemble the system/user prompts for the chosen mode.
3. `llm` – stream the model output into a single verdict.
4. `flow` – human-readable description of the end-to-end stages.

`types` holds the containers every stage shares.
"""

from .flow import PipelineStage, SessionAnalysisPipeline
from .llm import collect_stream, generate_verdict
from .prompts import build_prompt, temperature_for
from .transcription import PartnerTranscripts, transcribe_partners
from .types import (
    AnalysisOutcome,
    AnalysisRequest,
    AnalysisResult,
    ApiStatus,
    CounselingMode,
    PromptBundle,
    TranscriptionResult,
)

__all__ = [
    "SessionAnalysisPipeline",
    "PipelineStage",
    "AnalysisOutcome",
    "AnalysisRequest",
    "AnalysisResult",
    "ApiStatus",
    "CounselingMode",
    "PromptBundle",
    "TranscriptionResult",
    "PartnerTranscripts",
    "build_prompt",
    "collect_stream",
    "generate_verdict",
    "temperature_for",
    "transcribe_partners",
]
