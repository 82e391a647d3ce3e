"""Telemetry helpers and metrics."""

from .metrics import (
    ANALYSIS_COUNTER,
    ERROR_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    TRANSCRIPTION_ATTEMPTS,
    observe_analysis,
    observe_request,
    observe_transcription_attempt,
)

__all__ = [
    "ANALYSIS_COUNTER",
    "ERROR_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "TRANSCRIPTION_ATTEMPTS",
    "observe_analysis",
    "observe_request",
    "observe_transcription_attempt",
]
