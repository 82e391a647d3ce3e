"""Error taxonomy shared by the services and the HTTP layer.

Every class carries the HTTP status the API answers with; the exception
handlers registered in ``verdict.main`` turn them into ``{"error": ...}``
bodies. Adapters only raise the specific subclasses they can tell apart;
everything else surfaces as ``AnalysisFailedError`` or a plain 500.
"""

from __future__ import annotations

from fastapi import status


class VerdictError(RuntimeError):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(VerdictError):
    """A required credential or setting is missing at startup."""

    default_message = "Service is not configured"


class InputValidationError(VerdictError):
    """The request is missing a required field or carries unusable input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request data"


class EmptyInputError(InputValidationError):
    default_message = "No audio data provided"


class EmptyAudioError(InputValidationError):
    default_message = "Audio file is empty"


class AudioProcessingError(VerdictError):
    """Local audio preparation (transcoding, probing) failed."""

    default_message = "Failed to process audio recording"


class FormatConversionError(AudioProcessingError):
    default_message = "Failed to convert audio format"


class DurationProbeError(AudioProcessingError):
    default_message = "Failed to verify audio duration"


class TooShortError(AudioProcessingError):
    default_message = "Audio recording is too short. Please record for at least 1-2 seconds."


class UpstreamQuotaError(VerdictError):
    """The upstream provider reported exhausted quota; never retried."""

    default_message = (
        "OpenAI API quota exceeded. Please check your billing status and "
        "ensure you have available credits."
    )


QuotaExceededError = UpstreamQuotaError


class UpstreamTransientError(VerdictError):
    """A retryable upstream failure (HTTP error, network error, bad payload)."""

    default_message = "Upstream service error"


class AnalysisFailedError(VerdictError):
    """Generic failure surfaced by the analysis adapter."""

    default_message = "Analysis failed. Please try again."


class EmptyResponseError(AnalysisFailedError):
    default_message = "Analysis failed - empty response from AI"


class NotFoundError(VerdictError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Session not found"


class SubscriptionRequiredError(VerdictError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_message = "Subscription required"


__all__ = [
    "VerdictError",
    "ConfigurationError",
    "InputValidationError",
    "EmptyInputError",
    "EmptyAudioError",
    "AudioProcessingError",
    "FormatConversionError",
    "DurationProbeError",
    "TooShortError",
    "UpstreamQuotaError",
    "QuotaExceededError",
    "UpstreamTransientError",
    "AnalysisFailedError",
    "EmptyResponseError",
    "NotFoundError",
    "SubscriptionRequiredError",
]
