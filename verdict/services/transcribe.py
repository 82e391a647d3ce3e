"""Speech-to-text integration: base64 audio in, serialized transcript out."""

from __future__ import annotations

import base64
import binascii
import logging
import os
import subprocess
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import httpx
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from verdict.config.settings import Settings
from verdict.errors import (
    ConfigurationError,
    DurationProbeError,
    EmptyAudioError,
    EmptyInputError,
    FormatConversionError,
    InputValidationError,
    TooShortError,
    UpstreamQuotaError,
    UpstreamTransientError,
)
from verdict.pipelines.analysis.types import TranscriptionResult
from verdict.services.retry import RetryPolicy
from verdict.telemetry import observe_transcription_attempt

logger = logging.getLogger("verdict.pipeline")

_QUOTA_ERROR_TYPE = "insufficient_quota"


class TranscribeService:
    """High-level facade: decode, transcode, probe, then upload with retry."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "whisper-1",
        sample_rate_hz: int = 16000,
        min_duration_seconds: float = 0.1,
        ffmpeg_path: str = "ffmpeg",
        ffprobe_path: str = "ffprobe",
        temp_dir: str | None = None,
        timeout: float = 60.0,
        retry_policy: RetryPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is required")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._sample_rate_hz = sample_rate_hz
        self._min_duration_seconds = min_duration_seconds
        self._ffmpeg_path = ffmpeg_path
        self._ffprobe_path = ffprobe_path
        self._temp_dir = temp_dir
        self._timeout = timeout
        self._retry_policy = retry_policy or RetryPolicy()
        self._transport = transport

    async def transcribe_audio(self, audio_base64: str) -> str:
        """Return the transcript of a base64 recording as a JSON string."""

        result = await self.transcribe(audio_base64)
        return result.model_dump_json()

    async def transcribe(self, audio_base64: str) -> TranscriptionResult:
        if not audio_base64:
            raise EmptyInputError()

        logger.info("Starting transcription, base64 length=%s", len(audio_base64))
        audio_bytes = _decode_audio(audio_base64)

        async with self._scratch_files() as (source_path, wav_path):
            await run_in_threadpool(source_path.write_bytes, audio_bytes)
            size = os.path.getsize(source_path)
            logger.debug("Wrote %s bytes to %s", size, source_path)
            if size == 0:
                raise EmptyAudioError()

            await run_in_threadpool(self._convert_to_wav, source_path, wav_path)

            duration = await run_in_threadpool(self._probe_duration, wav_path)
            logger.info("Audio duration: %.3f seconds", duration)
            if duration < self._min_duration_seconds:
                raise TooShortError()

            wav_bytes = await run_in_threadpool(wav_path.read_bytes)
            return await self._retry_policy.run(
                lambda: self._request_transcription(wav_bytes)
            )

    @asynccontextmanager
    async def _scratch_files(self) -> AsyncIterator[tuple[Path, Path]]:
        """Yield a (source, wav) path pair that is removed on every exit path."""

        paths: list[Path] = []
        try:
            for suffix in (".webm", ".wav"):
                fd, name = tempfile.mkstemp(prefix="audio-", suffix=suffix, dir=self._temp_dir)
                os.close(fd)
                paths.append(Path(name))
            yield paths[0], paths[1]
        finally:
            for path in paths:
                try:
                    path.unlink()
                except FileNotFoundError:
                    pass
                except OSError:
                    logger.warning("Could not remove temp file %s", path, exc_info=True)

    def _convert_to_wav(self, source_path: Path, wav_path: Path) -> None:
        """Re-encode to 16-bit mono PCM WAV at the configured sample rate."""

        try:
            subprocess.run(
                [
                    self._ffmpeg_path,
                    "-i", str(source_path),
                    "-acodec", "pcm_s16le",
                    "-ar", str(self._sample_rate_hz),
                    "-ac", "1",
                    "-y", str(wav_path),
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
        except subprocess.CalledProcessError as exc:
            error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
            logger.error("ffmpeg failed. stderr: %s", error_msg)
            raise FormatConversionError(f"Failed to convert audio format: {error_msg}") from exc
        except OSError as exc:
            raise FormatConversionError(f"Failed to convert audio format: {exc}") from exc

    def _probe_duration(self, wav_path: Path) -> float:
        """Return the container duration in seconds reported by ffprobe."""

        try:
            process = subprocess.run(
                [
                    self._ffprobe_path,
                    "-i", str(wav_path),
                    "-show_entries", "format=duration",
                    "-v", "quiet",
                    "-of", "csv=p=0",
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
            return float(process.stdout.decode("utf-8", errors="replace").strip())
        except subprocess.CalledProcessError as exc:
            raise DurationProbeError(f"Failed to verify audio duration: exit {exc.returncode}") from exc
        except (OSError, ValueError) as exc:
            raise DurationProbeError(f"Failed to verify audio duration: {exc}") from exc

    async def _request_transcription(self, wav_bytes: bytes) -> TranscriptionResult:
        """Single multipart upload to the speech-to-text endpoint."""

        logger.info("Sending %s bytes to speech-to-text endpoint", len(wav_bytes))
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    "/audio/transcriptions",
                    headers={"Authorization": f"Bearer {self._api_key}"},
                    data={
                        "model": self._model,
                        "response_format": "verbose_json",
                        "timestamp_granularities[]": ["segment", "word"],
                    },
                    files={"file": ("audio.wav", wav_bytes, "audio/wav")},
                )
        except httpx.RequestError as exc:
            observe_transcription_attempt("network_error")
            raise UpstreamTransientError(f"Unable to reach speech-to-text API: {exc}") from exc

        if response.is_error:
            _raise_for_error_response(response)

        try:
            payload = response.json()
            result = _parse_transcription(payload)
        except (ValueError, ValidationError) as exc:
            observe_transcription_attempt("invalid_payload")
            raise UpstreamTransientError(f"Invalid response from speech-to-text API: {exc}") from exc

        observe_transcription_attempt("success")
        logger.info(
            "Transcription received: text_length=%s segments=%s",
            len(result.text),
            len(result.segments),
        )
        return result


def _decode_audio(audio_base64: str) -> bytes:
    """Decode a base64 payload; data URIs (``data:audio/webm;base64,...``) are accepted."""

    data = audio_base64.strip()
    payload = data.split(",", 1)[1] if data.startswith("data:") and "," in data else data
    try:
        return base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError) as exc:
        raise InputValidationError("Audio must be a valid base64-encoded string") from exc


def _raise_for_error_response(response: httpx.Response) -> None:
    error_text = response.text
    logger.error("Speech-to-text API error response (%s): %s", response.status_code, error_text)

    error: dict[str, Any] = {}
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]

    if _QUOTA_ERROR_TYPE in (error.get("type"), error.get("code")):
        observe_transcription_attempt("quota_exceeded")
        raise UpstreamQuotaError()

    observe_transcription_attempt("http_error")
    message = error.get("message") or f"{response.status_code} {error_text}"
    raise UpstreamTransientError(f"OpenAI API error: {message}")


def _parse_transcription(payload: Any) -> TranscriptionResult:
    if not isinstance(payload, dict) or not payload.get("text"):
        raise ValueError("No transcription received from API")
    return TranscriptionResult.model_validate(
        {
            "text": payload["text"],
            "segments": payload.get("segments") or [],
            "words": payload.get("words"),
        }
    )


def build_transcribe_service(settings: Settings) -> TranscribeService:
    """Instantiate the service from settings, failing fast on a missing key."""

    api_key = settings.openai.api_key.get_secret_value() if settings.openai.api_key else ""
    if not api_key:
        raise ConfigurationError("OPENAI_API_KEY is required")

    config = settings.transcription
    return TranscribeService(
        api_key=api_key,
        base_url=settings.openai.base_url,
        model=settings.openai.transcription_model,
        sample_rate_hz=config.sample_rate_hz,
        min_duration_seconds=config.min_duration_seconds,
        ffmpeg_path=config.ffmpeg_path,
        ffprobe_path=config.ffprobe_path,
        temp_dir=config.temp_dir,
        timeout=settings.openai.request_timeout,
        retry_policy=RetryPolicy(
            max_attempts=config.max_attempts,
            base_delay=config.base_delay_seconds,
        ),
    )


__all__ = ["TranscribeService", "build_transcribe_service"]
