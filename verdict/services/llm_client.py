"""Thin OpenAI client wrapper for streamed chat completions."""

from __future__ import annotations

import logging
from typing import AsyncIterator

import openai
from openai import AsyncOpenAI

from verdict.config.settings import Settings
from verdict.errors import ConfigurationError
from verdict.pipelines.analysis.types import ApiStatus

logger = logging.getLogger(__name__)

_QUOTA_MARKER = "insufficient_quota"
QUOTA_STATUS_MESSAGE = (
    "API quota exceeded. Please check your billing status. "
    "Note: New credits may take a few minutes to be recognized."
)


def is_quota_error(exc: BaseException) -> bool:
    """True when the provider reported exhausted credits rather than a transient fault."""

    code = getattr(exc, "code", None)
    return code == _QUOTA_MARKER or _QUOTA_MARKER in str(exc)


class OpenAIChatClient:
    """Stream chat completions with the configured model."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str = "gpt-4",
        max_tokens: int = 300,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        if not api_key and client is None:
            raise ConfigurationError("OPENAI_API_KEY is required")
        self._model = model
        self._max_tokens = max_tokens
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
        )

    @property
    def model(self) -> str:
        return self._model

    async def stream_text(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Yield text deltas as the model produces them."""

        stream = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
            max_tokens=max_tokens or self._max_tokens,
            stream=True,
        )
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta

    async def check_status(self) -> ApiStatus:
        """Issue a one-token completion to confirm the key and quota are usable."""

        try:
            await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": "test"}],
                max_tokens=1,
            )
        except openai.OpenAIError as exc:
            logger.error("API status check error: %s", exc)
            if is_quota_error(exc):
                return ApiStatus(has_access=False, message=QUOTA_STATUS_MESSAGE)
            return ApiStatus(has_access=False, message=f"API error: {exc}")

        return ApiStatus(has_access=True, message="API access confirmed")


def build_llm_client(settings: Settings) -> OpenAIChatClient:
    """Instantiate the chat client, failing fast when no API key is configured."""

    api_key = settings.openai.api_key.get_secret_value() if settings.openai.api_key else ""
    if not api_key:
        raise ConfigurationError("OPENAI_API_KEY is required")

    return OpenAIChatClient(
        api_key=api_key,
        model=settings.openai.chat_model,
        max_tokens=settings.openai.max_tokens,
        base_url=settings.openai.base_url,
        timeout=settings.openai.request_timeout,
    )


__all__ = ["OpenAIChatClient", "build_llm_client", "is_quota_error", "QUOTA_STATUS_MESSAGE"]
