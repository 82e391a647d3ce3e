"""Text-generation stage: stream the model output and join it."""

from __future__ import annotations

import logging
from typing import AsyncIterable, Protocol

from verdict.errors import EmptyResponseError

from .prompts import build_prompt, temperature_for
from .types import AnalysisRequest

logger = logging.getLogger("verdict.pipeline")


class TextStreamer(Protocol):
    def stream_text(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
    ) -> AsyncIterable[str]:
        ...


async def collect_stream(chunks: AsyncIterable[str]) -> str:
    """Concatenate streamed deltas; an empty result counts as a failure."""

    parts: list[str] = []
    async for delta in chunks:
        parts.append(delta)
    full_text = "".join(parts)
    if not full_text:
        raise EmptyResponseError()
    return full_text


async def generate_verdict(client: TextStreamer, request: AnalysisRequest) -> str:
    """Build the prompts for ``request`` and return the model's full answer."""

    prompt = build_prompt(
        mode=request.mode,
        partner1_name=request.partner1_name,
        partner2_name=request.partner2_name,
        partner1_text=request.partner1_text,
        partner2_text=request.partner2_text,
        is_live_argument=request.is_live_argument,
    )
    temperature = temperature_for(request.mode)
    logger.info(
        "Sending analysis request mode=%s live=%s session=%s system_len=%s user_len=%s temperature=%s",
        request.mode.value,
        request.is_live_argument,
        request.session_id,
        len(prompt.system_prompt),
        len(prompt.user_prompt),
        temperature,
    )
    logger.debug("Analysis prompt: %s", prompt.user_prompt)

    full_text = await collect_stream(
        client.stream_text(
            system_prompt=prompt.system_prompt,
            user_prompt=prompt.user_prompt,
            temperature=temperature,
        )
    )
    logger.info("Stream complete, response length=%s", len(full_text))
    return full_text


__all__ = ["collect_stream", "generate_verdict", "TextStreamer"]
