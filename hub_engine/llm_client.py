"""OpenRouter generation provider built on the OpenAI-compatible SDK."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, AsyncIterator

from hub_engine.config import Settings, settings
from hub_engine.services import logger as log_service


@dataclass
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0


class OpenRouterStream:
    """Async iterator over text deltas of one streamed chat completion."""

    def __init__(self, stream_coro: Any):
        self._stream_coro = stream_coro
        self._stream: Any | None = None
        self.usage = Usage()

    async def __aenter__(self) -> "OpenRouterStream":
        self._stream = await self._stream_coro
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._stream is not None:
            await self._stream.close()

    async def iter_text(self) -> AsyncIterator[str]:
        if self._stream is None:
            return
        async for chunk in self._stream:
            usage = getattr(chunk, "usage", None)
            if usage:
                self.usage = Usage(
                    input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                    output_tokens=getattr(usage, "completion_tokens", 0) or 0,
                )
            choices = getattr(chunk, "choices", None) or []
            if not choices:
                continue
            delta = getattr(choices[0], "delta", None)
            text = getattr(delta, "content", None) if delta else None
            if text:
                yield text


class OpenRouterGeneration:
    """Generation provider: JSON-mode completions and streamed answers."""

    def __init__(self, openai_client: Any, *, default_model: str):
        self._client = openai_client
        self.default_model = default_model

    @staticmethod
    def _temperature_for_model(model: str) -> int:
        # Some OpenAI GPT-5-compatible gateways reject temperature=0.
        if "gpt-5" in (model or "").lower():
            return 1
        return 0

    async def complete(
        self,
        prompt: str,
        *,
        model: str | None = None,
        json_mode: bool = False,
    ) -> str:
        used_model = model or self.default_model
        kwargs: dict[str, Any] = {
            "model": used_model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self._temperature_for_model(used_model),
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        started = time.monotonic()
        try:
            response = await self._client.chat.completions.create(**kwargs)
        except Exception as exc:
            log_service.log_llm_call(
                model=used_model,
                caller="generation.complete",
                duration_ms=int((time.monotonic() - started) * 1000),
                status="error",
                error=str(exc),
            )
            raise

        log_service.log_llm_call(
            model=used_model,
            caller="generation.complete",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        return getattr(choices[0].message, "content", None) or ""

    def open_stream(self, prompt: str, *, model: str | None = None) -> OpenRouterStream:
        used_model = model or self.default_model
        stream = self._client.chat.completions.create(
            model=used_model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self._temperature_for_model(used_model),
            stream=True,
            stream_options={"include_usage": True},
        )
        return OpenRouterStream(stream)

    async def stream(self, prompt: str, *, model: str | None = None) -> AsyncIterator[str]:
        used_model = model or self.default_model
        started = time.monotonic()
        async with self.open_stream(prompt, model=used_model) as s:
            async for text in s.iter_text():
                yield text
        log_service.log_llm_call(
            model=used_model,
            caller="generation.stream",
            input_tokens=s.usage.input_tokens,
            output_tokens=s.usage.output_tokens,
            duration_ms=int((time.monotonic() - started) * 1000),
        )

    async def aclose(self) -> None:
        close = getattr(self._client, "close", None)
        if close is not None:
            await close()


def get_model(config: Settings | None = None) -> str:
    """Get the active answer model id."""
    config = config or settings
    if config.openrouter_model:
        return config.openrouter_model
    return config.default_model


def get_query_model(config: Settings | None = None) -> str:
    config = config or settings
    return config.query_model.strip() or get_model(config)


def build_generation(config: Settings | None = None) -> OpenRouterGeneration:
    """Create an OpenRouter generation provider via the OpenAI-compatible SDK."""
    from openai import AsyncOpenAI

    config = config or settings
    base_url = config.openrouter_base_url.strip() or "https://openrouter.ai/api/v1"
    openai_client = AsyncOpenAI(
        api_key=config.openrouter_api_key,
        base_url=base_url,
        timeout=config.generation_timeout_seconds,
    )
    return OpenRouterGeneration(openai_client, default_model=get_model(config))
