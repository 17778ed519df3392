"""Model invocation boundary shared by path generation and the assistant."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from google import genai
from google.genai import types
from openai import AsyncOpenAI

from core.config import Settings

logger = logging.getLogger(__name__)

RESPONSE_FORMAT_JSON = "json"


@dataclass(frozen=True)
class GenerationConfig:
    temperature: float
    top_p: float
    top_k: int
    response_format: Optional[str] = None


@dataclass
class ModelReply:
    text: str


class ModelClient(Protocol):
    async def generate_content(self, model: str, contents: str, config: GenerationConfig) -> ModelReply:
        ...


class OpenAIModelClient:
    """Chat-completions client. top_k has no OpenAI counterpart and is not sent."""

    def __init__(self, api_key: str):
        self._client = AsyncOpenAI(api_key=api_key)

    async def generate_content(self, model: str, contents: str, config: GenerationConfig) -> ModelReply:
        kwargs = {}
        if config.response_format == RESPONSE_FORMAT_JSON:
            kwargs["response_format"] = {"type": "json_object"}

        resp = await self._client.chat.completions.create(
            model=model,
            temperature=config.temperature,
            top_p=config.top_p,
            messages=[{"role": "user", "content": contents}],
            **kwargs,
        )
        return ModelReply(text=resp.choices[0].message.content or "")


class GeminiModelClient:
    def __init__(self, api_key: str):
        self._client = genai.Client(api_key=api_key)

    async def generate_content(self, model: str, contents: str, config: GenerationConfig) -> ModelReply:
        gen_config = types.GenerateContentConfig(
            temperature=config.temperature,
            top_p=config.top_p,
            top_k=config.top_k,
            response_mime_type="application/json" if config.response_format == RESPONSE_FORMAT_JSON else None,
        )
        response = await self._client.aio.models.generate_content(
            model=model,
            contents=contents,
            config=gen_config,
        )
        return ModelReply(text=response.text or "")


def build_model_client(settings: Settings) -> Optional[ModelClient]:
    """Construct the provider client once at startup; None when no credential is configured."""
    api_key = settings.api_key
    if api_key is None:
        logger.warning("No API key configured for provider '%s'; model calls are disabled.",
                       settings.llm_provider)
        return None
    if settings.llm_provider == "gemini":
        return GeminiModelClient(api_key)
    return OpenAIModelClient(api_key)
