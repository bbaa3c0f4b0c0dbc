# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Natural-language → CSS selector inference over an OpenAI-compatible API.

The resolver only depends on the LocatorInference protocol: any object with
an async ``infer(markup, description)`` returning a selector string works.
``ChatCompletionsInference`` is the production implementation; it makes a
single ``/chat/completions`` call per request (no retries).
"""

from __future__ import annotations

import logging
import re
from typing import Protocol

import httpx
from pydantic import BaseModel, Field, ValidationError

from .config import InferenceSettings
from .errors import ConfigurationError, InferenceError

logger = logging.getLogger(__name__)

_PROMPT_TEMPLATE = """\
You are a QA automation expert. I will provide you with a simplified HTML snippet of a webpage.

Your task is to find the CSS Selector for the element described as: "{description}".

Rules:
1. Return ONLY the CSS selector string. No markdown, no explanations.
2. Prefer 'id' if available, otherwise use a unique combination of classes or attributes.
3. Make the selector robust.

HTML Snippet:
{markup}
"""

# ```css\n#kw\n``` or `#kw`
_FENCE_RE = re.compile(r"^```[\w-]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)
_BACKTICK_RE = re.compile(r"^`([^`]*)`$")


# ---------------------------------------------------------------------------
# Response schema (only the fields we read; extra fields are ignored)
# ---------------------------------------------------------------------------


class ChatMessage(BaseModel):
    role: str | None = None
    content: str | None = Field(description="Assistant answer; null when the model returned no text")


class ChatChoice(BaseModel):
    message: ChatMessage


class ChatCompletion(BaseModel):
    """Body of a ``/chat/completions`` response."""

    choices: list[ChatChoice] = Field(min_length=1)


class LocatorInference(Protocol):
    async def infer(self, markup: str, description: str) -> str: ...


def build_prompt(markup: str, description: str) -> str:
    """Render the single user message sent to the model."""
    return _PROMPT_TEMPLATE.format(description=description, markup=markup)


def clean_locator(content: str) -> str:
    """Trim the model answer and unwrap a markdown code fence or backticks."""
    text = content.strip()
    m = _FENCE_RE.match(text)
    if m:
        text = m.group(1).strip()
    m = _BACKTICK_RE.match(text)
    if m:
        text = m.group(1).strip()
    return text


class ChatCompletionsInference:
    """Async client for an OpenAI-compatible chat-completions endpoint.

    Created once per process from InferenceSettings and reused for every
    request. Pass *client* to inject a preconfigured ``httpx.AsyncClient``
    (e.g. with a mock transport); an injected client is not closed by
    ``aclose()``.
    """

    def __init__(self, settings: InferenceSettings, *, client: httpx.AsyncClient | None = None) -> None:
        if not settings.api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set; the inference service needs an API key.")
        self.settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.timeout_s)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> ChatCompletionsInference:
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def infer(self, markup: str, description: str) -> str:
        """Ask the model for a CSS selector matching *description* in *markup*.

        Raises:
            InferenceError: transport failure, non-2xx status, malformed
                response body, or an empty answer.
        """
        payload = {
            "model": self.settings.model,
            "temperature": self.settings.temperature,
            "messages": [{"role": "user", "content": build_prompt(markup, description)}],
        }
        url = f"{self.settings.base_url.rstrip('/')}/chat/completions"
        headers = {"Authorization": f"Bearer {self.settings.api_key}"}

        logger.info("Requesting selector from %s (model=%s)", self.settings.base_url, self.settings.model)
        try:
            response = await self._client.post(url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise InferenceError(
                f"Inference service returned HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise InferenceError(f"Inference request failed: {exc}") from exc

        try:
            completion = ChatCompletion.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise InferenceError("Inference service returned an unexpected response body") from exc

        locator = clean_locator(completion.choices[0].message.content or "")
        if not locator:
            raise InferenceError("Inference service returned an empty selector")
        logger.info('Inference returned selector "%s"', locator)
        return locator
