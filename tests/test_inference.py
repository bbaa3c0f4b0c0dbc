# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for inference.py: prompt, answer cleanup, chat-completions client."""

from __future__ import annotations

import json

import httpx
import pytest

from domlocator.config import InferenceSettings
from domlocator.errors import ConfigurationError, InferenceError
from domlocator.inference import ChatCompletionsInference, build_prompt, clean_locator

_SETTINGS = InferenceSettings(api_key="sk-test", base_url="https://llm.example.com/v1", model="gpt-4o")


def _completion(content) -> dict:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestBuildPrompt:
    def test_contains_description_and_markup(self):
        prompt = build_prompt('<input id="kw">', "the search input box")
        assert '"the search input box"' in prompt
        assert prompt.rstrip().endswith('<input id="kw">')
        assert "Return ONLY the CSS selector" in prompt

    def test_prefers_id(self):
        assert "Prefer 'id'" in build_prompt("", "x")


class TestCleanLocator:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("#kw", "#kw"),
            ("  #kw\n", "#kw"),
            ("`#kw`", "#kw"),
            ("```css\n#kw\n```", "#kw"),
            ("```\ninput[name='wd']\n```", "input[name='wd']"),
            ("", ""),
        ],
    )
    def test_clean(self, raw, expected):
        assert clean_locator(raw) == expected

    def test_inner_backticks_untouched(self):
        assert clean_locator("a`b") == "a`b"


class TestChatCompletionsInference:
    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            ChatCompletionsInference(InferenceSettings())

    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion("#kw"))

        async with ChatCompletionsInference(_SETTINGS, client=_client(handler)) as inference:
            locator = await inference.infer('<input id="kw">', "search box")

        assert locator == "#kw"
        assert seen["url"] == "https://llm.example.com/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-test"
        body = seen["body"]
        assert body["model"] == "gpt-4o"
        assert body["temperature"] == 0.0
        assert len(body["messages"]) == 1
        assert body["messages"][0]["role"] == "user"
        assert '<input id="kw">' in body["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_fenced_answer_cleaned(self):
        def handler(request):
            return httpx.Response(200, json=_completion("```css\n#su\n```"))

        inference = ChatCompletionsInference(_SETTINGS, client=_client(handler))
        assert await inference.infer("<p>x</p>", "submit") == "#su"

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        def handler(request):
            return httpx.Response(500, json={"error": {"message": "boom"}})

        inference = ChatCompletionsInference(_SETTINGS, client=_client(handler))
        with pytest.raises(InferenceError) as exc_info:
            await inference.infer("<p>x</p>", "x")
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        inference = ChatCompletionsInference(_SETTINGS, client=_client(handler))
        with pytest.raises(InferenceError, match="request failed"):
            await inference.infer("<p>x</p>", "x")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"choices": []},
            {"choices": [{"message": {}}]},
            {"choices": "nope"},
        ],
    )
    async def test_malformed_body(self, payload):
        def handler(request):
            return httpx.Response(200, json=payload)

        inference = ChatCompletionsInference(_SETTINGS, client=_client(handler))
        with pytest.raises(InferenceError, match="unexpected response"):
            await inference.infer("<p>x</p>", "x")

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        inference = ChatCompletionsInference(_SETTINGS, client=_client(handler))
        with pytest.raises(InferenceError):
            await inference.infer("<p>x</p>", "x")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   ", "``````"])
    async def test_empty_answer(self, content):
        def handler(request):
            return httpx.Response(200, json=_completion(content))

        inference = ChatCompletionsInference(_SETTINGS, client=_client(handler))
        with pytest.raises(InferenceError, match="empty selector"):
            await inference.infer("<p>x</p>", "x")

    @pytest.mark.asyncio
    async def test_non_text_content(self):
        def handler(request):
            return httpx.Response(200, json=_completion([{"type": "text", "text": "#kw"}]))

        inference = ChatCompletionsInference(_SETTINGS, client=_client(handler))
        with pytest.raises(InferenceError, match="unexpected response"):
            await inference.infer("<p>x</p>", "x")

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self):
        client = _client(lambda request: httpx.Response(200, json=_completion("#a")))
        async with ChatCompletionsInference(_SETTINGS, client=client):
            pass
        assert not client.is_closed
        await client.aclose()
