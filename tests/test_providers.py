"""Tests for vendor and local providers with mocked transports."""

import json
import random
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from magician.capabilities import Capability, CapabilityRequest
from magician.capabilities.registry import load_registry
from magician.core.errors import ProviderInvocationFailed
from magician.llm.base import LLMConfig, ProviderType, parse_preference
from magician.llm.claude import ClaudeProvider
from magician.llm.local import LocalFallbackProvider
from magician.llm.openai import OpenAIProvider
from magician.llm.parsing import FORMAT_WARNING


def _claude_with_reply(*blocks) -> ClaudeProvider:
    provider = ClaudeProvider(api_key="sk-ant-test")
    response = SimpleNamespace(
        content=list(blocks),
        usage=SimpleNamespace(input_tokens=12, output_tokens=34),
        stop_reason="end_turn",
    )
    provider._client = Mock()
    provider._client.messages.create = AsyncMock(return_value=response)
    return provider


def _request(capability: Capability, payload: dict) -> tuple[CapabilityRequest, object]:
    spec = load_registry().get(capability)
    return CapabilityRequest(capability, spec.validate_payload(payload)), spec


# --- preference parsing ---


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, None),
        ("auto", None),
        ("AUTO", None),
        ("anthropic", ProviderType.ANTHROPIC),
        ("primary", ProviderType.ANTHROPIC),
        ("secondary", ProviderType.OPENAI),
        ("local", ProviderType.FALLBACK),
        (ProviderType.OPENAI, ProviderType.OPENAI),
    ],
)
def test_parse_preference(value, expected):
    assert parse_preference(value) is expected


# --- Claude ---


@pytest.mark.asyncio
async def test_claude_complete_moves_system_prompt():
    provider = _claude_with_reply(SimpleNamespace(text="hello"))
    config = LLMConfig(model="claude-test", max_tokens=50, system_prompt="be brief")

    response = await provider.complete(
        [{"role": "system", "content": "override"}, {"role": "user", "content": "hi"}], config
    )

    kwargs = provider._client.messages.create.call_args.kwargs
    assert kwargs["system"] == "override"
    assert kwargs["messages"] == [{"role": "user", "content": "hi"}]
    assert kwargs["model"] == "claude-test"
    assert response.content == "hello"
    assert response.input_tokens == 12
    assert response.provider is ProviderType.ANTHROPIC


@pytest.mark.asyncio
async def test_claude_non_text_block_is_failure():
    provider = _claude_with_reply(SimpleNamespace(type="tool_use"))
    with pytest.raises(ProviderInvocationFailed):
        await provider.complete([{"role": "user", "content": "hi"}], LLMConfig(model=""))


@pytest.mark.asyncio
async def test_claude_generate_parses_json():
    payload = {"valid": True, "viabilityScore": 9}
    provider = _claude_with_reply(SimpleNamespace(text=json.dumps(payload)))
    request, spec = _request(
        Capability.IDEA_ANALYSIS,
        {"ideaTitle": "T", "ideaDescription": "D", "targetMarket": "M"},
    )

    result = await provider.generate(request, spec)

    assert result == {**payload, "provider": "anthropic"}
    kwargs = provider._client.messages.create.call_args.kwargs
    assert "Business Idea: T" in kwargs["messages"][0]["content"]
    assert kwargs["system"] == spec.system_prompt


@pytest.mark.asyncio
async def test_claude_generate_text_assistance_skips_parsing():
    provider = _claude_with_reply(SimpleNamespace(text="Try an SBA loan."))
    request, spec = _request(Capability.BUSINESS_ASSISTANCE, {"query": "How to fund?"})

    result = await provider.generate(request, spec)

    assert result == {"response": "Try an SBA loan.", "provider": "anthropic"}


@pytest.mark.asyncio
async def test_claude_generate_json_assistance_with_prose_warns():
    provider = _claude_with_reply(SimpleNamespace(text="Try an SBA loan."))
    request, spec = _request(
        Capability.BUSINESS_ASSISTANCE, {"query": "How to fund?", "format": "json"}
    )

    result = await provider.generate(request, spec)

    assert result["warning"] == FORMAT_WARNING
    assert result["response"] == "Try an SBA loan."


def test_claude_client_created_lazily():
    provider = ClaudeProvider(api_key="sk-ant-test")
    assert provider._client is None
    client = provider.client
    assert provider.client is client


# --- OpenAI ---


def _openai_with(handler) -> OpenAIProvider:
    return OpenAIProvider(
        api_key="sk-test",
        base_url="https://api.example.test/v1",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_openai_requests_json_mode():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(
            200,
            json={
                "id": "chatcmpl-1",
                "model": "gpt-4o",
                "choices": [{"message": {"role": "assistant", "content": '{"ideas": []}'}}],
                "usage": {"prompt_tokens": 5, "completion_tokens": 7},
            },
        )

    provider = _openai_with(handler)
    config = LLMConfig(model="gpt-4o", system_prompt="sys", json_output=True)
    response = await provider.complete([{"role": "user", "content": "ideas"}], config)
    await provider.close()

    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["response_format"] == {"type": "json_object"}
    assert seen["body"]["messages"][0] == {"role": "system", "content": "sys"}
    assert response.content == '{"ideas": []}'
    assert response.output_tokens == 7
    assert response.metadata == {"openai_id": "chatcmpl-1"}


@pytest.mark.asyncio
async def test_openai_http_error_raises():
    provider = _openai_with(lambda request: httpx.Response(429, text="slow down"))
    with pytest.raises(httpx.HTTPStatusError):
        await provider.complete([{"role": "user", "content": "hi"}], LLMConfig(model=""))
    await provider.close()


@pytest.mark.asyncio
async def test_openai_health_check():
    provider = _openai_with(lambda request: httpx.Response(200, json={"data": []}))
    assert await provider.health_check()
    await provider.close()


# --- Local ---


@pytest.mark.asyncio
async def test_local_provider_uses_injected_rng():
    request, spec = _request(Capability.BUSINESS_IDEA_GENERATION, {"interests": ["tea"]})
    a = await LocalFallbackProvider(random.Random(3)).generate(request, spec)
    b = await LocalFallbackProvider(random.Random(3)).generate(request, spec)
    assert a == b
    assert a["provider"] == "fallback"
    assert await LocalFallbackProvider().health_check()
