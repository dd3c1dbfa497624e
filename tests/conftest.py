"""Shared fixtures: fake providers and routers built from them."""

import asyncio

import pytest

from magician.capabilities import Capability
from magician.capabilities.registry import CapabilityRegistry, CapabilitySpec, ProviderConfig
from magician.llm.base import ChatProvider, LLMProvider, LLMResponse, ProviderType
from magician.llm.credentials import CredentialSource
from magician.llm.router import ProviderRouter

IDEAS_JSON = (
    '{"ideas": [{"title": "ASL Coffee Bar", "description": "A signing-first cafe.", '
    '"marketPotential": "High", "difficultyLevel": "Medium", '
    '"startupCosts": "$80,000 - $150,000"}]}'
)

PAYLOADS = {
    Capability.BUSINESS_IDEA_GENERATION: {"interests": ["coffee", "design"]},
    Capability.IDEA_ANALYSIS: {
        "ideaTitle": "ASL Coffee Bar",
        "ideaDescription": "A signing-first cafe",
        "targetMarket": "Rochester, NY",
    },
    Capability.BUSINESS_PLAN_OUTLINE: {
        "businessName": "Visual Brew",
        "businessDescription": "Coffee shop run by deaf baristas",
        "targetMarket": "college towns",
    },
    Capability.BUSINESS_ASSISTANCE: {"query": "How do I fund my startup?"},
}


class FakeProvider(LLMProvider):
    """Provider returning a canned result or raising."""

    def __init__(
        self,
        provider_type: ProviderType,
        result: dict | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ):
        self.provider_type = provider_type
        self.result = result if result is not None else {"response": "ok"}
        self.error = error
        self.delay = delay
        self.calls = 0
        self.closed = False

    async def generate(self, request, spec) -> dict:
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return dict(self.result)

    async def health_check(self) -> bool:
        return self.error is None

    async def close(self) -> None:
        self.closed = True


class FakeChatProvider(ChatProvider):
    """Chat provider answering every prompt with fixed text."""

    def __init__(self, provider_type: ProviderType, content: str):
        self.provider_type = provider_type
        self.content = content
        self.seen: list[tuple[list[dict], object]] = []

    async def complete(self, messages, config) -> LLMResponse:
        self.seen.append((messages, config))
        return LLMResponse(content=self.content, model="fake", provider=self.provider_type)

    async def health_check(self) -> bool:
        return True


def make_registry(
    preferred: ProviderType = ProviderType.ANTHROPIC,
    fallback: ProviderType = ProviderType.OPENAI,
    allow_fallback: bool = True,
    timeout: float | None = None,
) -> CapabilityRegistry:
    return CapabilityRegistry(
        {
            c: CapabilitySpec(
                capability=c,
                providers=ProviderConfig(preferred, fallback, allow_fallback),
                timeout=timeout,
                json_output=c is not Capability.BUSINESS_ASSISTANCE,
            )
            for c in Capability
        }
    )


def make_router(
    providers: dict[ProviderType, LLMProvider],
    keys: dict[str, str] | None = None,
    registry: CapabilityRegistry | None = None,
    default_timeout: float = 5.0,
) -> ProviderRouter:
    """Router whose vendor credentials come from ``keys`` only."""
    environ = dict(keys or {})
    credentials = {
        ProviderType.ANTHROPIC: CredentialSource(["ANTHROPIC_API_KEY"], environ=environ),
        ProviderType.OPENAI: CredentialSource(["OPENAI_API_KEY"], environ=environ),
    }
    factories = {ptype: (lambda _key, p=provider: p) for ptype, provider in providers.items()}
    return ProviderRouter(
        registry or make_registry(),
        credentials=credentials,
        factories=factories,
        default_timeout=default_timeout,
    )


BOTH_KEYS = {"ANTHROPIC_API_KEY": "sk-ant-test", "OPENAI_API_KEY": "sk-test"}


@pytest.fixture
def anthropic_fake() -> FakeProvider:
    return FakeProvider(ProviderType.ANTHROPIC, result={"response": "from anthropic"})


@pytest.fixture
def openai_fake() -> FakeProvider:
    return FakeProvider(ProviderType.OPENAI, result={"response": "from openai"})
