"""
LLM provider interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from magician.core.errors import InvalidPayload, ProviderInvocationFailed
from magician.core.typing import JSONDict, MessageDict

if TYPE_CHECKING:
    from magician.capabilities import CapabilityRequest
    from magician.capabilities.registry import CapabilitySpec


class ProviderType(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    FALLBACK = "fallback"


# Role names accepted in addition to vendor names
PROVIDER_ALIASES: dict[str, ProviderType] = {
    "primary": ProviderType.ANTHROPIC,
    "secondary": ProviderType.OPENAI,
    "local": ProviderType.FALLBACK,
    "internal": ProviderType.FALLBACK,
}

AUTO = "auto"


def parse_preference(value: "str | ProviderType | None") -> ProviderType | None:
    """Normalize a provider preference. None means auto."""
    if value is None or isinstance(value, ProviderType):
        return value
    key = value.strip().lower()
    if key in ("", AUTO):
        return None
    if key in PROVIDER_ALIASES:
        return PROVIDER_ALIASES[key]
    try:
        return ProviderType(key)
    except ValueError:
        raise InvalidPayload(
            f"Unknown provider preference: {value}",
            context={"accepted": [p.value for p in ProviderType] + [AUTO]},
        ) from None


@dataclass
class LLMResponse:
    """Response from LLM provider."""

    content: str
    model: str
    provider: ProviderType
    input_tokens: int = 0
    output_tokens: int = 0
    metadata: dict | None = None


@dataclass
class LLMConfig:
    """Configuration for LLM call."""

    model: str
    max_tokens: int = 1024
    temperature: float = 0.7
    system_prompt: str | None = None
    json_output: bool = False


class LLMProvider(ABC):
    """Abstract provider answering capability requests."""

    provider_type: ProviderType

    @abstractmethod
    async def generate(
        self, request: "CapabilityRequest", spec: "CapabilitySpec"
    ) -> JSONDict:
        """Produce a result dict for the request.

        The returned dict carries a ``provider`` field naming who answered.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if provider is reachable."""
        ...

    async def close(self) -> None:
        """Release network resources, if any."""
        return None


class ChatProvider(LLMProvider):
    """Provider backed by a chat completion API."""

    @abstractmethod
    async def complete(self, messages: list[MessageDict], config: LLMConfig) -> LLMResponse:
        """Generate completion from messages."""
        ...

    async def generate(
        self, request: "CapabilityRequest", spec: "CapabilitySpec"
    ) -> JSONDict:
        from magician.capabilities.prompts import build_messages, wants_json
        from magician.llm.parsing import parse_structured

        json_output = wants_json(request, spec)
        config = spec.llm_config(self.provider_type, json_output=json_output)
        response = await self.complete(build_messages(request), config)

        if not response.content or not response.content.strip():
            raise ProviderInvocationFailed(
                f"No content returned from {self.provider_type.value}",
                context={"model": response.model},
            )

        if json_output:
            result = parse_structured(response.content)
        else:
            result = {"response": response.content}
        result["provider"] = self.provider_type.value
        return result
