"""
Claude API provider implementation.

Primary provider using Anthropic's Claude API.
"""

import anthropic
from anthropic import APIConnectionError, APIError, RateLimitError

from magician.core.errors import ProviderInvocationFailed
from magician.core.logging import get_logger
from magician.core.typing import MessageDict
from magician.llm.base import ChatProvider, LLMConfig, LLMResponse, ProviderType

logger = get_logger("llm.claude")

DEFAULT_MODEL = "claude-3-7-sonnet-20250219"


class ClaudeProvider(ChatProvider):
    """Anthropic Claude API provider."""

    provider_type = ProviderType.ANTHROPIC

    def __init__(self, api_key: str, default_model: str = DEFAULT_MODEL):
        self.api_key = api_key
        self.default_model = default_model
        self._client: anthropic.AsyncAnthropic | None = None

    @property
    def client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
            logger.info("Anthropic client initialized on demand")
        return self._client

    async def complete(self, messages: list[MessageDict], config: LLMConfig) -> LLMResponse:
        """Generate completion using Claude API."""
        model = config.model or self.default_model

        # Claude takes the system prompt out of band
        system_prompt = config.system_prompt
        api_messages = []
        for msg in messages:
            if msg["role"] == "system":
                system_prompt = msg["content"]
            else:
                api_messages.append(msg)

        logger.debug(f"Claude request: model={model}, max_tokens={config.max_tokens}")
        for msg in api_messages:
            preview = msg["content"][:100] + "..." if len(msg["content"]) > 100 else msg["content"]
            logger.debug(f"Claude [{msg['role']}]: {preview}")

        try:
            response = await self.client.messages.create(
                model=model,
                max_tokens=config.max_tokens,
                temperature=config.temperature,
                system=system_prompt or "",
                messages=api_messages,
            )
        except RateLimitError as e:
            logger.warning(f"Rate limited: {e}")
            raise
        except APIConnectionError as e:
            logger.error(f"Connection error: {e}")
            raise
        except APIError as e:
            logger.error(f"API error: {e}")
            raise

        block = response.content[0] if response.content else None
        text = getattr(block, "text", None)
        if text is None:
            raise ProviderInvocationFailed(
                "Unexpected response format from Claude", context={"model": model}
            )

        input_tokens = response.usage.input_tokens
        output_tokens = response.usage.output_tokens
        logger.debug(f"Claude response ({output_tokens} tokens): {text[:200]}...")

        return LLMResponse(
            content=text,
            model=model,
            provider=self.provider_type,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            metadata={"stop_reason": response.stop_reason},
        )

    async def health_check(self) -> bool:
        """Check if Claude API is accessible."""
        try:
            response = await self.client.messages.create(
                model=self.default_model,
                max_tokens=10,
                messages=[{"role": "user", "content": "hi"}],
            )
            return bool(response.content)
        except Exception as e:
            logger.warning(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close API client."""
        if self._client:
            await self._client.close()
            self._client = None
