"""OpenAI chat completions provider over plain HTTP."""

import httpx

from magician.core.logging import get_logger
from magician.core.typing import MessageDict
from magician.llm.base import ChatProvider, LLMConfig, LLMResponse, ProviderType

logger = get_logger("llm.openai")

OPENAI_BASE = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o"


class OpenAIProvider(ChatProvider):
    """OpenAI (or compatible) chat completions provider."""

    provider_type = ProviderType.OPENAI

    def __init__(
        self,
        api_key: str,
        base_url: str = OPENAI_BASE,
        default_model: str = DEFAULT_MODEL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.default_model = default_model
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=120.0,
                transport=self._transport,
            )
            logger.info("OpenAI client initialized on demand")
        return self._client

    async def complete(self, messages: list[MessageDict], config: LLMConfig) -> LLMResponse:
        """Generate completion via chat completions endpoint."""
        model = config.model or self.default_model

        api_messages = list(messages)
        if config.system_prompt and not any(m["role"] == "system" for m in api_messages):
            api_messages.insert(0, {"role": "system", "content": config.system_prompt})

        payload = {
            "model": model,
            "messages": api_messages,
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
        }
        if config.json_output:
            payload["response_format"] = {"type": "json_object"}

        logger.debug(f"OpenAI request: model={model}, max_tokens={config.max_tokens}")
        for msg in api_messages:
            preview = msg["content"][:100] + "..." if len(msg["content"]) > 100 else msg["content"]
            logger.debug(f"OpenAI [{msg['role']}]: {preview}")

        try:
            response = await self.client.post("/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"OpenAI HTTP error: {e.response.status_code} - {e.response.text}")
            raise
        except Exception as e:
            logger.error(f"OpenAI error: {e}")
            raise

        message = data["choices"][0]["message"]
        content = message.get("content") or ""
        usage = data.get("usage", {})
        input_tokens = usage.get("prompt_tokens", 0)
        output_tokens = usage.get("completion_tokens", 0)

        logger.debug(f"OpenAI response ({output_tokens} tokens): {content[:200]}...")

        return LLMResponse(
            content=content,
            model=data.get("model", model),
            provider=self.provider_type,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            metadata={"openai_id": data.get("id")},
        )

    async def health_check(self) -> bool:
        """Check if the endpoint is accessible."""
        try:
            response = await self.client.get("/models")
            return response.status_code == 200
        except Exception as e:
            logger.warning(f"OpenAI health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
