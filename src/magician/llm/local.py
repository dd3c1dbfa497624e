"""Local fallback provider - rule-based answers with no external dependency."""

import random

from magician.capabilities import CapabilityRequest
from magician.capabilities.fallback import generate
from magician.capabilities.registry import CapabilitySpec
from magician.core.logging import get_logger
from magician.core.typing import JSONDict
from magician.llm.base import LLMProvider, ProviderType

logger = get_logger("llm.local")


class LocalFallbackProvider(LLMProvider):
    """Always-available provider backed by rule-based templates."""

    provider_type = ProviderType.FALLBACK

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    async def generate(self, request: CapabilityRequest, spec: CapabilitySpec) -> JSONDict:
        logger.info(f"Using rule-based fallback for {request.capability.value}")
        return generate(request.capability, request.payload, self.rng)

    async def health_check(self) -> bool:
        return True
