"""
Capability registry.

Loads per-capability provider config and invocation settings from YAML.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from magician.capabilities import Capability
from magician.capabilities.schemas import (
    AssistancePayload,
    AssistanceResult,
    IdeaAnalysisPayload,
    IdeaAnalysisResult,
    IdeaGenerationPayload,
    IdeasResult,
    PlanOutlinePayload,
    PlanOutlineResult,
)
from magician.configs import CAPABILITIES_FILE
from magician.core.errors import InvalidPayload
from magician.core.logging import get_logger
from magician.core.typing import JSONDict
from magician.llm.base import LLMConfig, ProviderType

logger = get_logger("capabilities.registry")

PAYLOAD_MODELS: dict[Capability, type[BaseModel]] = {
    Capability.BUSINESS_IDEA_GENERATION: IdeaGenerationPayload,
    Capability.IDEA_ANALYSIS: IdeaAnalysisPayload,
    Capability.BUSINESS_PLAN_OUTLINE: PlanOutlinePayload,
    Capability.BUSINESS_ASSISTANCE: AssistancePayload,
}

RESULT_MODELS: dict[Capability, type[BaseModel]] = {
    Capability.BUSINESS_IDEA_GENERATION: IdeasResult,
    Capability.IDEA_ANALYSIS: IdeaAnalysisResult,
    Capability.BUSINESS_PLAN_OUTLINE: PlanOutlineResult,
    Capability.BUSINESS_ASSISTANCE: AssistanceResult,
}


@dataclass(frozen=True)
class ProviderConfig:
    """Which providers serve a capability, in order."""

    preferred: ProviderType
    fallback: ProviderType
    allow_fallback: bool = True

    def __post_init__(self) -> None:
        if self.preferred == self.fallback:
            raise ValueError(
                f"fallback provider must differ from preferred ({self.preferred.value})"
            )


@dataclass
class CapabilitySpec:
    """Provider config plus static invocation settings for one capability."""

    capability: Capability
    providers: ProviderConfig
    timeout: float | None = None  # None: router default
    max_tokens: int = 1024
    temperature: float = 0.7
    models: dict[ProviderType, str] = field(default_factory=dict)
    system_prompt: str | None = None
    json_output: bool = True

    @classmethod
    def from_dict(
        cls, capability: Capability, data: dict[str, Any], defaults: dict[str, Any] | None = None
    ) -> "CapabilitySpec":
        merged = {**(defaults or {}), **data}
        models = {**(defaults or {}).get("models", {}), **data.get("models", {})}
        return cls(
            capability=capability,
            providers=ProviderConfig(
                preferred=ProviderType(merged["preferred"]),
                fallback=ProviderType(merged.get("fallback", ProviderType.FALLBACK.value)),
                allow_fallback=bool(merged.get("allow_fallback", True)),
            ),
            timeout=float(merged["timeout"]) if merged.get("timeout") else None,
            max_tokens=int(merged.get("max_tokens", 1024)),
            temperature=float(merged.get("temperature", 0.7)),
            models={ProviderType(k): v for k, v in models.items()},
            system_prompt=merged.get("system_prompt"),
            json_output=bool(merged.get("json_output", True)),
        )

    def llm_config(self, provider: ProviderType, json_output: bool | None = None) -> LLMConfig:
        """Build call config for a vendor provider."""
        return LLMConfig(
            model=self.models.get(provider, ""),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system_prompt=self.system_prompt,
            json_output=self.json_output if json_output is None else json_output,
        )

    def validate_payload(self, payload: JSONDict) -> JSONDict:
        """Validate and normalize payload to snake_case keys."""
        model = PAYLOAD_MODELS[self.capability]
        try:
            return model.model_validate(payload).model_dump()
        except ValidationError as e:
            raise InvalidPayload(
                f"Invalid payload for {self.capability.value}: {e.error_count()} error(s)",
                context={"errors": e.errors(include_url=False)},
            ) from e


class CapabilityRegistry:
    """Load and manage capability specs from YAML."""

    def __init__(self, specs: dict[Capability, CapabilitySpec]):
        missing = [c.value for c in Capability if c not in specs]
        if missing:
            raise ValueError(f"Capabilities not configured: {', '.join(missing)}")
        self.specs = specs

    @classmethod
    def from_yaml(cls, config_path: Path | str) -> "CapabilityRegistry":
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        defaults = data.get("defaults", {})
        specs = {
            Capability(name): CapabilitySpec.from_dict(Capability(name), entry, defaults)
            for name, entry in data["capabilities"].items()
        }
        logger.info(f"Loaded {len(specs)} capabilities from {config_path}")
        return cls(specs)

    def get(self, capability: Capability) -> CapabilitySpec:
        return self.specs[capability]

    def __iter__(self):
        return iter(self.specs.values())


def load_registry(config_path: Path | str | None = None) -> CapabilityRegistry:
    """Load the packaged registry, or an override file."""
    path = Path(config_path) if config_path else CAPABILITIES_FILE
    if not path.exists():
        raise FileNotFoundError(f"Capability registry not found at {path}")
    return CapabilityRegistry.from_yaml(path)
