"""
Capabilities - what callers can ask the AI layer for.

Each capability has a payload schema, a prompt, a provider config loaded
from configs/capabilities.yaml, and a rule-based fallback generator.
"""

from dataclasses import dataclass, field
from enum import Enum

from magician.core.typing import JSONDict
from magician.llm.base import ProviderType


class Capability(str, Enum):
    BUSINESS_IDEA_GENERATION = "business_idea_generation"
    IDEA_ANALYSIS = "idea_analysis"
    BUSINESS_PLAN_OUTLINE = "business_plan_outline"
    BUSINESS_ASSISTANCE = "business_assistance"


@dataclass
class CapabilityRequest:
    """A single request against one capability."""

    capability: Capability
    payload: JSONDict = field(default_factory=dict)
    preference: ProviderType | None = None  # None == auto


__all__ = ["Capability", "CapabilityRequest"]
