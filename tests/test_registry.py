"""Tests for the capability registry."""

from pathlib import Path

import pytest

from magician.capabilities import Capability
from magician.capabilities.registry import (
    CapabilityRegistry,
    ProviderConfig,
    load_registry,
)
from magician.core.errors import InvalidPayload
from magician.llm.base import ProviderType


def test_packaged_registry_covers_every_capability():
    registry = load_registry()
    for capability in Capability:
        spec = registry.get(capability)
        assert spec.providers.preferred is ProviderType.ANTHROPIC
        assert spec.providers.fallback is ProviderType.OPENAI
        assert spec.providers.allow_fallback
        assert spec.system_prompt


def test_packaged_registry_settings():
    registry = load_registry()
    ideas = registry.get(Capability.BUSINESS_IDEA_GENERATION)
    assert ideas.json_output
    assert ideas.max_tokens == 4000
    assert ideas.timeout is None
    assert ideas.models[ProviderType.OPENAI] == "gpt-4o"

    plan = registry.get(Capability.BUSINESS_PLAN_OUTLINE)
    assert plan.timeout == 60.0

    assert not registry.get(Capability.BUSINESS_ASSISTANCE).json_output


def test_llm_config_uses_provider_model():
    spec = load_registry().get(Capability.IDEA_ANALYSIS)
    config = spec.llm_config(ProviderType.ANTHROPIC)
    assert config.model == "claude-3-7-sonnet-20250219"
    assert config.json_output
    assert config.system_prompt == spec.system_prompt


def test_fallback_must_differ_from_preferred():
    with pytest.raises(ValueError):
        ProviderConfig(ProviderType.OPENAI, ProviderType.OPENAI)


def test_registry_rejects_missing_capabilities(tmp_path: Path):
    config = tmp_path / "caps.yaml"
    config.write_text(
        "capabilities:\n"
        "  idea_analysis:\n"
        "    preferred: openai\n"
        "    fallback: fallback\n"
    )
    with pytest.raises(ValueError, match="business_idea_generation"):
        CapabilityRegistry.from_yaml(config)


def test_registry_override_file(tmp_path: Path):
    lines = ["defaults:", "  max_tokens: 256", "capabilities:"]
    for capability in Capability:
        lines += [f"  {capability.value}:", "    preferred: openai", "    allow_fallback: false"]
    config = tmp_path / "caps.yaml"
    config.write_text("\n".join(lines) + "\n")

    registry = load_registry(config)
    spec = registry.get(Capability.IDEA_ANALYSIS)
    assert spec.providers.preferred is ProviderType.OPENAI
    assert spec.providers.fallback is ProviderType.FALLBACK
    assert not spec.providers.allow_fallback
    assert spec.max_tokens == 256


def test_missing_registry_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_registry(tmp_path / "nope.yaml")


def test_validate_payload_normalizes_camel_case():
    spec = load_registry().get(Capability.BUSINESS_IDEA_GENERATION)
    payload = spec.validate_payload({"interests": ["tea"], "marketInfo": "Austin"})
    assert payload == {"interests": ["tea"], "market_info": "Austin", "constraints": []}


def test_validate_payload_rejects_short_query():
    spec = load_registry().get(Capability.BUSINESS_ASSISTANCE)
    with pytest.raises(InvalidPayload) as exc_info:
        spec.validate_payload({"query": "hi"})
    assert exc_info.value.context["errors"]
