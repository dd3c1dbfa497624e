"""
LLM module - AI provider abstraction.

Providers:
- anthropic: Anthropic Claude API (primary)
- openai: OpenAI chat completions API (secondary)
- fallback: Rule-based local generator (always available)

Router selects a provider per capability from availability and preference,
and falls back at most once when the chosen provider fails.
"""
