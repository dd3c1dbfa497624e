"""
Magician - AI provider routing for 360 Business Magician.

Package structure:
- core: Config, logging, errors, shared types
- llm: Provider abstraction, credentials, router with fallback
- capabilities: Capability registry, prompts, payload schemas, rule-based fallback
"""

__version__ = "0.1.0"
