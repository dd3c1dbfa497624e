"""
Core module - configuration, logging, errors.

Components:
- config: Settings management via pydantic-settings
- errors: Error taxonomy surfaced by the router
- logging: Structured logging setup
"""

from magician.core.config import Settings
from magician.core.errors import MagicianError

__all__ = ["Settings", "MagicianError"]
