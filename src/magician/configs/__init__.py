"""Packaged configuration files."""

from pathlib import Path

CONFIG_DIR = Path(__file__).parent
CAPABILITIES_FILE = CONFIG_DIR / "capabilities.yaml"

__all__ = ["CONFIG_DIR", "CAPABILITIES_FILE"]
