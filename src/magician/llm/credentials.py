"""
Credential lookup for providers.

A provider is available when its credential source yields a value.
Lookups are evaluated on every call so a rotated or removed key is
noticed without restarting the process.
"""

import os
from collections.abc import Mapping, Sequence

from magician.core.config import Settings
from magician.llm.base import ProviderType

ANTHROPIC_ENV = ("ANTHROPIC_API_KEY",)
OPENAI_ENV = (
    "OPENAI_API_KEY",
    "OPENAI_MANAGED_KEY",
    "OPENAI_API_IDEA_KEY",
    "OPENAI_API_BUILD_KEY",
    "OPENAI_API_GROW_KEY",
)


class CredentialSource:
    """Ordered list of named lookups, first non-empty value wins."""

    def __init__(
        self,
        names: Sequence[str] = (),
        value: str | None = None,
        environ: Mapping[str, str] | None = None,
        required: bool = True,
    ):
        self.names = tuple(names)
        self.value = value or None
        self.required = required
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def get(self) -> str | None:
        """Return the first configured credential, or None."""
        if self.value:
            return self.value
        for name in self.names:
            found = self.environ.get(name)
            if found:
                return found
        return None

    @property
    def available(self) -> bool:
        if not self.required:
            return True
        return self.get() is not None

    def __repr__(self) -> str:
        # Never render the secret itself
        return f"CredentialSource(names={list(self.names)}, explicit={self.value is not None})"


def always_available() -> CredentialSource:
    """Source for providers with no external dependency."""
    return CredentialSource(required=False)


def default_credential_sources(
    settings: Settings, environ: Mapping[str, str] | None = None
) -> dict[ProviderType, CredentialSource]:
    """Build sources from settings, then the vendors' conventional variables."""
    return {
        ProviderType.ANTHROPIC: CredentialSource(
            ANTHROPIC_ENV, value=settings.anthropic_api_key, environ=environ
        ),
        ProviderType.OPENAI: CredentialSource(
            OPENAI_ENV, value=settings.openai_api_key, environ=environ
        ),
        ProviderType.FALLBACK: always_available(),
    }
