"""
Error taxonomy for AI invocations.

Route handlers map these to responses: InvalidPayload to 400, everything
else to 500 with the error kind and message. A structured-output parse
failure is not an error; it shows up as a ``warning`` field on the result.
"""

from typing import Any


class MagicianError(Exception):
    """Base error with a user-facing message and debug context."""

    kind = "magician_error"
    status_code = 500

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind, "message": self.message}


class InvalidPayload(MagicianError):
    """Payload failed validation for the requested capability."""

    kind = "invalid_payload"
    status_code = 400


class CredentialsMissing(MagicianError):
    """Provider was selected but its credential is absent."""

    kind = "credentials_missing"


class ProviderInvocationFailed(MagicianError):
    """Provider call raised or returned an unusable response."""

    kind = "provider_invocation_failed"


class ProviderUnavailable(MagicianError):
    """No provider, including the local fallback, may serve the request."""

    kind = "provider_unavailable"


class ProviderTimeout(MagicianError):
    """Provider call exceeded the capability deadline."""

    kind = "timeout"
