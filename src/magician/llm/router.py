"""Provider router - selects a provider per capability, falls back at most once."""

import asyncio
import threading
from collections.abc import Callable

from pydantic import ValidationError

from magician.capabilities import Capability, CapabilityRequest
from magician.capabilities.registry import (
    RESULT_MODELS,
    CapabilityRegistry,
    CapabilitySpec,
    load_registry,
)
from magician.core.config import Environment, Settings, get_settings
from magician.core.errors import (
    CredentialsMissing,
    InvalidPayload,
    MagicianError,
    ProviderInvocationFailed,
    ProviderTimeout,
    ProviderUnavailable,
)
from magician.core.logging import get_logger
from magician.core.typing import JSONDict
from magician.llm.base import LLMProvider, ProviderType, parse_preference
from magician.llm.credentials import CredentialSource, always_available, default_credential_sources

logger = get_logger("llm.router")

# Receives the resolved credential (None for providers that need none)
ProviderFactory = Callable[[str | None], LLMProvider]

DEFAULT_TIMEOUT = 30.0


class ProviderRouter:
    """Routes capability requests to a provider with a single fallback hop."""

    def __init__(
        self,
        registry: CapabilityRegistry,
        credentials: dict[ProviderType, CredentialSource],
        factories: dict[ProviderType, ProviderFactory],
        default_timeout: float = DEFAULT_TIMEOUT,
        environment: Environment = Environment.DEVELOPMENT,
    ):
        from magician.llm.local import LocalFallbackProvider

        self.registry = registry
        self.default_timeout = default_timeout
        self.environment = environment
        self._credentials = dict(credentials)
        self._credentials.setdefault(ProviderType.FALLBACK, always_available())
        self._factories = dict(factories)
        self._factories.setdefault(ProviderType.FALLBACK, lambda _key: LocalFallbackProvider())
        self._handles: dict[ProviderType, LLMProvider] = {}
        self._lock = threading.Lock()

    # --- Availability ---

    def is_available(self, provider: ProviderType) -> bool:
        """Credential present and a factory registered. Not cached."""
        if provider is ProviderType.FALLBACK:
            return True
        source = self._credentials.get(provider)
        return source is not None and source.available and provider in self._factories

    def availability(self) -> dict[ProviderType, bool]:
        return {p: self.is_available(p) for p in ProviderType}

    @property
    def available_providers(self) -> list[ProviderType]:
        """Vendor providers that can currently be used."""
        return [p for p, ok in self.availability().items() if ok and p is not ProviderType.FALLBACK]

    # --- Selection ---

    def resolve_provider(
        self, capability: Capability, preference: ProviderType | None = None
    ) -> ProviderType:
        """Pick the provider for a capability. Never raises for a known capability."""
        if preference is not None and self.is_available(preference):
            return preference

        config = self.registry.get(capability).providers
        if self.is_available(config.preferred):
            return config.preferred
        if config.allow_fallback and self.is_available(config.fallback):
            return config.fallback
        return ProviderType.FALLBACK

    def _local_permitted(self, spec: CapabilitySpec, preference: ProviderType | None) -> bool:
        config = spec.providers
        return (
            config.allow_fallback
            or preference is ProviderType.FALLBACK
            or config.preferred is ProviderType.FALLBACK
        )

    def _fallback_for(self, failed: ProviderType, spec: CapabilitySpec) -> ProviderType:
        fallback = spec.providers.fallback
        if fallback is not failed and self.is_available(fallback):
            return fallback
        return ProviderType.FALLBACK

    # --- Client handles ---

    def get_client_handle(self, provider: ProviderType) -> LLMProvider:
        """Return the provider's handle, creating it on first use."""
        source = self._credentials.get(provider)
        credential = source.get() if source else None
        if source is None or (source.required and credential is None):
            raise CredentialsMissing(
                f"{provider.value} API key not available", context={"provider": provider.value}
            )

        handle = self._handles.get(provider)
        if handle is not None:
            return handle

        with self._lock:
            handle = self._handles.get(provider)
            if handle is None:
                factory = self._factories.get(provider)
                if factory is None:
                    raise ProviderUnavailable(
                        f"No client registered for {provider.value}",
                        context={"provider": provider.value},
                    )
                handle = factory(credential)
                self._handles[provider] = handle
                logger.info(f"Initialized {provider.value} client")
        return handle

    async def reset_clients(self) -> None:
        """Close and drop all memoized handles."""
        with self._lock:
            handles = list(self._handles.values())
            self._handles.clear()
        for handle in handles:
            await handle.close()

    # --- Invocation ---

    async def invoke(
        self,
        capability: Capability | str,
        payload: JSONDict | None = None,
        preference: ProviderType | str | None = None,
    ) -> JSONDict:
        """Serve a capability request.

        Tries the resolved provider, then at most one fallback. Failures of
        the first attempt are logged and swallowed when a fallback is made;
        the error of the last attempt is raised otherwise.

        Raises:
            InvalidPayload: unknown capability/preference or bad payload
            ProviderUnavailable: fallback disabled and preferred provider unavailable
            ProviderInvocationFailed, ProviderTimeout, CredentialsMissing: terminal failure
        """
        capability = _parse_capability(capability)
        preference = parse_preference(preference)
        spec = self.registry.get(capability)
        request = CapabilityRequest(capability, spec.validate_payload(payload or {}), preference)

        first = self.resolve_provider(capability, preference)
        if first is ProviderType.FALLBACK and not self._local_permitted(spec, preference):
            raise ProviderUnavailable(
                f"No available AI provider for {capability.value}",
                context={"preferred": spec.providers.preferred.value},
            )

        logger.info(
            f"{capability.value}: using {first.value} "
            f"(preference={preference.value if preference else 'auto'})"
        )

        try:
            return await self._attempt(first, request, spec)
        except Exception as e:
            if first is ProviderType.FALLBACK or not spec.providers.allow_fallback:
                logger.error(f"{capability.value}: {first.value} failed: {e}")
                _reraise(first, e)
            logger.warning(f"{capability.value}: {first.value} failed, falling back: {e}")

        second = self._fallback_for(first, spec)
        logger.info(f"{capability.value}: fallback to {second.value}")
        try:
            return await self._attempt(second, request, spec)
        except Exception as e:
            logger.error(f"{capability.value}: fallback {second.value} failed: {e}")
            _reraise(second, e)

    async def _attempt(
        self, provider: ProviderType, request: CapabilityRequest, spec: CapabilitySpec
    ) -> JSONDict:
        handle = self.get_client_handle(provider)
        timeout = spec.timeout or self.default_timeout
        try:
            result = await asyncio.wait_for(handle.generate(request, spec), timeout=timeout)
        except asyncio.TimeoutError:
            raise ProviderTimeout(
                f"{provider.value} did not answer within {timeout:g}s",
                context={"provider": provider.value, "timeout": timeout},
            ) from None

        if not isinstance(result, dict):
            raise ProviderInvocationFailed(
                f"Unexpected result type from {provider.value}: {type(result).__name__}"
            )
        result["provider"] = provider.value

        # Raw text carrying a format warning is the one non-conforming success
        if "warning" not in result:
            try:
                RESULT_MODELS[request.capability].model_validate(result)
            except ValidationError as e:
                raise ProviderInvocationFailed(
                    f"Unexpected response shape from {provider.value}",
                    context={
                        "provider": provider.value,
                        "errors": e.errors(include_url=False),
                    },
                ) from e
        return result

    # --- Status ---

    def services_info(self) -> JSONDict:
        """Availability snapshot for status endpoints."""
        providers = {p.value: ok for p, ok in self.availability().items()}
        servable = []
        for spec in self.registry:
            resolved = self.resolve_provider(spec.capability)
            if resolved is not ProviderType.FALLBACK or self._local_permitted(spec, None):
                servable.append(spec.capability.value)

        return {
            "environment": self.environment.value,
            "providers": providers,
            "available": servable,
            "message": (
                "AI services are available"
                if self.available_providers
                else "No AI services currently configured"
            ),
        }

    def log_status(self) -> None:
        for provider in (ProviderType.ANTHROPIC, ProviderType.OPENAI):
            state = "available (key present)" if self.is_available(provider) else "not available (API key missing)"
            logger.info(f"{provider.value}: {state}")

    async def health_check_all(self) -> dict[ProviderType, bool]:
        """Check health of every available provider."""
        results = {}
        for provider in ProviderType:
            if not self.is_available(provider):
                results[provider] = False
                continue
            results[provider] = await self.get_client_handle(provider).health_check()
        return results


def _parse_capability(value: Capability | str) -> Capability:
    if isinstance(value, Capability):
        return value
    try:
        return Capability(value)
    except ValueError:
        raise InvalidPayload(
            f"Unknown capability: {value}",
            context={"accepted": [c.value for c in Capability]},
        ) from None


def _reraise(provider: ProviderType, error: Exception) -> None:
    """Raise error as a typed terminal failure."""
    if isinstance(error, MagicianError):
        raise error
    raise ProviderInvocationFailed(
        f"{provider.value} invocation failed: {error}",
        context={"provider": provider.value, "error_type": type(error).__name__},
    ) from error


def create_default_router(settings: Settings | None = None) -> ProviderRouter:
    """Create router with providers from settings."""
    from magician.llm.claude import ClaudeProvider
    from magician.llm.local import LocalFallbackProvider
    from magician.llm.openai import OpenAIProvider

    settings = settings or get_settings()
    registry = load_registry(settings.capabilities_file)

    factories: dict[ProviderType, ProviderFactory] = {
        ProviderType.ANTHROPIC: lambda key: ClaudeProvider(api_key=key),
        ProviderType.OPENAI: lambda key: OpenAIProvider(
            api_key=key, base_url=settings.openai_base_url
        ),
        ProviderType.FALLBACK: lambda _key: LocalFallbackProvider(),
    }

    router = ProviderRouter(
        registry,
        credentials=default_credential_sources(settings),
        factories=factories,
        default_timeout=settings.default_timeout,
        environment=settings.environment,
    )
    router.log_status()
    return router
