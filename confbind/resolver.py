"""Prefix resolution over an Environment.

Two strategies share the PropertyResolver interface:

- LegacyPropertyResolver returns every entry under the prefix as a flat
  dict of relative key to string value.
- ModernPropertyResolver binds the entries into a typed target.

The strategy is chosen once from the detected binding generation.

Usage:
    from confbind import MapEnvironment, resolve

    env = MapEnvironment({"db.host": "localhost", "db.port": "5432"})
    db = resolve(env, "db", DatabaseConfig)
"""

import threading
from abc import ABC, abstractmethod
from typing import Any

from confbind.capability import (
    CapabilityDetector,
    Generation,
    get_generation,
    load_capability,
)
from confbind.config import Settings, get_settings
from confbind.environment import SEPARATOR, Environment
from confbind.exceptions import (
    BindError,
    InvalidPrefixError,
    ResolutionError,
    UnsupportedShapeError,
)
from confbind.observability.logging import get_logger

logger = get_logger(__name__)


def with_trailing_separator(prefix: str) -> str:
    """Prefix form expected by the legacy capability ("db" -> "db.")."""
    return prefix if prefix.endswith(SEPARATOR) else prefix + SEPARATOR


def without_trailing_separator(prefix: str) -> str:
    """Prefix form expected by the modern binder ("db." -> "db").

    Removes exactly one trailing separator.
    """
    return prefix[: -len(SEPARATOR)] if prefix.endswith(SEPARATOR) else prefix


def _check_arguments(environment: Environment, prefix: str) -> None:
    if environment is None:
        raise TypeError("environment must not be None")
    if not isinstance(prefix, str) or not prefix:
        raise InvalidPrefixError(f"prefix must be a non-empty string, got {prefix!r}")


class PropertyResolver(ABC):
    """Resolves the group of entries sharing a prefix."""

    @property
    @abstractmethod
    def generation(self) -> Generation:
        """Binding generation this resolver implements."""
        pass

    @abstractmethod
    def resolve(
        self, environment: Environment, prefix: str, target: Any = None
    ) -> Any:
        """Resolve all entries under a prefix.

        Args:
            environment: Source of configuration entries
            prefix: Non-empty key prefix, with or without trailing separator
            target: Type to bind into (modern strategy only)

        Returns:
            Flat dict for the legacy strategy, target instance for the modern one
        """
        pass


class LegacyPropertyResolver(PropertyResolver):
    """Flat sub-property lookup through the legacy capability.

    Typed targets cannot be honoured. By default they are ignored and the
    flat dict is returned; with strict_shape they raise UnsupportedShapeError.
    """

    def __init__(self, capability: str, strict_shape: bool = False) -> None:
        self._capability = capability
        self._strict_shape = strict_shape

    @property
    def generation(self) -> Generation:
        return Generation.LEGACY

    def resolve(
        self, environment: Environment, prefix: str, target: Any = None
    ) -> dict[str, str]:
        _check_arguments(environment, prefix)
        if target is not None:
            if self._strict_shape:
                raise UnsupportedShapeError(
                    f"legacy binding cannot produce {target!r} for '{prefix}'"
                )
            logger.debug("target_ignored", prefix=prefix, target=repr(target))

        normalized = with_trailing_separator(prefix)
        try:
            resolver_class = load_capability(self._capability)
            resolver = resolver_class(environment)
            properties = dict(resolver.get_sub_properties(normalized))
        except Exception as e:
            logger.warning(
                "legacy_resolution_failed",
                prefix=normalized,
                capability=self._capability,
                error=str(e),
            )
            raise ResolutionError(prefix, f"{type(e).__name__}: {e}") from e

        return properties


class ModernPropertyResolver(PropertyResolver):
    """Typed binding through the modern binder capability."""

    def __init__(self, capability: str) -> None:
        self._capability = capability

    @property
    def generation(self) -> Generation:
        return Generation.MODERN

    def resolve(
        self, environment: Environment, prefix: str, target: Any = None
    ) -> Any:
        _check_arguments(environment, prefix)
        normalized = without_trailing_separator(prefix)
        if target is None:
            target = dict[str, Any]

        try:
            binder_class = load_capability(self._capability)
            binder = binder_class.get(environment)
        except Exception as e:
            logger.warning(
                "binder_unavailable",
                prefix=normalized,
                capability=self._capability,
                error=str(e),
            )
            raise ResolutionError(prefix, f"{type(e).__name__}: {e}") from e

        try:
            result = binder.bind(normalized, target)
        except BindError as e:
            logger.warning("bind_failed", prefix=normalized, error=str(e))
            raise
        except Exception as e:
            logger.warning(
                "binder_invocation_failed",
                prefix=normalized,
                capability=self._capability,
                error=str(e),
            )
            raise ResolutionError(prefix, f"{type(e).__name__}: {e}") from e

        if not result.is_bound:
            logger.warning("bind_failed", prefix=normalized, error="no configuration found")
            raise BindError(normalized, "no configuration found")
        return result.get()


def create_resolver(
    generation: Generation | str | None = None,
    settings: Settings | None = None,
) -> PropertyResolver:
    """Build the resolver for a binding generation.

    Args:
        generation: Generation to use; detected from settings when None
        settings: Settings to build from; the process settings when None

    Returns:
        LegacyPropertyResolver or ModernPropertyResolver

    Raises:
        CapabilityProbeError: If detection fails unexpectedly
    """
    settings = settings or get_settings()
    if generation is None:
        detector = CapabilityDetector(
            settings.legacy_capability, forced=settings.generation
        )
        generation = detector.generation
    generation = Generation(generation)

    if generation is Generation.LEGACY:
        return LegacyPropertyResolver(
            settings.legacy_capability, strict_shape=settings.strict_shape
        )
    return ModernPropertyResolver(settings.modern_capability)


_resolver: PropertyResolver | None = None
_resolver_lock = threading.Lock()


def get_resolver() -> PropertyResolver:
    """Get the process-wide resolver.

    The generation comes from the process-wide detector, so every call in
    the process uses the same strategy.
    """
    global _resolver
    if _resolver is None:
        with _resolver_lock:
            if _resolver is None:
                _resolver = create_resolver(get_generation())
    return _resolver


def resolve(environment: Environment, prefix: str, target: Any = None) -> Any:
    """Resolve all entries under a prefix with the process-wide resolver.

    Args:
        environment: Source of configuration entries
        prefix: Non-empty key prefix
        target: Type to bind into; ignored by the legacy strategy

    Returns:
        dict[str, str] (legacy) or an instance of target (modern)
    """
    return get_resolver().resolve(environment, prefix, target)
