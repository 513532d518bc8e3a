"""confbind: resolve groups of configuration entries by key prefix.

Entries sharing a prefix are returned either as a flat dict of relative
keys (legacy binding) or bound into a typed structure (modern binding).
Which one is decided once per process by probing for the legacy
binding capability.

Usage:
    from confbind import MapEnvironment, resolve

    env = MapEnvironment({"db.host": "localhost", "db.port": "5432"})
    resolve(env, "db", DatabaseConfig)
"""

from confbind.capability import (
    CapabilityDetector,
    Generation,
    detect,
    get_generation,
)
from confbind.environment import (
    Environment,
    MapEnvironment,
    OsEnvironment,
)
from confbind.observability.logging import configure_from_settings
from confbind.exceptions import (
    BindError,
    CapabilityProbeError,
    ConfBindError,
    InvalidPrefixError,
    ResolutionError,
    UnsupportedShapeError,
)
from confbind.resolver import (
    LegacyPropertyResolver,
    ModernPropertyResolver,
    PropertyResolver,
    create_resolver,
    get_resolver,
    resolve,
)

__all__ = [
    # Resolution
    "PropertyResolver",
    "LegacyPropertyResolver",
    "ModernPropertyResolver",
    "create_resolver",
    "get_resolver",
    "resolve",
    # Capability
    "CapabilityDetector",
    "Generation",
    "detect",
    "get_generation",
    # Environments
    "Environment",
    "MapEnvironment",
    "OsEnvironment",
    # Logging
    "configure_from_settings",
    # Errors
    "ConfBindError",
    "CapabilityProbeError",
    "ResolutionError",
    "BindError",
    "UnsupportedShapeError",
    "InvalidPrefixError",
]
