"""Error types for property resolution.

All failures raised by confbind derive from ConfBindError:
- CapabilityProbeError: the capability probe failed in an unexpected way
- ResolutionError: the selected binding capability could not be invoked
- BindError: the binder ran but produced no usable value
- UnsupportedShapeError: a typed target was requested from the legacy strategy
- InvalidPrefixError: the prefix is empty or not a string
"""


class ConfBindError(Exception):
    """Base exception for confbind errors."""

    pass


class CapabilityProbeError(ConfBindError):
    """Probing for the legacy binding capability failed unexpectedly."""

    def __init__(self, identifier: str, message: str) -> None:
        self.identifier = identifier
        super().__init__(f"Probe for '{identifier}' failed: {message}")


class ResolutionError(ConfBindError):
    """The binding capability could not be loaded, constructed or invoked."""

    def __init__(self, prefix: str, message: str) -> None:
        self.prefix = prefix
        super().__init__(f"Cannot resolve '{prefix}': {message}")


class BindError(ConfBindError):
    """Binding produced no value for the requested target."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(f"Cannot bind '{name}': {message}")


class UnsupportedShapeError(ConfBindError):
    """The legacy strategy was asked for a typed structure."""

    pass


class InvalidPrefixError(ConfBindError, ValueError):
    """Prefix is empty or not a string."""

    pass
