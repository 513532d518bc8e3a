"""Observability: structured logging for confbind.

Logging uses structlog; property values are never logged and values
bound to sensitive keys are redacted before rendering.
"""

from confbind.observability.logging import (
    SecretRedactor,
    configure_from_settings,
    get_logger,
    setup_logging,
)

__all__ = [
    "SecretRedactor",
    "configure_from_settings",
    "get_logger",
    "setup_logging",
]
