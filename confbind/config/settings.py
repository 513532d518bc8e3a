"""Settings model for confbind."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "console"]
GenerationName = Literal["legacy", "modern"]

DEFAULT_LEGACY_CAPABILITY = "relaxed_properties:RelaxedPropertyResolver"
DEFAULT_MODERN_CAPABILITY = "confbind.binding.binder:Binder"


class Settings(BaseSettings):
    """Library settings, read from CONFBIND_* environment variables.

    These configure confbind itself. They are unrelated to the
    Environment objects that callers resolve properties from.
    """

    model_config = SettingsConfigDict(
        env_prefix="CONFBIND_",
        case_sensitive=False,
        extra="ignore",
    )

    generation: GenerationName | None = Field(
        default=None,
        description="Force a binding generation and skip the capability probe",
    )
    legacy_capability: str = Field(
        default=DEFAULT_LEGACY_CAPABILITY,
        description="Import identifier ('module:Attribute') of the legacy capability",
    )
    modern_capability: str = Field(
        default=DEFAULT_MODERN_CAPABILITY,
        description="Import identifier ('module:Attribute') of the modern binder",
    )
    strict_shape: bool = Field(
        default=False,
        description="Reject typed targets on the legacy strategy instead of ignoring them",
    )

    log_level: LogLevel = Field(default="INFO", description="Logging level")
    log_format: LogFormat = Field(default="json", description="Log output format")
    redact_secrets: bool = Field(
        default=True, description="Mask values of secret-looking keys in logs"
    )

    @field_validator("legacy_capability", "modern_capability")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        """Identifiers must name a module and an attribute."""
        module, sep, attribute = v.partition(":")
        if not sep or not module or not attribute:
            raise ValueError(f"expected 'module:Attribute', got '{v}'")
        return v
