"""Binding capability detection.

The generation of binding capability available at runtime is probed once
and fixed for the life of the process, so a component never switches
strategy mid-run.

    LEGACY: the legacy capability is importable (flat sub-property lookup)
    MODERN: it is absent; the typed binder is used instead
"""

import importlib
import threading
from enum import Enum
from typing import Any

from confbind.config import get_settings
from confbind.exceptions import CapabilityProbeError
from confbind.observability.logging import get_logger

logger = get_logger(__name__)


class Generation(str, Enum):
    """Generation of binding capability."""

    LEGACY = "legacy"
    MODERN = "modern"


class CapabilityAbsent(LookupError):
    """The identifier does not resolve to anything importable."""

    pass


def load_capability(identifier: str) -> Any:
    """Import the object named by a 'module:Attribute' identifier.

    Raises:
        CapabilityAbsent: If the module or the attribute does not exist
        ValueError: If the identifier is malformed
    """
    module_name, sep, attribute = identifier.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"expected 'module:Attribute', got '{identifier}'")

    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        # Only the probed module (or a parent package) being missing counts;
        # a missing dependency inside an existing module is a broken install
        if e.name is None or not (
            module_name == e.name or module_name.startswith(e.name + ".")
        ):
            raise
        raise CapabilityAbsent(identifier) from e

    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise CapabilityAbsent(identifier) from e


def detect(identifier: str) -> Generation:
    """Probe for the legacy capability.

    Args:
        identifier: 'module:Attribute' of the legacy capability

    Returns:
        LEGACY if the identifier resolves, MODERN if it is absent

    Raises:
        CapabilityProbeError: On any other failure during the probe
    """
    try:
        load_capability(identifier)
    except CapabilityAbsent:
        return Generation.MODERN
    except Exception as e:
        raise CapabilityProbeError(identifier, f"{type(e).__name__}: {e}") from e
    return Generation.LEGACY


class CapabilityDetector:
    """Detects the binding generation once and remembers it.

    A forced generation skips the probe entirely, which lets deployments
    pin the strategy with a startup flag.
    """

    def __init__(
        self,
        legacy_identifier: str,
        forced: Generation | str | None = None,
    ) -> None:
        self._legacy_identifier = legacy_identifier
        self._generation: Generation | None = (
            Generation(forced) if forced is not None else None
        )
        self._lock = threading.Lock()

    @property
    def legacy_identifier(self) -> str:
        return self._legacy_identifier

    @property
    def generation(self) -> Generation:
        """The detected generation, probing on first access."""
        if self._generation is not None:
            return self._generation
        with self._lock:
            if self._generation is None:
                generation = detect(self._legacy_identifier)
                logger.info(
                    "capability_detected",
                    generation=generation.value,
                    identifier=self._legacy_identifier,
                )
                self._generation = generation
        return self._generation


_detector: CapabilityDetector | None = None
_detector_lock = threading.Lock()


def get_detector() -> CapabilityDetector:
    """Get the process-wide detector, built from settings on first use."""
    global _detector
    if _detector is None:
        with _detector_lock:
            if _detector is None:
                settings = get_settings()
                _detector = CapabilityDetector(
                    settings.legacy_capability, forced=settings.generation
                )
    return _detector


def get_generation() -> Generation:
    """Get the process-wide binding generation."""
    return get_detector().generation
