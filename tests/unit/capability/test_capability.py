"""Tests for binding capability detection."""

import threading
from pathlib import Path

import pytest

from confbind import capability
from confbind.binding.relaxed import RelaxedPropertyResolver
from confbind.capability import (
    CapabilityAbsent,
    CapabilityDetector,
    Generation,
    detect,
    get_detector,
    get_generation,
    load_capability,
)
from confbind.exceptions import CapabilityProbeError

IN_TREE_LEGACY = "confbind.binding.relaxed:RelaxedPropertyResolver"
ABSENT_LEGACY = "cb_absent_legacy_capability:RelaxedPropertyResolver"


class TestLoadCapability:
    """Tests for load_capability."""

    def test_loads_attribute(self) -> None:
        """Resolves module and attribute."""
        assert load_capability(IN_TREE_LEGACY) is RelaxedPropertyResolver

    def test_missing_module(self) -> None:
        """Missing module is reported as absent."""
        with pytest.raises(CapabilityAbsent):
            load_capability(ABSENT_LEGACY)

    def test_missing_parent_package(self) -> None:
        """Missing parent package is reported as absent."""
        with pytest.raises(CapabilityAbsent):
            load_capability("cb_absent_pkg.sub.module:Thing")

    def test_missing_attribute(self) -> None:
        """Missing attribute is reported as absent."""
        with pytest.raises(CapabilityAbsent):
            load_capability("confbind.binding.relaxed:NoSuchResolver")

    def test_malformed_identifier(self) -> None:
        """Identifiers without an attribute are rejected."""
        with pytest.raises(ValueError):
            load_capability("confbind.binding.relaxed")


class TestDetect:
    """Tests for detect."""

    def test_present_is_legacy(self) -> None:
        """An importable capability selects LEGACY."""
        assert detect(IN_TREE_LEGACY) is Generation.LEGACY

    def test_installed_add_on_is_legacy(self, legacy_installed: str) -> None:
        """The default add-on identifier resolves once installed."""
        assert detect(legacy_installed) is Generation.LEGACY

    def test_absent_is_modern(self) -> None:
        """An absent capability selects MODERN."""
        assert detect(ABSENT_LEGACY) is Generation.MODERN

    def test_broken_module_fails_fast(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Errors raised while importing the capability are not absence."""
        (tmp_path / "cb_broken_probe.py").write_text("raise RuntimeError('boom')\n")
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(CapabilityProbeError) as exc_info:
            detect("cb_broken_probe:RelaxedPropertyResolver")
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.identifier == "cb_broken_probe:RelaxedPropertyResolver"

    def test_missing_dependency_fails_fast(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A capability whose own imports fail is a broken install."""
        (tmp_path / "cb_half_installed.py").write_text(
            "import cb_dependency_that_is_missing\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(CapabilityProbeError):
            detect("cb_half_installed:RelaxedPropertyResolver")

    def test_malformed_identifier_fails_fast(self) -> None:
        """Malformed identifiers are probe failures."""
        with pytest.raises(CapabilityProbeError):
            detect("not-an-identifier")

    def test_idempotent(self) -> None:
        """Repeated detection gives the same answer."""
        assert {detect(ABSENT_LEGACY) for _ in range(5)} == {Generation.MODERN}


class TestCapabilityDetector:
    """Tests for CapabilityDetector."""

    @pytest.fixture
    def probe_calls(self, monkeypatch: pytest.MonkeyPatch) -> list[str]:
        """Record calls to detect while keeping its behaviour."""
        calls: list[str] = []
        original = capability.detect

        def counting_detect(identifier: str) -> Generation:
            calls.append(identifier)
            return original(identifier)

        monkeypatch.setattr(capability, "detect", counting_detect)
        return calls

    def test_probes_once(self, probe_calls: list[str]) -> None:
        """The probe runs on first access only."""
        detector = CapabilityDetector(ABSENT_LEGACY)
        assert detector.generation is Generation.MODERN
        assert detector.generation is Generation.MODERN
        assert probe_calls == [ABSENT_LEGACY]

    def test_concurrent_first_access(self, probe_calls: list[str]) -> None:
        """Concurrent first access still probes once."""
        detector = CapabilityDetector(IN_TREE_LEGACY)
        results: list[Generation] = []
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            results.append(detector.generation)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == [Generation.LEGACY] * 8
        assert probe_calls == [IN_TREE_LEGACY]

    def test_forced_generation_skips_probe(self, probe_calls: list[str]) -> None:
        """A forced generation is used without probing."""
        detector = CapabilityDetector(IN_TREE_LEGACY, forced="modern")
        assert detector.generation is Generation.MODERN
        assert probe_calls == []

    def test_probe_failure_propagates(self) -> None:
        """Unexpected probe failures surface from the detector."""
        detector = CapabilityDetector("broken")
        with pytest.raises(CapabilityProbeError):
            detector.generation


class TestProcessDetector:
    """Tests for the process-wide detector."""

    def test_default_is_modern(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without the legacy add-on installed, the process is MODERN."""
        monkeypatch.delenv("CONFBIND_GENERATION", raising=False)
        monkeypatch.delenv("CONFBIND_LEGACY_CAPABILITY", raising=False)
        assert get_generation() is Generation.MODERN

    def test_legacy_when_add_on_installed(
        self, legacy_installed: str, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Installing the legacy add-on flips the process to LEGACY."""
        monkeypatch.delenv("CONFBIND_GENERATION", raising=False)
        monkeypatch.delenv("CONFBIND_LEGACY_CAPABILITY", raising=False)
        assert get_generation() is Generation.LEGACY

    def test_settings_identifier(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The probed identifier comes from settings."""
        monkeypatch.delenv("CONFBIND_GENERATION", raising=False)
        monkeypatch.setenv("CONFBIND_LEGACY_CAPABILITY", IN_TREE_LEGACY)
        assert get_detector().legacy_identifier == IN_TREE_LEGACY
        assert get_generation() is Generation.LEGACY

    def test_settings_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """CONFBIND_GENERATION pins the generation."""
        monkeypatch.setenv("CONFBIND_GENERATION", "legacy")
        monkeypatch.setenv("CONFBIND_LEGACY_CAPABILITY", ABSENT_LEGACY)
        assert get_generation() is Generation.LEGACY

    def test_fixed_for_process(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Later settings changes do not flip the generation."""
        monkeypatch.setenv("CONFBIND_GENERATION", "modern")
        assert get_generation() is Generation.MODERN

        monkeypatch.setenv("CONFBIND_GENERATION", "legacy")
        capability.get_settings.cache_clear()
        assert get_generation() is Generation.MODERN
        assert get_detector() is get_detector()
