"""Shared test fixtures for the confbind test suite."""

import sys
import types
from collections.abc import Callable, Generator

import pytest

from confbind import capability, resolver
from confbind.binding.relaxed import RelaxedPropertyResolver
from confbind.config import get_settings
from confbind.environment import MapEnvironment


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_process_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start each test without a process-wide detector or resolver."""
    monkeypatch.setattr(capability, "_detector", None)
    monkeypatch.setattr(resolver, "_resolver", None)


@pytest.fixture
def db_environment() -> MapEnvironment:
    """Environment holding a small db group and an unrelated key."""
    return MapEnvironment({
        "db.host": "localhost",
        "db.port": "5432",
        "dbx.other": "ignored",
        "cache.ttl": "60",
    })


@pytest.fixture
def fake_module(
    monkeypatch: pytest.MonkeyPatch,
) -> Callable[..., types.ModuleType]:
    """Factory fixture registering a throwaway module in sys.modules.

    Usage:
        def test_something(fake_module):
            fake_module("legacy_props", RelaxedPropertyResolver=SomeClass)
    """

    def _register(name: str, **attributes: object) -> types.ModuleType:
        module = types.ModuleType(name)
        for key, value in attributes.items():
            setattr(module, key, value)
        monkeypatch.setitem(sys.modules, name, module)
        return module

    return _register


@pytest.fixture
def legacy_installed(fake_module: Callable[..., types.ModuleType]) -> str:
    """Install the legacy capability under its default identifier."""
    fake_module("relaxed_properties", RelaxedPropertyResolver=RelaxedPropertyResolver)
    return "relaxed_properties:RelaxedPropertyResolver"
