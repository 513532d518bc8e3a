"""Modern binding capability: typed binding with pydantic.

Entries under a name are nested into a dict/list tree and validated
into the target type with a pydantic TypeAdapter, so any type pydantic
understands (models, dataclasses, TypedDicts, plain containers) can be
a target. Values stay strings until pydantic coerces them.
"""

import threading
import weakref
from typing import Any, Generic, TypeVar

from pydantic import (
    PydanticUndefinedAnnotation,
    PydanticUserError,
    TypeAdapter,
    ValidationError,
)

from confbind.binding.names import PropertyNameError, nest
from confbind.environment import SEPARATOR, Environment
from confbind.exceptions import BindError

T = TypeVar("T")

_UNBOUND: Any = object()


class BindResult(Generic[T]):
    """Outcome of a bind call, empty when nothing matched the name."""

    __slots__ = ("_name", "_value")

    def __init__(self, name: str, value: Any = _UNBOUND) -> None:
        self._name = name
        self._value = value

    @property
    def is_bound(self) -> bool:
        return self._value is not _UNBOUND

    def get(self) -> T:
        """Get the bound value.

        Raises:
            BindError: If nothing was bound
        """
        if not self.is_bound:
            raise BindError(self._name, "no configuration found")
        return self._value

    def or_else(self, default: T) -> T:
        return self._value if self.is_bound else default

    def __repr__(self) -> str:
        state = "bound" if self.is_bound else "unbound"
        return f"BindResult(name={self._name!r}, {state})"


class Binder:
    """Binds entries of one Environment into typed targets.

    Use Binder.get() to share one binder per environment. Binders handed
    out by get() hold their environment weakly so the registry entry can
    expire with it; binders built directly hold it strongly.
    """

    _registry: "weakref.WeakKeyDictionary[Environment, Binder]" = weakref.WeakKeyDictionary()
    _registry_lock = threading.Lock()

    def __init__(self, environment: Environment, *, _weak: bool = False) -> None:
        if environment is None:
            raise TypeError("Binder requires an environment")
        self._environment: Environment | None = None if _weak else environment
        self._environment_ref = weakref.ref(environment) if _weak else None

    @classmethod
    def get(cls, environment: Environment) -> "Binder":
        """Get the binder for an environment, creating it on first use."""
        with cls._registry_lock:
            try:
                binder = cls._registry.get(environment)
            except TypeError:
                # Not weak-referenceable; hand out an unshared binder
                return cls(environment)
            if binder is None:
                binder = cls(environment, _weak=True)
                cls._registry[environment] = binder
            return binder

    @property
    def environment(self) -> Environment:
        if self._environment is not None:
            return self._environment
        environment = self._environment_ref() if self._environment_ref else None
        if environment is None:
            raise ReferenceError("environment of this binder no longer exists")
        return environment

    def bind(self, name: str, target: Any = dict[str, Any]) -> BindResult[Any]:
        """Bind everything under a name into the target type.

        ``name`` must not end with the separator. Entries ``name.x`` become
        field ``x``; a bare ``name`` entry with no sub-entries binds as a
        scalar.

        Args:
            name: Property name without trailing separator, e.g. "db"
            target: Type to validate into

        Returns:
            Bound result, or an unbound result when nothing matches

        Raises:
            BindError: If matching entries cannot be shaped into the target
        """
        environment = self.environment
        group_prefix = name + SEPARATOR
        entries = [
            (key[len(group_prefix):], value)
            for key, value in environment.iter_properties(group_prefix)
        ]
        scalar = environment.get_property(name)

        if not entries and scalar is None:
            return BindResult(name)
        if entries and scalar is not None:
            raise BindError(name, "name has both a value and sub-properties")

        try:
            source: Any = nest(entries) if entries else scalar
        except PropertyNameError as e:
            raise BindError(name, str(e)) from e

        try:
            value = TypeAdapter(target).validate_python(source)
        except (PydanticUserError, PydanticUndefinedAnnotation) as e:
            # Unsupported or not fully defined target type
            raise BindError(name, f"cannot bind into {target!r}: {e}") from e
        except ValidationError as e:
            raise BindError(
                name, f"{e.error_count()} validation error(s) for {_type_name(target)}"
            ) from e

        return BindResult(name, value)


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)
