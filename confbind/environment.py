"""Environment abstraction: the key/value source properties are resolved from.

An Environment exposes configuration entries as string pairs, addressable
by exact key and by literal prefix scan. confbind never reads files or
the network; callers build an Environment from whatever source they own.
"""

import os
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping

SEPARATOR = "."


class Environment(ABC):
    """Abstract interface for a configuration environment."""

    @abstractmethod
    def get_property(self, key: str) -> str | None:
        """Get the value for an exact key, or None if absent."""
        pass

    @abstractmethod
    def iter_properties(self, prefix: str = "") -> Iterator[tuple[str, str]]:
        """Yield (key, value) for every key starting with the literal prefix."""
        pass

    def contains_property(self, key: str) -> bool:
        """Check whether an exact key is present."""
        return self.get_property(key) is not None


class MapEnvironment(Environment):
    """Environment backed by a snapshot of a string mapping.

    The mapping is copied at construction, so later changes to the
    caller's dict are not visible.
    """

    def __init__(self, properties: Mapping[str, str] | None = None) -> None:
        properties = dict(properties or {})
        for key, value in properties.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TypeError(
                    f"Environment entries must be str to str, got {key!r}: {value!r}"
                )
        self._properties = properties

    def get_property(self, key: str) -> str | None:
        return self._properties.get(key)

    def iter_properties(self, prefix: str = "") -> Iterator[tuple[str, str]]:
        for key, value in self._properties.items():
            if key.startswith(prefix):
                yield key, value

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"MapEnvironment(keys={len(self._properties)})"


class OsEnvironment(Environment):
    """Environment backed by OS environment variables.

    Variable names are translated to property keys: the optional prefix is
    stripped, the rest is lower-cased and ``__`` becomes the separator.
    ``APP_DB__HOST`` with prefix ``APP_`` is exposed as ``db.host``.
    Variables not starting with the prefix are not visible.
    """

    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        prefix: str = "",
        nested_delimiter: str = "__",
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._prefix = prefix.upper()
        self._nested_delimiter = nested_delimiter

    def to_key(self, variable: str) -> str | None:
        """Translate a variable name to a property key, or None if out of scope."""
        if not variable.upper().startswith(self._prefix):
            return None
        name = variable[len(self._prefix):]
        if not name:
            return None
        return name.lower().replace(self._nested_delimiter, SEPARATOR)

    def get_property(self, key: str) -> str | None:
        for variable, value in self._environ.items():
            if self.to_key(variable) == key:
                return value
        return None

    def iter_properties(self, prefix: str = "") -> Iterator[tuple[str, str]]:
        # Snapshot so concurrent os.environ changes don't break iteration
        for variable, value in list(self._environ.items()):
            key = self.to_key(variable)
            if key is not None and key.startswith(prefix):
                yield key, value

    def __repr__(self) -> str:
        return f"OsEnvironment(prefix={self._prefix!r})"

