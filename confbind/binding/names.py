"""Property name parsing and nesting.

Relative property names are split into path segments before binding:
dot-separated names become dict keys and kebab-case names are
canonicalized to snake_case so they line up with Python field names.

    parse_name("pool.max-connections") == ["pool", "max_connections"]
"""

from collections.abc import Iterable
from typing import Any

from confbind.environment import SEPARATOR


class PropertyNameError(ValueError):
    """A property name or set of names could not be turned into a tree."""

    pass


def canonical(name: str) -> str:
    """Canonical form of a single name element (kebab-case to snake_case)."""
    return name.replace("-", "_")


def parse_name(name: str) -> list[str]:
    """Split a relative property name into canonical path segments."""
    elements = name.split(SEPARATOR)
    if not all(elements):
        raise PropertyNameError(f"malformed property name '{name}'")
    return [canonical(element) for element in elements]


def nest(entries: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Build a nested dict tree from (relative name, value) pairs.

    Two names that only differ in kebab-case vs snake_case are the same
    property, so supplying both is an error rather than last-one-wins.

    Raises:
        PropertyNameError: On malformed names, conflicting shapes or duplicates
    """
    root: dict[str, Any] = {}
    for name, value in entries:
        segments = parse_name(name)
        node = root
        for segment in segments[:-1]:
            existing = node.setdefault(segment, {})
            if not isinstance(existing, dict):
                raise PropertyNameError(f"'{name}' is both a value and a group")
            node = existing

        leaf = segments[-1]
        existing = node.get(leaf)
        if isinstance(existing, dict):
            raise PropertyNameError(f"'{name}' is both a value and a group")
        if existing is not None:
            raise PropertyNameError(
                f"'{name}' duplicates another property with the same canonical name"
            )
        node[leaf] = value
    return root
