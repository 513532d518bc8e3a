"""Legacy binding capability: flat sub-property lookup.

The legacy capability cannot bind typed structures. It only hands back
every entry under a prefix as a flat string mapping.
"""

from confbind.environment import Environment


class RelaxedPropertyResolver:
    """Sub-property lookup over an Environment."""

    def __init__(self, environment: Environment) -> None:
        self._environment = environment

    def get_property(self, key: str, default: str | None = None) -> str | None:
        """Get the value for an exact key."""
        value = self._environment.get_property(key)
        return default if value is None else value

    def get_sub_properties(self, prefix: str) -> dict[str, str]:
        """Get all entries whose key starts with the literal prefix.

        Keys of the returned dict are relative: the prefix is stripped.
        The prefix is used as given, so callers must include the trailing
        separator themselves.

        Args:
            prefix: Literal key prefix, e.g. "db."

        Returns:
            New dict of relative key to value (empty if nothing matches)
        """
        return {
            key[len(prefix):]: value
            for key, value in self._environment.iter_properties(prefix)
        }
