# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Lenient lookup over decoded JSON objects with drifting key names."""

from collections.abc import Mapping
from typing import Any


def normalize_key(key: str) -> str:
    """Normalize a JSON key for case-insensitive lookup.

    ``ObjectName``, ``objectName`` and ``object_name`` all normalize to
    ``objectname``.

    Args:
        key: Raw key from a decoded JSON object.

    Returns:
        Casefolded key without underscores or hyphens.
    """
    return key.replace("_", "").replace("-", "").casefold()


class LenientObject:
    """Read fields from a decoded JSON object regardless of key casing.

    When several raw keys normalize to the same name, the first one in
    document order wins.
    """

    def __init__(self, raw: Mapping[str, Any]) -> None:
        self._values: dict[str, Any] = {}
        for key, value in raw.items():
            self._values.setdefault(normalize_key(str(key)), value)

    @classmethod
    def coerce(cls, value: Any) -> "LenientObject":
        """Wrap ``value`` if it is a mapping, else return an empty object."""
        if isinstance(value, Mapping):
            return cls(value)
        return cls({})

    def get(self, *names: str) -> Any:
        """Return the first present value among ``names``, else ``None``."""
        for name in names:
            normalized = normalize_key(name)
            if normalized in self._values:
                return self._values[normalized]
        return None

    def get_str(self, *names: str) -> str:
        """Return a scalar field as text; absent or structured values are empty."""
        value = self.get(*names)
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return ""

    def get_list(self, *names: str) -> list[Any]:
        value = self.get(*names)
        if isinstance(value, list):
            return value
        return []
