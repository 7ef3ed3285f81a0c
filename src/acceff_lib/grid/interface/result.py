# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from collections.abc import Iterator
from typing import Any, Self


class GridResult:
    """
    Result of a Grid command: an ordered list of key/value entries.

    An empty result signals that the command produced nothing
    (e.g. listing of a path that does not exist).
    """

    def __init__(self, entries: list[dict[str, str]] | None = None):
        self._entries = [
            {str(k): str(v) for k, v in entry.items()} for entry in (entries or [])
        ]

    def getKey(self, index: int, key: str) -> str:
        """
        Get the value of `key` in the entry at `index`.

        Returns an empty string if the entry or the key does not exist.
        """
        if not 0 <= index < len(self._entries):
            return ""
        return self._entries[index].get(key, "")

    def names(self) -> list[str]:
        """Get the 'name' field of all entries."""
        return [e["name"] for e in self._entries if "name" in e]

    def __iter__(self) -> Iterator[dict[str, str]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"GridResult({self._entries!r})"

    @classmethod
    def fromJson(cls, data: Any) -> Self:
        """
        Build a result from the decoded JSON output of a Grid command.

        Accepts either a dictionary with a 'results' list or the list itself.
        """
        if isinstance(data, dict):
            data = data.get("results", [])
        if not isinstance(data, list):
            return cls()
        return cls([e for e in data if isinstance(e, dict)])
