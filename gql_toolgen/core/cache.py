"""Per-compilation memoization of compiled validators."""

import logging
from collections.abc import Hashable
from typing import Any

logger = logging.getLogger(__name__)


class SchemaCache:
    """Maps type keys to compiled validators for one compilation run.

    Keys are tuples such as ``("enum", "Status")`` or
    ``("output", "User", depth, ancestors)``. Type names are only unique
    within one schema, so each schema gets its own cache.

    Also collects diagnostics (truncations, fallbacks) so callers can
    inspect them after compiling.
    """

    def __init__(self):
        self._entries: dict[Hashable, Any] = {}
        self.diagnostics: list[str] = []

    def get(self, key: Hashable) -> Any | None:
        return self._entries.get(key)

    def set(self, key: Hashable, value: Any) -> Any:
        self._entries[key] = value
        return value

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self):
        """Drop all cached validators and diagnostics."""
        self._entries.clear()
        self.diagnostics.clear()

    def warn(self, message: str, *args: Any):
        """Record an advisory diagnostic and log it."""
        text = message % args if args else message
        self.diagnostics.append(text)
        logger.warning(text)
