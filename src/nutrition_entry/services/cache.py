"""Caching for food search results."""

from collections import OrderedDict
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from nutrition_entry.domain.nutrition import MacroRecord


class SearchCache(Protocol):
    """Cache interface for normalized search results."""

    def get(self, key: str) -> list[MacroRecord] | None:
        """Return cached candidates if present and not expired."""

    def set(self, key: str, value: list[MacroRecord], ttl_seconds: int) -> None:
        """Store candidates with a TTL in seconds."""


@dataclass
class _CacheEntry:
    value: list[MacroRecord]
    expires_at: datetime


class InMemorySearchCache(SearchCache):
    """Process-local TTL cache holding at most ``max_entries`` queries."""

    def __init__(self, max_entries: int = 256) -> None:
        self.max_entries = max_entries
        self._entries: OrderedDict[str, _CacheEntry] = OrderedDict()

    def get(self, key: str) -> list[MacroRecord] | None:
        """Return cached candidates if they haven't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        self._entries.move_to_end(key)
        return list(entry.value)

    def set(self, key: str, value: list[MacroRecord], ttl_seconds: int) -> None:
        """Store candidates, evicting the least recently used query when full."""
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=list(value), expires_at=expires_at)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
