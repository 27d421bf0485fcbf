"""Shared helpers for Supabase-backed repositories."""

from typing import Any, Protocol

import httpx
from postgrest.exceptions import APIError

from nutrition_entry.domain.errors import PersistenceError


class _Executable(Protocol):
    def execute(self) -> Any:
        """Run the built query."""


def execute(query: _Executable, action: str) -> Any:
    """Execute a query, converting storage failures to ``PersistenceError``."""
    try:
        return query.execute()
    except (APIError, httpx.HTTPError) as exc:
        raise PersistenceError(f"Failed to {action}") from exc
