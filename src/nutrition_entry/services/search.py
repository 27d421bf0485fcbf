"""Food search: one-shot lookups and keystroke-driven scheduling."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from nutrition_entry.adapters.off_client import FoodSearchClient
from nutrition_entry.domain.errors import SearchUnavailable
from nutrition_entry.domain.nutrition import MacroRecord
from nutrition_entry.services.cache import SearchCache
from nutrition_entry.services.normalizer import normalize_products

_logger = logging.getLogger(__name__)

SearchState = Literal["idle", "pending", "searching"]


@dataclass
class FoodSearchService:
    """Best-effort remote food search.

    Every failure mode (timeout, transport error, bad payload) yields an empty
    candidate list. Only successful lookups are cached.
    """

    client: FoodSearchClient
    cache: SearchCache
    page_size: int = 20
    timeout_seconds: float = 8.0
    min_query_length: int = 2
    cache_ttl_seconds: int = 3600

    async def search(self, query: str) -> list[MacroRecord]:
        """Return normalized candidates for a query."""
        cleaned = query.strip()
        if len(cleaned) < self.min_query_length:
            return []

        cache_key = f"off:search:{cleaned.lower()}:{self.page_size}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            products = await asyncio.wait_for(
                self.client.search_products(cleaned, page_size=self.page_size),
                timeout=self.timeout_seconds,
            )
        except TimeoutError:
            _logger.warning(
                "Food search timed out after %ss: query=%s",
                self.timeout_seconds,
                cleaned,
            )
            return []
        except SearchUnavailable as exc:
            _logger.warning("Food search unavailable: query=%s error=%s", cleaned, exc)
            return []
        except Exception:
            _logger.exception("Food search failed unexpectedly: query=%s", cleaned)
            return []

        candidates = normalize_products(products)
        self.cache.set(cache_key, candidates, ttl_seconds=self.cache_ttl_seconds)
        _logger.debug(
            "Food search: query=%s raw=%s candidates=%s",
            cleaned,
            len(products),
            len(candidates),
        )
        return candidates


@dataclass
class SearchScheduler:
    """Debounces query changes into at most one active search cycle.

    Each call to ``on_query_change`` starts a new generation and cancels the
    previous cycle, whether it is still waiting out the debounce window or
    already has a request in flight. Results are published only when their
    generation is still current.
    """

    search_service: FoodSearchService
    listener: Callable[[list[MacroRecord]], None] | None = None
    debounce_seconds: float = 0.5
    min_query_length: int = 2
    state: SearchState = field(default="idle", init=False)
    candidates: list[MacroRecord] = field(default_factory=list, init=False)
    _generation: int = field(default=0, init=False, repr=False)
    _task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)

    @property
    def generation(self) -> int:
        """Return the id of the most recent cycle."""
        return self._generation

    def on_query_change(self, text: str) -> None:
        """Supersede the active cycle and schedule a search for ``text``.

        Must be called from a running event loop.
        """
        self._generation += 1
        self._cancel_active()
        query = text.strip()
        if len(query) < self.min_query_length:
            self.state = "idle"
            self._publish([])
            return
        self.state = "pending"
        self._task = asyncio.get_running_loop().create_task(
            self._run_cycle(self._generation, query)
        )

    async def settle(self) -> None:
        """Wait until the active cycle, if any, has finished or been superseded."""
        while self._task is not None and not self._task.done():
            task = self._task
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise

    async def aclose(self) -> None:
        """Cancel any active cycle."""
        self._generation += 1
        task = self._task
        self._cancel_active()
        self.state = "idle"
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def _run_cycle(self, generation: int, query: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if generation != self._generation:
            return
        self.state = "searching"
        results = await self.search_service.search(query)
        if generation != self._generation:
            _logger.debug(
                "Discarding stale search results: generation=%s current=%s",
                generation,
                self._generation,
            )
            return
        self.state = "idle"
        self._publish(results)

    def _cancel_active(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _publish(self, results: list[MacroRecord]) -> None:
        self.candidates = results
        if self.listener is not None:
            self.listener(results)
