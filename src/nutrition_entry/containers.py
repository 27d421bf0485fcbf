"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_entry.adapters.off_client import (
    FoodSearchClient,
    HttpxOpenFoodFactsClient,
)
from nutrition_entry.adapters.supabase_entry_repository import SupabaseEntryRepository
from nutrition_entry.adapters.supabase_template_repository import (
    SupabaseTemplateRepository,
)
from nutrition_entry.config import Settings
from nutrition_entry.services.cache import InMemorySearchCache
from nutrition_entry.services.entries import EntryComposer
from nutrition_entry.services.search import FoodSearchService
from nutrition_entry.services.templates import TemplateCache


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    search_client: FoodSearchClient
    search_service: FoodSearchService
    template_cache: TemplateCache
    entry_composer: EntryComposer
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    search_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
        timeout_seconds=resolved_settings.search_timeout_seconds,
    )
    search_service = FoodSearchService(
        client=search_client,
        cache=InMemorySearchCache(),
        page_size=resolved_settings.search_page_size,
        timeout_seconds=resolved_settings.search_timeout_seconds,
        min_query_length=resolved_settings.min_query_length,
        cache_ttl_seconds=resolved_settings.search_cache_ttl_seconds,
    )
    template_cache = TemplateCache(SupabaseTemplateRepository(supabase_client))
    entry_composer = EntryComposer(
        repository=SupabaseEntryRepository(supabase_client),
        template_cache=template_cache,
    )

    async def close_resources() -> None:
        await search_client.close()

    return AppContainer(
        settings=resolved_settings,
        search_client=search_client,
        search_service=search_service,
        template_cache=template_cache,
        entry_composer=entry_composer,
        close_resources=close_resources,
    )
