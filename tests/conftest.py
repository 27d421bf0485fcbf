"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import UUID, uuid4

import pytest

from nutrition_entry.adapters.off_client import FoodSearchClient
from nutrition_entry.config import Settings
from nutrition_entry.containers import AppContainer
from nutrition_entry.domain.entries import EntryDraft, NutritionLogEntry
from nutrition_entry.domain.errors import PersistenceError
from nutrition_entry.domain.templates import FoodTemplate
from nutrition_entry.services.cache import InMemorySearchCache
from nutrition_entry.services.entries import EntryComposer, EntryRepository
from nutrition_entry.services.search import FoodSearchService
from nutrition_entry.services.templates import TemplateCache, TemplateRepository

BANANA_PRODUCT: dict[str, object] = {
    "product_name": "Banana",
    "nutriments": {
        "energy-kcal_100g": 89,
        "proteins_100g": 1.1,
        "carbohydrates_100g": 22.8,
        "fat_100g": 0.3,
    },
    "serving_size": "1 medium (118g)",
}


@dataclass
class FakeSearchClient(FoodSearchClient):
    """Fake food search client with canned products per query."""

    products: dict[str, list[dict[str, object]]] = field(
        default_factory=lambda: {"banana": [BANANA_PRODUCT]}
    )
    delays: dict[str, float] = field(default_factory=dict)
    error: Exception | None = None
    queries: list[str] = field(default_factory=list)

    async def search_products(
        self, query: str, page_size: int = 20
    ) -> list[dict[str, object]]:
        self.queries.append(query)
        delay = self.delays.get(query, 0.0)
        if delay:
            await asyncio.sleep(delay)
        if self.error is not None:
            raise self.error
        return list(self.products.get(query, []))


@dataclass
class InMemoryTemplateRepository(TemplateRepository):
    """In-memory template repository for tests."""

    templates: dict[UUID, FoodTemplate] = field(default_factory=dict)
    fail_writes: bool = False
    fail_increments: bool = False

    def list_templates(self, owner_id: UUID) -> list[FoodTemplate]:
        return [t for t in self.templates.values() if t.owner_id == owner_id]

    def get_template(self, template_id: UUID) -> FoodTemplate | None:
        return self.templates.get(template_id)

    def create_template(  # noqa: PLR0913
        self,
        owner_id: UUID,
        name: str,
        calories: int,
        protein: float | None,
        carbs: float | None,
        fat: float | None,
    ) -> FoodTemplate:
        if self.fail_writes:
            raise PersistenceError("Failed to create food template")
        template = FoodTemplate(
            id=uuid4(),
            owner_id=owner_id,
            name=name,
            calories=calories,
            protein=float(protein or 0.0),
            carbs=float(carbs or 0.0),
            fat=float(fat or 0.0),
            use_count=0,
            created_at=datetime.now(tz=UTC),
        )
        self.templates[template.id] = template
        return template

    def increment_use(self, template_id: UUID) -> None:
        if self.fail_increments:
            raise PersistenceError("Failed to increment food template use")
        current = self.templates.get(template_id)
        if current is None:
            return
        self.templates[template_id] = FoodTemplate(
            id=current.id,
            owner_id=current.owner_id,
            name=current.name,
            calories=current.calories,
            protein=current.protein,
            carbs=current.carbs,
            fat=current.fat,
            use_count=current.use_count + 1,
            created_at=current.created_at,
        )

    def delete_template(self, template_id: UUID) -> None:
        self.templates.pop(template_id, None)


@dataclass
class InMemoryEntryRepository(EntryRepository):
    """In-memory entry repository for tests."""

    entries: list[NutritionLogEntry] = field(default_factory=list)
    fail_writes: bool = False

    def create_entry(self, draft: EntryDraft) -> NutritionLogEntry:
        if self.fail_writes:
            raise PersistenceError("Failed to create nutrition entry")
        entry = NutritionLogEntry(
            id=uuid4(),
            owner_id=draft.owner_id,
            day=draft.day,
            label=draft.label,
            calories=draft.calories,
            protein=draft.protein,
            carbs=draft.carbs,
            fat=draft.fat,
            water_ml=draft.water_ml,
            template_ref=draft.template_ref,
            logged_at=datetime.now(tz=UTC),
        )
        self.entries.append(entry)
        return entry


def make_template(owner_id: UUID, **overrides: object) -> FoodTemplate:
    values: dict[str, object] = {
        "id": uuid4(),
        "owner_id": owner_id,
        "name": "Greek Yogurt",
        "calories": 120,
        "protein": 10.4,
        "carbs": 6.5,
        "fat": 4.2,
        "use_count": 0,
    }
    values.update(overrides)
    return FoodTemplate(**values)  # type: ignore[arg-type]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        api_token="api-token",
        search_debounce_seconds=0.01,
    )


@pytest.fixture
def search_client() -> FakeSearchClient:
    return FakeSearchClient()


@pytest.fixture
def template_repository() -> InMemoryTemplateRepository:
    return InMemoryTemplateRepository()


@pytest.fixture
def entry_repository() -> InMemoryEntryRepository:
    return InMemoryEntryRepository()


@pytest.fixture
def container(
    settings: Settings,
    search_client: FakeSearchClient,
    template_repository: InMemoryTemplateRepository,
    entry_repository: InMemoryEntryRepository,
) -> AppContainer:
    search_service = FoodSearchService(
        client=search_client,
        cache=InMemorySearchCache(),
        page_size=settings.search_page_size,
        timeout_seconds=settings.search_timeout_seconds,
    )
    template_cache = TemplateCache(template_repository)
    entry_composer = EntryComposer(
        repository=entry_repository,
        template_cache=template_cache,
        today=lambda: date(2026, 10, 19),
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        search_client=search_client,
        search_service=search_service,
        template_cache=template_cache,
        entry_composer=entry_composer,
        close_resources=close_resources,
    )

