"""Services for the personal food template cache ("My Foods")."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutrition_entry.domain.templates import FoodTemplate


class TemplateRepository(Protocol):
    """Persistence interface for food templates.

    Implementations raise ``PersistenceError`` for any storage failure.
    """

    def list_templates(self, owner_id: UUID) -> list[FoodTemplate]:
        """Return all templates owned by a user."""

    def get_template(self, template_id: UUID) -> FoodTemplate | None:
        """Return a template by id, if present."""

    def create_template(  # noqa: PLR0913
        self,
        owner_id: UUID,
        name: str,
        calories: int,
        protein: float | None,
        carbs: float | None,
        fat: float | None,
    ) -> FoodTemplate:
        """Create a template with a zero use count and return it."""

    def increment_use(self, template_id: UUID) -> None:
        """Atomically add one to a template's use count."""

    def delete_template(self, template_id: UUID) -> None:
        """Delete a template; absent ids are ignored."""


@dataclass
class TemplateCache:
    """Owner-scoped CRUD and usage tracking for food templates.

    Duplicate names are allowed: every save appends a new template. Storage
    errors propagate unchanged and are never retried here.
    """

    repository: TemplateRepository

    def list(self, owner_id: UUID) -> list[FoodTemplate]:
        """Return the owner's templates, most used first."""
        return _rank(self.repository.list_templates(owner_id))

    def get(self, owner_id: UUID, template_id: UUID) -> FoodTemplate | None:
        """Return a template only when it belongs to the owner."""
        template = self.repository.get_template(template_id)
        if template is None or template.owner_id != owner_id:
            return None
        return template

    def save(  # noqa: PLR0913
        self,
        owner_id: UUID,
        name: str,
        calories: int,
        protein: float | None = None,
        carbs: float | None = None,
        fat: float | None = None,
    ) -> FoodTemplate:
        """Append a new template for the owner."""
        return self.repository.create_template(
            owner_id, name, calories, protein, carbs, fat
        )

    def increment_use(self, template_id: UUID) -> None:
        """Record that a template was chosen to prefill an entry."""
        self.repository.increment_use(template_id)

    def delete(self, template_id: UUID) -> None:
        """Remove a template; deleting an absent template is a no-op."""
        self.repository.delete_template(template_id)


def _rank(items: list[FoodTemplate]) -> list[FoodTemplate]:
    """Order by use count descending, then name."""
    return sorted(items, key=lambda item: (-item.use_count, item.name.lower()))
