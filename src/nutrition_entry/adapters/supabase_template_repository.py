"""Supabase implementation of the food template store."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from nutrition_entry.adapters.supabase_support import execute
from nutrition_entry.domain.errors import PersistenceError
from nutrition_entry.domain.templates import FoodTemplate
from nutrition_entry.services.templates import TemplateRepository

_TABLE = "food_templates"
_INCREMENT_RPC = "increment_food_template_use"


@dataclass
class SupabaseTemplateRepository(TemplateRepository):
    """Supabase-backed repository for food templates."""

    client: Client

    def list_templates(self, owner_id: UUID) -> list[FoodTemplate]:
        """Return all templates for an owner."""
        response = execute(
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(owner_id))
            .order("use_count", desc=True)
            .order("name")
            .limit(1000),
            "list food templates",
        )
        return [_parse_template(row) for row in response.data or []]

    def get_template(self, template_id: UUID) -> FoodTemplate | None:
        """Return a template by id, if present."""
        response = execute(
            self.client.table(_TABLE)
            .select("*")
            .eq("id", str(template_id))
            .limit(1),
            "fetch food template",
        )
        if not response.data:
            return None
        return _parse_template(response.data[0])

    def create_template(  # noqa: PLR0913
        self,
        owner_id: UUID,
        name: str,
        calories: int,
        protein: float | None,
        carbs: float | None,
        fat: float | None,
    ) -> FoodTemplate:
        """Insert a template and return it."""
        response = execute(
            self.client.table(_TABLE).insert(
                {
                    "user_id": str(owner_id),
                    "name": name,
                    "calories": calories,
                    "protein": protein,
                    "carbs": carbs,
                    "fat": fat,
                    "use_count": 0,
                }
            ),
            "create food template",
        )
        if not response.data:
            raise PersistenceError("Failed to create food template")
        return _parse_template(response.data[0])

    def increment_use(self, template_id: UUID) -> None:
        """Increment the use count in a single server-side statement."""
        execute(
            self.client.rpc(_INCREMENT_RPC, {"template_id": str(template_id)}),
            "increment food template use",
        )

    def delete_template(self, template_id: UUID) -> None:
        """Delete a template; a missing row is not an error."""
        execute(
            self.client.table(_TABLE).delete().eq("id", str(template_id)),
            "delete food template",
        )


def _parse_template(row: dict[str, object]) -> FoodTemplate:
    """Parse a template row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return FoodTemplate(
        id=UUID(str(row["id"])),
        owner_id=UUID(str(row["user_id"])),
        name=str(row.get("name") or ""),
        calories=int(row.get("calories") or 0),
        protein=float(row.get("protein") or 0.0),
        carbs=float(row.get("carbs") or 0.0),
        fat=float(row.get("fat") or 0.0),
        use_count=int(row.get("use_count") or 0),
        created_at=created_at,
    )
