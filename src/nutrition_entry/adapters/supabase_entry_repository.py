"""Supabase repository for nutrition log entries."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from nutrition_entry.adapters.supabase_support import execute
from nutrition_entry.domain.entries import EntryDraft, NutritionLogEntry
from nutrition_entry.domain.errors import PersistenceError
from nutrition_entry.services.entries import EntryRepository


@dataclass
class SupabaseEntryRepository(EntryRepository):
    """Supabase implementation for nutrition log entries."""

    client: Client

    def create_entry(self, draft: EntryDraft) -> NutritionLogEntry:
        """Insert an entry row and return the stored entry."""
        logged_at = datetime.now(tz=UTC)
        response = execute(
            self.client.table("nutrition_entries").insert(
                {
                    "user_id": str(draft.owner_id),
                    "day": draft.day.isoformat(),
                    "label": draft.label,
                    "calories": draft.calories,
                    "protein": draft.protein,
                    "carbs": draft.carbs,
                    "fat": draft.fat,
                    "water_ml": draft.water_ml,
                    "meal_template_id": (
                        str(draft.template_ref) if draft.template_ref else None
                    ),
                    "logged_at": logged_at.isoformat(),
                }
            ),
            "create nutrition entry",
        )
        if not response.data:
            raise PersistenceError("Failed to create nutrition entry")
        return _parse_entry(response.data[0])


def _parse_entry(row: dict[str, object]) -> NutritionLogEntry:
    template_ref = row.get("meal_template_id")
    return NutritionLogEntry(
        id=UUID(str(row["id"])),
        owner_id=UUID(str(row["user_id"])),
        day=date.fromisoformat(str(row["day"])),
        label=row.get("label"),
        calories=int(row.get("calories") or 0),
        protein=int(row.get("protein") or 0),
        carbs=int(row.get("carbs") or 0),
        fat=int(row.get("fat") or 0),
        water_ml=int(row.get("water_ml") or 0),
        template_ref=UUID(str(template_ref)) if template_ref else None,
        logged_at=datetime.fromisoformat(str(row["logged_at"])),
    )
