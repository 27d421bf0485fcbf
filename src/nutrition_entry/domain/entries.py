"""Domain models for composing nutrition log entries."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal
from uuid import UUID

from nutrition_entry.domain.nutrition import MacroCheck, MacroRecord
from nutrition_entry.domain.templates import FoodTemplate

CompositionStatus = Literal["rejected", "persisted"]
TemplateSaveStatus = Literal["not_requested", "skipped", "saved", "failed"]


@dataclass(frozen=True)
class ManualInput:
    """Macro values typed in by the user, or prefilled from a selection."""

    label: str | None
    calories: int
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0


CompositionSource = MacroRecord | FoodTemplate | ManualInput


@dataclass(frozen=True)
class EntryDraft:
    """Validated entry values ready to be written."""

    owner_id: UUID
    day: date
    label: str | None
    calories: int
    protein: int
    carbs: int
    fat: int
    water_ml: int = 0
    template_ref: UUID | None = None


@dataclass(frozen=True)
class NutritionLogEntry:
    """A persisted nutrition log entry."""

    id: UUID
    owner_id: UUID
    day: date
    label: str | None
    calories: int
    protein: int
    carbs: int
    fat: int
    water_ml: int
    template_ref: UUID | None
    logged_at: datetime


@dataclass(frozen=True)
class CompositionResult:
    """Outcome of one composition attempt."""

    status: CompositionStatus
    macro_check: MacroCheck
    entry: NutritionLogEntry | None = None
    template_status: TemplateSaveStatus = "not_requested"
    template: FoodTemplate | None = None
    rejection_reason: str | None = None

    @property
    def persisted(self) -> bool:
        """Return True when an entry was written."""
        return self.status == "persisted"
