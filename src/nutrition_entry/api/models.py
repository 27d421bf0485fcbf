"""Pydantic models for API request payloads."""

from datetime import date
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, Field

from nutrition_entry.domain.entries import ManualInput
from nutrition_entry.domain.nutrition import MacroRecord


class ManualSourcePayload(BaseModel):
    """Macro values entered by hand."""

    kind: Literal["manual"] = "manual"
    label: str | None = None
    calories: int
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)

    def to_domain(self) -> ManualInput:
        """Return the domain manual input."""
        return ManualInput(
            label=self.label,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
        )


class SearchSourcePayload(BaseModel):
    """A search candidate chosen by the user."""

    kind: Literal["search"] = "search"
    name: str = Field(min_length=1)
    calories: int = Field(ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    serving_size: str = "100g"
    source_id: str | None = None

    def to_domain(self) -> MacroRecord:
        """Return the domain macro record."""
        return MacroRecord(
            name=self.name,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            serving_size=self.serving_size,
            source_id=self.source_id,
        )


class TemplateSourcePayload(BaseModel):
    """A saved template chosen by the user."""

    kind: Literal["template"] = "template"
    template_id: UUID


EntrySourcePayload = Annotated[
    ManualSourcePayload | SearchSourcePayload | TemplateSourcePayload,
    Field(discriminator="kind"),
]


class ComposeEntryRequest(BaseModel):
    """Request to compose and persist a nutrition log entry."""

    source: EntrySourcePayload
    save_as_template: bool = False
    day: date | None = None


class CreateTemplateRequest(BaseModel):
    """Request to save a food template directly."""

    name: str = Field(min_length=1, max_length=80)
    calories: int = Field(ge=0)
    protein: float | None = Field(default=None, ge=0)
    carbs: float | None = Field(default=None, ge=0)
    fat: float | None = Field(default=None, ge=0)
