"""Composition of nutrition log entries from search, template or manual input."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from nutrition_entry.domain.entries import (
    CompositionResult,
    CompositionSource,
    EntryDraft,
    ManualInput,
    NutritionLogEntry,
    TemplateSaveStatus,
)
from nutrition_entry.domain.errors import PersistenceError
from nutrition_entry.domain.nutrition import (
    MacroRecord,
    check_macro_consistency,
    round_to_whole,
)
from nutrition_entry.domain.templates import FoodTemplate
from nutrition_entry.services.templates import TemplateCache

_logger = logging.getLogger(__name__)

QUICK_PRESETS: tuple[ManualInput, ...] = (
    ManualInput(label="Protein Shake", calories=150, protein=30, carbs=5, fat=2),
    ManualInput(
        label="Chicken Breast (100g)", calories=165, protein=31, carbs=0, fat=4
    ),
    ManualInput(label="Rice (1 cup)", calories=205, protein=4, carbs=45, fat=0),
)


class EntryRepository(Protocol):
    """Persistence interface for nutrition log entries."""

    def create_entry(self, draft: EntryDraft) -> NutritionLogEntry:
        """Persist an entry and return it; raise ``PersistenceError`` on failure."""


@dataclass(frozen=True)
class _Extracted:
    name: str | None
    calories: int
    protein: int
    carbs: int
    fat: int


@dataclass
class EntryComposer:
    """Turns a chosen source into exactly one persisted entry.

    ``calories <= 0`` or a negative macro rejects the composition before
    anything is written. Counting a template source as used and a requested
    template save both run after the entry is persisted; their failures are
    logged and never undo the entry.
    """

    repository: EntryRepository
    template_cache: TemplateCache
    today: Callable[[], date] = field(default=lambda: datetime.now(tz=UTC).date())

    def compose(
        self,
        owner_id: UUID,
        source: CompositionSource,
        save_as_template: bool = False,
        day: date | None = None,
    ) -> CompositionResult:
        """Validate and persist an entry built from ``source``."""
        values = _extract(source)
        macro_check = check_macro_consistency(
            values.calories, values.protein, values.carbs, values.fat
        )
        _logger.debug("Composing entry: owner=%s state=validating", owner_id)
        rejection_reason = _rejection_reason(values)
        if rejection_reason is not None:
            _logger.debug("Composing entry: owner=%s state=rejected", owner_id)
            return CompositionResult(
                status="rejected",
                macro_check=macro_check,
                rejection_reason=rejection_reason,
            )

        _logger.debug("Composing entry: owner=%s state=persisting", owner_id)
        entry = self.repository.create_entry(
            EntryDraft(
                owner_id=owner_id,
                day=day or self.today(),
                label=values.name,
                calories=values.calories,
                protein=values.protein,
                carbs=values.carbs,
                fat=values.fat,
                water_ml=0,
                template_ref=None,
            )
        )
        _logger.info(
            "Entry persisted: owner=%s entry=%s calories=%s",
            owner_id,
            entry.id,
            entry.calories,
        )
        if isinstance(source, FoodTemplate):
            self._count_template_use(owner_id, source)

        template_status: TemplateSaveStatus = "not_requested"
        template: FoodTemplate | None = None
        if save_as_template:
            template_status, template = self._save_template(owner_id, values)

        return CompositionResult(
            status="persisted",
            macro_check=macro_check,
            entry=entry,
            template_status=template_status,
            template=template,
        )

    def prefill_from_template(
        self, owner_id: UUID, template_id: UUID
    ) -> ManualInput | None:
        """Count a template selection and return the manual-entry state it fills."""
        template = self.template_cache.get(owner_id, template_id)
        if template is None:
            return None
        self.template_cache.increment_use(template.id)
        return _to_manual_input(template.name, template)

    @staticmethod
    def prefill_from_candidate(candidate: MacroRecord) -> ManualInput:
        """Return the manual-entry state for a chosen search candidate."""
        return _to_manual_input(candidate.name, candidate)

    def _count_template_use(self, owner_id: UUID, template: FoodTemplate) -> None:
        try:
            self.template_cache.increment_use(template.id)
        except PersistenceError:
            _logger.warning(
                "Template use count failed after entry was persisted: "
                "owner=%s template=%s",
                owner_id,
                template.id,
                exc_info=True,
            )

    def _save_template(
        self, owner_id: UUID, values: _Extracted
    ) -> tuple[TemplateSaveStatus, FoodTemplate | None]:
        if not values.name:
            _logger.info("Template save skipped: owner=%s has no name", owner_id)
            return "skipped", None
        try:
            template = self.template_cache.save(
                owner_id,
                values.name,
                values.calories,
                values.protein,
                values.carbs,
                values.fat,
            )
        except PersistenceError:
            _logger.warning(
                "Template save failed after entry was persisted: owner=%s",
                owner_id,
                exc_info=True,
            )
            return "failed", None
        return "saved", template


def _extract(source: CompositionSource) -> _Extracted:
    if isinstance(source, ManualInput):
        name = source.label
    else:
        name = source.name
    name = name.strip() if name else None
    return _Extracted(
        name=name or None,
        calories=round_to_whole(source.calories),
        protein=round_to_whole(source.protein),
        carbs=round_to_whole(source.carbs),
        fat=round_to_whole(source.fat),
    )


def _rejection_reason(values: _Extracted) -> str | None:
    if values.calories <= 0:
        return "calories must be greater than zero"
    if min(values.protein, values.carbs, values.fat) < 0:
        return "macros must not be negative"
    return None


def _to_manual_input(label: str, source: MacroRecord | FoodTemplate) -> ManualInput:
    return ManualInput(
        label=label,
        calories=round_to_whole(source.calories),
        protein=round_to_whole(source.protein),
        carbs=round_to_whole(source.carbs),
        fat=round_to_whole(source.fat),
    )
