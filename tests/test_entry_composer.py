"""Tests for entry composition."""

from datetime import date
from uuid import uuid4

import pytest

from nutrition_entry.domain.entries import ManualInput
from nutrition_entry.domain.errors import PersistenceError
from nutrition_entry.domain.nutrition import MacroRecord
from nutrition_entry.services.entries import QUICK_PRESETS, EntryComposer
from nutrition_entry.services.templates import TemplateCache
from tests.conftest import (
    InMemoryEntryRepository,
    InMemoryTemplateRepository,
    make_template,
)

TODAY = date(2026, 10, 19)


def _composer(
    entries: InMemoryEntryRepository | None = None,
    templates: InMemoryTemplateRepository | None = None,
) -> EntryComposer:
    return EntryComposer(
        repository=entries or InMemoryEntryRepository(),
        template_cache=TemplateCache(templates or InMemoryTemplateRepository()),
        today=lambda: TODAY,
    )


def test_manual_entry_is_persisted() -> None:
    entries = InMemoryEntryRepository()
    owner_id = uuid4()

    result = _composer(entries).compose(
        owner_id,
        ManualInput(label="Lunch", calories=600, protein=40, carbs=60, fat=20),
    )

    assert result.persisted
    assert result.entry == entries.entries[0]
    assert result.entry.owner_id == owner_id
    assert result.entry.label == "Lunch"
    assert result.entry.day == TODAY
    assert result.entry.water_ml == 0
    assert result.entry.template_ref is None
    assert result.template_status == "not_requested"


def test_search_candidate_macros_round_to_integers() -> None:
    candidate = MacroRecord(
        name="Banana",
        calories=89,
        protein=1.1,
        carbs=22.8,
        fat=0.5,
        serving_size="1 medium (118g)",
    )

    result = _composer().compose(uuid4(), candidate)

    assert result.entry is not None
    assert (result.entry.protein, result.entry.carbs, result.entry.fat) == (1, 23, 1)
    assert result.entry.label == "Banana"


def test_template_source_keeps_no_provenance() -> None:
    owner_id = uuid4()
    template = make_template(owner_id)

    result = _composer().compose(owner_id, template)

    assert result.entry is not None
    assert result.entry.template_ref is None
    assert result.entry.calories == template.calories


@pytest.mark.parametrize("calories", [0, -50])
@pytest.mark.parametrize("save_as_template", [False, True])
def test_non_positive_calories_are_rejected_without_side_effects(
    calories: int, save_as_template: bool
) -> None:
    entries = InMemoryEntryRepository()
    templates = InMemoryTemplateRepository()

    result = _composer(entries, templates).compose(
        uuid4(),
        ManualInput(label="Shake", calories=calories, protein=10, carbs=5, fat=1),
        save_as_template=save_as_template,
    )

    assert result.status == "rejected"
    assert result.entry is None
    assert result.rejection_reason
    assert entries.entries == []
    assert templates.templates == {}


def test_save_as_template_creates_template() -> None:
    templates = InMemoryTemplateRepository()
    owner_id = uuid4()

    result = _composer(templates=templates).compose(
        owner_id,
        ManualInput(label="Protein Shake", calories=150, protein=30, carbs=5, fat=2),
        save_as_template=True,
    )

    assert result.template_status == "saved"
    assert result.template is not None
    assert result.template.name == "Protein Shake"
    assert result.template.use_count == 0
    assert list(templates.templates.values()) == [result.template]


def test_save_as_template_without_name_is_skipped() -> None:
    templates = InMemoryTemplateRepository()

    result = _composer(templates=templates).compose(
        uuid4(), ManualInput(label="  ", calories=300), save_as_template=True
    )

    assert result.persisted
    assert result.entry is not None
    assert result.entry.label is None
    assert result.template_status == "skipped"
    assert templates.templates == {}


def test_template_failure_does_not_roll_back_entry() -> None:
    entries = InMemoryEntryRepository()
    templates = InMemoryTemplateRepository(fail_writes=True)

    result = _composer(entries, templates).compose(
        uuid4(),
        ManualInput(label="Soup", calories=210, protein=9, carbs=30, fat=6),
        save_as_template=True,
    )

    assert result.persisted
    assert result.template_status == "failed"
    assert len(entries.entries) == 1


def test_entry_failure_propagates_and_skips_template() -> None:
    templates = InMemoryTemplateRepository()
    composer = _composer(InMemoryEntryRepository(fail_writes=True), templates)

    with pytest.raises(PersistenceError):
        composer.compose(
            uuid4(), ManualInput(label="Soup", calories=210), save_as_template=True
        )

    assert templates.templates == {}


def test_macro_discrepancy_is_flagged_but_not_blocking() -> None:
    result = _composer().compose(
        uuid4(), ManualInput(label="Odd", calories=100, protein=30, carbs=30, fat=10)
    )

    assert result.persisted
    assert result.macro_check.computed_calories == 330
    assert result.macro_check.flagged


def test_prefill_from_template_bumps_use_count() -> None:
    owner_id = uuid4()
    templates = InMemoryTemplateRepository()
    template = make_template(
        owner_id, name="Chicken wrap", calories=420, protein=31.6, carbs=40.4,
        fat=12.5, use_count=3,
    )
    templates.templates[template.id] = template
    composer = _composer(templates=templates)

    prefill = composer.prefill_from_template(owner_id, template.id)

    assert prefill == ManualInput(
        label="Chicken wrap", calories=420, protein=32, carbs=40, fat=13
    )
    assert templates.templates[template.id].use_count == 4


def test_prefill_from_foreign_template_is_refused() -> None:
    templates = InMemoryTemplateRepository()
    template = make_template(uuid4(), use_count=3)
    templates.templates[template.id] = template

    prefill = _composer(templates=templates).prefill_from_template(
        uuid4(), template.id
    )

    assert prefill is None
    assert templates.templates[template.id].use_count == 3


def test_prefill_from_candidate_rounds_macros() -> None:
    candidate = MacroRecord(name="Oats", calories=389, protein=16.9, carbs=66.3, fat=6.9)

    prefill = EntryComposer.prefill_from_candidate(candidate)

    assert prefill == ManualInput(label="Oats", calories=389, protein=17, carbs=66, fat=7)


def test_quick_presets_compose() -> None:
    entries = InMemoryEntryRepository()
    composer = _composer(entries)

    for preset in QUICK_PRESETS:
        assert composer.compose(uuid4(), preset).persisted

    assert [entry.label for entry in entries.entries] == [
        "Protein Shake",
        "Chicken Breast (100g)",
        "Rice (1 cup)",
    ]


def test_template_source_counts_use_after_persist() -> None:
    owner_id = uuid4()
    templates = InMemoryTemplateRepository()
    template = make_template(owner_id, use_count=3)
    templates.templates[template.id] = template

    result = _composer(templates=templates).compose(owner_id, template)

    assert result.persisted
    assert templates.templates[template.id].use_count == 4


def test_template_use_count_failure_does_not_fail_composition() -> None:
    owner_id = uuid4()
    entries = InMemoryEntryRepository()
    templates = InMemoryTemplateRepository(fail_increments=True)
    template = make_template(owner_id, use_count=3)
    templates.templates[template.id] = template

    result = _composer(entries, templates).compose(owner_id, template)

    assert result.persisted
    assert len(entries.entries) == 1
    assert templates.templates[template.id].use_count == 3


def test_rejected_template_source_is_not_counted() -> None:
    owner_id = uuid4()
    templates = InMemoryTemplateRepository()
    template = make_template(owner_id, calories=0, use_count=3)
    templates.templates[template.id] = template

    result = _composer(templates=templates).compose(owner_id, template)

    assert result.status == "rejected"
    assert templates.templates[template.id].use_count == 3


@pytest.mark.parametrize(
    "macros",
    [
        {"protein": -1},
        {"carbs": -5.5},
        {"fat": -0.6},
    ],
)
def test_negative_macros_are_rejected(macros: dict[str, float]) -> None:
    entries = InMemoryEntryRepository()

    result = _composer(entries).compose(
        uuid4(), ManualInput(label="Odd", calories=200, **macros)
    )

    assert result.status == "rejected"
    assert result.rejection_reason == "macros must not be negative"
    assert entries.entries == []


def test_tiny_negative_macro_rounding_to_zero_is_accepted() -> None:
    result = _composer().compose(
        uuid4(), ManualInput(label="Tea", calories=2, protein=-0.4)
    )

    assert result.persisted
    assert result.entry is not None
    assert result.entry.protein == 0
