"""Nutrition domain models."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CALORIES_PER_GRAM_PROTEIN = 4
CALORIES_PER_GRAM_CARBS = 4
CALORIES_PER_GRAM_FAT = 9
MACRO_DISCREPANCY_KCAL = 50


@dataclass(frozen=True)
class MacroRecord:
    """Canonical nutrition facts for a food, as surfaced to the user."""

    name: str
    calories: int
    protein: float
    carbs: float
    fat: float
    serving_size: str = "100g"
    source_id: str | None = None


@dataclass(frozen=True)
class MacroCheck:
    """Advisory comparison of entered calories against macro-derived calories."""

    entered_calories: int
    computed_calories: float
    difference: float
    flagged: bool


def round_half_up(value: float, places: int = 0) -> float:
    """Round a value half away from zero to the given number of places."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_to_whole(value: float) -> int:
    """Round a value to the nearest whole unit."""
    return int(round_half_up(value))


def check_macro_consistency(
    calories: int, protein: float, carbs: float, fat: float
) -> MacroCheck:
    """Compare entered calories with the 4/4/9 estimate from macros."""
    computed = (
        protein * CALORIES_PER_GRAM_PROTEIN
        + carbs * CALORIES_PER_GRAM_CARBS
        + fat * CALORIES_PER_GRAM_FAT
    )
    difference = abs(calories - computed)
    return MacroCheck(
        entered_calories=calories,
        computed_calories=computed,
        difference=difference,
        flagged=difference > MACRO_DISCREPANCY_KCAL,
    )
