"""Normalization of raw food search records into macro records."""

import math
from collections.abc import Iterable, Mapping

from nutrition_entry.domain.nutrition import MacroRecord, round_half_up, round_to_whole

MAX_NAME_LENGTH = 80
DEFAULT_SERVING_SIZE = "100g"

# Candidate nutriment keys per metric, tried in order. Per-100g values win
# over the generic (as-sold) values.
NUTRIMENT_FALLBACKS: dict[str, tuple[str, ...]] = {
    "calories": ("energy-kcal_100g", "energy-kcal"),
    "protein": ("proteins_100g", "proteins"),
    "carbs": ("carbohydrates_100g", "carbohydrates"),
    "fat": ("fat_100g", "fat"),
}


def normalize_products(products: Iterable[Mapping[str, object]]) -> list[MacroRecord]:
    """Convert raw products to macro records, dropping unusable ones.

    Input order is preserved.
    """
    records: list[MacroRecord] = []
    for product in products:
        record = normalize_product(product)
        if record is not None:
            records.append(record)
    return records


def normalize_product(product: Mapping[str, object]) -> MacroRecord | None:
    """Return a macro record for one raw product, or None when unusable."""
    name = product.get("product_name")
    if not isinstance(name, str) or not name.strip():
        return None

    nutriments = product.get("nutriments")
    if not isinstance(nutriments, Mapping):
        nutriments = {}

    calories = round_to_whole(resolve_nutriment(nutriments, "calories"))
    if calories <= 0:
        return None

    serving_size = product.get("serving_size")
    code = product.get("code")
    return MacroRecord(
        name=name[:MAX_NAME_LENGTH],
        calories=calories,
        protein=round_half_up(resolve_nutriment(nutriments, "protein"), 1),
        carbs=round_half_up(resolve_nutriment(nutriments, "carbs"), 1),
        fat=round_half_up(resolve_nutriment(nutriments, "fat"), 1),
        serving_size=(
            serving_size
            if isinstance(serving_size, str) and serving_size.strip()
            else DEFAULT_SERVING_SIZE
        ),
        source_id=str(code) if code else None,
    )


def resolve_nutriment(nutriments: Mapping[str, object], metric: str) -> float:
    """Return the first positive value among the metric's fallback keys, else 0."""
    for key in NUTRIMENT_FALLBACKS[metric]:
        value = _to_float(nutriments.get(key))
        if value is not None and value > 0:
            return value
    return 0.0


def _to_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value)
        except ValueError:
            return None
    else:
        return None
    return result if math.isfinite(result) else None
