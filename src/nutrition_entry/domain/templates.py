"""Domain models for personal food templates ("My Foods")."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class FoodTemplate:
    """A reusable food saved by its owner, with usage tracking."""

    id: UUID
    owner_id: UUID
    name: str
    calories: int
    protein: float
    carbs: float
    fat: float
    use_count: int
    created_at: datetime | None = None
