"""Domain models for the food diary."""

from dataclasses import dataclass
from datetime import date, time
from enum import Enum

from food_diary.domain.errors import ValidationError
from food_diary.domain.nutrition import NutrientAmount, NutrientProfile


@dataclass(frozen=True)
class FoodSnapshot:
    """Entry-owned copy of a food's nutrient data taken at log time."""

    description: str
    brand_owner: str | None
    nutrients: tuple[NutrientAmount, ...]

    @classmethod
    def from_profile(cls, profile: NutrientProfile) -> "FoodSnapshot":
        """Freeze the parts of a profile a log entry needs."""
        return cls(
            description=profile.description,
            brand_owner=profile.brand_owner,
            nutrients=tuple(profile.nutrients),
        )


@dataclass(frozen=True)
class NewLogEntry:
    """Log entry that has not been persisted yet."""

    date: date
    time: time
    amount_grams: int
    food_id: int
    snapshot: FoodSnapshot


@dataclass(frozen=True)
class LogEntry:
    """Persisted record of an amount of food eaten on a date."""

    id: int
    date: date
    time: time
    amount_grams: int
    food_id: int
    snapshot: FoodSnapshot

    @property
    def description(self) -> str:
        return self.snapshot.description

    @property
    def brand_owner(self) -> str | None:
        return self.snapshot.brand_owner

    @property
    def nutrients(self) -> tuple[NutrientAmount, ...]:
        return self.snapshot.nutrients


class LoadingState(Enum):
    """Load state of the diary for the active date."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"


class Direction(Enum):
    """Navigation direction between diary days."""

    PREVIOUS = "previous"
    NEXT = "next"

    @property
    def days(self) -> int:
        return -1 if self is Direction.PREVIOUS else 1


# Largest value the INTEGER amount column can hold.
MAX_AMOUNT_GRAMS = 2**63 - 1


def validate_amount(amount_grams: object) -> int:
    """Return the amount as whole grams or raise ValidationError."""
    if isinstance(amount_grams, bool) or not isinstance(amount_grams, int | float):
        raise ValidationError(f"Amount must be a number of grams, got {amount_grams!r}")
    if amount_grams <= 0:
        raise ValidationError(f"Amount must be positive, got {amount_grams}")
    if amount_grams > MAX_AMOUNT_GRAMS:
        raise ValidationError(f"Amount is too large, got {amount_grams}")
    if isinstance(amount_grams, float):
        if not amount_grams.is_integer():
            raise ValidationError(f"Amount must be whole grams, got {amount_grams}")
        return int(amount_grams)
    return amount_grams
