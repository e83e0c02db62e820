"""Scale per-100g nutrient profiles to logged amounts."""

import math
from collections.abc import Iterable, Sequence

from food_diary.domain.diary import LogEntry
from food_diary.domain.nutrition import MacroTotals, NutrientAmount, ScaledNutrient

# Energy, Energy (Atwater General Factors), Energy (Atwater Specific Factors).
# Checked in order; the first one present is used.
CALORIE_NUTRIENT_IDS = (1008, 2047, 2048)

PROTEIN_ID = 1003
FAT_ID = 1004
CARBS_ID = 1005
FIBER_ID = 1079


def scale(
    nutrients: Iterable[NutrientAmount], amount_grams: float
) -> tuple[ScaledNutrient, ...]:
    """Return each nutrient's value for the given amount, rounded."""
    return tuple(
        ScaledNutrient(
            nutrient_id=nutrient.nutrient_id,
            name=nutrient.name,
            unit_name=nutrient.unit_name,
            value=_scaled_value(nutrient, amount_grams),
        )
        for nutrient in nutrients
    )


def total_calories(nutrients: Sequence[NutrientAmount], amount_grams: float) -> int:
    """Return calories for the amount, 0 if the profile has no energy value."""
    return _first_present(nutrients, CALORIE_NUTRIENT_IDS, amount_grams)


def macro_totals(
    nutrients: Sequence[NutrientAmount], amount_grams: float
) -> MacroTotals:
    """Return calories and macronutrients for the amount."""
    return MacroTotals(
        calories=total_calories(nutrients, amount_grams),
        protein_g=_first_present(nutrients, (PROTEIN_ID,), amount_grams),
        fat_g=_first_present(nutrients, (FAT_ID,), amount_grams),
        carbs_g=_first_present(nutrients, (CARBS_ID,), amount_grams),
        fiber_g=_first_present(nutrients, (FIBER_ID,), amount_grams),
    )


def scale_entry(entry: LogEntry) -> tuple[ScaledNutrient, ...]:
    """Scale a stored entry's snapshot by its own amount."""
    return scale(entry.nutrients, entry.amount_grams)


def sum_entries(entries: Iterable[LogEntry]) -> MacroTotals:
    """Add up macro totals across entries."""
    total = MacroTotals()
    for entry in entries:
        total = total + macro_totals(entry.nutrients, entry.amount_grams)
    return total


def _first_present(
    nutrients: Sequence[NutrientAmount], nutrient_ids: Sequence[int], amount: float
) -> int:
    by_id = {nutrient.nutrient_id: nutrient for nutrient in nutrients}
    for nutrient_id in nutrient_ids:
        if nutrient_id in by_id:
            return _scaled_value(by_id[nutrient_id], amount)
    return 0


def _scaled_value(nutrient: NutrientAmount, amount_grams: float) -> int:
    # Half-up rounding; values are never negative.
    return math.floor(nutrient.amount_per_100g * amount_grams / 100 + 0.5)
