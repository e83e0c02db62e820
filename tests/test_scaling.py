"""Tests for nutrient scaling."""

from datetime import date, time

from food_diary.domain.diary import FoodSnapshot, LogEntry
from food_diary.domain.nutrition import MacroTotals, NutrientAmount
from food_diary.services.scaling import (
    macro_totals,
    scale,
    scale_entry,
    sum_entries,
    total_calories,
)
from tests.conftest import APPLE_NUTRIENTS


def test_scale_zero_amount_is_all_zero() -> None:
    values = scale(APPLE_NUTRIENTS, 0)

    assert len(values) == len(APPLE_NUTRIENTS)
    assert all(item.value == 0 for item in values)


def test_scale_empty_profile() -> None:
    assert scale((), 150) == ()
    assert total_calories((), 150) == 0


def test_scale_at_100g_is_identity_for_whole_values() -> None:
    nutrients = (
        NutrientAmount(1008, "Energy", "kcal", 52),
        NutrientAmount(1003, "Protein", "g", 31),
    )

    values = scale(nutrients, 100)

    assert [item.value for item in values] == [52, 31]
    assert [item.name for item in values] == ["Energy", "Protein"]
    assert [item.unit_name for item in values] == ["kcal", "g"]


def test_scale_is_linear_within_rounding() -> None:
    for grams in (1, 37, 150, 333):
        single = scale(APPLE_NUTRIENTS, grams)
        double = scale(APPLE_NUTRIENTS, 2 * grams)
        for one, two in zip(single, double, strict=True):
            assert abs(two.value - 2 * one.value) <= 1


def test_scale_rounds_half_up() -> None:
    nutrients = (NutrientAmount(1003, "Protein", "g", 5),)

    assert scale(nutrients, 10)[0].value == 1
    assert scale(nutrients, 30)[0].value == 2


def test_total_calories_apple_scenario() -> None:
    assert total_calories(APPLE_NUTRIENTS, 150) == 78
    assert total_calories(APPLE_NUTRIENTS, 200) == 104


def test_total_calories_first_match_wins() -> None:
    nutrients = (
        NutrientAmount(2048, "Energy (Atwater Specific Factors)", "kcal", 50),
        NutrientAmount(2047, "Energy (Atwater General Factors)", "kcal", 60),
    )

    assert total_calories(nutrients, 100) == 60

    nutrients = nutrients + (NutrientAmount(1008, "Energy", "kcal", 70),)
    assert total_calories(nutrients, 100) == 70


def test_total_calories_without_energy_is_zero() -> None:
    nutrients = (NutrientAmount(1003, "Protein", "g", 31),)

    assert total_calories(nutrients, 200) == 0


def test_macro_totals_and_sum_entries() -> None:
    snapshot = FoodSnapshot("Apple, raw", None, APPLE_NUTRIENTS)
    entries = [
        LogEntry(1, date(2024, 3, 1), time(8, 0), 100, 171688, snapshot),
        LogEntry(2, date(2024, 3, 1), time(9, 0), 200, 171688, snapshot),
    ]

    first = macro_totals(APPLE_NUTRIENTS, 100)
    total = sum_entries(entries)

    assert first == MacroTotals(
        calories=52, protein_g=0, fat_g=0, carbs_g=14, fiber_g=2
    )
    assert total.calories == 52 + 104
    assert total.carbs_g == 14 + 28
    assert scale_entry(entries[1])[0].value == 104
