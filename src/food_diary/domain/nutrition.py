"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FoodSummary:
    """Search hit for a food from the nutrition provider."""

    food_id: int
    description: str
    brand_owner: str | None = None


@dataclass(frozen=True)
class NutrientAmount:
    """Amount of a single nutrient per 100 g of food."""

    nutrient_id: int
    name: str
    unit_name: str
    amount_per_100g: float

    def __post_init__(self) -> None:
        if self.amount_per_100g < 0:
            raise ValueError(
                f"Nutrient {self.nutrient_id} has negative amount "
                f"{self.amount_per_100g}"
            )


@dataclass(frozen=True)
class NutrientProfile:
    """Per-100g nutrient content for a food."""

    food_id: int
    description: str
    brand_owner: str | None
    nutrients: tuple[NutrientAmount, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "nutrients", tuple(self.nutrients))
        ids = [nutrient.nutrient_id for nutrient in self.nutrients]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate nutrient ids in profile {self.food_id}")


@dataclass(frozen=True)
class ScaledNutrient:
    """Nutrient value for a logged amount, rounded for display."""

    nutrient_id: int
    name: str
    unit_name: str
    value: int


@dataclass(frozen=True)
class MacroTotals:
    """Calories and macronutrients for a portion or a day."""

    calories: int = 0
    protein_g: int = 0
    fat_g: int = 0
    carbs_g: int = 0
    fiber_g: int = 0

    def __add__(self, other: "MacroTotals") -> "MacroTotals":
        return MacroTotals(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            fat_g=self.fat_g + other.fat_g,
            carbs_g=self.carbs_g + other.carbs_g,
            fiber_g=self.fiber_g + other.fiber_g,
        )
