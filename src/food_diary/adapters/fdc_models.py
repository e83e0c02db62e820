"""Pydantic models for FoodData Central payloads."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FdcNutrientInfo(BaseModel):
    """Nested nutrient definition on a food detail payload."""

    id: int
    name: str = ""
    unit_name: str = Field(default="", alias="unitName")


class FdcFoodNutrient(BaseModel):
    """Nutrient row in either the detail or the abridged search format."""

    model_config = ConfigDict(populate_by_name=True)

    nutrient_id: int = Field(alias="nutrientId")
    name: str = Field(default="", alias="nutrientName")
    unit_name: str = Field(default="", alias="unitName")
    amount: float | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: object) -> object:
        """Lift ``nutrient.{id,name,unitName}`` and ``value`` to flat fields."""
        if not isinstance(data, dict):
            return data
        flattened = {key: value for key, value in data.items() if key != "nutrient"}
        if "nutrient" in data:
            nested = FdcNutrientInfo.model_validate(data["nutrient"])
            flattened.setdefault("nutrientId", nested.id)
            flattened.setdefault("nutrientName", nested.name)
            flattened.setdefault("unitName", nested.unit_name)
        if "amount" not in flattened and "value" in flattened:
            flattened["amount"] = flattened["value"]
        return flattened


class FdcSearchFood(BaseModel):
    """Food row in a search response."""

    fdc_id: int = Field(alias="fdcId")
    description: str = ""
    brand_owner: str | None = Field(default=None, alias="brandOwner")


class FdcSearchResponse(BaseModel):
    """Search response body."""

    foods: list[FdcSearchFood] = Field(default_factory=list)


class FdcFood(BaseModel):
    """Food detail response body."""

    fdc_id: int = Field(alias="fdcId")
    description: str = ""
    brand_owner: str | None = Field(default=None, alias="brandOwner")
    food_nutrients: list[FdcFoodNutrient] = Field(
        default_factory=list, alias="foodNutrients"
    )
