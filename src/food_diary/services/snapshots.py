"""Text encoding for nutrient snapshots stored with log entries."""

import json

from food_diary.domain.diary import FoodSnapshot
from food_diary.domain.nutrition import NutrientAmount


def serialize_snapshot(snapshot: FoodSnapshot) -> str:
    """Encode a snapshot as a self-contained JSON document."""
    return json.dumps(
        {
            "description": snapshot.description,
            "brandOwner": snapshot.brand_owner,
            "foodNutrients": [
                {
                    "nutrientId": nutrient.nutrient_id,
                    "name": nutrient.name,
                    "unitName": nutrient.unit_name,
                    "amountPer100g": nutrient.amount_per_100g,
                }
                for nutrient in snapshot.nutrients
            ],
        },
        ensure_ascii=False,
    )


def deserialize_snapshot(raw: str) -> FoodSnapshot:
    """Decode a snapshot, raising ValueError on any malformed input."""
    try:
        payload = json.loads(raw)
        nutrients = tuple(
            NutrientAmount(
                nutrient_id=int(item["nutrientId"]),
                name=str(item["name"]),
                unit_name=str(item["unitName"]),
                amount_per_100g=float(item["amountPer100g"]),
            )
            for item in payload["foodNutrients"]
        )
        brand_owner = payload.get("brandOwner")
        return FoodSnapshot(
            description=str(payload["description"]),
            brand_owner=str(brand_owner) if brand_owner is not None else None,
            nutrients=nutrients,
        )
    except (TypeError, KeyError, AttributeError) as exc:
        raise ValueError(f"Malformed snapshot: {exc!r}") from exc
