"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import date, datetime, time

import pytest

from food_diary.adapters.fdc_client import FdcClient
from food_diary.adapters.sqlite_engine import SqliteStorageEngine
from food_diary.config import Settings
from food_diary.domain.diary import FoodSnapshot, NewLogEntry
from food_diary.domain.nutrition import NutrientAmount, NutrientProfile
from food_diary.services.log_store import LogStore
from food_diary.services.nutrition import NutritionService

APPLE_NUTRIENTS = (
    NutrientAmount(1008, "Energy", "kcal", 52),
    NutrientAmount(1003, "Protein", "g", 0.26),
    NutrientAmount(1004, "Total lipid (fat)", "g", 0.17),
    NutrientAmount(1005, "Carbohydrate, by difference", "g", 13.81),
    NutrientAmount(1079, "Fiber, total dietary", "g", 2.4),
)


def apple_profile() -> NutrientProfile:
    return NutrientProfile(
        food_id=171688,
        description="Apple, raw",
        brand_owner=None,
        nutrients=APPLE_NUTRIENTS,
    )


def new_entry(
    day: date = date(2024, 3, 1),
    at: time = time(12, 0, 0),
    amount_grams: int = 150,
    profile: NutrientProfile | None = None,
) -> NewLogEntry:
    resolved = profile or apple_profile()
    return NewLogEntry(
        date=day,
        time=at,
        amount_grams=amount_grams,
        food_id=resolved.food_id,
        snapshot=FoodSnapshot.from_profile(resolved),
    )


def search_payload(*descriptions: str) -> dict[str, object]:
    return {
        "foods": [
            {"fdcId": index + 1, "description": text, "brandOwner": "Acme"}
            for index, text in enumerate(descriptions)
        ]
    }


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client that records calls and can hold responses open."""

    food_payload: dict[str, object] = field(
        default_factory=lambda: {
            "fdcId": 171688,
            "description": "Apple, raw",
            "foodNutrients": [
                {
                    "id": 1,
                    "nutrient": {"id": 1008, "name": "Energy", "unitName": "kcal"},
                    "amount": 52,
                },
                {
                    "id": 2,
                    "nutrient": {"id": 1003, "name": "Protein", "unitName": "g"},
                    "amount": 0.26,
                },
            ],
        }
    )
    search_queries: list[str] = field(default_factory=list)
    food_ids: list[int] = field(default_factory=list)
    gates: dict[str, asyncio.Event] = field(default_factory=dict)
    failing_queries: set[str] = field(default_factory=set)
    fail_detail: bool = False

    def hold(self, query: str) -> asyncio.Event:
        """Block responses for a query until the returned event is set."""
        gate = asyncio.Event()
        self.gates[query] = gate
        return gate

    async def search_foods(self, query: str, page_size: int = 20) -> object:
        self.search_queries.append(query)
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        if query in self.failing_queries:
            raise ValueError("bad payload")
        return search_payload(f"{query} result 1", f"{query} result 2")

    async def get_food(self, fdc_id: int) -> object:
        self.food_ids.append(fdc_id)
        if self.fail_detail:
            raise ValueError("bad payload")
        return self.food_payload


@dataclass
class FixedClock:
    """Clock returning a settable instant."""

    now: datetime = datetime(2024, 3, 1, 8, 30, 0)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def settings() -> Settings:
    return Settings(fdc_api_key="fdc-key", database_path=":memory:")


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def nutrition_service(fdc_client: FakeFdcClient) -> NutritionService:
    return NutritionService(fdc_client=fdc_client, retry_attempts=0)


@pytest.fixture
def log_store() -> LogStore:
    return LogStore(SqliteStorageEngine.create(":memory:"))
