"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from food_diary.adapters.fdc_client import HttpxFdcClient
from food_diary.adapters.sqlite_engine import SqliteStorageEngine
from food_diary.app_logging import configure_logging
from food_diary.config import Settings
from food_diary.services.diary import DiaryController
from food_diary.services.log_store import LogStore
from food_diary.services.nutrition import NutritionService
from food_diary.services.search import SearchPipeline


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrition_service: NutritionService
    log_store: LogStore
    search_pipeline: SearchPipeline
    diary_controller: DiaryController
    initialize: Callable[[], Awaitable[None]]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    configure_logging(resolved_settings.log_level)
    fdc_client = HttpxFdcClient.create(
        api_key=resolved_settings.fdc_api_key,
        base_url=resolved_settings.fdc_base_url,
        timeout_seconds=resolved_settings.fdc_timeout_seconds,
    )
    nutrition_service = NutritionService(fdc_client=fdc_client)
    storage_engine = SqliteStorageEngine.create(resolved_settings.database_path)
    log_store = LogStore(storage_engine)
    search_pipeline = SearchPipeline(
        nutrition_service=nutrition_service,
        quiescence_seconds=resolved_settings.search_quiescence_seconds,
        min_query_length=resolved_settings.search_min_query_length,
        page_size=resolved_settings.search_page_size,
    )
    diary_controller = DiaryController(log_store=log_store)

    async def initialize() -> None:
        await log_store.initialize()
        await diary_controller.reload()

    async def close_resources() -> None:
        search_pipeline.close()
        await search_pipeline.wait_idle()
        await fdc_client.close()
        await storage_engine.close()

    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        log_store=log_store,
        search_pipeline=search_pipeline,
        diary_controller=diary_controller,
        initialize=initialize,
        close_resources=close_resources,
    )
