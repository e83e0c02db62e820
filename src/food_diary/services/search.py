"""Debounced food search driven by keystrokes."""

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass, field
from enum import Enum

from food_diary.domain.errors import ProviderError
from food_diary.domain.nutrition import FoodSummary, NutrientProfile
from food_diary.services.nutrition import NutritionService

_logger = logging.getLogger(__name__)


class SearchStatus(Enum):
    """Search state shown next to the suggestion list."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass
class SearchPipeline:
    """Turns free-text input into provider suggestions.

    Input is debounced: every call to :meth:`on_query_changed` restarts the
    quiescence window, and only the query still current when the window
    elapses is sent. Every input takes a fresh token and a response is
    applied only if its token is still the latest, so a slow response for an
    older query never replaces a newer one. Requests already sent are not
    aborted, their results are just dropped.
    """

    nutrition_service: NutritionService
    quiescence_seconds: float = 0.3
    min_query_length: int = 3
    page_size: int = 20
    _query: str = field(default="", init=False)
    _suggestions: tuple[FoodSummary, ...] = field(default=(), init=False)
    _status: SearchStatus = field(default=SearchStatus.IDLE, init=False)
    _token: int = field(default=0, init=False)
    _pending: asyncio.Task[None] | None = field(default=None, init=False, repr=False)
    _tasks: set[asyncio.Task[None]] = field(default_factory=set, init=False, repr=False)

    @property
    def query(self) -> str:
        return self._query

    @property
    def current_suggestions(self) -> tuple[FoodSummary, ...]:
        """Latest settled suggestions, in provider order."""
        return self._suggestions

    @property
    def currently_loading(self) -> bool:
        return self._status is SearchStatus.LOADING

    @property
    def status(self) -> SearchStatus:
        return self._status

    def on_query_changed(self, text: str) -> None:
        """Record new input; must be called from a running event loop."""
        self._query = text
        self._cancel_pending()
        self._token += 1
        if len(text.strip()) < self.min_query_length:
            self._suggestions = ()
            self._status = SearchStatus.IDLE
            return
        self._pending = self._spawn(self._debounce(text.strip(), self._token))

    async def select(self, summary: FoodSummary) -> NutrientProfile | None:
        """Fetch details for a chosen suggestion and close the list."""
        self._cancel_pending()
        self._token += 1
        token = self._token
        self._suggestions = ()
        self._status = SearchStatus.LOADING
        try:
            profile = await self.nutrition_service.get_detail(summary.food_id)
        except ProviderError as exc:
            _logger.warning(
                "Food detail unavailable for %s: %s", summary.food_id, exc
            )
            if token == self._token:
                self._status = SearchStatus.FAILED
            return None
        if token == self._token:
            self._status = SearchStatus.IDLE
        return profile

    def reset(self) -> None:
        """Clear input and results, e.g. after a food has been logged."""
        self._cancel_pending()
        self._token += 1
        self._query = ""
        self._suggestions = ()
        self._status = SearchStatus.IDLE

    async def wait_idle(self) -> None:
        """Wait until no debounce timer or request is outstanding."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def close(self) -> None:
        """Cancel pending debounce timers."""
        self._cancel_pending()

    async def _debounce(self, query: str, token: int) -> None:
        await asyncio.sleep(self.quiescence_seconds)
        # From here on the request is live; newer input no longer cancels it.
        self._pending = None
        self._status = SearchStatus.LOADING
        try:
            results = await self.nutrition_service.search(
                query, page_size=self.page_size
            )
        except ProviderError as exc:
            if token != self._token:
                _logger.debug("Ignoring stale search failure for %r", query)
                return
            _logger.warning("Search failed for %r: %s", query, exc)
            self._suggestions = ()
            self._status = SearchStatus.FAILED
            return
        if token != self._token:
            _logger.debug("Discarding stale results for %r", query)
            return
        self._suggestions = tuple(results)
        self._status = SearchStatus.READY

    def _spawn(self, coro: Coroutine[object, object, None]) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
