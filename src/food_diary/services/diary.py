"""Diary controller for a single active date."""

import bisect
import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta

from food_diary.domain.diary import (
    Direction,
    FoodSnapshot,
    LoadingState,
    LogEntry,
    NewLogEntry,
    validate_amount,
)
from food_diary.domain.errors import StorageError, ValidationError
from food_diary.domain.nutrition import MacroTotals, NutrientProfile
from food_diary.services.log_store import LogStore
from food_diary.services.scaling import sum_entries

_logger = logging.getLogger(__name__)


def _entry_order(entry: LogEntry) -> tuple[time, int]:
    return (entry.time, entry.id)


@dataclass
class DiaryController:
    """Keeps the entries of the active date in sync with the log store."""

    log_store: LogStore
    clock: Callable[[], datetime] = datetime.now
    skip_corrupt: bool = False
    _active_date: date | None = field(default=None, init=False)
    _entries: list[LogEntry] = field(default_factory=list, init=False)
    _state: LoadingState = field(default=LoadingState.IDLE, init=False)
    _token: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self._active_date is None:
            self._active_date = self.clock().date()

    @property
    def active_date(self) -> date:
        return self._active_date

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    @property
    def loading_state(self) -> LoadingState:
        return self._state

    async def set_active_date(self, day: date) -> None:
        """Switch to another day and load its entries.

        If another date change starts before this load finishes, the result
        of this one is dropped.
        """
        self._token += 1
        token = self._token
        self._active_date = day
        self._entries = []
        self._state = LoadingState.LOADING
        try:
            entries = await self.log_store.list_by_date(
                day, skip_corrupt=self.skip_corrupt
            )
        except StorageError:
            if token != self._token:
                _logger.debug("Ignoring stale load failure for %s", day)
                return
            self._state = LoadingState.IDLE
            raise
        if token != self._token:
            _logger.debug("Discarding stale entries for %s", day)
            return
        self._entries = sorted(entries, key=_entry_order)
        self._state = LoadingState.READY

    async def reload(self) -> None:
        """Reload the active date from the store."""
        await self.set_active_date(self._active_date)

    async def navigate(self, direction: Direction | str) -> None:
        """Move one calendar day back or forward."""
        try:
            step = Direction(direction)
        except ValueError as exc:
            raise ValidationError(f"Unknown direction {direction!r}") from exc
        await self.set_active_date(self._active_date + timedelta(days=step.days))

    async def log_food(self, profile: NutrientProfile, amount_grams: int) -> LogEntry:
        """Persist an amount of a food on the active date."""
        amount = validate_amount(amount_grams)
        day = self._active_date
        entry = await self.log_store.append(
            NewLogEntry(
                date=day,
                time=self.clock().time().replace(microsecond=0),
                amount_grams=amount,
                food_id=profile.food_id,
                snapshot=FoodSnapshot.from_profile(profile),
            )
        )
        if day != self._active_date:
            return entry
        if self._state is LoadingState.READY:
            bisect.insort(self._entries, entry, key=_entry_order)
        else:
            await self.reload()
        return entry

    async def update_food(self, entry_id: int, amount_grams: int) -> LogEntry:
        """Change the amount of a logged entry."""
        amount = validate_amount(amount_grams)
        await self.log_store.update_amount(entry_id, amount)
        if self._state is not LoadingState.READY:
            await self.reload()
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                updated = replace(entry, amount_grams=amount)
                self._entries[index] = updated
                return updated
        return await self.log_store.get(entry_id)

    async def delete_food(self, entry_id: int) -> None:
        """Remove a logged entry."""
        await self.log_store.delete(entry_id)
        if self._state is not LoadingState.READY:
            await self.reload()
            return
        self._entries = [entry for entry in self._entries if entry.id != entry_id]

    def totals(self) -> MacroTotals:
        """Calories and macronutrients for the active date."""
        return sum_entries(self._entries)
