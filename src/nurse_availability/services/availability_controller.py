'''
Availability Controller
'''
from datetime import date, timedelta
from typing import Iterable, Optional
from uuid import UUID

from ..common.config import settings
from ..common.exceptions import (
    AvailabilityFetchError,
    AvailabilitySaveError,
    GridNotLoadedError,
    InvalidSlotError,
    NoNurseSelectedError,
)
from ..common.logger import log
from ..core.drag_selector import DragSelector
from ..core.range_codec import RangeCodec
from ..core.slot_grid import SlotGrid
from ..core.status_cycle import next_status
from ..core.week import HOURS_PER_DAY, api_day_of_week, get_day_name, week_dates, week_start_for
from ..models.availability import Cell, DayView, EditorView
from ..models.enums import AvailabilityStatus, EditorState
from .availability_client import AvailabilityClient


class AvailabilityController:
    """
    Owns the SlotGrid of one editor and is the only thing that mutates it.

    Edits are applied optimistically and saved straight away as a full
    replacement of the displayed week. A failed save rolls the grid back to
    the last state the API is known to hold. Responses that arrive after the
    nurse or week selection changed are ignored.
    """
    def __init__(
        self,
        client: AvailabilityClient,
        codec: Optional[RangeCodec] = None,
        first_day_of_week: Optional[int] = None
    ):
        self.client = client
        self.codec = codec or RangeCodec()
        self.first_day_of_week = settings.FIRST_DAY_OF_WEEK if first_day_of_week is None else first_day_of_week
        self.drag = DragSelector()

        self.nurse_id: Optional[int] = None
        self.week_start: Optional[date] = None
        self.grid = SlotGrid()
        self.state = EditorState.EMPTY
        self.error: Optional[str] = None

        # Last grid the API is known to hold, and the save that produced it.
        # Rollback target for saves that carry no pre-edit snapshot.
        self._confirmed = SlotGrid()
        self._confirmed_seq = 0
        self._save_seq = 0
        # Bumped on every load so a reselected nurse/week does not accept old responses
        self._generation = 0

    @property
    def selection_key(self) -> tuple[Optional[int], Optional[date]]:
        return (self.nurse_id, self.week_start)

    def _is_current(self, key: tuple, generation: int) -> bool:
        return key == self.selection_key and generation == self._generation

    @property
    def week_dates(self) -> list[date]:
        if self.week_start is None:
            return []
        return week_dates(self.week_start)

    # --- Selection ---

    async def select_nurse(self, nurse_id: int, week_of: Optional[date] = None) -> None:
        """Switches to another nurse, keeping the displayed week unless one is given."""
        if week_of is not None:
            week_start = week_start_for(week_of, self.first_day_of_week)
        else:
            week_start = self.week_start or week_start_for(date.today(), self.first_day_of_week)
        await self._load(nurse_id, week_start)

    async def select_week(self, day: date) -> None:
        """Switches to the week containing `day`."""
        week_start = week_start_for(day, self.first_day_of_week)
        if self.nurse_id is None:
            self.week_start = week_start
            return
        await self._load(self.nurse_id, week_start)

    async def next_week(self) -> None:
        await self.select_week(self._current_week_start() + timedelta(days=7))

    async def previous_week(self) -> None:
        await self.select_week(self._current_week_start() - timedelta(days=7))

    def _current_week_start(self) -> date:
        return self.week_start or week_start_for(date.today(), self.first_day_of_week)

    async def _load(self, nurse_id: int, week_start: date) -> None:
        self.nurse_id = nurse_id
        self.week_start = week_start
        self._generation += 1
        key, generation = self.selection_key, self._generation

        # Never show the previous selection's data while the fetch is in flight
        self.grid = SlotGrid()
        self._confirmed = SlotGrid()
        self.drag.pointer_leave_grid()
        self.state = EditorState.LOADING
        self.error = None

        try:
            records = await self.client.fetch_week(nurse_id, week_start)
        except AvailabilityFetchError as e:
            if not self._is_current(key, generation):
                log.info(f"Ignoring failed fetch for stale selection {key}.")
                return
            log.warning(f"Could not load availability for nurse {nurse_id}, week of {week_start}: {e}")
            self.state = EditorState.ERROR
            self.error = f"Error loading availability: {e}"
            return

        if not self._is_current(key, generation):
            log.info(f"Ignoring availability response for stale selection {key}.")
            return

        self.grid = self.codec.decode(records, week_start)
        self._confirmed = self.grid.copy()
        self.state = EditorState.READY

    # --- Guards ---

    def _require_loaded(self) -> None:
        if self.nurse_id is None or self.week_start is None:
            raise NoNurseSelectedError("Select a nurse before editing availability.")
        if self.state in (EditorState.LOADING, EditorState.ERROR):
            raise GridNotLoadedError(f"Availability for nurse {self.nurse_id} is not loaded ({self.state.value}).")

    def _check_cell(self, cell: Cell) -> None:
        if not 0 <= cell.hour < HOURS_PER_DAY:
            raise InvalidSlotError(f"Hour {cell.hour} is outside 0-23.")
        if cell.date not in self.week_dates:
            raise InvalidSlotError(f"{cell.date} is not in the week of {self.week_start}.")

    # --- Pointer gestures ---

    async def click(self, cell: Cell) -> bool:
        """A single click cycles the cell's status."""
        return await self.apply_edit([cell], None)

    def pointer_down(self, cell: Cell) -> None:
        self._require_loaded()
        self._check_cell(cell)
        self.drag.pointer_down(cell)

    def pointer_enter(self, cell: Cell) -> None:
        if not self.drag.dragging:
            return
        self._check_cell(cell)
        self.drag.pointer_enter(cell)

    async def pointer_up(self) -> bool:
        intent = self.drag.pointer_up()
        if intent is None:
            return False
        return await self.apply_edit(intent.cells, intent.status)

    def pointer_leave_grid(self) -> None:
        self.drag.pointer_leave_grid()

    # --- Edits ---

    async def apply_edit(self, cells: Iterable[Cell], status: Optional[AvailabilityStatus] = None) -> bool:
        """
        Applies `status` to every cell (or cycles each one when status is None),
        then saves the week. Returns whether the save went through.
        """
        self._require_loaded()
        cells = list(cells)
        for cell in cells:
            self._check_cell(cell)

        pre_edit = self.grid.copy()
        for cell in cells:
            current = self.grid.get(cell.date, cell.hour)
            self.grid.set(cell.date, cell.hour, next_status(current) if status is None else status)
        return await self.save(pre_edit)

    async def apply_to_week(self, status: AvailabilityStatus) -> bool:
        """Sets every hour of the displayed week in one batch and saves once."""
        self._require_loaded()
        pre_edit = self.grid.copy()
        for day in self.week_dates:
            for hour in range(HOURS_PER_DAY):
                self.grid.set(day, hour, status)
        return await self.save(pre_edit)

    async def clear_week(self) -> bool:
        self._require_loaded()
        pre_edit = self.grid.copy()
        self.grid.clear(self.week_dates)
        return await self.save(pre_edit)

    async def copy_previous_week(self) -> bool:
        """Replaces the displayed week with the nurse's previous week, then saves."""
        self._require_loaded()
        key, generation = self.selection_key, self._generation
        previous_start = self.week_start - timedelta(days=7)

        try:
            records = await self.client.fetch_week(self.nurse_id, previous_start)
        except AvailabilityFetchError as e:
            if not self._is_current(key, generation):
                log.info(f"Ignoring failed previous-week fetch for stale selection {key}.")
                return False
            log.warning(f"Could not load previous week for nurse {self.nurse_id}, week of {previous_start}: {e}")
            self.error = f"Error loading previous week: {e}"
            return False

        if not self._is_current(key, generation):
            log.info(f"Ignoring previous-week copy for stale selection {key}.")
            return False

        previous = self.codec.decode(records, previous_start)
        pre_edit = self.grid.copy()
        self.grid.clear(self.week_dates)
        for day, hour, status in previous.cells():
            self.grid.set(day + timedelta(days=7), hour, status)
        return await self.save(pre_edit)

    async def save(self, pre_edit: Optional[SlotGrid] = None) -> bool:
        """
        Encodes the displayed week and submits it as a full replacement.
        Only the most recent save may roll the grid back, to `pre_edit` (the
        grid just before the edit being saved) or, without one, to the last
        grid the API confirmed.
        """
        self._require_loaded()
        key, generation = self.selection_key, self._generation
        nurse_id, week_start = key
        self._save_seq += 1
        seq = self._save_seq

        # Captured before the first await so later edits can't leak into this payload
        snapshot = self.grid.copy()
        records = self.codec.encode(snapshot, week_start)
        self.state = EditorState.SAVING
        self.error = None

        try:
            await self.client.replace_week(nurse_id, week_start, records)
        except AvailabilitySaveError as e:
            if not self._is_current(key, generation):
                log.info(f"Ignoring failed save for stale selection {key}.")
                return False
            if seq != self._save_seq:
                log.info(f"Save #{seq} failed but was superseded by save #{self._save_seq}.")
                return False
            log.warning(f"Save #{seq} failed for nurse {nurse_id}, rolling back: {e}")
            self.grid = (self._confirmed if pre_edit is None else pre_edit).copy()
            self.state = EditorState.READY
            self.error = f"Failed to save availability: {e}"
            return False

        if not self._is_current(key, generation):
            log.info(f"Save #{seq} finished for stale selection {key}.")
            return True
        if seq > self._confirmed_seq:
            self._confirmed = snapshot
            self._confirmed_seq = seq
        if seq == self._save_seq:
            self.state = EditorState.READY
        return True

    # --- Rendering ---

    def view(self, editor_id: Optional[UUID] = None) -> EditorView:
        days = []
        for day in self.week_dates:
            dow = api_day_of_week(day)
            days.append(DayView(
                date=day,
                day_of_week=dow,
                day_name=get_day_name(dow),
                hours=[self.grid.get(day, hour) for hour in range(HOURS_PER_DAY)]
            ))

        return EditorView(
            editor_id=editor_id,
            nurse_id=self.nurse_id,
            week_start=self.week_start,
            state=self.state,
            error=self.error,
            dragging=self.drag.dragging,
            drag_selection=sorted(self.drag.selection, key=lambda c: (c.date, c.hour)),
            days=days
        )
