'''
Translation between the dense hourly grid and the sparse range records the
workforce API persists.

Encode turns one displayed week of a SlotGrid into day-scoped RangeRecords.
Decode rebuilds a SlotGrid for one week from whatever records the API
returns, including overlapping or malformed historical ones.
'''
from datetime import date
from typing import Iterable, Literal, Optional

from ..common.config import settings
from ..common.logger import log
from ..models.availability import RangeRecord
from ..models.enums import AvailabilityStatus, PERSISTED_STATUSES
from .slot_grid import SlotGrid
from .week import HOURS_PER_DAY, api_day_of_week, week_dates

EncodeMode = Literal["runs", "bounding"]

SENTINEL_TIME = "00:00"

# (is_available, is_preferred) written for each persisted status
_STATUS_FLAGS = {
    AvailabilityStatus.AVAILABLE: (True, False),
    AvailabilityStatus.PREFERRED: (True, True),
    AvailabilityStatus.UNAVAILABLE: (False, False),
}


def format_hour(hour: int) -> str:
    """0 -> '00:00'. The end of the day is written as '24:00'."""
    return f"{hour:02d}:00"


def parse_hour(value: str) -> int:
    """
    Parses 'HH:mm' or 'HH:mm:ss' and returns the hour part.
    Minutes are ignored, as the grid has hourly resolution.
    Raises ValueError on anything else.
    """
    parts = value.split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid time '{value}'")
    hour, minute = int(parts[0]), int(parts[1])
    if not 0 <= hour <= HOURS_PER_DAY or not 0 <= minute < 60:
        raise ValueError(f"Time out of range '{value}'")
    if hour == HOURS_PER_DAY and minute != 0:
        raise ValueError(f"Time out of range '{value}'")
    return hour


def contiguous_runs(hours: list[int]) -> list[tuple[int, int]]:
    """Splits sorted hours into half-open [start, end) runs."""
    runs: list[tuple[int, int]] = []
    for hour in hours:
        if runs and runs[-1][1] == hour:
            runs[-1] = (runs[-1][0], hour + 1)
        else:
            runs.append((hour, hour + 1))
    return runs


class RangeCodec:
    """
    Encodes a week of a SlotGrid into RangeRecords and decodes them back.

    mode='runs' writes one record per contiguous run and round-trips every
    grid. mode='bounding' writes the legacy single record per status per
    day, spanning the earliest to the latest hour of that status; any gap
    inside the span reads back as that status.
    """

    def __init__(self, mode: Optional[EncodeMode] = None, emit_empty_day_sentinel: Optional[bool] = None):
        self.mode = mode or settings.ENCODE_MODE
        if emit_empty_day_sentinel is None:
            emit_empty_day_sentinel = settings.EMIT_EMPTY_DAY_SENTINEL
        self.emit_empty_day_sentinel = emit_empty_day_sentinel

    # --- Encode ---

    def encode(self, grid: SlotGrid, week_start: date) -> list[RangeRecord]:
        records: list[RangeRecord] = []
        for day in week_dates(week_start):
            day_records = []
            for status in PERSISTED_STATUSES:
                hours = grid.hours_for(day, status)
                if not hours:
                    continue
                for start, end in self._ranges(hours):
                    day_records.append(self._make_record(day, start, end, status))

            if not day_records and self.emit_empty_day_sentinel:
                day_records.append(self._make_sentinel(day))
            records.extend(day_records)

        log.info(f"Encoded week of {week_start} ({len(grid)} slots) into {len(records)} records [{self.mode}].")
        return records

    def _ranges(self, hours: list[int]) -> list[tuple[int, int]]:
        if self.mode == "bounding":
            return [(hours[0], hours[-1] + 1)]
        return contiguous_runs(hours)

    def _make_record(self, day: date, start: int, end: int, status: AvailabilityStatus) -> RangeRecord:
        is_available, is_preferred = _STATUS_FLAGS[status]
        return RangeRecord(
            day_of_week=api_day_of_week(day),
            start_time=format_hour(start),
            end_time=format_hour(end),
            is_available=is_available,
            is_preferred=is_preferred,
            effective_from=day,
            effective_until=day,
        )

    def _make_sentinel(self, day: date) -> RangeRecord:
        return RangeRecord(
            day_of_week=api_day_of_week(day),
            start_time=SENTINEL_TIME,
            end_time=SENTINEL_TIME,
            is_available=False,
            is_preferred=False,
            effective_from=day,
            effective_until=day,
        )

    # --- Decode ---

    def decode(self, records: Iterable[RangeRecord], week_start: date) -> SlotGrid:
        """
        Records are applied in the order given. Where two records on the same
        day cover the same hour, the one applied last wins.
        """
        dates_by_dow = {api_day_of_week(day): day for day in week_dates(week_start)}
        grid = SlotGrid()
        applied = skipped = 0

        for record in records:
            if record.is_sentinel:
                continue

            span = self._validate(record)
            if span is None:
                skipped += 1
                continue

            day = dates_by_dow[record.day_of_week]
            if not self._in_effect(record, day):
                log.debug(f"Record {record.availability_id} not in effect on {day}, skipping.")
                continue

            start, end = span
            status = record.status
            for hour in range(start, end):
                grid.set(day, hour, status)
            applied += 1

        log.info(f"Decoded {applied} records into {len(grid)} slots for week of {week_start} ({skipped} malformed).")
        return grid

    def _validate(self, record: RangeRecord) -> Optional[tuple[int, int]]:
        """Returns the [start, end) hour span, or None (with a warning) if the record is malformed."""
        if not 0 <= record.day_of_week <= 6:
            log.warning(f"Skipping record with day_of_week={record.day_of_week}: {record.model_dump()}")
            return None
        try:
            start = parse_hour(record.start_time)
            end = parse_hour(record.end_time)
        except ValueError as e:
            log.warning(f"Skipping record with unparseable times ({e}): {record.model_dump()}")
            return None

        # '00:00' as an end time closes the day
        if end == 0 and start > 0:
            end = HOURS_PER_DAY
        if start >= end or start >= HOURS_PER_DAY:
            log.warning(f"Skipping record with empty or inverted range {record.start_time}-{record.end_time}: {record.model_dump()}")
            return None
        return start, end

    def _in_effect(self, record: RangeRecord, day: date) -> bool:
        if record.effective_from and day < record.effective_from:
            return False
        if record.effective_until and day > record.effective_until:
            return False
        return True
