'''
The hourly availability grid of one nurse for one displayed week.
'''
from datetime import date
from typing import Iterable, Iterator

from ..models.enums import AvailabilityStatus


class SlotGrid:
    """
    Mapping of (date, hour) -> status.

    Only explicit statuses are stored; an absent key reads as UNSET, and
    setting UNSET removes the key. Hour bounds are checked by callers.
    """

    def __init__(self, entries: dict[tuple[date, int], AvailabilityStatus] | None = None):
        self._entries: dict[tuple[date, int], AvailabilityStatus] = {}
        for (day, hour), status in (entries or {}).items():
            self.set(day, hour, status)

    def get(self, day: date, hour: int) -> AvailabilityStatus:
        return self._entries.get((day, hour), AvailabilityStatus.UNSET)

    def set(self, day: date, hour: int, status: AvailabilityStatus) -> None:
        if status == AvailabilityStatus.UNSET:
            self._entries.pop((day, hour), None)
        else:
            self._entries[(day, hour)] = status

    def clear(self, dates: Iterable[date]) -> None:
        """Removes every entry on the given dates (normally the displayed week)."""
        dates = set(dates)
        for key in [key for key in self._entries if key[0] in dates]:
            del self._entries[key]

    def hours_for(self, day: date, status: AvailabilityStatus) -> list[int]:
        """Sorted hours on `day` that carry `status`."""
        return sorted(hour for (d, hour), s in self._entries.items() if d == day and s == status)

    def cells(self) -> Iterator[tuple[date, int, AvailabilityStatus]]:
        for (day, hour), status in sorted(self._entries.items()):
            yield day, hour, status

    def copy(self) -> "SlotGrid":
        clone = SlotGrid()
        clone._entries = dict(self._entries)
        return clone

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SlotGrid):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"SlotGrid({len(self._entries)} slots)"
