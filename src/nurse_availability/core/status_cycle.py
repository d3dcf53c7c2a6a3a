'''
What a single (non-drag) click does to a cell.
'''
from ..models.enums import AvailabilityStatus

_CYCLE = {
    AvailabilityStatus.UNAVAILABLE: AvailabilityStatus.PREFERRED,
    AvailabilityStatus.PREFERRED: AvailabilityStatus.AVAILABLE,
    AvailabilityStatus.AVAILABLE: AvailabilityStatus.UNAVAILABLE,
}


def next_status(current: AvailabilityStatus) -> AvailabilityStatus:
    """
    unavailable -> preferred -> available -> unavailable.
    An untouched (unset) cell becomes unavailable on its first click; unset
    itself is never reached by cycling, only by clearing the week.
    """
    if current == AvailabilityStatus.UNSET:
        return AvailabilityStatus.UNAVAILABLE
    return _CYCLE[current]
