'''
Closed enums shared by the grid, the codec and the API models.
'''
import enum


class AvailabilityStatus(str, enum.Enum):
    """
    Status of one hour in the grid.
    UNSET is never stored: it is what an absent grid entry means.
    """
    UNSET = "unset"
    UNAVAILABLE = "unavailable"
    PREFERRED = "preferred"
    AVAILABLE = "available"


# Statuses that are persisted as range records, in wire emission order.
PERSISTED_STATUSES = (
    AvailabilityStatus.AVAILABLE,
    AvailabilityStatus.PREFERRED,
    AvailabilityStatus.UNAVAILABLE,
)


class EditorState(str, enum.Enum):
    """Lifecycle of an editor's grid."""
    EMPTY = "empty"        # no nurse selected yet
    LOADING = "loading"    # fetch in flight, grid renders unset
    READY = "ready"
    SAVING = "saving"
    ERROR = "error"        # fetch failed, grid stays empty until re-selection
