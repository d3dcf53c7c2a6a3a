'''
Availability API Models
'''
from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .enums import AvailabilityStatus, EditorState


def _clock_minutes(value: str) -> Optional[int]:
    """'07:30' or '07:30:00' -> 450. None if the value is not a clock time."""
    parts = value.split(":")
    try:
        return int(parts[0]) * 60 + int(parts[1])
    except (ValueError, IndexError):
        return None


class Cell(BaseModel):
    """
    One hour of one calendar day in the grid.
    Frozen so it can key the grid and live in drag selections.
    """
    date: date
    hour: int = Field(..., ge=0, le=23)

    model_config = ConfigDict(frozen=True)


class RangeRecord(BaseModel):
    """
    The persisted unit of availability, as the workforce API stores it.
    A half-open [start_time, end_time) interval on one day with one status.
    """
    availability_id: Optional[int] = None
    day_of_week: int = Field(..., description="0=Sunday, 6=Saturday")
    start_time: str = Field(..., description="HH:mm, inclusive")
    end_time: str = Field(..., description="HH:mm, exclusive")
    is_available: bool = True
    is_preferred: bool = True
    effective_from: Optional[date] = None
    effective_until: Optional[date] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def status(self) -> AvailabilityStatus:
        if self.is_preferred:
            return AvailabilityStatus.PREFERRED
        if self.is_available:
            return AvailabilityStatus.AVAILABLE
        return AvailabilityStatus.UNAVAILABLE

    @property
    def is_sentinel(self) -> bool:
        """
        The zero-length marker written for a day saved with nothing set.
        Compared as clock times, so '00:00' and '00:00:00' match.
        """
        start = _clock_minutes(self.start_time)
        return start is not None and start == _clock_minutes(self.end_time)


class NurseOption(BaseModel):
    """A nurse as listed in the editor's nurse selector."""
    worker_id: int
    display_name: str


class EditIntent(BaseModel):
    """
    What a gesture asks the controller to do.
    status=None means 'cycle each cell' rather than 'set each cell'.
    """
    cells: frozenset[Cell]
    status: Optional[AvailabilityStatus] = None

    model_config = ConfigDict(frozen=True)


# --- API Request Models (Input) ---

class SelectionUpdate(BaseModel):
    """Selects the nurse and the week (any date inside it) to edit."""
    nurse_id: int
    week_of: date


class WeekStatusUpdate(BaseModel):
    status: AvailabilityStatus


# --- API Read Models (Output) ---

class DayView(BaseModel):
    date: date
    day_of_week: int = Field(..., description="0=Sunday, 6=Saturday")
    day_name: str = Field(..., description="e.g. 'Monday'")
    hours: list[AvailabilityStatus] = Field(..., min_length=24, max_length=24)


class EditorView(BaseModel):
    """
    Everything the grid needs to render one editor.
    """
    editor_id: Optional[UUID] = None
    nurse_id: Optional[int] = None
    week_start: Optional[date] = None
    state: EditorState
    error: Optional[str] = None
    dragging: bool = False
    drag_selection: list[Cell] = []
    days: list[DayView] = []
