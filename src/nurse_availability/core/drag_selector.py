'''
Click-and-drag gesture tracking for the grid.
'''
from typing import Optional

from ..models.availability import Cell, EditIntent
from ..models.enums import AvailabilityStatus


class DragSelector:
    """
    Idle -> Dragging -> Idle.

    Accumulates the cells a pointer passes over while pressed. It never
    touches the grid: releasing returns an EditIntent for the controller
    to apply, cancelling returns nothing.
    """

    def __init__(self):
        self._selection: set[Cell] = set()
        self._dragging = False

    @property
    def dragging(self) -> bool:
        return self._dragging

    @property
    def selection(self) -> frozenset[Cell]:
        return frozenset(self._selection)

    def pointer_down(self, cell: Cell) -> None:
        self._dragging = True
        self._selection = {cell}

    def pointer_enter(self, cell: Cell) -> None:
        if self._dragging:
            self._selection.add(cell)

    def pointer_up(self) -> Optional[EditIntent]:
        """
        Commits the gesture.
        More than one cell marks them all unavailable; a drag that never
        left its origin cell is an ordinary click and cycles it.
        """
        intent = None
        if self._dragging:
            if len(self._selection) > 1:
                intent = EditIntent(cells=frozenset(self._selection), status=AvailabilityStatus.UNAVAILABLE)
            elif len(self._selection) == 1:
                intent = EditIntent(cells=frozenset(self._selection), status=None)
        self._reset()
        return intent

    def pointer_leave_grid(self) -> None:
        """Aborts the gesture without applying anything."""
        if self._dragging:
            self._reset()

    def _reset(self) -> None:
        self._dragging = False
        self._selection = set()
