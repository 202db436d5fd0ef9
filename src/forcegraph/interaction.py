"""
Pointer-driven dragging of graph nodes.

Each pointer runs its own small state machine:
- Idle: pointer-down hit-tests the location; on a hit, go to Dragging
- Dragging(index): pointer-move places the node under the pointer and
  freezes it against the simulation
- Dragging(index): pointer-up hands the node back to the simulation

Two pointers dragging the same node are not coordinated; the last move
wins.
"""

from __future__ import annotations

from typing import Hashable, Optional, Union
from enum import IntEnum

from .geom import Point
from .viewmodel import GraphViewModel


class PointerPhase(IntEnum):
    """Phase of a pointer event."""
    down = 0
    move = 1
    up = 2


class DragState:
    """
    Drag state of one pointer.

    Attributes:
        node_index: Index of the dragged node, None while idle
    """

    def __init__(self, node_index: Optional[int] = None):
        self.node_index = node_index

    def is_idle(self) -> bool:
        return self.node_index is None


class DragController:
    """
    Translates pointer events into drag operations on a view model.
    """

    def __init__(self, view_model: GraphViewModel):
        self.view_model = view_model
        self._pointers: dict[Hashable, DragState] = {}

    def pointer_down(self, location: Point, pointer: Hashable = 0) -> Optional[int]:
        """
        Start a gesture.

        Args:
            location: Pointer location in view space
            pointer: Identifies the pointer when several are active

        Returns:
            Index of the node picked up, or None if nothing was hit
        """
        # a pointer that was never released lets go of its node first
        self.pointer_up(None, pointer)
        index = self.view_model.hit_test(location)
        self._pointers[pointer] = DragState(index)
        return index

    def pointer_move(self, location: Point, pointer: Hashable = 0) -> None:
        """Drag the pointer's node, if it has one."""
        state = self._pointers.get(pointer)
        if state is None or state.is_idle():
            return
        self.view_model.drag_node(state.node_index, location)

    def pointer_up(self, location: Optional[Point] = None, pointer: Hashable = 0) -> None:
        """Release the pointer's node and forget the pointer."""
        state = self._pointers.pop(pointer, None)
        if state is None or state.is_idle():
            return
        self.view_model.stop_dragging_node(state.node_index)

    def handle(
        self,
        phase: Union[PointerPhase, str],
        location: Optional[Point],
        pointer: Hashable = 0
    ) -> None:
        """
        Dispatch a pointer event.

        Args:
            phase: down, move or up (enum or name)
            location: Pointer location in view space
            pointer: Identifies the pointer when several are active
        """
        if isinstance(phase, str):
            phase = PointerPhase[phase]

        if phase is PointerPhase.down:
            self.pointer_down(location, pointer)
        elif phase is PointerPhase.move:
            self.pointer_move(location, pointer)
        else:
            self.pointer_up(location, pointer)

    def gesture_changed(self, location: Point, pointer: Hashable = 0) -> None:
        """
        Feed a continuous drag gesture that has no separate down event.

        The first change of a gesture hit-tests, the following ones drag.
        """
        if pointer in self._pointers:
            self.pointer_move(location, pointer)
        else:
            self.pointer_down(location, pointer)

    def gesture_ended(self, pointer: Hashable = 0) -> None:
        self.pointer_up(None, pointer)

    def dragging_index(self, pointer: Hashable = 0) -> Optional[int]:
        state = self._pointers.get(pointer)
        return None if state is None else state.node_index

    def is_dragging(self, pointer: Hashable = 0) -> bool:
        return self.dragging_index(pointer) is not None

    def active_pointers(self) -> list[Hashable]:
        """Pointers with a gesture in progress, idle or dragging."""
        return list(self._pointers)
