"""
Gesture Controller.

Tracks the short-lived pointer gestures on the timeline canvas and turns
their outcome into commands instead of mutating data directly.

States:
    IDLE -> DRAGGING_EVENT -> IDLE   (finish: MoveEventCommand)
    IDLE -> CONNECTING -> IDLE       (finish: CreateConnectionCommand or
                                      NewEventRequest)

cancel() returns to IDLE from any state. Geometry queries go to the
TimelineSnapshot passed into each call, which is never modified.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from src.commands.timeline_commands import CreateConnectionCommand, MoveEventCommand
from src.services.connection_router import Point
from src.services.drop_target import DropIndicator
from src.services.timeline_engine import TimelineSnapshot

logger = logging.getLogger(__name__)


class GestureState(Enum):
    IDLE = "idle"
    DRAGGING_EVENT = "dragging_event"
    CONNECTING = "connecting"


@dataclass(frozen=True)
class NewEventRequest:
    """
    Request to open the event editor pre-filled for a timeline cell.

    Attributes:
        storyline_id: Storyline of the new event.
        date: Date of the new event.
        connect_from: Event to connect from once the new event is saved.
    """

    storyline_id: str
    date: str
    connect_from: Optional[str] = None


GestureOutcome = Union[MoveEventCommand, CreateConnectionCommand, NewEventRequest]


class GestureController:
    """
    State machine for event drag and connect gestures.
    """

    def __init__(self):
        """
        Initializes the controller in the IDLE state.
        """
        self.state = GestureState.IDLE
        self.source_event_id: Optional[str] = None
        self.start_point: Optional[Point] = None
        self.pointer: Optional[Point] = None
        self.indicator: Optional[DropIndicator] = None

    @property
    def is_active(self) -> bool:
        return self.state is not GestureState.IDLE

    def begin_event_drag(self, event_id: str) -> bool:
        """
        Starts dragging an event.

        Args:
            event_id: The dragged event.

        Returns:
            bool: False if another gesture is already running.
        """
        if self.is_active:
            logger.warning(f"Ignoring drag start during {self.state.value}")
            return False
        self.state = GestureState.DRAGGING_EVENT
        self.source_event_id = event_id
        logger.debug(f"Drag started: {event_id}")
        return True

    def begin_connect(self, event_id: str, x: float, y: float) -> bool:
        """
        Starts drawing a connection from an event's port.

        Args:
            event_id: The source event.
            x: Start x in canvas coordinates.
            y: Start y in canvas coordinates.

        Returns:
            bool: False if another gesture is already running.
        """
        if self.is_active:
            logger.warning(f"Ignoring connect start during {self.state.value}")
            return False
        self.state = GestureState.CONNECTING
        self.source_event_id = event_id
        self.start_point = Point(x, y)
        self.pointer = Point(x, y)
        logger.debug(f"Connect started: {event_id}")
        return True

    def move(
        self, snapshot: TimelineSnapshot, x: float, y: float
    ) -> Optional[DropIndicator]:
        """
        Updates the gesture with a new pointer position.

        Args:
            snapshot: Current timeline geometry.
            x: Pointer x in canvas coordinates.
            y: Pointer y in canvas coordinates.

        Returns:
            Optional[DropIndicator]: The drop marker while dragging an event,
            None otherwise.
        """
        self.pointer = Point(x, y)
        if self.state is GestureState.DRAGGING_EVENT:
            self.indicator = snapshot.drop_indicator(x, y)
            return self.indicator
        return None

    def finish(
        self, snapshot: TimelineSnapshot, x: float, y: float
    ) -> Optional[GestureOutcome]:
        """
        Ends the gesture at a pointer position.

        Args:
            snapshot: Current timeline geometry.
            x: Release x in canvas coordinates.
            y: Release y in canvas coordinates.

        Returns:
            Optional[GestureOutcome]: The command or request to apply, or
            None when the release resolves to nothing.
        """
        state, source_id = self.state, self.source_event_id
        self.reset()

        if state is GestureState.DRAGGING_EVENT:
            indicator = snapshot.drop_indicator(x, y)
            if indicator is None:
                return None
            return MoveEventCommand(source_id, indicator.storyline_id, indicator.date)

        if state is GestureState.CONNECTING:
            dropped_on = snapshot.event_at(x, y)
            if dropped_on is not None:
                if dropped_on == source_id:
                    return None
                return CreateConnectionCommand(source_id, dropped_on)
            target = snapshot.drop_target(x, y)
            if target is None:
                return None
            return NewEventRequest(target.storyline_id, target.date, source_id)

        return None

    def cancel(self) -> None:
        """
        Abandons the current gesture.
        """
        if self.is_active:
            logger.debug(f"Gesture cancelled: {self.state.value}")
        self.reset()

    def reset(self) -> None:
        self.state = GestureState.IDLE
        self.source_event_id = None
        self.start_point = None
        self.pointer = None
        self.indicator = None

    @staticmethod
    def request_event_at(
        snapshot: TimelineSnapshot, x: float, y: float
    ) -> Optional[NewEventRequest]:
        """
        Handles a double click on empty canvas.

        Args:
            snapshot: Current timeline geometry.
            x: Click x in canvas coordinates.
            y: Click y in canvas coordinates.

        Returns:
            Optional[NewEventRequest]: Request for the clicked cell.
        """
        target = snapshot.drop_target(x, y)
        if target is None:
            return None
        return NewEventRequest(target.storyline_id, target.date)
