"""
Drop Target Module.

Resolves which (storyline, date) cell of the timeline a pointer position
refers to, for drag-and-drop and double-click event creation.

Lookups are read-only over a TimelineLayout, so they can be called on every
pointer move during a drag.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from src.app.constants import DROP_INDICATOR_INSET
from src.core.story_dates import get_day_key, midnight_of, next_gregorian_day
from src.services.timeline_layout import TimelineLayout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DropTarget:
    """A storyline lane and the date a dropped event would receive."""

    storyline_id: str
    date: str

    def to_dict(self) -> dict:
        return {"storylineId": self.storyline_id, "date": self.date}


@dataclass(frozen=True)
class DropIndicator:
    """
    Marker drawn while dragging an event over the canvas.

    Attributes:
        x: Horizontal position, centered in the gap before the target column.
        y: Top of the target lane.
        height: Marker height.
        storyline_id: Target storyline.
        date: Target date.
    """

    x: float
    y: float
    height: float
    storyline_id: str
    date: str

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "height": self.height,
            "storylineId": self.storyline_id,
            "date": self.date,
        }


class DropTargetResolver:
    """
    Maps canvas coordinates to drop targets for one layout.
    """

    def __init__(
        self,
        layout: TimelineLayout,
        today: Optional[Callable[[], date]] = None,
    ):
        """
        Initializes the DropTargetResolver.

        Args:
            layout: The layout to resolve against.
            today: Returns the current day. Defaults to date.today.
        """
        self.layout = layout
        self._today = today or date.today

    def resolve(self, x: float, y: float) -> Optional[DropTarget]:
        """
        Finds the drop target under a canvas point.

        Args:
            x: Canvas x coordinate.
            y: Canvas y coordinate.

        Returns:
            Optional[DropTarget]: The target cell, or None when there is no
            storyline or the point is outside every lane.
        """
        layout = self.layout
        if not layout.storyline_ids:
            return None

        if not layout.sorted_days:
            return DropTarget(layout.storyline_ids[0], midnight_of(self._today()))

        storyline_id = self._storyline_at(y)
        if storyline_id is None:
            return None

        return DropTarget(storyline_id, self._date_at(x))

    def indicator(self, x: float, y: float) -> Optional[DropIndicator]:
        """
        Computes the drop marker for a point.

        Args:
            x: Canvas x coordinate.
            y: Canvas y coordinate.

        Returns:
            Optional[DropIndicator]: The marker, or None without a target.
        """
        target = self.resolve(x, y)
        if target is None:
            return None

        lane = self.layout.lanes.get(target.storyline_id)
        if lane is None:
            return None

        gap = self.layout.config.event_gap
        column = self.layout.day_columns.get(get_day_key(target.date))
        if column is not None:
            indicator_x = column.x
        elif self.layout.sorted_days:
            last_column = self.layout.day_columns[self.layout.sorted_days[-1]]
            indicator_x = last_column.right + gap
        else:
            indicator_x = self.layout.config.padding_x

        return DropIndicator(
            x=indicator_x - gap / 2,
            y=lane.y,
            height=lane.height - DROP_INDICATOR_INSET,
            storyline_id=target.storyline_id,
            date=target.date,
        )

    def event_at(self, x: float, y: float) -> Optional[str]:
        """
        Hit-tests event rectangles.

        Args:
            x: Canvas x coordinate.
            y: Canvas y coordinate.

        Returns:
            Optional[str]: ID of the first event containing the point.
        """
        for event_id, event_layout in self.layout.event_layouts.items():
            if event_layout.contains(x, y):
                return event_id
        return None

    def _storyline_at(self, y: float) -> Optional[str]:
        for storyline_id in self.layout.storyline_ids:
            lane = self.layout.lanes.get(storyline_id)
            if lane is not None and lane.contains_y(y):
                return storyline_id
        return None

    def _date_at(self, x: float) -> str:
        """
        Picks the date for a horizontal position.

        Each column claims the space up to half a gap past its right edge.
        Past the last column, the date after the last Gregorian day is used;
        other date forms reuse the last date unchanged.
        """
        layout = self.layout
        half_gap = layout.config.event_gap / 2
        for day_key in layout.sorted_days:
            column = layout.day_columns[day_key]
            if x < column.right + half_gap:
                return layout.representative_date(day_key)

        last_date = layout.representative_date(layout.sorted_days[-1])
        following = next_gregorian_day(last_date)
        if following is None:
            logger.debug(f"Cannot extrapolate past {last_date!r}, reusing it")
            return last_date
        return following
