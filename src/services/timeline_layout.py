"""
Timeline Layout Module.

Computes the geometry of the storyline timeline: one vertical lane per
storyline, one horizontal column per day, and a rectangle per event.

Same-day events share a column. Each gets an indentation level (its position
among that day's events) so co-temporal events are told apart, and events of
the same day and lane are stacked vertically and centered in the lane.
"""

import logging
from dataclasses import dataclass, field
from typing import (
    Collection,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Sequence,
    Set,
)

from src.core.connections import EventConnection
from src.core.events import StoryEvent
from src.core.layout_config import LayoutConfig
from src.core.story_dates import get_day_key, normalize_date
from src.core.storylines import EventType, Storyline

logger = logging.getLogger(__name__)


@dataclass
class EventLayout:
    """
    Rectangle of one event on the canvas.

    Attributes:
        x: Left edge.
        y: Top edge.
        width: Box width.
        height: Box height (depends on the expanded flag).
        event: The laid out event.
        day_key: Day column the event belongs to.
        indentation: Capped indentation level within the day.
        expanded: Whether the event is drawn as a full card.
    """

    x: float
    y: float
    width: float
    height: float
    event: StoryEvent
    day_key: str
    indentation: int = 0
    expanded: bool = False

    @property
    def event_id(self) -> str:
        return self.event.id

    @property
    def storyline_id(self) -> Optional[str]:
        return self.event.storyline_id

    @property
    def type_id(self) -> Optional[str]:
        return self.event.type_id

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        """Checks whether a point lies inside the rectangle, edges included."""
        return self.x <= x <= self.right and self.y <= y <= self.bottom

    def overlaps(self, other: "EventLayout") -> bool:
        """Checks whether two rectangles share any interior area."""
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )


@dataclass
class DayColumn:
    """Horizontal extent of one day column."""

    x: float
    width: float

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass
class LaneGeometry:
    """Vertical extent of one storyline lane."""

    y: float
    height: float

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains_y(self, y: float) -> bool:
        """Half-open check so adjacent lanes never both claim a point."""
        return self.y <= y < self.bottom


@dataclass
class TimelineLayout:
    """
    Result of one layout pass.

    Attributes:
        event_layouts: Event ID to rectangle, for every placed event.
        day_columns: Day key to column geometry.
        lanes: Storyline ID to lane geometry, in storyline order.
        sorted_days: Unique day keys in chronological order.
        events_by_day: Day key to its complete events in chronological order.
        storyline_ids: Storyline IDs in lane order.
        canvas_width: Right edge of the last column.
        total_height: Bottom edge of the last lane.
        config: Settings the layout was computed with.
    """

    event_layouts: Dict[str, EventLayout] = field(default_factory=dict)
    day_columns: Dict[str, DayColumn] = field(default_factory=dict)
    lanes: Dict[str, LaneGeometry] = field(default_factory=dict)
    sorted_days: List[str] = field(default_factory=list)
    events_by_day: Dict[str, List[StoryEvent]] = field(default_factory=dict)
    storyline_ids: List[str] = field(default_factory=list)
    canvas_width: float = 0.0
    total_height: float = 0.0
    config: LayoutConfig = field(default_factory=LayoutConfig)

    def representative_date(self, day_key: str) -> Optional[str]:
        """
        Returns the date of the first event of a day column.

        Args:
            day_key: The day key.

        Returns:
            Optional[str]: The date string, or None for an unknown day.
        """
        day_events = self.events_by_day.get(day_key)
        if not day_events:
            return None
        return day_events[0].date


def build_link_index(
    connections: Iterable[EventConnection],
) -> Set[FrozenSet[str]]:
    """
    Builds an undirected lookup of linked event pairs.

    Args:
        connections: The connection list.

    Returns:
        Set[FrozenSet[str]]: One entry per linked pair, regardless of
        direction or multiplicity.
    """
    return {
        frozenset((conn.from_event_id, conn.to_event_id)) for conn in connections
    }


class TimelineLayoutEngine:
    """
    Computes timeline geometry from a snapshot of story data.

    The engine holds only its configuration. compute() is a pure function of
    its arguments, so it can be called on every data change.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        """
        Initializes the TimelineLayoutEngine.

        Args:
            config: Geometry settings. Defaults to LayoutConfig().
        """
        self.config = config or LayoutConfig()

    def compute(
        self,
        events: Sequence[StoryEvent],
        storylines: Sequence[Storyline],
        event_types: Sequence[EventType],
        era_order: Sequence[str],
        expanded_ids: Collection[str] = frozenset(),
        connections: Sequence[EventConnection] = (),
    ) -> TimelineLayout:
        """
        Lays out the timeline.

        Args:
            events: All events. Incomplete events are ignored.
            storylines: Storylines in lane order.
            event_types: Known event types.
            era_order: Era names in chronological order.
            expanded_ids: IDs of events drawn as full cards.
            connections: All connections, used to widen gaps between
                linked same-day events.

        Returns:
            TimelineLayout: The computed geometry.
        """
        era_order = list(era_order)
        sorted_events = self._sort_events(events, era_order)
        events_by_day = self._group_by_day(sorted_events)
        sorted_days = list(events_by_day)

        indentation = self._indentation_levels(events_by_day)
        day_columns = self._layout_columns(events_by_day, indentation)

        if sorted_days:
            last_column = day_columns[sorted_days[-1]]
            canvas_width = last_column.right
        else:
            canvas_width = 2 * self.config.padding_x

        linked_pairs = build_link_index(connections)
        stacks = self._group_by_storyline_and_day(sorted_events, storylines)
        lanes = self._layout_lanes(storylines, stacks, expanded_ids, linked_pairs)
        total_height = sum(lane.height for lane in lanes.values())
        if total_height <= 0:
            total_height = self.config.min_lane_height

        known_types = {event_type.id for event_type in event_types}
        event_layouts = self._place_events(
            stacks,
            lanes,
            day_columns,
            indentation,
            expanded_ids,
            linked_pairs,
            known_types,
        )

        logger.debug(
            f"Laid out {len(event_layouts)} events in {len(sorted_days)} days "
            f"and {len(lanes)} lanes ({canvas_width}x{total_height})"
        )

        return TimelineLayout(
            event_layouts=event_layouts,
            day_columns=day_columns,
            lanes=lanes,
            sorted_days=sorted_days,
            events_by_day=events_by_day,
            storyline_ids=list(lanes),
            canvas_width=canvas_width,
            total_height=total_height,
            config=self.config,
        )

    def _sort_events(
        self, events: Sequence[StoryEvent], era_order: List[str]
    ) -> List[StoryEvent]:
        complete = [event for event in events if event.is_complete]
        # sorted() is stable: equal keys keep input order
        return sorted(complete, key=lambda event: normalize_date(event.date, era_order))

    def _group_by_day(
        self, sorted_events: List[StoryEvent]
    ) -> Dict[str, List[StoryEvent]]:
        """
        Groups events by day key.

        Days keep the order of their first event, which is chronological
        because the input is sorted.
        """
        events_by_day: Dict[str, List[StoryEvent]] = {}
        for event in sorted_events:
            events_by_day.setdefault(get_day_key(event.date), []).append(event)
        return events_by_day

    def _indentation_levels(
        self, events_by_day: Dict[str, List[StoryEvent]]
    ) -> Dict[str, int]:
        levels: Dict[str, int] = {}
        for day_events in events_by_day.values():
            for index, event in enumerate(day_events):
                levels[event.id] = min(index, self.config.max_indentation_level)
        return levels

    def _layout_columns(
        self,
        events_by_day: Dict[str, List[StoryEvent]],
        indentation: Dict[str, int],
    ) -> Dict[str, DayColumn]:
        """
        Places day columns left to right.

        A column is as wide as its most indented event.
        """
        config = self.config
        columns: Dict[str, DayColumn] = {}
        current_x = config.padding_x
        for day_key, day_events in events_by_day.items():
            content_width = config.event_width
            for event in day_events:
                indented_width = (
                    indentation.get(event.id, 0) * config.indentation_step
                    + config.event_width
                )
                content_width = max(content_width, indented_width)
            columns[day_key] = DayColumn(x=current_x, width=content_width)
            current_x += content_width + config.event_gap
        return columns

    def _group_by_storyline_and_day(
        self,
        sorted_events: List[StoryEvent],
        storylines: Sequence[Storyline],
    ) -> Dict[str, Dict[str, List[StoryEvent]]]:
        stacks: Dict[str, Dict[str, List[StoryEvent]]] = {
            storyline.id: {} for storyline in storylines
        }
        for event in sorted_events:
            storyline_days = stacks.get(event.storyline_id)
            if storyline_days is None:
                continue
            storyline_days.setdefault(get_day_key(event.date), []).append(event)
        return stacks

    def _gap_after(
        self,
        day_events: List[StoryEvent],
        index: int,
        linked_pairs: Set[FrozenSet[str]],
    ) -> float:
        """
        Returns the gap between a stacked event and the one below it.

        Linked neighbours get a wider gap so their connector has room.
        """
        if index >= len(day_events) - 1:
            return 0.0
        pair = frozenset((day_events[index].id, day_events[index + 1].id))
        if pair in linked_pairs:
            return self.config.same_day_connected_gap
        return self.config.same_day_vertical_gap

    def _stack_height(
        self,
        day_events: List[StoryEvent],
        expanded_ids: Collection[str],
        linked_pairs: Set[FrozenSet[str]],
    ) -> float:
        height = 0.0
        for index, event in enumerate(day_events):
            height += self.config.event_height(event.id in expanded_ids)
            height += self._gap_after(day_events, index, linked_pairs)
        return height

    def _layout_lanes(
        self,
        storylines: Sequence[Storyline],
        stacks: Dict[str, Dict[str, List[StoryEvent]]],
        expanded_ids: Collection[str],
        linked_pairs: Set[FrozenSet[str]],
    ) -> Dict[str, LaneGeometry]:
        """
        Stacks lanes top to bottom in storyline list order.
        """
        config = self.config
        lanes: Dict[str, LaneGeometry] = {}
        current_y = 0.0
        for storyline in storylines:
            if storyline.id in lanes:
                continue
            max_stack = 0.0
            for day_events in stacks.get(storyline.id, {}).values():
                max_stack = max(
                    max_stack,
                    self._stack_height(day_events, expanded_ids, linked_pairs),
                )
            lane_height = max(
                config.min_lane_height, max_stack + 2 * config.lane_vertical_padding
            )
            lanes[storyline.id] = LaneGeometry(y=current_y, height=lane_height)
            current_y += lane_height
        return lanes

    def _place_events(
        self,
        stacks: Dict[str, Dict[str, List[StoryEvent]]],
        lanes: Dict[str, LaneGeometry],
        day_columns: Dict[str, DayColumn],
        indentation: Dict[str, int],
        expanded_ids: Collection[str],
        linked_pairs: Set[FrozenSet[str]],
        known_types: Set[str],
    ) -> Dict[str, EventLayout]:
        config = self.config
        event_layouts: Dict[str, EventLayout] = {}

        for storyline_id, lane in lanes.items():
            for day_key, day_events in stacks.get(storyline_id, {}).items():
                column = day_columns.get(day_key)
                if column is None:
                    continue

                stack_height = self._stack_height(day_events, expanded_ids, linked_pairs)
                current_y = lane.y + (lane.height - stack_height) / 2

                for index, event in enumerate(day_events):
                    expanded = event.id in expanded_ids
                    height = config.event_height(expanded)
                    level = indentation.get(event.id, 0)

                    if event.type_id in known_types:
                        event_layouts[event.id] = EventLayout(
                            x=column.x + level * config.indentation_step,
                            y=current_y,
                            width=config.event_width,
                            height=height,
                            event=event,
                            day_key=day_key,
                            indentation=level,
                            expanded=expanded,
                        )
                    else:
                        logger.debug(
                            f"Event {event.id} has unknown type {event.type_id!r}"
                        )

                    current_y += height + self._gap_after(day_events, index, linked_pairs)

        return event_layouts
