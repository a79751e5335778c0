"""
Timeline Engine Module.

Single entry point that turns an input snapshot (story data plus UI state
such as expanded and hovered events) into everything needed to draw the
timeline: event rectangles, day columns, lanes, connector paths and
highlight colors.

compute_timeline() keeps no state between calls. Callers that want to
avoid recomputation can memoize on their own input snapshot.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, FrozenSet, Iterable, Optional, Tuple

from src.core.connections import EventConnection
from src.core.events import StoryEvent
from src.core.layout_config import LayoutConfig
from src.core.script import ScriptData
from src.core.story_dates import format_day_key
from src.core.storylines import EventType, Storyline
from src.services.connection_router import ConnectionPath, ConnectionRouter
from src.services.drop_target import DropIndicator, DropTarget, DropTargetResolver
from src.services.highlight_service import HighlightResult, compute_highlight
from src.services.timeline_layout import TimelineLayout, TimelineLayoutEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimelineInputs:
    """
    Immutable snapshot of everything the timeline depends on.

    Attributes:
        storylines: Storylines in lane order.
        event_types: Known event types.
        events: All events.
        connections: All connections.
        era_order: Era names in chronological order.
        expanded_ids: Events drawn as full cards.
        hovered_event_id: Event under the pointer, if any.
    """

    storylines: Tuple[Storyline, ...] = ()
    event_types: Tuple[EventType, ...] = ()
    events: Tuple[StoryEvent, ...] = ()
    connections: Tuple[EventConnection, ...] = ()
    era_order: Tuple[str, ...] = ()
    expanded_ids: FrozenSet[str] = frozenset()
    hovered_event_id: Optional[str] = None

    @classmethod
    def from_script(
        cls,
        script: ScriptData,
        expanded_ids: Iterable[str] = (),
        hovered_event_id: Optional[str] = None,
    ) -> "TimelineInputs":
        """
        Builds inputs from a script and UI state.

        Args:
            script: The story data.
            expanded_ids: Events drawn as full cards.
            hovered_event_id: Event under the pointer, if any.

        Returns:
            TimelineInputs: The snapshot.
        """
        return cls(
            storylines=tuple(script.storylines),
            event_types=tuple(script.event_types),
            events=tuple(script.events),
            connections=tuple(script.event_connections),
            era_order=tuple(script.era_order),
            expanded_ids=frozenset(expanded_ids),
            hovered_event_id=hovered_event_id,
        )


@dataclass
class TimelineSnapshot:
    """
    Output of one engine pass.

    Attributes:
        inputs: The snapshot this was computed from.
        layout: Event, column and lane geometry.
        connection_paths: Connection ID to routed path.
        highlight: Hover component and edge colors.
    """

    inputs: TimelineInputs
    layout: TimelineLayout
    connection_paths: Dict[str, ConnectionPath] = field(default_factory=dict)
    highlight: HighlightResult = field(default_factory=HighlightResult)
    today: Optional[Callable[[], date]] = None

    def resolver(self) -> DropTargetResolver:
        return DropTargetResolver(self.layout, today=self.today)

    def drop_target(self, x: float, y: float) -> Optional[DropTarget]:
        """Resolves the drop target under a canvas point."""
        return self.resolver().resolve(x, y)

    def drop_indicator(self, x: float, y: float) -> Optional[DropIndicator]:
        """Computes the drop marker for a canvas point."""
        return self.resolver().indicator(x, y)

    def event_at(self, x: float, y: float) -> Optional[str]:
        """Returns the event under a canvas point."""
        return self.resolver().event_at(x, y)

    def to_dict(self) -> dict:
        """
        Serializes the snapshot for a rendering client.

        Returns:
            dict: JSON-serializable geometry and highlight data.
        """
        layout = self.layout
        highlighted = {
            event_id: self.highlight.is_highlighted(event_id)
            for event_id in layout.event_layouts
        }
        return {
            "canvasWidth": layout.canvas_width,
            "totalHeight": layout.total_height,
            "rulerHeight": layout.config.ruler_height,
            "sortedDays": list(layout.sorted_days),
            "dayLabels": {day: format_day_key(day) for day in layout.sorted_days},
            "dayColumns": {
                day: {"x": column.x, "width": column.width}
                for day, column in layout.day_columns.items()
            },
            "lanes": {
                storyline_id: {"y": lane.y, "height": lane.height}
                for storyline_id, lane in layout.lanes.items()
            },
            "events": {
                event_id: {
                    "x": box.x,
                    "y": box.y,
                    "width": box.width,
                    "height": box.height,
                    "dayKey": box.day_key,
                    "storylineId": box.storyline_id,
                    "typeId": box.type_id,
                    "expanded": box.expanded,
                }
                for event_id, box in layout.event_layouts.items()
            },
            "connections": {
                conn_id: path.to_dict()
                for conn_id, path in self.connection_paths.items()
            },
            "hoveredEventId": self.highlight.hovered_event_id,
            "highlightedEvents": highlighted,
            "highlightedConnections": {
                conn_id: {"color": color.color, "index": color.index}
                for conn_id, color in self.highlight.connection_colors.items()
            },
        }


def compute_timeline(
    inputs: TimelineInputs,
    config: Optional[LayoutConfig] = None,
    today: Optional[Callable[[], date]] = None,
) -> TimelineSnapshot:
    """
    Runs layout, routing and highlighting for one input snapshot.

    Args:
        inputs: The input snapshot.
        config: Geometry settings. Defaults to LayoutConfig().
        today: Clock used by drop-target queries on an empty timeline.

    Returns:
        TimelineSnapshot: The computed output.
    """
    config = config or LayoutConfig()
    layout = TimelineLayoutEngine(config).compute(
        events=inputs.events,
        storylines=inputs.storylines,
        event_types=inputs.event_types,
        era_order=inputs.era_order,
        expanded_ids=inputs.expanded_ids,
        connections=inputs.connections,
    )
    paths = ConnectionRouter().route(inputs.connections, layout)
    highlight = compute_highlight(
        inputs.hovered_event_id, inputs.connections, config.highlight_colors
    )
    return TimelineSnapshot(
        inputs=inputs,
        layout=layout,
        connection_paths=paths,
        highlight=highlight,
        today=today,
    )
