"""
Highlight Service Module.

Computes what to emphasize while the pointer hovers an event: the connected
component of the event (connections treated as undirected) and a color for
every connection inside it.

Colors are assigned greedily in connection list order. Each edge takes the
smallest palette index not yet used by another edge at either endpoint,
wrapping modulo the palette size. This avoids most local clashes but is not
a minimal edge coloring.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from src.app.constants import DIMMED_EVENT_OPACITY, HIGHLIGHT_COLORS
from src.core.connections import EventConnection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HighlightColor:
    """Palette entry assigned to a highlighted connection."""

    color: str
    index: int


@dataclass
class HighlightResult:
    """
    Highlight state for one hovered event.

    Attributes:
        hovered_event_id: The hovered event, or None when nothing is hovered.
        component: IDs of every event reachable from the hovered one.
        connection_colors: Connection ID to its assigned color, for
            connections with both ends in the component.
    """

    hovered_event_id: Optional[str] = None
    component: Set[str] = field(default_factory=set)
    connection_colors: Dict[str, HighlightColor] = field(default_factory=dict)

    @property
    def is_active(self) -> bool:
        return self.hovered_event_id is not None

    def is_highlighted(self, event_id: str) -> bool:
        return event_id in self.component

    def event_opacity(
        self, event_id: str, dimmed: float = DIMMED_EVENT_OPACITY
    ) -> float:
        """
        Returns the opacity an event should be drawn with.

        Args:
            event_id: The event.
            dimmed: Opacity of events outside the component while hovering.

        Returns:
            float: 1.0 unless a hover is active and the event is outside it.
        """
        if not self.is_active or event_id in self.component:
            return 1.0
        return dimmed


def build_adjacency(
    connections: Sequence[EventConnection],
) -> Dict[str, List[str]]:
    """
    Builds an undirected adjacency list from directed connections.

    Args:
        connections: The connection list.

    Returns:
        Dict[str, List[str]]: Event ID to neighbour IDs.
    """
    adjacency: Dict[str, List[str]] = {}
    for conn in connections:
        adjacency.setdefault(conn.from_event_id, []).append(conn.to_event_id)
        adjacency.setdefault(conn.to_event_id, []).append(conn.from_event_id)
    return adjacency


def find_component(
    start_event_id: str, connections: Sequence[EventConnection]
) -> Set[str]:
    """
    Breadth-first search for every event reachable from a start event.

    Args:
        start_event_id: Where the search begins. Always part of the result.
        connections: Connections, followed in both directions.

    Returns:
        Set[str]: The connected component.
    """
    adjacency = build_adjacency(connections)
    visited = {start_event_id}
    queue = deque([start_event_id])
    while queue:
        current = queue.popleft()
        for neighbour in adjacency.get(current, ()):
            if neighbour not in visited:
                visited.add(neighbour)
                queue.append(neighbour)
    return visited


def assign_edge_colors(
    connections: Sequence[EventConnection],
    palette: Sequence[str] = HIGHLIGHT_COLORS,
) -> Dict[str, HighlightColor]:
    """
    Greedily colors connections so that edges sharing an endpoint differ.

    Args:
        connections: Connections to color, in priority order.
        palette: Colors to pick from.

    Returns:
        Dict[str, HighlightColor]: Connection ID to color.
    """
    colors: Dict[str, HighlightColor] = {}
    used_by_event: Dict[str, Set[int]] = {}

    for conn in connections:
        source_used = used_by_event.setdefault(conn.from_event_id, set())
        target_used = used_by_event.setdefault(conn.to_event_id, set())
        taken = source_used | target_used

        index = 0
        while index in taken:
            index += 1
        index %= len(palette)

        colors[conn.id] = HighlightColor(color=palette[index], index=index)
        source_used.add(index)
        target_used.add(index)

    return colors


def compute_highlight(
    hovered_event_id: Optional[str],
    connections: Sequence[EventConnection],
    palette: Sequence[str] = HIGHLIGHT_COLORS,
) -> HighlightResult:
    """
    Computes the highlight state for a hovered event.

    Args:
        hovered_event_id: The hovered event. None or an empty ID clears
            highlighting.
        connections: All connections.
        palette: Colors for highlighted connections.

    Returns:
        HighlightResult: Component and connection colors. Empty when nothing
        is hovered.
    """
    if not hovered_event_id:
        return HighlightResult()

    component = find_component(hovered_event_id, connections)
    component_connections = [
        conn
        for conn in connections
        if conn.from_event_id in component and conn.to_event_id in component
    ]
    colors = assign_edge_colors(component_connections, palette)

    logger.debug(
        f"Hover {hovered_event_id}: {len(component)} events, "
        f"{len(colors)} connections highlighted"
    )
    return HighlightResult(
        hovered_event_id=hovered_event_id,
        component=component,
        connection_colors=colors,
    )
