"""
Connection Router Module.

Routes event connections as cubic Bezier curves between event rectangles.

Anchor sides:
- Same-day connections leave the bottom of the upper event and enter the
  top of the lower event (or the reverse when the source is lower).
- Cross-day connections leave the right edge of the earlier column's event
  and enter the left edge of the later one.

Several connections may share one side of an event. Each side tracks how
many connections it will receive in total and how many were placed so far;
the k-th connection sits at k / (total + 1) along the side, so N
connections fan out evenly and never touch a corner.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

from src.core.connections import EventConnection
from src.services.timeline_layout import EventLayout, TimelineLayout

logger = logging.getLogger(__name__)

TOP = "top"
BOTTOM = "bottom"
LEFT = "left"
RIGHT = "right"
SIDES = (TOP, BOTTOM, LEFT, RIGHT)


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class ConnectionPath:
    """
    Routed geometry of one connection.

    Attributes:
        connection_id: The routed connection.
        path: SVG path data (``M x,y C c1 c2 end``).
        start: Anchor on the source event.
        end: Anchor on the target event.
        start_port: Side of the source event the path leaves from.
        end_port: Side of the target event the path enters.
        same_day: Whether both events share a day column.
    """

    connection_id: str
    path: str
    start: Point
    end: Point
    start_port: str
    end_port: str
    same_day: bool

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "from": self.start.to_dict(),
            "to": self.end.to_dict(),
            "fromPort": self.start_port,
            "toPort": self.end_port,
            "sameDay": self.same_day,
        }


@dataclass
class PortUsage:
    """
    Per-side connection counters of one event.

    ``totals`` is filled by the counting pass; ``used`` grows as paths are
    placed.
    """

    totals: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(SIDES, 0))
    used: Dict[str, int] = field(default_factory=lambda: dict.fromkeys(SIDES, 0))

    def reserve(self, side: str) -> None:
        self.totals[side] += 1

    def allocate(self, side: str) -> float:
        """
        Takes the next port on a side.

        Args:
            side: One of top, bottom, left, right.

        Returns:
            float: Fractional position along the side, strictly between 0
            and 1.
        """
        self.used[side] += 1
        return self.used[side] / (self.totals[side] + 1)


class ConnectionRouter:
    """
    Computes connector paths for a laid out timeline.

    Stateless between calls: port counters live only inside route().
    """

    def route(
        self,
        connections: Sequence[EventConnection],
        layout: TimelineLayout,
    ) -> Dict[str, ConnectionPath]:
        """
        Routes every connection whose endpoints are both laid out.

        Connections with a missing endpoint are skipped without error.

        Args:
            connections: All connections, in drawing order.
            layout: Geometry from TimelineLayoutEngine.

        Returns:
            Dict[str, ConnectionPath]: Connection ID to routed path.
        """
        port_usage: Dict[str, PortUsage] = {}
        routable = []

        # Pass 1: count how many connections land on each side
        for conn in connections:
            ends = self._resolve_endpoints(conn, layout)
            if ends is None:
                logger.debug(f"Skipping connection {conn.id}: endpoint not laid out")
                continue
            source, target = ends
            start_port, end_port = self._ports_for(source, target, layout)
            port_usage.setdefault(source.event_id, PortUsage()).reserve(start_port)
            port_usage.setdefault(target.event_id, PortUsage()).reserve(end_port)
            routable.append((conn, source, target, start_port, end_port))

        # Pass 2: allocate ports in list order and build paths
        paths: Dict[str, ConnectionPath] = {}
        for conn, source, target, start_port, end_port in routable:
            start_fraction = port_usage[source.event_id].allocate(start_port)
            end_fraction = port_usage[target.event_id].allocate(end_port)
            start = self._anchor(source, start_port, start_fraction)
            end = self._anchor(target, end_port, end_fraction)
            same_day = source.day_key == target.day_key
            if same_day:
                path = self._vertical_curve(start, end, downward=start_port == BOTTOM)
            else:
                path = self._horizontal_curve(start, end)
            paths[conn.id] = ConnectionPath(
                connection_id=conn.id,
                path=path,
                start=start,
                end=end,
                start_port=start_port,
                end_port=end_port,
                same_day=same_day,
            )

        logger.debug(f"Routed {len(paths)} of {len(connections)} connections")
        return paths

    def _resolve_endpoints(
        self, conn: EventConnection, layout: TimelineLayout
    ) -> Optional[Tuple[EventLayout, EventLayout]]:
        source = layout.event_layouts.get(conn.from_event_id)
        target = layout.event_layouts.get(conn.to_event_id)
        if source is None or target is None:
            return None
        if source.day_key != target.day_key and (
            source.day_key not in layout.day_columns
            or target.day_key not in layout.day_columns
        ):
            return None
        return source, target

    def _ports_for(
        self, source: EventLayout, target: EventLayout, layout: TimelineLayout
    ) -> Tuple[str, str]:
        """
        Picks the (source side, target side) pair for a connection.
        """
        if source.day_key == target.day_key:
            if source.y < target.y:
                return BOTTOM, TOP
            return TOP, BOTTOM

        source_column = layout.day_columns[source.day_key]
        target_column = layout.day_columns[target.day_key]
        if source_column.x < target_column.x:
            return RIGHT, LEFT
        return LEFT, RIGHT

    def _anchor(self, box: EventLayout, side: str, fraction: float) -> Point:
        if side == TOP:
            return Point(box.x + box.width * fraction, box.y)
        if side == BOTTOM:
            return Point(box.x + box.width * fraction, box.bottom)
        if side == LEFT:
            return Point(box.x, box.y + box.height * fraction)
        return Point(box.right, box.y + box.height * fraction)

    def _vertical_curve(self, start: Point, end: Point, downward: bool) -> str:
        """
        S-curve between stacked events, control points offset vertically by
        half the gap.
        """
        offset = abs(end.y - start.y) / 2
        direction = 1 if downward else -1
        return (
            f"M {_fmt(start.x)},{_fmt(start.y)} "
            f"C {_fmt(start.x)},{_fmt(start.y + offset * direction)} "
            f"{_fmt(end.x)},{_fmt(end.y - offset * direction)} "
            f"{_fmt(end.x)},{_fmt(end.y)}"
        )

    def _horizontal_curve(self, start: Point, end: Point) -> str:
        """
        S-curve between columns, control points offset horizontally by half
        the distance.
        """
        offset = (end.x - start.x) * 0.5
        return (
            f"M {_fmt(start.x)},{_fmt(start.y)} "
            f"C {_fmt(start.x + offset)},{_fmt(start.y)} "
            f"{_fmt(end.x - offset)},{_fmt(end.y)} "
            f"{_fmt(end.x)},{_fmt(end.y)}"
        )


def _fmt(value: float) -> str:
    """Formats a coordinate without a trailing ``.0`` for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}".rstrip("0").rstrip(".")


def route_connections(
    connections: Sequence[EventConnection], layout: TimelineLayout
) -> Dict[str, ConnectionPath]:
    """Convenience wrapper around ConnectionRouter().route()."""
    return ConnectionRouter().route(connections, layout)
