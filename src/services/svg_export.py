"""
SVG Export Module.

Renders a computed TimelineSnapshot as a standalone SVG document using the
Jinja2 template in src/webserver/templates/timeline.svg.

The export draws what the interactive view draws: alternating lane bands,
the day ruler, connector paths with arrow heads and event boxes. While an
event is hovered, connections outside its component are hidden and events
outside it are dimmed.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from src.app.constants import DEFAULT_CONNECTION_COLOR
from src.core.story_dates import format_day_key, format_display_date
from src.services.timeline_engine import TimelineSnapshot

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "webserver", "templates"
)
TEMPLATE_NAME = "timeline.svg"
LANE_FILLS = ("rgba(30, 30, 30, 0.5)", "rgba(45, 45, 45, 0.5)")
SUMMARY_LENGTH = 28

_environment: Optional[Environment] = None


def _get_environment() -> Environment:
    global _environment
    if _environment is None:
        _environment = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(enabled_extensions=("html", "xml", "svg")),
        )
    return _environment


def _summary(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= SUMMARY_LENGTH:
        return text
    return text[: SUMMARY_LENGTH - 1] + "…"


def build_svg_context(snapshot: TimelineSnapshot) -> Dict[str, Any]:
    """
    Flattens a snapshot into plain values for the SVG template.

    Args:
        snapshot: The computed timeline.

    Returns:
        Dict[str, Any]: Template context.
    """
    inputs = snapshot.inputs
    layout = snapshot.layout
    highlight = snapshot.highlight
    storylines = {s.id: s for s in inputs.storylines}
    type_colors = {t.id: t.color for t in inputs.event_types}

    lanes: List[Dict[str, Any]] = []
    for index, storyline_id in enumerate(layout.storyline_ids):
        lane = layout.lanes[storyline_id]
        storyline = storylines.get(storyline_id)
        lanes.append(
            {
                "y": lane.y,
                "height": lane.height,
                "bottom": lane.bottom,
                "fill": LANE_FILLS[index % 2],
                "name": storyline.name if storyline else storyline_id,
                "color": storyline.color if storyline else "#ffffff",
            }
        )

    days = [
        {
            "center": layout.day_columns[day].x + layout.day_columns[day].width / 2,
            "label": format_day_key(day),
        }
        for day in layout.sorted_days
    ]

    connections = []
    for conn_id, path in snapshot.connection_paths.items():
        color_info = highlight.connection_colors.get(conn_id)
        if color_info is not None:
            color, marker, opacity = (
                color_info.color,
                f"arrow-highlighted-{color_info.index}",
                1,
            )
        else:
            color, marker = DEFAULT_CONNECTION_COLOR, "arrow"
            opacity = 0 if highlight.is_active else 1
        connections.append(
            {
                "path": path.path,
                "color": color,
                "marker": marker,
                "opacity": opacity,
                "start_x": path.start.x,
                "start_y": path.start.y,
            }
        )

    events = []
    for event_id, box in layout.event_layouts.items():
        events.append(
            {
                "x": box.x,
                "y": box.y,
                "width": box.width,
                "height": box.height,
                "expanded": box.expanded,
                "title": box.event.title,
                "date_label": format_display_date(box.event.date, list(inputs.era_order)),
                "summary": _summary(box.event.description),
                "color": type_colors.get(box.type_id, "#ffffff"),
                "opacity": highlight.event_opacity(event_id),
            }
        )

    return {
        "width": layout.canvas_width,
        "height": layout.total_height + layout.config.ruler_height,
        "ruler_height": layout.config.ruler_height,
        "palette": list(layout.config.highlight_colors),
        "lanes": lanes,
        "days": days,
        "connections": connections,
        "events": events,
    }


def render_svg(snapshot: TimelineSnapshot) -> str:
    """
    Renders a snapshot to SVG markup.

    Args:
        snapshot: The computed timeline.

    Returns:
        str: The SVG document.
    """
    template = _get_environment().get_template(TEMPLATE_NAME)
    return template.render(**build_svg_context(snapshot))


def export_svg(snapshot: TimelineSnapshot, path: Union[str, Path]) -> Path:
    """
    Writes a snapshot to an SVG file.

    Args:
        snapshot: The computed timeline.
        path: Destination file.

    Returns:
        Path: The written file.
    """
    path = Path(path)
    path.write_text(render_svg(snapshot), encoding="utf-8")
    logger.info(f"Exported timeline SVG to {path}")
    return path
