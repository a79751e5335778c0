import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response

from src.core.layout_config import LayoutConfig, load_layout_config
from src.core.script import ScriptData, ScriptFormatError, load_script
from src.services.highlight_service import compute_highlight
from src.services.svg_export import render_svg
from src.services.timeline_engine import (
    TimelineInputs,
    TimelineSnapshot,
    compute_timeline,
)
from src.webserver.config import ServerConfig

# Configure logging
logger = logging.getLogger(__name__)

# Global config (set on startup)
_config: ServerConfig = ServerConfig()


def get_script() -> ScriptData:
    """
    Load the script for the current request.
    The file is re-read on every request so external edits show up
    immediately.
    """
    try:
        return load_script(_config.script_path)
    except FileNotFoundError:
        raise HTTPException(
            status_code=404, detail=f"Script not found: {_config.script_path}"
        )
    except ScriptFormatError as e:
        logger.error(f"Error loading script: {e}")
        raise HTTPException(status_code=500, detail=str(e))


def _split_ids(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def create_app(config: ServerConfig) -> FastAPI:
    """
    Factory function to create the FastAPI app with the given configuration.
    """
    global _config
    _config = config

    try:
        layout_config = load_layout_config(config.layout_config_path)
    except (OSError, ValueError) as e:
        logger.error(f"Falling back to default layout settings: {e}")
        layout_config = LayoutConfig()

    app = FastAPI(title="Storyline Timeline Server")

    def snapshot_for(expanded: Optional[str], hover: Optional[str]) -> TimelineSnapshot:
        inputs = TimelineInputs.from_script(
            get_script(),
            expanded_ids=_split_ids(expanded),
            hovered_event_id=hover or None,
        )
        return compute_timeline(inputs, layout_config)

    # -------------------------------------------------------------------------
    # API Endpoints
    # -------------------------------------------------------------------------

    @app.get("/api/layout")
    def get_layout(
        expanded: Optional[str] = None, hover: Optional[str] = None
    ) -> dict[str, Any]:
        """
        Get the full timeline geometry as JSON.
        ``expanded`` is a comma-separated list of event IDs.
        """
        return snapshot_for(expanded, hover).to_dict()

    @app.get("/api/highlight/{event_id}")
    def get_highlight(event_id: str) -> dict[str, Any]:
        """
        Get the connected component and connection colors for a hovered event.
        """
        script = get_script()
        result = compute_highlight(
            event_id, script.event_connections, layout_config.highlight_colors
        )
        return {
            "eventId": event_id,
            "component": sorted(result.component),
            "connections": {
                conn_id: {"color": color.color, "index": color.index}
                for conn_id, color in result.connection_colors.items()
            },
        }

    @app.get("/api/drop-target")
    def get_drop_target(
        x: float = Query(...),
        y: float = Query(...),
        expanded: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Resolve the (storyline, date) cell under a canvas point.
        """
        snapshot = snapshot_for(expanded, None)
        target = snapshot.drop_target(x, y)
        indicator = snapshot.drop_indicator(x, y)
        return {
            "target": target.to_dict() if target else None,
            "indicator": indicator.to_dict() if indicator else None,
        }

    # -------------------------------------------------------------------------
    # SVG View
    # -------------------------------------------------------------------------

    @app.get("/timeline.svg")
    def view_timeline(
        expanded: Optional[str] = None, hover: Optional[str] = None
    ) -> Response:
        svg = render_svg(snapshot_for(expanded, hover))
        return Response(content=svg, media_type="image/svg+xml")

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app
