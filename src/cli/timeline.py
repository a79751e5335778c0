#!/usr/bin/env python3
"""
Storyline Timeline CLI.

Provides command-line tools for computing and exporting the timeline of a
story script.

Usage:
    python -m src.cli.timeline layout --script story.json --expanded e1,e2
    python -m src.cli.timeline svg --script story.json --output timeline.svg
    python -m src.cli.timeline highlight --script story.json --event e1
    python -m src.cli.timeline drop-target --script story.json --x 300 --y 50
    python -m src.cli.timeline serve --script story.json --port 8000
"""

import argparse
import json
import logging
import sys

from src.cli.utils import parse_id_list, validate_script_path
from src.core.layout_config import load_layout_config
from src.core.logging_config import (
    setup_cli_logging,
    setup_logging,
    shutdown_logging,
)
from src.core.script import ScriptFormatError, load_script
from src.services.svg_export import export_svg, render_svg
from src.services.timeline_engine import TimelineInputs, compute_timeline

logger = logging.getLogger(__name__)


def _snapshot(args: argparse.Namespace):
    script = load_script(args.script)
    config = load_layout_config(args.config)
    inputs = TimelineInputs.from_script(
        script,
        expanded_ids=parse_id_list(getattr(args, "expanded", None)),
        hovered_event_id=getattr(args, "hover", None),
    )
    return compute_timeline(inputs, config)


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def show_layout(args: argparse.Namespace) -> int:
    """Print the computed timeline geometry as JSON."""
    try:
        snapshot = _snapshot(args)
        _print_json(snapshot.to_dict())
        return 0
    except (ScriptFormatError, ValueError, OSError) as e:
        logger.error(f"Failed to compute layout: {e}")
        print(f"✗ Error: {e}")
        if args.verbose:
            raise
        return 1


def write_svg(args: argparse.Namespace) -> int:
    """Render the timeline to SVG."""
    try:
        snapshot = _snapshot(args)
        if args.output:
            path = export_svg(snapshot, args.output)
            print(f"✓ Wrote {path}")
        else:
            print(render_svg(snapshot))
        return 0
    except (ScriptFormatError, ValueError, OSError) as e:
        logger.error(f"Failed to export SVG: {e}")
        print(f"✗ Error: {e}")
        if args.verbose:
            raise
        return 1


def show_highlight(args: argparse.Namespace) -> int:
    """Print the connected component and connection colors of an event."""
    try:
        args.hover = args.event
        snapshot = _snapshot(args)
        highlight = snapshot.highlight
        print(f"Component of {args.event} ({len(highlight.component)} events):")
        for event_id in sorted(highlight.component):
            print(f"  {event_id}")
        if highlight.connection_colors:
            print("Connections:")
            for conn_id, color in highlight.connection_colors.items():
                print(f"  {conn_id}: {color.color} (#{color.index})")
        return 0
    except (ScriptFormatError, ValueError, OSError) as e:
        logger.error(f"Failed to compute highlight: {e}")
        print(f"✗ Error: {e}")
        if args.verbose:
            raise
        return 1


def show_drop_target(args: argparse.Namespace) -> int:
    """Resolve the drop target under a canvas point."""
    try:
        snapshot = _snapshot(args)
        target = snapshot.drop_target(args.x, args.y)
        if target is None:
            print(f"✗ No drop target at ({args.x}, {args.y})")
            return 1
        print(f"✓ Storyline: {target.storyline_id}")
        print(f"  Date: {target.date}")
        return 0
    except (ScriptFormatError, ValueError, OSError) as e:
        logger.error(f"Failed to resolve drop target: {e}")
        print(f"✗ Error: {e}")
        if args.verbose:
            raise
        return 1


def serve(args: argparse.Namespace) -> int:
    """Run the timeline web server."""
    import uvicorn

    from src.webserver.config import ServerConfig
    from src.webserver.server import create_app

    setup_logging(debug_mode=args.verbose)
    config = ServerConfig(
        host=args.host,
        port=args.port,
        script_path=args.script,
        layout_config_path=args.config,
    )
    logger.info(f"Serving {args.script} on http://{args.host}:{args.port}")
    try:
        uvicorn.run(create_app(config), host=config.host, port=config.port)
    finally:
        shutdown_logging()
    return 0


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--script", "-s", required=True, help="Path to a story script JSON file"
    )
    parser.add_argument("--config", "-c", help="Path to a layout config JSON file")
    parser.add_argument(
        "--expanded", help="Comma-separated IDs of events shown expanded"
    )


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Compute and export storyline timelines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Layout command
    layout_parser = subparsers.add_parser("layout", help="Print layout as JSON")
    _add_common(layout_parser)
    layout_parser.add_argument("--hover", help="ID of the hovered event")
    layout_parser.set_defaults(func=show_layout)

    # SVG command
    svg_parser = subparsers.add_parser("svg", help="Render the timeline as SVG")
    _add_common(svg_parser)
    svg_parser.add_argument("--hover", help="ID of the hovered event")
    svg_parser.add_argument("--output", "-o", help="Output file (default: stdout)")
    svg_parser.set_defaults(func=write_svg)

    # Highlight command
    highlight_parser = subparsers.add_parser(
        "highlight", help="Show the connected component of an event"
    )
    _add_common(highlight_parser)
    highlight_parser.add_argument("--event", "-e", required=True, help="Event ID")
    highlight_parser.set_defaults(func=show_highlight)

    # Drop target command
    drop_parser = subparsers.add_parser(
        "drop-target", help="Resolve the storyline/date under a canvas point"
    )
    _add_common(drop_parser)
    drop_parser.add_argument("--x", type=float, required=True, help="Canvas x")
    drop_parser.add_argument("--y", type=float, required=True, help="Canvas y")
    drop_parser.set_defaults(func=show_drop_target)

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the web server")
    _add_common(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port")
    serve_parser.set_defaults(func=serve)

    args = parser.parse_args()

    if args.command != "serve":
        setup_cli_logging(args.verbose)

    # Validate script path
    if hasattr(args, "script"):
        if not validate_script_path(args.script):
            print(f"✗ Script file not found: {args.script}")
            sys.exit(1)

    # Execute command
    if hasattr(args, "func"):
        sys.exit(args.func(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
