"""
SVG Export Unit Tests.
"""

import xml.etree.ElementTree as ET

import pytest

from src.core.events import StoryEvent
from src.services.svg_export import build_svg_context, export_svg, render_svg
from src.services.timeline_engine import TimelineInputs, compute_timeline

SVG_NS = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def snapshot(sample_script):
    return compute_timeline(TimelineInputs.from_script(sample_script))


def test_context_dimensions(snapshot):
    context = build_svg_context(snapshot)
    assert context["width"] == 800
    assert context["height"] == 240 + 48
    assert len(context["palette"]) == 7


def test_context_lanes(snapshot):
    lanes = build_svg_context(snapshot)["lanes"]
    assert [lane["name"] for lane in lanes] == ["主线", "支线"]
    assert lanes[0]["fill"] != lanes[1]["fill"]
    assert lanes[1]["y"] == 160


def test_context_day_labels(snapshot):
    days = build_svg_context(snapshot)["days"]
    assert days[0] == {"center": 130, "label": "2020年01月01日"}


def test_context_events_use_type_color(snapshot):
    events = build_svg_context(snapshot)["events"]
    assert len(events) == 4
    assert {e["color"] for e in events} == {"#3366ff"}
    assert all(e["opacity"] == 1.0 for e in events)


def test_context_without_hover(snapshot):
    connections = build_svg_context(snapshot)["connections"]
    assert {c["marker"] for c in connections} == {"arrow"}
    assert {c["opacity"] for c in connections} == {1}


def test_context_with_hover(sample_script):
    sample_script.events.append(
        StoryEvent(id="e6", title="孤立", date="2020-01-02", storyline_id="s1", type_id="t1")
    )
    inputs = TimelineInputs.from_script(sample_script, hovered_event_id="e6")
    context = build_svg_context(compute_timeline(inputs))

    opacities = {e["title"]: e["opacity"] for e in context["events"]}
    assert opacities["孤立"] == 1.0
    assert opacities["开端"] == 0.3
    # Connections outside the hovered component are hidden
    assert {c["opacity"] for c in context["connections"]} == {0}


def test_highlighted_connection_marker(sample_script):
    inputs = TimelineInputs.from_script(sample_script, hovered_event_id="e1")
    context = build_svg_context(compute_timeline(inputs))
    markers = [c["marker"] for c in context["connections"]]
    assert markers == [
        "arrow-highlighted-0",
        "arrow-highlighted-1",
        "arrow-highlighted-0",
    ]


def test_expanded_summary_is_truncated(sample_script):
    sample_script.get_event("e1").description = "很长的描述" * 20
    inputs = TimelineInputs.from_script(sample_script, expanded_ids=["e1"])
    events = build_svg_context(compute_timeline(inputs))["events"]
    summary = next(e["summary"] for e in events if e["title"] == "开端")
    assert len(summary) == 28
    assert summary.endswith("…")


def test_render_is_valid_svg(snapshot):
    root = ET.fromstring(render_svg(snapshot))
    assert root.tag == f"{SVG_NS}svg"
    assert root.get("width") == "800"
    paths = [p.get("d") for p in root.iter(f"{SVG_NS}path")]
    assert "M 120,60 C 120,80 140,80 140,100" in paths


def test_render_escapes_text(sample_script):
    sample_script.get_event("e1").title = "<A & B>"
    svg = render_svg(compute_timeline(TimelineInputs.from_script(sample_script)))
    assert "&lt;A &amp; B&gt;" in svg
    ET.fromstring(svg)


def test_export_svg(tmp_path, snapshot):
    path = export_svg(snapshot, tmp_path / "out.svg")
    assert path.exists()
    assert "主线" in path.read_text(encoding="utf-8")
