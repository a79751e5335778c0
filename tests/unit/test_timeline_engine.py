"""
Timeline Engine Unit Tests.

Tests the end-to-end pass from a script snapshot to serialized geometry.
"""

import json
from dataclasses import FrozenInstanceError

import pytest

from src.core.layout_config import LayoutConfig
from src.core.script import load_script
from src.services.drop_target import DropTarget
from src.services.timeline_engine import TimelineInputs, compute_timeline


@pytest.fixture
def inputs(sample_script):
    return TimelineInputs.from_script(sample_script)


def test_from_script_snapshot(sample_script):
    inputs = TimelineInputs.from_script(
        sample_script, expanded_ids=["e1"], hovered_event_id="e4"
    )
    assert len(inputs.events) == 5
    assert inputs.expanded_ids == frozenset({"e1"})
    assert inputs.hovered_event_id == "e4"
    assert inputs.era_order == ("公元纪年",)


def test_inputs_are_immutable(inputs):
    with pytest.raises(FrozenInstanceError):
        inputs.hovered_event_id = "e1"


def test_compute_without_hover(inputs):
    snapshot = compute_timeline(inputs)
    assert set(snapshot.layout.event_layouts) == {"e1", "e2", "e3", "e4"}
    assert set(snapshot.connection_paths) == {"c1", "c2", "c3"}
    assert snapshot.highlight.is_active is False
    assert snapshot.highlight.connection_colors == {}


def test_compute_with_hover(sample_script):
    inputs = TimelineInputs.from_script(sample_script, hovered_event_id="e1")
    snapshot = compute_timeline(inputs)
    assert snapshot.highlight.component == {"e1", "e2", "e3", "e4"}
    assert snapshot.highlight.connection_colors["c2"].index == 1


def test_custom_palette_reaches_highlight(sample_script):
    config = LayoutConfig(highlight_colors=("black",))
    inputs = TimelineInputs.from_script(sample_script, hovered_event_id="e1")
    snapshot = compute_timeline(inputs, config)
    assert {c.color for c in snapshot.highlight.connection_colors.values()} == {"black"}


def test_expanded_ids_flow_to_layout(sample_script):
    inputs = TimelineInputs.from_script(sample_script, expanded_ids={"e3"})
    snapshot = compute_timeline(inputs)
    assert snapshot.layout.event_layouts["e3"].height == 120


def test_drop_queries(inputs, fixed_today):
    snapshot = compute_timeline(inputs, today=fixed_today)
    assert snapshot.drop_target(100, 50) == DropTarget("s1", "2020-01-01")
    assert snapshot.drop_indicator(100, 50).x == -20
    assert snapshot.event_at(30, 30) == "e1"


def test_empty_snapshot_drop_uses_clock(sample_script, fixed_today):
    sample_script.events = []
    inputs = TimelineInputs.from_script(sample_script)
    snapshot = compute_timeline(inputs, today=fixed_today)
    assert snapshot.layout.canvas_width == 40
    assert snapshot.drop_target(0, 0) == DropTarget("s1", "2024-05-06 00:00:00")


def test_to_dict(sample_script):
    inputs = TimelineInputs.from_script(sample_script, hovered_event_id="e4")
    data = compute_timeline(inputs).to_dict()

    assert data["canvasWidth"] == 800
    assert data["totalHeight"] == 240
    assert data["rulerHeight"] == 48
    assert data["sortedDays"] == ["2020-01-01", "2020-01-02", "2020-01-03"]
    assert data["dayLabels"]["2020-01-02"] == "2020年01月02日"
    assert data["dayColumns"]["2020-01-01"] == {"x": 20, "width": 220}
    assert data["lanes"]["s2"] == {"y": 160, "height": 80}
    assert data["events"]["e2"]["x"] == 40
    assert data["events"]["e2"]["dayKey"] == "2020-01-01"
    assert data["connections"]["c1"]["path"] == "M 120,60 C 120,80 140,80 140,100"
    assert data["hoveredEventId"] == "e4"
    assert data["highlightedEvents"]["e1"] is True
    assert set(data["highlightedConnections"]) == {"c1", "c2", "c3"}


def test_to_dict_is_json_serializable(inputs):
    json.dumps(compute_timeline(inputs).to_dict(), ensure_ascii=False)


def test_same_inputs_same_output(inputs):
    assert compute_timeline(inputs).to_dict() == compute_timeline(inputs).to_dict()


def test_numeric_script_date_is_laid_out(script_file):
    raw = json.loads(script_file.read_text(encoding="utf-8"))
    raw["events"][0]["date"] = 2020
    script_file.write_text(json.dumps(raw), encoding="utf-8")

    snapshot = compute_timeline(TimelineInputs.from_script(load_script(script_file)))
    event_id = raw["events"][0]["id"]
    assert snapshot.layout.event_layouts[event_id].day_key == "2020"
