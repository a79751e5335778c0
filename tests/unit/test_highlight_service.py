"""
Highlight Service Unit Tests.
"""

from src.app.constants import HIGHLIGHT_COLORS
from src.core.connections import EventConnection
from src.services.highlight_service import (
    HighlightResult,
    assign_edge_colors,
    build_adjacency,
    compute_highlight,
    find_component,
)


def _conn(conn_id, source, target):
    return EventConnection(id=conn_id, from_event_id=source, to_event_id=target)


def test_component_follows_edges_both_ways(sample_script):
    component = find_component("e1", sample_script.event_connections)
    assert component == {"e1", "e2", "e3", "e4"}


def test_component_is_symmetric(sample_script):
    connections = sample_script.event_connections
    for event_id in ("e1", "e2", "e3", "e4"):
        assert find_component(event_id, connections) == {"e1", "e2", "e3", "e4"}


def test_isolated_event():
    result = compute_highlight("lonely", [_conn("c1", "a", "b")])
    assert result.component == {"lonely"}
    assert result.connection_colors == {}


def test_unknown_event_still_in_own_component():
    assert find_component("ghost", []) == {"ghost"}


def test_sample_colors(sample_script):
    result = compute_highlight("e1", sample_script.event_connections)
    indices = {conn_id: color.index for conn_id, color in result.connection_colors.items()}
    assert indices == {"c1": 0, "c2": 1, "c3": 0}
    assert result.connection_colors["c2"].color == HIGHLIGHT_COLORS[1]


def test_connections_outside_component_are_not_colored():
    connections = [_conn("in", "a", "b"), _conn("out", "x", "y")]
    result = compute_highlight("a", connections)
    assert set(result.connection_colors) == {"in"}
    assert result.component == {"a", "b"}


def test_adjacent_edges_differ_when_palette_allows():
    # Star: every edge shares the hub
    connections = [_conn(f"c{i}", "hub", f"leaf{i}") for i in range(5)]
    colors = assign_edge_colors(connections)
    assert [colors[f"c{i}"].index for i in range(5)] == [0, 1, 2, 3, 4]


def test_palette_wraps_around():
    connections = [_conn(f"c{i}", "hub", f"leaf{i}") for i in range(4)]
    colors = assign_edge_colors(connections, palette=["red", "green", "blue"])
    assert [colors[f"c{i}"].index for i in range(4)] == [0, 1, 2, 0]
    assert colors["c3"].color == "red"


def test_duplicate_connections_get_different_colors():
    connections = [_conn("c1", "a", "b"), _conn("c2", "a", "b")]
    colors = assign_edge_colors(connections)
    assert colors["c1"].index != colors["c2"].index


def test_self_loop_is_in_component():
    result = compute_highlight("a", [_conn("loop", "a", "a")])
    assert result.component == {"a"}
    assert result.connection_colors["loop"].index == 0


def test_no_hover_is_inactive():
    result = compute_highlight(None, [_conn("c1", "a", "b")])
    assert result.is_active is False
    assert result.component == set()
    assert result.event_opacity("a") == 1.0


def test_empty_hover_id_is_inactive():
    result = compute_highlight("", [_conn("c1", "", "b")])
    assert result.is_active is False
    assert result.hovered_event_id is None
    assert result.component == set()
    assert result.connection_colors == {}
    assert result.event_opacity("b") == 1.0

def test_event_opacity_dims_outside_component():
    result = HighlightResult(hovered_event_id="a", component={"a", "b"})
    assert result.is_highlighted("b")
    assert result.event_opacity("b") == 1.0
    assert result.event_opacity("z") == 0.3
    assert result.event_opacity("z", dimmed=0.5) == 0.5


def test_build_adjacency():
    adjacency = build_adjacency([_conn("c1", "a", "b")])
    assert adjacency == {"a": ["b"], "b": ["a"]}
