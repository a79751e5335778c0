import json

import pytest
from fastapi.testclient import TestClient

from src.webserver.config import ServerConfig
from src.webserver.server import create_app


@pytest.fixture
def client(script_file):
    config = ServerConfig(script_path=str(script_file))
    app = create_app(config)
    return TestClient(app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_layout(client):
    response = client.get("/api/layout")
    assert response.status_code == 200

    data = response.json()
    assert data["canvasWidth"] == 800
    assert data["totalHeight"] == 240
    assert set(data["events"]) == {"e1", "e2", "e3", "e4"}
    assert data["connections"]["c1"]["fromPort"] == "bottom"
    assert data["highlightedConnections"] == {}


def test_layout_expanded_and_hover(client):
    response = client.get("/api/layout", params={"expanded": "e4", "hover": "e1"})
    data = response.json()
    assert data["lanes"]["s2"]["height"] == 160
    assert data["hoveredEventId"] == "e1"
    assert data["highlightedConnections"]["c3"] == {"color": "#3b82f6", "index": 0}


def test_layout_reflects_file_changes(client, script_file):
    raw = json.loads(script_file.read_text(encoding="utf-8"))
    raw["events"] = []
    script_file.write_text(json.dumps(raw), encoding="utf-8")

    data = client.get("/api/layout").json()
    assert data["events"] == {}
    assert data["canvasWidth"] == 40


def test_highlight(client):
    response = client.get("/api/highlight/e4")
    assert response.status_code == 200

    data = response.json()
    assert data["eventId"] == "e4"
    assert data["component"] == ["e1", "e2", "e3", "e4"]
    assert data["connections"]["c2"]["index"] == 1


def test_highlight_isolated(client):
    data = client.get("/api/highlight/e5").json()
    assert data["component"] == ["e5"]
    assert data["connections"] == {}


def test_drop_target(client):
    response = client.get("/api/drop-target", params={"x": 1000, "y": 50})
    assert response.status_code == 200

    data = response.json()
    assert data["target"] == {"storylineId": "s1", "date": "2020-01-04 00:00:00"}
    assert data["indicator"]["x"] == 840
    assert data["indicator"]["height"] == 140


def test_drop_target_outside(client):
    data = client.get("/api/drop-target", params={"x": 100, "y": 500}).json()
    assert data == {"target": None, "indicator": None}


def test_drop_target_requires_coordinates(client):
    assert client.get("/api/drop-target", params={"x": 10}).status_code == 422


def test_svg_view(client):
    response = client.get("/timeline.svg", params={"hover": "e1"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert "arrow-highlighted-1" in response.text


def test_missing_script(tmp_path):
    client = TestClient(create_app(ServerConfig(script_path=str(tmp_path / "x.json"))))
    response = client.get("/api/layout")
    assert response.status_code == 404


def test_broken_script(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("not json", encoding="utf-8")
    client = TestClient(create_app(ServerConfig(script_path=str(path))))
    assert client.get("/api/layout").status_code == 500


def test_bad_layout_config_falls_back(script_file, tmp_path):
    config_path = tmp_path / "layout.json"
    config_path.write_text(json.dumps({"event_width": -1}))
    config = ServerConfig(
        script_path=str(script_file), layout_config_path=str(config_path)
    )
    client = TestClient(create_app(config))
    assert client.get("/api/layout").json()["canvasWidth"] == 800
