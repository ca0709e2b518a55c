"""HTTP and WebSocket API tests, run in-process against the FastAPI app."""

import json

import numpy as np
import pytest
from fastapi.testclient import TestClient

from main import app
from serialization.encoder import FRAME_HEADER, PATH_HEADER, decode_ribbon


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


def _receive_until(ws, predicate, limit: int = 200) -> dict:
    for _ in range(limit):
        frame = ws.receive_json()
        if predicate(frame):
            return frame
    raise AssertionError("no matching frame received")


# --------------------------------------------------------------------------- #
#  Catalog
# --------------------------------------------------------------------------- #

def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_list_orbits(client):
    data = client.get("/orbits").json()
    assert [f["family"] for f in data] == ["lagrange", "earth", "moon"]

    lagrange = data[0]
    assert lagrange["default_orbit"] == "l1"
    assert len(lagrange["orbits"]) == 10
    assert lagrange["orbits"][0]["period_s"] == 60.0
    assert lagrange["orbits"][0]["color"] == "#9C27B0"


def test_get_family(client):
    data = client.get("/orbits/moon").json()
    assert data["default_orbit"] == "llo_circular"
    ids = [o["id"] for o in data["orbits"]]
    assert "transfer" in ids
    transfer = next(o for o in data["orbits"] if o["id"] == "transfer")
    assert transfer["period_s"] == 100.0


def test_unknown_family_is_404(client):
    assert client.get("/orbits/mars").status_code == 404


# --------------------------------------------------------------------------- #
#  Positions and paths
# --------------------------------------------------------------------------- #

def test_position(client):
    r = client.get("/orbits/earth/geo/position", params={"t_ms": 5_000, "speed": 2.0})
    assert r.status_code == 200
    data = r.json()
    assert data["known"] is True
    assert data["period_s"] == 40.0
    x, y, z = data["position"]
    assert y == 0.0
    assert (x * x + z * z) ** 0.5 == pytest.approx(4.0)
    assert len(data["moon_position"]) == 3


def test_unknown_orbit_position_falls_back(client):
    data = client.get("/orbits/lagrange/nonexistent/position", params={"t_ms": 1234}).json()
    assert data["known"] is False
    assert data["position"] == [5.0, 0.0, 0.0]
    assert data["period_s"] == 60.0


def test_position_rejects_out_of_range_speed(client):
    assert client.get("/orbits/lagrange/l1/position", params={"speed": 20}).status_code == 422
    assert client.get("/orbits/lagrange/l1/position", params={"t_ms": -1}).status_code == 422


def test_path(client):
    data = client.get("/orbits/moon/frozen/path", params={"samples": 31}).json()
    assert data["period_s"] == 30.0
    assert len(data["times_ms"]) == 31
    assert len(data["points"]) == 31
    assert data["times_ms"][-1] == pytest.approx(30_000.0)


@pytest.mark.parametrize("speed", [1.0, 2.0, 4.0])
def test_path_covers_one_period_at_speed(client, speed):
    data = client.get("/orbits/lagrange/l1/path", params={"speed": speed, "samples": 9}).json()
    assert data["times_ms"][-1] == pytest.approx(60_000.0 / speed)

    points = np.array(data["points"])
    assert points[0] == pytest.approx(points[-1], abs=1e-9)
    angles = np.unwrap(np.arctan2(points[:, 2], points[:, 0]))
    assert np.diff(angles) == pytest.approx(np.full(8, np.pi / 4))


def test_path_binary(client):
    r = client.get("/orbits/lagrange/l1/path", params={"samples": 12, "binary": True})
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/octet-stream"
    (n,) = PATH_HEADER.unpack_from(r.content)
    assert n == 12
    points = np.frombuffer(r.content, dtype="<f4", offset=PATH_HEADER.size).reshape(-1, 3)
    assert points.shape == (12, 3)


def test_path_for_unknown_orbit_is_404(client):
    assert client.get("/orbits/earth/nonexistent/path").status_code == 404
    assert client.get("/orbits/mars/l1/path").status_code == 404


def test_moon_orbit(client):
    data = client.get("/moon/orbit").json()
    assert data["color"] == "#FFD700"
    assert data["segments"] == 64
    assert len(data["points"]) == 65
    assert data["points"][0] == pytest.approx(data["points"][-1])


# --------------------------------------------------------------------------- #
#  Ribbon builder
# --------------------------------------------------------------------------- #

RIBBON_SAMPLES = [
    {"position": [0.0, 0.0, 0.0], "captured_at": 0.0},
    {"position": [1.0, 0.0, 0.0], "captured_at": 16.0},
    {"position": [2.0, 0.0, 0.0], "captured_at": 32.0},
]


def test_ribbon_json(client):
    r = client.post("/trail/ribbon", json={"samples": RIBBON_SAMPLES, "family": "earth"})
    assert r.status_code == 200
    data = r.json()
    assert data["color"] == "#2196F3"
    assert data["vertex_count"] == 6
    assert data["triangle_count"] == 4
    assert data["indices"] == [0, 1, 2, 2, 1, 3, 2, 3, 4, 4, 3, 5]
    assert len(data["positions"]) == 18


def test_ribbon_binary(client):
    r = client.post("/trail/ribbon", json={
        "samples": RIBBON_SAMPLES, "color": "#FF0000", "width_scale": 0.5, "binary": True,
    })
    assert r.status_code == 200
    geometry, offset = decode_ribbon(r.content)
    assert offset == len(r.content)
    assert geometry.vertex_count == 6
    assert geometry.colors[:, 0] == pytest.approx(1.0)
    assert geometry.positions[0] == pytest.approx([0.0, 0.0, 0.5])


def test_ribbon_rejects_bad_input(client):
    r = client.post("/trail/ribbon", json={"samples": RIBBON_SAMPLES, "color": "red"})
    assert r.status_code == 422
    r = client.post("/trail/ribbon", json={"samples": [{"position": [0.0, 1.0]}]})
    assert r.status_code == 422


def test_short_ribbon_is_empty(client):
    data = client.post("/trail/ribbon", json={"samples": RIBBON_SAMPLES[:1]}).json()
    assert data["color"] == "#FFFFFF"
    assert data["vertex_count"] == 0
    assert data["indices"] == []


# --------------------------------------------------------------------------- #
#  Simulation stream
# --------------------------------------------------------------------------- #

def test_simulation_stream_json(client):
    with client.websocket_connect("/ws/simulation") as ws:
        ws.send_text(json.dumps({"family": "moon", "orbit": "llo_polar", "speed": 2.0}))

        first = ws.receive_json()
        assert first["family"] == "moon"
        assert first["orbit"] == "llo_polar"
        assert first["speed"] == 2.0
        assert first["elapsed_ms"] == 16.0
        assert first["trail_length"] == 1
        assert first["ribbon"] is None

        second = ws.receive_json()
        assert second["trail_length"] == 2
        assert second["ribbon"]["vertex_count"] == 4

        ws.send_text("pause")
        paused = _receive_until(ws, lambda f: f["paused"])
        after = ws.receive_json()
        assert after["elapsed_ms"] == paused["elapsed_ms"]

        ws.send_text(json.dumps({"family": "earth"}))
        earth = _receive_until(ws, lambda f: f["family"] == "earth")
        assert earth["orbit"] == "geo"
        assert earth["trail_length"] == 0

        ws.send_text("stop")


def test_simulation_stream_reset(client):
    with client.websocket_connect("/ws/simulation") as ws:
        ws.send_text(json.dumps({"speed": 5.0, "body_scale": 40}))
        frame = ws.receive_json()
        assert frame["family"] == "lagrange"
        assert frame["body_scale"] == 40.0

        ws.send_text("reset")
        reset = _receive_until(ws, lambda f: f["speed"] == 1.0)
        assert reset["body_scale"] == 20.0
        assert reset["trail_length"] <= 1

        ws.send_text("stop")


def test_simulation_stream_binary(client):
    with client.websocket_connect("/ws/simulation") as ws:
        ws.send_text(json.dumps({"family": "lagrange", "orbit": "l4", "binary": True}))

        data = ws.receive_bytes()
        elapsed, x, y, z, mx, my, mz, rotation, paused = FRAME_HEADER.unpack_from(data)
        assert elapsed == 16.0
        assert paused == 0
        assert (x * x + z * z) ** 0.5 == pytest.approx(10.0)
        ribbon, offset = decode_ribbon(data, FRAME_HEADER.size)
        assert ribbon.is_empty
        assert offset == len(data)

        data = ws.receive_bytes()
        ribbon, offset = decode_ribbon(data, FRAME_HEADER.size)
        assert ribbon.vertex_count == 4
        assert ribbon.indices.tolist() == [0, 1, 2, 2, 1, 3]
        assert offset == len(data)

        ws.send_text("stop")


def test_simulation_stream_ignores_malformed_config(client):
    with client.websocket_connect("/ws/simulation") as ws:
        ws.send_text("{not json")
        frame = ws.receive_json()
        assert frame["family"] == "lagrange"
        assert frame["orbit"] == "l1"
        ws.send_text("stop")


def test_simulation_stream_survives_bad_config_values(client):
    with client.websocket_connect("/ws/simulation") as ws:
        ws.send_text(json.dumps({"speed": "fast"}))
        frame = ws.receive_json()
        assert frame["speed"] == 1.0
        assert frame["elapsed_ms"] == 16.0

        ws.send_text(json.dumps({"body_scale": None}))
        ws.send_text(json.dumps({"orbit": "l2"}))
        frame = _receive_until(ws, lambda f: f["orbit"] == "l2")
        assert frame["body_scale"] == 20.0

        ws.send_text("stop")
