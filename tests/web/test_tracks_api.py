"""Track catalogue, outline and position endpoints."""

from __future__ import annotations

import pytest


def test_tracks_lists_catalogue(client):
    resp = client.get("/api/tracks")
    assert resp.status_code == 200
    tracks = {t["id"]: t for t in resp.json()["tracks"]}
    assert tracks["monza"]["has_geometry"] is True
    assert tracks["sgp"]["has_geometry"] is False
    assert tracks["monza"]["name"] == "Monza"


def test_outline_default_viewport(client):
    resp = client.get("/api/tracks/monza/outline")
    assert resp.status_code == 200
    data = resp.json()
    assert data["sample_count"] == 400
    assert len(data["points"]) == 400
    assert data["total_length"] > 0
    for p in data["points"]:
        assert 40 - 1e-6 <= p["x"] <= 760 + 1e-6
        assert 40 - 1e-6 <= p["y"] <= 560 + 1e-6


def test_outline_custom_viewport_and_samples(client):
    resp = client.get(
        "/api/tracks/spa/outline",
        params={"width": 400, "height": 300, "padding": 10, "samples": 120},
    )
    data = resp.json()
    assert resp.status_code == 200
    assert len(data["points"]) == 120
    assert data["width"] == 400


def test_outline_imprecise_is_integer(client):
    resp = client.get("/api/tracks/monza/outline", params={"precise": False, "samples": 50})
    data = resp.json()
    assert all(p["x"] == int(p["x"]) for p in data["points"])
    assert "." not in data["polyline"]


def test_outline_unknown_track_404(client):
    resp = client.get("/api/tracks/nowhere/outline")
    assert resp.status_code == 404


@pytest.mark.parametrize(
    "params",
    [
        {"width": 0},
        {"samples": 0},
        {"samples": 10_000_000},
        {"width": 100, "height": 100, "padding": 60},
    ],
)
def test_outline_invalid_params_422(client, params):
    resp = client.get("/api/tracks/monza/outline", params=params)
    assert resp.status_code == 422


def test_position_start_matches_first_outline_point(client):
    outline = client.get("/api/tracks/monza/outline").json()
    pos = client.get("/api/tracks/monza/position", params={"progress": 0.0}).json()
    first = outline["points"][0]
    assert pos["x"] == pytest.approx(first["x"])
    assert pos["y"] == pytest.approx(first["y"])
    assert pos["segment_index"] == 0


def test_position_wraps_progress(client):
    a = client.get("/api/tracks/silverstone/position", params={"progress": 0.3}).json()
    b = client.get("/api/tracks/silverstone/position", params={"progress": 2.3}).json()
    assert b["progress"] == pytest.approx(0.3)
    assert b["x"] == pytest.approx(a["x"], abs=1e-6)
    assert b["y"] == pytest.approx(a["y"], abs=1e-6)


def test_position_unknown_track_404(client):
    resp = client.get("/api/tracks/nowhere/position", params={"progress": 0.5})
    assert resp.status_code == 404


def test_speed_from_settings(client):
    resp = client.post(
        "/api/speed",
        json={"tyre_compound": "soft", "session_type": "qualifying", "difficulty": "hard"},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["effective_speed"] == pytest.approx(0.0006 * 1.03 * 1.15 * 1.2)
    assert data["progress_per_second"] == pytest.approx(data["effective_speed"] * 60)
    assert data["warnings"] == []


def test_speed_invalid_extra_factor_reported(client):
    resp = client.post("/api/speed", json={"extra": {"rain": 0.0}})
    data = resp.json()
    assert resp.status_code == 200
    assert len(data["warnings"]) == 1
    assert "rain" in data["warnings"][0]


def test_speed_unknown_tyre_422(client):
    resp = client.post("/api/speed", json={"tyre_compound": "slick"})
    assert resp.status_code == 422


@pytest.mark.parametrize("extra", [{"a": 1e-200, "b": 1e-200}, {"a": 1e200, "b": 1e200}])
def test_speed_out_of_range_product_falls_back(client, extra):
    resp = client.post("/api/speed", json={"extra": extra})
    assert resp.status_code == 200
    data = resp.json()
    assert data["effective_speed"] == pytest.approx(0.0006)
    assert data["estimated_lap_s"] == pytest.approx(1.0 / (0.0006 * 60))
    assert any("effective" in w for w in data["warnings"])
