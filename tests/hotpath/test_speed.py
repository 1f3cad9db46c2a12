"""SpeedFactors: settings tables, effective speed and sanitizing."""

from __future__ import annotations

import logging
import math

import pytest

from redline.hotpath.speed import (
    DEFAULT_BASE_SPEED,
    NonFiniteSpeedFactor,
    SpeedFactors,
    fuel_factor,
)


def test_defaults_effective_is_base_speed():
    assert SpeedFactors().effective() == pytest.approx(DEFAULT_BASE_SPEED)


def test_effective_includes_extra_factors():
    f = SpeedFactors(base_speed=0.001, extra={"weather": 0.95, "grip": 1.1})
    assert f.effective() == pytest.approx(0.001 * 0.95 * 1.1)


@pytest.mark.parametrize(
    "fuel_kg, expected",
    [(5, 1.0), (0, 1.0), (120, 0.87), (500, 0.87), (62.5, 0.935)],
)
def test_fuel_factor(fuel_kg, expected):
    assert fuel_factor(fuel_kg) == pytest.approx(expected)


def test_from_settings_qualifying_soft_hard():
    f = SpeedFactors.from_settings(
        tyre_compound="Soft", session_type="Qualifying", fuel_kg=5, difficulty="HARD"
    )
    assert f.tyre == pytest.approx(1.03)
    assert f.session == pytest.approx(1.15)
    assert f.fuel == pytest.approx(1.0)
    assert f.difficulty == pytest.approx(1.2)
    assert f.effective() == pytest.approx(0.0006 * 1.03 * 1.15 * 1.2)


@pytest.mark.parametrize(
    "kwargs",
    [{"tyre_compound": "slick"}, {"session_type": "sprint"}, {"difficulty": "insane"}],
)
def test_from_settings_unknown_name_raises(kwargs):
    with pytest.raises(ValueError):
        SpeedFactors.from_settings(**kwargs)


def test_sanitized_valid_returns_same_object():
    f = SpeedFactors(tyre=1.03)
    clean, reports = f.sanitized()
    assert clean is f
    assert reports == []


@pytest.mark.parametrize("bad", [0.0, -0.5, math.inf, -math.inf, math.nan])
def test_sanitized_replaces_bad_factor(bad):
    clean, reports = SpeedFactors(session=bad).sanitized()
    assert clean.session == 1.0
    assert len(reports) == 1
    assert reports[0].name == "session"
    assert reports[0].replacement == 1.0


def test_sanitized_bad_base_speed_uses_default():
    clean, reports = SpeedFactors(base_speed=-1).sanitized()
    assert clean.base_speed == DEFAULT_BASE_SPEED
    assert reports == [NonFiniteSpeedFactor("base_speed", -1, DEFAULT_BASE_SPEED)]


def test_sanitized_extra_factor():
    clean, reports = SpeedFactors(extra={"rain": 0.0, "grip": 1.1}).sanitized()
    assert clean.extra == {"rain": 1.0, "grip": 1.1}
    assert [r.name for r in reports] == ["rain"]


def test_sanitized_logs_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="redline.hotpath.speed"):
        SpeedFactors(fuel=math.nan).sanitized()
    assert "fuel" in caplog.text


def test_report_str():
    text = str(NonFiniteSpeedFactor("tyre", 0.0, 1.0))
    assert "tyre" in text
    assert "1.0" in text


# ---------------------------------------------------------------------------
# Product of valid factors out of range
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "extra, reported",
    [
        ({"a": 1e200, "b": 1e200}, math.inf),
        ({"a": 1e-200, "b": 1e-200}, 0.0),
    ],
)
def test_sanitized_replaces_out_of_range_product(extra, reported):
    clean, reports = SpeedFactors(extra=extra).sanitized()
    assert clean.effective() == pytest.approx(DEFAULT_BASE_SPEED)
    assert reports == [NonFiniteSpeedFactor("effective", reported, DEFAULT_BASE_SPEED)]


def test_sanitized_caps_more_than_one_lap_per_frame():
    clean, reports = SpeedFactors(base_speed=0.5, extra={"boost": 3.0}).sanitized()
    assert clean.effective() == pytest.approx(DEFAULT_BASE_SPEED)
    assert [r.name for r in reports] == ["effective"]


def test_sanitized_product_check_after_factor_replacement():
    clean, reports = SpeedFactors(tyre=math.nan, extra={"a": 1e200, "b": 1e200}).sanitized()
    assert [r.name for r in reports] == ["tyre", "effective"]
    assert clean.effective() == pytest.approx(DEFAULT_BASE_SPEED)
