"""Speed factors: multiplicative modifiers applied to the base progress speed."""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass, field, replace

_logger = logging.getLogger(__name__)

DEFAULT_BASE_SPEED = 0.0006  # progress per 60 fps frame
MAX_EFFECTIVE_SPEED = 1.0  # one full lap per frame

TYRE_FACTORS: dict[str, float] = {"soft": 1.03, "medium": 1.0, "hard": 0.97}
SESSION_FACTORS: dict[str, float] = {"practice": 0.9, "qualifying": 1.15, "race": 1.0}
DIFFICULTY_FACTORS: dict[str, float] = {"easy": 0.9, "normal": 1.0, "hard": 1.2}

FUEL_MIN_KG = 5.0
FUEL_MAX_KG = 120.0
FUEL_MAX_PENALTY = 0.13  # 13 % slower on a full tank


def fuel_factor(fuel_kg: float) -> float:
    """Linear slowdown from 1.0 at 5 kg to 0.87 at 120 kg (clamped)."""
    clamped = min(max(fuel_kg, FUEL_MIN_KG), FUEL_MAX_KG)
    return 1.0 - ((clamped - FUEL_MIN_KG) / (FUEL_MAX_KG - FUEL_MIN_KG)) * FUEL_MAX_PENALTY


def _lookup(table: dict[str, float], name: str, kind: str) -> float:
    try:
        return table[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown {kind} {name!r}; expected one of {sorted(table)}"
        ) from None


def _is_valid(value: float) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


@dataclass(frozen=True)
class NonFiniteSpeedFactor:
    """Report of a speed factor that was replaced by a safe default."""

    name: str
    value: float
    replacement: float

    def __str__(self) -> str:
        return f"speed factor {self.name}={self.value!r} replaced by {self.replacement}"


@dataclass(frozen=True)
class SpeedFactors:
    """Named positive multipliers combined into one effective speed."""

    base_speed: float = DEFAULT_BASE_SPEED
    tyre: float = 1.0
    session: float = 1.0
    fuel: float = 1.0
    difficulty: float = 1.0
    extra: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_settings(
        cls,
        tyre_compound: str = "medium",
        session_type: str = "race",
        fuel_kg: float = FUEL_MIN_KG,
        difficulty: str = "normal",
        base_speed: float = DEFAULT_BASE_SPEED,
    ) -> SpeedFactors:
        """Build factors from user-facing settings (names are case-insensitive).

        Raises:
            ValueError: For unknown tyre, session or difficulty names.
        """
        return cls(
            base_speed=base_speed,
            tyre=_lookup(TYRE_FACTORS, tyre_compound, "tyre compound"),
            session=_lookup(SESSION_FACTORS, session_type, "session type"),
            fuel=fuel_factor(fuel_kg),
            difficulty=_lookup(DIFFICULTY_FACTORS, difficulty, "difficulty"),
        )

    def effective(self) -> float:
        """Product of the base speed and every factor."""
        speed = self.base_speed * self.tyre * self.session * self.fuel * self.difficulty
        for value in self.extra.values():
            speed *= value
        return speed

    def sanitized(self) -> tuple[SpeedFactors, list[NonFiniteSpeedFactor]]:
        """Replace zero, negative or non-finite factors with safe defaults.

        Returns the cleaned factors and one report per replaced value.
        Each report is also logged at WARNING level.  If the product of the
        cleaned factors underflows, overflows or exceeds
        :data:`MAX_EFFECTIVE_SPEED`, all factors are reset to neutral with
        :data:`DEFAULT_BASE_SPEED` and an ``"effective"`` report is added.
        """
        reports: list[NonFiniteSpeedFactor] = []
        changes: dict[str, float] = {}

        named = (
            ("base_speed", self.base_speed, DEFAULT_BASE_SPEED),
            ("tyre", self.tyre, 1.0),
            ("session", self.session, 1.0),
            ("fuel", self.fuel, 1.0),
            ("difficulty", self.difficulty, 1.0),
        )
        for name, value, default in named:
            if not _is_valid(value):
                reports.append(NonFiniteSpeedFactor(name, value, default))
                changes[name] = default

        extra = dict(self.extra)
        for name, value in self.extra.items():
            if not _is_valid(value):
                reports.append(NonFiniteSpeedFactor(name, value, 1.0))
                extra[name] = 1.0

        clean = replace(self, extra=extra, **changes) if reports else self

        # Valid factors can still multiply out to 0.0 or inf.
        speed = clean.effective()
        if not sys.float_info.min <= speed <= MAX_EFFECTIVE_SPEED:
            reports.append(NonFiniteSpeedFactor("effective", speed, DEFAULT_BASE_SPEED))
            clean = SpeedFactors(base_speed=DEFAULT_BASE_SPEED)

        for report in reports:
            _logger.warning("Invalid %s", report)

        return clean, reports
