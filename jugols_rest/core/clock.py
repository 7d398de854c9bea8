"""Turn structure for the simulation: days and the DAY/NIGHT phases."""

from __future__ import annotations

from enum import Enum


class Phase(Enum):
    DAY = "DAY"
    NIGHT = "NIGHT"

    @property
    def order(self) -> int:
        return 0 if self is Phase.DAY else 1


def has_passed(day: int, phase: Phase, until_day: int, until_phase: Phase) -> bool:
    """True once (day, phase) has reached or gone beyond (until_day, until_phase)."""
    if day > until_day:
        return True
    if day < until_day:
        return False
    return phase.order >= until_phase.order


def phase_key(day: int, phase: Phase) -> str:
    """Stable key for one half-turn, e.g. ``"4-NIGHT"``."""
    return f"{day}-{phase.value}"
