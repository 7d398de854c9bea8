"""Clamped pressure meters and population/housing arithmetic."""

from __future__ import annotations

import math

from jugols_rest.core.config import MAX_METER, MIN_METER


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def clamp_meter(value: float) -> int:
    """Clamp a meter value to [0, 100] after rounding."""
    return max(MIN_METER, min(MAX_METER, round_half_up(value)))


def clamp_visibility(value: float) -> int:
    return clamp_meter(value)


def available_housing(state: "WorldState") -> int:  # noqa: F821
    """Free housing slots; never negative even if capacity shrank."""
    return max(0, state.housing_capacity - state.housed_pop)


def house_arrivals(available: int, size: int) -> tuple[int, int]:
    """Split an arriving group into (housed, overflow) given free capacity."""
    size = max(0, size)
    housed = min(size, max(0, available))
    return housed, size - housed
