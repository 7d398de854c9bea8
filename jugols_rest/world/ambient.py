"""Ambient flavour lines, drawn at most once per half-turn."""

from __future__ import annotations

from typing import Optional

from numpy.random import Generator

from jugols_rest.core.clock import Phase, phase_key
from jugols_rest.core.config import AMBIENT_LINE_CHANCE
from jugols_rest.world.camp_factions import get_dominant_camp_faction
from jugols_rest.world.districts import DISTRICTS


DISTRICT_AMBIENT: dict[str, dict[Phase, list[str]]] = {
    "heart": {
        Phase.DAY: [
            "Merchants call out new prices while patrols pace the main avenue.",
            "Bakers pass warm loaves over the counter, trading nods with the watch.",
        ],
        Phase.NIGHT: [
            "Lanterns swing low as the Heart District settles into guarded quiet.",
            "You hear a distant bell mark the watch change near the plazas.",
        ],
    },
    "arcane": {
        Phase.DAY: [
            "Arcane couriers hurry by with sealed satchels and ink-stained sleeves.",
            "A faint shimmer hangs over the market stalls near the academies.",
        ],
        Phase.NIGHT: [
            "Runes glow softly on shuttered doors, keeping the night polite.",
            "Whispers of lectures linger in the cool arcane air.",
        ],
    },
    "verdent": {
        Phase.DAY: [
            "Verdent gardeners trade cuttings, promising to keep the ivy tame.",
            "Water carriers move in slow lines, splashing green light on the stone.",
        ],
        Phase.NIGHT: [
            "Crickets and watch whistles share the verdent night in equal measure.",
            "Leaves rustle where someone checks the perimeter with a lantern.",
        ],
    },
}

GENERIC_AMBIENT: dict[Phase, list[str]] = {
    Phase.DAY: [
        "Jugol's Rest breathes, its alleys busy with small negotiations.",
        "A street singer hums a tune about the walls holding strong.",
    ],
    Phase.NIGHT: [
        "The city settles into a wary hush as the night watch takes over.",
        "Somewhere, a kettle rattles over a guarded fire.",
    ],
}

CAMP_AMBIENT: dict[Phase, list[str]] = {
    Phase.DAY: [
        "Camp stewards trade shifts, trying to keep tempers from rising.",
        "A line forms at the camp cookfire, quiet but expectant.",
    ],
    Phase.NIGHT: [
        "Campfires flicker while sentries trade hushed warnings.",
        "The camp settles into uneasy silence under the walls.",
    ],
}


class AmbientVoice:
    """Chooses a source and a line for the current district and phase."""

    def __init__(self, rng: Generator, chance: float = AMBIENT_LINE_CHANCE) -> None:
        self._rng = rng
        self._chance = chance

    def options(self, state: "WorldState") -> list[tuple[str, list[str]]]:  # noqa: F821
        options: list[tuple[str, list[str]]] = []
        dominant = get_dominant_camp_faction(state)
        if dominant is not None and dominant.ambient_lines:
            options.append((dominant.display_name, dominant.ambient_lines))
        if state.camp_pop > 0:
            options.append(("City", CAMP_AMBIENT[state.phase]))
        district_lines = DISTRICT_AMBIENT.get(state.current_district_id, {}).get(state.phase)
        if district_lines:
            options.append((DISTRICTS[state.current_district_id].display_name, district_lines))
        options.append(("City", GENERIC_AMBIENT[state.phase]))
        return options

    def maybe_line(self, state: "WorldState") -> Optional[tuple[str, str]]:  # noqa: F821
        """(source, line) for this half-turn, or None if one already ran or the roll failed."""
        key = phase_key(state.day_number, state.phase)
        if state.last_ambient_line_key == key:
            return None
        if self._rng.random() > self._chance:
            return None
        options = self.options(state)
        source, lines = options[int(self._rng.integers(len(options)))]
        line = lines[int(self._rng.integers(len(lines)))]
        state.last_ambient_line_key = key
        return source, line
