"""Time-boxed shrine blessings and the places they modify the simulation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from jugols_rest.core.clock import Phase, has_passed
from jugols_rest.core.meters import clamp_meter


class BlessingType(Enum):
    PACK_STAMINA = "PACK_STAMINA"
    PACK_POWER = "PACK_POWER"
    ACTION_COST = "ACTION_COST"
    MORNING_TENSION = "MORNING_TENSION"
    MORNING_OVERGROWTH = "MORNING_OVERGROWTH"
    MORNING_CAMP = "MORNING_CAMP"
    HOUSING_REWARD = "HOUSING_REWARD"


class BlessingDuration(Enum):
    DAY = "DAY"        # until nightfall
    NIGHT = "NIGHT"    # through the coming night
    CYCLE = "CYCLE"    # through the next dawn


@dataclass
class Blessing:
    god_id: str
    type: BlessingType
    value: int
    duration: BlessingDuration
    expires_day: int
    expires_phase: Phase
    cycle_grace: bool = False

    def is_expired(self, day_number: int, phase: Phase, allow_cycle_grace: bool = False) -> bool:
        if self.cycle_grace and allow_cycle_grace:
            return False
        return has_passed(day_number, phase, self.expires_day, self.expires_phase)


_EFFECT_LABELS: dict[BlessingType, str] = {
    BlessingType.PACK_STAMINA: "Pack stamina {} at night",
    BlessingType.PACK_POWER: "Pack power {} at night",
    BlessingType.ACTION_COST: "Night action costs {}",
    BlessingType.MORNING_TENSION: "Dawn tension {}",
    BlessingType.MORNING_OVERGROWTH: "Dawn overgrowth {}",
    BlessingType.MORNING_CAMP: "Dawn camp pressure {}",
    BlessingType.HOUSING_REWARD: "Housing rewards {}",
}

_DURATION_LABELS: dict[BlessingDuration, str] = {
    BlessingDuration.DAY: "Until nightfall",
    BlessingDuration.NIGHT: "Through the next night",
    BlessingDuration.CYCLE: "Through the next dawn",
}


def create_blessing(state: "WorldState", god: "God") -> Blessing:  # noqa: F821
    """Build the blessing a god grants, timed from the current day."""
    template = god.blessing
    blessing_type = BlessingType(template.type)
    duration = BlessingDuration(template.duration)
    if duration is BlessingDuration.DAY:
        return Blessing(god.id, blessing_type, template.value, duration,
                        expires_day=state.day_number, expires_phase=Phase.NIGHT)
    return Blessing(god.id, blessing_type, template.value, duration,
                    expires_day=state.day_number + 1, expires_phase=Phase.DAY,
                    cycle_grace=duration is BlessingDuration.CYCLE)


def prune_expired_blessings(state: "WorldState", allow_cycle_grace: bool = False) -> list[Blessing]:  # noqa: F821
    """Drop expired blessings from the state; returns the ones removed."""
    kept: list[Blessing] = []
    removed: list[Blessing] = []
    for blessing in state.active_blessings:
        if blessing.is_expired(state.day_number, state.phase, allow_cycle_grace):
            removed.append(blessing)
        else:
            kept.append(blessing)
    state.active_blessings = kept
    return removed


def sum_blessings(state: "WorldState", blessing_type: BlessingType) -> int:  # noqa: F821
    return sum(b.value for b in state.active_blessings if b.type is blessing_type)


def apply_blessing_pack_stats(state: "WorldState", stamina: int, power: int) -> tuple[int, int]:  # noqa: F821
    stamina = max(0, stamina + sum_blessings(state, BlessingType.PACK_STAMINA))
    power = max(0, power + sum_blessings(state, BlessingType.PACK_POWER))
    return stamina, power


def get_blessing_action_cost_modifier(state: "WorldState") -> int:  # noqa: F821
    return sum_blessings(state, BlessingType.ACTION_COST)


def apply_blessing_morning_ticks(state: "WorldState") -> None:  # noqa: F821
    tension = sum_blessings(state, BlessingType.MORNING_TENSION)
    overgrowth = sum_blessings(state, BlessingType.MORNING_OVERGROWTH)
    camp = sum_blessings(state, BlessingType.MORNING_CAMP)
    if tension:
        state.tension = clamp_meter(state.tension + tension)
    if overgrowth:
        state.overgrowth = clamp_meter(state.overgrowth + overgrowth)
    if camp:
        state.camp_pressure = clamp_meter(state.camp_pressure + camp)


def apply_blessing_housing_reward(state: "WorldState", base_reward: int) -> int:  # noqa: F821
    return max(0, base_reward + sum_blessings(state, BlessingType.HOUSING_REWARD))


def format_blessing_effect(blessing: Optional[Blessing]) -> str:
    if blessing is None:
        return ""
    sign = "+" if blessing.value >= 0 else ""
    return _EFFECT_LABELS[blessing.type].format(f"{sign}{blessing.value}")


def format_blessing_duration(blessing: Optional[Blessing]) -> str:
    if blessing is None:
        return ""
    return _DURATION_LABELS[blessing.duration]
