"""Narrative events that fire at most once per day when their conditions hold."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from numpy.random import Generator

from jugols_rest.core.meters import clamp_meter
from jugols_rest.world.camp_factions import get_camp_faction


@dataclass(frozen=True)
class TriggerConditions:
    district: Optional[str] = None
    camp_pop_min: Optional[int] = None
    population_min: Optional[int] = None
    faction_presence: Optional[str] = None


@dataclass(frozen=True)
class EventEffect:
    tension: int = 0
    overgrowth: int = 0
    camp_pressure: int = 0
    housing_capacity: int = 0
    future_flag: Optional[str] = None


@dataclass(frozen=True)
class NarrativeEvent:
    id: str
    text: str
    trigger: TriggerConditions = field(default_factory=TriggerConditions)
    effect: EventEffect = field(default_factory=EventEffect)

    @property
    def source_label(self) -> str:
        if self.trigger.faction_presence:
            faction = get_camp_faction(self.trigger.faction_presence)
            if faction is not None:
                return faction.display_name
        return "City"


NARRATIVE_EVENTS: list[NarrativeEvent] = [
    NarrativeEvent(
        id="camp-fire-accord",
        text=("A shared cookfire draws three camp elders into an unexpected accord. "
              "They agree to patrol the waterline together, easing a few nerves."),
        trigger=TriggerConditions(camp_pop_min=6, population_min=12),
        effect=EventEffect(tension=-3, camp_pressure=-4),
    ),
    NarrativeEvent(
        id="arcane-quiet-lecture",
        text=("A late-night lecture spills into the street, drawing apprentices and neighbors alike. "
              "The talk turns practical, outlining better ways to keep the ivy back."),
        trigger=TriggerConditions(district="arcane", population_min=14),
        effect=EventEffect(overgrowth=-3),
    ),
    NarrativeEvent(
        id="verdent-waterline",
        text=("Verdent stewards mark a new waterline for the camp, cutting a clean trench through the brush. "
              "The work leaves fewer places for trouble to hide."),
        trigger=TriggerConditions(district="verdent", camp_pop_min=4),
        effect=EventEffect(tension=-2, overgrowth=-2),
    ),
    NarrativeEvent(
        id="gilded-debt",
        text=("A Gilded envoy offers supplies in exchange for a favor to be named later. "
              "The camp buzzes with rumors, but the shelves are fuller by dusk."),
        trigger=TriggerConditions(faction_presence="gilded_exiles", camp_pop_min=3),
        effect=EventEffect(tension=2, housing_capacity=1, future_flag="gilded_debt_owed"),
    ),
]


def meets_conditions(state: "WorldState", conditions: TriggerConditions) -> bool:  # noqa: F821
    if conditions.district and state.current_district_id != conditions.district:
        return False
    if conditions.camp_pop_min is not None and state.camp_pop < conditions.camp_pop_min:
        return False
    if conditions.population_min is not None and state.total_population < conditions.population_min:
        return False
    if conditions.faction_presence and state.camp_factions.get(conditions.faction_presence, 0) <= 0:
        return False
    return True


class NarrativeEventSystem:
    """Picks and applies the day's narrative event."""

    def __init__(self, rng: Generator, events: Optional[list[NarrativeEvent]] = None) -> None:
        self._rng = rng
        self._events = events if events is not None else NARRATIVE_EVENTS

    def pick(self, state: "WorldState") -> Optional[NarrativeEvent]:  # noqa: F821
        if state.last_narrative_event_day == state.day_number:
            return None
        matches = [e for e in self._events if meets_conditions(state, e.trigger)]
        if not matches:
            return None
        return matches[int(self._rng.integers(len(matches)))]

    @staticmethod
    def apply(state: "WorldState", event: NarrativeEvent) -> None:  # noqa: F821
        effect = event.effect
        state.last_narrative_event_day = state.day_number
        if effect.tension:
            state.tension = clamp_meter(state.tension + effect.tension)
        if effect.overgrowth:
            state.overgrowth = clamp_meter(state.overgrowth + effect.overgrowth)
        if effect.camp_pressure:
            state.camp_pressure = clamp_meter(state.camp_pressure + effect.camp_pressure)
        if effect.housing_capacity:
            state.housing_capacity = max(0, state.housing_capacity + effect.housing_capacity)
        if effect.future_flag:
            state.narrative_flags[effect.future_flag] = True
