"""The single mutable root aggregate every handler reads and writes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from jugols_rest.core.clock import Phase
from jugols_rest.core.config import (
    DAY_ACTIONS,
    EVENT_LOG_LIMIT,
    NARRATIVE_LOG_LIMIT,
    STARTING_HOUSED_POP,
    STARTING_HOUSING_CAPACITY,
    STARTING_PACK_SIZE_CAP,
    STARTING_SUPPLIES_TIER,
)
from jugols_rest.pack.hyenas import Hyena, create_starter_roster
from jugols_rest.world.districts import DEFAULT_DISTRICT_ID


@dataclass
class IncomingGroup:
    """One wave of arrivals scheduled for the next dawn."""

    faction_id: str
    size: int


@dataclass
class NarrativeEntry:
    source: str
    text: str


@dataclass
class WorldState:
    """Everything a playthrough knows. Handlers mutate it in place."""

    day_number: int = 1
    phase: Phase = Phase.DAY
    day_actions_remaining: int = DAY_ACTIONS

    # resources
    food_scraps: int = 0
    food_fatty: int = 0

    # population
    housed_pop: int = STARTING_HOUSED_POP
    camp_pop: int = 0
    housing_capacity: int = STARTING_HOUSING_CAPACITY
    camp_factions: dict[str, int] = field(default_factory=dict)
    incoming_groups_next_day: list[IncomingGroup] = field(default_factory=list)

    # meters
    tension: int = 10
    overgrowth: int = 10
    camp_pressure: int = 0

    # flags
    threat_active: bool = False
    camp_active: bool = False
    victory: bool = False
    game_over: bool = False

    # counters
    threat_nights_active_count: int = 0
    collapse_days: int = 0
    burst_count: int = 0

    # pack
    hyena_roster: list[Hyena] = field(default_factory=create_starter_roster)
    active_pack_ids: list[str] = field(default_factory=list)
    pack_size_cap: int = STARTING_PACK_SIZE_CAP
    pack_stamina: int = 0
    pack_power: int = 0
    hyena_stamina_base_penalty: int = 0
    supplies_tier: int = STARTING_SUPPLIES_TIER
    draft_pending: bool = False
    draft_choices: list[Hyena] = field(default_factory=list)

    # per-night one-shots
    route_guarded_tonight: bool = False
    housing_boosted_tonight: bool = False
    cleared_overgrowth_tonight: bool = False
    cleared_overgrowth_last_night: bool = False

    # world
    current_district_id: str = DEFAULT_DISTRICT_ID
    day_collected_by_district: dict[str, dict[str, bool]] = field(default_factory=dict)
    pois_by_district: dict = field(default_factory=dict)  # district -> {PoiId: Poi}
    recent_shrine_gods: list[str] = field(default_factory=list)
    discovered_shrines: dict[str, bool] = field(default_factory=dict)
    active_blessings: list = field(default_factory=list)
    factions: dict = field(default_factory=dict)  # faction id -> FactionRuntime

    # narrative
    narrative_flags: dict[str, bool] = field(default_factory=dict)
    narrative_log: list[NarrativeEntry] = field(default_factory=list)
    last_narrative_event_day: Optional[int] = None
    last_ambient_line_key: Optional[str] = None

    event_log: list[str] = field(default_factory=list)
    event_serial: int = field(default=0, compare=False)  # lines ever logged, not saved

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def total_population(self) -> int:
        return self.housed_pop + self.camp_pop

    @property
    def location_collected(self) -> dict[str, bool]:
        """Collected-today flags for the current district (a read-only view)."""
        return dict(self.day_collected_by_district.get(self.current_district_id, {}))

    def get_hyena(self, hyena_id: str) -> Optional[Hyena]:
        for hyena in self.hyena_roster:
            if hyena.id == hyena_id:
                return hyena
        return None


def create_initial_state() -> WorldState:
    """A fresh day-one state with the starter pack deployed."""
    state = WorldState()
    state.active_pack_ids = [h.id for h in state.hyena_roster[:state.pack_size_cap]]
    from jugols_rest.factions.influence import create_faction_states
    state.factions = create_faction_states()
    return state


def add_event(state: WorldState, message: str) -> None:
    """Append to the bounded event log, dropping the oldest entry."""
    state.event_log.append(message)
    state.event_serial += 1
    if len(state.event_log) > EVENT_LOG_LIMIT:
        del state.event_log[: len(state.event_log) - EVENT_LOG_LIMIT]


def add_narrative_event(state: WorldState, source: str, text: str) -> None:
    state.narrative_log.append(NarrativeEntry(source=source, text=text))
    if len(state.narrative_log) > NARRATIVE_LOG_LIMIT:
        del state.narrative_log[: len(state.narrative_log) - NARRATIVE_LOG_LIMIT]
