"""Day/night phase controller.

``start_day`` runs a fixed pipeline of named stages. Later stages read meter
values written by earlier ones, so the order in ``DAY_PIPELINE`` is part of
the contract:

    ArrivalResolution -> CampFeedback -> BurstCheck -> BlessingTick
        -> ForecastRegen -> VictoryCheck
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from jugols_rest.core.clock import Phase
from jugols_rest.core.config import (
    ARRIVALS_GROWTH_DAYS,
    BASE_ARRIVALS,
    BURST_INTERVAL,
    CAMP_OVERGROWTH_BASE,
    CAMP_OVERGROWTH_PER_CAMPER,
    CAMP_PRESSURE_BASE,
    CAMP_PRESSURE_DECAY,
    CAMP_PRESSURE_PER_CAMPER,
    CAMP_TENSION_BASE,
    CAMP_TENSION_PER_CAMPER,
    CAPACITY_BURST_EVERY,
    COLLAPSE_DAYS_FOR_GAME_OVER,
    COLLAPSE_THREAT_NIGHTS,
    COLLAPSE_TRIGGERS_REQUIRED,
    DAY_ACTIONS,
    DRAFT_CANDIDATES,
    FORECAST_FACTION_SEED,
    IMMIGRATION_BURST,
    MAX_METER,
    MAX_PACK_SIZE_CAP,
    PACK_BASE_POWER,
    PACK_BASE_STAMINA,
    THREAT_OVERGROWTH_THRESHOLD,
    UNGUARDED_ROUTE_TENSION,
    VICTORY_POPULATION,
)
from jugols_rest.core.meters import available_housing, clamp_meter, house_arrivals, round_half_up
from jugols_rest.pack.hyenas import create_draft_candidates, pack_totals
from jugols_rest.pack.roster import reset_fed_today, sync_active_pack
from jugols_rest.state.world_state import IncomingGroup, WorldState, add_event, add_narrative_event
from jugols_rest.world.blessings import (
    apply_blessing_morning_ticks,
    apply_blessing_pack_stats,
    prune_expired_blessings,
)
from jugols_rest.world.camp_factions import CAMP_FACTION_BY_ID, CAMP_FACTIONS, dominant_behavior
from jugols_rest.world.pois import spawn_pois_for_day


@dataclass(frozen=True)
class DayStage:
    name: str
    run: Callable[[WorldState], WorldState]


# ----------------------------------------------------------------------
# Stages
# ----------------------------------------------------------------------

def resolve_arrivals(state: WorldState) -> WorldState:
    """House queued groups up to capacity; the overflow goes to the camp."""
    groups, state.incoming_groups_next_day = state.incoming_groups_next_day, []
    for group in groups:
        if group.size <= 0:
            continue
        faction = CAMP_FACTION_BY_ID[group.faction_id]
        housed, overflow = house_arrivals(available_housing(state), group.size)
        state.housed_pop += housed
        state.camp_pop += overflow
        if overflow:
            state.camp_factions[faction.id] = state.camp_factions.get(faction.id, 0) + overflow
        add_event(state, f"{faction.display_name}: {group.size} arrived, {housed} housed, {overflow} to camp.")
        if faction.arrival_flavor:
            add_narrative_event(state, faction.display_name, faction.arrival_flavor)
    state.camp_active = state.camp_pop > 0
    return state


def apply_camp_feedback(state: WorldState) -> WorldState:
    """An occupied camp pushes every meter up; an empty one lets pressure ease."""
    camp = state.camp_pop
    if camp <= 0:
        state.camp_pressure = clamp_meter(state.camp_pressure - CAMP_PRESSURE_DECAY)
        return state
    behavior = dominant_behavior(state)
    state.camp_pressure = clamp_meter(
        state.camp_pressure + round_half_up(CAMP_PRESSURE_BASE + CAMP_PRESSURE_PER_CAMPER * camp))
    state.tension = clamp_meter(
        state.tension + round_half_up((CAMP_TENSION_BASE + CAMP_TENSION_PER_CAMPER * camp)
                                      * behavior.tension_modifier))
    state.overgrowth = clamp_meter(
        state.overgrowth + round_half_up((CAMP_OVERGROWTH_BASE + CAMP_OVERGROWTH_PER_CAMPER * camp)
                                         * behavior.overgrowth_modifier))
    return state


def check_burst(state: WorldState) -> WorldState:
    """Burst days grow the pack cap every other time and always open a draft."""
    state.draft_pending = False
    state.draft_choices = []
    if state.day_number % BURST_INTERVAL != 0:
        return state

    state.burst_count += 1
    if state.burst_count % CAPACITY_BURST_EVERY == 0:
        state.pack_size_cap = min(MAX_PACK_SIZE_CAP, state.pack_size_cap + 1)
        state.supplies_tier += 1
        add_event(state, f"Supplies improve: tier {state.supplies_tier}, pack slots {state.pack_size_cap}.")
    state.draft_choices = create_draft_candidates(state.day_number, state.burst_count, DRAFT_CANDIDATES)
    state.draft_pending = True
    add_event(state, "Draft Phase triggered.")
    return state


def tick_blessings(state: WorldState) -> WorldState:
    apply_blessing_morning_ticks(state)
    prune_expired_blessings(state)
    return state


def regenerate_forecast(state: WorldState) -> WorldState:
    """Schedule tomorrow's arrivals, adding a surge when tomorrow is a burst day."""
    next_day = state.day_number + 1
    regular_faction = CAMP_FACTIONS[(next_day * FORECAST_FACTION_SEED) % len(CAMP_FACTIONS)]
    groups = [IncomingGroup(regular_faction.id, BASE_ARRIVALS + next_day // ARRIVALS_GROWTH_DAYS)]
    if next_day % BURST_INTERVAL == 0:
        burst_faction = CAMP_FACTIONS[(next_day + state.burst_count + 1) % len(CAMP_FACTIONS)]
        groups.append(IncomingGroup(burst_faction.id, IMMIGRATION_BURST + state.burst_count))
    state.incoming_groups_next_day = groups
    return state


def check_victory_and_collapse(state: WorldState) -> WorldState:
    if not state.victory and state.total_population >= VICTORY_POPULATION:
        state.victory = True
        add_event(state, f"Jugol's Rest shelters {state.total_population} souls. The city endures.")

    triggers = [
        state.overgrowth >= MAX_METER,
        state.tension >= MAX_METER,
        state.threat_nights_active_count >= COLLAPSE_THREAT_NIGHTS,
        state.camp_pressure >= MAX_METER,
    ]
    if sum(triggers) >= COLLAPSE_TRIGGERS_REQUIRED:
        state.collapse_days += 1
        state.hyena_stamina_base_penalty += 1
        add_event(state, "The city buckles under pressure. The pack tires.")

    if not state.game_over and state.collapse_days >= COLLAPSE_DAYS_FOR_GAME_OVER:
        state.game_over = True
        add_event(state, "Jugol's Rest has collapsed.")
    return state


DAY_PIPELINE: tuple[DayStage, ...] = (
    DayStage("ArrivalResolution", resolve_arrivals),
    DayStage("CampFeedback", apply_camp_feedback),
    DayStage("BurstCheck", check_burst),
    DayStage("BlessingTick", tick_blessings),
    DayStage("ForecastRegen", regenerate_forecast),
    DayStage("VictoryCheck", check_victory_and_collapse),
)


# ----------------------------------------------------------------------
# Phase entry points
# ----------------------------------------------------------------------

def start_day(state: WorldState, advance_day: bool = False) -> WorldState:
    if advance_day:
        state.day_number += 1

    state.phase = Phase.DAY
    state.day_actions_remaining = DAY_ACTIONS
    sync_active_pack(state)
    spawn_pois_for_day(state)
    state.day_collected_by_district = {}
    prune_expired_blessings(state, allow_cycle_grace=True)

    if not state.route_guarded_tonight:
        state.tension = clamp_meter(state.tension + UNGUARDED_ROUTE_TENSION)
    state.route_guarded_tonight = False

    for stage in DAY_PIPELINE:
        state = stage.run(state)
    return state


def start_night(state: WorldState) -> bool:
    """Flip to night and compute the pack's stamina and power budget."""
    if state.phase is not Phase.DAY:
        return False
    state.phase = Phase.NIGHT
    pack = sync_active_pack(state)
    prune_expired_blessings(state)

    totals = pack_totals(pack)
    supplies_bonus = max(0, state.supplies_tier)
    stamina = max(0, PACK_BASE_STAMINA - state.hyena_stamina_base_penalty + totals.stamina + supplies_bonus)
    power = max(0, PACK_BASE_POWER + totals.power)
    state.pack_stamina, state.pack_power = apply_blessing_pack_stats(state, stamina, power)

    state.route_guarded_tonight = False
    state.housing_boosted_tonight = False
    state.cleared_overgrowth_tonight = False
    return True


def end_night(state: WorldState) -> bool:
    """Settle the night's threat, then roll straight into the next dawn."""
    if state.phase is not Phase.NIGHT:
        return False
    if state.overgrowth >= THREAT_OVERGROWTH_THRESHOLD or state.camp_active:
        state.threat_active = True
    if state.threat_active:
        state.threat_nights_active_count += 1
    else:
        state.threat_nights_active_count = 0

    reset_fed_today(state)
    state.cleared_overgrowth_last_night = state.cleared_overgrowth_tonight
    start_day(state, advance_day=True)
    return True
