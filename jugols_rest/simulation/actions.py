"""Player action handlers.

Every handler validates all of its preconditions before touching the state.
A rejected action returns False or None and leaves the state unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from jugols_rest.core.clock import Phase
from jugols_rest.core.config import (
    LOT_CAMP_RELIEF,
    LOT_HOUSING_REWARD,
    OVERGROWTH_CLEAR_BASE,
    OVERGROWTH_CLEAR_PER_SEVERITY,
    OVERGROWTH_HOUSING_REWARD,
    RUCKUS_POWER_REQUIRED,
    RUCKUS_POWER_REQUIRED_BRUISER,
    RUCKUS_TENSION_BASE,
    RUCKUS_TENSION_PER_SEVERITY,
    STABILIZE_PRESSURE_RELIEF,
    STABILIZE_SCRAPS_COST,
    WARDEN_OVERGROWTH_BONUS,
)
from jugols_rest.core.meters import available_housing, clamp_meter
from jugols_rest.pack.hyenas import Role, has_role
from jugols_rest.pack.roster import get_active_pack
from jugols_rest.state.world_state import WorldState, add_event
from jugols_rest.world.blessings import (
    Blessing,
    apply_blessing_housing_reward,
    create_blessing,
    format_blessing_effect,
)
from jugols_rest.world.contacts import (
    LEGACY_REWARDS,
    FoodYield,
    find_contact_for_slot,
    get_contact,
    get_contact_faction_effect,
)
from jugols_rest.world.districts import DISTRICTS
from jugols_rest.world.gods import get_god
from jugols_rest.world.pois import (
    Poi,
    PoiId,
    PoiType,
    find_poi,
    get_poi_action_cost,
    has_night_pois,
    resolve_poi,
    spawn_pois_for_night,
)


@dataclass
class StabilizeResult:
    moved: int
    pressure_relief: int


def _can_spend_day_action(state: WorldState) -> bool:
    return state.phase is Phase.DAY and state.day_actions_remaining > 0


# ----------------------------------------------------------------------
# Day actions
# ----------------------------------------------------------------------

def _collection_slot(state: WorldState, location_key: str) -> tuple[str, str]:
    """District and key a collection is flagged under for the day."""
    contact = get_contact(location_key)
    if contact is None and location_key in LEGACY_REWARDS:
        contact = find_contact_for_slot(state.current_district_id, location_key)
    if contact is None:
        return state.current_district_id, location_key
    return contact.district_id, contact.id


def collect_location(state: WorldState, location_key: str) -> bool:
    """Pick up supplies from a contact (or a legacy slot) once per day.

    A legacy slot and the contact that fills it in the current district share
    one flag, stored under the contact's own district.
    """
    if not _can_spend_day_action(state):
        return False
    district_id, flag_key = _collection_slot(state, location_key)
    if state.day_collected_by_district.get(district_id, {}).get(flag_key):
        return False

    tension_delta = 0
    contact = get_contact(location_key)
    if contact is not None:
        effect = get_contact_faction_effect(contact.faction_id)
        reward = FoodYield(contact.produces.scraps + effect.scraps_bonus,
                           contact.produces.fatty + effect.fatty_bonus)
        tension_delta = effect.tension_delta
        label = contact.name
    elif location_key in LEGACY_REWARDS:
        reward = LEGACY_REWARDS[location_key]
        label = location_key.capitalize()
    else:
        return False

    state.food_scraps += reward.scraps
    state.food_fatty += reward.fatty
    if tension_delta:
        state.tension = clamp_meter(state.tension + tension_delta)
    state.day_actions_remaining -= 1
    state.day_collected_by_district.setdefault(district_id, {})[flag_key] = True
    add_event(state, f"Collected supplies from {label}.")
    return True


def _withdraw_campers(state: WorldState, count: int) -> None:
    """Take campers out of the faction tallies, largest group first."""
    for faction_id in sorted(state.camp_factions, key=lambda f: -state.camp_factions[f]):
        if count <= 0:
            break
        taken = min(count, state.camp_factions[faction_id])
        state.camp_factions[faction_id] -= taken
        count -= taken
    state.camp_factions = {f: n for f, n in state.camp_factions.items() if n > 0}


def stabilize_camp(state: WorldState) -> Optional[StabilizeResult]:
    """Spend scraps to calm the camp and move campers into free housing."""
    if not _can_spend_day_action(state):
        return None
    if not state.camp_active or state.food_scraps < STABILIZE_SCRAPS_COST:
        return None

    state.food_scraps -= STABILIZE_SCRAPS_COST
    before = state.camp_pressure
    state.camp_pressure = clamp_meter(state.camp_pressure - STABILIZE_PRESSURE_RELIEF)
    moved = min(state.camp_pop, available_housing(state))
    if moved:
        state.camp_pop -= moved
        state.housed_pop += moved
        _withdraw_campers(state, moved)
    state.camp_active = state.camp_pop > 0
    state.day_actions_remaining -= 1

    add_event(state, "Stabilized the camp with fresh supplies.")
    if moved:
        add_event(state, f"Stabilized camp: Moved {moved} into housing.")
    return StabilizeResult(moved=moved, pressure_relief=before - state.camp_pressure)


def pray_at_shrine(state: WorldState, poi_id: PoiId) -> Optional[Blessing]:
    """Pray at an unresolved shrine for its god's blessing."""
    if not _can_spend_day_action(state):
        return None
    shrine = find_poi(state, poi_id)
    if shrine is None or shrine.type is not PoiType.SHRINE or shrine.resolved or shrine.prayed_today:
        return None
    god = get_god(shrine.god_id)
    if god is None:
        return None

    first_visit = not state.discovered_shrines.get(god.id, False)
    shrine.prayed_today = True
    shrine.discovered = True
    state.discovered_shrines[god.id] = True
    blessing = create_blessing(state, god)
    state.active_blessings.append(blessing)
    state.day_actions_remaining -= 1

    if first_visit:
        add_event(state, f"Shrine discovered: {god.name}.")
    add_event(state, f"Blessing received: {god.name}, {format_blessing_effect(blessing)}.")
    resolve_poi(state, poi_id)
    return blessing


def travel(state: WorldState, district_id: str) -> bool:
    """Move to another district. Entering a district at night spawns its objectives once."""
    district = DISTRICTS.get(district_id)
    if district is None or district_id == state.current_district_id:
        return False
    state.current_district_id = district_id
    if state.phase is Phase.NIGHT and not has_night_pois(state, district_id):
        spawn_pois_for_night(state, district)
    add_event(state, f"Entered {district.display_name}.")
    return True


# ----------------------------------------------------------------------
# Night actions
# ----------------------------------------------------------------------

def _night_target(state: WorldState, poi_id: PoiId, poi_type: PoiType) -> Optional[Poi]:
    if state.phase is not Phase.NIGHT:
        return None
    poi = find_poi(state, poi_id)
    if poi is None or poi.resolved or poi.type is not poi_type:
        return None
    return poi


def clear_overgrowth(state: WorldState, poi_id: PoiId) -> bool:
    poi = _night_target(state, poi_id, PoiType.OVERGROWTH)
    if poi is None:
        return False
    cost = get_poi_action_cost(state, poi)
    if state.pack_stamina < cost:
        return False

    state.pack_stamina -= cost
    reduction = OVERGROWTH_CLEAR_BASE + OVERGROWTH_CLEAR_PER_SEVERITY * (poi.severity or 1)
    if has_role(get_active_pack(state), Role.WARDEN):
        reduction += WARDEN_OVERGROWTH_BONUS
    state.overgrowth = clamp_meter(state.overgrowth - reduction)
    reward = apply_blessing_housing_reward(state, OVERGROWTH_HOUSING_REWARD)
    state.housing_capacity += reward
    state.cleared_overgrowth_tonight = True
    resolve_poi(state, poi_id)
    add_event(state, f"Cleared overgrowth: Housing capacity +{reward}.")
    return True


def guard_route(state: WorldState, poi_id: PoiId) -> bool:
    poi = _night_target(state, poi_id, PoiType.ROUTE)
    if poi is None:
        return False
    cost = get_poi_action_cost(state, poi)
    if state.pack_stamina < cost:
        return False

    state.pack_stamina -= cost
    state.route_guarded_tonight = True
    resolve_poi(state, poi_id)
    add_event(state, "Patrolled the route through the ruins.")
    return True


def suppress_ruckus(state: WorldState, poi_id: PoiId) -> bool:
    """Break up a ruckus. Needs stamina for the cost and enough power to win."""
    poi = _night_target(state, poi_id, PoiType.RUCKUS)
    if poi is None:
        return False
    cost = get_poi_action_cost(state, poi)
    pack = get_active_pack(state)
    power_needed = RUCKUS_POWER_REQUIRED_BRUISER if has_role(pack, Role.BRUISER) else RUCKUS_POWER_REQUIRED
    if state.pack_stamina < cost or state.pack_power < power_needed:
        return False

    state.pack_stamina -= cost
    state.tension = clamp_meter(
        state.tension - (RUCKUS_TENSION_BASE + RUCKUS_TENSION_PER_SEVERITY * (poi.severity or 1)))
    state.threat_active = False
    resolve_poi(state, poi_id)
    add_event(state, "Suppressed a ruckus: tension eased.")
    return True


def secure_lot(state: WorldState, poi_id: PoiId) -> bool:
    poi = _night_target(state, poi_id, PoiType.LOT)
    if poi is None:
        return False
    cost = get_poi_action_cost(state, poi)
    if state.pack_stamina < cost:
        return False

    state.pack_stamina -= cost
    reward = apply_blessing_housing_reward(state, LOT_HOUSING_REWARD)
    state.housing_capacity += reward
    state.camp_pressure = clamp_meter(state.camp_pressure - LOT_CAMP_RELIEF)
    state.housing_boosted_tonight = True
    resolve_poi(state, poi_id)
    add_event(state, f"Secured a lot: Housing capacity +{reward}.")
    return True


NIGHT_ACTIONS = {
    PoiType.OVERGROWTH: clear_overgrowth,
    PoiType.ROUTE: guard_route,
    PoiType.RUCKUS: suppress_ruckus,
    PoiType.LOT: secure_lot,
}
