"""Points of interest: seeded nightly objectives and persistent shrines.

Spawning is a pure function of the day number, meter values and the district
anchor pools, so the same inputs always produce the same markers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from jugols_rest.core.clock import Phase
from jugols_rest.core.config import (
    LOT_BASE_COST,
    LOT_SEED_MULTIPLIER,
    MAX_SEVERITY,
    MIN_ACTION_COST,
    OVERGROWTH_BASE_COST,
    OVERGROWTH_SEED_MULTIPLIER,
    POI_RADIUS,
    RECENT_GOD_MEMORY,
    ROUTE_BASE_COST,
    ROUTE_SEED_MULTIPLIER,
    ROUTE_TENSION_SEVERITY,
    RUCKUS_BASE_COST,
    RUCKUS_SEED_MULTIPLIER,
    RUCKUS_TENSION_SURGE,
    RUCKUS_TENSION_TRIGGER,
    SHRINE_BASE_COST,
    SHRINE_DISTRICT_SEED_STEP,
    SHRINE_SEED_MULTIPLIER,
)
from jugols_rest.core.meters import available_housing, round_half_up
from jugols_rest.pack.hyenas import Role, has_role
from jugols_rest.pack.roster import get_active_pack
from jugols_rest.world.blessings import get_blessing_action_cost_modifier
from jugols_rest.world.camp_factions import dominant_behavior
from jugols_rest.world.districts import DISTRICTS, District, Point, district_index
from jugols_rest.world.gods import GODS, God


class PoiType(Enum):
    OVERGROWTH = "OVERGROWTH"
    ROUTE = "ROUTE"
    RUCKUS = "RUCKUS"
    LOT = "LOT"
    SHRINE = "SHRINE"


@dataclass(frozen=True)
class PoiId:
    """Structured arena key; unique per district, day, phase, type and index."""

    day: int
    district_id: str
    phase: Phase
    type: PoiType
    index: int

    def __str__(self) -> str:
        return f"{self.day}:{self.district_id}:{self.phase.value}:{self.type.value}:{self.index}"

    @classmethod
    def parse(cls, text: str) -> "PoiId":
        day, district_id, phase, poi_type, index = text.split(":")
        return cls(int(day), district_id, Phase(phase), PoiType(poi_type), int(index))


@dataclass
class Poi:
    id: PoiId
    type: PoiType
    x: int
    y: int
    radius: int
    severity: Optional[int] = None
    resolved: bool = False
    # shrine only
    god_id: Optional[str] = None
    discovered: bool = False
    prayed_today: bool = False

    @property
    def district_id(self) -> str:
        return self.id.district_id


# ----------------------------------------------------------------------
# Seeded selection
# ----------------------------------------------------------------------

def pick_points(pool: list[Point], count: int, seed: int) -> list[Point]:
    """Rotate the pool to ``|seed| mod len`` and take ``count`` points, wrapping."""
    if not pool or count <= 0:
        return []
    start = abs(seed) % len(pool)
    return [pool[(start + i) % len(pool)] for i in range(count)]


def _overgrowth_count(overgrowth: int) -> int:
    if overgrowth < 40:
        return 2
    if overgrowth <= 70:
        return 3
    return 4


def _overgrowth_severity(overgrowth: int) -> int:
    if overgrowth >= 70:
        return 3
    if overgrowth >= 40:
        return 2
    return 1


def _ruckus_severity(tension: int) -> int:
    if tension >= RUCKUS_TENSION_SURGE:
        return 3
    if tension >= RUCKUS_TENSION_TRIGGER:
        return 2
    return 1


def _varied(severity: int, index: int) -> int:
    return min(MAX_SEVERITY, severity + index % 2)


# ----------------------------------------------------------------------
# Arena access
# ----------------------------------------------------------------------

def _arena(state: "WorldState", district_id: str) -> dict[PoiId, Poi]:  # noqa: F821
    return state.pois_by_district.setdefault(district_id, {})


def get_district_pois(state: "WorldState", district_id: Optional[str] = None) -> list[Poi]:  # noqa: F821
    district_id = district_id or state.current_district_id
    return list(state.pois_by_district.get(district_id, {}).values())


def get_active_pois(state: "WorldState", district_id: Optional[str] = None) -> list[Poi]:  # noqa: F821
    return [p for p in get_district_pois(state, district_id) if not p.resolved]


def find_poi(state: "WorldState", poi_id: PoiId) -> Optional[Poi]:  # noqa: F821
    return state.pois_by_district.get(poi_id.district_id, {}).get(poi_id)


def has_night_pois(state: "WorldState", district_id: str) -> bool:  # noqa: F821
    """True once tonight's objectives exist in the district, resolved or not."""
    return any(
        p.id.phase is Phase.NIGHT and p.id.day == state.day_number
        for p in get_district_pois(state, district_id)
    )


def _add(state: "WorldState", district: District, poi_type: PoiType, points: list[Point],  # noqa: F821
         severities: list[Optional[int]]) -> list[Poi]:
    arena = _arena(state, district.id)
    created = []
    for index, ((x, y), severity) in enumerate(zip(points, severities)):
        poi_id = PoiId(state.day_number, district.id, state.phase, poi_type, index)
        poi = Poi(id=poi_id, type=poi_type, x=x, y=y,
                  radius=POI_RADIUS[poi_type.value], severity=severity)
        arena[poi_id] = poi
        created.append(poi)
    return created


# ----------------------------------------------------------------------
# Spawning
# ----------------------------------------------------------------------

def spawn_pois_for_night(state: "WorldState", district: District) -> list[Poi]:  # noqa: F821
    """Replace the district's nightly objectives. Shrines are left alone."""
    arena = _arena(state, district.id)
    for poi_id in [pid for pid, p in arena.items() if p.type is not PoiType.SHRINE]:
        del arena[poi_id]

    day = state.day_number
    bonus = district.night_modifiers
    spawned: list[Poi] = []

    # Overgrowth
    count = _overgrowth_count(state.overgrowth) + bonus.overgrowth_bonus
    base = _overgrowth_severity(state.overgrowth)
    points = pick_points(district.anchors_for("OVERGROWTH"), count,
                         day * OVERGROWTH_SEED_MULTIPLIER + state.overgrowth)
    spawned += _add(state, district, PoiType.OVERGROWTH, points,
                    [_varied(base, i) for i in range(len(points))])

    # Route
    route_severity = 2 if state.tension >= ROUTE_TENSION_SEVERITY else 1
    points = pick_points(district.anchors_for("ROUTE"), 1, day * ROUTE_SEED_MULTIPLIER)
    spawned += _add(state, district, PoiType.ROUTE, points, [route_severity] * len(points))

    # Ruckus
    if state.tension >= RUCKUS_TENSION_TRIGGER or state.camp_pop > 0 or state.threat_active:
        base_count = 2 if state.tension >= RUCKUS_TENSION_SURGE else 1
        modifier = dominant_behavior(state).ruckus_modifier
        count = max(1, round_half_up((base_count + bonus.ruckus_bonus) * modifier))
        base = _ruckus_severity(state.tension)
        points = pick_points(district.anchors_for("RUCKUS"), count,
                             day * RUCKUS_SEED_MULTIPLIER + state.tension)
        spawned += _add(state, district, PoiType.RUCKUS, points,
                        [_varied(base, i) for i in range(len(points))])

    # Lot
    if state.cleared_overgrowth_last_night or available_housing(state) == 0:
        points = pick_points(district.anchors_for("LOT"), 1, day * LOT_SEED_MULTIPLIER)
        spawned += _add(state, district, PoiType.LOT, points, [1] * len(points))

    return spawned


def _choose_god(state: "WorldState", district_id: str, seed: int) -> God:  # noqa: F821
    pool = [g for g in GODS if g.district_affinity == district_id] or list(GODS)
    fresh = [g for g in pool if g.id not in state.recent_shrine_gods]
    if not fresh:
        fresh = list(GODS)
    return fresh[abs(seed) % len(fresh)]


def spawn_shrine(state: "WorldState", district: District) -> Optional[Poi]:  # noqa: F821
    """Place a shrine if the district has anchors and no unresolved shrine."""
    if not district.shrine_anchors:
        return None
    arena = _arena(state, district.id)
    if any(p.type is PoiType.SHRINE and not p.resolved for p in arena.values()):
        return None

    seed = state.day_number * SHRINE_SEED_MULTIPLIER + district_index(district.id) * SHRINE_DISTRICT_SEED_STEP
    x, y = pick_points(district.shrine_anchors, 1, seed)[0]
    god = _choose_god(state, district.id, seed)
    poi_id = PoiId(state.day_number, district.id, Phase.DAY, PoiType.SHRINE, 0)
    shrine = Poi(id=poi_id, type=PoiType.SHRINE, x=x, y=y,
                 radius=POI_RADIUS[PoiType.SHRINE.value], god_id=god.id,
                 discovered=state.discovered_shrines.get(god.id, False))
    arena[poi_id] = shrine

    state.recent_shrine_gods.append(god.id)
    del state.recent_shrine_gods[:-RECENT_GOD_MEMORY]
    return shrine


def spawn_pois_for_day(state: "WorldState") -> list[Poi]:  # noqa: F821
    """Dawn sweep: drop night leftovers, refresh shrines, seed new shrines."""
    for arena in state.pois_by_district.values():
        for poi_id in list(arena):
            poi = arena[poi_id]
            if poi.type is not PoiType.SHRINE or poi.resolved:
                del arena[poi_id]
            else:
                poi.prayed_today = False

    spawned = []
    for district in DISTRICTS.values():
        shrine = spawn_shrine(state, district)
        if shrine is not None:
            spawned.append(shrine)
    return spawned


# ----------------------------------------------------------------------
# Resolution
# ----------------------------------------------------------------------

def resolve_poi(state: "WorldState", poi_id: PoiId) -> Optional[Poi]:  # noqa: F821
    """Flip a POI to resolved. Unknown or already-resolved ids return None."""
    poi = find_poi(state, poi_id)
    if poi is None or poi.resolved:
        return None
    poi.resolved = True
    return poi


def get_poi_action_cost(state: "WorldState", poi: Poi) -> int:  # noqa: F821
    modifier = get_blessing_action_cost_modifier(state)
    if poi.type is PoiType.OVERGROWTH:
        base = OVERGROWTH_BASE_COST + (poi.severity or 1)
    elif poi.type is PoiType.ROUTE:
        base = ROUTE_BASE_COST - (1 if has_role(get_active_pack(state), Role.SCOUT) else 0)
    elif poi.type is PoiType.RUCKUS:
        base = RUCKUS_BASE_COST
    elif poi.type is PoiType.LOT:
        base = LOT_BASE_COST
    else:
        base = SHRINE_BASE_COST
    return max(MIN_ACTION_COST, base + modifier)
