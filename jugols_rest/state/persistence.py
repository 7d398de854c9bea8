"""Save-file contract: JSON round-trip with forward-compatible defaulting.

Anything missing from older saves is taken from a fresh initial state, every
list is shape-checked entry by entry (bad entries are dropped), and saves
from the camelCase era are migrated on the way in. Corrupt or foreign data
loads as ``None``, never as an exception.
"""

from __future__ import annotations

import json
import math
import os
import re
import tempfile
from abc import ABC, abstractmethod
from typing import Any, Optional

from jugols_rest.core.clock import Phase
from jugols_rest.core.config import DEFAULT_SAVE_FILE, SAVE_VERSION
from jugols_rest.core.meters import clamp_meter, clamp_visibility
from jugols_rest.factions.catalog import FactionStatus
from jugols_rest.factions.influence import create_faction_states
from jugols_rest.pack.hyenas import BaseStats, FedToday, Hyena, Role
from jugols_rest.state.world_state import IncomingGroup, NarrativeEntry, WorldState, create_initial_state
from jugols_rest.world.blessings import Blessing, BlessingDuration, BlessingType
from jugols_rest.world.contacts import LEGACY_REWARDS, find_contact_for_slot
from jugols_rest.world.pois import Poi, PoiId


_INT_FIELDS = (
    "day_number", "day_actions_remaining", "food_scraps", "food_fatty",
    "housed_pop", "camp_pop", "housing_capacity", "threat_nights_active_count",
    "collapse_days", "burst_count", "pack_size_cap",
    "pack_stamina", "pack_power", "hyena_stamina_base_penalty", "supplies_tier",
)
_METER_FIELDS = ("tension", "overgrowth", "camp_pressure")
_BOOL_FIELDS = (
    "threat_active", "camp_active", "victory", "game_over", "draft_pending",
    "route_guarded_tonight", "housing_boosted_tonight",
    "cleared_overgrowth_tonight", "cleared_overgrowth_last_night",
)
_LEGACY_KEYS = {"active_pois_by_district": "pois_by_district"}
_PARSE_ERRORS = (KeyError, TypeError, ValueError, AttributeError, OverflowError)


# ----------------------------------------------------------------------
# Serialize
# ----------------------------------------------------------------------

def _hyena_to_dict(h: Hyena) -> dict:
    return {
        "id": h.id,
        "name": h.name,
        "role": h.role.value,
        "temperament": h.temperament,
        "hunger": h.hunger,
        "fed_today": {"scraps": h.fed_today.scraps, "fatty": h.fed_today.fatty},
        "base_stats": (
            {"stamina_bonus": h.base_stats.stamina_bonus, "power_bonus": h.base_stats.power_bonus}
            if h.base_stats else None
        ),
        "traits": list(h.traits),
    }


def _poi_to_dict(p: Poi) -> dict:
    return {
        "id": str(p.id),
        "x": p.x,
        "y": p.y,
        "radius": p.radius,
        "severity": p.severity,
        "resolved": p.resolved,
        "god_id": p.god_id,
        "discovered": p.discovered,
        "prayed_today": p.prayed_today,
    }


def _blessing_to_dict(b: Blessing) -> dict:
    return {
        "god_id": b.god_id,
        "type": b.type.value,
        "value": b.value,
        "duration": b.duration.value,
        "expires_day": b.expires_day,
        "expires_phase": b.expires_phase.value,
        "cycle_grace": b.cycle_grace,
    }


def to_dict(state: WorldState) -> dict:
    data: dict[str, Any] = {"version": SAVE_VERSION}
    for name in _INT_FIELDS + _METER_FIELDS + _BOOL_FIELDS:
        data[name] = getattr(state, name)
    data.update({
        "phase": state.phase.value,
        "current_district_id": state.current_district_id,
        "camp_factions": dict(state.camp_factions),
        "incoming_groups_next_day": [
            {"faction_id": g.faction_id, "size": g.size} for g in state.incoming_groups_next_day
        ],
        "hyena_roster": [_hyena_to_dict(h) for h in state.hyena_roster],
        "active_pack_ids": list(state.active_pack_ids),
        "draft_choices": [_hyena_to_dict(h) for h in state.draft_choices],
        "day_collected_by_district": {d: dict(m) for d, m in state.day_collected_by_district.items()},
        "pois_by_district": {
            d: [_poi_to_dict(p) for p in arena.values()] for d, arena in state.pois_by_district.items()
        },
        "recent_shrine_gods": list(state.recent_shrine_gods),
        "discovered_shrines": dict(state.discovered_shrines),
        "active_blessings": [_blessing_to_dict(b) for b in state.active_blessings],
        "factions": [
            {"id": r.id, "status": r.status.value, "favor": r.favor, "visibility_level": r.visibility_level}
            for r in state.factions.values()
        ],
        "narrative_flags": dict(state.narrative_flags),
        "narrative_log": [{"source": e.source, "text": e.text} for e in state.narrative_log],
        "last_narrative_event_day": state.last_narrative_event_day,
        "last_ambient_line_key": state.last_ambient_line_key,
        "event_log": list(state.event_log),
    })
    return data


def serialize(state: WorldState) -> str:
    return json.dumps(to_dict(state))


# ----------------------------------------------------------------------
# Deserialize
# ----------------------------------------------------------------------

def _snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _normalize_keys(data: dict) -> dict:
    normalized = {}
    for key, value in data.items():
        name = _snake(key)
        normalized[_LEGACY_KEYS.get(name, name)] = value
    return normalized


def _is_int(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _get(entry: dict, *names: str, default: Any = None) -> Any:
    for name in names:
        if name in entry:
            return entry[name]
    return default


def _hyena_from_dict(entry: dict) -> Hyena:
    fed = _get(entry, "fed_today", "fedToday") or {}
    scraps = _get(fed, "scraps", default=_get(entry, "fedScraps", default=0))
    fatty = _get(fed, "fatty", default=_get(entry, "fedFatty", default=0))
    stats = _get(entry, "base_stats", "baseStats")
    base_stats = None
    if isinstance(stats, dict):
        base_stats = BaseStats(
            stamina_bonus=int(_get(stats, "stamina_bonus", "staminaBonus", default=0)),
            power_bonus=int(_get(stats, "power_bonus", "powerBonus", default=0)),
        )
    traits = entry.get("traits") or []
    if not isinstance(entry["id"], str) or not isinstance(traits, list):
        raise TypeError("malformed hyena")
    return Hyena(
        id=entry["id"],
        name=str(entry["name"]),
        role=Role(entry["role"]),
        temperament=str(entry.get("temperament", "Calm")),
        hunger=clamp_meter(entry.get("hunger", 50)),
        fed_today=FedToday(max(0, int(scraps)), max(0, int(fatty))),
        base_stats=base_stats,
        traits=[str(t) for t in traits],
    )


def _poi_from_dict(entry: dict) -> Poi:
    poi_id = PoiId.parse(entry["id"])
    severity = entry.get("severity")
    return Poi(
        id=poi_id,
        type=poi_id.type,
        x=int(entry["x"]),
        y=int(entry["y"]),
        radius=int(entry["radius"]),
        severity=int(severity) if severity is not None else None,
        resolved=bool(entry.get("resolved", False)),
        god_id=_get(entry, "god_id", "godId"),
        discovered=bool(entry.get("discovered", False)),
        prayed_today=bool(_get(entry, "prayed_today", "prayedToday", default=False)),
    )


def _blessing_from_dict(entry: dict) -> Blessing:
    return Blessing(
        god_id=str(_get(entry, "god_id", "godId")),
        type=BlessingType(entry["type"]),
        value=int(entry["value"]),
        duration=BlessingDuration(entry["duration"]),
        expires_day=int(_get(entry, "expires_day", "expiresDay")),
        expires_phase=Phase(_get(entry, "expires_phase", "expiresPhase")),
        cycle_grace=bool(_get(entry, "cycle_grace", "cycleGrace", default=False)),
    )


def _valid_entries(raw: Any, parse) -> list:
    """Parse each entry of a list, dropping the ones that do not fit."""
    if not isinstance(raw, list):
        return []
    parsed = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        try:
            parsed.append(parse(entry))
        except _PARSE_ERRORS:
            continue
    return parsed


def _merge_factions(state: WorldState, raw: Any) -> None:
    runtimes = create_faction_states()
    for entry in raw if isinstance(raw, list) else []:
        if not isinstance(entry, dict) or entry.get("id") not in runtimes:
            continue
        runtime = runtimes[entry["id"]]
        status = _get(entry, "status", "state")
        if status in {s.value for s in FactionStatus}:
            runtime.status = FactionStatus(status)
        if _is_int(entry.get("favor")):
            runtime.favor = int(entry["favor"])
        visibility = _get(entry, "visibility_level", "visibilityLevel")
        if _is_int(visibility):
            runtime.visibility_level = clamp_visibility(visibility)
    state.factions = runtimes


def _migrate_location_collected(state: WorldState, raw: Any) -> None:
    """Old saves kept one flat map of slot -> collected for the current district."""
    if not isinstance(raw, dict):
        return
    collected = state.day_collected_by_district.setdefault(state.current_district_id, {})
    for key, value in raw.items():
        if value is not True:
            continue
        contact = find_contact_for_slot(state.current_district_id, key) if key in LEGACY_REWARDS else None
        collected[contact.id if contact else key] = True


def from_dict(data: dict) -> WorldState:
    data = _normalize_keys(data)
    state = create_initial_state()

    for name in _INT_FIELDS:
        if _is_int(data.get(name)):
            setattr(state, name, max(0, int(data[name])))
    state.day_number = max(1, state.day_number)
    for name in _METER_FIELDS:
        if _is_int(data.get(name)):
            setattr(state, name, clamp_meter(data[name]))
    for name in _BOOL_FIELDS:
        if isinstance(data.get(name), bool):
            setattr(state, name, data[name])

    if data.get("phase") in (Phase.DAY.value, Phase.NIGHT.value):
        state.phase = Phase(data["phase"])
    if isinstance(data.get("current_district_id"), str):
        state.current_district_id = data["current_district_id"]

    if isinstance(data.get("camp_factions"), dict):
        state.camp_factions = {
            str(k): int(v) for k, v in data["camp_factions"].items() if _is_int(v) and v > 0
        }
    if "incoming_groups_next_day" in data:
        state.incoming_groups_next_day = _valid_entries(
            data["incoming_groups_next_day"],
            lambda e: IncomingGroup(str(_get(e, "faction_id", "factionId")), max(0, int(e["size"]))),
        )

    roster = _valid_entries(data.get("hyena_roster", data.get("pack")), _hyena_from_dict)
    if roster:
        state.hyena_roster = roster
        ids = data.get("active_pack_ids")
        if isinstance(ids, list):
            state.active_pack_ids = [i for i in ids if isinstance(i, str)]
        else:
            state.active_pack_ids = [h.id for h in roster]
    known = {h.id for h in state.hyena_roster}
    state.active_pack_ids = list(dict.fromkeys(i for i in state.active_pack_ids if i in known))
    state.active_pack_ids = state.active_pack_ids[: state.pack_size_cap]
    state.draft_choices = _valid_entries(data.get("draft_choices"), _hyena_from_dict)
    state.draft_pending = state.draft_pending and bool(state.draft_choices)

    if isinstance(data.get("day_collected_by_district"), dict):
        state.day_collected_by_district = {
            str(d): {str(k): True for k, v in m.items() if v is True}
            for d, m in data["day_collected_by_district"].items() if isinstance(m, dict)
        }
    _migrate_location_collected(state, data.get("location_collected"))

    if isinstance(data.get("pois_by_district"), dict):
        state.pois_by_district = {}
        for district_id, entries in data["pois_by_district"].items():
            pois = _valid_entries(entries, _poi_from_dict)
            state.pois_by_district[str(district_id)] = {
                p.id: p for p in pois if p.id.district_id == district_id
            }

    if isinstance(data.get("recent_shrine_gods"), list):
        state.recent_shrine_gods = [g for g in data["recent_shrine_gods"] if isinstance(g, str)]
    if isinstance(data.get("discovered_shrines"), dict):
        state.discovered_shrines = {str(k): True for k, v in data["discovered_shrines"].items() if v}
    state.active_blessings = _valid_entries(data.get("active_blessings"), _blessing_from_dict)
    _merge_factions(state, data.get("factions"))

    if isinstance(data.get("narrative_flags"), dict):
        state.narrative_flags = {str(k): bool(v) for k, v in data["narrative_flags"].items()}
    state.narrative_log = _valid_entries(
        data.get("narrative_log"), lambda e: NarrativeEntry(str(e["source"]), str(e["text"])))
    if _is_int(data.get("last_narrative_event_day")):
        state.last_narrative_event_day = int(data["last_narrative_event_day"])
    if isinstance(data.get("last_ambient_line_key"), str):
        state.last_ambient_line_key = data["last_ambient_line_key"]
    if isinstance(data.get("event_log"), list):
        state.event_log = [m for m in data["event_log"] if isinstance(m, str)]
    return state


def deserialize(raw: str | bytes) -> Optional[WorldState]:
    """Parse a save. Anything that is not a recognisable save gives None."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        return None
    if not isinstance(data, dict) or not _is_int(_get(data, "day_number", "dayNumber")):
        return None
    try:
        return from_dict(data)
    except _PARSE_ERRORS:
        return None


# ----------------------------------------------------------------------
# Stores
# ----------------------------------------------------------------------

class SaveStore(ABC):
    """Where a session keeps its one save slot."""

    @abstractmethod
    def load(self) -> Optional[WorldState]:
        ...

    @abstractmethod
    def save(self, state: WorldState) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def exists(self) -> bool:
        ...


class MemorySaveStore(SaveStore):
    """Keeps the serialized save in memory. Used by tests and batch runs."""

    def __init__(self, raw: Optional[str] = None) -> None:
        self.raw = raw

    def load(self) -> Optional[WorldState]:
        return deserialize(self.raw) if self.raw is not None else None

    def save(self, state: WorldState) -> None:
        self.raw = serialize(state)

    def clear(self) -> None:
        self.raw = None

    def exists(self) -> bool:
        return self.raw is not None


class FileSaveStore(SaveStore):
    """JSON file on disk, replaced atomically on every save."""

    def __init__(self, path: str = DEFAULT_SAVE_FILE) -> None:
        self.path = path

    def load(self) -> Optional[WorldState]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except OSError:
            return None
        return deserialize(raw)

    def save(self, state: WorldState) -> None:
        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".save-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(serialize(state))
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)

    def exists(self) -> bool:
        return os.path.exists(self.path)
