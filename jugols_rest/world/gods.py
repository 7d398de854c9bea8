"""Shrine gods and the blessing each one grants when prayed to."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BlessingTemplate:
    type: str
    value: int
    duration: str


@dataclass(frozen=True)
class God:
    id: str
    name: str
    epithet: str
    district_affinity: str
    blessing: BlessingTemplate


GODS: list[God] = [
    God(
        id="jugol",
        name="Jugol",
        epithet="Keeper of the Rest",
        district_affinity="heart",
        blessing=BlessingTemplate("MORNING_TENSION", -5, "CYCLE"),
    ),
    God(
        id="hearthmother",
        name="The Hearthmother",
        epithet="Warden of Full Bowls",
        district_affinity="heart",
        blessing=BlessingTemplate("PACK_STAMINA", 2, "NIGHT"),
    ),
    God(
        id="vell",
        name="Vell",
        epithet="Lantern of the Stacks",
        district_affinity="arcane",
        blessing=BlessingTemplate("ACTION_COST", -1, "NIGHT"),
    ),
    God(
        id="ossaru",
        name="Ossaru",
        epithet="Teeth in the Dark",
        district_affinity="arcane",
        blessing=BlessingTemplate("PACK_POWER", 1, "NIGHT"),
    ),
    God(
        id="mirrow",
        name="Mirrow",
        epithet="Root-Singer",
        district_affinity="verdent",
        blessing=BlessingTemplate("MORNING_OVERGROWTH", -5, "CYCLE"),
    ),
    God(
        id="thessa",
        name="Thessa",
        epithet="Mother of Thresholds",
        district_affinity="verdent",
        blessing=BlessingTemplate("HOUSING_REWARD", 1, "NIGHT"),
    ),
    God(
        id="kabir",
        name="Kabir",
        epithet="the Open Gate",
        district_affinity="any",
        blessing=BlessingTemplate("MORNING_CAMP", -6, "CYCLE"),
    ),
]

GOD_BY_ID: dict[str, God] = {g.id: g for g in GODS}


def get_god(god_id: Optional[str]) -> Optional[God]:
    if not god_id:
        return None
    return GOD_BY_ID.get(god_id)
