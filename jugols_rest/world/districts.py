"""District catalog: anchor-point pools for POIs, shrines and day locations."""

from __future__ import annotations

from dataclasses import dataclass, field


Point = tuple[int, int]


@dataclass(frozen=True)
class NightModifiers:
    overgrowth_bonus: int = 0
    ruckus_bonus: int = 0


@dataclass(frozen=True)
class District:
    """Static description of one district. Coordinates are opaque to the core."""

    id: str
    display_name: str
    spawn_anchors: dict[str, list[Point]] = field(default_factory=dict)
    shrine_anchors: list[Point] = field(default_factory=list)
    day_locations: dict[str, Point] = field(default_factory=dict)
    night_modifiers: NightModifiers = NightModifiers()

    def anchors_for(self, poi_type: str) -> list[Point]:
        return self.spawn_anchors.get(poi_type, [])


DEFAULT_DISTRICT_ID = "camp"

DISTRICTS: dict[str, District] = {
    "camp": District(
        id="camp",
        display_name="Camp",
    ),
    "heart": District(
        id="heart",
        display_name="Heart District",
        spawn_anchors={
            "OVERGROWTH": [(1380, 220), (1540, 410), (1220, 520), (1640, 640), (1180, 320)],
            "ROUTE": [(1260, 610), (1500, 520), (1060, 700)],
            "RUCKUS": [(1100, 890), (1400, 900), (1280, 980)],
            "LOT": [(1520, 760), (1200, 840)],
        },
        shrine_anchors=[(540, 420), (760, 460), (980, 520), (620, 900)],
        day_locations={"butcher": (350, 260), "tavern": (880, 320), "market": (620, 720)},
    ),
    "arcane": District(
        id="arcane",
        display_name="Arcane District",
        spawn_anchors={
            "OVERGROWTH": [(1480, 260), (1680, 460), (1320, 520), (1600, 720), (1420, 360)],
            "ROUTE": [(1240, 640), (1460, 580), (1100, 740)],
            "RUCKUS": [(1040, 820), (1320, 940), (1500, 900)],
            "LOT": [(1540, 820), (1180, 900)],
        },
        shrine_anchors=[(520, 380), (760, 540), (980, 600), (640, 920)],
        day_locations={"butcher": (420, 220), "tavern": (900, 260), "market": (720, 680)},
        night_modifiers=NightModifiers(ruckus_bonus=1),
    ),
    "verdent": District(
        id="verdent",
        display_name="Verdent District",
        spawn_anchors={
            "OVERGROWTH": [(1320, 240), (1500, 420), (1200, 580), (1680, 640), (1380, 320)],
            "ROUTE": [(1160, 620), (1420, 520), (1020, 720)],
            "RUCKUS": [(1080, 860), (1360, 900), (1240, 980)],
            "LOT": [(1500, 760), (1140, 820)],
        },
        shrine_anchors=[(480, 420), (720, 520), (940, 580), (560, 900)],
        day_locations={"butcher": (380, 300), "tavern": (860, 360), "market": (640, 760)},
        night_modifiers=NightModifiers(overgrowth_bonus=1),
    ),
}

DISTRICT_ORDER: list[str] = list(DISTRICTS)


def get_district(district_id: str | None) -> District:
    """Look up a district, falling back to the camp for unknown ids."""
    if not district_id:
        return DISTRICTS[DEFAULT_DISTRICT_ID]
    return DISTRICTS.get(district_id, DISTRICTS[DEFAULT_DISTRICT_ID])


def district_index(district_id: str) -> int:
    return DISTRICT_ORDER.index(district_id) if district_id in DISTRICT_ORDER else 0
