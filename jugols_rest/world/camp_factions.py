"""Arrival factions that settle in housing or the overflow camp."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


DEFAULT_CAMP_FACTION_ID = "wayfarers"


@dataclass(frozen=True)
class CampBehavior:
    tension_modifier: float = 1.0
    overgrowth_modifier: float = 1.0
    ruckus_modifier: float = 1.0


@dataclass(frozen=True)
class CampFaction:
    id: str
    display_name: str
    ideology_tag: str
    district_bias: str
    camp_behavior: CampBehavior
    ambient_lines: list[str] = field(default_factory=list)
    arrival_flavor: str = ""


CAMP_FACTIONS: list[CampFaction] = [
    CampFaction(
        id="hearthbound_union",
        display_name="Hearthbound Union",
        ideology_tag="Duty & mutual aid",
        district_bias="heart",
        camp_behavior=CampBehavior(0.9, 1.0, 0.85),
        ambient_lines=[
            "A Union steward counts ration slips while neighbors trade quiet jokes.",
            "You catch the low hum of a work chant, steadying tired shoulders.",
        ],
        arrival_flavor="Union kin arrive with handcarts and a clear plan for sharing work.",
    ),
    CampFaction(
        id="arcane_conclave",
        display_name="Arcane Conclave",
        ideology_tag="Knowledge & experiment",
        district_bias="arcane",
        camp_behavior=CampBehavior(1.1, 1.2, 1.05),
        ambient_lines=[
            "A pair of apprentices debate a warding glyph with chalk-stained hands.",
            "The air smells faintly of ozone where the Conclave pitches its tents.",
        ],
        arrival_flavor="Conclave caravans set down cases of instruments and sealed books.",
    ),
    CampFaction(
        id="verdent_covenant",
        display_name="Verdent Covenant",
        ideology_tag="Balance & regrowth",
        district_bias="verdent",
        camp_behavior=CampBehavior(0.85, 0.7, 0.9),
        ambient_lines=[
            "Soft prayers mingle with the sound of seeds being counted by hand.",
            "A Covenant warden trades river herbs for a promise to keep the roots calm.",
        ],
        arrival_flavor="Covenant travelers arrive with bundled seedlings and river water.",
    ),
    CampFaction(
        id="gilded_exiles",
        display_name="Gilded Exiles",
        ideology_tag="Status & survival",
        district_bias="any",
        camp_behavior=CampBehavior(1.15, 1.0, 1.2),
        ambient_lines=[
            "Silk-clad voices barter for privacy in the shadow of the walls.",
            "A Gilded courier whispers about debts owed beyond the gates.",
        ],
        arrival_flavor="The Exiles arrive guarded, eyes sharp for new leverage.",
    ),
    CampFaction(
        id="wayfarers",
        display_name="Wayfarers",
        ideology_tag="Freedom & improvisation",
        district_bias="any",
        camp_behavior=CampBehavior(1.0, 1.0, 1.1),
        ambient_lines=[
            "Wayfarers swap road stories, mapping safe alleys with charcoal marks.",
            "A cookfire pops while a Wayfarer guard keeps an easy grin on watch.",
        ],
        arrival_flavor="Wayfarers drift in with patched packs and fresh gossip.",
    ),
]

CAMP_FACTION_BY_ID: dict[str, CampFaction] = {f.id: f for f in CAMP_FACTIONS}

NEUTRAL_BEHAVIOR = CampBehavior()


def get_camp_faction(faction_id: str) -> Optional[CampFaction]:
    return CAMP_FACTION_BY_ID.get(faction_id)


def get_dominant_camp_faction(state: "WorldState") -> Optional[CampFaction]:  # noqa: F821
    """The faction holding the strictly largest share of the camp, if any."""
    if state.camp_pop <= 0:
        return None
    shares = [(fid, n) for fid, n in state.camp_factions.items() if n > 0]
    if not shares:
        return None
    shares.sort(key=lambda item: -item[1])
    if len(shares) > 1 and shares[0][1] == shares[1][1]:
        return None
    return CAMP_FACTION_BY_ID.get(shares[0][0])


def dominant_behavior(state: "WorldState") -> CampBehavior:  # noqa: F821
    faction = get_dominant_camp_faction(state)
    return faction.camp_behavior if faction else NEUTRAL_BEHAVIOR
