"""Daytime supply contacts, one per legacy slot in each city district."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from jugols_rest.core.config import CONTACT_STRAINED_TENSION


@dataclass(frozen=True)
class FoodYield:
    scraps: int = 0
    fatty: int = 0


@dataclass(frozen=True)
class VoiceLines:
    normal: str
    strained: str
    camped: str


@dataclass(frozen=True)
class Contact:
    id: str
    name: str
    role: str
    faction_id: str
    district_id: str
    produces: FoodYield
    voice_lines: VoiceLines
    legacy_slot: str


@dataclass(frozen=True)
class ContactFactionEffect:
    scraps_bonus: int = 0
    fatty_bonus: int = 0
    tension_delta: int = 0


# Rewards for the three flat location keys older saves and callers use.
LEGACY_REWARDS: dict[str, FoodYield] = {
    "butcher": FoodYield(scraps=1, fatty=2),
    "tavern": FoodYield(scraps=2, fatty=0),
    "market": FoodYield(scraps=1, fatty=1),
}

CONTACTS: list[Contact] = [
    Contact(
        id="heart-emberfold-tavern",
        name="Emberfold Tavern",
        role="Hearth Steward",
        faction_id="embered_circle",
        district_id="heart",
        produces=FoodYield(2, 0),
        voice_lines=VoiceLines(
            normal="Warmth first, walls second. Take what you need, watch captain.",
            strained="The ovens run hot and the tempers hotter. Don't linger.",
            camped="The hearths are stretched thin with the campfires outside.",
        ),
        legacy_slot="tavern",
    ),
    Contact(
        id="heart-coalbridge-exchange",
        name="Coalbridge Exchange",
        role="Market Steward",
        faction_id="shadow_syndicate",
        district_id="heart",
        produces=FoodYield(1, 1),
        voice_lines=VoiceLines(
            normal="Coin or favors, either buys the day's provisions.",
            strained="Keep your eyes open; the crowd's on edge today.",
            camped="Campers trade in whispers now. Supplies are thinner.",
        ),
        legacy_slot="market",
    ),
    Contact(
        id="heart-dawncut-provisions",
        name="Dawncut Provisions",
        role="Butcher Captain",
        faction_id="radiant_order",
        district_id="heart",
        produces=FoodYield(1, 2),
        voice_lines=VoiceLines(
            normal="Measured portions. The watch eats first, the city survives.",
            strained="We are rationing hard. Bring calm back to the lanes.",
            camped="The camps need discipline. Take what's allotted and move.",
        ),
        legacy_slot="butcher",
    ),
    Contact(
        id="arcane-azure-supplier",
        name="Azure Supply Hall",
        role="Arcane Supplier",
        faction_id="arcane_consortium",
        district_id="arcane",
        produces=FoodYield(2, 0),
        voice_lines=VoiceLines(
            normal="Filed, sealed, and sanctioned. Supplies await the watch.",
            strained="Volatile reactions ripple through the stacks. Be swift.",
            camped="The camp taxes our wards. Take only what you must.",
        ),
        legacy_slot="tavern",
    ),
    Contact(
        id="arcane-sigil-broker",
        name="Sigil Broker Selra",
        role="Sigil Broker",
        faction_id="shadow_syndicate",
        district_id="arcane",
        produces=FoodYield(1, 1),
        voice_lines=VoiceLines(
            normal="Every mark has a price. Yours is already paid.",
            strained="Tension draws attention. Keep your sigils hidden.",
            camped="The camp murmurs reach even the vaults. Trade quick.",
        ),
        legacy_slot="market",
    ),
    Contact(
        id="arcane-ichor-butcher",
        name="Ichorwright Butchery",
        role="Alchemical Butcher",
        faction_id="arcane_consortium",
        district_id="arcane",
        produces=FoodYield(1, 2),
        voice_lines=VoiceLines(
            normal="Cut clean, preserve the reagents. That keeps the city fed.",
            strained="The vats are unstable. Don't jar the racks.",
            camped="We've diverted stock to the camp. Mind the quota.",
        ),
        legacy_slot="butcher",
    ),
    Contact(
        id="verdent-mossroot-forager",
        name="Mossroot Forager",
        role="Forager",
        faction_id="verdant_enclave",
        district_id="verdent",
        produces=FoodYield(2, 0),
        voice_lines=VoiceLines(
            normal="Greens and roots today. The soil still listens.",
            strained="The thickets bristle. Tread softly to keep the trail.",
            camped="Camp smoke drives the game farther out. Supplies shrink.",
        ),
        legacy_slot="tavern",
    ),
    Contact(
        id="verdent-seed-market",
        name="Seedbound Market",
        role="Seed Merchant",
        faction_id="verdant_enclave",
        district_id="verdent",
        produces=FoodYield(1, 1),
        voice_lines=VoiceLines(
            normal="Take seed and grain. Give the city a chance to regrow.",
            strained="Stormroots are restless. Don't spill the baskets.",
            camped="The camp needs sprouts, too. Share with care.",
        ),
        legacy_slot="market",
    ),
    Contact(
        id="verdent-wilds-keeper",
        name="Wildskeeper Hound",
        role="Game Handler",
        faction_id="verdant_enclave",
        district_id="verdent",
        produces=FoodYield(1, 2),
        voice_lines=VoiceLines(
            normal="Fresh cuts from the wilds. Keep the trails safe.",
            strained="Predators prowl closer. We're stretched thin.",
            camped="Campfires spook the herds. Take what we can spare.",
        ),
        legacy_slot="butcher",
    ),
]

CONTACT_BY_ID: dict[str, Contact] = {c.id: c for c in CONTACTS}

_CONTACT_FACTION_EFFECTS: dict[str, ContactFactionEffect] = {
    "embered_circle": ContactFactionEffect(tension_delta=1),
    "shadow_syndicate": ContactFactionEffect(scraps_bonus=1),
    "radiant_order": ContactFactionEffect(tension_delta=-1),
    "arcane_consortium": ContactFactionEffect(scraps_bonus=1, tension_delta=1),
    "verdant_enclave": ContactFactionEffect(fatty_bonus=1, tension_delta=-1),
    "flame_seekers": ContactFactionEffect(tension_delta=1),
}


def get_contact(contact_id: str) -> Optional[Contact]:
    return CONTACT_BY_ID.get(contact_id)


def get_contacts_by_district(district_id: str) -> list[Contact]:
    return [c for c in CONTACTS if c.district_id == district_id]


def find_contact_for_slot(district_id: str, slot: str) -> Optional[Contact]:
    for contact in CONTACTS:
        if contact.district_id == district_id and contact.legacy_slot == slot:
            return contact
    return None


def get_contact_faction_effect(faction_id: str) -> ContactFactionEffect:
    return _CONTACT_FACTION_EFFECTS.get(faction_id, ContactFactionEffect())


def get_contact_voice_line(contact: Optional[Contact], state: "WorldState") -> str:  # noqa: F821
    """Pick the contact's line for the city's current mood."""
    if contact is None:
        return ""
    if state.tension >= CONTACT_STRAINED_TENSION:
        return contact.voice_lines.strained
    if state.camp_pop > 0:
        return contact.voice_lines.camped
    return contact.voice_lines.normal
