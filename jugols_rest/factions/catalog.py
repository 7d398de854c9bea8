"""City factions: closed rule/trigger types and the static catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


class MeterKey(Enum):
    TENSION = "tension"
    OVERGROWTH = "overgrowth"
    CAMP_PRESSURE = "camp_pressure"
    THREAT = "threat"  # boolean threat treated as a 0/100 meter


class ResourceKey(Enum):
    FOOD_SCRAPS = "food_scraps"
    FOOD_FATTY = "food_fatty"
    HOUSING_CAPACITY = "housing_capacity"


class FlagKey(Enum):
    THREAT_ACTIVE = "threat_active"
    CAMP_ACTIVE = "camp_active"


class FactionStatus(Enum):
    HIDDEN = "hidden"
    DORMANT = "dormant"
    ACTIVE = "active"


# ----------------------------------------------------------------------
# Rule parts. Keys are coerced on construction so a typo fails at import.
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class MeterDelta:
    key: MeterKey
    amount: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", MeterKey(self.key))


@dataclass(frozen=True)
class ResourceDelta:
    key: ResourceKey
    amount: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", ResourceKey(self.key))


@dataclass(frozen=True)
class MeterRequirement:
    key: MeterKey
    minimum: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", MeterKey(self.key))


@dataclass(frozen=True)
class InfluenceRule:
    """Applies when an active faction sees a matching player action."""

    action: Optional[str] = None
    location: Optional[str] = None
    requires: tuple[MeterRequirement, ...] = ()
    meter_deltas: tuple[MeterDelta, ...] = ()
    resource_deltas: tuple[ResourceDelta, ...] = ()
    visibility_delta: int = 0
    favor_delta: int = 0
    log: Optional[str] = None


@dataclass(frozen=True)
class MeterTrigger:
    key: MeterKey
    minimum: int
    delta: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", MeterKey(self.key))


@dataclass(frozen=True)
class FlagTrigger:
    key: FlagKey
    value: bool
    delta: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", FlagKey(self.key))


VisibilityTrigger = Union[MeterTrigger, FlagTrigger]


@dataclass(frozen=True)
class ActivationMessages:
    reveal: Optional[str] = None
    active: Optional[str] = None


@dataclass(frozen=True)
class FactionDefinition:
    id: str
    name: str
    theme: str
    initial_status: FactionStatus
    initial_visibility: int
    activation_messages: ActivationMessages = ActivationMessages()
    influence_rules: tuple[InfluenceRule, ...] = ()
    visibility_triggers: tuple[VisibilityTrigger, ...] = ()
    pressure_style: str = ""
    npc_refs: tuple[str, ...] = ()


@dataclass
class FactionRuntime:
    """Per-playthrough record; status only ever moves up the ladder."""

    id: str
    status: FactionStatus = FactionStatus.DORMANT
    favor: int = 0
    visibility_level: int = 0


# ----------------------------------------------------------------------
# Catalog
# ----------------------------------------------------------------------

FACTIONS: tuple[FactionDefinition, ...] = (
    FactionDefinition(
        id="flame_seekers",
        name="Flame Seekers",
        theme="Art, expression, culture, passion, performance",
        pressure_style="Volatility",
        initial_status=FactionStatus.ACTIVE,
        initial_visibility=65,
        npc_refs=("Maestro Lyric Firestone", "Bard Jasper Silvertongue", "Mara Brightstone"),
        activation_messages=ActivationMessages(
            reveal="Lantern-lit rumors of artists gather in the alleys.",
            active="The city surges with a new cultural pulse.",
        ),
        influence_rules=(
            InfluenceRule(
                action="collect", location="tavern",
                meter_deltas=(MeterDelta("tension", 4),),
                visibility_delta=6, favor_delta=2,
                log="Cultural unrest simmers in the streets.",
            ),
            InfluenceRule(
                action="collect", location="market",
                meter_deltas=(MeterDelta("tension", 2),),
                visibility_delta=4, favor_delta=1,
            ),
            InfluenceRule(
                action="start_night",
                requires=(MeterRequirement("tension", 55),),
                meter_deltas=(MeterDelta("tension", 3),),
                visibility_delta=2,
                log="Lantern-lit performances spill into the alleys.",
            ),
        ),
        visibility_triggers=(MeterTrigger("tension", 50, 3),),
    ),
    FactionDefinition(
        id="arcane_consortium",
        name="Arcane Consortium",
        theme="Knowledge, experimentation, progress, arcane control",
        pressure_style="Escalation",
        initial_status=FactionStatus.ACTIVE,
        initial_visibility=60,
        npc_refs=("Archmage Zephyr Stormweaver", "Artificer Garrick Gearspinner"),
        activation_messages=ActivationMessages(
            reveal="Arcane signals ripple beneath the city's routine.",
            active="Experimental energies crackle through the streets.",
        ),
        influence_rules=(
            InfluenceRule(
                action="collect", location="market",
                resource_deltas=(ResourceDelta("food_scraps", 1),),
                meter_deltas=(MeterDelta("overgrowth", 1),),
                visibility_delta=4, favor_delta=2,
                log="Arcane experimentation strains the city's balance.",
            ),
            InfluenceRule(
                action="clear_overgrowth",
                meter_deltas=(MeterDelta("overgrowth", -5), MeterDelta("tension", 2)),
                visibility_delta=3, favor_delta=1,
            ),
        ),
        visibility_triggers=(MeterTrigger("overgrowth", 40, 3),),
    ),
    FactionDefinition(
        id="radiant_order",
        name="Radiant Order",
        theme="Law, order, public safety, authority",
        pressure_style="Restriction",
        initial_status=FactionStatus.ACTIVE,
        initial_visibility=55,
        npc_refs=("High Councilor Elara Dawnbringer", "Captain Thorne Ironshield"),
        activation_messages=ActivationMessages(
            reveal="Orderly patrol patterns tighten in the background.",
            active="Authority stiffens across the city wards.",
        ),
        influence_rules=(
            InfluenceRule(
                action="stabilize_camp",
                meter_deltas=(MeterDelta("camp_pressure", -6), MeterDelta("tension", -3)),
                visibility_delta=5, favor_delta=2,
                log="Watch patrols tighten their routes.",
            ),
            InfluenceRule(
                action="guard_route",
                meter_deltas=(MeterDelta("camp_pressure", -2),),
                visibility_delta=2, favor_delta=1,
            ),
            InfluenceRule(
                action="suppress_threat",
                meter_deltas=(MeterDelta("tension", -4),),
                visibility_delta=3, favor_delta=2,
            ),
        ),
        visibility_triggers=(
            MeterTrigger("camp_pressure", 35, 3),
            FlagTrigger("threat_active", True, 3),
        ),
    ),
    FactionDefinition(
        id="shadow_syndicate",
        name="Shadow Syndicate",
        theme="Secrets, leverage, influence, crime, information",
        pressure_style="Opportunism",
        initial_status=FactionStatus.HIDDEN,
        initial_visibility=15,
        npc_refs=("The Whisper", "Raven"),
        activation_messages=ActivationMessages(
            reveal="Whispers collect along the city's shadowed lanes.",
            active="Secretive deals now steer the city's pulse.",
        ),
        influence_rules=(
            InfluenceRule(
                action="collect", location="market",
                resource_deltas=(ResourceDelta("food_scraps", 1),),
                meter_deltas=(MeterDelta("tension", -2),),
                visibility_delta=4, favor_delta=2,
                log="Unseen bargains shift the city's balance.",
            ),
        ),
        visibility_triggers=(
            MeterTrigger("tension", 60, 4),
            FlagTrigger("threat_active", True, 3),
        ),
    ),
    FactionDefinition(
        id="verdant_enclave",
        name="Verdant Enclave",
        theme="Nature, balance, growth, preservation",
        pressure_style="Entanglement",
        initial_status=FactionStatus.DORMANT,
        initial_visibility=35,
        npc_refs=("Elder Thorne Oakenheart", "Druid Willow Streamwhisper"),
        activation_messages=ActivationMessages(
            reveal="Vines creep closer to the city's edge.",
            active="Nature's balance presses into the streets.",
        ),
        influence_rules=(
            InfluenceRule(
                action="clear_overgrowth",
                meter_deltas=(MeterDelta("overgrowth", -6), MeterDelta("camp_pressure", -1)),
                visibility_delta=4, favor_delta=2,
                log="Verdant growth reshapes the outskirts.",
            ),
        ),
        visibility_triggers=(MeterTrigger("overgrowth", 50, 4),),
    ),
    FactionDefinition(
        id="embered_circle",
        name="Embered Circle",
        theme="Architecture, infrastructure, long-term design, control",
        pressure_style="Permanence",
        initial_status=FactionStatus.DORMANT,
        initial_visibility=30,
        npc_refs=("Grand Architect Lyria Voss", "Varek Ironclad"),
        activation_messages=ActivationMessages(
            reveal="Blueprints quietly circulate among builders.",
            active="Long-term plans begin to shape the city.",
        ),
        influence_rules=(
            InfluenceRule(
                action="secure_lot",
                resource_deltas=(ResourceDelta("housing_capacity", 1),),
                meter_deltas=(MeterDelta("camp_pressure", -3),),
                visibility_delta=4, favor_delta=2,
                log="Foundations settle into lasting shape.",
            ),
            InfluenceRule(
                action="guard_route",
                meter_deltas=(MeterDelta("camp_pressure", -1),),
                visibility_delta=2, favor_delta=1,
            ),
        ),
        visibility_triggers=(MeterTrigger("camp_pressure", 45, 4),),
    ),
)

FACTION_BY_ID: dict[str, FactionDefinition] = {f.id: f for f in FACTIONS}
