"""Hyena pack members: roles, stats, starter roster and draft generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from jugols_rest.core.config import (
    FATTY_POWER_BY_ROLE,
    SCRAPS_STAMINA_BY_ROLE,
)
from jugols_rest.core.meters import clamp_meter


HYENA_NAMES: list[str] = [
    "Kefa", "Asha", "Rift", "Milo", "Zuri", "Baki",
    "Nima", "Taro", "Luma", "Kori", "Rasa", "Pax",
]

HYENA_TEMPERAMENTS: list[str] = ["Calm", "Fierce", "Wary"]


class Role(Enum):
    SCOUT = "Scout"
    BRUISER = "Bruiser"
    WARDEN = "Warden"

    @property
    def scraps_stamina(self) -> int:
        return SCRAPS_STAMINA_BY_ROLE[self.value]

    @property
    def fatty_power(self) -> int:
        return FATTY_POWER_BY_ROLE[self.value]


HYENA_ROLES: list[Role] = [Role.SCOUT, Role.BRUISER, Role.WARDEN]


@dataclass
class FedToday:
    scraps: int = 0
    fatty: int = 0


@dataclass
class BaseStats:
    stamina_bonus: int = 0
    power_bonus: int = 0


@dataclass
class Hyena:
    """A recruited pack member. Temperament and traits are flavour only."""

    id: str
    name: str
    role: Role
    temperament: str
    hunger: int = 50
    fed_today: FedToday = field(default_factory=FedToday)
    base_stats: Optional[BaseStats] = None
    traits: list[str] = field(default_factory=list)

    def feed(self, scraps: int, fatty: int, hunger_per_food: int) -> None:
        self.fed_today.scraps += scraps
        self.fed_today.fatty += fatty
        self.hunger = clamp_meter(self.hunger - (scraps + fatty) * hunger_per_food)


@dataclass(frozen=True)
class Contribution:
    stamina: int = 0
    power: int = 0


def create_hyena(
    hyena_id: str,
    name: str,
    role: Role,
    temperament: str,
    hunger: int = 50,
    traits: Optional[list[str]] = None,
    base_stats: Optional[BaseStats] = None,
) -> Hyena:
    return Hyena(
        id=hyena_id,
        name=name,
        role=role,
        temperament=temperament,
        hunger=clamp_meter(hunger),
        traits=list(traits or []),
        base_stats=base_stats,
    )


def create_starter_roster() -> list[Hyena]:
    return [
        create_hyena("hyena-scout", "Kefa", Role.SCOUT, "Wary", 45, ["Quick"], BaseStats(1, 0)),
        create_hyena("hyena-bruiser", "Asha", Role.BRUISER, "Fierce", 50, ["Relentless"], BaseStats(0, 1)),
        create_hyena("hyena-warden", "Rift", Role.WARDEN, "Calm", 40, ["Steady"], BaseStats(1, 0)),
        create_hyena("hyena-shadow", "Nima", Role.SCOUT, "Wary", 55, ["Silent"], BaseStats(1, 0)),
    ]


def _pick_from(options: list, seed: int):
    return options[abs(seed) % len(options)]


def create_draft_candidates(day_number: int, burst_count: int, count: int) -> list[Hyena]:
    """Procedurally generate draft candidates; same day and burst, same litter."""
    day_seed = max(1, day_number) * 17
    burst_seed = max(0, burst_count) * 29
    candidates: list[Hyena] = []
    for index in range(count):
        seed = day_seed + burst_seed + index * 11
        role = _pick_from(HYENA_ROLES, seed)
        candidates.append(create_hyena(
            hyena_id=f"hyena-draft-{day_number}-{index}-{seed}",
            name=_pick_from(HYENA_NAMES, seed + 3),
            role=role,
            temperament=_pick_from(HYENA_TEMPERAMENTS, seed + 5),
            hunger=35 + (seed * 3) % 30,
            traits=["Unbroken"] if index % 2 == 0 else ["Keen-Eyed"],
            base_stats=BaseStats(
                stamina_bonus=1 if role is Role.SCOUT else 0,
                power_bonus=1 if role is Role.BRUISER else 0,
            ),
        ))
    return candidates


def hyena_contribution(hyena: Hyena) -> Contribution:
    """Role-weighted stamina/power this hyena adds tonight."""
    stats = hyena.base_stats or BaseStats()
    stamina = hyena.role.scraps_stamina * hyena.fed_today.scraps + stats.stamina_bonus
    power = hyena.role.fatty_power * hyena.fed_today.fatty + stats.power_bonus
    return Contribution(stamina=stamina, power=power)


def pack_totals(pack: list[Hyena]) -> Contribution:
    stamina = 0
    power = 0
    for hyena in pack:
        contribution = hyena_contribution(hyena)
        stamina += contribution.stamina
        power += contribution.power
    return Contribution(stamina=stamina, power=power)


def has_role(pack: list[Hyena], role: Role) -> bool:
    return any(h.role is role for h in pack)
