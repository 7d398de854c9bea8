"""Roster management: the deployable pack, feeding and the burst-day draft."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from jugols_rest.core.clock import Phase
from jugols_rest.core.config import HUNGER_REDUCTION_PER_FOOD
from jugols_rest.pack.hyenas import Hyena
from jugols_rest.state.world_state import add_event


@dataclass
class FeedEntry:
    """One line of a feeding plan."""

    hyena_id: str
    scraps: int = 0
    fatty: int = 0


def sync_active_pack(state: "WorldState") -> list[Hyena]:  # noqa: F821
    """Drop unknown and duplicate ids from the active list and enforce the cap."""
    known = {h.id for h in state.hyena_roster}
    seen: set[str] = set()
    cleaned: list[str] = []
    for hyena_id in state.active_pack_ids:
        if hyena_id in known and hyena_id not in seen:
            seen.add(hyena_id)
            cleaned.append(hyena_id)
    state.active_pack_ids = cleaned[: state.pack_size_cap]
    return get_active_pack(state)


def get_active_pack(state: "WorldState") -> list[Hyena]:  # noqa: F821
    by_id = {h.id: h for h in state.hyena_roster}
    return [by_id[i] for i in state.active_pack_ids if i in by_id]


def feed_hyenas(state: "WorldState", plan: list[FeedEntry]) -> bool:  # noqa: F821
    """Hand out food as one batch action. All-or-nothing."""
    if state.phase is not Phase.DAY or state.day_actions_remaining <= 0:
        return False
    if not plan:
        return False
    scraps = sum(max(0, e.scraps) for e in plan)
    fatty = sum(max(0, e.fatty) for e in plan)
    if scraps <= 0 and fatty <= 0:
        return False
    if scraps > state.food_scraps or fatty > state.food_fatty:
        return False

    hyenas = [state.get_hyena(e.hyena_id) for e in plan]
    if any(h is None for h in hyenas):
        return False

    for hyena, entry in zip(hyenas, plan):
        entry_scraps, entry_fatty = max(0, entry.scraps), max(0, entry.fatty)
        hyena.feed(entry_scraps, entry_fatty, HUNGER_REDUCTION_PER_FOOD)
        if entry_scraps + entry_fatty > 0:
            add_event(state, f"Fed {hyena.name} ({entry_scraps} scraps, {entry_fatty} fatty).")
    state.food_scraps -= scraps
    state.food_fatty -= fatty
    state.day_actions_remaining -= 1
    return True


def reset_fed_today(state: "WorldState") -> None:  # noqa: F821
    for hyena in state.hyena_roster:
        hyena.fed_today.scraps = 0
        hyena.fed_today.fatty = 0


# ----------------------------------------------------------------------
# Active pack editing (day only)
# ----------------------------------------------------------------------

def assign_to_slot(state: "WorldState", hyena_id: str, slot: int) -> bool:  # noqa: F821
    """Place a roster hyena into an active slot, moving it if already deployed."""
    if state.phase is not Phase.DAY or state.get_hyena(hyena_id) is None:
        return False
    if slot < 0 or slot >= state.pack_size_cap:
        return False
    ids = [i for i in state.active_pack_ids if i != hyena_id]
    if slot < len(ids):
        ids[slot] = hyena_id
    else:
        ids.append(hyena_id)
    state.active_pack_ids = ids
    sync_active_pack(state)
    return True


def remove_from_pack(state: "WorldState", hyena_id: str) -> bool:  # noqa: F821
    if state.phase is not Phase.DAY or hyena_id not in state.active_pack_ids:
        return False
    state.active_pack_ids = [i for i in state.active_pack_ids if i != hyena_id]
    return True


# ----------------------------------------------------------------------
# Draft
# ----------------------------------------------------------------------

def recruit_draft(state: "WorldState", candidate_id: str, add_to_pack: bool = True) -> Optional[Hyena]:  # noqa: F821
    """Take one candidate from the open draft into the roster for good."""
    if not state.draft_pending:
        return None
    candidate = next((c for c in state.draft_choices if c.id == candidate_id), None)
    if candidate is None or state.get_hyena(candidate.id) is not None:
        return None

    state.hyena_roster.append(candidate)
    if add_to_pack and len(state.active_pack_ids) < state.pack_size_cap:
        state.active_pack_ids.append(candidate.id)
    sync_active_pack(state)
    state.draft_pending = False
    state.draft_choices = []
    add_event(state, f"Drafted {candidate.name} ({candidate.role.value}).")
    return candidate
