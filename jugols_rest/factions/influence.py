"""Two-pass faction influence: active factions act, then everyone is re-ranked.

Pass one applies the rules of every *active* faction that match the player
action. Pass two runs every faction's visibility triggers regardless of
status and promotes factions that have become visible enough, so hidden and
dormant factions surface through ambient pressure before they can act.
"""

from __future__ import annotations

from typing import Iterable, Optional

from jugols_rest.core.config import (
    THREAT_VIRTUAL_THRESHOLD,
    VISIBILITY_ACTIVE_THRESHOLD,
    VISIBILITY_DORMANT_THRESHOLD,
)
from jugols_rest.core.meters import clamp_meter, clamp_visibility
from jugols_rest.factions.catalog import (
    FACTIONS,
    FactionDefinition,
    FactionRuntime,
    FactionStatus,
    FlagTrigger,
    InfluenceRule,
    MeterDelta,
    MeterKey,
    MeterTrigger,
    ResourceDelta,
)
from jugols_rest.state.world_state import add_event


def create_faction_states(registry: Iterable[FactionDefinition] = FACTIONS) -> dict[str, FactionRuntime]:
    return {
        f.id: FactionRuntime(id=f.id, status=f.initial_status, visibility_level=f.initial_visibility)
        for f in registry
    }


def get_runtime_faction(
    state: "WorldState",  # noqa: F821
    faction_id: str,
    registry: Iterable[FactionDefinition] = FACTIONS,
) -> FactionRuntime:
    """Runtime record for a faction, created on first access."""
    runtime = state.factions.get(faction_id)
    if runtime is None:
        definition = next((f for f in registry if f.id == faction_id), None)
        if definition is not None:
            runtime = FactionRuntime(id=faction_id, status=definition.initial_status,
                                     visibility_level=definition.initial_visibility)
        else:
            runtime = FactionRuntime(id=faction_id)
        state.factions[faction_id] = runtime
    return runtime


# ----------------------------------------------------------------------
# Rule pass
# ----------------------------------------------------------------------

def _meter_value(state: "WorldState", key: MeterKey) -> int:  # noqa: F821
    if key is MeterKey.THREAT:
        return 100 if state.threat_active else 0
    return getattr(state, key.value)


def _matches(rule: InfluenceRule, action: str, context: dict, state: "WorldState") -> bool:  # noqa: F821
    if rule.action is not None and rule.action != action:
        return False
    if rule.location is not None and rule.location != context.get("location"):
        return False
    return all(_meter_value(state, req.key) >= req.minimum for req in rule.requires)


def _apply_meter_delta(state: "WorldState", delta: MeterDelta) -> None:  # noqa: F821
    if delta.key is MeterKey.THREAT:
        virtual = clamp_meter(_meter_value(state, MeterKey.THREAT) + delta.amount)
        state.threat_active = virtual >= THREAT_VIRTUAL_THRESHOLD
        return
    setattr(state, delta.key.value, clamp_meter(getattr(state, delta.key.value) + delta.amount))


def _apply_resource_delta(state: "WorldState", delta: ResourceDelta) -> None:  # noqa: F821
    current = getattr(state, delta.key.value)
    setattr(state, delta.key.value, max(0, current + delta.amount))


def _apply_rule(state: "WorldState", rule: InfluenceRule, runtime: FactionRuntime) -> None:  # noqa: F821
    for delta in rule.meter_deltas:
        _apply_meter_delta(state, delta)
    for delta in rule.resource_deltas:
        _apply_resource_delta(state, delta)
    runtime.visibility_level = clamp_visibility(runtime.visibility_level + rule.visibility_delta)
    runtime.favor += rule.favor_delta
    if rule.log:
        add_event(state, rule.log)


# ----------------------------------------------------------------------
# Visibility pass
# ----------------------------------------------------------------------

def _trigger_holds(state: "WorldState", trigger) -> bool:  # noqa: F821
    if isinstance(trigger, MeterTrigger):
        return _meter_value(state, trigger.key) >= trigger.minimum
    if isinstance(trigger, FlagTrigger):
        return getattr(state, trigger.key.value) is trigger.value
    raise TypeError(f"Unknown visibility trigger: {trigger!r}")


def _advance_status(runtime: FactionRuntime) -> Optional[FactionStatus]:
    """Promote on visibility thresholds. Returns the new status if it changed."""
    previous = runtime.status
    if runtime.visibility_level >= VISIBILITY_ACTIVE_THRESHOLD:
        runtime.status = FactionStatus.ACTIVE
    elif runtime.visibility_level >= VISIBILITY_DORMANT_THRESHOLD and runtime.status is FactionStatus.HIDDEN:
        runtime.status = FactionStatus.DORMANT
    return runtime.status if runtime.status is not previous else None


def apply_faction_influence(
    state: "WorldState",  # noqa: F821
    action: str,
    context: Optional[dict] = None,
    registry: Iterable[FactionDefinition] = FACTIONS,
) -> list[str]:
    """Run both passes for one player action. Returns the lines logged."""
    context = context or {}
    registry = tuple(registry)
    logged: list[str] = []

    for faction in registry:
        runtime = get_runtime_faction(state, faction.id, registry)
        if runtime.status is not FactionStatus.ACTIVE:
            continue
        for rule in faction.influence_rules:
            if _matches(rule, action, context, state):
                _apply_rule(state, rule, runtime)
                if rule.log:
                    logged.append(rule.log)

    for faction in registry:
        runtime = get_runtime_faction(state, faction.id, registry)
        for trigger in faction.visibility_triggers:
            if _trigger_holds(state, trigger):
                runtime.visibility_level = clamp_visibility(runtime.visibility_level + trigger.delta)
        promoted = _advance_status(runtime)
        if promoted is None:
            continue
        messages = faction.activation_messages
        message = messages.active if promoted is FactionStatus.ACTIVE else messages.reveal
        if message:
            add_event(state, message)
            logged.append(message)

    return logged


def get_active_factions(
    state: "WorldState",  # noqa: F821
    registry: Iterable[FactionDefinition] = FACTIONS,
) -> list[tuple[FactionDefinition, FactionRuntime]]:
    """Catalog entry and runtime record for every currently active faction."""
    active = []
    for faction in registry:
        runtime = state.factions.get(faction.id)
        if runtime is not None and runtime.status is FactionStatus.ACTIVE:
            active.append((faction, runtime))
    return active
