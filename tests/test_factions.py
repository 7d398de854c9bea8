"""Tests for faction influence rules, visibility triggers and status promotion."""

import pytest

from jugols_rest.factions.catalog import (
    ActivationMessages,
    FactionDefinition,
    FactionStatus,
    FlagTrigger,
    InfluenceRule,
    MeterDelta,
    MeterRequirement,
    MeterTrigger,
    ResourceDelta,
)
from jugols_rest.factions.influence import (
    apply_faction_influence,
    create_faction_states,
    get_active_factions,
    get_runtime_faction,
)


def _faction(faction_id="watchers", status=FactionStatus.ACTIVE, visibility=50, rules=(), triggers=()):
    return FactionDefinition(
        id=faction_id,
        name=faction_id.title(),
        theme="test",
        initial_status=status,
        initial_visibility=visibility,
        activation_messages=ActivationMessages(
            reveal=f"{faction_id} revealed.",
            active=f"{faction_id} active.",
        ),
        influence_rules=tuple(rules),
        visibility_triggers=tuple(triggers),
    )


@pytest.fixture
def bare_state(state):
    """A fresh state with the stock factions cleared out."""
    state.factions = {}
    return state


class TestCatalog:

    def test_initial_statuses(self):
        runtimes = create_faction_states()
        assert runtimes["flame_seekers"].status is FactionStatus.ACTIVE
        assert runtimes["shadow_syndicate"].status is FactionStatus.HIDDEN
        assert runtimes["shadow_syndicate"].visibility_level == 15
        assert runtimes["verdant_enclave"].status is FactionStatus.DORMANT

    def test_misspelled_meter_key_fails_fast(self):
        with pytest.raises(ValueError):
            MeterDelta("tensoin", 3)

    def test_misspelled_flag_key_fails_fast(self):
        with pytest.raises(ValueError):
            FlagTrigger("threat", True, 3)

    def test_runtime_created_from_definition(self, bare_state):
        registry = [_faction(status=FactionStatus.HIDDEN, visibility=12)]
        runtime = get_runtime_faction(bare_state, "watchers", registry)
        assert runtime.status is FactionStatus.HIDDEN
        assert runtime.visibility_level == 12
        assert bare_state.factions["watchers"] is runtime


class TestRulePass:

    def test_matching_rule_applies_deltas(self, bare_state):
        rule = InfluenceRule(
            action="collect", location="tavern",
            meter_deltas=(MeterDelta("tension", 4),),
            resource_deltas=(ResourceDelta("food_scraps", 1),),
            visibility_delta=6, favor_delta=2,
            log="The taverns grow loud.",
        )
        registry = [_faction(rules=[rule])]

        logged = apply_faction_influence(bare_state, "collect", {"location": "tavern"}, registry)

        runtime = bare_state.factions["watchers"]
        assert bare_state.tension == 14
        assert bare_state.food_scraps == 1
        assert runtime.visibility_level == 56
        assert runtime.favor == 2
        assert logged == ["The taverns grow loud."]
        assert bare_state.event_log[-1] == "The taverns grow loud."

    def test_location_mismatch_skips_rule(self, bare_state):
        rule = InfluenceRule(action="collect", location="tavern", meter_deltas=(MeterDelta("tension", 4),))
        apply_faction_influence(bare_state, "collect", {"location": "market"}, [_faction(rules=[rule])])
        assert bare_state.tension == 10

    def test_action_mismatch_skips_rule(self, bare_state):
        rule = InfluenceRule(action="feed", meter_deltas=(MeterDelta("tension", 4),))
        apply_faction_influence(bare_state, "collect", {}, [_faction(rules=[rule])])
        assert bare_state.tension == 10

    def test_requirement_gates_rule(self, bare_state):
        rule = InfluenceRule(
            action="start_night",
            requires=(MeterRequirement("tension", 55),),
            meter_deltas=(MeterDelta("tension", 3),),
        )
        registry = [_faction(rules=[rule])]
        apply_faction_influence(bare_state, "start_night", {}, registry)
        assert bare_state.tension == 10

        bare_state.tension = 55
        apply_faction_influence(bare_state, "start_night", {}, registry)
        assert bare_state.tension == 58

    def test_dormant_faction_rules_do_not_fire(self, bare_state):
        rule = InfluenceRule(action="feed", meter_deltas=(MeterDelta("tension", 4),))
        apply_faction_influence(bare_state, "feed", {}, [_faction(status=FactionStatus.DORMANT, rules=[rule])])
        assert bare_state.tension == 10

    def test_meter_deltas_clamp(self, bare_state):
        rule = InfluenceRule(action="feed", meter_deltas=(MeterDelta("camp_pressure", -6),))
        apply_faction_influence(bare_state, "feed", {}, [_faction(rules=[rule])])
        assert bare_state.camp_pressure == 0

    def test_resource_deltas_floor_at_zero(self, bare_state):
        rule = InfluenceRule(action="feed", resource_deltas=(ResourceDelta("food_fatty", -3),))
        bare_state.food_fatty = 1
        apply_faction_influence(bare_state, "feed", {}, [_faction(rules=[rule])])
        assert bare_state.food_fatty == 0

    @pytest.mark.parametrize("threat_before, amount, threat_after", [
        (False, 50, True),
        (False, 49, False),
        (True, -50, True),
        (True, -51, False),
    ])
    def test_threat_is_a_virtual_meter(self, bare_state, threat_before, amount, threat_after):
        bare_state.threat_active = threat_before
        rule = InfluenceRule(action="feed", meter_deltas=(MeterDelta("threat", amount),))
        apply_faction_influence(bare_state, "feed", {}, [_faction(rules=[rule])])
        assert bare_state.threat_active is threat_after


class TestVisibilityPass:

    def test_hidden_faction_surfaces_through_tension(self, bare_state):
        bare_state.tension = 12
        registry = [_faction(status=FactionStatus.HIDDEN, visibility=38,
                             triggers=[MeterTrigger("tension", 10, 5)])]

        logged = apply_faction_influence(bare_state, "feed", {}, registry)

        runtime = bare_state.factions["watchers"]
        assert runtime.visibility_level == 43
        assert runtime.status is FactionStatus.DORMANT
        assert logged == ["watchers revealed."]
        assert bare_state.event_log.count("watchers revealed.") == 1

    def test_reveal_is_logged_once(self, bare_state):
        bare_state.tension = 12
        registry = [_faction(status=FactionStatus.HIDDEN, visibility=38,
                             triggers=[MeterTrigger("tension", 10, 5)])]
        apply_faction_influence(bare_state, "feed", {}, registry)
        apply_faction_influence(bare_state, "feed", {}, registry)
        assert bare_state.factions["watchers"].visibility_level == 48
        assert bare_state.event_log.count("watchers revealed.") == 1

    def test_active_threshold_promotes_from_hidden(self, bare_state):
        bare_state.threat_active = True
        registry = [_faction(status=FactionStatus.HIDDEN, visibility=62,
                             triggers=[FlagTrigger("threat_active", True, 3)])]
        logged = apply_faction_influence(bare_state, "end_night", {}, registry)
        assert bare_state.factions["watchers"].status is FactionStatus.ACTIVE
        assert logged == ["watchers active."]

    def test_status_never_demotes(self, bare_state):
        rule = InfluenceRule(action="feed", visibility_delta=-60)
        registry = [_faction(visibility=70, rules=[rule])]
        apply_faction_influence(bare_state, "feed", {}, registry)
        runtime = bare_state.factions["watchers"]
        assert runtime.visibility_level == 10
        assert runtime.status is FactionStatus.ACTIVE

    def test_triggers_run_for_every_status(self, bare_state):
        bare_state.overgrowth = 60
        registry = [
            _faction("a", FactionStatus.ACTIVE, 70, triggers=[MeterTrigger("overgrowth", 50, 2)]),
            _faction("b", FactionStatus.DORMANT, 20, triggers=[MeterTrigger("overgrowth", 50, 2)]),
            _faction("c", FactionStatus.HIDDEN, 5, triggers=[MeterTrigger("overgrowth", 50, 2)]),
        ]
        apply_faction_influence(bare_state, "feed", {}, registry)
        assert [bare_state.factions[f].visibility_level for f in "abc"] == [72, 22, 7]

    def test_visibility_clamps_at_100(self, bare_state):
        bare_state.tension = 90
        registry = [_faction(visibility=99, triggers=[MeterTrigger("tension", 50, 5)])]
        apply_faction_influence(bare_state, "feed", {}, registry)
        assert bare_state.factions["watchers"].visibility_level == 100


class TestStockCatalog:

    def test_tavern_collection_stirs_flame_seekers(self, state):
        apply_faction_influence(state, "collect", {"location": "tavern"})
        assert state.tension == 14
        assert state.factions["flame_seekers"].favor == 2
        assert "Cultural unrest simmers in the streets." in state.event_log

    def test_active_factions_listing(self, state):
        active_ids = [definition.id for definition, _ in get_active_factions(state)]
        assert active_ids == ["flame_seekers", "arcane_consortium", "radiant_order"]
