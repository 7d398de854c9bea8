"""Tests for the day pipeline, collection, night budgets and the dawn rollover."""

from jugols_rest.core.clock import Phase
from jugols_rest.pack.roster import FeedEntry, feed_hyenas
from jugols_rest.simulation.actions import collect_location, stabilize_camp, travel
from jugols_rest.simulation.phases import (
    DAY_PIPELINE,
    apply_camp_feedback,
    check_burst,
    check_victory_and_collapse,
    end_night,
    regenerate_forecast,
    resolve_arrivals,
    start_day,
    start_night,
)
from jugols_rest.state.world_state import IncomingGroup


class TestCollection:

    def test_fresh_state(self, state):
        assert state.day_number == 1
        assert state.phase is Phase.DAY
        assert state.day_actions_remaining == 5
        assert (state.tension, state.overgrowth) == (10, 10)

    def test_collect_legacy_slot_once(self, state):
        assert collect_location(state, "butcher")
        assert (state.food_scraps, state.food_fatty) == (1, 2)
        assert state.day_actions_remaining == 4
        assert state.location_collected["butcher"] is True

        assert not collect_location(state, "butcher")
        assert (state.food_scraps, state.food_fatty) == (1, 2)
        assert state.day_actions_remaining == 4

    def test_collected_flags_are_per_district(self, state):
        assert collect_location(state, "butcher")
        travel(state, "heart")
        assert collect_location(state, "butcher")
        assert state.food_fatty == 4

    def test_contact_flag_follows_the_contact_home(self, state):
        assert collect_location(state, "heart-emberfold-tavern")
        assert state.day_collected_by_district == {"heart": {"heart-emberfold-tavern": True}}

        travel(state, "heart")
        scraps, actions = state.food_scraps, state.day_actions_remaining

        assert not collect_location(state, "heart-emberfold-tavern")
        assert not collect_location(state, "tavern")
        assert (state.food_scraps, state.day_actions_remaining) == (scraps, actions)

    def test_legacy_slot_and_its_contact_share_a_flag(self, state):
        travel(state, "heart")
        assert collect_location(state, "tavern")
        scraps, actions = state.food_scraps, state.day_actions_remaining

        assert not collect_location(state, "heart-emberfold-tavern")
        assert (state.food_scraps, state.day_actions_remaining) == (scraps, actions)
        assert state.location_collected == {"heart-emberfold-tavern": True}

    def test_contact_applies_faction_effect(self, state):
        state.current_district_id = "arcane"
        assert collect_location(state, "arcane-azure-supplier")
        assert (state.food_scraps, state.food_fatty) == (3, 0)
        assert state.tension == 11
        assert state.event_log[-1] == "Collected supplies from Azure Supply Hall."

    def test_unknown_location(self, state):
        assert not collect_location(state, "bakery")
        assert state.day_actions_remaining == 5
        assert state.day_collected_by_district == {}

    def test_out_of_actions(self, state):
        state.day_actions_remaining = 0
        assert not collect_location(state, "tavern")

    def test_collect_rejected_at_night(self, state):
        state.phase = Phase.NIGHT
        assert not collect_location(state, "tavern")


class TestArrivals:

    def test_overflow_goes_to_camp(self, state):
        state.incoming_groups_next_day = [IncomingGroup("wayfarers", 8)]

        resolve_arrivals(state)

        assert state.housed_pop == 10
        assert state.camp_pop == 4
        assert state.camp_active is True
        assert state.camp_factions == {"wayfarers": 4}
        assert state.event_log[-1] == "Wayfarers: 8 arrived, 4 housed, 4 to camp."
        assert state.incoming_groups_next_day == []

    def test_fitting_group_leaves_camp_inactive(self, state):
        state.incoming_groups_next_day = [IncomingGroup("hearthbound_union", 3)]
        resolve_arrivals(state)
        assert state.housed_pop == 9
        assert state.camp_pop == 0
        assert state.camp_active is False

    def test_arrival_flavor_goes_to_narrative_log(self, state):
        state.incoming_groups_next_day = [IncomingGroup("wayfarers", 1)]
        resolve_arrivals(state)
        assert state.narrative_log[-1].source == "Wayfarers"

    def test_forecast_for_tomorrow(self, state):
        regenerate_forecast(state)
        assert [(g.faction_id, g.size) for g in state.incoming_groups_next_day] == [("wayfarers", 2)]

    def test_forecast_adds_burst_group(self, state):
        state.day_number = 2
        regenerate_forecast(state)
        assert [(g.faction_id, g.size) for g in state.incoming_groups_next_day] == [
            ("arcane_conclave", 2),
            ("wayfarers", 6),
        ]


class TestCampFeedback:

    def test_empty_camp_decays_pressure(self, state):
        state.camp_pressure = 25
        apply_camp_feedback(state)
        assert state.camp_pressure == 15
        assert state.tension == 10

    def test_occupied_camp_raises_meters(self, state):
        state.camp_pop = 4
        apply_camp_feedback(state)
        assert state.camp_pressure == 10
        assert state.tension == 14
        assert state.overgrowth == 13

    def test_dominant_faction_scales_tension(self, state):
        state.camp_pop = 4
        state.camp_factions = {"verdent_covenant": 4}
        apply_camp_feedback(state)
        assert state.tension == 13
        assert state.overgrowth == 12

    def test_stabilize_moves_campers_into_housing(self, state):
        state.camp_pop = 6
        state.camp_active = True
        state.camp_pressure = 50
        state.camp_factions = {"wayfarers": 4, "gilded_exiles": 2}
        state.food_scraps = 3

        result = stabilize_camp(state)

        assert result.moved == 4
        assert result.pressure_relief == 20
        assert state.camp_pop == 2
        assert state.housed_pop == 10
        assert state.camp_factions == {"gilded_exiles": 2}
        assert state.food_scraps == 1

    def test_stabilize_needs_an_active_camp(self, state):
        state.food_scraps = 5
        assert stabilize_camp(state) is None


class TestCollapse:

    def test_two_triggers_on_consecutive_dawns(self, state):
        state.overgrowth = 100
        state.tension = 100

        start_day(state, advance_day=True)
        assert state.collapse_days == 1
        assert not state.game_over

        start_day(state, advance_day=True)
        assert state.collapse_days == 2
        assert state.game_over
        assert state.event_log.count("Jugol's Rest has collapsed.") == 1

    def test_single_trigger_never_counts(self, state):
        state.overgrowth = 100
        for _ in range(3):
            start_day(state, advance_day=True)
        assert state.collapse_days == 0
        assert not state.game_over

    def test_collapse_day_tires_the_pack(self, state):
        state.camp_pressure = 100
        state.threat_nights_active_count = 2
        check_victory_and_collapse(state)
        assert state.hyena_stamina_base_penalty == 1

    def test_population_victory(self, state):
        state.housed_pop = 50
        state.camp_pop = 10
        check_victory_and_collapse(state)
        assert state.victory
        assert state.event_log[-1].startswith("Jugol's Rest shelters 60 souls.")


class TestDayPipeline:

    def test_stage_order(self):
        assert [stage.name for stage in DAY_PIPELINE] == [
            "ArrivalResolution",
            "CampFeedback",
            "BurstCheck",
            "BlessingTick",
            "ForecastRegen",
            "VictoryCheck",
        ]

    def test_unguarded_route_raises_tension(self, state):
        start_day(state, advance_day=True)
        assert state.tension == 15

    def test_guarded_route_keeps_tension(self, state):
        state.route_guarded_tonight = True
        start_day(state, advance_day=True)
        assert state.tension == 10
        assert state.route_guarded_tonight is False

    def test_day_start_resets_actions_and_collections(self, state):
        collect_location(state, "tavern")
        start_day(state, advance_day=True)
        assert state.day_number == 2
        assert state.day_actions_remaining == 5
        assert state.day_collected_by_district == {}

    def test_burst_day_opens_a_draft(self, state):
        state.day_number = 3
        check_burst(state)
        assert state.burst_count == 1
        assert state.draft_pending
        assert len(state.draft_choices) == 3
        assert state.pack_size_cap == 3

    def test_every_second_burst_grows_the_pack(self, state):
        state.day_number = 6
        state.burst_count = 1
        check_burst(state)
        assert state.pack_size_cap == 4
        assert state.supplies_tier == 2

    def test_unclaimed_draft_closes_next_dawn(self, state):
        state.day_number = 3
        check_burst(state)
        state.day_number = 4
        check_burst(state)
        assert not state.draft_pending
        assert state.draft_choices == []


class TestNight:

    def test_unfed_budget(self, state):
        assert start_night(state)
        assert state.phase is Phase.NIGHT
        assert state.pack_stamina == 6
        assert state.pack_power == 2

    def test_feeding_raises_budget(self, state):
        state.food_scraps = 2
        state.food_fatty = 1
        feed_hyenas(state, [FeedEntry("hyena-scout", scraps=2), FeedEntry("hyena-bruiser", fatty=1)])
        start_night(state)
        assert state.pack_stamina == 10
        assert state.pack_power == 4

    def test_collapse_penalty_lowers_stamina(self, state):
        state.hyena_stamina_base_penalty = 10
        start_night(state)
        assert state.pack_stamina == 0

    def test_start_night_twice(self, state):
        assert start_night(state)
        assert not start_night(state)

    def test_end_night_requires_night(self, state):
        assert not end_night(state)
        assert state.day_number == 1

    def test_end_night_rolls_into_dawn(self, state):
        state.food_scraps = 1
        feed_hyenas(state, [FeedEntry("hyena-scout", scraps=1)])
        start_night(state)
        state.cleared_overgrowth_tonight = True

        assert end_night(state)

        assert state.day_number == 2
        assert state.phase is Phase.DAY
        assert state.get_hyena("hyena-scout").fed_today.scraps == 0
        assert state.cleared_overgrowth_last_night
        assert not state.threat_active

    def test_heavy_overgrowth_raises_threat(self, state):
        start_night(state)
        state.overgrowth = 60
        end_night(state)
        assert state.threat_active
        assert state.threat_nights_active_count == 1

    def test_quiet_night_resets_threat_streak(self, state):
        state.threat_nights_active_count = 1
        start_night(state)
        end_night(state)
        assert state.threat_nights_active_count == 0
