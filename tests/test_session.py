"""Tests for the session facade: sequencing, influence, log mirroring and saves."""

from jugols_rest.core.clock import Phase
from jugols_rest.factions.catalog import FactionStatus
from jugols_rest.pack.roster import FeedEntry
from jugols_rest.simulation.engine import GameSession
from jugols_rest.state.persistence import MemorySaveStore
from jugols_rest.state.world_state import create_initial_state
from jugols_rest.viz.logger import SimLogger
from jugols_rest.world.pois import PoiType, get_active_pois, get_district_pois, has_night_pois


def _messages(logger, category=None):
    return [e.message for e in logger.entries if category is None or e.category == category]


def _shrine(session, district_id="heart"):
    return next(p for p in get_district_pois(session.state, district_id) if p.type is PoiType.SHRINE)


class TestNewGame:

    def test_starts_a_fresh_watch(self, session, store, quiet_logger):
        state = session.state
        assert state.day_number == 1
        assert state.phase is Phase.DAY
        assert len(state.incoming_groups_next_day) == 1
        assert {p.district_id for p in get_active_pois(state, "heart")} == {"heart"}
        assert "A new watch begins at Jugol's Rest." in _messages(quiet_logger, SimLogger.PHASE)
        assert len(session.metrics.snapshots) == 1
        assert store.exists()

    def test_without_autosave(self, quiet_logger):
        store = MemorySaveStore()
        GameSession(store=store, logger=quiet_logger, autosave=False).new_game()
        assert not store.exists()


class TestDayActions:

    def test_collect_is_mirrored_and_saved(self, session, store, quiet_logger):
        assert session.collect("butcher")

        entry = next(e for e in quiet_logger.entries if e.message == "Collected supplies from Butcher.")
        assert entry.category == SimLogger.ACTION
        assert (entry.day, entry.phase) == (1, "DAY")
        assert store.load().food_fatty == 2
        assert not session.collect("butcher")

    def test_contact_speaks_and_stirs_factions(self, session, quiet_logger):
        session.travel("heart")
        tension_before = session.state.tension

        assert session.collect("heart-emberfold-tavern")

        assert ("Emberfold Tavern: Warmth first, walls second. Take what you need, watch captain."
                in session.state.event_log)
        # +1 from the contact's faction, +4 from the Flame Seekers' tavern rule
        assert session.state.tension == tension_before + 5
        assert "Cultural unrest simmers in the streets." in _messages(quiet_logger, SimLogger.FACTION)
        assert session.state.factions["flame_seekers"].favor == 2

    def test_feed(self, session, quiet_logger):
        session.state.food_scraps = 2
        assert session.feed([FeedEntry("hyena-scout", scraps=2)])
        assert "Fed Kefa (2 scraps, 0 fatty)." in _messages(quiet_logger, SimLogger.PACK)

    def test_stabilize_runs_order_influence(self, session):
        state = session.state
        state.camp_pop = 2
        state.camp_active = True
        state.camp_pressure = 40
        state.food_scraps = 2

        result = session.stabilize()

        assert result.moved == 2
        # -20 from the supplies, -6 from the Radiant Order
        assert state.camp_pressure == 14
        assert state.factions["radiant_order"].favor == 2

    def test_pray_through_poi_action(self, session, quiet_logger):
        shrine = _shrine(session)
        assert session.poi_action(shrine.id)
        assert len(session.state.active_blessings) == 1
        assert session.metrics.collect_daily(session.state).prayers == 1
        assert len(_messages(quiet_logger, SimLogger.BLESSING)) >= 2

    def test_pack_edits(self, session):
        assert session.remove_from_pack("hyena-scout")
        assert session.assign_to_slot("hyena-shadow", 2)
        assert "hyena-shadow" in session.state.active_pack_ids
        assert not session.assign_to_slot("nobody", 0)


class TestNight:

    def test_nightfall_only_from_the_camp(self, session):
        session.travel("heart")
        assert not session.start_night()
        assert session.state.phase is Phase.DAY

        session.travel("camp")
        assert session.start_night()
        assert session.state.phase is Phase.NIGHT
        assert "Night falls over Jugol's Rest." in session.state.event_log

    def test_travel_spawns_tonight_despite_a_shrine(self, session):
        session.start_night()
        assert session.travel("heart")
        assert has_night_pois(session.state, "heart")
        assert _shrine(session) in get_district_pois(session.state, "heart")

    def test_night_action_raises_influence(self, session):
        session.start_night()
        session.travel("heart")
        route = next(p for p in session.current_pois() if p.type is PoiType.ROUTE)

        assert session.poi_action(route.id)

        assert session.state.route_guarded_tonight
        assert session.state.factions["radiant_order"].favor == 1
        assert not session.poi_action(route.id)

    def test_dawn_only_from_the_camp(self, session):
        session.start_night()
        session.travel("verdent")
        assert not session.end_night()
        session.travel("camp")
        assert session.end_night()
        assert session.state.day_number == 2
        assert len(session.metrics.snapshots) == 2

    def test_dashboard_callback_runs_at_dawn(self, session):
        calls = []
        session.set_dashboard_callback(lambda day, metrics: calls.append((day, metrics)))
        session.start_night()
        session.end_night()
        assert calls == [(2, session.metrics)]


class TestResume:

    def test_load_existing_save(self, session, store, quiet_logger):
        session.collect("tavern")
        resumed = GameSession(store=store, logger=quiet_logger, seed=99)

        state = resumed.load_or_new()

        assert state.food_scraps == 2
        assert state.location_collected == {"tavern": True}
        assert "Loaded saved game." in _messages(quiet_logger, SimLogger.SAVE)

    def test_empty_store_starts_new(self, quiet_logger):
        store = MemorySaveStore()
        state = GameSession(store=store, logger=quiet_logger).load_or_new()
        assert state.day_number == 1
        assert store.exists()

    def test_night_save_respawns_the_district(self, quiet_logger):
        state = create_initial_state()
        state.phase = Phase.NIGHT
        state.current_district_id = "arcane"
        store = MemorySaveStore()
        store.save(state)

        resumed = GameSession(store=store, logger=quiet_logger).load_or_new()

        assert has_night_pois(resumed, "arcane")

    def test_loaded_factions_keep_status(self, quiet_logger):
        state = create_initial_state()
        state.factions["shadow_syndicate"].status = FactionStatus.ACTIVE
        store = MemorySaveStore()
        store.save(state)
        resumed = GameSession(store=store, logger=quiet_logger).load_or_new()
        assert resumed.factions["shadow_syndicate"].status is FactionStatus.ACTIVE


class TestOutcome:

    def test_finished_on_victory(self, session):
        assert not session.is_finished
        session.state.victory = True
        assert session.is_finished

    def test_finished_on_collapse(self, session):
        session.state.game_over = True
        assert session.is_finished
