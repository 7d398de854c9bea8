"""Tests for shrine prayer and blessing lifetimes across the day/night cycle."""

import pytest

from jugols_rest.core.clock import Phase
from jugols_rest.simulation.actions import pray_at_shrine, secure_lot
from jugols_rest.simulation.phases import end_night, start_night
from jugols_rest.world.blessings import (
    BlessingDuration,
    BlessingType,
    create_blessing,
    format_blessing_duration,
    format_blessing_effect,
    get_blessing_action_cost_modifier,
)
from jugols_rest.world.gods import GOD_BY_ID, BlessingTemplate, God
from jugols_rest.world.pois import PoiType, get_poi_action_cost


def _god(blessing_type, value, duration):
    return God(
        id="test-god",
        name="Test God",
        epithet="of Fixtures",
        district_affinity="any",
        blessing=BlessingTemplate(blessing_type, value, duration),
    )


def _bless(state, god):
    blessing = create_blessing(state, god)
    state.active_blessings.append(blessing)
    return blessing


@pytest.fixture
def shrine(state, place_poi):
    poi = place_poi(state, PoiType.SHRINE, phase=Phase.DAY)
    poi.god_id = "hearthmother"
    return poi


class TestPrayer:

    def test_first_prayer_discovers_the_shrine(self, state, shrine):
        blessing = pray_at_shrine(state, shrine.id)

        assert blessing.type is BlessingType.PACK_STAMINA
        assert blessing.value == 2
        assert state.active_blessings == [blessing]
        assert state.discovered_shrines == {"hearthmother": True}
        assert state.day_actions_remaining == 4
        assert shrine.resolved and shrine.prayed_today
        assert state.event_log[-2:] == [
            "Shrine discovered: The Hearthmother.",
            "Blessing received: The Hearthmother, Pack stamina +2 at night.",
        ]

    def test_shrine_answers_once(self, state, shrine):
        assert pray_at_shrine(state, shrine.id) is not None
        assert pray_at_shrine(state, shrine.id) is None
        assert len(state.active_blessings) == 1

    def test_known_god_is_not_rediscovered(self, state, shrine):
        state.discovered_shrines["hearthmother"] = True
        pray_at_shrine(state, shrine.id)
        assert "Shrine discovered: The Hearthmother." not in state.event_log

    def test_prayer_needs_daylight(self, state, shrine):
        state.phase = Phase.NIGHT
        assert pray_at_shrine(state, shrine.id) is None

    def test_prayer_needs_an_action(self, state, shrine):
        state.day_actions_remaining = 0
        assert pray_at_shrine(state, shrine.id) is None
        assert not shrine.resolved

    def test_not_a_shrine(self, state, place_poi):
        lot = place_poi(state, PoiType.LOT, phase=Phase.DAY)
        assert pray_at_shrine(state, lot.id) is None


class TestLifetimes:

    def test_night_blessing_boosts_tonight_then_expires(self, state):
        _bless(state, GOD_BY_ID["hearthmother"])

        start_night(state)
        assert state.pack_stamina == 6 + 2

        end_night(state)
        assert state.active_blessings == []

    def test_day_blessing_ends_at_nightfall(self, state):
        blessing = _bless(state, _god("PACK_POWER", 1, "DAY"))
        assert (blessing.expires_day, blessing.expires_phase) == (1, Phase.NIGHT)

        start_night(state)
        assert state.active_blessings == []
        assert state.pack_power == 2

    def test_cycle_blessing_ticks_at_the_next_dawn(self, state):
        blessing = _bless(state, GOD_BY_ID["jugol"])
        assert blessing.cycle_grace

        start_night(state)
        assert state.active_blessings == [blessing]

        end_night(state)
        # +5 from the unguarded route, -5 from the blessing
        assert state.tension == 10
        assert state.active_blessings == []

    def test_morning_camp_relief(self, state):
        _bless(state, GOD_BY_ID["kabir"])
        state.camp_pressure = 30
        start_night(state)
        end_night(state)
        # empty camp decays by 10 before the blessing tick
        assert state.camp_pressure == 14

    def test_housing_reward_bonus(self, night_state, place_poi):
        _bless(night_state, GOD_BY_ID["thessa"])
        lot = place_poi(night_state, PoiType.LOT)
        assert secure_lot(night_state, lot.id)
        assert night_state.housing_capacity == 13


class TestActionCostModifier:

    def test_cost_reduction_floors_at_one(self, night_state, place_poi):
        _bless(night_state, GOD_BY_ID["vell"])
        assert get_blessing_action_cost_modifier(night_state) == -1
        assert get_poi_action_cost(night_state, place_poi(night_state, PoiType.ROUTE)) == 1
        assert get_poi_action_cost(night_state, place_poi(night_state, PoiType.OVERGROWTH, 2, index=1)) == 3


class TestFormatting:

    @pytest.mark.parametrize("god_id, effect", [
        ("jugol", "Dawn tension -5"),
        ("vell", "Night action costs -1"),
        ("ossaru", "Pack power +1 at night"),
    ])
    def test_effect_label(self, state, god_id, effect):
        assert format_blessing_effect(create_blessing(state, GOD_BY_ID[god_id])) == effect

    def test_duration_label(self, state):
        blessing = create_blessing(state, GOD_BY_ID["mirrow"])
        assert blessing.duration is BlessingDuration.CYCLE
        assert format_blessing_duration(blessing) == "Through the next dawn"

    def test_missing_blessing(self):
        assert format_blessing_effect(None) == ""
        assert format_blessing_duration(None) == ""
