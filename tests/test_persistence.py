"""Tests for save round-trips, legacy migration and the save stores."""

import json

import pytest

from jugols_rest.core.clock import Phase
from jugols_rest.factions.catalog import FactionStatus
from jugols_rest.simulation.actions import collect_location, pray_at_shrine
from jugols_rest.simulation.phases import start_night
from jugols_rest.state.persistence import (
    FileSaveStore,
    MemorySaveStore,
    deserialize,
    serialize,
    to_dict,
)
from jugols_rest.world.districts import DISTRICTS
from jugols_rest.world.pois import PoiType, get_district_pois, spawn_pois_for_day, spawn_pois_for_night


@pytest.fixture
def played_state(state):
    """A state with shrines, a blessing, a draft and night POIs."""
    spawn_pois_for_day(state)
    shrine = next(p for p in get_district_pois(state, "heart") if p.type is PoiType.SHRINE)
    pray_at_shrine(state, shrine.id)
    collect_location(state, "tavern")
    state.camp_pop = 3
    state.camp_factions = {"wayfarers": 3}
    state.factions["shadow_syndicate"].visibility_level = 41
    state.factions["shadow_syndicate"].status = FactionStatus.DORMANT
    start_night(state)
    state.current_district_id = "heart"
    spawn_pois_for_night(state, DISTRICTS["heart"])
    return state


class TestRoundTrip:

    def test_fresh_state(self, state):
        assert to_dict(deserialize(serialize(state))) == to_dict(state)

    def test_played_state(self, played_state):
        restored = deserialize(serialize(played_state))
        assert to_dict(restored) == to_dict(played_state)
        assert restored.phase is Phase.NIGHT
        assert restored.pois_by_district.keys() == played_state.pois_by_district.keys()
        assert restored.factions["shadow_syndicate"].status is FactionStatus.DORMANT

    def test_poi_ids_survive_as_keys(self, played_state):
        restored = deserialize(serialize(played_state))
        for district_id, arena in played_state.pois_by_district.items():
            assert set(restored.pois_by_district[district_id]) == set(arena)


class TestCorruptInput:

    @pytest.mark.parametrize("raw", [
        "",
        "{not json",
        "[1, 2, 3]",
        '"a save"',
        '{"tension": 50}',
        '{"day_number": "three"}',
        '{"day_number": NaN}',
        "[" * 100000 + "]" * 100000,
    ])
    def test_returns_none(self, raw):
        assert deserialize(raw) is None

    def test_non_finite_numbers_fall_back_to_defaults(self, state):
        data = to_dict(state)
        data["food_scraps"] = float("inf")
        data["tension"] = float("-inf")
        data["day_actions_remaining"] = float("nan")
        raw = json.dumps(data)
        assert "Infinity" in raw

        restored = deserialize(raw)

        assert restored.food_scraps == 0
        assert restored.tension == 10
        assert restored.day_actions_remaining == 5

    def test_bad_entries_are_dropped(self, state):
        data = to_dict(state)
        data["hyena_roster"].append({"id": 7, "name": "Broken", "role": "Scout"})
        data["hyena_roster"].append({"id": "hyena-odd", "name": "Odd", "role": "Jester"})
        data["hyena_roster"].append("not a hyena")
        data["active_blessings"] = [{"type": "NOPE"}]
        data["pois_by_district"] = {"heart": [{"id": "garbage"}]}

        restored = deserialize(json.dumps(data))

        assert [h.id for h in restored.hyena_roster] == [h.id for h in state.hyena_roster]
        assert restored.active_blessings == []
        assert restored.pois_by_district == {"heart": {}}

    def test_meters_are_clamped(self, state):
        data = to_dict(state)
        data["tension"] = 250
        data["overgrowth"] = -40
        restored = deserialize(json.dumps(data))
        assert restored.tension == 100
        assert restored.overgrowth == 0

    def test_unknown_active_ids_are_dropped(self, state):
        data = to_dict(state)
        data["active_pack_ids"] = ["ghost", "hyena-warden", "hyena-warden"]
        assert deserialize(json.dumps(data)).active_pack_ids == ["hyena-warden"]


class TestLegacySaves:

    def test_missing_fields_take_defaults(self):
        restored = deserialize('{"day_number": 4, "food_scraps": 3}')
        assert restored.day_number == 4
        assert restored.food_scraps == 3
        assert restored.housing_capacity == 10
        assert restored.factions["flame_seekers"].status is FactionStatus.ACTIVE
        assert len(restored.active_pack_ids) == 3

    def test_camel_case_keys(self):
        raw = json.dumps({
            "dayNumber": 5,
            "campPop": 2,
            "campFactions": {"wayfarers": 2},
            "threatActive": True,
            "currentDistrictId": "verdent",
            "factions": [{"id": "verdant_enclave", "state": "active", "visibilityLevel": 70}],
        })
        restored = deserialize(raw)
        assert restored.day_number == 5
        assert restored.camp_pop == 2
        assert restored.camp_factions == {"wayfarers": 2}
        assert restored.threat_active is True
        assert restored.current_district_id == "verdent"
        assert restored.factions["verdant_enclave"].status is FactionStatus.ACTIVE
        assert restored.factions["verdant_enclave"].visibility_level == 70

    def test_pack_becomes_roster(self):
        raw = json.dumps({
            "dayNumber": 2,
            "pack": [
                {"id": "h1", "name": "Kefa", "role": "Scout", "fedScraps": 2},
                {"id": "h2", "name": "Asha", "role": "Bruiser", "baseStats": {"powerBonus": 1}},
            ],
        })
        restored = deserialize(raw)
        assert [h.id for h in restored.hyena_roster] == ["h1", "h2"]
        assert restored.active_pack_ids == ["h1", "h2"]
        assert restored.get_hyena("h1").fed_today.scraps == 2
        assert restored.get_hyena("h2").base_stats.power_bonus == 1

    def test_flat_location_collected_maps_to_contacts(self):
        raw = json.dumps({
            "dayNumber": 2,
            "currentDistrictId": "heart",
            "locationCollected": {"butcher": True, "tavern": False},
        })
        restored = deserialize(raw)
        assert restored.day_collected_by_district == {"heart": {"heart-dawncut-provisions": True}}

    def test_active_pois_key_is_renamed(self, played_state):
        data = to_dict(played_state)
        data["activePoisByDistrict"] = data.pop("pois_by_district")
        restored = deserialize(json.dumps(data))
        assert to_dict(restored)["pois_by_district"] == to_dict(played_state)["pois_by_district"]


class TestStores:

    def test_memory_store(self, state):
        store = MemorySaveStore()
        assert not store.exists()
        assert store.load() is None

        store.save(state)
        assert store.exists()
        assert to_dict(store.load()) == to_dict(state)

        store.clear()
        assert store.load() is None

    def test_memory_store_with_corrupt_save(self):
        assert MemorySaveStore("{oops").load() is None

    def test_file_store(self, tmp_path, state):
        store = FileSaveStore(str(tmp_path / "saves" / "slot.json"))
        assert store.load() is None

        state.food_fatty = 9
        store.save(state)

        assert store.exists()
        assert store.load().food_fatty == 9
        assert [p.name for p in (tmp_path / "saves").iterdir()] == ["slot.json"]

        store.clear()
        assert not store.exists()
