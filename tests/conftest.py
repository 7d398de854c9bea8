"""
Pytest fixtures for the Jugol's Rest test suite.

Provides fresh world states, night-ready states with hand-placed POIs,
and sessions backed by in-memory save stores.
"""

import pytest

from jugols_rest.core.clock import Phase
from jugols_rest.core.config import POI_RADIUS
from jugols_rest.simulation.engine import GameSession
from jugols_rest.state.persistence import MemorySaveStore
from jugols_rest.state.world_state import create_initial_state
from jugols_rest.viz.logger import SimLogger
from jugols_rest.world.pois import Poi, PoiId, PoiType


# =============================================================================
# STATE FIXTURES
# =============================================================================


@pytest.fixture
def state():
    """A fresh day-one state."""
    return create_initial_state()


@pytest.fixture
def night_state(state):
    """A day-one state flipped to NIGHT in the Heart District with no POIs yet."""
    state.phase = Phase.NIGHT
    state.current_district_id = "heart"
    state.pack_stamina = 5
    state.pack_power = 2
    return state


@pytest.fixture
def place_poi():
    """Factory that drops a POI straight into a state's district arena."""

    def _place(state, poi_type, severity=1, district_id="heart", index=0, phase=None):
        poi_id = PoiId(state.day_number, district_id, phase or state.phase, poi_type, index)
        poi = Poi(
            id=poi_id,
            type=poi_type,
            x=100 + index,
            y=200,
            radius=POI_RADIUS[poi_type.value],
            severity=None if poi_type is PoiType.SHRINE else severity,
        )
        state.pois_by_district.setdefault(district_id, {})[poi_id] = poi
        return poi

    return _place


# =============================================================================
# SESSION FIXTURES
# =============================================================================


@pytest.fixture
def store():
    return MemorySaveStore()


@pytest.fixture
def quiet_logger():
    logger = SimLogger(verbosity=3, stdout=False)
    yield logger
    logger.close()


@pytest.fixture
def session(store, quiet_logger):
    """A started session with a deterministic flavour generator."""
    game = GameSession(store=store, logger=quiet_logger, seed=7)
    game.new_game()
    return game
