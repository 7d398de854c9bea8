"""Session facade: sequences player actions, flavour, faction influence and saves."""

from __future__ import annotations

import functools
import threading
from typing import Optional

import numpy as np
from numpy.random import Generator

from jugols_rest.core.clock import Phase
from jugols_rest.factions.influence import apply_faction_influence
from jugols_rest.pack.hyenas import Hyena
from jugols_rest.pack.roster import FeedEntry, assign_to_slot, feed_hyenas, recruit_draft, remove_from_pack
from jugols_rest.simulation.actions import (
    NIGHT_ACTIONS,
    StabilizeResult,
    collect_location,
    pray_at_shrine,
    stabilize_camp,
    travel,
)
from jugols_rest.simulation.metrics import MetricsCollector
from jugols_rest.simulation.phases import end_night, regenerate_forecast, start_night
from jugols_rest.state.persistence import MemorySaveStore, SaveStore
from jugols_rest.state.world_state import WorldState, add_event, add_narrative_event, create_initial_state
from jugols_rest.viz.logger import SimLogger
from jugols_rest.world.ambient import AmbientVoice
from jugols_rest.world.blessings import Blessing, format_blessing_duration
from jugols_rest.world.contacts import get_contact, get_contact_voice_line
from jugols_rest.world.districts import DEFAULT_DISTRICT_ID, get_district
from jugols_rest.world.events import NarrativeEventSystem
from jugols_rest.world.pois import (
    Poi,
    PoiId,
    PoiType,
    find_poi,
    get_active_pois,
    has_night_pois,
    spawn_pois_for_day,
    spawn_pois_for_night,
)


# Influence tag raised after each kind of night action
POI_INFLUENCE_ACTIONS: dict[PoiType, str] = {
    PoiType.OVERGROWTH: "clear_overgrowth",
    PoiType.ROUTE: "guard_route",
    PoiType.RUCKUS: "suppress_threat",
    PoiType.LOT: "secure_lot",
}


def _serialized(method):
    """Run a session method under the session lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class GameSession:
    """Owns one save slot's state and applies every player action to it."""

    def __init__(
        self,
        store: Optional[SaveStore] = None,
        logger: Optional[SimLogger] = None,
        seed: int = 42,
        autosave: bool = True,
    ) -> None:
        self.rng: Generator = np.random.default_rng(seed)
        self.store = store if store is not None else MemorySaveStore()
        self.logger = logger if logger is not None else SimLogger(verbosity=0, stdout=False)
        self.autosave = autosave

        self.narrative_events = NarrativeEventSystem(self.rng)
        self.ambient = AmbientVoice(self.rng)
        self.metrics = MetricsCollector()

        # Dashboard callback (set externally)
        self._dashboard_callback = None

        self.state: WorldState = create_initial_state()
        self._seen_serial = self.state.event_serial
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @_serialized
    def new_game(self) -> WorldState:
        self.state = create_initial_state()
        self._seen_serial = 0
        self.metrics = MetricsCollector()
        regenerate_forecast(self.state)
        spawn_pois_for_day(self.state)
        add_event(self.state, "A new watch begins at Jugol's Rest.")
        self._mirror(SimLogger.PHASE)
        self._narrative_hooks()
        self.metrics.collect_daily(self.state)
        self._save()
        self.logger.flush()
        return self.state

    def set_dashboard_callback(self, callback) -> None:
        """Set a callback function for dashboard updates at each dawn."""
        self._dashboard_callback = callback

    def load_or_new(self) -> WorldState:
        """Resume the stored game, or start fresh when there is none."""
        with self._lock:
            loaded = self.store.load()
            if loaded is not None:
                self.state = loaded
                self._seen_serial = loaded.event_serial
                if loaded.phase is Phase.NIGHT and not has_night_pois(loaded, loaded.current_district_id):
                    spawn_pois_for_night(loaded, get_district(loaded.current_district_id))
                self._log(SimLogger.SAVE, "Loaded saved game.")
                self.logger.flush()
                return self.state
        return self.new_game()

    # ------------------------------------------------------------------
    # Day actions
    # ------------------------------------------------------------------

    @_serialized
    def collect(self, location_key: str) -> bool:
        if not collect_location(self.state, location_key):
            return False
        contact = get_contact(location_key)
        if contact is not None:
            voice = get_contact_voice_line(contact, self.state)
            if voice:
                add_event(self.state, f"{contact.name}: {voice}")
        self.metrics.record_collection()
        self._mirror(SimLogger.ACTION)
        self._influence("collect", {
            "location": contact.legacy_slot if contact is not None else location_key,
            "contact_id": location_key,
            "faction_id": contact.faction_id if contact is not None else None,
        })
        self._save()
        return True

    @_serialized
    def feed(self, plan: list[FeedEntry]) -> bool:
        if not feed_hyenas(self.state, plan):
            return False
        self._mirror(SimLogger.PACK)
        self._influence("feed")
        self._save()
        return True

    @_serialized
    def stabilize(self) -> Optional[StabilizeResult]:
        result = stabilize_camp(self.state)
        if result is None:
            return None
        self._mirror(SimLogger.POPULATION)
        self._influence("stabilize_camp")
        self._save()
        return result

    @_serialized
    def pray(self, poi_id: PoiId) -> Optional[Blessing]:
        return self._pray(poi_id)

    def _pray(self, poi_id: PoiId) -> Optional[Blessing]:
        blessing = pray_at_shrine(self.state, poi_id)
        if blessing is None:
            return None
        self.metrics.record_prayer()
        self._mirror(SimLogger.BLESSING)
        self._log(SimLogger.BLESSING, f"{format_blessing_duration(blessing)}.", god_id=blessing.god_id)
        self._save()
        return blessing

    @_serialized
    def assign_to_slot(self, hyena_id: str, slot: int) -> bool:
        return self._pack_change(assign_to_slot(self.state, hyena_id, slot))

    @_serialized
    def remove_from_pack(self, hyena_id: str) -> bool:
        return self._pack_change(remove_from_pack(self.state, hyena_id))

    @_serialized
    def recruit(self, candidate_id: str, add_to_pack: bool = True) -> Optional[Hyena]:
        hyena = recruit_draft(self.state, candidate_id, add_to_pack)
        self._pack_change(hyena is not None)
        return hyena

    def _pack_change(self, changed: bool) -> bool:
        if changed:
            self._mirror(SimLogger.PACK)
            self._save()
        return changed

    @_serialized
    def travel(self, district_id: str) -> bool:
        if not travel(self.state, district_id):
            return False
        self._mirror(SimLogger.ACTION)
        self._narrative_hooks()
        self._save()
        return True

    # ------------------------------------------------------------------
    # Night actions
    # ------------------------------------------------------------------

    @_serialized
    def poi_action(self, poi_id: PoiId) -> bool:
        """Resolve a POI with whatever action its type calls for."""
        poi = find_poi(self.state, poi_id)
        if poi is None:
            return False
        if poi.type is PoiType.SHRINE:
            return self._pray(poi_id) is not None

        handler = NIGHT_ACTIONS[poi.type]
        if not handler(self.state, poi_id):
            return False
        self.metrics.record_poi_resolved(poi.type.value)
        self._mirror(SimLogger.ACTION)
        self._influence(POI_INFLUENCE_ACTIONS[poi.type], {"poi_severity": poi.severity})
        self._save()
        return True

    # ------------------------------------------------------------------
    # Phase changes
    # ------------------------------------------------------------------

    @_serialized
    def start_night(self) -> bool:
        """Nightfall is called from the camp only."""
        if self.state.current_district_id != DEFAULT_DISTRICT_ID:
            return False
        if not start_night(self.state):
            return False
        spawn_pois_for_night(self.state, get_district(self.state.current_district_id))
        self.metrics.record_night_budget(self.state.pack_stamina, self.state.pack_power)
        add_event(self.state, "Night falls over Jugol's Rest.")
        self._mirror(SimLogger.PHASE)
        self._influence("start_night")
        self._narrative_hooks()
        self._save()
        self.logger.flush()
        return True

    @_serialized
    def end_night(self) -> bool:
        """Dawn is called from the camp only. Runs the whole morning pipeline."""
        if self.state.current_district_id != DEFAULT_DISTRICT_ID:
            return False
        if not end_night(self.state):
            return False
        add_event(self.state, "Dawn breaks, the watch rotates.")
        self._mirror(SimLogger.PHASE)
        self._influence("end_night")
        self._narrative_hooks()
        self.metrics.collect_daily(self.state)
        self._save()
        self.logger.flush()
        if self._dashboard_callback:
            self._dashboard_callback(self.state.day_number, self.metrics)
        return True

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def current_pois(self) -> list[Poi]:
        return get_active_pois(self.state)

    @property
    def is_finished(self) -> bool:
        return self.state.game_over or self.state.victory

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _log(self, category: str, message: str, **data) -> None:
        self.logger.log(category, message, day=self.state.day_number, phase=self.state.phase.value, **data)

    def _mirror(self, category: str) -> None:
        """Copy event-log lines appended since the last mirror into the logger."""
        fresh = self.state.event_serial - self._seen_serial
        if fresh > 0:
            for line in self.state.event_log[-fresh:]:
                self._log(category, line)
        self._seen_serial = self.state.event_serial

    def _influence(self, action: str, context: Optional[dict] = None) -> None:
        apply_faction_influence(self.state, action, context)
        self._mirror(SimLogger.FACTION)

    def _narrative_hooks(self) -> None:
        """One ambient line and at most one narrative event for this half-turn."""
        line = self.ambient.maybe_line(self.state)
        if line is not None:
            source, text = line
            add_narrative_event(self.state, source, text)
            self._log(SimLogger.NARRATIVE, f"{source}: {text}")

        event = self.narrative_events.pick(self.state)
        if event is not None:
            self.narrative_events.apply(self.state, event)
            add_narrative_event(self.state, event.source_label, event.text)
            self._log(SimLogger.NARRATIVE, f"{event.source_label}: {event.text}", event_id=event.id)

    def _save(self) -> None:
        if not self.autosave:
            return
        self.store.save(self.state)
        self._log(SimLogger.SAVE, "Game saved.")
