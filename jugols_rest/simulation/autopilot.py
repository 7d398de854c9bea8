"""Heuristic policy that plays a session through whole day/night turns."""

from __future__ import annotations

from typing import Optional

from numpy.random import Generator

from jugols_rest.core.clock import Phase
from jugols_rest.core.config import STABILIZE_SCRAPS_COST
from jugols_rest.core.meters import available_housing
from jugols_rest.pack.hyenas import Hyena
from jugols_rest.pack.roster import FeedEntry, get_active_pack
from jugols_rest.world.contacts import get_contacts_by_district
from jugols_rest.world.districts import DEFAULT_DISTRICT_ID, DISTRICT_ORDER
from jugols_rest.world.pois import Poi, PoiType, get_active_pois, get_poi_action_cost


# Higher goes first. Ruckus and unguarded routes both feed tension.
POI_PRIORITY: dict[PoiType, float] = {
    PoiType.RUCKUS: 4.0,
    PoiType.ROUTE: 3.0,
    PoiType.OVERGROWTH: 2.0,
    PoiType.LOT: 1.0,
}

# Day actions held back for feeding the pack
FEED_RESERVE: int = 1


class Autopilot:
    """Plays greedily: shore up the camp, gather, feed, then work the night."""

    def __init__(self, rng: Generator) -> None:
        self._rng = rng

    def play(self, session: "GameSession", days: int) -> int:  # noqa: F821
        """Play up to `days` full turns, stopping early on victory or collapse."""
        played = 0
        for _ in range(days):
            if session.is_finished:
                break
            played += 1
            if not self.play_turn(session):
                break
        return played

    def play_turn(self, session: "GameSession") -> bool:  # noqa: F821
        """One full day and night. Returns False once the game is decided."""
        if session.is_finished:
            return False
        if session.state.phase is Phase.DAY:
            self.play_day(session)
            self._go_home(session)
            session.start_night()
        self.play_night(session)
        self._go_home(session)
        session.end_night()
        return not session.is_finished

    # ------------------------------------------------------------------
    # Day
    # ------------------------------------------------------------------

    def play_day(self, session: "GameSession") -> None:  # noqa: F821
        state = session.state
        if state.draft_pending and state.draft_choices:
            pick = self._best_candidate(state.draft_choices)
            session.recruit(pick.id, add_to_pack=True)
        self._fill_pack(session)

        if state.camp_active and state.food_scraps >= STABILIZE_SCRAPS_COST and available_housing(state) > 0:
            session.stabilize()

        self._pray_once(session)

        for district_id in self._shuffled(DISTRICT_ORDER):
            if state.day_actions_remaining <= FEED_RESERVE:
                break
            contacts = get_contacts_by_district(district_id)
            if not contacts:
                continue
            session.travel(district_id)
            for contact in contacts:
                if state.day_actions_remaining <= FEED_RESERVE:
                    break
                session.collect(contact.id)

        plan = self.feeding_plan(state)
        if plan:
            session.feed(plan)

    def feeding_plan(self, state: "WorldState") -> list[FeedEntry]:  # noqa: F821
        """Share food across the active pack, hungriest first."""
        pack = sorted(get_active_pack(state), key=lambda h: -h.hunger)
        if not pack:
            return []
        scraps, fatty = state.food_scraps, state.food_fatty
        plan = [FeedEntry(h.id) for h in pack]
        i = 0
        while scraps > 0 or fatty > 0:
            entry = plan[i % len(plan)]
            if fatty > 0:
                entry.fatty += 1
                fatty -= 1
            else:
                entry.scraps += 1
                scraps -= 1
            i += 1
        return [e for e in plan if e.scraps or e.fatty]

    def _best_candidate(self, candidates: list[Hyena]) -> Hyena:
        def score(h: Hyena) -> float:
            stats = h.base_stats
            base = (stats.stamina_bonus + stats.power_bonus) if stats is not None else 0
            return base + 0.01 * self._rng.random()

        return max(candidates, key=score)

    def _fill_pack(self, session: "GameSession") -> None:  # noqa: F821
        state = session.state
        benched = [h for h in state.hyena_roster if h.id not in state.active_pack_ids]
        benched.sort(key=lambda h: h.hunger)
        for hyena in benched:
            if len(state.active_pack_ids) >= state.pack_size_cap:
                break
            session.assign_to_slot(hyena.id, len(state.active_pack_ids))

    def _pray_once(self, session: "GameSession") -> None:  # noqa: F821
        state = session.state
        for district_id in self._shuffled(DISTRICT_ORDER):
            shrines = [p for p in get_active_pois(state, district_id)
                       if p.type is PoiType.SHRINE and not p.prayed_today]
            if not shrines:
                continue
            if district_id != state.current_district_id:
                session.travel(district_id)
            if session.pray(shrines[0].id) is not None:
                return

    # ------------------------------------------------------------------
    # Night
    # ------------------------------------------------------------------

    def play_night(self, session: "GameSession") -> None:  # noqa: F821
        state = session.state
        for district_id in DISTRICT_ORDER:
            if state.pack_stamina <= 0:
                break
            if district_id == DEFAULT_DISTRICT_ID:
                continue
            session.travel(district_id)
            skipped: set = set()
            while True:
                target = self._next_target(get_active_pois(state, district_id), session, skipped)
                if target is None:
                    break
                if not session.poi_action(target.id):
                    skipped.add(target.id)

    def _next_target(
        self,
        pois: list[Poi],
        session: "GameSession",  # noqa: F821
        skipped: set,
    ) -> Optional[Poi]:
        """Highest-priority POI the pack can still afford, ties broken at random."""
        candidates = []
        for poi in pois:
            if poi.type not in POI_PRIORITY or poi.id in skipped:
                continue
            score = POI_PRIORITY[poi.type] + 0.1 * (poi.severity or 0) + 0.01 * self._rng.random()
            candidates.append((score, poi))
        for _, poi in sorted(candidates, key=lambda c: c[0], reverse=True):
            if self._affordable(session, poi):
                return poi
        return None

    @staticmethod
    def _affordable(session: "GameSession", poi: Poi) -> bool:  # noqa: F821
        return session.state.pack_stamina >= get_poi_action_cost(session.state, poi)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _go_home(self, session: "GameSession") -> None:  # noqa: F821
        if session.state.current_district_id != DEFAULT_DISTRICT_ID:
            session.travel(DEFAULT_DISTRICT_ID)

    def _shuffled(self, items) -> list:
        order = list(items)
        self._rng.shuffle(order)
        return order
