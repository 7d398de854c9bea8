"""Per-dawn data collection, summaries and export."""

from __future__ import annotations

import csv
import os
from dataclasses import dataclass, field
from typing import Optional

from jugols_rest.factions.influence import get_active_factions


@dataclass
class DailySnapshot:
    """The city as it stands at one dawn, plus what happened since the last."""

    day: int = 0
    housed_pop: int = 0
    camp_pop: int = 0
    total_population: int = 0
    housing_capacity: int = 0
    tension: int = 0
    overgrowth: int = 0
    camp_pressure: int = 0
    threat_active: bool = False
    food_scraps: int = 0
    food_fatty: int = 0
    pack_size: int = 0
    roster_size: int = 0
    night_stamina: int = 0
    night_power: int = 0
    collections: int = 0
    prayers: int = 0
    pois_resolved: dict[str, int] = field(default_factory=dict)
    active_factions: list[str] = field(default_factory=list)
    faction_visibility: dict[str, int] = field(default_factory=dict)
    active_blessings: int = 0
    collapse_days: int = 0
    victory: bool = False
    game_over: bool = False


class MetricsCollector:
    """Collects a time series, one snapshot per dawn."""

    def __init__(self) -> None:
        self.snapshots: list[DailySnapshot] = []
        self._collections: int = 0
        self._prayers: int = 0
        self._pois_resolved: dict[str, int] = {}
        self._night_stamina: int = 0
        self._night_power: int = 0

    def record_collection(self) -> None:
        self._collections += 1

    def record_prayer(self) -> None:
        self._prayers += 1

    def record_poi_resolved(self, poi_type: str) -> None:
        self._pois_resolved[poi_type] = self._pois_resolved.get(poi_type, 0) + 1

    def record_night_budget(self, stamina: int, power: int) -> None:
        self._night_stamina = stamina
        self._night_power = power

    def collect_daily(self, state: "WorldState") -> DailySnapshot:  # noqa: F821
        """Snapshot the state and reset the per-turn counters."""
        snapshot = DailySnapshot(
            day=state.day_number,
            housed_pop=state.housed_pop,
            camp_pop=state.camp_pop,
            total_population=state.total_population,
            housing_capacity=state.housing_capacity,
            tension=state.tension,
            overgrowth=state.overgrowth,
            camp_pressure=state.camp_pressure,
            threat_active=state.threat_active,
            food_scraps=state.food_scraps,
            food_fatty=state.food_fatty,
            pack_size=len(state.active_pack_ids),
            roster_size=len(state.hyena_roster),
            night_stamina=self._night_stamina,
            night_power=self._night_power,
            collections=self._collections,
            prayers=self._prayers,
            pois_resolved=dict(self._pois_resolved),
            active_factions=[f.id for f, _ in get_active_factions(state)],
            faction_visibility={fid: rt.visibility_level for fid, rt in state.factions.items()},
            active_blessings=len(state.active_blessings),
            collapse_days=state.collapse_days,
            victory=state.victory,
            game_over=state.game_over,
        )
        self.snapshots.append(snapshot)

        self._collections = 0
        self._prayers = 0
        self._pois_resolved = {}
        self._night_stamina = 0
        self._night_power = 0

        return snapshot

    def export_csv(self, filepath: str) -> None:
        """Export all snapshots to CSV."""
        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else ".", exist_ok=True)
        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow([
                "day", "housed_pop", "camp_pop", "total_population", "housing_capacity",
                "tension", "overgrowth", "camp_pressure", "threat_active",
                "food_scraps", "food_fatty", "pack_size", "roster_size",
                "night_stamina", "night_power", "collections", "prayers",
                "pois_resolved", "active_factions", "active_blessings",
                "collapse_days", "victory", "game_over",
            ])
            for s in self.snapshots:
                writer.writerow([
                    s.day, s.housed_pop, s.camp_pop, s.total_population, s.housing_capacity,
                    s.tension, s.overgrowth, s.camp_pressure, int(s.threat_active),
                    s.food_scraps, s.food_fatty, s.pack_size, s.roster_size,
                    s.night_stamina, s.night_power, s.collections, s.prayers,
                    sum(s.pois_resolved.values()), ";".join(s.active_factions), s.active_blessings,
                    s.collapse_days, int(s.victory), int(s.game_over),
                ])

    def summary_report(self, start_day: int = 0, end_day: Optional[int] = None) -> str:
        """Generate a human-readable summary of the period."""
        relevant = [
            s for s in self.snapshots
            if s.day >= start_day and (end_day is None or s.day <= end_day)
        ]
        if not relevant:
            return "No data available for the specified period."

        first = relevant[0]
        last = relevant[-1]
        total_collections = sum(s.collections for s in relevant)
        total_prayers = sum(s.prayers for s in relevant)
        resolved: dict[str, int] = {}
        for s in relevant:
            for poi_type, count in s.pois_resolved.items():
                resolved[poi_type] = resolved.get(poi_type, 0) + count

        if last.victory:
            outcome = "Victory"
        elif last.game_over:
            outcome = "Collapse"
        else:
            outcome = "Ongoing"

        lines = [
            f"=== Jugol's Rest Summary: Day {first.day} to Day {last.day} ===",
            f"Outcome: {outcome}",
            "",
            f"Population: {first.total_population} -> {last.total_population}",
            f"  Housed: {last.housed_pop} / {last.housing_capacity}",
            f"  Camp: {last.camp_pop}",
            f"  Peak camp: {max(s.camp_pop for s in relevant)}",
            "",
            "Meters (final):",
            f"  Tension: {last.tension}/100",
            f"  Overgrowth: {last.overgrowth}/100",
            f"  Camp pressure: {last.camp_pressure}/100",
            f"  Threat active: {'yes' if last.threat_active else 'no'}",
            f"  Collapse days: {last.collapse_days}",
            "",
            "Pack:",
            f"  Active: {last.pack_size} of {last.roster_size} on the roster",
            f"  Avg night stamina: {sum(s.night_stamina for s in relevant) / max(1, len(relevant)):.1f}",
            f"  Collections: {total_collections}, prayers: {total_prayers}",
        ]

        if resolved:
            lines.append("")
            lines.append("POIs resolved:")
            for poi_type, count in sorted(resolved.items(), key=lambda x: -x[1]):
                lines.append(f"  {poi_type}: {count}")

        if last.faction_visibility:
            lines.append("")
            lines.append("Factions (final visibility):")
            for faction_id, visibility in sorted(last.faction_visibility.items(), key=lambda x: -x[1]):
                marker = " (active)" if faction_id in last.active_factions else ""
                lines.append(f"  {faction_id}: {visibility}{marker}")

        return "\n".join(lines)
