"""Matplotlib dashboard and post-run plots for a playthrough."""

from __future__ import annotations

import os

import matplotlib
matplotlib.use("Agg")  # Headless: figures are written to disk
import matplotlib.pyplot as plt
import numpy as np

from jugols_rest.core.config import DASHBOARD_UPDATE_INTERVAL, MAX_METER, VICTORY_POPULATION


METER_STYLES: list[tuple[str, str, str]] = [
    ("tension", "Tension", "r-"),
    ("overgrowth", "Overgrowth", "g-"),
    ("camp_pressure", "Camp pressure", "orange"),
]


def _plot_population(ax, snapshots) -> None:
    days = [s.day for s in snapshots]
    ax.stackplot(
        days,
        [s.housed_pop for s in snapshots],
        [s.camp_pop for s in snapshots],
        labels=["Housed", "Camp"],
        colors=["#3b82f6", "#f59e0b"],
        alpha=0.8,
    )
    ax.plot(days, [s.housing_capacity for s in snapshots], "k--", linewidth=1, label="Housing")
    ax.axhline(y=VICTORY_POPULATION, color="g", linestyle=":", alpha=0.6, label="Victory")
    ax.legend(fontsize=8, loc="upper left")


def _plot_meters(ax, snapshots) -> None:
    days = [s.day for s in snapshots]
    for attr, label, style in METER_STYLES:
        ax.plot(days, [getattr(s, attr) for s in snapshots], style, label=label, linewidth=1.5)
    threat_days = [s.day for s in snapshots if s.threat_active]
    if threat_days:
        ax.scatter(threat_days, [MAX_METER] * len(threat_days), marker="v", color="purple", s=12, label="Threat")
    ax.set_ylim(0, MAX_METER + 5)
    ax.legend(fontsize=8, loc="upper left")


def _plot_factions(ax, snapshots) -> None:
    days = [s.day for s in snapshots]
    faction_ids = sorted({fid for s in snapshots for fid in s.faction_visibility})
    for faction_id in faction_ids:
        ax.plot(days, [s.faction_visibility.get(faction_id, 0) for s in snapshots], linewidth=1, label=faction_id)
    ax.set_ylim(0, MAX_METER + 5)
    if faction_ids:
        ax.legend(fontsize=7, loc="upper left")


class Dashboard:
    """Four-panel dashboard redrawn at each dawn."""

    def __init__(self) -> None:
        self._initialized = False
        self._fig = None
        self._axes = None
        self._update_counter = 0

    def initialize(self) -> None:
        self._fig, axes = plt.subplots(2, 2, figsize=(14, 9))
        self._fig.suptitle("Jugol's Rest Dashboard", fontsize=14)
        self._axes = {
            "population": axes[0, 0],
            "meters": axes[0, 1],
            "pack": axes[1, 0],
            "factions": axes[1, 1],
        }
        self._initialized = True

    def update(self, day: int, metrics: "MetricsCollector") -> None:  # noqa: F821
        """Redraw every panel from the collected snapshots."""
        self._update_counter += 1
        if self._update_counter % DASHBOARD_UPDATE_INTERVAL != 0:
            return

        if not self._initialized:
            self.initialize()

        snapshots = metrics.snapshots
        if not snapshots:
            return

        days = [s.day for s in snapshots]

        ax = self._axes["population"]
        ax.clear()
        ax.set_title("Population")
        _plot_population(ax, snapshots)
        ax.grid(True, alpha=0.3)

        ax = self._axes["meters"]
        ax.clear()
        ax.set_title("City Meters")
        _plot_meters(ax, snapshots)
        ax.grid(True, alpha=0.3)

        ax = self._axes["pack"]
        ax.clear()
        ax.set_title("Pack Budget")
        ax.plot(days, [s.night_stamina for s in snapshots], "b-", label="Stamina", linewidth=1.5)
        ax.plot(days, [s.night_power for s in snapshots], "m-", label="Power", linewidth=1.5)
        ax.plot(days, [s.pack_size for s in snapshots], "k:", label="Pack size", linewidth=1)
        ax.legend(fontsize=8)
        ax.grid(True, alpha=0.3)

        ax = self._axes["factions"]
        ax.clear()
        ax.set_title("Faction Visibility")
        _plot_factions(ax, snapshots)
        ax.grid(True, alpha=0.3)

        self._fig.suptitle(f"Jugol's Rest: Day {day}", fontsize=14)
        self._fig.tight_layout()

    def save(self, filepath: str) -> None:
        if self._fig:
            self._fig.savefig(filepath, dpi=150, bbox_inches="tight")

    def close(self) -> None:
        if self._fig:
            plt.close(self._fig)

    # ------------------------------------------------------------------
    # Post-hoc static plots
    # ------------------------------------------------------------------

    @staticmethod
    def comprehensive_report(metrics: "MetricsCollector", output_dir: str) -> list[str]:  # noqa: F821
        """Write one PNG per concern to output_dir. Returns the paths written."""
        os.makedirs(output_dir, exist_ok=True)

        snapshots = metrics.snapshots
        if not snapshots:
            return []

        days = [s.day for s in snapshots]
        written = []

        def _save(fig, name: str) -> None:
            path = os.path.join(output_dir, name)
            fig.savefig(path, dpi=150)
            plt.close(fig)
            written.append(path)

        fig, ax = plt.subplots(figsize=(10, 5))
        _plot_population(ax, snapshots)
        ax.set_title("Population Over Time")
        ax.set_xlabel("Day")
        ax.set_ylabel("Residents")
        ax.grid(True, alpha=0.3)
        _save(fig, "population.png")

        fig, ax = plt.subplots(figsize=(10, 5))
        _plot_meters(ax, snapshots)
        ax.set_title("City Meters Over Time")
        ax.set_xlabel("Day")
        ax.set_ylabel("Meter (0-100)")
        ax.grid(True, alpha=0.3)
        _save(fig, "meters.png")

        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(days, [s.food_scraps for s in snapshots], "y-", label="Scraps")
        ax.plot(days, [s.food_fatty for s in snapshots], "r-", label="Fatty")
        ax.bar(days, [s.collections for s in snapshots], alpha=0.3, label="Collections")
        ax.set_title("Food Stock at Dawn")
        ax.set_xlabel("Day")
        ax.set_ylabel("Units")
        ax.legend(fontsize=8)
        ax.grid(True, alpha=0.3)
        _save(fig, "food.png")

        fig, ax = plt.subplots(figsize=(10, 5))
        poi_types = sorted({t for s in snapshots for t in s.pois_resolved})
        bottom = np.zeros(len(snapshots))
        for poi_type in poi_types:
            counts = np.array([s.pois_resolved.get(poi_type, 0) for s in snapshots])
            ax.bar(days, counts, bottom=bottom, label=poi_type)
            bottom += counts
        ax.set_title("POIs Resolved per Night")
        ax.set_xlabel("Day")
        ax.set_ylabel("POIs")
        if poi_types:
            ax.legend(fontsize=8)
        ax.grid(True, alpha=0.3)
        _save(fig, "pois.png")

        fig, ax = plt.subplots(figsize=(10, 5))
        _plot_factions(ax, snapshots)
        ax.set_title("Faction Visibility Over Time")
        ax.set_xlabel("Day")
        ax.set_ylabel("Visibility")
        ax.grid(True, alpha=0.3)
        _save(fig, "factions.png")

        print(f"Reports saved to {output_dir}/")
        return written
