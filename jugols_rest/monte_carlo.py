"""Monte Carlo analysis: play N seeded autopilot games, aggregate outcomes."""

from __future__ import annotations

import csv
import os
import statistics
import time
from dataclasses import dataclass

import numpy as np


@dataclass
class RunResult:
    """Summary of a single playthrough."""
    seed: int
    days_played: int
    outcome: str  # "victory", "collapse" or "ongoing"
    final_day: int
    final_population: int
    peak_population: int
    peak_camp: int
    final_tension: int
    final_overgrowth: int
    final_camp_pressure: int
    max_collapse_days: int
    threat_days: int
    pois_resolved: int
    prayers: int
    active_factions: int
    final_roster: int
    elapsed_seconds: float


def run_single(seed: int, days: int) -> RunResult:
    """Play one game and return its summary."""
    from jugols_rest.simulation.autopilot import Autopilot
    from jugols_rest.simulation.engine import GameSession

    session = GameSession(seed=seed, autosave=False)
    session.new_game()
    autopilot = Autopilot(np.random.default_rng(seed + 1))

    t0 = time.time()
    played = autopilot.play(session, days)
    elapsed = time.time() - t0

    state = session.state
    snaps = session.metrics.snapshots

    if state.victory:
        outcome = "victory"
    elif state.game_over:
        outcome = "collapse"
    else:
        outcome = "ongoing"

    return RunResult(
        seed=seed,
        days_played=played,
        outcome=outcome,
        final_day=state.day_number,
        final_population=state.total_population,
        peak_population=max((s.total_population for s in snaps), default=state.total_population),
        peak_camp=max((s.camp_pop for s in snaps), default=state.camp_pop),
        final_tension=state.tension,
        final_overgrowth=state.overgrowth,
        final_camp_pressure=state.camp_pressure,
        max_collapse_days=state.collapse_days,
        threat_days=sum(1 for s in snaps if s.threat_active),
        pois_resolved=sum(sum(s.pois_resolved.values()) for s in snaps),
        prayers=sum(s.prayers for s in snaps),
        active_factions=len(snaps[-1].active_factions) if snaps else 0,
        final_roster=len(state.hyena_roster),
        elapsed_seconds=elapsed,
    )


def stat_line(label: str, values: list[float], fmt: str = ".1f") -> str:
    if not values:
        return f"  {label}: no data"
    mn = min(values)
    mx = max(values)
    avg = statistics.mean(values)
    med = statistics.median(values)
    std = statistics.stdev(values) if len(values) > 1 else 0
    return f"  {label:<30s}  mean={avg:{fmt}}  median={med:{fmt}}  std={std:{fmt}}  min={mn:{fmt}}  max={mx:{fmt}}"


def monte_carlo(
    n_runs: int = 20,
    days: int = 60,
    output_dir: str = "results/monte_carlo",
    base_seed: int = 0,
) -> list[RunResult]:
    """Play N games with generated seeds and report aggregate stats."""

    os.makedirs(output_dir, exist_ok=True)
    results: list[RunResult] = []
    rng = np.random.default_rng(base_seed)
    seeds = [int(s) for s in rng.integers(0, 100_000, size=n_runs)]

    print("=== Monte Carlo: Jugol's Rest ===")
    print(f"Runs: {n_runs} | Days/run: {days}")
    print(f"Seeds: {seeds[:5]}{'...' if n_runs > 5 else ''}")
    print()

    total_t0 = time.time()

    for i, seed in enumerate(seeds):
        result = run_single(seed, days)
        results.append(result)
        print(
            f"  Run {i+1:>3}/{n_runs} | seed={seed:>5} | "
            f"day {result.final_day:>3} | "
            f"pop={result.final_population:>3} (peak {result.peak_population:>3}) | "
            f"camp peak={result.peak_camp:>3} | "
            f"pois={result.pois_resolved:>4} | "
            f"{result.outcome.upper()} | {result.elapsed_seconds:.1f}s"
        )

    total_elapsed = time.time() - total_t0
    print(f"\nAll {n_runs} runs completed in {total_elapsed:.1f}s "
          f"({total_elapsed/max(1, n_runs):.1f}s avg)")

    print("\n" + "=" * 70)
    print("AGGREGATE RESULTS")
    print("=" * 70)

    print("\nOUTCOMES")
    for outcome in ("victory", "collapse", "ongoing"):
        count = sum(1 for r in results if r.outcome == outcome)
        print(f"  {outcome.capitalize():<10} {count}/{n_runs} ({count/max(1, n_runs)*100:.0f}%)")
    decided = [r.final_day for r in results if r.outcome != "ongoing"]
    if decided:
        print(stat_line("Day decided", decided))

    print("\nPOPULATION")
    print(stat_line("Final population", [r.final_population for r in results]))
    print(stat_line("Peak population", [r.peak_population for r in results]))
    print(stat_line("Peak camp", [r.peak_camp for r in results]))

    print("\nMETERS")
    print(stat_line("Final tension", [r.final_tension for r in results]))
    print(stat_line("Final overgrowth", [r.final_overgrowth for r in results]))
    print(stat_line("Final camp pressure", [r.final_camp_pressure for r in results]))
    print(stat_line("Days with threat", [r.threat_days for r in results]))
    print(stat_line("Collapse days", [r.max_collapse_days for r in results]))

    print("\nPACK & FACTIONS")
    print(stat_line("POIs resolved", [r.pois_resolved for r in results]))
    print(stat_line("Prayers", [r.prayers for r in results]))
    print(stat_line("Final roster", [r.final_roster for r in results]))
    print(stat_line("Active factions", [r.active_factions for r in results]))

    csv_path = os.path.join(output_dir, "monte_carlo_results.csv")
    with open(csv_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "seed", "days_played", "outcome", "final_day", "final_pop", "peak_pop",
            "peak_camp", "tension", "overgrowth", "camp_pressure", "collapse_days",
            "threat_days", "pois_resolved", "prayers", "active_factions",
            "final_roster", "elapsed_s",
        ])
        for r in results:
            writer.writerow([
                r.seed, r.days_played, r.outcome, r.final_day, r.final_population,
                r.peak_population, r.peak_camp, r.final_tension, r.final_overgrowth,
                r.final_camp_pressure, r.max_collapse_days, r.threat_days,
                r.pois_resolved, r.prayers, r.active_factions, r.final_roster,
                f"{r.elapsed_seconds:.2f}",
            ])
    print(f"\nResults exported to {csv_path}")

    return results


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Monte Carlo runs of Jugol's Rest")
    parser.add_argument("--runs", type=int, default=20, help="Number of runs")
    parser.add_argument("--days", type=int, default=60, help="Maximum days per run")
    parser.add_argument("--seed", type=int, default=0, help="Seed for generating run seeds")
    parser.add_argument("--output-dir", type=str, default="results/monte_carlo")
    args = parser.parse_args()

    monte_carlo(
        n_runs=args.runs,
        days=args.days,
        output_dir=args.output_dir,
        base_seed=args.seed,
    )
