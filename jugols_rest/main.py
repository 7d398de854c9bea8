"""Entry point: one autopilot playthrough of Jugol's Rest."""

from __future__ import annotations

import argparse
import os
import time


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Jugol's Rest Survival Simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--days", type=int, default=60, help="Maximum number of day/night turns")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for flavour and autopilot choices")
    parser.add_argument("--verbosity", type=int, default=0, choices=[0, 1, 2, 3], help="Log verbosity level")
    parser.add_argument("--output-dir", type=str, default="results", help="Output directory for results")
    parser.add_argument("--save-file", type=str, default=None, help="Resume from and autosave to this JSON file")
    parser.add_argument("--dashboard", action="store_true", help="Render the four-panel dashboard at each dawn")
    parser.add_argument("--log-file", type=str, default=None, help="Path to log file")

    args = parser.parse_args()

    # Import here to allow --help without loading everything
    import numpy as np

    from jugols_rest.simulation.autopilot import Autopilot
    from jugols_rest.simulation.engine import GameSession
    from jugols_rest.state.persistence import FileSaveStore, MemorySaveStore
    from jugols_rest.viz.logger import SimLogger

    print("=== Jugol's Rest Survival Simulation ===")
    print(f"Days: {args.days} | Seed: {args.seed}")
    print(f"Output: {args.output_dir}")
    print()

    store = FileSaveStore(args.save_file) if args.save_file else MemorySaveStore()
    logger = SimLogger(
        verbosity=args.verbosity,
        log_file=args.log_file or os.path.join(args.output_dir, "simulation.log"),
        stdout=(args.verbosity > 0),
    )
    session = GameSession(store=store, logger=logger, seed=args.seed)
    state = session.load_or_new()
    print(f"Starting on day {state.day_number}: {state.housed_pop} housed, "
          f"{state.camp_pop} in camp, pack of {len(state.active_pack_ids)}")
    print()

    dashboard = None
    if args.dashboard:
        try:
            from jugols_rest.viz.dashboard import Dashboard
            dashboard = Dashboard()
            dashboard.initialize()
            session.set_dashboard_callback(lambda day, metrics: dashboard.update(day, metrics))
            print("Dashboard enabled")
        except Exception as e:
            print(f"Dashboard unavailable ({e}), continuing without visualization")
            dashboard = None

    autopilot = Autopilot(np.random.default_rng(args.seed))

    print(f"Playing up to {args.days} days...")
    t0 = time.time()
    played = 0
    try:
        played = autopilot.play(session, args.days)
    except KeyboardInterrupt:
        print("\nSimulation interrupted by user")

    elapsed = time.time() - t0
    print(f"\nPlaythrough complete: {played} days in {elapsed:.2f}s")
    if session.state.victory:
        print(f"Victory on day {session.state.day_number}.")
    elif session.state.game_over:
        print(f"Collapse on day {session.state.day_number}.")

    os.makedirs(args.output_dir, exist_ok=True)

    csv_path = os.path.join(args.output_dir, "metrics.csv")
    session.metrics.export_csv(csv_path)
    print(f"Metrics exported to {csv_path}")

    try:
        from jugols_rest.viz.dashboard import Dashboard as DashClass
        DashClass.comprehensive_report(session.metrics, args.output_dir)
    except Exception as e:
        print(f"Could not generate plots: {e}")

    print()
    print(session.metrics.summary_report())

    if dashboard:
        dashboard.save(os.path.join(args.output_dir, "dashboard_final.png"))
        dashboard.close()

    session.logger.export_json(os.path.join(args.output_dir, "events.json"))
    session.logger.close()

    print(f"\nAll results saved to {args.output_dir}/")


if __name__ == "__main__":
    main()
