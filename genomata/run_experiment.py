"""
genomata/run_experiment.py - Headless runner with metrics and figures
"""

import argparse
import os
import json
import time
import pandas as pd
from dataclasses import asdict, replace

from .config import PRESETS, SimulationConfig, validate_config
from .metrics import population_stats
from .plotters import plot_energy, plot_grid, plot_instruction_usage, plot_population
from .simulation import Simulation


def build_config(args) -> SimulationConfig:
    """Preset values, overridden by any explicitly given CLI option"""
    if args.preset == "custom":
        cfg = SimulationConfig()
    else:
        cfg = PRESETS[args.preset]()

    overrides = {}
    if args.width is not None:
        overrides["WIDTH"] = args.width
    if args.height is not None:
        overrides["HEIGHT"] = args.height
    if args.mutation is not None:
        overrides["MUTATION_PERCENT"] = args.mutation
    if args.start_energy is not None:
        overrides["START_ENERGY"] = args.start_energy
    if args.max_age is not None:
        overrides["CELL_MAX_AGE"] = args.max_age
    if args.light_gradient:
        overrides["LIGHT_GRADIENT"] = True
    overrides["SEED"] = args.seed
    return replace(cfg, **overrides)


def run_experiment(args):
    """Run the engine headless and write metrics, figures and metadata"""
    os.makedirs(args.outdir, exist_ok=True)

    cfg = build_config(args)
    ok, msg = validate_config(cfg)
    if not ok:
        raise SystemExit(f"[CONFIG] invalid configuration: {msg}")

    sim = Simulation(cfg)
    print(f"[INFO] Running {args.preset}: {cfg.WIDTH}x{cfg.HEIGHT}, steps={args.steps}, seed={cfg.SEED}")

    rows = []
    rec = population_stats(sim.grid)
    rec["t"] = 0
    rows.append(rec)

    started = time.perf_counter()
    for t in range(1, args.steps + 1):
        sim.update()

        record = t % args.record_every == 0 or t == args.steps
        report = t % 100 == 0
        if record or report or args.stop_on_extinction:
            rec = population_stats(sim.grid)
            rec["t"] = t
        if record:
            rows.append(rec)

        if args.snapshot_every and t % args.snapshot_every == 0:
            plot_grid(sim.grid, os.path.join(args.outdir, f"grid_{t:06d}.png"), title=f"t={t}")

        if report:
            print(f"[t={t:06d}] alive={rec['alive']}  dead={rec['dead']}  "
                  f"E_mean={rec['energy_mean']:.2f}  diversity={rec['genome_diversity']:.3f}")

        if args.stop_on_extinction and rec["alive"] == 0:
            if not record:
                rows.append(rec)
            print(f"[INFO] Extinction at t={t}")
            break
    elapsed = time.perf_counter() - started
    tps = sim.iterations / elapsed if elapsed > 0 else float("nan")

    # Save to DataFrame
    df = pd.DataFrame(rows)
    cols = ["t"] + [c for c in df.columns if c != "t"]
    df = df[cols]
    csv_path = os.path.join(args.outdir, "metrics.csv")
    df.to_csv(csv_path, index=False)

    # Generate plots
    plot_population(df, os.path.join(args.outdir, "fig_population.png"))
    plot_energy(df, os.path.join(args.outdir, "fig_energy.png"))
    plot_instruction_usage(df, os.path.join(args.outdir, "fig_instructions.png"))
    plot_grid(sim.grid, os.path.join(args.outdir, "fig_grid_final.png"),
              title=f"t={sim.iterations}")

    final = df.iloc[-1]
    peak_idx = int(df["alive"].idxmax())

    # Write summary
    summary_path = os.path.join(args.outdir, "summary.txt")
    with open(summary_path, "w") as f:
        f.write(f"=== Genomata run ({args.preset}) ===\n")
        f.write(f"Configuration:\n")
        f.write(f"  Seed: {cfg.SEED}\n")
        f.write(f"  Grid: {cfg.WIDTH}x{cfg.HEIGHT}\n")
        f.write(f"  Mutation: {cfg.MUTATION_PERCENT}%\n")
        f.write(f"  Light gradient: {cfg.LIGHT_GRADIENT}\n")
        f.write(f"  Ticks: {sim.iterations}\n")
        f.write(f"\nResults:\n")
        f.write(f"  Final alive: {int(final['alive'])}\n")
        f.write(f"  Peak alive: {int(df['alive'].max())} at t={int(df['t'].iloc[peak_idx])}\n")
        f.write(f"  Final genome diversity: {final['genome_diversity']:.3f}\n")
        f.write(f"  Throughput: {tps:.1f} ticks/s\n")

    # Save metadata as JSON for easy parsing
    metadata = {
        "preset": args.preset,
        "seed": cfg.SEED,
        "steps": args.steps,
        "iterations": sim.iterations,
        "config": asdict(cfg),
        "results": {
            "final_alive": int(final["alive"]),
            "final_dead": int(final["dead"]),
            "peak_alive": int(df["alive"].max()),
            "final_diversity": float(final["genome_diversity"]),
            "extinct": bool(final["alive"] == 0),
            "ticks_per_second": float(tps),
        }
    }

    json_path = os.path.join(args.outdir, "metadata.json")
    with open(json_path, "w") as f:
        json.dump(metadata, f, indent=2)

    # Print results
    print(f"[DONE] {args.preset} - outdir={args.outdir}")
    print(f"  Final alive={int(final['alive'])}  peak={int(df['alive'].max())}")
    print(f"  Diversity={final['genome_diversity']:.3f}  throughput={tps:.1f} ticks/s")

    return metadata


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Genomata: headless artificial-life run with metrics"
    )

    # Preset configurations
    p.add_argument("--preset", type=str, default="default",
                   choices=["default", "classic", "custom"],
                   help="Preset: default (25%% mutation), classic (5%% mutation), custom")

    # Output
    p.add_argument("--outdir", type=str, default="out",
                   help="Output directory for results")

    # Run length
    p.add_argument("--steps", type=int, default=1000,
                   help="Number of ticks to run")
    p.add_argument("--record-every", type=int, default=1,
                   help="Record population stats every N ticks")
    p.add_argument("--snapshot-every", type=int, default=0,
                   help="Save a grid image every N ticks (0 = only final)")
    p.add_argument("--stop-on-extinction", action="store_true",
                   help="Stop early when no bot is alive")

    # Overrides
    p.add_argument("--width", type=int, default=None, help="Grid width")
    p.add_argument("--height", type=int, default=None, help="Grid height")
    p.add_argument("--mutation", type=float, default=None,
                   help="Mutation chance in percent")
    p.add_argument("--start-energy", type=float, default=None,
                   help="Energy of spawned bots and offspring")
    p.add_argument("--max-age", type=int, default=None,
                   help="Maximum bot age")
    p.add_argument("--light-gradient", action="store_true",
                   help="Scale photosynthesis by depth (row / height)")

    # Random seed
    p.add_argument("--seed", type=int, default=2024,
                   help="Random seed for reproducibility")
    return p


def parse_args(argv=None):
    args = build_parser().parse_args(argv)
    if args.record_every < 1:
        args.record_every = 1
    return args


def main(argv=None):
    """Main entry point"""
    args = parse_args(argv)
    run_experiment(args)


if __name__ == "__main__":
    main()
