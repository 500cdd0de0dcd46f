#!/usr/bin/env python3
"""
Sweep multiple seeds to compare population outcomes
"""

import sys
import pathlib
import subprocess
import json

# Seeds to test
seeds = [2024, 123, 456, 789, 913]

results = []
for seed in seeds:
    outdir = f"out_sweep/seed_{seed}"
    pathlib.Path(outdir).mkdir(exist_ok=True, parents=True)

    # Run experiment
    ret = subprocess.call([
        sys.executable, "-m", "genomata.run_experiment",
        "--preset", "default",
        "--outdir", outdir,
        "--steps", "1000",
        "--record-every", "10",
        "--seed", str(seed)
    ])
    if ret != 0:
        print(f"Seed {seed}: run failed (exit {ret})")
        continue

    # Read results
    metadata_path = pathlib.Path(outdir) / "metadata.json"
    if metadata_path.exists():
        with open(metadata_path) as f:
            meta = json.load(f)
            results.append({
                "seed": seed,
                "final_alive": meta["results"]["final_alive"],
                "peak_alive": meta["results"]["peak_alive"],
                "diversity": meta["results"]["final_diversity"],
            })
            print(f"Seed {seed}: alive={meta['results']['final_alive']}, "
                  f"diversity={meta['results']['final_diversity']:.3f}")

# Summary
with open("out_sweep/summary.json", "w") as f:
    json.dump(results, f, indent=2)

if results:
    print("\nSummary:")
    alive = [r["final_alive"] for r in results]
    div = [r["diversity"] for r in results]
    print(f"  Final alive range: {min(alive)} to {max(alive)}")
    print(f"  Diversity range: {min(div):.3f} to {max(div):.3f}")
    print(f"  Extinct runs: {sum(a == 0 for a in alive)}/{len(alive)}")
