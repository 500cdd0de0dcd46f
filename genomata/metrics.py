"""
Population Metrics
==================

Per-tick statistics over a grid of bots, used by the experiment runner
to build a time series (one row per recorded tick).

Functions:
- population_stats: Counts of alive/dead/empty cells, energy & age summary,
  genome diversity and next-instruction usage
- instruction_histogram: How many live bots sit on each opcode
- genome_diversity: Distinct programs per live bot
- energy_field: WIDTH x HEIGHT array of energies (NaN where empty)

Interpretation:
- genome_diversity near 1: every bot runs its own program (fresh soup)
- genome_diversity near 0: a few lineages dominate the grid
- op_* columns show which behaviors the population is currently executing
"""

from collections import Counter
from typing import Dict

import numpy as np

from .gene import ALL_INSTRUCTIONS
from .grid import Grid


def instruction_histogram(grid: Grid) -> Dict[str, int]:
    """Count live bots by the opcode under their instruction pointer"""
    counts = Counter()
    for bot in grid:
        if bot.alive:
            counts[bot.current_gene().instruction] += 1
    return {op.value: int(counts.get(op, 0)) for op in ALL_INSTRUCTIONS}


def genome_diversity(grid: Grid) -> float:
    """
    Number of distinct opcode sequences among live bots, divided by the
    number of live bots. 0.0 for an extinct grid.
    """
    programs = set()
    n_alive = 0
    for bot in grid:
        if bot.alive:
            n_alive += 1
            programs.add(tuple(g.instruction.value for g in bot.genome))
    if n_alive == 0:
        return 0.0
    return len(programs) / n_alive


def energy_field(grid: Grid) -> np.ndarray:
    """Energies as an (HEIGHT, WIDTH) array, NaN on empty cells"""
    E = np.full((grid.height, grid.width), np.nan, dtype=float)
    for bot in grid:
        if not bot.empty:
            E[bot.y, bot.x] = bot.energy
    return E


def population_stats(grid: Grid) -> Dict[str, float]:
    alive = dead = empty = 0
    energies = []
    ages = []
    for bot in grid:
        if bot.alive:
            alive += 1
            energies.append(bot.energy)
            ages.append(bot.age)
        elif bot.empty:
            empty += 1
        else:
            dead += 1

    energies = np.asarray(energies, dtype=float)
    ages = np.asarray(ages, dtype=float)

    row = dict(
        alive=alive,
        dead=dead,
        empty=empty,
        energy_mean=float(energies.mean()) if alive else np.nan,
        energy_total=float(energies.sum()),
        age_mean=float(ages.mean()) if alive else np.nan,
        age_max=int(ages.max()) if alive else 0,
        genome_diversity=genome_diversity(grid),
    )
    for name, count in instruction_histogram(grid).items():
        row[f"op_{name}"] = count
    return row
