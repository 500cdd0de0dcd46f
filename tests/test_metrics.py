import numpy as np

from genomata.gene import ALL_INSTRUCTIONS, Instruction
from genomata.metrics import energy_field, genome_diversity, instruction_histogram, population_stats

from conftest import alive_bot, dead_bot, empty_grid, place, small_config


def test_population_counts():
    cfg = small_config()
    grid = empty_grid(cfg)
    place(grid,
          alive_bot(0, 0, Instruction.PHOTOSYNTHESIS, energy=4.0),
          alive_bot(1, 0, Instruction.PHOTOSYNTHESIS, energy=6.0),
          dead_bot(2, 2, energy=1.0))
    grid.get(1, 0).age = 10

    rec = population_stats(grid)
    assert rec["alive"] == 2 and rec["dead"] == 1 and rec["empty"] == 6
    assert rec["energy_mean"] == 5.0
    assert rec["energy_total"] == 10.0
    assert rec["age_max"] == 10
    assert rec["op_Photosynthesis"] == 2
    assert rec["op_Noop"] == 0


def test_extinct_grid():
    grid = empty_grid(small_config())
    rec = population_stats(grid)
    assert rec["alive"] == 0
    assert np.isnan(rec["energy_mean"])
    assert rec["genome_diversity"] == 0.0


def test_diversity():
    grid = empty_grid(small_config())
    place(grid,
          alive_bot(0, 0, Instruction.PHOTOSYNTHESIS),
          alive_bot(0, 1, Instruction.PHOTOSYNTHESIS),
          alive_bot(0, 2, Instruction.TURN_LEFT),
          alive_bot(1, 1, Instruction.MAKE_CHILD))
    assert genome_diversity(grid) == 0.75


def test_histogram_follows_pointer():
    grid = empty_grid(small_config())
    bot = alive_bot(0, 0, [Instruction.NOOP, Instruction.MAKE_CHILD])
    bot.current_instruction = 1
    place(grid, bot)
    hist = instruction_histogram(grid)
    assert set(hist) == {op.value for op in ALL_INSTRUCTIONS}
    assert hist["MakeChild"] == 1
    assert sum(hist.values()) == 1


def test_energy_field_layout():
    cfg = small_config(WIDTH=4, HEIGHT=2)
    grid = empty_grid(cfg)
    place(grid, alive_bot(3, 1, energy=2.5))
    E = energy_field(grid)
    assert E.shape == (2, 4)
    assert E[1, 3] == 2.5
    assert np.isnan(E[0, 0])
