import pytest

from genomata.bot import Bot
from genomata.config import SimulationConfig
from genomata.direction import Direction
from genomata.gene import Instruction
from genomata.serialization import bot_to_dict
from genomata.simulation import Simulation

from conftest import alive_bot, dead_bot, empty_simulation, place, small_config


def test_initial_grid_is_one_fifth_alive():
    sim = Simulation(SimulationConfig(WIDTH=100, HEIGHT=100, SEED=1))
    cells = list(sim.grid)
    alive = sum(b.alive for b in cells)
    assert 0.17 < alive / len(cells) < 0.23
    assert all(b.alive or b.empty for b in cells)
    assert all(sim.grid.get(x, y).coordinates() == (x, y) for x, y in sim.grid.coordinates())
    assert sim.iterations == 0


def test_invalid_config_is_rejected():
    with pytest.raises(ValueError):
        Simulation(SimulationConfig(WIDTH=1))


def test_photosynthesis_scenario(config):
    sim = empty_simulation(config)
    place(sim.grid, alive_bot(1, 1, Instruction.PHOTOSYNTHESIS, direction=Direction.RIGHT))

    sim.update()

    bot = sim.grid.get(1, 1)
    assert bot.energy == pytest.approx(config.START_ENERGY + config.PHOTOSYNTHESIS_ENERGY - config.NOOP_COST)
    assert bot.coordinates() == (1, 1)
    assert bot.direction is Direction.RIGHT
    assert bot.age == 1
    assert sim.iterations == 1


def test_attack_scenario():
    cfg = small_config(ATTACK_ENERGY=4.0, MOVEMENT_COST=1.0)
    sim = empty_simulation(cfg)
    place(sim.grid,
          alive_bot(0, 1, Instruction.ATTACK_CELL, energy=5.0, direction=Direction.RIGHT),
          alive_bot(1, 1, Instruction.NOOP, energy=10.0))

    sim.update()

    # the victim is scanned after the attacker and pays its own idle cost
    assert sim.grid.get(0, 1).energy == pytest.approx(5.0 - 2.0 + 4.0 - cfg.NOOP_COST)
    assert sim.grid.get(1, 1).energy == pytest.approx(10.0 - 4.0 - cfg.NOOP_COST)


def test_move_vacates_origin(config):
    sim = empty_simulation(config)
    place(sim.grid, alive_bot(1, 1, Instruction.MOVE_FORWARDS, direction=Direction.LEFT))

    sim.update()

    assert sim.grid.get(1, 1).empty
    moved = sim.grid.get(0, 1)
    assert moved.alive and moved.coordinates() == (0, 1)


def test_scan_order_revisits_bots_moving_ahead():
    cfg = small_config(WIDTH=2, HEIGHT=4)
    sim = empty_simulation(cfg)
    place(sim.grid,
          alive_bot(0, 0, Instruction.MOVE_FORWARDS, energy=100.0, direction=Direction.DOWN),
          alive_bot(1, 3, Instruction.MOVE_FORWARDS, energy=100.0, direction=Direction.UP))

    sim.update()

    # Down runs with the scan: visited at y=0,1,2,3 and wraps to y=0
    runner = sim.grid.get(0, 0)
    assert runner.alive and runner.age == 4
    assert runner.energy == pytest.approx(100.0 - 4 * (cfg.MOVEMENT_COST + cfg.NOOP_COST))
    assert all(sim.grid.get(0, y).empty for y in (1, 2, 3))

    # Up moves against the scan: one step only
    climber = sim.grid.get(1, 2)
    assert climber.alive and climber.age == 1
    assert sim.grid.get(1, 3).empty


def test_offspring_ahead_of_scan_runs_same_tick():
    cfg = small_config(WIDTH=2, HEIGHT=3, MUTATION_PERCENT=0.0)
    sim = empty_simulation(cfg)
    place(sim.grid, alive_bot(0, 0, Instruction.MAKE_CHILD, energy=20.0,
                              direction=Direction.DOWN, branch=1, branch_alt=1))

    sim.update()

    parent = sim.grid.get(0, 0)
    assert parent.alive and parent.age == 1

    # child at y=1 reproduced into y=2 on its own turn and starved
    child = sim.grid.get(0, 1)
    assert child.is_dead() and child.age == 1

    # grandchild faced the parent and was refused
    grandchild = sim.grid.get(0, 2)
    assert grandchild.alive and grandchild.age == 1
    assert grandchild.energy == pytest.approx(cfg.START_ENERGY - cfg.NOOP_COST)


def test_dead_bot_stays_occupied(config):
    sim = empty_simulation(config)
    place(sim.grid, alive_bot(1, 1, Instruction.NOOP, energy=0.05))

    sim.update()
    corpse = sim.grid.get(1, 1)
    assert corpse.is_dead()
    energy = corpse.energy

    sim.update()
    corpse = sim.grid.get(1, 1)
    assert corpse.is_dead() and corpse.energy == energy and corpse.age == 1


def test_selection_follows_moving_bot(config):
    sim = empty_simulation(config)
    place(sim.grid, alive_bot(1, 1, Instruction.MOVE_FORWARDS, direction=Direction.UP))

    picked = sim.select_bot(1, 1)
    assert picked.alive and picked.coordinates() == (1, 1)

    sim.update()

    assert sim.selected_bot_coordinates == (1, 0)
    selected = sim.selected_bot
    assert selected.coordinates() == (1, 0)
    assert selected.age == 1


def test_selection_is_a_copy(config):
    sim = empty_simulation(config)
    place(sim.grid, alive_bot(1, 1))
    picked = sim.select_bot(1, 1)
    picked.energy = 999.0
    picked.genome[0].energy = 999.0
    assert sim.grid.get(1, 1).energy == 5.0
    assert sim.grid.get(1, 1).genome[0].energy == 0.0
    assert sim.selected_bot.energy == 5.0


def test_selection_survives_death(config):
    sim = empty_simulation(config)
    place(sim.grid, alive_bot(1, 1, energy=0.05))
    sim.select_bot(1, 1)
    sim.update()
    assert sim.selected_bot.is_dead()


def test_selection_shows_whatever_overwrote_the_cell():
    sim = empty_simulation(small_config(MUTATION_PERCENT=0.0))
    place(sim.grid,
          alive_bot(1, 1, Instruction.MAKE_CHILD, energy=20.0, direction=Direction.RIGHT),
          dead_bot(2, 1))
    assert sim.select_bot(2, 1).is_dead()

    sim.update()

    assert sim.selected_bot_coordinates == (2, 1)
    assert sim.selected_bot.genome[0].instruction is Instruction.MAKE_CHILD


def test_select_and_clear(config):
    sim = empty_simulation(config)
    assert sim.select_bot(0, 0).empty
    assert sim.select_bot(10, 10) is None
    sim.clear_selection()
    assert sim.selected_bot is None
    assert sim.selected_bot_coordinates is None


def test_set_cell_relocates_copy(config):
    sim = empty_simulation(config)
    bot = alive_bot(7, 7, Instruction.PHOTOSYNTHESIS)
    sim.set_cell(2, 0, bot)
    stored = sim.grid.get(2, 0)
    assert stored is not bot
    assert stored.coordinates() == (2, 0)
    assert bot.coordinates() == (7, 7)

    sim.update()
    assert sim.grid.get(2, 0).age == 1


def test_reset_regenerates(config):
    sim = Simulation(small_config(WIDTH=10, HEIGHT=10))
    sim.run(3)
    assert sim.iterations == 3
    sim.reset()
    assert sim.iterations == 0
    assert all(b.age == 0 for b in sim.grid)


def test_run_calls_back_each_tick(config):
    seen = []
    sim = Simulation(config)
    sim.run(4, callback=lambda s: seen.append(s.iterations))
    assert seen == [1, 2, 3, 4]


def test_same_seed_same_history():
    cfg = SimulationConfig(WIDTH=20, HEIGHT=20, SEED=42)
    a, b = Simulation(cfg), Simulation(cfg)
    a.run(10)
    b.run(10)
    assert [bot_to_dict(x) for x in a.grid] == [bot_to_dict(y) for y in b.grid]

    c = Simulation(SimulationConfig(WIDTH=20, HEIGHT=20, SEED=43))
    c.run(10)
    assert [bot_to_dict(x) for x in a.grid] != [bot_to_dict(z) for z in c.grid]


def test_replace_config(config):
    sim = Simulation(config)
    grid = sim.grid

    sim.replace_config(small_config(NOOP_COST=0.5))
    assert sim.grid is grid
    assert sim.configuration.NOOP_COST == 0.5

    sim.run(2)
    sim.replace_config(small_config(WIDTH=4, HEIGHT=5))
    assert sim.grid.shape == (4, 5)
    assert sim.iterations == 0

    with pytest.raises(ValueError):
        sim.replace_config(small_config(MUTATION_PERCENT=-5.0))
    assert sim.grid.shape == (4, 5)


def test_replace_config_reseeds():
    target = small_config(WIDTH=4, HEIGHT=5, SEED=9)
    fresh = Simulation(target)

    sim = Simulation(small_config(SEED=1))
    sim.run(3)
    sim.replace_config(target)
    assert sim.seed == 9
    assert [bot_to_dict(b) for b in sim.grid] == [bot_to_dict(b) for b in fresh.grid]

    fresh.run(5)
    sim.run(5)
    assert [bot_to_dict(b) for b in sim.grid] == [bot_to_dict(b) for b in fresh.grid]


def test_replace_config_same_seed_keeps_streams(config):
    sim = Simulation(config)
    stream = sim.rng_core
    sim.replace_config(small_config(NOOP_COST=0.2))
    assert sim.rng_core is stream


def test_population_evolves_without_errors():
    sim = Simulation(SimulationConfig(WIDTH=24, HEIGHT=16, SEED=5))
    sim.run(50)
    assert sim.iterations == 50
    for x, y in sim.grid.coordinates():
        bot = sim.grid.get(x, y)
        assert bot.coordinates() == (x, y)
        assert 0 <= bot.current_instruction < len(bot.genome)
        assert not (bot.alive and bot.empty)
