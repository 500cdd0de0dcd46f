import pytest

from genomata.bot import Bot
from genomata.config import GENOME_LENGTH, SimulationConfig
from genomata.direction import Direction
from genomata.gene import Gene, Instruction
from genomata.grid import Grid
from genomata.rng_utils import make_rng
from genomata.simulation import Simulation


def small_config(**overrides) -> SimulationConfig:
    """3x3 grid with the stock energy economy"""
    params = dict(WIDTH=3, HEIGHT=3, SEED=7)
    params.update(overrides)
    return SimulationConfig(**params)


def program(ops, **gene_fields):
    """
    Genome from a single opcode (repeated GENOME_LENGTH times) or a list
    of opcodes padded with Noop.
    """
    if isinstance(ops, Instruction):
        ops = [ops] * GENOME_LENGTH
    ops = list(ops) + [Instruction.NOOP] * (GENOME_LENGTH - len(ops))
    return [Gene(instruction=op, **gene_fields) for op in ops]


def alive_bot(x, y, ops=Instruction.NOOP, energy=5.0, direction=Direction.RIGHT, **gene_fields):
    return Bot(
        alive=True,
        empty=False,
        x=x,
        y=y,
        energy=energy,
        direction=direction,
        genome=program(ops, **gene_fields),
    )


def dead_bot(x, y, energy=3.0):
    bot = alive_bot(x, y, energy=energy)
    bot.alive = False
    return bot


def empty_grid(config: SimulationConfig) -> Grid:
    return Grid(config.WIDTH, config.HEIGHT, Bot.new_empty)


def empty_simulation(config: SimulationConfig) -> Simulation:
    sim = Simulation(config)
    sim.map = empty_grid(config)
    return sim


def place(grid: Grid, *bots):
    for bot in bots:
        grid.set(bot.x, bot.y, bot)


@pytest.fixture
def config():
    return small_config()


@pytest.fixture
def quiet_config():
    """No idle cost, so transfers can be checked exactly"""
    return small_config(NOOP_COST=0.0)


@pytest.fixture
def rng():
    return make_rng(123, "test")
