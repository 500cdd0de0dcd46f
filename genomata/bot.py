"""
genomata/bot.py - Bot record and the single-instruction interpreter

A grid cell is always in exactly one of three states:

    empty               empty=True,  alive=False  (energy 0, Noop genome)
    alive               empty=False, alive=True
    dead-but-occupied   empty=False, alive=False  (corpse keeps its energy)

Bot.update executes the gene under the instruction pointer against the
live grid. It may mutate the faced cell in place or overwrite it with an
offspring; the caller writes the bot itself back afterwards.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from numpy.random import Generator

from .color import Color
from .config import GENOME_LENGTH, SimulationConfig
from .direction import Direction
from .gene import (
    Gene, Instruction, copy_genome, default_genome, random_genome, same_program
)
from .grid import Grid


@dataclass
class Bot:
    alive: bool = False
    empty: bool = True

    x: int = 0
    y: int = 0
    energy: float = 0.0
    direction: Direction = Direction.LEFT
    color: Color = field(default_factory=Color)
    age: int = 0

    genome: list = field(default_factory=default_genome)
    current_instruction: int = 0

    # ---------- constructors ----------

    @classmethod
    def new_empty(cls, x: int, y: int) -> "Bot":
        return cls(x=x, y=y)

    @classmethod
    def new_random(cls, x: int, y: int, config: SimulationConfig, rng: Generator) -> "Bot":
        """Alive bot with random genome, facing and color"""
        return cls(
            alive=True,
            empty=False,
            x=x,
            y=y,
            energy=float(config.START_ENERGY),
            direction=Direction.random(rng),
            color=Color.random(rng),
            genome=random_genome(rng, config),
        )

    def copy(self) -> "Bot":
        """Independent copy, genome and color included"""
        return replace(self, color=replace(self.color), genome=copy_genome(self.genome))

    # ---------- state queries ----------

    def coordinates(self) -> Tuple[int, int]:
        return self.x, self.y

    def set_coordinates(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def is_dead(self) -> bool:
        """Dead but still occupying its cell"""
        return not self.alive and not self.empty

    def should_update(self) -> bool:
        return self.alive

    def current_gene(self) -> Gene:
        return self.genome[self.current_instruction]

    # ---------- interpreter ----------

    def update(self, grid: Grid, config: SimulationConfig, rng: Generator) -> Optional[Instruction]:
        """
        Execute one instruction, pay the idle cost, age, and check for death.

        Args:
            grid: live grid; the faced cell is read and mutated in place
            config: parameters record
            rng: stream used for offspring mutation

        Returns:
            The executed instruction, or None if the bot is not alive
        """
        if not self.alive:
            return None

        gene = self.current_gene()
        op = gene.instruction
        next_instruction = self.current_instruction + 1

        looking_x, looking_y = self.direction.apply_direction(self.x, self.y, config)
        assert (looking_x, looking_y) != (self.x, self.y), "bot faces its own cell"
        faced = grid.get_mut(looking_x, looking_y)

        if op is Instruction.NOOP:
            pass

        elif op is Instruction.TURN_LEFT:
            self.direction = self.direction.left()
            self.energy -= config.TURN_COST
        elif op is Instruction.TURN_RIGHT:
            self.direction = self.direction.right()
            self.energy -= config.TURN_COST
        elif op is Instruction.MOVE_FORWARDS:
            if faced.empty:
                self.set_coordinates(looking_x, looking_y)
                self.energy -= config.MOVEMENT_COST

        elif op is Instruction.PHOTOSYNTHESIS:
            self.energy += config.photosynthesis_at(self.y)
        elif op is Instruction.GIVE_ENERGY:
            if faced.alive:
                amount = min(max(gene.energy, 0.0), self.energy)
                faced.energy += amount
                self.energy -= amount
        elif op is Instruction.ATTACK_CELL:
            if self.energy >= config.ATTACK_REQUIRED_ENERGY and faced.alive:
                self.energy -= config.ATTACK_REQUIRED_ENERGY
                taken = min(faced.energy, config.ATTACK_ENERGY)
                faced.energy -= taken
                self.energy += taken
        elif op is Instruction.RECYCLE_DEAD_CELL:
            if faced.is_dead():
                self.energy += faced.energy
                grid.set(looking_x, looking_y, Bot.new_empty(looking_x, looking_y))

        elif op is Instruction.MAKE_CHILD:
            if self.energy < config.REPRODUCTION_REQUIRED_ENERGY and not faced.empty:
                next_instruction = gene.branch_alt
            else:
                self._make_child(grid, looking_x, looking_y, config, rng)
                next_instruction = gene.branch

        else:
            taken = _CONDITIONS[op](self, gene, faced)
            next_instruction = gene.branch if taken else gene.branch_alt

        self.current_instruction = next_instruction % GENOME_LENGTH

        self.energy -= config.NOOP_COST
        self.age += 1
        if self.age > config.CELL_MAX_AGE or self.energy < 0:
            self.alive = False

        return op

    def _make_child(self, grid: Grid, x: int, y: int, config: SimulationConfig, rng: Generator) -> "Bot":
        """Write an offspring over (x, y) and charge the parent"""
        child = self.copy()
        child.set_coordinates(x, y)
        child.age = 0
        child.energy = float(config.START_ENERGY)
        child.current_instruction = 0

        if rng.random() < config.MUTATION_PERCENT / 100.0:
            k = int(rng.integers(0, GENOME_LENGTH))
            child.genome[k].mutate(rng, config)
            child.color.mutate(rng, config.COLOR_MUTATION_AMOUNT)

        grid.set(x, y, child)
        self.energy -= config.REPRODUCTION_REQUIRED_ENERGY
        return child


# Conditional opcodes: (bot, gene, faced cell) -> take branch?
_CONDITIONS = {
    Instruction.CHECK_ENERGY: lambda bot, gene, faced: bot.energy > gene.energy,
    Instruction.CHECK_IF_DIRECTED_LEFT: lambda bot, gene, faced: bot.direction is Direction.LEFT,
    Instruction.CHECK_IF_DIRECTED_RIGHT: lambda bot, gene, faced: bot.direction is Direction.RIGHT,
    Instruction.CHECK_IF_DIRECTED_UP: lambda bot, gene, faced: bot.direction is Direction.UP,
    Instruction.CHECK_IF_DIRECTED_DOWN: lambda bot, gene, faced: bot.direction is Direction.DOWN,
    Instruction.CHECK_IF_FACING_ALIVE_CELL: lambda bot, gene, faced: faced.alive,
    Instruction.CHECK_IF_FACING_DEAD_CELL: lambda bot, gene, faced: faced.is_dead(),
    Instruction.CHECK_IF_FACING_VOID: lambda bot, gene, faced: faced.empty,
    Instruction.CHECK_IF_FACING_RELATIVE:
        lambda bot, gene, faced: faced.alive and same_program(bot.genome, faced.genome),
}
