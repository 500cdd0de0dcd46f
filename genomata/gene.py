"""
genomata/gene.py - Instruction set and the Gene record

A genome is a fixed-length list of GENOME_LENGTH genes. Each gene holds
one opcode plus auxiliary fields; which fields matter depends on the
opcode:

- option: reserved flag, carried and mutated but not read by any opcode
- energy: amount to give (GiveEnergy) or threshold to compare (CheckEnergy)
- branch / branch_alt: jump targets of conditional opcodes, taken
  modulo GENOME_LENGTH
"""

from dataclasses import dataclass, replace
from enum import Enum

from numpy.random import Generator

from .config import GENOME_LENGTH, SimulationConfig


class Instruction(Enum):
    """Opcodes of the genome interpreter"""

    NOOP = "Noop"

    # Movement
    TURN_LEFT = "TurnLeft"
    TURN_RIGHT = "TurnRight"
    MOVE_FORWARDS = "MoveForwards"

    # Energy
    PHOTOSYNTHESIS = "Photosynthesis"
    GIVE_ENERGY = "GiveEnergy"
    ATTACK_CELL = "AttackCell"
    RECYCLE_DEAD_CELL = "RecycleDeadCell"

    # Conditionals: jump to branch if true, branch_alt otherwise
    CHECK_ENERGY = "CheckEnergy"
    CHECK_IF_DIRECTED_LEFT = "CheckIfDirectedLeft"
    CHECK_IF_DIRECTED_RIGHT = "CheckIfDirectedRight"
    CHECK_IF_DIRECTED_UP = "CheckIfDirectedUp"
    CHECK_IF_DIRECTED_DOWN = "CheckIfDirectedDown"
    CHECK_IF_FACING_ALIVE_CELL = "CheckIfFacingAliveCell"
    CHECK_IF_FACING_DEAD_CELL = "CheckIfFacingDeadCell"
    CHECK_IF_FACING_VOID = "CheckIfFacingVoid"
    # "Relative" means every opcode of the genome matches; other fields ignored
    CHECK_IF_FACING_RELATIVE = "CheckIfFacingRelative"

    # Reproduction: branch on success, branch_alt on refusal
    MAKE_CHILD = "MakeChild"

    @classmethod
    def random(cls, rng: Generator) -> "Instruction":
        return ALL_INSTRUCTIONS[int(rng.integers(0, len(ALL_INSTRUCTIONS)))]


ALL_INSTRUCTIONS = tuple(Instruction)

# Fields a mutation may resample, picked uniformly
MUTABLE_FIELDS = ("instruction", "option", "energy", "branch", "branch_alt")


@dataclass
class Gene:
    instruction: Instruction = Instruction.NOOP
    option: bool = False
    energy: float = 0.0
    branch: int = 0
    branch_alt: int = 0

    def copy(self) -> "Gene":
        return replace(self)

    def mutate(self, rng: Generator, config: SimulationConfig) -> str:
        """
        Resample one randomly chosen field from its genesis distribution.

        Returns:
            Name of the field that was resampled
        """
        field_name = MUTABLE_FIELDS[int(rng.integers(0, len(MUTABLE_FIELDS)))]
        setattr(self, field_name, _sample_field(field_name, rng, config))
        return field_name


def _sample_field(name: str, rng: Generator, config: SimulationConfig):
    if name == "instruction":
        return Instruction.random(rng)
    if name == "option":
        return bool(rng.integers(0, 2))
    if name == "energy":
        return float(rng.uniform(0.0, config.REPRODUCTION_REQUIRED_ENERGY * 2.0))
    # branch / branch_alt
    return int(rng.integers(0, GENOME_LENGTH))


def random_gene(rng: Generator, config: SimulationConfig) -> Gene:
    """Gene with every field drawn from its genesis distribution"""
    return Gene(**{name: _sample_field(name, rng, config) for name in MUTABLE_FIELDS})


def random_genome(rng: Generator, config: SimulationConfig) -> list:
    return [random_gene(rng, config) for _ in range(GENOME_LENGTH)]


def default_genome() -> list:
    """Genome of an empty cell: GENOME_LENGTH Noop genes"""
    return [Gene() for _ in range(GENOME_LENGTH)]


def copy_genome(genome: list) -> list:
    return [g.copy() for g in genome]


def same_program(a: list, b: list) -> bool:
    """True if both genomes carry the same opcode at every position"""
    if len(a) != len(b):
        return False
    return all(ga.instruction is gb.instruction for ga, gb in zip(a, b))
