"""
Configuration & Tunable Constants for the Genomata Engine
==========================================================

This module defines every tunable number the tick engine reads:
grid geometry, energy economy, reproduction and mutation.

Interpretation:
- Energy economy: every action has a price, photosynthesis is the only source
- Reproduction: a bot pays a fixed threshold to write a copy of itself
- Mutation: offspring may get exactly one gene field resampled
- Age: bots die of old age even if well fed

The record is pure input data. The engine receives it explicitly and
never mutates it.
"""

from dataclasses import dataclass
from typing import Tuple

# ============================================================================
# Genome geometry
# ============================================================================

GENOME_LENGTH: int = 32
"""Number of genes in every genome.

Shared by all bots. Branch targets are always taken modulo this value.
"""


# ============================================================================
# Simulation parameters
# ============================================================================

@dataclass
class SimulationConfig:
    """
    Parameters governing the grid and the bot energy economy.

    Interpretation:
    - Costs are paid per executed instruction
    - NOOP_COST is the flat idle cost every live bot pays each tick
    - Derived costs (turn, attack entry) follow MOVEMENT_COST
    """

    # Grid geometry
    WIDTH: int = 160
    """Number of columns (x axis, wraps toroidally)"""

    HEIGHT: int = 90
    """Number of rows (y axis, wraps toroidally)"""

    CELL_SIZE: int = 8
    """Size of one cell in pixels when rendered

    Informational only; the engine never reads it.
    """

    # Reproduction & mutation
    MUTATION_PERCENT: float = 25.0
    """Chance (in %) that an offspring gets one gene field resampled

    A mutated offspring also has its color nudged so lineages drift apart
    visually.
    """

    COLOR_MUTATION_AMOUNT: float = 16.0
    """Maximum change of one color channel on mutation"""

    START_ENERGY: float = 5.0
    """Energy of a freshly spawned bot or offspring"""

    REPRODUCTION_REQUIRED_ENERGY: float = 16.0
    """Energy paid by the parent for MakeChild

    Also the scale of gene energy parameters: genes draw
    energy uniformly from [0, 2 * REPRODUCTION_REQUIRED_ENERGY).
    """

    CELL_MAX_AGE: int = 2048
    """Bots older than this die (become dead-but-occupied)"""

    # Energy economy
    PHOTOSYNTHESIS_ENERGY: float = 1.0
    """Energy gained per Photosynthesis instruction"""

    LIGHT_GRADIENT: bool = False
    """Scale photosynthesis by depth

    When enabled a bot at row y gains PHOTOSYNTHESIS_ENERGY * y / HEIGHT,
    so the top row is dark and the bottom row is fully lit.
    """

    ATTACK_ENERGY: float = 5.0
    """Maximum energy taken from the faced bot by AttackCell"""

    MOVEMENT_COST: float = 1.0
    """Energy paid for a successful MoveForwards"""

    NOOP_COST: float = 0.1
    """Flat per-tick cost paid by every executing bot"""

    # Random seed
    SEED: int = 2024

    @property
    def TURN_COST(self) -> float:
        """Cost of TurnLeft / TurnRight: half of a move"""
        return self.MOVEMENT_COST / 2.0

    @property
    def ATTACK_REQUIRED_ENERGY(self) -> float:
        """Entry cost of AttackCell: two moves"""
        return self.MOVEMENT_COST * 2.0

    def photosynthesis_at(self, y: int) -> float:
        """Energy produced by Photosynthesis for a bot on row y"""
        if self.LIGHT_GRADIENT:
            return self.PHOTOSYNTHESIS_ENERGY * (y / self.HEIGHT)
        return self.PHOTOSYNTHESIS_ENERGY


# ============================================================================
# Presets
# ============================================================================

def config_default() -> SimulationConfig:
    """Runtime-configurable defaults (25% mutation, flat light)."""
    return SimulationConfig()


def config_classic() -> SimulationConfig:
    """
    Early fixed-constant tuning.

    Lower mutation with richer photosynthesis; attack is worth four
    photosynthesis steps.
    """
    return SimulationConfig(
        MUTATION_PERCENT=5.0,
        PHOTOSYNTHESIS_ENERGY=1.25,
        ATTACK_ENERGY=1.25 * 4.0,
    )


PRESETS = {
    "default": config_default,
    "classic": config_classic,
}


# ============================================================================
# Parameter Validation
# ============================================================================

def validate_config(config: SimulationConfig) -> Tuple[bool, str]:
    """
    Check configuration for consistency.

    Returns:
        (is_valid, error_message)
    """
    errors = []

    # A bot must never face its own cell
    if config.WIDTH < 2 or config.HEIGHT < 2:
        errors.append("Grid dimensions must be at least 2x2")

    if not (0.0 <= config.MUTATION_PERCENT <= 100.0):
        errors.append("MUTATION_PERCENT must be in [0, 100]")

    if config.START_ENERGY <= 0:
        errors.append("START_ENERGY must be positive")

    if config.REPRODUCTION_REQUIRED_ENERGY <= 0:
        errors.append("REPRODUCTION_REQUIRED_ENERGY must be positive")

    if config.CELL_MAX_AGE < 0:
        errors.append("CELL_MAX_AGE must be non-negative")

    if any(c < 0 for c in [
        config.MOVEMENT_COST,
        config.NOOP_COST,
        config.ATTACK_ENERGY,
        config.PHOTOSYNTHESIS_ENERGY,
        config.COLOR_MUTATION_AMOUNT,
    ]):
        errors.append("Costs and energy amounts must be non-negative")

    if errors:
        return False, "; ".join(errors)
    return True, "OK"
