"""
Genomata: a toroidal grid of bots driven by tiny genetic programs.
"""

from .config import GENOME_LENGTH, SimulationConfig, validate_config
from .simulation import Simulation
