"""
Facing directions and toroidal coordinate stepping.
"""

from enum import Enum
from typing import Tuple

from numpy.random import Generator

from .config import SimulationConfig


class Direction(Enum):
    LEFT = "Left"
    RIGHT = "Right"
    UP = "Up"
    DOWN = "Down"

    def apply_direction(self, x: int, y: int, config: SimulationConfig) -> Tuple[int, int]:
        """
        Return the coordinate one step ahead, wrapped onto the torus.

        Stepping left from x=0 lands on WIDTH-1, stepping down from
        y=HEIGHT-1 lands on 0, and so on. Up decreases y.
        """
        if self is Direction.LEFT:
            return (x - 1) % config.WIDTH, y
        if self is Direction.RIGHT:
            return (x + 1) % config.WIDTH, y
        if self is Direction.UP:
            return x, (y - 1) % config.HEIGHT
        return x, (y + 1) % config.HEIGHT

    def left(self) -> "Direction":
        """Rotate 90 degrees: Left -> Down -> Right -> Up -> Left"""
        return _ROTATE_LEFT[self]

    def right(self) -> "Direction":
        """Inverse of left()"""
        return _ROTATE_RIGHT[self]

    @classmethod
    def random(cls, rng: Generator) -> "Direction":
        members = list(cls)
        return members[int(rng.integers(0, len(members)))]


_ROTATE_LEFT = {
    Direction.LEFT: Direction.DOWN,
    Direction.DOWN: Direction.RIGHT,
    Direction.RIGHT: Direction.UP,
    Direction.UP: Direction.LEFT,
}
_ROTATE_RIGHT = {v: k for k, v in _ROTATE_LEFT.items()}
