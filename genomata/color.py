from dataclasses import dataclass

import numpy as np
from numpy.random import Generator


@dataclass
class Color:
    """Display color of a bot. Alpha is carried but never mutated."""
    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    @classmethod
    def random(cls, rng: Generator) -> "Color":
        r, g, b = (int(v) for v in rng.integers(0, 256, size=3))
        return cls(r, g, b)

    def mutate(self, rng: Generator, amount: float) -> None:
        """Shift one random channel by a uniform delta in [-amount, +amount]"""
        channels = [float(self.r), float(self.g), float(self.b)]
        k = int(rng.integers(0, 3))
        channels[k] += rng.uniform(-amount, amount)
        self.r, self.g, self.b = (int(np.clip(c, 0, 255)) for c in channels)

    def rgb(self):
        return self.r, self.g, self.b

    def as_float(self):
        """RGBA in [0, 1], as matplotlib expects"""
        return self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a / 255.0
