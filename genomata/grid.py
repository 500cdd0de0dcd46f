"""
Fixed-size cell store addressed by (x, y).

The grid knows nothing about simulation rules. Callers pass coordinates
already wrapped by Direction.apply_direction, so an out-of-range access
is a programming error and raises IndexError.
"""

import copy
from typing import Callable, Iterator, List, Tuple


class Grid:
    def __init__(self, width: int, height: int, factory: Callable[[int, int], object]):
        self.width = width
        self.height = height
        # column-major: cells[x][y]
        self.cells: List[list] = [[factory(x, y) for y in range(height)] for x in range(width)]

    def _check(self, x: int, y: int):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} grid")

    def get(self, x: int, y: int):
        """Cell stored at (x, y); treat as read-only"""
        self._check(x, y)
        return self.cells[x][y]

    def get_mut(self, x: int, y: int):
        """Cell stored at (x, y); mutations are visible to later readers"""
        self._check(x, y)
        return self.cells[x][y]

    def set(self, x: int, y: int, cell) -> None:
        self._check(x, y)
        self.cells[x][y] = cell

    def coordinates(self) -> Iterator[Tuple[int, int]]:
        """All coordinates in scan order: outer x, inner y"""
        for x in range(self.width):
            for y in range(self.height):
                yield x, y

    def __iter__(self):
        for column in self.cells:
            yield from column

    def __len__(self) -> int:
        return self.width * self.height

    @property
    def shape(self) -> Tuple[int, int]:
        return self.width, self.height

    def snapshot(self) -> "Grid":
        """Deep copy, safe to hand to another thread"""
        return copy.deepcopy(self)
