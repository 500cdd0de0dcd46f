"""
genomata/simulation.py - Tick engine

One tick is a single in-place forward scan of the grid:

    for x in 0..WIDTH-1:            (outer)
        for y in 0..HEIGHT-1:       (inner)
            copy bot at (x, y) -> execute one instruction -> write back

The scan is NOT double buffered. A bot visited earlier in the scan may
already have moved, attacked, reproduced or died when a later bot looks
at it in the same tick. A bot that moves to a coordinate not yet visited
(down, or right into the next column) is visited again in the same tick,
and so is an offspring written ahead of the scan.
"""

from dataclasses import replace
from typing import Callable, Optional, Tuple

from .bot import Bot
from .config import SimulationConfig, validate_config
from .grid import Grid
from .rng_utils import make_rng


class Simulation:
    """
    Grid of bots advanced one instruction per bot per tick.

    Commands that change state from outside (reset, set_cell,
    select_bot, replace_config) must only be issued between ticks.
    """

    def __init__(self, config: Optional[SimulationConfig] = None, seed: Optional[int] = None):
        if config is None:
            config = SimulationConfig()
        ok, msg = validate_config(config)
        if not ok:
            raise ValueError(msg)

        self.configuration = config
        self.seed = config.SEED if seed is None else seed
        self._iterations = 0

        self.selected_bot_coordinates: Optional[Tuple[int, int]] = None
        # Copy kept even after the bot is gone from the grid
        self._selected_bot: Optional[Bot] = None

        # Independent RNG streams
        self.rng_init = make_rng(self.seed, "init")
        self.rng_core = make_rng(self.seed, "core")

        self.map = Grid(config.WIDTH, config.HEIGHT, Bot.new_empty)
        self.generate_map()

    # -------------------------------------------------
    # STATE
    # -------------------------------------------------

    @property
    def width(self) -> int:
        return self.configuration.WIDTH

    @property
    def height(self) -> int:
        return self.configuration.HEIGHT

    @property
    def iterations(self) -> int:
        return self._iterations

    @property
    def grid(self) -> Grid:
        return self.map

    def generate_map(self) -> None:
        """Each cell independently: alive with p=1/5, empty otherwise"""
        cfg = self.configuration
        for x, y in self.map.coordinates():
            if self.rng_init.random() < 1.0 / 5.0:
                bot = Bot.new_random(x, y, cfg, self.rng_init)
            else:
                bot = Bot.new_empty(x, y)
            self.map.set(x, y, bot)

    def reset(self) -> None:
        self._iterations = 0
        self.generate_map()
        if self.selected_bot_coordinates is not None:
            self.select_bot(*self.selected_bot_coordinates)

    def replace_config(self, config: SimulationConfig) -> None:
        """
        Swap the parameters record.

        A new SEED restarts both RNG streams from it. A size change
        rebuilds the grid, which is then generated from the current
        init stream.
        """
        ok, msg = validate_config(config)
        if not ok:
            raise ValueError(msg)

        resized = (config.WIDTH, config.HEIGHT) != (self.width, self.height)
        self.configuration = config
        if config.SEED != self.seed:
            self.seed = config.SEED
            self.rng_init = make_rng(self.seed, "init")
            self.rng_core = make_rng(self.seed, "core")
        if resized:
            self.map = Grid(config.WIDTH, config.HEIGHT, Bot.new_empty)
            self.selected_bot_coordinates = None
            self._selected_bot = None
            self.reset()

    # -------------------------------------------------
    # SELECTION / INJECTION
    # -------------------------------------------------

    def select_bot(self, x: int, y: int) -> Optional[Bot]:
        """Track the bot at (x, y); returns a snapshot copy, None if off-grid"""
        self.selected_bot_coordinates = (x, y)
        if not (0 <= x < self.width and 0 <= y < self.height):
            return None
        self._selected_bot = self.map.get(x, y).copy()
        return self._selected_bot.copy()

    def clear_selection(self) -> None:
        self.selected_bot_coordinates = None
        self._selected_bot = None

    @property
    def selected_bot(self) -> Optional[Bot]:
        if self._selected_bot is None:
            return None
        return self._selected_bot.copy()

    def set_cell(self, x: int, y: int, bot: Bot) -> None:
        """Overwrite (x, y) with a copy of bot relocated to that cell"""
        cell = bot.copy()
        cell.set_coordinates(x, y)
        self.map.set(x, y, cell)
        if self.selected_bot_coordinates == (x, y):
            self._selected_bot = cell.copy()

    # -------------------------------------------------
    # MAIN STEP
    # -------------------------------------------------

    def update(self) -> None:
        """Advance every live bot by one instruction (one full tick)"""
        grid = self.map
        cfg = self.configuration
        rng = self.rng_core

        for x, y in grid.coordinates():
            stored = grid.get(x, y)
            if not stored.should_update():
                # Non-live cells are unchanged by an update
                if self.selected_bot_coordinates == (x, y):
                    self._selected_bot = stored.copy()
                continue

            # genome is shared with the stored value; update never edits it
            bot = replace(stored)
            orig_pos = bot.coordinates()

            bot.update(grid, cfg, rng)

            if bot.coordinates() != orig_pos:
                grid.set(orig_pos[0], orig_pos[1], Bot.new_empty(*orig_pos))

            if self.selected_bot_coordinates == orig_pos:
                self.selected_bot_coordinates = bot.coordinates()
                self._selected_bot = bot.copy()

            grid.set(bot.x, bot.y, bot)

        self._iterations += 1

    def run(self, steps: int, callback: Optional[Callable[["Simulation"], None]] = None) -> None:
        """Run several ticks, calling callback(self) after each"""
        for _ in range(steps):
            self.update()
            if callback is not None:
                callback(self)
