"""
genomata/runner.py - Background-thread runner and its handle

The runner owns the Simulation on a worker thread. The foreground talks
to it only through two queues:

    handle --commands-->  runner     (unbounded, applied between ticks)
    runner --snapshot-->  handle     (maxsize=1, double buffered)

A snapshot is a deep copy of the grid taken after a completed tick. The
runner prepares the next one only after the previous was consumed, so a
reader never sees a grid mid-tick and the engine never copies the grid
more often than the reader asks for it.
"""

import queue
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from .bot import Bot
from .config import SimulationConfig
from .grid import Grid
from .serialization import try_bot_from_json
from .simulation import Simulation


class CommandKind(Enum):
    TOGGLE_PAUSE = "toggle_pause"
    RESET = "reset"
    SELECT_CELL = "select_cell"
    CLEAR_SELECTION = "clear_selection"
    INJECT_CELL = "inject_cell"
    SET_TARGET_TPS = "set_target_tps"
    REPLACE_CONFIG = "replace_config"
    STOP = "stop"


@dataclass
class SimulationCommand:
    kind: CommandKind
    payload: Any = None


@dataclass
class SimulationMetadata:
    """Immutable-by-convention view published after a tick"""
    iterations: int
    tps: int
    paused: bool
    target_tps: Optional[float]
    map: Grid
    selected_bot: Optional[Bot]


class SimulationRunner:
    # Sleep per loop while paused
    PAUSED_SLEEP_S = 0.010

    def __init__(self, simulation: Simulation):
        self.simulation = simulation
        self.commands: "queue.Queue[SimulationCommand]" = queue.Queue()
        self.snapshots: "queue.Queue[SimulationMetadata]" = queue.Queue(maxsize=1)

        self.paused = True
        self.running = True
        self.target_tps: Optional[float] = None

        # TPS = iterations completed during the last full second
        self.tps = 0
        self.previous_iterations = 0
        self.previous_tps_check = time.monotonic()

    @classmethod
    def start_new(cls, simulation: Simulation) -> "SimulationHandle":
        runner = cls(simulation)
        initial = runner.construct_metadata()
        thread = threading.Thread(target=runner.run, name="genomata-runner", daemon=True)
        thread.start()
        return SimulationHandle(runner.commands, runner.snapshots, initial, thread)

    # -------------------------------------------------
    # COMMANDS
    # -------------------------------------------------

    def handle_commands(self) -> bool:
        """Apply every queued command; returns True if state changed"""
        changed = False
        while True:
            try:
                command = self.commands.get_nowait()
            except queue.Empty:
                return changed
            self.apply_command(command)
            changed = True

    def apply_command(self, command: SimulationCommand) -> None:
        sim = self.simulation
        kind = command.kind

        if kind is CommandKind.TOGGLE_PAUSE:
            self.paused = not self.paused
        elif kind is CommandKind.RESET:
            sim.reset()
            self.previous_iterations = 0
        elif kind is CommandKind.SELECT_CELL:
            sim.select_bot(*command.payload)
        elif kind is CommandKind.CLEAR_SELECTION:
            sim.clear_selection()
        elif kind is CommandKind.INJECT_CELL:
            x, y, cell = command.payload
            if isinstance(cell, str):
                cell = try_bot_from_json(cell)
                if cell is None:
                    return
            if not (0 <= x < sim.width and 0 <= y < sim.height):
                print(f"[WARNING] cell import refused: ({x}, {y}) is outside the grid")
                return
            sim.set_cell(x, y, cell)
        elif kind is CommandKind.SET_TARGET_TPS:
            self.target_tps = command.payload
        elif kind is CommandKind.REPLACE_CONFIG:
            try:
                sim.replace_config(command.payload)
            except ValueError as e:
                print(f"[WARNING] configuration refused: {e}")
        elif kind is CommandKind.STOP:
            self.running = False

    # -------------------------------------------------
    # SNAPSHOTS
    # -------------------------------------------------

    def construct_metadata(self) -> SimulationMetadata:
        sim = self.simulation
        return SimulationMetadata(
            iterations=sim.iterations,
            tps=self.tps,
            paused=self.paused,
            target_tps=self.target_tps,
            map=sim.map.snapshot(),
            selected_bot=sim.selected_bot,
        )

    def send_metadata(self, force: bool = False) -> None:
        """Publish a fresh snapshot if the reader took the previous one"""
        if force:
            # Commands changed state: replace a snapshot the reader has not taken yet
            try:
                self.snapshots.get_nowait()
            except queue.Empty:
                pass
        # Only this thread puts, so the slot cannot fill up behind our back
        if self.snapshots.full():
            return
        self.snapshots.put_nowait(self.construct_metadata())

    def measure_tps(self) -> None:
        now = time.monotonic()
        if now - self.previous_tps_check >= 1.0:
            self.tps = self.simulation.iterations - self.previous_iterations
            self.previous_iterations = self.simulation.iterations
            self.previous_tps_check = now

    # -------------------------------------------------
    # LOOP
    # -------------------------------------------------

    def step(self) -> None:
        """One loop iteration: commands, at most one tick, snapshot"""
        changed = self.handle_commands()
        if not self.running:
            return

        if not self.paused:
            started = time.monotonic()
            self.simulation.update()
            self.measure_tps()
            if self.target_tps:
                remaining = 1.0 / self.target_tps - (time.monotonic() - started)
                if remaining > 0:
                    time.sleep(remaining)
        else:
            time.sleep(self.PAUSED_SLEEP_S)

        self.send_metadata(force=changed)

    def run(self) -> None:
        while self.running:
            self.step()


class SimulationHandle:
    """Foreground view of a SimulationRunner; obtained via start_new"""

    def __init__(self, commands, snapshots, metadata: SimulationMetadata,
                 thread: Optional[threading.Thread] = None):
        self._tx = commands
        self._rx = snapshots
        self.metadata = metadata
        self._thread = thread

    def _send(self, kind: CommandKind, payload: Any = None) -> None:
        self._tx.put(SimulationCommand(kind, payload))

    # ---------- commands ----------

    def toggle_pause(self) -> None:
        self._send(CommandKind.TOGGLE_PAUSE)

    def reset(self) -> None:
        self._send(CommandKind.RESET)

    def select_bot(self, x: int, y: int) -> None:
        self._send(CommandKind.SELECT_CELL, (x, y))

    def clear_selection(self) -> None:
        self._send(CommandKind.CLEAR_SELECTION)

    def inject_cell(self, x: int, y: int, cell: Union[Bot, str]) -> None:
        """Overwrite (x, y) with a Bot or its JSON text; bad JSON is refused"""
        if isinstance(cell, Bot):
            cell = cell.copy()
        self._send(CommandKind.INJECT_CELL, (x, y, cell))

    def set_target_tps(self, tps: Optional[float]) -> None:
        """Throttle to tps ticks per second; None runs as fast as possible"""
        self._send(CommandKind.SET_TARGET_TPS, tps)

    def replace_config(self, config: SimulationConfig) -> None:
        self._send(CommandKind.REPLACE_CONFIG, config)

    def stop(self, timeout: Optional[float] = 1.0) -> None:
        self._send(CommandKind.STOP)
        if self._thread is not None:
            self._thread.join(timeout)

    # ---------- snapshot ----------

    def update(self) -> bool:
        """Take the latest snapshot if one is ready"""
        try:
            self.metadata = self._rx.get_nowait()
        except queue.Empty:
            return False
        return True

    def wait_for_update(self, timeout: float = 1.0) -> bool:
        try:
            self.metadata = self._rx.get(timeout=timeout)
        except queue.Empty:
            return False
        return True

    def is_paused(self) -> bool:
        return self.metadata.paused

    def iterations(self) -> int:
        return self.metadata.iterations

    def tps(self) -> int:
        return self.metadata.tps

    def map(self) -> Grid:
        return self.metadata.map

    def selected_bot(self) -> Optional[Bot]:
        return self.metadata.selected_bot
