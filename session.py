# Session controller: tick loop, lifecycle and snapshots around GameState.
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import random
from typing import Callable, Protocol

import numpy as np

# Support both package imports and running this file directly.
try:
    from .game_logic import START_KEYS, Cell, GameState, Grid, SnakeConfig, compute_grid
    from .utils import encode_board
except ImportError:
    from game_logic import START_KEYS, Cell, GameState, Grid, SnakeConfig, compute_grid
    from utils import encode_board


logger = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of one frame, handed to renderers."""
    snake: tuple[Cell, ...]
    food: Cell | None
    phase: Phase
    grid: Grid
    delay_ms: int
    food_eaten: int

    @property
    def running(self) -> bool:
        return self.phase is Phase.RUNNING

    def board(self) -> np.ndarray:
        return encode_board(self.grid.cols, self.grid.rows, self.snake, self.food)


class Scheduler(Protocol):
    """Single persistent repeating timer."""
    @property
    def active(self) -> bool: ...

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None: ...

    def set_interval(self, interval_ms: int) -> None: ...

    def stop(self) -> None: ...


class AfterScheduler:
    """Scheduler on top of a Tk-style widget's after()/after_cancel()."""
    def __init__(self, widget) -> None:
        self.widget = widget
        self.interval_ms = 0
        self.after_id: str | None = None  # pending Tk timer id
        self._callback: Callable[[], None] | None = None

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.stop()
        self.interval_ms = interval_ms
        self._callback = callback
        self._arm()

    def set_interval(self, interval_ms: int) -> None:
        """Restart the pending firing at the new interval."""
        self.interval_ms = interval_ms
        if self.active:
            self._cancel()
            self._arm()

    def stop(self) -> None:
        self._cancel()
        self._callback = None

    def _cancel(self) -> None:
        if self.after_id is not None:
            self.widget.after_cancel(self.after_id)
            self.after_id = None

    def _arm(self) -> None:
        self.after_id = self.widget.after(self.interval_ms, self._fire)

    def _fire(self) -> None:
        self.after_id = None
        callback = self._callback
        if callback is None:
            return
        callback()
        # The callback may already have re-armed (set_interval) or stopped us.
        if self.active and self.after_id is None:
            self._arm()


class SnakeSession:
    """Owns the GameState and drives it: idle -> running -> idle on collision or resize."""
    def __init__(
        self,
        scheduler: Scheduler,
        width: float,
        height: float,
        config: SnakeConfig | None = None,
        rng: random.Random | None = None,
        on_frame: Callable[[Snapshot], None] | None = None,
    ) -> None:
        self.config = config or SnakeConfig()
        self.config.validate()
        self.scheduler = scheduler
        self.rng = rng or random.Random()
        self.on_frame = on_frame
        self.phase = Phase.IDLE
        self.grid = compute_grid(width, height, self.config.cell_px)
        self.state = GameState(self.grid, self.config, self.rng)
        self.reset()

    @property
    def running(self) -> bool:
        return self.phase is Phase.RUNNING

    def snapshot(self) -> Snapshot:
        return Snapshot(
            snake=tuple(self.state.snake),
            food=self.state.food,
            phase=self.phase,
            grid=self.grid,
            delay_ms=self.state.delay_ms,
            food_eaten=self.state.food_eaten,
        )

    def _emit(self) -> None:
        if self.on_frame is not None:
            self.on_frame(self.snapshot())

    def on_viewport_change(self, width: float, height: float) -> None:
        """Recompute the grid for a new display size; always forces a reset."""
        self.grid = compute_grid(width, height, self.config.cell_px)
        logger.info("Viewport %sx%s -> grid %dx%d", width, height, self.grid.cols, self.grid.rows)
        self.state.grid = self.grid
        self.reset()

    def submit(self, raw_key: str) -> None:
        """Entry point for raw key identifiers; unknown keys are ignored."""
        if raw_key in START_KEYS:
            self.start_signal()
            return
        self.state.submit(raw_key)

    def start_signal(self) -> None:
        """Start ticking from idle; ignored while already running."""
        if self.running:
            return
        self.phase = Phase.RUNNING
        self.state.queue.clear()
        logger.info("Session started on %dx%d grid", self.grid.cols, self.grid.rows)
        self.scheduler.start(self.state.delay_ms, self.tick)
        self._emit()

    def tick(self) -> None:
        """One frame: move, re-arm on a meal, then collide or render."""
        if not self.running:
            return

        ate = self.state.advance()
        if ate:
            if self.state.food is None:
                logger.info("Board cleared at length %d", len(self.state.snake))
                self.reset()
                return
            self.scheduler.set_interval(self.state.delay_ms)

        report = self.state.check_collision()
        if not report.ok:
            logger.info(
                "Collision (wall=%s, self=%s) at length %d",
                report.wall_hit,
                report.self_hit,
                len(self.state.snake),
            )
            self.reset()
            return

        self._emit()

    def reset(self) -> None:
        """Cancel the timer and return to idle with a fresh board."""
        self.scheduler.stop()
        self.phase = Phase.IDLE
        self.state.reset()
        self._emit()
