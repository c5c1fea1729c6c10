# Core Snake game state and rules, independent from GUI/session code.
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
import logging
import math
import random
from typing import Iterable, NamedTuple

# Support both package imports and running this file directly.
try:
    from .utils import free_cells
except ImportError:
    from utils import free_cells


logger = logging.getLogger(__name__)

CELL_PX = 15
BASELINE_DELAY_MS = 150
MIN_DELAY_MS = 25
MAX_FOOD_ATTEMPTS = 1000

# (threshold, step): delays above threshold shrink by step.
SPEED_STEPS = ((100, 5), (75, 3), (50, 2), (25, 1))


class Cell(NamedTuple):
    """1-indexed grid coordinate."""
    x: int
    y: int


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> "Direction":
        return OPPOSITES[self]

    @property
    def offset(self) -> tuple[int, int]:
        return OFFSETS[self]


OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}
OFFSETS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

# Raw key identifiers from Tk keysyms and browser-style key names.
KEY_DIRECTIONS = {
    "Up": Direction.UP,
    "Down": Direction.DOWN,
    "Left": Direction.LEFT,
    "Right": Direction.RIGHT,
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
    "w": Direction.UP,
    "s": Direction.DOWN,
    "a": Direction.LEFT,
    "d": Direction.RIGHT,
}
START_KEYS = frozenset({"space", " ", "Space"})


@dataclass
class SnakeConfig:
    """Runtime settings shared between the logic layer, session and GUI."""
    cell_px: int = CELL_PX
    baseline_delay_ms: int = BASELINE_DELAY_MS
    min_delay_ms: int = MIN_DELAY_MS
    default_direction: str = "right"
    max_food_attempts: int = MAX_FOOD_ATTEMPTS

    def validate(self) -> None:
        if self.cell_px < 1:
            raise ValueError("cell_px must be >= 1.")
        if self.min_delay_ms < 1:
            raise ValueError("min_delay_ms must be >= 1.")
        if self.baseline_delay_ms < self.min_delay_ms:
            raise ValueError("baseline_delay_ms cannot be below min_delay_ms.")
        if self.max_food_attempts < 0:
            raise ValueError("max_food_attempts cannot be negative.")
        Direction(self.default_direction)


@dataclass(frozen=True)
class Grid:
    cols: int
    rows: int

    @property
    def center(self) -> Cell:
        return Cell(max(1, self.cols // 2), max(1, self.rows // 2))

    @property
    def cell_count(self) -> int:
        return self.cols * self.rows

    def contains(self, cell: Cell) -> bool:
        return 1 <= cell.x <= self.cols and 1 <= cell.y <= self.rows


def _round_half_up(value: float) -> int:
    # Builtin round() is half-to-even; the grid wants 102.5 -> 103.
    return int(math.floor(value + 0.5))


def compute_grid(width: float, height: float, cell_px: int = CELL_PX) -> Grid:
    """Derive (cols, rows) from the viewport, stretching the long side by aspect ratio."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Viewport must be positive, got {width}x{height}.")
    ratio = width / height
    cell_count = int(min(width, height) // cell_px)
    if ratio > 1:
        cols, rows = _round_half_up(cell_count * ratio), cell_count
    else:
        cols, rows = cell_count, _round_half_up(cell_count / ratio)
    return Grid(max(1, int(cols)), max(1, int(rows)))


def next_delay(delay_ms: int, floor_ms: int = MIN_DELAY_MS) -> int:
    """Shorten the tick interval after a meal; steps shrink as the delay drops."""
    for threshold, step in SPEED_STEPS:
        if delay_ms > threshold:
            return max(floor_ms, delay_ms - step)
    return delay_ms


def place_food(
    grid: Grid,
    snake: Iterable[Cell],
    rng: random.Random | None = None,
    max_attempts: int = MAX_FOOD_ATTEMPTS,
) -> Cell | None:
    """Pick a random free cell, or None if the snake fills the board."""
    rng = rng or random
    occupied = set(snake)
    for _ in range(max_attempts):
        candidate = Cell(rng.randint(1, grid.cols), rng.randint(1, grid.rows))
        if candidate not in occupied:
            return candidate

    # Dense board: sample from the explicit list of free cells instead.
    logger.warning("Rejection sampling exhausted after %d attempts; scanning free cells", max_attempts)
    remaining = free_cells(grid.cols, grid.rows, occupied)
    if not remaining:
        return None
    x, y = rng.choice(remaining)
    return Cell(x, y)


@dataclass(frozen=True)
class CollisionReport:
    wall_hit: bool = False
    self_hit: bool = False

    @property
    def ok(self) -> bool:
        return not (self.wall_hit or self.self_hit)


def check_collision(snake: Iterable[Cell], grid: Grid) -> CollisionReport:
    """Classify the head position; both checks always run."""
    body = list(snake)
    head = body[0]
    wall_hit = not grid.contains(head)
    self_hit = head in body[1:]
    return CollisionReport(wall_hit=wall_hit, self_hit=self_hit)


class InputQueue:
    """FIFO of pending turns; rejects instant 180-degree reversals."""
    def __init__(self) -> None:
        self._pending: deque[Direction] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    @property
    def pending(self) -> tuple[Direction, ...]:
        return tuple(self._pending)

    def submit(self, raw_key: str, committed: Direction) -> bool:
        """Queue the direction for raw_key. Returns True if it was accepted."""
        candidate = KEY_DIRECTIONS.get(raw_key)
        if candidate is None:
            return False
        effective = self._pending[0] if self._pending else committed
        if candidate is effective.opposite:
            logger.debug("Dropped reversal %s while heading %s", candidate.value, effective.value)
            return False
        self._pending.append(candidate)
        return True

    def next_direction(self) -> Direction | None:
        return self._pending.popleft() if self._pending else None

    def clear(self) -> None:
        self._pending.clear()


@dataclass
class GameState:
    """Snake, food, heading and speed for one session (no Tkinter/UI code)."""
    grid: Grid
    config: SnakeConfig = field(default_factory=SnakeConfig)
    rng: random.Random = field(default_factory=random.Random)

    def __post_init__(self) -> None:
        self.queue = InputQueue()
        self.reset()

    def reset(self) -> None:
        """Single-cell snake at the grid center, fresh food, baseline speed."""
        self.snake: deque[Cell] = deque([self.grid.center])
        self.direction = Direction(self.config.default_direction)
        self.delay_ms = self.config.baseline_delay_ms
        self.food_eaten = 0
        self.queue.clear()
        self.food = self._place_food()

    @property
    def head(self) -> Cell:
        return self.snake[0]

    def _place_food(self) -> Cell | None:
        return place_food(self.grid, self.snake, self.rng, self.config.max_food_attempts)

    def submit(self, raw_key: str) -> bool:
        return self.queue.submit(raw_key, self.direction)

    def advance(self) -> bool:
        """Move one cell. Returns True if food was eaten (snake grew, delay shortened)."""
        # Apply at most one queued turn per tick.
        queued = self.queue.next_direction()
        if queued is not None:
            self.direction = queued

        dx, dy = self.direction.offset
        new_head = Cell(self.head.x + dx, self.head.y + dy)
        self.snake.appendleft(new_head)

        if new_head != self.food:
            self.snake.pop()
            return False

        self.food_eaten += 1
        self.food = self._place_food()
        self.delay_ms = next_delay(self.delay_ms, self.config.min_delay_ms)
        logger.debug("Food eaten (%d); delay now %d ms", self.food_eaten, self.delay_ms)
        return True

    def check_collision(self) -> CollisionReport:
        return check_collision(self.snake, self.grid)
