# Shared numpy helpers: board occupancy and snapshot encoding.
from __future__ import annotations

from typing import Iterable

import numpy as np


FOOD_VALUE = 0.5
HEAD_VALUE = 1.0
BODY_VALUE = -0.5


def occupancy_mask(cols: int, rows: int, cells: Iterable[tuple[int, int]]) -> np.ndarray:
    """Boolean (rows, cols) mask of occupied 1-indexed cells; off-board cells are ignored."""
    mask = np.zeros((rows, cols), dtype=bool)
    for x, y in cells:
        if 1 <= x <= cols and 1 <= y <= rows:
            mask[y - 1, x - 1] = True
    return mask


def free_cells(cols: int, rows: int, occupied: Iterable[tuple[int, int]]) -> list[tuple[int, int]]:
    """List every unoccupied 1-indexed (x, y) cell in row-major order."""
    mask = occupancy_mask(cols, rows, occupied)
    ys, xs = np.nonzero(~mask)
    return [(int(x) + 1, int(y) + 1) for y, x in zip(ys, xs)]


def encode_board(
    cols: int,
    rows: int,
    snake: Iterable[tuple[int, int]],
    food: tuple[int, int] | None,
) -> np.ndarray:
    """
    Encode the board as a (rows, cols) float grid:
    - 0.0: empty
    - 0.5: food
    - 1.0: snake head
    - -0.5: snake body
    """
    board = np.zeros((rows, cols), dtype=np.float32)

    if food is not None:
        fx, fy = food
        if 1 <= fx <= cols and 1 <= fy <= rows:
            board[fy - 1, fx - 1] = FOOD_VALUE

    # Tail first so the head wins when it overlaps its own body.
    segments = list(snake)
    for idx in range(len(segments) - 1, -1, -1):
        x, y = segments[idx]
        if not (1 <= x <= cols and 1 <= y <= rows):
            continue
        board[y - 1, x - 1] = HEAD_VALUE if idx == 0 else BODY_VALUE

    return board
