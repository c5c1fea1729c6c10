# Snake player GUI: Tkinter renderer plus key and viewport wiring.
from __future__ import annotations

import argparse
import logging
import random
import tkinter as tk

import numpy as np

# Support both package imports and running this file directly.
try:
    from .game_logic import CELL_PX, SnakeConfig
    from .session import AfterScheduler, SnakeSession, Snapshot
    from .utils import FOOD_VALUE, HEAD_VALUE
except ImportError:
    from game_logic import CELL_PX, SnakeConfig
    from session import AfterScheduler, SnakeSession, Snapshot
    from utils import FOOD_VALUE, HEAD_VALUE


logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 900
DEFAULT_HEIGHT = 600


class SnakeApp:
    """Tkinter presentation layer for SnakeSession."""
    BG = "#101418"
    BOARD_BG = "#1c2229"
    SNAKE_HEAD = "#45d483"
    SNAKE_BODY = "#1fb86b"
    FOOD_COLOR = "#ff5c74"
    TEXT_PRIMARY = "#e6eef7"
    TEXT_MUTED = "#95a4b8"

    def __init__(
        self,
        root: tk.Tk,
        config: SnakeConfig | None = None,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        seed: int | None = None,
    ) -> None:
        self.root = root
        self.root.title("Snake")
        self.root.configure(bg=self.BG)
        self.root.geometry(f"{width}x{height}")
        self.viewport = (width, height)

        self._build_layout()

        self.scheduler = AfterScheduler(self.root)
        self.session = SnakeSession(
            self.scheduler,
            width,
            height,
            config=config,
            rng=random.Random(seed),
            on_frame=self.draw,
        )
        self._bind_events()

    def _build_layout(self) -> None:
        """Full-window board canvas, a status line and the start overlay."""
        self.canvas = tk.Canvas(self.root, bg=self.BOARD_BG, highlightthickness=0, bd=0)
        self.canvas.pack(fill="both", expand=True)

        self.status_var = tk.StringVar(value="")
        tk.Label(
            self.root,
            textvariable=self.status_var,
            fg=self.TEXT_MUTED,
            bg=self.BG,
            font=("Helvetica", 11),
            anchor="w",
        ).pack(fill="x", padx=8, pady=4)

        self.instructions = tk.Label(
            self.root,
            text="Press space to start",
            fg=self.TEXT_PRIMARY,
            bg=self.BOARD_BG,
            font=("Helvetica", 22, "bold"),
        )

    def _bind_events(self) -> None:
        self.root.bind("<KeyPress>", lambda e: self.session.submit(e.keysym))
        self.canvas.bind("<Configure>", self._on_configure)

    def _on_configure(self, event: tk.Event) -> None:
        """Only a real size change recomputes the grid (and resets the game)."""
        size = (event.width, event.height)
        if size == self.viewport or event.width <= 0 or event.height <= 0:
            return
        self.viewport = size
        self.session.on_viewport_change(event.width, event.height)

    def draw(self, snap: Snapshot) -> None:
        """Render the snapshot's board array plus the idle overlay for one frame."""
        self.canvas.delete("all")
        width, height = self.viewport
        cell_w = width / snap.grid.cols
        cell_h = height / snap.grid.rows

        board = snap.board()
        for row, col in np.argwhere(board != 0.0):
            value = board[row, col]
            x0, y0 = col * cell_w, row * cell_h
            if value == FOOD_VALUE:
                # Food only shows once the game is running.
                if snap.running:
                    self.canvas.create_oval(
                        x0 + 2, y0 + 2, x0 + cell_w - 2, y0 + cell_h - 2,
                        fill=self.FOOD_COLOR, outline="",
                    )
                continue
            color = self.SNAKE_HEAD if value == HEAD_VALUE else self.SNAKE_BODY
            self.canvas.create_rectangle(
                x0 + 1, y0 + 1, x0 + cell_w - 1, y0 + cell_h - 1, fill=color, outline=""
            )

        if snap.running:
            self.instructions.place_forget()
        else:
            self.instructions.place(relx=0.5, rely=0.5, anchor="center")

        self.status_var.set(
            f"Length: {len(snap.snake)}   Food: {snap.food_eaten}   "
            f"Speed: {snap.delay_ms} ms   Grid: {snap.grid.cols}x{snap.grid.rows}"
        )


def run_player_gui(
    config: SnakeConfig | None = None,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    seed: int | None = None,
) -> None:
    """Launch the Snake player interface."""
    root = tk.Tk()
    SnakeApp(root, config=config, width=width, height=height, seed=seed)
    root.mainloop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play grid Snake")
    parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help="Initial window width in px")
    parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help="Initial window height in px")
    parser.add_argument("--cell-px", type=int, default=CELL_PX, help="Target cell size in px")
    parser.add_argument("--seed", type=int, default=None, help="Seed for food placement")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.width <= 0 or args.height <= 0:
        parser.error("--width and --height must be positive")
    if args.cell_px < 1:
        parser.error("--cell-px must be >= 1")

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Launching Snake at %dx%d", args.width, args.height)
    run_player_gui(
        config=SnakeConfig(cell_px=args.cell_px),
        width=args.width,
        height=args.height,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()
