from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import random

import pytest


@dataclass
class FakeScheduler:
    """Records the timer the session asks for; tests fire it by hand."""
    interval_ms: int | None = None
    callback: Callable[[], None] | None = None
    starts: int = 0
    restarts: list[int] = field(default_factory=list)

    @property
    def active(self) -> bool:
        return self.callback is not None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.starts += 1
        self.interval_ms = interval_ms
        self.callback = callback

    def set_interval(self, interval_ms: int) -> None:
        self.interval_ms = interval_ms
        self.restarts.append(interval_ms)

    def stop(self) -> None:
        self.callback = None

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self.callback is None:
                return
            self.callback()


@dataclass
class FakeWidget:
    """Minimal stand-in for Tk's after()/after_cancel()."""
    pending: dict[str, tuple[int, Callable[[], None]]] = field(default_factory=dict)
    cancelled: list[str] = field(default_factory=list)
    _next_id: int = 0

    def after(self, ms: int, func: Callable[[], None]) -> str:
        self._next_id += 1
        after_id = f"after#{self._next_id}"
        self.pending[after_id] = (ms, func)
        return after_id

    def after_cancel(self, after_id: str) -> None:
        self.cancelled.append(after_id)
        self.pending.pop(after_id, None)

    def run_next(self) -> None:
        after_id = next(iter(self.pending))
        _, func = self.pending.pop(after_id)
        func()


@pytest.fixture()
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture()
def widget() -> FakeWidget:
    return FakeWidget()


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)
