"""Main interactive event loop for the terminal UI.

Each iteration drains background results, handles resize and the periodic
age refresh, paints when the controller is dirty, then waits briefly for a key.
"""

from __future__ import annotations

import os
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..controller import ExplorerController
from ..input import read_key
from .terminal import TerminalController


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_timeout_ms: int = 120
    tick_seconds: float = 30.0


def _terminal_size() -> os.terminal_size:
    return shutil.get_terminal_size((80, 24))


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    render: Callable[[int, int], None]
    read_key: Callable[..., str] = read_key
    terminal_size: Callable[[], os.terminal_size] = _terminal_size
    monotonic: Callable[[], float] = time.monotonic


def run_main_loop(
    controller: ExplorerController,
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the interactive loop until the controller reports a quit key.

    Exceptions raised while draining updates (invariant violations from the
    background runner) propagate after the terminal has been restored.
    """
    ops = callbacks
    last_size: tuple[int, int] | None = None
    last_tick = ops.monotonic()

    with terminal.raw_mode():
        while True:
            controller.drain_updates()

            term = ops.terminal_size()
            size = (term.columns, term.lines)
            if size != last_size:
                if last_size is not None:
                    terminal.clear()
                last_size = size
                controller.dirty = True

            now = ops.monotonic()
            if now - last_tick >= timing.tick_seconds:
                last_tick = now
                controller.tick()

            if controller.dirty:
                ops.render(term.columns, term.lines)
                controller.dirty = False

            key = ops.read_key(stdin_fd, timeout_ms=timing.key_timeout_ms)
            if key and controller.handle_key(key):
                return


__all__ = ["RuntimeLoopCallbacks", "RuntimeLoopTiming", "run_main_loop"]
