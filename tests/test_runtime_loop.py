from __future__ import annotations

import os
import unittest
from contextlib import contextmanager

from kmipexplorer.runtime import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0
        self.exited = 0
        self.clears = 0

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1

    def clear(self) -> None:
        self.clears += 1


class _FakeController:
    def __init__(self, quit_on: str = "q") -> None:
        self.dirty = True
        self.keys: list[str] = []
        self.drains = 0
        self.ticks = 0
        self.quit_on = quit_on
        self.drain_error: BaseException | None = None

    def drain_updates(self) -> int:
        self.drains += 1
        if self.drain_error is not None:
            raise self.drain_error
        return 0

    def tick(self) -> None:
        self.ticks += 1

    def handle_key(self, key: str) -> bool:
        self.keys.append(key)
        self.dirty = True
        return key == self.quit_on


def _scripted(keys: list[str]):
    pending = list(keys)

    def read_key(_fd: int, timeout_ms: int | None = None) -> str:
        return pending.pop(0) if pending else "q"

    return read_key


class RuntimeLoopTests(unittest.TestCase):
    def test_renders_when_dirty_and_stops_on_quit(self) -> None:
        controller = _FakeController()
        terminal = _FakeTerminal()
        renders: list[tuple[int, int]] = []

        run_main_loop(
            controller,
            terminal,
            0,
            RuntimeLoopTiming(),
            RuntimeLoopCallbacks(
                render=lambda w, h: renders.append((w, h)),
                read_key=_scripted(["", "j", "q"]),
                terminal_size=lambda: os.terminal_size((100, 30)),
            ),
        )

        self.assertEqual(controller.keys, ["j", "q"])
        # Initial frame, then one after "j"; the idle "" iteration paints nothing.
        self.assertEqual(renders, [(100, 30), (100, 30)])
        self.assertEqual(controller.drains, 3)
        self.assertEqual((terminal.entered, terminal.exited), (1, 1))

    def test_resize_clears_and_repaints(self) -> None:
        controller = _FakeController()
        terminal = _FakeTerminal()
        sizes = [os.terminal_size((80, 24)), os.terminal_size((120, 40))]
        renders: list[tuple[int, int]] = []

        def terminal_size() -> os.terminal_size:
            return sizes.pop(0) if len(sizes) > 1 else sizes[0]

        run_main_loop(
            controller,
            terminal,
            0,
            RuntimeLoopTiming(),
            RuntimeLoopCallbacks(
                render=lambda w, h: renders.append((w, h)),
                read_key=_scripted(["", "q"]),
                terminal_size=terminal_size,
            ),
        )

        self.assertEqual(renders, [(80, 24), (120, 40)])
        self.assertEqual(terminal.clears, 1)

    def test_tick_fires_after_interval(self) -> None:
        controller = _FakeController()
        clock = iter([0.0, 5.0, 31.0, 32.0])

        run_main_loop(
            controller,
            _FakeTerminal(),
            0,
            RuntimeLoopTiming(tick_seconds=30.0),
            RuntimeLoopCallbacks(
                render=lambda w, h: None,
                read_key=_scripted(["", ""]),
                terminal_size=lambda: os.terminal_size((80, 24)),
                monotonic=lambda: next(clock),
            ),
        )

        self.assertEqual(controller.ticks, 1)

    def test_drain_errors_propagate_after_terminal_restore(self) -> None:
        controller = _FakeController()
        controller.drain_error = RuntimeError("invariant broken")
        terminal = _FakeTerminal()

        with self.assertRaises(RuntimeError):
            run_main_loop(
                controller,
                terminal,
                0,
                RuntimeLoopTiming(),
                RuntimeLoopCallbacks(render=lambda w, h: None, read_key=_scripted([])),
            )

        self.assertEqual(terminal.exited, 1)


if __name__ == "__main__":
    unittest.main()
