"""UI-thread update queue and the background task runner.

Background tasks never touch directory or controller state. They enqueue a
closure, and the main loop drains the queue in order between input events.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from functools import partial
from queue import Empty, Queue
from typing import TypeVar

from ..errors import ExplorerError

logger = logging.getLogger(__name__)

T = TypeVar("T")
UpdateTask = Callable[[], None]
SpawnHook = Callable[[Callable[[], None], str], None]


class UpdateQueue:
    """FIFO of closures that run only on the UI thread."""

    def __init__(self) -> None:
        self._tasks: Queue[UpdateTask] = Queue()

    def put(self, task: UpdateTask) -> None:
        self._tasks.put(task)

    def pending(self) -> int:
        return self._tasks.qsize()

    def drain(self) -> int:
        """Run every queued task in enqueue order and return how many ran."""
        ran = 0
        while True:
            try:
                task = self._tasks.get_nowait()
            except Empty:
                break
            task()
            ran += 1
        return ran


def _thread_spawn(target: Callable[[], None], name: str) -> None:
    worker = threading.Thread(target=target, name=f"kmipexplorer-{name}", daemon=True)
    worker.start()


def _reraise(exc: BaseException) -> None:
    raise exc


class BackgroundRunner:
    """Start one daemon thread per operation and marshal results back.

    ``ExplorerError`` failures are logged and handed to ``on_error`` through
    the queue. Anything else is re-raised on the UI thread when drained.
    """

    def __init__(
        self,
        updates: UpdateQueue,
        on_error: Callable[[ExplorerError], None],
        spawn: SpawnHook | None = None,
    ) -> None:
        self._updates = updates
        self._on_error = on_error
        self._spawn = spawn if spawn is not None else _thread_spawn
        self._lock = threading.Lock()
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    def submit(
        self,
        name: str,
        work: Callable[[], T],
        on_success: Callable[[T], None],
        on_failure: Callable[[], None] | None = None,
    ) -> None:
        """Run ``work`` off the UI thread, then ``on_success(result)`` on it.

        ``on_failure`` runs on the UI thread before the error is reported.
        """

        def finish(callback: UpdateTask) -> None:
            def task() -> None:
                with self._lock:
                    self._in_flight -= 1
                callback()

            self._updates.put(task)

        def fail(exc: ExplorerError) -> None:
            if on_failure is not None:
                on_failure()
            self._on_error(exc)

        def run() -> None:
            try:
                result = work()
            except ExplorerError as exc:
                logger.warning("%s failed: %s", name, exc, exc_info=True)
                finish(partial(fail, exc))
                return
            except Exception as exc:
                logger.exception("%s raised an unexpected error", name)
                finish(partial(_reraise, exc))
                return
            logger.debug("%s completed", name)
            finish(lambda: on_success(result))

        with self._lock:
            self._in_flight += 1
        self._spawn(run, name)


__all__ = ["BackgroundRunner", "SpawnHook", "UpdateQueue", "UpdateTask"]
