from __future__ import annotations

import threading
import time
import unittest

from kmipexplorer.errors import ClientError, InvariantError
from kmipexplorer.runtime.updates import BackgroundRunner, UpdateQueue


def _inline_spawn(target, _name: str) -> None:
    target()


def _wait_for(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class UpdateQueueTests(unittest.TestCase):
    def test_drain_runs_tasks_in_order(self) -> None:
        queue = UpdateQueue()
        seen: list[int] = []
        for value in range(3):
            queue.put(lambda value=value: seen.append(value))

        self.assertEqual(queue.pending(), 3)
        self.assertEqual(queue.drain(), 3)
        self.assertEqual(seen, [0, 1, 2])
        self.assertEqual(queue.drain(), 0)


class BackgroundRunnerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.queue = UpdateQueue()
        self.errors: list[Exception] = []

    def test_success_is_applied_only_when_drained(self) -> None:
        runner = BackgroundRunner(self.queue, self.errors.append, _inline_spawn)
        results: list[str] = []

        runner.submit("work", lambda: "done", results.append)

        self.assertEqual(results, [])
        self.assertEqual(runner.in_flight, 1)
        self.queue.drain()
        self.assertEqual(results, ["done"])
        self.assertEqual(runner.in_flight, 0)

    def test_explorer_error_goes_to_failure_then_error_handler(self) -> None:
        runner = BackgroundRunner(self.queue, self.errors.append, _inline_spawn)
        order: list[str] = []

        def work() -> str:
            raise ClientError("connection refused")

        with self.assertLogs("kmipexplorer.runtime.updates", level="WARNING"):
            runner.submit("work", work, lambda _r: order.append("success"), on_failure=lambda: order.append("failure"))
        self.assertEqual(order, [])
        self.queue.drain()

        self.assertEqual(order, ["failure"])
        self.assertEqual([str(exc) for exc in self.errors], ["connection refused"])

    def test_unexpected_errors_are_reraised_on_drain(self) -> None:
        runner = BackgroundRunner(self.queue, self.errors.append, _inline_spawn)

        def work() -> None:
            raise InvariantError("impossible")

        with self.assertLogs("kmipexplorer.runtime.updates", level="ERROR"):
            runner.submit("work", work, lambda _r: None)
        with self.assertRaises(InvariantError):
            self.queue.drain()
        self.assertEqual(self.errors, [])

    def test_real_threads_deliver_through_queue(self) -> None:
        runner = BackgroundRunner(self.queue, self.errors.append)
        release = threading.Event()
        results: list[str] = []
        worker_names: list[str] = []

        def work() -> str:
            worker_names.append(threading.current_thread().name)
            release.wait(2.0)
            return "ok"

        runner.submit("slow", work, results.append)
        self.assertEqual(runner.in_flight, 1)
        release.set()

        self.assertTrue(_wait_for(lambda: self.queue.pending() == 1))
        self.assertEqual(results, [])
        self.queue.drain()
        self.assertEqual(results, ["ok"])
        self.assertEqual(worker_names, ["kmipexplorer-slow"])


if __name__ == "__main__":
    unittest.main()
