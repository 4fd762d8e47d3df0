"""Tests for deadline-aware operation execution.

Handlers block on events the test controls, so outcomes are decided by the
executor's deadline and cancellation handling rather than by sleeps.
"""

from __future__ import annotations

import threading
import unittest

from devdash.field import AsyncExecutor, OperationOutcome, build_adapter, format_duration
from devdash.messages import MessageType

WAIT = 2.0


class BlockingEdit:
    def __init__(self, timeout: float = 0.0) -> None:
        self.val = "initial"
        self.release = threading.Event()
        self.started = threading.Event()
        self.finished = threading.Event()
        self._timeout = timeout

    def name(self) -> str:
        return "slow"

    def label(self) -> str:
        return "Slow"

    def value(self) -> str:
        return self.val

    def change(self, new_value: str) -> None:
        self.started.set()
        try:
            self.release.wait(WAIT)
            self.val = new_value
        finally:
            self.finished.set()

    def timeout(self) -> float:
        return self._timeout


class QuickEdit(BlockingEdit):
    def change(self, new_value: str) -> None:
        self.val = new_value


class FailingEdit(BlockingEdit):
    def change(self, new_value: str) -> None:
        raise ValueError("boom")


class TrackedEdit(QuickEdit):
    def __init__(self) -> None:
        super().__init__()
        self.op_id = ""

    def get_last_operation_id(self) -> str:
        return self.op_id

    def set_last_operation_id(self, operation_id: str) -> None:
        self.op_id = operation_id


class Button:
    def __init__(self) -> None:
        self.runs = 0

    def name(self) -> str:
        return "btn"

    def label(self) -> str:
        return "Press"

    def execute(self) -> None:
        self.runs += 1


class Recorder:
    def __init__(self) -> None:
        self.calls: list[tuple[str, MessageType | None, str]] = []
        self.lock = threading.Lock()

    def __call__(self, content: str, msg_type: MessageType | None, tracking_key: str) -> None:
        with self.lock:
            self.calls.append((content, msg_type, tracking_key))


def make_executor(**kwargs) -> AsyncExecutor:
    counter = iter(range(1, 1000))
    return AsyncExecutor(new_id=lambda: f"op-{next(counter)}", **kwargs)


class FormatDurationTests(unittest.TestCase):
    def test_formats(self) -> None:
        self.assertEqual(format_duration(0.05), "50ms")
        self.assertEqual(format_duration(2), "2s")
        self.assertEqual(format_duration(1.5), "1.5s")
        self.assertEqual(format_duration(120), "2m0s")


class AsyncExecutorTests(unittest.TestCase):
    def test_deadline_expiry_logs_timeout_and_no_result(self) -> None:
        handler = BlockingEdit(timeout=0.05)
        publish = Recorder()
        executor = make_executor()

        handle = executor.run(build_adapter(handler), "new", publish)
        self.assertTrue(handle.wait(WAIT))
        self.assertIs(handle.outcome, OperationOutcome.TIMED_OUT)
        self.assertEqual(publish.calls, [("Operation timed out after 50ms", MessageType.WARNING, "slow")])
        self.assertFalse(executor.is_running)

        # A late finish must not produce a result entry.
        handler.release.set()
        self.assertTrue(handler.finished.wait(WAIT))
        self.assertEqual(len(publish.calls), 1)

    def test_zero_timeout_never_times_out(self) -> None:
        handler = BlockingEdit(timeout=0)
        publish = Recorder()
        executor = make_executor()

        handle = executor.run(build_adapter(handler), "done value", publish)
        self.assertTrue(handler.started.wait(WAIT))
        self.assertFalse(handle.wait(0.1))
        self.assertTrue(executor.is_running)

        handler.release.set()
        self.assertTrue(handle.wait(WAIT))
        self.assertIs(handle.outcome, OperationOutcome.COMPLETED)
        self.assertEqual(publish.calls, [("done value", None, "slow")])

    def test_fault_is_contained_and_logged(self) -> None:
        publish = Recorder()
        executor = make_executor()

        with self.assertLogs("devdash.field.executor", level="ERROR"):
            handle = executor.run(build_adapter(FailingEdit()), "x", publish)
            self.assertTrue(handle.wait(WAIT))

        self.assertIs(handle.outcome, OperationOutcome.FAILED)
        self.assertIsInstance(handle.error, ValueError)
        self.assertEqual(publish.calls, [("slow failed: boom", MessageType.ERROR, "slow")])
        self.assertFalse(executor.is_running)

    def test_cancel_settles_as_cancelled(self) -> None:
        handler = BlockingEdit()
        publish = Recorder()
        executor = make_executor()

        handle = executor.run(build_adapter(handler), "x", publish)
        self.assertTrue(handler.started.wait(WAIT))
        self.assertTrue(executor.cancel())
        self.assertTrue(handle.wait(WAIT))

        self.assertIs(handle.outcome, OperationOutcome.CANCELLED)
        self.assertEqual(publish.calls, [("Operation was cancelled", MessageType.WARNING, "slow")])
        handler.release.set()

    def test_cancel_when_idle_returns_false(self) -> None:
        self.assertFalse(make_executor().cancel())

    def test_running_operation_exposes_tracking_key(self) -> None:
        handler = BlockingEdit()
        executor = make_executor()

        handle = executor.run(build_adapter(handler), "x", Recorder())
        self.assertTrue(handler.started.wait(WAIT))
        self.assertTrue(executor.operation.is_running)
        self.assertEqual(executor.current_tracking_key(), "slow")

        handler.release.set()
        self.assertTrue(handle.wait(WAIT))
        self.assertEqual(executor.current_tracking_key(), "")

    def test_message_tracker_reuses_last_operation_id(self) -> None:
        handler = TrackedEdit()
        adapter = build_adapter(handler)
        publish = Recorder()
        executor = make_executor()

        first = executor.run(adapter, "a", publish)
        self.assertTrue(first.wait(WAIT))
        self.assertEqual(first.tracking_key, "op-1")
        self.assertEqual(handler.op_id, "op-1")

        second = executor.run(adapter, "b", publish)
        self.assertTrue(second.wait(WAIT))
        self.assertEqual(second.tracking_key, "op-1")
        self.assertEqual([call[2] for call in publish.calls], ["op-1", "op-1"])

    def test_execution_without_value_logs_nothing_on_success(self) -> None:
        handler = Button()
        publish = Recorder()
        handle = make_executor().run(build_adapter(handler), "", publish)

        self.assertTrue(handle.wait(WAIT))
        self.assertEqual(handler.runs, 1)
        self.assertEqual(publish.calls, [])

    def test_settled_callback_receives_handle(self) -> None:
        settled = []
        done = threading.Event()

        def on_settled(handle) -> None:
            settled.append(handle)
            done.set()

        executor = make_executor(on_settled=on_settled)
        handle = executor.run(build_adapter(QuickEdit()), "v", Recorder())

        self.assertTrue(done.wait(WAIT))
        self.assertEqual(settled, [handle])


if __name__ == "__main__":
    unittest.main()
