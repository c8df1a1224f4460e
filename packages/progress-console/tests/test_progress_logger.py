"""Tests for progress_console.progress_logger"""
from unittest.mock import MagicMock

import pytest

from progress_console.events import (
    EndOutputEvent,
    LogEvent,
    ProgressCompleteEvent,
    ProgressEvent,
    ProgressStartEvent,
)
from progress_console.progress_logger import ProgressLoggerFactory
from progress_console.style import Style


@pytest.fixture
def listener():
    return MagicMock()


def _events(listener):
    return [c.args[0] for c in listener.on_output.call_args_list]


class TestProgressLoggerFactory:
    def test_start_emits_event(self, listener):
        factory = ProgressLoggerFactory(listener)
        build = factory.start("Build", "INITIALIZING")
        assert build.operation_id == 1
        assert _events(listener) == [ProgressStartEvent(1, None, "Build", "INITIALIZING")]

    def test_child_references_parent(self, listener):
        factory = ProgressLoggerFactory(listener)
        build = factory.start("Build")
        task = factory.start(":compile", parent=build)
        assert task.parent is build
        assert _events(listener)[1] == ProgressStartEvent(2, 1, ":compile", "")

    def test_log_and_end(self, listener):
        factory = ProgressLoggerFactory(listener)
        factory.log("hello", Style.INFO)
        factory.end()
        assert _events(listener) == [LogEvent("hello", Style.INFO), EndOutputEvent()]


class TestProgressLogger:
    def test_progress_and_complete(self, listener):
        op = ProgressLoggerFactory(listener).start("x")
        op.progress("half")
        op.completed("done")
        assert _events(listener)[1:] == [ProgressEvent(1, "half"), ProgressCompleteEvent(1, "done")]
        assert op.completed_already

    def test_no_progress_after_completion(self, listener):
        op = ProgressLoggerFactory(listener).start("x")
        op.completed()
        with pytest.raises(RuntimeError):
            op.progress("late")
        with pytest.raises(RuntimeError):
            op.completed()

    def test_context_manager_completes(self, listener):
        with ProgressLoggerFactory(listener).start("x") as op:
            op.progress("working")
        assert _events(listener)[-1] == ProgressCompleteEvent(1, "")

    def test_context_manager_marks_failure(self, listener):
        with pytest.raises(KeyError):
            with ProgressLoggerFactory(listener).start("x"):
                raise KeyError("boom")
        assert _events(listener)[-1] == ProgressCompleteEvent(1, "FAILED")

    def test_explicit_completion_inside_block(self, listener):
        with ProgressLoggerFactory(listener).start("x") as op:
            op.completed("early")
        assert _events(listener).count(ProgressCompleteEvent(1, "early")) == 1
        assert len(_events(listener)) == 2
