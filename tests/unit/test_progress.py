"""Tests for progress reporters."""

import pytest

from photocache.core.ports import NullProgressReporter, ProgressReporter


@pytest.mark.progress
class TestNullProgressReporter:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(NullProgressReporter(), ProgressReporter)

    def test_callback_is_a_no_op(self) -> None:
        reporter = NullProgressReporter()
        callback = reporter.start_task("images", 3)

        callback(1, 3)
        reporter.finish_task("images")


@pytest.mark.progress
class TestRichProgressReporter:
    def test_satisfies_protocol(self) -> None:
        from photocache.progress import RichProgressReporter

        assert isinstance(RichProgressReporter(), ProgressReporter)

    def test_callback_updates_task(self) -> None:
        from photocache.progress import RichProgressReporter

        with RichProgressReporter() as reporter:
            callback = reporter.start_task("images", 4)
            callback(2, 4)

            task = reporter._progress.tasks[0]
            assert task.total == 4
            assert task.completed == 2

    def test_finish_completes_partial_task(self) -> None:
        from photocache.progress import RichProgressReporter

        with RichProgressReporter() as reporter:
            callback = reporter.start_task("images", 5)
            callback(3, 5)
            reporter.finish_task("images")

            assert reporter._progress.tasks[0].completed == 5

    def test_finish_unknown_task_is_ignored(self) -> None:
        from photocache.progress import RichProgressReporter

        with RichProgressReporter() as reporter:
            reporter.finish_task("never-started")

    def test_start_task_outside_context_starts_display(self) -> None:
        from photocache.progress import RichProgressReporter

        reporter = RichProgressReporter()
        reporter.start_task("images", 1)
        try:
            assert reporter._started
        finally:
            reporter.__exit__(None, None, None)
