"""Rich-based progress reporter for terminal output."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


if TYPE_CHECKING:
    from types import TracebackType

    from photocache.core.ports import ProgressCallback


class RichProgressReporter:
    """Progress reporter drawing one "fetched N of M images" bar per task.

    The display goes to stderr so per-photo results printed on stdout stay
    clean. Bars are left on screen once the display stops unless
    transient is set.

    Example:
        with RichProgressReporter() as reporter:
            results = await store.fetch_images(photos, progress=reporter)
    """

    def __init__(self, console: Console | None = None, *, transient: bool = False) -> None:
        self._progress = Progress(
            SpinnerColumn(finished_text="[green]done"),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console if console is not None else Console(stderr=True),
            transient=transient,
        )
        self._tasks: dict[str, TaskID] = {}
        self._started = False

    def __enter__(self) -> RichProgressReporter:
        self._ensure_started()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()
        self._started = False

    def _ensure_started(self) -> None:
        if not self._started:
            self._progress.start()
            self._started = True

    def start_task(self, name: str, total: int) -> ProgressCallback:
        """Add a bar for a batch of images.

        Starts the display if the reporter is used outside a with block.

        Args:
            name: Label shown in front of the bar.
            total: Number of images in the batch.

        Returns:
            Callback taking (completed, total) image counts.
        """
        self._ensure_started()
        task_id = self._progress.add_task(name, total=total)
        self._tasks[name] = task_id

        def callback(completed: int, _total: int) -> None:
            self._progress.update(task_id, completed=completed)

        return callback

    def finish_task(self, name: str) -> None:
        """Fill the bar; failed images still count as handled."""
        task_id = self._tasks.pop(name, None)
        if task_id is None:
            return
        total = self._progress.tasks[task_id].total
        self._progress.update(task_id, completed=total)
