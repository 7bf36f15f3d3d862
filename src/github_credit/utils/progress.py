"""Per-collection progress reporting."""

from typing import Optional

from rich.progress import Progress, TaskID


class PageTicker:
    """Counts fetched pages of one collection on a shared rich ``Progress``.

    Callable with no arguments, so it can be handed to the pager as its
    ``on_page`` callback. Without a ``Progress`` every call is a no-op.
    """

    def __init__(
        self,
        progress: Optional[Progress],
        description: str,
        total: Optional[int] = None,
    ):
        self._progress = progress
        self._task: Optional[TaskID] = None
        if progress is not None:
            self._task = progress.add_task(description, total=total)

    def __call__(self) -> None:
        if self._progress is not None and self._task is not None:
            self._progress.advance(self._task)

    def finish(self) -> None:
        """Remove the task from the display."""
        if self._progress is not None and self._task is not None:
            self._progress.remove_task(self._task)
            self._task = None

    def __enter__(self) -> "PageTicker":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.finish()
