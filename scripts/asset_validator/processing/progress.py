"""
Progress reporting for entity list scans.
"""

from typing import Dict, Optional

from rich.console import Console
from rich.progress import Progress, BarColumn, TextColumn, TaskID


class ProgressReporter:
    """Receives scan progress of entity lists. The base class ignores it."""

    def start(self, name: str, total: int) -> None:
        pass

    def update(self, name: str, percent: float) -> None:
        pass

    def finish(self, name: str) -> None:
        pass

    def close(self) -> None:
        pass


NullProgressReporter = ProgressReporter


class RichProgressReporter(ProgressReporter):
    """Renders one progress bar per entity list on a rich console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self._progress: Optional[Progress] = None
        self._tasks: Dict[str, TaskID] = {}

    def start(self, name: str, total: int) -> None:
        if self._progress is None:
            self._progress = Progress(
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                console=self.console,
                transient=False,
            )
            self._progress.start()
        self._tasks[name] = self._progress.add_task(name, total=100)

    def update(self, name: str, percent: float) -> None:
        if self._progress is not None and name in self._tasks:
            self._progress.update(self._tasks[name], completed=percent)

    def finish(self, name: str) -> None:
        if self._progress is None or name not in self._tasks:
            return
        self._progress.update(self._tasks.pop(name), completed=100)
        if not self._tasks:
            self._progress.stop()
            self._progress = None

    def close(self) -> None:
        """Stop the live display, also when a scan was aborted."""
        self._tasks.clear()
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
