from __future__ import annotations

import os
from typing import Any, Dict

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .base import Reporter, TaskRecord, TaskStatus, get_verbosity

_STATUS_ICON = {
    TaskStatus.SUCCESS: "[green]✔[/]",
    TaskStatus.FAILED: "[red]✖[/]",
    TaskStatus.SKIPPED: "→",
}


class RichReporter(Reporter):
    """Progress bars for counted tasks, rules for sections."""

    def __init__(self, console: Console | None = None):
        super().__init__()
        self.console = console or Console(
            stderr=True, highlight=False, soft_wrap=False
        )
        self._transient = os.getenv(
            "ASSETREG_PROGRESS_TRANSIENT", "0"
        ).lower() in ("1", "true", "yes")
        self.progress: Progress | None = None
        self._progress_ids: Dict[str, TaskID] = {}

    def _ensure_progress(self) -> Progress:
        if self.progress is None:
            self.progress = Progress(
                SpinnerColumn(spinner_name="dots"),
                TextColumn("{task.description}"),
                BarColumn(bar_width=None),
                TextColumn("{task.completed}/{task.total}"),
                TimeElapsedColumn(),
                transient=self._transient,
                console=self.console,
                expand=True,
            )
            self.progress.start()
        return self.progress

    def _on_start(self, rec: TaskRecord) -> None:
        # Uncounted tasks (single file reads/writes) get no bar.
        if rec.total is None:
            return
        progress = self._ensure_progress()
        self._progress_ids[rec.task_id] = progress.add_task(rec.name, total=rec.total)

    def _on_progress(self, rec: TaskRecord, meta: Dict[str, Any]) -> None:
        pid = self._progress_ids.get(rec.task_id)
        if pid is not None and self.progress is not None:
            self.progress.update(pid, completed=rec.completed)

    def _on_end(self, rec: TaskRecord) -> None:
        pid = self._progress_ids.pop(rec.task_id, None)
        if pid is not None and self.progress is not None:
            self.progress.update(pid, completed=rec.total)
        self.console.print(
            f"{_STATUS_ICON.get(rec.status, '')} {rec.name}{rec.progress_text}"
            f" ({rec.duration:.2f}s){rec.stats()}"
        )
        if not self._progress_ids:
            self.flush()

    def summary(self, kind: str, **counts: Any) -> None:
        cells = "  ".join(f"[dim]{k}[/] {v}" for k, v in counts.items())
        self.console.print(f"[bold]{kind}[/]  {cells}")

    def status(self, message: str, **fields: Any) -> None:
        self.console.print(f"[green]INFO[/]: {message}")

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self.console.print(f"[cyan]VERB{level}[/]: {message}")

    def error(self, message: str, **fields: Any) -> None:
        self.console.print(f"[bold red]ERROR[/]: {message}")

    def warning(self, message: str, **fields: Any) -> None:
        self.console.print(f"[yellow]WARN[/]: {message}")

    def section(self, title: str) -> None:
        self.console.rule(title)

    def flush(self) -> None:
        if self.progress is not None:
            try:
                self.progress.stop()
            finally:
                self.progress = None
