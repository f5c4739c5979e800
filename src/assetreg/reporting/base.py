"""Reporter protocol shared by the CLI backends.

A reporter receives three kinds of events: task lifecycle (start, progress,
end), free-form messages (status, verbose, warning, error) and operation
summaries. Task bookkeeping lives here; backends only render.
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, Optional

__all__ = [
    "TaskStatus",
    "TaskRecord",
    "Reporter",
    "set_reporter",
    "get_reporter",
    "set_verbosity",
    "get_verbosity",
    "task",
    "format_fields",
    "SUMMARY_KEYS",
]

# Task metadata keys echoed on completion lines
SUMMARY_KEYS = ("names", "assets", "records", "bytes", "issues")


class TaskStatus(Enum):
    RUNNING = auto()
    SUCCESS = auto()
    FAILED = auto()
    SKIPPED = auto()


@dataclass(slots=True)
class TaskRecord:
    task_id: str
    name: str
    total: Optional[int] = None
    completed: int = 0
    status: TaskStatus = TaskStatus.RUNNING
    start_time: float = field(default_factory=time.time)
    end_time: float | None = None
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration(self) -> float:
        return (self.end_time - self.start_time) if self.end_time else 0.0

    @property
    def progress_text(self) -> str:
        return f" {self.completed}/{self.total}" if self.total is not None else ""

    def stats(self) -> str:
        parts = [f"{k}={self.meta[k]}" for k in SUMMARY_KEYS if k in self.meta]
        return f" [{' '.join(parts)}]" if parts else ""


def format_fields(fields: Dict[str, Any]) -> str:
    return " ".join(f"{k}={v}" for k, v in fields.items())


_VERBOSITY: int = 0  # set by the CLI (-v repeats)


def set_verbosity(level: int) -> None:
    global _VERBOSITY
    _VERBOSITY = max(0, level)


def get_verbosity() -> int:
    return _VERBOSITY


class Reporter:
    """Base reporter.

    Subclasses render through the ``_on_*`` hooks and the message methods;
    the public task methods keep the :class:`TaskRecord` table up to date and
    ignore ids they never saw started.
    """

    def __init__(self) -> None:
        self._tasks: Dict[str, TaskRecord] = {}

    # Task lifecycle ---------------------------------------------------------
    def start_task(
        self, task_id: str, name: str, total: int | None = None, **meta: Any
    ) -> TaskRecord:
        rec = TaskRecord(task_id, name, total, meta=dict(meta))
        self._tasks[task_id] = rec
        self._on_start(rec)
        return rec

    def advance(self, task_id: str, step: int = 1, **meta: Any) -> None:
        rec = self._tasks.get(task_id)
        if rec is None:
            return
        rec.completed += step
        rec.meta.update(meta)
        self._on_progress(rec, meta)

    def end_task(
        self,
        task_id: str,
        status: TaskStatus = TaskStatus.SUCCESS,
        **final_meta: Any,
    ) -> None:
        rec = self._tasks.pop(task_id, None)
        if rec is None:
            return
        rec.status = status
        rec.end_time = time.time()
        rec.meta.update(final_meta)
        self._on_end(rec)

    def _on_start(self, rec: TaskRecord) -> None:
        pass

    def _on_progress(self, rec: TaskRecord, meta: Dict[str, Any]) -> None:
        pass

    def _on_end(self, rec: TaskRecord) -> None:
        pass

    # Messages ---------------------------------------------------------------
    def status(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        pass

    def error(self, message: str, **fields: Any) -> None:
        raise NotImplementedError

    def warning(self, message: str, **fields: Any) -> None:
        self.status(message, **fields)

    def summary(self, kind: str, **counts: Any) -> None:
        """Report the outcome of a read/write/populate/... operation."""
        self.status(f"{kind.capitalize()} summary: {format_fields(counts)}")

    def section(self, title: str) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        pass


_ACTIVE_REPORTER: Reporter | None = None


def set_reporter(rep: Reporter) -> None:
    global _ACTIVE_REPORTER
    _ACTIVE_REPORTER = rep


def get_reporter() -> Reporter:
    global _ACTIVE_REPORTER
    if _ACTIVE_REPORTER is None:
        from .plain import PlainReporter  # local import to avoid cycle

        _ACTIVE_REPORTER = PlainReporter(stream=sys.stderr)
    return _ACTIVE_REPORTER


@contextmanager
def task(
    task_id: str, name: str, total: int | None = None, **meta: Any
) -> Iterator[TaskRecord]:
    """Run a block as a reported task.

    The yielded record's ``meta`` can be filled in by the block; its
    :data:`SUMMARY_KEYS` are echoed when the task ends. A block that sets
    ``status`` (e.g. to SKIPPED) ends the task with that status.
    """
    rep = get_reporter()
    rec = rep.start_task(task_id, name, total, **meta)
    try:
        yield rec
    except Exception:
        rep.end_task(task_id, TaskStatus.FAILED)
        raise
    else:
        if rec.status is TaskStatus.RUNNING:
            rec.status = TaskStatus.SUCCESS
        rep.end_task(task_id, rec.status)
