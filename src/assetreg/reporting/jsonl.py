from __future__ import annotations

import json
import sys
from typing import Any, Dict

from .base import Reporter, TaskRecord, format_fields, get_verbosity


class JsonLinesReporter(Reporter):
    """One JSON object per line, for tooling that consumes CLI output.

    Events: ``task_start``, ``task_progress``, ``task_end``, ``status``,
    ``section`` and ``summary``. Summaries carry their counters as typed
    fields next to the human readable ``raw`` line.
    """

    def __init__(self, stream=None):
        super().__init__()
        self.stream = stream or sys.stdout

    def _emit(self, event: str, **payload: Any) -> None:
        self.stream.write(json.dumps({"event": event, **payload}, sort_keys=True) + "\n")

    def _message(self, level: str, message: str, fields: Dict[str, Any]) -> None:
        self._emit("status", message=message, level=level, **fields)

    def _on_start(self, rec: TaskRecord) -> None:
        self._emit(
            "task_start", id=rec.task_id, name=rec.name, total=rec.total, **rec.meta
        )

    def _on_progress(self, rec: TaskRecord, meta: Dict[str, Any]) -> None:
        self._emit("task_progress", id=rec.task_id, completed=rec.completed, **meta)

    def _on_end(self, rec: TaskRecord) -> None:
        self._emit(
            "task_end",
            **rec.meta,
            id=rec.task_id,
            status=rec.status.name.lower(),
            completed=rec.completed,
            total=rec.total,
            duration_seconds=rec.duration,
        )

    def summary(self, kind: str, **counts: Any) -> None:
        raw = f"{kind.capitalize()} summary: {format_fields(counts)}"
        self._emit("summary", summary_type=kind, raw=raw, **counts)

    def status(self, message: str, **fields: Any) -> None:
        self._message("info", message, fields)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self._message(f"verbose{level}", message, fields)

    def error(self, message: str, **fields: Any) -> None:
        self._message("error", message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._message("warning", message, fields)

    def section(self, title: str) -> None:
        self._emit("section", title=title)
