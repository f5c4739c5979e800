from __future__ import annotations

import sys
from typing import Any, Dict

from .base import Reporter, TaskRecord, TaskStatus, get_verbosity

ICONS = {
    TaskStatus.SUCCESS: "✔",
    TaskStatus.FAILED: "✖",
    TaskStatus.SKIPPED: "→",
}

_LEVEL_COLORS = {"INFO": "32", "WARN": "33", "ERROR": "31"}


class PlainReporter(Reporter):
    """Line-oriented reporter for terminals and CI logs."""

    def __init__(self, stream=None, use_color: bool | None = None):
        super().__init__()
        self.stream = stream or sys.stderr
        if use_color is None:
            use_color = getattr(self.stream, "isatty", lambda: False)()
        self.use_color = use_color

    def _line(self, tag: str, text: str, color: str | None = None) -> None:
        color = color or _LEVEL_COLORS.get(tag)
        if self.use_color and color:
            tag = f"\x1b[{color}m{tag}\x1b[0m"
        self.stream.write(f"{tag}: {text}\n")

    def _on_progress(self, rec: TaskRecord, meta: Dict[str, Any]) -> None:
        if get_verbosity() < 1:
            return
        item = meta.get("current_item") or f"item#{rec.completed}"
        total = rec.total if rec.total is not None else "?"
        self.stream.write(f"   · {rec.name}: {item} ({rec.completed}/{total})\n")

    def _on_end(self, rec: TaskRecord) -> None:
        self.stream.write(
            f" {ICONS.get(rec.status, '?')} {rec.name}{rec.progress_text}"
            f" ({rec.duration:.2f}s){rec.stats()}\n"
        )

    def status(self, message: str, **fields: Any) -> None:
        self._line("INFO", message)

    def verbose(self, message: str, *, level: int = 1, **fields: Any) -> None:
        if get_verbosity() >= level:
            self._line(f"VERB{level}", message, color="36")

    def error(self, message: str, **fields: Any) -> None:
        self._line("ERROR", message)

    def warning(self, message: str, **fields: Any) -> None:
        self._line("WARN", message)

    def section(self, title: str) -> None:
        self.stream.write(f"\n[{title}]\n")
