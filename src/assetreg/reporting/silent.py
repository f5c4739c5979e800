from __future__ import annotations

from .base import Reporter


class SilentReporter(Reporter):
    """Keeps task bookkeeping, renders nothing."""

    def status(self, message, **fields):
        pass

    def error(self, message, **fields):
        pass

    def section(self, title):
        pass
