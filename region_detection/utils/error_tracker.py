# region_detection/utils/error_tracker.py
"""Centralised error tracking for a single detection run."""

from __future__ import annotations

import traceback
from contextlib import contextmanager
from dataclasses import dataclass, field

from region_detection.utils.logger import get_logger


@dataclass(slots=True)
class ErrorTracker:
    """Collect failure messages keyed by pipeline stage."""

    context: str = "ErrorTracker"
    errors: dict[str, list[str]] = field(default_factory=dict)

    def record(self, key: str, message: str) -> None:
        logger = get_logger(self.context)
        logger.error("{}: {}", key, message)
        self.errors.setdefault(key, []).append(message)

    def summary(self) -> dict[str, list[str]]:
        if not self.errors:
            return {}
        logger = get_logger(self.context)
        for key, messages in self.errors.items():
            logger.warning("Encountered {} issues for {}", len(messages), key)
        return {key: list(messages) for key, messages in self.errors.items()}

    def clear(self) -> None:
        self.errors.clear()

    def __bool__(self) -> bool:
        return bool(self.errors)


@contextmanager
def error_scope(tracker: ErrorTracker, key: str):
    """Record an escaping exception under ``key`` and re-raise it."""
    try:
        yield
    except Exception as exc:
        tracker.record(key, f"{type(exc).__name__}: {exc}")
        get_logger(tracker.context).debug("Traceback:\n{}", traceback.format_exc())
        raise


__all__ = ["ErrorTracker", "error_scope"]
