"""Open/closed classification of sequenced curves."""

from __future__ import annotations

from typing import Iterable

from region_detection.core.types import Curve
from region_detection.utils.logger import LoggerType, get_logger

LOGGER = get_logger(__name__)


class LoopCloser:
    """File curves as closed when their endpoints are within ``max_dist``."""

    def __init__(self, max_dist: float, *, logger: LoggerType | None = None) -> None:
        self.max_dist = float(max_dist)
        self.logger = logger or LOGGER

    def is_closed(self, curve: Curve) -> bool:
        return len(curve) > 0 and curve.endpoint_gap() < self.max_dist

    def close(self, curve: Curve) -> Curve | None:
        """Closed copy of ``curve`` or None when its endpoints are too far apart."""
        if not self.is_closed(curve):
            return None
        return curve.closed_copy()

    def classify(self, curves: Iterable[Curve]) -> tuple[list[Curve], list[Curve]]:
        closed: list[Curve] = []
        open_: list[Curve] = []
        for curve in curves:
            loop = self.close(curve)
            if loop is not None:
                closed.append(loop)
                self.logger.debug("Found closed curve with {} points", len(loop))
            else:
                open_.append(curve.as_open())
                self.logger.debug("Found open curve with {} points", len(curve))
        return closed, open_


def classify(curves: Iterable[Curve], max_dist: float) -> tuple[list[Curve], list[Curve]]:
    return LoopCloser(max_dist).classify(curves)


__all__ = ["LoopCloser", "classify"]
