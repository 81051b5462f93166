"""Split sequenced paths into contiguous runs at gaps."""

from __future__ import annotations

import numpy as np

from region_detection.config import MIN_POINT_DIST
from region_detection.core.types import Curve
from region_detection.utils.logger import LoggerType, get_logger

LOGGER = get_logger(__name__)


class Segmenter:
    """Cut a curve wherever two consecutive points are ``split_dist`` or more apart."""

    def __init__(self, split_dist: float, *, logger: LoggerType | None = None) -> None:
        self.split_dist = float(split_dist)
        self.logger = logger or LOGGER

    def split(self, curve: Curve) -> list[Curve]:
        pts = curve.points
        count = len(curve)
        if count == 0:
            return []

        gaps = np.linalg.norm(np.diff(pts, axis=0), axis=1)
        # a run ends at i when the gap to i + 1 is too large, and at the last point
        ends = np.append(np.flatnonzero(gaps >= self.split_dist), count - 1)

        runs: list[Curve] = []
        start = 0
        for end in ends:
            run = self._dedupe(pts[start : end + 1])
            self.logger.debug(
                "Creating sequence [{}, {}] with {} points", start, int(end), run.shape[0]
            )
            start = int(end) + 1
            if run.shape[0] <= 1:
                self.logger.debug("Ignoring segment of {} point(s)", run.shape[0])
                continue
            runs.append(Curve(run))

        self.logger.debug("Computed {} sequences", len(runs))
        return runs

    @staticmethod
    def _dedupe(points: np.ndarray) -> np.ndarray:
        kept = [points[0]]
        for point in points[1:]:
            if np.linalg.norm(point - kept[-1]) < MIN_POINT_DIST:
                continue
            kept.append(point)
        return np.asarray(kept)


def split(curve: Curve, split_dist: float) -> list[Curve]:
    return Segmenter(split_dist).split(curve)


__all__ = ["Segmenter", "split"]
