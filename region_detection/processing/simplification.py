"""Point reduction for curves: concave hull on loops, spacing-based decimation on all."""

from __future__ import annotations

from typing import Iterable

import numpy as np
import numpy.typing as npt
from scipy.spatial import Delaunay, QhullError

from region_detection.config import SimplificationConfig
from region_detection.core.types import Curve, PointArray, as_points
from region_detection.processing.sequencing import Sequencer
from region_detection.utils.logger import LoggerType, get_logger

LOGGER = get_logger(__name__)


def _plane_coordinates(points: PointArray) -> npt.NDArray[np.float64] | None:
    """Project points onto their best-fit plane; None when they span less than 2D."""
    centered = points - points.mean(axis=0)
    _, singular, vt = np.linalg.svd(centered, full_matrices=False)
    if singular.size < 2 or singular[1] <= 1e-9 * max(singular[0], 1.0):
        return None
    return centered @ vt[:2].T


def concave_hull(points: npt.ArrayLike, alpha: float) -> PointArray | None:
    """Boundary vertices of the alpha shape of ``points``.

    Delaunay triangles whose circumradius exceeds ``alpha`` are discarded; the
    vertices of edges owned by exactly one remaining triangle are returned in
    input order (unsequenced). Returns None when no valid hull exists.
    """
    pts = as_points(points)
    _, first = np.unique(pts, axis=0, return_index=True)
    pts = pts[np.sort(first)]
    if pts.shape[0] < 3:
        return None

    plane = _plane_coordinates(pts)
    if plane is None:
        return None
    try:
        simplices = Delaunay(plane).simplices
    except QhullError:
        return None

    a, b, c = (plane[simplices[:, i]] for i in range(3))
    len_a = np.linalg.norm(b - c, axis=1)
    len_b = np.linalg.norm(a - c, axis=1)
    len_c = np.linalg.norm(a - b, axis=1)
    ab, ac = b - a, c - a
    area = 0.5 * np.abs(ab[:, 0] * ac[:, 1] - ab[:, 1] * ac[:, 0])
    with np.errstate(divide="ignore", invalid="ignore"):
        radius = np.where(area > 0, len_a * len_b * len_c / (4.0 * area), np.inf)

    kept = simplices[radius <= alpha]
    if kept.shape[0] == 0:
        return None

    edges = np.sort(np.vstack([kept[:, [0, 1]], kept[:, [1, 2]], kept[:, [0, 2]]]), axis=1)
    unique_edges, counts = np.unique(edges, axis=0, return_counts=True)
    vertices = np.unique(unique_edges[counts == 1])
    if vertices.size < 3:
        return None
    return pts[vertices]


class Simplifier:
    """Hull simplification of closed curves and minimum-length decimation."""

    def __init__(
        self,
        config: SimplificationConfig,
        *,
        sequencer: Sequencer | None = None,
        logger: LoggerType | None = None,
    ) -> None:
        self.config = config
        self.logger = logger or LOGGER
        self.sequencer = sequencer or Sequencer(logger=self.logger)

    def simplify_hull(self, curve: Curve) -> Curve:
        if not curve.closed or len(curve) < self.config.min_points:
            return curve
        hull = concave_hull(curve.points[:-1], self.config.alpha)
        if hull is None:
            self.logger.debug("Concave hull skipped for curve with {} points", len(curve))
            return curve
        simplified = self.sequencer.sequence(hull).closed_copy()
        self.logger.debug(
            "Concave hull simplified cloud from {} to {}", len(curve), len(simplified)
        )
        return simplified

    def simplify_hulls(self, curves: Iterable[Curve]) -> list[Curve]:
        return [self.simplify_hull(curve) for curve in curves]

    def decimate(self, curve: Curve) -> Curve:
        """Drop interior points closer than ``min_dist`` to the last kept point."""
        if len(curve) <= 2:
            return curve
        pts = curve.points
        kept = [pts[0]]
        for point in pts[1:-1]:
            if np.linalg.norm(point - kept[-1]) > self.config.min_dist:
                kept.append(point)
        kept.append(pts[-1])
        return Curve(np.asarray(kept), closed=curve.closed)

    def decimate_all(self, curves: Iterable[Curve]) -> list[Curve]:
        return [self.decimate(curve) for curve in curves]

    def drop_short(self, curves: Iterable[Curve], min_num_points: int) -> list[Curve]:
        kept = []
        for curve in curves:
            if len(curve) < min_num_points:
                self.logger.debug("Dropping curve with {} points", len(curve))
                continue
            kept.append(curve)
        return kept


__all__ = ["Simplifier", "concave_hull"]
