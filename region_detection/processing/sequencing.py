"""Greedy nearest-neighbour ordering of unordered boundary points."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from region_detection.core.types import Curve, PointArray, as_points
from region_detection.processing.spatial import SpatialIndex
from region_detection.utils.logger import LoggerType, get_logger

LOGGER = get_logger(__name__)

# neighbours fetched per query before the tree is rebuilt over unvisited points
_CANDIDATES = 8


class Sequencer:
    """Reorder a point set into a path by repeated nearest-neighbour extension.

    The chain starts at the first input point. Whenever the next neighbour is
    closer to the chain's start than to the point just added, the chain is
    reversed first so it keeps growing from the end nearest to new material.
    """

    def __init__(self, epsilon: float = 0.0, *, logger: LoggerType | None = None) -> None:
        self.epsilon = float(epsilon)
        self.logger = logger or LOGGER

    def sequence(self, points: npt.ArrayLike) -> Curve:
        pts = as_points(points)
        count = pts.shape[0]
        if count <= 1:
            return Curve(pts)

        index = SpatialIndex(pts, epsilon=self.epsilon)
        unvisited = np.ones(count, dtype=bool)
        in_chain = np.zeros(count, dtype=bool)
        chain: list[int] = []
        current = 0

        for _ in range(count + 1):
            unvisited[current] = False
            if not unvisited.any():
                break

            found, dist = self._nearest_unvisited(index, pts[current], unvisited)
            if found is None:
                self.logger.warning(
                    "Nearest neighbour search found no points close to {}", pts[current].tolist()
                )
                break

            if not chain:
                chain.append(current)
                in_chain[current] = True

            if in_chain[found]:
                self.logger.warning("Found repeated point {} during sequencing, skipping", found)
                continue

            start_dist = float(np.linalg.norm(pts[chain[0]] - pts[found]))
            if start_dist < dist:
                chain.reverse()

            chain.append(found)
            in_chain[found] = True
            current = found

        if not chain:
            chain.append(0)
        self.logger.debug("Sequenced {} points from {}", len(chain), count)
        return Curve(pts[chain])

    def _nearest_unvisited(
        self, index: SpatialIndex, point: PointArray, unvisited: npt.NDArray[np.bool_]
    ) -> tuple[int | None, float]:
        _, found = index.query(point, k=_CANDIDATES)
        keep = unvisited[found]
        if keep.any():
            first = int(np.argmax(keep))
            return int(found[first]), float(np.linalg.norm(index.points[found[first]] - point))

        index.rebuild(np.flatnonzero(unvisited))
        _, found = index.query(point, k=1)
        if found.size == 0:
            return None, float("inf")
        return int(found[0]), float(np.linalg.norm(index.points[found[0]] - point))


def sequence(points: npt.ArrayLike, epsilon: float = 0.0) -> Curve:
    return Sequencer(epsilon).sequence(points)


__all__ = ["Sequencer", "sequence"]
