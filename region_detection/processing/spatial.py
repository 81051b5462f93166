"""Approximate nearest-neighbour search over a restrictable point subset."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from scipy.spatial import cKDTree

from region_detection.core.types import PointArray, as_points

IndexArray = npt.NDArray[np.intp]


class SpatialIndex:
    """k-d tree over a point set, or over any subset of it.

    Returned indices always refer to the full point set passed at construction,
    whatever subset the tree currently covers.
    """

    def __init__(
        self,
        points: npt.ArrayLike,
        *,
        epsilon: float = 0.0,
        indices: npt.ArrayLike | None = None,
    ) -> None:
        self._points: PointArray = as_points(points)
        self.epsilon = float(epsilon)
        self._indices: IndexArray = np.empty(0, dtype=np.intp)
        self._tree: cKDTree | None = None
        self.rebuild(indices)

    @property
    def points(self) -> PointArray:
        return self._points

    @property
    def indices(self) -> IndexArray:
        return self._indices

    def __len__(self) -> int:
        return int(self._indices.size)

    def rebuild(self, indices: npt.ArrayLike | None = None) -> None:
        """Re-index the tree over ``indices`` (all points when None)."""
        if indices is None:
            self._indices = np.arange(self._points.shape[0], dtype=np.intp)
        else:
            self._indices = np.asarray(indices, dtype=np.intp).reshape(-1)
        self._tree = cKDTree(self._points[self._indices]) if self._indices.size else None

    def query(self, point: npt.ArrayLike, k: int = 1) -> tuple[npt.NDArray[np.float64], IndexArray]:
        """Up to ``k`` nearest neighbours of a single point, sorted by distance."""
        if self._tree is None or k <= 0:
            return np.empty(0, dtype=np.float64), np.empty(0, dtype=np.intp)
        k = min(k, self._indices.size)
        dists, local = self._tree.query(np.asarray(point, dtype=np.float64), k=k, eps=self.epsilon)
        dists = np.atleast_1d(dists)
        local = np.atleast_1d(local)
        # cKDTree pads missing neighbours with inf distance and an out-of-range index
        found = np.isfinite(dists)
        return dists[found], self._indices[local[found]]

    def nearest(self, points: npt.ArrayLike) -> tuple[npt.NDArray[np.float64], IndexArray]:
        """Nearest neighbour for every row of ``points``."""
        query = as_points(points)
        if self._tree is None or query.shape[0] == 0:
            return np.empty(0, dtype=np.float64), np.empty(0, dtype=np.intp)
        dists, local = self._tree.query(query, k=1, eps=self.epsilon)
        return np.asarray(dists, dtype=np.float64), self._indices[np.asarray(local, dtype=np.intp)]


__all__ = ["SpatialIndex"]
