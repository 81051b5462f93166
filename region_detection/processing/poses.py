"""Per-point pose synthesis along curves."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from region_detection.core.geometry.transforms import make_pose, rotation_from_axes
from region_detection.core.result import ErrorKind, Result
from region_detection.core.types import Curve, NormalSamples, PoseArray
from region_detection.processing.spatial import SpatialIndex
from region_detection.utils.logger import LoggerType, get_logger

LOGGER = get_logger(__name__)

_EPS = 1e-12


def _unit(vector: npt.NDArray[np.float64]) -> npt.NDArray[np.float64] | None:
    norm = float(np.linalg.norm(vector))
    if norm < _EPS:
        return None
    return vector / norm


def _perpendicular(vector: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Any unit vector orthogonal to ``vector``."""
    axis = np.zeros(3)
    axis[int(np.argmin(np.abs(vector)))] = 1.0
    perpendicular = np.cross(vector, axis)
    return perpendicular / np.linalg.norm(perpendicular)


class PoseSynthesizer:
    """Build a pose at each curve point from its tangent and nearest surface normal.

    Rotation columns are (tangent, binormal, normal); the tangent points to the
    next point, and at the last point it continues the direction from the
    previous one.
    """

    def __init__(
        self,
        samples: NormalSamples,
        *,
        epsilon: float = 0.0,
        logger: LoggerType | None = None,
    ) -> None:
        self.samples = samples
        self.logger = logger or LOGGER
        self._index = SpatialIndex(samples.points, epsilon=epsilon)

    def synthesize(self, curve: Curve) -> tuple[Result, PoseArray]:
        pts = curve.points
        count = len(curve)
        if count == 0:
            return Result.success(), np.empty((0, 4, 4))
        if len(self.samples) == 0:
            return (
                Result.failure(ErrorKind.GEOMETRY, "No normal samples available for pose lookup"),
                np.empty((0, 4, 4)),
            )

        _, found = self._index.nearest(pts)
        normals = self.samples.normals[found]
        poses = np.empty((count, 4, 4), dtype=np.float64)
        prev_x: npt.NDArray[np.float64] | None = None

        for i in range(count):
            if i < count - 1:
                x = _unit(pts[i + 1] - pts[i])
            elif count > 1:
                x = _unit(pts[i] - pts[i - 1])
            else:
                x = None
            if x is None:
                x = prev_x

            z = _unit(normals[i])
            if z is None:
                self.logger.debug("Zero normal at point {}, using +Z", i)
                z = np.array([0.0, 0.0, 1.0])
            if x is None or np.linalg.norm(np.cross(z, x)) < 1e-9:
                x = _perpendicular(z)

            y = np.cross(z, x)
            y /= np.linalg.norm(y)
            z = np.cross(x, y)
            z /= np.linalg.norm(z)
            poses[i] = make_pose(pts[i], rotation_from_axes(x, y, z))
            prev_x = x

        return Result.success(), poses


__all__ = ["PoseSynthesizer"]
