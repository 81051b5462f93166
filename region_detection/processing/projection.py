"""Contour pixel lookup in organized point clouds."""

from __future__ import annotations

from typing import Sequence

import numpy as np
import numpy.typing as npt

from region_detection.core.geometry.transforms import is_orthonormal, transform_points
from region_detection.core.result import ErrorKind, Result
from region_detection.core.types import PointArray
from region_detection.utils.logger import LoggerType, get_logger

LOGGER = get_logger(__name__)


def finite_rows(points: npt.NDArray[np.float64]) -> PointArray:
    """Drop rows holding any NaN or infinite coordinate."""
    return points[np.isfinite(points).all(axis=1)]


class PointProjector:
    """Map (x=column, y=row) contour pixels to 3D points of an organized cloud.

    The looked-up points are moved by the frame transform and invalid
    (non-finite) points are dropped.
    """

    def __init__(self, *, logger: LoggerType | None = None) -> None:
        self.logger = logger or LOGGER

    @staticmethod
    def validate(contours: Sequence[npt.NDArray[np.int64]], cloud: np.ndarray) -> Result:
        if cloud.ndim != 3 or cloud.shape[2] < 3 or cloud.shape[0] <= 1:
            return Result.failure(
                ErrorKind.INPUT, f"Point cloud is not organized, shape {cloud.shape}"
            )
        if len(contours) == 0:
            return Result.failure(ErrorKind.INPUT, "Contour list is empty")

        height, width = cloud.shape[:2]
        for i, contour in enumerate(contours):
            if contour.shape[0] == 0:
                return Result.failure(ErrorKind.INPUT, f"Contour {i} is empty")
            xs, ys = contour[:, 0], contour[:, 1]
            outside = (xs < 0) | (xs >= width) | (ys < 0) | (ys >= height)
            if outside.any():
                x, y = contour[int(np.argmax(outside))]
                return Result.failure(
                    ErrorKind.INPUT,
                    f"Contour {i} pixel ({x}, {y}) outside cloud of size {width}x{height}",
                )
        return Result.success()

    def project(
        self,
        contours: Sequence[npt.ArrayLike],
        cloud: npt.ArrayLike,
        transform: npt.ArrayLike | None = None,
    ) -> tuple[Result, list[PointArray]]:
        pixels = [np.asarray(c, dtype=np.int64).reshape(-1, 2) for c in contours]
        grid = np.asarray(cloud, dtype=np.float64)
        status = self.validate(pixels, grid)
        if not status:
            return status, []

        matrix = np.eye(4) if transform is None else np.asarray(transform, dtype=np.float64)
        if not is_orthonormal(matrix[:3, :3]):
            return Result.failure(ErrorKind.INPUT, "Frame transform rotation is not orthonormal"), []
        projected: list[PointArray] = []
        for contour in pixels:
            raw = grid[contour[:, 1], contour[:, 0], :3]
            points = finite_rows(transform_points(raw, matrix))
            if points.shape[0] < raw.shape[0]:
                self.logger.debug(
                    "Removed {} invalid points from contour", raw.shape[0] - points.shape[0]
                )
            projected.append(points)
        return status, projected

    @staticmethod
    def valid_cloud(cloud: npt.ArrayLike, transform: npt.ArrayLike | None = None) -> PointArray:
        """All finite points of an organized cloud, transformed."""
        grid = np.asarray(cloud, dtype=np.float64)
        flat = grid[..., :3].reshape(-1, 3)
        matrix = np.eye(4) if transform is None else np.asarray(transform, dtype=np.float64)
        return finite_rows(transform_points(finite_rows(flat), matrix))


__all__ = ["PointProjector", "finite_rows"]
