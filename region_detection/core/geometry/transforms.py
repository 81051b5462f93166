"""Rigid transformation utilities shared by the pipeline stages."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import numpy.typing as npt

from region_detection.utils.logger import get_logger

LOGGER = get_logger(__name__)


def make_transformation(translation: Iterable[float], rpy: Iterable[float]) -> npt.NDArray[np.float64]:
    """4x4 transform from a translation and roll/pitch/yaw in radians (R = Rz Ry Rx)."""
    tx, ty, tz = translation
    roll, pitch, yaw = rpy
    cx, cy, cz = np.cos([roll, pitch, yaw])
    sx, sy, sz = np.sin([roll, pitch, yaw])
    rotation = np.array(
        [
            [cy * cz, sx * sy * cz - cx * sz, cx * sy * cz + sx * sz],
            [cy * sz, sx * sy * sz + cx * cz, cx * sy * sz - sx * cz],
            [-sy, sx * cy, cx * cy],
        ]
    )
    transform = np.eye(4)
    transform[:3, :3] = rotation
    transform[:3, 3] = np.array([tx, ty, tz], dtype=np.float64)
    return transform


def transform_points(points: npt.NDArray[np.float64], transform: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Apply a 4x4 rigid transform to (N, 3) points."""
    if points.size == 0:
        return np.empty((0, 3), dtype=np.float64)
    rotation = transform[:3, :3]
    translation = transform[:3, 3]
    return points @ rotation.T + translation


def rotation_from_axes(
    x_axis: npt.NDArray[np.float64],
    y_axis: npt.NDArray[np.float64],
    z_axis: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    """3x3 rotation whose columns are the given axes."""
    return np.column_stack([x_axis, y_axis, z_axis])


def make_pose(position: npt.NDArray[np.float64], rotation: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    pose = np.eye(4)
    pose[:3, :3] = rotation
    pose[:3, 3] = position
    return pose


def is_orthonormal(rotation: npt.NDArray[np.float64], *, atol: float = 1e-6) -> bool:
    """True if columns are unit length, mutually perpendicular and right-handed."""
    gram = rotation.T @ rotation
    if not np.allclose(gram, np.eye(3), atol=atol):
        return False
    ok = bool(np.isclose(np.linalg.det(rotation), 1.0, atol=atol))
    if not ok:
        LOGGER.debug("Rotation is orthogonal but not right-handed (det={})", np.linalg.det(rotation))
    return ok


__all__ = [
    "is_orthonormal",
    "make_pose",
    "make_transformation",
    "rotation_from_axes",
    "transform_points",
]
