"""Geometric transformations and rotation utilities."""

from __future__ import annotations

from region_detection.core.geometry.angles import poses_to_xyz_euler
from region_detection.core.geometry.transforms import (
    is_orthonormal,
    make_pose,
    make_transformation,
    rotation_from_axes,
    transform_points,
)

__all__ = [
    "is_orthonormal",
    "make_pose",
    "make_transformation",
    "poses_to_xyz_euler",
    "rotation_from_axes",
    "transform_points",
]
