# tests/test_geometry.py
"""Tests for transform and rotation helpers."""

from __future__ import annotations

import numpy as np
import pytest

from region_detection.core.geometry import (
    is_orthonormal,
    make_pose,
    make_transformation,
    poses_to_xyz_euler,
    rotation_from_axes,
    transform_points,
)
from region_detection.core.types import Curve, DataBundle, as_points


def test_make_transformation_yaw() -> None:
    """A 90 degree yaw maps x onto y."""
    transform = make_transformation([1.0, 2.0, 3.0], [0.0, 0.0, np.pi / 2])
    moved = transform_points(np.array([[1.0, 0.0, 0.0]]), transform)
    assert np.allclose(moved, [[1.0, 3.0, 3.0]])


def test_is_orthonormal() -> None:
    """Rotations pass, reflections and scaled matrices fail."""
    assert is_orthonormal(np.eye(3))
    assert not is_orthonormal(np.diag([1.0, 1.0, -1.0]))
    assert not is_orthonormal(np.eye(3) * 2.0)


def test_rotation_columns_and_pose() -> None:
    """Axes become rotation columns; pose carries the translation."""
    rotation = rotation_from_axes(np.array([0.0, 1, 0]), np.array([-1.0, 0, 0]), np.array([0.0, 0, 1]))
    pose = make_pose(np.array([1.0, 2.0, 3.0]), rotation)
    assert np.allclose(pose[:3, 0], [0.0, 1.0, 0.0])
    assert np.allclose(pose[:3, 3], [1.0, 2.0, 3.0])
    assert is_orthonormal(pose[:3, :3])


def test_euler_export() -> None:
    """Poses flatten to (x, y, z, rx, ry, rz) in degrees."""
    rotation = make_transformation([0.0, 0.0, 0.0], np.radians([0.0, 0.0, 30.0]))[:3, :3]
    pose = make_pose(np.array([1.0, 2.0, 3.0]), rotation)
    flat = poses_to_xyz_euler(np.stack([pose, pose]))
    assert flat.shape == (2, 6)
    assert np.allclose(flat[0], [1.0, 2.0, 3.0, 0.0, 0.0, 30.0])
    assert poses_to_xyz_euler(np.empty((0, 4, 4))).shape == (0, 6)


def test_as_points_validation() -> None:
    """Point arrays must be (N, 3)."""
    assert as_points([]).shape == (0, 3)
    with pytest.raises(ValueError):
        as_points([[1.0, 2.0]])


def test_curve_is_read_only() -> None:
    """Curves copy their input and cannot be edited in place."""
    source = np.zeros((2, 3))
    curve = Curve(source)
    source[0, 0] = 5.0
    assert curve.points[0, 0] == 0.0
    with pytest.raises(ValueError):
        curve.points[0, 0] = 1.0
    assert curve.reversed().points[0].tolist() == curve.back.tolist()


def test_data_bundle_validates_transform(flat_cloud: np.ndarray) -> None:
    """Bundles default to identity and reject non 4x4 transforms."""
    bundle = DataBundle(contours=[[[0, 0], [1, 0]]], cloud=flat_cloud)
    assert np.array_equal(bundle.transform, np.eye(4))
    assert bundle.contours[0].shape == (2, 2)
    with pytest.raises(ValueError):
        DataBundle(contours=[], cloud=flat_cloud, transform=np.eye(3))
