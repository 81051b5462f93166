"""Rotation matrix conversions for exporting poses to robot controllers."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from scipy.spatial.transform import Rotation as SciRot


def poses_to_xyz_euler(
    poses: npt.NDArray[np.float64], seq: str = "xyz", degrees: bool = True
) -> npt.NDArray[np.float64]:
    """Flatten an (N, 4, 4) pose sequence into rows of (x, y, z, rx, ry, rz).

    Args:
        poses: homogeneous poses
        seq: Euler sequence (e.g., 'xyz', 'zyx')
        degrees: Return angles in degrees if True, radians if False

    Returns:
        (N, 6) array
    """
    if len(poses) == 0:
        return np.empty((0, 6), dtype=np.float64)
    angles = SciRot.from_matrix(poses[:, :3, :3]).as_euler(seq, degrees=degrees)
    return np.hstack([poses[:, :3, 3], angles])


__all__ = ["poses_to_xyz_euler"]
