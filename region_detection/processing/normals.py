"""Per-frame surface normal estimation and nearest-normal lookup."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
import open3d as o3d

from region_detection.config import NormalEstimationConfig, StatRemovalConfig
from region_detection.core.result import ErrorKind, Result
from region_detection.core.types import NormalSamples, PointArray, as_points
from region_detection.processing.spatial import SpatialIndex
from region_detection.utils.logger import LoggerType, get_logger

LOGGER = get_logger(__name__)


def create_cloud(points: npt.ArrayLike) -> o3d.geometry.PointCloud:
    """Create an Open3D point cloud from an (N, 3) array."""
    pts = as_points(points)
    cloud = o3d.geometry.PointCloud()
    if pts.size:
        cloud.points = o3d.utility.Vector3dVector(pts)
    return cloud


def statistical_inlier_mask(
    points: npt.ArrayLike,
    config: StatRemovalConfig,
    *,
    logger: LoggerType | None = None,
) -> npt.NDArray[np.bool_]:
    """Mark points whose mean neighbour distance is not an outlier.

    Clouds with no more points than ``config.kmeans`` are kept whole.
    """
    log = logger or LOGGER
    pts = as_points(points)
    mask = np.ones(pts.shape[0], dtype=bool)
    if pts.shape[0] <= config.kmeans:
        return mask
    _, kept = create_cloud(pts).remove_statistical_outlier(
        nb_neighbors=config.kmeans, std_ratio=config.stddev
    )
    mask[:] = False
    mask[np.asarray(kept, dtype=np.intp)] = True
    log.debug("Statistical outlier removal kept {} of {} points", int(mask.sum()), pts.shape[0])
    return mask


class NormalField:
    """Oriented normals of a downsampled frame cloud, queried by nearest neighbour."""

    def __init__(
        self,
        points: npt.ArrayLike,
        normals: npt.ArrayLike,
        *,
        epsilon: float = 0.0,
    ) -> None:
        self.samples = NormalSamples(points, normals)
        self._index = SpatialIndex(self.samples.points, epsilon=epsilon)

    def __len__(self) -> int:
        return len(self.samples)

    @classmethod
    def build(
        cls,
        cloud_points: npt.ArrayLike,
        config: NormalEstimationConfig,
        *,
        logger: LoggerType | None = None,
    ) -> "NormalField":
        log = logger or LOGGER
        cloud = create_cloud(cloud_points)
        if config.downsampling_radius > 0 and len(cloud.points):
            cloud = cloud.voxel_down_sample(config.downsampling_radius)
        if len(cloud.points) == 0:
            return cls(np.empty((0, 3)), np.empty((0, 3)), epsilon=config.kdtree_epsilon)

        cloud.estimate_normals(o3d.geometry.KDTreeSearchParamRadius(radius=config.search_radius))
        cloud.orient_normals_towards_camera_location(
            camera_location=np.asarray(config.viewpoint, dtype=np.float64)
        )
        normals = np.asarray(cloud.normals, dtype=np.float64)
        if not config.toward_viewpoint:
            normals = -normals
        log.debug("Estimated {} normals", normals.shape[0])
        return cls(np.asarray(cloud.points), normals, epsilon=config.kdtree_epsilon)

    def sample(self, points: npt.ArrayLike) -> tuple[Result, NormalSamples]:
        """Pair every point with the normal of its nearest field sample."""
        pts = as_points(points)
        if pts.shape[0] == 0:
            return Result.success(), NormalSamples.empty()
        if len(self) == 0:
            return (
                Result.failure(ErrorKind.GEOMETRY, "Normal field is empty, no normals to sample"),
                NormalSamples.empty(),
            )
        _, found = self._index.nearest(pts)
        return Result.success(), NormalSamples(pts, self.samples.normals[found])


__all__ = ["NormalField", "create_cloud", "statistical_inlier_mask"]
