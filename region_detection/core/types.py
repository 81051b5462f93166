"""Data types shared by the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np
import numpy.typing as npt

from region_detection.core.result import Result

PointArray = npt.NDArray[np.float64]
PoseArray = npt.NDArray[np.float64]


def as_points(points: npt.ArrayLike) -> PointArray:
    """Coerce to a contiguous (N, 3) float64 array."""
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.empty((0, 3), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"points must have shape (N, 3), got {arr.shape}")
    return np.ascontiguousarray(arr)


@dataclass(frozen=True, eq=False)
class Curve:
    """Ordered 3D points tagged open or closed.

    A closed curve repeats its first point at the end. Curves are immutable:
    every operation returns a new curve.
    """

    points: PointArray
    closed: bool = False

    def __post_init__(self) -> None:
        pts = as_points(self.points).copy()
        pts.setflags(write=False)
        object.__setattr__(self, "points", pts)

    def __len__(self) -> int:
        return int(self.points.shape[0])

    @property
    def front(self) -> PointArray:
        return self.points[0]

    @property
    def back(self) -> PointArray:
        return self.points[-1]

    def endpoint_gap(self) -> float:
        if len(self) == 0:
            return float("inf")
        return float(np.linalg.norm(self.front - self.back))

    def reversed(self) -> "Curve":
        return Curve(self.points[::-1].copy(), closed=self.closed)

    def as_open(self) -> "Curve":
        return Curve(self.points.copy(), closed=False)

    def closed_copy(self) -> "Curve":
        """Return a closed curve with the first point appended at the end."""
        pts = np.vstack([self.points, self.points[:1]])
        return Curve(pts, closed=True)


@dataclass(frozen=True, eq=False)
class NormalSamples:
    """Curve points paired with the surface normal sampled for them."""

    points: PointArray
    normals: PointArray

    def __post_init__(self) -> None:
        pts = as_points(self.points)
        nrm = as_points(self.normals)
        if pts.shape != nrm.shape:
            raise ValueError(f"points {pts.shape} and normals {nrm.shape} differ in shape")
        object.__setattr__(self, "points", pts)
        object.__setattr__(self, "normals", nrm)

    def __len__(self) -> int:
        return int(self.points.shape[0])

    @classmethod
    def empty(cls) -> "NormalSamples":
        return cls(np.empty((0, 3)), np.empty((0, 3)))

    @classmethod
    def concatenate(cls, parts: Sequence["NormalSamples"]) -> "NormalSamples":
        parts = [p for p in parts if len(p)]
        if not parts:
            return cls.empty()
        return cls(
            np.vstack([p.points for p in parts]),
            np.vstack([p.normals for p in parts]),
        )


@dataclass
class DataBundle:
    """One input frame.

    Attributes:
        contours: boundary pixel lists, each (K, 2) as (x=column, y=row)
        cloud: organized point cloud (H, W, 3); non-finite entries are invalid
        transform: 4x4 rigid transform applied to projected points
    """

    contours: list[npt.NDArray[np.int64]]
    cloud: npt.NDArray[np.float64]
    transform: npt.NDArray[np.float64] = field(default_factory=lambda: np.eye(4))

    def __post_init__(self) -> None:
        self.contours = [np.asarray(c, dtype=np.int64).reshape(-1, 2) for c in self.contours]
        self.cloud = np.asarray(self.cloud, dtype=np.float64)
        self.transform = np.asarray(self.transform, dtype=np.float64)
        if self.transform.shape != (4, 4):
            raise ValueError(f"transform must be 4x4, got {self.transform.shape}")


@dataclass
class RegionResults:
    """Pose sequences per surviving curve plus the run status."""

    closed_region_poses: list[PoseArray] = field(default_factory=list)
    open_region_poses: list[PoseArray] = field(default_factory=list)
    status: Result = field(default_factory=Result)
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status.ok

    def summary(self) -> str:
        return (
            f"Found {len(self.closed_region_poses)} closed regions and "
            f"{len(self.open_region_poses)} open regions"
        )


__all__ = [
    "Curve",
    "DataBundle",
    "NormalSamples",
    "PointArray",
    "PoseArray",
    "RegionResults",
    "as_points",
]
