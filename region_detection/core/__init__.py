"""Core data types, results and geometry helpers."""

from __future__ import annotations

from region_detection.core.result import ErrorKind, Result
from region_detection.core.types import (
    Curve,
    DataBundle,
    NormalSamples,
    PointArray,
    PoseArray,
    RegionResults,
    as_points,
)

__all__ = [
    "Curve",
    "DataBundle",
    "ErrorKind",
    "NormalSamples",
    "PointArray",
    "PoseArray",
    "RegionResults",
    "Result",
    "as_points",
]
