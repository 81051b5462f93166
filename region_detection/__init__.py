"""Boundary region detection: contours and organized point clouds to robot tool poses."""

from __future__ import annotations

from region_detection.config import RegionDetectionConfig, get_config, load_config
from region_detection.core.result import ErrorKind, Result
from region_detection.core.types import Curve, DataBundle, RegionResults
from region_detection.detector import RegionDetector

__version__ = "0.1.0"

__all__ = [
    "Curve",
    "DataBundle",
    "ErrorKind",
    "RegionDetectionConfig",
    "RegionDetector",
    "RegionResults",
    "Result",
    "get_config",
    "load_config",
]
