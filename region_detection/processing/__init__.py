"""Geometric pipeline stages."""

from __future__ import annotations

from region_detection.processing.contours import downsample_contour, fill_pixel_gaps
from region_detection.processing.loops import LoopCloser
from region_detection.processing.merging import MergeOutcome, Merger, try_merge
from region_detection.processing.normals import NormalField, statistical_inlier_mask
from region_detection.processing.poses import PoseSynthesizer
from region_detection.processing.projection import PointProjector
from region_detection.processing.segmentation import Segmenter
from region_detection.processing.sequencing import Sequencer
from region_detection.processing.simplification import Simplifier, concave_hull
from region_detection.processing.spatial import SpatialIndex

__all__ = [
    "LoopCloser",
    "MergeOutcome",
    "Merger",
    "NormalField",
    "PointProjector",
    "PoseSynthesizer",
    "Segmenter",
    "Sequencer",
    "Simplifier",
    "SpatialIndex",
    "concave_hull",
    "downsample_contour",
    "fill_pixel_gaps",
    "statistical_inlier_mask",
    "try_merge",
]
