# tests/test_detector.py
"""End-to-end tests of the region detection pipeline on synthetic scenes."""

from __future__ import annotations

import numpy as np
import pytest

from region_detection.config import (
    ContourConfig,
    RegionDetectionConfig,
    SequencingConfig,
    SimplificationConfig,
    StatRemovalConfig,
)
from region_detection.core.geometry.transforms import is_orthonormal, make_transformation
from region_detection.core.result import ErrorKind
from region_detection.core.types import DataBundle
from region_detection.detector import RegionDetector
from region_detection.processing.loops import LoopCloser
from region_detection.processing.segmentation import Segmenter
from region_detection.processing.sequencing import Sequencer
from region_detection.processing.simplification import Simplifier
from region_detection.synthetic import SceneConfig, SceneGenerator
from region_detection.utils.error_tracker import ErrorTracker


def _check_poses(poses: np.ndarray) -> None:
    for pose in poses:
        assert is_orthonormal(pose[:3, :3])
        assert np.allclose(pose[3], [0.0, 0.0, 0.0, 1.0])


def _expected_square_region(config: RegionDetectionConfig, points: np.ndarray) -> np.ndarray:
    seq = config.sequencing
    sequencer = Sequencer(seq.epsilon)
    runs = Segmenter(seq.split_dist).split(sequencer.sequence(points))
    closed, open_ = LoopCloser(seq.closed_curve_max_dist).classify(runs)
    assert len(closed) == 1
    assert open_ == []
    simplifier = Simplifier(config.simplification, sequencer=sequencer)
    return simplifier.decimate(simplifier.simplify_hull(closed[0])).points


def test_square_gives_one_closed_region(
    generator: SceneGenerator, square_points: np.ndarray, default_config: RegionDetectionConfig
) -> None:
    """A single square contour becomes one closed region with valid poses."""
    results = RegionDetector(default_config).compute(generator.square_scene())
    assert results.ok
    assert results.errors == {}
    assert len(results.closed_region_poses) == 1
    assert results.open_region_poses == []
    poses = results.closed_region_poses[0]
    expected = _expected_square_region(default_config, square_points)
    assert poses.shape == (len(expected), 4, 4)
    assert np.allclose(poses[:, :3, 3], expected)
    assert np.allclose(poses[0, :3, 3], poses[-1, :3, 3])
    _check_poses(poses)
    assert np.allclose(poses[:, :3, 2], [0.0, 0.0, -1.0], atol=1e-6)
    assert results.summary() == "Found 1 closed regions and 0 open regions"


def test_pose_count_matches_curve_without_hull(generator: SceneGenerator) -> None:
    """With hull and decimation disabled every ring point gets a pose, plus the closing one."""
    config = RegionDetectionConfig(
        simplification=SimplificationConfig(min_points=10**6, min_dist=1e-6)
    )
    results = RegionDetector(config).compute(generator.square_scene())
    assert results.ok
    assert len(results.closed_region_poses) == 1
    poses = results.closed_region_poses[0]
    assert poses.shape == (len(SceneGenerator.square()) + 1, 4, 4)
    steps = np.linalg.norm(np.diff(poses[:, :3, 3], axis=0), axis=1)
    assert steps.max() < 0.0015


def test_halves_in_two_frames_merge(generator: SceneGenerator) -> None:
    """Open arcs seen in separate frames are stitched into one closed region."""
    config = RegionDetectionConfig(show_progress=True)
    results = RegionDetector(config).compute(generator.split_square_scene())
    assert results.ok
    assert len(results.closed_region_poses) == 1
    assert results.open_region_poses == []
    poses = results.closed_region_poses[0]
    assert np.allclose(poses[0, :3, 3], poses[-1, :3, 3])
    _check_poses(poses)


def test_short_open_curve_is_dropped(generator: SceneGenerator) -> None:
    """A two-point open fragment below min_num_points appears in neither output."""
    config = RegionDetectionConfig(
        sequencing=SequencingConfig(closed_curve_max_dist=0.005),
        contour=ContourConfig(interpolate=False),
    )
    stub = np.array([[5, 45], [12, 45]])
    results = RegionDetector(config).compute([generator.scene([SceneGenerator.square(), stub])])
    assert results.ok
    assert len(results.closed_region_poses) == 1
    assert results.open_region_poses == []


def test_open_only_scene_reports_failure(generator: SceneGenerator) -> None:
    """Without any loop the run fails but still returns the open regions."""
    first, _ = SceneGenerator.square_halves()
    results = RegionDetector().compute([generator.scene([first])])
    assert not results.ok
    assert results.status.kind is ErrorKind.PIPELINE
    assert results.closed_region_poses == []
    assert len(results.open_region_poses) == 1
    _check_poses(results.open_region_poses[0])
    assert "pipeline" in results.errors


def test_frame_transform_is_applied(generator: SceneGenerator) -> None:
    """Poses are expressed in the frame transform's target coordinates."""
    transform = make_transformation([0.0, 0.0, 1.0], [0.0, 0.0, 0.0])
    bundle = generator.scene([SceneGenerator.square()], transform=transform)
    results = RegionDetector().compute([bundle])
    assert results.ok
    poses = results.closed_region_poses[0]
    assert np.allclose(poses[:, 2, 3], 2.0)
    assert np.allclose(poses[:, :3, 2], [0.0, 0.0, -1.0], atol=1e-6)


def test_scene_translation_moves_poses() -> None:
    """Scenes carry the transform built from their configured translation."""
    generator = SceneGenerator(SceneConfig(translation=(0.0, 0.0, 0.5)))
    assert np.allclose(generator.frame_transform()[:3, 3], [0.0, 0.0, 0.5])
    results = RegionDetector().compute(generator.square_scene())
    assert results.ok
    assert np.allclose(results.closed_region_poses[0][:, 2, 3], 1.5)


def test_no_bundles_is_input_error() -> None:
    """An empty frame list is rejected."""
    results = RegionDetector().compute([])
    assert not results.ok
    assert results.status.kind is ErrorKind.INPUT
    assert "input" in results.errors


@pytest.mark.parametrize(
    "contours",
    [[], [np.empty((0, 2), dtype=np.int64)], [np.array([[60, 0], [61, 0]])]],
)
def test_bad_contours_abort(generator: SceneGenerator, contours: list[np.ndarray]) -> None:
    """Empty or out-of-bounds contours abort the run without poses."""
    results = RegionDetector().compute([DataBundle(contours=contours, cloud=generator.plane())])
    assert not results.ok
    assert results.status.kind is ErrorKind.INPUT
    assert results.closed_region_poses == []
    assert results.open_region_poses == []


def test_unorganized_cloud_aborts() -> None:
    """A flat point list is not an organized cloud."""
    bundle = DataBundle(contours=[[[0, 0]]], cloud=np.zeros((1, 100, 3)))
    results = RegionDetector().compute([bundle])
    assert results.status.kind is ErrorKind.INPUT


def test_tracker_is_reset_between_runs(generator: SceneGenerator) -> None:
    """Errors belong to the run that produced them."""
    tracker = ErrorTracker()
    detector = RegionDetector(tracker=tracker)
    assert not detector.compute([]).ok
    assert tracker
    results = detector.compute(generator.square_scene())
    assert results.ok
    assert results.errors == {}
    assert not tracker


def test_outlier_statistics_span_the_whole_frame(square_points: np.ndarray) -> None:
    """A stray point in a short contour is judged against every contour of its frame."""
    xs = np.arange(10, 20) * 0.001
    short = np.column_stack([xs, np.full(10, 0.045), np.ones(10)])
    short[5, 2] = 3.0
    config = RegionDetectionConfig(stat_removal=StatRemovalConfig(enable=True, kmeans=20))
    filtered = RegionDetector(config).filter_outliers([square_points, short])
    assert [len(points) for points in filtered] == [100, 9]
    assert np.array_equal(filtered[0], square_points)
    assert np.array_equal(filtered[1], np.delete(short, 5, axis=0))
