"""Region detection pipeline: contours and organized clouds in, per-point poses out."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from region_detection.config import RegionDetectionConfig, get_config
from region_detection.core.result import ErrorKind, Result
from region_detection.core.types import Curve, DataBundle, NormalSamples, RegionResults
from region_detection.processing.contours import downsample_contour, fill_pixel_gaps
from region_detection.processing.loops import LoopCloser
from region_detection.processing.merging import Merger
from region_detection.processing.normals import NormalField, statistical_inlier_mask
from region_detection.processing.poses import PoseSynthesizer
from region_detection.processing.projection import PointProjector
from region_detection.processing.segmentation import Segmenter
from region_detection.processing.sequencing import Sequencer
from region_detection.processing.simplification import Simplifier
from region_detection.utils.error_tracker import ErrorTracker, error_scope
from region_detection.utils.logger import LoggerType, get_logger
from region_detection.utils.progress import track


@dataclass
class FrameCurves:
    """Curves extracted from one frame and the normals sampled for their points."""

    closed: list[Curve] = field(default_factory=list)
    open: list[Curve] = field(default_factory=list)
    samples: NormalSamples = field(default_factory=NormalSamples.empty)
    status: Result = field(default_factory=Result)


class RegionDetector:
    """Detect closed and open boundary regions across a sequence of frames.

    Each frame's contours are projected into 3D, ordered, split at gaps and
    classified; closed loops are simplified. Open fragments from all frames are
    then merged, every curve is decimated, and a pose is synthesized at every
    remaining point.
    """

    def __init__(
        self,
        config: RegionDetectionConfig | None = None,
        *,
        logger: LoggerType | None = None,
        tracker: ErrorTracker | None = None,
    ) -> None:
        self.config = config or get_config()
        self.logger = logger or get_logger("region_detection.detector")
        self.tracker = tracker or ErrorTracker(context="region_detection.detector")

        seq = self.config.sequencing
        self.projector = PointProjector(logger=self.logger)
        self.sequencer = Sequencer(seq.epsilon, logger=self.logger)
        self.segmenter = Segmenter(seq.split_dist, logger=self.logger)
        self.closer = LoopCloser(seq.closed_curve_max_dist, logger=self.logger)
        self.simplifier = Simplifier(
            self.config.simplification, sequencer=self.sequencer, logger=self.logger
        )
        self.merger = Merger(
            self.config.merge.max_merge_dist, seq.closed_curve_max_dist, logger=self.logger
        )

    def compute(self, bundles: Sequence[DataBundle]) -> RegionResults:
        """Run the full pipeline; errors from previous calls are discarded."""
        self.tracker.clear()
        with error_scope(self.tracker, "compute"):
            return self._compute(bundles)

    def _compute(self, bundles: Sequence[DataBundle]) -> RegionResults:
        if len(bundles) == 0:
            return self._fail(Result.failure(ErrorKind.INPUT, "No input data bundles"))

        closed: list[Curve] = []
        open_: list[Curve] = []
        sample_parts: list[NormalSamples] = []
        frames = track(
            bundles,
            description="Frames",
            total=len(bundles),
            disable=not self.config.show_progress,
        )
        for frame, bundle in enumerate(frames):
            curves = self.process_frame(bundle)
            if not curves.status:
                return self._fail(curves.status)
            self.logger.info(
                "Frame {}: {} closed and {} open curves", frame, len(curves.closed), len(curves.open)
            )
            closed.extend(curves.closed)
            open_.extend(curves.open)
            sample_parts.append(curves.samples)

        merged = self.merger.merge(open_)
        if not merged.result:
            self.logger.debug("Merge: {}", merged.result.message)
        closed.extend(merged.closed)

        min_num_points = self.config.min_num_points
        closed = self.simplifier.drop_short(self.simplifier.decimate_all(closed), min_num_points)
        open_ = self.simplifier.drop_short(self.simplifier.decimate_all(merged.open), min_num_points)

        synthesizer = PoseSynthesizer(
            NormalSamples.concatenate(sample_parts),
            epsilon=self.config.normal_est.kdtree_epsilon,
            logger=self.logger,
        )
        closed_poses: list[np.ndarray] = []
        open_poses: list[np.ndarray] = []
        for curves, poses in ((closed, closed_poses), (open_, open_poses)):
            for curve in curves:
                status, curve_poses = synthesizer.synthesize(curve)
                if not status:
                    return self._fail(status)
                poses.append(curve_poses)

        status = Result.success()
        if not closed_poses:
            status = Result.failure(ErrorKind.PIPELINE, "Found no closed curves")
            self.tracker.record(status.kind.value, status.message)

        results = RegionResults(
            closed_region_poses=closed_poses,
            open_region_poses=open_poses,
            status=status,
            errors=self.tracker.summary(),
        )
        self.logger.info(results.summary())
        return results

    def process_frame(self, bundle: DataBundle) -> FrameCurves:
        """Project, order and classify the contours of a single frame."""
        contours = [self._prepare_contour(contour) for contour in bundle.contours]
        status, projected = self.projector.project(contours, bundle.cloud, bundle.transform)
        if not status:
            return FrameCurves(status=status)

        if self.config.stat_removal.enable:
            projected = self.filter_outliers(projected)

        closed: list[Curve] = []
        open_: list[Curve] = []
        for points in projected:
            runs = self.segmenter.split(self.sequencer.sequence(points))
            frame_closed, frame_open = self.closer.classify(runs)
            closed.extend(self.simplifier.simplify_hulls(frame_closed))
            open_.extend(frame_open)

        curves = closed + open_
        if not curves:
            return FrameCurves()

        field_ = NormalField.build(
            self.projector.valid_cloud(bundle.cloud, bundle.transform),
            self.config.normal_est,
            logger=self.logger,
        )
        status, samples = field_.sample(np.vstack([curve.points for curve in curves]))
        return FrameCurves(closed=closed, open=open_, samples=samples, status=status)

    def filter_outliers(self, projected: list[np.ndarray]) -> list[np.ndarray]:
        """Statistical outlier removal over all of a frame's points at once.

        Neighbour statistics span every contour of the frame; the survivors are
        handed back per contour in their original order.
        """
        if not projected:
            return projected
        mask = statistical_inlier_mask(
            np.vstack(projected), self.config.stat_removal, logger=self.logger
        )
        bounds = np.cumsum([len(points) for points in projected])[:-1]
        return [points[keep] for points, keep in zip(projected, np.split(mask, bounds))]

    def _prepare_contour(self, contour: np.ndarray) -> np.ndarray:
        cfg = self.config.contour
        if cfg.interpolate:
            contour = fill_pixel_gaps(contour)
        return downsample_contour(contour, cfg.downsampling_radius)

    def _fail(self, status: Result) -> RegionResults:
        kind = status.kind.value if status.kind is not None else "unknown"
        self.tracker.record(kind, status.message)
        return RegionResults(status=status, errors=self.tracker.summary())


__all__ = ["FrameCurves", "RegionDetector"]
