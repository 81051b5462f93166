"""Stitch open curves whose endpoints meet, possibly across frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from region_detection.core.result import ErrorKind, Result
from region_detection.core.types import Curve
from region_detection.processing.loops import LoopCloser
from region_detection.utils.logger import LoggerType, get_logger

LOGGER = get_logger(__name__)

FRONT_FRONT, FRONT_BACK, BACK_FRONT, BACK_BACK = range(4)


def try_merge(c1: Curve, c2: Curve, max_dist: float) -> Curve | None:
    """Join two open curves at their closest endpoint pair.

    Returns the joined curve, or None when the closest pair is farther apart
    than ``max_dist``. Neither input is modified.
    """
    if len(c1) == 0 or len(c2) == 0:
        return None
    dists = np.array(
        [
            np.linalg.norm(c1.front - c2.front),
            np.linalg.norm(c1.front - c2.back),
            np.linalg.norm(c1.back - c2.front),
            np.linalg.norm(c1.back - c2.back),
        ]
    )
    case = int(np.argmin(dists))
    if dists[case] > max_dist:
        return None

    if case == FRONT_FRONT:
        parts = (c2.reversed().points, c1.points)
    elif case == FRONT_BACK:
        parts = (c2.points, c1.points)
    elif case == BACK_FRONT:
        parts = (c1.points, c2.points)
    else:
        parts = (c1.points, c2.reversed().points)
    return Curve(np.vstack(parts), closed=False)


@dataclass
class MergeOutcome:
    closed: list[Curve] = field(default_factory=list)
    open: list[Curve] = field(default_factory=list)
    result: Result = field(default_factory=Result)


class Merger:
    """Greedy endpoint stitching of open curves.

    Each unmerged curve seeds an accumulator that absorbs every other unmerged
    curve it can join; the candidate scan restarts after each join until a
    full pass joins nothing. Every accumulator, joined or not, is then
    classified as open or closed and filed in seed order, so the outcome
    depends on input order.
    """

    def __init__(
        self,
        max_merge_dist: float,
        closed_curve_max_dist: float,
        *,
        logger: LoggerType | None = None,
    ) -> None:
        self.max_merge_dist = float(max_merge_dist)
        self.logger = logger or LOGGER
        self.closer = LoopCloser(closed_curve_max_dist, logger=self.logger)

    def merge(self, curves: Sequence[Curve]) -> MergeOutcome:
        outcome = MergeOutcome()
        merged = np.zeros(len(curves), dtype=bool)

        for i, seed in enumerate(curves):
            if merged[i]:
                continue
            acc = seed
            joined = True
            while joined:
                joined = False
                for j, other in enumerate(curves):
                    if j == i or merged[j]:
                        continue
                    candidate = try_merge(acc, other, self.max_merge_dist)
                    if candidate is None:
                        continue
                    self.logger.debug("Merged curve {} into {}", j, i)
                    acc = candidate
                    merged[i] = merged[j] = True
                    joined = True
                    break

            loop = self.closer.close(acc)
            if loop is not None:
                outcome.closed.append(loop)
            else:
                outcome.open.append(acc.as_open())
            merged[i] = True

        self.logger.debug(
            "Merge produced {} closed and {} open curves", len(outcome.closed), len(outcome.open)
        )
        if not outcome.closed:
            outcome.result = Result.failure(ErrorKind.PIPELINE, "Found no closed curves")
        return outcome


def merge(
    curves: Sequence[Curve], max_merge_dist: float, closed_curve_max_dist: float
) -> MergeOutcome:
    return Merger(max_merge_dist, closed_curve_max_dist).merge(curves)


__all__ = ["MergeOutcome", "Merger", "merge", "try_merge"]
