"""Synthetic frames for demos and tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from region_detection.core.geometry.transforms import make_transformation
from region_detection.core.types import DataBundle
from region_detection.utils.logger import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class SceneConfig:
    width: int = 50
    height: int = 50
    spacing: float = 0.001
    depth: float = 1.0
    noise_sigma: float = 0.0
    seed: int | None = 0
    translation: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rpy: tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass
class SceneGenerator:
    """Flat organized clouds with square and arc shaped contours.

    Cloud point (row, col) sits at (col * spacing, row * spacing, depth) plus
    optional Gaussian depth noise drawn from the instance generator. Frames
    carry the transform built from the configured translation and roll/pitch/yaw
    unless one is passed explicitly.
    """

    config: SceneConfig = field(default_factory=SceneConfig)
    rng: np.random.Generator = field(init=False)

    def __post_init__(self) -> None:
        self.rng = np.random.default_rng(self.config.seed)

    def plane(self) -> np.ndarray:
        cfg = self.config
        rows, cols = np.mgrid[0 : cfg.height, 0 : cfg.width]
        z = np.full(rows.shape, cfg.depth, dtype=np.float64)
        if cfg.noise_sigma > 0:
            z = z + self.rng.normal(scale=cfg.noise_sigma, size=z.shape)
        cloud = np.stack([cols * cfg.spacing, rows * cfg.spacing, z], axis=-1).astype(np.float64)
        LOGGER.debug("Generated {}x{} organized plane", cfg.width, cfg.height)
        return cloud

    @staticmethod
    def square(side: int = 25, offset: tuple[int, int] = (10, 10)) -> np.ndarray:
        """Closed ring of ``4 * side`` pixels, unit steps, top then right, bottom, left."""
        steps = np.arange(side)
        top = np.stack([steps, np.zeros(side)], axis=1)
        right = np.stack([np.full(side, side), steps], axis=1)
        bottom = np.stack([side - steps, np.full(side, side)], axis=1)
        left = np.stack([np.zeros(side), side - steps], axis=1)
        ring = np.vstack([top, right, bottom, left]) + np.asarray(offset)
        return ring.astype(np.int64)

    @classmethod
    def square_halves(cls, side: int = 25, offset: tuple[int, int] = (10, 10)) -> tuple[np.ndarray, np.ndarray]:
        """The square ring cut into two open arcs whose endpoints touch."""
        ring = cls.square(side, offset)
        half = ring.shape[0] // 2
        return ring[:half].copy(), ring[half:].copy()

    def frame_transform(self) -> np.ndarray:
        return make_transformation(self.config.translation, self.config.rpy)

    def scene(self, contours: list[np.ndarray], transform: np.ndarray | None = None) -> DataBundle:
        return DataBundle(
            contours=contours,
            cloud=self.plane(),
            transform=self.frame_transform() if transform is None else transform,
        )

    def square_scene(self) -> list[DataBundle]:
        return [self.scene([self.square()])]

    def split_square_scene(self) -> list[DataBundle]:
        """Two frames, each seeing one half of the same square."""
        first, second = self.square_halves()
        return [self.scene([first]), self.scene([second])]


__all__ = ["SceneConfig", "SceneGenerator"]
