# tests/conftest.py
"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from region_detection.config import RegionDetectionConfig
from region_detection.core.types import Curve
from region_detection.synthetic import SceneConfig, SceneGenerator


@pytest.fixture
def generator() -> SceneGenerator:
    """Noise-free 50x50 synthetic scene generator, 1 mm pixel pitch."""
    return SceneGenerator(SceneConfig())


@pytest.fixture
def flat_cloud(generator: SceneGenerator) -> np.ndarray:
    """Organized plane at z = 1 m."""
    return generator.plane()


@pytest.fixture
def square_pixels() -> np.ndarray:
    """Square ring of 100 pixels starting at (10, 10)."""
    return SceneGenerator.square()


@pytest.fixture
def square_points(square_pixels: np.ndarray) -> np.ndarray:
    """The square ring as 3D points on the flat cloud."""
    return np.column_stack(
        [square_pixels[:, 0] * 0.001, square_pixels[:, 1] * 0.001, np.ones(len(square_pixels))]
    )


@pytest.fixture
def line_curve() -> Curve:
    """Open straight curve of 11 points spaced 1 mm along x."""
    xs = np.linspace(0.0, 0.01, 11)
    return Curve(np.column_stack([xs, np.zeros_like(xs), np.zeros_like(xs)]))


@pytest.fixture
def default_config() -> RegionDetectionConfig:
    """Default pipeline configuration."""
    return RegionDetectionConfig()
