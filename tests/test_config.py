# tests/test_config.py
"""Tests for centralized configuration module."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from region_detection.config import (
    DEFAULT_CONFIG,
    MIN_PIXEL_DISTANCE,
    MIN_POINT_DIST,
    NormalEstimationConfig,
    RegionDetectionConfig,
    SequencingConfig,
    SimplificationConfig,
    StatRemovalConfig,
    get_config,
    load_config,
)


def test_constants() -> None:
    """Verify pipeline constants."""
    assert MIN_POINT_DIST == 1e-8
    assert MIN_PIXEL_DISTANCE == 1


def test_defaults(default_config: RegionDetectionConfig) -> None:
    """Default thresholds match the documented table."""
    assert default_config.sequencing.epsilon == 0.0
    assert default_config.sequencing.split_dist == 0.01
    assert default_config.sequencing.closed_curve_max_dist == 0.01
    assert default_config.simplification.alpha == 0.01
    assert default_config.simplification.min_points == 10
    assert default_config.simplification.min_dist == 0.002
    assert default_config.merge.max_merge_dist == 0.01
    assert default_config.min_num_points == 10
    assert default_config.normal_est.viewpoint == (0.0, 0.0, 0.0)
    assert default_config.normal_est.toward_viewpoint is True
    assert default_config.stat_removal.enable is False
    assert default_config.contour.interpolate is True
    assert default_config == DEFAULT_CONFIG


def test_config_is_frozen(default_config: RegionDetectionConfig) -> None:
    """Configuration objects cannot be modified."""
    with pytest.raises(FrozenInstanceError):
        default_config.min_num_points = 3  # type: ignore[misc]


@pytest.mark.parametrize(
    "factory",
    [
        lambda: SequencingConfig(split_dist=-0.1),
        lambda: SequencingConfig(epsilon=-1.0),
        lambda: SimplificationConfig(alpha=0.0),
        lambda: SimplificationConfig(min_points=-1),
        lambda: StatRemovalConfig(kmeans=0),
        lambda: StatRemovalConfig(stddev=0.0),
        lambda: NormalEstimationConfig(search_radius=-0.02),
        lambda: NormalEstimationConfig(viewpoint=(0.0, 0.0)),
        lambda: NormalEstimationConfig(viewpoint=(0.0, float("nan"), 0.0)),
        lambda: RegionDetectionConfig(min_num_points=-1),
    ],
)
def test_invalid_values_rejected(factory) -> None:
    """Invalid thresholds fail at construction."""
    with pytest.raises(ValueError):
        factory()


def test_dict_round_trip(default_config: RegionDetectionConfig) -> None:
    """to_dict output rebuilds an equal configuration."""
    data = default_config.to_dict()
    assert data["normal_est"]["viewpoint"] == [0.0, 0.0, 0.0]
    assert RegionDetectionConfig.from_dict(data) == default_config


def test_from_dict_rejects_unknown_keys() -> None:
    """Misspelled keys are reported instead of ignored."""
    with pytest.raises(ValueError, match="split_distance"):
        RegionDetectionConfig.from_dict({"sequencing": {"split_distance": 0.1}})


def test_load_config_partial(tmp_path: Path) -> None:
    """Missing YAML keys keep their defaults."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "sequencing:\n  split_dist: 0.05\nnormal_est:\n  viewpoint: [0, 0, 1]\nmin_num_points: 4\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.sequencing.split_dist == 0.05
    assert cfg.sequencing.closed_curve_max_dist == 0.01
    assert cfg.normal_est.viewpoint == (0.0, 0.0, 1.0)
    assert cfg.min_num_points == 4


def test_load_config_empty_file(tmp_path: Path) -> None:
    """An empty YAML file yields the defaults."""
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == RegionDetectionConfig()


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """REGION_DETECTION_* variables override thresholds."""
    monkeypatch.setenv("REGION_DETECTION_SPLIT_DIST", "0.2")
    monkeypatch.setenv("REGION_DETECTION_MIN_NUM_POINTS", "3")
    monkeypatch.setenv("REGION_DETECTION_STAT_REMOVAL", "true")
    cfg = get_config()
    assert cfg.sequencing.split_dist == 0.2
    assert cfg.min_num_points == 3
    assert cfg.stat_removal.enable is True
    assert cfg.merge.max_merge_dist == 0.01


def test_env_override_validated(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment values go through the same validation."""
    monkeypatch.setenv("REGION_DETECTION_MAX_MERGE_DIST", "-1")
    with pytest.raises(ValueError):
        get_config()
