"""Centralized configuration for the region detection pipeline.

All thresholds and their defaults are defined here. Configuration objects are
frozen and validated on construction so an invalid threshold fails before any
compute call.
"""

from __future__ import annotations

import math
import os
from dataclasses import asdict, dataclass, field, fields, is_dataclass, replace
from pathlib import Path
from typing import Any, Final, Mapping, Tuple

from region_detection.utils.io import load_yaml

# ============================================================================
# PIPELINE CONSTANTS
# ============================================================================

MIN_POINT_DIST: Final[float] = 1e-8
MIN_PIXEL_DISTANCE: Final[int] = 1

SEQ_DEFAULT_EPSILON: Final[float] = 0.0
SEQ_DEFAULT_SPLIT_DIST: Final[float] = 0.01
SEQ_DEFAULT_CLOSED_MAX_DIST: Final[float] = 0.01

SIMPL_DEFAULT_ALPHA: Final[float] = 0.01
SIMPL_DEFAULT_MIN_POINTS: Final[int] = 10
SIMPL_DEFAULT_MIN_DIST: Final[float] = 0.002

MERGE_DEFAULT_MAX_DIST: Final[float] = 0.01
DEFAULT_MIN_NUM_POINTS: Final[int] = 10

NORMAL_DEFAULT_DOWNSAMPLING: Final[float] = 0.005
NORMAL_DEFAULT_SEARCH_RADIUS: Final[float] = 0.02
NORMAL_DEFAULT_KDTREE_EPSILON: Final[float] = 0.0

STAT_DEFAULT_KMEANS: Final[int] = 50
STAT_DEFAULT_STDDEV: Final[float] = 1.0

ENV_PREFIX: Final[str] = "REGION_DETECTION_"


def _env_float(key: str, default: float) -> float:
    """Resolve float from environment variable with fallback."""
    value = os.getenv(ENV_PREFIX + key)
    return float(value) if value is not None else default


def _env_int(key: str, default: int) -> int:
    """Resolve integer from environment variable with fallback."""
    value = os.getenv(ENV_PREFIX + key)
    return int(value) if value is not None else default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(ENV_PREFIX + key)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _require_non_negative(owner: str, **values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"{owner}.{name} must be a finite value >= 0, got {value}")


def _require_positive(owner: str, **values: float) -> None:
    for name, value in values.items():
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"{owner}.{name} must be > 0, got {value}")


# ============================================================================
# DATACLASSES - Configuration Sections
# ============================================================================


@dataclass(frozen=True)
class SequencingConfig:
    """Ordering, splitting and loop detection thresholds."""

    epsilon: float = SEQ_DEFAULT_EPSILON
    split_dist: float = SEQ_DEFAULT_SPLIT_DIST
    closed_curve_max_dist: float = SEQ_DEFAULT_CLOSED_MAX_DIST

    def __post_init__(self) -> None:
        _require_non_negative(
            "sequencing",
            epsilon=self.epsilon,
            split_dist=self.split_dist,
            closed_curve_max_dist=self.closed_curve_max_dist,
        )


@dataclass(frozen=True)
class SimplificationConfig:
    """Concave hull and minimum-length decimation parameters."""

    alpha: float = SIMPL_DEFAULT_ALPHA
    min_points: int = SIMPL_DEFAULT_MIN_POINTS
    min_dist: float = SIMPL_DEFAULT_MIN_DIST

    def __post_init__(self) -> None:
        _require_positive("simplification", alpha=self.alpha)
        _require_non_negative(
            "simplification", min_points=self.min_points, min_dist=self.min_dist
        )


@dataclass(frozen=True)
class MergeConfig:
    """Cross-frame merging of open curves."""

    max_merge_dist: float = MERGE_DEFAULT_MAX_DIST

    def __post_init__(self) -> None:
        _require_non_negative("merge", max_merge_dist=self.max_merge_dist)


@dataclass(frozen=True)
class NormalEstimationConfig:
    """Normal field construction and lookup.

    Attributes:
        downsampling_radius: voxel size applied to the frame cloud
        search_radius: neighbourhood radius for normal estimation
        viewpoint: location normals are oriented against
        kdtree_epsilon: approximation used for nearest-normal queries
        toward_viewpoint: orient normals towards the viewpoint (False flips them away)
    """

    downsampling_radius: float = NORMAL_DEFAULT_DOWNSAMPLING
    search_radius: float = NORMAL_DEFAULT_SEARCH_RADIUS
    viewpoint: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    kdtree_epsilon: float = NORMAL_DEFAULT_KDTREE_EPSILON
    toward_viewpoint: bool = True

    def __post_init__(self) -> None:
        _require_non_negative(
            "normal_est",
            downsampling_radius=self.downsampling_radius,
            kdtree_epsilon=self.kdtree_epsilon,
        )
        _require_positive("normal_est", search_radius=self.search_radius)
        viewpoint = tuple(float(v) for v in self.viewpoint)
        if len(viewpoint) != 3 or not all(math.isfinite(v) for v in viewpoint):
            raise ValueError(f"normal_est.viewpoint must be 3 finite values, got {self.viewpoint}")
        object.__setattr__(self, "viewpoint", viewpoint)


@dataclass(frozen=True)
class StatRemovalConfig:
    """Statistical outlier removal applied to a frame's projected points."""

    enable: bool = False
    kmeans: int = STAT_DEFAULT_KMEANS
    stddev: float = STAT_DEFAULT_STDDEV

    def __post_init__(self) -> None:
        _require_positive("stat_removal", kmeans=self.kmeans, stddev=self.stddev)


@dataclass(frozen=True)
class ContourConfig:
    """Pixel-space preparation of contours before projection."""

    interpolate: bool = True
    downsampling_radius: float = 0.0

    def __post_init__(self) -> None:
        _require_non_negative("contour", downsampling_radius=self.downsampling_radius)


# ============================================================================
# MAIN CONFIGURATION
# ============================================================================


@dataclass(frozen=True)
class RegionDetectionConfig:
    """Main pipeline configuration.

    All section configurations are aggregated here.
    Instances are immutable (frozen=True) and shared read-only by every stage.
    """

    sequencing: SequencingConfig = field(default_factory=SequencingConfig)
    simplification: SimplificationConfig = field(default_factory=SimplificationConfig)
    merge: MergeConfig = field(default_factory=MergeConfig)
    normal_est: NormalEstimationConfig = field(default_factory=NormalEstimationConfig)
    stat_removal: StatRemovalConfig = field(default_factory=StatRemovalConfig)
    contour: ContourConfig = field(default_factory=ContourConfig)
    min_num_points: int = DEFAULT_MIN_NUM_POINTS
    show_progress: bool = False

    def __post_init__(self) -> None:
        _require_non_negative("config", min_num_points=self.min_num_points)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["normal_est"]["viewpoint"] = list(self.normal_est.viewpoint)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RegionDetectionConfig":
        """Build a configuration from a nested mapping; unknown keys are rejected."""
        return _build(cls, data, "config")


def _build(cls: type, data: Mapping[str, Any], owner: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"{owner} must be a mapping, got {type(data).__name__}")
    known = {f.name: f for f in fields(cls)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"Unknown {owner} keys: {', '.join(unknown)}")
    kwargs: dict[str, Any] = {}
    for name, value in data.items():
        default = known[name].default_factory  # type: ignore[misc]
        if callable(default) and is_dataclass(default):
            kwargs[name] = _build(default, value, f"{owner}.{name}")
        elif name == "viewpoint":
            kwargs[name] = tuple(value)
        else:
            kwargs[name] = value
    return cls(**kwargs)


def load_config(path: Path) -> RegionDetectionConfig:
    """Load a YAML configuration file; missing keys keep their defaults."""
    data = load_yaml(path) or {}
    return RegionDetectionConfig.from_dict(data)


def get_config(base: RegionDetectionConfig | None = None) -> RegionDetectionConfig:
    """Factory applying environment overrides on top of ``base`` (defaults if None).

    Environment variables:
        REGION_DETECTION_SPLIT_DIST: Segmenter gap threshold
        REGION_DETECTION_CLOSED_CURVE_MAX_DIST: closed loop threshold
        REGION_DETECTION_MAX_MERGE_DIST: Merger endpoint threshold
        REGION_DETECTION_SIMPLIFICATION_MIN_DIST: decimation spacing
        REGION_DETECTION_MIN_NUM_POINTS: minimum surviving curve size
        REGION_DETECTION_STAT_REMOVAL: enable outlier filter
        REGION_DETECTION_SHOW_PROGRESS: show tqdm progress over frames
    """
    cfg = base or RegionDetectionConfig()

    sequencing = replace(
        cfg.sequencing,
        split_dist=_env_float("SPLIT_DIST", cfg.sequencing.split_dist),
        closed_curve_max_dist=_env_float(
            "CLOSED_CURVE_MAX_DIST", cfg.sequencing.closed_curve_max_dist
        ),
    )
    simplification = replace(
        cfg.simplification,
        min_dist=_env_float("SIMPLIFICATION_MIN_DIST", cfg.simplification.min_dist),
    )
    merge = replace(cfg.merge, max_merge_dist=_env_float("MAX_MERGE_DIST", cfg.merge.max_merge_dist))
    stat_removal = replace(cfg.stat_removal, enable=_env_bool("STAT_REMOVAL", cfg.stat_removal.enable))

    return replace(
        cfg,
        sequencing=sequencing,
        simplification=simplification,
        merge=merge,
        stat_removal=stat_removal,
        min_num_points=_env_int("MIN_NUM_POINTS", cfg.min_num_points),
        show_progress=_env_bool("SHOW_PROGRESS", cfg.show_progress),
    )


DEFAULT_CONFIG: Final[RegionDetectionConfig] = RegionDetectionConfig()

# ============================================================================
# MODULE EXPORTS
# ============================================================================

__all__ = [
    # Factory
    "get_config",
    "load_config",
    # Main config
    "DEFAULT_CONFIG",
    "RegionDetectionConfig",
    # Config sections
    "ContourConfig",
    "MergeConfig",
    "NormalEstimationConfig",
    "SequencingConfig",
    "SimplificationConfig",
    "StatRemovalConfig",
    # Constants
    "MIN_PIXEL_DISTANCE",
    "MIN_POINT_DIST",
]
