# region_detection/utils/io.py
"""File IO helpers for configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from region_detection.utils.logger import get_logger

LOGGER = get_logger(__name__)


def load_yaml(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    LOGGER.debug("Loaded YAML file {}", path)
    return data


def dump_yaml(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=True)


__all__ = ["dump_yaml", "load_yaml"]
