# region_detection/utils/__init__.py
"""Utility package re-exporting shared helpers for region_detection."""

from region_detection.utils.error_tracker import ErrorTracker, error_scope
from region_detection.utils.format import format_poses, numpy_print_options
from region_detection.utils.io import dump_yaml, load_yaml
from region_detection.utils.logger import configure, get_logger
from region_detection.utils.progress import track

__all__ = [
    "ErrorTracker",
    "configure",
    "dump_yaml",
    "error_scope",
    "format_poses",
    "get_logger",
    "load_yaml",
    "numpy_print_options",
    "track",
]
