# region_detection/utils/format.py
"""Formatting helpers for NumPy outputs."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import numpy as np
import numpy.typing as npt


@contextmanager
def numpy_print_options(*, precision: int = 4, suppress: bool = True) -> Iterator[None]:
    original = np.get_printoptions()
    np.set_printoptions(precision=precision, suppress=suppress)
    try:
        yield
    finally:
        np.set_printoptions(**original)


def format_poses(poses: npt.NDArray[np.float64], precision: int = 4) -> str:
    """Render (x, y, z, rx, ry, rz) rows, one pose per line."""
    with numpy_print_options(precision=precision, suppress=True):
        return "\n".join(str(row) for row in poses)


__all__ = ["format_poses", "numpy_print_options"]
