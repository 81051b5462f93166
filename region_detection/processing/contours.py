"""Pixel-space preparation of contours before projection."""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from region_detection.config import MIN_PIXEL_DISTANCE
from region_detection.utils.logger import get_logger

LOGGER = get_logger(__name__)

PixelArray = npt.NDArray[np.int64]


def as_pixels(contour: npt.ArrayLike) -> PixelArray:
    return np.asarray(contour, dtype=np.int64).reshape(-1, 2)


def fill_pixel_gaps(contour: npt.ArrayLike) -> PixelArray:
    """Insert interpolated pixels so consecutive pixels are at most one step apart."""
    pixels = as_pixels(contour)
    if pixels.shape[0] < 2:
        return pixels.copy()

    filled = [pixels[:1]]
    for start, end in zip(pixels[:-1], pixels[1:]):
        steps = int(np.max(np.abs(end - start)))
        if steps <= MIN_PIXEL_DISTANCE:
            filled.append(end[None, :])
            continue
        t = np.linspace(0.0, 1.0, steps + 1)[1:]
        filled.append(np.rint(start + np.outer(t, end - start)).astype(np.int64))
    result = np.vstack(filled)
    if result.shape[0] != pixels.shape[0]:
        LOGGER.debug("Filled contour gaps from {} to {} pixels", pixels.shape[0], result.shape[0])
    return result


def downsample_contour(contour: npt.ArrayLike, radius: float) -> PixelArray:
    """Keep the first pixel of every ``radius``-sized grid cell, in contour order."""
    pixels = as_pixels(contour)
    if radius <= 0 or pixels.shape[0] == 0:
        return pixels.copy()
    quantised = np.floor(pixels / radius)
    _, unique_idx = np.unique(quantised, axis=0, return_index=True)
    downsampled = pixels[np.sort(unique_idx)]
    LOGGER.debug("Downsampled contour from {} to {} pixels", pixels.shape[0], downsampled.shape[0])
    return downsampled


__all__ = ["PixelArray", "as_pixels", "downsample_contour", "fill_pixel_gaps"]
