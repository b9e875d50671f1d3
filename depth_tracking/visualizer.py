"""Depth buffer -> RGBA pixel buffer conversion."""
from __future__ import annotations

from typing import Optional

import cv2
import numpy as np

# 11-bit depth squeezed into one byte
DEPTH_TO_ALPHA_SHIFT = 3


def new_pixel_buffer(width: int = 640, height: int = 480) -> np.ndarray:
    """Flat RGBA buffer filled with opaque black."""
    buf = np.zeros(width * height * 4, dtype=np.uint8)
    buf[3::4] = 255
    return buf


def depth_to_rgba(frame: Optional[np.ndarray], out: np.ndarray) -> bool:
    """
    Write ``(0, 0, 0, depth // 8)`` for every sample into ``out`` in place.

    Returns False and leaves ``out`` untouched for a missing or empty frame.
    Raises ValueError when ``out`` is not exactly four bytes per sample.
    """
    if frame is None:
        return False
    samples = np.asarray(frame).reshape(-1)
    if samples.size == 0:
        return False
    if out.size != samples.size * 4:
        raise ValueError(
            f"pixel buffer holds {out.size} bytes, need {samples.size * 4}"
        )

    if not out.flags.c_contiguous:
        raise ValueError("pixel buffer must be C-contiguous")

    pixels = out.reshape(-1, 4)
    alpha = np.right_shift(samples.astype(np.uint32), DEPTH_TO_ALPHA_SHIFT)
    pixels[:, :3] = 0
    pixels[:, 3] = np.minimum(alpha, 255).astype(np.uint8)
    return True


def rgba_to_bgr_preview(pixels: np.ndarray, width: int, height: int) -> np.ndarray:
    """Show the alpha channel as a greyscale BGR image for an OpenCV window."""
    alpha = np.ascontiguousarray(pixels.reshape(height, width, 4)[:, :, 3])
    return cv2.cvtColor(alpha, cv2.COLOR_GRAY2BGR)
