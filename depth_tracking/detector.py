# detector.py
"""Nearest-object ("blob") locator working directly on the depth buffer."""
from __future__ import annotations

from typing import Optional

import numpy as np

from depth_tracking.common import NO_DETECTION, ScreenPosition


def as_depth_grid(
    frame: Optional[np.ndarray], width: int = 640, height: int = 480
) -> Optional[np.ndarray]:
    """
    Return ``frame`` as a (height, width) row-major view, or None when the
    frame is missing or does not hold exactly ``width * height`` samples.
    """
    if frame is None:
        return None
    arr = np.asarray(frame)
    if arr.size == 0 or arr.size != width * height:
        return None
    if arr.shape == (height, width):
        return arr
    if arr.ndim == 1:
        return arr.reshape(height, width)
    return None


def _first_and_last(hits: np.ndarray) -> tuple[int, int]:
    first = int(np.argmax(hits))
    last = hits.size - 1 - int(np.argmax(hits[::-1]))
    return first, last


def locate_nearest_blob(
    frame: Optional[np.ndarray],
    threshold: int = 400,
    width: int = 640,
    height: int = 480,
) -> ScreenPosition:
    """
    Bounding-box midpoint of every sample closer than ``threshold``.

    The left/right-most columns and top/bottom-most rows containing a near
    sample are found independently; the result is their integer midpoint.
    With nothing near all four extremes stay 0 and ``(0, 0)`` comes back,
    which callers treat as "no detection" (a real blob centred on the
    top-left pixel looks the same).
    """
    grid = as_depth_grid(frame, width, height)
    if grid is None:
        return NO_DETECTION

    near = grid < threshold
    cols = near.any(axis=0)
    if not cols.any():
        return NO_DETECTION
    rows = near.any(axis=1)

    left_most, right_most = _first_and_last(cols)
    top_most, bottom_most = _first_and_last(rows)

    # extremes are non-negative, so floor division truncates toward zero
    return ScreenPosition(
        (left_most + right_most) // 2,
        (top_most + bottom_most) // 2,
    )
