# mapper.py
"""Screen position (depth-frame pixels) -> world position on the display
surface, via NDC and the inverse camera projection."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from depth_tracking.common import ScreenPosition, WorldPosition


@dataclass
class OrthographicCamera:
    """
    2-D viewing camera: origin-centred orthographic projection sized to the
    viewport, plus a world transform (scale + translation). Both matrices are
    rebuilt on every call so a resized viewport takes effect immediately.
    """
    viewport_width: float = 640.0
    viewport_height: float = 480.0
    scale: float = 1.0
    translation: Tuple[float, float] = (0.0, 0.0)
    near: float = 0.0
    far: float = 1000.0

    def projection_matrix(self) -> np.ndarray:
        half_w = self.viewport_width / 2.0
        half_h = self.viewport_height / 2.0
        left, right, bottom, top = -half_w, half_w, -half_h, half_h
        n, f = self.near, self.far
        return np.array(
            [
                [2.0 / (right - left), 0.0, 0.0, -(right + left) / (right - left)],
                [0.0, 2.0 / (top - bottom), 0.0, -(top + bottom) / (top - bottom)],
                [0.0, 0.0, -2.0 / (f - n), -(f + n) / (f - n)],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    def world_matrix(self) -> np.ndarray:
        tx, ty = self.translation
        s = self.scale
        # camera sits just inside the far plane, looking down -z
        return np.array(
            [
                [s, 0.0, 0.0, tx],
                [0.0, s, 0.0, ty],
                [0.0, 0.0, 1.0, self.far - 0.1],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    def resize(self, width: float, height: float) -> None:
        self.viewport_width = float(width)
        self.viewport_height = float(height)


def screen_to_world(
    pos: ScreenPosition,
    projection: np.ndarray,
    world: np.ndarray,
    width: int = 640,
    height: int = 480,
    min_x: float = 0.1,
) -> Optional[WorldPosition]:
    """
    Returns None when ``pos.x`` is below ``min_x`` (nothing detected).
    """
    x = float(pos.x)
    # bottom-left origin
    y = abs(float(pos.y) - height)
    if x < min_x:
        return None

    ndc_x = (x / width) * 2.0 - 1.0
    ndc_y = (y / height) * 2.0 - 1.0

    # undo the projection, then apply the camera transform
    ndc_to_world = world @ np.linalg.inv(projection)
    p = ndc_to_world @ np.array([ndc_x, ndc_y, -1.0, 1.0])
    p = p[:3] / p[3]
    return WorldPosition(float(p[0]), float(p[1]))


def world_to_window(
    world_pos: WorldPosition,
    projection: np.ndarray,
    world: np.ndarray,
    width: int = 640,
    height: int = 480,
) -> Tuple[int, int]:
    """Inverse path, top-left pixel coordinates. Used to draw the crosshair."""
    world_to_ndc = projection @ np.linalg.inv(world)
    p = world_to_ndc @ np.array([world_pos.x, world_pos.y, 0.0, 1.0])
    ndc_x, ndc_y = p[0] / p[3], p[1] / p[3]
    px = (ndc_x + 1.0) / 2.0 * width
    py = height - (ndc_y + 1.0) / 2.0 * height
    return int(round(px)), int(round(py))
