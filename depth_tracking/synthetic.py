"""Hardware-free depth source: a flat background with one near square that
orbits the frame centre. Lets the whole stack run without a Kinect."""
from __future__ import annotations

import math
import time

import numpy as np

from depth_tracking.config import SensorConfig
from depth_tracking.kinect import DepthSensor


class SyntheticSensor(DepthSensor):
    name = "Synthetic"

    def __init__(
        self,
        config: SensorConfig,
        fps: float = 30.0,
        background_depth: int = 1000,
        blob_depth: int = 100,
        blob_size_px: int = 40,
        orbit_radius_px: float = 120.0,
        orbit_period_s: float = 6.0,
    ) -> None:
        super().__init__(config)
        self.fps = fps
        self.background_depth = background_depth
        self.blob_depth = blob_depth
        self.blob_size_px = blob_size_px
        self.orbit_radius_px = orbit_radius_px
        self.orbit_period_s = orbit_period_s
        self._t0 = 0.0

    def _open_device(self) -> None:
        self._t0 = time.time()
        print(f"[Synthetic] {self.config.width}x{self.config.height}@{self.fps:.0f} FPS")

    def _close_device(self) -> None:
        pass

    def render(self, t: float) -> np.ndarray:
        """Frame as it looks ``t`` seconds after open()."""
        w, h = self.config.width, self.config.height
        frame = np.full((h, w), self.background_depth, dtype=np.uint16)
        phase = 2.0 * math.pi * t / self.orbit_period_s
        # tilting the "sensor" moves the scene vertically
        cx = w / 2.0 + self.orbit_radius_px * math.cos(phase)
        cy = h / 2.0 + self.orbit_radius_px * math.sin(phase) + 4.0 * self._tilt_deg
        half = self.blob_size_px // 2
        x0 = int(np.clip(cx - half, 0, w - 1))
        y0 = int(np.clip(cy - half, 0, h - 1))
        frame[y0:y0 + self.blob_size_px, x0:x0 + self.blob_size_px] = self.blob_depth
        return frame

    def _acquire_once(self) -> None:
        with self._lock:
            frame = self.render(time.time() - self._t0)
        self._publish(frame)
        self._stop.wait(1.0 / self.fps if self.fps > 0 else 0.0)

    def _apply_tilt(self, degrees: float) -> None:
        pass
