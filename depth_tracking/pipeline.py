# pipeline.py
"""Per-tick orchestration: acquire → store → visualize → locate → map."""
from __future__ import annotations

from typing import Callable, Optional, Protocol

import numpy as np

from depth_tracking.common import ScreenPosition, TickReport, WorldPosition
from depth_tracking.config import BlobConfig
from depth_tracking.detector import as_depth_grid, locate_nearest_blob
from depth_tracking.mapper import screen_to_world
from depth_tracking.visualizer import depth_to_rgba, new_pixel_buffer


class FrameSource(Protocol):
    def try_next_frame(self) -> Optional[np.ndarray]: ...


class FramePipeline:
    """
    Owns the held depth frame and everything derived from it. ``tick`` is
    meant to be called once per scheduling pass from a single thread; it
    never blocks and never raises for "no frame" or "nothing detected".
    """

    def __init__(
        self,
        source: FrameSource,
        blob_cfg: Optional[BlobConfig] = None,
        width: int = 640,
        height: int = 480,
        on_pixels: Optional[Callable[[np.ndarray], None]] = None,
        on_position: Optional[Callable[[WorldPosition], None]] = None,
    ) -> None:
        self.source = source
        self.blob_cfg = blob_cfg or BlobConfig()
        self.width = width
        self.height = height
        self.on_pixels = on_pixels
        self.on_position = on_position

        self.frame: Optional[np.ndarray] = None
        self.pixels = new_pixel_buffer(width, height)
        self.screen_position: Optional[ScreenPosition] = None
        self.world_position: Optional[WorldPosition] = None
        self.ticks = 0
        self.frames_received = 0

    def tick(self, projection: np.ndarray, world: np.ndarray) -> TickReport:
        self.ticks += 1

        # Acquire + store: keep the previous frame when nothing new arrived
        new_frame = self.source.try_next_frame()
        if new_frame is not None:
            self.frames_received += 1
            self.frame = as_depth_grid(new_frame, self.width, self.height)

        if self.frame is None:
            return TickReport(new_frame is not None, False, None, None)

        # Visualize
        visualized = depth_to_rgba(self.frame, self.pixels)
        if visualized and self.on_pixels is not None:
            self.on_pixels(self.pixels)

        # Locate
        screen = locate_nearest_blob(
            self.frame, self.blob_cfg.threshold, self.width, self.height
        )
        if not screen.is_detection():
            return TickReport(new_frame is not None, visualized, None, None)
        self.screen_position = screen

        # Map
        world_pos = screen_to_world(
            screen, projection, world, self.width, self.height, self.blob_cfg.min_x
        )
        if world_pos is not None:
            self.world_position = world_pos
            if self.on_position is not None:
                self.on_position(world_pos)
        return TickReport(new_frame is not None, visualized, screen, world_pos)
