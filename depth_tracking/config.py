# config.py
"""Typed configuration blobs for the whole system."""
from dataclasses import dataclass, field
from typing import Tuple


@dataclass
class SensorConfig:
    device_index: int = 0
    width: int = 640
    height: int = 480
    # libfreenect names, looked up on the ``freenect`` module at open()
    resolution: str = "RESOLUTION_MEDIUM"
    depth_format: str = "DEPTH_10BIT"
    min_tilt_deg: float = -27.0       # Kinect v1 motor range
    max_tilt_deg: float = 27.0
    join_timeout_s: float = 2.0
    command_timeout_s: float = 2.0


@dataclass
class BlobConfig:
    threshold: int = 400              # same unit as sensor output
    min_x: float = 0.1                # x below this is "no detection"


@dataclass
class DisplayConfig:
    window_title: str = "Kinect Depth Tracking"
    crosshair_size_px: int = 16
    crosshair_color_bgr: Tuple[int, int, int] = (0, 0, 255)
    show_stats: bool = True
    camera_scale: float = 1.0
    camera_translation: Tuple[float, float] = (0.0, 0.0)


@dataclass
class TiltConfig:
    step_deg: float = 5.0
    up_keys: Tuple[int, ...] = field(default_factory=lambda: (ord("w"), 82))
    down_keys: Tuple[int, ...] = field(default_factory=lambda: (ord("s"), 84))
