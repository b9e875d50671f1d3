"""Objects that are shared across multiple modules."""
from dataclasses import dataclass
from typing import Optional


class InitializationError(RuntimeError):
    """Raised when the sensor cannot be found, opened or streamed from."""


class DeviceError(RuntimeError):
    """Raised when the device rejects or fails a command (e.g. tilt)."""


@dataclass(frozen=True)
class ScreenPosition:
    """
    Pixel position inside the depth frame, origin top-left, y downward.
    ``(0, 0)`` doubles as the "nothing detected" value.
    """
    x: int
    y: int

    def is_detection(self) -> bool:
        return not (self.x == 0 and self.y == 0)


NO_DETECTION = ScreenPosition(0, 0)


@dataclass(frozen=True)
class WorldPosition:
    x: float
    y: float


@dataclass(frozen=True)
class TickReport:
    """A single-tick snapshot of pipeline state."""
    frame_received: bool
    visualized: bool
    screen_px: Optional[ScreenPosition]
    world_pos: Optional[WorldPosition]
