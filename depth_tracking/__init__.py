"""Depth-tracking package – re-export high-level API."""
from .processor import TrackingProcessor         # noqa: F401
from .pipeline import FramePipeline              # noqa: F401
from .detector import locate_nearest_blob        # noqa: F401
from .visualizer import depth_to_rgba            # noqa: F401
from .mapper import OrthographicCamera, screen_to_world  # noqa: F401
from .common import (                            # noqa: F401
    DeviceError, InitializationError, ScreenPosition, WorldPosition,
)
from .config import (                            # noqa: F401
    BlobConfig, DisplayConfig, SensorConfig, TiltConfig,
)
