# main.py
"""
Entry-point for the Kinect depth-tracking system.

A crosshair follows the nearest object in front of the sensor. ``w``/Up and
``s``/Down tilt the Kinect motor by one step, ``q`` quits.

Live-tuning
-----------
While the program is running you can edit ``runtime_params.json``
(``blob_threshold``, ``blob_min_x``, ``tilt_step_deg``) and the new values
take effect on the very next tick.

Run with ``--demo`` to use a synthetic depth source instead of a Kinect.
"""
from __future__ import annotations

import sys

from depth_tracking.config import BlobConfig, DisplayConfig, SensorConfig, TiltConfig
from depth_tracking.processor import TrackingProcessor


def main() -> int:
    demo = "--demo" in sys.argv[1:]

    print("Initializing Depth-Tracking System…")
    print("Hint: edit 'runtime_params.json' at any time to tweak parameters.\n")

    # -------------------- Config blobs --------------------
    sensor_cfg = SensorConfig()
    blob_cfg = BlobConfig()
    display_cfg = DisplayConfig()
    tilt_cfg = TiltConfig()

    # ------------------------ Banner ----------------------
    print(
        f"Sensor: {'synthetic' if demo else f'kinect idx={sensor_cfg.device_index}'}, "
        f"{sensor_cfg.width}x{sensor_cfg.height} {sensor_cfg.depth_format}"
    )
    print(f"Blob: threshold={blob_cfg.threshold}, min_x={blob_cfg.min_x}")
    print(
        f"Tilt: step={tilt_cfg.step_deg}°, "
        f"range=[{sensor_cfg.min_tilt_deg}, {sensor_cfg.max_tilt_deg}]°"
    )

    # ------------------------ Run -------------------------
    ok = TrackingProcessor(sensor_cfg, blob_cfg, display_cfg, tilt_cfg, demo=demo).run()
    print("Main program finished.")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
