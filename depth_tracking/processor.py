# processor.py
"""Glue logic that wires sensor → pipeline → OpenCV window + tilt keys."""
from __future__ import annotations

import sys
import time
import traceback
from typing import Optional

import cv2
import numpy as np

from depth_tracking.common import InitializationError, TickReport
from depth_tracking.config import BlobConfig, DisplayConfig, SensorConfig, TiltConfig
from depth_tracking.kinect import DepthSensor, KinectSensor
from depth_tracking.live_tuning import RuntimeParamWatcher
from depth_tracking.mapper import OrthographicCamera, world_to_window
from depth_tracking.pipeline import FramePipeline
from depth_tracking.synthetic import SyntheticSensor
from depth_tracking.tilt import TiltController
from depth_tracking.visualizer import rgba_to_bgr_preview


class TrackingProcessor:
    """The main high-level orchestrator."""

    def __init__(
        self,
        sensor_cfg: SensorConfig,
        blob_cfg: BlobConfig,
        display_cfg: DisplayConfig,
        tilt_cfg: TiltConfig,
        *,
        demo: bool = False,
        params_path: Optional[str] = "runtime_params.json",
    ):
        # Save configs
        self.sensor_cfg = sensor_cfg
        self.blob_cfg = blob_cfg
        self.display_cfg = display_cfg
        self.tilt_cfg = tilt_cfg

        # Build sub-systems
        self.sensor: DepthSensor = (
            SyntheticSensor(sensor_cfg) if demo else KinectSensor(sensor_cfg)
        )
        self.pipeline = FramePipeline(
            self.sensor, blob_cfg, sensor_cfg.width, sensor_cfg.height
        )
        self.tilt = TiltController(self.sensor, tilt_cfg.step_deg)
        self.camera = OrthographicCamera(
            viewport_width=sensor_cfg.width,
            viewport_height=sensor_cfg.height,
            scale=display_cfg.camera_scale,
            translation=display_cfg.camera_translation,
        )
        self.tuning = RuntimeParamWatcher(params_path) if params_path else None

        # Runtime metrics
        self.frame_count = 0
        self.proc_time_sum = 0.0
        self.proc_samples = 0
        self.fps_timer_start = time.time()
        self.disp_fps = 0.0
        self.disp_proc_ms_avg = 0.0
        self.total_ticks = 0

    # ---------------------------------------------------------------------
    #                         Setup / teardown
    # ---------------------------------------------------------------------
    def setup(self) -> bool:
        """Open the sensor (fatal on failure) and create the window."""
        try:
            self.sensor.open()
        except InitializationError as exc:
            print(f"[Processor] Sensor init failed: {exc}", file=sys.stderr)
            return False

        if self.tuning:
            self.tuning.apply(self.blob_cfg, self.tilt_cfg)
            self.tilt.step_deg = self.tilt_cfg.step_deg

        cv2.namedWindow(self.display_cfg.window_title, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(
            self.display_cfg.window_title, self.sensor_cfg.width, self.sensor_cfg.height
        )
        print("[Processor] Setup complete – press 'q' to quit, w/s to tilt.")
        return True

    def cleanup(self) -> None:
        print("[Processor] Cleaning up...")
        self.sensor.close()
        cv2.destroyAllWindows()
        print(
            f"[Processor] Exited. Ticks: {self.total_ticks}, "
            f"frames: {self.pipeline.frames_received}, tilt failures: {self.tilt.failures}"
        )

    # ---------------------------------------------------------------------
    #                        Drawing / UI helpers
    # ---------------------------------------------------------------------
    def _refresh_camera(self) -> None:
        """Follow the window size so the world mapping tracks resizes."""
        try:
            _, _, w, h = cv2.getWindowImageRect(self.display_cfg.window_title)
        except cv2.error:
            return
        if w > 0 and h > 0:
            self.camera.resize(w, h)

    def _draw_overlay(self, img: np.ndarray, rpt: TickReport) -> None:
        green = (0, 255, 0)
        font = cv2.FONT_HERSHEY_SIMPLEX
        if self.display_cfg.show_stats:
            cv2.putText(img, f"FPS:{self.disp_fps:.1f}", (10, 30), font, 0.7, green, 2)
            cv2.putText(img, f"Proc:{self.disp_proc_ms_avg:.1f}ms", (10, 60), font, 0.7, green, 2)
            cv2.putText(
                img,
                f"Tilt:{self.sensor.get_tilt_degree():+.0f} Thr:{self.blob_cfg.threshold}",
                (10, 90), font, 0.6, green, 1,
            )

        world_pos = self.pipeline.world_position
        if world_pos is not None:
            px, py = world_to_window(
                world_pos,
                self.camera.projection_matrix(),
                self.camera.world_matrix(),
                self.sensor_cfg.width,
                self.sensor_cfg.height,
            )
            cv2.drawMarker(
                img,
                (px, py),
                self.display_cfg.crosshair_color_bgr,
                cv2.MARKER_CROSS,
                self.display_cfg.crosshair_size_px,
                2,
            )
            cv2.putText(
                img, f"({world_pos.x:.0f}, {world_pos.y:.0f})",
                (px + 10, py - 10), font, 0.5, self.display_cfg.crosshair_color_bgr, 1,
            )
        if rpt.screen_px is None:
            cv2.putText(img, "NO TARGET", (img.shape[1] - 160, 30), font, 0.7, (0, 165, 255), 2)

        if self.sensor.acquisition_error:
            cv2.putText(img, "Sensor Err", (50, 130), font, 0.8, (0, 0, 255), 2)

    def _handle_key(self, key: int) -> bool:
        """Returns False if the caller should exit the main loop."""
        if key == ord("q"):
            return False
        if key in self.tilt_cfg.up_keys:
            self.tilt.tilt_up()
        elif key in self.tilt_cfg.down_keys:
            self.tilt.tilt_down()
        return True

    # ---------------------------------------------------------------------
    #                          Main per-tick loop
    # ---------------------------------------------------------------------
    def _process_frame(self) -> bool:
        """Returns False if the caller should exit the main loop."""
        now = time.time()
        self.total_ticks += 1

        if self.tuning and self.tuning.maybe_reload():
            self.tuning.apply(self.blob_cfg, self.tilt_cfg)
            self.tilt.step_deg = self.tilt_cfg.step_deg

        # -------- Pipeline --------
        tic = time.time()
        self._refresh_camera()
        rpt = self.pipeline.tick(
            self.camera.projection_matrix(), self.camera.world_matrix()
        )

        # -------- Stats --------
        proc_ms = (time.time() - tic) * 1000.0
        if rpt.frame_received:
            self.proc_time_sum += proc_ms
            self.proc_samples += 1
            self.frame_count += 1

        if now - self.fps_timer_start >= 1.0:
            self.disp_fps = self.frame_count / (now - self.fps_timer_start)
            if self.proc_samples > 0:
                self.disp_proc_ms_avg = self.proc_time_sum / self.proc_samples
            self.frame_count = 0
            self.proc_time_sum = 0.0
            self.proc_samples = 0
            self.fps_timer_start = now

        # -------- Display --------
        out = rgba_to_bgr_preview(
            self.pipeline.pixels, self.sensor_cfg.width, self.sensor_cfg.height
        )
        self._draw_overlay(out, rpt)
        cv2.imshow(self.display_cfg.window_title, out)

        # -------- Input --------
        key = cv2.waitKey(1) & 0xFF
        if not self._handle_key(key):
            return False
        return cv2.getWindowProperty(self.display_cfg.window_title, cv2.WND_PROP_VISIBLE) >= 1

    # ---------------------------------------------------------------------
    #                             Public run()
    # ---------------------------------------------------------------------
    def run(self) -> bool:
        """Returns False if the sensor could not be initialised."""
        if not self.setup():
            self.cleanup()
            return False

        try:
            while self._process_frame():
                pass
        except KeyboardInterrupt:
            print("\n[Processor] Stopped by user.")
        except Exception as exc:
            print(f"[Processor] Main loop error: {exc}", file=sys.stderr)
            traceback.print_exc()
        finally:
            self.cleanup()
        return True
