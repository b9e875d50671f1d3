# kinect.py
"""libfreenect depth-stream wrapper: one owned device handle, a background
acquisition thread and a latest-wins frame slot."""
from __future__ import annotations

import math
import queue
import sys
import threading
from concurrent import futures
from typing import Any, Optional, Tuple

import numpy as np

from depth_tracking.common import DeviceError, InitializationError
from depth_tracking.config import SensorConfig
from depth_tracking.mailbox import LatestSlot


class DepthSensor:
    """
    Shared plumbing for depth sources: frame slot, acquisition thread,
    tilt bookkeeping.

    While the acquisition thread runs it is the only thread touching the
    device: tilt commands are queued and executed between event-loop passes,
    the caller waits on a Future for the outcome.
    """

    name = "Sensor"

    def __init__(self, config: SensorConfig) -> None:
        self.config = config
        self.slot: LatestSlot[np.ndarray] = LatestSlot()
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._commands: "queue.Queue[Tuple[float, futures.Future]]" = queue.Queue()
        self._tilt_deg = 0.0
        self.acquisition_error: Optional[str] = None

    # ------------------------------------------------------------------ #
    #   S U B C L A S S   H O O K S
    # ------------------------------------------------------------------ #
    def _open_device(self) -> None:
        raise NotImplementedError

    def _close_device(self) -> None:
        raise NotImplementedError

    def _acquire_once(self) -> None:
        """Deliver (at most) one frame; runs on the acquisition thread."""
        raise NotImplementedError

    def _apply_tilt(self, degrees: float) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------ #
    #   L I F E C Y C L E
    # ------------------------------------------------------------------ #
    def open(self) -> None:
        if self.is_open():
            return
        self._open_device()
        self._stop.clear()
        self.acquisition_error = None
        self._thread = threading.Thread(
            target=self._acquire_loop, name=f"{self.name}-acquire", daemon=True
        )
        self._thread.start()

    def close(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout=self.config.join_timeout_s)
        if self._thread.is_alive():
            # device still in use by the thread; a later close() retries
            print(f"[{self.name}] Warning: acquisition thread did not stop in time, "
                  "device left open")
            return
        self._thread = None
        self._close_device()
        print(f"[{self.name}] Closed (frames={self.slot.puts}, dropped={self.slot.dropped})")

    def is_open(self) -> bool:
        return self._thread is not None

    def _acquire_loop(self) -> None:
        try:
            while not self._stop.is_set():
                self._acquire_once()
                self._run_commands()
        except Exception as exc:  # noqa: BLE001
            self.acquisition_error = str(exc)
            print(f"[{self.name}] Acquisition stopped: {exc}", file=sys.stderr)
        finally:
            self._fail_pending_commands()

    def _run_commands(self) -> None:
        while True:
            try:
                degrees, fut = self._commands.get_nowait()
            except queue.Empty:
                return
            if not fut.set_running_or_notify_cancel():
                continue
            try:
                self._apply_tilt(degrees)
            except DeviceError as exc:
                fut.set_exception(exc)
            except Exception as exc:  # noqa: BLE001
                fut.set_exception(DeviceError(str(exc)))
            else:
                with self._lock:
                    self._tilt_deg = degrees
                fut.set_result(degrees)

    def _fail_pending_commands(self) -> None:
        while True:
            try:
                _, fut = self._commands.get_nowait()
            except queue.Empty:
                return
            if fut.set_running_or_notify_cancel():
                fut.set_exception(DeviceError("acquisition stopped"))

    def _publish(self, depth: Any) -> None:
        frame = np.array(depth, dtype=np.uint16, copy=True)
        frame.flags.writeable = False
        self.slot.put(frame)

    # ------------------------------------------------------------------ #
    #   P U B L I C   A P I
    # ------------------------------------------------------------------ #
    def try_next_frame(self) -> Optional[np.ndarray]:
        """Newest frame since the previous call, or None. Never blocks."""
        return self.slot.take()

    def get_tilt_degree(self) -> float:
        with self._lock:
            return self._tilt_deg

    def set_tilt_degree(self, degrees: float) -> None:
        """Raises DeviceError if out of range or rejected; tilt then stays put."""
        degrees = float(degrees)
        if not math.isfinite(degrees) or not (
            self.config.min_tilt_deg <= degrees <= self.config.max_tilt_deg
        ):
            raise DeviceError(
                f"tilt {degrees:.1f}° outside "
                f"[{self.config.min_tilt_deg:.0f}, {self.config.max_tilt_deg:.0f}]"
            )

        thread = self._thread
        if thread is None or not thread.is_alive():
            with self._lock:
                self._apply_tilt(degrees)
                self._tilt_deg = degrees
            return

        fut: futures.Future = futures.Future()
        self._commands.put((degrees, fut))
        try:
            fut.result(timeout=self.config.command_timeout_s)
        except futures.TimeoutError as exc:
            if fut.cancel():
                raise DeviceError(f"tilt command timed out ({degrees:.1f}°)") from exc
            # already running on the acquisition thread: report what it did
            fut.result()

    # ---------------- Context / repr ---------------
    def __enter__(self) -> "DepthSensor":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open() else "closed"
        return f"<{type(self).__name__} device={self.config.device_index} ({state})>"


class KinectSensor(DepthSensor):
    """Kinect v1 through the ``freenect`` Python bindings."""

    name = "Kinect"

    def __init__(self, config: SensorConfig) -> None:
        super().__init__(config)
        self._fn: Any = None
        self._ctx: Any = None
        self._dev: Any = None

    def _open_device(self) -> None:
        try:
            import freenect
        except ImportError as exc:
            raise InitializationError(
                "freenect bindings not installed (pip install 'depth-tracking[kinect]')"
            ) from exc
        self._fn = freenect

        ctx = freenect.init()
        if ctx is None:
            raise InitializationError("Could not initialise libfreenect context")

        count = freenect.num_devices(ctx)
        if count <= 0:
            freenect.shutdown(ctx)
            raise InitializationError("No device connected")
        print(f"[Kinect] Found {count} device(s), using #{self.config.device_index}")

        dev = freenect.open_device(ctx, self.config.device_index)
        if dev is None:
            freenect.shutdown(ctx)
            raise InitializationError(
                f"Could not open device {self.config.device_index}"
            )
        self._ctx, self._dev = ctx, dev

        try:
            resolution = getattr(freenect, self.config.resolution)
            depth_format = getattr(freenect, self.config.depth_format)
        except AttributeError as exc:
            self._close_device()
            raise InitializationError(f"Unknown depth mode: {exc}") from exc

        if freenect.set_depth_mode(dev, resolution, depth_format) < 0:
            self._close_device()
            raise InitializationError(
                f"Depth mode {self.config.resolution}/{self.config.depth_format} rejected"
            )
        freenect.set_depth_callback(dev, self._on_depth)
        if freenect.start_depth(dev) < 0:
            self._close_device()
            raise InitializationError("Could not start depth stream")

        try:
            freenect.update_tilt_state(dev)
            tilt = float(freenect.get_tilt_degs(freenect.get_tilt_state(dev)))
        except Exception as exc:  # noqa: BLE001
            self._close_device()
            raise InitializationError(f"Could not read tilt state: {exc}") from exc
        self._tilt_deg = tilt
        print(
            f"[Kinect] Depth stream {self.config.width}x{self.config.height} "
            f"({self.config.depth_format}), tilt={self._tilt_deg:.1f}°"
        )

    def _close_device(self) -> None:
        fn, ctx, dev = self._fn, self._ctx, self._dev
        self._ctx = self._dev = None
        if fn is None:
            return
        if dev is not None:
            fn.stop_depth(dev)
            fn.close_device(dev)
        if ctx is not None:
            fn.shutdown(ctx)

    def _on_depth(self, dev: Any, depth: np.ndarray, timestamp: int) -> None:
        # ``depth`` aliases the driver's buffer; _publish copies it
        self._publish(depth)

    def _acquire_once(self) -> None:
        rc = self._fn.process_events(self._ctx)
        if rc < 0:
            raise DeviceError(f"process_events returned {rc}")

    def _apply_tilt(self, degrees: float) -> None:
        if self._dev is None:
            raise DeviceError("device is not open")
        if self._fn.set_tilt_degs(self._dev, degrees) < 0:
            raise DeviceError(f"motor rejected tilt {degrees:.1f}°")

