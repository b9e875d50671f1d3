"""Discrete tilt-up / tilt-down commands against the sensor motor."""
from __future__ import annotations

from typing import Optional, Protocol

from depth_tracking.common import DeviceError


class TiltDevice(Protocol):
    def get_tilt_degree(self) -> float: ...

    def set_tilt_degree(self, degrees: float) -> None: ...


class TiltController:
    """
    Read-modify-write of one ``step_deg`` per key press. A rejected command
    is reported and the tilt stays where it was.
    """

    def __init__(self, device: TiltDevice, step_deg: float = 5.0) -> None:
        self.device = device
        self.step_deg = step_deg
        self.failures = 0

    def tilt_up(self) -> Optional[float]:
        return self._nudge(+self.step_deg)

    def tilt_down(self) -> Optional[float]:
        return self._nudge(-self.step_deg)

    def _nudge(self, delta: float) -> Optional[float]:
        try:
            target = self.device.get_tilt_degree() + delta
            self.device.set_tilt_degree(target)
        except DeviceError as exc:
            self.failures += 1
            print(f"[Tilt] Command failed: {exc}")
            return None
        print(f"[Tilt] {target:+.1f}°")
        return target
