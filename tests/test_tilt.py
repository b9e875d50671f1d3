import sys, os
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
from depth_tracking.common import DeviceError
from depth_tracking.tilt import TiltController


class FakeMotor:
    def __init__(self, tilt=0.0, limit=27.0, broken=False):
        self.tilt = tilt
        self.limit = limit
        self.broken = broken

    def get_tilt_degree(self):
        return self.tilt

    def set_tilt_degree(self, degrees):
        if self.broken or abs(degrees) > self.limit:
            raise DeviceError(f"rejected {degrees}")
        self.tilt = degrees


def test_up_then_down():
    motor = FakeMotor()
    ctl = TiltController(motor)
    assert ctl.tilt_up() == 5.0
    assert motor.tilt == 5.0
    assert ctl.tilt_down() == 0.0
    assert motor.tilt == 0.0


def test_failure_leaves_tilt_unchanged():
    motor = FakeMotor(tilt=25.0)
    ctl = TiltController(motor)
    assert ctl.tilt_up() is None
    assert motor.tilt == 25.0
    assert ctl.failures == 1


def test_broken_device_does_not_raise():
    motor = FakeMotor(broken=True)
    ctl = TiltController(motor, step_deg=2.5)
    assert ctl.tilt_down() is None
    assert motor.tilt == 0.0
