import sys, os
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
from depth_tracking.config import BlobConfig, DisplayConfig, SensorConfig, TiltConfig
from depth_tracking.processor import TrackingProcessor


def _processor(step_deg=5.0):
    return TrackingProcessor(
        SensorConfig(), BlobConfig(), DisplayConfig(), TiltConfig(step_deg=step_deg),
        demo=True, params_path=None,
    )


def test_tilt_up_keys():
    proc = _processor()
    assert proc._handle_key(ord("w")) is True
    assert proc.sensor.get_tilt_degree() == 5.0
    assert proc._handle_key(82) is True
    assert proc.sensor.get_tilt_degree() == 10.0


def test_tilt_down_keys():
    proc = _processor(step_deg=2.5)
    assert proc._handle_key(ord("s")) is True
    assert proc.sensor.get_tilt_degree() == -2.5
    assert proc._handle_key(84) is True
    assert proc.sensor.get_tilt_degree() == -5.0


def test_up_then_down_returns_to_zero():
    proc = _processor()
    proc._handle_key(ord("w"))
    proc._handle_key(ord("s"))
    assert proc.sensor.get_tilt_degree() == 0.0


def test_out_of_range_key_press_is_survived():
    proc = _processor(step_deg=20.0)
    proc._handle_key(ord("w"))
    assert proc._handle_key(ord("w")) is True
    assert proc.sensor.get_tilt_degree() == 20.0
    assert proc.tilt.failures == 1


def test_quit_and_other_keys():
    proc = _processor()
    assert proc._handle_key(ord("q")) is False
    assert proc._handle_key(255) is True
    assert proc.sensor.get_tilt_degree() == 0.0
