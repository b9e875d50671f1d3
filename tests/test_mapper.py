import sys, os
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))
import numpy as np
from depth_tracking.common import ScreenPosition, WorldPosition
from depth_tracking.mapper import OrthographicCamera, screen_to_world, world_to_window


def _mats(cam):
    return cam.projection_matrix(), cam.world_matrix()


def test_centre_maps_to_camera_origin():
    proj, world = _mats(OrthographicCamera())
    pos = screen_to_world(ScreenPosition(320, 240), proj, world)
    assert np.allclose((pos.x, pos.y), (0.0, 0.0))


def test_corners_and_y_flip():
    proj, world = _mats(OrthographicCamera())
    top_right = screen_to_world(ScreenPosition(640, 0), proj, world)
    assert np.allclose((top_right.x, top_right.y), (320.0, 240.0))
    bottom = screen_to_world(ScreenPosition(160, 480), proj, world)
    assert np.allclose((bottom.x, bottom.y), (-160.0, -240.0))


def test_camera_transform_applied():
    cam = OrthographicCamera(scale=2.0, translation=(100.0, -50.0))
    proj, world = _mats(cam)
    pos = screen_to_world(ScreenPosition(480, 120), proj, world)
    # ndc (0.5, 0.5) -> view (160, 120) -> scaled and shifted
    assert np.allclose((pos.x, pos.y), (420.0, 190.0))


def test_viewport_size_changes_mapping():
    cam = OrthographicCamera()
    cam.resize(1280, 960)
    proj, world = _mats(cam)
    pos = screen_to_world(ScreenPosition(640, 0), proj, world)
    assert np.allclose((pos.x, pos.y), (640.0, 480.0))


def test_small_x_rejected():
    proj, world = _mats(OrthographicCamera())
    assert screen_to_world(ScreenPosition(0, 200), proj, world) is None
    assert screen_to_world(ScreenPosition(0, 0), proj, world) is None


def test_idempotent():
    proj, world = _mats(OrthographicCamera(scale=1.5))
    a = screen_to_world(ScreenPosition(123, 321), proj, world)
    b = screen_to_world(ScreenPosition(123, 321), proj, world)
    assert a == b


def test_world_to_window_inverts_mapping():
    cam = OrthographicCamera(scale=0.5, translation=(10.0, 20.0))
    proj, world = _mats(cam)
    pos = screen_to_world(ScreenPosition(500, 100), proj, world)
    assert world_to_window(pos, proj, world) == (500, 100)
    assert world_to_window(WorldPosition(10.0, 20.0), proj, world) == (320, 240)
