from types import SimpleNamespace
from unittest import mock

import numpy as np
import pytest

from robot_slalom.depth import (
    DepthSample, nearest_depth_sample, nearest_sample, samples_from_depth_image)
from robot_slalom.state import ControllerState, SlalomConfig


def test_nearest_pixel_and_lateral_sign():
    depth = np.full((4, 5), 2.0, dtype=np.float32)
    depth[1, 0] = 0.5
    sample = nearest_depth_sample(depth, '32FC1', focal_length_px=100.0)
    assert sample.forward_distance == pytest.approx(0.5)
    # Столбец 0 левее центра (2.0)
    assert sample.lateral_offset == pytest.approx((0 - 2.0) * 0.5 / 100.0)


def test_invalid_pixels_skipped():
    depth = np.array([[np.nan, 0.0, np.inf], [1.5, -1.0, 3.0]], dtype=np.float32)
    sample = nearest_depth_sample(depth, '32FC1', focal_length_px=100.0)
    assert sample.forward_distance == pytest.approx(1.5)


def test_millimeters():
    depth = np.array([[0, 800, 1200]], dtype=np.uint16)
    sample = nearest_depth_sample(depth, '16UC1', focal_length_px=100.0)
    assert sample.forward_distance == pytest.approx(0.8)
    assert sample.lateral_offset == pytest.approx(0.0)


def test_no_valid_pixels():
    depth = np.full((3, 3), np.nan, dtype=np.float32)
    assert nearest_depth_sample(depth, '32FC1', focal_length_px=100.0) is None
    far = np.full((3, 3), 20.0, dtype=np.float32)
    assert nearest_depth_sample(far, '32FC1', focal_length_px=100.0, max_range=10.0) is None


def test_unknown_encoding():
    with pytest.raises(ValueError):
        nearest_depth_sample(np.zeros((2, 2), dtype=np.uint8), 'mono8', focal_length_px=100.0)


def test_nearest_sample():
    assert nearest_sample([]) is None
    samples = [DepthSample(0.1, 1.0), DepthSample(-0.2, 0.4), DepthSample(0.3, 0.4)]
    assert nearest_sample(samples) == DepthSample(-0.2, 0.4)


def test_config_defaults():
    config = SlalomConfig()
    assert config.period == pytest.approx(0.1)
    assert config.goal_intent().weight == 1
    state = ControllerState(config)
    assert state.goal_intent.linear_speed == pytest.approx(0.2)
    assert state.cycles_since_side_switch() is None


@pytest.mark.parametrize('kwargs', [
    {'control_rate_hz': 0.0},
    {'avoidance_distance': -1.0},
    {'avoidance_weight': -1},
    {'marker_area_threshold': 0.0},
    {'side_switch_cycles': -2},
])
def test_config_validation(kwargs):
    with pytest.raises(ValueError):
        SlalomConfig(**kwargs)


class FakeBridge:
    def __init__(self, image=None, error=None):
        self.image = image
        self.error = error

    def imgmsg_to_cv2(self, msg, desired_encoding='passthrough'):
        if self.error is not None:
            raise self.error
        return self.image


def test_depth_image_to_samples():
    depth = np.full((3, 3), 2.0, dtype=np.float32)
    depth[1, 1] = 0.4
    msg = SimpleNamespace(encoding='32FC1')
    samples = samples_from_depth_image(FakeBridge(depth), msg, 100.0, 10.0)
    assert len(samples) == 1
    assert samples[0].forward_distance == pytest.approx(0.4)
    assert samples[0].lateral_offset == pytest.approx(0.0)


def test_bridge_error_gives_empty_frame():
    logger = mock.MagicMock()
    msg = SimpleNamespace(encoding='32FC1')
    samples = samples_from_depth_image(FakeBridge(error=RuntimeError('bad image')), msg,
                                       100.0, 10.0, logger)
    assert samples == []
    logger.warn.assert_called_once()


def test_unsupported_encoding_gives_empty_frame():
    logger = mock.MagicMock()
    msg = SimpleNamespace(encoding='rgb8')
    image = np.zeros((2, 2), dtype=np.uint8)
    assert samples_from_depth_image(FakeBridge(image), msg, 100.0, 10.0, logger) == []
    assert 'rgb8' in logger.warn.call_args[0][0]


def test_no_valid_depth_gives_empty_frame():
    msg = SimpleNamespace(encoding='32FC1')
    image = np.zeros((2, 2), dtype=np.float32)
    assert samples_from_depth_image(FakeBridge(image), msg, 100.0, 10.0) == []
