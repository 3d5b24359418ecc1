"""
Tests for the MediaPipe fingertip sensor.

MediaPipe results are replaced by lightweight stand-ins with the same
attribute layout, and the Hands graph by a fake, so no model is loaded.
"""

import logging
from types import SimpleNamespace

import numpy as np
import pytest

from fingertap.detection.fingertip_sensor import MediaPipeFingertipSensor

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def fake_hand(tip, n_landmarks=21):
    landmarks = [SimpleNamespace(x=0.0, y=0.0, z=0.0) for _ in range(n_landmarks)]
    if n_landmarks > 8:
        landmarks[8] = SimpleNamespace(x=tip[0], y=tip[1], z=tip[2])
    return SimpleNamespace(landmark=landmarks)


def fake_handedness(label):
    return SimpleNamespace(classification=[SimpleNamespace(label=label)])


def fake_results(hands, labels, world_hands=None):
    return SimpleNamespace(
        multi_hand_landmarks=hands,
        multi_handedness=[fake_handedness(label) for label in labels] if hands else None,
        multi_hand_world_landmarks=world_hands,
    )


class FakeHands:
    def __init__(self, results):
        self.results = results
        self.processed = 0
        self.closed = False

    def process(self, image):
        self.processed += 1
        return self.results

    def close(self):
        self.closed = True


def test_no_hand_is_untracked():
    sensor = MediaPipeFingertipSensor(hands=FakeHands(None))
    sensor.update_from_results(fake_results(None, []), 2.5)
    assert not sensor.is_tracked()
    assert sensor.get_fingertip_position() is None
    assert sensor.now() == 2.5


def test_selects_configured_hand():
    results = fake_results(
        [fake_hand((0.1, 0.1, 0.1)), fake_hand((0.7, 0.8, -0.05))],
        ['Left', 'Right'],
    )
    sensor = MediaPipeFingertipSensor(handedness='Right', use_world_landmarks=False, hands=FakeHands(None))
    sensor.update_from_results(results, 1.0)

    assert sensor.is_tracked()
    assert sensor.get_fingertip_position() == pytest.approx(np.array([0.7, 0.8, -0.05]))


def test_other_hand_only_is_untracked():
    results = fake_results([fake_hand((0.1, 0.1, 0.1))], ['Left'])
    sensor = MediaPipeFingertipSensor(handedness='Right', hands=FakeHands(None))
    sensor.update_from_results(results, 1.0)
    assert not sensor.is_tracked()


def test_prefers_world_landmarks():
    results = fake_results(
        [fake_hand((0.5, 0.5, 0.0))],
        ['Right'],
        world_hands=[fake_hand((0.01, -0.02, 0.03))],
    )
    sensor = MediaPipeFingertipSensor(handedness=None, use_world_landmarks=True, hands=FakeHands(None))
    sensor.update_from_results(results, 1.0)
    assert sensor.get_fingertip_position() == pytest.approx(np.array([0.01, -0.02, 0.03]))


def test_missing_landmark_is_tracked_without_position():
    results = fake_results([fake_hand((0.0, 0.0, 0.0), n_landmarks=5)], ['Right'])
    sensor = MediaPipeFingertipSensor(use_world_landmarks=False, hands=FakeHands(None))
    sensor.update_from_results(results, 1.0)
    assert sensor.is_tracked()
    assert sensor.get_fingertip_position() is None


def test_update_runs_hands_on_frame():
    hands = FakeHands(fake_results([fake_hand((0.2, 0.3, 0.4))], ['Right']))
    sensor = MediaPipeFingertipSensor(use_world_landmarks=False, hands=hands)

    sensor.update(np.zeros((48, 64, 3), dtype=np.uint8), timestamp=3.0)

    assert hands.processed == 1
    assert sensor.now() == 3.0
    assert sensor.get_fingertip_position() == pytest.approx(np.array([0.2, 0.3, 0.4]))

    sensor.close()
    assert hands.closed
    assert sensor.hands is None


def main():
    """Run all tests."""
    logger.info("Running fingertip sensor tests...")
    test_no_hand_is_untracked()
    test_selects_configured_hand()
    test_other_hand_only_is_untracked()
    test_prefers_world_landmarks()
    test_missing_landmark_is_tracked_without_position()
    test_update_runs_hands_on_frame()
    logger.info("Fingertip sensor tests PASSED")


if __name__ == '__main__':
    main()
