"""
Tests for the tap event controller: threshold, debounce and hide deadline.
"""

import logging

import pytest

from fingertap.core.tap_events import TapAction, TapEventController

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def test_debounce_single_show_then_hide():
    """Repeated crossings while visible do not retrigger the indicator."""
    controller = TapEventController(threshold=0.7, visible_duration=0.05)

    actions = [controller.evaluate(0.9, t).action for t in (0.0, 0.01, 0.02)]
    assert actions == [TapAction.SHOW, TapAction.NO_OP, TapAction.NO_OP]

    assert controller.evaluate(0.9, 0.06).action is TapAction.HIDE
    assert not controller.visible


def test_show_carries_duration():
    controller = TapEventController(threshold=0.7, visible_duration=0.05)
    command = controller.evaluate(0.95, 1.0)
    assert command.action is TapAction.SHOW
    assert command.duration == pytest.approx(0.05)
    assert controller.visible_until == pytest.approx(1.05)


def test_threshold_is_strict():
    controller = TapEventController(threshold=0.7)
    assert controller.evaluate(0.7, 0.0).action is TapAction.NO_OP
    assert controller.evaluate(0.7000001, 0.01).action is TapAction.SHOW


def test_crossing_while_visible_does_not_rearm():
    controller = TapEventController(threshold=0.5, visible_duration=0.05)
    controller.evaluate(0.9, 0.0)
    controller.evaluate(0.9, 0.04)
    assert controller.visible_until == pytest.approx(0.05)
    assert controller.evaluate(0.9, 0.05).action is TapAction.HIDE


def test_can_fire_again_after_hide():
    controller = TapEventController(threshold=0.5, visible_duration=0.05)
    assert controller.evaluate(0.9, 0.0).action is TapAction.SHOW
    assert controller.evaluate(0.1, 0.1).action is TapAction.HIDE
    assert controller.evaluate(0.9, 0.2).action is TapAction.SHOW


def test_expire_without_score():
    controller = TapEventController(threshold=0.5, visible_duration=0.05)
    assert controller.expire(0.0).action is TapAction.NO_OP
    controller.evaluate(0.9, 0.0)
    assert controller.expire(0.03).action is TapAction.NO_OP
    assert controller.expire(0.08).action is TapAction.HIDE
    assert controller.expire(0.09).action is TapAction.NO_OP


def test_threshold_override():
    controller = TapEventController(threshold=0.7)
    assert controller.evaluate(0.6, 0.0, threshold=0.5).action is TapAction.SHOW


@pytest.mark.parametrize("kwargs", [
    {'threshold': -0.1},
    {'threshold': 1.5},
    {'visible_duration': 0.0},
])
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        TapEventController(**kwargs)


def main():
    """Run all tests."""
    logger.info("Running tap event tests...")
    test_debounce_single_show_then_hide()
    test_show_carries_duration()
    test_threshold_is_strict()
    test_crossing_while_visible_does_not_rearm()
    test_can_fire_again_after_hide()
    test_expire_without_score()
    test_threshold_override()
    logger.info("Tap event tests PASSED")


if __name__ == '__main__':
    main()
