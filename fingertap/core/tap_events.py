"""
Tap event controller.

Turns classifier scores into indicator commands. The indicator is shown for
a fixed duration when the score crosses the threshold, and crossings that
arrive while it is still visible are ignored (debounce). The hide deadline is
an explicit timestamp checked on every evaluation instead of a timer.

STATES:
    Hidden  --(confidence > threshold)-->      Visible   (deadline = now + duration)
    Visible --(now >= deadline)-->             Hidden
    Visible --(confidence > threshold)-->      Visible   (no re-arming)
"""

import logging
from dataclasses import dataclass
from enum import Enum

from fingertap.config import IndicatorConfig, TapDetectionConfig

logger = logging.getLogger(__name__)


class TapAction(Enum):
    """
    Actions the controller can request from the indicator.
    """

    SHOW = "show"
    HIDE = "hide"
    NO_OP = "no_op"


@dataclass(frozen=True)
class TapCommand:
    """Represents an indicator command to be executed."""

    action: TapAction
    duration: float = 0.0
    "Visible duration in seconds (SHOW only)."


NO_OP = TapCommand(TapAction.NO_OP)
HIDE = TapCommand(TapAction.HIDE)


class TapEventController:
    """
    Threshold and debounce logic for the tap indicator.
    """

    def __init__(self, threshold=None, visible_duration=None):
        """
        Initialize the controller in the Hidden state.

        Args:
            threshold (float, optional): Confidence cutoff in [0, 1]. If None, uses config default
            visible_duration (float, optional): Seconds the indicator stays visible. If None, uses config default
        """
        self.threshold = TapDetectionConfig.DETECTION_THRESHOLD if threshold is None else float(threshold)
        self.visible_duration = (IndicatorConfig.VISIBLE_DURATION if visible_duration is None
                                 else float(visible_duration))

        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"Detection threshold must be in [0, 1], got {self.threshold}")
        if self.visible_duration <= 0:
            raise ValueError(f"Visible duration must be positive, got {self.visible_duration}")

        self.visible = False
        self.visible_until = 0.0

    def evaluate(self, confidence, now, threshold=None):
        """
        Decide what the indicator should do for this tick.

        Args:
            confidence (float): Classifier score
            now (float): Current time in seconds
            threshold (float, optional): Override for this call. If None, uses the controller threshold

        Returns:
            TapCommand: SHOW with a duration, HIDE or NO_OP
        """
        cutoff = self.threshold if threshold is None else threshold

        if not self.visible and confidence > cutoff:
            self.visible = True
            self.visible_until = now + self.visible_duration
            logger.debug(f"Indicator shown until {self.visible_until:.3f}")
            return TapCommand(TapAction.SHOW, self.visible_duration)

        return self.expire(now)

    def expire(self, now):
        """
        Apply only the hide deadline (used on ticks without a score).

        Args:
            now (float): Current time in seconds

        Returns:
            TapCommand: HIDE if the deadline has passed, NO_OP otherwise
        """
        if self.visible and now >= self.visible_until:
            self.visible = False
            logger.debug(f"Indicator hidden at {now:.3f}")
            return HIDE
        return NO_OP
