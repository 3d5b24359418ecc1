"""
Kinematic feature extraction for tap detection.

This module turns consecutive fingertip samples into the per-frame feature
vector the classifier consumes: position, velocity and acceleration along a
single tracked axis.

The extractor keeps no hidden state. The previous position, velocity and
timestamp travel in an explicit KinematicState value that is passed in and
returned on every call, so the reset-on-gap policy is just "pass None".
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

import numpy as np

from fingertap.config import TapDetectionConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sample:
    """
    A single fingertip observation.
    Instances are immutable once captured.
    """

    position: np.ndarray
    "Fingertip position as a length-3 float array."
    timestamp: float
    "Monotonic capture time in seconds."

    @classmethod
    def create(cls, position, timestamp) -> "Sample":
        """
        Build a sample from any 3-element sequence.
        """
        pos = np.array(position, dtype=float).reshape(3)
        pos.flags.writeable = False
        return cls(pos, float(timestamp))


@dataclass(frozen=True)
class KinematicState:
    """
    Motion history needed to differentiate the next sample.
    """

    last_position: np.ndarray
    "Position of the previous accepted sample."
    last_velocity: np.ndarray
    "Velocity computed on the previous accepted sample."
    last_timestamp: float
    "Timestamp of the previous accepted sample."

    @classmethod
    def seed(cls, sample: Sample) -> "KinematicState":
        """
        Initial state for the first sample after (re)acquisition: zero velocity.
        """
        return cls(sample.position, np.zeros(3, dtype=float), sample.timestamp)


class FeatureVector(NamedTuple):
    """Per-frame classifier input, in model channel order."""

    position: float
    velocity: float
    acceleration: float


class FeatureExtractor:
    """
    Converts timestamped positions into kinematic feature vectors.

    The first sample after (re)acquisition only seeds the state, so no
    velocity or acceleration is ever computed across a tracking gap.
    Duplicate or out-of-order timestamps are skipped without touching the
    state.
    """

    def __init__(self, axis=None):
        """
        Initialize the extractor.

        Args:
            axis (int, optional): Spatial axis to extract (0, 1 or 2). If None, uses config default.
        """
        self.axis = TapDetectionConfig.TRACKED_AXIS if axis is None else int(axis)
        if self.axis not in (0, 1, 2):
            raise ValueError(f"Tracked axis must be 0, 1 or 2, got {axis}")

    def extract(self, sample: Sample,
                state: Optional[KinematicState]) -> Tuple[Optional[FeatureVector], Optional[KinematicState]]:
        """
        Compute the feature vector for a new sample.

        Args:
            sample (Sample): Current fingertip sample
            state (KinematicState, optional): State returned by the previous call,
                or None if this is the first sample since tracking was (re)acquired

        Returns:
            tuple: (feature, new_state) where feature is None when the tick is skipped
        """
        if state is None:
            return None, KinematicState.seed(sample)

        dt = sample.timestamp - state.last_timestamp
        if dt <= 0:
            logger.debug(f"Skipping sample with non-positive dt={dt:.6f}s")
            return None, state

        velocity = (sample.position - state.last_position) / dt
        acceleration = (velocity - state.last_velocity) / dt

        feature = FeatureVector(
            float(sample.position[self.axis]),
            float(velocity[self.axis]),
            float(acceleration[self.axis]),
        )
        return feature, KinematicState(sample.position, velocity, sample.timestamp)
