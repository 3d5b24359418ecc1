"""
Fingertip sensors feeding the tap detection loop.

A sensor answers three questions once per tick: is the hand tracked, where
is the fingertip, and what time is it. The MediaPipe implementation caches
the answers from the last processed camera frame so the loop can query them
without re-running hand tracking.
"""

import logging
import time
from typing import Optional, Protocol

import cv2 as cv
import numpy as np

from fingertap.config import MediaPipeConfig

logger = logging.getLogger(__name__)


class FingertipSensor(Protocol):
    """Protocol for fingertip tracking sources."""

    def is_tracked(self) -> bool:
        """True if the hand is tracked this tick."""
        ...

    def get_fingertip_position(self) -> Optional[np.ndarray]:
        """Fingertip position as a length-3 array, or None if the landmark is missing."""
        ...

    def now(self) -> float:
        """Monotonic time of the current sample in seconds."""
        ...


class MediaPipeFingertipSensor:
    """
    Index fingertip tracking with MediaPipe Hands.

    Call update() with every camera frame, then hand the sensor to the
    detection loop. Positions come from world landmarks (meters) by default,
    so velocities do not depend on image resolution.
    """

    def __init__(self, handedness=None, landmark=None, use_world_landmarks=None, hands=None):
        """
        Initialize the sensor.

        Args:
            handedness (str, optional): 'Right', 'Left' or None for any hand. If None, uses config default
            landmark (int, optional): Landmark index to track. If None, uses the index finger tip
            use_world_landmarks (bool, optional): Prefer metric world landmarks. If None, uses config default
            hands (optional): Pre-built MediaPipe Hands graph. If None, one is created from config
        """
        self.handedness = MediaPipeConfig.HANDEDNESS if handedness is None else handedness
        self.landmark = MediaPipeConfig.INDEX_TIP_LANDMARK if landmark is None else int(landmark)
        self.use_world_landmarks = (MediaPipeConfig.USE_WORLD_LANDMARKS if use_world_landmarks is None
                                    else use_world_landmarks)

        if hands is None:
            import mediapipe as mp
            hands = mp.solutions.hands.Hands(
                static_image_mode=False,
                model_complexity=MediaPipeConfig.MODEL_COMPLEXITY,
                max_num_hands=MediaPipeConfig.MAX_NUM_HANDS,
                min_detection_confidence=MediaPipeConfig.MIN_DETECTION_CONFIDENCE,
                min_tracking_confidence=MediaPipeConfig.MIN_TRACKING_CONFIDENCE
            )
        self.hands = hands

        self._tracked = False
        self._position = None
        self._timestamp = time.monotonic()

        logger.info(f"Initialized MediaPipe fingertip sensor (hand={self.handedness or 'any'}, "
                    f"landmark={self.landmark}, world={self.use_world_landmarks})")

    def update(self, frame, timestamp=None):
        """
        Run hand tracking on a camera frame and cache the fingertip.

        Args:
            frame (numpy.ndarray): BGR image
            timestamp (float, optional): Capture time. If None, uses time.monotonic()
        """
        timestamp = time.monotonic() if timestamp is None else timestamp
        rgb = cv.cvtColor(frame, cv.COLOR_BGR2RGB)
        rgb.flags.writeable = False
        results = self.hands.process(rgb)
        self.update_from_results(results, timestamp)

    def update_from_results(self, results, timestamp):
        """
        Cache the fingertip from already computed MediaPipe results.

        Args:
            results: MediaPipe Hands output
            timestamp (float): Capture time in seconds
        """
        self._timestamp = float(timestamp)
        self._tracked = False
        self._position = None

        hand_index = self._find_hand(results)
        if hand_index is None:
            return
        self._tracked = True

        hand_sets = None
        if self.use_world_landmarks:
            hand_sets = getattr(results, 'multi_hand_world_landmarks', None)
        if not hand_sets:
            hand_sets = results.multi_hand_landmarks

        if hand_index >= len(hand_sets):
            return
        landmarks = hand_sets[hand_index].landmark
        if self.landmark >= len(landmarks):
            logger.debug(f"Landmark {self.landmark} missing from hand {hand_index}")
            return

        lm = landmarks[self.landmark]
        self._position = np.array([lm.x, lm.y, lm.z], dtype=float)

    def _find_hand(self, results):
        """
        Pick the hand to track from MediaPipe results.

        Returns:
            int or None: Index into the results' hand lists
        """
        if not getattr(results, 'multi_hand_landmarks', None):
            return None
        if self.handedness is None:
            return 0

        for i, handedness in enumerate(results.multi_handedness or []):
            if handedness.classification[0].label == self.handedness:
                return i
        return None

    def is_tracked(self):
        return self._tracked

    def get_fingertip_position(self):
        return None if self._position is None else self._position.copy()

    def now(self):
        return self._timestamp

    def close(self):
        """Release the MediaPipe graph."""
        if self.hands is not None:
            self.hands.close()
            self.hands = None
            logger.info("MediaPipe fingertip sensor closed")
