"""
Per-tick tap detection loop.

Runs one synchronous pass per sensor tick:

    sensor sample -> FeatureExtractor -> SlidingWindowBuffer
                  -> InferenceAdapter -> TapEventController -> indicator

Every condition that ends a tick early (lost tracking, a bad timestamp, a
failed inference) is an explicit skip. A failed inference leaves the window
and the controller untouched. Only ModelLoadError from start() and
configuration errors from the constructor propagate to the host.
"""

import logging
from enum import Enum

from fingertap.core.tap_events import NO_OP, TapAction, TapEventController
from fingertap.detection.features import FeatureExtractor, Sample
from fingertap.inference.errors import InferenceError
from fingertap.utils.buffer import SlidingWindowBuffer

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """Lifecycle of the kinematic pipeline."""

    UNINITIALIZED = "uninitialized"
    "No valid sample since start or since tracking was lost."
    TRACKING = "tracking"
    "State seeded, no feature produced yet."
    FEATURE_READY = "feature_ready"
    "At least one feature pushed since tracking was (re)acquired."


class TapDetectionLoop:
    """
    Orchestrates feature extraction, windowing, inference and tap events.

    The loop is driven by an external per-frame clock: call tick() once per
    sensor update. It owns the inference adapter, so close() (or leaving a
    `with` block) releases the backend.
    """

    def __init__(self, sensor, adapter, indicator, threshold=None, visible_duration=None,
                 axis=None, window=None):
        """
        Initialize the detection loop.

        Args:
            sensor (FingertipSensor): Source of tracked flag, fingertip position and time
            adapter (InferenceAdapter): Classifier wrapper, initialized by start()
            indicator (TapIndicator): Sink receiving show() / hide()
            threshold (float, optional): Detection threshold. If None, uses config default
            visible_duration (float, optional): Indicator duration. If None, uses config default
            axis (int, optional): Tracked spatial axis. If None, uses config default
            window (SlidingWindowBuffer, optional): Feature window. If None, a new one matching the adapter
        """
        self.sensor = sensor
        self.adapter = adapter
        self.indicator = indicator

        self.extractor = FeatureExtractor(axis)
        self.window = window if window is not None else SlidingWindowBuffer(adapter.window_size, adapter.num_features)
        self.controller = TapEventController(threshold, visible_duration)

        if len(self.window) != adapter.window_size or self.window.num_features != adapter.num_features:
            raise ValueError(
                f"Window shape ({len(self.window)}, {self.window.num_features}) does not match "
                f"model input {adapter.input_shape}"
            )

        self.kinematics = None
        self.state = LoopState.UNINITIALIZED
        self.last_confidence = None
        self.tap_count = 0
        self._closed = False

    def start(self, model_handle):
        """
        Load the classifier. Must succeed before the first tick.

        Args:
            model_handle: Model path or serialized model

        Raises:
            ModelLoadError: If the model cannot be loaded
        """
        logger.info("Starting tap detection loop...")
        self.indicator.hide()
        self.adapter.initialize(model_handle)
        logger.info(f"Tap detection running (threshold={self.controller.threshold}, "
                    f"window={len(self.window)}, axis={self.extractor.axis})")

    def tick(self):
        """
        Run one detection pass.

        Returns:
            TapCommand: The command applied to the indicator this tick
        """
        if self._closed:
            raise RuntimeError("Tap detection loop is closed")
        if not self.adapter.is_ready:
            raise RuntimeError("Tap detection loop started without a loaded model")

        tracked = self.sensor.is_tracked()
        position = self.sensor.get_fingertip_position() if tracked else None
        now = self.sensor.now()

        if position is None:
            self._on_sensor_gap(tracked)
            return self._apply(self.controller.expire(now))

        feature, self.kinematics = self.extractor.extract(Sample.create(position, now), self.kinematics)
        if feature is None:
            if self.state is LoopState.UNINITIALIZED:
                self.state = LoopState.TRACKING
            return self._apply(self.controller.expire(now))

        # The feature is committed only once the classifier has scored it
        try:
            confidence = self.adapter.infer(self.window.preview(feature))
        except InferenceError as e:
            logger.warning(f"Inference failed, skipping tick: {e}")
            return NO_OP

        self.window.push(feature)
        self.state = LoopState.FEATURE_READY
        self.last_confidence = confidence
        command = self.controller.evaluate(confidence, now)
        if command.action is TapAction.SHOW:
            self.tap_count += 1
            logger.info(f"TAP DETECTED! Confidence: {confidence:.0%} "
                        f"(velocity={feature.velocity:.3f}, acceleration={feature.acceleration:.3f})")
        return self._apply(command)

    def _on_sensor_gap(self, tracked):
        """Drop the kinematic state so the next sample re-seeds it."""
        if self.state is not LoopState.UNINITIALIZED:
            reason = "fingertip not found" if tracked else "hand not tracked"
            logger.debug(f"Tracking lost ({reason}), resetting kinematic state")
        self.kinematics = None
        self.state = LoopState.UNINITIALIZED

    def _apply(self, command):
        """
        Execute a controller command against the indicator.

        Args:
            command (TapCommand): Command to execute

        Returns:
            TapCommand: The same command
        """
        if command.action is TapAction.SHOW:
            self.indicator.show()
        elif command.action is TapAction.HIDE:
            self.indicator.hide()
        return command

    def close(self):
        """
        Hide the indicator and release the classifier backend.
        """
        if self._closed:
            return
        self._closed = True
        logger.info(f"Stopping tap detection loop ({self.tap_count} taps detected)")
        try:
            self.indicator.hide()
        finally:
            self.adapter.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


__all__ = ["LoopState", "TapDetectionLoop"]
