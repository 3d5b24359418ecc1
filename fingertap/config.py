"""
Configuration module for Finger Tap.

This module contains all configuration parameters and constants used throughout the application.
Centralizing configuration makes it easier to tune parameters and understand system behavior.

MODEL CONTRACT:
- WINDOW_SIZE and NUM_FEATURES must match the input shape the classifier was trained with
- The classifier input is (1, WINDOW_SIZE, NUM_FEATURES) float32, the output is a single score
"""

import logging


# ==================== Logging Configuration ====================
LOG_LEVEL = logging.INFO
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# ==================== Tap Detection Configuration ====================
class TapDetectionConfig:
    """
    Configuration for the windowed tap classifier.

    Each tick produces one feature vector (position, velocity, acceleration)
    along a single tracked axis. The last WINDOW_SIZE vectors are fed to the
    classifier, and a tap fires when its score is strictly above the threshold.
    """

    # Confidence cutoff (0-1). Scores equal to the threshold do not trigger.
    DETECTION_THRESHOLD = 0.7

    # Sequence length expected by the model (frames)
    WINDOW_SIZE = 100

    # Features per frame: position, velocity, acceleration
    NUM_FEATURES = 3

    # Spatial axis the features are computed on (0=x, 1=y, 2=z forward/depth)
    TRACKED_AXIS = 2


# ==================== Indicator Configuration ====================
class IndicatorConfig:
    """Configuration for the transient tap indicator."""

    # How long the indicator stays visible after a tap (seconds)
    VISIBLE_DURATION = 0.05

    # Overlay marker (BGR format)
    COLOR = (0, 255, 0)
    RADIUS = 24
    MARGIN = 20

    # Text display
    LABEL = "TAP"
    FONT_SCALE = 0.8
    FONT_THICKNESS = 2


# ==================== Inference Configuration ====================
class InferenceConfig:
    """
    Configuration for the classifier backend.

    Providers are tried in order. Any provider not available in the installed
    onnxruntime build is skipped, and FALLBACK_PROVIDER is always appended so
    the model still runs on machines without an accelerator.
    """

    # Default ONNX model location
    MODEL_PATH = 'models/tap_detector.onnx'

    # Accelerated execution providers, most preferred first
    PREFERRED_PROVIDERS = ['CUDAExecutionProvider']

    # General-purpose provider used when acceleration is unavailable
    FALLBACK_PROVIDER = 'CPUExecutionProvider'

    # Run one zero-filled inference right after loading
    WARMUP = True


# ==================== MediaPipe Hand Detection Configuration ====================
class MediaPipeConfig:
    """Configuration for MediaPipe hand tracking."""

    # Hand detection parameters
    MODEL_COMPLEXITY = 1
    MIN_DETECTION_CONFIDENCE = 0.75
    MIN_TRACKING_CONFIDENCE = 0.75
    MAX_NUM_HANDS = 2

    # Index finger tip landmark in the MediaPipe hand model
    INDEX_TIP_LANDMARK = 8

    # Which hand to track ('Right', 'Left' or None for the first detected hand)
    HANDEDNESS = 'Right'

    # Use metric world landmarks (meters, hand-centred) instead of normalized image landmarks
    USE_WORLD_LANDMARKS = True


# ==================== Camera Configuration ====================
class CameraConfig:
    """Camera capture configuration parameters."""

    # Default camera resolution
    DEFAULT_WIDTH = 1280
    DEFAULT_HEIGHT = 720

    # Camera buffer size (reduce latency)
    BUFFER_SIZE = 1

    # Run without a display window
    HEADLESS = False

    # Window title
    WINDOW_NAME = 'Finger Tap'
