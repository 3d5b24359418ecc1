"""
Inference adapter for the tap classifier.

Owns the classifier backend for the lifetime of a detector: loads it once,
reshapes each flattened window into the model's (1, window, features) input,
extracts the scalar confidence, and releases the backend exactly once.

USAGE:
    adapter = InferenceAdapter(OnnxRuntimeBackend())
    adapter.initialize('models/tap_detector.onnx')   # raises ModelLoadError

    confidence = adapter.infer(window.snapshot())     # raises InferenceError

    adapter.release()
"""

import logging
import threading

import numpy as np

from fingertap.config import TapDetectionConfig
from fingertap.inference.errors import InferenceDisposedError, InferenceError, ModelLoadError

logger = logging.getLogger(__name__)


class InferenceAdapter:
    """
    Wraps a ClassifierBackend behind initialize / infer / release.

    A failed initialize is fatal and propagates to the caller. A failed
    infer raises InferenceError, which the detection loop treats as a
    dropped tick. After release every infer raises InferenceDisposedError.
    """

    def __init__(self, backend, window_size=None, num_features=None):
        """
        Initialize the adapter.

        Args:
            backend (ClassifierBackend): Backend that executes the model
            window_size (int, optional): Sequence length. If None, uses config default
            num_features (int, optional): Channels per step. If None, uses config default
        """
        self.backend = backend
        self.window_size = window_size or TapDetectionConfig.WINDOW_SIZE
        self.num_features = num_features or TapDetectionConfig.NUM_FEATURES

        self._initialized = False
        self._released = False
        # Held for the whole of infer() and release() so the backend is never
        # released while an inference is still running.
        self._lock = threading.Lock()

    @property
    def input_shape(self):
        return (1, self.window_size, self.num_features)

    @property
    def is_ready(self):
        """True once initialized and until released."""
        return self._initialized and not self._released

    def initialize(self, model_handle):
        """
        Load the model into the backend.

        Args:
            model_handle: Model path or serialized model, passed to the backend

        Raises:
            ModelLoadError: If the backend cannot load the model
        """
        with self._lock:
            if self._released:
                raise ModelLoadError("Cannot initialize a released inference adapter")
            if self._initialized:
                logger.warning("Inference adapter already initialized, ignoring")
                return

            try:
                self.backend.initialize(model_handle)
            except ModelLoadError:
                raise
            except Exception as e:
                raise ModelLoadError(f"Backend failed to initialize: {e}") from e

            self._initialized = True
            logger.info(f"Inference adapter ready, input shape {self.input_shape}")

    def infer(self, flat_input):
        """
        Run the classifier on one flattened window.

        Args:
            flat_input (sequence): window_size * num_features floats, oldest step first

        Returns:
            float: The model's first output value, untouched

        Raises:
            InferenceDisposedError: If called after release()
            InferenceError: If not initialized, the input has the wrong size or the backend fails
        """
        with self._lock:
            if self._released:
                raise InferenceDisposedError("Inference backend has been released")
            if not self._initialized:
                raise InferenceError("Inference adapter is not initialized")

            data = np.asarray(flat_input, dtype=np.float32)
            expected = self.window_size * self.num_features
            if data.size != expected:
                raise InferenceError(f"Expected {expected} input values, got {data.size}")

            try:
                output = self.backend.run(data.reshape(self.input_shape))
            except Exception as e:
                raise InferenceError(f"Backend inference failed: {e}") from e

            values = np.asarray(output, dtype=np.float32).reshape(-1)
            if values.size == 0:
                raise InferenceError("Model returned an empty output")

            confidence = float(values[0])
            if not np.isfinite(confidence):
                raise InferenceError(f"Model returned a non-finite score: {confidence}")
            if not 0.0 <= confidence <= 1.0:
                logger.debug(f"Model score outside [0, 1]: {confidence:.4f}")

            return confidence

    def release(self):
        """
        Free the backend. Only the first call has an effect.
        """
        with self._lock:
            if self._released:
                logger.debug("Inference adapter already released")
                return
            self._released = True
            if self._initialized:
                self.backend.release()
            logger.info("Inference adapter released")
