"""
Classifier backends for tap inference.

A backend is anything that can load a fixed-topology model, run it on a
(1, window, features) float32 tensor and release its resources. The
InferenceAdapter only talks to this capability, so the choice between an
accelerated and a general-purpose execution provider stays in here.
"""

import logging
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

import numpy as np
import onnxruntime as ort

from fingertap.config import InferenceConfig, TapDetectionConfig
from fingertap.inference.errors import ModelLoadError

logger = logging.getLogger(__name__)

ModelHandle = Union[str, Path, bytes]


class ClassifierBackend(Protocol):
    """Protocol for sequence classifier backends."""

    def initialize(self, model_handle: ModelHandle) -> None:
        """Load the model and prepare the execution context."""
        ...

    def run(self, inputs: np.ndarray) -> np.ndarray:
        """Run the model on one input tensor and return its first output."""
        ...

    def release(self) -> None:
        """Free the execution context."""
        ...


def select_providers(preferred: Optional[Sequence[str]] = None,
                     fallback: Optional[str] = None,
                     available: Optional[Sequence[str]] = None) -> List[str]:
    """
    Build the execution provider list for an inference session.

    Args:
        preferred (list, optional): Accelerated providers, most preferred first
        fallback (str, optional): General-purpose provider always kept last
        available (list, optional): Providers of the installed onnxruntime build

    Returns:
        list: Providers to pass to onnxruntime, fallback last
    """
    preferred = InferenceConfig.PREFERRED_PROVIDERS if preferred is None else preferred
    fallback = InferenceConfig.FALLBACK_PROVIDER if fallback is None else fallback
    available = ort.get_available_providers() if available is None else available

    providers = [p for p in preferred if p in available and p != fallback]
    skipped = [p for p in preferred if p not in available]
    if skipped:
        logger.info(f"Execution providers not available, falling back: {skipped}")
    providers.append(fallback)
    return providers


class OnnxRuntimeBackend:
    """
    ONNX Runtime backend with accelerated -> CPU provider fallback.

    The model must have a single rank-3 input compatible with
    (1, window_size, num_features). Symbolic dimensions are accepted.
    """

    def __init__(self, providers=None, window_size=None, num_features=None, warmup=None):
        """
        Initialize the backend (the model is loaded by initialize()).

        Args:
            providers (list, optional): Explicit provider list. If None, uses select_providers()
            window_size (int, optional): Expected sequence length. If None, uses config default
            num_features (int, optional): Expected channels per step. If None, uses config default
            warmup (bool, optional): Run a zero input once after loading. If None, uses config default
        """
        self.providers = list(providers) if providers is not None else None
        self.window_size = window_size or TapDetectionConfig.WINDOW_SIZE
        self.num_features = num_features or TapDetectionConfig.NUM_FEATURES
        self.warmup = InferenceConfig.WARMUP if warmup is None else warmup

        self.session = None
        self.input_name = None
        self.output_name = None

    @property
    def input_shape(self):
        return (1, self.window_size, self.num_features)

    @property
    def active_provider(self):
        """Provider actually used by the loaded session, or None."""
        if self.session is None:
            return None
        return self.session.get_providers()[0]

    def initialize(self, model_handle):
        """
        Load the ONNX model and validate its input signature.

        Args:
            model_handle (str | Path | bytes): Path to an .onnx file or the serialized model

        Raises:
            ModelLoadError: If the file is missing, cannot be parsed or has the wrong input shape
        """
        if not isinstance(model_handle, bytes):
            model_path = Path(model_handle)
            if not model_path.is_file():
                raise ModelLoadError(f"Model file not found: {model_path}")
            model_handle = str(model_path)

        providers = self.providers if self.providers is not None else select_providers()

        try:
            session = ort.InferenceSession(model_handle, providers=providers)
        except Exception as e:
            raise ModelLoadError(f"Failed to load model: {e}") from e

        inputs = session.get_inputs()
        outputs = session.get_outputs()
        if len(inputs) != 1:
            raise ModelLoadError(f"Expected a model with one input, got {len(inputs)}")
        if not outputs:
            raise ModelLoadError("Model has no outputs")
        if len(outputs) > 1:
            logger.warning(f"Model has {len(outputs)} outputs, only '{outputs[0].name}' is used")

        self._check_input_shape(inputs[0].shape)

        self.session = session
        self.input_name = inputs[0].name
        self.output_name = outputs[0].name
        logger.info(f"Loaded tap model: input '{self.input_name}' {self.input_shape}, "
                    f"provider={self.active_provider}")

        if self.warmup:
            self._warmup()

    def _check_input_shape(self, shape):
        """
        Check a model input shape against (1, window_size, num_features).

        Args:
            shape (list): Input shape reported by onnxruntime; symbolic dims are str or None

        Raises:
            ModelLoadError: If the rank or any fixed dimension does not match
        """
        if shape is None or len(shape) != 3:
            raise ModelLoadError(f"Expected a rank-3 model input, got shape {shape}")

        for dim, expected in zip(shape, self.input_shape):
            if isinstance(dim, int) and dim != expected:
                raise ModelLoadError(
                    f"Model input shape {list(shape)} does not match expected {list(self.input_shape)}"
                )

    def _warmup(self):
        dummy = np.zeros(self.input_shape, dtype=np.float32)
        try:
            self.run(dummy)
        except Exception as e:
            raise ModelLoadError(f"Model warm-up failed: {e}") from e

    def run(self, inputs):
        """
        Run the model synchronously.

        Args:
            inputs (numpy.ndarray): Float32 tensor of shape (1, window_size, num_features)

        Returns:
            numpy.ndarray: The model's first output
        """
        return self.session.run([self.output_name], {self.input_name: inputs})[0]

    def release(self):
        """Drop the inference session."""
        if self.session is not None:
            logger.info("Releasing ONNX Runtime session")
        self.session = None
