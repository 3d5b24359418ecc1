"""
Error types raised by the inference layer.

ModelLoadError is fatal: a detector without a model cannot run.
InferenceError is per tick: the tick is dropped and detection continues.
"""


class ModelLoadError(RuntimeError):
    """The classifier could not be loaded or does not match the expected input shape."""


class InferenceError(RuntimeError):
    """A single inference call failed."""


class InferenceDisposedError(InferenceError):
    """Inference was requested after the backend was released."""
