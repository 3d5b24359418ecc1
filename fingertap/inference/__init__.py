"""
Inference Module - Classifier backends and the inference adapter.

This module provides:
- The backend protocol and the ONNX Runtime backend (backends.py)
- The adapter owning backend lifecycle and tensor shape (adapter.py)
- Inference error types (errors.py)
"""

from .errors import ModelLoadError, InferenceError, InferenceDisposedError
from .backends import ClassifierBackend, OnnxRuntimeBackend, select_providers
from .adapter import InferenceAdapter

__all__ = [
    'ModelLoadError',
    'InferenceError',
    'InferenceDisposedError',
    'ClassifierBackend',
    'OnnxRuntimeBackend',
    'select_providers',
    'InferenceAdapter',
]
