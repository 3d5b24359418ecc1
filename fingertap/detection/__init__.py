"""
Detection Module - Fingertip sensing and kinematic feature extraction.

This module provides:
- Feature extraction from timestamped fingertip samples (features.py)
- Fingertip sensors, including MediaPipe Hands tracking (fingertip_sensor.py)
"""

from .features import Sample, KinematicState, FeatureVector, FeatureExtractor
from .fingertip_sensor import FingertipSensor, MediaPipeFingertipSensor

__all__ = [
    'Sample',
    'KinematicState',
    'FeatureVector',
    'FeatureExtractor',
    'FingertipSensor',
    'MediaPipeFingertipSensor',
]
