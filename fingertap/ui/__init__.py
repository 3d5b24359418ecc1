"""
UI Module - Tap indicator rendering.

This module provides:
- The indicator protocol used by the detection loop
- An OpenCV frame overlay indicator
"""

from .indicator import TapIndicator, FrameOverlayIndicator

__all__ = [
    'TapIndicator',
    'FrameOverlayIndicator',
]
