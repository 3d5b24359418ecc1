"""
Core Module - Tap events and the detection loop.

This module contains the decision and orchestration logic:
- Threshold and debounce of classifier scores (tap_events.py)
- Per-tick orchestration of the whole pipeline (detection_loop.py)
"""

from .tap_events import TapAction, TapCommand, TapEventController
from .detection_loop import LoopState, TapDetectionLoop

__all__ = [
    # Tap events
    'TapAction',
    'TapCommand',
    'TapEventController',
    # Loop
    'LoopState',
    'TapDetectionLoop',
]
