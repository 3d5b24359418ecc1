"""
Tap indicator rendering.

The detection loop only calls show() and hide(). The overlay indicator
remembers the requested visibility and paints a marker on each displayed
frame while visible.
"""

import logging
from typing import Protocol

import cv2 as cv

from fingertap.config import IndicatorConfig

logger = logging.getLogger(__name__)


class TapIndicator(Protocol):
    """Protocol for tap indicator sinks. Both calls must be idempotent."""

    def show(self) -> None:
        ...

    def hide(self) -> None:
        ...


class FrameOverlayIndicator:
    """
    Indicator drawn as a filled circle and label in the top-right corner of a frame.
    """

    def __init__(self, color=None, radius=None, label=None):
        """
        Initialize the indicator (hidden).

        Args:
            color (tuple, optional): BGR colour. If None, uses config default
            radius (int, optional): Marker radius in pixels. If None, uses config default
            label (str, optional): Text drawn next to the marker. If None, uses config default
        """
        self.color = IndicatorConfig.COLOR if color is None else color
        self.radius = IndicatorConfig.RADIUS if radius is None else radius
        self.label = IndicatorConfig.LABEL if label is None else label
        self.visible = False

    def show(self):
        if not self.visible:
            logger.debug("Showing tap indicator")
        self.visible = True

    def hide(self):
        self.visible = False

    def draw(self, image):
        """
        Draw the indicator on the image if visible.

        Args:
            image (numpy.ndarray): BGR image, modified in place

        Returns:
            numpy.ndarray: The same image
        """
        if not self.visible:
            return image

        h, w = image.shape[:2]
        margin = IndicatorConfig.MARGIN
        center = (w - margin - self.radius, margin + self.radius)
        cv.circle(image, center, self.radius, self.color, -1)

        (text_w, text_h), _ = cv.getTextSize(self.label, cv.FONT_HERSHEY_SIMPLEX,
                                             IndicatorConfig.FONT_SCALE, IndicatorConfig.FONT_THICKNESS)
        origin = (center[0] - self.radius - margin // 2 - text_w, center[1] + text_h // 2)
        cv.putText(image, self.label, origin, cv.FONT_HERSHEY_SIMPLEX,
                   IndicatorConfig.FONT_SCALE, self.color, IndicatorConfig.FONT_THICKNESS)
        return image
