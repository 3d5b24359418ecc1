"""
Finger Tap - fingertip tap detection from tracked hand motion.

A short history of fingertip positions is turned into kinematic features,
buffered into a fixed-length window and classified by a pretrained sequence
model. A transient indicator is shown when the model is confident enough.

Main components:
- config: Centralized configuration
- detection: Kinematic feature extraction and the MediaPipe fingertip sensor
- utils: Sliding window buffer
- inference: Classifier backends and the inference adapter
- core: Tap event controller and the per-tick detection loop
- ui: Tap indicator rendering
"""

__version__ = "1.0.0"
