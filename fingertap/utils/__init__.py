from .buffer import SlidingWindowBuffer

__all__ = ["SlidingWindowBuffer"]
