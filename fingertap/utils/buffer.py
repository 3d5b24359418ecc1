"""
Fixed-length sliding window of feature vectors feeding the tap classifier.
"""

from typing import Optional, Sequence

import numpy as np

from fingertap.config import TapDetectionConfig


class SlidingWindowBuffer:
    """
    A fixed-length window holding the last `capacity` feature vectors, oldest first.
    The window always contains exactly `capacity` rows: it starts filled with zero vectors
    and every push overwrites the oldest row in place.
    """

    def __init__(self, capacity: Optional[int] = None, num_features: Optional[int] = None) -> None:
        self.capacity = TapDetectionConfig.WINDOW_SIZE if capacity is None else int(capacity)
        self.num_features = TapDetectionConfig.NUM_FEATURES if num_features is None else int(num_features)

        assert self.capacity > 0
        assert self.num_features > 0

        self._arena = np.zeros((self.capacity, self.num_features), dtype=np.float32)
        self._cursor = 0
        "Index of the oldest row, which is also the next row to overwrite."

    def _check_width(self, vector: Sequence[float]) -> None:
        if len(vector) != self.num_features:
            raise ValueError(
                f"Expected a vector of {self.num_features} features, got {len(vector)}"
            )

    def push(self, vector: Sequence[float]) -> None:
        """
        Evict the oldest vector and append a new one.
        """
        self._check_width(vector)
        self._arena[self._cursor] = vector
        self._cursor = (self._cursor + 1) % self.capacity

    def snapshot(self) -> np.ndarray:
        """
        Return a flat copy of the window, oldest vector first, each vector's features contiguous.
        """
        ordered = np.concatenate((self._arena[self._cursor:], self._arena[:self._cursor]))
        return ordered.reshape(-1)

    def preview(self, vector: Sequence[float]) -> np.ndarray:
        """
        Return the snapshot the window would have after push(vector), leaving the window unchanged.
        """
        self._check_width(vector)
        ordered = self.snapshot().reshape(self.capacity, self.num_features)
        ordered = np.concatenate((ordered[1:], np.asarray(vector, dtype=np.float32).reshape(1, -1)))
        return ordered.reshape(-1)

    def __len__(self) -> int:
        return self.capacity

    def __str__(self) -> str:
        return str(self.snapshot().reshape(self.capacity, self.num_features))

    def __repr__(self) -> str:
        return f"SlidingWindowBuffer(capacity={self.capacity}, num_features={self.num_features})"
