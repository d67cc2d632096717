"""Fixed-capacity circular storage for K-weighted frames."""

from __future__ import annotations

import numpy as np


class FrameRingBuffer:
    """Circular ``(capacity, channels)`` frame store with a wrapping write cursor.

    Windows that straddle the end of the array are read as a head segment
    ``[0, write_index)`` plus a tail segment at the end of the array, so no copies
    or reallocations happen while streaming.
    """

    def __init__(self, capacity_frames: int, channel_count: int) -> None:
        if capacity_frames <= 0:
            raise ValueError("Ring buffer capacity must be positive.")
        self._data = np.zeros((capacity_frames, channel_count), dtype=np.float64)
        self.write_index = 0

    @property
    def capacity(self) -> int:
        return self._data.shape[0]

    @property
    def channel_count(self) -> int:
        return self._data.shape[1]

    def write(self, frames: np.ndarray) -> None:
        count = frames.shape[0]
        if count >= self.capacity:
            # Only the newest `capacity` frames survive; lay them out as if written one by one.
            tail = frames[count - self.capacity :]
            start = (self.write_index + count) % self.capacity
            self._data[start:] = tail[: self.capacity - start]
            self._data[:start] = tail[self.capacity - start :]
            self.write_index = start
            return

        start = self.write_index
        first = min(count, self.capacity - start)
        self._data[start : start + first] = frames[:first]
        rest = count - first
        if rest:
            self._data[:rest] = frames[first:]
        self.write_index = (start + count) % self.capacity

    def sum_of_squares(self, window_frames: int) -> np.ndarray:
        """Per-channel sum of squared samples over the trailing ``window_frames`` frames."""

        if window_frames > self.capacity:
            raise ValueError(
                f"Window of {window_frames} frames exceeds ring buffer capacity of {self.capacity}."
            )

        if self.write_index >= window_frames:
            window = self._data[self.write_index - window_frames : self.write_index]
            return np.einsum("ij,ij->j", window, window)

        head = self._data[: self.write_index]
        tail = self._data[self.capacity - (window_frames - self.write_index) :]
        return np.einsum("ij,ij->j", head, head) + np.einsum("ij,ij->j", tail, tail)

    def clear(self) -> None:
        self._data.fill(0.0)
        self.write_index = 0
