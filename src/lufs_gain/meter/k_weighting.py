"""K-weighting pre-filter (ITU-R BS.1770 shelf + high-pass cascade)."""

from __future__ import annotations

import math

import numpy as np
from scipy.signal import lfilter

from .errors import BufferSizeError

# Analog prototype constants for the head-diffraction shelf.
_SHELF_F0_HZ = 1681.974450955533
_SHELF_GAIN_DB = 3.999843853973347
_SHELF_Q = 0.7071752369554196
_SHELF_VB_EXPONENT = 0.4996667741545416

# Analog prototype constants for the RLB high-pass.
_HIGHPASS_F0_HZ = 38.13547087602444
_HIGHPASS_Q = 0.5003270373238773

FILTER_ORDER = 4


def k_weighting_coefficients(sample_rate: int) -> tuple[np.ndarray, np.ndarray]:
    """Return ``(b, a)`` of the combined 4th-order K-weighting filter.

    Both second-order sections are discretized with the bilinear transform and then
    multiplied into a single transfer function. ``a[0]`` is always 1.
    """

    k = math.tan(math.pi * _SHELF_F0_HZ / sample_rate)
    vh = 10.0 ** (_SHELF_GAIN_DB / 20.0)
    vb = vh**_SHELF_VB_EXPONENT
    a0 = 1.0 + k / _SHELF_Q + k * k
    shelf_b = np.array(
        [
            (vh + vb * k / _SHELF_Q + k * k) / a0,
            2.0 * (k * k - vh) / a0,
            (vh - vb * k / _SHELF_Q + k * k) / a0,
        ]
    )
    shelf_a = np.array([1.0, 2.0 * (k * k - 1.0) / a0, (1.0 - k / _SHELF_Q + k * k) / a0])

    k = math.tan(math.pi * _HIGHPASS_F0_HZ / sample_rate)
    a0 = 1.0 + k / _HIGHPASS_Q + k * k
    highpass_b = np.array([1.0, -2.0, 1.0])
    highpass_a = np.array([1.0, 2.0 * (k * k - 1.0) / a0, (1.0 - k / _HIGHPASS_Q + k * k) / a0])

    return np.convolve(shelf_b, highpass_b), np.convolve(shelf_a, highpass_a)


class KWeightingFilter:
    """Stateful per-channel K-weighting filter.

    Filter memory is kept between calls so a stream can be processed in chunks of
    any size with the same result as a single call.
    """

    def __init__(self, sample_rate: int, channel_count: int, active_channels: np.ndarray | None = None) -> None:
        self.sample_rate = int(sample_rate)
        self.channel_count = int(channel_count)
        self.b, self.a = k_weighting_coefficients(self.sample_rate)
        self._memory = np.zeros((FILTER_ORDER, self.channel_count), dtype=np.float64)
        self.set_active_channels(active_channels)

    def set_active_channels(self, active_channels: np.ndarray | None) -> None:
        if active_channels is None:
            active_channels = np.ones(self.channel_count, dtype=bool)
        self._active = np.asarray(active_channels, dtype=bool)

    @property
    def memory(self) -> np.ndarray:
        return self._memory.copy()

    def reset(self) -> None:
        self._memory.fill(0.0)

    def process(self, frames: np.ndarray, frame_count: int | None = None) -> np.ndarray:
        """Filter ``frame_count`` frames; unused channels come back as zeros.

        ``frames`` is either interleaved 1-D data or a ``(frames, channels)`` array.
        """

        matrix = as_frame_matrix(frames, self.channel_count, frame_count)
        weighted = np.zeros_like(matrix)
        if not matrix.shape[0] or not self._active.any():
            return weighted

        active = self._active
        weighted[:, active], self._memory[:, active] = lfilter(
            self.b, self.a, matrix[:, active], axis=0, zi=self._memory[:, active]
        )
        return weighted


def as_frame_matrix(samples: np.ndarray, channel_count: int, frame_count: int | None = None) -> np.ndarray:
    """Return the first ``frame_count`` frames of ``samples`` as float64 ``(frames, channels)``."""

    data = np.asarray(samples, dtype=np.float64)
    if data.ndim == 2:
        if data.shape[1] != channel_count:
            raise BufferSizeError(
                f"Expected {channel_count} channels per frame, got an array of shape {data.shape}."
            )
        data = data.reshape(-1)
    elif data.ndim != 1:
        raise BufferSizeError("Samples must be interleaved 1-D data or a (frames, channels) array.")

    available = data.size // channel_count
    if frame_count is None:
        if data.size % channel_count:
            raise BufferSizeError(
                f"Interleaved buffer of {data.size} samples is not a whole number of {channel_count}-channel frames."
            )
        frame_count = available
    if frame_count < 0:
        raise BufferSizeError("Frame count must not be negative.")
    if frame_count * channel_count > data.size:
        raise BufferSizeError(
            f"Frame count {frame_count} needs {frame_count * channel_count} samples, buffer holds {data.size}."
        )

    return data[: frame_count * channel_count].reshape(frame_count, channel_count)
