"""Domain services that contain pure business rules."""

from __future__ import annotations

import math

import numpy as np

from lufs_gain.audio_contract import GAIN_FLOOR_LUFS, REFERENCE_LOUDNESS_LUFS


def derive_gain(loudness_lufs: float | None, reference_lufs: float = REFERENCE_LOUDNESS_LUFS) -> float:
    """Linear gain that moves ``loudness_lufs`` to ``reference_lufs``.

    Unavailable, non-finite and silent-programme measurements (at or below
    -70 LUFS) map to unity gain.
    """

    if loudness_lufs is None or not math.isfinite(loudness_lufs) or loudness_lufs <= GAIN_FLOOR_LUFS:
        return 1.0
    return float(10.0 ** ((reference_lufs - loudness_lufs) / 20.0))


def apply_gain(samples: np.ndarray, gain: float) -> np.ndarray:
    """Multiply every sample by ``gain``; no clipping or dithering is applied."""

    audio = np.asarray(samples)
    if not np.issubdtype(audio.dtype, np.floating):
        audio = audio.astype(np.float32)
    return (audio * gain).astype(audio.dtype, copy=False)
