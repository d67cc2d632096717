from __future__ import annotations

import numpy as np

from .base import BaseProcessor
from ..domain.models import LoudnessResult
from ..domain.services import apply_gain


class LoudnessGainProcessor(BaseProcessor):
    """Apply a static normalization gain; clipping is left to the signal path."""

    def __init__(self, gain: float) -> None:
        self.gain = float(gain)

    @classmethod
    def from_result(cls, result: LoudnessResult) -> "LoudnessGainProcessor":
        return cls(result.gain)

    def process(self, audio: np.ndarray, sample_rate: float) -> np.ndarray:  # noqa: ARG002
        return apply_gain(audio, self.gain)
