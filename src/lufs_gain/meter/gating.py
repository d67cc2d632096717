"""Gating-block energy computation and the absolute gate."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .modes import SURROUND_CHANNEL_WEIGHT, ChannelRole, is_surround
from .ring_buffer import FrameRingBuffer

LOUDNESS_OFFSET_LU = 0.691
ABSOLUTE_GATE_LUFS = -70.0
# Mean-square energy of a -70 LUFS block.
ABSOLUTE_GATE_ENERGY = 10.0 ** ((ABSOLUTE_GATE_LUFS + LOUDNESS_OFFSET_LU) / 10.0)


def channel_weights(channel_map: Sequence[ChannelRole]) -> np.ndarray:
    """Energy weight per channel: 0 for unused, 1.41 for surround, 1 otherwise."""

    weights = np.ones(len(channel_map), dtype=np.float64)
    for index, role in enumerate(channel_map):
        if role == ChannelRole.UNUSED:
            weights[index] = 0.0
        elif is_surround(role):
            weights[index] = SURROUND_CHANNEL_WEIGHT
    return weights


def block_energy(ring: FrameRingBuffer, frames_per_block: int, weights: np.ndarray) -> float:
    """Weighted mean-square energy of the trailing ``frames_per_block`` frames."""

    per_channel = ring.sum_of_squares(frames_per_block)
    active = weights > 0.0
    return float(np.dot(per_channel[active], weights[active]) / frames_per_block)


def passes_absolute_gate(energy: float) -> bool:
    return energy >= ABSOLUTE_GATE_ENERGY
