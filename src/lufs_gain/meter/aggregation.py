"""Turn stored block energies into loudness values.

Integrated loudness uses a percentile-based relative gate: the block at rank
``floor(count * 0.9)`` in ascending order stands in for the programme loudness, and
blocks more than 8 dB below it are dropped. This differs from BS.1770, which gates
relative to the mean of all absolutely-gated blocks, and is kept deliberately so
results match previously stored measurements.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np

from .gating import ABSOLUTE_GATE_ENERGY, LOUDNESS_OFFSET_LU

RELATIVE_GATE_PERCENTILE = 0.9
MINUS_EIGHT_DECIBELS = 0.15848931924611134
MINUS_TWENTY_DECIBELS = 0.01
RANGE_LOW_PERCENTILE = 0.10
RANGE_HIGH_PERCENTILE = 0.95


def energy_to_loudness(energy: float) -> float:
    return 10.0 * math.log10(energy) - LOUDNESS_OFFSET_LU


def window_loudness(energy: float) -> float | None:
    """Ungated loudness of a single window, ``None`` for a window without energy."""

    if energy <= 0.0:
        return None
    return energy_to_loudness(energy)


def gated_loudness(energies: Iterable[float], block_count_limit: int | None = None) -> float | None:
    """Apply the relative gate to absolutely-gated block energies.

    ``block_count_limit`` caps how many blocks (loudest first) contribute. Returns
    ``None`` when no block is available or none clears the relative gate.
    """

    ordered = np.sort(np.fromiter(energies, dtype=np.float64))
    if not ordered.size:
        return None

    proxy = ordered[int(math.floor(ordered.size * RELATIVE_GATE_PERCENTILE))]
    threshold = proxy * MINUS_EIGHT_DECIBELS

    loudest_first = ordered[::-1]
    accepted = loudest_first[loudest_first >= threshold]
    if block_count_limit is not None:
        accepted = accepted[:block_count_limit]
    if not accepted.size:
        return None

    return energy_to_loudness(float(np.mean(accepted)))


def loudness_range(shortterm_energies: Iterable[float]) -> float:
    """Loudness range in LU from 3-second window energies.

    Windows below the absolute gate are dropped, then windows more than 20 dB
    below their mean energy; the result is the spread between the 10th and 95th
    percentile windows. Returns ``0.0`` when nothing survives the gates.
    """

    energies = np.fromiter(shortterm_energies, dtype=np.float64)
    energies = energies[energies >= ABSOLUTE_GATE_ENERGY]
    if not energies.size:
        return 0.0

    relative_threshold = float(np.mean(energies)) * MINUS_TWENTY_DECIBELS
    gated = np.sort(energies[energies >= relative_threshold])
    if not gated.size:
        return 0.0

    last = gated.size - 1
    low = gated[int(last * RANGE_LOW_PERCENTILE + 0.5)]
    high = gated[int(last * RANGE_HIGH_PERCENTILE + 0.5)]
    return energy_to_loudness(float(high)) - energy_to_loudness(float(low))
