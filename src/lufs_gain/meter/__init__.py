from .aggregation import energy_to_loudness, gated_loudness, loudness_range
from .errors import BufferSizeError, ConfigurationError
from .gating import ABSOLUTE_GATE_ENERGY, ABSOLUTE_GATE_LUFS
from .k_weighting import KWeightingFilter, k_weighting_coefficients
from .modes import ChannelRole, MeterMode, default_channel_map
from .ring_buffer import FrameRingBuffer
from .state import LoudnessMeter, integrated_loudness_multiple

__all__ = [
    "ABSOLUTE_GATE_ENERGY",
    "ABSOLUTE_GATE_LUFS",
    "BufferSizeError",
    "ChannelRole",
    "ConfigurationError",
    "FrameRingBuffer",
    "KWeightingFilter",
    "LoudnessMeter",
    "MeterMode",
    "default_channel_map",
    "energy_to_loudness",
    "gated_loudness",
    "integrated_loudness_multiple",
    "k_weighting_coefficients",
    "loudness_range",
]
