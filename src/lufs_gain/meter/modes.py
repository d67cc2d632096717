"""Measurement modes and channel roles for the loudness meter."""

from __future__ import annotations

from enum import IntEnum, IntFlag

from .errors import ConfigurationError

SURROUND_CHANNEL_WEIGHT = 1.41


class MeterMode(IntFlag):
    """Which measurements a meter keeps state for."""

    MOMENTARY = 1
    SHORT_TERM = 2
    INTEGRATED = 4
    LOUDNESS_RANGE = 8


_MEASUREMENT_MODES = MeterMode.MOMENTARY | MeterMode.SHORT_TERM | MeterMode.INTEGRATED
_ALL_MODES = _MEASUREMENT_MODES | MeterMode.LOUDNESS_RANGE


class ChannelRole(IntEnum):
    """Role of an input channel in the gating-block energy sum."""

    UNUSED = 0
    LEFT = 1
    RIGHT = 2
    CENTER = 3
    LEFT_SURROUND = 4
    RIGHT_SURROUND = 5


_DEFAULT_LAYOUT: dict[int, ChannelRole] = {
    0: ChannelRole.LEFT,
    1: ChannelRole.RIGHT,
    2: ChannelRole.CENTER,
    4: ChannelRole.LEFT_SURROUND,
    5: ChannelRole.RIGHT_SURROUND,
}


def resolve_mode(mode: int) -> MeterMode:
    """Drop unknown bits from a mode mask and add the modes it depends on.

    Loudness range needs short-term windows, and both short-term and integrated
    measurement run on top of momentary blocks.
    """

    resolved = MeterMode(int(mode) & int(_ALL_MODES))
    if resolved & MeterMode.LOUDNESS_RANGE:
        resolved |= MeterMode.SHORT_TERM
    if resolved & (MeterMode.SHORT_TERM | MeterMode.INTEGRATED):
        resolved |= MeterMode.MOMENTARY

    if not resolved & _MEASUREMENT_MODES:
        raise ConfigurationError(
            "Invalid mode: select at least one of momentary, short-term or integrated."
        )
    return resolved


def default_channel_map(channel_count: int) -> tuple[ChannelRole, ...]:
    """Return the default role per channel index (index 3 is LFE and ignored)."""

    return tuple(_DEFAULT_LAYOUT.get(index, ChannelRole.UNUSED) for index in range(channel_count))


def is_surround(role: ChannelRole) -> bool:
    return role in (ChannelRole.LEFT_SURROUND, ChannelRole.RIGHT_SURROUND)
