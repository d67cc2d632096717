"""Streaming EBU R128 loudness meter."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from .aggregation import gated_loudness, loudness_range, window_loudness
from .errors import ConfigurationError
from .gating import block_energy, channel_weights, passes_absolute_gate
from .k_weighting import KWeightingFilter, as_frame_matrix
from .modes import ChannelRole, MeterMode, default_channel_map, resolve_mode
from .ring_buffer import FrameRingBuffer


class LoudnessMeter:
    """Measurement session over one interleaved float sample stream.

    Frames are K-weighted into a ring buffer as they arrive. The first gating block
    covers 400 ms; every later block covers the trailing 400 ms and starts 200 ms
    after the previous one. Results do not depend on how the caller chunks input.

    A meter is not thread-safe; measure independent streams with independent meters.
    """

    def __init__(self, channel_count: int, sample_rate: int, mode: int = MeterMode.INTEGRATED) -> None:
        if channel_count < 1:
            raise ConfigurationError(f"Channel count must be at least 1, got {channel_count}.")
        if sample_rate <= 0:
            raise ConfigurationError(f"Sample rate must be positive, got {sample_rate}.")

        self.mode = resolve_mode(mode)
        self.channel_count = int(channel_count)
        self.sample_rate = int(sample_rate)

        self._step_frames = max(1, self.sample_rate // 5)
        self._block_frames = 2 * self._step_frames
        self._shortterm_frames = 3 * self.sample_rate
        self._shortterm_step_frames = self.sample_rate

        capacity = self._shortterm_frames if self.has_mode(MeterMode.SHORT_TERM) else self._block_frames
        self._ring = FrameRingBuffer(capacity, self.channel_count)

        self._channel_map = default_channel_map(self.channel_count)
        self._weights = channel_weights(self._channel_map)
        self._filter = KWeightingFilter(self.sample_rate, self.channel_count, self._weights > 0.0)

        self._frames_until_next_block = self._block_frames
        self._shortterm_frame_counter = 0
        self._momentary_blocks: list[float] = []
        self._shortterm_blocks: list[float] = []
        self._integrated_block_count = 0
        self._frames_processed = 0

    def has_mode(self, mode: MeterMode) -> bool:
        return (self.mode & mode) == mode

    @property
    def channel_map(self) -> tuple[ChannelRole, ...]:
        return self._channel_map

    def set_channel_map(self, roles: Sequence[int]) -> None:
        """Replace the role of every channel (e.g. to mark an LFE or a surround channel)."""

        if len(roles) != self.channel_count:
            raise ConfigurationError(
                f"Channel map needs {self.channel_count} roles, got {len(roles)}."
            )
        try:
            channel_map = tuple(ChannelRole(role) for role in roles)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown channel role in {list(roles)}.") from exc

        self._channel_map = channel_map
        self._weights = channel_weights(channel_map)
        self._filter.set_active_channels(self._weights > 0.0)

    @property
    def ring_capacity(self) -> int:
        return self._ring.capacity

    @property
    def frames_until_next_block(self) -> int:
        return self._frames_until_next_block

    @property
    def frames_processed(self) -> int:
        return self._frames_processed

    @property
    def duration_seconds(self) -> float:
        return self._frames_processed / self.sample_rate

    @property
    def momentary_block_energies(self) -> tuple[float, ...]:
        return tuple(self._momentary_blocks)

    @property
    def shortterm_block_energies(self) -> tuple[float, ...]:
        return tuple(self._shortterm_blocks)

    @property
    def integrated_block_count(self) -> int:
        return self._integrated_block_count

    def feed(self, samples: np.ndarray | Sequence[float], frame_count: int | None = None) -> None:
        """Add ``frame_count`` frames of interleaved float samples in ``[-1.0, 1.0]``.

        Raises :class:`BufferSizeError` when ``samples`` holds fewer than
        ``frame_count * channel_count`` values.
        """

        frames = as_frame_matrix(samples, self.channel_count, frame_count)
        offset = 0
        remaining = frames.shape[0]

        while remaining > 0:
            if remaining >= self._frames_until_next_block:
                needed = self._frames_until_next_block
                self._write(frames[offset : offset + needed])
                offset += needed
                remaining -= needed

                if self.has_mode(MeterMode.INTEGRATED):
                    self._store_gating_block()
                if self.has_mode(MeterMode.LOUDNESS_RANGE):
                    self._shortterm_frame_counter += needed
                    if self._shortterm_frame_counter >= self._shortterm_frames:
                        self._shortterm_blocks.append(
                            block_energy(self._ring, self._shortterm_frames, self._weights)
                        )
                        self._shortterm_frame_counter -= self._shortterm_step_frames

                self._frames_until_next_block = self._step_frames
            else:
                self._write(frames[offset:])
                if self.has_mode(MeterMode.LOUDNESS_RANGE):
                    self._shortterm_frame_counter += remaining
                self._frames_until_next_block -= remaining
                remaining = 0

        self._frames_processed += frames.shape[0]

    def _write(self, frames: np.ndarray) -> None:
        self._ring.write(self._filter.process(frames))

    def _store_gating_block(self) -> None:
        energy = block_energy(self._ring, self._block_frames, self._weights)
        if passes_absolute_gate(energy):
            self._momentary_blocks.append(energy)
            self._integrated_block_count += 1

    def integrated_loudness(self) -> float | None:
        """Gated loudness of everything fed since creation or the last reset, in LUFS."""

        if not self.has_mode(MeterMode.INTEGRATED):
            return None
        return gated_loudness(self._momentary_blocks)

    def segment_loudness(self) -> float | None:
        """Gated loudness limited to the blocks produced since the last reset."""

        if not self.has_mode(MeterMode.INTEGRATED):
            return None
        return gated_loudness(self._momentary_blocks, block_count_limit=self._integrated_block_count)

    def momentary_loudness(self) -> float | None:
        if not self.has_mode(MeterMode.MOMENTARY):
            return None
        return window_loudness(block_energy(self._ring, self._block_frames, self._weights))

    def shortterm_loudness(self) -> float | None:
        if not self.has_mode(MeterMode.SHORT_TERM):
            return None
        return window_loudness(block_energy(self._ring, self._shortterm_frames, self._weights))

    def loudness_range(self) -> float | None:
        """Loudness range in LU over the stored 3-second windows."""

        if not self.has_mode(MeterMode.LOUDNESS_RANGE):
            return None
        return loudness_range(self._shortterm_blocks)

    def reset_segment(self) -> None:
        """Start a new measurement segment, reusing the allocated buffers."""

        self._momentary_blocks.clear()
        self._shortterm_blocks.clear()
        self._integrated_block_count = 0
        self._frames_until_next_block = self._block_frames
        self._shortterm_frame_counter = 0
        self._frames_processed = 0
        self._ring.clear()
        self._filter.reset()


def integrated_loudness_multiple(meters: Iterable[LoudnessMeter]) -> float | None:
    """Gated loudness over the pooled blocks of several meters."""

    energies: list[float] = []
    for meter in meters:
        if not meter.has_mode(MeterMode.INTEGRATED):
            return None
        energies.extend(meter.momentary_block_energies)
    return gated_loudness(energies)
