"""Marshalling layer for an embedding host (e.g. a managed-runtime plugin).

The host never sees Python objects. Results and meter sessions are parked in
registries behind opaque integer handles; handle ``0`` is the null handle. Every
call returns a :class:`HostResult` instead of raising, so failures travel back as
data rather than through a process-wide logging callback.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from pathlib import Path
from typing import Any

import numpy as np

from lufs_gain.application.analysis_service import AnalyzeLoudness
from lufs_gain.audio_contract import FALLBACK_LOUDNESS_LUFS, UnsupportedFormatError
from lufs_gain.domain.models import LoudnessResult
from lufs_gain.domain.services import apply_gain
from lufs_gain.meter import BufferSizeError, ConfigurationError, LoudnessMeter

NULL_HANDLE = 0


@dataclass(frozen=True, slots=True)
class HostResult:
    ok: bool
    value: Any = None
    code: str | None = None
    message: str | None = None

    @classmethod
    def success(cls, value: Any = None) -> "HostResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, code: str, message: str) -> "HostResult":
        return cls(ok=False, code=code, message=message)

    def as_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "value": self.value, "code": self.code, "message": self.message}


class HostBridge:
    """Translate host calls into analysis and meter operations."""

    def __init__(self, service: AnalyzeLoudness | None = None) -> None:
        self._service = service or AnalyzeLoudness()
        self._handles = count(1)
        self._results: dict[int, LoudnessResult] = {}
        self._meters: dict[int, LoudnessMeter] = {}

    def analyze_file(self, path: str) -> HostResult:
        try:
            result = self._service.analyze_file(Path(path))
        except UnsupportedFormatError as error:
            return HostResult.failure(error.code, error.message)
        return HostResult.success(self._register_result(result))

    def register_result(self, result: LoudnessResult) -> HostResult:
        return HostResult.success(self._register_result(result))

    def get_lufs(self, handle: int) -> float:
        result = self._results.get(handle)
        return result.lufs if result is not None else FALLBACK_LOUDNESS_LUFS

    def get_gain(self, handle: int) -> float:
        result = self._results.get(handle)
        return result.gain if result is not None else 1.0

    def describe(self, handle: int) -> HostResult:
        result = self._results.get(handle)
        if result is None:
            return _invalid_handle(handle)
        return HostResult.success(
            {
                "lufs": result.lufs,
                "gain": result.gain,
                "sample_rate": result.sample_rate,
                "channel_count": result.channel_count,
                "duration_seconds": result.duration_seconds,
                "measured": result.measured,
            }
        )

    def process_audio(self, handle: int, input_buffer: np.ndarray, output_buffer: np.ndarray | None = None) -> HostResult:
        """Scale ``input_buffer`` by the result's gain, into ``output_buffer`` when given."""

        result = self._results.get(handle)
        if result is None:
            return _invalid_handle(handle)

        scaled = apply_gain(input_buffer, result.gain)
        if output_buffer is None:
            return HostResult.success(scaled)
        if output_buffer.shape != scaled.shape:
            return HostResult.failure(
                "buffer_size",
                f"Output buffer shape {output_buffer.shape} does not match input shape {scaled.shape}.",
            )
        output_buffer[...] = scaled
        return HostResult.success(output_buffer)

    def destroy(self, handle: int) -> HostResult:
        self._results.pop(handle, None)
        return HostResult.success()

    def open_meter(self, channel_count: int, sample_rate: int, mode: int) -> HostResult:
        try:
            meter = LoudnessMeter(channel_count, sample_rate, mode)
        except ConfigurationError as error:
            return HostResult.failure("invalid_configuration", str(error))
        handle = next(self._handles)
        self._meters[handle] = meter
        return HostResult.success(handle)

    def feed_meter(self, handle: int, samples: np.ndarray, frame_count: int) -> HostResult:
        meter = self._meters.get(handle)
        if meter is None:
            return _invalid_handle(handle)
        try:
            meter.feed(samples, frame_count)
        except BufferSizeError as error:
            return HostResult.failure("buffer_size", str(error))
        except (TypeError, ValueError) as error:
            return HostResult.failure("invalid_samples", str(error))
        return HostResult.success()

    def meter_integrated_loudness(self, handle: int) -> HostResult:
        meter = self._meters.get(handle)
        if meter is None:
            return _invalid_handle(handle)
        return _loudness_result(meter.integrated_loudness())

    def meter_segment_loudness(self, handle: int) -> HostResult:
        meter = self._meters.get(handle)
        if meter is None:
            return _invalid_handle(handle)
        return _loudness_result(meter.segment_loudness())

    def reset_meter(self, handle: int) -> HostResult:
        meter = self._meters.get(handle)
        if meter is None:
            return _invalid_handle(handle)
        meter.reset_segment()
        return HostResult.success()

    def finish_meter(self, handle: int) -> HostResult:
        """Snapshot a meter session into a result handle (the meter stays open)."""

        meter = self._meters.get(handle)
        if meter is None:
            return _invalid_handle(handle)
        return HostResult.success(self._register_result(self._service.result_from_meter(meter)))

    def close_meter(self, handle: int) -> HostResult:
        self._meters.pop(handle, None)
        return HostResult.success()

    def _register_result(self, result: LoudnessResult) -> int:
        handle = next(self._handles)
        self._results[handle] = result
        return handle


def _invalid_handle(handle: int) -> HostResult:
    if handle == NULL_HANDLE:
        return HostResult.failure("null_handle", "Handle is null.")
    return HostResult.failure("invalid_handle", f"Unknown or destroyed handle: {handle}.")


def _loudness_result(loudness: float | None) -> HostResult:
    if loudness is None:
        return HostResult.failure("measurement_unavailable", "No gating block cleared the gates.")
    return HostResult.success(loudness)
