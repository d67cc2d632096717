"""Domain models exported across the host boundary."""

from __future__ import annotations

import math
from dataclasses import dataclass

from lufs_gain.audio_contract import FALLBACK_LOUDNESS_LUFS, REFERENCE_LOUDNESS_LUFS
from lufs_gain.domain.services import derive_gain


@dataclass(frozen=True, slots=True)
class LoudnessResult:
    """Immutable snapshot of one completed loudness analysis."""

    lufs: float
    sample_rate: int
    channel_count: int
    duration_seconds: float
    gain: float
    measured: bool = True

    @classmethod
    def from_measurement(
        cls,
        lufs: float | None,
        *,
        sample_rate: int,
        channel_count: int,
        duration_seconds: float,
        reference_lufs: float = REFERENCE_LOUDNESS_LUFS,
        fallback_lufs: float = FALLBACK_LOUDNESS_LUFS,
    ) -> "LoudnessResult":
        """Build a result, substituting ``fallback_lufs`` when nothing was measured."""

        measured = lufs is not None
        value = float(lufs) if lufs is not None else float(fallback_lufs)
        return cls(
            lufs=value,
            sample_rate=int(sample_rate),
            channel_count=int(channel_count),
            duration_seconds=float(duration_seconds),
            gain=derive_gain(lufs, reference_lufs),
            measured=measured,
        )

    @classmethod
    def unavailable(
        cls,
        *,
        sample_rate: int = 0,
        channel_count: int = 0,
        duration_seconds: float = 0.0,
        fallback_lufs: float = FALLBACK_LOUDNESS_LUFS,
    ) -> "LoudnessResult":
        """Quiet-loudness, unity-gain default used when a source cannot be analyzed."""

        return cls(
            lufs=float(fallback_lufs),
            sample_rate=sample_rate,
            channel_count=channel_count,
            duration_seconds=duration_seconds,
            gain=1.0,
            measured=False,
        )

    @property
    def gain_db(self) -> float:
        return 20.0 * math.log10(self.gain)

    def as_dict(self) -> dict[str, float | int | bool]:
        return {
            "lufs": round(self.lufs, 2),
            "gain": round(self.gain, 6),
            "gain_db": round(self.gain_db, 2),
            "sample_rate": self.sample_rate,
            "channel_count": self.channel_count,
            "duration_seconds": round(self.duration_seconds, 3),
            "measured": self.measured,
        }
