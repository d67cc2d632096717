from pathlib import Path

import numpy as np
import pytest
import soundfile as sf


def tone(
    frequency_hz: float = 1_000.0,
    amplitude: float = 1.0,
    duration_s: float = 5.0,
    sample_rate: int = 48_000,
    channels: int = 1,
) -> np.ndarray:
    """Sine tone shaped ``(frames,)`` for mono or ``(frames, channels)`` otherwise."""

    t = np.arange(int(sample_rate * duration_s)) / sample_rate
    mono = amplitude * np.sin(2 * np.pi * frequency_hz * t)
    if channels == 1:
        return mono
    return np.repeat(mono[:, np.newaxis], channels, axis=1)


@pytest.fixture
def sine_wave():
    sample_rate = 48_000
    return {
        "sample_rate": sample_rate,
        "full_scale": tone(amplitude=1.0, sample_rate=sample_rate),
        "quiet": tone(amplitude=0.1, sample_rate=sample_rate),
    }


@pytest.fixture
def write_wav(tmp_path: Path):
    def _write(
        audio: np.ndarray,
        sample_rate: int = 48_000,
        name: str = "tone.wav",
        subtype: str = "PCM_16",
    ) -> Path:
        path = tmp_path / name
        sf.write(path, audio, sample_rate, subtype=subtype)
        return path

    return _write
