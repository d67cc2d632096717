from __future__ import annotations

from pathlib import Path

import soundfile as sf
import numpy as np


def read_audio(path: Path) -> tuple[np.ndarray, int]:
    """Read a whole file as float32 ``(frames, channels)`` samples."""

    audio, sample_rate = sf.read(path, dtype="float32", always_2d=True)
    return audio, int(sample_rate)


def write_audio(path: Path, audio: np.ndarray, sample_rate: int, subtype: str = "FLOAT") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    sf.write(path, audio, samplerate=sample_rate, subtype=subtype)
