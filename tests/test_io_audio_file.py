from pathlib import Path

import numpy as np

from conftest import tone
from lufs_gain.io.audio_file import read_audio, write_audio


def test_roundtrip_keeps_float_samples(tmp_path: Path) -> None:
    audio = tone(amplitude=1.5, duration_s=0.1, channels=2).astype(np.float32)
    path = tmp_path / "nested" / "loud.wav"

    write_audio(path, audio, 48_000)
    restored, sample_rate = read_audio(path)

    assert sample_rate == 48_000
    assert restored.shape == audio.shape
    # Float output is not clipped.
    np.testing.assert_allclose(restored, audio)


def test_mono_files_are_read_as_single_column(tmp_path: Path) -> None:
    path = tmp_path / "mono.wav"
    write_audio(path, tone(duration_s=0.05), 44_100, subtype="PCM_16")

    restored, sample_rate = read_audio(path)

    assert sample_rate == 44_100
    assert restored.ndim == 2
    assert restored.shape[1] == 1
    assert restored.dtype == np.float32
