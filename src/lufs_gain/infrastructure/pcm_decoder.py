"""Block-wise PCM decode adapter backed by soundfile."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

import numpy as np
import soundfile as sf

from lufs_gain.audio_contract import UnsupportedFormatError


class PcmStream:
    """Open decoder handle yielding float32 ``(frames, channels)`` blocks."""

    def __init__(self, audio_file: sf.SoundFile) -> None:
        self._audio_file = audio_file

    @property
    def sample_rate(self) -> int:
        return int(self._audio_file.samplerate)

    @property
    def channel_count(self) -> int:
        return int(self._audio_file.channels)

    @property
    def frames(self) -> int:
        return int(self._audio_file.frames)

    def blocks(self, block_frames: int, max_frames: int | None = None) -> Iterator[np.ndarray]:
        frames = -1 if max_frames is None else min(max_frames, self.frames)
        try:
            yield from self._audio_file.blocks(
                blocksize=block_frames,
                frames=frames,
                dtype="float32",
                always_2d=True,
            )
        except sf.SoundFileError as exc:
            raise UnsupportedFormatError("decode_failed", f"Failed to decode audio data: {exc}") from exc


@contextmanager
def open_pcm_stream(source: Path | BinaryIO) -> Iterator[PcmStream]:
    """Open ``source`` (a path or binary file object) for block-wise decoding."""

    try:
        audio_file = sf.SoundFile(str(source) if isinstance(source, Path) else source)
    except sf.SoundFileError as exc:
        raise UnsupportedFormatError("decode_failed", f"Failed to open audio stream: {exc}") from exc

    with audio_file:
        yield PcmStream(audio_file)
