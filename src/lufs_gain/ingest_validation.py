"""Source validation for the decoding collaborator.

This module inspects container headers and extracts enough metadata to reject
sources the decoder cannot turn into float PCM (unsupported codecs or bit depths,
malformed headers) before any samples reach the loudness engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import struct

from .audio_contract import (
    ACCEPTED_SOURCE_EXTENSIONS,
    SUPPORTED_FLOAT_BIT_DEPTHS,
    SUPPORTED_PCM_BIT_DEPTHS,
    WAV_FORMAT_EXTENSIBLE,
    WAV_FORMAT_IEEE_FLOAT,
    WAV_FORMAT_PCM,
    UnsupportedFormatError,
)

# WAV and FLAC headers sit at the front of the file.
_HEADER_PROBE_BYTES = 64 * 1024


@dataclass(frozen=True, slots=True)
class ValidationPolicy:
    max_file_size_bytes: int = 2 * 1024 * 1024 * 1024
    min_sample_rate_hz: int = 8_000
    max_sample_rate_hz: int = 384_000
    min_channel_count: int = 1
    max_channel_count: int = 8


@dataclass(frozen=True, slots=True)
class AudioMetadata:
    container: str
    codec: str
    bits_per_sample: int
    duration_seconds: float
    sample_rate_hz: int
    channel_count: int
    size_bytes: int


def validate_audio_file(path: Path, policy: ValidationPolicy | None = None) -> AudioMetadata:
    policy = policy or ValidationPolicy()
    if not path.exists() or not path.is_file():
        raise UnsupportedFormatError("file_not_found", f"Audio file not found: {path}")

    try:
        with path.open("rb") as handle:
            raw_bytes = handle.read(_HEADER_PROBE_BYTES)
    except OSError as exc:
        raise UnsupportedFormatError("file_unreadable", f"Audio file is unreadable: {path}") from exc

    return validate_audio_bytes(
        raw_bytes,
        filename=path.name,
        policy=policy,
        size_bytes=path.stat().st_size,
    )


def validate_audio_bytes(
    raw_bytes: bytes,
    *,
    filename: str | None,
    policy: ValidationPolicy | None = None,
    size_bytes: int | None = None,
) -> AudioMetadata:
    policy = policy or ValidationPolicy()
    size_bytes = len(raw_bytes) if size_bytes is None else size_bytes
    if size_bytes == 0:
        raise UnsupportedFormatError("empty_file", "Audio file is empty.")
    if size_bytes > policy.max_file_size_bytes:
        raise UnsupportedFormatError(
            "file_too_large",
            f"Audio file exceeds max size limit of {policy.max_file_size_bytes} bytes.",
        )

    extension = Path(filename).suffix.lower() if filename else ""
    if extension and extension not in ACCEPTED_SOURCE_EXTENSIONS:
        supported = ", ".join(ACCEPTED_SOURCE_EXTENSIONS)
        raise UnsupportedFormatError(
            "unsupported_container",
            f"Unsupported container for '{filename}'. Supported extensions: {supported}.",
        )

    metadata = _parse_metadata(raw_bytes, size_bytes)
    _check_policy(metadata, policy)
    return metadata


def _check_policy(metadata: AudioMetadata, policy: ValidationPolicy) -> None:
    if not (policy.min_sample_rate_hz <= metadata.sample_rate_hz <= policy.max_sample_rate_hz):
        raise UnsupportedFormatError(
            "invalid_sample_rate",
            f"Sample rate {metadata.sample_rate_hz}Hz is outside supported range.",
        )
    if not (policy.min_channel_count <= metadata.channel_count <= policy.max_channel_count):
        raise UnsupportedFormatError(
            "invalid_channel_count",
            f"Channel count {metadata.channel_count} is outside supported range.",
        )


def _parse_metadata(raw_bytes: bytes, size_bytes: int) -> AudioMetadata:
    if raw_bytes.startswith(b"RIFF") and raw_bytes[8:12] == b"WAVE":
        return _parse_wav(raw_bytes, size_bytes)
    if raw_bytes.startswith(b"fLaC"):
        return _parse_flac(raw_bytes, size_bytes)
    if raw_bytes.startswith(b"ID3") or (len(raw_bytes) > 1 and raw_bytes[0] == 0xFF and raw_bytes[1] & 0xE0 == 0xE0):
        raise UnsupportedFormatError("unsupported_codec", "Lossy MPEG audio is not supported.")
    raise UnsupportedFormatError("unsupported_container", "Unsupported or unrecognized audio container.")


def _parse_wav(raw_bytes: bytes, size_bytes: int) -> AudioMetadata:
    offset = 12
    fmt_chunk: bytes | None = None
    data_size = 0
    while offset + 8 <= len(raw_bytes):
        chunk_id = raw_bytes[offset : offset + 4]
        chunk_size = int.from_bytes(raw_bytes[offset + 4 : offset + 8], "little")
        chunk_data_start = offset + 8
        chunk_data_end = chunk_data_start + chunk_size
        if chunk_id == b"data":
            # The data chunk may extend past the probed header bytes.
            data_size = chunk_size
            break
        if chunk_data_end > len(raw_bytes):
            raise UnsupportedFormatError("corrupted_file", "Corrupted WAV file structure.")
        if chunk_id == b"fmt ":
            if chunk_size < 16:
                raise UnsupportedFormatError("corrupted_file", "Corrupted WAV fmt chunk.")
            fmt_chunk = raw_bytes[chunk_data_start:chunk_data_end]
        offset = chunk_data_end + (chunk_size % 2)

    if fmt_chunk is None or not data_size:
        raise UnsupportedFormatError("corrupted_file", "Incomplete WAV metadata.")

    audio_format, channels, sample_rate, byte_rate, _block_align, bits_per_sample = struct.unpack(
        "<HHIIHH", fmt_chunk[:16]
    )
    if audio_format == WAV_FORMAT_EXTENSIBLE and len(fmt_chunk) >= 26:
        audio_format = int.from_bytes(fmt_chunk[24:26], "little")

    if audio_format == WAV_FORMAT_PCM:
        codec = "pcm"
        supported_depths = SUPPORTED_PCM_BIT_DEPTHS
    elif audio_format == WAV_FORMAT_IEEE_FLOAT:
        codec = "ieee_float"
        supported_depths = SUPPORTED_FLOAT_BIT_DEPTHS
    else:
        raise UnsupportedFormatError("unsupported_codec", f"Unsupported WAV codec format code: {audio_format}.")

    if bits_per_sample not in supported_depths:
        raise UnsupportedFormatError(
            "unsupported_bit_depth",
            f"Unsupported bit depth for {codec} WAV: {bits_per_sample}.",
        )
    if not sample_rate or not channels:
        raise UnsupportedFormatError("corrupted_file", "Incomplete WAV metadata.")

    if not byte_rate:
        byte_rate = sample_rate * channels * (bits_per_sample // 8)
    duration_seconds = data_size / byte_rate
    return AudioMetadata("wav", codec, bits_per_sample, duration_seconds, sample_rate, channels, size_bytes)


def _parse_flac(raw_bytes: bytes, size_bytes: int) -> AudioMetadata:
    if len(raw_bytes) < 42:
        raise UnsupportedFormatError("corrupted_file", "Corrupted FLAC header.")
    block_header = raw_bytes[4]
    block_type = block_header & 0x7F
    block_len = int.from_bytes(raw_bytes[5:8], "big")
    if block_type != 0 or block_len != 34:
        raise UnsupportedFormatError("corrupted_file", "Missing FLAC STREAMINFO metadata.")
    stream_info = raw_bytes[8:42]
    packed = int.from_bytes(stream_info[10:18], "big")
    sample_rate = (packed >> 44) & 0xFFFFF
    channels = ((packed >> 41) & 0x7) + 1
    bits_per_sample = ((packed >> 36) & 0x1F) + 1
    total_samples = packed & 0xFFFFFFFFF
    duration_seconds = (total_samples / sample_rate) if sample_rate else 0.0
    return AudioMetadata("flac", "flac", bits_per_sample, duration_seconds, sample_rate, channels, size_bytes)
