"""Contract between the decoding collaborator and the loudness engine.

Invariants
----------
* The engine only ever sees interleaved float PCM normalized to ``[-1.0, 1.0]``.
* Container parsing and sample-format conversion happen before the engine; format
  problems surface as :class:`UnsupportedFormatError`, never as bad samples.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# Supported source extensions (lower-case, with leading dot). Lossless only.
ACCEPTED_SOURCE_EXTENSIONS: tuple[str, ...] = (".wav", ".flac")

# Common MIME types accepted by API uploads.
ACCEPTED_SOURCE_MIME_TYPES: tuple[str, ...] = (
    "audio/wav",
    "audio/x-wav",
    "audio/wave",
    "audio/flac",
    "audio/x-flac",
)

# WAV format codes and the bit depths decoded for each.
WAV_FORMAT_PCM = 1
WAV_FORMAT_IEEE_FLOAT = 3
WAV_FORMAT_EXTENSIBLE = 0xFFFE
SUPPORTED_PCM_BIT_DEPTHS: tuple[int, ...] = (16, 24, 32)
SUPPORTED_FLOAT_BIT_DEPTHS: tuple[int, ...] = (32,)

REFERENCE_LOUDNESS_LUFS = -18.0
GAIN_FLOOR_LUFS = -70.0
# Loudness reported when a file cannot be measured.
FALLBACK_LOUDNESS_LUFS = -70.0


# Not frozen: contextlib assigns ``__traceback__`` on exceptions unwinding through it.
@dataclass(eq=False)
class UnsupportedFormatError(ValueError):
    """Raised when source media is outside the decodable PCM contract."""

    code: str
    message: str

    def __str__(self) -> str:
        return self.message

    def as_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


def ensure_supported_upload(filename: str | None, content_type: str | None) -> None:
    """Validate API upload metadata against accepted source formats."""

    if content_type and content_type.lower() in ACCEPTED_SOURCE_MIME_TYPES:
        return

    if filename and Path(filename).suffix.lower() in ACCEPTED_SOURCE_EXTENSIONS:
        return

    supported_ext = ", ".join(ACCEPTED_SOURCE_EXTENSIONS)
    supported_mimes = ", ".join(ACCEPTED_SOURCE_MIME_TYPES)
    raise UnsupportedFormatError(
        "unsupported_container",
        "Unsupported upload format. "
        f"Supported extensions: {supported_ext}. "
        f"Supported MIME types: {supported_mimes}.",
    )
