"""Application services orchestrating loudness analysis use-cases."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import BinaryIO
from uuid import uuid4

import numpy as np

from lufs_gain.application.event_publisher import EventPublisher, NullEventPublisher
from lufs_gain.audio_contract import UnsupportedFormatError
from lufs_gain.domain.events import AnalysisFailed, IngestValidated, LoudnessMeasured
from lufs_gain.domain.models import LoudnessResult
from lufs_gain.infrastructure.pcm_decoder import open_pcm_stream
from lufs_gain.ingest_validation import AudioMetadata, validate_audio_bytes, validate_audio_file
from lufs_gain.meter import LoudnessMeter
from lufs_gain.utils.config import AnalyzerConfig

LOGGER = logging.getLogger("lufs_gain.analysis")


@dataclass(slots=True)
class AnalyzeLoudness:
    """Use case that measures integrated loudness and derives a playback gain."""

    config: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    event_publisher: EventPublisher = field(default_factory=NullEventPublisher)

    def new_meter(self, channel_count: int, sample_rate: int) -> LoudnessMeter:
        return LoudnessMeter(channel_count, sample_rate, self.config.mode_mask())

    def result_from_meter(self, meter: LoudnessMeter, duration_seconds: float | None = None) -> LoudnessResult:
        """Snapshot ``meter``; ``duration_seconds`` overrides the fed span with the source length."""

        return LoudnessResult.from_measurement(
            meter.integrated_loudness(),
            sample_rate=meter.sample_rate,
            channel_count=meter.channel_count,
            duration_seconds=meter.duration_seconds if duration_seconds is None else duration_seconds,
            reference_lufs=self.config.reference_lufs,
            fallback_lufs=self.config.fallback_lufs,
        )

    def analyze_samples(
        self,
        samples: np.ndarray,
        sample_rate: int,
        correlation_id: str | None = None,
    ) -> LoudnessResult:
        """Measure in-memory samples shaped ``(frames,)`` or ``(frames, channels)``."""

        audio = np.asarray(samples)
        channel_count = 1 if audio.ndim == 1 else audio.shape[1]
        meter = self.new_meter(channel_count, sample_rate)

        chunk_frames = self._chunk_frames(sample_rate)
        frame_limit = self._frame_limit(sample_rate)
        frames = audio.shape[0] if frame_limit is None else min(audio.shape[0], frame_limit)
        for start in range(0, frames, chunk_frames):
            meter.feed(audio[start : min(start + chunk_frames, frames)])

        result = self.result_from_meter(meter, duration_seconds=audio.shape[0] / sample_rate)
        self._publish_measured(result, source_uri=None, correlation_id=correlation_id)
        return result

    def analyze_file(self, path: Path, correlation_id: str | None = None) -> LoudnessResult:
        """Validate, decode and measure a local audio file."""

        run_correlation_id = correlation_id or str(uuid4())
        metadata = validate_audio_file(path)
        self._publish_validated(path.resolve().as_uri(), metadata, run_correlation_id)
        result = self._measure_stream(path)
        self._publish_measured(result, source_uri=path.resolve().as_uri(), correlation_id=run_correlation_id)
        return result

    def analyze_stream(
        self,
        handle: BinaryIO,
        *,
        filename: str | None,
        correlation_id: str | None = None,
    ) -> LoudnessResult:
        """Validate and measure an uploaded binary stream."""

        run_correlation_id = correlation_id or str(uuid4())
        header = handle.read(64 * 1024)
        handle.seek(0, 2)
        size_bytes = handle.tell()
        handle.seek(0)
        metadata = validate_audio_bytes(header, filename=filename, size_bytes=size_bytes)
        self._publish_validated(filename or "upload", metadata, run_correlation_id)
        result = self._measure_stream(handle)
        self._publish_measured(result, source_uri=filename, correlation_id=run_correlation_id)
        return result

    def analyze_file_best_effort(self, path: Path, correlation_id: str | None = None) -> LoudnessResult:
        """Like :meth:`analyze_file`, but falls back to quiet loudness and unity gain.

        Playback must never block on a file that cannot be measured.
        """

        run_correlation_id = correlation_id or str(uuid4())
        try:
            return self.analyze_file(path, correlation_id=run_correlation_id)
        except UnsupportedFormatError as error:
            self.event_publisher.publish(
                AnalysisFailed(
                    correlation_id=run_correlation_id,
                    payload_summary={"source": str(path), **error.as_dict()},
                )
            )
            return LoudnessResult.unavailable(fallback_lufs=self.config.fallback_lufs)

    def _measure_stream(self, source: Path | BinaryIO) -> LoudnessResult:
        with open_pcm_stream(source) as stream:
            source_duration = stream.frames / stream.sample_rate
            meter = self.new_meter(stream.channel_count, stream.sample_rate)
            for block in stream.blocks(
                self._chunk_frames(stream.sample_rate),
                max_frames=self._frame_limit(stream.sample_rate),
            ):
                meter.feed(block)

        LOGGER.debug(
            "stream_measured",
            extra={
                "frames": meter.frames_processed,
                "gating_blocks": meter.integrated_block_count,
            },
        )
        return self.result_from_meter(meter, duration_seconds=source_duration)

    def _chunk_frames(self, sample_rate: int) -> int:
        return max(1, int(round(self.config.chunk_seconds * sample_rate)))

    def _frame_limit(self, sample_rate: int) -> int | None:
        if self.config.max_analysis_seconds is None:
            return None
        return int(self.config.max_analysis_seconds * sample_rate)

    def _publish_validated(self, source_uri: str, metadata: AudioMetadata, correlation_id: str) -> None:
        self.event_publisher.publish(
            IngestValidated(
                correlation_id=correlation_id,
                payload_summary={
                    "source_uri": source_uri,
                    "container": metadata.container,
                    "codec": metadata.codec,
                    "bits_per_sample": metadata.bits_per_sample,
                    "sample_rate_hz": metadata.sample_rate_hz,
                    "channel_count": metadata.channel_count,
                },
            )
        )

    def _publish_measured(self, result: LoudnessResult, source_uri: str | None, correlation_id: str | None) -> None:
        self.event_publisher.publish(
            LoudnessMeasured(
                correlation_id=correlation_id or str(uuid4()),
                payload_summary={
                    "source_uri": source_uri,
                    "lufs": result.lufs,
                    "gain": result.gain,
                    "measured": result.measured,
                    "duration_seconds": result.duration_seconds,
                },
            )
        )
