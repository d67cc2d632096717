import io
import logging

import numpy as np
import pytest

from conftest import tone
from lufs_gain.application.analysis_service import AnalyzeLoudness
from lufs_gain.domain.events import AnalysisFailed, IngestValidated, LoudnessMeasured
from lufs_gain.infrastructure.logging_event_publisher import LoggingEventPublisher
from lufs_gain.meter import LoudnessMeter
from lufs_gain.utils.config import AnalyzerConfig


class RecordingPublisher:
    def __init__(self) -> None:
        self.events = []

    def publish(self, event) -> None:
        self.events.append(event)


def test_analyze_file_emits_validation_and_measurement_events(write_wav):
    publisher = RecordingPublisher()
    service = AnalyzeLoudness(event_publisher=publisher)
    path = write_wav(tone(amplitude=0.1, duration_s=3.0, channels=2))

    result = service.analyze_file(path, correlation_id="corr-123")

    assert [type(event) for event in publisher.events] == [IngestValidated, LoudnessMeasured]
    assert {event.correlation_id for event in publisher.events} == {"corr-123"}
    assert publisher.events[0].payload_summary["codec"] == "pcm"
    assert publisher.events[1].payload_summary["lufs"] == result.lufs
    assert result.measured is True
    assert result.channel_count == 2
    assert result.duration_seconds == pytest.approx(3.0)


def test_file_and_in_memory_analysis_agree(write_wav):
    audio = tone(amplitude=0.1, duration_s=3.0)
    service = AnalyzeLoudness()

    from_file = service.analyze_file(write_wav(audio, subtype="FLOAT"))
    from_memory = service.analyze_samples(audio.astype("float32"), 48_000)

    assert from_file.lufs == pytest.approx(from_memory.lufs, abs=1e-6)


def test_analyze_samples_matches_a_direct_meter():
    audio = tone(amplitude=0.2, duration_s=2.5, channels=2)
    meter = LoudnessMeter(2, 48_000)
    meter.feed(audio)

    result = AnalyzeLoudness(config=AnalyzerConfig(chunk_seconds=0.37)).analyze_samples(audio, 48_000)

    assert result.lufs == pytest.approx(meter.integrated_loudness(), abs=1e-9)


def test_quiet_tone_gets_positive_gain():
    result = AnalyzeLoudness().analyze_samples(tone(amplitude=0.1, duration_s=3.0), 48_000)

    # A 0.1 amplitude 1 kHz sine measures about -23 LUFS.
    assert result.lufs == pytest.approx(-23.0, abs=0.5)
    assert result.gain == pytest.approx(10 ** ((-18.0 - result.lufs) / 20))
    assert result.gain > 1.0


def test_silence_falls_back_to_unity_gain():
    result = AnalyzeLoudness().analyze_samples(tone(amplitude=0.0, duration_s=1.0), 48_000)

    assert result.measured is False
    assert result.lufs == -70.0
    assert result.gain == 1.0


def test_max_analysis_seconds_caps_measurement_but_not_reported_duration(write_wav):
    quiet_then_loud = np.concatenate([tone(amplitude=0.05, duration_s=1.5), tone(amplitude=0.5, duration_s=1.5)])
    path = write_wav(quiet_then_loud)

    capped = AnalyzeLoudness(config=AnalyzerConfig(max_analysis_seconds=1.5)).analyze_file(path)
    full = AnalyzeLoudness().analyze_file(path)

    # Only the quiet first half is measured, yet the file length is reported.
    assert capped.lufs == pytest.approx(-29.0, abs=0.5)
    assert full.lufs > capped.lufs + 10.0
    assert capped.duration_seconds == pytest.approx(3.0)
    assert full.duration_seconds == pytest.approx(3.0)


def test_analyze_stream_validates_and_measures_bytes(write_wav):
    payload = write_wav(tone(amplitude=0.1, duration_s=2.0)).read_bytes()
    publisher = RecordingPublisher()

    result = AnalyzeLoudness(event_publisher=publisher).analyze_stream(io.BytesIO(payload), filename="clip.wav")

    assert result.measured is True
    assert [type(event) for event in publisher.events] == [IngestValidated, LoudnessMeasured]
    assert publisher.events[0].payload_summary["source_uri"] == "clip.wav"


def test_best_effort_analysis_substitutes_defaults(tmp_path):
    bogus = tmp_path / "broken.wav"
    bogus.write_bytes(b"RIFF0000WAVEjunk")
    publisher = RecordingPublisher()

    result = AnalyzeLoudness(event_publisher=publisher).analyze_file_best_effort(bogus, correlation_id="c-1")

    assert result.lufs == -70.0
    assert result.gain == 1.0
    assert result.measured is False
    assert [type(event) for event in publisher.events] == [AnalysisFailed]
    assert publisher.events[0].payload_summary["code"] == "corrupted_file"


def test_logging_publisher_emits_structured_records(caplog):
    with caplog.at_level(logging.INFO, logger="lufs_gain.events"):
        LoggingEventPublisher().publish(LoudnessMeasured(correlation_id="c-2", payload_summary={"lufs": -20.0}))
        LoggingEventPublisher().publish(AnalysisFailed(correlation_id="c-3", payload_summary={"code": "x"}))

    assert [record.levelno for record in caplog.records] == [logging.INFO, logging.WARNING]
    assert caplog.records[0].event_name == "LoudnessMeasured"
    assert caplog.records[0].payload_summary == {"lufs": -20.0}
    assert caplog.records[1].correlation_id == "c-3"
