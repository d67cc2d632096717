import numpy as np
import pytest

from conftest import tone
from lufs_gain.domain.models import LoudnessResult
from lufs_gain.interfaces.host_bridge import NULL_HANDLE, HostBridge
from lufs_gain.meter import MeterMode


@pytest.fixture
def bridge():
    return HostBridge()


def test_analyze_file_returns_a_handle_with_lufs_and_gain(bridge, write_wav):
    path = write_wav(tone(amplitude=0.1, duration_s=2.0))

    outcome = bridge.analyze_file(str(path))

    assert outcome.ok
    handle = outcome.value
    assert handle != NULL_HANDLE
    assert bridge.get_lufs(handle) == pytest.approx(-23.0, abs=0.5)
    assert bridge.get_gain(handle) > 1.0
    assert bridge.describe(handle).value["measured"] is True


def test_analysis_failure_travels_back_as_data(bridge, tmp_path):
    outcome = bridge.analyze_file(str(tmp_path / "missing.wav"))

    assert not outcome.ok
    assert outcome.code == "file_not_found"
    assert outcome.as_dict()["ok"] is False


def test_destroyed_and_null_handles_read_as_defaults(bridge):
    handle = bridge.register_result(
        LoudnessResult.from_measurement(-24.0, sample_rate=48_000, channel_count=2, duration_seconds=1.0)
    ).value
    bridge.destroy(handle)

    assert bridge.get_lufs(handle) == -70.0
    assert bridge.get_gain(handle) == 1.0
    assert bridge.get_gain(NULL_HANDLE) == 1.0
    assert bridge.describe(NULL_HANDLE).code == "null_handle"
    assert bridge.describe(handle).code == "invalid_handle"


def test_process_audio_scales_into_output_buffer(bridge):
    result = LoudnessResult.from_measurement(-24.0, sample_rate=48_000, channel_count=1, duration_seconds=1.0)
    handle = bridge.register_result(result).value
    source = np.full(8, 0.25, dtype=np.float32)
    target = np.zeros_like(source)

    outcome = bridge.process_audio(handle, source, target)

    assert outcome.ok
    np.testing.assert_allclose(target, source * result.gain, rtol=1e-6)
    assert bridge.process_audio(handle, source, np.zeros(4, dtype=np.float32)).code == "buffer_size"


def test_meter_session_lifecycle(bridge):
    opened = bridge.open_meter(2, 48_000, int(MeterMode.INTEGRATED))
    assert opened.ok
    handle = opened.value
    interleaved = tone(amplitude=0.2, duration_s=1.0, channels=2).reshape(-1)

    assert bridge.meter_integrated_loudness(handle).code == "measurement_unavailable"
    assert bridge.feed_meter(handle, interleaved, 48_000).ok
    loudness = bridge.meter_integrated_loudness(handle)
    assert loudness.ok
    assert bridge.meter_segment_loudness(handle).value == pytest.approx(loudness.value)

    snapshot = bridge.finish_meter(handle)
    assert bridge.get_lufs(snapshot.value) == pytest.approx(loudness.value)

    assert bridge.reset_meter(handle).ok
    assert bridge.meter_integrated_loudness(handle).code == "measurement_unavailable"

    bridge.close_meter(handle)
    assert bridge.feed_meter(handle, interleaved, 48_000).code == "invalid_handle"


def test_meter_errors_are_reported_as_codes(bridge):
    assert bridge.open_meter(2, 48_000, 0).code == "invalid_configuration"

    handle = bridge.open_meter(2, 48_000, int(MeterMode.INTEGRATED)).value
    assert bridge.feed_meter(handle, np.zeros(10), 6).code == "buffer_size"
    assert bridge.feed_meter(NULL_HANDLE, np.zeros(10), 5).code == "null_handle"


def test_release_calls_report_success(bridge):
    result_handle = bridge.register_result(LoudnessResult.unavailable()).value
    meter_handle = bridge.open_meter(1, 48_000, int(MeterMode.INTEGRATED)).value

    assert bridge.destroy(result_handle).ok
    assert bridge.close_meter(meter_handle).ok
    assert bridge.destroy(NULL_HANDLE).ok


def test_non_numeric_samples_are_reported_as_codes(bridge):
    handle = bridge.open_meter(2, 48_000, int(MeterMode.INTEGRATED)).value

    outcome = bridge.feed_meter(handle, np.array(["left", "right"]), 1)

    assert not outcome.ok
    assert outcome.code == "invalid_samples"


def test_meter_with_extra_mode_bits_opens(bridge):
    assert bridge.open_meter(1, 48_000, int(MeterMode.INTEGRATED | MeterMode.MOMENTARY) | 16).ok
