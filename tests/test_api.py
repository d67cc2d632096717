import io

import numpy as np
import pytest
import soundfile as sf
from fastapi.testclient import TestClient

from conftest import tone
from lufs_gain.api import app

client = TestClient(app)


def make_wav_bytes(audio: np.ndarray, sample_rate: int = 48_000) -> bytes:
    with io.BytesIO() as buffer:
        sf.write(buffer, audio, sample_rate, format="WAV", subtype="PCM_16")
        return buffer.getvalue()


def test_health() -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_returns_loudness_and_gain() -> None:
    response = client.post(
        "/analyze",
        files={"audio": ("clip.wav", make_wav_bytes(tone(amplitude=0.1, duration_s=2.0)), "audio/wav")},
        headers={"x-correlation-id": "req-42"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["correlation_id"] == "req-42"
    assert body["measured"] is True
    assert body["lufs"] == pytest.approx(-23.0, abs=0.5)
    assert body["gain"] > 1.0


def test_analyze_rejects_unsupported_uploads() -> None:
    response = client.post(
        "/analyze",
        files={"audio": ("clip.ogg", b"OggS\x00\x02", "audio/ogg")},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "unsupported_container"


def test_analyze_rejects_malformed_wav() -> None:
    response = client.post(
        "/analyze",
        files={"audio": ("clip.wav", b"RIFF\x00\x00\x00\x00WAVE", "audio/wav")},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "corrupted_file"
