"""API-facing handlers that delegate to application services."""

from __future__ import annotations

from typing import Any, BinaryIO

from lufs_gain.application.analysis_service import AnalyzeLoudness
from lufs_gain.infrastructure.logging_event_publisher import LoggingEventPublisher
from lufs_gain.utils.config import resolve_analyzer_config

_event_publisher = LoggingEventPublisher()
analysis_service = AnalyzeLoudness(config=resolve_analyzer_config(), event_publisher=_event_publisher)


def analyze_uploaded_bytes(handle: BinaryIO, *, filename: str | None, correlation_id: str) -> dict[str, Any]:
    result = analysis_service.analyze_stream(handle, filename=filename, correlation_id=correlation_id)
    return result.as_dict()


__all__ = ["analysis_service", "analyze_uploaded_bytes"]
