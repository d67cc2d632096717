"""Domain event contracts for loudness analysis workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base domain event emitted by application services."""

    correlation_id: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class IngestValidated(DomainEvent):
    """A source file passed container/format validation."""


@dataclass(frozen=True, slots=True)
class LoudnessMeasured(DomainEvent):
    """Integrated loudness and normalization gain were derived for a source."""


@dataclass(frozen=True, slots=True)
class AnalysisFailed(DomainEvent):
    """A source could not be analyzed; the quiet default was substituted."""
