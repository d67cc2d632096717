"""Application layer."""

from .analysis_service import AnalyzeLoudness
from .event_publisher import EventPublisher, NullEventPublisher

__all__ = ["AnalyzeLoudness", "EventPublisher", "NullEventPublisher"]
