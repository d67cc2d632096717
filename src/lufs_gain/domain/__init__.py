"""Domain layer."""

from .events import AnalysisFailed, DomainEvent, IngestValidated, LoudnessMeasured
from .models import LoudnessResult
from .services import apply_gain, derive_gain

__all__ = [
    "AnalysisFailed",
    "DomainEvent",
    "IngestValidated",
    "LoudnessMeasured",
    "LoudnessResult",
    "apply_gain",
    "derive_gain",
]
