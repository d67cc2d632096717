from .base import BaseProcessor
from .gain import LoudnessGainProcessor

__all__ = [
    "BaseProcessor",
    "LoudnessGainProcessor",
]
