"""Public package exports for lufs_gain with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "AnalyzeLoudness",
    "AnalyzerConfig",
    "BufferSizeError",
    "ChannelRole",
    "ConfigurationError",
    "HostBridge",
    "LoudnessMeter",
    "LoudnessResult",
    "MeterMode",
    "UnsupportedFormatError",
    "apply_gain",
    "derive_gain",
]

_EXPORT_MODULES: dict[str, str] = {
    "AnalyzeLoudness": "lufs_gain.application.analysis_service",
    "AnalyzerConfig": "lufs_gain.utils.config",
    "BufferSizeError": "lufs_gain.meter.errors",
    "ChannelRole": "lufs_gain.meter.modes",
    "ConfigurationError": "lufs_gain.meter.errors",
    "HostBridge": "lufs_gain.interfaces.host_bridge",
    "LoudnessMeter": "lufs_gain.meter.state",
    "LoudnessResult": "lufs_gain.domain.models",
    "MeterMode": "lufs_gain.meter.modes",
    "UnsupportedFormatError": "lufs_gain.audio_contract",
    "apply_gain": "lufs_gain.domain.services",
    "derive_gain": "lufs_gain.domain.services",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'lufs_gain' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
