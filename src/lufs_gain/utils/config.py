from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from lufs_gain.audio_contract import FALLBACK_LOUDNESS_LUFS, REFERENCE_LOUDNESS_LUFS
from lufs_gain.meter.modes import MeterMode

CONFIG_ENV_VAR = "LUFS_GAIN_CONFIG"

ModeName = Literal["momentary", "short_term", "integrated", "loudness_range"]

_MODE_FLAGS: dict[str, MeterMode] = {
    "momentary": MeterMode.MOMENTARY,
    "short_term": MeterMode.SHORT_TERM,
    "integrated": MeterMode.INTEGRATED,
    "loudness_range": MeterMode.LOUDNESS_RANGE,
}


class AnalyzerConfig(BaseModel):
    reference_lufs: float = Field(REFERENCE_LOUDNESS_LUFS, le=0.0)
    modes: list[ModeName] = Field(default_factory=lambda: ["integrated"])
    chunk_seconds: float = Field(1.0, gt=0.0, le=60.0)
    max_analysis_seconds: float | None = Field(None, gt=0.0)
    fallback_lufs: float = Field(FALLBACK_LOUDNESS_LUFS, le=0.0)
    batch_concurrency: int = Field(4, ge=1)

    @field_validator("modes")
    @classmethod
    def _validate_modes(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("modes must name at least one measurement.")
        return value

    def mode_mask(self) -> MeterMode:
        mask = MeterMode(0)
        for name in self.modes:
            mask |= _MODE_FLAGS[name]
        return mask


def load_analyzer_config(path: Path) -> AnalyzerConfig:
    data = _load_config_data(path)
    return AnalyzerConfig.model_validate(data)


def resolve_analyzer_config(path: Path | None = None) -> AnalyzerConfig:
    """Load ``path``, else the file named by ``LUFS_GAIN_CONFIG``, else defaults."""

    if path is None:
        env_path = os.getenv(CONFIG_ENV_VAR)
        if not env_path:
            return AnalyzerConfig()
        path = Path(env_path)
    return load_analyzer_config(path)


def _load_config_data(path: Path) -> dict:
    if path.suffix.lower() in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:
            raise ImportError("PyYAML is required to load YAML configs.") from exc

        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)
