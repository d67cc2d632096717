from .config import (
    CONFIG_ENV_VAR,
    AnalyzerConfig,
    load_analyzer_config,
    resolve_analyzer_config,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "AnalyzerConfig",
    "load_analyzer_config",
    "resolve_analyzer_config",
]
