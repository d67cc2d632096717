"""CLI-facing handlers that delegate to application services."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any
from uuid import uuid4

from lufs_gain.application.analysis_service import AnalyzeLoudness
from lufs_gain.audio_contract import UnsupportedFormatError
from lufs_gain.domain.models import LoudnessResult
from lufs_gain.infrastructure.logging_event_publisher import LoggingEventPublisher
from lufs_gain.io.audio_file import read_audio, write_audio
from lufs_gain.processor.gain import LoudnessGainProcessor
from lufs_gain.utils.config import AnalyzerConfig

_event_publisher = LoggingEventPublisher()


def build_service(config: AnalyzerConfig) -> AnalyzeLoudness:
    return AnalyzeLoudness(config=config, event_publisher=_event_publisher)


def run_batch_analysis(
    paths: list[Path],
    config: AnalyzerConfig,
    concurrency_limit: int | None = None,
) -> tuple[list[dict[str, Any]], dict[str, int]]:
    """Analyze files concurrently; each job owns its own meter."""

    if not paths:
        raise ValueError("Provide at least one audio file to analyze.")

    service = build_service(config)

    def _process(path: Path, item_index: int) -> dict[str, Any]:
        correlation_id = str(uuid4())
        try:
            result = service.analyze_file(path, correlation_id=correlation_id)
        except UnsupportedFormatError as error:
            return {
                "index": item_index,
                "path": str(path),
                "status": "failed",
                "correlation_id": correlation_id,
                "error": error.as_dict(),
            }
        return {
            "index": item_index,
            "path": str(path),
            "status": "succeeded",
            "correlation_id": correlation_id,
            **result.as_dict(),
        }

    safe_concurrency = max(1, concurrency_limit or config.batch_concurrency)
    results: list[dict[str, Any]] = []
    with ThreadPoolExecutor(max_workers=safe_concurrency) as executor:
        futures = [executor.submit(_process, path, idx) for idx, path in enumerate(paths, start=1)]
        for future in as_completed(futures):
            results.append(future.result())

    results.sort(key=lambda item: item["index"])
    success_count = sum(1 for item in results if item["status"] == "succeeded")
    summary = {
        "total": len(results),
        "succeeded": success_count,
        "failed": len(results) - success_count,
    }
    return results, summary


def normalize_file(input_path: Path, output_path: Path, config: AnalyzerConfig) -> LoudnessResult:
    """Measure ``input_path`` and write a copy scaled to the reference loudness."""

    result = build_service(config).analyze_file(input_path)
    audio, sample_rate = read_audio(input_path)
    processor = LoudnessGainProcessor.from_result(result)
    write_audio(output_path, processor.process(audio, sample_rate), sample_rate)
    return result
