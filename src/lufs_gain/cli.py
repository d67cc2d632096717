"""CLI interface for lufs_gain."""

import json
import logging
from pathlib import Path

import typer

from .audio_contract import UnsupportedFormatError
from .interfaces.cli_handlers import normalize_file, run_batch_analysis
from .utils.config import resolve_analyzer_config

app = typer.Typer(help="lufs_gain: EBU R128 loudness measurement and playback gain")


@app.callback()
def configure(
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level."),
) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command("analyze")
def analyze_command(
    paths: list[Path] = typer.Argument(..., help="WAV/FLAC files to measure."),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="JSON/YAML analyzer config (defaults to $LUFS_GAIN_CONFIG)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print results as a JSON document."),
    concurrency_limit: int | None = typer.Option(
        None, "--concurrency", min=1, help="Maximum number of files measured in parallel."
    ),
) -> None:
    """Measure integrated loudness and the gain that brings each file to the reference."""

    analyzer_config = resolve_analyzer_config(config)
    results, summary = run_batch_analysis(paths, analyzer_config, concurrency_limit)

    if as_json:
        typer.echo(json.dumps({"results": results, "summary": summary}, indent=2))
    else:
        for item in results:
            if item["status"] == "succeeded":
                typer.echo(
                    f"[OK] {item['path']} lufs={item['lufs']:.2f} "
                    f"gain={item['gain']:.4f} ({item['gain_db']:+.2f} dB) "
                    f"duration={item['duration_seconds']:.2f}s"
                )
            else:
                typer.echo(
                    f"[FAILED] {item['path']} error={item['error']['code']}: {item['error']['message']}"
                )
        typer.echo(
            "Summary: "
            f"total={summary['total']} "
            f"succeeded={summary['succeeded']} "
            f"failed={summary['failed']}"
        )

    if summary["failed"]:
        raise typer.Exit(code=1)


@app.command("normalize")
def normalize_command(
    input_path: Path = typer.Option(..., "--input", "-i", help="Source WAV/FLAC file."),
    output_path: Path = typer.Option(..., "--output", "-o", help="Destination float WAV file."),
    reference_lufs: float | None = typer.Option(
        None, "--reference-lufs", help="Override the reference loudness (LUFS)."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="JSON/YAML analyzer config."),
) -> None:
    """Write a copy of a file scaled by its normalization gain."""

    analyzer_config = resolve_analyzer_config(config)
    if reference_lufs is not None:
        analyzer_config = analyzer_config.model_copy(update={"reference_lufs": reference_lufs})

    try:
        result = normalize_file(input_path, output_path, analyzer_config)
    except UnsupportedFormatError as error:
        typer.echo(f"[FAILED] {input_path} error={error.code}: {error.message}", err=True)
        raise typer.Exit(code=1) from error

    summary = result.as_dict()
    typer.echo(
        f"Normalized audio written to: {output_path} "
        f"(lufs={summary['lufs']:.2f}, gain={summary['gain']:.4f})"
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
