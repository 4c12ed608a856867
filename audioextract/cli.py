"""
audioextract.cli - Typer CLI entry point.

Wraps the extraction pipeline with argument handling, output directory
setup and a summary table.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from audioextract import __version__
from audioextract.config import InputFormat, load_config
from audioextract.exceptions import AudioExtractError, ConfigError
from audioextract.extract.batch import ExtractionSummary, run_extraction
from audioextract.logging import configure_logging

app = typer.Typer(
    name="extract-audio",
    help="Extract embedded audio files from Parquet or Arrow stream datasets.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"extract-audio {__version__}")
        raise typer.Exit()


def print_summary(summary: ExtractionSummary) -> None:
    table = Table(title="Audio Extraction")
    table.add_column("File", style="cyan")
    table.add_column("Rows", justify="right")
    table.add_column("Written", style="green", justify="right")
    table.add_column("Existing", justify="right")
    table.add_column("Skipped", style="yellow", justify="right")
    table.add_column("Failed", style="red", justify="right")

    for result in summary.files:
        table.add_row(
            result.source,
            str(result.rows),
            str(result.written),
            str(result.existing),
            str(result.skipped),
            str(result.failed),
        )
    for error in summary.errors:
        table.add_row(
            Path(error["source"]).name,
            "0",
            "-",
            "-",
            "-",
            f"[red]Error: {escape(error['error'])}[/red]",
        )

    console.print(table)


@app.command()
def main(
    input_file: Path | None = typer.Option(
        None, "--input-file", "-i", help="Single Parquet or Arrow stream file"
    ),
    input_dir: Path | None = typer.Option(
        None, "--input-dir", "-d", help="Directory of input files (not recursive)"
    ),
    input_format: InputFormat | None = typer.Option(
        None, "--format", "-f", case_sensitive=False, help="Input format (default: parquet)"
    ),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-o", help="Directory for extracted files (default: output)"
    ),
    workers: int | None = typer.Option(
        None, "--workers", "-w", min=1, help="Worker threads (default: 3)"
    ),
    metadata: Path | None = typer.Option(
        None, "--metadata", "-m", help="Write a file_name,transcription CSV here"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Abort a file on its first write failure"
    ),
    config_file: Path | None = typer.Option(
        None, "--config", "-c", help="YAML file with default settings"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Extract embedded audio files from Parquet or Arrow stream datasets."""
    configure_logging(verbose)

    if input_file is not None and input_dir is not None:
        console.print("[red]Error: --input-file and --input-dir are mutually exclusive[/red]")
        raise typer.Exit(1)

    overrides = {
        "input_file": input_file,
        "input_dir": input_dir,
        "input_format": input_format,
        "output_dir": output_dir,
        "workers": workers,
        "metadata_output": metadata,
        "strict_writes": True if strict else None,
    }
    try:
        config = load_config(config_file, overrides)
    except ConfigError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        config.output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        console.print(
            f"[red]Error: Cannot create output directory {config.output_dir}: "
            f"{escape(str(e))}[/red]"
        )
        raise typer.Exit(1)

    source = config.input_file if config.input_file is not None else config.input_dir
    console.print(
        f"[cyan]Extracting {config.input_format.value} data from {source} "
        f"with {config.workers} worker(s)...[/cyan]\n"
    )

    try:
        summary = run_extraction(config)
    except (AudioExtractError, OSError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    print_summary(summary)

    console.print(
        f"\n[green]✓[/green] Processed {summary.total_rows} row(s): "
        f"wrote {summary.written}, existing {summary.existing}, "
        f"skipped {summary.skipped}, failed {summary.failed}"
    )
    if summary.errors:
        console.print(f"[yellow]{len(summary.errors)} file(s) could not be processed[/yellow]")
    if summary.metadata_path is not None:
        console.print(
            f"[dim]  Wrote {summary.metadata_records} transcription(s) "
            f"to {summary.metadata_path}[/dim]"
        )


if __name__ == "__main__":
    app()
