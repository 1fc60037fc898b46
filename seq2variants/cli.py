"""Typer CLI for the sequence converter.

Usage:
    # Format and chromosome name taken from the output file name
    seq2variants convert seqList_Chr2L.txt snp_Chr2L.bed

    # Explicit chromosome and formats
    seq2variants convert list.txt out.bvt --chrom-name Chr2L --chrom-num 2 \\
        --output-format bvt

    # One thread per chromosome
    seq2variants batch -c Chr2L:2 -c Chr2R:3 -c Chr3L:4 -c Chr3R:5 -c ChrX:1
"""

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from seq2variants import __version__
from seq2variants.config import DEFAULT_BUFFER_BUDGET, ConversionJob
from seq2variants.exceptions import ConversionError
from seq2variants.file_list import job_from_file_list
from seq2variants.logging_config import setup_logging
from seq2variants.models import InputFormat, OutputFormat
from seq2variants.writers.log import print_summary

app = typer.Typer(
    name="seq2variants",
    help="Extract polymorphic sites from aligned sequence files into variant tables",
    add_completion=False,
)

console = Console()


class InputFormatChoice(str, Enum):
    """Input sequence format."""

    seq = "seq"


class OutputFormatChoice(str, Enum):
    """Output variant format."""

    bvt = "bvt"
    bed = "bed"


def parse_chromosome(value: str) -> tuple[str, int | None]:
    """Parse a ``NAME[:NUMBER]`` chromosome option.

    Example:
        >>> parse_chromosome("Chr2L:2")
        ('Chr2L', 2)
    """
    name, sep, number = value.partition(":")
    if not name:
        raise typer.BadParameter(f"Empty chromosome name in '{value}'")
    if not sep:
        return name, None
    try:
        return name, int(number)
    except ValueError:
        raise typer.BadParameter(f"Chromosome number must be an integer in '{value}'") from None


def _print_banner() -> None:
    console.print("\n")
    console.print("[bold]Sequence to Variant Table Converter[/bold]", style="blue")
    console.print(f"Python implementation v{__version__}\n")


def _print_job(job: ConversionJob) -> None:
    console.print("Options Set:")
    console.print(f"Chromosome:                  {job.chromosome_name} ({job.chromosome_number})")
    console.print(f"Reference filename:          {job.reference_file}")
    console.print(f"Samples:                     {job.sample_count}")
    console.print(f"Input format:                {job.input_format.value}")
    console.print(f"Output format:               {job.output_format.value}")
    console.print(f"Buffer allocation:           {job.buffer_budget:,} bytes")
    console.print(f"Output base:                 {job.output_base}")
    console.print("")


def _fail(error: ConversionError, verbose: bool) -> typer.Exit:
    console.print(f"[red]ERROR:[/red] {error}")
    if verbose:
        import traceback
        console.print(traceback.format_exc())
    return typer.Exit(code=error.exit_code)


@app.command()
def convert(
    file_list: Annotated[
        Path,
        typer.Argument(help="File listing sequence files, reference marked with 'r:'"),
    ],
    output: Annotated[
        Path,
        typer.Argument(help="Output file name (.bed or .bvt); extension selects format"),
    ],
    chrom_name: Annotated[
        str | None,
        typer.Option("--chrom-name", help="Chromosome name (default: from output file name)"),
    ] = None,
    chrom_num: Annotated[
        int | None,
        typer.Option("--chrom-num", help="Chromosome number written to the .bim file", min=0),
    ] = None,
    input_format: Annotated[
        InputFormatChoice | None,
        typer.Option("--input-format", help="Input format (default: from listed file extension)"),
    ] = None,
    output_format: Annotated[
        OutputFormatChoice | None,
        typer.Option("--output-format", help="Output format (default: from output extension)"),
    ] = None,
    buffer: Annotated[
        int,
        typer.Option("--buffer", "-m", help="Total buffer memory in bytes for all sequences", min=2),
    ] = DEFAULT_BUFFER_BUDGET,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write a detailed log to this file"),
    ] = None,
) -> None:
    """Convert one chromosome's sequence files to a variant file set.

    Example usage:

        seq2variants convert seqList_Chr2L.txt snp_Chr2L.bed

        seq2variants convert list.txt out.bvt --chrom-name Chr2L --chrom-num 2
    """
    from seq2variants.converter import convert_job

    setup_logging(verbose=verbose, log_file=log_file)
    _print_banner()

    try:
        job = job_from_file_list(
            file_list,
            output,
            chromosome_name=chrom_name,
            chromosome_number=chrom_num,
            input_format=InputFormat(input_format.value) if input_format else None,
            output_format=OutputFormat(output_format.value) if output_format else None,
            buffer_budget=buffer,
        )
    except ConversionError as e:
        raise _fail(e, verbose)

    _print_job(job)

    total = job.reference_file.stat().st_size if job.reference_file.exists() else None

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            task = progress.add_task(f"Scanning {job.chromosome_name}...", total=total)
            stats = convert_job(job, progress=lambda n: progress.advance(task, n))
    except ConversionError as e:
        raise _fail(e, verbose)

    console.print("")
    print_summary(job, stats, console)

    console.print("\n[bold]Output files generated:[/bold]")
    for path in job.output_files:
        console.print(f"  {path}")
    console.print("\n[green]Conversion complete![/green]\n")


@app.command()
def batch(
    chromosomes: Annotated[
        list[str],
        typer.Option(
            "--chrom", "-c",
            help="Chromosome as NAME or NAME:NUMBER; repeat for each chromosome",
        ),
    ],
    list_pattern: Annotated[
        str,
        typer.Option("--list-pattern", help="File list name pattern; {chrom} is replaced"),
    ] = "seqList_{chrom}.txt",
    out_pattern: Annotated[
        str,
        typer.Option("--out-pattern", help="Output file name pattern; {chrom} is replaced"),
    ] = "snp_{chrom}.bed",
    output_format: Annotated[
        OutputFormatChoice | None,
        typer.Option("--output-format", help="Output format (default: from output extension)"),
    ] = None,
    buffer: Annotated[
        int,
        typer.Option("--buffer", "-m", help="Buffer memory in bytes per chromosome", min=2),
    ] = DEFAULT_BUFFER_BUDGET,
    workers: Annotated[
        int | None,
        typer.Option("--workers", "-j", help="Maximum parallel threads (default: one per chromosome)", min=1),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Write a detailed log to this file"),
    ] = None,
) -> None:
    """Convert several chromosomes in parallel, one thread per chromosome.

    Example usage:

        seq2variants batch -c Chr2L:2 -c Chr2R:3 -c Chr3L:4 -c Chr3R:5 -c ChrX:1
    """
    from seq2variants.runner import run_jobs

    setup_logging(verbose=verbose, log_file=log_file)
    _print_banner()

    parsed = [parse_chromosome(value) for value in chromosomes]
    names = [name for name, _ in parsed]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise typer.BadParameter(
            f"Chromosome given more than once: {', '.join(duplicates)}",
            param_hint="--chrom",
        )

    try:
        jobs = [
            job_from_file_list(
                Path(list_pattern.format(chrom=name)),
                Path(out_pattern.format(chrom=name)),
                chromosome_name=name,
                chromosome_number=number,
                output_format=OutputFormat(output_format.value) if output_format else None,
                buffer_budget=buffer,
            )
            for name, number in parsed
        ]
    except ConversionError as e:
        raise _fail(e, verbose)

    for job in jobs:
        console.print(
            f"{job.chromosome_name} ({job.chromosome_number}): {job.sample_count} samples "
            f"-> {job.output_base}.{job.output_format.extension}"
        )
    console.print("")

    try:
        results = run_jobs(jobs, max_workers=workers)
    except ConversionError as e:
        raise _fail(e, verbose)

    for job in jobs:
        print_summary(job, results[job.label], console)
        console.print("")

    console.print(f"[green]Converted {len(jobs)} chromosomes.[/green]\n")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
