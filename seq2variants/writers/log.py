"""Run summary for a conversion job."""

from rich.console import Console

from seq2variants.config import ConversionJob
from seq2variants.models import ConversionStats


def summary_lines(job: ConversionJob, stats: ConversionStats) -> list[str]:
    """Build the summary printed after a job.

    Args:
        job: Job that was run
        stats: Statistics collected during the run

    Returns:
        Summary lines
    """
    lines = [
        f"Chromosome {job.chromosome_name} ({job.chromosome_number})",
        f" Samples {job.sample_count}",
        f" Windows read {stats.windows}",
        f" Sites scanned {stats.sites_scanned}",
        f" Monomorphic sites {stats.monomorphic}",
        f" Polymorphic sites {stats.polymorphic}",
        f"  Biallelic {stats.biallelic}",
        f"  Multiallelic {stats.multiallelic}",
        f"  Ancestral state missing {stats.ancestral_missing}",
        f"  Diverged from ancestral {stats.diverged}",
        f" Sites written ({job.output_format.value}) {stats.sites_written}",
        f" Sites dropped {stats.dropped}",
    ]
    for sample_file in stats.short_samples:
        lines.append(f" Shorter than reference: {sample_file}")
    return lines


def print_summary(
    job: ConversionJob,
    stats: ConversionStats,
    console: Console | None = None,
) -> None:
    """Print summary statistics to the console.

    Args:
        job: Job that was run
        stats: Statistics collected during the run
        console: Console to print to (default: new stdout console)
    """
    console = console or Console()
    for line in summary_lines(job, stats):
        console.print(line, highlight=False)
