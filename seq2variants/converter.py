"""Conversion of one chromosome's sequences to a variant file set.

Streams windows from the chunked reader, classifies each window once and
hands every polymorphic site to the writer for the selected format. Rows
are written as they are produced; nothing is buffered beyond the current
window, so output written before a failure stays on disk.
"""

import logging
from collections.abc import Callable

from seq2variants.classify import classify_window
from seq2variants.config import ConversionJob
from seq2variants.exceptions import (
    ConversionError,
    OutputWriteError,
    SequenceReadError,
    UnsupportedFormatError,
)
from seq2variants.models import ConversionStats, OutputFormat
from seq2variants.reader import ChunkedSequenceReader
from seq2variants.writers.base import SiteWriter
from seq2variants.writers.plink_files import PlinkBedWriter
from seq2variants.writers.variant_table import VariantTableWriter

logger = logging.getLogger(__name__)

WRITERS: dict[OutputFormat, type[SiteWriter]] = {
    OutputFormat.BVT: VariantTableWriter,
    OutputFormat.BED: PlinkBedWriter,
}


def get_writer(job: ConversionJob) -> SiteWriter:
    """Create the writer for a job's output format.

    Args:
        job: Conversion job

    Returns:
        Unopened writer

    Raises:
        UnsupportedFormatError: If no converter exists for the format pairing
    """
    if not job.is_supported or job.output_format not in WRITERS:
        raise UnsupportedFormatError(
            f"Unknown input or output format for parsing: "
            f"{job.input_format.value} -> {job.output_format.value}"
        )
    return WRITERS[job.output_format](job)


def check_job(job: ConversionJob) -> None:
    """Raise the error matching the first problem found in a job.

    Raises:
        UnsupportedFormatError: For an unsupported format pairing
        SequenceReadError: If an input sequence file is missing
        OutputWriteError: If the output directory does not exist
        ConversionError: For any other configuration problem
    """
    if not job.is_supported:
        raise UnsupportedFormatError(
            f"Unknown input or output format for parsing: "
            f"{job.input_format.value} -> {job.output_format.value}"
        )

    missing = job.missing_inputs()
    if missing:
        raise SequenceReadError(f"Unable to open sequence file {missing[0]}")

    output_dir = job.output_base.parent
    if not output_dir.is_dir():
        raise OutputWriteError(
            f"Unable to open output files: directory {output_dir} does not exist"
        )

    errors = job.validate()
    if errors:
        raise ConversionError("; ".join(errors))


def convert_job(
    job: ConversionJob,
    progress: Callable[[int], None] | None = None,
) -> ConversionStats:
    """Run a conversion job.

    Existing output files are removed first. The reference drives the scan,
    so sample sequences longer than the reference are truncated.

    Args:
        job: Fully resolved conversion job
        progress: Optional callback receiving the column count of each window

    Returns:
        Statistics for the run

    Raises:
        ConversionError: If the job is invalid or an input/output file fails
    """
    check_job(job)

    stats = ConversionStats()
    reader = ChunkedSequenceReader(job.reference_file, job.sample_files, job.chunk_size)

    logger.info(
        f"Converting {job.label}: {job.sample_count} samples, "
        f"{job.chunk_size - 1} columns per window -> {job.output_format.value}"
    )

    with get_writer(job) as writer:
        for window in reader:
            stats.windows += 1
            stats.sites_scanned += window.length

            for site in classify_window(window):
                stats.polymorphic += 1
                if site.biallelic:
                    stats.biallelic += 1
                else:
                    stats.multiallelic += 1
                if site.ancestral_missing:
                    stats.ancestral_missing += 1
                elif site.diverged:
                    stats.diverged += 1

                writer.write_site(site)

            if progress is not None:
                progress(window.length)

            # Release the window so two windows are never held during the next read
            del window

        stats.sites_written = writer.sites_written

    stats.short_samples = [str(p) for p in reader.short_samples]

    logger.info(
        f"Finished {job.label}: {stats.sites_scanned} sites scanned, "
        f"{stats.polymorphic} polymorphic, {stats.sites_written} written"
    )
    return stats
