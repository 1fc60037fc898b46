"""Parallel conversion of several chromosomes.

Each job runs in its own thread with its own reader, writer and buffers;
jobs share nothing, so no locking is needed. A job is sequential inside
its thread.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from seq2variants.config import ConversionJob
from seq2variants.converter import convert_job
from seq2variants.models import ConversionStats

logger = logging.getLogger(__name__)


def run_jobs(
    jobs: list[ConversionJob],
    max_workers: int | None = None,
) -> dict[str, ConversionStats]:
    """Convert several chromosomes in parallel, one thread per job.

    All jobs run to completion (or failure) before this returns. If any
    job failed, the first failure is re-raised after the others finish;
    output already written by every job stays on disk.

    Args:
        jobs: Independent conversion jobs, normally one per chromosome
        max_workers: Maximum concurrent threads (default: one per job)

    Returns:
        Statistics per job, keyed by job label, in submission order

    Raises:
        ConversionError: The first error raised by any job
    """
    if not jobs:
        return {}

    labels = [job.label for job in jobs]
    if len(set(labels)) != len(labels):
        raise ValueError(f"Job labels must be unique: {labels}")

    workers = max_workers or len(jobs)
    results: dict[str, ConversionStats] = {}
    first_error: BaseException | None = None

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="seq2variants") as executor:
        futures = {executor.submit(convert_job, job): job for job in jobs}

        for future in as_completed(futures):
            job = futures[future]
            try:
                results[job.label] = future.result()
            except Exception as e:
                logger.error(f"Conversion of {job.label} failed: {e}")
                if first_error is None:
                    first_error = e

    if first_error is not None:
        raise first_error

    return {label: results[label] for label in labels}
