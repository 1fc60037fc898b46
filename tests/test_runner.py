"""Tests for parallel per-chromosome conversion."""

from collections.abc import Callable

import pytest

from seq2variants.config import ConversionJob
from seq2variants.converter import convert_job
from seq2variants.exceptions import SequenceReadError
from seq2variants.runner import run_jobs

CHROMOSOMES = [("Chr2L", 2), ("Chr2R", 3), ("Chr3L", 4), ("ChrX", 1)]


def build_jobs(
    make_job: Callable[..., ConversionJob],
    population: tuple[str, list[str]],
    subdir: str,
) -> list[ConversionJob]:
    """One job per chromosome, each a rotation of the shared population."""
    reference, samples = population
    jobs = []
    for shift, (name, number) in enumerate(CHROMOSOMES):
        jobs.append(
            make_job(
                reference[shift:] + reference[:shift],
                [s[shift:] + s[:shift] for s in samples],
                chromosome_name=name,
                chromosome_number=number,
                buffer_budget=8 * 16,
                subdir=subdir,
            )
        )
    return jobs


class TestRunJobs:
    """Test thread fan-out."""

    def test_parallel_matches_sequential(
        self,
        make_job: Callable[..., ConversionJob],
        population: tuple[str, list[str]],
    ) -> None:
        parallel = build_jobs(make_job, population, "parallel")
        sequential = build_jobs(make_job, population, "sequential")

        results = run_jobs(parallel, max_workers=4)
        for job in sequential:
            convert_job(job)

        assert list(results) == [name for name, _ in CHROMOSOMES]
        for par, seq in zip(parallel, sequential):
            for par_file, seq_file in zip(par.output_files, seq.output_files):
                assert par_file.read_bytes() == seq_file.read_bytes()

    def test_failure_reraised_after_other_jobs(
        self,
        make_job: Callable[..., ConversionJob],
        population: tuple[str, list[str]],
    ) -> None:
        """One broken chromosome fails the run; the others still finish."""
        jobs = build_jobs(make_job, population, "broken")
        jobs[1].reference_file.unlink()

        with pytest.raises(SequenceReadError):
            run_jobs(jobs)

        for i, job in enumerate(jobs):
            if i != 1:
                assert job.output_path("bim").stat().st_size > 0

    def test_empty(self) -> None:
        assert run_jobs([]) == {}

    def test_duplicate_labels_rejected(
        self, make_job: Callable[..., ConversionJob]
    ) -> None:
        jobs = [
            make_job("ACGT", ["ACGT"], subdir="a"),
            make_job("ACGT", ["ACGT"], subdir="b"),
        ]

        with pytest.raises(ValueError, match="unique"):
            run_jobs(jobs)
