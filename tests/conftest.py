"""Pytest fixtures for seq2variants tests."""

import logging
import random
from collections.abc import Callable
from pathlib import Path

import pytest

from seq2variants.config import ConversionJob
from seq2variants.models import OutputFormat


@pytest.fixture
def make_job(tmp_path: Path) -> Callable[..., ConversionJob]:
    """Factory writing sequence files and returning a job that converts them.

    Sequences are written to ``<tmp>/<subdir>/seqs`` and output goes to
    ``<tmp>/<subdir>/out/snp_<chromosome>``, so several jobs built from the
    same test never share files.
    """

    def _make(
        reference: str,
        samples: list[str],
        output_format: OutputFormat = OutputFormat.BED,
        buffer_budget: int = 1_000_000,
        chromosome_name: str = "Chr2L",
        chromosome_number: int = 2,
        subdir: str = "run",
    ) -> ConversionJob:
        base = tmp_path / subdir
        seq_dir = base / "seqs"
        out_dir = base / "out"
        seq_dir.mkdir(parents=True, exist_ok=True)
        out_dir.mkdir(parents=True, exist_ok=True)

        ref_file = seq_dir / f"ref_{chromosome_name}.seq"
        ref_file.write_text(reference)

        sample_files = []
        for i, sequence in enumerate(samples, 1):
            sample_file = seq_dir / f"line{i}_{chromosome_name}.seq"
            sample_file.write_text(sequence)
            sample_files.append(sample_file)

        return ConversionJob(
            sample_files=sample_files,
            sample_names=[f"line{i}" for i in range(1, len(samples) + 1)],
            reference_file=ref_file,
            output_base=out_dir / f"snp_{chromosome_name}",
            chromosome_name=chromosome_name,
            chromosome_number=chromosome_number,
            output_format=output_format,
            buffer_budget=buffer_budget,
        )

    return _make


@pytest.fixture
def population() -> tuple[str, list[str]]:
    """Deterministic reference and 7 sample sequences of length 250.

    Mostly monomorphic, with a mix of biallelic, multiallelic and missing
    calls, including missing ancestral states.
    """
    rng = random.Random(20170101)
    length = 250
    reference = [rng.choice("ACGT") for _ in range(length)]
    samples = [list(reference) for _ in range(7)]

    for pos in range(length):
        roll = rng.random()
        if roll < 0.15:
            derived = rng.choice([b for b in "ACGT" if b != reference[pos]])
            for sample in samples:
                if rng.random() < 0.3:
                    sample[pos] = derived
        elif roll < 0.20:
            for sample in samples:
                sample[pos] = rng.choice("ACGT")
        if rng.random() < 0.05:
            reference[pos] = "N"
        for sample in samples:
            if rng.random() < 0.04:
                sample[pos] = "N"

    return "".join(reference), ["".join(s) for s in samples]


@pytest.fixture
def reset_package_logging():
    """Remove handlers installed on the package logger during a test."""
    yield
    logger = logging.getLogger("seq2variants")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
