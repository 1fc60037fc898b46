"""Chunked reader for aligned sequence files.

Reads the reference and every sample sequence one fixed-size window at a
time. Files are opened, seeked, read and closed for every window, so at
most ``sample_count + 1`` descriptors are open at once and none is held
between windows. Peak memory is bounded by the job's buffer budget.

Example:
    reader = ChunkedSequenceReader(job.reference_file, job.sample_files, job.chunk_size)
    for window in reader:
        process(window)
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from seq2variants.exceptions import SequenceReadError
from seq2variants.models import MISSING_BYTE, SequenceWindow

logger = logging.getLogger(__name__)

# A flat sequence ends at the first line break
LINE_BREAK = b"\n"


def read_chunk(filepath: Path, offset: int, size: int) -> bytes:
    """Read up to ``size`` bytes of sequence starting at ``offset``.

    The file is closed before returning. Reading stops at a line break,
    which terminates a flat sequence file.

    Args:
        filepath: Sequence file
        offset: Byte offset to seek to
        size: Maximum number of bytes to read

    Returns:
        Sequence bytes (may be shorter than ``size`` at end of sequence)

    Raises:
        SequenceReadError: If the file cannot be opened
    """
    try:
        with open(filepath, "rb") as f:
            if offset:
                f.seek(offset)
            chunk = f.read(size)
    except OSError as e:
        raise SequenceReadError(f"Unable to open sequence file {filepath}: {e}") from e

    cut = chunk.find(LINE_BREAK)
    if cut != -1:
        chunk = chunk[:cut]
    return chunk.rstrip(b"\r")


class ChunkedSequenceReader:
    """Iterate over aligned windows of a reference and its samples.

    The reference drives iteration: a short read from the reference marks
    the final window, and every sample is read for exactly as many bytes as
    the reference produced, starting from the same offset. Samples longer
    than the reference are truncated; samples that run out early are padded
    with ``N`` and reported once.

    Iteration is single-use; the saved offset is the only state.
    """

    def __init__(
        self,
        reference_file: Path,
        sample_files: list[Path],
        chunk_size: int,
    ) -> None:
        """Initialize reader.

        Args:
            reference_file: Reference sequence file
            sample_files: Sample sequence files in output order
            chunk_size: Per-stream window allocation in bytes; a window
                holds at most ``chunk_size - 1`` columns

        Raises:
            ValueError: If chunk_size leaves no room for a column
        """
        if chunk_size < 2:
            raise ValueError(f"chunk_size must be at least 2, got {chunk_size}")

        self.reference_file = Path(reference_file)
        self.sample_files = [Path(p) for p in sample_files]
        self.chunk_size = chunk_size

        self._offset = 0
        self._done = False
        self._short_samples: set[Path] = set()

    @property
    def offset(self) -> int:
        """Byte offset where the next window starts."""
        return self._offset

    @property
    def short_samples(self) -> list[Path]:
        """Sample files that ended before the reference."""
        return sorted(self._short_samples)

    def __iter__(self) -> Iterator[SequenceWindow]:
        return self

    def __next__(self) -> SequenceWindow:
        if self._done:
            raise StopIteration

        window_size = self.chunk_size - 1
        start = self._offset

        reference = read_chunk(self.reference_file, start, window_size)
        if len(reference) < window_size:
            self._done = True
        self._offset = start + len(reference)

        # Samples are read from the reference's start offset, for the same length
        samples = [self._read_sample(path, start, len(reference)) for path in self.sample_files]

        return SequenceWindow(reference=reference, samples=samples, start=start)

    def _read_sample(self, filepath: Path, start: int, length: int) -> bytes:
        """Read one sample window, padding a short read with missing calls."""
        if length == 0:
            return b""

        chunk = read_chunk(filepath, start, length)
        if len(chunk) < length:
            if filepath not in self._short_samples:
                logger.warning(
                    f"Sample file {filepath} ends at position {start + len(chunk)}, "
                    f"before the reference; padding with missing calls"
                )
                self._short_samples.add(filepath)
            chunk = chunk + bytes([MISSING_BYTE]) * (length - len(chunk))
        return chunk
