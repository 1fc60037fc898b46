"""Abstract base class for variant output writers.

A writer owns every output file of one format for one job. The converter
hands it each polymorphic site; the writer decides whether the site fits
its format and encodes it. Output files are removed before they are
reopened, so a rerun never appends to old output.
"""

from abc import ABC, abstractmethod
from types import TracebackType
from typing import IO

from seq2variants.config import ConversionJob
from seq2variants.exceptions import OutputWriteError
from seq2variants.models import SiteObservation


class SiteWriter(ABC):
    """Base class for output format writers.

    Usage:
        with VariantTableWriter(job) as writer:
            for site in sites:
                writer.write_site(site)

    Subclasses implement open() and write_site().
    """

    def __init__(self, job: ConversionJob) -> None:
        """Initialize writer for a job (files are opened on entry)."""
        self.job = job
        self.sites_written = 0
        self._handles: list[IO] = []

    def _open(self, extension: str, binary: bool = False) -> IO:
        """Remove and reopen an output file.

        Args:
            extension: Output file extension without the dot
            binary: Open in binary mode

        Returns:
            Open file handle for writing

        Raises:
            OutputWriteError: If the file cannot be opened
        """
        filepath = self.job.output_path(extension)
        try:
            filepath.unlink(missing_ok=True)
            handle = open(filepath, "wb" if binary else "w")
        except OSError as e:
            raise OutputWriteError(f"Unable to open {filepath} for output: {e}") from e
        self._handles.append(handle)
        return handle

    @abstractmethod
    def open(self) -> None:
        """Open output files and write any headers or metadata."""
        pass

    @abstractmethod
    def write_site(self, site: SiteObservation) -> bool:
        """Encode one polymorphic site.

        Args:
            site: Classified site

        Returns:
            True if the site was written, False if the format drops it
        """
        pass

    def close(self) -> None:
        """Close all file handles."""
        for handle in self._handles:
            handle.close()
        self._handles.clear()

    def __enter__(self) -> "SiteWriter":
        """Context manager entry - open all files."""
        try:
            self.open()
        except BaseException:
            self.close()
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit - close all files."""
        self.close()
