"""Binary variant table writer.

Output files:
- {base}.bvt  - one fixed-width row per polymorphic site
- {base}.bvtm - one line: chromosome name followed by sample names

Row layout (no padding, no packing):

    uint32 little-endian  chromosome position (1-based)
    1 byte                ancestral call from the reference
    1 byte per sample     sample call, in sample order

Multiallelic sites are kept; the raw calls are written as read.
"""

import struct
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from seq2variants.config import ConversionJob
from seq2variants.models import SiteObservation
from seq2variants.writers.base import SiteWriter

POSITION = struct.Struct("<I")


@dataclass(slots=True)
class VariantTableRow:
    """One row read back from a .bvt file."""

    position: int
    ancestral: str
    calls: str


def row_size(sample_count: int) -> int:
    """Bytes per .bvt row for a given number of samples."""
    return POSITION.size + 1 + sample_count


def encode_row(site: SiteObservation) -> bytes:
    """Encode a site as a .bvt row."""
    return POSITION.pack(site.position) + (site.ancestral + site.calls).encode("latin-1")


class VariantTableWriter(SiteWriter):
    """Writes polymorphic sites to a binary variant table."""

    def __init__(self, job: ConversionJob) -> None:
        super().__init__(job)
        self._data = None

    def open(self) -> None:
        meta = self._open("bvtm")
        meta.write(" ".join([self.job.chromosome_name, *self.job.sample_names]) + "\n")
        meta.close()
        self._handles.remove(meta)

        self._data = self._open("bvt", binary=True)

    def write_site(self, site: SiteObservation) -> bool:
        self._data.write(encode_row(site))
        self.sites_written += 1
        return True


def read_metadata(filepath: Path) -> tuple[str, list[str]]:
    """Read a .bvtm file.

    Args:
        filepath: Path to .bvtm file

    Returns:
        Tuple of (chromosome name, sample names)
    """
    fields = filepath.read_text().split()
    if not fields:
        raise ValueError(f"Empty variant table metadata: {filepath}")
    return fields[0], fields[1:]


def read_variant_table(filepath: Path, sample_count: int) -> Iterator[VariantTableRow]:
    """Stream rows from a .bvt file.

    Args:
        filepath: Path to .bvt file
        sample_count: Number of samples per row (from the .bvtm file)

    Yields:
        VariantTableRow per polymorphic site

    Raises:
        ValueError: If the file ends in the middle of a row
    """
    size = row_size(sample_count)
    with open(filepath, "rb") as f:
        while True:
            raw = f.read(size)
            if not raw:
                break
            if len(raw) < size:
                raise ValueError(
                    f"Truncated row in {filepath}: expected {size} bytes, got {len(raw)}"
                )
            (position,) = POSITION.unpack_from(raw)
            calls = raw[POSITION.size:].decode("latin-1")
            yield VariantTableRow(position=position, ancestral=calls[0], calls=calls[1:])
