"""Data models for the sequence converter.

Formats, genotype classes, the per-chunk sequence window and the per-site
observation handed from the classifier to the output writers.
"""

from dataclasses import dataclass, field
from enum import Enum, auto

# Missing-data symbol in sequence files
MISSING_CALL = "N"
MISSING_BYTE = ord(MISSING_CALL)


class InputFormat(Enum):
    """Supported input sequence formats."""

    SEQ = "seq"  # Headerless flat sequence, one byte per position

    @property
    def extension(self) -> str:
        """Default file extension (without the dot)."""
        return self.value


class OutputFormat(Enum):
    """Supported output variant formats."""

    BVT = "bvt"  # Binary variant table (.bvt + .bvtm)
    BED = "bed"  # PLINK 1 packed genotypes (.bed + .bim + .fam)

    @property
    def extension(self) -> str:
        """Default file extension (without the dot)."""
        return self.value

    @property
    def companion_extensions(self) -> tuple[str, ...]:
        """All extensions written for this format, data file first."""
        if self is OutputFormat.BVT:
            return ("bvt", "bvtm")
        return ("bed", "bim", "fam")


class GenotypeClass(Enum):
    """Genotype classes encoded in a PLINK 1 BED row."""

    HOM_ALT = auto()
    HET = auto()  # Reserved; sequence data carries no heterozygous calls
    MISSING = auto()
    HOM_REF = auto()


@dataclass(slots=True)
class SequenceWindow:
    """One aligned chunk of the reference and every sample sequence.

    Attributes:
        reference: Reference bytes for the chunk
        samples: Sample bytes, one entry per sample in job order, each
            exactly as long as ``reference``
        start: 0-based byte offset of the chunk in every file
    """

    reference: bytes
    samples: list[bytes]
    start: int

    @property
    def length(self) -> int:
        """Number of columns (positions) in the window."""
        return len(self.reference)

    @property
    def first_position(self) -> int:
        """1-based chromosome position of the first column."""
        return self.start + 1


@dataclass(slots=True)
class SiteObservation:
    """Classification of one column.

    Attributes:
        position: 1-based chromosome position
        ancestral: Call from the reference sequence (may be ``N``)
        calls: Sample calls in sample order
        effective_reference: First non-missing sample call (``N`` if none)
        alternate: First non-missing call differing from the effective
            reference, None for monomorphic columns
        polymorphic: At least one sample differs from the effective reference
        biallelic: False when a second distinct alternate was seen
    """

    position: int
    ancestral: str
    calls: str
    effective_reference: str
    alternate: str | None = None
    polymorphic: bool = False
    biallelic: bool = True

    @property
    def ancestral_missing(self) -> bool:
        """True when the reference carries no call at this site."""
        return self.ancestral == MISSING_CALL

    @property
    def diverged(self) -> bool:
        """True when both sample alleles differ from the ancestral call."""
        return (
            self.alternate is not None
            and not self.ancestral_missing
            and self.alternate != self.ancestral
            and self.effective_reference != self.ancestral
        )


@dataclass
class ConversionStats:
    """Running statistics for one conversion job."""

    windows: int = 0
    sites_scanned: int = 0
    polymorphic: int = 0
    biallelic: int = 0
    multiallelic: int = 0
    ancestral_missing: int = 0
    diverged: int = 0
    sites_written: int = 0
    short_samples: list[str] = field(default_factory=list)

    @property
    def monomorphic(self) -> int:
        """Scanned sites with no variation among samples."""
        return self.sites_scanned - self.polymorphic

    @property
    def dropped(self) -> int:
        """Polymorphic sites the selected format did not keep."""
        return self.polymorphic - self.sites_written
