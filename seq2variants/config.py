"""Configuration dataclass for a single conversion job.

One job converts one chromosome: a reference sequence plus one sequence
file per sample, written to a single output file set.
"""

from dataclasses import dataclass
from pathlib import Path

from seq2variants.models import InputFormat, OutputFormat

# Total buffer memory shared by all input sequences (2 GB)
DEFAULT_BUFFER_BUDGET = 2_000_000_000

# Input/output pairings with a converter
SUPPORTED_CONVERSIONS: set[tuple[InputFormat, OutputFormat]] = {
    (InputFormat.SEQ, OutputFormat.BVT),
    (InputFormat.SEQ, OutputFormat.BED),
}


def strip_extension(path: Path) -> Path:
    """Drop a trailing 4-character extension (``.bed``, ``.bvt``) if present.

    Args:
        path: Output path, with or without extension

    Returns:
        Path stem used as the base for every output file

    Example:
        >>> strip_extension(Path("out/snp_Chr2L.bed"))
        PosixPath('out/snp_Chr2L')
    """
    name = path.name
    if len(name) > 4 and name[-4] == ".":
        return path.with_name(name[:-4])
    return path


@dataclass
class ConversionJob:
    """Fully resolved settings for converting one chromosome.

    Attributes:
        sample_files: Sequence file per sample; order defines output column order
        sample_names: Sample names, same length and order as sample_files
        reference_file: Ancestral/reference sequence in the same coordinates
        output_base: Output path stem (an extension, if given, is stripped)
        chromosome_name: Chromosome label written to the metadata files
        chromosome_number: Numeric chromosome code written to the .bim file
        input_format: Input sequence format
        output_format: Output variant format
        buffer_budget: Bytes shared by the reference and all samples per chunk
    """

    sample_files: list[Path]
    sample_names: list[str]
    reference_file: Path
    output_base: Path
    chromosome_name: str
    chromosome_number: int = 0

    input_format: InputFormat = InputFormat.SEQ
    output_format: OutputFormat = OutputFormat.BED

    buffer_budget: int = DEFAULT_BUFFER_BUDGET

    def __post_init__(self) -> None:
        """Normalize paths and format selectors."""
        self.sample_files = [Path(p) for p in self.sample_files]
        self.sample_names = list(self.sample_names)
        if isinstance(self.reference_file, str):
            self.reference_file = Path(self.reference_file)
        self.output_base = strip_extension(Path(self.output_base))

        if isinstance(self.input_format, str):
            self.input_format = InputFormat(self.input_format.lower())
        if isinstance(self.output_format, str):
            self.output_format = OutputFormat(self.output_format.lower())

    @property
    def sample_count(self) -> int:
        """Number of samples (individuals) in the job."""
        return len(self.sample_files)

    @property
    def chunk_size(self) -> int:
        """Per-stream window size in bytes."""
        return self.buffer_budget // (self.sample_count + 1)

    @property
    def label(self) -> str:
        """Short job label for log messages."""
        return self.chromosome_name or self.output_base.name

    def change_output_format(self, output_format: OutputFormat | str) -> None:
        """Select a different output format before the job runs.

        Args:
            output_format: New output format
        """
        if isinstance(output_format, str):
            output_format = OutputFormat(output_format.lower())
        self.output_format = output_format

    def output_path(self, extension: str) -> Path:
        """Get the output path for a given extension.

        Args:
            extension: File extension without the dot

        Returns:
            ``<output_base>.<extension>``
        """
        return self.output_base.with_name(f"{self.output_base.name}.{extension}")

    @property
    def output_files(self) -> list[Path]:
        """All files written for the selected output format."""
        return [self.output_path(ext) for ext in self.output_format.companion_extensions]

    @property
    def is_supported(self) -> bool:
        """True if a converter exists for the input/output pairing."""
        return (self.input_format, self.output_format) in SUPPORTED_CONVERSIONS

    def missing_inputs(self) -> list[Path]:
        """Reference and sample files that do not exist."""
        return [
            path
            for path in [self.reference_file, *self.sample_files]
            if not path.exists()
        ]

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors: list[str] = []

        if not self.is_supported:
            errors.append(
                f"Unsupported conversion: {self.input_format.value} -> "
                f"{self.output_format.value}"
            )

        if not self.sample_files:
            errors.append("No sample files given")

        if len(self.sample_files) != len(self.sample_names):
            errors.append(
                f"Number of sample names ({len(self.sample_names)}) does not match "
                f"number of sample files ({len(self.sample_files)})"
            )

        # A window holds chunk_size - 1 columns, so each stream needs two bytes
        if self.chunk_size < 2:
            errors.append(
                f"Buffer budget {self.buffer_budget} too small for "
                f"{self.sample_count + 1} sequences: each sequence's share holds back "
                f"one terminator byte, so at least {2 * (self.sample_count + 1)} bytes "
                f"(two per sequence) are needed"
            )

        for missing in self.missing_inputs():
            errors.append(f"Sequence file not found: {missing}")

        if not self.output_base.parent.exists():
            errors.append(f"Output directory does not exist: {self.output_base.parent}")

        return errors
