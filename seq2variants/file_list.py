"""File-list parsing and file-name-derived job metadata.

A file list names one sequence file per line. The reference line is
marked with an ``r:`` prefix; every other line is a sample:

    r:ref/dmel_Chr2L.seq
    seqs/RAL-101_Chr2L.seq
    seqs/RAL-105_Chr2L.seq

Sample names come from the file names (text before the first ``_`` or
``.``). When not given explicitly, the chromosome name and output format
come from the output file name (``snp_Chr2L.bed``) and the input format
from the extension of the first listed file.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from seq2variants.config import DEFAULT_BUFFER_BUDGET, ConversionJob
from seq2variants.exceptions import FileListError, OutputNameError, UnknownExtensionError
from seq2variants.models import InputFormat, OutputFormat

logger = logging.getLogger(__name__)

REFERENCE_PREFIX = "r:"

# Largest sample count downstream tools index safely
MAX_SAMPLE_COUNT = 65_535

# Used when the output file name carries no chromosome name
DEFAULT_CHROMOSOME_NAME = "NN"
DEFAULT_CHROMOSOME_NUMBER = 0
# Chromosome number assumed when the name is derived from the output file
DERIVED_CHROMOSOME_NUMBER = 1


@dataclass(slots=True)
class FileList:
    """Parsed file list.

    Attributes:
        reference_file: Reference sequence file
        sample_files: Sample sequence files in listed order
        first_entry: First line of the list (used for input format detection)
    """

    reference_file: Path
    sample_files: list[Path]
    first_entry: str


def parse_file_list(filepath: Path) -> FileList:
    """Parse a file list.

    Args:
        filepath: Path to the list file

    Returns:
        FileList with the reference and sample paths

    Raises:
        FileListError: If the file cannot be read or names no reference
    """
    try:
        text = Path(filepath).read_text()
    except OSError as e:
        raise FileListError(f"Cannot open file {filepath} listing files to process: {e}") from e

    reference: str | None = None
    samples: list[Path] = []
    first_entry = ""

    for line in text.splitlines():
        entry = line.strip()
        if not entry:
            continue
        if not first_entry:
            first_entry = entry
        if entry.startswith(REFERENCE_PREFIX):
            reference = entry[len(REFERENCE_PREFIX):]
        else:
            samples.append(Path(entry))

    if reference is None:
        raise FileListError(
            f"No reference file (line starting with '{REFERENCE_PREFIX}') in {filepath}"
        )

    if len(samples) > MAX_SAMPLE_COUNT:
        logger.warning(
            f"Number of lines {len(samples)} larger than allowed ({MAX_SAMPLE_COUNT})"
        )

    return FileList(
        reference_file=Path(reference),
        sample_files=samples,
        first_entry=first_entry,
    )


def derive_sample_name(filepath: str | Path) -> str:
    """Derive a sample (line) name from a sequence file path.

    Directories (``/`` or ``\\`` separated) are stripped, then the name is
    cut at the first ``_`` or ``.``.

    Example:
        >>> derive_sample_name("seqs/RAL-101_Chr2L.seq")
        'RAL-101'
    """
    basename = re.split(r"[/\\]", str(filepath))[-1]
    return re.split(r"[_.]", basename, maxsplit=1)[0]


def derive_sample_names(sample_files: list[Path]) -> list[str]:
    """Derive sample names, substituting a placeholder for empty ones."""
    names: list[str] = []
    for i, sample_file in enumerate(sample_files, 1):
        name = derive_sample_name(sample_file)
        if not name:
            name = f"line{i}"
            logger.warning(f"No sample name found in file name {sample_file}; using {name}")
        names.append(name)
    return names


def _split_extension(filepath: str | Path) -> tuple[str, str]:
    """Split a file name into (stem, extension), extension without the dot."""
    name = Path(filepath).name
    stem, dot, extension = name.rpartition(".")
    if not dot:
        return name, ""
    return stem, extension


def derive_chromosome_name(output_file: str | Path) -> str:
    """Derive the chromosome name from an output file name.

    The name is the text between the last ``_`` and the extension
    (``snp_Chr2L.bed`` -> ``Chr2L``); without an underscore the whole stem
    is used.

    Raises:
        OutputNameError: If the output file name has no extension
    """
    stem, extension = _split_extension(output_file)
    if not extension:
        raise OutputNameError(f"No extension found in file {output_file}")
    return stem.rpartition("_")[2]


def detect_output_format(output_file: str | Path) -> OutputFormat:
    """Detect the output format from the output file extension.

    Raises:
        OutputNameError: If there is no extension
        UnknownExtensionError: If the extension is not ``bvt`` or ``bed``
    """
    _, extension = _split_extension(output_file)
    if not extension:
        raise OutputNameError(f"No extension found in file {output_file}")
    try:
        return OutputFormat(extension.lower())
    except ValueError:
        raise UnknownExtensionError(
            f"Unknown extension {extension} for output file {output_file}"
        ) from None


def detect_input_format(entry: str | Path) -> InputFormat:
    """Detect the input format from the extension of a listed file.

    Raises:
        UnknownExtensionError: If the extension is not ``seq``
    """
    _, extension = _split_extension(entry)
    try:
        return InputFormat(extension.lower())
    except ValueError:
        raise UnknownExtensionError(
            f"Unknown extension {extension} for input files ({entry})"
        ) from None


def job_from_file_list(
    file_list: Path,
    output_file: Path,
    chromosome_name: str | None = None,
    chromosome_number: int | None = None,
    input_format: InputFormat | None = None,
    output_format: OutputFormat | None = None,
    buffer_budget: int = DEFAULT_BUFFER_BUDGET,
) -> ConversionJob:
    """Build a conversion job from a file list and an output file name.

    Explicit arguments win; anything left as None is derived from the file
    names.

    Args:
        file_list: Path to the file list
        output_file: Output file name (extension selects the format if needed)
        chromosome_name: Chromosome name (default: from output file name)
        chromosome_number: Chromosome number for the .bim file
        input_format: Input format (default: from first listed file)
        output_format: Output format (default: from output file extension)
        buffer_budget: Bytes shared by all sequences per chunk

    Returns:
        Fully resolved ConversionJob

    Raises:
        FileListError: If the file list is unreadable
        OutputNameError: If metadata is needed from an output name without extension
        UnknownExtensionError: If a format cannot be derived from an extension
    """
    output_file = Path(output_file)

    if output_format is None:
        output_format = detect_output_format(output_file)

    if chromosome_name is None:
        chromosome_name = derive_chromosome_name(output_file)
        if not chromosome_name:
            logger.warning(
                f"No chromosome name found in output file name {output_file}; "
                f"setting default"
            )
            chromosome_name = DEFAULT_CHROMOSOME_NAME
            if chromosome_number is None:
                chromosome_number = DEFAULT_CHROMOSOME_NUMBER
        elif chromosome_number is None:
            chromosome_number = DERIVED_CHROMOSOME_NUMBER
    elif chromosome_number is None:
        chromosome_number = DERIVED_CHROMOSOME_NUMBER

    listing = parse_file_list(file_list)

    if input_format is None:
        input_format = detect_input_format(listing.first_entry)

    return ConversionJob(
        sample_files=listing.sample_files,
        sample_names=derive_sample_names(listing.sample_files),
        reference_file=listing.reference_file,
        output_base=output_file,
        chromosome_name=chromosome_name,
        chromosome_number=chromosome_number,
        input_format=input_format,
        output_format=output_format,
        buffer_budget=buffer_budget,
    )
