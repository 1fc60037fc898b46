"""
Exceptions raised during conversion.

Every error is fatal for the job that raised it. Each class carries the
exit code the command line reports for its category.
"""


class ConversionError(Exception):
    """Base exception for conversion failures."""

    exit_code = 1


class FileListError(ConversionError):
    """Raised when the file list cannot be read or names no reference."""

    exit_code = 1


class OutputNameError(ConversionError):
    """Raised when metadata cannot be derived from the output file name."""

    exit_code = 2


class UnknownExtensionError(ConversionError):
    """Raised when a file extension maps to no supported format."""

    exit_code = 3


class UnsupportedFormatError(ConversionError):
    """Raised for an input/output format pairing with no converter."""

    exit_code = 4


class SequenceReadError(ConversionError):
    """Raised when a reference or sample sequence file cannot be opened."""

    exit_code = 5


class OutputWriteError(ConversionError):
    """Raised when an output file cannot be opened for writing."""

    exit_code = 6
