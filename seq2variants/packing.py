"""PLINK 1 BED genotype packing.

Bit order and codes are PLINK 1's SNP-major ones, which is what PLINK and
every downstream reader expect. A BED row stores four genotype calls per
byte, two bits each. The first call of a byte sits in the two lowest-order
bits (call ``k`` in bits ``2k`` and ``2k+1``), so reading a byte left to
right shows the calls in reverse. Rows start as ``0xFF`` (homozygous
reference in every slot) and only alternate, missing and padding slots
are cleared with AND masks, which keeps the common
low-frequency-derived-allele case nearly free.

Two-bit codes as stored (high bit, low bit):

    00  homozygous alternate (first allele in the .bim line)
    01  missing
    10  heterozygous
    11  homozygous reference (second allele in the .bim line)

Unused slots in the last byte of a row are cleared to ``00``.
"""

from math import ceil

from seq2variants.models import MISSING_CALL, GenotypeClass

# Magic bytes opening every BED file (SNP-major mode)
BED_MAGIC = bytes([0x6C, 0x1B, 0x01])

CALLS_PER_BYTE = 4

# AND masks per genotype class, indexed by slot within the byte
GENOTYPE_MASKS: dict[GenotypeClass, tuple[int, int, int, int]] = {
    GenotypeClass.HOM_ALT: (0xFC, 0xF3, 0xCF, 0x3F),
    GenotypeClass.HET: (0xFE, 0xFB, 0xEF, 0xBF),
    GenotypeClass.MISSING: (0xFD, 0xF7, 0xDF, 0x7F),
}

# AND masks clearing the unused tail of the last byte, indexed by
# number of unused slots minus one
PADDING_MASKS: tuple[int, int, int] = (0x3F, 0x0F, 0x03)

# Stored two-bit value to genotype class
CODE_TO_GENOTYPE: dict[int, GenotypeClass] = {
    0b00: GenotypeClass.HOM_ALT,
    0b01: GenotypeClass.MISSING,
    0b10: GenotypeClass.HET,
    0b11: GenotypeClass.HOM_REF,
}

PADDING_CODE = 0b00


def row_length(sample_count: int) -> int:
    """Bytes per BED row for a given number of samples."""
    return ceil(sample_count / CALLS_PER_BYTE)


def genotype_class(call: str, alternate: str) -> GenotypeClass:
    """Classify a haploid sequence call against the alternate allele.

    Args:
        call: Sample call at the site
        alternate: Allele coded as homozygous alternate

    Returns:
        HOM_ALT, MISSING or HOM_REF
    """
    if call == alternate:
        return GenotypeClass.HOM_ALT
    if call == MISSING_CALL:
        return GenotypeClass.MISSING
    return GenotypeClass.HOM_REF


def pack_genotypes(genotypes: list[GenotypeClass]) -> bytes:
    """Pack genotype classes into one BED row.

    Args:
        genotypes: One class per sample, in sample order

    Returns:
        Packed row of ``row_length(len(genotypes))`` bytes
    """
    row = bytearray([0xFF]) * row_length(len(genotypes))

    for i, genotype in enumerate(genotypes):
        if genotype is GenotypeClass.HOM_REF:
            continue
        byte_index, slot = divmod(i, CALLS_PER_BYTE)
        row[byte_index] &= GENOTYPE_MASKS[genotype][slot]

    unused = len(row) * CALLS_PER_BYTE - len(genotypes)
    if unused:
        row[-1] &= PADDING_MASKS[unused - 1]

    return bytes(row)


def pack_calls(calls: str, alternate: str) -> bytes:
    """Pack a site's sample calls into one BED row.

    Args:
        calls: Sample calls in sample order
        alternate: Allele coded as homozygous alternate

    Returns:
        Packed BED row
    """
    return pack_genotypes([genotype_class(call, alternate) for call in calls])


def unpack_row(row: bytes, sample_count: int) -> list[GenotypeClass]:
    """Decode a BED row back to genotype classes.

    Args:
        row: Packed row
        sample_count: Number of samples encoded in the row

    Returns:
        One GenotypeClass per sample

    Raises:
        ValueError: If the row length does not match sample_count
    """
    if len(row) != row_length(sample_count):
        raise ValueError(
            f"Row of {len(row)} bytes cannot hold {sample_count} samples "
            f"(expected {row_length(sample_count)})"
        )

    genotypes: list[GenotypeClass] = []
    for i in range(sample_count):
        byte_index, slot = divmod(i, CALLS_PER_BYTE)
        code = (row[byte_index] >> (2 * slot)) & 0b11
        genotypes.append(CODE_TO_GENOTYPE[code])
    return genotypes


def padding_codes(row: bytes, sample_count: int) -> list[int]:
    """Two-bit values stored in the unused slots of a row's last byte."""
    unused = len(row) * CALLS_PER_BYTE - sample_count
    last = row[-1] if row else 0
    return [
        (last >> (2 * slot)) & 0b11
        for slot in range(CALLS_PER_BYTE - unused, CALLS_PER_BYTE)
    ]
