"""Site classification shared by all output formats.

Only variation within the sample set counts: the effective reference at a
site is the first sample's call, or, when that is missing, the first
non-missing sample call. A site is polymorphic when any non-missing call
differs from the effective reference. The first such call is the
alternate; a second distinct differing call makes the site multiallelic.
The ancestral call from the reference file never decides polymorphism,
it only labels and orients the site downstream.

Classification runs with numpy over blocks of columns. A block holds about
``BLOCK_CALLS`` sample calls, so the classifier's working arrays stay small
next to the window itself and peak memory tracks the buffer budget.
Per-site observations are materialized only for the columns a writer needs.
"""

from collections.abc import Iterator

import numpy as np

from seq2variants.models import MISSING_BYTE, SequenceWindow, SiteObservation

# Sample calls (rows x columns) classified per numpy block
BLOCK_CALLS = 1 << 16


def block_width(sample_count: int) -> int:
    """Columns per classification block for a given number of samples."""
    return max(1, BLOCK_CALLS // max(1, sample_count))


def _decode(values: np.ndarray) -> str:
    """Turn a uint8 column back into a call string (bytes pass through)."""
    return values.tobytes().decode("latin-1")


def classify_window(
    window: SequenceWindow,
    polymorphic_only: bool = True,
) -> Iterator[SiteObservation]:
    """Classify every column of a window.

    Args:
        window: Aligned reference and sample bytes
        polymorphic_only: Yield observations for polymorphic columns only

    Yields:
        SiteObservation per column, in position order
    """
    length = window.length
    if length == 0 or not window.samples:
        return

    width = block_width(len(window.samples))
    for start in range(0, length, width):
        yield from _classify_block(
            window, start, min(width, length - start), polymorphic_only
        )


def _classify_block(
    window: SequenceWindow,
    start: int,
    width: int,
    polymorphic_only: bool,
) -> Iterator[SiteObservation]:
    """Classify ``width`` columns of a window starting at column ``start``."""
    calls = np.empty((len(window.samples), width), dtype=np.uint8)
    for row, sample in enumerate(window.samples):
        calls[row] = np.frombuffer(sample, dtype=np.uint8, count=width, offset=start)
    reference = np.frombuffer(window.reference, dtype=np.uint8, count=width, offset=start)
    columns = np.arange(width)

    present = calls != MISSING_BYTE

    # First non-missing call; argmax lands on row 0 (an N) for all-missing columns
    effective = calls[present.argmax(axis=0), columns]

    differs = present & (calls != effective)
    polymorphic = differs.any(axis=0)

    alternate = calls[differs.argmax(axis=0), columns]
    biallelic = ~(differs & (calls != alternate)).any(axis=0)

    if polymorphic_only:
        indices = np.flatnonzero(polymorphic)
    else:
        indices = columns

    first_position = window.first_position + start
    for i in indices:
        is_polymorphic = bool(polymorphic[i])
        yield SiteObservation(
            position=first_position + int(i),
            ancestral=chr(reference[i]),
            calls=_decode(calls[:, i]),
            effective_reference=chr(effective[i]),
            alternate=chr(alternate[i]) if is_polymorphic else None,
            polymorphic=is_polymorphic,
            biallelic=bool(biallelic[i]) if is_polymorphic else True,
        )


def classify_site(ancestral: str, calls: str, position: int = 1) -> SiteObservation:
    """Classify a single site.

    Args:
        ancestral: Reference call (``N`` if missing)
        calls: Sample calls in sample order, one character each
        position: 1-based chromosome position

    Returns:
        SiteObservation for the site

    Example:
        >>> site = classify_site("N", "AACN")
        >>> site.polymorphic, site.biallelic, site.alternate
        (True, True, 'C')
    """
    if len(ancestral) != 1:
        raise ValueError(f"Expected a single ancestral call, got {ancestral!r}")
    if not calls:
        raise ValueError("At least one sample call is required")

    window = SequenceWindow(
        reference=ancestral.encode("latin-1"),
        samples=[call.encode("latin-1") for call in calls],
        start=position - 1,
    )
    return next(classify_window(window, polymorphic_only=False))
