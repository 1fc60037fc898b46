"""PLINK 1 BED file set writer.

Output files:
- {base}.bed - magic header, then one packed genotype row per site
- {base}.bim - one line per site written to the .bed file
- {base}.fam - one line per sample

Only biallelic sites fit the format; multiallelic sites are dropped
without comment.

.bim line (space-separated):
chromosome  site_id           genetic_dist  position  allele1  allele2
2           s1042_Chr2L       -9            1042      T        C

The site id carries a suffix before the chromosome name:
- ``m``: ancestral call missing; alleles are alternate then effective reference
- ``d``: both sample alleles differ from the ancestral call; same allele order
- none: alleles are derived then ancestral, with the alternate moved to the
  non-ancestral allele when the first differing call was the ancestral one
"""

from collections.abc import Iterator
from pathlib import Path

from seq2variants.config import ConversionJob
from seq2variants.models import SiteObservation
from seq2variants.packing import BED_MAGIC, pack_calls, row_length
from seq2variants.writers.base import SiteWriter

# Placeholder genetic distance written to every .bim line
GENETIC_DISTANCE = "-9"

# Pedigree placeholders (father, mother, sex) and missing phenotype for .fam lines
FAM_PLACEHOLDERS = "0 0 0 -9"


def site_alleles(site: SiteObservation) -> tuple[str, str, str]:
    """Work out the site-id suffix and allele order for a biallelic site.

    Args:
        site: Biallelic polymorphic site

    Returns:
        Tuple of (suffix, alternate, reference); the alternate is the allele
        coded homozygous-alternate in the .bed row
    """
    alternate = site.alternate
    if site.ancestral_missing:
        return "m", alternate, site.effective_reference
    if site.diverged:
        return "d", alternate, site.effective_reference
    if alternate == site.ancestral:
        alternate = site.effective_reference
    return "", alternate, site.ancestral


def format_bim_line(
    site: SiteObservation,
    chromosome_number: int,
    chromosome_name: str,
) -> tuple[str, str]:
    """Format the .bim line for a site.

    Args:
        site: Biallelic polymorphic site
        chromosome_number: Numeric chromosome code
        chromosome_name: Chromosome label used in the site id

    Returns:
        Tuple of (line including newline, alternate allele used for packing)
    """
    suffix, alternate, reference = site_alleles(site)
    site_id = f"s{site.position}{suffix}_{chromosome_name}"
    line = (
        f"{chromosome_number} {site_id} {GENETIC_DISTANCE} {site.position} "
        f"{alternate} {reference}\n"
    )
    return line, alternate


def format_fam_line(sample_name: str) -> str:
    """Format the .fam line for a sample (family and individual id both the name)."""
    return f"{sample_name} {sample_name} {FAM_PLACEHOLDERS}\n"


class PlinkBedWriter(SiteWriter):
    """Writes biallelic polymorphic sites as a PLINK 1 BED file set.

    Tracks how many multiallelic sites were dropped.
    """

    def __init__(self, job: ConversionJob) -> None:
        super().__init__(job)
        self.multiallelic_dropped = 0
        self._bed = None
        self._bim = None

    def open(self) -> None:
        fam = self._open("fam")
        for name in self.job.sample_names:
            fam.write(format_fam_line(name))
        fam.close()
        self._handles.remove(fam)

        self._bed = self._open("bed", binary=True)
        self._bim = self._open("bim")
        self._bed.write(BED_MAGIC)

    def write_site(self, site: SiteObservation) -> bool:
        if not site.biallelic:
            self.multiallelic_dropped += 1
            return False

        line, alternate = format_bim_line(
            site, self.job.chromosome_number, self.job.chromosome_name
        )
        self._bim.write(line)
        self._bed.write(pack_calls(site.calls, alternate))
        self.sites_written += 1
        return True


def read_bed_rows(filepath: Path, sample_count: int) -> Iterator[bytes]:
    """Stream packed rows from a .bed file.

    Args:
        filepath: Path to .bed file
        sample_count: Number of samples (lines in the .fam file)

    Yields:
        Packed row per site

    Raises:
        ValueError: If the magic header is wrong or the file ends mid-row
    """
    size = row_length(sample_count)
    with open(filepath, "rb") as f:
        magic = f.read(len(BED_MAGIC))
        if magic != BED_MAGIC:
            raise ValueError(f"Not a SNP-major PLINK BED file: {filepath}")
        while True:
            row = f.read(size)
            if not row:
                break
            if len(row) < size:
                raise ValueError(
                    f"Truncated row in {filepath}: expected {size} bytes, got {len(row)}"
                )
            yield row
