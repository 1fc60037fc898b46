"""Output writers for binary variant tables and PLINK 1 BED file sets."""

from seq2variants.writers.base import SiteWriter
from seq2variants.writers.plink_files import PlinkBedWriter
from seq2variants.writers.variant_table import VariantTableWriter

__all__ = ["SiteWriter", "PlinkBedWriter", "VariantTableWriter"]
