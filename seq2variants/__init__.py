"""
Sequence-to-variant-table converter.

Extracts polymorphic sites from aligned, headerless per-individual sequence
files and writes them as a binary variant table or a PLINK 1 BED file set.
"""

__version__ = "1.0.0"
__author__ = "Data Tecnica International"
