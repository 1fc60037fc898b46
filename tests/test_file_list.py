"""Tests for file-list parsing and name-derived metadata."""

import logging
from pathlib import Path

import pytest

from seq2variants.exceptions import FileListError, OutputNameError, UnknownExtensionError
from seq2variants.file_list import (
    derive_chromosome_name,
    derive_sample_name,
    derive_sample_names,
    detect_input_format,
    detect_output_format,
    job_from_file_list,
    parse_file_list,
)
from seq2variants.models import InputFormat, OutputFormat


@pytest.fixture
def seq_list(tmp_path: Path) -> Path:
    """File list with the reference in the middle and a blank line."""
    path = tmp_path / "seqList_Chr2L.txt"
    path.write_text(
        "seqs/RAL-101_Chr2L.seq\n"
        "r:ref/dmel_Chr2L.seq\n"
        "\n"
        "seqs/RAL-105_Chr2L.seq\n"
    )
    return path


class TestParseFileList:
    """Test file list parsing."""

    def test_reference_and_samples(self, seq_list: Path) -> None:
        listing = parse_file_list(seq_list)

        assert listing.reference_file == Path("ref/dmel_Chr2L.seq")
        assert listing.sample_files == [
            Path("seqs/RAL-101_Chr2L.seq"),
            Path("seqs/RAL-105_Chr2L.seq"),
        ]
        assert listing.first_entry == "seqs/RAL-101_Chr2L.seq"

    def test_missing_list(self, tmp_path: Path) -> None:
        with pytest.raises(FileListError) as exc_info:
            parse_file_list(tmp_path / "nope.txt")
        assert exc_info.value.exit_code == 1

    def test_no_reference(self, tmp_path: Path) -> None:
        path = tmp_path / "list.txt"
        path.write_text("a.seq\nb.seq\n")

        with pytest.raises(FileListError, match="No reference"):
            parse_file_list(path)

    def test_too_many_samples_warns(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        path = tmp_path / "list.txt"
        path.write_text("r:ref.seq\n" + "".join(f"s{i}.seq\n" for i in range(65_536)))

        with caplog.at_level(logging.WARNING, logger="seq2variants"):
            listing = parse_file_list(path)

        assert len(listing.sample_files) == 65_536
        assert "larger than allowed" in caplog.text


class TestDeriveNames:
    """Test sample and chromosome name derivation."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("seqs/RAL-101_Chr2L.seq", "RAL-101"),
            ("RAL-101.seq", "RAL-101"),
            ("C:\\data\\ZI-5_Chr3R.seq", "ZI-5"),
            ("a/b.c/line7", "line7"),
        ],
    )
    def test_sample_name(self, path: str, expected: str) -> None:
        assert derive_sample_name(path) == expected

    def test_empty_sample_name_placeholder(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="seq2variants"):
            names = derive_sample_names([Path("seqs/_x.seq"), Path("seqs/B_x.seq")])

        assert names == ["line1", "B"]
        assert "No sample name" in caplog.text

    @pytest.mark.parametrize(
        "output,expected",
        [
            ("snp_Chr2L.bed", "Chr2L"),
            ("out_dir/snp_all_ChrX.bvt", "ChrX"),
            ("Chr3R.bed", "Chr3R"),
            ("snp_.bed", ""),
        ],
    )
    def test_chromosome_name(self, output: str, expected: str) -> None:
        assert derive_chromosome_name(output) == expected

    def test_chromosome_name_needs_extension(self) -> None:
        with pytest.raises(OutputNameError) as exc_info:
            derive_chromosome_name("snp_Chr2L")
        assert exc_info.value.exit_code == 2


class TestDetectFormats:
    """Test extension-based format detection."""

    def test_output_formats(self) -> None:
        assert detect_output_format("snp_Chr2L.bed") == OutputFormat.BED
        assert detect_output_format("snp_Chr2L.BVT") == OutputFormat.BVT

    def test_unknown_output_extension(self) -> None:
        with pytest.raises(UnknownExtensionError) as exc_info:
            detect_output_format("snp_Chr2L.vcf")
        assert exc_info.value.exit_code == 3

    def test_input_format_from_reference_line(self) -> None:
        assert detect_input_format("r:ref/dmel_Chr2L.seq") == InputFormat.SEQ

    def test_unknown_input_extension(self) -> None:
        with pytest.raises(UnknownExtensionError):
            detect_input_format("seqs/RAL-101.fasta")


class TestJobFromFileList:
    """Test building jobs from file lists."""

    def test_everything_derived(self, seq_list: Path, tmp_path: Path) -> None:
        job = job_from_file_list(seq_list, tmp_path / "snp_Chr2L.bed")

        assert job.chromosome_name == "Chr2L"
        assert job.chromosome_number == 1
        assert job.output_format == OutputFormat.BED
        assert job.input_format == InputFormat.SEQ
        assert job.sample_names == ["RAL-101", "RAL-105"]
        assert job.output_base == tmp_path / "snp_Chr2L"

    def test_default_chromosome(
        self, seq_list: Path, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """An output name without chromosome gets NN / 0 and a warning."""
        with caplog.at_level(logging.WARNING, logger="seq2variants"):
            job = job_from_file_list(seq_list, tmp_path / "snp_.bvt")

        assert job.chromosome_name == "NN"
        assert job.chromosome_number == 0
        assert job.output_format == OutputFormat.BVT
        assert "setting default" in caplog.text

    def test_explicit_values_win(self, seq_list: Path, tmp_path: Path) -> None:
        job = job_from_file_list(
            seq_list,
            tmp_path / "variants",
            chromosome_name="Chr3R",
            chromosome_number=5,
            input_format=InputFormat.SEQ,
            output_format=OutputFormat.BVT,
            buffer_budget=1000,
        )

        assert job.chromosome_name == "Chr3R"
        assert job.chromosome_number == 5
        assert job.output_format == OutputFormat.BVT
        assert job.buffer_budget == 1000
        assert job.output_base == tmp_path / "variants"

    def test_output_without_extension_needs_format(
        self, seq_list: Path, tmp_path: Path
    ) -> None:
        with pytest.raises(OutputNameError):
            job_from_file_list(seq_list, tmp_path / "variants")
