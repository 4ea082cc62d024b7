"""Tests for slurmify.naming module."""

from pathlib import Path

import pytest

from slurmify.naming import derive_job_name, resolve_script_path, strip_extensions


class TestStripExtensions:
    """Tests for strip_extensions function."""

    def test_compound_extension(self):
        """Test that stacked known extensions are all removed."""
        assert strip_extensions("sample1.sorted.bam") == "sample1"
        assert strip_extensions("reads.fastq.gz") == "reads"

    def test_stops_at_unknown_extension(self):
        """Test that stripping stops at the first unknown extension."""
        assert strip_extensions("reads.trimmed.fq.gz") == "reads.trimmed"
        assert strip_extensions("model.pt") == "model.pt"

    def test_case_sensitive(self):
        """Test that extension matching is case-sensitive."""
        assert strip_extensions("SAMPLE.BAM") == "SAMPLE.BAM"

    def test_no_extension(self):
        """Test a name without any dot."""
        assert strip_extensions("hostname") == "hostname"

    def test_name_that_is_only_an_extension(self):
        """Test that a dotfile made of a known extension strips to empty."""
        assert strip_extensions(".log") == ""


class TestDeriveJobName:
    """Tests for derive_job_name function."""

    def test_output_flag(self):
        """Test that the value after -o names the job."""
        name = derive_job_name("samtools sort -o sample1.sorted.bam sample1.sam", "job", 1)
        assert name == "job_sample1"

    def test_redirect(self):
        """Test that the target of '>' names the job."""
        name = derive_job_name("bwa mem ref.fa r1.fq > aligned/s2.sam", "aln", 3)
        assert name == "aln_s2"

    @pytest.mark.parametrize("marker", ["-O", "--output"])
    def test_other_output_markers(self, marker):
        """Test -O and --output markers."""
        name = derive_job_name(f"tool {marker} result.vcf.gz input.bam", "job", 1)
        assert name == "job_result"

    def test_first_marker_wins(self):
        """Test that the earliest output marker is used."""
        name = derive_job_name("cmd -o first.txt > second.txt", "job", 1)
        assert name == "job_first"

    def test_unrecognized_flag_falls_back_to_last_word(self):
        """Test that --outdir is not an output marker."""
        name = derive_job_name("fastqc --outdir ./QC sample2.fastq.gz", "job", 1)
        assert name == "job_sample2"

    def test_marker_as_last_word_is_ignored(self):
        """Test that a trailing marker without a following word is skipped."""
        name = derive_job_name("tool input.csv -o", "job", 1)
        assert name == "job_-o"

    def test_base_name_of_directory(self):
        """Test that trailing slashes are ignored when taking the base name."""
        name = derive_job_name("mkdir -p results/run1/", "job", 1)
        assert name == "job_run1"

    def test_wildcards_removed(self):
        """Test that '*' and '?' are removed from the candidate."""
        assert derive_job_name("cat part?_*.log", "job", 2) == "job_part_"
        assert derive_job_name("gzip data/s*.txt", "job", 1) == "job_s"

    def test_only_wildcards_falls_back_to_index(self):
        """Test that a candidate reduced to nothing uses the index."""
        assert derive_job_name("rm *", "job", 7) == "job_0007"

    def test_empty_command_falls_back_to_index(self):
        """Test that a command with no words uses the index."""
        assert derive_job_name("   ", "pre", 12) == "pre_0012"

    def test_root_path_falls_back_to_index(self):
        """Test that a bare '/' yields no candidate."""
        assert derive_job_name("ls /", "job", 4) == "job_0004"

    def test_prefix_is_used(self):
        """Test that the configured prefix is prepended."""
        assert derive_job_name("hostname", "myproj", 1) == "myproj_hostname"


class TestResolveScriptPath:
    """Tests for resolve_script_path function."""

    def test_free_path(self, tmp_path):
        """Test that the plain job name is used when free."""
        path = resolve_script_path(tmp_path, "job_a", 1)
        assert path == tmp_path / "job_a.sbatch"

    def test_collision_uses_index(self, tmp_path):
        """Test the index-suffixed fallback after a collision."""
        first = resolve_script_path(tmp_path, "job_a", 1)
        first.write_text("x")

        second = resolve_script_path(tmp_path, "job_a", 2)
        assert second == tmp_path / "job_a_002.sbatch"
        assert second != first

    def test_second_collision_not_resolved(self, tmp_path):
        """Test that the fallback path is returned even if it exists."""
        (tmp_path / "job_a.sbatch").write_text("x")
        (tmp_path / "job_a_005.sbatch").write_text("y")

        assert resolve_script_path(tmp_path, "job_a", 5) == tmp_path / "job_a_005.sbatch"

    def test_accepts_string_dir(self, tmp_path):
        """Test that a string directory is accepted."""
        path = resolve_script_path(str(tmp_path), "job_b", 1)
        assert isinstance(path, Path)
        assert path.parent == tmp_path

    def test_custom_suffix(self, tmp_path):
        """Test a non-default suffix."""
        assert resolve_script_path(tmp_path, "job_c", 1, suffix=".sh").name == "job_c.sh"
