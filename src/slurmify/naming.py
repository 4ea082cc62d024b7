"""
Job names and script file names.

Job names are derived from the command itself, preferring the file the
command writes to, so that `squeue` output and log files are recognizable.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union


# Words whose following word names the command's output
OUTPUT_MARKERS = frozenset({">", "-o", "-O", "--output"})

# Extensions stripped from the end of a job name, repeatedly
TRIM_EXTENSIONS = frozenset({
    ".bam", ".sam", ".cram", ".bai", ".gz", ".bed", ".bw", ".txt",
    ".sorted", ".csi", ".tbi", ".fq", ".fastq", ".fa", ".fasta", ".fai",
    ".vcf", ".csv", ".tsv", ".log", ".out", ".err", ".json", ".yaml",
    ".yml",
})

UNSAFE_NAME_CHARS = ("*", "?")

SCRIPT_SUFFIX = ".sbatch"


# =============================================================================
# Job Name Derivation
# =============================================================================

def _base_name(word: str) -> str:
    """Final path segment of word, ignoring trailing slashes."""
    return word.rstrip("/").rsplit("/", 1)[-1]


def _extension(name: str) -> str:
    dot = name.rfind(".")
    if dot < 0:
        return ""
    return name[dot:]


def _output_word(words: List[str]) -> Optional[str]:
    for i, word in enumerate(words[:-1]):
        if word in OUTPUT_MARKERS:
            return words[i + 1]
    return None


def strip_extensions(name: str) -> str:
    """
    Remove known data/log extensions from the end of name until none is left.

    Example:
        >>> strip_extensions("sample1.sorted.bam")
        'sample1'
        >>> strip_extensions("reads.trimmed.fq.gz")
        'reads.trimmed'
    """
    ext = _extension(name)
    while ext and ext in TRIM_EXTENSIONS:
        name = name[: -len(ext)]
        ext = _extension(name)
    return name


def derive_job_name(command: str, prefix: str, index: int) -> str:
    """
    Derive a job name from a raw command line.

    The candidate is the word after the first output marker (``>``, ``-o``,
    ``-O``, ``--output``), or the last word of the command otherwise. Its
    base name is stripped of known extensions and wildcard characters.

    Args:
        command: Raw command line.
        prefix: Job name prefix.
        index: 1-based position of the command in the input file, used
            when no candidate survives.

    Returns:
        ``<prefix>_<candidate>`` or ``<prefix>_<index:04d>``.

    Example:
        >>> derive_job_name("samtools sort -o sample1.sorted.bam sample1.sam", "job", 1)
        'job_sample1'
        >>> derive_job_name("hostname", "job", 7)
        'job_hostname'
    """
    words = command.split()
    base = ""

    if words:
        word = _output_word(words)
        if word is None:
            word = words[-1]
        base = strip_extensions(_base_name(word))
        for char in UNSAFE_NAME_CHARS:
            base = base.replace(char, "")

    if not base:
        return f"{prefix}_{index:04d}"
    return f"{prefix}_{base}"


# =============================================================================
# Script Paths
# =============================================================================

def resolve_script_path(
    output_dir: Union[str, Path],
    job_name: str,
    index: int,
    suffix: str = SCRIPT_SUFFIX,
) -> Path:
    """
    Choose the file a job script is written to.

    Args:
        output_dir: Directory holding the scripts.
        job_name: Derived job name.
        index: 1-based command index, used to disambiguate a collision.
        suffix: Script file extension.

    Returns:
        ``<output_dir>/<job_name><suffix>`` if free, otherwise
        ``<output_dir>/<job_name>_<index:03d><suffix>``. The fallback path is
        not checked again.
    """
    output_dir = Path(output_dir)
    script_path = output_dir / f"{job_name}{suffix}"
    if script_path.exists():
        script_path = output_dir / f"{job_name}_{index:03d}{suffix}"
    return script_path
