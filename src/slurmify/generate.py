"""
Batch script generation from a file of shell commands.

Each non-blank, non-comment line of the input file becomes one SLURM batch
script:
- the job name is derived from the command (see slurmify.naming)
- the command is pretty-printed (see slurmify.shell)
- header and body are rendered from a Jinja2 template
- the script is written to a collision-free path in the output directory
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Optional, Tuple, Union

from jinja2 import Environment, FileSystemLoader, Template

from slurmify.config import JobConfig
from slurmify.naming import derive_job_name, resolve_script_path
from slurmify.shell import format_command


TEMPLATES_DIR = Path(__file__).parent / "templates"
DEFAULT_TEMPLATE_NAME = "sbatch.j2"

SCRIPT_MODE = 0o644
WARNING_PREFIX = "[slurmify] Warning:"


class GenerationError(RuntimeError):
    """
    Raised when a run cannot continue.

    Attributes:
        generated: Number of commands processed before the failure.
    """

    def __init__(self, message: str, generated: int = 0):
        super().__init__(message)
        self.generated = generated


@dataclass(frozen=True)
class GeneratedScript:
    """One processed command and the script produced for it."""

    index: int
    command: str
    job_name: str
    script_path: Path
    content: str
    written: bool


@dataclass
class GenerationResult:
    """Outcome of a generation run."""

    scripts: List[GeneratedScript] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of commands processed, including scripts that failed to write."""
        return len(self.scripts)


# =============================================================================
# Input Reading
# =============================================================================

def iter_commands(lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
    """
    Yield the commands of an input file with their 1-based index.

    Lines are stripped. Blank lines and lines starting with ``#`` are skipped
    and do not consume an index.

    Example:
        >>> list(iter_commands(["# align", "", "bwa mem ref.fa r.fq\\n"]))
        [(1, 'bwa mem ref.fa r.fq')]
    """
    index = 0
    for line in lines:
        command = line.strip()
        if not command or command.startswith("#"):
            continue
        index += 1
        yield index, command


def _open_input(input_file: Union[str, Path]) -> IO[str]:
    try:
        return open(input_file, "r", encoding="utf-8")
    except OSError as e:
        raise GenerationError(f"could not open input file: {e}") from e


# =============================================================================
# Rendering
# =============================================================================

def load_template(template_path: Optional[Union[str, Path]] = None) -> Template:
    """
    Load the batch script template.

    Args:
        template_path: Custom Jinja2 template. If None, uses the built-in one.

    Returns:
        Compiled template.

    Raises:
        FileNotFoundError: If a custom template does not exist.
    """
    if template_path is None:
        template_dir, name = TEMPLATES_DIR, DEFAULT_TEMPLATE_NAME
    else:
        template_path = Path(template_path)
        if not template_path.is_file():
            raise FileNotFoundError(f"Template file not found: {template_path}")
        template_dir, name = template_path.parent, template_path.name

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    return env.get_template(name)


def render_script(
    command: str,
    job_name: str,
    job_config: JobConfig,
    template: Optional[Template] = None,
) -> str:
    """
    Render the full batch script for one command.

    Args:
        command: Raw command line.
        job_name: Job name used in #SBATCH directives and log paths.
        job_config: Job resources.
        template: Compiled template. If None, uses the built-in one.

    Returns:
        Script text ending with a newline.
    """
    if template is None:
        template = load_template()

    return template.render(
        job_name=job_name,
        job=job_config,
        command=format_command(command),
        raw_command=command,
    )


# =============================================================================
# Script Generator
# =============================================================================

class ScriptGenerator:
    """
    Generator for SLURM batch scripts from a command file.

    Commands are processed one at a time: each is named, rendered, resolved
    to a path and written before the next line is read.

    Example:
        >>> generator = ScriptGenerator(config.job_config(input_file="cmds.txt", account="lab"))
        >>> generator.prepare_directories()
        >>> result = generator.generate()
        >>> result.count
        2
    """

    def __init__(self, job_config: JobConfig):
        """
        Initialize the generator.

        Args:
            job_config: Resolved job parameters.

        Raises:
            FileNotFoundError: If job_config names a template that does not exist.
        """
        self.job_config = job_config
        self.template = load_template(job_config.template)

    def prepare_directories(self) -> None:
        """
        Create the output and logs directories.

        Raises:
            GenerationError: If a directory cannot be created.
        """
        for label, directory in (
            ("output", self.job_config.output_dir),
            ("logs", self.job_config.logs_dir),
        ):
            try:
                Path(directory).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise GenerationError(f"could not create {label} directory: {e}") from e

    def render(self, index: int, command: str) -> Tuple[str, str]:
        """Return (job_name, script content) for one command."""
        job_name = derive_job_name(command, self.job_config.job_prefix, index)
        content = render_script(command, job_name, self.job_config, self.template)
        return job_name, content

    def generate(self, dry_run: bool = False) -> GenerationResult:
        """
        Generate one script per command in the input file.

        Args:
            dry_run: If True, resolve names and paths but write nothing.

        Returns:
            GenerationResult with one entry per processed command.

        Raises:
            GenerationError: If the input file cannot be opened or read.
        """
        result = GenerationResult()

        with _open_input(self.job_config.input_file) as f:
            try:
                for index, command in iter_commands(f):
                    result.scripts.append(
                        self._process(index, command, result, dry_run)
                    )
            except (OSError, UnicodeDecodeError) as e:
                raise GenerationError(
                    f"could not read input file after {result.count} command(s): {e}",
                    generated=result.count,
                ) from e

        return result

    def _process(
        self,
        index: int,
        command: str,
        result: GenerationResult,
        dry_run: bool,
    ) -> GeneratedScript:
        job_name, content = self.render(index, command)
        script_path = resolve_script_path(self.job_config.output_dir, job_name, index)

        written = False
        if not dry_run:
            try:
                script_path.write_text(content, encoding="utf-8")
                script_path.chmod(SCRIPT_MODE)
                written = True
            except OSError as e:
                message = f"Could not write {script_path}: {e}"
                print(f"{WARNING_PREFIX} {message}", file=sys.stderr)
                result.warnings.append(message)

        return GeneratedScript(
            index=index,
            command=command,
            job_name=job_name,
            script_path=script_path,
            content=content,
            written=written,
        )

    def preview(self, index: int = 1) -> str:
        """
        Render the script of the index-th command without writing anything.

        Args:
            index: 1-based command index.

        Returns:
            Rendered script content.

        Raises:
            IndexError: If the input file has fewer commands.
            GenerationError: If the input file cannot be opened.
        """
        with _open_input(self.job_config.input_file) as f:
            for i, command in iter_commands(f):
                if i == index:
                    return self.render(i, command)[1]

        raise IndexError(f"Command {index} not found in {self.job_config.input_file}")
