"""
slurmify - turn a list of shell commands into SLURM batch scripts.

Every line of a command file becomes one ready-to-submit .sbatch script:
- #SBATCH header built from the configured job resources
- strict-mode bash preamble with startup diagnostics
- the command, safely re-quoted and split over continued lines
- a job name derived from the file the command writes
"""

from slurmify._version import __version__

from slurmify.config import Config, ConfigError, JobConfig, get_config
from slurmify.generate import (
    GenerationError,
    GenerationResult,
    ScriptGenerator,
    render_script,
)
from slurmify.naming import derive_job_name, resolve_script_path
from slurmify.shell import (
    UnbalancedQuoteError,
    format_command,
    is_shell_operator,
    quote_arg,
    split_command,
)

__all__ = [
    # Version
    "__version__",
    # Config
    "Config",
    "ConfigError",
    "JobConfig",
    "get_config",
    # Shell handling
    "UnbalancedQuoteError",
    "format_command",
    "is_shell_operator",
    "quote_arg",
    "split_command",
    # Naming
    "derive_job_name",
    "resolve_script_path",
    # Generation
    "GenerationError",
    "GenerationResult",
    "ScriptGenerator",
    "render_script",
]
