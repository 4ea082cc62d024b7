"""
Configuration management for slurmify.

This module handles loading and merging configuration from multiple sources:
1. Built-in defaults (lowest priority)
2. Project-level config file (.slurmify/config.yaml)
3. Environment variables
4. CLI arguments (highest priority, passed to Config.job_config)

Environment Variables:
    SLURMIFY_CONFIG: Path to config file (default: .slurmify/config.yaml)
    SLURMIFY_OUTPUT_DIR: Directory for generated .sbatch scripts
    SLURMIFY_LOGS_DIR: Directory for SLURM stdout/stderr logs
    SLURMIFY_JOB_PREFIX: Job name prefix
    SLURMIFY_MODULE: Environment module to load in every script
    SLURMIFY_PARTITION, SLURMIFY_ACCOUNT, SLURMIFY_GRES, SLURMIFY_CPUS,
    SLURMIFY_MEM, SLURMIFY_TIME, SLURMIFY_EMAIL: SLURM job resources
"""

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


# =============================================================================
# Default Configuration
# =============================================================================

DEFAULT_CONFIG = {
    # Where scripts and SLURM logs go
    "output_dir": "./Sbatch",
    "logs_dir": "./Logs",

    # Job naming
    "job_prefix": "job",

    # Environment module loaded before the command (empty: none)
    "module": "",

    # Custom Jinja2 template for scripts (null: built-in template)
    "template": None,

    # SLURM resources written to the #SBATCH header
    "slurm": {
        "partition": "standard",
        "account": "",
        "gres": "",
        "cpus": 1,
        "mem": "4G",
        "time": "01:00:00",
        "email": "",
    },

    # CLI summary rendering
    "ui": {
        "mode": "plain",
    },
}

CONFIG_DIR_NAME = ".slurmify"
CONFIG_FILE_NAME = "config.yaml"

# Mapping of environment variables to config paths
ENV_VAR_MAP = {
    "SLURMIFY_CONFIG": None,  # Special: path to config file itself
    "SLURMIFY_OUTPUT_DIR": "output_dir",
    "SLURMIFY_LOGS_DIR": "logs_dir",
    "SLURMIFY_JOB_PREFIX": "job_prefix",
    "SLURMIFY_MODULE": "module",
    "SLURMIFY_PARTITION": "slurm.partition",
    "SLURMIFY_ACCOUNT": "slurm.account",
    "SLURMIFY_GRES": "slurm.gres",
    "SLURMIFY_CPUS": "slurm.cpus",
    "SLURMIFY_MEM": "slurm.mem",
    "SLURMIFY_TIME": "slurm.time",
    "SLURMIFY_EMAIL": "slurm.email",
}

# JobConfig field -> config path
JOB_FIELD_MAP = {
    "output_dir": "output_dir",
    "logs_dir": "logs_dir",
    "job_prefix": "job_prefix",
    "module": "module",
    "template": "template",
    "partition": "slurm.partition",
    "account": "slurm.account",
    "gres": "slurm.gres",
    "cpus": "slurm.cpus",
    "mem": "slurm.mem",
    "time": "slurm.time",
    "email": "slurm.email",
}


class ConfigError(ValueError):
    """Raised when the job parameters are missing or malformed."""


# =============================================================================
# Job Parameters
# =============================================================================

@dataclass(frozen=True)
class JobConfig:
    """
    Resolved parameters for one slurmify run.

    Attributes:
        input_file: Text file with one command per line.
        output_dir: Directory for generated scripts.
        logs_dir: Directory for SLURM stdout/stderr files.
        partition: SLURM partition.
        account: SLURM account.
        gres: Generic resource string (e.g. "gpu:1"), empty for none.
        cpus: CPUs per task.
        mem: Memory per task (e.g. "4G").
        time: Walltime (e.g. "01:00:00").
        email: Notification address, empty for none.
        job_prefix: Prefix of every job name.
        module: Environment module to load, empty for none.
        template: Optional custom Jinja2 template path.
    """

    input_file: str
    account: str
    output_dir: str = DEFAULT_CONFIG["output_dir"]
    logs_dir: str = DEFAULT_CONFIG["logs_dir"]
    partition: str = DEFAULT_CONFIG["slurm"]["partition"]
    gres: str = ""
    cpus: int = DEFAULT_CONFIG["slurm"]["cpus"]
    mem: str = DEFAULT_CONFIG["slurm"]["mem"]
    time: str = DEFAULT_CONFIG["slurm"]["time"]
    email: str = ""
    job_prefix: str = DEFAULT_CONFIG["job_prefix"]
    module: str = ""
    template: Optional[str] = None


# =============================================================================
# Configuration Class
# =============================================================================

class Config:
    """
    Configuration manager for slurmify.

    Configuration precedence (highest to lowest):
    1. Explicit overrides (passed to job_config)
    2. Environment variables
    3. Project config file
    4. Built-in defaults

    Attributes:
        config_path: Path to the config file (it may not exist)
        project_root: Directory holding .slurmify/

    Example:
        >>> config = Config()
        >>> config.get("slurm.partition")
        'standard'
        >>> config.job_config(input_file="cmds.txt", account="lab").cpus
        1
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        project_root: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize configuration.

        Args:
            config_path: Explicit path to config file. If None, uses
                SLURMIFY_CONFIG or .slurmify/config.yaml in project_root.
            project_root: Project root directory. If None, uses current directory.
        """
        self.project_root = Path(project_root) if project_root else Path.cwd()

        if config_path:
            self.config_path = Path(config_path)
        else:
            env_config = os.environ.get("SLURMIFY_CONFIG")
            if env_config:
                self.config_path = Path(env_config)
            else:
                self.config_path = self.project_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load and merge configuration from all sources.

        Returns:
            Merged configuration dictionary.

        Raises:
            ConfigError: If the config file cannot be read or is not a
                YAML mapping.
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, UnicodeDecodeError) as e:
                raise ConfigError(f"could not read config file {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigError(f"Config file must contain a mapping: {self.config_path}")
            config = _deep_merge(config, file_config)

        return self._apply_env_overrides(config)

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        for env_var, config_path in ENV_VAR_MAP.items():
            if config_path is None:
                continue

            value = os.environ.get(env_var)
            if value is not None:
                _set_nested(config, config_path, value)

        return config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-separated key path.

        Args:
            key: Dot-separated key path (e.g., "slurm.partition")
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        return _get_nested(self._config, key, default)

    def job_config(self, **overrides: Any) -> JobConfig:
        """
        Build the immutable job parameters for a run.

        Args:
            **overrides: JobConfig fields from the command line. None values
                are ignored so unset flags fall back to the config.

        Returns:
            Resolved JobConfig.

        Raises:
            ConfigError: If the input file or account is missing, or cpus is
                not a positive integer.
        """
        values: Dict[str, Any] = {
            field_name: self.get(path)
            for field_name, path in JOB_FIELD_MAP.items()
        }
        values["input_file"] = None
        for key, value in overrides.items():
            if key not in values:
                raise ConfigError(f"Unknown job parameter: {key}")
            if value is not None:
                values[key] = value

        if not values["input_file"] or not values["account"]:
            raise ConfigError(
                "required parameters input file (-I) and account (-A) are missing"
            )

        values["cpus"] = _parse_cpus(values["cpus"])

        for key, value in values.items():
            if key not in ("cpus", "template"):
                values[key] = "" if value is None else str(value)
        # An empty template setting selects the built-in one
        values["template"] = str(values["template"]) if values["template"] else None

        return JobConfig(**values)

    def as_dict(self) -> Dict[str, Any]:
        """Return the full configuration as a dictionary."""
        return copy.deepcopy(self._config)

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Save current configuration to a YAML file.

        Args:
            path: Path to save to. Defaults to self.config_path.

        Returns:
            Path where config was saved.
        """
        save_path = Path(path) if path else self.config_path
        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, "w") as f:
            yaml.dump(self._config, f, default_flow_style=False, sort_keys=False)

        return save_path

    def __repr__(self) -> str:
        return f"Config(config_path={self.config_path}, project_root={self.project_root})"


# =============================================================================
# Module-level convenience functions
# =============================================================================

_global_config: Optional[Config] = None


def get_config(
    config_path: Optional[Union[str, Path]] = None,
    project_root: Optional[Union[str, Path]] = None,
    reload: bool = False,
) -> Config:
    """
    Get the global configuration instance.

    On first call (or when reload=True), it creates a new Config instance.

    Args:
        config_path: Explicit path to config file.
        project_root: Project root directory.
        reload: Force reload of configuration.

    Returns:
        Global Config instance.
    """
    global _global_config

    if _global_config is None or reload:
        _global_config = Config(config_path=config_path, project_root=project_root)

    return _global_config


def init_config(
    project_root: Optional[Union[str, Path]] = None,
    overwrite: bool = False,
    **kwargs: Any,
) -> Path:
    """
    Initialize a new project configuration file.

    Creates .slurmify/config.yaml with default values, optionally
    customized with provided kwargs.

    Args:
        project_root: Project root directory. Defaults to current directory.
        overwrite: If True, overwrite existing config file.
        **kwargs: Configuration values to set (e.g., slurm={"account": "lab"}).

    Returns:
        Path to created config file.

    Raises:
        FileExistsError: If config file exists and overwrite=False.
    """
    root = Path(project_root) if project_root else Path.cwd()
    config_path = root / CONFIG_DIR_NAME / CONFIG_FILE_NAME

    if config_path.exists() and not overwrite:
        raise FileExistsError(
            f"Config file already exists: {config_path}. "
            "Use overwrite=True to replace."
        )

    config_data = _deep_merge(DEFAULT_CONFIG, kwargs)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.dump(config_data, f, default_flow_style=False, sort_keys=False)

    return config_path


# =============================================================================
# Helper Functions
# =============================================================================

def _parse_cpus(value: Any) -> int:
    try:
        cpus = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"cpus must be an integer, got {value!r}") from None
    if cpus < 1:
        raise ConfigError(f"cpus must be at least 1, got {cpus}")
    return cpus


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with override taking precedence.

    Args:
        base: Base dictionary.
        override: Dictionary with values to override.

    Returns:
        Merged dictionary.
    """
    result = copy.deepcopy(base)

    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _get_nested(d: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Get a nested dictionary value using dot notation."""
    value = d

    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value


def _set_nested(d: Dict[str, Any], key: str, value: Any) -> None:
    """Set a nested dictionary value using dot notation."""
    keys = key.split(".")

    for k in keys[:-1]:
        if not isinstance(d.get(k), dict):
            d[k] = {}
        d = d[k]

    d[keys[-1]] = value
