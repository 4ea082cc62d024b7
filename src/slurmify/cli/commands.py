"""
Command handlers for slurmify CLI.

This module turns parsed arguments into a generation run and reports the
outcome on the terminal.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict

import yaml
from jinja2 import TemplateError

from slurmify.cli.ui import (
    UIResolutionError,
    build_generation_report,
    create_ui_backend,
    render_generation_report,
    resolve_ui_context,
)
from slurmify.config import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    Config,
    ConfigError,
    get_config,
    init_config,
)
from slurmify.generate import GenerationError, ScriptGenerator


MESSAGE_PREFIX = "[slurmify]"

# argparse dest -> JobConfig field, for flags shared with the config file
JOB_ARGS = {
    "input": "input_file",
    "output_dir": "output_dir",
    "logs_dir": "logs_dir",
    "partition": "partition",
    "account": "account",
    "gres": "gres",
    "cpus": "cpus",
    "mem": "mem",
    "time": "time",
    "email": "email",
    "job_prefix": "job_prefix",
    "module": "module",
    "template": "template",
}

SLURM_KEYS = ("partition", "account", "gres", "cpus", "mem", "time", "email")


# =============================================================================
# Helper Functions
# =============================================================================

def prompt_yes_no(message: str) -> bool:
    """Prompt user for yes/no confirmation."""
    answer = input(message).strip().lower()
    return answer in ("y", "yes")


def print_separator(char: str = "-", width: int = 80) -> None:
    """Print a separator line."""
    print(char * width)


def print_fatal(exc: BaseException) -> None:
    """Print a single-line fatal diagnostic to stderr."""
    print(f"{MESSAGE_PREFIX} Fatal Error: {exc}", file=sys.stderr)


def get_configured_config(args: Any) -> Config:
    """Get Config instance with CLI overrides."""
    config_path = getattr(args, "config", None)
    return get_config(config_path=config_path, reload=True)


def _job_overrides(args: Any) -> Dict[str, Any]:
    return {
        field_name: getattr(args, dest, None)
        for dest, field_name in JOB_ARGS.items()
    }


# =============================================================================
# generate (default command)
# =============================================================================

def cmd_generate(args: Any) -> int:
    """Generate one batch script per command in the input file."""
    try:
        config = get_configured_config(args)
        job_config = config.job_config(**_job_overrides(args))
        ui_ctx = None
        if args.verbose or args.dry_run:
            ui_ctx = resolve_ui_context(args, config)

        generator = ScriptGenerator(job_config)

        if args.dry_run:
            result = generator.generate(dry_run=True)
        else:
            generator.prepare_directories()
            result = generator.generate()

    except GenerationError as exc:
        print_fatal(exc)
        if exc.generated and not args.dry_run:
            print(
                f"{MESSAGE_PREFIX} {exc.generated} script(s) were generated before the error.",
                file=sys.stderr,
            )
        return 1
    except (
        ConfigError,
        UIResolutionError,
        FileNotFoundError,
        TemplateError,
        yaml.YAMLError,
    ) as exc:
        print_fatal(exc)
        return 1

    if ui_ctx is not None:
        backend = create_ui_backend(ui_ctx)
        report = build_generation_report(
            result=result,
            job_config=job_config,
            dry_run=args.dry_run,
        )
        render_generation_report(report, backend)
        print()

    if args.dry_run:
        if result.scripts:
            print(f"[DRY RUN] Preview of {result.scripts[0].script_path}:\n")
            print_separator()
            print(result.scripts[0].content, end="")
            print_separator()
        print(f"{MESSAGE_PREFIX} Would generate {result.count} script(s) in {job_config.output_dir}/")
        return 0

    print(f"{MESSAGE_PREFIX} Generated {result.count} script(s) in {job_config.output_dir}/")
    print(f"{MESSAGE_PREFIX} Logs destination in {job_config.logs_dir}/")
    return 0


# =============================================================================
# init Command
# =============================================================================

def cmd_init(args: Any) -> int:
    """Write a project config file holding the values given on the command line."""
    config_path = Path(CONFIG_DIR_NAME) / CONFIG_FILE_NAME

    if config_path.exists() and not args.force:
        print(f"Configuration file already exists: {config_path}")
        if not prompt_yes_no("Overwrite? [y/N]: "):
            print("Aborted.")
            return 0

    overrides = _job_overrides(args)
    overrides.pop("input_file")

    settings: Dict[str, Any] = {"slurm": {}}
    for key, value in overrides.items():
        if value is None:
            continue
        if key in SLURM_KEYS:
            settings["slurm"][key] = value
        else:
            settings[key] = value
    if args.ui:
        settings["ui"] = {"mode": args.ui}

    try:
        path = init_config(overwrite=True, **settings)
    except OSError as exc:
        print_fatal(exc)
        return 1

    print(f"Configuration written to {path}")
    return 0
