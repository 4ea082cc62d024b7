"""
Main CLI entry point for slurmify.

This module provides the command-line interface that turns a command file
into SLURM batch scripts.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from slurmify import __version__


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser.

    Flags default to None so that unset values fall back to the config file,
    environment variables and built-in defaults.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="slurmify",
        description="Turn a file of shell commands into SLURM batch scripts.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  slurmify -I commands.txt -A mylab                 One script per command in ./Sbatch
  slurmify -I commands.txt -A mylab -P gpu -G gpu:1 GPU jobs
  slurmify -I commands.txt -A mylab --dry-run       Preview names and the first script
  slurmify --init -A mylab -P compute               Write .slurmify/config.yaml

Blank lines and lines starting with '#' in the command file are skipped.
""",
    )

    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"slurmify {__version__}",
    )

    # Input / output
    parser.add_argument(
        "-I", "--input",
        metavar="FILE",
        help="Input text file with one command per line (required)",
    )
    parser.add_argument(
        "-O", "--output-dir",
        metavar="PATH",
        help="Output directory for .sbatch files (default: ./Sbatch)",
    )
    parser.add_argument(
        "-L", "--logs-dir",
        metavar="PATH",
        help="Directory for SLURM logs (default: ./Logs)",
    )

    # SLURM resources
    parser.add_argument(
        "-P", "--partition",
        help="SLURM partition (default: standard)",
    )
    parser.add_argument(
        "-A", "--account",
        help="SLURM account (required)",
    )
    parser.add_argument(
        "-G", "--gres",
        help="GPU GRES string, e.g. gpu:1",
    )
    parser.add_argument(
        "-C", "--cpus",
        type=int,
        metavar="N",
        help="CPUs per task (default: 1)",
    )
    parser.add_argument(
        "-M", "--mem",
        help="Memory per task (default: 4G)",
    )
    parser.add_argument(
        "-T", "--time",
        help="Walltime (default: 01:00:00)",
    )
    parser.add_argument(
        "-E", "--email",
        help="Email for BEGIN/END/FAIL notifications",
    )

    # Script contents
    parser.add_argument(
        "-J", "--job-prefix",
        metavar="PREFIX",
        help="Job name prefix (default: job)",
    )
    parser.add_argument(
        "-m", "--module",
        help="Environment module to load before the command",
    )
    parser.add_argument(
        "--template",
        metavar="PATH",
        help="Custom Jinja2 template for the scripts",
    )

    # Behaviour
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: .slurmify/config.yaml)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show job names, paths and the first script without writing files",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print a table of the generated scripts",
    )
    parser.add_argument(
        "--ui",
        choices=["plain", "rich", "auto"],
        default=None,
        help="UI mode override (plain, rich, auto). Defaults to config ui.mode or plain.",
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Write a project config file from the given flags and exit",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="With --init, overwrite an existing config file",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    from slurmify.cli import commands

    try:
        if args.init:
            return commands.cmd_init(args)
        return commands.cmd_generate(args)

    except KeyboardInterrupt:
        print("\nAborted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
