"""
Shell command lexing, quoting and pretty-printing.

This module turns a raw one-line shell command into the command block of a
batch script:
- split the line into words the way a POSIX shell would
- recognize control and redirection operators
- quote arguments only when they need it
- emit one flag (plus its value) or operator per continued line

Example:
    >>> print(format_command("bwa mem -t 16 ref.fa reads.fq > out.sam"))
    bwa \\
      mem \\
      -t 16 \\
      ref.fa \\
      reads.fq \\
      > \\
      out.sam
"""

from __future__ import annotations

import re
import shlex
from typing import List


# =============================================================================
# Lookup Tables
# =============================================================================

SHELL_OPERATORS = frozenset({
    ">", ">>", "<", "|", "2>", "1>", "&>", "&&", "||", ";",
})

# Arguments made only of these characters are emitted without quotes
SAFE_ARG_PATTERN = re.compile(r"[a-zA-Z0-9_\-./@=:,+]+")

LINE_CONTINUATION = " \\\n  "


class UnbalancedQuoteError(ValueError):
    """Raised when a command cannot be split because of unbalanced quoting."""


# =============================================================================
# Tokenizing and Quoting
# =============================================================================

def split_command(command: str) -> List[str]:
    """
    Split a command line into shell words.

    Quotes are removed from quoted words, backslash escapes are honored and
    ``#`` has no special meaning.

    Args:
        command: Raw command line.

    Returns:
        Ordered list of tokens.

    Raises:
        UnbalancedQuoteError: If a quote is never closed or the line ends
            with a dangling escape.
    """
    try:
        return shlex.split(command, comments=False, posix=True)
    except ValueError as e:
        raise UnbalancedQuoteError(f"Cannot split {command!r}: {e}") from e


def is_shell_operator(token: str) -> bool:
    """Return True if token is exactly one of the supported shell operators."""
    return token in SHELL_OPERATORS


def quote_arg(token: str) -> str:
    """
    Quote an argument for re-emission into a bash script.

    Args:
        token: Unquoted argument value.

    Returns:
        The token itself when it only holds safe characters, otherwise the
        token wrapped in single quotes.

    Example:
        >>> quote_arg("ref.fa")
        'ref.fa'
        >>> quote_arg("it's")
        "'it'\\\\''s'"
    """
    if token == "":
        return "''"
    if SAFE_ARG_PATTERN.fullmatch(token):
        return token
    return "'" + token.replace("'", "'\\''") + "'"


# =============================================================================
# Pretty-Printing
# =============================================================================

def _render_token(token: str) -> str:
    if is_shell_operator(token):
        return token
    return quote_arg(token)


def format_tokens(tokens: List[str]) -> str:
    """
    Format a token sequence as a line-continued command block.

    A flag-like unit (starting with ``-``) absorbs the following token when
    that token is neither a flag nor an operator. A flag that takes no value
    therefore swallows the next positional argument onto its line; the
    result is still equivalent once the shell joins the continued lines.

    Args:
        tokens: Tokens as returned by split_command.

    Returns:
        Units joined by backslash-newline continuations, no trailing newline.
    """
    units = []
    i = 0
    while i < len(tokens):
        unit = _render_token(tokens[i])

        if unit.startswith("-") and i + 1 < len(tokens):
            following = tokens[i + 1]
            if not following.startswith("-") and not is_shell_operator(following):
                unit = f"{unit} {quote_arg(following)}"
                i += 1

        units.append(unit)
        i += 1

    return LINE_CONTINUATION.join(units)


def format_command(command: str) -> str:
    """
    Pretty-print a raw command line for a batch script.

    Falls back to the unmodified command when it cannot be tokenized.

    Args:
        command: Raw command line.

    Returns:
        Formatted command block without a trailing newline.
    """
    try:
        tokens = split_command(command)
    except UnbalancedQuoteError:
        return command
    return format_tokens(tokens)
