"""Selection of the summary renderer."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Any, Optional


UI_MODE_PLAIN = "plain"
UI_MODE_RICH = "rich"
UI_MODE_AUTO = "auto"
VALID_UI_MODES = (UI_MODE_PLAIN, UI_MODE_RICH, UI_MODE_AUTO)


class UIResolutionError(RuntimeError):
    """Raised when the rich renderer is requested but unavailable."""


@dataclass(frozen=True)
class UIContext:
    """Renderer to use for the summary, and whether plain output is colored."""

    effective_mode: str
    plain_color_enabled: bool = False


def _normalize_mode(value: Optional[str]) -> Optional[str]:
    mode = str(value or "").strip().lower()
    return mode if mode in VALID_UI_MODES else None


def _is_rich_available() -> bool:
    try:
        import rich  # noqa: F401
    except ImportError:
        return False
    return True


def _stdout_isatty() -> bool:
    return bool(getattr(sys.stdout, "isatty", lambda: False)())


def _color_allowed() -> bool:
    return "NO_COLOR" not in os.environ and os.environ.get("TERM", "").lower() != "dumb"


def resolve_ui_context(args: Any, config: Any) -> UIContext:
    """
    Pick the summary renderer.

    The --ui flag wins over the config's ui.mode; unknown values count as
    unset and fall back to plain. "auto" picks rich only on a terminal with
    rich installed.

    Raises:
        UIResolutionError: If rich is requested explicitly but not installed.
    """
    mode = (
        _normalize_mode(getattr(args, "ui", None))
        or _normalize_mode(config.get("ui.mode", UI_MODE_PLAIN))
        or UI_MODE_PLAIN
    )
    on_tty = _stdout_isatty()

    if mode == UI_MODE_RICH and not _is_rich_available():
        raise UIResolutionError(
            "Rich UI requested but the optional dependency is not installed. "
            "Install with: pip install slurmify[ui]"
        )
    if mode == UI_MODE_AUTO:
        mode = UI_MODE_RICH if on_tty and _is_rich_available() else UI_MODE_PLAIN

    return UIContext(
        effective_mode=mode,
        plain_color_enabled=on_tty and _color_allowed(),
    )
