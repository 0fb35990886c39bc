"""Startup banner — status output for ``whisker serve``.

Prints a branded startup banner with the enabled features and the
listening URL.  Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from whisker.config import WhiskerConfig


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""
_ORANGE = "\033[38;5;214m" if _COLOR else ""


def _on_off(enabled: bool) -> str:
    return f"{_GREEN}on{_RESET}" if enabled else f"{_DIM}off{_RESET}"


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not _COLOR:
        return url
    return f"\033]8;;{url}\033\\{_BOLD}{_CYAN}{url}{_RESET}\033]8;;\033\\"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(
    config: WhiskerConfig,
    *,
    warnings: list[str] | None = None,
) -> None:
    """Print the Whisker startup banner to stderr.

    Args:
        config: Resolved WhiskerConfig.
        warnings: Optional list of warning messages to display.

    """
    from whisker import __version__

    cat = "\u14DA\u1618\u14E2"  # ᓚᘏᗢ
    header = (
        f"  {_ORANGE}{_BOLD}{cat}{_RESET}  Whisker {_DIM}v{__version__}{_RESET}"
        f"  {_CYAN}[serve]{_RESET}"
    )

    lines: list[str] = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    workers_label = str(config.workers) if config.workers > 0 else "auto"
    lines.append(f"  {_DIM}├─{_RESET} workers: {workers_label}")
    lines.append(f"  {_DIM}├─{_RESET} tls: {_on_off(config.tls)}")
    lines.append(
        f"  {_DIM}├─{_RESET} metrics: {_on_off(config.metrics)}"
        + (f" {_DIM}/debug/vars{_RESET}" if config.metrics else "")
    )
    lines.append(
        f"  {_DIM}├─{_RESET} pool profile: {_on_off(config.profile_pool)}"
        + (f" {_DIM}/debug/pprof/buffer.pool{_RESET}" if config.profile_pool else "")
    )
    limit = "unbounded" if config.max_data_size is None else f"{config.max_data_size} bytes"
    lines.append(f"  {_DIM}└─{_RESET} max data size: {limit}")

    lines.append("")
    lines.append(f"  {_clickable_url(config.url)}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
