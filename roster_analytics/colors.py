"""ANSI color utilities for terminal output.

Respects the ``NO_COLOR`` environment variable (https://no-color.org/) and
degrades gracefully when the output stream is not a TTY (e.g. piped to a
file).

Color scheme:
  - Green:   positive z / BUY_LOW / Low risk
  - Yellow:  DECLINE / Medium risk / injury notes
  - Red:     negative z / SELL_HIGH / High risk
  - Magenta: BREAKOUT
  - Cyan:    Headers and section titles
  - Bold:    Emphasis (player names, key values)
"""

from __future__ import annotations

import os
import sys


# ---------------------------------------------------------------------------
# Detect whether color output is supported
# ---------------------------------------------------------------------------

def _color_enabled() -> bool:
    """Return True if ANSI color output should be used."""
    if os.environ.get("NO_COLOR"):
        return False
    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False
    return True


USE_COLOR: bool = _color_enabled()


# ---------------------------------------------------------------------------
# ANSI escape codes
# ---------------------------------------------------------------------------

_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"

_RED = "\033[91m"
_GREEN = "\033[92m"
_YELLOW = "\033[93m"
_CYAN = "\033[96m"
_MAGENTA = "\033[95m"


def _wrap(code: str, text: str) -> str:
    return f"{code}{text}{_RESET}" if USE_COLOR else text


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def red(text: str) -> str:
    return _wrap(_RED, text)


def green(text: str) -> str:
    return _wrap(_GREEN, text)


def yellow(text: str) -> str:
    return _wrap(_YELLOW, text)


def cyan(text: str) -> str:
    """Wrap *text* in cyan (headers, titles)."""
    return _wrap(_CYAN, text)


def bold(text: str) -> str:
    return _wrap(_BOLD, text)


def dim(text: str) -> str:
    """Wrap *text* in dim/muted style."""
    return _wrap(_DIM, text)


def magenta(text: str) -> str:
    return _wrap(_MAGENTA, text)


# ---------------------------------------------------------------------------
# Semantic colorizers (domain-specific)
# ---------------------------------------------------------------------------

def colorize_z_score(z: float, formatted: str | None = None) -> str:
    """Colorize a z-score value based on sign.

    - Positive → green
    - Negative → red
    - Near zero (|z| < 0.1) → no color
    """
    text = formatted if formatted is not None else f"{z:+.2f}"
    if z >= 0.1:
        return green(text)
    if z <= -0.1:
        return red(text)
    return text


def colorize_trend(status: str, label: str | None = None) -> str:
    """Colorize a trend status (``BUY_LOW``, ``SELL_HIGH``, ...)."""
    text = label if label is not None else status
    upper = str(status).strip().upper()
    if upper == "BUY_LOW":
        return green(text)
    if upper == "SELL_HIGH":
        return red(text)
    if upper == "BREAKOUT":
        return magenta(text)
    if upper == "DECLINE":
        return yellow(text)
    return dim(text)


def colorize_risk(level: str) -> str:
    """Colorize a consistency risk level.

    - ``Low`` → green
    - ``Medium`` → yellow
    - ``High`` → red
    - ``N/A`` → dim
    """
    upper = level.strip().upper()
    if upper == "LOW":
        return green(level)
    if upper == "MEDIUM":
        return yellow(level)
    if upper == "HIGH":
        return red(level)
    return dim(level)


def colorize_injury(note: str) -> str:
    """Healthy (``-``) stays plain; anything else is flagged yellow."""
    if note.strip() == "-":
        return note
    return yellow(note)
