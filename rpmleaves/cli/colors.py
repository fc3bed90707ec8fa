"""Color output support for rpmleaves diagnostics.

Only messages written to stderr are colored; the report itself is always
plain text so that it can be parsed and compared between runs.
"""

import os
import sys

# ANSI color codes
_COLORS = {
    'reset': '\033[0m',
    'red': '\033[91m',      # Errors
    'orange': '\033[93m',   # Warnings and hints
}

_colors_enabled = True


def init(nocolor: bool = False):
    """Initialize color support.

    Args:
        nocolor: If True, disable colors unconditionally
    """
    global _colors_enabled

    if nocolor:
        _colors_enabled = False
    elif os.environ.get('NO_COLOR'):
        # https://no-color.org/
        _colors_enabled = False
    elif not sys.stderr.isatty():
        _colors_enabled = False
    else:
        _colors_enabled = True


def _wrap(text: str, color: str) -> str:
    if not _colors_enabled:
        return text
    return f"{_COLORS[color]}{text}{_COLORS['reset']}"


def error(text: str) -> str:
    """Format text as error (red)."""
    return _wrap(text, 'red')


def warning(text: str) -> str:
    """Format text as warning (orange/yellow)."""
    return _wrap(text, 'orange')
