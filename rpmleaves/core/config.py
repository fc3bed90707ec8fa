"""
Configuration for rpmleaves.

Defaults can be overridden by /etc/rpmleaves.conf, and command-line options
override the file.

/etc/rpmleaves.conf format (one setting per line):
    root = /
    dbpath = /var/lib/rpm
    optdepends = no
    # Comments start with #
"""

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("/etc/rpmleaves.conf")

DEFAULT_ROOT = "/"
DEFAULT_DBPATH = None  # rpm's %_dbpath

_TRUE = ('1', 'yes', 'true', 'on')
_FALSE = ('0', 'no', 'false', 'off')


def default_config() -> dict:
    """Return the built-in settings."""
    return {
        'root': DEFAULT_ROOT,
        'dbpath': DEFAULT_DBPATH,
        'optdepends': False,
    }


def _parse_bool(value: str) -> Optional[bool]:
    value = value.lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return None


def read_config(path: Optional[Path] = None) -> dict:
    """Read settings from the configuration file.

    Unreadable files and invalid entries are logged and skipped.

    Args:
        path: Configuration file, CONFIG_FILE if None

    Returns:
        Dict with 'root', 'dbpath' and 'optdepends'
    """
    config = default_config()
    path = Path(path) if path is not None else CONFIG_FILE

    if not path.exists():
        return config

    try:
        lines = path.read_text().splitlines()
    except OSError as e:
        logger.warning(f"Cannot read {path}: {e}")
        return config

    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        if '=' not in line:
            logger.warning(f"{path}:{lineno}: expected 'key = value'")
            continue

        key, value = line.split('=', 1)
        key = key.strip().lower()
        value = value.strip()

        if key in ('root', 'dbpath'):
            if value:
                config[key] = value
        elif key == 'optdepends':
            flag = _parse_bool(value)
            if flag is None:
                logger.warning(f"{path}:{lineno}: invalid boolean '{value}' for optdepends")
            else:
                config['optdepends'] = flag
        else:
            logger.warning(f"{path}:{lineno}: unknown setting '{key}'")

    logger.debug(f"Read configuration from {path}: {config}")
    return config
