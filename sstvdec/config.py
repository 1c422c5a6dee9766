"""Runtime settings for sstvdec.

Values are read from the environment once, at import time. Tests patch the
module attributes directly.
"""

from __future__ import annotations

import os


def _get_env(key: str, default: str) -> str:
    return os.environ.get(key, default)


def _get_env_bool(key: str, default: bool) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _get_env_float(key: str, default: float) -> float:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


# Logging
LOG_LEVEL = _get_env('SSTV_LOG_LEVEL', 'WARNING')

# Output file used when none is given on the command line
OUTPUT_PATH = _get_env('SSTV_OUTPUT_PATH', 'out.png')

# Convert Robot (Y, Cb, Cr) triples to true RGB before writing
YCBCR_TO_RGB = _get_env_bool('SSTV_YCBCR_TO_RGB', False)

# How far past the nominal position to look for a sync pulse, in lines
SYNC_SEARCH_LINES = _get_env_float('SSTV_SYNC_SEARCH_LINES', 1.0)
