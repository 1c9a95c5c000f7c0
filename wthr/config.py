"""Runtime configuration read from environment variables.

WTHR_SEED        integer seed for measurement randomness (unset: unseeded)
WTHR_PRECISION   significant digits for non-terminating rationals (default 50)
WTHR_MAX_QUBITS  largest register the simulator will build (default 16)
WTHR_LOG_LEVEL   level used by the demo entry module (default WARNING)
"""

import logging
import os
from typing import Optional

DEFAULT_PRECISION = 50
DEFAULT_MAX_QUBITS = 16
DEFAULT_LOG_LEVEL = "WARNING"


def _int_from_env(var: str, default: Optional[int], minimum: Optional[int] = None) -> Optional[int]:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None
    if minimum is not None and value < minimum:
        raise ValueError(f"{var} must be at least {minimum}, got {value}")
    return value


def get_seed() -> Optional[int]:
    return _int_from_env("WTHR_SEED", None)


def get_precision() -> int:
    return _int_from_env("WTHR_PRECISION", DEFAULT_PRECISION, minimum=1)


def get_max_qubits() -> int:
    return _int_from_env("WTHR_MAX_QUBITS", DEFAULT_MAX_QUBITS, minimum=1)


def get_log_level() -> int:
    raw = os.environ.get("WTHR_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        raise ValueError(f"WTHR_LOG_LEVEL must be a logging level name, got {raw!r}")
    return level
