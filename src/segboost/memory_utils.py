"""Memory monitoring while large feature files are loaded."""
from __future__ import annotations

import logging
from typing import Tuple

import psutil

logger = logging.getLogger(__name__)

_GB = 1024 ** 3


def get_memory_usage() -> float:
    """Resident memory of this process in GB."""
    return psutil.Process().memory_info().rss / _GB


def get_total_memory() -> float:
    """Total system memory in GB."""
    return psutil.virtual_memory().total / _GB


def memory_fraction() -> Tuple[float, float, float]:
    """Return ``(used_gb, total_gb, used / total)``."""
    used = get_memory_usage()
    total = get_total_memory()
    return used, total, used / total


def monitor_memory_usage(threshold: float = 0.8) -> bool:
    """Warn when the process uses more than ``threshold`` of system memory.

    Called between batches of instances; returns True when it warned.
    """
    used, total, fraction = memory_fraction()
    if fraction <= threshold:
        return False
    logger.warning(
        "High memory usage while loading instances: %.1f GB (%.1f%% of %.1f GB total)",
        used, fraction * 100, total,
    )
    return True
