from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Optional

from dotenv import load_dotenv

# A local .env only fills variables that are not already set.
load_dotenv()


def _env(name: str, default: Optional[str], cast: Callable = str):
    """Field factory reading ``name`` from the environment at instantiation."""

    def factory():
        raw = os.getenv(name, default)
        return None if raw is None else cast(raw)

    return field(default_factory=factory)


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    All values have sensible defaults for local development.
    """

    # Logging
    log_level: str = _env("SEGBOOST_LOG_LEVEL", "INFO", str.upper)
    log_format: str = _env("SEGBOOST_LOG_FORMAT", "text", str.lower)  # text | json
    log_file: Optional[str] = _env("SEGBOOST_LOG_FILE", None)

    # Boosting defaults
    threshold: float = _env("SEGBOOST_THRESHOLD", "0.01", float)
    num_iterations: int = _env("SEGBOOST_NUM_ITERATIONS", "100", int)
    num_workers: int = _env("SEGBOOST_NUM_WORKERS", "1", int)

    # Instances between progress log lines while loading feature files
    progress_every: int = _env("SEGBOOST_PROGRESS_EVERY", "1000", int)

    # Fraction of total memory above which loading logs a warning
    memory_warn_threshold: float = _env("SEGBOOST_MEMORY_WARN_THRESHOLD", "0.8", float)


def get_settings() -> Settings:
    """Return current settings snapshot.

    Re-evaluates the environment on each call.
    """
    return Settings()
