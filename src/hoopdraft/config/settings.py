"""Environment-driven settings for the roster sync pipeline and runtime."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

_CANDIDATE_LIMIT_ENV = "HOOPDRAFT_CANDIDATE_LIMIT"
_CONCURRENCY_ENV = "HOOPDRAFT_ENRICH_CONCURRENCY"
_TIMEOUT_ENV = "HOOPDRAFT_FETCH_TIMEOUT_MS"
_RETRIES_ENV = "HOOPDRAFT_FETCH_RETRIES"
_BACKOFF_ENV = "HOOPDRAFT_FETCH_BACKOFF_MS"
_TEAM_DELAY_ENV = "HOOPDRAFT_TEAM_DELAY_MS"
_SNAPSHOT_ENV = "HOOPDRAFT_SNAPSHOT_PATH"
_DB_ENV = "HOOPDRAFT_DB_PATH"
_SHOT_CLOCK_ENV = "HOOPDRAFT_SHOT_CLOCK_SECONDS"

MIN_CANDIDATE_LIMIT = 15
DEFAULT_CANDIDATE_LIMIT = 22
DEFAULT_CONCURRENCY = 5
DEFAULT_TIMEOUT_MS = 15_000
DEFAULT_RETRIES = 3
DEFAULT_BACKOFF_MS = 300
DEFAULT_TEAM_DELAY_MS = 80
DEFAULT_SHOT_CLOCK_SECONDS = 24

PACKAGE_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_SEED_PATH = PACKAGE_ROOT / "data" / "all_time_seed.json"


def _env_float(name: str, default: float, *, clamp_min: float | None = None, clamp_max: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    if clamp_max is not None:
        value = min(clamp_max, value)
    return value


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("%s=%d is below the minimum %d; clamping", name, value, min_value)
        value = min_value
    return value


def _env_path(name: str) -> Optional[Path]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return Path(raw.strip().strip("'\"")).expanduser()


@dataclass(frozen=True)
class PipelineSettings:
    candidate_limit: int = DEFAULT_CANDIDATE_LIMIT
    concurrency: int = DEFAULT_CONCURRENCY
    timeout_seconds: float = DEFAULT_TIMEOUT_MS / 1000.0
    retries: int = DEFAULT_RETRIES
    backoff_seconds: float = DEFAULT_BACKOFF_MS / 1000.0
    team_delay_seconds: float = DEFAULT_TEAM_DELAY_MS / 1000.0

    def __post_init__(self) -> None:
        if self.candidate_limit < MIN_CANDIDATE_LIMIT:
            raise ValueError(f"candidate_limit must be >= {MIN_CANDIDATE_LIMIT}, got {self.candidate_limit}")
        if self.concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        if self.retries < 1:
            raise ValueError("retries must be >= 1")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.backoff_seconds < 0 or self.team_delay_seconds < 0:
            raise ValueError("delays must be >= 0")

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        return cls(
            candidate_limit=_env_int(_CANDIDATE_LIMIT_ENV, DEFAULT_CANDIDATE_LIMIT, min_value=MIN_CANDIDATE_LIMIT),
            concurrency=_env_int(_CONCURRENCY_ENV, DEFAULT_CONCURRENCY, min_value=1),
            timeout_seconds=_env_float(_TIMEOUT_ENV, DEFAULT_TIMEOUT_MS, clamp_min=1.0) / 1000.0,
            retries=_env_int(_RETRIES_ENV, DEFAULT_RETRIES, min_value=1),
            backoff_seconds=_env_float(_BACKOFF_ENV, DEFAULT_BACKOFF_MS, clamp_min=0.0) / 1000.0,
            team_delay_seconds=_env_float(_TEAM_DELAY_ENV, DEFAULT_TEAM_DELAY_MS, clamp_min=0.0) / 1000.0,
        )


def snapshot_path() -> Path:
    """Snapshot JSON consumed at process start (bundled seed unless overridden)."""

    return _env_path(_SNAPSHOT_ENV) or DEFAULT_SEED_PATH


def db_path(default: Path) -> Path:
    return _env_path(_DB_ENV) or default


def shot_clock_seconds() -> int:
    return _env_int(_SHOT_CLOCK_ENV, DEFAULT_SHOT_CLOCK_SECONDS, min_value=5)
