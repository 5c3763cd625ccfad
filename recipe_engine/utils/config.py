"""Configuration management for the recipe engine.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import Optional

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Catalog Source: where candidate recipes come from
        # "builtin": bundled sample recipes (default, no I/O)
        # "file": JSON array of recipes at CATALOG_PATH
        # "remote": JSON array of recipes served at CATALOG_URL (async loading only)
        self.CATALOG_SOURCE: str = os.getenv("CATALOG_SOURCE", "builtin").lower()
        self.CATALOG_PATH: Optional[str] = os.getenv("CATALOG_PATH")
        self.CATALOG_URL: Optional[str] = os.getenv("CATALOG_URL")
        # Per-request HTTP timeout for the remote catalog, in seconds
        self.CATALOG_TIMEOUT_SECONDS: int = int(os.getenv("CATALOG_TIMEOUT_SECONDS", "10"))

        # Remote Catalog Retry Configuration - handles transient network failures
        # MAX_RETRIES: Total attempts for a catalog fetch
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
        # DELAY_BETWEEN_RETRIES: Initial delay in seconds (doubled each retry if EXPONENTIAL_BACKOFF)
        self.DELAY_BETWEEN_RETRIES: int = int(os.getenv("DELAY_BETWEEN_RETRIES", "1"))
        self.EXPONENTIAL_BACKOFF: bool = _env_flag("EXPONENTIAL_BACKOFF", "true")

        # Async boundary: how long a caller waits for a pipeline result, in seconds.
        # The pipeline itself never blocks; this bounds the caller's wait only.
        self.REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "20"))
        # Artificial delay before the pipeline call, mimicking backend latency in demos. Default: 0
        self.SIMULATED_LATENCY_MS: int = int(os.getenv("SIMULATED_LATENCY_MS", "0"))

        # Selection tie-break
        # SELECTION_TIE_THRESHOLD: more top-ranked ties than this switches to a random draw
        # SELECTION_TIE_POOL: the random draw only considers the first N ties (pool order)
        self.SELECTION_TIE_THRESHOLD: int = int(os.getenv("SELECTION_TIE_THRESHOLD", "2"))
        self.SELECTION_TIE_POOL: int = int(os.getenv("SELECTION_TIE_POOL", "3"))

        # RANDOM_SEED: fix every random choice (tie-breaks, timing jitter) for reproducible output.
        # Unset: each call draws from a fresh entropy-seeded source.
        seed = os.getenv("RANDOM_SEED")
        self.RANDOM_SEED: Optional[int] = int(seed) if seed not in (None, "") else None

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a catalog source is unknown or incomplete, or a numeric setting is out of range.
        """
        if self.CATALOG_SOURCE not in ("builtin", "file", "remote"):
            raise ValueError(
                f"CATALOG_SOURCE must be 'builtin', 'file' or 'remote', got: {self.CATALOG_SOURCE}"
            )
        if self.CATALOG_SOURCE == "file" and not self.CATALOG_PATH:
            raise ValueError("CATALOG_PATH environment variable is required when CATALOG_SOURCE=file")
        if self.CATALOG_SOURCE == "remote" and not self.CATALOG_URL:
            raise ValueError("CATALOG_URL environment variable is required when CATALOG_SOURCE=remote")
        if self.CATALOG_TIMEOUT_SECONDS < 1:
            raise ValueError(
                f"CATALOG_TIMEOUT_SECONDS must be at least 1 second, got: {self.CATALOG_TIMEOUT_SECONDS}"
            )
        if self.MAX_RETRIES < 1:
            raise ValueError(
                f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}"
            )
        if self.DELAY_BETWEEN_RETRIES < 1:
            raise ValueError(
                f"DELAY_BETWEEN_RETRIES must be at least 1 second, got: {self.DELAY_BETWEEN_RETRIES}"
            )
        if self.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"REQUEST_TIMEOUT_SECONDS must be positive, got: {self.REQUEST_TIMEOUT_SECONDS}"
            )
        if self.SIMULATED_LATENCY_MS < 0:
            raise ValueError(
                f"SIMULATED_LATENCY_MS must not be negative, got: {self.SIMULATED_LATENCY_MS}"
            )
        if self.SELECTION_TIE_THRESHOLD < 1:
            raise ValueError(
                f"SELECTION_TIE_THRESHOLD must be at least 1, got: {self.SELECTION_TIE_THRESHOLD}"
            )
        if self.SELECTION_TIE_POOL < 1:
            raise ValueError(
                f"SELECTION_TIE_POOL must be at least 1, got: {self.SELECTION_TIE_POOL}"
            )

    def retry_delays(self) -> list[int]:
        """Backoff schedule for remote catalog retries (one delay per retry)."""
        delays = []
        delay = self.DELAY_BETWEEN_RETRIES
        for _ in range(max(self.MAX_RETRIES - 1, 0)):
            delays.append(delay)
            if self.EXPONENTIAL_BACKOFF:
                delay *= 2
        return delays


# Create module-level config instance and validate immediately
config = Config()
config.validate()
