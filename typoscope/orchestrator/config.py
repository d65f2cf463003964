"""
EngineConfig — Execution settings for the analysis orchestrator

Loads parallelization and augmentation limits from environment variables.
Provides sensible defaults that work on any machine.

Environment variables:
- TYPOSCOPE_PARALLEL_DETECTORS: Run detectors on a thread pool (default: true)
- TYPOSCOPE_DETECTOR_WORKERS: Detector pool size (default: 4)
- TYPOSCOPE_AUGMENT_CONCURRENT: Max concurrent augmentation calls (default: 3)
- TYPOSCOPE_AUGMENT_RATE_LIMIT: Max augmentation requests per second (default: 10)
- TYPOSCOPE_AUGMENT_TIMEOUT: Per-call augmentation timeout in seconds (default: 10)
- TYPOSCOPE_AUGMENT_MAX_REQUESTS: Lifetime request budget per provider (default: 0 = unlimited)
"""

import os
from dataclasses import dataclass

from ..core.errors import ConfigurationError


@dataclass
class EngineConfig:
    """
    Configuration for the analysis orchestrator.

    Loaded from environment variables with sensible defaults.
    """

    # Detector execution
    parallel_detectors: bool = True
    detector_workers: int = 4

    # Augmentation limits
    augment_concurrent: int = 3            # Concurrency budget for provider calls
    augment_rate_limit: float = 10.0       # Max requests per second
    augment_timeout: float = 10.0          # Per-call timeout (seconds)
    augment_max_requests: int = 0          # Lifetime budget per provider, 0 = unlimited

    # Shutdown
    shutdown_wait: bool = True

    @classmethod
    def from_env(cls) -> 'EngineConfig':
        """Load configuration from environment variables."""
        return cls(
            parallel_detectors=_get_bool_env("TYPOSCOPE_PARALLEL_DETECTORS", True),
            detector_workers=_get_int_env("TYPOSCOPE_DETECTOR_WORKERS", 4),
            augment_concurrent=_get_int_env("TYPOSCOPE_AUGMENT_CONCURRENT", 3),
            augment_rate_limit=_get_float_env("TYPOSCOPE_AUGMENT_RATE_LIMIT", 10.0),
            augment_timeout=_get_float_env("TYPOSCOPE_AUGMENT_TIMEOUT", 10.0),
            augment_max_requests=_get_int_env("TYPOSCOPE_AUGMENT_MAX_REQUESTS", 0),
        )

    def validate(self) -> None:
        """Validate configuration values."""
        if self.detector_workers < 1:
            raise ConfigurationError("TYPOSCOPE_DETECTOR_WORKERS must be >= 1")
        if self.augment_concurrent < 1:
            raise ConfigurationError("TYPOSCOPE_AUGMENT_CONCURRENT must be >= 1")
        if self.augment_rate_limit <= 0:
            raise ConfigurationError("TYPOSCOPE_AUGMENT_RATE_LIMIT must be > 0")
        if self.augment_timeout <= 0:
            raise ConfigurationError("TYPOSCOPE_AUGMENT_TIMEOUT must be > 0")
        if self.augment_max_requests < 0:
            raise ConfigurationError("TYPOSCOPE_AUGMENT_MAX_REQUESTS must be >= 0")

    def to_dict(self) -> dict:
        """Serialize for display/logging."""
        return {
            "parallel_detectors": self.parallel_detectors,
            "detector_workers": self.detector_workers,
            "augment_concurrent": self.augment_concurrent,
            "augment_rate_limit": self.augment_rate_limit,
            "augment_timeout": self.augment_timeout,
            "augment_max_requests": self.augment_max_requests,
        }


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean from environment variable."""
    value = os.environ.get(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.environ.get(key, "")
    if value:
        try:
            return int(value)
        except ValueError:
            pass
    return default


def _get_float_env(key: str, default: float) -> float:
    """Get float from environment variable."""
    value = os.environ.get(key, "")
    if value:
        try:
            return float(value)
        except ValueError:
            pass
    return default
