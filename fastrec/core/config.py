"""
Configuration Classes: Type-Safe Engine Configuration

Provides structured configuration with validation for:
    - Similarity engine (metric, counter strategy, orientation)
    - Neighborhood construction (k, threshold, worker pool)
    - Logging output

Every class reads ``FASTREC_*`` environment overrides via ``from_env()``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from fastrec.core.errors import ConfigError
from fastrec.core.types import CounterStrategy, Orientation

T = TypeVar("T")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_env(name: str, value: str, parse: Callable[[str], T]) -> T:
    try:
        return parse(value)
    except ValueError as exc:
        raise ConfigError.invalid(name, value, str(exc)) from exc


def _env(name: str, default: str, parse: Callable[[str], T]) -> T:
    return _parse_env(name, os.getenv(name, default), parse)


def _env_optional(name: str, parse: Callable[[str], T]) -> Optional[T]:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return _parse_env(name, value, parse)


# =============================================================================
# SIMILARITY CONFIGURATION
# =============================================================================
@dataclass(frozen=True, slots=True)
class SimilarityConfig:
    """
    Similarity engine configuration.

    Parameters:
        metric: Registered metric name (see fastrec.similarity.metrics)
        strategy: DENSE counter array or SPARSE counter map
        vectorized: Walk the compiled index arrays with numpy
        orientation: USER-USER or ITEM-ITEM similarity
        alpha: Exponent for the asymmetric cosine metric
    """
    metric: str = "jaccard"
    strategy: CounterStrategy = CounterStrategy.SPARSE
    vectorized: bool = False
    orientation: Orientation = Orientation.USER
    alpha: float = 0.5

    def validate(self) -> Optional[str]:
        if not 0.0 <= self.alpha <= 1.0:
            return f"alpha must be in [0, 1], got {self.alpha}"
        return None

    @classmethod
    def from_env(cls) -> "SimilarityConfig":
        return cls(
            metric=os.getenv("FASTREC_METRIC", "jaccard"),
            strategy=_env("FASTREC_STRATEGY", "sparse", CounterStrategy),
            vectorized=_env_bool("FASTREC_VECTORIZED", False),
            orientation=_env("FASTREC_ORIENTATION", "user", Orientation),
            alpha=_env("FASTREC_ALPHA", "0.5", float),
        )


# =============================================================================
# NEIGHBORHOOD CONFIGURATION
# =============================================================================
@dataclass(frozen=True, slots=True)
class NeighborhoodConfig:
    """
    Neighborhood construction configuration.

    Parameters:
        k: Neighbors kept per index (0 = unlimited)
        threshold: Minimum similarity kept (None = no threshold)
        max_workers: Thread pool size for parallel builds (None = executor default)
        window: Maximum in-flight origin computations per worker
    """
    k: int = 100
    threshold: Optional[float] = None
    max_workers: Optional[int] = None
    window: int = 4

    def validate(self) -> Optional[str]:
        if self.k < 0:
            return f"k must be >= 0, got {self.k}"
        if self.max_workers is not None and self.max_workers < 1:
            return f"max_workers must be >= 1, got {self.max_workers}"
        if self.window < 1:
            return f"window must be >= 1, got {self.window}"
        return None

    @classmethod
    def from_env(cls) -> "NeighborhoodConfig":
        return cls(
            k=_env("FASTREC_K", "100", int),
            threshold=_env_optional("FASTREC_THRESHOLD", float),
            max_workers=_env_optional("FASTREC_MAX_WORKERS", int),
            window=_env("FASTREC_WINDOW", "4", int),
        )


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================
@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Log output configuration."""
    level: str = "INFO"
    json_output: bool = True

    def validate(self) -> Optional[str]:
        if self.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            return f"unknown log level {self.level!r}"
        return None

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("FASTREC_LOG_LEVEL", "INFO"),
            json_output=_env_bool("FASTREC_LOG_JSON", True),
        )


def ensure_valid(config: SimilarityConfig | NeighborhoodConfig | LoggingConfig) -> None:
    """Raise ConfigError if ``config.validate()`` reports a problem."""
    problem = config.validate()
    if problem is not None:
        raise ConfigError.invalid(type(config).__name__, config, problem)


__all__ = [
    "SimilarityConfig",
    "NeighborhoodConfig",
    "LoggingConfig",
    "ensure_valid",
]
