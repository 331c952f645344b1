"""Shared utilities for lenient markup parsing.

This module provides configuration objects, metric types and logging helpers
used across the tokenization, tree and API layers.
"""

from .result import PerformanceMetrics
from .config import (
    ApiConfig,
    ConfigError,
    ConfigValidationError,
    GlobalConfig,
    ParserConfig,
    TokenizationConfig,
    TreeConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "PerformanceMetrics",
    "ApiConfig",
    "ConfigError",
    "ConfigValidationError",
    "GlobalConfig",
    "ParserConfig",
    "TokenizationConfig",
    "TreeConfig",
    "CorrelationLogger",
    "get_logger",
]
