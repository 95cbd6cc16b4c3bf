"""Shared utilities for streaming record extraction.

This module provides the configuration object, diagnostics and statistics
types, exceptions and logging helpers used across all processing layers.
"""

from .config import (
    DEFAULT_CHUNK_SIZE,
    ConfigError,
    ConfigValidationError,
    RecordParserConfig,
    TokenizerBackend,
)
from .errors import (
    NestedRecordError,
    RecordStreamError,
    TokenizerError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseStatistics,
    filter_diagnostics,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ConfigError",
    "ConfigValidationError",
    "RecordParserConfig",
    "TokenizerBackend",
    "NestedRecordError",
    "RecordStreamError",
    "TokenizerError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ParseStatistics",
    "filter_diagnostics",
]
