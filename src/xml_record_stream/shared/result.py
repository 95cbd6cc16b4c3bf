"""Diagnostic and statistics types for streaming record extraction.

This module defines the diagnostics collected while a document is streamed and
the statistics describing a finished (or aborted) run.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Input handled, but probably not as the caller intended
    ERROR = auto()      # Run aborted


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class ParseStatistics:
    """Counters for a single streaming run."""

    chunks_processed: int = 0
    units_processed: int = 0  # bytes or characters, depending on the chunk type
    events_by_type: Dict[str, int] = field(default_factory=dict)
    records_by_tag: Dict[str, int] = field(default_factory=dict)
    max_depth: int = 0
    processing_time_ms: float = 0.0
    memory_used_bytes: Optional[int] = None

    @property
    def events_processed(self) -> int:
        """Total number of tokenizer events consumed."""
        return sum(self.events_by_type.values())

    @property
    def records_emitted(self) -> int:
        """Total number of completed records delivered."""
        return sum(self.records_by_tag.values())

    @property
    def records_per_second(self) -> float:
        """Calculate completed records per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.records_emitted * 1000.0) / self.processing_time_ms

    def count_event(self, event_type: str) -> None:
        """Add one event of ``event_type`` to the distribution."""
        self.events_by_type[event_type] = self.events_by_type.get(event_type, 0) + 1

    def count_record(self, tag: str) -> None:
        """Add one completed record for ``tag``."""
        self.records_by_tag[tag] = self.records_by_tag.get(tag, 0) + 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary representation."""
        return {
            "chunks_processed": self.chunks_processed,
            "units_processed": self.units_processed,
            "events_processed": self.events_processed,
            "events_by_type": dict(self.events_by_type),
            "records_emitted": self.records_emitted,
            "records_by_tag": dict(self.records_by_tag),
            "max_depth": self.max_depth,
            "processing_time_ms": self.processing_time_ms,
            "memory_used_bytes": self.memory_used_bytes,
        }


def filter_diagnostics(
    diagnostics: List[DiagnosticEntry], severity: DiagnosticSeverity
) -> List[DiagnosticEntry]:
    """Get diagnostics of a specific severity level."""
    return [diag for diag in diagnostics if diag.severity == severity]
