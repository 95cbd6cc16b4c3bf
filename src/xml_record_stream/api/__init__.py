"""Public API for streaming record extraction.

This module provides the record parser class, the module-level shortcuts and
the sinks that decide where completed records go.
"""

from .parser import (
    XMLRecordParser,
    get_records,
    iter_records,
    stream_records,
)
from .sinks import (
    BufferedRecordSink,
    CallbackRecordSink,
    RecordCallback,
    RecordSink,
)

__all__ = [
    "XMLRecordParser",
    "get_records",
    "iter_records",
    "stream_records",
    "BufferedRecordSink",
    "CallbackRecordSink",
    "RecordCallback",
    "RecordSink",
]
