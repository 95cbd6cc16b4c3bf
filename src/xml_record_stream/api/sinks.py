"""Destinations for completed records.

The parser runs one state machine whatever the output mode; a sink only
decides what happens to each record once it is complete.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List

from xml_record_stream.shared.config import normalize_tags
from xml_record_stream.tree import CompletedRecord, RecordValue

RecordCallback = Callable[[RecordValue], Any]


class RecordSink(ABC):
    """Receives completed records in document order."""

    @abstractmethod
    def deliver(self, record: CompletedRecord) -> None:
        """Accept one completed record."""


class BufferedRecordSink(RecordSink):
    """Collects records per tag in memory.

    The result has an entry for every configured tag, even for tags that never
    occurred.

    Examples:
        >>> sink = BufferedRecordSink(["item", "note"])
        >>> sink.deliver(CompletedRecord("item", "A"))
        >>> sink.records
        {'item': ['A'], 'note': []}
    """

    def __init__(self, tags: Iterable[str]) -> None:
        self.records: Dict[str, List[RecordValue]] = {
            tag: [] for tag in normalize_tags(tags)
        }

    def deliver(self, record: CompletedRecord) -> None:
        self.records.setdefault(record.tag, []).append(record.value)

    @property
    def total(self) -> int:
        """Number of records collected so far."""
        return sum(len(values) for values in self.records.values())


class CallbackRecordSink(RecordSink):
    """Hands every record's value to a callback as soon as it completes.

    Nothing is accumulated, so memory use does not grow with the document.
    Exceptions raised by the callback propagate to the caller.
    """

    def __init__(self, callback: RecordCallback) -> None:
        if not callable(callback):
            raise TypeError("callback must be callable")
        self.callback = callback
        self.delivered = 0

    def deliver(self, record: CompletedRecord) -> None:
        self.callback(record.value)
        self.delivered += 1
