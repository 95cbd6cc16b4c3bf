"""Record extraction API with buffered, callback and iterator modes.

This module provides the main entry points: the :class:`XMLRecordParser` class
and the module-level shortcuts built on it. Every mode drives the same loop:
pull one chunk, tokenize it, push the resulting events through the record
builder, deliver completed records, and only then pull the next chunk.
"""

import os
import time
from typing import Dict, Iterable, Iterator, List, Optional

from xml_record_stream.character import SourceType, describe_source, iter_chunks
from xml_record_stream.shared import (
    ConfigValidationError,
    DiagnosticEntry,
    ParseStatistics,
    RecordParserConfig,
    TokenizerError,
    get_logger,
)
from xml_record_stream.shared.config import normalize_tags
from xml_record_stream.tokenization import TokenizerEvent, create_tokenizer
from xml_record_stream.tree import CompletedRecord, RecordTreeBuilder, RecordValue

from .sinks import BufferedRecordSink, CallbackRecordSink, RecordCallback, RecordSink

try:
    import psutil
    HAS_PSUTIL = True
except ImportError:
    psutil = None
    HAS_PSUTIL = False

MS_PER_SECOND = 1000  # Milliseconds per second conversion


def _resolve_config(
    tags: Optional[Iterable[str]], config: Optional[RecordParserConfig]
) -> RecordParserConfig:
    if config is None:
        if tags is None:
            raise ConfigValidationError(
                "Either tags or config is required",
                field_name="tags",
                suggestions=["Pass tags=['item']", "Pass config=RecordParserConfig(...)"],
            )
        return RecordParserConfig(tags=tags)  # type: ignore[arg-type]

    if tags is not None and normalize_tags(tags) != config.tags:
        raise ConfigValidationError(
            "tags disagree with config.tags",
            field_name="tags",
            suggestions=["Pass only one of tags and config"],
        )
    return config


class XMLRecordParser:
    """Streaming extractor for records delimited by the configured tags.

    Each record is the subtree rooted at one occurrence of a record tag,
    folded into a string (text-only element), an attribute mapping (element
    without text or children) or a mapping from child tag names to folded
    child values.

    Record tags must not nest inside each other. A tokenizer error aborts the
    run with :class:`TokenizerError`.

    Examples:
        Buffered mode:
        >>> parser = XMLRecordParser('<r><item>A</item></r>', tags=["item"])
        >>> parser.get()
        {'item': ['A']}

        Streaming mode:
        >>> parser.parse(print)
        A
    """

    def __init__(
        self,
        source: SourceType,
        tags: Optional[Iterable[str]] = None,
        config: Optional[RecordParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize record parser.

        Args:
            source: XML content (``str``/``bytes``), a ``Path``, a file-like
                object or an iterable of chunks
            tags: Record tag names; may be omitted when ``config`` is given
            config: Full configuration, see :class:`RecordParserConfig`
            correlation_id: Optional correlation ID for run tracking
        """
        self.config = _resolve_config(tags, config)
        self.source = source
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_record_parser")

        self._builder = RecordTreeBuilder(
            self.config.tags,
            strict_nesting=self.config.strict_nesting,
            correlation_id=correlation_id,
        )
        self._statistics = ParseStatistics()
        self._runs = 0

        if self.config.track_memory and not HAS_PSUTIL:
            self.logger.warning(
                "Memory tracking requested but psutil is not installed",
                extra={"hint": "install xml-record-stream[metrics]"},
            )

    @property
    def tags(self):
        """Configured record tag names, in order."""
        return self.config.tags

    @property
    def statistics(self) -> ParseStatistics:
        """Statistics of the most recent run."""
        return self._statistics

    @property
    def diagnostics(self) -> List[DiagnosticEntry]:
        """Diagnostics of the most recent run."""
        return list(self._builder.diagnostics)

    def get(self) -> Dict[str, List[RecordValue]]:
        """Collect all records, grouped by tag.

        Returns:
            Mapping with an entry for every configured tag, each holding that
            tag's folded records in document order

        Raises:
            TokenizerError: The document was rejected; nothing is returned
        """
        sink = BufferedRecordSink(self.config.tags)
        self._run(sink, "buffered")
        return sink.records

    def parse(self, callback: RecordCallback) -> None:
        """Invoke ``callback`` with each record's value, in document order.

        Records delivered before a tokenizer error stay delivered; the
        callback is not invoked again after the error.

        Raises:
            TokenizerError: The document was rejected
        """
        sink = CallbackRecordSink(callback)
        self._run(sink, "streaming")

    def iter_records(self) -> Iterator[CompletedRecord]:
        """Yield completed records lazily, in document order.

        Input is only read as far as needed to produce the next record;
        abandoning the iterator stops reading.
        """
        return self._records("iterator")

    def _run(self, sink: RecordSink, mode: str) -> None:
        records = self._records(mode)
        try:
            for record in records:
                sink.deliver(record)
        finally:
            records.close()

    def _records(self, mode: str) -> Iterator[CompletedRecord]:
        start_time = time.time()
        memory_start = self._memory_usage()
        self._runs += 1
        self._builder.reset()
        self._statistics = ParseStatistics()
        completed = False

        tokenizer = create_tokenizer(self.config, self.correlation_id)

        self.logger.info(
            "Starting record extraction",
            extra={
                "source": describe_source(self.source),
                "tags": list(self.config.tags),
                "mode": mode,
                "backend": tokenizer.backend_name,
                "run": self._runs,
            }
        )

        try:
            for chunk in iter_chunks(self.source, self.config.chunk_size):
                self._statistics.chunks_processed += 1
                self._statistics.units_processed += len(chunk)
                events = tokenizer.feed(chunk)

                self.logger.debug(
                    "Chunk tokenized",
                    extra={
                        "chunk_index": self._statistics.chunks_processed,
                        "chunk_length": len(chunk),
                        "event_count": len(events),
                    }
                )

                yield from self._drain(events)

            yield from self._drain(tokenizer.close())
            completed = True

        except TokenizerError as e:
            self.logger.exception(
                "Record extraction aborted by tokenizer error",
                extra={
                    "position": e.position,
                    "records_emitted": self._statistics.records_emitted,
                }
            )
            raise

        finally:
            self._finalize(start_time, memory_start, completed)

    def _drain(self, events: List[TokenizerEvent]) -> Iterator[CompletedRecord]:
        for event in events:
            self._statistics.count_event(event.type.value)
            record = self._builder.process(event)
            if record is not None:
                self._statistics.count_record(record.tag)
                yield record

    def _finalize(
        self, start_time: float, memory_start: Optional[int], completed: bool
    ) -> None:
        statistics = self._statistics
        statistics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        statistics.max_depth = self._builder.max_depth

        memory_end = self._memory_usage()
        if memory_start is not None and memory_end is not None:
            statistics.memory_used_bytes = max(0, memory_end - memory_start)

        if completed:
            self.logger.info(
                "Record extraction completed",
                extra={
                    "records_emitted": statistics.records_emitted,
                    "chunks_processed": statistics.chunks_processed,
                    "processing_time_ms": statistics.processing_time_ms,
                }
            )
        else:
            self.logger.debug(
                "Record extraction stopped before end of input",
                extra={"records_emitted": statistics.records_emitted},
            )

    def _memory_usage(self) -> Optional[int]:
        if not (self.config.track_memory and HAS_PSUTIL):
            return None
        return psutil.Process(os.getpid()).memory_info().rss


def get_records(
    source: SourceType,
    tags: Optional[Iterable[str]] = None,
    config: Optional[RecordParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Dict[str, List[RecordValue]]:
    """Collect every record of ``source``, grouped by record tag.

    Examples:
        >>> get_records('<r><item id="1" kind="a"/></r>', ["item", "other"])
        {'item': [{'id': '1', 'kind': 'a'}], 'other': []}
    """
    return XMLRecordParser(source, tags, config, correlation_id).get()


def stream_records(
    source: SourceType,
    tags: Optional[Iterable[str]],
    callback: RecordCallback,
    config: Optional[RecordParserConfig] = None,
    correlation_id: Optional[str] = None
) -> None:
    """Invoke ``callback`` once per record of ``source``, in document order.

    Examples:
        >>> stream_records('<r><item><a>1</a></item></r>', ["item"], print)
        {'a': '1'}
    """
    XMLRecordParser(source, tags, config, correlation_id).parse(callback)


def iter_records(
    source: SourceType,
    tags: Optional[Iterable[str]] = None,
    config: Optional[RecordParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Iterator[CompletedRecord]:
    """Lazily yield the records of ``source`` with their tags.

    Examples:
        >>> [r.value for r in iter_records('<r><item>A</item></r>', ["item"])]
        ['A']
    """
    return XMLRecordParser(source, tags, config, correlation_id).iter_records()
