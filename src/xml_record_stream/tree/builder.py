"""Record reconstruction state machine.

This module implements the builder that consumes tokenizer events one at a
time and rebuilds, for every configured record tag, the subtree rooted at that
tag. Completed subtrees are folded into plain values and handed back to the
caller immediately, so memory use is bounded by one record, not by the
document.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from xml_record_stream.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    NestedRecordError,
    TokenizerError,
    get_logger,
)
from xml_record_stream.shared.config import normalize_tags
from xml_record_stream.tokenization import (
    CloseTagEvent,
    EndEvent,
    ErrorEvent,
    OpenTagEvent,
    TextEvent,
    TokenizerEvent,
)

from .nodes import RecordValue, XMLNode, XMLNodeTree


@dataclass(frozen=True)
class CompletedRecord:
    """A folded record together with the tag that delimited it."""

    tag: str
    value: RecordValue


@dataclass
class BuilderState:
    """Mutable state of one builder.

    Attributes:
        open_leaf: Most recently opened tag that has not been closed yet
        active_record: Subtree of the record currently being built
        ancestors: Unclosed element frames between the record root and the
            open leaf, innermost last
    """

    open_leaf: Optional[XMLNode] = None
    active_record: Optional[XMLNodeTree] = None
    ancestors: List[XMLNodeTree] = field(default_factory=list)

    def clear_record(self) -> None:
        """Forget the record in progress."""
        self.open_leaf = None
        self.active_record = None
        self.ancestors.clear()

    def attach(self, subtree: XMLNodeTree) -> None:
        """Attach a closed subtree to its parent frame."""
        if self.ancestors:
            self.ancestors[-1].append_child(subtree)
        elif self.active_record is not None:
            self.active_record.append_child(subtree)


class RecordTreeBuilder:
    """Event-driven builder for record subtrees.

    Monitored record tags must not nest inside each other or themselves. By
    default a record tag opening inside an unfinished record discards the outer
    record's progress (logged as a warning); with ``strict_nesting`` it raises
    :class:`NestedRecordError`.

    Examples:
        >>> builder = RecordTreeBuilder(["item"])
        >>> builder.process(OpenTagEvent("item", {"id": "1"}))
        >>> builder.process(TextEvent("Hello"))
        >>> builder.process(CloseTagEvent("item"))
        CompletedRecord(tag='item', value='Hello')
    """

    def __init__(
        self,
        tags: Iterable[str],
        strict_nesting: bool = False,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize record tree builder.

        Args:
            tags: Record tag names
            strict_nesting: Raise on nested record tags instead of discarding
            correlation_id: Optional correlation ID for run tracking
        """
        self.tags = normalize_tags(tags)
        self.strict_nesting = strict_nesting
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "record_tree_builder")

        self.state = BuilderState()
        self.diagnostics: List[DiagnosticEntry] = []
        self._record_tags = frozenset(self.tags)
        self._finished = False
        self._max_depth = 0

    @property
    def finished(self) -> bool:
        """True once the end event has been processed."""
        return self._finished

    @property
    def depth(self) -> int:
        """Current number of open ancestor frames."""
        return len(self.state.ancestors)

    @property
    def max_depth(self) -> int:
        """Deepest ancestor stack seen since the last reset."""
        return self._max_depth

    @property
    def in_record(self) -> bool:
        """True while a record is being built."""
        return self.state.active_record is not None

    def reset(self) -> None:
        """Reset internal state for a new document."""
        self.state = BuilderState()
        self.diagnostics = []
        self._finished = False
        self._max_depth = 0

    def process(self, event: TokenizerEvent) -> Optional[CompletedRecord]:
        """Apply one event and return the record it completed, if any.

        Raises:
            TokenizerError: For an error event
            NestedRecordError: For a nested record tag with ``strict_nesting``
        """
        if self._finished:
            raise ValueError("Builder has already processed the end of input")

        if isinstance(event, OpenTagEvent):
            self.on_open_tag(event)
        elif isinstance(event, TextEvent):
            self.on_text(event)
        elif isinstance(event, CloseTagEvent):
            return self.on_close_tag(event)
        elif isinstance(event, ErrorEvent):
            self.on_error(event)
        elif isinstance(event, EndEvent):
            self.on_end(event)
        else:
            raise TypeError(f"Unsupported event: {event!r}")
        return None

    def on_open_tag(self, event: OpenTagEvent) -> None:
        """Handle a start tag."""
        state = self.state
        leaf = state.open_leaf

        # The open leaf turns out to have children
        if (
            leaf is not None
            and state.active_record is not None
            and leaf.name not in self._record_tags
        ):
            state.ancestors.append(XMLNodeTree(leaf))
            self._max_depth = max(self._max_depth, len(state.ancestors))

        node = XMLNode.from_event(event)
        state.open_leaf = node

        if node.name in self._record_tags:
            if state.active_record is not None:
                self._handle_nested_record(state.active_record.name, node.name)
            state.ancestors.clear()
            state.active_record = XMLNodeTree(node)

    def on_text(self, event: TextEvent) -> None:
        """Handle character data."""
        if self.state.open_leaf is None:
            return
        self.state.open_leaf.set_text(event.text)

    def on_close_tag(self, event: CloseTagEvent) -> Optional[CompletedRecord]:
        """Handle an end tag, returning the record it completes."""
        state = self.state
        record = state.active_record

        if record is not None and record.name == event.name:
            completed = CompletedRecord(event.name, record.fold())
            state.clear_record()
            return completed

        if record is None:
            return None

        if state.ancestors and state.ancestors[-1].name == event.name:
            closed = state.ancestors.pop()
            state.open_leaf = None
            state.attach(closed)
            return None

        if state.open_leaf is None:
            return None

        leaf = XMLNodeTree(state.open_leaf)
        state.open_leaf = None
        state.attach(leaf)
        return None

    def on_error(self, event: ErrorEvent) -> None:
        """Abort on a tokenizer error; the record in progress is discarded."""
        dropped = self.state.active_record
        self.state.clear_record()
        self._finished = True
        self._add_diagnostic(
            DiagnosticSeverity.ERROR,
            f"Tokenizer error: {event.message}",
            details={
                "position": event.position,
                "dropped_record": dropped.name if dropped else None,
            },
        )
        raise TokenizerError(
            f"XML tokenization failed: {event.message}",
            cause=event.cause,
            position=event.position,
        ) from event.cause

    def on_end(self, event: EndEvent) -> None:
        """Finish the document; an unterminated record is dropped silently."""
        dropped = self.state.active_record
        if dropped is not None:
            self.logger.debug(
                "Unterminated record dropped at end of input",
                extra={"tag": dropped.name},
            )
            self._add_diagnostic(
                DiagnosticSeverity.INFO,
                f"Unterminated <{dropped.name}> record dropped at end of input",
                details={"tag": dropped.name},
            )
        self.state.clear_record()
        self._finished = True

    def _handle_nested_record(self, outer_tag: str, inner_tag: str) -> None:
        if self.strict_nesting:
            raise NestedRecordError(outer_tag, inner_tag)

        self.logger.warning(
            "Record tag opened inside unfinished record, outer record discarded",
            extra={"outer_tag": outer_tag, "inner_tag": inner_tag},
        )
        self._add_diagnostic(
            DiagnosticSeverity.WARNING,
            f"<{inner_tag}> opened inside unfinished <{outer_tag}> record; "
            "the outer record was discarded",
            details={"outer_tag": outer_tag, "inner_tag": inner_tag},
        )

    def _add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component="record_tree_builder",
            details=details,
            correlation_id=self.correlation_id,
        ))
