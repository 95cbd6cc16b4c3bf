"""Common machinery for incremental tokenizer backends.

A backend is fed one chunk at a time and hands back the ordered events that
chunk produced. Events are captured into an in-memory queue by the backend's
callbacks and drained completely at the end of every ``feed``/``close`` call.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Type

from xml_record_stream.shared import get_logger

from .events import (
    CloseTagEvent,
    EndEvent,
    ErrorEvent,
    OpenTagEvent,
    TextEvent,
    TokenizerEvent,
)


class EventTokenizer(ABC):
    """Incremental tokenizer turning chunks into structural events.

    Character data is coalesced and emitted as a single text event right
    before the next tag event, so text split across chunks or around entity
    references reaches the tree builder whole.

    Tokenization failures are never raised from :meth:`feed` or :meth:`close`;
    they are reported as a trailing :class:`ErrorEvent`, after which the
    tokenizer refuses further input.
    """

    #: Exception types the backend raises for rejected input
    syntax_errors: Tuple[Type[BaseException], ...] = ()

    def __init__(
        self,
        encoding: Optional[str] = None,
        validate_document_end: bool = False,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tokenizer.

        Args:
            encoding: Overrides the encoding declared by the document
            validate_document_end: Report an incomplete document at end of
                input as an error event instead of ending normally
            correlation_id: Optional correlation ID for run tracking
        """
        self.encoding = encoding
        self.validate_document_end = validate_document_end
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, self.backend_name)

        self._events: List[TokenizerEvent] = []
        self._text_parts: List[str] = []
        self._finished = False

    @property
    def backend_name(self) -> str:
        """Short backend name used in logs and diagnostics."""
        return type(self).__name__

    @property
    def finished(self) -> bool:
        """True once an end or error event has been produced."""
        return self._finished

    def feed(self, chunk) -> List[TokenizerEvent]:
        """Feed the next chunk and return the events it produced, in order."""
        self._ensure_open()
        try:
            self._feed(chunk)
        except self.syntax_errors as e:
            self._fail(e)
        return self._drain()

    def close(self) -> List[TokenizerEvent]:
        """Signal end of input and return the remaining events.

        The last returned event is either an :class:`EndEvent` or an
        :class:`ErrorEvent`.
        """
        self._ensure_open()
        try:
            self._finish()
        except self.syntax_errors as e:
            if self.validate_document_end:
                self._fail(e)
                return self._drain()
            self.logger.warning(
                "Document incomplete at end of input, unfinished content dropped",
                extra={"error": str(e), "position": self._error_position(e)},
            )

        self._flush_text()
        self._events.append(EndEvent())
        self._finished = True
        return self._drain()

    @abstractmethod
    def _feed(self, chunk) -> None:
        """Hand ``chunk`` to the backend."""

    @abstractmethod
    def _finish(self) -> None:
        """Tell the backend no more input follows."""

    def _error_position(self, error: BaseException) -> Optional[Dict[str, int]]:
        """Line/column of ``error`` when the backend reports one."""
        return None

    # Callbacks used by the backends

    def _open_tag(
        self, name: str, attributes: Dict[str, str], is_self_closing: bool
    ) -> None:
        self._flush_text()
        self._events.append(OpenTagEvent(name, attributes, is_self_closing))

    def _close_tag(self, name: str) -> None:
        self._flush_text()
        self._events.append(CloseTagEvent(name))

    def _text(self, text: str) -> None:
        self._text_parts.append(text)

    def _flush_text(self) -> None:
        if self._text_parts:
            self._events.append(TextEvent("".join(self._text_parts)))
            self._text_parts.clear()

    def _fail(self, error: BaseException) -> None:
        position = self._error_position(error)
        self.logger.debug(
            "Tokenizer rejected input",
            extra={"error": str(error), "position": position},
        )
        self._text_parts.clear()
        self._events.append(ErrorEvent(error, position))
        self._finished = True

    def _ensure_open(self) -> None:
        if self._finished:
            raise ValueError(f"{self.backend_name} has already finished")

    def _drain(self) -> List[TokenizerEvent]:
        events = self._events
        self._events = []
        return events
