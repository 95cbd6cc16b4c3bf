"""Tokenization layer for streaming record extraction.

Wraps an external XML tokenizer and exposes its output as an ordered sequence
of structural events.

Key Components:
    EventTokenizer: Incremental tokenizer interface (feed/close)
    ExpatEventTokenizer: Default backend on the standard library's pyexpat
    LxmlEventTokenizer: Optional backend on lxml's feed parser
    OpenTagEvent, TextEvent, CloseTagEvent, ErrorEvent, EndEvent: Event types
"""

from typing import Optional

from xml_record_stream.shared import (
    ConfigValidationError,
    RecordParserConfig,
    TokenizerBackend,
)

from .base import EventTokenizer
from .events import (
    CloseTagEvent,
    EndEvent,
    ErrorEvent,
    EventType,
    OpenTagEvent,
    TextEvent,
    TokenizerEvent,
)
from .expat_tokenizer import ExpatEventTokenizer, is_empty_element_tag
from .lxml_tokenizer import HAS_LXML, LxmlEventTokenizer, local_name


def create_tokenizer(
    config: RecordParserConfig, correlation_id: Optional[str] = None
) -> EventTokenizer:
    """Create the tokenizer backend selected by ``config``."""
    if config.backend is TokenizerBackend.EXPAT:
        tokenizer_class = ExpatEventTokenizer
    elif config.backend is TokenizerBackend.LXML:
        tokenizer_class = LxmlEventTokenizer
    else:
        raise ConfigValidationError(
            f"Unknown tokenizer backend: {config.backend!r}", field_name="backend"
        )

    return tokenizer_class(
        encoding=config.encoding,
        validate_document_end=config.validate_document_end,
        correlation_id=correlation_id,
    )


__all__ = [
    "EventTokenizer",
    "ExpatEventTokenizer",
    "LxmlEventTokenizer",
    "HAS_LXML",
    "create_tokenizer",
    "is_empty_element_tag",
    "local_name",
    "CloseTagEvent",
    "EndEvent",
    "ErrorEvent",
    "EventType",
    "OpenTagEvent",
    "TextEvent",
    "TokenizerEvent",
]
