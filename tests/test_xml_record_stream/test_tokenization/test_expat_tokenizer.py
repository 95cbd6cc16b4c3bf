"""Tests for the pyexpat tokenizer backend and the event types."""

from typing import List

import pytest

from xml_record_stream.shared import RecordParserConfig, TokenizerBackend
from xml_record_stream.tokenization import (
    CloseTagEvent,
    EndEvent,
    ErrorEvent,
    EventType,
    ExpatEventTokenizer,
    OpenTagEvent,
    TextEvent,
    TokenizerEvent,
    create_tokenizer,
    is_empty_element_tag,
)


def tokenize(*chunks, **kwargs) -> List[TokenizerEvent]:
    """Feed all chunks and close, returning every event produced."""
    tokenizer = ExpatEventTokenizer(**kwargs)
    events: List[TokenizerEvent] = []
    for chunk in chunks:
        events.extend(tokenizer.feed(chunk))
        if events and isinstance(events[-1], ErrorEvent):
            return events
    events.extend(tokenizer.close())
    return events


class TestEvents:
    """Test suite for event value objects."""

    def test_event_types(self):
        """Each event reports its kind."""
        assert OpenTagEvent("a").type is EventType.OPEN_TAG
        assert TextEvent("x").type is EventType.TEXT
        assert CloseTagEvent("a").type is EventType.CLOSE_TAG
        assert ErrorEvent(ValueError("x")).type is EventType.ERROR
        assert EndEvent().type is EventType.END

    def test_open_tag_defaults(self):
        """Attributes default to empty and tags are not self-closing."""
        event = OpenTagEvent("a")

        assert event.attributes == {}
        assert event.is_self_closing is False

    def test_error_message_falls_back_to_type_name(self):
        """Errors without a message are still readable."""
        assert ErrorEvent(ValueError("broken")).message == "broken"
        assert ErrorEvent(RuntimeError()).message == "RuntimeError"


class TestIsEmptyElementTag:
    """Test suite for empty-element tag detection on raw input."""

    @pytest.mark.parametrize("context, expected", [
        (b"<a/>", True),
        (b"<a x='1' />rest", True),
        (b"<a>text</a>", False),
        (b'<a title="x>y"/>', True),
        (b"<a title='x/>y'>", False),
        (b"", False),
        (None, False),
    ])
    def test_detection(self, context, expected):
        assert is_empty_element_tag(context) is expected


class TestExpatEventTokenizer:
    """Test suite for ExpatEventTokenizer."""

    def test_simple_element(self):
        """Open, text, close and end events in document order."""
        events = tokenize('<item id="1">Hello</item>')

        assert events == [
            OpenTagEvent("item", {"id": "1"}, False),
            TextEvent("Hello"),
            CloseTagEvent("item"),
            EndEvent(),
        ]

    def test_empty_element_tag_is_self_closing(self):
        """Empty-element tags are flagged; start/end pairs are not."""
        events = tokenize("<r><a x='1'/><b></b></r>")
        opens = [e for e in events if isinstance(e, OpenTagEvent)]

        assert [(e.name, e.is_self_closing) for e in opens] == [
            ("r", False), ("a", True), ("b", False),
        ]
        assert opens[1].attributes == {"x": "1"}

    def test_text_split_across_chunks_is_coalesced(self):
        """Character data arrives as one event even when chunked."""
        events = tokenize("<a>hel", "lo wor", "ld</a>")

        assert [e for e in events if isinstance(e, TextEvent)] == [TextEvent("hello world")]

    def test_entities_are_decoded_into_one_text_event(self):
        """Entity references do not split the text."""
        events = tokenize("<a>fish &amp; chips &lt;3</a>")

        assert [e for e in events if isinstance(e, TextEvent)] == [
            TextEvent("fish & chips <3")
        ]

    def test_bytes_chunks_with_split_multibyte_character(self):
        """UTF-8 sequences split across byte chunks are reassembled."""
        data = "<a>café</a>".encode("utf-8")
        split = data.index(b"\xa9")  # second byte of "é"

        events = tokenize(data[:split], data[split:])

        assert TextEvent("café") in events

    def test_namespace_prefixes_are_kept(self):
        """No namespace processing: names are reported as written."""
        events = tokenize('<r xmlns:x="urn:x"><x:item>A</x:item></r>')

        assert OpenTagEvent("x:item", {}, False) in events
        assert CloseTagEvent("x:item") in events

    def test_comments_and_processing_instructions_ignored(self):
        """Comments and PIs produce no events of their own."""
        events = tokenize('<?xml version="1.0"?><r><!-- note --><?pi data?><a>1</a></r>')

        assert [e.type for e in events] == [
            EventType.OPEN_TAG,
            EventType.OPEN_TAG,
            EventType.TEXT,
            EventType.CLOSE_TAG,
            EventType.CLOSE_TAG,
            EventType.END,
        ]

    def test_malformed_input_reports_error_event(self):
        """A mismatched tag ends the stream with an error event."""
        tokenizer = ExpatEventTokenizer()

        events = tokenizer.feed("<r><a></b></r>")

        assert isinstance(events[-1], ErrorEvent)
        assert events[:-1] == [OpenTagEvent("r"), OpenTagEvent("a")]
        assert events[-1].position["line"] == 1
        assert tokenizer.finished

    def test_feed_after_error_is_rejected(self):
        """A failed tokenizer accepts no further input."""
        tokenizer = ExpatEventTokenizer()
        tokenizer.feed("<r></x>")

        with pytest.raises(ValueError, match="already finished"):
            tokenizer.feed("<r/>")

    def test_incomplete_document_ends_normally_by_default(self, caplog):
        """An unterminated document is logged and treated as ended."""
        events = tokenize("<r><item>A</item><item>B")

        assert isinstance(events[-1], EndEvent)
        assert not any(isinstance(e, ErrorEvent) for e in events)
        assert "Document incomplete" in caplog.text

    def test_incomplete_document_is_error_when_validated(self):
        """With end validation, truncation is reported as an error."""
        events = tokenize("<r><item>A</item><item>B", validate_document_end=True)

        assert isinstance(events[-1], ErrorEvent)
        assert not any(isinstance(e, EndEvent) for e in events)

    def test_close_twice_is_rejected(self):
        """End of input can only be signalled once."""
        tokenizer = ExpatEventTokenizer()
        tokenizer.feed("<r/>")
        tokenizer.close()

        with pytest.raises(ValueError, match="already finished"):
            tokenizer.close()


class TestCreateTokenizer:
    """Test suite for backend selection."""

    def test_default_backend_is_expat(self):
        """Expat is used unless configured otherwise."""
        config = RecordParserConfig(tags=("item",), validate_document_end=True)

        tokenizer = create_tokenizer(config, correlation_id="abc")

        assert isinstance(tokenizer, ExpatEventTokenizer)
        assert tokenizer.backend_name == "expat"
        assert tokenizer.validate_document_end is True
        assert tokenizer.correlation_id == "abc"

    def test_lxml_backend(self):
        """The lxml backend is created when requested."""
        pytest.importorskip("lxml")
        from xml_record_stream.tokenization import LxmlEventTokenizer

        config = RecordParserConfig(tags=("item",), backend=TokenizerBackend.LXML)

        assert isinstance(create_tokenizer(config), LxmlEventTokenizer)
