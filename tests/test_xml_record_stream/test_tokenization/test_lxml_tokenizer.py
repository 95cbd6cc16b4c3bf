"""Tests for the lxml tokenizer backend."""

import pytest

from xml_record_stream.tokenization import (
    CloseTagEvent,
    EndEvent,
    ErrorEvent,
    ExpatEventTokenizer,
    OpenTagEvent,
    TextEvent,
    local_name,
)

pytest.importorskip("lxml")

from xml_record_stream.tokenization import LxmlEventTokenizer  # noqa: E402


def tokenize(tokenizer, *chunks):
    events = []
    for chunk in chunks:
        events.extend(tokenizer.feed(chunk))
        if events and isinstance(events[-1], ErrorEvent):
            return events
    events.extend(tokenizer.close())
    return events


def test_local_name():
    assert local_name("{urn:x}item") == "item"
    assert local_name("item") == "item"


class TestLxmlEventTokenizer:
    """Test suite for LxmlEventTokenizer."""

    def test_simple_element(self):
        """Open, text, close and end events in document order."""
        events = tokenize(LxmlEventTokenizer(), '<item id="1">Hello</item>')

        assert events == [
            OpenTagEvent("item", {"id": "1"}, False),
            TextEvent("Hello"),
            CloseTagEvent("item"),
            EndEvent(),
        ]
        assert LxmlEventTokenizer().backend_name == "lxml"

    def test_namespaces_reduced_to_local_names(self):
        """Qualified tag and attribute names lose their namespace."""
        events = tokenize(
            LxmlEventTokenizer(),
            '<r xmlns:x="urn:x"><x:item x:id="7">A</x:item></r>',
        )

        assert OpenTagEvent("item", {"id": "7"}, False) in events
        assert CloseTagEvent("item") in events

    def test_empty_element_not_flagged(self):
        """lxml cannot tell empty-element tags apart."""
        events = tokenize(LxmlEventTokenizer(), "<r><a x='1'/></r>")

        assert OpenTagEvent("a", {"x": "1"}, False) in events

    def test_same_events_as_expat_for_plain_documents(self):
        """Both backends agree on documents without empty-element tags."""
        document = (
            "<catalog><item id='1'>A</item><item><name>B</name>"
            "<price>2 &amp; 3</price></item></catalog>"
        )
        chunks = [document[i:i + 7] for i in range(0, len(document), 7)]

        assert tokenize(LxmlEventTokenizer(), *chunks) == tokenize(
            ExpatEventTokenizer(), *chunks
        )

    def test_bytes_input(self):
        """Byte chunks are decoded by lxml."""
        data = "<a>café</a>".encode("utf-8")

        events = tokenize(LxmlEventTokenizer(), data[:5], data[5:])

        assert TextEvent("café") in events

    def test_malformed_input_reports_error_event(self):
        """Malformed input ends the stream with an error event.

        lxml may defer the failure to ``close``, so end validation is on.
        """
        tokenizer = LxmlEventTokenizer(validate_document_end=True)

        events = tokenize(tokenizer, "<r><a></b></r>")

        assert isinstance(events[-1], ErrorEvent)
        assert not any(isinstance(e, EndEvent) for e in events)
        assert tokenizer.finished

    def test_incomplete_document_ends_normally_by_default(self):
        """Truncation is tolerated unless end validation is enabled."""
        events = tokenize(LxmlEventTokenizer(), "<r><item>A</item>")

        assert isinstance(events[-1], EndEvent)
        assert CloseTagEvent("item") in events
