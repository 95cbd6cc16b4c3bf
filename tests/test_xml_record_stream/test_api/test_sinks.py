"""Tests for record sinks."""

from unittest.mock import Mock

import pytest

from xml_record_stream.api import BufferedRecordSink, CallbackRecordSink, RecordSink
from xml_record_stream.tree import CompletedRecord


class TestBufferedRecordSink:
    """Test suite for BufferedRecordSink."""

    def test_every_tag_has_an_entry(self):
        sink = BufferedRecordSink(["item", "note"])

        assert sink.records == {"item": [], "note": []}
        assert sink.total == 0
        assert isinstance(sink, RecordSink)

    def test_records_grouped_in_order(self):
        sink = BufferedRecordSink(["item", "note"])
        sink.deliver(CompletedRecord("item", "A"))
        sink.deliver(CompletedRecord("note", {"x": "1"}))
        sink.deliver(CompletedRecord("item", "B"))

        assert sink.records == {"item": ["A", "B"], "note": [{"x": "1"}]}
        assert sink.total == 3

    def test_key_order_follows_tags(self):
        sink = BufferedRecordSink(["z", "a"])

        assert list(sink.records) == ["z", "a"]


class TestCallbackRecordSink:
    """Test suite for CallbackRecordSink."""

    def test_callback_receives_values(self):
        callback = Mock()
        sink = CallbackRecordSink(callback)

        sink.deliver(CompletedRecord("item", "A"))
        sink.deliver(CompletedRecord("item", {"b": "1"}))

        assert [call.args[0] for call in callback.call_args_list] == ["A", {"b": "1"}]
        assert sink.delivered == 2

    def test_callback_errors_propagate(self):
        sink = CallbackRecordSink(Mock(side_effect=RuntimeError("stop")))

        with pytest.raises(RuntimeError, match="stop"):
            sink.deliver(CompletedRecord("item", "A"))

        assert sink.delivered == 0

    def test_callback_must_be_callable(self):
        with pytest.raises(TypeError, match="callback must be callable"):
            CallbackRecordSink("print")  # type: ignore[arg-type]
