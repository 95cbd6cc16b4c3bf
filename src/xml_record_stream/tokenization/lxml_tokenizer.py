"""Tokenizer backend built on lxml's feed parser interface."""

from typing import Dict, Optional

from .base import EventTokenizer

try:
    from lxml import etree
    HAS_LXML = True
except ImportError:
    etree = None
    HAS_LXML = False


def local_name(name: str) -> str:
    """Strip the ``{namespace-uri}`` part lxml puts in front of names."""
    if name.startswith("{"):
        return name.split("}", 1)[1]
    return name


class _EventTarget:
    """Parser target forwarding lxml callbacks to the tokenizer."""

    def __init__(self, tokenizer: "LxmlEventTokenizer") -> None:
        self._tokenizer = tokenizer

    def start(self, tag: str, attrib: Dict[str, str]) -> None:
        attributes = {local_name(key): value for key, value in attrib.items()}
        self._tokenizer._open_tag(local_name(tag), attributes, False)

    def end(self, tag: str) -> None:
        self._tokenizer._close_tag(local_name(tag))

    def data(self, data: str) -> None:
        self._tokenizer._text(data)

    def close(self) -> None:
        return None


class LxmlEventTokenizer(EventTokenizer):
    """Incremental tokenizer driving ``lxml.etree.XMLParser`` with a target.

    Namespace-qualified names are reduced to their local part. lxml does not
    tell empty-element tags apart from start/end pairs, so open-tag events
    always report ``is_self_closing=False``; an empty element carries no text,
    so its folded value is the same either way.
    """

    def __init__(
        self,
        encoding: Optional[str] = None,
        validate_document_end: bool = False,
        correlation_id: Optional[str] = None
    ) -> None:
        if not HAS_LXML:
            raise ImportError(
                "The lxml backend requires lxml; install xml-record-stream[lxml]"
            )
        super().__init__(encoding, validate_document_end, correlation_id)
        self.syntax_errors = (etree.XMLSyntaxError,)
        self._parser = etree.XMLParser(target=_EventTarget(self), encoding=encoding)

    @property
    def backend_name(self) -> str:
        return "lxml"

    def _feed(self, chunk) -> None:
        self._parser.feed(chunk)

    def _finish(self) -> None:
        self._parser.close()

    def _error_position(self, error: BaseException) -> Optional[Dict[str, int]]:
        position = getattr(error, "position", None)
        if position:
            line, column = position
            return {"line": line, "column": column}
        return None
