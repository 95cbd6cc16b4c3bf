"""Tokenizer backend built on the standard library's pyexpat."""

from typing import Dict, Optional
from xml.parsers import expat

from .base import EventTokenizer

_SLASH = ord("/")
_GT = ord(">")
_QUOTES = (ord('"'), ord("'"))


def is_empty_element_tag(context: Optional[bytes]) -> bool:
    """Check whether the start tag at the head of ``context`` ends with ``/>``.

    ``context`` is the raw input starting at the ``<`` of a start tag, as
    returned by ``xmlparser.GetInputContext()`` inside a start handler. Quoted
    attribute values may contain ``>`` and are skipped. Only ASCII-compatible
    document encodings are recognized; anything else reads as not empty.
    """
    if not context:
        return False

    quote = None
    previous = None
    for byte in context:
        if quote is not None:
            if byte == quote:
                quote = None
        elif byte in _QUOTES:
            quote = byte
        elif byte == _GT:
            return previous == _SLASH
        previous = byte
    return False


class ExpatEventTokenizer(EventTokenizer):
    """Incremental tokenizer driving ``xml.parsers.expat``.

    Names are reported exactly as written (namespace prefixes included, no
    namespace processing). Comments, processing instructions and the document
    type declaration produce no events.

    Examples:
        >>> tokenizer = ExpatEventTokenizer()
        >>> [event.type.value for event in tokenizer.feed("<a x='1'>hi</a>")]
        ['open_tag', 'text', 'close_tag']
        >>> [event.type.value for event in tokenizer.close()]
        ['end']
    """

    syntax_errors = (expat.ExpatError,)

    def __init__(
        self,
        encoding: Optional[str] = None,
        validate_document_end: bool = False,
        correlation_id: Optional[str] = None
    ) -> None:
        super().__init__(encoding, validate_document_end, correlation_id)

        self._parser = expat.ParserCreate(encoding)
        self._parser.buffer_text = True
        self._parser.StartElementHandler = self._on_start_element
        self._parser.EndElementHandler = self._close_tag
        self._parser.CharacterDataHandler = self._text

    @property
    def backend_name(self) -> str:
        return "expat"

    def _feed(self, chunk) -> None:
        self._parser.Parse(chunk, False)

    def _finish(self) -> None:
        self._parser.Parse(b"", True)

    def _error_position(self, error: BaseException) -> Optional[Dict[str, int]]:
        if isinstance(error, expat.ExpatError):
            return {"line": error.lineno, "column": error.offset}
        return None

    def _on_start_element(self, name: str, attributes: Dict[str, str]) -> None:
        is_self_closing = is_empty_element_tag(self._parser.GetInputContext())
        self._open_tag(name, attributes, is_self_closing)
