"""Structural events produced by the tokenizer backends.

The tree builder only ever sees these five event kinds, in document order,
regardless of which backend produced them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union


class EventType(Enum):
    """Kinds of tokenizer events."""

    OPEN_TAG = "open_tag"
    TEXT = "text"
    CLOSE_TAG = "close_tag"
    ERROR = "error"
    END = "end"


@dataclass(frozen=True)
class OpenTagEvent:
    """A start tag (or an empty-element tag) was read."""

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    is_self_closing: bool = False
    type: EventType = field(default=EventType.OPEN_TAG, init=False)


@dataclass(frozen=True)
class TextEvent:
    """Character data between two tags, entity references already decoded."""

    text: str
    type: EventType = field(default=EventType.TEXT, init=False)


@dataclass(frozen=True)
class CloseTagEvent:
    """An end tag was read; empty-element tags produce one as well."""

    name: str
    type: EventType = field(default=EventType.CLOSE_TAG, init=False)


@dataclass(frozen=True)
class ErrorEvent:
    """The tokenizer rejected the input; always the last event of a run."""

    cause: BaseException
    position: Optional[Dict[str, int]] = None
    type: EventType = field(default=EventType.ERROR, init=False)

    @property
    def message(self) -> str:
        """Readable description of the failure."""
        return str(self.cause) or type(self.cause).__name__


@dataclass(frozen=True)
class EndEvent:
    """End of input; no further events follow."""

    type: EventType = field(default=EventType.END, init=False)


TokenizerEvent = Union[OpenTagEvent, TextEvent, CloseTagEvent, ErrorEvent, EndEvent]
