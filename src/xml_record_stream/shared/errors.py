"""Exceptions raised while streaming records out of a document."""

from typing import Any, Dict, Optional


class RecordStreamError(Exception):
    """Base exception for record extraction failures."""


class TokenizerError(RecordStreamError):
    """Fatal error reported by the tokenizer; aborts the whole run."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        position: Optional[Dict[str, int]] = None
    ) -> None:
        super().__init__(message)
        self.cause = cause
        self.position = position

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "message": str(self),
            "cause_type": type(self.cause).__name__ if self.cause else None,
            "position": self.position,
        }


class NestedRecordError(RecordStreamError):
    """A record tag opened while another record was still in progress."""

    def __init__(self, outer_tag: str, inner_tag: str) -> None:
        super().__init__(
            f"Record tag <{inner_tag}> opened inside unfinished record <{outer_tag}>"
        )
        self.outer_tag = outer_tag
        self.inner_tag = inner_tag
