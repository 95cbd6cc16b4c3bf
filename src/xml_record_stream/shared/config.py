"""Configuration classes for streaming record extraction.

This module provides the immutable configuration object that controls which
tags delimit records, how the input is chunked and which tokenizer backend
produces the event stream.
"""

import json
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

DEFAULT_CHUNK_SIZE = 1024


class TokenizerBackend(Enum):
    """Tokenizer backend options."""

    EXPAT = "expat"   # Standard library pyexpat, default
    LXML = "lxml"     # lxml feed parser, optional extra


class ConfigError(ValueError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def normalize_tags(tags: Iterable[str]) -> Tuple[str, ...]:
    """Turn ``tags`` into an ordered tuple without duplicates.

    Raises:
        ConfigValidationError: If ``tags`` is a bare string, empty, or holds
            anything but non-empty strings
    """
    if isinstance(tags, (str, bytes)):
        raise ConfigValidationError(
            "tags must be a collection of tag names, not a single string",
            field_name="tags",
            suggestions=[f"Use tags=[{tags!r}]"],
        )

    ordered: List[str] = []
    for tag in tags:
        if not isinstance(tag, str) or not tag:
            raise ConfigValidationError(
                f"Record tag names must be non-empty strings, got {tag!r}",
                field_name="tags",
            )
        if tag not in ordered:
            ordered.append(tag)

    if not ordered:
        raise ConfigValidationError(
            "At least one record tag is required",
            field_name="tags",
            suggestions=["Pass the name of the element that wraps each record"],
        )
    return tuple(ordered)


@dataclass(frozen=True)
class RecordParserConfig:
    """Configuration for one record parser.

    Attributes:
        tags: Ordered record tag names; duplicates are collapsed
        chunk_size: Units (bytes or characters) pulled from the source at a time
        encoding: Overrides the encoding declared by the document
        backend: Tokenizer producing the event stream
        validate_document_end: Report an incomplete document at end of input
            as a tokenizer error instead of dropping the unfinished tail
        strict_nesting: Raise when a record tag opens inside another record
            instead of discarding the outer record's progress
        track_memory: Record the process memory delta in the statistics
            (requires psutil)
    """

    tags: Tuple[str, ...]
    chunk_size: int = DEFAULT_CHUNK_SIZE
    encoding: Optional[str] = None
    backend: TokenizerBackend = TokenizerBackend.EXPAT
    validate_document_end: bool = False
    strict_nesting: bool = False
    track_memory: bool = False

    def __post_init__(self) -> None:
        """Validate and normalize the configuration."""
        object.__setattr__(self, "tags", normalize_tags(self.tags))

        if isinstance(self.backend, str):
            try:
                object.__setattr__(self, "backend", TokenizerBackend(self.backend))
            except ValueError as e:
                raise ConfigValidationError(
                    f"Unknown tokenizer backend: {self.backend!r}",
                    field_name="backend",
                    suggestions=[b.value for b in TokenizerBackend],
                ) from e
        if not isinstance(self.backend, TokenizerBackend):
            raise ConfigValidationError(
                f"Unknown tokenizer backend: {self.backend!r}", field_name="backend"
            )

        if isinstance(self.chunk_size, bool) or not isinstance(self.chunk_size, int):
            raise ConfigValidationError(
                "chunk_size must be an integer", field_name="chunk_size"
            )
        if self.chunk_size <= 0:
            raise ConfigValidationError("chunk_size must be > 0", field_name="chunk_size")

        if self.encoding is not None and not self.encoding:
            raise ConfigValidationError(
                "encoding must be a non-empty string or None", field_name="encoding"
            )

    def is_record_tag(self, name: str) -> bool:
        """Check whether ``name`` delimits a record."""
        return name in self.tags

    def override(self, **kwargs: Any) -> "RecordParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = RecordParserConfig(tags=("item",))
            >>> config.override(chunk_size=4096).chunk_size
            4096
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, tuple):
                value = list(value)
            result[f.name] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecordParserConfig":
        """Create configuration from dictionary; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}"
            )
        if "tags" not in data:
            raise ConfigValidationError("tags is required", field_name="tags")
        return cls(**data)

    @classmethod
    def from_json(cls, json_str: str) -> "RecordParserConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))
