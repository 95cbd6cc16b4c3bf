"""Chunked input sources for streaming record extraction.

The parser never holds more than one chunk of raw input at a time. This module
turns the supported input types into a generator of ordered chunks that is
pulled one chunk at a time.
"""

import collections.abc
from pathlib import Path
from typing import BinaryIO, Generator, Iterable, TextIO, Union

from xml_record_stream.shared import DEFAULT_CHUNK_SIZE

Chunk = Union[str, bytes]

# Type definitions for input data
SourceType = Union[str, bytes, Path, BinaryIO, TextIO, Iterable[Chunk]]


def iter_chunks(
    source: SourceType, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Generator[Chunk, None, None]:
    """Yield the content of ``source`` as ordered, non-empty chunks.

    Args:
        source: XML content (``str``/``bytes``), a ``Path`` to a file, a binary
            or text file-like object, or an iterable of ``str``/``bytes`` chunks
        chunk_size: Maximum chunk length for sources that are read or sliced

    Yields:
        Chunks in document order

    Raises:
        TypeError: If ``source`` is not one of the supported types
        ValueError: If ``chunk_size`` is not positive
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")

    if isinstance(source, (str, bytes)):
        yield from _slice_content(source, chunk_size)
    elif isinstance(source, Path):
        yield from _read_path(source, chunk_size)
    elif hasattr(source, "read"):
        yield from _read_file(source, chunk_size)  # type: ignore[arg-type]
    elif isinstance(source, collections.abc.Iterable):
        yield from _pass_through(source)
    else:
        raise TypeError(f"Unsupported XML source type: {type(source).__name__}")


def describe_source(source: SourceType) -> str:
    """Short human readable label for ``source`` used in log records."""
    if isinstance(source, Path):
        return str(source)
    if isinstance(source, (str, bytes)):
        return f"<{type(source).__name__} content, {len(source)} units>"
    name = getattr(source, "name", None)
    if isinstance(name, str):
        return name
    return f"<{type(source).__name__}>"


def _slice_content(content: Chunk, chunk_size: int) -> Generator[Chunk, None, None]:
    for offset in range(0, len(content), chunk_size):
        yield content[offset:offset + chunk_size]


def _read_path(path: Path, chunk_size: int) -> Generator[bytes, None, None]:
    # Closed when exhausted, or when the consumer drops the generator
    with path.open("rb") as file_obj:
        yield from _read_file(file_obj, chunk_size)


def _read_file(
    file_obj: Union[BinaryIO, TextIO], chunk_size: int
) -> Generator[Chunk, None, None]:
    while True:
        chunk = file_obj.read(chunk_size)
        if not chunk:
            break
        yield chunk


def _pass_through(chunks: Iterable[Chunk]) -> Generator[Chunk, None, None]:
    for chunk in chunks:
        if not isinstance(chunk, (str, bytes)):
            raise TypeError(
                f"Chunk iterables must yield str or bytes, got {type(chunk).__name__}"
            )
        if chunk:
            yield chunk
