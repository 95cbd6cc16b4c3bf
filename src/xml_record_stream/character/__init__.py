"""Input acquisition layer.

Turns strings, bytes, paths, file-like objects and chunk iterables into an
ordered stream of bounded chunks.
"""

from .source import Chunk, SourceType, describe_source, iter_chunks

__all__ = [
    "Chunk",
    "SourceType",
    "describe_source",
    "iter_chunks",
]
