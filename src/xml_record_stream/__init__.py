"""XML Record Stream.

Extracts records from XML documents of any size. The caller names the tags
that delimit records; every complete element rooted at one of those tags is
folded into a plain value (text, attribute mapping, or mapping of child
values) and returned grouped by tag, passed to a callback, or yielded lazily,
while only one chunk of input and one record are held in memory.

Progressive API Disclosure:
- Level 1: Simple functions - get_records(), stream_records(), iter_records()
- Level 2: Configured parser - XMLRecordParser with RecordParserConfig
- Level 3: Building blocks - tokenizer backends and RecordTreeBuilder
"""

__version__ = "0.1.0"
__author__ = "XML Record Stream Team"

# Level 1 and Level 2 entry points
from .api import XMLRecordParser, get_records, iter_records, stream_records

# Configuration and errors
from .shared import (
    ConfigValidationError,
    NestedRecordError,
    RecordParserConfig,
    RecordStreamError,
    TokenizerBackend,
    TokenizerError,
)

# Level 3: building blocks
from .tree import CompletedRecord, RecordTreeBuilder, RecordValue

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "get_records",
    "stream_records",
    "iter_records",

    # Level 2: Configured parser
    "XMLRecordParser",
    "RecordParserConfig",
    "TokenizerBackend",

    # Errors
    "RecordStreamError",
    "TokenizerError",
    "NestedRecordError",
    "ConfigValidationError",

    # Level 3: building blocks
    "CompletedRecord",
    "RecordTreeBuilder",
    "RecordValue",
]
