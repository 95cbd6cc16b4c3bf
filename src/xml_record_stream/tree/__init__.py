"""Record reconstruction for streaming extraction.

Key Components:
    RecordTreeBuilder: Event-driven state machine producing completed records
    BuilderState: The builder's open leaf, active record and ancestor stack
    XMLNode: A single tag occurrence with attributes and text value
    XMLNodeTree: A node with its child subtrees, foldable into a record value
    CompletedRecord: A folded record and the tag that delimited it
"""

from .builder import BuilderState, CompletedRecord, RecordTreeBuilder
from .nodes import RecordValue, XMLNode, XMLNodeTree

__all__ = [
    "BuilderState",
    "CompletedRecord",
    "RecordTreeBuilder",
    "RecordValue",
    "XMLNode",
    "XMLNodeTree",
]
