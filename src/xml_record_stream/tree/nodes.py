"""Node types for record reconstruction.

An :class:`XMLNode` is one tag occurrence; an :class:`XMLNodeTree` pairs a node
with the subtrees of its child elements. Both know how to fold themselves into
the plain value handed to callers: a string or a string-keyed mapping.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

# A folded record: text, or a mapping from tag/attribute names to values
RecordValue = Union[str, Dict[str, "RecordValue"]]


@dataclass(eq=False)
class XMLNode:
    """A single tag occurrence with its attributes and text value.

    Only the last non-whitespace text seen while the tag is open is kept.
    """

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    is_self_closing: bool = False
    value: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate node values."""
        if not self.name:
            raise ValueError("Node name cannot be empty")

    @classmethod
    def from_event(cls, event) -> "XMLNode":
        """Create a node from an open-tag event."""
        return cls(
            name=event.name,
            attributes=dict(event.attributes),
            is_self_closing=event.is_self_closing,
        )

    def set_text(self, text: str) -> None:
        """Store the trimmed ``text``; whitespace-only text is ignored."""
        trimmed = text.strip()
        if trimmed:
            self.value = trimmed

    def fold(self) -> RecordValue:
        """Fold to the text value, or to the attributes when there is none.

        Self-closing elements always fold to their attributes.
        """
        if self.value and not self.is_self_closing:
            return self.value
        return dict(self.attributes)


@dataclass(eq=False)
class XMLNodeTree:
    """A node together with the subtrees of its child elements."""

    root: XMLNode
    children: List["XMLNodeTree"] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Tag name of the root node."""
        return self.root.name

    def append_child(self, child: "XMLNodeTree") -> None:
        """Append a completed child subtree."""
        if not isinstance(child, XMLNodeTree):
            raise TypeError("Child must be an XMLNodeTree instance")
        self.children.append(child)

    def fold(self) -> RecordValue:
        """Fold recursively into a value.

        A leaf folds like its root node. Otherwise the result maps each child's
        tag name to the child's folded value; for repeated names the last
        sibling wins.
        """
        if not self.children:
            return self.root.fold()

        return {child.name: child.fold() for child in self.children}
