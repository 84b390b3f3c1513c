"""Markup nodes and the operations that link them into a tree.

A :class:`Node` is a handle onto a record in a
:class:`~markup_builder.tree.arena.NodeArena`. Any number of handles may point
at the same record; they compare equal, and a mutation through one is visible
through all of them. Two separately constructed nodes are never equal, even
with identical tag, content and attributes.

Content and attribute values are stored escaped unless the node is in raw
text mode, so rendering never escapes anything itself.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from markup_builder.character import escape, unescape
from markup_builder.shared import get_logger
from markup_builder.tree.arena import NodeArena, NodeRecord
from markup_builder.tree.errors import (
    ArenaMismatchError,
    TreeCycleError,
    TreeStructureError,
)
from markup_builder.tree.renderer import render

AttributeInput = Union[Mapping[str, str], Iterable[Tuple[str, str]]]

logger = get_logger(__name__, component="node")


def _require_str(value: Any, what: str) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a string, got {type(value).__name__}")


def _attribute_pairs(attributes: AttributeInput) -> List[Tuple[str, str]]:
    if isinstance(attributes, Mapping):
        pairs = list(attributes.items())
    else:
        pairs = [tuple(pair) for pair in attributes]
    for pair in pairs:
        if len(pair) != 2:
            raise ValueError(f"Attribute entries must be (name, value) pairs: {pair!r}")
        _require_str(pair[0], "Attribute name")
        _require_str(pair[1], "Attribute value")
    return pairs


def _merge_arenas(mine: NodeArena, theirs: NodeArena) -> None:
    if not (mine.mergeable or theirs.mergeable):
        raise ArenaMismatchError("Cannot attach a node from a different arena")
    # Move the smaller mergeable arena; an explicit arena is never moved
    if theirs.mergeable and (not mine.mergeable or len(theirs) <= len(mine)):
        mine.absorb(theirs)
    else:
        theirs.absorb(mine)


class Node:
    """A markup element, or a plain text run when the tag is empty.

    Example:
        >>> page = Node("div", "<x>").with_attributes({"id": "main"})
        >>> page.render()
        '<div id="main">&lt;x&gt;</div>'
    """

    __slots__ = ("_home", "_slot")

    def __init__(
        self,
        tag: str,
        content: str = "",
        arena: Optional[NodeArena] = None
    ) -> None:
        """Create a detached node.

        Args:
            tag: Tag name, stored verbatim; empty for a text-only node
            content: Literal content, escaped before it is stored
            arena: Arena to allocate the node in (a private mergeable arena if
                omitted)
        """
        _require_str(tag, "Tag")
        _require_str(content, "Content")
        self._home = arena if arena is not None else NodeArena(mergeable=True)
        self._slot = self._home.allocate(tag, escape(content))

    @classmethod
    def _handle(cls, arena: NodeArena, index: int) -> "Node":
        node = cls.__new__(cls)
        node._home = arena
        node._slot = index
        return node

    def _locate(self) -> Tuple[NodeArena, int]:
        # Follow arenas that were absorbed since this handle was made
        arena, index = self._home, self._slot
        while arena.merged_into is not None:
            arena, offset = arena.merged_into
            index += offset
        self._home, self._slot = arena, index
        return arena, index

    @property
    def _arena(self) -> NodeArena:
        return self._locate()[0]

    @property
    def _index(self) -> int:
        return self._locate()[1]

    @property
    def _record(self) -> NodeRecord:
        arena, index = self._locate()
        return arena.record(index)

    @property
    def arena(self) -> NodeArena:
        return self._arena

    @property
    def index(self) -> int:
        """Slot of this node in its arena."""
        return self._index

    # Identity

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._record is other._record

    # Records keep their identity when arenas merge
    def __hash__(self) -> int:
        return hash(id(self._record))

    # Copies are new handles onto the same record
    def __copy__(self) -> "Node":
        return Node._handle(self._arena, self._index)

    def __deepcopy__(self, memo: Dict[int, Any]) -> "Node":
        return Node._handle(self._arena, self._index)

    def __repr__(self) -> str:
        record = self._record
        lines = [f"Node[{record.tag!r}]"]
        lines.append("  parent: HAS" if record.parent is not None else "  parent: None")
        if record.content:
            lines.append(f"  content: {record.content!r}")
        if record.attributes:
            lines.append(f"  attributes: {record.attributes!r}")
        if record.children:
            lines.append(f"  children<{len(record.children)}>")
        return "\n".join(lines)

    # Read accessors

    @property
    def tag(self) -> str:
        return self._record.tag

    @property
    def content(self) -> str:
        """Stored content: escaped, or literal in raw text mode."""
        return self._record.content

    @property
    def attributes(self) -> Dict[str, str]:
        """Copy of the stored attributes in insertion order."""
        return dict(self._record.attributes)

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._record.attributes.get(name, default)

    @property
    def is_void_element(self) -> bool:
        return self._record.is_void_element

    @property
    def is_raw_text(self) -> bool:
        return self._record.is_raw_text

    @property
    def parent(self) -> Optional["Node"]:
        parent = self._record.parent
        if parent is None:
            return None
        return Node._handle(self._arena, parent)

    @property
    def children(self) -> List["Node"]:
        """Snapshot of the children; changing the list leaves the tree alone."""
        return [Node._handle(self._arena, index) for index in self._record.children]

    @property
    def child_count(self) -> int:
        return len(self._record.children)

    @property
    def depth(self) -> int:
        """Number of ancestors (a root has depth 0)."""
        return sum(1 for _ in self._arena.ancestors(self._index))

    def iter_subtree(self) -> Iterator["Node"]:
        """Yield this node and all descendants in document order."""
        stack = [self._index]
        while stack:
            index = stack.pop()
            yield Node._handle(self._arena, index)
            stack.extend(reversed(self._arena.record(index).children))

    # Content and attribute mutation

    def _store(self, record: NodeRecord, value: str) -> str:
        return value if record.is_raw_text else escape(value)

    def set_content(self, text: str) -> "Node":
        """Replace the content; escaped unless in raw text mode."""
        _require_str(text, "Content")
        with self._arena.writing(self._index) as (record,):
            record.content = self._store(record, text)
        return self

    def set_all_attributes(self, attributes: AttributeInput) -> "Node":
        """Replace every attribute with ``attributes``."""
        pairs = _attribute_pairs(attributes)
        with self._arena.writing(self._index) as (record,):
            record.attributes = {name: self._store(record, value) for name, value in pairs}
        return self

    def set_attribute(self, name: str, value: str) -> "Node":
        """Insert or overwrite a single attribute, keeping the others."""
        return self.set_attributes([(name, value)])

    def set_attributes(self, attributes: AttributeInput) -> "Node":
        """Insert or overwrite several attributes, keeping the others."""
        pairs = _attribute_pairs(attributes)
        with self._arena.writing(self._index) as (record,):
            for name, value in pairs:
                record.attributes[name] = self._store(record, value)
        return self

    def set_raw_text(self, flag: bool) -> "Node":
        """Switch raw text mode.

        Turning raw mode on unescapes the stored content and attribute values
        so they render literally. Turning it off leaves stored data as is.
        """
        with self._arena.writing(self._index) as (record,):
            if flag and not record.is_raw_text:
                record.content = unescape(record.content)
                record.attributes = {
                    name: unescape(value) for name, value in record.attributes.items()
                }
                if logger.is_enabled_for(logging.DEBUG):
                    logger.debug(
                        "Unescaped stored values for raw text mode",
                        extra={"node": self._index, "attributes": len(record.attributes)},
                    )
            record.is_raw_text = bool(flag)
        return self

    def set_void_element(self, flag: bool) -> "Node":
        """Mark the node as rendering an opening tag only."""
        with self._arena.writing(self._index) as (record,):
            record.is_void_element = bool(flag)
        return self

    # Fluent aliases

    def with_attributes(self, attributes: Optional[AttributeInput] = None, **kwargs: str) -> "Node":
        """Replace all attributes and return the node for chaining."""
        pairs = _attribute_pairs(attributes) if attributes is not None else []
        pairs.extend(kwargs.items())
        return self.set_all_attributes(pairs)

    def void(self, flag: bool = True) -> "Node":
        return self.set_void_element(flag)

    def raw(self, flag: bool = True) -> "Node":
        return self.set_raw_text(flag)

    def append(self, child: "Node") -> "Node":
        """Attach ``child`` and return this node for chaining."""
        self.attach(child)
        return self

    # Tree mutation

    def attach(self, child: "Node") -> None:
        """Append ``child`` to this node's children.

        A child that already has a parent is moved (or rejected under the
        ``reject`` reattach policy).

        Raises:
            TreeCycleError: If ``child`` is this node or one of its ancestors
            ArenaMismatchError: If ``child`` belongs to a different arena and
                neither arena is mergeable
            TreeStructureError: If ``child`` has a parent and moving is disabled
        """
        if not isinstance(child, Node):
            raise TypeError("Child must be a Node instance")
        if child._arena is not self._arena:
            _merge_arenas(self._arena, child._arena)

        arena = self._arena
        if arena.config.enable_cycle_check and arena.is_ancestor(child._index, self._index):
            raise TreeCycleError(
                f"Attaching <{child.tag}> to <{self.tag}> would create a cycle"
            )

        previous = child._record.parent
        if previous is not None and arena.config.reattach_policy == "reject":
            raise TreeStructureError(
                f"<{child.tag}> already has a parent; detach it first"
            )

        indices = [self._index, child._index]
        if previous is not None and previous != self._index:
            indices.append(previous)

        with arena.writing(*indices) as records:
            parent_record, child_record = records[0], records[1]
            if previous is not None:
                previous_record = parent_record if previous == self._index else records[2]
                previous_record.children.remove(child._index)
                if logger.is_enabled_for(logging.DEBUG):
                    logger.debug(
                        "Moved node from previous parent",
                        extra={"node": child._index, "previous_parent": previous},
                    )
            child_record.parent = self._index
            parent_record.children.append(child._index)

    add_child = attach

    def detach_at(self, index: int) -> Optional["Node"]:
        """Remove and return the child at ``index``, or None if out of range."""
        with self._arena.writing(self._index) as (record,):
            if not (0 <= index < len(record.children)):
                return None
            child_index = record.children[index]
            with self._arena.writing(child_index) as (child_record,):
                record.children.pop(index)
                child_record.parent = None
        return Node._handle(self._arena, child_index)

    def detach(self, child: "Node") -> bool:
        """Remove ``child`` if it is one of this node's children."""
        if not isinstance(child, Node) or child._arena is not self._arena:
            return False
        with self._arena.writing(self._index) as (record,):
            if child._index not in record.children:
                return False
            with self._arena.writing(child._index) as (child_record,):
                record.children.remove(child._index)
                child_record.parent = None
        return True

    remove_child = detach

    def detach_all(self) -> None:
        """Remove every child."""
        with self._arena.writing(self._index) as (record,):
            with self._arena.writing(*record.children) as child_records:
                for child_record in child_records:
                    child_record.parent = None
                record.children.clear()

    # Output

    def render(self, separator: str = "") -> str:
        """Render this node and its subtree to markup."""
        return render(self, separator)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to the dictionary shape read by ``build_tree``.

        A node whose stored values are not plain escaped text (it left raw
        mode after literal values were stored) is dumped as raw with the
        stored values, so rebuilding it renders the same markup.
        """
        record = self._record
        literal = record.is_raw_text or not all(
            value == escape(unescape(value))
            for value in (record.content, *record.attributes.values())
        )
        content = record.content if literal else unescape(record.content)
        attributes = record.attributes if literal else {
            name: unescape(value) for name, value in record.attributes.items()
        }
        result: Dict[str, Any] = {"tag": record.tag}
        if content:
            result["content"] = content
        if attributes:
            result["attributes"] = dict(attributes)
        if record.is_void_element:
            result["void"] = True
        if literal:
            result["raw"] = True
        if record.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result
