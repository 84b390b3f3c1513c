"""Index-addressed storage for markup nodes.

Every node lives in a :class:`NodeArena` slot. Parent and child links are slot
indices, so the tree never holds reference cycles and a detached node can be
re-attached without copying. :class:`~markup_builder.tree.node.Node` objects
are thin handles onto these slots.

The arena also enforces exclusive access per record: a mutation holds its
records for writing, the renderer holds them for reading, and any conflicting
access raises :class:`ReentrantAccessError` on the spot.

Records live exactly as long as their arena, and an arena lives as long as any
node handle refers to it. Nodes created without an explicit arena get a
private mergeable one; linking two such nodes merges the smaller arena into
the larger, so a tree built that way is freed once its last handle is dropped.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from markup_builder.shared import TreeConfig, get_logger
from markup_builder.tree.errors import ReentrantAccessError


@dataclass(eq=False)
class NodeRecord:
    """Stored state of a single node."""

    tag: str
    content: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[int] = field(default_factory=list)
    parent: Optional[int] = None
    is_void_element: bool = False
    is_raw_text: bool = False

    # Access bookkeeping
    readers: int = 0
    writing: bool = False

    @property
    def access_state(self) -> str:
        if self.writing:
            return "being modified"
        if self.readers:
            return "being read"
        return "idle"


class NodeArena:
    """Owns node records and hands out stable integer slots."""

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None,
        mergeable: bool = False
    ) -> None:
        """Initialize an empty arena.

        Args:
            config: Tree rules applied to nodes in this arena
            correlation_id: Optional correlation ID for request tracking
            mergeable: Whether another arena may absorb this one when their
                nodes are linked
        """
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.mergeable = mergeable
        self.logger = get_logger(__name__, correlation_id, "node_arena")
        self._records: List[NodeRecord] = []
        # Set once absorb() has moved every record elsewhere
        self.merged_into: Optional[Tuple["NodeArena", int]] = None

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"NodeArena(nodes={len(self._records)})"

    def allocate(self, tag: str, content: str = "") -> int:
        """Store a new record and return its slot index."""
        self._records.append(NodeRecord(tag=tag, content=content))
        return len(self._records) - 1

    def record(self, index: int) -> NodeRecord:
        """Get the record stored at ``index``."""
        if not (0 <= index < len(self._records)):
            raise IndexError(f"No node at slot {index}")
        return self._records[index]

    def ancestors(self, index: int) -> Iterator[int]:
        """Yield slot indices from the parent of ``index`` up to the root."""
        parent = self.record(index).parent
        while parent is not None:
            yield parent
            parent = self._records[parent].parent

    def is_ancestor(self, candidate: int, index: int) -> bool:
        """Check whether ``candidate`` is ``index`` or one of its ancestors."""
        return candidate == index or candidate in self.ancestors(index)

    def absorb(self, other: "NodeArena") -> int:
        """Move every record of ``other`` to the end of this arena.

        Links inside the moved records are shifted by the returned offset and
        ``other`` is left empty, forwarding to this arena.

        Raises:
            ReentrantAccessError: If a record of ``other`` is being read or written
        """
        for index, record in enumerate(other._records):
            if record.writing or record.readers:
                raise ReentrantAccessError(index, record.access_state)

        offset = len(self._records)
        for record in other._records:
            if record.parent is not None:
                record.parent += offset
            record.children = [child + offset for child in record.children]
            self._records.append(record)

        moved = len(other._records)
        other._records = []
        other.merged_into = (self, offset)
        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug("Absorbed arena", extra={"nodes": moved, "offset": offset})
        return offset

    @contextmanager
    def writing(self, *indices: int) -> Iterator[List[NodeRecord]]:
        """Hold the given records exclusively for the duration of the block.

        Raises:
            ReentrantAccessError: If any record is already being read or written,
                including the same index listed twice
        """
        acquired: List[NodeRecord] = []
        try:
            for index in indices:
                record = self.record(index)
                if record.writing or record.readers:
                    if self.logger.is_enabled_for(logging.DEBUG):
                        self.logger.debug(
                            "Rejected write access",
                            extra={"node": index, "state": record.access_state},
                        )
                    raise ReentrantAccessError(index, record.access_state)
                record.writing = True
                acquired.append(record)
            yield acquired
        finally:
            for record in acquired:
                record.writing = False

    @contextmanager
    def reading(self, index: int) -> Iterator[NodeRecord]:
        """Hold a record for shared reading; readers may nest, writers may not.

        Raises:
            ReentrantAccessError: If the record is currently being written
        """
        record = self.record(index)
        if record.writing:
            if self.logger.is_enabled_for(logging.DEBUG):
                self.logger.debug(
                    "Rejected read access",
                    extra={"node": index, "state": record.access_state},
                )
            raise ReentrantAccessError(index, record.access_state)
        record.readers += 1
        try:
            yield record
        finally:
            record.readers -= 1
