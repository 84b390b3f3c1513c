"""Exceptions raised by the markup tree.

Lookups that simply find nothing (detaching a missing child, an out-of-range
index) are not errors and return ``None``/``False`` instead.
"""


class MarkupTreeError(RuntimeError):
    """Base exception for markup tree failures."""


class ReentrantAccessError(MarkupTreeError):
    """A node was accessed while another operation held it exclusively.

    Raised immediately instead of waiting; the offending operation leaves the
    tree unchanged.
    """

    def __init__(self, index: int, state: str) -> None:
        super().__init__(f"Node #{index} is already {state}")
        self.index = index
        self.state = state


class TreeStructureError(MarkupTreeError, ValueError):
    """A mutation would break the tree's structural rules."""


class TreeCycleError(TreeStructureError):
    """A node would become, or was found to be, its own descendant."""


class ArenaMismatchError(TreeStructureError):
    """Nodes from different arenas cannot be linked together."""
