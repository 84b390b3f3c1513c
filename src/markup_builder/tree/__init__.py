"""Markup tree model and renderer.

Key Components:
    Node: Handle onto a markup element with attributes, content and children
    NodeArena: Index-addressed storage owning every node record
    render: Serializer turning a subtree into markup text
"""

from .arena import NodeArena, NodeRecord
from .errors import (
    ArenaMismatchError,
    MarkupTreeError,
    ReentrantAccessError,
    TreeCycleError,
    TreeStructureError,
)
from .node import Node
from .renderer import count_nodes, render

__all__ = [
    "ArenaMismatchError",
    "MarkupTreeError",
    "Node",
    "NodeArena",
    "NodeRecord",
    "ReentrantAccessError",
    "TreeCycleError",
    "TreeStructureError",
    "count_nodes",
    "render",
]
