"""Markup Tree Builder.

Assemble a tree of tagged nodes carrying attributes and text content, then
render it to HTML-like markup with reserved characters escaped.

Progressive API Disclosure:
- Level 1: Data-driven functions - build_tree(), render_tree(), load_tree()
- Level 2: Node handles - Node with attach/detach and render()
- Level 3: Explicit arenas and configuration - NodeArena, BuilderConfig
"""

__version__ = "0.1.0"
__author__ = "Markup Tree Builder Team"

from .api import TreeSpecError, build_tree, load_tree, load_tree_file, render_tree
from .character import escape, unescape
from .shared.config import BuilderConfig, RenderConfig, TreeConfig
from .shared.result import RenderResult
from .tree import (
    MarkupTreeError,
    Node,
    NodeArena,
    ReentrantAccessError,
    TreeCycleError,
    TreeStructureError,
    render,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: data-driven functions
    "build_tree",
    "load_tree",
    "load_tree_file",
    "render_tree",

    # Level 2: nodes and rendering
    "Node",
    "render",
    "escape",
    "unescape",

    # Level 3: arenas and configuration
    "NodeArena",
    "BuilderConfig",
    "RenderConfig",
    "TreeConfig",

    # Results and errors
    "RenderResult",
    "MarkupTreeError",
    "ReentrantAccessError",
    "TreeCycleError",
    "TreeStructureError",
    "TreeSpecError",
]
