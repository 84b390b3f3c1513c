"""Level-1 API: build trees from plain data and render them in one call."""

from .loader import (
    TreeSpecError,
    build_tree,
    load_tree,
    load_tree_file,
    render_tree,
)

__all__ = [
    "TreeSpecError",
    "build_tree",
    "load_tree",
    "load_tree_file",
    "render_tree",
]
