"""Build node trees from plain data and render them in one call.

A tree description is a dict::

    {
        "tag": "ul",
        "attributes": {"class": "items"},
        "children": [{"tag": "li", "content": "one"}],
    }

Optional keys are ``content``, ``attributes``, ``void``, ``raw`` and
``children``. ``Node.to_dict()`` produces the same shape.
"""

import json
import os
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import psutil

from markup_builder.shared import (
    BuilderConfig,
    DiagnosticSeverity,
    RenderResult,
    get_logger,
)
from markup_builder.tree import Node, NodeArena, count_nodes, render

_KNOWN_KEYS = frozenset({"tag", "content", "attributes", "void", "raw", "children"})

TreeData = Dict[str, Any]


class TreeSpecError(ValueError):
    """A tree description has the wrong shape."""

    def __init__(self, message: str, path: str = "$") -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


def _check_type(value: Any, expected: type, key: str, path: str) -> None:
    if not isinstance(value, expected):
        raise TreeSpecError(
            f"'{key}' must be {expected.__name__}, got {type(value).__name__}", path
        )


def _build_node(data: Any, arena: NodeArena, path: str, depth: int) -> Node:
    if not isinstance(data, dict):
        raise TreeSpecError(f"expected an object, got {type(data).__name__}", path)
    if depth > arena.config.max_depth:
        raise TreeSpecError(f"nested deeper than {arena.config.max_depth} levels", path)

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise TreeSpecError(f"unknown keys {sorted(unknown)}", path)
    if "tag" not in data:
        raise TreeSpecError("missing 'tag'", path)

    tag = data["tag"]
    content = data.get("content", "")
    attributes = data.get("attributes", {})
    children = data.get("children", [])
    _check_type(tag, str, "tag", path)
    _check_type(content, str, "content", path)
    _check_type(attributes, dict, "attributes", path)
    _check_type(children, list, "children", path)
    _check_type(data.get("void", False), bool, "void", path)
    _check_type(data.get("raw", False), bool, "raw", path)
    for name, value in attributes.items():
        if not isinstance(value, str):
            raise TreeSpecError(f"attribute '{name}' must be a string", path)

    node = Node(tag, content, arena=arena)
    if attributes:
        node.set_all_attributes(attributes)
    # Raw mode goes last so content and attributes come out literal
    if data.get("raw", False):
        node.set_raw_text(True)
    if data.get("void", False):
        node.set_void_element(True)

    for position, child_data in enumerate(children):
        child = _build_node(child_data, arena, f"{path}.children[{position}]", depth + 1)
        node.attach(child)
    return node


def build_tree(data: TreeData, arena: Optional[NodeArena] = None) -> Node:
    """Build a node tree from a tree description.

    Args:
        data: Tree description dict
        arena: Arena to allocate nodes in (a fresh mergeable one if omitted)

    Returns:
        Root node of the new tree

    Raises:
        TreeSpecError: If the description is malformed
    """
    target = arena if arena is not None else NodeArena(mergeable=True)
    return _build_node(data, target, "$", 0)


def load_tree(json_text: str, arena: Optional[NodeArena] = None) -> Node:
    """Build a node tree from a JSON tree description."""
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise TreeSpecError(f"invalid JSON: {e}") from e
    return build_tree(data, arena)


def load_tree_file(path: Union[str, Path], arena: Optional[NodeArena] = None) -> Node:
    """Build a node tree from a JSON file."""
    return load_tree(Path(path).read_text(encoding="utf-8"), arena)


def render_tree(
    tree: Union[Node, TreeData],
    separator: Optional[str] = None,
    config: Optional[BuilderConfig] = None,
    correlation_id: Optional[str] = None
) -> RenderResult:
    """Render a node or tree description and report how it went.

    Args:
        tree: Root node, or a tree description to build first
        separator: Separator override; defaults to ``config.render.separator``
        config: Builder configuration (defaults if omitted)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        RenderResult with the markup, metrics and diagnostics

    Raises:
        TreeSpecError: If ``tree`` is a malformed description
    """
    config = config or BuilderConfig()
    if correlation_id is None and config.global_.enable_correlation_tracking:
        correlation_id = str(uuid.uuid4())
    logger = get_logger(__name__, correlation_id, "render_api")

    if isinstance(tree, Node):
        root = tree
    else:
        root = build_tree(tree, NodeArena(config.tree, correlation_id))

    sep = config.render.separator if separator is None else separator
    start_memory = _get_memory_usage()
    start_time = time.perf_counter()
    output = render(root, sep)
    if config.render.trailing_newline and not output.endswith("\n"):
        output += "\n"
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    memory_used = max(0, _get_memory_usage() - start_memory)

    result = RenderResult(
        output=output,
        separator=sep,
        node_count=count_nodes(root),
        correlation_id=correlation_id,
    )
    result.performance.processing_time_ms = elapsed_ms
    result.performance.output_size_bytes = len(output.encode("utf-8"))
    result.performance.nodes_rendered = result.node_count
    result.performance.memory_used_bytes = memory_used

    _report_ignored_text_data(root, result)

    logger.info(
        "Rendered markup tree",
        extra={
            "node_count": result.node_count,
            "output_size_bytes": result.performance.output_size_bytes,
            "processing_time_ms": elapsed_ms,
        },
    )
    return result


def _get_memory_usage() -> int:
    """Get the resident memory of this process in bytes."""
    return psutil.Process(os.getpid()).memory_info().rss


def _report_ignored_text_data(root: Node, result: RenderResult) -> None:
    ignored: List[int] = [
        node.index for node in root.iter_subtree()
        if not node.tag and (node.child_count or node.attributes)
    ]
    if ignored:
        result.add_diagnostic(
            DiagnosticSeverity.WARNING,
            f"{len(ignored)} text node(s) carry attributes or children that are not rendered",
            "renderer",
            details={"nodes": ignored},
        )
