"""Markup rendering.

Values are written exactly as stored on each node; escaping already happened
when content and attributes were set.

Layout for a node with tag ``t`` and separator ``s``::

    <t a="v">content s child1 s child2 s </t>    (children, not void)
    <t a="v">content</t>                         (no children, not void)
    <t a="v">content s child1 s                  (void, children or not)

A node with an empty tag renders as its content alone.

The subtree is walked with an explicit stack, so nesting depth is bounded
only by memory.
"""

from contextlib import ExitStack
from typing import TYPE_CHECKING, List, Set, Tuple

from markup_builder.tree.errors import TreeCycleError

if TYPE_CHECKING:
    from markup_builder.tree.node import Node

_OPEN, _CLOSE, _SEPARATOR = range(3)


def _cycle_error(index: int) -> TreeCycleError:
    return TreeCycleError(f"Node #{index} is reachable from itself")


def render(node: "Node", separator: str = "") -> str:
    """Render ``node`` and its subtree.

    Every visited node is held for reading until rendering finishes.

    Args:
        node: Root of the subtree to render
        separator: Text inserted between fragments

    Returns:
        Markup string

    Raises:
        ReentrantAccessError: If a node is being modified while rendering
        TreeCycleError: If the subtree loops back on itself (only possible with
            the cycle check disabled)
    """
    if not isinstance(separator, str):
        raise TypeError("Separator must be a string")
    arena = node.arena
    parts: List[str] = []
    seen: Set[int] = set()
    stack: List[Tuple[int, int]] = [(_OPEN, node.index)]

    with ExitStack() as held:
        while stack:
            step, index = stack.pop()
            if step == _SEPARATOR:
                parts.append(separator)
                continue

            if step == _CLOSE:
                record = arena.record(index)
                if record.is_void_element:
                    parts.append(separator)
                elif record.children:
                    parts.append(separator)
                    parts.append(f"</{record.tag}>")
                else:
                    parts.append(f"</{record.tag}>")
                continue

            if index in seen:
                raise _cycle_error(index)
            seen.add(index)
            record = held.enter_context(arena.reading(index))
            if not record.tag:
                parts.append(record.content)
                continue

            parts.append(f"<{record.tag}")
            for name, value in record.attributes.items():
                parts.append(f' {name}="{value}"')
            parts.append(">")
            parts.append(record.content)

            stack.append((_CLOSE, index))
            for child_index in reversed(record.children):
                stack.append((_OPEN, child_index))
                stack.append((_SEPARATOR, index))

    return "".join(parts)


def count_nodes(node: "Node") -> int:
    """Count the nodes ``render`` will visit (text nodes skip their children)."""
    arena = node.arena
    seen: Set[int] = set()
    stack = [node.index]
    while stack:
        index = stack.pop()
        if index in seen:
            raise _cycle_error(index)
        seen.add(index)
        record = arena.record(index)
        if record.tag:
            stack.extend(record.children)
    return len(seen)
