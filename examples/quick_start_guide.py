#!/usr/bin/env python3
"""
Quick Start Guide for the Markup Tree Builder.

This example walks through building a page node by node, loading the same
kind of tree from a JSON description, and rendering it with metrics.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from markup_builder import (
    BuilderConfig,
    Node,
    NodeArena,
    MarkupTreeError,
    load_tree_file,
    render_tree,
)


def build_by_hand_example():
    """Build a small page with the node API."""

    print("QUICK START - Markup Tree Builder")
    print("=" * 40)

    print("\nStep 1: Building nodes")
    print("-" * 30)

    arena = NodeArena()
    page = Node("html", arena=arena)
    head = (
        Node("head", arena=arena)
        .append(Node("title", "Fish & Chips", arena=arena))
        .append(Node("meta", arena=arena).with_attributes(charset="utf-8").void())
    )
    body = Node("body", arena=arena)
    body.attach(Node("p", "Prices in <b>bold</b> are new", arena=arena))
    body.attach(Node("script", "if (a < b) { go(); }", arena=arena).raw())
    page.append(head).append(body)

    print(f"Created {len(arena)} nodes")
    print(page.render("\n"))

    print("\nStep 2: Moving nodes")
    print("-" * 30)

    footer = Node("footer", arena=arena)
    page.attach(footer)
    body.attach(footer)
    print(f"Footer parent is now <{footer.parent.tag}>")

    try:
        footer.attach(page)
    except MarkupTreeError as e:
        print(f"Refused: {e}")

    return page


def load_from_json_example():
    """Render the bundled JSON description with the pretty preset."""

    print("\nStep 3: Rendering a JSON description")
    print("-" * 30)

    root = load_tree_file(Path(__file__).parent / "page.json")
    result = render_tree(root, config=BuilderConfig.pretty())

    print(result.output, end="")
    print(f"Rendered {result.node_count} nodes in {result.processing_time_ms:.3f}ms")
    for diagnostic in result.diagnostics:
        print(f"Warning: {diagnostic.message}")


def main():
    """Run all quick start examples."""
    build_by_hand_example()
    load_from_json_example()


if __name__ == "__main__":
    main()
