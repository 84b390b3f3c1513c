"""Command-line interface module for Markup Tree Builder.

This module provides the ``markup-builder`` tool for rendering JSON tree
descriptions and escaping or unescaping text.
"""

from .main import main

__all__ = ["main"]
