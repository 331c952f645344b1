"""Tree building layer for lenient markup parsing.

Key Components:
    TreeBuilder: Stack-based builder turning token sequences into forests
    HTMLNode: Element node with serialization, query and mutation operations
    BuildResult: Forest plus created/dropped node counts
"""

from .node import HTMLNode
from .builder import (
    BuildResult,
    TreeBuilder,
    build,
)

__all__ = [
    "BuildResult",
    "HTMLNode",
    "TreeBuilder",
    "build",
]
