"""Base node class for the Whisker element tree."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from whisker.nodes.structure import Block

# Output sink: every node writes its text through this callable
Write = Callable[[str], None]

# Context chain, innermost context first
Chain = tuple[Any, ...]

# Block name -> Block actually rendered for that name
BlockTable = Mapping[str, "Block"]


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all element tree nodes.

    All nodes track the source line that produced them.
    Nodes are immutable for thread-safety.

    """

    lineno: int

    def render_into(self, write: Write, chain: Chain, blocks: BlockTable) -> None:
        """Write this node's output for the given context chain."""
        raise NotImplementedError
