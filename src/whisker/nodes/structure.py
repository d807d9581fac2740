"""Template structure nodes for the Whisker element tree."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from whisker.nodes.base import BlockTable, Chain, Node, Write


@dataclass(frozen=True, slots=True)
class Block(Node):
    """Named block for inheritance: {{*name}}...{{/name}}

    Renders the body of the block registered under its name in the
    resolved block table, or its own body when nothing overrides it. It
    does not change the context chain.
    """

    name: str
    body: Sequence[Node]

    def render_into(self, write: Write, chain: Chain, blocks: BlockTable) -> None:
        block = blocks.get(self.name, self)
        if self.name in blocks:
            # Same-name blocks nested in the chosen body render their own body
            blocks = MappingProxyType({k: v for k, v in blocks.items() if k != self.name})
        for node in block.body:
            node.render_into(write, chain, blocks)


def resolve_blocks(tables: Iterable[Mapping[str, Block]]) -> BlockTable:
    """Compose block tables along an inheritance chain.

    *tables* runs from the most-derived template to the root. At each step
    the ancestor's table is kept, with every entry whose name the previous
    (more derived) table also defines replaced by that definition. The
    input tables are not modified.

    Example:
        child {title, body} -> layout {title, body, footer}
        result: title/body from child, footer from layout

    """
    resolved: Mapping[str, Block] = {}
    for index, table in enumerate(tables):
        if index == 0:
            resolved = dict(table)
            continue
        resolved = {name: resolved.get(name, block) for name, block in table.items()}
    return MappingProxyType(dict(resolved))
