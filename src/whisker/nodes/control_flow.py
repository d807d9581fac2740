"""Control flow nodes for the Whisker element tree."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from whisker.nodes.base import BlockTable, Chain, Node, Write
from whisker.template.helpers import is_true, iter_section_contexts, lookup


@dataclass(frozen=True, slots=True)
class Section(Node):
    """Section: {{#name}}...{{/name}}, or inverted {{^name}}...{{/name}}.

    A visible section renders its body once per element of a sequence
    value, or once for any other value, with that value pushed onto the
    front of the context chain.
    """

    name: str
    inverted: bool
    body: Sequence[Node]

    def render_into(self, write: Write, chain: Chain, blocks: BlockTable) -> None:
        value = lookup(self.name, chain)
        if is_true(value) == self.inverted:
            return
        for ctx in iter_section_contexts(value):
            inner = (ctx, *chain)
            for node in self.body:
                node.render_into(write, inner, blocks)
