"""Output nodes for the Whisker element tree."""

from __future__ import annotations

from dataclasses import dataclass

from whisker.nodes.base import BlockTable, Chain, Node, Write
from whisker.template.helpers import lookup, to_str
from whisker.utils.html import html_escape


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Raw text between template tags."""

    value: str

    def render_into(self, write: Write, chain: Chain, blocks: BlockTable) -> None:
        write(self.value)


@dataclass(frozen=True, slots=True)
class Variable(Node):
    """Output variable: {{name}} (escaped) or {{{name}}} (raw)."""

    name: str
    escape: bool = True

    def render_into(self, write: Write, chain: Chain, blocks: BlockTable) -> None:
        text = to_str(lookup(self.name, chain))
        write(html_escape(text) if self.escape else text)
