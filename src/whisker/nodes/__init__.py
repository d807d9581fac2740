"""Whisker element tree nodes.

The parser builds these immutable nodes; rendering walks them directly.

Node kinds:
- ``Text``: literal text
- ``Variable``: ``{{name}}`` / ``{{{name}}}``
- ``Section``: ``{{#name}}`` / ``{{^name}}``
- ``Block``: ``{{*name}}``

A parsed partial is spliced in as a ``whisker.template.Template``, which
follows the same ``render_into()`` protocol.
"""

from whisker.nodes.base import BlockTable, Chain, Node, Write
from whisker.nodes.control_flow import Section
from whisker.nodes.output import Text, Variable
from whisker.nodes.structure import Block, resolve_blocks

__all__ = [
    "Block",
    "BlockTable",
    "Chain",
    "Node",
    "Section",
    "Text",
    "Variable",
    "Write",
    "resolve_blocks",
]
