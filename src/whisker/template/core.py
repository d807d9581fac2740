"""Whisker Template: parsed template ready for rendering.

A Template is the root of an element tree. It owns the top-level nodes, the
table of blocks it defines, and the name of the template it inherits from
(if any). Templates are immutable and thread-safe for concurrent rendering.

Architecture:
    ```
    Template
    ├── _env: Environment      # Loads parent templates at render time
    ├── _elements: tuple[Node] # Top-level element tree
    ├── _blocks: Mapping       # Block name -> Block defined in this template
    ├── _parent: str           # Parent template name ("" = none)
    └── _directory, _extension # Used to resolve the parent's path
    ```

Inheritance:
Rendering a template that declares ``{{<layout}}`` loads its ancestor chain
``[self, layout, ..., root]``, composes a block table in which every block
slot holds its most-derived definition, and walks the *root's* elements
with that table. The composed table is local to the render call; no parsed
template is ever modified.

StringBuilder Pattern:
``render()`` collects output with ``buf.append`` and returns
``"".join(buf)``; ``render_to()`` writes straight into a caller's stream.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

from whisker.nodes.base import BlockTable, Chain, Node, Write
from whisker.nodes.structure import Block, resolve_blocks

if TYPE_CHECKING:
    from whisker.environment import Environment

logger = logging.getLogger(__name__)


class SupportsWrite(Protocol):
    def write(self, text: str, /) -> Any: ...


class Template:
    """Parsed template ready for rendering.

    Thread-Safety:
        - Template object is immutable after construction
        - Each ``render()`` call creates local state only (buf list,
          composed block table)
        - Multiple threads can render the same template simultaneously

    Attributes:
        name: Template identifier (path for file templates)
        filename: Source file path reported by the loader
        parent: Name of the inherited template, or ``""``

    Methods:
        render(*contexts, **kwargs): Render to a string
        render_to(stream, *contexts, **kwargs): Render into a writable stream
        ancestors(): Load the inheritance chain
        resolved_blocks(): Composed block table for this template

    Example:
            >>> from whisker import Environment
            >>> t = Environment().from_string("Hello, {{name}}!")
            >>> t.render({"name": "World"})
            'Hello, World!'

            >>> t.render(name="World")  # Keyword context also works
            'Hello, World!'

    """

    __slots__ = (
        "_blocks",
        "_directory",
        "_elements",
        "_env",
        "_extension",
        "_filename",
        "_name",
        "_parent",
        "_source",
    )

    def __init__(
        self,
        env: Environment,
        elements: Sequence[Node],
        blocks: Mapping[str, Block],
        *,
        parent: str = "",
        directory: str = "",
        extension: str = "",
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
    ):
        self._env = env
        self._elements = tuple(elements)
        self._blocks: BlockTable = resolve_blocks([blocks])
        self._parent = parent
        self._directory = directory
        self._extension = extension
        self._name = name
        self._filename = filename
        self._source = source

    def __repr__(self) -> str:
        parent = f" parent={self._parent!r}" if self._parent else ""
        return f"<Template {self._name or '(inline)'!r}{parent}>"

    @property
    def environment(self) -> Environment:
        return self._env

    @property
    def name(self) -> str | None:
        """Template name."""
        return self._name

    @property
    def filename(self) -> str | None:
        """Source filename."""
        return self._filename

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def elements(self) -> tuple[Node, ...]:
        """Top-level element tree."""
        return self._elements

    @property
    def blocks(self) -> BlockTable:
        """Blocks defined in this template (read-only, last definition wins)."""
        return self._blocks

    @property
    def parent(self) -> str:
        return self._parent

    @property
    def directory(self) -> str:
        return self._directory

    @property
    def extension(self) -> str:
        return self._extension

    def ancestors(self) -> list[Template]:
        """Load the inheritance chain, most-derived first.

        Every parent is resolved relative to *this* template's directory and
        with *this* template's extension, however deep the chain goes.

        Returns:
            ``[self, parent, grandparent, ..., root]``; just ``[self]`` for a
            template without a parent.

        Raises:
            InheritanceError: An ancestor could not be loaded or parsed, or
                the chain loops back on itself.
        """
        from whisker.environment.exceptions import InheritanceError, TemplateError

        chain = [self]
        seen = [self._name] if self._name else []
        current = self
        while current.parent:
            path = self._env.resolve_path(self._directory, current.parent, self._extension)
            if path in seen:
                cycle = " -> ".join([*seen, path])
                raise InheritanceError(
                    f"circular template inheritance: {cycle}",
                    template_name=self._name,
                    suggestion="Remove one of the {{<...}} declarations in the cycle",
                )
            try:
                parent = self._env.get_template(path)
            except (TemplateError, OSError) as e:
                raise InheritanceError(
                    f"parent template '{path}' could not be loaded",
                    template_name=current.name,
                    suggestion=f"Check the {{{{<{current.parent}}}}} declaration",
                ) from e
            chain.append(parent)
            seen.append(path)
            current = parent

        if len(chain) > 1:
            logger.debug(
                "Resolved inheritance chain for %s: %s",
                self._name or "(inline)",
                " -> ".join(t.name or "(inline)" for t in chain),
            )
        return chain

    def resolved_blocks(self) -> BlockTable:
        """Block table after applying overrides along the inheritance chain."""
        return self._compose()[1]

    def _compose(self) -> tuple[Template, BlockTable]:
        if not self._parent:
            return self, self._blocks
        chain = self.ancestors()
        return chain[-1], resolve_blocks(t.blocks for t in chain)

    def render_into(self, write: Write, chain: Chain, blocks: BlockTable) -> None:
        """Render as an element of an enclosing tree.

        The enclosing template's block table is ignored: an included
        template always composes its own blocks (and its own ancestors).
        """
        layout, table = self._compose()
        for node in layout._elements:
            node.render_into(write, chain, table)

    def render(self, *contexts: Any, **kwargs: Any) -> str:
        """Render template against a context chain.

        Args:
            *contexts: Context objects, innermost (searched first) first
            **kwargs: Extra variables; they form the innermost context

        Returns:
            Rendered template as string

        Example:
            >>> t.render({"name": "World"}, defaults)
            'Hello, World!'
        """
        buf: list[str] = []
        self._render(buf.append, contexts, kwargs)
        return "".join(buf)

    def render_to(self, stream: SupportsWrite, *contexts: Any, **kwargs: Any) -> None:
        """Render template into *stream* (any object with ``write(str)``)."""
        self._render(stream.write, contexts, kwargs)

    def _render(self, write: Write, contexts: Sequence[Any], kwargs: dict[str, Any]) -> None:
        from whisker.environment.exceptions import TemplateError, TemplateRuntimeError

        chain: Chain = (kwargs, *contexts) if kwargs else tuple(contexts)
        try:
            self.render_into(write, chain, self._blocks)
        except TemplateError:
            raise
        except Exception as e:
            raise TemplateRuntimeError(
                f"{type(e).__name__}: {e}",
                template_name=self._name,
                suggestion="An object in the render context raised while being read",
            ) from e
