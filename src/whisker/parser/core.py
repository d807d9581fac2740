"""Recursive-descent tree builder for Whisker templates.

Turns template source into an element tree in a single pass. The scanner
(``whisker.lexer``) finds delimiters; the parser decides what each tag
means and builds immutable nodes.

Tag Dispatch:
The first character of a trimmed tag body selects the construct:

    !   comment (discarded)
    #   section            ^   inverted section
    {   raw variable       >   partial include
    <   parent template    *   overridable block
    /   closing tag        (anything else) escaped variable

Cursor Threading:
``_parse_body()`` takes a ``Cursor`` and returns the cursor where its body
ended, so nested sections and blocks pass scan position explicitly instead
of through shared mutable state.

"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from whisker.environment.exceptions import ErrorCode, TemplateSyntaxError
from whisker.lexer import Cursor, closing_delimiter, next_token, skip_line_break
from whisker.nodes import Block, Node, Section, Text, Variable
from whisker.template.core import Template

if TYPE_CHECKING:
    from whisker.environment import Environment

logger = logging.getLogger(__name__)

COMMENT = "!"
SECTION = "#"
INVERTED = "^"
RAW = "{"
PARTIAL = ">"
PARENT = "<"
BLOCK = "*"
CLOSE = "/"


class _Opener:
    """The container tag a nested ``_parse_body()`` call must find a close for."""

    __slots__ = ("depth", "lineno", "name")

    def __init__(self, name: str, lineno: int, depth: int):
        self.name = name
        self.lineno = lineno
        self.depth = depth


class Parser:
    """Build a Template from source text.

    Thread-Safety:
        A Parser is used for exactly one ``parse()`` call. Separate parsers
        may run concurrently.

    Example:
            >>> parser = Parser(env, "{{#items}}- {{name}}\\n{{/items}}")
            >>> template = parser.parse()
            >>> template.elements
            (Section(lineno=1, name='items', inverted=False, body=(...)),)

    """

    def __init__(
        self,
        env: Environment,
        source: str,
        *,
        name: str | None = None,
        filename: str | None = None,
        directory: str = "",
        extension: str = "",
        loading: tuple[str, ...] = (),
    ):
        """Initialize parser.

        Args:
            env: Environment supplying delimiters and the partial loader
            source: Template source text
            name: Template name (for error messages)
            filename: Source filename (for error messages)
            directory: Directory partials and parents are resolved against
            extension: Extension appended to partial and parent names
            loading: Paths of the templates currently being parsed, outermost
                first; used to detect partials that include themselves
        """
        self._env = env
        self._source = source
        self._name = name
        self._filename = filename
        self._directory = directory
        self._extension = extension
        self._loading = loading
        self._open = env.open_delimiter
        self._close = env.close_delimiter

        # Accumulated while parsing
        self._blocks: dict[str, Block] = {}
        self._parent = ""
        self._depth = 0

        self._handlers: dict[str, Callable[[str, Cursor, int], tuple[Node | None, Cursor]]] = {
            COMMENT: self._parse_comment,
            SECTION: self._parse_section,
            INVERTED: self._parse_section,
            RAW: self._parse_raw_variable,
            PARTIAL: self._parse_partial,
            PARENT: self._parse_parent,
            BLOCK: self._parse_block,
        }

    def parse(self) -> Template:
        """Parse the whole source into a Template.

        Raises:
            TemplateSyntaxError: Malformed tags or unbalanced sections/blocks
            TemplateNotFoundError: A partial could not be loaded
        """
        elements, _ = self._parse_body(Cursor(), None)

        if self._parent:
            # Only blocks of an inheriting template are ever rendered
            elements = [node for node in elements if isinstance(node, Block)]

        return Template(
            self._env,
            elements,
            self._blocks,
            parent=self._parent,
            directory=self._directory,
            extension=self._extension,
            name=self._name,
            filename=self._filename,
            source=self._source,
        )

    def _parse_body(self, cursor: Cursor, opener: _Opener | None) -> tuple[list[Node], Cursor]:
        """Parse nodes until the close tag for *opener* (or end of input at top level)."""
        source = self._source
        nodes: list[Node] = []
        depth = opener.depth if opener is not None else 0

        while True:
            text_line = cursor.line
            scan = next_token(source, cursor, self._open)
            if scan.text:
                nodes.append(Text(text_line, scan.text))

            if scan.at_end:
                if opener is not None:
                    raise self._error(
                        f"unterminated container: missing closing tag for '{opener.name}'",
                        opener.lineno,
                        ErrorCode.UNTERMINATED_CONTAINER,
                    )
                return nodes, scan.cursor

            tag_line = scan.cursor.line
            delimiter = closing_delimiter(source, scan.cursor, self._close)
            scan = next_token(source, scan.cursor, delimiter)
            if scan.at_end:
                raise self._error("unterminated tag", tag_line, ErrorCode.UNTERMINATED_TAG)
            cursor = scan.cursor

            body = scan.text.strip()
            if not body:
                raise self._error("empty tag", tag_line, ErrorCode.EMPTY_TAG)

            sigil = body[0]
            if sigil == CLOSE:
                name = body[1:].strip()
                if opener is None:
                    raise self._error("unmatched close tag", tag_line, ErrorCode.UNMATCHED_CLOSE)
                if name != opener.name:
                    raise self._error(
                        f"mismatched closing tag: '{name}'", tag_line, ErrorCode.MISMATCHED_CLOSE
                    )
                return nodes, cursor

            handler = self._handlers.get(sigil)
            if handler is None:
                node: Node | None = Variable(tag_line, body)
            else:
                self._depth = depth
                node, cursor = handler(body, cursor, tag_line)
            if node is not None:
                nodes.append(node)

    def _parse_comment(self, body: str, cursor: Cursor, lineno: int) -> tuple[None, Cursor]:
        return None, cursor

    def _parse_section(self, body: str, cursor: Cursor, lineno: int) -> tuple[Section, Cursor]:
        """Parse {{#name}}...{{/name}} or {{^name}}...{{/name}}."""
        name = body[1:].strip()
        cursor = skip_line_break(self._source, cursor)
        children, cursor = self._parse_body(cursor, self._open_container(name, lineno))
        return Section(lineno, name, body[0] == INVERTED, tuple(children)), cursor

    def _parse_raw_variable(self, body: str, cursor: Cursor, lineno: int) -> tuple[Variable, Cursor]:
        """Parse {{{name}}}; the extra closing brace was consumed with the tag."""
        return Variable(lineno, body[1:].strip(), escape=False), cursor

    def _parse_partial(self, body: str, cursor: Cursor, lineno: int) -> tuple[Template, Cursor]:
        """Parse {{>name}}: load and parse the partial now, splice it in whole."""
        name = body[1:].strip()
        path = self._env.resolve_path(self._directory, name, self._extension)
        if path in self._loading:
            cycle = " -> ".join([*self._loading, path])
            raise self._error(f"circular partial: {cycle}", lineno, ErrorCode.CIRCULAR_PARTIAL)
        if len(self._loading) >= self._env.max_include_depth:
            raise self._error(
                f"maximum partial depth exceeded ({self._env.max_include_depth}) "
                f"when including '{path}'",
                lineno,
                ErrorCode.CIRCULAR_PARTIAL,
            )
        logger.debug("Including partial %s from %s", path, self._name or "(inline)")
        return self._env.load_relative(
            self._directory, name, self._extension, loading=self._loading
        ), cursor

    def _parse_parent(self, body: str, cursor: Cursor, lineno: int) -> tuple[None, Cursor]:
        """Parse {{<name}}: record the parent template; emits no node."""
        self._parent = body[1:].strip()
        return None, cursor

    def _parse_block(self, body: str, cursor: Cursor, lineno: int) -> tuple[Block, Cursor]:
        """Parse {{*name}}...{{/name}} and register it in the block table."""
        name = body[1:].strip()
        children, cursor = self._parse_body(cursor, self._open_container(name, lineno))
        block = Block(lineno, name, tuple(children))
        self._blocks[name] = block
        return block, cursor

    def _open_container(self, name: str, lineno: int) -> _Opener:
        """Start a nested section or block, enforcing the nesting limit."""
        depth = self._depth + 1
        limit = self._env.max_nesting_depth
        if depth > limit:
            raise self._error(
                f"maximum nesting depth exceeded ({limit}) at '{name}'",
                lineno,
                ErrorCode.NESTING_TOO_DEEP,
            )
        return _Opener(name, lineno, depth)

    def _error(self, message: str, lineno: int, code: ErrorCode) -> TemplateSyntaxError:
        return TemplateSyntaxError(
            message,
            lineno=lineno,
            name=self._name,
            filename=self._filename,
            source=self._source,
            code=code,
        )
