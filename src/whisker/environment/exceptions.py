"""Exceptions for the Whisker template system.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Template not found by loader
├── TemplateSyntaxError       # Parse-time syntax error
└── TemplateRuntimeError      # Render-time error with context
    └── InheritanceError      # Ancestor template could not be loaded

Parse-time problems are raised from ``Environment.from_string()`` and
``Environment.get_template()`` (and from the partials they pull in).
Render-time problems are raised from ``Template.render()``; the most
common one is a missing or broken parent template, because parents are
resolved when a child is rendered, not when it is parsed.

Example:
    ```
    Syntax Error: mismatched closing tag: 'items'
      --> page.html:3
       |
      3 | {{/items}}
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------


class ErrorCode(Enum):
    """Searchable error codes for Whisker template errors.

    Format: W-{CATEGORY}-{NUMBER}
    Categories: PAR (parser), RUN (runtime), TPL (template loading)
    """

    # Parser errors (W-PAR-xxx)
    EMPTY_TAG = "W-PAR-001"
    UNTERMINATED_TAG = "W-PAR-002"
    UNTERMINATED_CONTAINER = "W-PAR-003"
    MISMATCHED_CLOSE = "W-PAR-004"
    UNMATCHED_CLOSE = "W-PAR-005"
    CIRCULAR_PARTIAL = "W-PAR-006"
    NESTING_TOO_DEEP = "W-PAR-007"

    # Runtime errors (W-RUN-xxx)
    RUNTIME_ERROR = "W-RUN-001"
    INHERITANCE = "W-RUN-002"

    # Template loading errors (W-TPL-xxx)
    TEMPLATE_NOT_FOUND = "W-TPL-001"

    @property
    def category(self) -> str:
        """Error category (e.g., 'parser', 'runtime', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source context around an error line.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int

    def format(self) -> str:
        """Format snippet with line numbers, marking the error line with ``>``."""
        parts: list[str] = ["   |"]
        for lineno, content in self.lines:
            marker = ">" if lineno == self.error_line else " "
            parts.append(f"{marker}{lineno:>3} | {content}")
        parts.append("   |")
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
) -> SourceSnippet:
    """Build a SourceSnippet from template source.

    Args:
        source: Full template source text.
        error_line: 1-based line number of the error.
        context_lines: Number of lines to show before/after the error line.

    Returns:
        SourceSnippet with surrounding context lines.
    """
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line)


class TemplateError(Exception):
    """Base exception for all Whisker template errors.

    All template-related exceptions inherit from this class, enabling
    broad exception handling:

        >>> try:
        ...     template.render(data)
        ... except TemplateError as e:
        ...     log.error(f"Template error: {e}")

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a one-line-header summary prefixed with its code."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class TemplateNotFoundError(TemplateError):
    """Template not found by the configured loader.

    Example:
            >>> env.get_template("nonexistent.html")
        TemplateNotFoundError: Template 'nonexistent.html' not found in: templates
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateSyntaxError(TemplateError):
    """Parse-time syntax error in template source.

    ``lineno`` is the 1-based line of the offending tag. When ``source`` is
    available the message includes a snippet of the surrounding lines.
    """

    code: ErrorCode | None = None

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.filename = filename
        self.source = source
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    @property
    def location(self) -> str:
        location = self.filename or self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
        return location

    def _format_message(self) -> str:
        header = f"Syntax Error: {self.message}\n  --> {self.location}"

        if self.source and self.lineno:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                snippet = build_source_snippet(self.source, self.lineno, context_lines=0)
                return header + "\n" + snippet.format()

        return header

    def format_compact(self) -> str:
        """Format as ``CODE: line N: message``."""
        code_prefix = f"{self.code.value}: " if self.code else ""
        return f"{code_prefix}line {self.lineno}: {self.message} ({self.location})"


class TemplateRuntimeError(TemplateError):
    """Render-time error with debugging context.

    Output Format:
            ```
            Runtime Error: parent template 'layout.html' could not be loaded
              Location: page.html
              Suggestion: Check the {{<layout}} declaration in page.html
            ```

    Attributes:
        message: Error description
        template_name: Name of the template being rendered
        lineno: Line number in template source, when known
        suggestion: Actionable fix suggestion
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        suggestion: str | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]

        if self.template_name or self.lineno:
            loc = self.template_name or "<template>"
            if self.lineno:
                loc += f":{self.lineno}"
            parts.append(f"  Location: {loc}")

        if self.suggestion:
            parts.append(f"  Suggestion: {self.suggestion}")

        return "\n".join(parts)


class InheritanceError(TemplateRuntimeError):
    """An ancestor template could not be loaded, parsed, or forms a cycle.

    Raised while rendering a template that declares ``{{<parent}}``. The
    underlying loader or syntax error is available as ``__cause__``.
    """

    code: ErrorCode | None = ErrorCode.INHERITANCE
