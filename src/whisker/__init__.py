"""Whisker: a mustache-style template engine with template inheritance.

Templates are parsed once into an immutable element tree and rendered any
number of times against a chain of data contexts.

Quickstart:
    >>> import whisker
    >>> whisker.render("Hello, {{name}}!", {"name": "World"})
    'Hello, World!'

File-based templates:
    >>> from whisker import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("templates/"))
    >>> template = env.get_template("pages/home.html")
    >>> template.render(page, site)

Syntax:
    {{name}}                 escaped variable (dotted paths: {{a.b.c}})
    {{{name}}}               raw variable
    {{#name}}..{{/name}}     section: hidden when falsy, repeated per list item
    {{^name}}..{{/name}}     inverted section: shown only when falsy
    {{!comment}}             comment
    {{>name}}                partial, parsed from <dir>/<name><ext>
    {{<name}}                inherit the layout <dir>/<name><ext>
    {{*name}}..{{/name}}     block a child template may override

Architecture:
Template Source → Lexer → Parser → Element Tree → render_into() → text

Thread-Safety:
Parsed templates are immutable. Rendering uses only local state, so one
template may be rendered from many threads at once.

"""

from __future__ import annotations

from typing import Any

from whisker.environment import (
    TEMPLATE_DIR_ENV,
    ChoiceLoader,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    FunctionLoader,
    InheritanceError,
    Loader,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
)
from whisker.template import MISSING, Template, is_true, lookup, resolve_member
from whisker.utils.html import html_escape

__version__ = "0.1.0"

__all__ = [
    "MISSING",
    "TEMPLATE_DIR_ENV",
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "InheritanceError",
    "Loader",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "__version__",
    "html_escape",
    "is_true",
    "lookup",
    "parse_file",
    "parse_string",
    "render",
    "render_file",
    "resolve_member",
]


def parse_string(
    source: str,
    *,
    directory: str | None = None,
    extension: str = "",
) -> Template:
    """Parse *source* with a default file-system Environment.

    Partials and parents are resolved against *directory* (default:
    ``$WHISKER_TEMPLATE_DIR``, else the working directory).

    Raises:
        TemplateSyntaxError: Malformed template
        TemplateNotFoundError: A partial could not be loaded
    """
    return Environment().from_string(source, directory=directory, extension=extension)


def parse_file(path: str) -> Template:
    """Read and parse the template file at *path*.

    Raises:
        TemplateNotFoundError: No such file
        TemplateSyntaxError: Malformed template
    """
    return Environment().get_template(path)


def render(source: str, *contexts: Any, **kwargs: Any) -> str:
    """Parse and render *source* in one step.

    A parse failure does not raise: the error description is returned in
    place of the rendered text. Errors raised while rendering (such as a
    missing parent template) still propagate.

    Example:
        >>> render("{{#a}}X{{/a}}", {"a": [1, 2]})
        'XX'
        >>> render("{{}}").splitlines()[0]
        'Syntax Error: empty tag'
    """
    try:
        template = parse_string(source)
    except (TemplateSyntaxError, TemplateNotFoundError) as e:
        return str(e)
    return template.render(*contexts, **kwargs)


def render_file(path: str, *contexts: Any, **kwargs: Any) -> str:
    """Parse and render the template file at *path* in one step.

    Like ``render()``, parse and load failures are returned as text.
    """
    try:
        template = parse_file(path)
    except (TemplateSyntaxError, TemplateNotFoundError) as e:
        return str(e)
    return template.render(*contexts, **kwargs)
