"""Template loaders for the Whisker environment.

Loaders are the engine's only contact with storage. They implement
``get_source(path)`` returning ``(source, filename)``, where *path* is a
slash-separated template path such as ``"pages/home.html"``. Partials and
parent templates are resolved to such paths before they reach a loader.

Built-in Loaders:
- `FileSystemLoader`: Read files relative to one or more directories
- `DictLoader`: Serve templates from an in-memory dictionary (testing)
- `ChoiceLoader`: Try multiple loaders in order (theme fallback)
- `FunctionLoader`: Wrap a callable as a loader

Custom Loaders:
Implement the Loader protocol:
    ```python
    class DatabaseLoader:
        def get_source(self, path: str) -> tuple[str, str | None]:
            row = db.query("SELECT source FROM templates WHERE path = ?", path)
            if not row:
                raise TemplateNotFoundError(f"Template '{path}' not found")
            return row.source, f"db://{path}"
    ```

Thread-Safety:
All built-in loaders are safe for concurrent ``get_source()`` calls.

"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

from whisker.environment.exceptions import TemplateNotFoundError


class Loader(Protocol):
    def get_source(self, path: str) -> tuple[str, str | None]: ...


class FileSystemLoader:
    """Load templates from filesystem directories.

    Each search directory is tried in order and the first existing file
    wins. Absolute template paths are read as they are. The default search
    directory is the current working directory.

    Example:
            >>> loader = FileSystemLoader("templates/")
            >>> source, filename = loader.get_source("pages/about.html")
            >>> print(filename)
            templates/pages/about.html

    Raises:
        TemplateNotFoundError: If template not found in any search path

    """

    __slots__ = ("_encoding", "_paths")

    def __init__(
        self,
        paths: str | Path | Sequence[str | Path] = ".",
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding

    def get_source(self, path: str) -> tuple[str, str]:
        """Read template source from the first search directory that has it."""
        for base in self._paths:
            candidate = base / path
            if candidate.is_file():
                return candidate.read_text(self._encoding), str(candidate)

        raise TemplateNotFoundError(
            f"Template '{path}' not found in: {', '.join(str(p) for p in self._paths)}"
        )


class DictLoader:
    """Load templates from an in-memory dictionary.

    Maps template paths to source strings. Useful for testing and embedded
    templates.

    Example:
            >>> loader = DictLoader({
            ...     "layout.html": "<h1>{{*title}}{{/title}}</h1>",
            ...     "page.html": "{{<layout}}{{*title}}Hi{{/title}}",
            ... })
            >>> Environment(loader=loader).get_template("page.html").render()
            '<h1>Hi</h1>'

    Raises:
        TemplateNotFoundError: If template path not in mapping

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, path: str) -> tuple[str, None]:
        if path not in self._mapping:
            from difflib import get_close_matches

            available = sorted(self._mapping.keys())
            msg = f"Template '{path}' not found"
            matches = get_close_matches(path, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
            raise TemplateNotFoundError(msg)
        return self._mapping[path], None


class ChoiceLoader:
    """Try multiple loaders in order, returning the first match.

    Example:
            >>> loader = ChoiceLoader([
            ...     FileSystemLoader("themes/custom/"),
            ...     FileSystemLoader("themes/default/"),
            ... ])

    Raises:
        TemplateNotFoundError: If no loader can find the template

    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: Sequence[Loader]):
        self._loaders = list(loaders)

    def get_source(self, path: str) -> tuple[str, str | None]:
        """Try each loader in order, return first match."""
        for loader in self._loaders:
            try:
                return loader.get_source(path)
            except TemplateNotFoundError:
                continue
        raise TemplateNotFoundError(
            f"Template '{path}' not found in any of {len(self._loaders)} loaders"
        )


class FunctionLoader:
    """Wrap a callable as a template loader.

    The function takes a template path and returns the source, a
    ``(source, filename)`` tuple, or ``None`` when there is no such template.

    Example:
            >>> def load(path):
            ...     return "Hello, {{name}}!" if path == "greeting" else None
            >>> env = Environment(loader=FunctionLoader(load))

    Raises:
        TemplateNotFoundError: If ``load_func`` returns ``None``

    """

    __slots__ = ("_load_func",)

    def __init__(
        self,
        load_func: Callable[[str], str | tuple[str, str | None] | None],
    ):
        self._load_func = load_func

    def get_source(self, path: str) -> tuple[str, str | None]:
        """Call the load function and normalize the result."""
        result = self._load_func(path)

        if result is None:
            raise TemplateNotFoundError(f"Template '{path}' not found")

        if isinstance(result, str):
            return result, None

        return result
