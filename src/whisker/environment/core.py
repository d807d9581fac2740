"""Whisker Environment: configuration and template loading.

The Environment is the central object of the template system:

- holds configuration (delimiters, base directory, include depth limit)
- owns the loader that reads template source by path
- parses templates from strings and files
- optionally caches parsed templates by path

Configuration:
    ```python
    env = Environment(
        loader=FileSystemLoader("templates/"),
        open_delimiter="{{",
        close_delimiter="}}",
        cache_size=128,        # 0 (default) re-reads templates every time
    )
    ```

Template Cache:
With ``cache_size=0`` every ``get_template()`` call reads and parses the
file again; in particular every render of an inheriting template re-reads
its whole ancestor chain, so edits on disk are always visible. A positive
``cache_size`` keeps that many parsed templates, keyed by path, in an LRU
cache. Callers invalidate it with ``clear_cache()``.

Thread-Safety:
Configuration is fixed at construction. The cache is guarded by a lock;
parsing happens outside the lock, so two threads missing the same path at
once both parse it and the last one stored wins.

"""

from __future__ import annotations

import logging
import os
import posixpath
import threading
from collections import OrderedDict
from typing import Any

from whisker.environment.loaders import FileSystemLoader, Loader
from whisker.template.core import Template

logger = logging.getLogger(__name__)

# Environment variable giving the base directory for templates parsed from strings
TEMPLATE_DIR_ENV = "WHISKER_TEMPLATE_DIR"

DEFAULT_OPEN_DELIMITER = "{{"
DEFAULT_CLOSE_DELIMITER = "}}"

# Partials nested deeper than this are rejected at parse time
DEFAULT_MAX_INCLUDE_DEPTH = 50

# Sections and blocks nested deeper than this are rejected at parse time
DEFAULT_MAX_NESTING_DEPTH = 100


class _TemplateCache:
    """Small thread-safe LRU cache of parsed templates keyed by path."""

    __slots__ = ("_data", "_hits", "_lock", "_maxsize", "_misses")

    def __init__(self, maxsize: int):
        self._data: OrderedDict[str, Template] = OrderedDict()
        self._lock = threading.Lock()
        self._maxsize = maxsize
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Template | None:
        with self._lock:
            template = self._data.get(key)
            if template is None:
                self._misses += 1
                return None
            self._data.move_to_end(key)
            self._hits += 1
            return template

    def set(self, key: str, template: Template) -> None:
        with self._lock:
            self._data[key] = template
            self._data.move_to_end(key)
            while len(self._data) > self._maxsize:
                self._data.popitem(last=False)

    def discard(self, key: str) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "size": len(self._data),
                "max_size": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
            }


class Environment:
    """Central configuration and template management.

    Attributes:
        loader: Template source loader (default: ``FileSystemLoader(".")``)
        open_delimiter: Tag opening delimiter (default ``{{``)
        close_delimiter: Tag closing delimiter (default ``}}``)
        directory: Base directory for partials and parents of templates
            parsed from strings (default: ``$WHISKER_TEMPLATE_DIR`` or ``""``)
        max_include_depth: Maximum partial nesting depth
        max_nesting_depth: Maximum section/block nesting depth in one template
        cache_size: Number of parsed templates kept by path (0 = no cache)

    Example:
            >>> env = Environment(loader=DictLoader({"hi.txt": "Hi {{who}}"}))
            >>> env.get_template("hi.txt").render(who="there")
            'Hi there'

    """

    def __init__(
        self,
        loader: Loader | None = None,
        *,
        open_delimiter: str = DEFAULT_OPEN_DELIMITER,
        close_delimiter: str = DEFAULT_CLOSE_DELIMITER,
        directory: str | None = None,
        max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH,
        max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH,
        cache_size: int = 0,
    ):
        if not open_delimiter or not close_delimiter:
            raise ValueError("delimiters must be non-empty strings")
        if max_nesting_depth < 1:
            raise ValueError(f"max_nesting_depth must be >= 1, got {max_nesting_depth}")
        if cache_size < 0:
            raise ValueError(f"cache_size must be >= 0, got {cache_size}")

        self.loader: Loader = loader if loader is not None else FileSystemLoader(".")
        self.open_delimiter = open_delimiter
        self.close_delimiter = close_delimiter
        self.directory = directory if directory is not None else os.environ.get(TEMPLATE_DIR_ENV, "")
        self.max_include_depth = max_include_depth
        self.max_nesting_depth = max_nesting_depth
        self.cache_size = cache_size
        self._cache = _TemplateCache(cache_size) if cache_size else None

    def __repr__(self) -> str:
        return (
            f"<Environment loader={type(self.loader).__name__} "
            f"delimiters={self.open_delimiter!r}/{self.close_delimiter!r} "
            f"cache_size={self.cache_size}>"
        )

    @staticmethod
    def resolve_path(directory: str, name: str, extension: str) -> str:
        """Path of template *name* referenced from a template in *directory*.

        Example:
            >>> Environment.resolve_path("pages", "nav", ".html")
            'pages/nav.html'
        """
        return posixpath.normpath(posixpath.join(directory, name + extension))

    def from_string(
        self,
        source: str,
        *,
        name: str | None = None,
        directory: str | None = None,
        extension: str = "",
    ) -> Template:
        """Parse a template from source text.

        Args:
            source: Template source
            name: Optional name for error messages
            directory: Directory partials and parents are resolved against
                (default: the environment's ``directory``)
            extension: Extension appended to partial and parent names

        Raises:
            TemplateSyntaxError: Malformed template
            TemplateNotFoundError: A partial could not be loaded
        """
        return self._parse(
            source,
            name=name,
            filename=None,
            directory=self.directory if directory is None else directory,
            extension=extension,
            loading=(),
        )

    def get_template(self, path: str) -> Template:
        """Load and parse the template at *path*.

        Partials and parents of the template are resolved relative to the
        directory of *path*, with the extension of *path* appended.

        Raises:
            TemplateNotFoundError: The loader has no such template
            TemplateSyntaxError: Malformed template (or partial)
        """
        return self._load(posixpath.normpath(path), ())

    def load_relative(
        self,
        directory: str,
        name: str,
        extension: str,
        *,
        loading: tuple[str, ...] = (),
    ) -> Template:
        """Load template *name* as referenced from a template in *directory*."""
        return self._load(self.resolve_path(directory, name, extension), loading)

    def clear_cache(self, path: str | None = None) -> None:
        """Invalidate cached templates.

        Args:
            path: Drop only this template path; ``None`` drops everything.
        """
        if self._cache is None:
            return
        if path is None:
            self._cache.clear()
            logger.debug("Template cache cleared")
        elif self._cache.discard(posixpath.normpath(path)):
            logger.debug("Template cache entry dropped: %s", path)

    def cache_info(self) -> dict[str, Any]:
        """Return cache statistics (all zero when caching is disabled)."""
        if self._cache is None:
            return {"size": 0, "max_size": 0, "hits": 0, "misses": 0}
        return self._cache.stats()

    def _load(self, path: str, loading: tuple[str, ...]) -> Template:
        if self._cache is not None:
            cached = self._cache.get(path)
            if cached is not None:
                logger.debug("Template cache hit: %s", path)
                return cached

        source, filename = self.loader.get_source(path)
        logger.debug("Loaded template %s (%s)", path, filename or "<memory>")

        directory, basename = posixpath.split(path)
        template = self._parse(
            source,
            name=path,
            filename=filename,
            directory=directory,
            extension=posixpath.splitext(basename)[1],
            loading=(*loading, path),
        )

        if self._cache is not None:
            self._cache.set(path, template)
        return template

    def _parse(
        self,
        source: str,
        *,
        name: str | None,
        filename: str | None,
        directory: str,
        extension: str,
        loading: tuple[str, ...],
    ) -> Template:
        from whisker.parser import Parser

        return Parser(
            self,
            source,
            name=name,
            filename=filename,
            directory=directory,
            extension=extension,
            loading=loading,
        ).parse()
