"""Whisker parser: builds element trees from template source."""

from whisker.parser.core import Parser

__all__ = ["Parser"]
