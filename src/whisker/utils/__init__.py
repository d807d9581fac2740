"""Utility helpers for Whisker."""

from whisker.utils.html import html_escape

__all__ = ["html_escape"]
