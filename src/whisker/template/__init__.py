"""Whisker Template package: parsed templates and render-time helpers.

"""

from whisker.template.core import SupportsWrite, Template
from whisker.template.helpers import MISSING, is_true, lookup, resolve_member

__all__ = [
    "MISSING",
    "SupportsWrite",
    "Template",
    "is_true",
    "lookup",
    "resolve_member",
]
