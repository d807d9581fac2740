"""Name resolution and truthiness helpers used by rendering nodes.

Context Chain:
A render call carries a tuple of context objects, innermost first. Entering
a section pushes the section's value in front; nothing is ever mutated.

Member Resolution:
``resolve_member(obj, name)`` is a ``functools.singledispatch`` function.
Each supported kind of context object has a registered accessor; the
default accessor covers plain objects (method-like, then field-like lookup).
Applications handing their own container types to the engine register an
adapter at that boundary:

    >>> @resolve_member.register
    ... def _(obj: Row, name: str) -> object:
    ...     return obj.get_column(name, MISSING)

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

import inspect
import weakref
from collections.abc import Mapping, Sequence, Sized
from functools import singledispatch
from numbers import Number
from typing import Any, Final


class _Missing:
    """Sentinel for "name did not resolve" (distinct from ``None``)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

# Name that refers to the innermost context itself
IMPLICIT_ITERATOR = "."


def _takes_no_arguments(func: Any) -> bool:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures
        return False
    return all(
        param.default is not inspect.Parameter.empty
        or param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for param in signature.parameters.values()
    )


@singledispatch
def resolve_member(obj: Any, name: str) -> Any:
    """Resolve *name* on a plain object.

    A zero-argument callable attribute is invoked and its result returned
    (method-like). Any other non-callable attribute is returned as is
    (field-like). Private names and callables that need arguments never
    resolve.
    """
    if name.startswith("_"):
        return MISSING
    value = getattr(obj, name, MISSING)
    if value is MISSING:
        return MISSING
    if inspect.isclass(value):
        return value
    if callable(value):
        if _takes_no_arguments(value):
            return value()
        return MISSING
    return value


@resolve_member.register(Mapping)
def _resolve_mapping(obj: Mapping, name: str) -> Any:
    try:
        return obj[name]
    except KeyError:
        return MISSING


@resolve_member.register(Sequence)
def _resolve_sequence(obj: Sequence, name: str) -> Any:
    if not name.isdecimal():
        # Named tuples expose their fields like records
        if hasattr(type(obj), "_fields"):
            return resolve_member.dispatch(object)(obj, name)
        return MISSING
    index = int(name)
    if index >= len(obj):
        return MISSING
    return obj[index]


@resolve_member.register(str)
@resolve_member.register(bytes)
@resolve_member.register(Number)
@resolve_member.register(type(None))
def _resolve_scalar(obj: Any, name: str) -> Any:
    return MISSING


def _deref(value: Any) -> Any:
    if isinstance(value, weakref.ref):
        return value()
    return value


def lookup_attr(name: str, chain: Sequence[Any]) -> Any:
    """Resolve a single name segment against each context in *chain*.

    Contexts are tried in order (innermost first); the first one that
    resolves the name wins.
    """
    for ctx in chain:
        value = resolve_member(_deref(ctx), name)
        if value is not MISSING:
            return _deref(value)
    return MISSING


def lookup(name: str, chain: Sequence[Any]) -> Any:
    """Resolve a possibly dotted *name* against a context chain.

    The first segment is searched through the whole chain. Each following
    segment is resolved only on the value produced by the previous one;
    there is no fallback to outer contexts after the first segment.

    Returns:
        The resolved value, or ``MISSING`` as soon as a segment fails.

    Example:
        >>> lookup("a.b", ({"a": {"b": 1}},))
        1
        >>> lookup("a.c", ({"a": {"b": 1}}, {"c": 2}))
        MISSING
    """
    if name == IMPLICIT_ITERATOR:
        return _deref(chain[0]) if chain else MISSING

    value: Any = MISSING
    for index, segment in enumerate(name.split(".")):
        value = lookup_attr(segment, chain if index == 0 else (value,))
        if value is MISSING:
            break
    return value


def is_true(value: Any) -> bool:
    """Decide section truthiness for a resolved value.

    - ``MISSING`` and ``None`` are false
    - booleans are their own value
    - numbers are true when non-zero
    - strings, bytes and containers are true when non-empty
    - anything else (records, callables, objects) is true
    """
    if value is MISSING or value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, Number):
        return value != 0
    if isinstance(value, Sized):
        return len(value) > 0
    return True


def iter_section_contexts(value: Any) -> Sequence[Any]:
    """Contexts a (visible) section renders its body against, one per pass.

    Sequences other than strings are iterated element by element; any other
    value is a single context. A missing value (inverted section) becomes an
    empty-string placeholder.
    """
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    if value is MISSING:
        return ("",)
    return (value,)


def to_str(value: Any) -> str:
    """Convert a resolved value to output text, treating None as empty."""
    if value is MISSING or value is None:
        return ""
    return str(value)
