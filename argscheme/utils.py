"""
argscheme utilities (internal helpers, exposed for the other modules)

Overview
- UnsetType / Unset
  • Singleton sentinel for "not provided", kept apart from None so that None
    stays a legitimate default value for options.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; every other value (None, 0, "", [])
    passes through untouched.

- rename(callable, name) / @rename("name")
  • Give generated callables stable __name__/__qualname__ for readable reprs
    and tracebacks.

- mirror("attr")
  • Read-only property over a private backing field (self._attr). Containers
    are handed out as fresh copies so callers cannot mutate descriptor or
    parser state through the public surface.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Sentinel type for values that were not provided.

    Characteristics
    - bool(Unset) is False, yet Unset is neither None nor 0.
    - repr(Unset) -> "Unset".
    - UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns `object` unless it is Unset, in which case `default` is returned.
    Falsey values like None, 0, "" or [] are preserved.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or build a decorator that will.

    Forms
    - rename(callable, name) -> callable, renamed in place.
    - rename(name) -> decorator applying that name.

    Raises
    - TypeError on wrong arity, non-callable targets, non-string names, or
      callables whose names cannot be updated (some built-ins).
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _detach(object):
    """
    Shallow-copy containers one level at a time, recursing into their items.

    Tuples stay tuples and frozensets stay frozensets (they are immutable
    already); lists, dicts and sets are rebuilt.
    """
    if isinstance(object, tuple | frozenset | str | bytes):
        return object
    if isinstance(object, Sequence):
        return list(map(_detach, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_detach, object.values())))
    elif isinstance(object, Set):
        return set(map(_detach, object))
    return object


def mirror(name, /):
    """
    Define a read-only property over the backing attribute "_{name}".

    Example
    - Given self._names, declare names = mirror("names") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


# Unique instance of the sentinel.
Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
