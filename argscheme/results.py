"""
argscheme parse results.

Namespace is the read-only mapping returned by ArgumentsParser.parse(). Keys are
the logical keys of the schema; a key is missing from the mapping when its
option is optional, has no default and never matched.

Access patterns
    >>> ns["mode"]                # KeyError when absent
    >>> ns.get("mode")            # None when absent
    >>> ns.mode                   # None when absent, AttributeError when not in the schema
    >>> ns.typed("count", int)    # checked extraction, TypeError on mismatch

Attribute access only reaches keys that do not collide with the mapping API:
a key named "items", "keys", "values", "get" or "typed" yields the bound
method as an attribute. Use ns["items"] for such keys.
"""
from collections.abc import Mapping
from types import MappingProxyType


class Namespace(Mapping):
    """
    Immutable mapping of parsed values with typed extraction helpers.

    Parameters
    - values: Mapping[str, Any]
      Parsed values, already completed with defaults.
    - keys: Iterable[str]
      Every key declared by the schema (present or not), used to tell an
      absent option apart from an unknown name.
    """

    __slots__ = ("_values", "_keys")

    def __init__(self, values, keys=(), /):
        object.__setattr__(self, "_values", MappingProxyType(dict(values)))
        object.__setattr__(self, "_keys", frozenset(keys) | self._values.keys())

    def __getitem__(self, key, /):
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __getattr__(self, name, /):
        # only reached for names that are not regular attributes
        if name.startswith("_") or name not in self._keys:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        return self._values.get(name)

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def typed(self, key, kind, /):
        """
        Return the value under `key` after checking it against `kind`.

        Behavior
        - absent (declared but unfilled) keys yield None.
        - list values (multiple options) are checked element-wise.
        - any other value must be an instance of `kind`.

        Raises
        - KeyError: `key` is not declared by the schema.
        - TypeError: the value (or one of its elements) is not a `kind`.
        """
        if key not in self._keys:
            raise KeyError(key)
        if (value := self._values.get(key)) is None:
            return None
        items = value if isinstance(value, list) else (value,)
        for item in items:
            if not isinstance(item, kind):
                raise TypeError(
                    f"value {item!r} under {key!r} is not of type {getattr(kind, '__name__', kind)!s}"
                )
        return value

    def __repr__(self):
        return f"{type(self).__name__.lower()}({", ".join("%s=%r" % item for item in self._values.items())})"

    def __rich_repr__(self):
        yield from self._values.items()


__all__ = (
    "Namespace",
)
