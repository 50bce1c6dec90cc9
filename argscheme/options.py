r"""
argscheme option descriptors (the schema model).

Overview
- Descriptors
  • NamedOption[_T]: matched by one or more match strings (e.g., -m/--mode).
    May be a presence-only flag, or a multiple option that collects a run of
    tokens into a list.
  • PositionalOption[_T]: matched by its zero-based slot among the tokens that
    are not match strings.
  Both derive from Option[_T], which holds the shared metadata.

- Introspection & representation
  • OptionType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ as read-only properties (see mirror()).

Metadata (sanitized on construction)
- Shared
  • type: Callable[[str], _T] (value parser), defaults to str.
  • choices: Unset | None | Iterable (unrestricted when Unset or None; duplicates
    rejected unless a Set; strings rejected).
  • required: bool.
  • default: any value, Unset meaning "no default" (None is a valid default).
- NamedOption only
  • names: strings, kept in declaration order, blank names rejected.
  • flag / multiple: bool, mutually exclusive.
- PositionalOption only
  • position: stored as given. Whether it is a non-negative integer is a
    schema invariant, checked when the parser is constructed.

Schema-level invariants (unique names, at least one name, unique non-negative
integer positions) are not checked here; see argscheme.parser.

Quick example
    >>> mode = NamedOption("-m", "--mode", required=True)
    >>> mode.names
    ('-m', '--mode')
    >>> PositionalOption(0, type=int).position
    0
"""
import functools
import operator
import re
from collections.abc import Iterable, Mapping, Set

from .utils import *


class OptionType(type):
    """
    Metaclass that makes descriptors introspectable.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_name" field.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages: NamedOption -> "named-option".
    - __displayable__ (if set) narrows which properties __rich_repr__ shows.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - named-option(names=('-v', '--verbose'), type=<class 'str'>, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by every descriptor.

    Responsibilities
    - type: must be callable. Its signature is trusted.
    - required: must be a bool.
    - choices: Unset or None (unrestricted, stored as None) or a non-string
      iterable. A Set is frozen; any other iterable rejects duplicates (equal
      values of the same type) and becomes a tuple (order kept for messages).
    - default: not validated; Unset means "no default".

    Raises
    - TypeError: non-callable type, non-bool required, non-iterable or string choices.
    - ValueError: duplicated choices.
    """
    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if not isinstance(metadata["required"], bool):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")

    if (choices := metadata["choices"]) is Unset or choices is None:
        metadata["choices"] = None
        return
    if isinstance(choices, str | bytes) or not isinstance(choices, Iterable):
        raise TypeError(f"{cls.__typename__} 'choices' must be a non-string iterable")
    if isinstance(choices, Set):
        metadata["choices"] = frozenset(choices)
        return
    sanitized = []
    for choice in choices:
        if any(type(other) is type(choice) and other == choice for other in sanitized):
            raise ValueError(f"{cls.__typename__} 'choices' cannot contain duplicates")
        sanitized.append(choice)
    metadata["choices"] = tuple(sanitized)


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate and normalize metadata for named descriptors.

    Responsibilities
    - names: every entry must be a string with visible characters. An empty
      collection is accepted here and reported by the schema (it is a schema
      invariant, surfaced as SchemaError at parser construction).
    - flag/multiple: bools, not both at once (a flag never takes values).
    """
    names = []
    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not name.strip():
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        names.append(name)
    metadata["names"] = tuple(names)

    for name in ("flag", "multiple"):
        if not isinstance(metadata[name], bool):
            raise TypeError(f"{cls.__typename__} {name!r} must be a boolean")
    if metadata["flag"] and metadata["multiple"]:
        raise TypeError(f"{cls.__typename__} cannot be both a 'flag' and 'multiple'")


class Option[_T](metaclass=OptionType):
    """
    Shared behaviour of every descriptor.

    Option itself is abstract: construct NamedOption or PositionalOption.
    """

    __introspectable__ = (
        "type",
        "choices",
        "required",
        "default",
    )

    def __new__(cls, *args, **kwargs):
        if cls is Option:
            raise TypeError("type 'Option' cannot be instantiated directly")
        return super().__new__(cls)

    def __option__(self):
        """
        Introspection hook: any object exposing __option__() can sit in a schema.
        """
        return self

    def accepts(self, value, /):
        """
        Return True when `value` satisfies the declared choices (always, when unrestricted).
        """
        if self._choices is None:
            return True
        try:
            return value in self._choices
        except TypeError:
            # unhashable values tested against frozen set choices
            return False

    @property
    def restricted(self):
        """
        True when the descriptor declares a closed set of choices.
        """
        return self._choices is not None


class NamedOption[_T](Option[_T]):
    """
    Option matched by one or more match strings.

    Parameters
    - *names: str
      Match strings, compared verbatim against tokens ("-m", "--mode").
    - type: Callable[[str], _T]
      Value parser applied to each consumed token.
    - choices: Unset | Iterable[_T]
      Allowed decoded values.
    - required: bool
      The option must appear at least once.
    - default: Any
      Stored when the option never appears.
    - flag: bool
      Presence-only; yields True and consumes no value token.
    - multiple: bool
      Collects every following token up to the next match string into a list.
    """

    __introspectable__ = (
        "names",
        "type",
        "choices",
        "required",
        "default",
        "flag",
        "multiple",
    )

    def __new__(
            cls,
            *names,
            type=str,
            choices=Unset,
            required=False,
            default=Unset,
            flag=False,
            multiple=False
    ):
        metadata = {
            "names": names,
            "type": type,
            "choices": choices,
            "required": required,
            "default": default,
            "flag": flag,
            "multiple": multiple,
        }
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def __describe__(self):
        """
        Short label used by messages: "names are [-m, --mode]".
        """
        return "names are [%s]" % ", ".join(self._names)


class PositionalOption[_T](Option[_T]):
    """
    Option matched by its zero-based slot among non-match tokens.

    Parameters
    - position: int
      Slot index; checked by the schema (non-negative, unique integer).
    - type, choices, required, default: see NamedOption.
    """

    __introspectable__ = (
        "position",
        "type",
        "choices",
        "required",
        "default",
    )

    def __new__(
            cls,
            position,
            /,
            type=str,
            choices=Unset,
            required=False,
            default=Unset
    ):
        metadata = {
            "position": position,
            "type": type,
            "choices": choices,
            "required": required,
            "default": default,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    def __describe__(self):
        return "position is %r" % (self._position,)


# Keys accepted by resolve() for plain-mapping descriptors, with their aliases.
_ALIASES = {
    "parser": "type",
    "isFlag": "flag",
}


def resolve(object, /):
    """
    Turn a schema value into a concrete descriptor.

    Accepted shapes
    - NamedOption / PositionalOption instances (returned as-is).
    - objects exposing __option__() that returns one of the above.
    - mappings in configuration shape, with either 'names' or 'position' and
      any of 'type' (or 'parser'), 'choices', 'required', 'default', 'flag'
      (or 'isFlag'), 'multiple'.

    Raises
    - TypeError: the object cannot be resolved to a descriptor.
    - ValueError: a mapping carries both 'names' and 'position', or neither.
    """
    if isinstance(object, Option):
        return object

    if isinstance(object, Mapping):
        fields = {_ALIASES.get(name, name): value for name, value in object.items()}
        match "names" in fields, "position" in fields:
            case True, False:
                names = fields.pop("names")
                if isinstance(names, str) or not isinstance(names, Iterable):
                    raise TypeError("option 'names' must be an iterable of strings")
                return NamedOption(*names, **fields)
            case False, True:
                return PositionalOption(fields.pop("position"), **fields)
            case True, True:
                raise ValueError("option cannot declare both 'names' and 'position'")
            case _:
                raise ValueError("option must declare either 'names' or 'position'")

    if hasattr(object, "__option__") and callable(object.__option__):
        option = object.__option__()
        if not isinstance(option, Option):
            raise TypeError("__option__() non-option returned")
        return option

    raise TypeError("option must be a descriptor, a mapping, or implement __option__()")


__all__ = (
    "Option",
    "NamedOption",
    "PositionalOption",
    "resolve",
)

# Internal metaclass, kept out of star-imports and autocompletion.
del OptionType
