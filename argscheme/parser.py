"""
argscheme parser: validate a schema, then turn token lists into namespaces.

What this module provides
- ArgumentsParser: holds a validated schema (logical key -> descriptor) and
  parses any number of token lists against it.
  • Schema invariants are enforced eagerly at construction (SchemaError).
  • parse() runs a single left-to-right scan and returns a Namespace.
  • Faults carry position-first messages and one actionable hint.

- parse(schema, tokens): build a parser and parse in one call.

Quick start
    from argscheme import ArgumentsParser, NamedOption, PositionalOption

    parser = ArgumentsParser({
        "target": PositionalOption(0),
        "mode": NamedOption("-m", "--mode", required=True),
        "tags": NamedOption("--tags", multiple=True),
        "verbose": NamedOption("--verbose", flag=True),
    })
    parser.parse(["file.txt", "-m", "build", "--tags", "a", "b", "--verbose"])
    # namespace(target='file.txt', mode='build', tags=['a', 'b'], verbose=True)

Scan rules
- A token equal to a match string selects that named option. Everything else
  is positional and fills the slot numbered by the count of positionals filled
  so far; a token with no slot there is skipped (or rejected when strict).
- Flags consume nothing. Multiple options consume tokens up to the next match
  string. Single-value options consume exactly the next token, whatever it is.
- A value that is textually equal to a match string is read as that option;
  the scheme has no escape for it.

Design notes
- The parser never mutates itself while parsing: the running index, the
  position counter, the result and the pending required keys are locals of
  parse(), so one parser serves any number of calls.
"""
import copy
import functools
import re
import shlex
import sys
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .faults import *
from .options import NamedOption, PositionalOption, resolve
from .results import Namespace
from .utils import *


class ParserType(type):
    """
    Metaclass exposing __introspectable__ fields as read-only properties.

    Mirrors the descriptor metaclass: __typename__ is the hyphenated class name
    and __rich_repr__ yields the introspectable fields for pretty printers.
    """
    __introspectable__ = ()

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

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _process_schema(cls, metadata, /):
    """
    Resolve and validate the schema, building the lookup tables.

    Single pass over the schema, stopping at the first violation:
    - keys must be non-empty strings;
    - values must resolve to a descriptor (see argscheme.options.resolve);
    - named descriptors need at least one match string, and every match string
      is unique across the whole schema;
    - positions are non-negative integers (bools excluded), unique across the schema.

    Mutates
    - metadata["schema"]: read-only mapping key -> descriptor (schema order kept).
    - metadata["names"]: read-only mapping match string -> key.
    - metadata["positions"]: read-only mapping position -> key.

    Raises
    - SchemaError, with the offending key and value in the message and options.
    """
    if not isinstance(metadata["schema"], Mapping):
        raise SchemaError(
            f"{cls.__typename__} schema must be a mapping of keys to options",
            title="invalid schema",
            code=FaultCode.UNRESOLVABLE_OPTION,
            hint="pass a mapping such as {'mode': NamedOption('-m', '--mode')}",
        )

    schema = {}
    names = {}
    positions = {}

    for key, object in metadata["schema"].items():
        if not isinstance(key, str) or not key:
            raise SchemaError(
                "schema key %r must be a non-empty string" % (key,),
                title="invalid key",
                code=FaultCode.INVALID_KEY,
                key=key,
                hint="use a short identifier as key, e.g. 'mode'",
            )

        try:
            option = resolve(object)
        except (TypeError, ValueError) as exception:
            raise SchemaError(
                "option %r cannot be resolved: %s" % (key, exception),
                title="unresolvable option",
                code=FaultCode.UNRESOLVABLE_OPTION,
                key=key,
                hint="use NamedOption(...), PositionalOption(...), or a mapping with 'names' or 'position'",
                exception=exception,
            ) from exception

        if isinstance(option, NamedOption):
            if not option.names:
                raise SchemaError(
                    "named option %r has no names" % key,
                    title="missing names",
                    code=FaultCode.MISSING_NAMES,
                    key=key,
                    hint="give %r at least one match string, e.g. '--%s'" % (key, key),
                )
            for name in option.names:
                if name in names:
                    raise SchemaError(
                        "name %r of option %r is already used by option %r" % (name, key, names[name]),
                        title="duplicated name",
                        code=FaultCode.DUPLICATED_NAME,
                        key=key,
                        input=name,
                        hint="every match string must belong to a single option",
                    )
                names[name] = key
        elif isinstance(option, PositionalOption):
            position = option.position
            if isinstance(position, bool) or not isinstance(position, int):
                raise SchemaError(
                    "position %r of option %r is not an integer" % (position, key),
                    title="invalid position",
                    code=FaultCode.INVALID_POSITION,
                    key=key,
                    position=position,
                    hint="positions are zero-based integers: 0, 1, 2, ...",
                )
            if position < 0:
                raise SchemaError(
                    "position %r of option %r is negative" % (position, key),
                    title="invalid position",
                    code=FaultCode.INVALID_POSITION,
                    key=key,
                    position=position,
                    hint="positions are zero-based integers: 0, 1, 2, ...",
                )
            if position in positions:
                raise SchemaError(
                    "position %r of option %r is already used by option %r" % (position, key, positions[position]),
                    title="duplicated position",
                    code=FaultCode.DUPLICATED_POSITION,
                    key=key,
                    position=position,
                    hint="every position must belong to a single option",
                )
            positions[position] = key
        else:
            raise RuntimeError("unexpected option")

        schema[key] = option

    metadata["schema"] = MappingProxyType(schema)
    metadata["names"] = MappingProxyType(names)
    metadata["positions"] = MappingProxyType(positions)


class ArgumentsParser(metaclass=ParserType):
    """
    Declarative parser bound to one validated schema.

    Properties (read-only)
    - schema: key -> descriptor, in declaration order.
    - names: match string -> key.
    - positions: position -> key.
    - strict, shell, fancy, colorful: runtime flags.

    Runtime flags
    - strict: reject a positional token that has no slot instead of skipping it.
    - shell: render faults with rich on stderr and exit(1) instead of raising.
    - fancy: render faults inside a panel (shell mode).
    - colorful: style rendered faults (shell mode).
    """

    __introspectable__ = (
        "schema",
        "names",
        "positions",
        "strict",
        "shell",
        "fancy",
        "colorful",
    )

    def __init__(self, schema, /, *, strict=False, shell=False, fancy=False, colorful=False):
        """
        Validate `schema` and freeze the lookup tables.

        Raises
        - SchemaError: on the first schema violation (triggered, so shell mode
          renders it and exits instead).
        """
        metadata = {
            "schema": schema,
            "strict": bool(strict),
            "shell": bool(shell),
            "fancy": bool(fancy),
            "colorful": bool(colorful),
        }
        try:
            _process_schema(type(self), metadata)
        except SchemaError as fault:
            trigger(fault, shell=metadata["shell"], fancy=metadata["fancy"], colorful=metadata["colorful"])

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    def __repr__(self):
        return f"{type(self).__typename__}({", ".join(self._schema)})"

    def trigger(self, fault, /, **options):
        """
        Surface `fault` with this parser's runtime flags merged in.
        """
        trigger(fault, **options, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def _convert(self, key, option, token, index, input=Unset):
        """
        Run the value parser on `token` and check the result against choices.

        parameters
        - key: schema key receiving the value.
        - option: the descriptor (named or positional).
        - token: raw token string.
        - index: 1-based position of the token in the input (for messages).
        - input: match string that introduced the value (named options only).

        faults
        - ConversionError: the value parser raised; the exception is chained.
        - InvalidChoiceError: the converted value is not one of option.choices.
        """
        where = "for option %r" % input if input else "for %r" % key
        try:
            value = option.type(token)
        except Exception as exception:
            self.trigger(ConversionError(
                "value %r at %s position %s cannot be converted: %s" % (token, _ordinal(index), where, exception),
                title="invalid value",
                code=FaultCode.CONVERSION_FAILED,
                key=key,
                input=input,
                index=index,
                token=token,
                hint="provide a value accepted by %s" % getattr(option.type, "__name__", "the value parser"),
                docs=getdoc(FaultCode.CONVERSION_FAILED),
                exception=exception,
            ))

        if not option.accepts(value):
            choices = ", ".join(map(repr, option.choices))
            self.trigger(InvalidChoiceError(
                "value %r at %s position %s is not one of the choices: %s" % (value, _ordinal(index), where, choices),
                title="invalid choice",
                code=FaultCode.INVALID_CHOICE,
                key=key,
                input=input,
                index=index,
                value=value,
                choices=option.choices,
                hint="choose one of %s" % choices,
                docs=getdoc(FaultCode.INVALID_CHOICE),
            ))

        return value

    def _scan(self, tokens):
        """
        Consume `tokens` (a list of strings) and return the completed result dict.

        phases
        - scan: dispatch every token to a named option or to the next positional slot.
        - defaults: fill absent keys that declare a default.
        - requirements: one MissingRequiredError listing every unfilled required key.
        """
        result = {}
        pending = [key for key, option in self._schema.items() if option.required]
        position = 0
        index = 0

        while index < len(tokens):
            token = tokens[index]

            if token in self._names:
                option = self._schema[key := self._names[token]]

                if option.flag:
                    result[key] = True
                elif option.multiple:
                    values = result.setdefault(key, [])
                    while index + 1 < len(tokens) and tokens[index + 1] not in self._names:
                        index += 1
                        values.append(self._convert(key, option, tokens[index], index + 1, token))
                else:
                    if key in result:
                        self.trigger(DuplicateArgumentError(
                            "option %r at %s position was already provided" % (token, _ordinal(index + 1)),
                            title="duplicated argument",
                            code=FaultCode.DUPLICATED_ARGUMENT,
                            key=key,
                            input=token,
                            index=index + 1,
                            hint="keep a single %s; use a multiple option to collect several values" % token,
                            docs=getdoc(FaultCode.DUPLICATED_ARGUMENT),
                        ))
                    if index + 1 == len(tokens):
                        self.trigger(OptionValueRequiredError(
                            "option %r at %s position requires a value" % (token, _ordinal(index + 1)),
                            title="missing option value",
                            code=FaultCode.OPTION_VALUE_REQUIRED,
                            key=key,
                            input=token,
                            index=index + 1,
                            hint="provide a value after %s" % token,
                            docs=getdoc(FaultCode.OPTION_VALUE_REQUIRED),
                        ))
                    index += 1
                    result[key] = self._convert(key, option, tokens[index], index + 1, token)

                if key in pending:
                    pending.remove(key)

            elif position in self._positions:
                option = self._schema[key := self._positions[position]]
                result[key] = self._convert(key, option, token, index + 1)
                if key in pending:
                    pending.remove(key)
                position += 1

            elif self.strict:
                self.trigger(UnexpectedPositionalError(
                    "unexpected positional argument %r at %s position" % (token, _ordinal(index + 1)),
                    title="unexpected positional",
                    code=FaultCode.UNEXPECTED_POSITIONAL,
                    input=token,
                    index=index + 1,
                    hint="remove this extra value",
                    docs=getdoc(FaultCode.UNEXPECTED_POSITIONAL),
                ))

            index += 1

        for key, option in self._schema.items():
            if key not in result and option._default is not Unset:
                result[key] = copy.deepcopy(option._default)

        if pending:
            missing = {key: self._schema[key] for key in pending}
            self.trigger(MissingRequiredError(
                "missing required argument%s: %s" % (
                    "s" * (len(missing) > 1),
                    "; ".join("%s (%s)" % (key, option.__describe__()) for key, option in missing.items()),
                ),
                title="missing required argument%s" % ("s" * (len(missing) > 1)),
                code=FaultCode.MISSING_REQUIRED,
                missing=MappingProxyType(missing),
                hint="add %s" % ", ".join(
                    option.names[0] if isinstance(option, NamedOption) else "a value at position %d" % option.position
                    for option in missing.values()
                ),
                docs=getdoc(FaultCode.MISSING_REQUIRED),
            ))

        return result

    def parse(self, tokens=Unset, /):
        """
        Parse `tokens` against the schema and return a Namespace.

        Parameters
        - tokens:
          • Unset: read sys.argv[1:] (the host's invocation arguments).
          • str: shell-like string, split with shlex.split.
          • Iterable[str]: pre-tokenized sequence, used verbatim.

        Raises
        - TypeError: when tokens is not Unset/str/Iterable[str].
        - DuplicateArgumentError, OptionValueRequiredError, UnexpectedPositionalError,
          ConversionError, InvalidChoiceError, MissingRequiredError (see _scan).
          In shell mode these are rendered and the process exits instead.
        """
        if tokens is Unset:
            tokens = sys.argv[1:]
        elif isinstance(tokens, str):
            tokens = shlex.split(tokens)
        elif isinstance(tokens, Iterable):
            tokens = list(tokens)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        return Namespace(self._scan(tokens), self._schema.keys())


def parse(schema, tokens=Unset, /, **options):
    """
    Build an ArgumentsParser for `schema` and parse `tokens` with it.

    `options` are the parser's runtime flags (strict, shell, fancy, colorful).
    """
    return ArgumentsParser(schema, **options).parse(tokens)


__all__ = (
    "ArgumentsParser",
    "parse",
)

# Internal metaclass, kept out of star-imports and autocompletion.
del ParserType
