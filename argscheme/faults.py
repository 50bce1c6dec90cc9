"""
argscheme faults (schema and parsing errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain so logs and searches stay predictable.
- ArgumentsException: base type that carries a message plus options and knows
  how to render itself in a friendly, lowercased and actionable way.
- trigger(): central entry point to surface a fault (raise, or render and exit
  in shell mode).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: parsing faults name the ordinal position of the
  offending token ("at third position").
- Short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- ArgumentsParser builds faults with context (key, input, index, hint, ...) and
  hands them to trigger() together with its runtime flags.
- Outside shell mode the fault is raised; in shell mode it is rendered through
  rich on stderr and the process exits with status 1.
"""
import copy
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - schema (101xx)
      • INVALID_KEY, UNRESOLVABLE_OPTION, MISSING_NAMES, DUPLICATED_NAME,
        INVALID_POSITION, DUPLICATED_POSITION
    - switches (named options) (111xx)
      • DUPLICATED_ARGUMENT, OPTION_VALUE_REQUIRED, MISSING_REQUIRED
    - positionals (1112x)
      • UNEXPECTED_POSITIONAL
    - values (1112x/1113x)
      • INVALID_CHOICE, CONVERSION_FAILED

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- schema errors (101xx) ---
    INVALID_KEY                 = 10101
    UNRESOLVABLE_OPTION         = 10102
    MISSING_NAMES               = 10111
    DUPLICATED_NAME             = 10112
    INVALID_POSITION            = 10121
    DUPLICATED_POSITION         = 10122

    # --- switch errors (111xx) ---
    DUPLICATED_ARGUMENT         = 11115
    OPTION_VALUE_REQUIRED       = 11117
    MISSING_REQUIRED            = 11125

    # --- positional errors (111xx) ---
    UNEXPECTED_POSITIONAL       = 11121

    # --- value errors (111xx) ---
    INVALID_CHOICE              = 11124
    CONVERSION_FAILED           = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ArgumentsException(Exception):
    """
    base fault: message + read-only options, rich rendering, trigger protocol.

    recognized options
    - title, code, hint: header/footer copy (code is a FaultCode).
    - shell, fancy, colorful: runtime flags of the parser that triggered it.
    - ratio: panel width ratio when rendered in fancy mode.
    - exception: the underlying exception, chained when the fault is raised.
    - any other context (key, input, index, choices, missing, ...) is kept for callers.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(message,) if message else ())
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = text(getattr(main, "__prog__", os.path.basename(sys.argv[0])), "prog-name")
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "", "code"),
            " | ",
            text(self.options.get("title", "").title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.options.get("hint", ""), "hint"))

        if fancy:
            try:
                width = int((console.width - 4) * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(message, hint), title=header, title_align="left", width=width)

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from self.options.get("exception")
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class SchemaError(ArgumentsException): ...
class DuplicateArgumentError(ArgumentsException): ...
class OptionValueRequiredError(ArgumentsException): ...
class UnexpectedPositionalError(ArgumentsException): ...
class InvalidChoiceError(ArgumentsException, ValueError): ...
class ConversionError(ArgumentsException, ValueError): ...


class MissingRequiredError(ArgumentsException):
    """
    aggregate fault: every required key still unfilled after a full scan.

    the 'missing' option maps each key to its descriptor, in schema order.
    """

    @property
    def missing(self):
        return self.options.get("missing", MappingProxyType({}))


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ArgumentsException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when not found.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ArgumentsException",
    "SchemaError",
    "DuplicateArgumentError",
    "OptionValueRequiredError",
    "UnexpectedPositionalError",
    "InvalidChoiceError",
    "ConversionError",
    "MissingRequiredError",
    "FaultCode",
    "trigger",
    "getdoc",
)
