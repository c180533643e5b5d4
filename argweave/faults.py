"""
Argweave faults (parse failures, early exits) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for user-facing failures.
- Fault: base of everything a parser may raise while resolving a grammar.
  • MissingError: one or more required leaves are absent. Carries the grammar (Meta)
    of every alternative that was tried, so the message can say “expected one of”.
  • MessageError: a value was present but unusable (not utf8, rejected by a
    transform or guard, a flag with no value after it).
  • EarlyExit: not a failure. A success-shaped short circuit (help, version) whose
    text must be printed verbatim before exiting with status 0.
- trigger(): central entry point to surface a ParseError (respecting shell/fancy/colorful).

Recovery rules (shared by every combinator)
- MissingError is the only fault a combinator may absorb (optional, fallback, many,
  the failing side of an alternation).
- MessageError and EarlyExit always propagate to the top; alternation never masks them.

Integration
- The driver (OptionParser.run) prints EarlyExit text and exits 0, and hands ParseError
  to trigger(); in shell mode faults are rendered via rich, otherwise raised.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - absence (1110x): MISSING_ARGUMENT
    - malformed values (1111x): MISSING_VALUE, INVALID_VALUE, NOT_UTF8
    - driver-level (1114x): UNEXPECTED_TOKEN
    """
    MISSING_ARGUMENT = 11101

    MISSING_VALUE    = 11111
    INVALID_VALUE    = 11112
    NOT_UTF8         = 11113

    UNEXPECTED_TOKEN = 11141

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class Fault(Exception):
    """
    base of the parse fault taxonomy.

    every fault carries a message plus free-form options (title, code, hint, and
    rendering switches merged in by trigger()).
    """

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __replace__(self, **overrides):
        return type(self)(self.message, **{**self.options, **overrides})


class EarlyExit(Fault):
    """
    success-shaped short circuit: the text is the whole output (help, version).

    it travels through the combinator tree like any other fault so that no sibling
    branch runs after it, but the driver treats it as a successful exit.
    """

    @property
    def text(self):
        return self.message


class ParseError(Fault):
    """
    a real parse failure; rendered as a diagnostic and mapped to exit status 1.
    """
    default_code = FaultCode.INVALID_VALUE
    default_title = "invalid value"

    @property
    def code(self):
        return self.options.get("code", self.default_code)

    @property
    def title(self):
        return self.options.get("title", self.default_title)

    @property
    def hint(self):
        return self.options.get("hint", "try '--help' to see the expected usage")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

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

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(self.options.get("prog") or getattr(main, "__prog__", "argweave"), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.code.normalize(), styler("code")),
            " | ",
            text(self.title.title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self):
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)


class MissingError(ParseError):
    """
    absence of required grammar leaves.

    metas holds one Meta per alternative that was tried, in the order they were
    tried; merge() concatenates two of them when both sides of an alternation fail.
    """
    default_code = FaultCode.MISSING_ARGUMENT
    default_title = "missing argument"

    def __init__(self, *metas, **options):
        self.metas = tuple(metas)
        super().__init__(_expected(self.metas), **options)

    def __replace__(self, **overrides):
        return type(self)(*self.metas, **{**self.options, **overrides})

    def merge(self, other, /):
        if not isinstance(other, MissingError):
            raise TypeError("merge() argument must be a MissingError")
        return type(self)(*self.metas, *other.metas, **{**other.options, **self.options})


class MessageError(ParseError):
    """
    a value was present but could not be used.
    """


def _expected(metas):
    usages = [usage for meta in metas if (usage := meta.usage())]
    match usages:
        case []:
            return "expected more arguments"
        case [usage]:
            return "expected %s" % usage
        case _:
            return "expected one of %s" % ", ".join(usages)


def trigger(fault, /, **options):
    """
    surface a parse error with the given runtime options.

    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, the fault is rendered via the rich console and the process exits
      with status 1; otherwise the fault is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "Fault",
    "EarlyExit",
    "ParseError",
    "MissingError",
    "MessageError",
    "trigger",
)
