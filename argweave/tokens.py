"""
Argweave token model: classify raw process arguments into typed tokens.

Token kinds
- Word: a plain value. Keeps a validated UTF-8 view (utf8, None when invalid) and the
  OS-native bytes (os) so callers can pick strict or lenient handling.
- Short: '-x' or '-xVALUE' (single character name, optional attached Word).
- Long: '--name' or '--name=VALUE' (optional attached Word).
- SEPARATOR: the literal '--'. Everything after it is a Word, even when dash-prefixed.

Raw arguments may be str (as found in sys.argv, possibly carrying surrogate escapes) or
bytes; bytes are decoded with os.fsdecode so that the OS-native view round-trips exactly.
"""
import functools
import os
from dataclasses import dataclass
from typing import final


@dataclass(frozen=True, slots=True)
class Word:
    utf8: str | None
    os: bytes

    @classmethod
    def from_raw(cls, raw, /):
        """
        Build a Word from a str or bytes argument.

        The UTF-8 view is None when the value cannot be represented as valid UTF-8
        (e.g. a filename with surrogate-escaped bytes).
        """
        if isinstance(raw, bytes | bytearray):
            raw = os.fsdecode(bytes(raw))
        elif not isinstance(raw, str):
            raise TypeError("Word.from_raw() argument must be str or bytes")
        try:
            native = os.fsencode(raw)
        except UnicodeEncodeError:
            # lone surrogates that surrogateescape cannot map back to a byte
            native = raw.encode("utf-8", "surrogatepass")
        try:
            raw.encode("utf-8")
        except UnicodeEncodeError:
            return cls(None, native)
        return cls(raw, native)

    def __str__(self):
        if self.utf8 is not None:
            return self.utf8
        return os.fsdecode(self.os)


@dataclass(frozen=True, slots=True)
class Short:
    name: str
    value: Word | None = None

    def is_short(self, name, /):
        return self.name == name

    def is_long(self, name, /):
        return False

    def __str__(self):
        return "-" + self.name


@dataclass(frozen=True, slots=True)
class Long:
    name: str
    value: Word | None = None

    def is_short(self, name, /):
        return False

    def is_long(self, name, /):
        return self.name == name

    def __str__(self):
        return "--" + self.name


@final
class SeparatorType:
    """
    singleton type of the '--' token.

    it is consumed by tokenize() and never reaches a parser; it exists so classify()
    can report it like any other token kind.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __repr__(self):
        return "SEPARATOR"

    def __str__(self):
        return "--"

    def __reduce__(self):
        return SeparatorType, ()

    def __init_subclass__(cls, **options):
        raise TypeError("type 'SeparatorType' is not an acceptable base type")


SEPARATOR = SeparatorType()


def is_named(token, /):
    """True for Short and Long tokens (the kinds a flag predicate can match)."""
    return isinstance(token, Short | Long)


def classify(raw, /, separated=False):
    """
    classify one raw argument.

    rules
    - separated=True: always a Word.
    - '--': SEPARATOR.
    - '--name' / '--name=VALUE': Long (value is everything after the first '=').
    - '-x' / '-xVALUE': Short on the first character after the dash.
    - '-' and anything else: Word.
    """
    if isinstance(raw, bytes | bytearray):
        raw = os.fsdecode(bytes(raw))
    elif not isinstance(raw, str):
        raise TypeError("classify() argument must be str or bytes")

    if separated:
        return Word.from_raw(raw)
    if raw == "--":
        return SEPARATOR
    if raw.startswith("--"):
        name, equals, value = raw[2:].partition("=")
        return Long(name, Word.from_raw(value) if equals else None)
    if raw.startswith("-") and len(raw) > 1:
        return Short(raw[1], Word.from_raw(raw[2:]) if len(raw) > 2 else None)
    return Word.from_raw(raw)


def tokenize(argv, /):
    """
    classify a whole argument vector.

    yields every token except the first SEPARATOR, which flips classification into
    literal mode for the rest of the vector (a second '--' is then a plain Word).
    """
    separated = False
    for raw in argv:
        token = classify(raw, separated)
        if token is SEPARATOR:
            separated = True
            continue
        yield token


__all__ = (
    "Word",
    "Short",
    "Long",
    "SeparatorType",
    "SEPARATOR",
    "is_named",
    "classify",
    "tokenize",
)
