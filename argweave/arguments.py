r"""
Argweave leaf builders: flags, switches, arguments and positionals.

Terminology
- Flag: a no-value named option decoded into a fixed value (req_flag, flag).
- Switch: a flag decoded into a bool: True when present, False when absent.
- Argument: a named option that takes a value, attached ('--name=VALUE', '-nVALUE')
  or in the following token ('--name VALUE', '-n VALUE').
- Positional: an unnamed value matched among the remaining words, in order.

Naming
- short(c) / long(name) start a Named builder; chain .short() / .long() to add
  aliases (the first of each kind is shown in help, the others are hidden) and
  .help(text) to document it. Builders are immutable: every call returns a new one.

Examples
    >>> verbose = short("v").long("verbose").help("talk more").switch()
    >>> jobs = short("j").long("jobs").argument("JOBS").parse(int).fallback(1)
    >>> files = positional("FILE").many()
"""
import re

from .faults import Fault, FaultCode, MessageError, MissingError
from .meta import Item, ItemKind, Leaf
from .parsers import Parser, _delegated
from .tokens import Word
from .utils import Unset, rename

_LONG = re.compile(r"[^\W_](?:[\w.-]*\w)?")


def _not_utf8(word):
    if word.utf8 is None:
        raise MessageError(
            "%r is not utf8" % word.os,
            code=FaultCode.NOT_UTF8,
            title="not utf8",
            hint="use an *_os builder to accept values in the os encoding",
        )
    return word.utf8


def _sanitize_short(name):
    if not isinstance(name, str):
        raise TypeError("short name must be a string")
    if len(name) != 1 or name == "-" or name.isspace():
        raise ValueError("short name must be a single character other than '-', got %r" % name)
    return name


def _sanitize_long(name):
    if not isinstance(name, str):
        raise TypeError("long name must be a string")
    if not _LONG.fullmatch(name):
        raise ValueError("long name must be a word without leading dashes or '=', got %r" % name)
    return name


def _sanitize_metavar(metavar):
    if not isinstance(metavar, str):
        raise TypeError("metavar must be a string")
    if not (metavar := metavar.strip()):
        raise ValueError("metavar cannot be empty")
    return metavar


def _sanitize_help(help):
    if not isinstance(help, str):
        raise TypeError("help must be a string")
    if not (help := help.strip()):
        raise ValueError("help cannot be empty")
    return help


class Named:
    """
    immutable builder for a flag, switch or argument.
    """
    __slots__ = ("_shorts", "_longs", "_help")

    def __init__(self, shorts=(), longs=(), help=None, /):
        self._shorts = tuple(shorts)
        self._longs = tuple(longs)
        self._help = help

    @property
    def shorts(self):
        return self._shorts

    @property
    def longs(self):
        return self._longs

    def short(self, name, /):
        """add a short name; names past the first one are hidden aliases."""
        name = _sanitize_short(name)
        if name in self._shorts:
            raise ValueError("short name %r is already used" % name)
        return Named((*self._shorts, name), self._longs, self._help)

    def long(self, name, /):
        """add a long name; names past the first one are hidden aliases."""
        name = _sanitize_long(name)
        if name in self._longs:
            raise ValueError("long name %r is already used" % name)
        return Named(self._shorts, (*self._longs, name), self._help)

    def help(self, help, /):
        return Named(self._shorts, self._longs, _sanitize_help(help))

    def _matches(self):
        shorts, longs = self._shorts, self._longs

        def matches(token):
            return any(token.is_short(name) for name in shorts) or any(token.is_long(name) for name in longs)

        return matches

    def _item(self, metavar=None):
        if not self._shorts and not self._longs:
            raise TypeError("a named item must have at least one short or long name")
        return Item(
            ItemKind.FLAG,
            short=self._shorts[0] if self._shorts else None,
            long=self._longs,
            metavar=metavar,
            help=self._help,
        )

    def switch(self):
        """True if the flag is present, False otherwise."""
        return self.flag(True, False)

    def flag(self, present, absent, /):
        """present if the flag is given, absent otherwise (absent may be None)."""
        return _build_flag(self, present, absent)

    def req_flag(self, present, /):
        """
        present if the flag is given, MissingError otherwise.

        meant to be combined:
            >>> on = long("on").req_flag(True)
            >>> off = long("off").req_flag(False)
            >>> state = (on | off).fallback(None)
        """
        return _build_flag(self, present, Unset)

    def argument(self, metavar, /):
        """named argument decoded as str; MessageError when the value is not utf8."""
        return _build_argument(self, metavar).parse(_not_utf8)

    def argument_os(self, metavar, /):
        """named argument in the os encoding (bytes)."""
        return _build_argument(self, metavar).map(_os)

    def __repr__(self):
        names = ["-" + name for name in self._shorts] + ["--" + name for name in self._longs]
        return "Named(%s)" % ", ".join(names)


def short(name, /):
    """start a Named builder from a short name: short("v") matches '-v'."""
    return Named((_sanitize_short(name),))


def long(name, /):
    """start a Named builder from a long name: long("verbose") matches '--verbose'."""
    return Named((), (_sanitize_long(name),))


def _os(word):
    return word.os


def _build_flag(named, present, absent):
    required = absent is Unset
    meta = Leaf(named._item().required_(required))
    matches = named._matches()

    @rename("take_flag[%s]" % meta.item.name)
    def parse(args):
        found, args = args.take_flag(matches)
        if found:
            return present, args
        if required:
            raise MissingError(meta)
        return absent, args

    return Parser(parse, meta)


def _build_argument(named, metavar):
    meta = Leaf(named._item(_sanitize_metavar(metavar)))
    matches = named._matches()

    @rename("take_arg[%s]" % meta.item.name)
    def parse(args):
        word, args = args.take_arg(matches)
        if word is None:
            raise MissingError(meta)
        return word, args

    return Parser(parse, meta)


def _build_positional(metavar):
    meta = Leaf(Item(ItemKind.POSITIONAL, metavar=_sanitize_metavar(metavar)))

    @rename("take_positional[%s]" % meta.item.name)
    def parse(args):
        word, args = args.take_positional_word()
        if word is None:
            raise MissingError(meta)
        return word, args

    return Parser(parse, meta)


def _build_positional_if(metavar, check):
    meta = Leaf(Item(ItemKind.POSITIONAL, metavar=_sanitize_metavar(metavar), required=False))
    missing = Leaf(meta.item.required_(True))

    @rename("take_positional_if[%s]" % meta.item.name)
    def parse(args):
        match args.peek():
            case None:
                return None, args
            case Word() as word:
                if not check(word):
                    return None, args
                word, args = args.take_positional_word()
                return word, args
            case _:
                # a named flag sits where the positional would be
                raise MissingError(missing)

    return Parser(parse, meta)


def positional(metavar, /):
    """positional value decoded as str; MessageError when it is not utf8."""
    return _build_positional(metavar).parse(_not_utf8)


def positional_os(metavar, /):
    """positional value in the os encoding (bytes)."""
    return _build_positional(metavar).map(_os)


def positional_if(metavar, check, /):
    """
    take the next positional only when check(value) accepts it; None otherwise.

    only the earliest remaining token is looked at, so a value that fails the check
    stays in place for the parsers that come after. an exception raised by check
    becomes MessageError, as with Parser.parse().

        >>> is_short = lambda value: len(value) < 10
        >>> name = positional_if("NAME", is_short)
    """
    if not callable(check):
        raise TypeError("positional_if() second argument must be callable")

    def accepts(word):
        if word.utf8 is None:
            return False
        try:
            return bool(check(word.utf8))
        except Fault:
            raise
        except Exception as exception:
            raise _delegated(exception) from exception

    return _build_positional_if(metavar, accepts).map(_utf8_or_none)


def _utf8_or_none(word):
    return None if word is None else word.utf8


__all__ = (
    "Named",
    "short",
    "long",
    "positional",
    "positional_os",
    "positional_if",
)
