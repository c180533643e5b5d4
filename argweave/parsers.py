"""
Argweave combinator core: Parser and its composition operators.

A Parser pairs
- a parsing function: Args -> (value, Args), raising a Fault on failure, and
- a Meta: the grammar it accepts, used for diagnostics and help.

Parsers hold only immutable configuration, so a single Parser can be run any number
of times, from any number of alternation branches, with identical behavior. Because
Args is immutable too, a failed attempt never needs undoing: the caller still holds
the state it passed in.

Operators
- map(f)             pure transform of the value.
- parse(f)           fallible transform; any exception from f becomes MessageError.
- guard(check, msg)  MessageError(msg) unless check(value).
- or_else(p) / a | b left-biased alternation; only MissingError falls through.
- many()             zero or more, until MissingError.
- some(msg)          one or more, MessageError(msg) on zero.
- optional()         MissingError → None.
- fallback(v)        MissingError → v.
- fallback_with(f)   MissingError → f(), failures of f become MessageError.
- zip(*ps)           sequencing, threads the state left to right, returns a tuple.
- Parser.pure(v)     consumes nothing, always v.
"""
import functools

from .faults import Fault, FaultCode, MessageError, MissingError
from .meta import Meta, Sequence
from .utils import rename


def _delegated(exception):
    message = str(exception) or type(exception).__name__
    return MessageError(
        message,
        code=FaultCode.INVALID_VALUE,
        title="invalid value",
        exception=exception,
    )


class Parser:
    """
    reusable parsing step plus the grammar it describes.

    calling a parser with an Args runs one step: parser(args) -> (value, remaining).
    """
    __slots__ = ("_parse", "_meta")

    def __init__(self, parse, meta, /):
        if not callable(parse):
            raise TypeError("Parser() first argument must be callable")
        if not isinstance(meta, Meta):
            raise TypeError("Parser() second argument must be a Meta")
        self._parse = parse
        self._meta = meta

    @property
    def meta(self):
        return self._meta

    def __call__(self, args, /):
        return self._parse(args)

    def __repr__(self):
        return "Parser(%s)" % (self._meta.usage() or "<empty>")

    @classmethod
    def pure(cls, value, /):
        """a parser that consumes nothing and always produces value."""

        @rename("pure")
        def parse(args):
            return value, args

        return cls(parse, Sequence())

    def map(self, function, /):
        """
        apply a pure function to the parsed value.

        >>> verbosity = short("v").req_flag(()).many().map(len)
        """
        if not callable(function):
            raise TypeError("map() argument must be callable")
        inner = self._parse

        @rename("map")
        def parse(args):
            value, args = inner(args)
            return function(value), args

        return Parser(parse, self._meta)

    def parse(self, function, /):
        """
        apply a fallible function to the parsed value.

        an exception raised by function marks the value as present but invalid
        (MessageError), as opposed to absent (MissingError). faults raised by
        function are passed through untouched.

        >>> jobs = short("j").argument("JOBS").parse(int)
        """
        if not callable(function):
            raise TypeError("parse() argument must be callable")
        inner = self._parse

        @rename("parse")
        def parse(args):
            value, args = inner(args)
            try:
                return function(value), args
            except Fault:
                raise
            except Exception as exception:
                raise _delegated(exception) from exception

        return Parser(parse, self._meta)

    def guard(self, check, message, /):
        """
        reject parsed values for which check(value) is false with MessageError(message).

        an exception raised by check becomes MessageError as in parse().
        """
        if not callable(check):
            raise TypeError("guard() first argument must be callable")
        if not isinstance(message, str):
            raise TypeError("guard() second argument must be a string")
        inner = self._parse

        @rename("guard")
        def parse(args):
            value, args = inner(args)
            try:
                accepted = check(value)
            except Fault:
                raise
            except Exception as exception:
                raise _delegated(exception) from exception
            if not accepted:
                raise MessageError(message, code=FaultCode.INVALID_VALUE, title="invalid value")
            return value, args

        return Parser(parse, self._meta)

    def or_else(self, other, /):
        """
        try self, then other, both against the same original state.

        - the first branch that succeeds wins, even when the other one would consume more
          tokens (strict left bias, no longest match).
        - when both are missing, the MissingError lists the grammar of both branches.
        - MessageError and EarlyExit from the first branch propagate at once; the second
          branch is never tried.
        """
        if not isinstance(other, Parser):
            raise TypeError("or_else() argument must be a Parser")
        left, right = self._parse, other._parse

        @rename("or_else")
        def parse(args):
            try:
                return left(args)
            except MissingError as missing:
                try:
                    return right(args)
                except MissingError as again:
                    raise missing.merge(again) from None

        return Parser(parse, Meta.or_(self._meta, other._meta))

    def __or__(self, other, /):
        if not isinstance(other, Parser):
            return NotImplemented
        return self.or_else(other)

    def many(self):
        """
        run the parser repeatedly, collecting values in order, until it is missing.

        zero matches is a valid (empty) result. an iteration that succeeds without
        consuming anything stops the repetition and contributes nothing, otherwise a
        parser that cannot fail (a switch, a fallback) would repeat forever.
        """
        inner = self._parse

        @rename("many")
        def parse(args):
            values = []
            while True:
                try:
                    value, remaining = inner(args)
                except MissingError:
                    return values, args
                if len(remaining) == len(args):
                    return values, args
                values.append(value)
                args = remaining

        return Parser(parse, self._meta.optional())

    def some(self, message, /):
        """
        like many(), but at least one value is required; zero values raise
        MessageError(message).
        """
        if not isinstance(message, str):
            raise TypeError("some() argument must be a string")
        return Parser(self.many().guard(bool, message)._parse, self._meta)

    def optional(self):
        """turn absence into None; any other fault still propagates."""
        return self.fallback(None)

    def fallback(self, value, /):
        """turn absence into value; any other fault still propagates."""
        inner = self._parse

        @rename("fallback")
        def parse(args):
            try:
                return inner(args)
            except MissingError:
                return value, args

        return Parser(parse, self._meta.optional())

    def fallback_with(self, function, /):
        """
        turn absence into function(); an exception from function becomes MessageError.

        function is called on every parse that needs it and never otherwise.
        """
        if not callable(function):
            raise TypeError("fallback_with() argument must be callable")
        inner = self._parse

        @rename("fallback_with")
        def parse(args):
            try:
                return inner(args)
            except MissingError:
                pass
            try:
                return function(), args
            except Fault:
                raise
            except Exception as exception:
                raise _delegated(exception) from exception

        return Parser(parse, self._meta.optional())

    def zip(self, *others):
        """
        run self and then each of others, threading the remaining state through them.

        returns a tuple of all values. each leaf claims only the tokens its own names
        match, so independent options can be given in any order. when any step fails
        the whole sequence fails with that fault and the caller's state is untouched.
        """
        for other in others:
            if not isinstance(other, Parser):
                raise TypeError("zip() arguments must be parsers")
        steps = (self._parse, *(other._parse for other in others))

        @rename("zip")
        def parse(args):
            values = []
            for step in steps:
                value, args = step(args)
                values.append(value)
            return tuple(values), args

        return Parser(parse, Meta.and_(self._meta, *(other._meta for other in others)))


def construct(function, /, *parsers):
    """
    zip parsers and apply function to their values; the common way of building a
    record type from independent options.

    >>> options = construct(Options, short("v").switch(), positional("FILE"))
    """
    if not callable(function):
        raise TypeError("construct() first argument must be callable")
    if not parsers:
        raise TypeError("construct() requires at least one parser")
    if not all(isinstance(parser, Parser) for parser in parsers):
        raise TypeError("construct() arguments after the first must be parsers")
    first, *rest = parsers
    return first.zip(*rest).map(functools.partial(_apply, function))


def _apply(function, values):
    return function(*values)


__all__ = (
    "Parser",
    "construct",
)
