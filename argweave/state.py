"""
Argweave consumption state: the tokens a grammar has not claimed yet.

Args is an immutable, ordered view over classified tokens. Every scan walks the
remaining tokens strictly left to right and the first structural match wins. An
operation never changes the Args it was called on: it returns its result together
with a fresh Args, so trying an alternative and abandoning it is just dropping the
returned state, and a failed attempt leaves the caller's state token-for-token intact.

Operations
- take_flag(predicate)        → (bool, Args)
- take_arg(predicate)         → (Word | None, Args)   raises MessageError on a valueless flag
- take_cmd(name)              → (bool, Args)
- take_positional_word()      → (Word | None, Args)
- peek()                      → Token | None
"""
from collections.abc import Iterable

from .faults import FaultCode, MessageError
from .tokens import Word, is_named, tokenize


class Args:
    __slots__ = ("_items", "_separated")

    def __init__(self, items=(), /, *, separated=False):
        items = tuple(items)
        for item in items:
            if not (isinstance(item, Word) or is_named(item)):
                raise TypeError("Args() items must be classified tokens (Word, Short or Long)")
        self._items = items
        self._separated = bool(separated)

    @classmethod
    def from_argv(cls, argv, /):
        """
        build the initial state from raw process arguments (str or bytes).

        the first '--' is consumed and recorded in `separated`; every token after it
        is a Word.
        """
        if isinstance(argv, str | bytes) or not isinstance(argv, Iterable):
            raise TypeError("from_argv() argument must be an iterable of str or bytes")
        argv = list(argv)
        items = tuple(tokenize(argv))
        # tokenize() drops exactly one token, the separator, when there is one
        return cls(items, separated=len(items) < len(argv))

    @property
    def items(self):
        return self._items

    @property
    def separated(self):
        return self._separated

    def _replace(self, items):
        return type(self)(items, separated=self._separated)

    def _without(self, *indices):
        return self._replace(item for index, item in enumerate(self._items) if index not in indices)

    def peek(self):
        """earliest remaining token, or None when nothing is left."""
        return self._items[0] if self._items else None

    def take_flag(self, predicate, /):
        """
        remove the first named token accepted by predicate.

        returns (True, new state) when found, (False, self) otherwise. never fails.
        """
        for index, item in enumerate(self._items):
            if is_named(item) and predicate(item):
                return True, self._without(index)
        return False, self

    def take_arg(self, predicate, /):
        """
        remove the first named token accepted by predicate together with its value.

        the value is the attached one ('--name=VALUE', '-nVALUE') or else the Word that
        immediately follows the flag. a matching flag without a usable value is a
        malformed input (MessageError), not an absent option. when no flag matches,
        returns (None, self).
        """
        for index, item in enumerate(self._items):
            if not (is_named(item) and predicate(item)):
                continue
            if item.value is not None:
                return item.value, self._without(index)
            try:
                value = self._items[index + 1]
            except IndexError:
                raise MessageError(
                    "%s requires an argument" % item,
                    code=FaultCode.MISSING_VALUE,
                    title="missing value",
                    hint="pass a value after %s (for example: %s VALUE)" % (item, item),
                ) from None
            if not isinstance(value, Word):
                raise MessageError(
                    "%s requires an argument, got a flag %s" % (item, value),
                    code=FaultCode.MISSING_VALUE,
                    title="missing value",
                    hint="attach the value to the flag or place a value right after %s" % item,
                )
            return value, self._without(index, index + 1)
        return None, self

    def take_cmd(self, name, /):
        """
        remove the earliest remaining token if it is the Word `name`.

        only the very first remaining token is considered: a command name further
        down the list is a positional value, not a command.
        """
        match self.peek():
            case Word(utf8=utf8) if utf8 == name:
                return True, self._without(0)
            case _:
                return False, self

    def take_positional_word(self):
        """
        remove the earliest remaining Word; named tokens are skipped since they are
        a disjoint token kind.
        """
        for index, item in enumerate(self._items):
            if isinstance(item, Word):
                return item, self._without(index)
        return None, self

    def __len__(self):
        return len(self._items)

    def __bool__(self):
        return bool(self._items)

    def __iter__(self):
        return iter(self._items)

    def __eq__(self, other):
        if not isinstance(other, Args):
            return NotImplemented
        return self._items == other._items and self._separated == other._separated

    def __hash__(self):
        return hash((self._items, self._separated))

    def __repr__(self):
        return "Args([%s]%s)" % (
            ", ".join(repr(str(item)) for item in self._items),
            ", separated=True" if self._separated else "",
        )


__all__ = (
    "Args",
)
