"""
Argweave grammar model: a static description of what a parser accepts.

Shapes
- Item: one leaf (named flag/argument, positional, or command) with its names,
  metavar, help text, and requiredness.
- Meta: the composed tree, one of
  • Leaf(item)
  • Alternatives(metas)  “one of these”
  • Sequence(metas)      “all of these”

The same tree drives two consumers: MissingError diagnostics (“expected one of ...”)
and help/usage rendering. Nodes are immutable; combinators build new nodes and never
touch the ones they wrap. Requiredness lives on the leaves, so making a subtree
optional (fallback, optional, many) rewrites its leaves into fresh Items.
"""
import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class ItemKind(Enum):
    FLAG = "flag"
    POSITIONAL = "positional"
    COMMAND = "command"


@dataclass(frozen=True, slots=True)
class Item:
    """
    descriptor of a single grammar leaf.

    fields
    - kind: ItemKind.
    - short: single-character name (flags only), or None.
    - long: long names; the first is canonical, the rest are hidden aliases.
      for commands this holds the command name.
    - metavar: placeholder for the value of arguments and positionals.
    - help: help text shown next to the item.
    - required: whether absence is a failure.
    """
    kind: ItemKind
    short: str | None = None
    long: tuple[str, ...] = ()
    metavar: str | None = None
    help: str | None = None
    required: bool = True

    @property
    def name(self):
        """the name used in diagnostics: '-s', '--long', '<METAVAR>' or the command name."""
        match self.kind:
            case ItemKind.COMMAND:
                return self.long[0]
            case ItemKind.POSITIONAL:
                return "<%s>" % self.metavar
            case _:
                if self.short is not None:
                    return "-" + self.short
                return "--" + self.long[0]

    def required_(self, required, /):
        """return a copy with the given requiredness (the original is left untouched)."""
        if self.required is required:
            return self
        return dataclasses.replace(self, required=required)

    def usage(self):
        """'-n NAME', '--flag', '<FILE>', 'check' (without optional brackets)."""
        if self.kind is ItemKind.FLAG and self.metavar is not None:
            return "%s %s" % (self.name, self.metavar)
        return self.name


class Meta(ABC):
    """
    abstract base of the grammar tree.

    the helpers below are the only way combinators build metas, so flattening and
    requiredness rules stay in one place.
    """
    __slots__ = ()

    @staticmethod
    def and_(*metas):
        """sequence of metas, flattening nested sequences."""
        items = []
        for meta in metas:
            if isinstance(meta, Sequence):
                items.extend(meta.metas)
            else:
                items.append(meta)
        if len(items) == 1:
            return items[0]
        return Sequence(tuple(items))

    @staticmethod
    def or_(*metas):
        """alternatives of metas, flattening nested alternatives."""
        items = []
        for meta in metas:
            if isinstance(meta, Alternatives):
                items.extend(meta.metas)
            else:
                items.append(meta)
        if len(items) == 1:
            return items[0]
        return Alternatives(tuple(items))

    @abstractmethod
    def optional(self):
        ...

    @property
    @abstractmethod
    def required(self):
        ...

    @property
    def empty(self):
        return False

    @abstractmethod
    def leaves(self):
        ...

    @abstractmethod
    def usage(self):
        ...

    def __str__(self):
        return self.usage()


@dataclass(frozen=True, slots=True)
class Leaf(Meta):
    item: Item

    def optional(self):
        if not self.item.required:
            return self
        return Leaf(self.item.required_(False))

    @property
    def required(self):
        return self.item.required

    def leaves(self):
        yield self.item

    def usage(self, *, bare=False):
        if bare or self.item.required:
            return self.item.usage()
        return "[%s]" % self.item.usage()


@dataclass(frozen=True, slots=True)
class Alternatives(Meta):
    metas: tuple[Meta, ...]

    def optional(self):
        return Alternatives(tuple(meta.optional() for meta in self.metas))

    @property
    def required(self):
        # one optional branch is enough to make the whole choice optional
        return all(meta.required for meta in self.metas)

    @property
    def empty(self):
        return all(meta.empty for meta in self.metas)

    def leaves(self):
        for meta in self.metas:
            yield from meta.leaves()

    def usage(self, *, bare=False):
        branches = []
        for meta in self.metas:
            if meta.empty:
                continue
            if isinstance(meta, Leaf):
                branches.append(meta.usage(bare=True))
            else:
                branches.append(meta.usage())
        if not branches:
            return ""
        if len(branches) == 1 and self.required:
            return branches[0]
        body = " | ".join(branches)
        if self.required:
            return body if bare else "(%s)" % body
        return "[%s]" % body


@dataclass(frozen=True, slots=True)
class Sequence(Meta):
    metas: tuple[Meta, ...] = ()

    def optional(self):
        return Sequence(tuple(meta.optional() for meta in self.metas))

    @property
    def required(self):
        return any(meta.required for meta in self.metas)

    @property
    def empty(self):
        return all(meta.empty for meta in self.metas)

    def leaves(self):
        for meta in self.metas:
            yield from meta.leaves()

    def usage(self, *, bare=False):
        return " ".join(usage for meta in self.metas if (usage := meta.usage()))


__all__ = (
    "ItemKind",
    "Item",
    "Meta",
    "Leaf",
    "Alternatives",
    "Sequence",
)
