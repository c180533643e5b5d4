"""
Argweave command layer: subcommands, parser info, and the outer driver.

What this module provides
- Info: immutable description of a program or subcommand (descr, header, footer,
  usage, version). Info(...).for_parser(parser) gives an OptionParser.
- OptionParser: a parser decorated with its Info. It answers '-h/--help' (and
  '-V/--version' when a version is set) with EarlyExit, and is what command()
  hands the remaining tokens to.
- command(name, help, subparser): a leaf that matches a literal leading word and
  resolves the rest of the tokens with an independently compiled grammar.
- OptionParser.run_inner / run: the outer driver (argv in, value or exit out).

Command boundary
- The parent sees a command as one opaque leaf: its Meta is the command name only, so
  an alternation of commands reports “expected one of check, build” and the parent's
  usage line never expands a subcommand's options.
- On a match, the whole remaining state goes to the subcommand as is; the value or
  fault the subcommand produces is returned unchanged, and so is the state it leaves.

Quick start
    from argweave import Info, command, long, positional

    workspace = long("workspace").help("check all packages in the workspace").switch()
    check = command("check", "check a package for errors", Info(descr="check a package").for_parser(workspace))
    parser = Info(version="1.0.0").for_parser(check)

    if __name__ == "__main__":
        print(parser.run())     # `prog check --workspace` → True
"""
import difflib
import logging
import os.path
import sys
from dataclasses import dataclass

from .arguments import short
from .faults import EarlyExit, FaultCode, MessageError, MissingError, ParseError, trigger
from .help import render_help
from .meta import Item, ItemKind, Leaf
from .parsers import Parser
from .state import Args
from .tokens import is_named
from .utils import Unset, coalesce, rename

logger = logging.getLogger(__name__)

_HELP = short("h").long("help").help("print this help message and exit").switch()
_VERSION = short("V").long("version").help("print version information and exit").switch()


def _sanitize_text(name, value):
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError("Info %r must be a string" % name)
    if not (value := value.strip()):
        raise ValueError("Info %r cannot be empty" % name)
    return value


@dataclass(frozen=True, slots=True)
class Info:
    """
    program or subcommand description used by help and version output.

    fields
    - descr: one-paragraph description printed first in help.
    - header: text printed after the description, before usage.
    - footer: text printed after all item sections.
    - usage: explicit usage line; synthesized from the grammar when None.
    - version: version text; enables '-V/--version' when set.
    """
    descr: str | None = None
    header: str | None = None
    footer: str | None = None
    usage: str | None = None
    version: str | None = None

    def __post_init__(self):
        for name in ("descr", "header", "footer", "usage", "version"):
            object.__setattr__(self, name, _sanitize_text(name, getattr(self, name)))

    def for_parser(self, parser, /):
        """attach this info to a parser, producing an OptionParser."""
        return OptionParser(parser, self)


class OptionParser:
    """
    a parser together with its Info: help/version aware, runnable from argv.
    """
    __slots__ = ("_parser", "_info")

    def __init__(self, parser, info=Unset, /):
        if not isinstance(parser, Parser):
            raise TypeError("OptionParser() first argument must be a Parser")
        info = coalesce(info, Info())
        if not isinstance(info, Info):
            raise TypeError("OptionParser() second argument must be an Info")
        self._parser = parser
        self._info = info

    @property
    def parser(self):
        return self._parser

    @property
    def info(self):
        return self._info

    @property
    def meta(self):
        return self._parser.meta

    def render_help(self, *, width=80):
        extras = [_HELP.meta.item]
        if self._info.version is not None:
            extras.append(_VERSION.meta.item)
        return render_help(self._info, self.meta, *extras, width=width)

    def _short_circuit(self, args):
        """raise EarlyExit when help or version was asked for in args."""
        asked, _ = _HELP(args)
        if asked:
            raise EarlyExit(self.render_help())
        if self._info.version is None:
            return
        asked, _ = _VERSION(args)
        if asked:
            raise EarlyExit("version: %s\n" % self._info.version)

    def parse(self, args, /):
        """
        run one step against args: (value, remaining args).

        help and version are honored both when the grammar succeeds and leaves them
        unclaimed, and when it fails with a ParseError (so '--help' works even when
        required items are missing). leftover tokens are returned, not rejected.
        """
        if not isinstance(args, Args):
            raise TypeError("parse() argument must be an Args")
        try:
            value, remaining = self._parser(args)
        except ParseError:
            self._short_circuit(args)
            raise
        self._short_circuit(remaining)
        return value, remaining

    __call__ = parse

    def _unexpected(self, remaining):
        token = remaining.peek()
        names = []
        for item in self.meta.leaves():
            if item.kind is ItemKind.FLAG:
                if item.short is not None:
                    names.append("-" + item.short)
                # hidden aliases are never suggested
                if item.long:
                    names.append("--" + item.long[0])
            elif item.kind is ItemKind.COMMAND:
                names.extend(item.long)
        suggestions = difflib.get_close_matches(str(token), names, 5)
        try:
            hint = "did you mean %r? you can also run '--help' to see the expected usage" % suggestions[0]
        except IndexError:
            hint = "remove the extra inputs; run '--help' to see the expected usage"
        kind = "option or flag" if is_named(token) else "value"
        return MessageError(
            "%s %r is not expected in this context" % (kind, str(token)),
            code=FaultCode.UNEXPECTED_TOKEN,
            title="unexpected %s" % kind,
            hint=hint,
            leftover=[str(item) for item in remaining],
            suggestions=suggestions,
        )

    def run_inner(self, argv, /):
        """
        resolve the grammar against a raw argument vector and return the value.

        raises EarlyExit for help/version and ParseError for failures; tokens left
        over after a successful parse are reported as a MessageError.
        """
        args = Args.from_argv(argv)
        value, remaining = self.parse(args)
        if remaining:
            logger.debug("unparsed tokens remain: %r", remaining)
            raise self._unexpected(remaining)
        return value

    def run(self, argv=Unset, /, *, shell=True, colorful=True, fancy=False, prog=Unset):
        """
        outer driver.

        - argv defaults to sys.argv[1:].
        - EarlyExit: the text is written to stdout as is and the process exits with 0.
          it is a successful outcome, never a failure.
        - ParseError: rendered through rich to stderr, exit status 1.
        - shell=False: faults (EarlyExit included) are raised to the caller instead.
        """
        main = __import__("__main__")
        argv = coalesce(argv, sys.argv[1:])
        prog = coalesce(prog, getattr(main, "__prog__", None) or os.path.basename(sys.argv[0] if sys.argv else "") or "argweave")
        try:
            return self.run_inner(argv)
        except EarlyExit as exit:
            logger.debug("early exit requested by %s", prog)
            if not shell:
                raise
            sys.stdout.write(exit.text)
            sys.stdout.flush()
            sys.exit(0)
        except ParseError as fault:
            logger.debug("parse failed for %s: %s", prog, fault.message)
            trigger(fault, shell=shell, colorful=colorful, fancy=fancy, prog=prog)

    def __repr__(self):
        return "OptionParser(%s)" % (self.meta.usage() or "<empty>")


def command(name, help, subparser, /):
    """
    subcommand leaf.

    matches only when the earliest remaining token is the word `name`; the rest of
    the tokens are then resolved by subparser (an OptionParser, or a plain Parser
    which gets an empty Info). help may be None, in which case the subparser's
    description is shown next to the command.

        >>> ws = long("workspace").help("check all packages in the workspace").switch()
        >>> check = command("check", "check a package for errors", Info().for_parser(ws))
    """
    if not isinstance(name, str):
        raise TypeError("command() name must be a string")
    if not (name := name.strip()) or name.startswith("-"):
        raise ValueError("command() name must be a non-empty word, got %r" % name)
    if isinstance(subparser, Parser):
        subparser = OptionParser(subparser)
    elif not isinstance(subparser, OptionParser):
        raise TypeError("command() subparser must be a Parser or an OptionParser")
    if help is None:
        help = subparser.info.descr
    elif not isinstance(help, str):
        raise TypeError("command() help must be a string or None")

    meta = Leaf(Item(ItemKind.COMMAND, long=(name,), help=help))

    @rename("take_cmd[%s]" % name)
    def parse(args):
        matched, args = args.take_cmd(name)
        if not matched:
            raise MissingError(meta)
        logger.debug("handing %d token(s) over to command %r", len(args), name)
        return subparser.parse(args)

    return Parser(parse, meta)


__all__ = (
    "Info",
    "OptionParser",
    "command",
)
