"""
Argweave help rendering: walk a Meta tree and lay it out as plain text.

The result is a string because help travels inside EarlyExit and is printed
verbatim by the driver. Layout is done with rich (grid tables handle the column
alignment and wrapping of long help texts) and captured without colors.

Sections, each only when non-empty
- description, header
- usage line (explicit Info.usage, or synthesized from the Meta)
- available positional items / available options / available commands
- footer
"""
import io

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .meta import ItemKind

_SECTIONS = (
    (ItemKind.POSITIONAL, "available positional items:"),
    (ItemKind.FLAG, "available options:"),
    (ItemKind.COMMAND, "available commands:"),
)


def _label(item):
    match item.kind:
        case ItemKind.FLAG:
            names = []
            if item.short is not None:
                names.append("-" + item.short)
            if item.long:
                names.append("--" + item.long[0])
            # keep long names in one column when the short one is missing
            label = ", ".join(names) if item.short is not None else "    " + names[0]
            if item.metavar is not None:
                label += " " + item.metavar
            return label
        case _:
            return item.name


def _visible(meta, *extras):
    """leaves in grammar order, each once (requiredness does not make a new entry)."""
    seen = set()
    for item in (*meta.leaves(), *extras):
        key = (item.kind, item.short, item.long, item.metavar)
        if key in seen:
            continue
        seen.add(key)
        yield item


def render_help(info, meta, /, *extras, width=80):
    """
    render help for a parser described by info (Info) and meta (Meta).

    extras are additional leaves listed after the grammar's own (the builtin
    help and version flags).
    """
    renders = []

    if info.descr:
        renders.append(Text(info.descr))
        renders.append(Text(""))
    if info.header:
        renders.append(Text(info.header))
        renders.append(Text(""))

    usage = info.usage if info.usage is not None else meta.usage()
    renders.append(Text.assemble("usage: ", usage))

    items = list(_visible(meta, *extras))
    for kind, title in _SECTIONS:
        section = [item for item in items if item.kind is kind]
        if not section:
            continue
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        for item in section:
            table.add_row(Text("  " + _label(item)), Text(item.help or ""))
        renders.append(Text(""))
        renders.append(Text(title))
        renders.append(table)

    if info.footer:
        renders.append(Text(""))
        renders.append(Text(info.footer))

    console = Console(file=io.StringIO(), width=width, color_system=None, highlight=False, emoji=False)
    with console.capture() as capture:
        console.print(Group(*renders))
    return "\n".join(line.rstrip() for line in capture.get().splitlines()) + "\n"


__all__ = (
    "render_help",
)
