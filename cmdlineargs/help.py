"""
cmdlineargs help renderer.

Reports
- usage: "Usage: <prog>" followed by one synopsis item per named parameter
  (registration order) and then per positional parameter.
  • required with short name: (-s <name> | --name <name>)
  • required without short name: --name <name>
  • optional: [--name <name>]  (short form included when present)
  • flags omit the metavar: [-f | --force]
  • lists append " ...", optional positionals are bracketed.
  The synopsis wraps at a fixed width (80) and continuation lines are indented
  to align under the first item.
- options: "Options:" then one row per named parameter and per positional
  parameter, four columns in. The help column starts at the widest signature
  plus the indent plus one. Enumerated parameters append
  ". Valid values: v1, v2" (sorted).
- help: description paragraph (when set), usage, options.

Rendering produces rich Text; emit() writes it to a caller-supplied sink with
soft wrapping so the console never re-wraps the computed layout.

Palette keys
- usage-label, program-name, group-label, option-name, flag-name, metavar,
  choice, argument-description, description-section
Define a mapping named __styles__ in __main__ to override any palette entry.
"""
import sys
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .registry import Registry
from .utils import Unset, coalesce

WIDTH = 80
INDENT = 4


def _texter(colorful):
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "group-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "flag-name": "bold #22C55E",
        "metavar": "bold #FFD600",
        "choice": "bold #FF4D94",
        "argument-description": "#9CA3AF",
        "description-section": "italic #A3A3A3",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def text(fragment, style=""):
        # Normalize to Rich Text; styles are dropped in non-colorful mode.
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), styles[style])

    return text


def _usage_item(parameter, text):
    metavar = text("<%s>" % parameter.name, "metavar")

    if parameter.positional:
        item = metavar
        if parameter.multiple:
            item = Text.assemble(item, " ...")
        if not parameter.required:
            item = Text.assemble("[", item, "]")
        return item

    style = "flag-name" if parameter.flag else "option-name"
    item = Text()
    if parameter.short is not None:
        item.append_text(text("-" + parameter.short, style))
        if not parameter.flag:
            item.append(" ").append_text(metavar.copy())
        item.append(" | ")
    item.append_text(text("--" + parameter.name, style))
    if not parameter.flag:
        item.append(" ").append_text(metavar)
    if parameter.multiple:
        item.append(" ...")

    if not parameter.required:
        return Text.assemble("[", item, "]")
    if parameter.short is not None:
        return Text.assemble("(", item, ")")
    return item


def render_usage(registry, prog, /, *, width=WIDTH, colorful=False):
    """
    Build the usage synopsis, wrapped at width columns.
    """
    if not isinstance(registry, Registry):
        raise TypeError("render_usage() first argument must be a registry")
    text = _texter(colorful)

    usage = Text.assemble(text("Usage", "usage-label"), ": ", text(prog, "program-name"))
    offset = column = len(usage)

    for parameter in registry:
        item = Text.assemble(" ", _usage_item(parameter, text))
        if column > offset and column + len(item) > width:
            usage.append("\n" + " " * offset)
            column = offset
        usage.append_text(item)
        column += len(item)

    return usage.append("\n")


def _signature(parameter, text):
    metavar = text("<%s>" % parameter.name, "metavar")
    if parameter.positional:
        return metavar

    style = "flag-name" if parameter.flag else "option-name"
    signature = Text()
    if parameter.short is not None:
        signature.append_text(text("-" + parameter.short, style)).append(", ")
    signature.append_text(text("--" + parameter.name, style))
    if not parameter.flag:
        signature.append(" ").append_text(metavar)
    return signature


def render_options(registry, /, *, colorful=False):
    """
    Build the aligned option table.
    """
    if not isinstance(registry, Registry):
        raise TypeError("render_options() argument must be a registry")
    text = _texter(colorful)

    rows = [(_signature(parameter, text), parameter) for parameter in registry]
    column = max((len(signature) for signature, _ in rows), default=0) + INDENT + 1

    table = Text.assemble(text("Options", "group-label"), ":\n")
    for signature, parameter in rows:
        table.append(" " * INDENT).append_text(signature)
        table.append(" " * (column - INDENT - len(signature)))
        table.append_text(text(parameter.help, "argument-description"))
        if choices := parameter.choices:
            table.append(". Valid values: ")
            table.append_text(Text(", ").join(text(choice, "choice") for choice in choices))
        table.append("\n")

    return table


def render_help(registry, prog, /, *, description=Unset, width=WIDTH, colorful=False):
    """
    Build the full report: description, usage and options.
    """
    text = _texter(colorful)
    report = Text()
    if description := coalesce(description):
        report.append_text(text(description, "description-section")).append("\n\n")
    report.append_text(render_usage(registry, prog, width=width, colorful=colorful))
    report.append_text(render_options(registry, colorful=colorful))
    return report


def emit(report, /, file=Unset):
    """
    Write a rendered report to a text sink (stdout when omitted).
    """
    console = Console(file=coalesce(file, sys.stdout), soft_wrap=True, highlight=False, emoji=False)
    console.print(report, end="")


__all__ = (
    "render_usage",
    "render_options",
    "render_help",
    "emit",
    "WIDTH",
    "INDENT",
)
