"""Text formatters for usage and help output."""

from typing import Callable, Iterable

from replkit.models import Command, DocEntry, Parameter

DocLookup = Callable[[Command], DocEntry | None]


def _parameter_usage(param: Parameter) -> str:
    if param.has_default:
        return f"[{param.name}]"
    return param.name


def format_usage(cmd: Command) -> str:
    """Render ``name param [optional]`` for a command."""
    parts = [cmd.name]
    parts.extend(_parameter_usage(param) for param in cmd.parameters)
    return " ".join(parts)


def short_description(cmd: Command, doc: DocEntry | None = None) -> str:
    """Documentation summary, falling back to the command's own description.

    A command with no documentation entry is therefore not blank when its
    ``@command`` description is set; the result is empty (and the command
    left out of the summary table) only when neither source has text.
    """
    if doc is not None and doc.summary.strip():
        return doc.summary.strip()
    return cmd.description.strip()


def _long_help(cmd: Command, doc: DocEntry | None) -> str:
    if doc is not None and doc.remarks.strip():
        return doc.remarks.strip()
    return cmd.help_text.strip()


def _parameter_help(cmd: Command, doc: DocEntry | None, name: str) -> str:
    if doc is not None and doc.params.get(name, "").strip():
        return doc.params[name].strip()
    return cmd.param_help.get(name, "").strip()


def format_full_help(cmd: Command, doc: DocEntry | None = None) -> str:
    """Render the full help page for one command."""
    sections = [
        f"{cmd.name}\n  {short_description(cmd, doc)}",
        f"\t{format_usage(cmd)}",
    ]

    if cmd.parameters:
        lines = []
        for param in cmd.parameters:
            text = _parameter_help(cmd, doc, param.name)
            lines.append(f"  {param.name}\t{text}".rstrip())
        sections.append("\n".join(lines))

    remarks = _long_help(cmd, doc)
    if remarks:
        sections.append(remarks)

    return "\n\n".join(sections)


def format_summary_table(commands: Iterable[Command], lookup: DocLookup | None = None) -> str:
    """One line per described command, in declaration order."""
    lines = []
    for cmd in commands:
        doc = lookup(cmd) if lookup is not None else None
        description = short_description(cmd, doc)
        if description:
            lines.append(f"\t{cmd.name}\t\t{description}\n")
    return "".join(lines)
