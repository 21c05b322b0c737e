"""External documentation lookup keyed by canonical member keys.

A documentation source is an XML export with one ``<member>`` element per
documented member::

    <doc>
      <members>
        <member name="M:package.module.Class.method">
          <summary>Short description.</summary>
          <remarks>Long-form help.</remarks>
          <param name="x">Help for x.</param>
        </member>
      </members>
    </doc>

Keys have the form ``<prefix>:<dotted.full.name>`` where the prefix is one
letter of ``MemberKind``.
"""

import inspect
import logging
import sys
import textwrap
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

from replkit.errors import DocumentationLoadError
from replkit.models import Command, DocEntry, MemberKind
from replkit.registry import command_table

logger = logging.getLogger(__name__)

DOC_FILE_SUFFIX = ".xml"

Locator = Callable[[type], Path]


def member_full_name(obj: Any) -> str:
    """Dotted name from module through enclosing classes to the member."""
    if isinstance(obj, property):
        obj = obj.fget
    elif isinstance(obj, (staticmethod, classmethod)):
        obj = obj.__func__
    module = getattr(obj, "__module__", None)
    qualname = getattr(obj, "__qualname__", None)
    if not module or not qualname:
        raise TypeError(f"Cannot derive a documentation name for {obj!r}")
    return f"{module}.{qualname}"


def member_kind(obj: Any) -> MemberKind:
    if isinstance(obj, type):
        return MemberKind.TYPE
    if isinstance(obj, property):
        return MemberKind.PROPERTY
    if callable(obj) or isinstance(obj, (staticmethod, classmethod)):
        return MemberKind.METHOD
    return MemberKind.FIELD


def member_key(obj: Any) -> str:
    """Canonical documentation key for a class, function, or property."""
    return f"{member_kind(obj).value}:{member_full_name(obj)}"


def parse_member_key(key: str) -> tuple[MemberKind, str]:
    """Split a canonical key into its member kind and dotted name."""
    prefix, sep, name = key.partition(":")
    if not sep or not name:
        raise ValueError(f"Invalid member key: {key!r}")
    try:
        kind = MemberKind(prefix)
    except ValueError:
        raise ValueError(f"Unknown member kind prefix in key: {key!r}") from None
    return kind, name


def _element_text(element: ET.Element | None) -> str:
    if element is None:
        return ""
    text = "".join(element.itertext())
    return textwrap.dedent(text.strip("\n")).strip()


def parse_documentation(root: ET.Element) -> list[DocEntry]:
    """Extract documentation entries from a parsed XML document."""
    members = root.find("members")
    if members is None:
        raise ValueError("missing <members> element")

    entries: list[DocEntry] = []
    for member in members.findall("member"):
        key = member.get("name")
        if not key:
            continue
        params = {
            param.get("name", ""): _element_text(param)
            for param in member.findall("param")
            if param.get("name")
        }
        entries.append(
            DocEntry(
                key=key,
                summary=_element_text(member.find("summary")),
                remarks=_element_text(member.find("remarks")),
                params=params,
            )
        )
    return entries


def load_documentation(path: str | Path) -> list[DocEntry]:
    """Load documentation entries from one XML source file."""
    doc_path = Path(path)
    try:
        tree = ET.parse(doc_path)
        entries = parse_documentation(tree.getroot())
    except (OSError, ET.ParseError, ValueError) as e:
        raise DocumentationLoadError(f"Cannot load documentation from {doc_path}: {e}") from e

    logger.info("Loaded %d documentation entries from %s", len(entries), doc_path)
    return entries


def default_locator(owner: type) -> Path:
    """Documentation file beside the owner's module: ``pkg/mod.py`` -> ``pkg/mod.xml``."""
    module = sys.modules.get(owner.__module__)
    if module is None:
        raise DocumentationLoadError(f"Module {owner.__module__} is not loaded")
    try:
        module_file = inspect.getfile(module)
    except TypeError as e:
        raise DocumentationLoadError(
            f"Module {owner.__module__} has no source file to locate documentation"
        ) from e
    return Path(module_file).with_suffix(DOC_FILE_SUFFIX)


def _declaring_types(target_type: type) -> list[type]:
    """Classes in the MRO of ``target_type`` that declare a visible command."""
    declared_keys = {cmd.attr_name for cmd in command_table(target_type)}
    owners: list[type] = []
    for klass in target_type.__mro__:
        if any(name in vars(klass) for name in declared_keys):
            owners.append(klass)
    return owners


class DocumentationProvider:
    """Merged index of documentation entries from one or more sources."""

    def __init__(self, sources: Iterable[Iterable[DocEntry]] = ()) -> None:
        self._entries: dict[str, DocEntry] = {}
        for source in sources:
            self.merge(source)

    @classmethod
    def from_files(cls, paths: Iterable[str | Path]) -> "DocumentationProvider":
        """Load and merge documentation files; any failure is fatal."""
        return cls(load_documentation(path) for path in paths)

    @classmethod
    def for_types(cls, *owners: type, locate: Locator = default_locator) -> "DocumentationProvider":
        """Load one documentation source per distinct owner module."""
        if not owners:
            raise DocumentationLoadError("At least one owner type is required")
        paths: list[Path] = []
        for owner in owners:
            path = locate(owner)
            if path not in paths:
                paths.append(path)
        return cls.from_files(paths)

    @classmethod
    def for_program(cls, target_type: type, locate: Locator = default_locator) -> "DocumentationProvider":
        """Documentation for every class declaring a command visible on ``target_type``."""
        owners = _declaring_types(target_type)
        if not owners:
            owners = [target_type]
        return cls.for_types(*owners, locate=locate)

    @classmethod
    def from_mapping(cls, entries: Mapping[str, Mapping[str, Any]]) -> "DocumentationProvider":
        """Build a provider from ``{key: {"summary": ..., "remarks": ..., "params": {...}}}``."""
        return cls(
            [
                [
                    DocEntry(
                        key=key,
                        summary=str(data.get("summary", "")),
                        remarks=str(data.get("remarks", "")),
                        params=dict(data.get("params") or {}),
                    )
                    for key, data in entries.items()
                ]
            ]
        )

    def merge(self, entries: Iterable[DocEntry]) -> None:
        """Add entries; the first entry seen for a key wins."""
        for entry in entries:
            if entry.key in self._entries:
                logger.warning("Duplicate documentation key ignored: %s", entry.key)
                continue
            self._entries[entry.key] = entry

    def lookup(self, key: str) -> DocEntry | None:
        return self._entries.get(key)

    def entry_for(self, obj: Any) -> DocEntry | None:
        """Documentation entry for a class, function, or property."""
        try:
            key = member_key(obj)
        except TypeError:
            return None
        return self._entries.get(key)

    def entry_for_command(self, cmd: Command) -> DocEntry | None:
        if cmd.handler is None:
            return None
        return self.entry_for(cmd.handler)

    def keys(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
