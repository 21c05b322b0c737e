"""Typed models for commands, parameters, and documentation entries."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping


class MemberKind(str, Enum):
    """Documentation member kinds and their canonical key prefixes."""

    METHOD = "M"
    TYPE = "T"
    FIELD = "F"
    PROPERTY = "P"
    EVENT = "E"


def _freeze_mapping(value: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True)
class CommandDescriptor:
    """Declarative metadata attached to a handler by the ``command`` decorator."""

    description: str = ""
    help_text: str = ""
    param_help: Mapping[str, str] = field(default_factory=dict)
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "param_help", _freeze_mapping(self.param_help))


@dataclass(frozen=True)
class Parameter:
    """One positional command parameter."""

    name: str
    type: type = str
    has_default: bool = False
    default: Any = None

    @property
    def type_name(self) -> str:
        return getattr(self.type, "__name__", str(self.type))


@dataclass(frozen=True)
class Command:
    """One invocable command visible on a dispatch target."""

    name: str
    parameters: tuple[Parameter, ...] = ()
    description: str = ""
    help_text: str = ""
    param_help: Mapping[str, str] = field(default_factory=dict)
    attr_name: str | None = None
    handler: Callable[..., Any] | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))
        object.__setattr__(self, "param_help", _freeze_mapping(self.param_help))

    @property
    def required_count(self) -> int:
        """Number of parameters without a default value."""
        return sum(1 for param in self.parameters if not param.has_default)


@dataclass(frozen=True)
class DocEntry:
    """Documentation record for one member, keyed by its canonical key."""

    key: str
    summary: str = ""
    remarks: str = ""
    params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", _freeze_mapping(self.params))


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of converting one token: a value or a failure reason."""

    ok: bool
    value: Any = None
    reason: str = ""

    @classmethod
    def success(cls, value: Any) -> "ConversionResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, reason: str) -> "ConversionResult":
        return cls(ok=False, reason=reason)
