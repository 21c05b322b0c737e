"""Command registration: descriptors, per-type command tables, and lookup."""

import inspect
import logging
import typing
from typing import Any, Callable, Iterable, Iterator, Mapping

from replkit.errors import CommandNotFoundError, RegistrationError
from replkit.models import Command, CommandDescriptor, Parameter

logger = logging.getLogger(__name__)

DESCRIPTOR_ATTR = "__replkit_command__"

_POSITIONAL_KINDS = frozenset(
    (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
)
_TABLE_CACHE: dict[type, tuple[Command, ...]] = {}


def command(
    description: str = "",
    *,
    help_text: str = "",
    params: Mapping[str, str] | None = None,
    name: str | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Mark a handler as a visible command.

    Only handlers carrying this descriptor are dispatchable or listed in help.
    ``description`` is the short text shown in the summary table, ``help_text``
    the long-form body, and ``params`` maps parameter names to help text.
    """
    descriptor = CommandDescriptor(
        description=description,
        help_text=help_text,
        param_help=params or {},
        name=name,
    )

    def decorate(func: Callable[..., Any]) -> Callable[..., Any]:
        target = func.__func__ if isinstance(func, (staticmethod, classmethod)) else func
        setattr(target, DESCRIPTOR_ATTR, descriptor)
        return func

    return decorate


def get_descriptor(obj: Any) -> CommandDescriptor | None:
    """Return the command descriptor attached to ``obj``, if any."""
    if isinstance(obj, (staticmethod, classmethod)):
        obj = obj.__func__
    return getattr(obj, DESCRIPTOR_ATTR, None)


def _resolve_hints(func: Callable[..., Any]) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except Exception as e:
        raise RegistrationError(
            f"Cannot resolve parameter types of '{func.__qualname__}': {e}"
        ) from e


def build_parameters(func: Callable[..., Any], skip_first: bool = False) -> tuple[Parameter, ...]:
    """Read positional parameter metadata from a handler signature."""
    hints = _resolve_hints(func)
    signature = inspect.signature(func)
    sig_params = list(signature.parameters.values())
    if skip_first:
        sig_params = sig_params[1:]

    params: list[Parameter] = []
    for sig_param in sig_params:
        if sig_param.kind not in _POSITIONAL_KINDS:
            raise RegistrationError(
                f"Command handler '{func.__qualname__}' has unsupported parameter "
                f"'{sig_param.name}'; only positional parameters are allowed"
            )
        annotation = hints.get(sig_param.name, str)
        if not isinstance(annotation, type):
            raise RegistrationError(
                f"Parameter '{sig_param.name}' of '{func.__qualname__}' must be annotated "
                f"with a class, got {annotation!r}"
            )
        has_default = sig_param.default is not inspect.Parameter.empty
        params.append(
            Parameter(
                name=sig_param.name,
                type=annotation,
                has_default=has_default,
                default=sig_param.default if has_default else None,
            )
        )
    return tuple(params)


def build_command(
    func: Callable[..., Any],
    descriptor: CommandDescriptor,
    attr_name: str | None = None,
    skip_first: bool = False,
) -> Command:
    """Build a Command record from a handler and its descriptor."""
    name = descriptor.name or attr_name or func.__name__
    return Command(
        name=name,
        parameters=build_parameters(func, skip_first=skip_first),
        description=descriptor.description,
        help_text=descriptor.help_text,
        param_help=descriptor.param_help,
        attr_name=attr_name,
        handler=func,
    )


def _declared_attr_names(target_type: type) -> list[str]:
    """Attribute names in declaration order, base classes first."""
    seen: dict[str, None] = {}
    for klass in reversed(target_type.__mro__):
        for attr_name in vars(klass):
            seen.setdefault(attr_name, None)
    return list(seen)


def _static_lookup(target_type: type, attr_name: str) -> Any:
    for klass in target_type.__mro__:
        if attr_name in vars(klass):
            return vars(klass)[attr_name]
    return None


def _build_table(target_type: type) -> tuple[Command, ...]:
    commands: list[Command] = []
    names: set[str] = set()

    for attr_name in _declared_attr_names(target_type):
        raw = _static_lookup(target_type, attr_name)
        descriptor = get_descriptor(raw)
        if descriptor is None:
            continue

        if isinstance(raw, staticmethod):
            func, skip_first = raw.__func__, False
        elif isinstance(raw, classmethod):
            func, skip_first = raw.__func__, True
        elif inspect.isfunction(raw):
            func, skip_first = raw, True
        else:
            raise RegistrationError(f"Command '{attr_name}' is not a function")

        cmd = build_command(func, descriptor, attr_name=attr_name, skip_first=skip_first)
        if cmd.name in names:
            raise RegistrationError(f"Duplicate command name: {cmd.name}")
        names.add(cmd.name)
        commands.append(cmd)

    return tuple(commands)


def command_table(target_type: type) -> tuple[Command, ...]:
    """Return the cached command table for a dispatch-target type."""
    table = _TABLE_CACHE.get(target_type)
    if table is None:
        table = _build_table(target_type)
        _TABLE_CACHE[target_type] = table
        logger.debug(
            "Built command table for %s: %s",
            target_type.__qualname__,
            ", ".join(cmd.name for cmd in table),
        )
    return table


class CommandRegistry:
    """Visible commands of one dispatch target, in declaration order."""

    def __init__(self, commands: Iterable[Command] = ()) -> None:
        self._commands: dict[str, Command] = {}
        for cmd in commands:
            self.add(cmd)

    @classmethod
    def for_type(cls, target_type: type) -> "CommandRegistry":
        """Create a registry over the cached table of ``target_type``."""
        return cls(command_table(target_type))

    def add(self, cmd: Command) -> None:
        """Add a command; names must be unique."""
        if cmd.name in self._commands:
            raise RegistrationError(f"Duplicate command name: {cmd.name}")
        self._commands[cmd.name] = cmd

    def resolve(self, name: str) -> Command:
        """Return the command named exactly ``name`` or raise CommandNotFoundError."""
        cmd = self._commands.get(name)
        if cmd is None:
            raise CommandNotFoundError(name)
        return cmd

    def get(self, name: str) -> Command | None:
        return self._commands.get(name)

    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands.values())

    def names(self) -> list[str]:
        return list(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands())

    def __len__(self) -> int:
        return len(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands
