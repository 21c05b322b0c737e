"""Argument conversion from string tokens to parameter types."""

from typing import Any, Callable, Sequence

from replkit.errors import ArgumentCountError, ArgumentTypeError
from replkit.models import Command, ConversionResult, Parameter

Converter = Callable[[str], Any]

_TRUE_TOKENS = frozenset(("true",))
_FALSE_TOKENS = frozenset(("false",))


def _parse_int(token: str) -> ConversionResult:
    try:
        return ConversionResult.success(int(token))
    except ValueError:
        return ConversionResult.failure(f"'{token}' is not an integer")


def _parse_float(token: str) -> ConversionResult:
    try:
        return ConversionResult.success(float(token))
    except ValueError:
        return ConversionResult.failure(f"'{token}' is not a number")


def _parse_bool(token: str) -> ConversionResult:
    lowered = token.lower()
    if lowered in _TRUE_TOKENS:
        return ConversionResult.success(True)
    if lowered in _FALSE_TOKENS:
        return ConversionResult.success(False)
    return ConversionResult.failure(f"'{token}' is not a boolean")


def _parse_str(token: str) -> ConversionResult:
    return ConversionResult.success(token)


BUILTIN_CONVERSIONS: dict[type, Callable[[str], ConversionResult]] = {
    int: _parse_int,
    float: _parse_float,
    bool: _parse_bool,
    str: _parse_str,
}


def convert_builtin(token: str, target: type) -> ConversionResult:
    """Convert a token with the built-in conversion for ``target``."""
    parse = BUILTIN_CONVERSIONS.get(target)
    if parse is None:
        return ConversionResult.failure(f"no built-in conversion for {getattr(target, '__name__', target)}")
    return parse(token)


class ConverterRegistry:
    """Custom converters keyed by exact parameter type.

    The registry is plain shared state with no locking; callers that mutate
    it from several threads must synchronize themselves.
    """

    def __init__(self) -> None:
        self._converters: dict[type, Converter] = {}

    def register(self, target: type, converter: Converter) -> None:
        """Register a converter for ``target``; the last registration wins."""
        self._converters[target] = converter

    def get(self, target: type) -> Converter | None:
        return self._converters.get(target)

    def __contains__(self, target: object) -> bool:
        return target in self._converters

    def __len__(self) -> int:
        return len(self._converters)


def convert_token(
    token: str,
    param: Parameter,
    position: int,
    converters: ConverterRegistry | None = None,
) -> Any:
    """Convert one present token for the parameter at 1-based ``position``."""
    result = convert_builtin(token, param.type)
    if result.ok:
        return result.value

    custom = converters.get(param.type) if converters is not None else None
    if custom is None:
        raise ArgumentTypeError(position, param.type_name, token)

    try:
        value = custom(token)
    except Exception as e:
        raise ArgumentTypeError(position, param.type_name, token, str(e)) from e

    if isinstance(value, ConversionResult):
        if not value.ok:
            raise ArgumentTypeError(position, param.type_name, token, value.reason)
        return value.value
    return value


def bind_arguments(
    command: Command,
    tokens: Sequence[str],
    converters: ConverterRegistry | None = None,
) -> list[Any]:
    """Convert argument tokens into the positional argument list for ``command``."""
    params = command.parameters
    if len(tokens) > len(params):
        raise ArgumentCountError(
            f"'{command.name}' takes at most {len(params)} arguments, "
            f"{len(tokens)} were given."
        )

    bound: list[Any] = []
    for index, param in enumerate(params):
        if index < len(tokens):
            bound.append(convert_token(tokens[index], param, index + 1, converters))
        elif param.has_default:
            bound.append(param.default)
        else:
            raise ArgumentCountError(
                f"'{command.name}' takes at least {command.required_count} arguments, "
                f"{len(tokens)} were given."
            )

    return bound
