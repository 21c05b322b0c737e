"""Embeddable command dispatch engine for interactive line-oriented programs."""

from replkit.conversion import ConverterRegistry, bind_arguments
from replkit.docs import DocumentationProvider, member_key
from replkit.errors import (
    ArgumentCountError,
    ArgumentTypeError,
    CommandError,
    CommandNotFoundError,
    DocumentationLoadError,
    ReplkitError,
)
from replkit.models import Command, ConversionResult, DocEntry, Parameter
from replkit.program import CommandProgram
from replkit.registry import CommandRegistry, command

__version__ = "0.1.0"

__all__ = [
    "ArgumentCountError",
    "ArgumentTypeError",
    "Command",
    "CommandError",
    "CommandNotFoundError",
    "CommandProgram",
    "CommandRegistry",
    "ConversionResult",
    "ConverterRegistry",
    "DocEntry",
    "DocumentationLoadError",
    "DocumentationProvider",
    "Parameter",
    "ReplkitError",
    "bind_arguments",
    "command",
    "member_key",
]
