"""Custom exception hierarchy for replkit."""


class ReplkitError(Exception):
    """Base exception for engine-specific failures."""


class UsageError(ValueError, ReplkitError):
    """Command usage or user-input errors."""


class CommandNotFoundError(LookupError, UsageError):
    """No visible command matches the requested name."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"Command '{name}' does not exist.")


class ArgumentError(UsageError):
    """Arguments could not be bound to a command's parameters."""


class ArgumentCountError(ArgumentError):
    """Too few or too many arguments were given."""


class ArgumentTypeError(TypeError, ArgumentError):
    """An argument token could not be converted to its parameter type."""

    def __init__(self, position: int, expected: str, token: str, reason: str = "") -> None:
        self.position = position
        self.expected = expected
        self.token = token
        self.reason = reason
        message = (
            f"Incorrect parameter type for parameter {position}. "
            f"Expected a {expected} but got '{token}'."
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class CommandError(ReplkitError):
    """A command handler failed while running."""


class RegistrationError(TypeError, ReplkitError):
    """A command handler was declared in a way the engine cannot dispatch."""


class DocumentationLoadError(ReplkitError):
    """A documentation source could not be loaded or parsed."""


class ConfigError(ValueError, ReplkitError):
    """Configuration file validation errors."""
