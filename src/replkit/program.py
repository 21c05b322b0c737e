"""Dispatch target base class and the REPL loop."""

import logging
import os
import traceback
from typing import Any, Callable, Mapping

from replkit import console
from replkit.conversion import Converter, ConverterRegistry, bind_arguments
from replkit.docs import DocumentationProvider
from replkit.errors import (
    ArgumentCountError,
    ArgumentTypeError,
    CommandNotFoundError,
    ReplkitError,
)
from replkit.formatters import format_full_help, format_summary_table, format_usage
from replkit.logging_utils import log_event
from replkit.models import Command, CommandDescriptor, DocEntry
from replkit.registry import CommandRegistry, build_command, command
from replkit.session import DEFAULT_PROMPT, Session

logger = logging.getLogger(__name__)

DEBUG_ENV_VAR = "REPLKIT_DEBUG"


class CommandProgram:
    """Base class for interactive command-line programs.

    Subclasses declare commands as methods decorated with ``@command``; the
    parameter annotations drive argument conversion::

        class Calculator(CommandProgram):
            @command("Doubles a number.")
            def double(self, x: int) -> None:
                self.write(str(x * 2))

        Calculator(prompt="calc> ").run()

    ``help``, ``usage`` and ``exit`` are ordinary commands declared here.
    """

    def __init__(
        self,
        docs: DocumentationProvider | None = None,
        *,
        prompt: str = DEFAULT_PROMPT,
        write: console.LineWriter | None = None,
        read_line: console.LineReader | None = None,
        debug: bool | None = None,
        history: bool = True,
    ) -> None:
        self.session = Session(prompt=prompt)
        self.registry = CommandRegistry.for_type(type(self))
        self.converters = ConverterRegistry()
        self.docs = docs
        self.debug = bool(os.getenv(DEBUG_ENV_VAR)) if debug is None else debug
        self.history = history
        self._write = write or console.write_line
        self._read_line = read_line

    @property
    def prompt(self) -> str:
        return self.session.prompt

    @prompt.setter
    def prompt(self, value: str) -> None:
        self.session.prompt = value

    @property
    def alive(self) -> bool:
        return self.session.alive

    def write(self, text: str) -> None:
        self._write(text)

    def register_converter(self, target: type, converter: Converter) -> None:
        """Register a custom converter for parameters of type ``target``."""
        self.converters.register(target, converter)

    def add_command(
        self,
        func: Callable[..., Any],
        description: str = "",
        *,
        name: str | None = None,
        help_text: str = "",
        params: Mapping[str, str] | None = None,
    ) -> Command:
        """Register a plain callable as a command on this instance only.

        The cached summary table is not updated; call ``refresh_help`` after
        adding commands.
        """
        descriptor = CommandDescriptor(
            description=description,
            help_text=help_text,
            param_help=params or {},
            name=name,
        )
        cmd = build_command(func, descriptor)
        self.registry.add(cmd)
        return cmd

    def refresh_help(self) -> None:
        """Recompute the cached summary table."""
        self.session.invalidate_help()
        self.summary_table()

    def doc_for(self, cmd: Command) -> DocEntry | None:
        if self.docs is None:
            return None
        return self.docs.entry_for_command(cmd)

    def usage_text(self, name: str) -> str:
        return format_usage(self.registry.resolve(name))

    def help_text(self, name: str) -> str:
        cmd = self.registry.resolve(name)
        return format_full_help(cmd, self.doc_for(cmd))

    def summary_table(self) -> str:
        if self.session.help_cache is None:
            self.session.help_cache = format_summary_table(self.registry, self.doc_for)
        return self.session.help_cache

    def stop(self) -> None:
        """Leave the running state; the loop reads no further input."""
        self.session.stop()

    def _handler_for(self, cmd: Command) -> Callable[..., Any]:
        if cmd.attr_name is not None:
            return getattr(self, cmd.attr_name)
        if cmd.handler is None:
            raise CommandNotFoundError(cmd.name)
        return cmd.handler

    def _default_reader(self) -> console.LineReader:
        session = console.create_prompt_session(self.registry.names(), history=self.history)
        return console.prompt_reader(session)

    def _report_usage_error(self, cmd: Command, label: str, error: Exception) -> None:
        self.write(f"{label}: {error}")
        self.write(f"Usage:\n\t{format_usage(cmd)}")

    def _report_handler_failure(self, cmd: Command, error: Exception) -> None:
        self.write(str(error) or type(error).__name__)
        log_event(
            "command_failed",
            logging.ERROR,
            command=cmd.name,
            error_type=type(error).__name__,
            error=str(error),
        )
        if not isinstance(error, ReplkitError):
            logger.debug("Unexpected error in command %s", cmd.name, exc_info=True)
            if self.debug:
                self.write("Debug traceback:")
                self.write(traceback.format_exc().rstrip())

    def process(self, line: str) -> None:
        """Resolve, convert, and invoke one input line."""
        tokens = line.split()
        name = tokens[0] if tokens else ""

        cmd = self.registry.get(name)
        if cmd is None:
            self.write(f"No command '{name}' exists! Try `help`.")
            return

        try:
            args = bind_arguments(cmd, tokens[1:], self.converters)
        except ArgumentCountError as e:
            self._report_usage_error(cmd, "Incorrect number of arguments", e)
            return
        except ArgumentTypeError as e:
            self._report_usage_error(cmd, "Error in arguments", e)
            return

        log_event("command_dispatch", logging.DEBUG, command=cmd.name, args=tokens[1:])

        try:
            result = self._handler_for(cmd)(*args)
        except Exception as e:
            self._report_handler_failure(cmd, e)
            return

        if result is not None:
            self.write(str(result))

    def run(self, read_line: console.LineReader | None = None) -> None:
        """Run the REPL loop until ``exit`` or end of input."""
        reader = read_line or self._read_line or self._default_reader()
        self.session.start()
        log_event(
            "program_start",
            program=type(self).__qualname__,
            prompt=self.session.prompt,
            commands=self.registry.names(),
            docs=len(self.docs) if self.docs is not None else 0,
        )

        reason = "exit"
        while self.session.alive:
            try:
                line = reader(self.session.prompt)
            except EOFError:
                reason = "eof"
                self.session.stop()
                break
            except KeyboardInterrupt:
                continue

            try:
                self.process(line)
            except KeyboardInterrupt:
                self.write("")

        log_event("program_stop", program=type(self).__qualname__, reason=reason)

    @command(
        "Displays a help message.",
        params={"func": "Command to describe. Lists all commands when omitted."},
    )
    def help(self, func: str = "") -> None:
        if func:
            self.write(self.help_text(func))
            return
        table = self.summary_table()
        if table:
            self.write(table.rstrip("\n"))

    @command(
        "Displays usage information",
        params={"func": "Command whose usage line to show."},
    )
    def usage(self, func: str) -> None:
        self.write(self.usage_text(func))

    @command("Exits the program")
    def exit(self) -> None:
        self.stop()
