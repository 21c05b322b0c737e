"""Terminal input and output wrappers for the REPL loop."""

from typing import Callable, Iterable

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import DummyHistory, InMemoryHistory

LineReader = Callable[[str], str]
LineWriter = Callable[[str], None]


def write_line(text: str) -> None:
    """Default output: one line to standard output."""
    print(text)


def create_prompt_session(command_names: Iterable[str], history: bool = True) -> PromptSession:
    """Create a prompt-toolkit session completing the first word as a command name."""
    return PromptSession(
        history=InMemoryHistory() if history else DummyHistory(),
        completer=WordCompleter(sorted(command_names), sentence=True),
        complete_while_typing=False,
    )


def prompt_reader(session: PromptSession) -> LineReader:
    """Adapt a prompt session to the ``read_line(prompt)`` interface.

    EOFError (Ctrl-D) and KeyboardInterrupt (Ctrl-C) propagate to the loop.
    """

    def read_line(prompt: str) -> str:
        return session.prompt(prompt)

    return read_line


def iter_reader(lines: Iterable[str], echo: LineWriter | None = None) -> LineReader:
    """Reader that serves lines from an iterable, raising EOFError when exhausted."""
    iterator = iter(lines)

    def read_line(prompt: str) -> str:
        try:
            line = next(iterator)
        except StopIteration:
            raise EOFError from None
        if echo is not None:
            echo(f"{prompt}{line}")
        return line

    return read_line
