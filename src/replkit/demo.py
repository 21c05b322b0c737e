"""Sample dispatch target used by the ``replkit`` command."""

from enum import Enum

from replkit.errors import CommandError
from replkit.program import CommandProgram
from replkit.registry import command


class Color(str, Enum):
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


def parse_color(token: str) -> Color:
    """Case-insensitive color name."""
    return Color(token.lower())


class DemoProgram(CommandProgram):
    """A handful of commands showing conversion, defaults, and failures."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.register_converter(Color, parse_color)

    @command("Doubles an integer.")
    def double(self, x: int) -> None:
        self.write(str(x * 2))

    @command("Greets someone.", params={"name": "Who to greet.", "times": "Repeat count."})
    def greet(self, name: str, times: int = 1) -> None:
        for _ in range(times):
            self.write(f"Hello, {name}!")

    @command("Multiplies a value by a factor.")
    def scale(self, factor: float, value: float = 1.0) -> str:
        return f"{factor * value:g}"

    @command("Echoes a boolean back inverted.")
    def toggle(self, flag: bool) -> str:
        return str(not flag).lower()

    @command("Divides two integers.")
    def divide(self, a: int, b: int) -> str:
        if b == 0:
            raise CommandError("Cannot divide by zero.")
        return str(a // b)

    @command("Shows a color.")
    def paint(self, color: Color) -> str:
        return f"Painting it {color.value}."

    # Not decorated: invisible to dispatch and help.
    def reset(self) -> None:
        self.write("reset")
