"""Session state container for a running dispatch target."""

from dataclasses import dataclass

DEFAULT_PROMPT = ">>> "


@dataclass
class Session:
    """In-memory runtime state for one dispatch target."""

    prompt: str = DEFAULT_PROMPT
    alive: bool = False
    help_cache: str | None = None

    def start(self) -> None:
        """Enter the running state."""
        self.alive = True

    def stop(self) -> None:
        """Enter the stopped state."""
        self.alive = False

    def invalidate_help(self) -> None:
        """Drop the cached summary table so it is rebuilt on next use."""
        self.help_cache = None
