"""Console logging for the CLI.

Routes controller debug callbacks to a Rich console with level filtering.
"""

from collections.abc import Callable
from datetime import datetime

from rich.console import Console
from rich.markup import escape


class LogLevel:
    """Log level constants with numeric values for comparison.

    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns DEBUG if invalid."""
        return cls._from_string.get(level_str.lower(), cls.DEBUG)


_LEVEL_STYLES = {
    "debug": "dim",
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
}

LOG_TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_MAX_MESSAGE_LENGTH = 500


def console_debug_callback(
    console: Console,
    min_level: int = LogLevel.INFO
) -> Callable[[str, str, str], None]:
    """Create a debug callback that prints messages at or above ``min_level``."""

    def _callback(level: str, component: str, message: str) -> None:
        if LogLevel.from_string(level) < min_level:
            return
        if len(message) > LOG_MAX_MESSAGE_LENGTH:
            message = message[:LOG_MAX_MESSAGE_LENGTH] + "..."
        style = _LEVEL_STYLES.get(level, "white")
        stamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        console.print(
            f"[dim]{stamp}[/dim] [{style}]{level.upper():<7}[/{style}] "
            f"[bold]{component}[/bold]: {escape(message)}"
        )

    return _callback
