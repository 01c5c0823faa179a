"""Run-scoped log files.

Each pipeline keeps a plain-text log next to its work: the snapshotter
records errors in ``error.log`` and the publisher mirrors its whole
console output into ``publish-log.txt``. Both are reset at the start of
a run.
"""

import logging
from datetime import datetime
from pathlib import Path

from rich.console import Console

from npmirror.utils.formatting import console as default_console

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def timestamp() -> str:
    """Current local time in log format."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


class RunLog:
    """Append-only text log for a single run, optionally echoed to a console.

    Attributes:
        path: Location of the log file.
    """

    def __init__(self, path: Path, console: Console | None = None) -> None:
        """Initialize the log.

        Args:
            path: Log file location. Parent directories must exist.
            console: Console used for echoing. Defaults to the shared console.
        """
        self._path = path
        self._console = console or default_console

    @property
    def path(self) -> Path:
        """Location of the log file."""
        return self._path

    def reset(self, header: str | None = None) -> None:
        """Start a fresh log for this run.

        Without a header the file is removed and only recreated on the
        first write. With a header the file is truncated to the header.

        Args:
            header: Optional text written at the top of the new log.
        """
        if header is None:
            self._path.unlink(missing_ok=True)
            return
        self._path.write_text(header if header.endswith("\n") else header + "\n", encoding="utf-8")

    def write(self, message: str, *, echo: bool = True, style: str | None = None) -> None:
        """Append a timestamped line and optionally print the message.

        Args:
            message: Text to record.
            echo: Also print the message to the console.
            style: Rich style used when echoing.
        """
        with self._path.open(mode="a", encoding="utf-8") as f:
            f.write(f"[{timestamp()}] {message}\n")
        if echo:
            self._console.print(message, style=style, markup=False, highlight=False)

    def error(self, message: str, *, echo: bool = True) -> None:
        """Record an error line, echoing it in the error style."""
        logger.debug("%s: %s", self._path.name, message)
        self.write(message, echo=echo, style="error")
