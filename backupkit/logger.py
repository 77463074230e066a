"""Timestamped, tagged console and file logging."""

from __future__ import annotations

import os
import sys
from datetime import datetime
from typing import IO, Iterable

TIME_FORMAT = "%Y/%m/%d %H:%M:%S"

_CYAN = "36"
_YELLOW = "33"
_RED = "31"
_MAGENTA = "35"


def _sprint(args: tuple) -> str:
    """Join values, spacing only between adjacent non-string operands."""
    pieces: list[str] = []
    previous_was_str = True
    for position, value in enumerate(args):
        is_str = isinstance(value, str)
        if position and not is_str and not previous_was_str:
            pieces.append(" ")
        pieces.append(str(value))
        previous_was_str = is_str
    return "".join(pieces)


def _sprintln(args: tuple) -> str:
    return " ".join(str(value) for value in args)


def _colors_supported() -> bool:
    if "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb":
        return False
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


class Logger:
    """A logger that writes timestamped lines with an optional tag prefix."""

    def __init__(
        self,
        outputs: Iterable[IO[str]] = (),
        prefix: str = "",
        *,
        stdout: bool = True,
        color: bool | None = None,
        debug_enabled: bool | None = None,
    ) -> None:
        self._outputs = tuple(outputs)
        self._stdout = stdout
        self.prefix = prefix
        self._color = color
        if debug_enabled is None:
            debug_enabled = os.environ.get("DEBUG") == "true"
        self.debug_enabled = debug_enabled

    @property
    def color(self) -> bool:
        return _colors_supported() if self._color is None else self._color

    def _paint(self, text: str, code: str) -> str:
        if not self.color:
            return text
        return f"\x1b[{code}m{text}\x1b[0m"

    def _targets(self) -> tuple:
        if self._stdout:
            return (*self._outputs, sys.stdout)
        return self._outputs

    def _write(self, message: str) -> None:
        line = f"{datetime.now().strftime(TIME_FORMAT)} {self.prefix}{message}"
        if not line.endswith("\n"):
            line += "\n"
        for target in self._targets():
            target.write(line)
            target.flush()

    def _writeln(self, *args) -> None:
        self._write(_sprintln(args) + "\n")

    def tag(self, name: str) -> "Logger":
        """Return a logger sharing these outputs, prefixed with ``[name]``."""
        return Logger(
            self._outputs,
            self._paint(f"[{name}] ", _CYAN),
            stdout=self._stdout,
            color=self._color,
            debug_enabled=self.debug_enabled,
        )

    def print(self, *args) -> None:
        self._write(_sprint(args))

    def debug(self, *args) -> None:
        if self.debug_enabled:
            self._writeln("[debug] ", _sprint(args))

    def info(self, *args) -> None:
        self._writeln(*args)

    def warn(self, *args) -> None:
        self._writeln(self._paint(_sprint(args), _YELLOW))

    def error(self, *args) -> None:
        self._writeln(self._paint(_sprint(args), _RED))

    def fatal(self, *args) -> None:
        """Log the message and terminate with exit status 1."""
        self._writeln(self._paint(_sprint(args), _MAGENTA))
        raise SystemExit(1)


_shared = Logger()
_log_file: IO[str] | None = None


def set_logger(log_path: str) -> None:
    """Send the shared logger's output to ``log_path`` as well as stdout."""
    global _shared, _log_file
    new_file = open(log_path, "a", encoding="utf-8")
    if _log_file is not None:
        _log_file.close()
    _log_file = new_file
    _shared = Logger((new_file,), stdout=True)


def tag(name: str) -> Logger:
    return _shared.tag(name)


def debug(*args) -> None:
    _shared.debug(*args)


def info(*args) -> None:
    _shared.info(*args)


def warn(*args) -> None:
    _shared.warn(*args)


def error(*args) -> None:
    _shared.error(*args)


def fatal(*args) -> None:
    _shared.fatal(*args)