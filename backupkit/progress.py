"""Upload progress display for file transfers."""

from __future__ import annotations

import os
import sys
import time
from datetime import datetime
from typing import IO, BinaryIO

import humanize

from backupkit.logger import TIME_FORMAT, Logger

_WIDTH = 100

_MICRO = 1
_MILLI = 1000 * _MICRO
_SECOND = 1000 * _MILLI
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_YEAR = 365 * _DAY

_UNITS = (
    ("year", _YEAR),
    ("week", _WEEK),
    ("day", _DAY),
    ("hour", _HOUR),
    ("minute", _MINUTE),
    ("second", _SECOND),
    ("millisecond", _MILLI),
    ("microsecond", _MICRO),
)

_SHOWN_UNITS = 2


def format_duration(seconds: float) -> str:
    """Describe a duration using its two largest non-zero units."""
    micros = round(seconds * _SECOND)
    if micros == 0:
        return "0 seconds"
    sign = "-" if micros < 0 else ""
    remaining = abs(micros)
    parts = []
    for name, size in _UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count} {name}" if count == 1 else f"{count} {name}s")
    return sign + " ".join(parts[:_SHOWN_UNITS])


class ProgressBar:
    """Wraps a binary file, drawing a progress bar as it is read."""

    def __init__(self, log: Logger, file: BinaryIO, output: IO[str] | None = None) -> None:
        self.file = file
        self.file_length = os.fstat(file.fileno()).st_size
        self.transferred = 0
        self.finished = False
        self._logger = log
        self._output = output
        self._time = datetime.now().strftime(TIME_FORMAT)
        self._started = time.monotonic()
        self._logger.info(f"-> Uploading ({humanize.naturalsize(self.file_length)})...")
        self._render()

    def __enter__(self) -> "ProgressBar":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._finish()

    @property
    def percent(self) -> float:
        if self.file_length == 0:
            return 100.0
        return min(self.transferred / self.file_length, 1.0) * 100

    def _stream(self) -> IO[str]:
        return self._output if self._output is not None else sys.stderr

    def _render(self) -> None:
        elapsed = max(time.monotonic() - self._started, 1e-9)
        speed = humanize.naturalsize(self.transferred / elapsed) + "/s"
        head = f"{self._time} {self._logger.prefix}"
        tail = f" {self.percent:.2f}% ({speed})"
        bar_width = max(_WIDTH - len(head) - len(tail) - 2, 10)
        filled = int(bar_width * self.percent / 100)
        bar = "[" + "=" * filled + "-" * (bar_width - filled) + "]"
        stream = self._stream()
        stream.write("\r" + head + bar + tail)
        stream.flush()

    def _finish(self) -> None:
        if self.finished:
            return
        self.finished = True
        self._render()
        stream = self._stream()
        stream.write("\n")
        stream.flush()

    def read(self, size: int = -1) -> bytes:
        """Read from the wrapped file and advance the bar."""
        chunk = self.file.read(size)
        if chunk:
            self.transferred += len(chunk)
            self._render()
        return chunk

    def error(self, message: str) -> RuntimeError:
        """Finish the bar and return an error carrying ``message`` for the caller to raise."""
        self._finish()
        return RuntimeError(message)

    def done(self, url: str) -> None:
        """Finish the bar and log where the file went and how long it took."""
        self._finish()
        elapsed = time.monotonic() - self._started
        self._logger.info(f"Uploaded: {url} (Duration {format_duration(elapsed)})")