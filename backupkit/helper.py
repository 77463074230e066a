"""Command execution, path utilities and configuration value conversions."""

from __future__ import annotations

import functools
import os
import posixpath
import re
import shutil
import subprocess

from backupkit import logger

_SPACE = re.compile(r"\s+")

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})


class ExecError(Exception):
    """Raised when an external command cannot be found or fails."""


def exec_command(command: str, *args: str) -> str:
    """Run a command, returning its stdout with surrounding newlines removed."""
    return exec_with_stdio(command, False, *args)


def exec_with_stdio(command: str, stdout: bool, *args: str) -> str:
    """Run a command; when ``stdout`` is true its output goes to this process's stdout.

    ``command`` may itself hold whitespace-separated arguments, which come
    before ``args``.
    """
    program, *command_args = _SPACE.split(command)
    command_args.extend(args)

    full_command = shutil.which(program) if program else None
    if full_command is None:
        raise ExecError(f"{program} cannot be found")

    try:
        completed = subprocess.run(
            [full_command, *command_args],
            env=dict(os.environ),
            stdout=None if stdout else subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as exc:
        logger.debug(full_command, " ", " ".join(command_args))
        raise ExecError(str(exc)) from exc

    if completed.returncode != 0:
        logger.debug(full_command, " ", " ".join(command_args))
        raise ExecError(completed.stderr or "")

    return (completed.stdout or "").strip("\n")


def is_exists_path(path: str) -> bool:
    return os.path.exists(path)


def mkdir_p(dir_path: str) -> None:
    """Create ``dir_path`` and its parents, like ``mkdir -p``."""
    if not os.path.exists(dir_path):
        os.makedirs(dir_path, mode=0o750, exist_ok=True)


def _join(*parts: str) -> str:
    joined = "/".join(part for part in parts if part)
    return posixpath.normpath(joined) if joined else ""


def expand_home(file_path: str) -> str:
    """Expand a leading ``~/`` to the HOME directory."""
    if not file_path.startswith("~/"):
        return file_path
    return _join(os.environ.get("HOME", ""), file_path[2:])


def absolute_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.abspath(expand_home(path))


@functools.cache
def is_gnu_tar() -> bool:
    """Whether the ``tar`` on PATH is GNU tar."""
    try:
        out = exec_command("tar", "--version")
    except ExecError:
        return False
    return "GNU" in out


def clean_host(host: str) -> str:
    """Strip a URL scheme: ``ftp://foo.bar.com`` becomes ``foo.bar.com``."""
    if "://" in host:
        return host.split("://")[1]
    return host


def format_endpoint(endpoint: str) -> str:
    """Prefix ``https://`` unless the endpoint already starts with ``http``."""
    if not endpoint.startswith("http"):
        return "https://" + endpoint
    return endpoint


def as_string(value) -> str:
    """Convert a configuration value to a string; unsupported values give ''."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int)):
        return str(value)
    if isinstance(value, float):
        text = repr(value)
        return text[:-2] if text.endswith(".0") else text
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return ""


def as_bool(value) -> bool:
    """Convert a configuration value to a boolean; unrecognised values give False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value in _TRUE_WORDS
    return False


def as_string_list(value) -> list[str]:
    """Convert a configuration value to a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if isinstance(value, (list, tuple)):
        return [as_string(item) for item in value]
    return []