"""Common machinery for database dumpers and their hook scripts."""

from __future__ import annotations

import posixpath
import shlex
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Mapping

from backupkit import helper, logger


class DatabaseError(Exception):
    """Raised when a database cannot be configured or dumped."""


def _join(*parts: str) -> str:
    """Join slash-separated path parts, skipping empty ones, and normalise."""
    joined = "/".join(part for part in parts if part)
    return posixpath.normpath(joined) if joined else ""


def run_hook(action: str, script: str) -> bool:
    """Run a hook script, described as ``action`` in the log.

    A script starting with ``-`` may fail without raising. Returns True when
    the script ran successfully (or there was nothing to run) and False when
    an ignored error occurred. Raises ``DatabaseError`` otherwise.
    """
    if not script:
        return True

    log = logger.tag("Database")
    log.info(f"Run {action}")
    ignore_error = script.startswith("-")
    script = script.removeprefix("-")

    try:
        command = shlex.split(script)
    except ValueError as exc:
        if ignore_error:
            log.info(f"Skip {action} with error: {exc}")
            return False
        raise DatabaseError(str(exc)) from exc

    if not command:
        return True

    program, *args = command
    try:
        helper.exec_command(program, *args)
    except helper.ExecError as exc:
        if ignore_error:
            log.info(f"Run {action} failed: {exc}, ignore it")
            return False
        raise DatabaseError(f"Run {action} failed: {exc}") from exc

    log.info(f"Run {action} succeeded")
    return True


class Database(ABC):
    """A configured database to dump into ``<model dump path>/<type>/<name>``."""

    type_name: ClassVar[str] = ""

    def __init__(
        self,
        model_dump_path: str,
        name: str,
        settings: Mapping[str, Any] | None = None,
        *,
        model_name: str = "",
    ) -> None:
        self.model_name = model_name
        self.name = name
        self.settings: dict[str, Any] = dict(settings or {})
        self.dump_path = _join(model_dump_path, self.type_name, name)
        try:
            helper.mkdir_p(self.dump_path)
        except OSError as exc:
            logger.error(f"Failed to mkdir dump path {self.dump_path}: {exc}")

    def _setting(self, key: str, default: Any = None) -> Any:
        value = self.settings.get(key)
        return default if value is None else value

    def _string(self, key: str, default: Any = None) -> str:
        return helper.as_string(self._setting(key, default))

    def _strings(self, key: str) -> list[str]:
        return helper.as_string_list(self._setting(key))

    def _bool(self, key: str, default: Any = None) -> bool:
        return helper.as_bool(self._setting(key, default))

    @abstractmethod
    def init(self) -> None:
        """Read the settings and validate them."""

    @abstractmethod
    def perform(self) -> Any:
        """Dump the database into the dump path."""