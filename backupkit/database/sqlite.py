"""Dump a SQLite database file with the ``sqlite3`` shell."""

from __future__ import annotations

import posixpath
from typing import Any, Mapping

from backupkit import helper, logger
from backupkit.database.base import Database, DatabaseError, _join


def _stem(path: str) -> str:
    """The file name of ``path`` without its final extension."""
    base = posixpath.basename(path.rstrip("/")) or "/"
    dot = base.rfind(".")
    return base[:dot] if dot >= 0 else base


class SQLite(Database):
    """SQLite database. Settings: ``path`` (required) of the database file."""

    type_name = "sqlite"

    def __init__(
        self,
        model_dump_path: str,
        name: str,
        settings: Mapping[str, Any] | None = None,
        *,
        model_name: str = "",
    ) -> None:
        super().__init__(model_dump_path, name, settings, model_name=model_name)
        self.path = ""
        self.database = ""
        self.dump_file_path = ""

    def init(self) -> None:
        self.path = helper.expand_home(self._string("path"))
        if not self.path:
            raise DatabaseError(
                "SQLite `path` is required, you must special the path of the `.sqlite3` file"
            )
        self.database = _stem(self.path)
        self.dump_file_path = _join(self.dump_path, self.database + ".sql")

    def build_args(self) -> list[str]:
        """Arguments for ``sqlite3`` that write a SQL dump to the dump file."""
        return [self.path, f".output {self.dump_file_path}", ".dump"]

    def perform(self) -> None:
        log = logger.tag("SQLite")
        log.info("-> Dumping SQLite...")
        try:
            helper.exec_command("sqlite3", *self.build_args())
        except helper.ExecError as exc:
            raise DatabaseError(str(exc)) from exc
        log.info("dump path:", self.dump_file_path)