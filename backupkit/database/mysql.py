"""Dump a MySQL database with ``mysqldump``."""

from __future__ import annotations

from typing import Any, Mapping

from backupkit import helper, logger
from backupkit.database.base import Database, DatabaseError, _join

_P_FLAG = "-p"


class MySQL(Database):
    """MySQL database.

    Settings: ``host`` (default 127.0.0.1), ``port`` (default 3306),
    ``socket``, ``database`` (required), ``username`` (default root),
    ``password``, ``tables``, ``exclude_tables`` and ``args``.
    """

    type_name = "mysql"

    def __init__(
        self,
        model_dump_path: str,
        name: str,
        settings: Mapping[str, Any] | None = None,
        *,
        model_name: str = "",
    ) -> None:
        super().__init__(model_dump_path, name, settings, model_name=model_name)
        self.host = ""
        self.port = ""
        self.socket = ""
        self.database = ""
        self.username = ""
        self.password = ""
        self.tables: list[str] = []
        self.exclude_tables: list[str] = []
        self.args = ""

    def init(self) -> None:
        self.host = self._string("host", "127.0.0.1")
        self.port = self._string("port", 3306)
        self.socket = self._string("socket")
        self.database = self._string("database")
        self.username = self._string("username", "root")
        self.password = self._string("password")
        self.tables = self._strings("tables")
        self.exclude_tables = self._strings("exclude_tables")
        self.args = self._string("args")

        if not self.database:
            raise DatabaseError("mysql database config is required")

        if self.socket:
            self.host = ""
            self.port = ""

    def build(self) -> str:
        """The ``mysqldump`` command line."""
        dump_args: list[str] = []
        if self.host:
            dump_args.extend(["--host", self.host])
        if self.port:
            dump_args.extend(["--port", self.port])
        if self.socket:
            dump_args.extend(["--socket", self.socket])
        if self.username:
            dump_args.extend(["-u", self.username])
        if self.password:
            dump_args.append(_P_FLAG + self.password)

        dump_args.extend(
            f"--ignore-table={self.database}.{table}" for table in self.exclude_tables
        )

        if self.args:
            dump_args.append(self.args)

        dump_args.append(self.database)
        dump_args.extend(self.tables)

        dump_file_path = _join(self.dump_path, self.database + ".sql")
        dump_args.append("--result-file=" + dump_file_path)

        return "mysqldump " + " ".join(dump_args)

    def perform(self) -> None:
        log = logger.tag("MySQL")
        log.info("-> Dumping MySQL...")
        try:
            helper.exec_command(self.build())
        except helper.ExecError as exc:
            raise DatabaseError(f"-> Dump error: {exc}") from exc
        log.info("dump path:", self.dump_path)