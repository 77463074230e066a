"""Dump a PostgreSQL database with ``pg_dump``."""

from __future__ import annotations

import os
import posixpath
from typing import Any, Mapping

from backupkit import helper, logger
from backupkit.database.base import Database, DatabaseError, _join


def _socket_dir(socket: str) -> str:
    directory = posixpath.dirname(socket)
    return posixpath.normpath(directory) if directory else "."


def _socket_port(socket: str) -> str:
    base = socket.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot + 1 :] if dot >= 0 else ""


class PostgreSQL(Database):
    """PostgreSQL database.

    Settings: ``host`` (default localhost), ``port`` (default 5432),
    ``socket``, ``database`` (required), ``username``, ``password``,
    ``tables``, ``exclude_tables`` and ``args``.
    """

    type_name = "postgresql"

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
        self.dump_file_path = ""

    def init(self) -> None:
        self.host = self._string("host", "localhost")
        self.port = self._string("port", 5432)
        self.socket = self._string("socket")
        self.database = self._string("database")
        self.username = self._string("username")
        self.password = self._string("password")
        self.tables = self._strings("tables")
        self.exclude_tables = self._strings("exclude_tables")
        self.args = self._string("args")

        if not self.database:
            raise DatabaseError("PostgreSQL database config is required")

        self.dump_file_path = _join(self.dump_path, self.database + ".sql")

        if self.socket:
            self.host = ""
            self.port = ""

    def build(self) -> str:
        """The ``pg_dump`` command line."""
        dump_args: list[str] = []
        if self.host:
            dump_args.append("--host=" + self.host)
        if self.port:
            dump_args.append("--port=" + self.port)
        if self.socket:
            dump_args.extend(
                ["--host=" + _socket_dir(self.socket), "--port=" + _socket_port(self.socket)]
            )
        if self.username:
            dump_args.append("--username=" + self.username)

        if self.tables:
            dump_args.append("--table=" + " --table=".join(self.tables))
        if self.exclude_tables:
            dump_args.append("--exclude-table=" + " --exclude-table=".join(self.exclude_tables))

        if self.args:
            dump_args.append(self.args)

        dump_args.append(self.database)
        dump_args.extend(["-f", self.dump_file_path])

        return "pg_dump " + " ".join(dump_args)

    def perform(self) -> None:
        log = logger.tag("PostgreSQL")
        log.info("-> Dumping PostgreSQL...")
        if self.password:
            os.environ["PGPASSWORD"] = self.password
        try:
            helper.exec_command(self.build())
        except helper.ExecError as exc:
            raise DatabaseError(str(exc)) from exc
        log.info("dump path:", self.dump_file_path)