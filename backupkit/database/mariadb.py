"""Back up a MariaDB server with ``mariadb-backup``."""

from __future__ import annotations

from typing import Any, Mapping

from backupkit import helper, logger
from backupkit.database.base import Database, DatabaseError

_P_FLAG = "-p"


class MariaDB(Database):
    """MariaDB database.

    Settings: ``host`` (default 127.0.0.1), ``port`` (default 3306),
    ``socket``, ``database``, ``username`` (default root), ``password`` and
    ``args``.
    """

    type_name = "mariadb"

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
        self.args = ""

    def init(self) -> None:
        self.host = self._string("host", "127.0.0.1")
        self.port = self._string("port", 3306)
        self.socket = self._string("socket")
        self.database = self._string("database")
        self.username = self._string("username", "root")
        self.password = self._string("password")
        self.args = self._string("args")

        if self.socket:
            self.host = ""
            self.port = ""

    def build(self) -> str:
        """The ``mariadb-backup`` command line."""
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
        if self.args:
            dump_args.append(self.args)
        if self.database:
            dump_args.append("--databases=" + self.database)
        dump_args.append("--target-dir=" + self.dump_path)

        return "mariadb-backup --backup " + " ".join(dump_args)

    def perform(self) -> None:
        log = logger.tag("MariaDB")
        log.info("-> Dumping MariaDB...")
        try:
            helper.exec_command(self.build())
        except helper.ExecError as exc:
            raise DatabaseError(f"-> Dump error: {exc}") from exc
        log.info("dump path:", self.dump_path)