"""Export a SQL Server database to a ``.bacpac`` file with ``sqlpackage``."""

from __future__ import annotations

from typing import Any, Mapping

from backupkit import helper, logger
from backupkit.database.base import Database, DatabaseError

SQLPACKAGE_CLI = "sqlpackage"

_DEFAULT_HOST = "127.0.0.1"
_DEFAULT_PORT = "1433"


class MSSQL(Database):
    """SQL Server database.

    Settings: ``host`` (default 127.0.0.1), ``port`` (default 1433),
    ``database``, ``username`` (default sa), ``password``,
    ``trustServerCertificate`` (default false) and ``args``.
    """

    type_name = "mssql"

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
        self.database = ""
        self.username = ""
        self.password = ""
        self.trust_server_certificate = False
        self.args = ""

    def init(self) -> None:
        self.host = self._string("host", _DEFAULT_HOST)
        self.port = self._string("port", 1433)
        self.database = self._string("database")
        self.username = self._string("username", "sa")
        self.password = self._string("password")
        self.trust_server_certificate = self._bool("trustServerCertificate", False)
        self.args = self._string("args")

    def _name_option(self) -> str:
        return "/SourceDatabaseName:" + self.database

    def _credential_options(self) -> str:
        opts = []
        if self.username:
            opts.append("/SourceUser:" + self.username)
        if self.password:
            opts.append("/SourcePassword:" + self.password)
        return " ".join(opts)

    def _connectivity_options(self) -> str:
        host = self.host or _DEFAULT_HOST
        port = self.port or _DEFAULT_PORT
        return f"/SourceServerName:{host},{port}"

    def _addition_options(self) -> str:
        opts = []
        if self.trust_server_certificate:
            opts.append("/SourceTrustServerCertificate:True")
        if self.args:
            opts.append(self.args)
        return " ".join(opts)

    def build(self) -> str:
        """The ``sqlpackage`` export command line."""
        return " ".join(
            [
                SQLPACKAGE_CLI,
                "/Action:Export",
                self._name_option(),
                self._credential_options(),
                self._connectivity_options(),
                self._addition_options(),
                f"/TargetFile:{self.dump_path}/{self.database}.bacpac",
            ]
        )

    def perform(self) -> None:
        log = logger.tag("MSSQL")
        try:
            out = helper.exec_command(self.build())
        except helper.ExecError as exc:
            raise DatabaseError(f"-> Dump error: {exc}") from exc
        log.info(out)
        log.info("dump path:", self.dump_path)