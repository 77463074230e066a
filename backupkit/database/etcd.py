"""Take an etcd snapshot with ``etcdctl``."""

from __future__ import annotations

from typing import Any, Mapping

from backupkit import helper, logger
from backupkit.database.base import Database, DatabaseError, _join


class Etcd(Database):
    """etcd database.

    Settings: ``endpoint``, the deprecated ``endpoints`` list (its first
    element is used) and ``args``.
    """

    type_name = "etcd"

    def __init__(
        self,
        model_dump_path: str,
        name: str,
        settings: Mapping[str, Any] | None = None,
        *,
        model_name: str = "",
    ) -> None:
        super().__init__(model_dump_path, name, settings, model_name=model_name)
        self.endpoint = ""
        self.endpoints: list[str] = []
        self.args = ""
        self.dump_file_path = ""

    def init(self) -> None:
        self.endpoint = self._string("endpoint")
        self.endpoints = self._strings("endpoints")
        self.args = self._string("args")

        if not self.endpoint and not self.endpoints:
            raise DatabaseError("etcd endpoint config is required")

        if self.endpoint and self.endpoints:
            raise DatabaseError("etcd `endpoint` and `endpoints` config are mutually exclusive")

        if not self.endpoint:
            logger.warn("DEPRECATED: `endpoints` is deprecated, use `endpoint` instead.")
            logger.warn("The first element of endpoints will be used.")
            self.endpoint = self.endpoints[0]

        self.dump_file_path = _join(self.dump_path + "-" + self.endpoint)

    def build(self) -> str:
        """The ``etcdctl`` snapshot command line."""
        args = ["snapshot save", self.dump_file_path]
        if self.endpoint:
            args.append("--endpoints " + self.endpoint)
        if self.args:
            args.append(self.args)
        return "etcdctl " + " ".join(args)

    def perform(self) -> None:
        log = logger.tag("etcd")
        log.info("-> Getting snapshot from etcd...")
        try:
            helper.exec_command(self.build())
        except helper.ExecError as exc:
            raise DatabaseError(str(exc)) from exc
        log.info("snapshot path: ", self.dump_file_path)