"""Back up a Redis server, either through ``redis-cli --rdb`` or by copying its RDB file."""

from __future__ import annotations

import enum
import re
from typing import Any, Mapping

from backupkit import helper, logger
from backupkit.database.base import Database, DatabaseError, _join

_OK_AT_END = re.compile(r"OK$")


class RedisMode(enum.Enum):
    """How the dump is obtained."""

    SYNC = "sync"
    COPY = "copy"


class Redis(Database):
    """Redis database.

    Settings: ``mode`` (``sync`` or ``copy``, default copy), ``invoke_save``
    (default true, always false in copy mode), ``host`` (default 127.0.0.1),
    ``port`` (default 6379), ``socket``, ``password``, ``rdb_path`` (default
    /var/db/redis/dump.rdb) and ``args``.
    """

    type_name = "redis"

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
        self.password = ""
        self.mode = RedisMode.COPY
        self.invoke_save = False
        self.rdb_path = ""
        self.args = ""
        self.dump_file_path = ""

    def init(self) -> None:
        self.host = self._string("host", "127.0.0.1")
        self.port = self._string("port", "6379")
        self.socket = self._string("socket")
        self.password = self._string("password")
        self.rdb_path = self._string("rdb_path", "/var/db/redis/dump.rdb")
        self.invoke_save = self._bool("invoke_save", True)
        self.args = self._string("args")

        mode = self._string("mode", "copy")
        if mode == "copy":
            self.invoke_save = False

        if self.socket:
            self.host = ""
            self.port = ""

        self.mode = RedisMode.SYNC if mode == "sync" else RedisMode.COPY
        self.dump_file_path = _join(self.dump_path, "dump.rdb")

    def build(self) -> str:
        """The command that produces the dump file."""
        if self.mode is RedisMode.COPY:
            return " ".join(["cp", self.rdb_path, self.dump_file_path])

        args = ["redis-cli"]
        if self.host:
            args.append("-h " + self.host)
        if self.port:
            args.append("-p " + self.port)
        if self.socket:
            args.extend(["-s", self.socket])
        if self.password:
            args.append("-a " + self.password)
        if self.args:
            args.append(self.args)
        args.extend(["--rdb", self.dump_file_path])
        return " ".join(args)

    def perform(self) -> None:
        if self.mode is RedisMode.COPY and not helper.is_exists_path(self.rdb_path):
            raise DatabaseError(f"Redis RDB file: {self.rdb_path} does not exist")

        self._try_save()

        if self.mode is RedisMode.COPY:
            self._copy()
        else:
            self._sync()

    def _try_save(self) -> None:
        if not self.invoke_save:
            return

        log = logger.tag("Redis")
        log.info("Perform redis-cli save...")
        try:
            out = helper.exec_command(self.build(), "SAVE")
        except helper.ExecError as exc:
            raise DatabaseError(f"redis-cli SAVE failed {exc}") from exc

        if not _OK_AT_END.search(out.strip()):
            raise DatabaseError(f'failed to invoke the "SAVE" command Response was: {out}')

    def _sync(self) -> None:
        log = logger.tag("Redis")
        log.info("Syncing redis dump to", self.dump_file_path)
        try:
            helper.exec_command(self.build())
        except helper.ExecError as exc:
            raise DatabaseError(f"dump redis error: {exc}") from exc

        if not helper.is_exists_path(self.dump_file_path):
            raise DatabaseError(f"dump result file {self.dump_file_path} not found")

    def _copy(self) -> None:
        log = logger.tag("Redis")
        log.info("Copying redis dump to", self.dump_file_path)
        try:
            helper.exec_command(self.build())
        except helper.ExecError as exc:
            raise DatabaseError(f"copy redis dump file error: {exc}") from exc