"""Run every database dump configured for a model, with its hook scripts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from backupkit import helper, logger
from backupkit.database.base import Database, DatabaseError, run_hook
from backupkit.database.etcd import Etcd
from backupkit.database.mariadb import MariaDB
from backupkit.database.mssql import MSSQL
from backupkit.database.mysql import MySQL
from backupkit.database.postgresql import PostgreSQL
from backupkit.database.redis import Redis
from backupkit.database.sqlite import SQLite

_DATABASES: dict[str, type[Database]] = {
    "mysql": MySQL,
    "mariadb": MariaDB,
    "redis": Redis,
    "postgresql": PostgreSQL,
    "sqlite": SQLite,
    "mssql": MSSQL,
    "etcd": Etcd,
}

_RUN_AFTER_FAILURE = {
    "always": "on_exit is always, start to run after_script",
    "failure": "on_exit is failure, start to run after_script",
}


@dataclass
class DatabaseConfig:
    """One entry of a model's ``databases`` section."""

    name: str
    type: str
    settings: dict[str, Any] = field(default_factory=dict)


def run_database(model_name: str, dump_path: str, config: DatabaseConfig) -> Database | None:
    """Dump one database, running its ``before_script`` and ``after_script`` hooks.

    Returns the database that was dumped, or None when its type is not
    supported. ``on_exit`` (``always``, ``success`` or ``failure``) decides
    whether ``after_script`` still runs after a failed dump; the dump error
    is raised either way.
    """
    log = logger.tag("Database")

    db_class = _DATABASES.get(config.type)
    if db_class is None:
        log.warn(
            f"model: {model_name} databases.{config.name} config "
            f"`type: {config.type}`, but is not implement"
        )
        return None

    db = db_class(dump_path, config.name, config.settings, model_name=model_name)
    log.info(f"=> database | {config.type}: {db.name}")

    settings = config.settings
    run_hook("dump before_script", helper.as_string(settings.get("before_script")))

    after_script = helper.as_string(settings.get("after_script"))
    on_exit = helper.as_string(settings.get("on_exit"))

    db.init()

    try:
        db.perform()
    except (DatabaseError, helper.ExecError, OSError):
        log.info("Dump failed")
        if not after_script or not on_exit:
            raise
        if on_exit == "success":
            log.info("on_exit is success, skip run after_script")
            raise
        message = _RUN_AFTER_FAILURE.get(on_exit)
        if message is None:
            raise
        log.info(message)
        run_hook("dump after_script", after_script)
        raise

    log.info("Dump succeeded")
    run_hook("dump after_script", after_script)
    return db


def run(model_name: str, dump_path: str, databases: Iterable[DatabaseConfig]) -> None:
    """Dump every configured database in order, stopping at the first error."""
    for config in databases:
        run_database(model_name, dump_path, config)