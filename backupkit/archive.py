"""Collect configured files and directories into a tar archive."""

from __future__ import annotations

import posixpath
from typing import Iterable, Mapping

from backupkit import helper, logger

ARCHIVE_NAME = "archive.tar"


def _clean(path: str) -> str:
    """Lexically normalise a slash-separated path."""
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = cleaned[1:]
    return cleaned


def clean_paths(paths: Iterable[str]) -> list[str]:
    """Normalise every path in ``paths``."""
    return [_clean(path) for path in paths]


def options(dump_path: str, excludes: Iterable[str], includes: Iterable[str]) -> list[str]:
    """Build the ``tar`` arguments that archive ``includes`` into the dump path."""
    tar_path = _clean(posixpath.join(dump_path, ARCHIVE_NAME))
    opts: list[str] = []
    if helper.is_gnu_tar():
        opts.append("--ignore-failed-read")
    opts.extend(["-cPf", tar_path])
    opts.extend(f"--exclude={_clean(exclude)}" for exclude in excludes)
    opts.extend(includes)
    return opts


def run(dump_path: str, archive_options: Mapping | None) -> None:
    """Archive the configured paths into ``dump_path``; nothing happens without options.

    Raises ``ValueError`` when no includes are configured and
    ``helper.ExecError`` when ``tar`` fails.
    """
    log = logger.tag("Archive")

    if archive_options is None:
        return

    try:
        helper.mkdir_p(dump_path)
    except OSError as exc:
        log.error(f"Failed to mkdir dump path {dump_path}: {exc}")
        raise

    includes = clean_paths(helper.as_string_list(archive_options.get("includes")))
    excludes = clean_paths(helper.as_string_list(archive_options.get("excludes")))

    if not includes:
        raise ValueError("archive.includes have no config")
    log.info("=> includes", len(includes), "rules")

    helper.exec_command("tar", *options(dump_path, excludes, includes))