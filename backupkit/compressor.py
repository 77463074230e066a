"""Pack a model's dump directory into a (possibly compressed) tar file."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from datetime import datetime

from backupkit import helper, logger

_TIMESTAMP_FORMAT = "%Y.%m.%d.%H.%M.%S"

_GZIP = (".tar.gz", "pigz")
_COMPRESS = (".tar.Z", None)
_BZIP2 = (".tar.bz2", "pbzip2")
_LZIP = (".tar.lz", None)
_LZMA = (".tar.lzma", None)
_LZOP = (".tar.lzo", None)
_XZ = (".tar.xz", "pixz")
_ZSTD = (".tar.zst", None)
_PLAIN = (".tar", None)

_FORMATS: dict[str, tuple[str, str | None]] = {
    **dict.fromkeys(("gz", "tgz", "taz", "tar.gz"), _GZIP),
    **dict.fromkeys(("Z", "taZ", "tar.Z"), _COMPRESS),
    **dict.fromkeys(("bz2", "tbz", "tbz2", "tar.bz2"), _BZIP2),
    **dict.fromkeys(("lz", "tar.lz"), _LZIP),
    **dict.fromkeys(("lzma", "tlz", "tar.lzma"), _LZMA),
    **dict.fromkeys(("lzo", "tar.lzo"), _LZOP),
    **dict.fromkeys(("xz", "txz", "tar.xz"), _XZ),
    **dict.fromkeys(("zst", "tzst", "tar.zst"), _ZSTD),
    "tar": _PLAIN,
}

_DEFAULT_TYPE = "tar"


def _format_for(compress_type: str) -> tuple[str, str | None]:
    try:
        return _FORMATS[compress_type or _DEFAULT_TYPE]
    except KeyError:
        raise ValueError(f"Unsupported compress type: {compress_type}") from None


def extension_for(compress_type: str) -> str:
    """The archive file extension for a compress type; an empty type means plain tar."""
    return _format_for(compress_type)[0]


def archive_file_path(temp_path: str, ext: str) -> str:
    """A timestamped archive file path inside ``temp_path``."""
    return os.path.join(temp_path, datetime.now().strftime(_TIMESTAMP_FORMAT) + ext)


@dataclass(frozen=True)
class CompressResult:
    """Where the archive was written, with its extension and resolved compress type."""

    archive_path: str
    ext: str
    compress_type: str


@dataclass
class Tar:
    """Archives the directory ``name`` (relative to the working directory) with tar."""

    name: str
    temp_path: str
    ext: str = ".tar"
    parallel_program: str | None = None

    def options(self) -> list[str]:
        opts: list[str] = []
        if helper.is_gnu_tar():
            opts.append("--ignore-failed-read")
        program_path = shutil.which(self.parallel_program) if self.parallel_program else None
        if program_path:
            opts.extend(["--use-compress-program", program_path])
        else:
            opts.append("-a")
        opts.append("-cf")
        return opts

    def perform(self) -> str:
        """Write the archive and return its path."""
        file_path = archive_file_path(self.temp_path, self.ext)
        helper.exec_command("tar", *self.options(), file_path, self.name)
        return file_path


def run(name: str, dump_path: str, temp_path: str, compress_type: str) -> CompressResult:
    """Compress the dump directory of model ``name`` into ``temp_path``.

    The working directory is changed to the parent of ``dump_path`` so the
    archive holds paths starting with the model's directory.
    """
    log = logger.tag("Compressor")

    ext, parallel_program = _format_for(compress_type)
    compress_type = compress_type or _DEFAULT_TYPE
    tar = Tar(name=name, temp_path=temp_path, ext=ext, parallel_program=parallel_program)

    log.info("=> Compress | " + compress_type)

    try:
        helper.mkdir_p(dump_path)
    except OSError as exc:
        log.error(f"Failed to mkdir dump path {dump_path}: {exc}")
        raise

    work_dir = os.path.normpath(os.path.join(dump_path, os.pardir))
    try:
        os.chdir(work_dir)
    except OSError as exc:
        raise OSError(f"chdir to dump path: {dump_path}: {exc}") from exc

    archive_path = tar.perform()
    log.info("->", archive_path)
    return CompressResult(archive_path=archive_path, ext=ext, compress_type=compress_type)