"""Encrypt a finished archive."""

from __future__ import annotations

from typing import Mapping

from backupkit import helper, logger

ENCRYPTED_SUFFIX = ".enc"


class EncryptError(Exception):
    """Raised when an archive cannot be encrypted."""


class OpenSSL:
    """Encrypts a file with ``openssl enc``-style ciphers.

    Recognised settings: ``chiper`` (default ``aes-256-cbc``), ``base64``
    (default false), ``salt`` (default true), ``password`` and ``args``.
    """

    def __init__(self, archive_path: str, settings: Mapping | None = None) -> None:
        settings = dict(settings or {})
        self.archive_path = archive_path
        self.salt = helper.as_bool(settings.get("salt", True))
        self.base64 = helper.as_bool(settings.get("base64", False))
        self.password = helper.as_string(settings.get("password"))
        self.args = helper.as_string(settings.get("args", ""))
        self.cipher = helper.as_string(settings.get("chiper", "aes-256-cbc"))
        self.encrypt_path = archive_path + ENCRYPTED_SUFFIX

    def options(self) -> list[str]:
        opts = [self.cipher]
        if self.base64:
            opts.append("-base64")
        if self.salt:
            opts.append("-salt")
        if self.args:
            opts.append(self.args)
        opts.extend(["-k", self.password])
        return opts

    def perform(self) -> str:
        """Encrypt the archive and return the encrypted file's path."""
        if not self.password:
            raise EncryptError("password option is required")

        opts = [*self.options(), "-in", self.archive_path, "-out", self.encrypt_path]
        try:
            helper.exec_command("openssl", *opts)
        except helper.ExecError as exc:
            raise EncryptError(
                f"OpenSSL encrypt failed: {str(exc).strip()} `openssl {' '.join(opts)}`"
            ) from exc
        return self.encrypt_path


def run(archive_path: str, encrypt_type: str, options: Mapping | None) -> str:
    """Encrypt ``archive_path`` when an encryptor is configured.

    Returns the path of the file to store next: the encrypted file, or the
    archive itself for an unknown or empty ``encrypt_type``.
    """
    if encrypt_type != "openssl":
        return archive_path

    log = logger.tag("Encryptor")
    log.info("encrypt | " + encrypt_type)
    encrypt_path = OpenSSL(archive_path, options).perform()
    log.info("encrypted:", encrypt_path)
    return encrypt_path