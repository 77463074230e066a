# backupkit

backupkit is a library for taking backups of databases and files with the
tools already installed on the machine: `mysqldump`, `mariadb-backup`,
`pg_dump`, `redis-cli`, `sqlite3`, `etcdctl`, `sqlpackage`, `tar` and
`openssl`.

A backup is made of stages, each in its own module:

1. **Databases** are dumped into a working directory (`backupkit.database`).
2. **Files** listed as includes (minus excludes) are packed with `tar`
   (`backupkit.archive`).
3. The working directory is **compressed** into one timestamped archive
   (`backupkit.compressor`).
4. The archive is optionally **encrypted** with OpenSSL
   (`backupkit.encryptor`).

You call the stages yourself, in that order, from your own code.

## Requirements

Python 3.10 or later, and the command-line tools for the stages you use,
available on `PATH`. Tests need `pytest` (the `test` extra).

## Running commands

`backupkit.helper` wraps the subprocess calls. `exec_command(command, *args)`
splits `command` on whitespace, appends `args`, runs the program and returns
its standard output with surrounding newlines removed. A program that is not
on `PATH` raises `ExecError("<name> cannot be found")`; a non-zero exit raises
`ExecError` carrying the program's standard error.
`exec_with_stdio(command, stdout, *args)` does the same, but with `stdout`
true the program writes straight to this process's standard output and an
empty string is returned.

```python
from backupkit import helper

first_line = helper.exec_command("head -n1", "notes.txt")

helper.clean_host("ftp://files.example.com")   # "files.example.com"
helper.format_endpoint("s3.example.com")       # "https://s3.example.com"
helper.expand_home("~/backups")                # "$HOME/backups"
helper.absolute_path("backups")                # absolute path below the current directory
helper.is_gnu_tar()                            # True when `tar --version` mentions GNU
```

Also available: `is_exists_path`, `mkdir_p` (like `mkdir -p`), and
`as_string`, `as_bool` and `as_string_list`, which turn configuration values
into strings, booleans (`"1"`, `"t"`, `"true"` and the like are true) and
lists of strings (a string is split on whitespace).

## Archiving files

```python
from backupkit import archive

opts = archive.options(
    "/tmp/backup/work",
    excludes=["/home/me/.ssh/known_hosts"],
    includes=["/home/me/.ssh", "/etc/nginx/nginx.conf"],
)
# ["-cPf", "/tmp/backup/work/archive.tar",
#  "--exclude=/home/me/.ssh/known_hosts", "/home/me/.ssh", "/etc/nginx/nginx.conf"]
```

With GNU tar, `--ignore-failed-read` comes first so that unreadable files do
not abort the archive.

`archive.run(dump_path, archive_options)` takes a mapping with `includes` and
`excludes`, normalises the paths, creates `dump_path` and runs `tar`. It does
nothing when `archive_options` is `None` and raises `ValueError` when no
includes are configured.

## Compressing

`compressor.extension_for` maps a compress type to the archive extension:
`gz`, `tgz`, `taz` and `tar.gz` give `.tar.gz`; `Z`, `taZ`, `tar.Z` give
`.tar.Z`; `bz2`, `tbz`, `tbz2`, `tar.bz2` give `.tar.bz2`; `lz` gives
`.tar.lz`; `lzma`, `tlz` give `.tar.lzma`; `lzo` gives `.tar.lzo`; `xz`,
`txz` give `.tar.xz`; `zst`, `tzst` give `.tar.zst`; `tar` or an empty type
gives `.tar`. Unknown types raise `ValueError`.

```python
from backupkit import compressor

compressor.extension_for("tgz")   # ".tar.gz"
result = compressor.run("nightly", "/tmp/backup/nightly", "/tmp/backup", "gz")
result.archive_path               # "/tmp/backup/<YYYY.MM.DD.HH.MM.SS>.tar.gz"
result.ext, result.compress_type  # (".tar.gz", "gz")
```

`run` changes the working directory to the parent of the dump path and
archives the directory named after the model. For gzip, bzip2 and xz, if
`pigz`, `pbzip2` or `pixz` is installed it is passed as the compress program;
otherwise tar picks the compression from the extension (`-a`). The `Tar`
class holds the same steps for direct use.

## Encrypting

```python
from backupkit import encryptor

encrypted_path = encryptor.run(
    "/tmp/backup/2024.01.01.00.00.00.tar.gz",
    "openssl",
    {"password": "password"},
)
# "/tmp/backup/2024.01.01.00.00.00.tar.gz.enc"
```

The `OpenSSL` encryptor reads `chiper` (default `aes-256-cbc`), `salt`
(default true), `base64` (default false), `args` and `password`. A missing
password or a failed `openssl` run raises `EncryptError`. Any type other than
`openssl` returns the archive path unchanged.

## Dumping databases

Each database class takes the model's dump path, a name and a settings
mapping, and writes below `<dump_path>/<type>/<name>` (the directory is
created on construction). `init()` reads and validates the settings,
`build()` returns the command line, and `perform()` runs it.

```python
from backupkit.database.mysql import MySQL

db = MySQL("/tmp/backup/nightly", "main", {"database": "shop"})
db.init()
db.build()
# "mysqldump --host 127.0.0.1 --port 3306 -u root shop
#  --result-file=/tmp/backup/nightly/mysql/main/shop.sql"
```

| type | class | defaults and notes |
|------|-------|--------------------|
| `mysql` | `MySQL` | `127.0.0.1:3306`, user `root`; `database` required; `tables`, `exclude_tables` |
| `mariadb` | `MariaDB` | `127.0.0.1:3306`, user `root`; runs `mariadb-backup --backup` |
| `postgresql` | `PostgreSQL` | `localhost:5432`; `database` required; the password is set as `PGPASSWORD` |
| `redis` | `Redis` | `mode` `copy` (copies `rdb_path`, default `/var/db/redis/dump.rdb`) or `sync` (`redis-cli --rdb`, optionally after `SAVE`) |
| `sqlite` | `SQLite` | `path` required; dumps with `sqlite3 .dump` |
| `etcd` | `Etcd` | `endpoint` required (the deprecated `endpoints` list uses its first element) |
| `mssql` | `MSSQL` | `127.0.0.1,1433`, user `sa`; exports a `.bacpac` with `sqlpackage` |

A `socket` setting replaces host and port where the type supports it.
Configuration and dump failures raise `DatabaseError`.

`backupkit.database.runner.run(model_name, dump_path, databases)` dumps a list
of `DatabaseConfig(name, type, settings)` in order, stopping at the first
error; unknown types are logged and skipped. Settings may carry a
`before_script` and an `after_script`, run through `run_hook`; a script
starting with `-` has its failure ignored. After a failed dump, `on_exit`
decides whether `after_script` still runs: `always` or `failure` run it,
`success` or no value skip it; the dump error is raised either way.

## Logging and progress

```python
from backupkit import logger

log = logger.tag("Database")
log.info("=> database | mysql: main")
```

Lines are timestamped and written to standard output; `logger.set_logger(path)`
appends them to a file as well. Debug lines appear when the `DEBUG`
environment variable is `true`. Colours are used only on a terminal and not
when `NO_COLOR` is set.

`backupkit.progress.ProgressBar(log, file)` wraps an open binary file; reading
through its `read` method draws a bar on standard error. `done(url)` logs the
upload with its duration, formatted by `format_duration` (for example
`"1 minute 5 seconds"`).

## What backupkit does not do

There is no command-line program, configuration file loader, scheduler or
daemon, and no web interface. Archives are not split, no notifications are
sent, and there are no storage back ends: uploading the finished archive
(for example to FTP, SCP or a cloud store) and removing temporary files are
left to your code.