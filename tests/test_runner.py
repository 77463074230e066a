import pytest

from backupkit.database.base import DatabaseError
from backupkit.database.redis import Redis
from backupkit.database.runner import DatabaseConfig, run, run_database


def _redis_copy(tmp_path, rdb_path, **extra):
    settings = {"mode": "copy", "rdb_path": str(rdb_path)}
    settings.update(extra)
    return DatabaseConfig(name="redis1", type="redis", settings=settings)


def test_unsupported_type_is_skipped(tmp_path):
    config = DatabaseConfig(name="x", type="unknown-db")
    assert run_database("model", str(tmp_path), config) is None


def test_init_error_raises(tmp_path):
    config = DatabaseConfig(name="mysql1", type="mysql", settings={})
    with pytest.raises(DatabaseError, match="mysql database config is required"):
        run_database("model", str(tmp_path), config)


def test_before_script_failure_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    config = _redis_copy(tmp_path, tmp_path / "x.rdb", before_script="missing-tool --flag")
    with pytest.raises(DatabaseError, match="Run dump before_script failed"):
        run_database("model", str(tmp_path), config)


def test_successful_dump_runs_after_script(tmp_path):
    source = tmp_path / "source.rdb"
    source.write_bytes(b"rdb")
    marker = tmp_path / "after.marker"
    config = _redis_copy(
        tmp_path,
        source,
        before_script="-missing-tool-for-test",
        after_script=f"touch {marker}",
    )
    db = run_database("model", str(tmp_path / "dump"), config)

    assert isinstance(db, Redis)
    assert (tmp_path / "dump" / "redis" / "redis1" / "dump.rdb").read_bytes() == b"rdb"
    assert marker.exists()


@pytest.mark.parametrize("on_exit", ["always", "failure"])
def test_failed_dump_runs_after_script_when_requested(tmp_path, on_exit):
    marker = tmp_path / "after.marker"
    config = _redis_copy(
        tmp_path, tmp_path / "missing.rdb", after_script=f"touch {marker}", on_exit=on_exit
    )
    with pytest.raises(DatabaseError, match="does not exist"):
        run_database("model", str(tmp_path), config)
    assert marker.exists()


@pytest.mark.parametrize("on_exit", ["success", "", "other"])
def test_failed_dump_skips_after_script(tmp_path, on_exit):
    marker = tmp_path / "after.marker"
    config = _redis_copy(
        tmp_path, tmp_path / "missing.rdb", after_script=f"touch {marker}", on_exit=on_exit
    )
    with pytest.raises(DatabaseError, match="does not exist"):
        run_database("model", str(tmp_path), config)
    assert not marker.exists()


def test_run_stops_at_first_error(tmp_path):
    source = tmp_path / "source.rdb"
    source.write_bytes(b"rdb")
    marker = tmp_path / "second.marker"
    failing = _redis_copy(tmp_path, tmp_path / "missing.rdb")
    second = DatabaseConfig(
        name="redis2",
        type="redis",
        settings={"mode": "copy", "rdb_path": str(source), "after_script": f"touch {marker}"},
    )
    with pytest.raises(DatabaseError):
        run("model", str(tmp_path), [failing, second])
    assert not marker.exists()


def test_run_dumps_every_database(tmp_path):
    source = tmp_path / "source.rdb"
    source.write_bytes(b"rdb")
    configs = [
        DatabaseConfig(name=name, type="redis", settings={"mode": "copy", "rdb_path": str(source)})
        for name in ("first", "second")
    ]
    run("model", str(tmp_path / "dump"), configs)
    for name in ("first", "second"):
        assert (tmp_path / "dump" / "redis" / name / "dump.rdb").read_bytes() == b"rdb"