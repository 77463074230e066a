import pytest

from backupkit.database.base import DatabaseError
from backupkit.database.mssql import MSSQL


def test_defaults_build():
    db = MSSQL("/data/backups", "mssql1", {"database": "db1"})
    db.init()

    assert db.host == "127.0.0.1"
    assert db.port == "1433"
    assert db.username == "sa"
    assert db.trust_server_certificate is False
    assert db.build() == (
        "sqlpackage /Action:Export /SourceDatabaseName:db1 /SourceUser:sa "
        "/SourceServerName:127.0.0.1,1433  /TargetFile:/data/backups/mssql/mssql1/db1.bacpac"
    )


def test_credentials_trust_and_args(tmp_path):
    settings = {
        "database": "sales",
        "host": "db.example.com",
        "port": 1500,
        "username": "backup",
        "password": "password",
        "trustServerCertificate": True,
        "args": "/p:Storage=File",
    }
    db = MSSQL(str(tmp_path), "mssql1", settings)
    db.init()
    command = db.build()

    assert command.startswith("sqlpackage /Action:Export ")
    assert f"/SourceUser:{settings['username']}" in command
    assert f"/SourcePassword:{settings['password']}" in command
    assert f"/SourceServerName:{settings['host']},{settings['port']}" in command
    assert "/SourceTrustServerCertificate:True " + settings["args"] in command
    assert command.endswith(f"/TargetFile:{tmp_path}/mssql/mssql1/sales.bacpac")


def test_empty_host_and_port_fall_back(tmp_path):
    db = MSSQL(str(tmp_path), "mssql1", {"database": "db1", "host": "", "port": ""})
    db.init()
    assert db.host == ""
    assert "/SourceServerName:127.0.0.1,1433" in db.build()


def test_perform_without_tool_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("PATH", str(tmp_path))
    db = MSSQL(str(tmp_path), "mssql1", {"database": "db1"})
    db.init()
    with pytest.raises(DatabaseError, match="Dump error"):
        db.perform()