import pytest

from backupkit.database.base import DatabaseError
from backupkit.database.etcd import Etcd


def test_init_and_build():
    db = Etcd(
        "/tmp/backups",
        "etcd1",
        {"endpoint": "127.0.0.1:2379", "args": "--foo --bar --baz"},
    )
    db.init()

    assert db.build() == (
        "etcdctl snapshot save " + db.dump_file_path + " --endpoints 127.0.0.1:2379 --foo --bar --baz"
    )
    assert db.dump_file_path == "/tmp/backups/etcd/etcd1-127.0.0.1:2379"


def test_endpoint_required(tmp_path):
    db = Etcd(str(tmp_path), "etcd1", {})
    with pytest.raises(DatabaseError, match="endpoint config is required"):
        db.init()


def test_endpoint_and_endpoints_are_exclusive(tmp_path):
    db = Etcd(
        str(tmp_path),
        "etcd1",
        {"endpoint": "localhost:2379", "endpoints": ["localhost:22379"]},
    )
    with pytest.raises(DatabaseError, match="mutually exclusive"):
        db.init()


def test_deprecated_endpoints_uses_first(tmp_path):
    db = Etcd(
        str(tmp_path),
        "etcd1",
        {"endpoints": ["localhost:2379", "localhost:22379", "localhost:32379"]},
    )
    db.init()
    assert db.endpoint == "localhost:2379"
    assert db.build().endswith(" --endpoints localhost:2379")