import os

import pytest

from backupkit.database.base import Database, DatabaseError, run_hook
from backupkit.database.mysql import MySQL


class Monkey(Database):
    type_name = "mysql"

    def init(self):
        self.ready = True

    def perform(self):
        if self.model_name != "TestMonkey":
            raise DatabaseError("Error")
        if self.name != "mysql1":
            raise DatabaseError("Error")
        return "performed"


def test_subclass_perform(tmp_path):
    db = Monkey(str(tmp_path), "mysql1", model_name="TestMonkey")
    reference = MySQL(str(tmp_path), "mysql1", model_name="TestMonkey")
    assert db.perform() == "performed"
    assert db.dump_path == reference.dump_path
    assert db.model_name == reference.model_name


def test_subclass_perform_wrong_name(tmp_path):
    db = Monkey(str(tmp_path), "other", model_name="TestMonkey")
    reference = MySQL(str(tmp_path), "other", model_name="TestMonkey")
    assert db.dump_path == reference.dump_path
    with pytest.raises(DatabaseError, match="Error"):
        db.perform()


def test_new_base(tmp_path):
    settings = {"host": "localhost"}
    db = MySQL(str(tmp_path), "mysql-master", settings, model_name="m")
    assert db.name == "mysql-master"
    assert db.model_name == "m"
    assert db.settings == settings
    assert db.dump_path == f"{tmp_path}/mysql/mysql-master"
    assert os.path.isdir(db.dump_path)


def test_dump_path_is_normalised(tmp_path):
    db = MySQL(f"{tmp_path}/", "mysql1")
    assert db.dump_path == f"{tmp_path}/mysql/mysql1"


def test_settings_are_copied(tmp_path):
    settings = {"host": "a"}
    db = MySQL(str(tmp_path), "x", settings)
    settings["host"] = "b"
    assert db.settings["host"] == "a"


def test_mkdir_failure_does_not_raise(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    db = MySQL(str(blocker), "x")
    assert db.dump_path == f"{blocker}/mysql/x"
    assert not os.path.exists(db.dump_path)


def test_database_is_abstract(tmp_path):
    with pytest.raises(TypeError):
        Database(str(tmp_path), "x")


def test_run_hook_empty_script():
    assert run_hook("noop", "") is True


def test_run_hook_runs_command(tmp_path):
    target = tmp_path / "touched"
    assert run_hook("touch", f"touch {target}") is True
    assert target.exists()


def test_run_hook_failure_raises():
    with pytest.raises(DatabaseError, match="Run dump before_script failed"):
        run_hook("dump before_script", "false")


def test_run_hook_failure_ignored():
    assert run_hook("dump after_script", "-false") is False


def test_run_hook_bad_quoting_raises():
    with pytest.raises(DatabaseError):
        run_hook("hook", "echo 'unterminated")


def test_run_hook_bad_quoting_ignored():
    assert run_hook("hook", "-echo 'unterminated") is False


def test_run_hook_missing_command_raises():
    with pytest.raises(DatabaseError, match="cannot be found"):
        run_hook("hook", "not-found-command-xyz foo")