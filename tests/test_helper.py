import os
import stat

import pytest

from backupkit import helper
from backupkit.helper import (
    ExecError,
    absolute_path,
    as_bool,
    as_string,
    as_string_list,
    clean_host,
    exec_command,
    exec_with_stdio,
    expand_home,
    format_endpoint,
    is_exists_path,
    mkdir_p,
)


@pytest.fixture
def sample(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_text("package helper\nsecond line\n")
    return str(path)


def test_exec_variants(sample):
    assert exec_command("head", "-n1", sample) == "package helper"
    assert exec_command(f"head -n1 {sample}") == "package helper"
    assert exec_command(f"head  -n1  {sample}") == "package helper"
    assert exec_command("head -n1", sample) == "package helper"


def test_exec_not_found():
    with pytest.raises(ExecError) as excinfo:
        exec_command("not-found-command", "foo")
    assert str(excinfo.value) == "not-found-command cannot be found"


def test_exec_failure_reports_stderr():
    with pytest.raises(ExecError) as excinfo:
        exec_command("sh", "-c", "echo boom >&2; exit 3")
    assert "boom" in str(excinfo.value)


def test_exec_with_stdio(sample):
    assert exec_with_stdio("head -n1", False, sample) == "package helper"
    assert exec_with_stdio("head -n1", True, sample) == ""


def test_is_exists_path():
    assert is_exists_path("foo/bar") is False
    assert is_exists_path(__file__) is True


def test_mkdir_p(tmp_path):
    dest = tmp_path / "test-mkdir-p" / "nested"
    assert is_exists_path(str(dest)) is False
    mkdir_p(str(dest))
    assert dest.is_dir()
    mkdir_p(str(dest))
    assert dest.is_dir()


def test_expand_home(monkeypatch):
    monkeypatch.setenv("HOME", "/home/tester")
    assert expand_home("") == ""
    assert expand_home("/home/jason/111") == "/home/jason/111"
    assert expand_home("~") == "~"
    assert expand_home("~/")[:2] != "~/"
    assert expand_home("~/foo/bar/dar") == "/home/tester/foo/bar/dar"


def test_absolute_path(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", "/home/tester")
    monkeypatch.chdir(tmp_path)
    assert absolute_path("foo/bar") == os.path.join(os.getcwd(), "foo/bar")
    assert absolute_path("/home/jason/111") == "/home/jason/111"
    assert absolute_path("~")[:2] != "~/"
    assert absolute_path("~/")[:2] != "~/"
    assert absolute_path("~/foo/bar/dar") == "/home/tester/foo/bar/dar"


@pytest.fixture
def fake_path(tmp_path, monkeypatch):
    bindir = tmp_path / "bin"
    bindir.mkdir()
    monkeypatch.setenv("PATH", str(bindir))
    helper.is_gnu_tar.cache_clear()
    yield bindir
    helper.is_gnu_tar.cache_clear()


def _fake_tar(bindir, version_line):
    script = bindir / "tar"
    script.write_text(f"#!/bin/sh\necho '{version_line}'\n")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def test_is_gnu_tar_detects_gnu(fake_path):
    _fake_tar(fake_path, "tar (GNU tar) 1.34")
    assert helper.is_gnu_tar() is True


def test_is_gnu_tar_other_tar(fake_path):
    _fake_tar(fake_path, "bsdtar 3.5.1")
    assert helper.is_gnu_tar() is False


def test_is_gnu_tar_missing(fake_path):
    assert helper.is_gnu_tar() is False


def test_clean_host():
    assert clean_host("foo.bar.com") == "foo.bar.com"
    assert clean_host("ftp://foo.bar.com") == "foo.bar.com"
    assert clean_host("http://foo.bar.com") == "foo.bar.com"
    assert clean_host("http://") == ""


def test_format_endpoint():
    assert format_endpoint("http://foo.bar.com") == "http://foo.bar.com"
    assert format_endpoint("https://foo.bar.com") == "https://foo.bar.com"
    assert format_endpoint("foo.bar.com") == "https://foo.bar.com"


def test_as_string():
    assert as_string(3306) == "3306"
    assert as_string("1234") == "1234"
    assert as_string(None) == ""
    assert as_string(True) == "true"


def test_as_bool():
    assert as_bool("true") is True
    assert as_bool(True) is True
    assert as_bool(False) is False
    assert as_bool(None) is False
    assert as_bool("false") is False


def test_as_string_list():
    assert as_string_list(["foo", "bar"]) == ["foo", "bar"]
    assert as_string_list("aa bb") == ["aa", "bb"]
    assert as_string_list(None) == []