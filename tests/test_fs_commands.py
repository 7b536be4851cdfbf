import io
import os
from pathlib import Path

import pytest

from modshell.api import Core
from modshell.fs_commands import (
    CatCommand,
    CdCommand,
    DownloadCommand,
    LsCommand,
    PwdCommand,
    ReadfCommand,
    ReadfResult,
    format_entry,
)


@pytest.fixture
def core():
    return Core(stdout=io.BytesIO())


def _out(core):
    return core.stdout.getvalue().decode("utf-8")


def _attach(core, command):
    core.modules.add(command)
    return command


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "a.txt").write_bytes(b"hello")
    (tmp_path / "b.txt").write_bytes(b"")
    (tmp_path / ".hidden").write_bytes(b"x")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "c.txt").write_bytes(b"abc")
    return tmp_path


def test_cd_changes_directory(core, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    sub = tmp_path / "inner"
    sub.mkdir()
    cd = _attach(core, CdCommand())
    assert cd.run(["cd", str(sub)]) is True
    assert Path.cwd().resolve() == sub.resolve()
    assert f"Set current directory to {sub}" in _out(core)


def test_cd_missing_directory(core, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cd = _attach(core, CdCommand())
    assert cd.run(["cd", str(tmp_path / "missing")]) is None
    assert "SetCurrentDirectory failed" in _out(core)
    assert Path.cwd().resolve() == tmp_path.resolve()


def test_cd_wrong_argument_count(core):
    cd = _attach(core, CdCommand())
    assert cd.run(["cd"]) is None
    assert "Invalid arguments." in _out(core)


def test_pwd_returns_cwd(core, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    pwd = _attach(core, PwdCommand())
    result = pwd.run(["pwd"])
    assert result == os.getcwd()
    assert result in _out(core)


def test_ls_hides_hidden_files(core, tree):
    ls = _attach(core, LsCommand())
    assert ls.run(["ls", str(tree)]) == ["a.txt", "b.txt", "sub"]


def test_ls_all_shows_hidden(core, tree):
    ls = _attach(core, LsCommand())
    assert ".hidden" in ls.run(["ls", "-a", str(tree)])


def test_ls_recursive_lists_subdirectories(core, tree):
    ls = _attach(core, LsCommand())
    lines = ls.run(["ls", "-R", str(tree)])
    assert lines[:3] == ["a.txt", "b.txt", "sub"]
    assert lines[3:] == ["c.txt"]
    assert f"{tree / 'sub'}:" in _out(core)


def test_ls_defaults_to_current_directory(core, tree, monkeypatch):
    monkeypatch.chdir(tree)
    ls = _attach(core, LsCommand())
    assert ls.run(["ls"]) == ["a.txt", "b.txt", "sub"]


def test_ls_pattern(core, tree):
    ls = _attach(core, LsCommand())
    assert ls.run(["ls", str(tree / "*.txt")]) == ["a.txt", "b.txt"]


def test_ls_missing_path(core, tree):
    ls = _attach(core, LsCommand())
    assert ls.run(["ls", str(tree / "nothing" / "here")]) is None


def test_ls_long_format(core, tree):
    ls = _attach(core, LsCommand())
    lines = ls.run(["ls", "-l", str(tree)])
    assert len(lines) == 3
    assert lines[0].endswith("5 bytes\ta.txt")
    assert lines[2].startswith("d")


def test_format_entry(tree):
    with os.scandir(tree) as it:
        entries = {entry.name: entry for entry in it}
    assert format_entry(entries["a.txt"], False) == "a.txt"
    line = format_entry(entries["a.txt"], True)
    assert line.startswith("-")
    assert line.split("\t")[1:] == ["5 bytes", "a.txt"]
    assert format_entry(entries[".hidden"], True).split("\t")[0][2] == "h"
    assert format_entry(entries["sub"], True)[0] == "d"


def test_readf_loads_file(core, tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"\x00\x01payload")
    readf = _attach(core, ReadfCommand())
    result = readf.run(["readf", str(path)])
    assert result == ReadfResult(size=9, buffer=b"\x00\x01payload")
    assert readf.output is result


def test_readf_reuses_result(core, tmp_path):
    first = tmp_path / "one"
    second = tmp_path / "two"
    first.write_bytes(b"first")
    second.write_bytes(b"second!")
    readf = _attach(core, ReadfCommand())
    a = readf.run(["readf", str(first)])
    b = readf.run(["readf", str(second)])
    assert a is b
    assert b.buffer == b"second!"
    assert b.size == len(b"second!")


def test_readf_cleanup(core, tmp_path):
    path = tmp_path / "f"
    path.write_bytes(b"abc")
    readf = _attach(core, ReadfCommand())
    readf.run(["readf", str(path)])
    readf.cleanup()
    assert readf.output is None


def test_readf_errors(core, tmp_path):
    readf = _attach(core, ReadfCommand())
    assert readf.run(["readf"]) is None
    assert "Invalid args" in _out(core)
    assert readf.run(["readf", str(tmp_path / "missing")]) is None


def test_cat_concatenates(core, tmp_path):
    one = tmp_path / "one.txt"
    two = tmp_path / "two.txt"
    one.write_bytes(b"one\n")
    two.write_bytes(b"two\n")
    readf = _attach(core, ReadfCommand())
    cat = _attach(core, CatCommand())
    assert cat.readf is readf
    assert cat.run(["cat", str(one), str(two)]) == b"one\ntwo\n"
    out = core.stdout.getvalue()
    assert out.index(b"one\n") < out.index(b"two\n")


def test_cat_skips_unreadable(core, tmp_path):
    one = tmp_path / "one.txt"
    one.write_bytes(b"only")
    _attach(core, ReadfCommand())
    cat = _attach(core, CatCommand())
    assert cat.run(["cat", str(tmp_path / "missing"), str(one)]) == b"only"


def test_cat_cleanup_cleans_dependencies(core, tmp_path):
    one = tmp_path / "one.txt"
    one.write_bytes(b"data")
    readf = _attach(core, ReadfCommand())
    cat = _attach(core, CatCommand())
    cat.run(["cat", str(one)])
    cat.cleanup()
    assert readf.output is None
    assert cat.output is None


def test_cat_without_readf(core, tmp_path):
    cat = CatCommand()
    assert cat.init(core) is False
    assert "Dependency failed!" in _out(core)
    assert cat.run(["cat", str(tmp_path)]) is None


def test_cat_wrong_argument_count(core):
    _attach(core, ReadfCommand())
    cat = _attach(core, CatCommand())
    assert cat.run(["cat"]) is None
    assert "Invalid arguments." in _out(core)


def test_download_file_url(core, tmp_path):
    source = tmp_path / "source.bin"
    source.write_bytes(b"downloaded content")
    target = tmp_path / "target.bin"
    download = _attach(core, DownloadCommand())
    assert download.run(["download", source.as_uri(), str(target)]) == str(target)
    assert target.read_bytes() == b"downloaded content"
    assert "Successfully downloaded file" in _out(core)


def test_download_failure(core, tmp_path):
    download = _attach(core, DownloadCommand())
    missing = (tmp_path / "missing.bin").as_uri()
    assert download.run(["download", missing, str(tmp_path / "out")]) is None
    assert "Error downloading file." in _out(core)


def test_download_wrong_argument_count(core):
    download = _attach(core, DownloadCommand())
    assert download.run(["download", "only-one"]) is None
    assert "Invalid arguments." in _out(core)