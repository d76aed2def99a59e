import os

import pytest

from minftp.core.local_files import LocalFileStore


def test_sink_truncates_and_source_reads(tmp_path):
    store = LocalFileStore(str(tmp_path))
    (tmp_path / "data.bin").write_bytes(b"old contents")

    with store.open_sink("data.bin") as sink:
        sink.write(b"new")
    with store.open_source("data.bin") as source:
        assert source.read(1024) == b"new"
        assert source.read(1024) == b""


def test_defaults_to_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert LocalFileStore().path_for("x.txt") == os.path.join(os.getcwd(), "x.txt")


def test_absolute_names_resolve_under_root(tmp_path):
    store = LocalFileStore(str(tmp_path / "root"))
    root = os.path.realpath(str(tmp_path / "root"))
    assert store.path_for("/etc/passwd") == os.path.join(root, "etc", "passwd")


@pytest.mark.parametrize("name", ["../outside.txt", "a/../../outside.txt", "/../outside.txt"])
def test_names_escaping_root_are_refused(tmp_path, name):
    (tmp_path / "root").mkdir()
    store = LocalFileStore(str(tmp_path / "root"))
    with pytest.raises(PermissionError):
        store.open_sink(name)
    assert not (tmp_path / "outside.txt").exists()


def test_symlink_out_of_root_is_refused(tmp_path):
    (tmp_path / "root").mkdir()
    (tmp_path / "secret.txt").write_bytes(b"keep")
    os.symlink(tmp_path / "secret.txt", tmp_path / "root" / "link.txt")
    store = LocalFileStore(str(tmp_path / "root"))
    with pytest.raises(PermissionError):
        store.open_sink("link.txt")
    assert (tmp_path / "secret.txt").read_bytes() == b"keep"
