import errno
import os
import stat

import pytest

try:
    from fuse import FuseOSError
    from swiftfs.fuse.fuse_mount import SwiftFuse, build_client
    from swiftfs.fuse.mount_utils import get_mount_options
except (ImportError, OSError) as e:
    # fusepy raises OSError when libfuse is not installed
    pytest.skip(f"FUSE not available: {e}", allow_module_level=True)

from swiftfs.client.exceptions import ObjectError
from swiftfs.client.memory import InMemorySwiftClient
from swiftfs.native.path import SwiftPath
from conftest import put

@pytest.fixture
def ops(fs):
    return SwiftFuse(fs)

def _write_file(ops, path, data):
    ops.create(path, 0o644)
    ops.write(path, data, 0, 0)
    ops.release(path, 0)

def _errno(excinfo):
    return excinfo.value.errno

def test_root_attributes(ops):
    attrs = ops.getattr("/")
    assert stat.S_ISDIR(attrs["st_mode"])

def test_missing_path(ops):
    with pytest.raises(FuseOSError) as excinfo:
        ops.getattr("/nope")
    assert _errno(excinfo) == errno.ENOENT

def test_create_write_release(ops, fs):
    ops.create("/dir/file", 0o644)
    assert ops.getattr("/dir/file")["st_size"] == 0
    assert ops.write("/dir/file", b"hello", 0, 0) == 5
    assert ops.getattr("/dir/file")["st_size"] == 5
    assert ops.read("/dir/file", 3, 1, 0) == b"ell"
    assert not fs.exists("/dir/file")

    ops.release("/dir/file", 0)
    assert fs.open("/dir/file").read() == b"hello"
    attrs = ops.getattr("/dir/file")
    assert stat.S_ISREG(attrs["st_mode"])
    assert attrs["st_size"] == 5

def test_create_without_writes_makes_empty_file(ops, fs):
    ops.create("/empty", 0o644)
    ops.release("/empty", 0)
    assert fs.get_file_status("/empty").length == 0

def test_large_file_goes_through_parts(ops, fs, client):
    _write_file(ops, "/big", b"0123456789")
    assert fs.open("/big").read() == b"0123456789"
    assert "big/000000" in client.containers["data"]

def test_partial_overwrite_keeps_existing_content(ops, fs, store):
    put(store, "/file", b"hello world")
    ops.open("/file", os.O_WRONLY)
    ops.write("/file", b"HELLO", 0, 0)
    ops.release("/file", 0)
    assert fs.open("/file").read() == b"HELLO world"

def test_open_with_truncate(ops, fs, store):
    put(store, "/file", b"hello world")
    ops.open("/file", os.O_WRONLY | os.O_TRUNC)
    ops.write("/file", b"bye", 0, 0)
    ops.release("/file", 0)
    assert fs.open("/file").read() == b"bye"

def test_truncate_without_handle(ops, fs, store):
    put(store, "/file", b"hello world")
    ops.truncate("/file", 5)
    assert fs.open("/file").read() == b"hello"
    assert not ops.write_buffer.has_buffer("/file")

def test_read_ranges(ops, store):
    put(store, "/file", b"0123456789")
    ops.open("/file", os.O_RDONLY)
    assert ops.read("/file", 4, 2, 0) == b"2345"
    assert ops.read("/file", 100, 8, 0) == b"89"
    assert ops.read("/file", 4, 10, 0) == b""

def test_open_missing_or_directory(ops, fs):
    fs.mkdirs("/dir")
    with pytest.raises(FuseOSError) as excinfo:
        ops.open("/nope", os.O_RDONLY)
    assert _errno(excinfo) == errno.ENOENT
    with pytest.raises(FuseOSError) as excinfo:
        ops.open("/dir", os.O_RDONLY)
    assert _errno(excinfo) == errno.EISDIR

def test_readdir_lists_immediate_children(ops, fs, store):
    put(store, "/dir/a", b"1")
    put(store, "/dir/sub/b", b"2")
    fs.mkdirs("/dir/marked")
    ops.create("/dir/pending", 0o644)
    assert ops.readdir("/dir", 0) == [".", "..", "a", "marked", "pending", "sub"]
    assert ops.readdir("/", 0) == [".", "..", "dir"]

def test_readdir_errors(ops, store):
    put(store, "/file", b"x")
    with pytest.raises(FuseOSError) as excinfo:
        ops.readdir("/file", 0)
    assert _errno(excinfo) == errno.ENOTDIR
    with pytest.raises(FuseOSError) as excinfo:
        ops.readdir("/nope", 0)
    assert _errno(excinfo) == errno.ENOENT

def test_implicit_directory(ops, store):
    put(store, "/implicit/file", b"x")
    assert stat.S_ISDIR(ops.getattr("/implicit")["st_mode"])

def test_unlink(ops, fs, store):
    put(store, "/file", b"x")
    ops.unlink("/file")
    assert not fs.exists("/file")
    with pytest.raises(FuseOSError) as excinfo:
        ops.unlink("/file")
    assert _errno(excinfo) == errno.ENOENT

def test_mkdir_and_rmdir(ops, fs, store):
    ops.mkdir("/dir", 0o755)
    assert fs.is_directory("/dir")
    with pytest.raises(FuseOSError) as excinfo:
        ops.mkdir("/dir", 0o755)
    assert _errno(excinfo) == errno.EEXIST

    put(store, "/dir/file", b"x")
    with pytest.raises(FuseOSError) as excinfo:
        ops.rmdir("/dir")
    assert _errno(excinfo) == errno.ENOTEMPTY

    ops.unlink("/dir/file")
    ops.rmdir("/dir")
    assert not fs.exists("/dir")

def test_rename_replaces_existing_file(ops, fs, store):
    put(store, "/src", b"new")
    put(store, "/dst", b"old")
    ops.rename("/src", "/dst")
    assert fs.open("/dst").read() == b"new"
    assert not fs.exists("/src")

def test_rename_directory(ops, fs, store):
    fs.mkdirs("/old/nested")
    put(store, "/old/file", b"x")
    ops.rename("/old", "/new")
    assert ops.readdir("/new", 0) == [".", "..", "file", "nested"]
    assert not fs.exists("/old")

def test_rename_errors(ops, fs, store):
    put(store, "/file", b"x")
    fs.mkdirs("/dir")
    with pytest.raises(FuseOSError) as excinfo:
        ops.rename("/nope", "/other")
    assert _errno(excinfo) == errno.ENOENT
    with pytest.raises(FuseOSError) as excinfo:
        ops.rename("/file", "/dir")
    assert _errno(excinfo) == errno.EISDIR

def test_rename_flushes_open_file(ops, fs):
    ops.create("/draft", 0o644)
    ops.write("/draft", b"text", 0, 0)
    ops.rename("/draft", "/final")
    ops.release("/final", 0)
    assert fs.open("/final").read() == b"text"
    assert not fs.exists("/draft")

def test_transport_errors_become_eio(ops, client):
    def failing_head(key):
        raise ObjectError("boom", operation="HEAD")
    client.head_request = failing_head
    with pytest.raises(FuseOSError) as excinfo:
        ops.getattr("/file")
    assert _errno(excinfo) == errno.EIO

def test_statfs(ops):
    stats = ops.statfs("/")
    assert stats["f_bsize"] == 4096
    assert stats["f_bavail"] > 0

def test_metadata_changes_are_accepted(ops, store):
    put(store, "/file", b"x")
    assert ops.chmod("/file", 0o600) == 0
    assert ops.chown("/file", 0, 0) == 0
    assert ops.utimens("/file") == 0

def test_flush_all(ops, fs):
    ops.create("/pending", 0o644)
    ops.write("/pending", b"data", 0, 0)
    ops.flush_all()
    assert fs.open("/pending").read() == b"data"
    assert ops.write_buffer.keys() == []

def test_mount_options():
    options = get_mount_options(foreground=True)
    assert options["foreground"]
    assert "allow_other" not in options
    assert get_mount_options(allow_other=True)["allow_other"]

def test_build_memory_client():
    client = build_client(SwiftPath.parse("swift://scratch/"), memory=True)
    assert isinstance(client, InMemorySwiftClient)
    assert "scratch" in client.containers
