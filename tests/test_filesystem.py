import errno

import pytest

from swiftfs.native.path import SwiftPath
from conftest import put

def _names(client):
    return sorted(client.containers["data"])

def test_small_file_is_a_single_object(fs, client):
    with fs.create("/dir/small") as stream:
        stream.write(b"abc")
    assert stream.parts_uploaded == 0
    assert _names(client) == ["dir/small"]
    assert fs.get_file_status("/dir/small").length == 3
    assert fs.open("/dir/small").read() == b"abc"

def test_large_file_is_written_as_parts_and_manifest(fs, client):
    data = b"0123456789"
    with fs.create("/big") as stream:
        stream.write(data[:3])
        stream.write(data[3:])
    assert stream.parts_uploaded == 3
    assert stream.bytes_written == len(data)
    assert _names(client) == ["big", "big/000000", "big/000001", "big/000002"]
    assert fs.open("/big").read() == data
    assert fs.open("/big", 3, 5).read() == data[3:8]
    assert fs.get_file_status("/big").length == len(data)

def test_exact_multiple_of_partition_size(fs, client):
    with fs.create("/even") as stream:
        stream.write(b"abcdefgh")
    assert stream.parts_uploaded == 2
    assert _names(client) == ["even", "even/000000", "even/000001"]
    assert fs.open("/even").read() == b"abcdefgh"

def test_stream_close(fs):
    stream = fs.create("/file")
    stream.write(b"x")
    stream.close()
    stream.close()
    with pytest.raises(ValueError):
        stream.write(b"y")

def test_create_existing(fs, store):
    put(store, "/file", b"x")
    fs.mkdirs("/dir")
    with pytest.raises(FileExistsError):
        fs.create("/file")
    with pytest.raises(IsADirectoryError):
        fs.create("/dir", overwrite=True)

def test_overwrite_drops_stale_parts(fs, client):
    with fs.create("/big") as stream:
        stream.write(b"0123456789")
    with fs.create("/big", overwrite=True) as stream:
        stream.write(b"hi")
    assert fs.open("/big").read() == b"hi"
    assert _names(client) == ["big"]

def test_mkdirs_creates_missing_ancestors(fs, client):
    assert fs.mkdirs("/a/b/c")
    assert _names(client) == ["a", "a/b", "a/b/c"]
    assert fs.is_directory("/a/b")
    assert fs.mkdirs("/a/b/c")

def test_mkdirs_through_a_file(fs, store):
    put(store, "/a/file", b"x")
    with pytest.raises(FileExistsError):
        fs.mkdirs("/a/file/sub")

def test_missing_paths(fs):
    with pytest.raises(FileNotFoundError):
        fs.get_file_status("/nope")
    with pytest.raises(FileNotFoundError):
        fs.open("/nope")
    assert not fs.exists("/nope")
    assert not fs.is_file("/nope")
    assert not fs.is_directory("/nope")

def test_open_directory(fs):
    fs.mkdirs("/dir")
    with pytest.raises(IsADirectoryError):
        fs.open("/dir")

def test_exists_and_kinds(fs, store):
    put(store, "/implicit/file", b"x")
    assert fs.exists("/implicit/file")
    assert fs.is_file("/implicit/file")
    assert fs.exists("/implicit")
    assert fs.is_directory("/implicit")
    assert not fs.is_file("/implicit")

def test_list_status(fs, store):
    put(store, "/dir/a", b"1")
    put(store, "/dir/sub/b", b"22")
    assert [s.path.path for s in fs.list_status("/dir")] == ["/dir/a", "/dir/sub/b"]
    file_listing = fs.list_status("/dir/a")
    assert len(file_listing) == 1
    assert file_listing[0].length == 1

def test_delete_file(fs, store):
    put(store, "/file", b"x")
    assert fs.delete("/file")
    assert not fs.exists("/file")
    assert not fs.delete("/file")

def test_delete_large_file_removes_parts(fs, client):
    with fs.create("/big") as stream:
        stream.write(b"0123456789")
    assert fs.delete("/big")
    assert _names(client) == []

def test_delete_non_empty_directory(fs, store, client):
    fs.mkdirs("/dir/sub")
    put(store, "/dir/sub/file", b"x")
    with pytest.raises(OSError) as excinfo:
        fs.delete("/dir")
    assert excinfo.value.errno == errno.ENOTEMPTY
    assert fs.delete("/dir", recursive=True)
    assert _names(client) == []

def test_delete_empty_directory(fs, client):
    fs.mkdirs("/dir")
    assert fs.delete("/dir")
    assert _names(client) == []

def test_rename_missing_source(fs):
    assert not fs.rename("/nope", "/other")

def test_rename_large_file(fs, client):
    with fs.create("/big") as stream:
        stream.write(b"0123456789")
    assert fs.rename("/big", "/moved")
    assert fs.open("/moved").read() == b"0123456789"
    assert _names(client) == ["moved"]

def test_rename_directory_carries_markers(fs, store):
    fs.mkdirs("/src/empty")
    put(store, "/src/file", b"x")
    assert fs.rename("/src", "/dst")
    assert fs.is_directory("/dst")
    assert fs.is_directory("/dst/empty")
    assert fs.open("/dst/file").read() == b"x"
    assert not fs.exists("/src")
    assert not fs.exists("/src/empty")

def test_rename_directory_with_large_file(fs, client):
    with fs.create("/src/big") as stream:
        stream.write(b"0123456789")
    put(fs.store, "/src/small", b"x")
    assert fs.rename("/src", "/dst")
    assert fs.open("/dst/big").read() == b"0123456789"
    assert _names(client) == ["dst/big", "dst/small"]
    assert [s.path.path for s in fs.list_status("/dst")] == ["/dst/big", "/dst/small"]

def test_block_locations(fs, store):
    put(store, "/file", b"x")
    assert fs.get_file_block_locations("/file") == {
        "http://127.0.0.1:6200/sda1/0/AUTH_test/data/file",
    }

def test_uri(fs):
    assert fs.uri == SwiftPath("/", "swift", "data")
