import pytest

from swiftfs.client.exceptions import FileAlreadyExistsError, RenameBlockedError
from swiftfs.native.path import SwiftPath
from conftest import put

def test_rename_file_to_fresh_destination(store):
    put(store, "/src", b"payload")
    assert store.rename_directory("/src", "/dst")
    assert store.get_object_metadata("/src") is None
    assert store.get_object("/dst").read() == b"payload"

def test_rename_onto_existing_file_fails(store):
    put(store, "/src", b"one")
    put(store, "/dst", b"two")
    with pytest.raises(FileAlreadyExistsError):
        store.rename_directory("/src", "/dst")
    assert store.get_object("/src").read() == b"one"
    assert store.get_object("/dst").read() == b"two"

def test_rename_file_onto_directory_moves_it_beside_the_directory(store):
    put(store, "/a/file", b"x")
    store.create_directory("/b")
    assert store.rename_directory("/a/file", "/b")
    assert store.get_object_metadata("/a/file") is None
    assert store.get_object("/file").read() == b"x"

def test_rename_directory_moves_every_file(store):
    put(store, "/src/a", b"1")
    put(store, "/src/sub/b", b"2")
    put(store, "/srcfile", b"sibling")

    result = store.rename_with_result("/src", "/dst")

    assert result
    assert sorted(dst.path for _, dst in result.moved) == ["/dst/a", "/dst/sub/b"]
    assert store.get_object("/dst/a").read() == b"1"
    assert store.get_object("/dst/sub/b").read() == b"2"
    assert store.list_sub_paths("/src") == []
    # Objects sharing only a name prefix stay put
    assert store.get_object("/srcfile").read() == b"sibling"

def test_rename_directory_skips_nested_markers(store):
    put(store, "/src/a", b"1")
    store.create_directory("/src/empty")
    result = store.rename_with_result("/src", "/dst")
    assert [dst.path for _, dst in result.moved] == ["/dst/a"]
    assert store.get_object_metadata("/src/empty").is_dir

def test_rename_blocked_by_single_file_in_destination_parent(store):
    put(store, "/src/f", b"1")
    put(store, "/p/only", b"2")
    with pytest.raises(RenameBlockedError):
        store.rename_directory("/src", "/p/new")
    assert store.get_object_metadata("/src/f") is not None

def test_failed_copy_keeps_source(store, client):
    put(store, "/src/a", b"1")
    put(store, "/src/b", b"2")
    original_copy = client.copy_object

    def copy_object(src_key, dst_key):
        if src_key.object_name_in_container == "src/b":
            return False
        return original_copy(src_key, dst_key)

    client.copy_object = copy_object
    result = store.rename_with_result("/src", "/dst")

    assert not result
    assert result.failed == [(SwiftPath.of("/src/b"), SwiftPath.of("/dst/b"))]
    assert store.get_object("/src/b").read() == b"2"
    assert store.get_object_metadata("/src/a") is None
    assert not store.rename_directory("/src", "/dst")
