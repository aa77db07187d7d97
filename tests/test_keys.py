import pytest

from swiftfs.client.exceptions import InvalidPathError
from swiftfs.client.types import ObjectKey
from swiftfs.native.keys import part_key, to_key
from swiftfs.native.path import SwiftPath

ROOT = "swift://data/"

def test_to_key_uses_container_and_path():
    assert to_key(ROOT, "/dir/file") == ObjectKey("data", "/dir/file")

def test_to_key_accepts_full_uri():
    assert to_key(ROOT, "swift://data/dir/file") == ObjectKey("data", "/dir/file")

def test_to_key_normalizes_path():
    assert to_key(ROOT, "/dir/../other//file") == ObjectKey("data", "/other/file")
    assert to_key(ROOT, "relative") == ObjectKey("data", "/relative")

def test_to_key_root():
    key = to_key(ROOT, "/")
    assert key.is_root
    assert key.object_name_in_container == ""

def test_to_key_rejects_root_without_container():
    with pytest.raises(InvalidPathError):
        to_key("swift:///", "/file")

def test_to_key_rejects_other_store():
    with pytest.raises(InvalidPathError):
        to_key(ROOT, "swift://other/file")
    with pytest.raises(InvalidPathError):
        to_key(ROOT, "s3://data/file")

def test_part_key():
    assert part_key(ROOT, "/dir/file", 3) == ObjectKey("data", "/dir/file/3")
    assert part_key(ROOT, "/dir/file", "000012") == ObjectKey("data", "/dir/file/000012")

def test_object_key_forms():
    key = ObjectKey("data", "/dir/file")
    assert str(key) == "data/dir/file"
    assert key.to_uri_path() == "/data/dir/file"
    assert key.object_name_in_container == "dir/file"
    assert key.as_directory() == ObjectKey("data", "/dir/file/")
    assert key.as_directory().as_directory() == key.as_directory()

def test_swift_path_navigation():
    path = SwiftPath.parse("swift://data/a/b/c")
    assert path.host == "data"
    assert path.name == "c"
    assert path.parent == SwiftPath("/a/b", "swift", "data")
    assert path.parent.child("d") == SwiftPath("/a/b/d", "swift", "data")
    assert path.relative_to(SwiftPath.of("/a")) == "b/c"
    assert str(path) == "swift://data/a/b/c"
    assert SwiftPath.of("/").parent is None

def test_swift_path_relative_to_outside():
    with pytest.raises(ValueError):
        SwiftPath.of("/a/b").relative_to(SwiftPath.of("/ab"))

def test_swift_path_with_root():
    path = SwiftPath.of("/x/y").with_root(SwiftPath.parse("swift://data/"))
    assert str(path) == "swift://data/x/y"

def test_swift_path_of_keeps_uri_characters():
    assert SwiftPath.of("/what?#").path == "/what?#"
    assert SwiftPath.parse("/what?now").path == "/what"
