import pytest

from swiftfs.fuse.buffer import WriteBuffer

@pytest.fixture
def buffer():
    write_buffer = WriteBuffer()
    yield write_buffer
    for key in write_buffer.keys():
        write_buffer.remove(key)

def test_initialize_and_read(buffer):
    buffer.initialize_buffer("/file", b"hello")
    assert buffer.has_buffer("/file")
    assert not buffer.is_dirty("/file")
    assert buffer.read("/file") == b"hello"
    assert buffer.read("/file", 1, 3) == b"ell"
    assert buffer.read("/other") is None

def test_initialize_twice_keeps_content(buffer):
    buffer.initialize_buffer("/file", b"first")
    buffer.initialize_buffer("/file", b"second")
    assert buffer.read("/file") == b"first"

def test_write_at_offset(buffer):
    buffer.initialize_buffer("/file", b"hello world")
    assert buffer.write("/file", b"HELLO", 0) == 5
    buffer.write("/file", b"!", 11)
    assert buffer.read("/file") == b"HELLO world!"
    assert buffer.get_size("/file") == 12
    assert buffer.is_dirty("/file")

def test_write_without_buffer(buffer):
    with pytest.raises(KeyError):
        buffer.write("/file", b"x", 0)

def test_truncate_shrinks_and_extends(buffer):
    buffer.initialize_buffer("/file", b"hello world")
    buffer.truncate("/file", 5)
    assert buffer.read("/file") == b"hello"
    buffer.truncate("/file", 8)
    assert buffer.read("/file") == b"hello\0\0\0"

def test_dirty_tracking(buffer):
    buffer.initialize_buffer("/new", dirty=True)
    assert buffer.is_dirty("/new")
    buffer.mark_clean("/new")
    assert not buffer.is_dirty("/new")

def test_rename_and_remove(buffer):
    buffer.initialize_buffer("/old", b"data", dirty=True)
    buffer.rename("/old", "/new")
    assert not buffer.has_buffer("/old")
    assert buffer.is_dirty("/new")
    assert buffer.read("/new") == b"data"
    buffer.remove("/new")
    assert buffer.keys() == []
    assert buffer.get_size("/new") == 0
