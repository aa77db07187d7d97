import io
import os

import pytest

from swiftfs.client.memory import InMemorySwiftClient
from swiftfs.native.filesystem import SwiftNativeFileSystem
from swiftfs.native.store import SwiftNativeFileSystemStore

ROOT_URI = "swift://data/"
# Small enough that tests exercise manifest uploads
TEST_PARTITION_SIZE = 4

def pytest_configure(config):
    """Configure test environment."""
    # Never pick up a developer's credentials or tracing settings
    for name in list(os.environ):
        if name.startswith("SWIFTFS_"):
            del os.environ[name]

def put(store, path, data: bytes):
    """Upload ``data`` as a single object at ``path``."""
    store.upload_file(path, io.BytesIO(data), len(data))

@pytest.fixture
def client():
    """In-memory backend holding an empty "data" container."""
    return InMemorySwiftClient(containers=["data"])

@pytest.fixture
def store(client):
    return SwiftNativeFileSystemStore(ROOT_URI, client)

@pytest.fixture
def fs(client):
    filesystem = SwiftNativeFileSystem(ROOT_URI, client, partition_size=TEST_PARTITION_SIZE)
    yield filesystem
    filesystem.close()
