# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
SwiftFS: a hierarchical filesystem on top of OpenStack Swift object storage.
"""
from .client import InMemorySwiftClient, SwiftConfig, SwiftRestClient, load_config
from .native import FileStatus, SwiftNativeFileSystem, SwiftNativeFileSystemStore, SwiftPath

__version__ = "0.1.0"

__all__ = [
    "InMemorySwiftClient",
    "SwiftConfig",
    "SwiftRestClient",
    "load_config",
    "FileStatus",
    "SwiftNativeFileSystem",
    "SwiftNativeFileSystemStore",
    "SwiftPath",
]
