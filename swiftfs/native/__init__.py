# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Filesystem emulation over a flat object store.
"""
from .filesystem import SwiftNativeFileSystem, SwiftOutputStream
from .keys import part_key, to_key
from .locations import extract_uris
from .path import SwiftPath
from .rename import RenameEngine, RenameResult
from .status import FileStatus
from .store import SwiftNativeFileSystemStore

__all__ = [
    "SwiftNativeFileSystem",
    "SwiftOutputStream",
    "SwiftNativeFileSystemStore",
    "SwiftPath",
    "FileStatus",
    "RenameEngine",
    "RenameResult",
    "extract_uris",
    "part_key",
    "to_key",
]
