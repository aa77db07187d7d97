# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
FUSE mount for Swift containers.

Importing this package does not load libfuse; import
``swiftfs.fuse.fuse_mount`` for :class:`SwiftFuse`, :func:`mount` and :func:`main`.
"""
from .buffer import WriteBuffer

__all__ = ['WriteBuffer']
