# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Object storage clients for SwiftFS.

``SwiftRestClient`` talks to a real Swift account through python-swiftclient;
``InMemorySwiftClient`` emulates one in process memory.
"""
from .base import SwiftClient
from .config import SwiftConfig, load_config
from .memory import InMemorySwiftClient
from .rest_client import SwiftRestClient
from .types import ObjectKey

__all__ = [
    "SwiftClient",
    "SwiftConfig",
    "load_config",
    "InMemorySwiftClient",
    "SwiftRestClient",
    "ObjectKey",
]
