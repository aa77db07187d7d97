# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
In-memory Swift backend.

This module provides a :class:`SwiftClient` that keeps every container in
process memory while reproducing the parts of Swift behaviour the filesystem
store depends on:

- containers answer HEAD with object-count and bytes-used headers;
- directory markers created with ``put_request`` answer HEAD the same way;
- objects answer HEAD with Content-Length and an HTTP-date Last-Modified;
- an object carrying ``X-Object-Manifest`` reads as the concatenation of every
  object whose name starts with the manifest prefix, in name order;
- prefix listings are sorted by name and newline separated.

It is used by the test-suite, the examples and ``python -m swiftfs.fuse --memory``.
"""
import io
import json
import time
from dataclasses import dataclass, field
from email.utils import formatdate
from threading import RLock
from typing import BinaryIO, Dict, Iterable, Optional

from .base import SwiftClient
from .constants import (
    CONTENT_LENGTH,
    LAST_MODIFIED,
    PATH_SEPARATOR,
    X_CONTAINER_BYTES_USED,
    X_CONTAINER_OBJECT_COUNT,
    X_OBJECT_MANIFEST,
)
from .exceptions import ContainerError, ObjectError
from .types import ObjectKey
from ..utils import logger

DEFAULT_ENDPOINTS = ("http://127.0.0.1:6200/sda1/0/AUTH_test",)

@dataclass
class StoredObject:
    """One object held by the in-memory backend."""
    data: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    last_modified: float = field(default_factory=time.time)
    is_marker: bool = False

    @property
    def manifest(self) -> Optional[str]:
        for name, value in self.headers.items():
            if name.lower() == X_OBJECT_MANIFEST.lower():
                return value
        return None

class InMemorySwiftClient(SwiftClient):
    """
    Swift emulation backed by dictionaries.

    Attributes:
        containers (dict): Container name to {object name: StoredObject}
        endpoints (tuple): Base URLs reported by location lookups
        lock (threading.RLock): Guards every container
    """

    def __init__(self, containers: Iterable[str] = (), endpoints: Iterable[str] = DEFAULT_ENDPOINTS):
        self.containers: Dict[str, Dict[str, StoredObject]] = {name: {} for name in containers}
        self.endpoints = tuple(endpoints)
        self.lock = RLock()

    def create_container(self, name: str) -> None:
        with self.lock:
            self.containers.setdefault(name, {})

    def _container(self, key: ObjectKey, operation: str) -> Dict[str, StoredObject]:
        container = self.containers.get(key.container)
        if container is None:
            raise ContainerError("Container does not exist", operation=operation)
        return container

    def _read(self, container: Dict[str, StoredObject], obj: StoredObject) -> bytes:
        manifest = obj.manifest
        if manifest is None:
            return obj.data
        # Manifest values are "<container>/<prefix>"
        _, _, prefix = manifest.partition(PATH_SEPARATOR)
        names = sorted(name for name in container if name.startswith(prefix))
        return b"".join(container[name].data for name in names)

    def upload(self, key: ObjectKey, stream: BinaryIO, length: int,
               headers: Optional[Dict[str, str]] = None) -> None:
        data = stream.read(length) if length else b""
        if len(data) != length:
            raise ObjectError(f"Expected {length} bytes for {key}, got {len(data)}", operation="PUT")
        with self.lock:
            container = self._container(key, "PUT")
            container[key.object_name_in_container] = StoredObject(data=data, headers=dict(headers or {}))
        logger.debug(f"memory upload: {key} ({length} bytes)")

    def head_request(self, key: ObjectKey) -> Dict[str, str]:
        with self.lock:
            container = self.containers.get(key.container)
            if container is None:
                return {}
            if key.is_root:
                return {
                    X_CONTAINER_OBJECT_COUNT: str(len(container)),
                    X_CONTAINER_BYTES_USED: str(sum(len(o.data) for o in container.values())),
                }
            obj = container.get(key.object_name_in_container)
            if obj is None:
                return {}
            last_modified = formatdate(obj.last_modified, usegmt=True)
            if obj.is_marker:
                return {
                    X_CONTAINER_OBJECT_COUNT: "0",
                    X_CONTAINER_BYTES_USED: "0",
                    LAST_MODIFIED: last_modified,
                }
            headers = dict(obj.headers)
            headers[CONTENT_LENGTH] = str(len(self._read(container, obj)))
            headers[LAST_MODIFIED] = last_modified
            return headers

    def get_data_as_input_stream(self, key: ObjectKey, offset: Optional[int] = None,
                                 length: Optional[int] = None) -> BinaryIO:
        with self.lock:
            container = self._container(key, "GET")
            obj = container.get(key.object_name_in_container)
            if obj is None:
                raise ObjectError("Object does not exist", operation="GET")
            data = self._read(container, obj)
        if offset is not None:
            end = len(data) if length is None else offset + length
            data = data[offset:end]
        return io.BytesIO(data)

    def put_request(self, key: ObjectKey) -> None:
        with self.lock:
            container = self._container(key, "PUT")
            container[key.object_name_in_container] = StoredObject(data=b"", is_marker=True)

    def delete(self, key: ObjectKey) -> None:
        with self.lock:
            container = self._container(key, "DELETE")
            container.pop(key.object_name_in_container, None)

    def copy_object(self, src_key: ObjectKey, dst_key: ObjectKey) -> bool:
        with self.lock:
            src_container = self._container(src_key, "COPY")
            dst_container = self._container(dst_key, "COPY")
            obj = src_container.get(src_key.object_name_in_container)
            if obj is None:
                logger.warning(f"memory copy: source {src_key} not found")
                return False
            headers = {k: v for k, v in obj.headers.items() if k.lower() != X_OBJECT_MANIFEST.lower()}
            dst_container[dst_key.object_name_in_container] = StoredObject(
                data=self._read(src_container, obj),
                headers=headers,
                is_marker=obj.is_marker,
            )
        return True

    def find_objects_by_prefix(self, key: ObjectKey) -> Optional[bytes]:
        with self.lock:
            container = self.containers.get(key.container)
            if container is None:
                return None
            prefix = key.object_name_in_container
            names = sorted(name for name in container if name.startswith(prefix))
        return "\n".join(names).encode("utf-8")

    def get_object_location(self, key: ObjectKey) -> bytes:
        with self.lock:
            container = self._container(key, "LOCATION")
            if key.object_name_in_container not in container:
                raise ObjectError("Object does not exist", operation="LOCATION")
        return json.dumps([f"{endpoint}/{key}" for endpoint in self.endpoints]).encode("utf-8")
