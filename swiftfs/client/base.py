# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Client interface.

This module defines the verb-level primitives the filesystem store needs from
an object storage backend. Implementations are free to retry, authenticate and
pool connections; the store only ever calls these methods.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Dict, Optional

from .types import ObjectKey


class SwiftClient(ABC):
    """Verb-level interface to a Swift-like object store."""

    @abstractmethod
    def upload(self, key: ObjectKey, stream: BinaryIO, length: int,
               headers: Optional[Dict[str, str]] = None) -> None:
        """Upload ``length`` bytes from ``stream`` to ``key``."""

    @abstractmethod
    def head_request(self, key: ObjectKey) -> Dict[str, str]:
        """Return the header set of ``key``, or an empty dict when it does not exist."""

    @abstractmethod
    def get_data_as_input_stream(self, key: ObjectKey, offset: Optional[int] = None,
                                 length: Optional[int] = None) -> BinaryIO:
        """Return the object body, or the ``[offset, offset + length)`` slice of it."""

    @abstractmethod
    def put_request(self, key: ObjectKey) -> None:
        """Create an empty directory marker at ``key``."""

    @abstractmethod
    def delete(self, key: ObjectKey) -> None:
        """Delete ``key``. Deleting a missing key is not an error."""

    @abstractmethod
    def copy_object(self, src_key: ObjectKey, dst_key: ObjectKey) -> bool:
        """Server-side copy. Returns False when the source could not be copied."""

    @abstractmethod
    def find_objects_by_prefix(self, key: ObjectKey) -> Optional[bytes]:
        """Newline separated names of every object under ``key``, or None."""

    @abstractmethod
    def get_object_location(self, key: ObjectKey) -> bytes:
        """Raw location-hint body for ``key``."""

    def close(self) -> None:
        """Release any resources held by the client."""
