# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
File status records and their inference from object headers.
"""
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping

from ..client.constants import (
    CONTENT_LENGTH,
    LAST_MODIFIED,
    LAST_MODIFIED_PATTERN,
    X_CONTAINER_BYTES_USED,
    X_CONTAINER_OBJECT_COUNT,
)
from ..client.exceptions import SwiftProtocolError
from .path import SwiftPath

DIRECTORY_HEADERS = (X_CONTAINER_OBJECT_COUNT.lower(), X_CONTAINER_BYTES_USED.lower())
UTC_ZONE_NAMES = ("GMT", "UTC")

@dataclass(frozen=True)
class FileStatus:
    """
    One filesystem entry.

    Attributes:
        length (int): Size in bytes, 0 for directories
        is_dir (bool): Whether the entry is a directory
        modification_time (int): Epoch milliseconds
        path (SwiftPath): Path under the store root
        block_size (int): Unused by object storage, 0
        block_replication (int): Unused by object storage, 0
    """
    length: int
    is_dir: bool
    modification_time: int
    path: SwiftPath
    block_size: int = 0
    block_replication: int = 0

    def __post_init__(self):
        if self.is_dir and self.length != 0:
            raise ValueError(f"Directory {self.path} cannot have length {self.length}")

def current_millis() -> int:
    return int(time.time() * 1000)

def parse_last_modified(value: str) -> int:
    """
    Parse a Last-Modified header value into epoch milliseconds.

    Raises:
        SwiftProtocolError: If the value does not match the HTTP date pattern.
    """
    value = value.strip()
    # strptime also accepts the local zone name, which would be read as UTC
    if value.rpartition(" ")[2] not in UTC_ZONE_NAMES:
        raise SwiftProtocolError(f"Failed to parse {LAST_MODIFIED}: {value} is not in GMT")
    try:
        parsed = datetime.strptime(value, LAST_MODIFIED_PATTERN)
    except ValueError as e:
        raise SwiftProtocolError(f"Failed to parse {LAST_MODIFIED}: {value}") from e
    return int(parsed.replace(tzinfo=timezone.utc).timestamp() * 1000)

def status_from_headers(headers: Mapping[str, str], path: SwiftPath) -> FileStatus:
    """
    Infer a FileStatus from a non-empty header set.

    Directory-marker headers win over Content-Length; a missing Last-Modified
    defaults to now, an unparsable one is an error.

    Raises:
        SwiftProtocolError: If Content-Length or Last-Modified is malformed.
    """
    values = {name.lower(): value for name, value in headers.items()}

    is_dir = False
    length = 0
    if any(name in values for name in DIRECTORY_HEADERS):
        is_dir = True
    elif CONTENT_LENGTH.lower() in values:
        raw_length = values[CONTENT_LENGTH.lower()]
        try:
            length = int(raw_length)
        except (TypeError, ValueError) as e:
            raise SwiftProtocolError(f"Failed to parse {CONTENT_LENGTH}: {raw_length}") from e

    if LAST_MODIFIED.lower() in values:
        modification_time = parse_last_modified(values[LAST_MODIFIED.lower()])
    else:
        modification_time = current_millis()

    return FileStatus(length=length, is_dir=is_dir, modification_time=modification_time, path=path)
