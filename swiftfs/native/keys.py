# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Key mapping.

Translates hierarchical paths into the flat keys the object store is
addressed with. The container is the host of the store root
(``swift://<container>/``); the object name is the normalized path.
"""
from typing import Union

from ..client.constants import PATH_SEPARATOR
from ..client.exceptions import InvalidPathError
from ..client.types import ObjectKey
from .path import SwiftPath

PathLike = Union[str, SwiftPath]

def _parse(value: PathLike) -> SwiftPath:
    try:
        return SwiftPath.parse(value)
    except ValueError as e:
        raise InvalidPathError(f"Invalid path {value!r}: {e}") from e

def to_key(root: PathLike, path: PathLike) -> ObjectKey:
    """
    Map ``path`` to its object key under ``root``.

    Args:
        root: Store root URI, e.g. ``swift://data/``.
        path: Absolute path, bare or carrying the root's scheme and authority.

    Returns:
        ObjectKey: The key of the path.

    Raises:
        InvalidPathError: If the root names no container or the path belongs to another store.
    """
    root = _parse(root)
    path = _parse(path)
    if not root.host:
        raise InvalidPathError(f"Store root {root} does not name a container")
    if (path.scheme or path.authority) and (path.scheme, path.authority) != (root.scheme, root.authority):
        raise InvalidPathError(f"Path {path} does not belong to {root}")
    return ObjectKey(root.host, path.path)

def part_key(root: PathLike, path: PathLike, part_number: Union[int, str]) -> ObjectKey:
    """
    Key of part ``part_number`` of a manifest upload to ``path``.

    Parts live below the path's own key: ``dir/file/0``, ``dir/file/1``, ...
    The backend joins parts in name order, so callers writing more than ten
    parts pass zero-padded strings.
    """
    key = to_key(root, path)
    object_name = key.object_name
    if not object_name.endswith(PATH_SEPARATOR):
        object_name += PATH_SEPARATOR
    return ObjectKey(key.container, f"{object_name}{part_number}")
