# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Rename through copy-and-delete.

Object stores hash the full name of an object, so a rename is a server-side
copy to the new key followed by a delete of the old one. Nothing here is
atomic: a rename that fails partway leaves some objects moved and others not,
and no rollback is attempted. :class:`RenameResult` records which objects
moved so callers can tell what happened.
"""
import time
from dataclasses import dataclass, field
from typing import List, Tuple

from ..client.exceptions import FileAlreadyExistsError, RenameBlockedError
from ..utils import logger, time_function, trace_op
from .path import SwiftPath

@dataclass
class RenameResult:
    """Outcome of a rename: (source, destination) pairs that moved or failed."""
    moved: List[Tuple[SwiftPath, SwiftPath]] = field(default_factory=list)
    failed: List[Tuple[SwiftPath, SwiftPath]] = field(default_factory=list)

    def __bool__(self) -> bool:
        return not self.failed

class RenameEngine:
    """
    Applies rename policy on top of a store.

    Attributes:
        store (SwiftNativeFileSystemStore): Store whose objects are moved
    """

    def __init__(self, store):
        self.store = store

    def rename(self, src, dst) -> RenameResult:
        """
        Move ``src`` to ``dst``.

        A file is moved onto ``dst``, or next to it when ``dst`` is a
        directory. Anything else is treated as a directory: every file below
        ``src`` is moved to the same relative path below ``dst``. Nested
        directory markers are not moved.

        Raises:
            FileAlreadyExistsError: If ``src`` is a file and ``dst`` an existing file.
            RenameBlockedError: If the destination's parent lists as a single file.
        """
        trace_op("rename", src, dst=dst)
        start_time = time.time()
        src = SwiftPath.parse(src)
        dst = SwiftPath.parse(dst)
        src_status = self.store.get_object_metadata(src)
        dst_status = self.store.get_object_metadata(dst)
        result = RenameResult()

        if src_status is not None and not src_status.is_dir:
            if dst_status is not None and not dst_status.is_dir:
                raise FileAlreadyExistsError(f"file already exists: {dst}")
            if dst_status is not None and dst_status.is_dir:
                target = (dst.parent or dst).child(src.name)
            else:
                target = dst
            logger.info(f"rename: moving file {src} to {target}")
            self._move(src, target, result)
            time_function("rename (file)", start_time)
            return result

        dst_siblings = self.store.list_sub_paths(dst.parent or dst)
        if len(dst_siblings) == 1 and not dst_siblings[0].is_dir:
            raise RenameBlockedError(f"Cannot rename to: {dst}")

        entries = self.store.list_sub_paths(src)
        logger.info(f"rename: moving {len(entries)} entries from {src} to {dst}")
        for status in entries:
            if status.is_dir:
                logger.debug(f"rename: skipping directory entry {status.path}")
                continue
            source = SwiftPath.of(status.path.path)
            self._move(source, dst.child(source.relative_to(src)), result)

        if result.failed:
            logger.warning(f"rename: {len(result.failed)} of {len(result.moved) + len(result.failed)} objects under {src} failed to move")
        time_function("rename (directory)", start_time)
        return result

    def _move(self, source: SwiftPath, target: SwiftPath, result: RenameResult) -> None:
        if self.store.copy(source, target):
            self.store.delete_object(source)
            result.moved.append((source, target))
        else:
            logger.error(f"rename: failed to copy {source} to {target}, source kept")
            result.failed.append((source, target))
