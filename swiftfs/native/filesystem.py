# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Filesystem facade.

:class:`SwiftNativeFileSystem` exposes the usual filesystem calls (stat, list,
open, create, mkdirs, delete, rename) on top of
:class:`SwiftNativeFileSystemStore`. Missing paths surface as the built-in
``FileNotFoundError``/``FileExistsError`` so callers can treat it like a local
filesystem.

Writes go through :class:`SwiftOutputStream`, which spools data locally and
switches to a manifest upload once a file outgrows one partition.
"""
import errno
import tempfile
import time
from typing import BinaryIO, List, Optional, Set

from ..client.base import SwiftClient
from ..client.config import DEFAULT_PARTITION_SIZE
from ..utils import logger, time_function, trace_op
from .keys import PathLike
from .path import SwiftPath
from .status import FileStatus
from .store import SwiftNativeFileSystemStore

# Spool to disk after 32MB in RAM
SPOOL_MAX_SIZE = 32 * 1024 * 1024
# Zero-padded so the backend joins parts in upload order
PART_NAME_FORMAT = "{:06d}"

class SwiftOutputStream:
    """
    Write-only stream to one object.

    Data is buffered in a SpooledTemporaryFile. Each time ``partition_size``
    bytes are buffered they are uploaded as the next part. On close a file
    that never filled a partition is uploaded as a single object; otherwise
    the remainder becomes the last part and the manifest is written after it.

    Attributes:
        store (SwiftNativeFileSystemStore): Target store
        path (SwiftPath): Target path
        partition_size (int): Part size in bytes
        closed (bool): Whether close() has run
    """

    def __init__(self, store: SwiftNativeFileSystemStore, path: SwiftPath,
                 partition_size: int = DEFAULT_PARTITION_SIZE):
        if partition_size <= 0:
            raise ValueError(f"partition_size must be positive, got {partition_size}")
        self.store = store
        self.path = path
        self.partition_size = partition_size
        self.closed = False
        self._buffer = tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_SIZE, mode='w+b')
        self._buffered = 0
        self._parts_uploaded = 0
        self._bytes_written = 0

    @property
    def bytes_written(self) -> int:
        return self._bytes_written

    @property
    def parts_uploaded(self) -> int:
        return self._parts_uploaded

    def write(self, data) -> int:
        if self.closed:
            raise ValueError("write to closed stream")
        view = memoryview(data).cast("B")
        offset = 0
        while offset < len(view):
            room = self.partition_size - self._buffered
            chunk = view[offset:offset + room]
            self._buffer.write(chunk)
            self._buffered += len(chunk)
            offset += len(chunk)
            if self._buffered >= self.partition_size:
                self._upload_part()
        self._bytes_written += len(view)
        return len(view)

    def _upload_part(self):
        part_name = PART_NAME_FORMAT.format(self._parts_uploaded)
        start_time = time.time()
        self._buffer.seek(0)
        self.store.upload_file_part(self.path, part_name, self._buffer, self._buffered)
        logger.info(f"Uploaded part {part_name} of {self.path} ({self._buffered / (1024 * 1024):.2f}MB)")
        time_function("upload part", start_time)
        self._parts_uploaded += 1
        self._buffer.seek(0)
        self._buffer.truncate()
        self._buffered = 0

    def flush(self):
        """Data only reaches the store on close; nothing to do."""

    def close(self):
        if self.closed:
            return
        try:
            if self._parts_uploaded == 0:
                self._buffer.seek(0)
                self.store.upload_file(self.path, self._buffer, self._buffered)
            else:
                if self._buffered:
                    self._upload_part()
                self.store.create_manifest_for_part_upload(self.path)
                logger.info(f"Wrote manifest for {self.path} over {self._parts_uploaded} parts")
        finally:
            self.closed = True
            self._buffer.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

class SwiftNativeFileSystem:
    """
    Filesystem view of one Swift container.

    Attributes:
        store (SwiftNativeFileSystemStore): Store doing the request translation
        partition_size (int): Size above which files are written as manifest uploads
    """

    def __init__(self, uri: PathLike, client: SwiftClient, partition_size: int = DEFAULT_PARTITION_SIZE):
        self.store = SwiftNativeFileSystemStore(uri, client)
        self.partition_size = partition_size

    @property
    def uri(self) -> SwiftPath:
        return self.store.uri

    def get_file_status(self, path: PathLike) -> FileStatus:
        """
        Status of ``path``.

        Raises:
            FileNotFoundError: If nothing is stored at ``path``.
        """
        status = self.store.get_object_metadata(path)
        if status is None:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(path))
        return status

    def list_status(self, path: PathLike) -> List[FileStatus]:
        """
        Statuses under ``path``; a file lists as itself.

        The listing is flat: entries of nested directories are included.
        """
        status = self.store.get_object_metadata(path)
        if status is not None and not status.is_dir:
            return [status]
        return self.store.list_sub_paths(path)

    def exists(self, path: PathLike) -> bool:
        return self.store.get_object_metadata(path) is not None or self.store.object_exists(path)

    def is_directory(self, path: PathLike) -> bool:
        status = self.store.get_object_metadata(path)
        if status is not None:
            return status.is_dir
        return self.store.object_exists(path)

    def is_file(self, path: PathLike) -> bool:
        status = self.store.get_object_metadata(path)
        return status is not None and not status.is_dir

    def mkdirs(self, path: PathLike) -> bool:
        """
        Create directory markers for ``path`` and its missing ancestors.

        Raises:
            FileExistsError: If ``path`` or an ancestor is a file.
        """
        trace_op("mkdirs", path)
        path = SwiftPath.parse(path)
        missing = []
        current = path
        while current is not None and not current.is_root:
            status = self.store.get_object_metadata(current)
            if status is not None:
                if not status.is_dir:
                    raise FileExistsError(errno.EEXIST, "Path is a file", str(current))
                break
            missing.append(current)
            current = current.parent
        for directory in reversed(missing):
            logger.debug(f"mkdirs: creating marker for {directory}")
            self.store.create_directory(directory)
        return True

    def create(self, path: PathLike, overwrite: bool = False) -> SwiftOutputStream:
        """
        Open ``path`` for writing.

        Raises:
            FileExistsError: If ``path`` exists and ``overwrite`` is false.
            IsADirectoryError: If ``path`` is a directory.
        """
        trace_op("create", path, overwrite=overwrite)
        path = SwiftPath.parse(path)
        status = self.store.get_object_metadata(path)
        if status is not None:
            if status.is_dir:
                raise IsADirectoryError(errno.EISDIR, "Is a directory", str(path))
            if not overwrite:
                raise FileExistsError(errno.EEXIST, "File exists", str(path))
            # Stale parts would be joined into the new manifest
            self._delete_parts(path)
        return SwiftOutputStream(self.store, path, self.partition_size)

    def open(self, path: PathLike, offset: Optional[int] = None, length: Optional[int] = None) -> BinaryIO:
        """
        Read ``path``, or ``length`` bytes of it starting at ``offset``.

        Raises:
            FileNotFoundError: If nothing is stored at ``path``.
            IsADirectoryError: If ``path`` is a directory.
        """
        status = self.get_file_status(path)
        if status.is_dir:
            raise IsADirectoryError(errno.EISDIR, "Is a directory", str(path))
        return self.store.get_object(path, offset, length)

    def delete(self, path: PathLike, recursive: bool = False) -> bool:
        """
        Delete a file, or a directory with its entries.

        Returns:
            bool: False if nothing was found at ``path``.

        Raises:
            OSError: ENOTEMPTY if ``path`` is a non-empty directory and ``recursive`` is false.
        """
        trace_op("delete", path, recursive=recursive)
        path = SwiftPath.parse(path)
        status = self.store.get_object_metadata(path)
        if status is not None and not status.is_dir:
            self.store.delete_object(path)
            self._delete_parts(path)
            return True

        entries = self.store.list_sub_paths(path)
        if status is None and not entries:
            return False
        if entries and not recursive:
            raise OSError(errno.ENOTEMPTY, "Directory not empty", str(path))

        logger.info(f"delete: removing {len(entries)} entries under {path}")
        # Deepest first so markers go after their contents
        for entry in sorted(entries, key=lambda s: s.path.path, reverse=True):
            self.store.delete_object(SwiftPath.of(entry.path.path))
        if status is not None and not path.is_root:
            self.store.delete_object(path)
        return True

    def rename(self, src: PathLike, dst: PathLike) -> bool:
        """
        Rename ``src`` to ``dst`` through copy-and-delete.

        Files are moved by the store. Once every file of a directory has
        moved, its markers are recreated below ``dst`` and removed from
        ``src``; a failed rename leaves them where they were.

        Returns:
            bool: False if ``src`` does not exist or some object failed to move.
        """
        src = SwiftPath.parse(src)
        dst = SwiftPath.parse(dst)
        src_status = self.store.get_object_metadata(src)
        if src_status is None and not self.store.object_exists(src):
            logger.warning(f"rename: source {src} does not exist")
            return False

        is_file = src_status is not None and not src_status.is_dir
        entries = [] if is_file else self.store.list_sub_paths(src)
        markers = [s for s in entries if s.is_dir]
        files = {s.path.path for s in entries if not s.is_dir}
        # Objects below a file are the parts of its manifest upload
        parts = [s for s in entries if not s.is_dir and s.path.parent.path in files]
        if not self.store.rename_directory(src, dst):
            return False
        if is_file:
            # The copy carries the joined content; parts are left behind
            self._delete_parts(src)
            return True

        # Each manifest was copied as one joined object, so its moved parts are strays
        for part in parts:
            self.store.delete_object(dst.child(SwiftPath.of(part.path.path).relative_to(src)))
        for marker in markers:
            old = SwiftPath.of(marker.path.path)
            self.store.create_directory(dst.child(old.relative_to(src)))
            self.store.delete_object(old)
        if src_status is not None and not src.is_root:
            if self.store.get_object_metadata(dst) is None:
                self.store.create_directory(dst)
            self.store.delete_object(src)
        return True

    def _delete_parts(self, path: SwiftPath) -> None:
        # Parts of a manifest upload live below the file's own key
        for part in self.store.list_sub_paths(path):
            self.store.delete_object(SwiftPath.of(part.path.path))

    def get_file_block_locations(self, path: PathLike) -> Set[str]:
        return self.store.get_object_location(path)

    def close(self):
        self.store.client.close()
