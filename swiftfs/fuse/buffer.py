# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Write buffer for the SwiftFS FUSE filesystem.

Object storage cannot patch an object in place, so FUSE writes land in a
per-file SpooledTemporaryFile and the whole file is uploaded when it is
flushed or released.
"""

import time
import tempfile
from threading import RLock
from ..utils import logger

# Spool to disk after 64MB in RAM for each buffered file
DEFAULT_SPOOL_MAX_SIZE = 64 * 1024 * 1024

class WriteBuffer:
    """
    Buffers the content of files open for writing.

    Attributes:
        buffers (dict): Path to SpooledTemporaryFile
        dirty (set): Paths written since their last flush
        lock (threading.RLock): Lock for thread-safe operations
    """

    def __init__(self):
        self.buffers = {}
        self.dirty = set()
        self.lock = RLock()
        self._lock_timeout = 5.0  # 5 second timeout for lock acquisition

    def _timed_lock_acquire(self, operation_name):
        """Attempt to acquire lock with timeout and logging"""
        start_time = time.time()
        acquired = self.lock.acquire(timeout=self._lock_timeout)
        elapsed = time.time() - start_time

        if acquired:
            if elapsed > 0.1:
                logger.warning(f"WriteBuffer lock acquisition for {operation_name} took {elapsed:.4f} seconds")
            return True
        logger.error(f"WriteBuffer lock acquisition timeout ({self._lock_timeout}s) for {operation_name}")
        return False

    def initialize_buffer(self, key: str, data: bytes = b"", dirty: bool = False) -> None:
        """
        Initialize a buffer for a file.

        Args:
            key (str): The path identifying the file
            data (bytes, optional): Initial content. Defaults to empty.
            dirty (bool, optional): Whether the buffer must be flushed even if never written.
        """
        with self.lock:
            if key in self.buffers:
                logger.warning(f"initialize_buffer called for existing key {key}. Ignoring.")
                return
            spooled_file = tempfile.SpooledTemporaryFile(max_size=DEFAULT_SPOOL_MAX_SIZE, mode='w+b')
            if data:
                spooled_file.write(data)
                spooled_file.seek(0)
            self.buffers[key] = spooled_file
            if dirty:
                self.dirty.add(key)
            logger.debug(f"Initialized buffer for {key} with {len(data)/1024/1024:.2f}MB (Spooled)")

    def write(self, key: str, data: bytes, offset: int) -> int:
        """
        Write data at offset, growing the file as needed.

        Raises:
            KeyError: If no buffer was initialized for ``key``.
            TimeoutError: If the buffer lock cannot be acquired.
        """
        if not self._timed_lock_acquire(f"write({key})"):
            raise TimeoutError(f"Failed to acquire lock to write {key}")
        try:
            buffer = self.buffers[key]
            buffer.seek(offset)
            bytes_written = buffer.write(data)
            self.dirty.add(key)
            return bytes_written
        finally:
            self.lock.release()

    def read(self, key: str, offset: int = 0, size: int = None) -> bytes:
        """
        Read from a buffer; the whole content when ``size`` is None.

        Returns:
            bytes: The data, or None if no buffer exists for ``key``.
        """
        with self.lock:
            buffer = self.buffers.get(key)
            if buffer is None:
                return None
            buffer.seek(offset)
            return buffer.read() if size is None else buffer.read(size)

    def truncate(self, key: str, length: int) -> None:
        with self.lock:
            buffer = self.buffers[key]
            buffer.seek(0, 2)
            if buffer.tell() < length:
                # SpooledTemporaryFile.truncate cannot extend; pad with zeros
                buffer.write(b"\0" * (length - buffer.tell()))
            else:
                buffer.truncate(length)
            self.dirty.add(key)
            logger.debug(f"Truncated buffer {key} to {length} bytes")

    def get_size(self, key: str) -> int:
        """Size of the buffered file, 0 if there is none."""
        with self.lock:
            buffer = self.buffers.get(key)
            if buffer is None:
                return 0
            buffer.seek(0, 2)
            return buffer.tell()

    def file(self, key: str):
        """The underlying spooled file, for chunked flushing. Callers hold ``lock``."""
        return self.buffers[key]

    def mark_clean(self, key: str) -> None:
        with self.lock:
            self.dirty.discard(key)

    def is_dirty(self, key: str) -> bool:
        with self.lock:
            return key in self.dirty

    def has_buffer(self, key: str) -> bool:
        with self.lock:
            return key in self.buffers

    def keys(self):
        with self.lock:
            return list(self.buffers)

    def remove(self, key: str) -> None:
        """Drop a buffer and close its spooled file."""
        with self.lock:
            buffer = self.buffers.pop(key, None)
            self.dirty.discard(key)
        if buffer is not None:
            buffer.close()
            logger.debug(f"Removed buffer for {key}")

    def rename(self, old_key: str, new_key: str) -> None:
        with self.lock:
            if old_key in self.buffers:
                self.buffers[new_key] = self.buffers.pop(old_key)
                if old_key in self.dirty:
                    self.dirty.discard(old_key)
                    self.dirty.add(new_key)
