# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
FUSE implementation for SwiftFS.

This module mounts a Swift container as a local filesystem. File operations
are translated into calls on :class:`SwiftNativeFileSystem`; writes are
buffered locally and uploaded when the file is flushed or released, so large
files go through the manifest upload path.

Usage:
    # Create a mount point
    mkdir -p /mnt/swift-data

    # Mount the container
    python -m swiftfs.fuse swift://data/ /mnt/swift-data

    # Or try it out without a Swift cluster
    python -m swiftfs.fuse swift://data/ /mnt/swift-data --memory

    # Now you can work with the files as if they were local
    ls /mnt/swift-data
    cat /mnt/swift-data/example.txt
"""

from fuse import FUSE, FuseOSError, Operations
import argparse
import errno
import os
import subprocess
import sys
import time

from ..client.base import SwiftClient
from ..client.config import load_config
from ..client.exceptions import (
    FileAlreadyExistsError,
    InvalidPathError,
    RenameBlockedError,
    SwiftError,
)
from ..client.memory import InMemorySwiftClient
from ..client.rest_client import SwiftRestClient
from ..native.filesystem import SwiftNativeFileSystem
from ..native.path import SwiftPath
from ..utils import configure_logging, logger, time_function, trace_op
from .buffer import WriteBuffer
from .mount_utils import unmount, setup_signal_handlers, get_mount_options

# Chunk size for copying a spooled write buffer into an output stream
FLUSH_CHUNK_SIZE = 4 * 1024 * 1024
BLOCK_SIZE = 4096

class SwiftFuse(Operations):
    """
    FUSE implementation for a Swift container.

    Attributes:
        fs (SwiftNativeFileSystem): Filesystem view of the mounted container
        write_buffer (WriteBuffer): Buffer for files open for writing
    """

    def __init__(self, filesystem: SwiftNativeFileSystem):
        """
        Initialize the FUSE filesystem.

        Args:
            filesystem (SwiftNativeFileSystem): The container to expose
        """
        logger.info(f"Initializing SwiftFuse for {filesystem.uri}")
        self.fs = filesystem
        self.write_buffer = WriteBuffer()

    def _get_path(self, path):
        """Convert a FUSE path to a store path, without URI parsing."""
        return SwiftPath.of(path)

    def _fuse_error(self, operation, path, e):
        """Map a store or OS error onto a FuseOSError, logging it."""
        if isinstance(e, FileAlreadyExistsError):
            code = errno.EEXIST
        elif isinstance(e, RenameBlockedError):
            code = errno.EPERM
        elif isinstance(e, InvalidPathError):
            code = errno.EINVAL
        elif isinstance(e, OSError) and e.errno:
            code = e.errno
        else:
            code = errno.EIO
        if code == errno.EIO:
            logger.error(f"{operation} error for {path}: {e}", exc_info=True)
        else:
            logger.debug(f"{operation} failed for {path}: {errno.errorcode.get(code, code)}")
        return FuseOSError(code)

    def _base_stat(self, mtime=None):
        now = time.time()
        return {
            'st_uid': os.getuid(),
            'st_gid': os.getgid(),
            'st_atime': now,
            'st_mtime': now if mtime is None else mtime,
            'st_ctime': now if mtime is None else mtime,
            'st_blksize': BLOCK_SIZE,
            'st_rdev': 0,
        }

    def _dir_stat(self, mtime=None):
        return {**self._base_stat(mtime),
                'st_mode': 0o40755,
                'st_nlink': 2,
                'st_size': BLOCK_SIZE,
                'st_blocks': 8}

    def _file_stat(self, size, mtime=None):
        return {**self._base_stat(mtime),
                'st_mode': 0o100644,
                'st_nlink': 1,
                'st_size': size,
                'st_blocks': (size + BLOCK_SIZE - 1) // BLOCK_SIZE}

    def getattr(self, path, fh=None):
        """
        Get file attributes.

        Buffered files report their buffered size. A path without an object
        of its own that still has objects below it is an implicit directory.

        Raises:
            FuseOSError: ENOENT if nothing exists at the path
        """
        trace_op("getattr", path, fh=fh)
        start_time = time.time()
        try:
            if path == '/':
                return self._dir_stat()

            if self.write_buffer.has_buffer(path):
                return self._file_stat(self.write_buffer.get_size(path))

            key = self._get_path(path)
            status = self.fs.store.get_object_metadata(key)
            if status is not None:
                mtime = status.modification_time / 1000.0
                if status.is_dir:
                    return self._dir_stat(mtime)
                return self._file_stat(status.length, mtime)

            if self.fs.store.object_exists(key):
                logger.debug(f"getattr: {path} is an implicit directory")
                return self._dir_stat()

            raise FuseOSError(errno.ENOENT)
        except FuseOSError:
            raise
        except (SwiftError, OSError) as e:
            raise self._fuse_error("getattr", path, e) from e
        finally:
            time_function("getattr", start_time)

    def readdir(self, path, fh):
        """
        List directory contents.

        The store lists every object below a directory; only the first
        component of each relative name is an entry of this directory.
        """
        trace_op("readdir", path, fh=fh)
        start_time = time.time()
        key = self._get_path(path)
        try:
            status = None if key.is_root else self.fs.store.get_object_metadata(key)
            if status is not None and not status.is_dir:
                raise FuseOSError(errno.ENOTDIR)
            entries = self.fs.store.list_sub_paths(key)
            if not entries and status is None and not key.is_root:
                raise FuseOSError(errno.ENOENT)

            seen = set()
            for status in entries:
                name = SwiftPath.of(status.path.path).relative_to(key).split('/')[0]
                if name:
                    seen.add(name)
            # Files being written have no object yet
            for buffered in self.write_buffer.keys():
                buffered_path = SwiftPath.of(buffered)
                if buffered_path.parent == key:
                    seen.add(buffered_path.name)

            result = ['.', '..'] + sorted(seen)
            logger.debug(f"readdir returning {len(result)} entries for {path}")
            return result
        except FuseOSError:
            raise
        except (SwiftError, OSError, ValueError) as e:
            raise self._fuse_error("readdir", path, e) from e
        finally:
            time_function("readdir", start_time)

    def open(self, path, flags):
        """
        Open a file.

        Opening for writing loads the current content into a write buffer,
        or starts from an empty one with O_TRUNC.
        """
        trace_op("open", path, flags=flags)
        try:
            writing = flags & (os.O_WRONLY | os.O_RDWR)
            if writing:
                self._ensure_buffer(path, truncate=bool(flags & os.O_TRUNC))
            elif not self.write_buffer.has_buffer(path):
                status = self.fs.store.get_object_metadata(self._get_path(path))
                if status is None:
                    raise FuseOSError(errno.ENOENT)
                if status.is_dir:
                    raise FuseOSError(errno.EISDIR)
            return 0
        except FuseOSError:
            raise
        except (SwiftError, OSError) as e:
            raise self._fuse_error("open", path, e) from e

    def read(self, path, size, offset, fh):
        """Read ``size`` bytes at ``offset``, from the write buffer when there is one."""
        trace_op("read", path, size=size, offset=offset, fh=fh)
        start_time = time.time()
        try:
            data = self.write_buffer.read(path, offset, size)
            if data is not None:
                return data
            status = self.fs.get_file_status(self._get_path(path))
            if offset >= status.length:
                return b''
            length = min(size, status.length - offset)
            with self.fs.open(self._get_path(path), offset, length) as stream:
                data = stream.read()
            logger.debug(f"read: {len(data)} bytes of {path} at offset {offset}")
            return data
        except (SwiftError, OSError) as e:
            raise self._fuse_error("read", path, e) from e
        finally:
            time_function("read", start_time)

    def create(self, path, mode, fi=None):
        """Create a file; it is uploaded when released, even if nothing is written."""
        trace_op("create", path, mode=mode)
        try:
            status = self.fs.store.get_object_metadata(self._get_path(path))
            if status is not None and status.is_dir:
                raise FuseOSError(errno.EISDIR)
            self.write_buffer.remove(path)
            self.write_buffer.initialize_buffer(path, dirty=True)
            logger.info(f"create: {path}")
            return 0
        except FuseOSError:
            raise
        except (SwiftError, OSError) as e:
            raise self._fuse_error("create", path, e) from e

    def write(self, path, data, offset, fh):
        trace_op("write", path, size=len(data), offset=offset, fh=fh)
        try:
            self._ensure_buffer(path)
            return self.write_buffer.write(path, data, offset)
        except (SwiftError, OSError) as e:
            raise self._fuse_error("write", path, e) from e

    def truncate(self, path, length, fh=None):
        """
        Truncate a file.

        Without an open handle the file is uploaded right away.
        """
        trace_op("truncate", path, length=length, fh=fh)
        try:
            had_buffer = self.write_buffer.has_buffer(path)
            self._ensure_buffer(path, truncate=length == 0)
            self.write_buffer.truncate(path, length)
            if fh is None and not had_buffer:
                self._flush_buffer(path)
                self.write_buffer.remove(path)
        except (SwiftError, OSError) as e:
            raise self._fuse_error("truncate", path, e) from e

    def _ensure_buffer(self, path, truncate=False):
        """Make sure ``path`` has a write buffer holding its current content."""
        if self.write_buffer.has_buffer(path):
            if truncate:
                self.write_buffer.truncate(path, 0)
            return
        key = self._get_path(path)
        status = self.fs.store.get_object_metadata(key)
        if status is not None and status.is_dir:
            raise FuseOSError(errno.EISDIR)
        data = b''
        if status is not None and not truncate and status.length:
            with self.fs.open(key) as stream:
                data = stream.read()
        self.write_buffer.initialize_buffer(path, data, dirty=truncate or status is None)

    def _flush_buffer(self, path):
        """
        Upload the buffered content of ``path``.

        The spooled file is copied in chunks into an output stream from
        :meth:`SwiftNativeFileSystem.create`, which splits it into parts when
        it is larger than one partition.
        """
        trace_op("_flush_buffer", path)
        start_time = time.time()
        if not self.write_buffer.is_dirty(path):
            logger.debug(f"No pending writes to flush for {path}")
            return

        with self.write_buffer.lock:
            spooled_file = self.write_buffer.file(path)
            spooled_file.seek(0)
            buffer_size = 0
            with self.fs.create(self._get_path(path), overwrite=True) as stream:
                while True:
                    chunk = spooled_file.read(FLUSH_CHUNK_SIZE)
                    if not chunk:
                        break
                    stream.write(chunk)
                    buffer_size += len(chunk)
            self.write_buffer.mark_clean(path)

        upload_time = time.time() - start_time
        if buffer_size > 0:
            throughput_mbps = (buffer_size / (1024 * 1024)) / upload_time if upload_time > 0 else float('inf')
            logger.info(f"Flushed {buffer_size / (1024 * 1024):.2f}MB to {path} in {upload_time:.2f}s ({throughput_mbps:.2f} MB/s)")
        else:
            logger.info(f"Flushed empty buffer for {path} in {upload_time:.2f}s")
        time_function("_flush_buffer", start_time)

    def flush(self, path, fh):
        trace_op("flush", path, fh=fh)
        try:
            if self.write_buffer.has_buffer(path):
                self._flush_buffer(path)
            return 0
        except (SwiftError, OSError) as e:
            raise self._fuse_error("flush", path, e) from e

    def fsync(self, path, datasync, fh):
        trace_op("fsync", path, datasync=datasync, fh=fh)
        return self.flush(path, fh)

    def release(self, path, fh):
        """Flush the write buffer of ``path`` and drop it."""
        trace_op("release", path, fh=fh)
        try:
            if self.write_buffer.has_buffer(path):
                self._flush_buffer(path)
                self.write_buffer.remove(path)
            return 0
        except (SwiftError, OSError) as e:
            raise self._fuse_error("release", path, e) from e

    def unlink(self, path):
        trace_op("unlink", path)
        try:
            buffered = self.write_buffer.has_buffer(path)
            self.write_buffer.remove(path)
            key = self._get_path(path)
            status = self.fs.store.get_object_metadata(key)
            if status is None:
                if buffered:
                    return
                raise FuseOSError(errno.ENOENT)
            if status.is_dir:
                raise FuseOSError(errno.EISDIR)
            self.fs.delete(key)
            logger.info(f"unlink: deleted {path}")
        except FuseOSError:
            raise
        except (SwiftError, OSError) as e:
            raise self._fuse_error("unlink", path, e) from e

    def mkdir(self, path, mode):
        trace_op("mkdir", path, mode=mode)
        try:
            key = self._get_path(path)
            if self.fs.exists(key):
                raise FuseOSError(errno.EEXIST)
            self.fs.mkdirs(key)
            logger.info(f"mkdir: created {path}")
        except FuseOSError:
            raise
        except (SwiftError, OSError) as e:
            raise self._fuse_error("mkdir", path, e) from e

    def rmdir(self, path):
        trace_op("rmdir", path)
        try:
            key = self._get_path(path)
            status = self.fs.store.get_object_metadata(key)
            if status is not None and not status.is_dir:
                raise FuseOSError(errno.ENOTDIR)
            if self.fs.store.list_sub_paths(key):
                raise FuseOSError(errno.ENOTEMPTY)
            if status is None:
                raise FuseOSError(errno.ENOENT)
            self.fs.delete(key)
            logger.info(f"rmdir: removed {path}")
        except FuseOSError:
            raise
        except (SwiftError, OSError) as e:
            raise self._fuse_error("rmdir", path, e) from e

    def rename(self, old, new):
        """
        Rename a file or directory.

        As with rename(2), an existing destination file is replaced and an
        existing destination directory must be empty.
        """
        trace_op("rename", new, old=old)
        start_time = time.time()
        try:
            if self.write_buffer.has_buffer(old):
                self._flush_buffer(old)
            src = self._get_path(old)
            dst = self._get_path(new)
            src_status = self.fs.store.get_object_metadata(src)
            dst_status = self.fs.store.get_object_metadata(dst)
            src_is_file = src_status is not None and not src_status.is_dir
            if src_status is None and not self.fs.store.object_exists(src):
                raise FuseOSError(errno.ENOENT)

            if dst_status is not None:
                if src_is_file and dst_status.is_dir:
                    raise FuseOSError(errno.EISDIR)
                if not src_is_file and not dst_status.is_dir:
                    raise FuseOSError(errno.ENOTDIR)
                if dst_status.is_dir and self.fs.store.list_sub_paths(dst):
                    raise FuseOSError(errno.ENOTEMPTY)
                logger.debug(f"rename: replacing {new}")
                self.fs.delete(dst)

            if not self.fs.rename(src, dst):
                logger.error(f"rename: {old} to {new} did not complete")
                raise FuseOSError(errno.EIO)
            self.write_buffer.rename(old, new)
            logger.info(f"rename: moved {old} to {new}")
        except FuseOSError:
            raise
        except (SwiftError, OSError) as e:
            raise self._fuse_error("rename", old, e) from e
        finally:
            time_function("rename", start_time)

    def statfs(self, path):
        """
        Get filesystem statistics.

        Swift has no fixed capacity, so a large constant size is reported.
        """
        trace_op("statfs", path)
        total_blocks = 1250000000     # 5TB
        return {
            'f_bsize': BLOCK_SIZE,
            'f_frsize': BLOCK_SIZE,
            'f_blocks': total_blocks,
            'f_bfree': total_blocks,
            'f_bavail': total_blocks,
            'f_files': 1000000000,
            'f_ffree': 999999999,
            'f_favail': 999999999,
            'f_flag': 0,
            'f_namemax': 255,
        }

    # Swift objects carry no ownership, mode or times the mount could change
    def chmod(self, path, mode):
        trace_op("chmod", path, mode=mode)
        return 0

    def chown(self, path, uid, gid):
        trace_op("chown", path, uid=uid, gid=gid)
        return 0

    def utimens(self, path, times=None):
        trace_op("utimens", path, times=times)
        return 0

    def flush_all(self):
        """Upload every pending write buffer; used before unmounting."""
        for path in self.write_buffer.keys():
            try:
                self._flush_buffer(path)
            except (SwiftError, OSError) as e:
                logger.error(f"Error flushing {path} before unmount: {e}", exc_info=True)
            finally:
                self.write_buffer.remove(path)

    def destroy(self, path):
        """Called by FUSE on unmount."""
        logger.info("Cleaning up SwiftFuse resources...")
        self.flush_all()
        self.fs.close()
        logger.info("SwiftFuse cleanup completed")

def build_client(uri: SwiftPath, memory: bool = False, profile: str = None) -> SwiftClient:
    """
    Build the Swift client behind a mount.

    Args:
        uri (SwiftPath): Container URI being mounted
        memory (bool, optional): Use a throwaway in-memory container. Defaults to False.
        profile (str, optional): Credentials profile. Defaults to SWIFTFS_PROFILE or "default".

    Raises:
        ConfigurationError: If the credentials cannot be loaded.
    """
    if memory:
        logger.info(f"Using in-memory container {uri.host}")
        return InMemorySwiftClient(containers=[uri.host])
    return SwiftRestClient(load_config(profile=profile))

def mount(uri: str, mountpoint: str, client: SwiftClient, foreground: bool = True,
          allow_other: bool = False, partition_size: int = None):
    """
    Mount a Swift container at the specified mountpoint.

    Args:
        uri (str): Container URI, e.g. ``swift://data/``
        mountpoint (str): Local path where the filesystem should be mounted
        client (SwiftClient): Client for the container
        foreground (bool, optional): Run in foreground. Defaults to True.
        allow_other (bool, optional): Allow other users to access the mount.
            Requires 'user_allow_other' in /etc/fuse.conf. Defaults to False.
        partition_size (int, optional): Size above which files are uploaded in parts.
    """
    logger.info(f"Mounting {uri} at {mountpoint}")
    start_time = time.time()

    if os.path.exists(mountpoint):
        if not os.path.isdir(mountpoint):
            logger.error(f"Mountpoint path exists but is not a directory: {mountpoint}")
            print(f"Error: {mountpoint} exists but is not a directory. Please specify a directory path.")
            return
    else:
        logger.info(f"Mountpoint {mountpoint} does not exist, creating it...")
        try:
            os.makedirs(mountpoint, mode=0o755)
        except OSError as e:
            logger.error(f"Failed to create mountpoint {mountpoint}: {e}")
            print(f"Error: Failed to create mountpoint directory {mountpoint}: {e}")
            print(f"Try: sudo mkdir -p {mountpoint}")
            return

    try:
        process = subprocess.run(["mountpoint", "-q", mountpoint], check=False)
        if process.returncode == 0:
            logger.warning(f"Mountpoint {mountpoint} is already mounted")
            print(f"Error: {mountpoint} is already mounted. Unmount it first:")
            print(f"fusermount -u {mountpoint}")
            return
    except FileNotFoundError:
        logger.warning(f"mountpoint command not available, cannot check whether {mountpoint} is mounted")

    kwargs = {} if partition_size is None else {'partition_size': partition_size}
    operations = SwiftFuse(SwiftNativeFileSystem(uri, client, **kwargs))
    options = get_mount_options(foreground, allow_other)

    # Set up signal handlers for graceful unmounting
    setup_signal_handlers(mountpoint, lambda mp: unmount(mp, operations))

    try:
        logger.info(f"Starting FUSE mount with options: {options}")
        FUSE(operations, mountpoint, nothreads=False, **options)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received, unmounting...")
        unmount(mountpoint, operations)
    except RuntimeError as e:
        logger.error(f"Error during mount: {e}")
        print(f"Error: {e}")
        print("Check that the mountpoint is an empty directory you can write to,")
        print(f"and that nothing is mounted there: fusermount -u {mountpoint}")
        unmount(mountpoint, operations)
    finally:
        time_function("mount", start_time)

def main(argv=None):
    """
    CLI entry point for mounting Swift containers.

    Usage:
        python -m swiftfs.fuse <container-uri> <mountpoint>

    Options:
        --memory: Mount a throwaway in-memory container
        --profile: Credentials profile from ~/.swiftfs/credentials.yaml
        --allow-other: Allow other users to access the mount
            (requires user_allow_other in /etc/fuse.conf)
        --trace: Enable detailed tracing of file operations for debugging
    """
    parser = argparse.ArgumentParser(description='Mount a Swift container as a local filesystem')
    parser.add_argument('container_uri', help='The container to mount, e.g. swift://data/')
    parser.add_argument('mountpoint', help='The directory to mount the container on')
    parser.add_argument('--memory', action='store_true',
                        help='Mount an in-memory container instead of a Swift cluster')
    parser.add_argument('--profile', default=None,
                        help='Credentials profile to use (default: $SWIFTFS_PROFILE or "default")')
    parser.add_argument('--partition-size', type=int, default=None,
                        help='Size in bytes above which files are uploaded in parts')
    parser.add_argument('--allow-other', action='store_true',
                        help='Allow other users to access the mount (requires user_allow_other in /etc/fuse.conf)')
    parser.add_argument('--trace', action='store_true',
                        help='Enable detailed tracing of file operations for debugging')
    args = parser.parse_args(argv)

    # Set trace environment variable if requested
    if args.trace:
        os.environ['SWIFTFS_TRACE_OPS'] = 'true'
        print("Detailed operation tracing enabled")
    configure_logging()
    logger.info(f"Starting SwiftFS FUSE CLI with arguments: {sys.argv}")
    start_time = time.time()

    uri = SwiftPath.parse(args.container_uri)
    client = build_client(uri, memory=args.memory, profile=args.profile)
    partition_size = args.partition_size
    if partition_size is None and isinstance(client, SwiftRestClient):
        partition_size = client.config.partition_size
    mount(args.container_uri, args.mountpoint, client,
          allow_other=args.allow_other, partition_size=partition_size)
    time_function("main", start_time)

if __name__ == '__main__':
    main()
