# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Mount utilities for SwiftFS FUSE filesystem.

This module provides functions for mounting and unmounting Swift containers
as local filesystems using FUSE.
"""

import signal
import subprocess
import sys
import time
from ..utils import logger, time_function

def unmount(mountpoint, fuse_ops=None):
    """
    Unmount the filesystem using fusermount (Linux).

    Pending write buffers of ``fuse_ops`` are uploaded before unmounting.

    Args:
        mountpoint (str): Path where the filesystem is mounted
        fuse_ops (SwiftFuse, optional): The mounted operations instance
    """
    logger.info(f"Unmounting filesystem at {mountpoint}")
    start_time = time.time()

    # Normalize mountpoint (remove trailing slash)
    mountpoint = mountpoint.rstrip('/')
    try:
        cp = subprocess.run(["mountpoint", "-q", mountpoint])
        if cp.returncode != 0:
            logger.warning(f"{mountpoint} is not mounted, nothing to unmount.")
            print(f"{mountpoint} is not mounted, nothing to unmount.")
            return

        if fuse_ops is not None:
            fuse_ops.flush_all()
            logger.info("Flushed pending writes")

        subprocess.run(["fusermount", "-u", mountpoint], check=True)
        logger.info(f"Unmounted {mountpoint} gracefully.")
        print(f"Unmounted {mountpoint} gracefully.")
    except (OSError, subprocess.CalledProcessError) as e:
        logger.error(f"Error during unmounting: {e}")
        print(f"Error during unmounting: {e}")
    finally:
        time_function("unmount", start_time)

def setup_signal_handlers(mountpoint, unmount_func):
    """
    Set up signal handlers for graceful unmounting.

    This function sets up handlers for SIGINT and SIGTERM to ensure
    that the filesystem is properly unmounted when the process is terminated.

    Args:
        mountpoint (str): Path where the filesystem is mounted
        unmount_func (callable): Function to call for unmounting

    Returns:
        callable: The signal handler function
    """
    def signal_handler(sig, frame):
        logger.info(f"Signal {sig} received, unmounting...")
        print("Signal received, unmounting...")
        unmount_func(mountpoint)
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    return signal_handler

def get_mount_options(foreground=True, allow_other=False):
    """
    Get standard mount options for FUSE.

    Swift listings are eventually consistent, so attribute and entry caches
    are kept short instead of the long timeouts a local disk would allow.

    Args:
        foreground (bool, optional): Run in foreground. Defaults to True.
        allow_other (bool, optional): Allow other users to access the mount.
            Requires 'user_allow_other' in /etc/fuse.conf. Defaults to False.

    Returns:
        dict: Dictionary of mount options
    """
    ATTR_TIMEOUT = 1  # seconds
    MAX_IO_SIZE = 128 * 1024

    options = {
        'foreground': foreground,
        'default_permissions': True,
        'rw': True,
        'big_writes': True,    # Writes land in a local buffer
        'max_read': MAX_IO_SIZE,
        'max_write': MAX_IO_SIZE,
        'entry_timeout': ATTR_TIMEOUT,
        'negative_timeout': ATTR_TIMEOUT,
        'attr_timeout': ATTR_TIMEOUT,
    }

    # Only add allow_other if explicitly requested
    if allow_other:
        options['allow_other'] = True

    return options
