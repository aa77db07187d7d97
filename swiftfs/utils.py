# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Utility functions for SwiftFS.

This module provides logging configuration and timing/tracing helpers
shared by the store, the filesystem facade and the FUSE layer.
"""

import logging
import time
import os

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s] - %(message)s'

logger = logging.getLogger('SwiftFS')

def trace_enabled():
    """Whether per-operation tracing was requested through SWIFTFS_TRACE_OPS."""
    return os.environ.get('SWIFTFS_TRACE_OPS', '').lower() in ('true', '1', 'yes')

def configure_logging(level=None):
    """
    Configure root logging for command-line use.

    Args:
        level (str or int, optional): Log level. Defaults to SWIFTFS_LOG_LEVEL or INFO.
    """
    level = level or os.environ.get('SWIFTFS_LOG_LEVEL', 'INFO')
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)

def time_function(func_name, start_time):
    """
    Helper function for timing operations.

    Calculates and logs the elapsed time for a function call.

    Args:
        func_name (str): Name of the function being timed
        start_time (float): Start time from time.time()

    Returns:
        float: Elapsed time in seconds
    """
    elapsed = time.time() - start_time
    logger.debug(f"{func_name} completed in {elapsed:.4f} seconds")
    return elapsed

def trace_op(operation, path, **details):
    """
    Trace a file operation for debugging purposes.

    This function logs detailed information about file operations
    when the SWIFTFS_TRACE_OPS environment variable is set.

    Args:
        operation (str): The file operation being performed
        path (str): The path of the file being operated on
        **details: Additional details to log
    """
    if trace_enabled():
        detail_str = ', '.join(f"{k}={v}" for k, v in details.items())
        logger.debug(f"TRACE: {operation} on {path} {detail_str}")
