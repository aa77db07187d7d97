# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Retry Module.

This module provides a retry decorator with exponential backoff for Swift REST
client operations. It handles transient errors and network issues by
automatically retrying failed operations with increasing delays between attempts.

Functions:
    retry: Decorator for retrying functions with exponential backoff.
    _convert_client_error: Helper function to convert swiftclient errors to SwiftFS exceptions.
"""
import time
from functools import wraps
from typing import Type, Callable, Any, Union, Tuple

import requests
from swiftclient.exceptions import ClientException

from .exceptions import SwiftError, AuthenticationError, ContainerError, ObjectError
from ..utils import logger

RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}

def _convert_client_error(e: ClientException, operation: str = None) -> Union[ContainerError, ObjectError, SwiftError]:
    """
    Convert swiftclient errors to appropriate SwiftFS errors.

    Args:
        e (ClientException): The swiftclient error to convert.
        operation (str, optional): The operation being performed. Defaults to None.

    Returns:
        Union[ContainerError, ObjectError, SwiftError]: The converted error.
    """
    status = getattr(e, 'http_status', None)
    reason = getattr(e, 'http_reason', '') or ''
    error_msg = getattr(e, 'msg', None) or str(e)
    detail = f"{error_msg} ({status} {reason})".strip() if status else error_msg

    if status == 401:
        return AuthenticationError(detail)

    # swiftclient messages read "Container HEAD failed", "Object GET failed", ...
    if error_msg.lower().startswith("container"):
        if status == 404:
            return ContainerError("Container does not exist", operation="ACCESS")
        if status == 403:
            return ContainerError("Access denied to container", operation="AUTH")
        return ContainerError(detail)

    if status == 404:
        return ObjectError("Object does not exist", operation=operation)
    if status == 403:
        return ObjectError("Access denied to object", operation=operation)
    if status == 413:
        return ObjectError("Object size exceeds limits", operation=operation)
    if status == 422:
        return ObjectError("Object checksum mismatch", operation=operation)
    if status == 408:
        return SwiftError("Request timed out", code="ERR_TIMEOUT")
    if status == 429:
        return SwiftError("Rate limit exceeded", code="ERR_RATE_LIMIT")
    if status == 503:
        return SwiftError("Service unavailable", code="ERR_UNAVAILABLE")
    if status is not None and status >= 500:
        return SwiftError("Internal server error", code="ERR_INTERNAL")
    if operation:
        return ObjectError(detail, operation=operation)
    return SwiftError(detail)

def retry(
    max_attempts: int = 5,
    initial_backoff: float = 0.1,
    max_backoff: float = 5.0,
    backoff_multiplier: float = 2.0,
    retryable_exceptions: Tuple[Type[Exception], ...] = (ClientException, requests.exceptions.ConnectionError),
    operation: str = None,
) -> Callable:
    """
    Decorator for retrying a function with exponential backoff.

    This decorator wraps a function to automatically retry it when specified
    exceptions occur, with an exponential backoff delay between attempts.
    An UNAUTHORIZED response triggers one re-authentication through the
    instance's ``_re_authenticate`` method before the call is retried.

    Args:
        max_attempts (int): Maximum number of attempts. Defaults to 5. A
            ``config.retries`` on the client instance takes precedence.
        initial_backoff (float): Initial backoff time in seconds. Defaults to 0.1.
        max_backoff (float): Maximum backoff time in seconds. Defaults to 5.0.
        backoff_multiplier (float): Multiplier for exponential backoff. Defaults to 2.0.
        retryable_exceptions (Tuple[Type[Exception], ...]): Exceptions that trigger a retry.
        operation (str, optional): Operation name used when converting errors,
            e.g. "HEAD". Defaults to the upper-cased function name.

    Returns:
        Callable: A decorator that wraps the function.
    """
    max_attempts_default = max_attempts

    def decorator(func: Callable) -> Callable:
        op_name = operation or func.__name__.upper()

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            """
            Executes the function with retry logic and exponential backoff.

            Raises:
                SwiftError: If the error is not retryable or all attempts fail.
            """
            last_exception = None
            backoff = initial_backoff
            re_authenticated_this_cycle = False
            client_instance = args[0] if args else None
            # A client configured with its own retry count overrides the default
            configured = getattr(getattr(client_instance, 'config', None), 'retries', None)
            max_attempts = max(1, configured) if isinstance(configured, int) else max_attempts_default

            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    last_exception = e

                    if isinstance(e, ClientException):
                        status_code = getattr(e, 'http_status', None)

                        if status_code == 401:
                            can_reauth = client_instance is not None and callable(getattr(client_instance, '_re_authenticate', None))
                            if can_reauth and not re_authenticated_this_cycle and attempt < max_attempts - 1:
                                logger.info(f"Caught UNAUTHORIZED during {func.__name__}, attempting re-authentication...")
                                try:
                                    client_instance._re_authenticate()
                                except ClientException as reauth_err:
                                    logger.error(f"Re-authentication failed during {func.__name__}: {reauth_err}")
                                    raise AuthenticationError(f"Re-authentication failed: {reauth_err}") from reauth_err
                                re_authenticated_this_cycle = True
                                continue
                            logger.error(f"UNAUTHORIZED on attempt {attempt + 1}/{max_attempts} for {func.__name__}. Raising error.")
                            raise _convert_client_error(e, op_name) from e

                        if status_code not in RETRYABLE_STATUS_CODES:
                            raise _convert_client_error(e, op_name) from e

                        logger.warning(f"Caught retryable error ({status_code}) during {func.__name__}. Attempt {attempt + 1}/{max_attempts}. Retrying after {backoff:.2f}s...")
                    else:
                        logger.warning(f"Caught {type(e).__name__} during {func.__name__}. Attempt {attempt + 1}/{max_attempts}. Retrying after {backoff:.2f}s...")

                    if attempt < max_attempts - 1:
                        time.sleep(backoff)
                        backoff = min(backoff * backoff_multiplier, max_backoff)

            if isinstance(last_exception, ClientException):
                raise _convert_client_error(last_exception, op_name) from last_exception

            raise SwiftError(
                f"Operation failed after {max_attempts} attempts: {str(last_exception)}"
            ) from last_exception

        return wrapper
    return decorator
