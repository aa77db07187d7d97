# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Swift REST client.

This module implements the verb-level primitives of :class:`SwiftClient` on top
of ``swiftclient.client.Connection``. Authentication and connection reuse are
delegated to swiftclient; retries, backoff and error conversion are handled by
the :func:`retry` decorator so the store above sees a single exception
hierarchy.
"""
import io
import time
from typing import BinaryIO, Dict, Optional
from urllib.parse import quote, urlsplit, urlunsplit

import requests
from swiftclient.client import Connection
from swiftclient.exceptions import ClientException

from .base import SwiftClient
from .config import SwiftConfig
from .constants import DIRECTORY_CONTENT_TYPE, X_COPY_FROM
from .exceptions import ObjectError
from .retry import retry
from .types import ObjectKey
from ..utils import logger, time_function

ENDPOINTS_PREFIX = "endpoints"

class SwiftRestClient(SwiftClient):
    """
    Client for a Swift account reached over its REST API.

    Attributes:
        config (SwiftConfig): Settings used to build the connection
    """

    def __init__(self, config: SwiftConfig, connection: Optional[Connection] = None):
        """
        Initialize the client.

        Args:
            config (SwiftConfig): Connection settings. Validated here.
            connection (Connection, optional): Pre-built connection, mostly for tests.

        Raises:
            ConfigurationError: If required settings are missing.
        """
        if connection is None:
            config.validate()
        self.config = config
        os_options = {"tenant_name": config.tenant_name} if config.tenant_name else None
        # Retries are handled by the retry decorator, not by swiftclient
        self._connection = connection or Connection(
            authurl=config.auth_url,
            user=config.user,
            key=config.key,
            auth_version=config.auth_version,
            tenant_name=config.tenant_name,
            os_options=os_options,
            retries=0,
            timeout=config.timeout,
        )

    def _re_authenticate(self):
        """Drop the cached token and authenticate again."""
        logger.info("Re-authenticating Swift connection")
        self._connection.url, self._connection.token = self._connection.get_auth()

    @retry(operation="PUT")
    def upload(self, key: ObjectKey, stream: BinaryIO, length: int,
               headers: Optional[Dict[str, str]] = None) -> None:
        start_time = time.time()
        self._connection.put_object(
            key.container,
            key.object_name_in_container,
            contents=stream,
            content_length=length,
            headers=headers or {},
        )
        logger.debug(f"upload: {length} bytes to {key} (headers={headers})")
        time_function("upload", start_time)

    @retry(operation="HEAD")
    def head_request(self, key: ObjectKey) -> Dict[str, str]:
        try:
            if key.is_root:
                return self._connection.head_container(key.container)
            return self._connection.head_object(key.container, key.object_name_in_container)
        except ClientException as e:
            if e.http_status == 404:
                logger.debug(f"head_request: {key} not found")
                return {}
            raise

    @retry(operation="GET")
    def get_data_as_input_stream(self, key: ObjectKey, offset: Optional[int] = None,
                                 length: Optional[int] = None) -> BinaryIO:
        headers = {}
        if offset is not None:
            if length is not None:
                if length <= 0:
                    return io.BytesIO(b"")
                headers["Range"] = f"bytes={offset}-{offset + length - 1}"
            else:
                headers["Range"] = f"bytes={offset}-"
        _, body = self._connection.get_object(key.container, key.object_name_in_container, headers=headers)
        return io.BytesIO(body)

    @retry(operation="PUT")
    def put_request(self, key: ObjectKey) -> None:
        self._connection.put_object(
            key.container,
            key.object_name_in_container,
            contents=b"",
            content_length=0,
            content_type=DIRECTORY_CONTENT_TYPE,
        )

    @retry(operation="DELETE")
    def delete(self, key: ObjectKey) -> None:
        try:
            self._connection.delete_object(key.container, key.object_name_in_container)
        except ClientException as e:
            if e.http_status != 404:
                raise
            logger.debug(f"delete: {key} already absent")

    @retry(operation="COPY")
    def copy_object(self, src_key: ObjectKey, dst_key: ObjectKey) -> bool:
        headers = {X_COPY_FROM: quote(src_key.to_uri_path())}
        try:
            self._connection.put_object(
                dst_key.container,
                dst_key.object_name_in_container,
                contents=None,
                content_length=0,
                headers=headers,
            )
        except ClientException as e:
            if e.http_status == 404:
                logger.warning(f"copy_object: source {src_key} not found")
                return False
            raise
        return True

    @retry(operation="LIST")
    def find_objects_by_prefix(self, key: ObjectKey) -> Optional[bytes]:
        try:
            _, objects = self._connection.get_container(
                key.container,
                prefix=key.object_name_in_container or None,
                full_listing=True,
            )
        except ClientException as e:
            if e.http_status == 404:
                return None
            raise
        return "\n".join(obj["name"] for obj in objects).encode("utf-8")

    @retry(operation="LOCATION")
    def get_object_location(self, key: ObjectKey) -> bytes:
        if not self._connection.url or not self._connection.token:
            self._re_authenticate()
        location_url = self._endpoints_url(self._connection.url, key)
        response = requests.get(location_url, headers={"X-Auth-Token": self._connection.token},
                                timeout=self.config.timeout)
        if response.status_code >= 400:
            raise ObjectError(f"Location lookup for {key} failed with {response.status_code}", operation="LOCATION")
        return response.content

    @staticmethod
    def _endpoints_url(storage_url: str, key: ObjectKey) -> str:
        """Build ``<scheme>://<host>/endpoints/<account>/<container>/<object>`` from a storage URL."""
        parts = urlsplit(storage_url)
        account = parts.path.rstrip("/").split("/")[-1]
        path = "/".join([
            "",
            ENDPOINTS_PREFIX,
            quote(account),
            quote(key.container),
            quote(key.object_name_in_container),
        ])
        return urlunsplit((parts.scheme, parts.netloc, path, "", ""))

    def close(self) -> None:
        self._connection.close()
