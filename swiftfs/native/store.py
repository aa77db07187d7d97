# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Filesystem store.

:class:`SwiftNativeFileSystemStore` turns filesystem requests into object
store requests and rebuilds filesystem answers from the responses: statuses
from object headers, directory listings from prefix queries, renames from
copies and deletes, large files from manifest uploads.

The store keeps no state besides its root URI and client, so it can be shared
between threads. It does not retry; a raised error is final for the call.
"""
import io
import time
from typing import BinaryIO, List, Optional, Set, Union

from ..client.base import SwiftClient
from ..client.constants import PATH_SEPARATOR, X_OBJECT_MANIFEST
from ..client.exceptions import InvalidPathError, SwiftProtocolError
from ..client.types import ObjectKey
from ..utils import logger, time_function, trace_op
from .keys import PathLike, part_key, to_key
from .locations import extract_uris
from .path import SwiftPath
from .rename import RenameEngine, RenameResult
from .status import FileStatus, status_from_headers

class SwiftNativeFileSystemStore:
    """
    Store making REST requests and parsing data from responses.

    Attributes:
        uri (SwiftPath): Store root, e.g. ``swift://data/``
        client (SwiftClient): Verb-level object store client
    """

    def __init__(self, uri: Optional[PathLike] = None, client: Optional[SwiftClient] = None):
        self.uri = None
        self.client = None
        self._rename_engine = RenameEngine(self)
        if uri is not None and client is not None:
            self.initialize(uri, client)

    def initialize(self, uri: PathLike, client: SwiftClient) -> None:
        """
        Bind the store to a root URI and a client.

        Raises:
            InvalidPathError: If the URI does not name a container.
        """
        try:
            root = SwiftPath.parse(uri)
        except ValueError as e:
            raise InvalidPathError(f"Invalid store URI {uri!r}: {e}") from e
        if not root.host:
            raise InvalidPathError(f"Store URI {uri} does not name a container")
        try:
            root.with_root(root)
        except ValueError as e:
            raise InvalidPathError(f"Invalid authority in store URI {uri!r}: {e}") from e
        self.uri = root
        self.client = client
        logger.info(f"Initialized store for container {root.host} ({root})")

    def _key(self, path: PathLike) -> ObjectKey:
        return to_key(self.uri, path)

    def upload_file(self, path: PathLike, stream: BinaryIO, length: int) -> None:
        trace_op("upload_file", path, length=length)
        self.client.upload(self._key(path), stream, length)

    def upload_file_part(self, path: PathLike, part_number: Union[int, str], stream: BinaryIO, length: int) -> None:
        """Upload one part of a manifest upload to ``path``."""
        trace_op("upload_file_part", path, part_number=part_number, length=length)
        key = part_key(self.uri, path, part_number)
        logger.debug(f"upload_file_part: part {part_number} of {path} ({length} bytes) to {key}")
        self.client.upload(key, stream, length)

    def create_manifest_for_part_upload(self, path: PathLike) -> None:
        """
        Write the zero-length manifest object for ``path``.

        Every part must already be uploaded; reads of ``path`` concatenate
        whatever parts exist under its prefix.
        """
        key = self._key(path)
        prefix = str(key)
        if not prefix.endswith(PATH_SEPARATOR):
            prefix += PATH_SEPARATOR
        prefix = prefix.lstrip(PATH_SEPARATOR)
        logger.debug(f"create_manifest_for_part_upload: {key} -> {prefix}")
        self.client.upload(key, io.BytesIO(b""), 0, {X_OBJECT_MANIFEST: prefix})

    def get_object_metadata(self, path: PathLike) -> Optional[FileStatus]:
        """
        Status of ``path``, or None when there is no such object.

        Raises:
            SwiftProtocolError: If a header is malformed or the path cannot be rebuilt.
        """
        path = SwiftPath.parse(path)
        return self._metadata_for_key(self._key(path), path)

    def _metadata_for_key(self, key: ObjectKey, path: SwiftPath) -> Optional[FileStatus]:
        start_time = time.time()
        headers = self.client.head_request(key)
        if not headers:
            logger.debug(f"get_object_metadata: {key} not found")
            return None
        status = status_from_headers(headers, self._correct_path(path))
        time_function("get_object_metadata", start_time)
        return status

    def get_object(self, path: PathLike, offset: Optional[int] = None, length: Optional[int] = None) -> BinaryIO:
        """Stream the object at ``path``, or its ``[offset, offset + length)`` slice."""
        trace_op("get_object", path, offset=offset, length=length)
        return self.client.get_data_as_input_stream(self._key(path), offset, length)

    def list_sub_paths(self, path: PathLike) -> List[FileStatus]:
        """Statuses of every object under ``path``, in backend order."""
        return self._list_directory(self._key(path))

    def create_directory(self, path: PathLike) -> None:
        trace_op("create_directory", path)
        self.client.put_request(self._key(path))

    def get_object_location(self, path: PathLike) -> Set[str]:
        """Replica URIs reported for ``path``."""
        body = self.client.get_object_location(self._key(path))
        return extract_uris(body.decode("utf-8", errors="replace"))

    def delete_object(self, path: PathLike) -> None:
        """Delete the object at ``path``."""
        trace_op("delete_object", path)
        self.client.delete(self._key(path))

    def object_exists(self, path: PathLike) -> bool:
        """
        Checks if specified path exists.

        True only when the path lists at least one object below it, so an
        empty directory marker and a plain file both report False here.
        """
        return bool(self._list_directory(self._key(path)))

    def copy(self, src: PathLike, dst: PathLike) -> bool:
        """Server-side copy of ``src`` to ``dst``."""
        trace_op("copy", src, dst=dst)
        return self.client.copy_object(self._key(src), self._key(dst))

    def rename_directory(self, src: PathLike, dst: PathLike) -> bool:
        """
        Rename through copy-and-delete.

        Not atomic: False means some objects may have moved.

        Returns:
            bool: True if the entire rename was successful.
        """
        return bool(self.rename_with_result(src, dst))

    def rename_with_result(self, src: PathLike, dst: PathLike) -> RenameResult:
        """Same as :meth:`rename_directory`, reporting each moved or failed object."""
        return self._rename_engine.rename(src, dst)

    def _list_directory(self, key: ObjectKey) -> List[FileStatus]:
        start_time = time.time()
        prefix = key.as_directory()
        raw = self.client.find_objects_by_prefix(prefix)
        if not raw:
            logger.debug(f"list: nothing under {prefix}")
            return []

        files = []
        for name in raw.decode("utf-8", errors="replace").split("\n"):
            if not name:
                continue
            if not name.startswith(PATH_SEPARATOR):
                name = PATH_SEPARATOR + name
            # Resolve by the raw name so markers such as "a/z/" keep their separator
            metadata = self._metadata_for_key(ObjectKey(key.container, name), SwiftPath.of(name))
            if metadata is None:
                logger.debug(f"list: {name} disappeared before it could be resolved")
                continue
            files.append(metadata)

        logger.debug(f"list: {len(files)} entries under {prefix}")
        time_function("list", start_time)
        return files

    def _correct_path(self, path: SwiftPath) -> SwiftPath:
        try:
            return path.with_root(self.uri)
        except ValueError as e:
            raise SwiftProtocolError(f"Specified path {path} is incorrect") from e
