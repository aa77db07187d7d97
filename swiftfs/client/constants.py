# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""Swift protocol constants shared by the store and its collaborators."""

CONTENT_LENGTH = "Content-Length"
LAST_MODIFIED = "Last-Modified"
X_CONTAINER_OBJECT_COUNT = "X-Container-Object-Count"
X_CONTAINER_BYTES_USED = "X-Container-Bytes-Used"
X_OBJECT_MANIFEST = "X-Object-Manifest"
X_COPY_FROM = "X-Copy-From"

# HTTP date, e.g. "Tue, 15 Nov 1994 08:12:31 GMT"
LAST_MODIFIED_PATTERN = "%a, %d %b %Y %H:%M:%S %Z"

DIRECTORY_CONTENT_TYPE = "application/directory"

PATH_SEPARATOR = "/"
