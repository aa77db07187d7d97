# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
from dataclasses import dataclass

from .constants import PATH_SEPARATOR

@dataclass(frozen=True)
class ObjectKey:
    """Backend address of one object: a container and an object name.

    The object name always starts with the path separator, so ``str(key)``
    reads ``container/dir/file``.
    """
    container: str
    object_name: str

    def __str__(self) -> str:
        return f"{self.container}{self.object_name}"

    @property
    def is_root(self) -> bool:
        """True when the key addresses the container itself."""
        return self.object_name.strip(PATH_SEPARATOR) == ""

    @property
    def object_name_in_container(self) -> str:
        """Object name as the backend stores it, without the leading separator."""
        return self.object_name.lstrip(PATH_SEPARATOR)

    def to_uri_path(self) -> str:
        return PATH_SEPARATOR + str(self)

    def as_directory(self) -> "ObjectKey":
        """Key used as a listing prefix: always ends with the separator."""
        if self.object_name.endswith(PATH_SEPARATOR):
            return self
        return ObjectKey(self.container, self.object_name + PATH_SEPARATOR)
