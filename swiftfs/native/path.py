# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Hierarchical paths.

A :class:`SwiftPath` is an absolute, normalized POSIX path that may carry the
scheme and authority of the store it belongs to (``swift://data/dir/file``).
Query strings and fragments are discarded on parsing.
"""
import posixpath
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import urlsplit, urlunsplit

SEPARATOR = "/"

def normalize(path: str) -> str:
    """Absolute, normalized form of ``path``; the root is ``/``."""
    return posixpath.normpath(SEPARATOR + path.lstrip(SEPARATOR))

@dataclass(frozen=True)
class SwiftPath:
    path: str = SEPARATOR
    scheme: str = ""
    authority: str = ""

    @classmethod
    def parse(cls, value: Union[str, "SwiftPath"]) -> "SwiftPath":
        """
        Parse a path or URI string.

        Raises:
            ValueError: If the string is not a valid URI.
        """
        if isinstance(value, SwiftPath):
            return value
        parts = urlsplit(value)
        return cls(normalize(parts.path), parts.scheme, parts.netloc)

    @classmethod
    def of(cls, path: str) -> "SwiftPath":
        """Build a bare path without URI parsing, for names read from listings."""
        return cls(normalize(path))

    @property
    def host(self) -> str:
        return self.authority.rpartition("@")[2].split(":")[0]

    @property
    def is_root(self) -> bool:
        return self.path == SEPARATOR

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def parent(self) -> Optional["SwiftPath"]:
        if self.is_root:
            return None
        return SwiftPath(posixpath.dirname(self.path), self.scheme, self.authority)

    def child(self, name: str) -> "SwiftPath":
        return SwiftPath(normalize(posixpath.join(self.path, name)), self.scheme, self.authority)

    def relative_to(self, other: "SwiftPath") -> str:
        """
        Path of ``self`` below ``other``, without a leading separator.

        Raises:
            ValueError: If ``self`` is not below ``other``.
        """
        base = other.path.rstrip(SEPARATOR) + SEPARATOR
        if not self.path.startswith(base):
            raise ValueError(f"{self.path} is not below {other.path}")
        return self.path[len(base):]

    def with_root(self, root: "SwiftPath") -> "SwiftPath":
        """
        Same path component under ``root``'s scheme and authority.

        Raises:
            ValueError: If the resulting URI is invalid.
        """
        uri = urlunsplit((root.scheme, root.authority, self.path, "", ""))
        # Accessing port validates the authority
        urlsplit(uri).port
        return SwiftPath(self.path, root.scheme, root.authority)

    def __str__(self) -> str:
        if self.scheme or self.authority:
            return urlunsplit((self.scheme, self.authority, self.path, "", ""))
        return self.path
