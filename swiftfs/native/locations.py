# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Location hint parsing.

Location bodies are JSON-ish lists of replica URLs. They are scanned for
quoted, URI-shaped tokens rather than parsed, so bodies that are not strict
JSON still yield whatever URIs they contain. This is lossy: tokens that fail
URI validation are skipped.
"""
import re
from typing import Set
from urllib.parse import urlsplit

from ..utils import logger

URI_PATTERN = re.compile(r'"([A-Za-z][A-Za-z0-9+.\-]*:[^"\s]+)"')

def extract_uris(text: str) -> Set[str]:
    """
    Extract the set of quoted URIs in ``text``.

    Args:
        text (str): Response body.

    Returns:
        Set[str]: Every well-formed URI found, possibly empty.
    """
    uris = set()
    for match in URI_PATTERN.finditer(text):
        candidate = match.group(1)
        try:
            # port raises ValueError for a malformed authority
            urlsplit(candidate).port
        except ValueError as e:
            logger.debug(f"extract_uris: skipping malformed token {candidate!r}: {e}")
            continue
        uris.add(candidate)
    return uris
