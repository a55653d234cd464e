"""Utilities for index object ID generation."""

import hashlib


def compute_object_id(path: str) -> str:
    """Generate deterministic object ID from a content item's path.

    The ID is the hex-encoded SHA-1 digest of the UTF-8 path, so the same
    path always maps to the same index record and re-runs update it in place.

    Args:
        path: Site-relative path of the content item (e.g. "en/hello-world/")

    Returns:
        40-character hex digest
    """
    return hashlib.sha1(path.encode("utf-8")).hexdigest()
