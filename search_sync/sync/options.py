"""Run options for a synchronization and their defaults."""

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

DEFAULT_CHUNK_SIZE = 50


@dataclass(frozen=True)
class SyncOptions:
    """Options for one synchronization run.

    Attributes:
        dry_run: Compute the indexing plan without writing to the remote index
        flush: Clear the remote index before submitting
        chunk_size: Maximum number of actions per batch request
    """

    dry_run: bool = False
    flush: bool = False
    chunk_size: int = DEFAULT_CHUNK_SIZE


def resolve_options(overrides: Mapping[str, Any] | None = None) -> SyncOptions:
    """Merge caller-supplied options over the defaults.

    Keys with a None value keep the default, so unset CLI options can be
    passed through as is. Unknown keys are ignored. chunk_size is not
    validated here; the chunker rejects non-positive sizes.

    Args:
        overrides: Caller options keyed by SyncOptions field name

    Returns:
        Resolved SyncOptions
    """
    known = {f.name for f in fields(SyncOptions)}
    values = {
        key: value
        for key, value in (overrides or {}).items()
        if key in known and value is not None
    }
    return SyncOptions(**values)
