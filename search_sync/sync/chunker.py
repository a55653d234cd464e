"""Partitioning of batch actions into bounded-size chunks."""

from collections.abc import Sequence
from typing import TypeVar

from search_sync.utils.exceptions import InvalidChunkSizeError

T = TypeVar("T")


def validate_chunk_size(chunk_size: int) -> None:
    """Raise InvalidChunkSizeError unless chunk_size is a positive integer."""
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
        raise InvalidChunkSizeError(f"Chunk size must be a positive integer, got {chunk_size!r}")


def chunk_actions(actions: Sequence[T], chunk_size: int) -> list[list[T]]:
    """Split actions into consecutive chunks of at most chunk_size items.

    The input is left untouched; each chunk is a new list. Only the last
    chunk may be shorter, and joining the chunks in order gives back the input.

    Args:
        actions: Ordered actions
        chunk_size: Maximum chunk length

    Returns:
        List of chunks; empty when there are no actions

    Raises:
        InvalidChunkSizeError: If chunk_size is not a positive integer
    """
    validate_chunk_size(chunk_size)
    return [list(actions[start : start + chunk_size]) for start in range(0, len(actions), chunk_size)]
