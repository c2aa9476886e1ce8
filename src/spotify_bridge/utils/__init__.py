"""Shared helpers for Spotify Bridge."""
from typing import List, Sequence, TypeVar

T = TypeVar("T")


def partition(items: Sequence[T], size: int) -> List[List[T]]:
    """Split a sequence into consecutive chunks of at most ``size`` items."""
    if size <= 0:
        raise ValueError("Partition size must be positive")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]
