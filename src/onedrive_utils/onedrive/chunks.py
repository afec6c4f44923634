"""Byte-range arithmetic for resumable uploads."""

from __future__ import annotations

from collections.abc import Iterator

# Graph requires chunk sizes that are multiples of 320 KiB; 20 MiB is one.
CHUNK_SIZE = 20 * 1024 * 1024


def chunk_ranges(total_size: int, chunk_size: int = CHUNK_SIZE) -> Iterator[tuple[int, int]]:
    """Yield contiguous ``(start, end)`` byte ranges covering ``[0, total_size)``.

    ``end`` is inclusive. The last range may be shorter than ``chunk_size``.
    A zero-byte file yields nothing.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if total_size < 0:
        raise ValueError(f"total_size must not be negative, got {total_size}")

    for start in range(0, total_size, chunk_size):
        yield start, min(start + chunk_size, total_size) - 1


def content_range(start: int, end: int, total_size: int) -> str:
    """Format a Content-Range header value, e.g. ``bytes 0-99/1000``."""
    return f"bytes {start}-{end}/{total_size}"


def percent(done: int, total_size: int) -> int:
    """Percentage of ``total_size`` covered by ``done``, rounded half up."""
    if total_size <= 0:
        return 100
    return (200 * done + total_size) // (2 * total_size)
