"""Tests for upload byte-range arithmetic."""

import math

import pytest

from onedrive_utils.onedrive.chunks import CHUNK_SIZE, chunk_ranges, content_range, percent

MiB = 1024 * 1024


class TestChunkRanges:
    """Test partitioning of a file into byte ranges."""

    def test_chunk_size_is_20_mib(self):
        """Should default to 20 MiB chunks."""
        assert CHUNK_SIZE == 20 * MiB

    @pytest.mark.parametrize(
        "size",
        [1, CHUNK_SIZE - 1, CHUNK_SIZE, CHUNK_SIZE + 1, 45 * MiB, 3 * CHUNK_SIZE],
    )
    def test_ranges_cover_file(self, size):
        """Should produce ceil(S/C) contiguous, non-overlapping ranges covering [0, S)."""
        ranges = list(chunk_ranges(size))

        assert len(ranges) == math.ceil(size / CHUNK_SIZE)
        assert ranges[0][0] == 0
        assert ranges[-1][1] == size - 1
        for (_, prev_end), (next_start, _) in zip(ranges, ranges[1:]):
            assert next_start == prev_end + 1

        last_start, last_end = ranges[-1]
        expected_last = size % CHUNK_SIZE or CHUNK_SIZE
        assert last_end - last_start + 1 == expected_last

    def test_45_mib_example(self):
        """Should match the documented 45 MiB layout."""
        size = 45 * MiB
        headers = [content_range(start, end, size) for start, end in chunk_ranges(size)]

        assert headers == [
            "bytes 0-20971519/47185920",
            "bytes 20971520-41943039/47185920",
            "bytes 41943040-47185919/47185920",
        ]

    def test_empty_file(self):
        """Should yield no ranges for an empty file."""
        assert list(chunk_ranges(0)) == []

    def test_custom_chunk_size(self):
        """Should honor a custom chunk size."""
        assert list(chunk_ranges(10, chunk_size=4)) == [(0, 3), (4, 7), (8, 9)]

    def test_invalid_chunk_size(self):
        """Should reject non-positive chunk sizes."""
        with pytest.raises(ValueError, match="chunk_size"):
            list(chunk_ranges(10, chunk_size=0))

    def test_negative_size(self):
        """Should reject negative sizes."""
        with pytest.raises(ValueError, match="total_size"):
            list(chunk_ranges(-1))


class TestPercent:
    """Test progress percentage rounding."""

    def test_bounds(self):
        """Should map 0 and total to 0 and 100."""
        assert percent(0, 1000) == 0
        assert percent(1000, 1000) == 100

    def test_rounds_half_up(self):
        """Should round .5 up rather than to even."""
        assert percent(5, 1000) == 1  # 0.5%
        assert percent(25, 1000) == 3  # 2.5%
        assert percent(125, 1000) == 13  # 12.5%

    def test_rounds_down_below_half(self):
        """Should round down below .5."""
        assert percent(4, 1000) == 0
        assert percent(1, 3) == 33

    def test_empty_total(self):
        """Should treat an empty total as complete."""
        assert percent(0, 0) == 100
