"""
Unit tests for the sex classification module.
"""

import pytest

from genome_diff.bases import BASES_PER_UNIT
from genome_diff.sex import (
    X_BAND,
    Y_BAND,
    SexChromosome,
    classify,
    classify_stream,
)


class FakeSizedStream:
    """Stream that only knows its size."""

    def __init__(self, size):
        self._size = size

    def size(self):
        return self._size

    def seek(self, unit_offset):
        pass

    def read(self):
        raise AssertionError("classification must not read chromosome data")


class TestClassify:
    """Test classification by length in bases."""

    @pytest.mark.parametrize("length", [0, -1, 100_000_000, 400_000_000, 45_600_000, 195_000_000])
    def test_indeterminate(self, length):
        """Test lengths outside both bands, including the exclusive band edges."""
        assert classify(length) is SexChromosome.INDETERMINATE

    @pytest.mark.parametrize("length", [124_800_001, 150_000_000, 156_000_000, 160_000_000, 194_999_999])
    def test_x_chromosome(self, length):
        """Test lengths inside the X band."""
        assert classify(length) is SexChromosome.X

    @pytest.mark.parametrize("length", [45_600_001, 50_000_000, 57_000_000, 60_000_000, 71_249_999])
    def test_y_chromosome(self, length):
        """Test lengths inside the Y band."""
        assert classify(length) is SexChromosome.Y

    def test_band_bounds(self):
        """Test the exact band limits and that they do not overlap."""
        assert X_BAND == (124_800_000, 195_000_000)
        assert Y_BAND == (45_600_000, 71_250_000)
        assert Y_BAND[1] <= X_BAND[0]


class TestClassifyStream:
    """Test classification of chromosome streams."""

    def test_units_converted_to_bases(self):
        """Test that stream sizes in units are converted to bases."""
        assert classify_stream(FakeSizedStream(156_000_000 // BASES_PER_UNIT)) is SexChromosome.X
        assert classify_stream(FakeSizedStream(57_000_000 // BASES_PER_UNIT)) is SexChromosome.Y
        assert classify_stream(FakeSizedStream(0)) is SexChromosome.INDETERMINATE

    def test_size_in_units_is_not_a_base_count(self):
        """Test that 100M units (400M bases) is not mistaken for anything."""
        assert classify_stream(FakeSizedStream(100_000_000)) is SexChromosome.INDETERMINATE
