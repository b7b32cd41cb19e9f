"""
Unit tests for the comparator module.
"""

import pytest
from unittest.mock import patch, MagicMock

from genome_diff.alignment import Difference
from genome_diff.bases import BASES_PER_UNIT
from genome_diff.comparator import (
    COMPARED,
    NUM_CHROMOSOMES,
    SKIPPED,
    Comparator,
    compare,
)
from genome_diff.exceptions import ComparisonError, InvalidPersonError
from genome_diff.sex import SEX_CHROMOSOME_IDX, SexChromosome
from genome_diff.streams import MemoryChromosomeStream, MemoryPerson

TELOMERE = "TTAGGG"


class FakeSizedStream:
    """Stream that only knows its size and must never be read."""

    def __init__(self, size):
        self._size = size

    def size(self):
        return self._size

    def seek(self, unit_offset):
        pass

    def read(self):
        raise AssertionError("skipped chromosome must not be read")


@pytest.fixture
def genome(make_sequence):
    """23 distinct chromosome sequences."""
    return [make_sequence(400, seed=idx) for idx in range(NUM_CHROMOSOMES)]


def person_from(sequences, sex_stream=None, chunk_size=64):
    streams = [MemoryChromosomeStream.from_sequence(seq, chunk_size) for seq in sequences]
    if sex_stream is not None:
        streams[SEX_CHROMOSOME_IDX] = sex_stream
    return MemoryPerson(streams)


class TestCompareValidation:
    """Test input validation."""

    @pytest.mark.parametrize("count_a, count_b", [(22, 23), (23, 24), (0, 0)])
    def test_wrong_chromosome_count(self, count_a, count_b):
        """Test that a person without 23 chromosomes fails before any comparison."""
        person_a = MagicMock()
        person_a.chromosome_count.return_value = count_a
        person_b = MagicMock()
        person_b.chromosome_count.return_value = count_b

        comparator = Comparator()
        with pytest.raises(InvalidPersonError):
            comparator.compare(person_a, person_b)

        person_a.chromosome.assert_not_called()
        person_b.chromosome.assert_not_called()
        assert comparator.last_summary is None


class TestCompare:
    """Test comparing two people."""

    def test_identical_people(self, genome, small_settings):
        """Test that identical people have no differences."""
        comparator = Comparator(small_settings)
        assert comparator.compare(person_from(genome), person_from(genome)) == []

        # Short sex chromosomes are indeterminate and skipped
        summary = comparator.last_summary
        assert summary.skipped == [SEX_CHROMOSOME_IDX]
        assert summary.compared == list(range(SEX_CHROMOSOME_IDX))

    def test_differences_grouped_by_chromosome(self, genome, mutate, small_settings):
        """Test that differences come out in chromosome order."""
        other = list(genome)
        other[9] = mutate(other[9], 150)
        other[2] = mutate(other[2], 300)
        other[2] = mutate(other[2], 40)

        diffs = compare(person_from(genome), person_from(other), small_settings)
        assert diffs == [
            Difference(2, (40, 41), (40, 41)),
            Difference(2, (300, 301), (300, 301)),
            Difference(9, (150, 151), (150, 151)),
        ]

    def test_positions_in_chromosome_coordinates(self, genome, mutate, small_settings):
        """Test that telomere trimming offsets are added back to positions."""
        genome_a = list(genome)
        genome_a[0] = TELOMERE * 2 + genome[0]
        genome_b = list(genome)
        genome_b[0] = mutate(genome[0], 50)

        comparator = Comparator(small_settings)
        diffs = comparator.compare(person_from(genome_a), person_from(genome_b))

        assert diffs == [Difference(0, (62, 63), (50, 51))]
        result = comparator.last_summary.chromosomes[0]
        assert result.range_a == (12, 412)
        assert result.range_b == (0, 400)

    def test_telomeres_are_not_compared(self, genome, small_settings):
        """Test that different telomere lengths alone are not differences."""
        genome_a = list(genome)
        genome_a[4] = TELOMERE * 2 + genome[4] + TELOMERE * 2
        genome_b = list(genome)
        genome_b[4] = "GG" + TELOMERE + genome[4] + TELOMERE + "TT"

        comparator = Comparator(small_settings)
        assert comparator.compare(person_from(genome_a), person_from(genome_b)) == []

        result = comparator.last_summary.chromosomes[4]
        assert result.range_a == (12, 412)
        assert result.range_b == (8, 408)

    def test_x_and_y_skipped(self, genome, mutate, small_settings):
        """Test that differing sex chromosomes are skipped and others compared."""
        other = list(genome)
        other[1] = mutate(other[1], 10)

        person_a = person_from(genome, sex_stream=FakeSizedStream(156_000_000 // BASES_PER_UNIT))
        person_b = person_from(other, sex_stream=FakeSizedStream(57_000_000 // BASES_PER_UNIT))

        comparator = Comparator(small_settings)
        diffs = comparator.compare(person_a, person_b)

        assert diffs == [Difference(1, (10, 11), (10, 11))]
        sex_result = comparator.last_summary.chromosomes[SEX_CHROMOSOME_IDX]
        assert sex_result.status == SKIPPED
        assert sex_result.sex_a is SexChromosome.X
        assert sex_result.sex_b is SexChromosome.Y

    def test_indeterminate_skipped(self, genome, small_settings):
        """Test that an indeterminate sex chromosome on one side is skipped."""
        person_a = person_from(genome, sex_stream=FakeSizedStream(156_000_000 // BASES_PER_UNIT))
        person_b = person_from(genome, sex_stream=FakeSizedStream(100_000_000))

        comparator = Comparator(small_settings)
        assert comparator.compare(person_a, person_b) == []
        assert comparator.last_summary.chromosomes[SEX_CHROMOSOME_IDX].status == SKIPPED

    @patch("genome_diff.comparator.classify_stream")
    def test_matching_sex_chromosomes_compared(self, mock_classify, genome, mutate, small_settings):
        """Test that sex chromosomes of the same type are compared."""
        mock_classify.return_value = SexChromosome.X
        other = list(genome)
        other[SEX_CHROMOSOME_IDX] = mutate(other[SEX_CHROMOSOME_IDX], 77)

        comparator = Comparator(small_settings)
        diffs = comparator.compare(person_from(genome), person_from(other))

        assert diffs == [Difference(SEX_CHROMOSOME_IDX, (77, 78), (77, 78))]
        assert comparator.last_summary.chromosomes[SEX_CHROMOSOME_IDX].status == COMPARED
        assert mock_classify.call_count == 2

    def test_idempotent(self, genome, mutate, small_settings):
        """Test that comparing twice gives identical output."""
        other = [mutate(seq, 20 + idx * 10) for idx, seq in enumerate(genome)]
        person_a, person_b = person_from(genome), person_from(other)

        comparator = Comparator(small_settings)
        first = comparator.compare(person_a, person_b)
        second = comparator.compare(person_a, person_b)
        assert first == second
        assert len(first) == SEX_CHROMOSOME_IDX

    def test_chunk_size_does_not_matter(self, genome, mutate, small_settings):
        """Test that stream chunking does not change the result."""
        other = list(genome)
        other[3] = mutate(other[3], 123)
        expected = compare(person_from(genome, chunk_size=1024), person_from(other, chunk_size=1024), small_settings)
        assert compare(person_from(genome, chunk_size=1), person_from(other, chunk_size=1), small_settings) == expected
        assert expected == [Difference(3, (123, 124), (123, 124))]

    def test_parallel_matches_sequential(self, genome, mutate, small_settings):
        """Test that parallel execution keeps chromosome order."""
        other = [mutate(seq, 5 + idx) for idx, seq in enumerate(genome)]
        sequential = compare(person_from(genome), person_from(other), small_settings)

        small_settings.max_workers = 4
        parallel = compare(person_from(genome), person_from(other), small_settings)

        assert parallel == sequential
        assert [d.chromosome_idx for d in parallel] == sorted(d.chromosome_idx for d in parallel)

    def test_unexpected_error_wrapped(self, genome, small_settings):
        """Test that failures inside a chromosome step are reported as comparison errors."""
        person_a = person_from(genome)
        person_b = MagicMock()
        person_b.chromosome_count.return_value = NUM_CHROMOSOMES
        person_b.chromosome.side_effect = IOError("storage went away")

        with pytest.raises(ComparisonError) as excinfo:
            Comparator(small_settings).compare(person_a, person_b)
        assert "storage went away" in str(excinfo.value)


class TestCompareChromosome:
    """Test a single chromosome step."""

    def test_returns_ranges_and_differences(self, make_sequence, mutate, small_settings):
        """Test the per-chromosome result."""
        seq = make_sequence(200)
        stream_a = MemoryChromosomeStream.from_sequence(TELOMERE * 2 + seq)
        stream_b = MemoryChromosomeStream.from_sequence(mutate(seq, 100))

        result = Comparator(small_settings).compare_chromosome(5, stream_a, stream_b)

        assert result.status == COMPARED
        assert result.range_a == (12, 212)
        assert result.range_b == (0, 200)
        assert result.differences == [Difference(5, (112, 113), (100, 101))]
