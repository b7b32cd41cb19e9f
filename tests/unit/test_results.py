"""
Unit tests for the results module.
"""

import json
import pytest
import pandas as pd

from genome_diff.alignment import Difference
from genome_diff.exceptions import FileError
from genome_diff.results import (
    DIFFERENCE_COLUMNS,
    differences_to_dataframe,
    save_differences,
    summarize_by_chromosome,
)


@pytest.fixture
def differences():
    return [
        Difference(0, (100, 101), (100, 101)),
        Difference(0, (200, 200), (200, 203)),
        Difference(5, (12, 20), (10, 12)),
    ]


class TestDataFrames:
    """Test conversion of differences to tables."""

    def test_differences_to_dataframe(self, differences):
        """Test one row per difference with span lengths."""
        df = differences_to_dataframe(differences)
        assert list(df.columns) == DIFFERENCE_COLUMNS
        assert len(df) == 3
        assert df["a_length"].tolist() == [1, 0, 8]
        assert df["b_length"].tolist() == [1, 3, 2]

    def test_empty(self):
        """Test that no differences gives an empty table with the same columns."""
        df = differences_to_dataframe([])
        assert df.empty
        assert list(df.columns) == DIFFERENCE_COLUMNS

    def test_summarize_by_chromosome(self, differences):
        """Test per-chromosome counts and spans."""
        summary = summarize_by_chromosome(differences)
        assert summary.loc[0, "difference_count"] == 2
        assert summary.loc[0, "b_bases"] == 4
        assert summary.loc[5, "a_bases"] == 8

    def test_summarize_empty(self):
        """Test summarizing nothing."""
        assert summarize_by_chromosome([]).empty


class TestSaveDifferences:
    """Test writing differences to disk."""

    def test_save_csv(self, differences, tmp_path):
        """Test CSV output."""
        path = save_differences(differences, tmp_path / "out" / "diffs.csv")
        df = pd.read_csv(path)
        assert df["chromosome"].tolist() == [0, 0, 5]

    def test_save_json(self, differences, tmp_path):
        """Test JSON output."""
        path = save_differences(differences, tmp_path / "diffs.json")
        with open(path) as f:
            records = json.load(f)
        assert records[1]["b_end"] == 203

    def test_unsupported_suffix(self, differences, tmp_path):
        """Test that unknown formats are rejected."""
        with pytest.raises(FileError):
            save_differences(differences, tmp_path / "diffs.xlsx")
