"""
Test configuration for genome-diff.
"""

import sys
import pytest
import numpy as np
from pathlib import Path

# Add the src directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from genome_diff.config import ComparisonSettings

LETTERS = "ACGT"


@pytest.fixture
def small_settings():
    """Settings scaled down for short test sequences."""
    return ComparisonSettings(block_size=16, anchor_length=8, band_width=8, search_window=64)


@pytest.fixture
def make_sequence():
    """
    Return a factory for random base strings.

    Sequences start and end with C so that they never look like a telomere.
    """
    def factory(length, seed=0):
        rng = np.random.default_rng(seed)
        body = "".join(rng.choice(list(LETTERS), size=length - 2))
        return "C" + body + "C"
    return factory


@pytest.fixture
def to_codes():
    """Return a converter from base letters to an array of base codes."""
    def convert(sequence):
        return np.array([LETTERS.index(letter) for letter in sequence], dtype=np.uint8)
    return convert


def substitute(sequence, position):
    """Replace the base at position with a different one."""
    replacement = LETTERS[(LETTERS.index(sequence[position]) + 1) % 4]
    return sequence[:position] + replacement + sequence[position + 1:]


@pytest.fixture
def mutate():
    """Return the single-base substitution helper."""
    return substitute
