"""
Sex classification module for genome-diff.
Infers the sex chromosome carried at index 22 from its length alone.
"""

import logging
from enum import Enum

from genome_diff.exceptions import ConfigurationError
from genome_diff.streams import base_length

# Configure logging
log = logging.getLogger("genome-diff")

SEX_CHROMOSOME_IDX = 22

# Approximate lengths (in bases) of the X and Y chromosomes
X_CHROMOSOME_LEN = 156_000_000
Y_CHROMOSOME_LEN = 57_000_000


class SexChromosome(Enum):
    X = "X"
    Y = "Y"
    INDETERMINATE = "indeterminate"


def _band(reference_len):
    """Exclusive (low, high) bounds accepted around a reference length."""
    return 4 * reference_len // 5, 5 * reference_len // 4


X_BAND = _band(X_CHROMOSOME_LEN)
Y_BAND = _band(Y_CHROMOSOME_LEN)


def _check_bands_disjoint(first, second):
    if first[0] < second[1] and second[0] < first[1]:
        raise ConfigurationError(
            "Sex chromosome length bands overlap",
            details=f"{first} and {second}",
        )


_check_bands_disjoint(X_BAND, Y_BAND)


def classify(length: int) -> SexChromosome:
    """
    Classify a sex chromosome by its length in bases.

    Only meaningful for the chromosome at SEX_CHROMOSOME_IDX. Lengths that fall
    in neither band are INDETERMINATE, which is a normal result and not an error.
    """
    if X_BAND[0] < length < X_BAND[1]:
        return SexChromosome.X
    if Y_BAND[0] < length < Y_BAND[1]:
        return SexChromosome.Y

    # Bad length, unlikely to be a valid chromosome
    log.debug(f"Length {length:,} matches no sex chromosome band")
    return SexChromosome.INDETERMINATE


def classify_stream(stream) -> SexChromosome:
    """Classify a chromosome stream by its length in bases."""
    return classify(base_length(stream))
