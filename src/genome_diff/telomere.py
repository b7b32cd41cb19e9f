"""
Telomere trimming module for genome-diff.

Telomeres are runs of the repeating motif TTAGGG that cap both ends of a
chromosome. They may start or stop part-way through the motif, or be missing.
The scanners here find where the telomeres stop so that only the data between
them is compared.

Returned values are indices of bases, not packed units.
"""

import logging
from typing import Tuple

import numpy as np

from genome_diff.bases import Base
from genome_diff.streams import materialize

# Configure logging
log = logging.getLogger("genome-diff")

TELOMERE_MOTIF = (Base.T, Base.T, Base.A, Base.G, Base.G, Base.G)
MOTIF_LEN = len(TELOMERE_MOTIF)

_MOTIF_CODES = tuple(int(base) for base in TELOMERE_MOTIF)


def _forward_phase(bases: np.ndarray, start: int) -> int:
    """
    Lowest motif phase whose rotation matches bases[start:start + MOTIF_LEN].

    Returns:
        The matching phase, or -1 if no rotation matches
    """
    window = bases[start:start + MOTIF_LEN]
    if len(window) < MOTIF_LEN:
        return -1
    for phase in range(MOTIF_LEN):
        if all(int(window[i]) == _MOTIF_CODES[(phase + i) % MOTIF_LEN] for i in range(MOTIF_LEN)):
            return phase
    return -1


def _backward_phase(bases: np.ndarray, end: int, floor: int) -> int:
    """
    Lowest motif phase matching the MOTIF_LEN bases before `end`, read backwards.

    Phase p means bases[end - 1] is motif[p], bases[end - 2] is motif[p - 1], and so on.
    """
    if end - floor < MOTIF_LEN:
        return -1
    for phase in range(MOTIF_LEN):
        if all(int(bases[end - 1 - i]) == _MOTIF_CODES[(phase - i) % MOTIF_LEN] for i in range(MOTIF_LEN)):
            return phase
    return -1


def trim_range(bases: np.ndarray) -> Tuple[int, int]:
    """
    Find [start, end) of the data between telomeres in an array of base codes.

    Args:
        bases: numpy array of base codes for a whole chromosome

    Returns:
        Tuple of (data_start, data_end) base indices
    """
    data_start = 0
    data_end = len(bases)

    # At least one complete motif is needed to recognise a telomere
    if data_end < MOTIF_LEN:
        return data_start, data_end

    # Leading telomere: identify the phase, then follow the motif until it breaks
    phase = _forward_phase(bases, 0)
    if phase >= 0:
        data_start = MOTIF_LEN
        while data_start < data_end and int(bases[data_start]) == _MOTIF_CODES[phase]:
            data_start += 1
            phase = (phase + 1) % MOTIF_LEN

    # Not enough room left for a complete telomere at the end
    if data_end < data_start + MOTIF_LEN:
        return data_start, data_end

    # Trailing telomere, same approach scanning backwards
    phase = _backward_phase(bases, data_end, data_start)
    if phase >= 0:
        data_end -= MOTIF_LEN
        while data_end > data_start and int(bases[data_end - 1]) == _MOTIF_CODES[phase]:
            data_end -= 1
            phase = (phase - 1) % MOTIF_LEN

    return data_start, data_end


def data_range(stream) -> Tuple[int, int]:
    """
    Return [start, end) of the interesting data in a chromosome stream,
    i.e. the data between telomeres.

    The whole chromosome is read into memory first, so the result does not
    depend on how the stream chunks its reads.
    """
    bases = materialize(stream)
    start, end = trim_range(bases)
    log.debug(f"Telomere trim: [{start:,}, {end:,}) of {len(bases):,} bases")
    return start, end
