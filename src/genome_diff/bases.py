"""
Base alphabet and packing module for genome-diff.

Chromosomes are stored as sequences of one-byte packed units. Each unit holds
BASES_PER_UNIT bases at two bits per base, the first base in the most
significant bits. Everything that converts a unit index into a base index
multiplies by BASES_PER_UNIT.
"""

import logging
from enum import IntEnum
from typing import Iterable, Tuple, Union

import numpy as np

from genome_diff.exceptions import InvalidBaseError, PackingError

# Configure logging
log = logging.getLogger("genome-diff")

BITS_PER_BASE = 2
BASES_PER_UNIT = 4
BASE_MASK = (1 << BITS_PER_BASE) - 1

# Bit offset of each base inside a unit, first base first
_SHIFTS = np.array(
    [BITS_PER_BASE * (BASES_PER_UNIT - 1 - i) for i in range(BASES_PER_UNIT)],
    dtype=np.uint8,
)


class Base(IntEnum):
    """One of the four nucleotide bases, valued by its 2-bit code."""

    A = 0
    C = 1
    G = 2
    T = 3

    @classmethod
    def from_symbol(cls, symbol: str) -> "Base":
        """
        Look up a base by its letter (case-insensitive).

        Raises:
            InvalidBaseError: If the symbol is not A, C, G or T
        """
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise InvalidBaseError(details=repr(symbol))
        try:
            return cls[symbol.upper()]
        except KeyError:
            raise InvalidBaseError(details=repr(symbol))

    def __str__(self):
        return self.name


BaseLike = Union[Base, int, str]


def _coerce(base: BaseLike) -> Base:
    if isinstance(base, Base):
        return base
    if isinstance(base, str):
        return Base.from_symbol(base)
    try:
        return Base(base)
    except ValueError:
        raise InvalidBaseError(details=repr(base))


def decode(unit: int, offset: int) -> Base:
    """
    Decode one base from a packed unit.

    Args:
        unit: Packed unit value (0-255)
        offset: Position of the base inside the unit, 0 is the first base

    Returns:
        The decoded Base
    """
    if not 0 <= offset < BASES_PER_UNIT:
        raise ValueError(f"offset must be in [0, {BASES_PER_UNIT}), got {offset}")
    shift = BITS_PER_BASE * (BASES_PER_UNIT - 1 - offset)
    return Base((int(unit) >> shift) & BASE_MASK)


def pack(*bases: BaseLike) -> int:
    """Pack exactly BASES_PER_UNIT bases into one unit."""
    if len(bases) != BASES_PER_UNIT:
        raise PackingError(
            f"A unit holds exactly {BASES_PER_UNIT} bases",
            details=f"got {len(bases)}",
        )
    unit = 0
    for base in bases:
        unit = (unit << BITS_PER_BASE) | int(_coerce(base))
    return unit


def unpack(unit: int) -> Tuple[Base, ...]:
    """Unpack one unit into its bases."""
    return tuple(decode(unit, offset) for offset in range(BASES_PER_UNIT))


def pack_sequence(sequence: Union[str, Iterable[BaseLike]]) -> np.ndarray:
    """
    Pack a whole sequence of bases into an array of units.

    Args:
        sequence: Base letters or Base values; length must be a multiple of BASES_PER_UNIT

    Returns:
        numpy uint8 array of packed units
    """
    codes = np.array([int(_coerce(base)) for base in sequence], dtype=np.uint8)
    if codes.size % BASES_PER_UNIT:
        error_msg = f"Sequence length must be a multiple of {BASES_PER_UNIT}"
        log.error(f"{error_msg} (got {codes.size})")
        raise PackingError(error_msg, details=f"length {codes.size}")

    grouped = codes.reshape(-1, BASES_PER_UNIT)
    return np.bitwise_or.reduce(grouped << _SHIFTS, axis=1).astype(np.uint8)


def unpack_units(units) -> np.ndarray:
    """
    Unpack an array of units into an array of base codes.

    Returns:
        numpy uint8 array of length len(units) * BASES_PER_UNIT
    """
    units = np.asarray(units, dtype=np.uint8)
    return ((units[:, np.newaxis] >> _SHIFTS) & BASE_MASK).astype(np.uint8).ravel()


def to_string(codes) -> str:
    """Render an array of base codes as letters."""
    return "".join(Base(int(code)).name for code in codes)
