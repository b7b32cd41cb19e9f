"""
Chromosome stream and person contracts for genome-diff.

The comparison core only talks to storage through two small interfaces:

- ChromosomeStream: size() in packed units, seek(unit_offset), read() a buffer
  of units from the current position
- Person: chromosome_count() and chromosome(index)

In-memory implementations are provided for callers that already hold the
packed data, and for tests.
"""

import logging
from typing import List, Protocol, Sequence, runtime_checkable

import numpy as np

from genome_diff.bases import BASES_PER_UNIT, pack_sequence, unpack_units
from genome_diff.exceptions import StreamError

# Configure logging
log = logging.getLogger("genome-diff")

DEFAULT_CHUNK_SIZE = 1 << 20  # units per read()


@runtime_checkable
class ChromosomeStream(Protocol):
    """Seekable, chunked source of packed units for one chromosome."""

    def size(self) -> int:
        ...

    def seek(self, unit_offset: int) -> None:
        ...

    def read(self) -> Sequence[int]:
        ...


@runtime_checkable
class Person(Protocol):
    """Ordered collection of chromosome streams."""

    def chromosome_count(self) -> int:
        ...

    def chromosome(self, index: int) -> ChromosomeStream:
        ...


class MemoryChromosomeStream:
    """
    ChromosomeStream over packed units held in memory.

    read() hands out at most chunk_size units starting at the current position
    and advances the position; at the end it returns an empty buffer.
    """

    def __init__(self, units, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._units = np.asarray(units, dtype=np.uint8)
        self._chunk_size = chunk_size
        self._position = 0

    @classmethod
    def from_sequence(cls, sequence, chunk_size: int = DEFAULT_CHUNK_SIZE) -> "MemoryChromosomeStream":
        """Build a stream from base letters."""
        return cls(pack_sequence(sequence), chunk_size)

    def size(self) -> int:
        return int(self._units.size)

    def seek(self, unit_offset: int) -> None:
        if not 0 <= unit_offset <= self._units.size:
            raise StreamError("Seek offset out of range", details=f"{unit_offset} not in [0, {self._units.size}]")
        self._position = unit_offset

    def read(self) -> np.ndarray:
        end = min(self._position + self._chunk_size, self._units.size)
        buffer = self._units[self._position:end]
        self._position = end
        return buffer


class MemoryPerson:
    """Person backed by in-memory chromosome streams."""

    def __init__(self, chromosomes: List[MemoryChromosomeStream]):
        self._chromosomes = list(chromosomes)

    @classmethod
    def from_sequences(cls, sequences: Sequence[str], chunk_size: int = DEFAULT_CHUNK_SIZE) -> "MemoryPerson":
        """Build a person from one base-letter string per chromosome."""
        return cls([MemoryChromosomeStream.from_sequence(seq, chunk_size) for seq in sequences])

    def chromosome_count(self) -> int:
        return len(self._chromosomes)

    def chromosome(self, index: int) -> MemoryChromosomeStream:
        stream = self._chromosomes[index]
        stream.seek(0)
        return stream


def base_length(stream: ChromosomeStream) -> int:
    """Length of a chromosome in bases."""
    return stream.size() * BASES_PER_UNIT


def materialize(stream: ChromosomeStream) -> np.ndarray:
    """
    Read a whole chromosome into an addressable array of base codes.

    The stream may hand out buffers of any size; reads continue until size()
    units have been collected.

    Args:
        stream: Chromosome stream to read

    Returns:
        numpy uint8 array of base codes

    Raises:
        StreamError: If the stream ends before its reported size
    """
    total = stream.size()

    stream.seek(0)
    chunks = []
    collected = 0
    while collected < total:
        buffer = np.asarray(stream.read(), dtype=np.uint8)
        if buffer.size == 0:
            error_msg = "Chromosome stream ended before its reported size"
            log.error(f"{error_msg} ({collected:,} of {total:,} units)")
            raise StreamError(error_msg, details=f"{collected} of {total} units")
        buffer = buffer[: total - collected]
        chunks.append(buffer)
        collected += buffer.size

    units = np.concatenate(chunks) if chunks else np.empty(0, dtype=np.uint8)
    return unpack_units(units)
