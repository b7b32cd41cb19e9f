"""
genome-diff: compare the chromosomes of two people and report where they differ.
"""

from .alignment import AlignmentEngine, Difference
from .bases import BASES_PER_UNIT, Base, decode, pack, pack_sequence, unpack, unpack_units
from .comparator import Comparator, ComparisonSummary, ChromosomeResult, NUM_CHROMOSOMES, compare
from .config import ComparisonSettings
from .exceptions import (
    GenomeDiffError,
    InvalidPersonError,
    InvalidBaseError,
    PackingError,
    StreamError,
    AlignmentError,
    ComparisonError,
    ConfigurationError,
    FileError,
)
from .logging_setup import setup_logging
from .sex import SexChromosome, classify, classify_stream
from .streams import ChromosomeStream, Person, MemoryChromosomeStream, MemoryPerson, materialize
from .telomere import TELOMERE_MOTIF, data_range, trim_range

__version__ = "0.1.0"

__all__ = [
    'AlignmentEngine',
    'Difference',
    'BASES_PER_UNIT',
    'Base',
    'decode',
    'pack',
    'pack_sequence',
    'unpack',
    'unpack_units',
    'Comparator',
    'ComparisonSummary',
    'ChromosomeResult',
    'NUM_CHROMOSOMES',
    'compare',
    'ComparisonSettings',
    'GenomeDiffError',
    'InvalidPersonError',
    'InvalidBaseError',
    'PackingError',
    'StreamError',
    'AlignmentError',
    'ComparisonError',
    'ConfigurationError',
    'FileError',
    'setup_logging',
    'SexChromosome',
    'classify',
    'classify_stream',
    'ChromosomeStream',
    'Person',
    'MemoryChromosomeStream',
    'MemoryPerson',
    'materialize',
    'TELOMERE_MOTIF',
    'data_range',
    'trim_range',
]
