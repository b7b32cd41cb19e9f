"""
Comparator module for genome-diff.
Drives sex classification, telomere trimming and alignment across all
chromosomes of two people and assembles the differences.
"""

import time
import logging
import concurrent.futures
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from rich.console import Console
from rich.progress import Progress, TextColumn, BarColumn, TimeElapsedColumn

from genome_diff.alignment import AlignmentEngine, Difference
from genome_diff.config import ComparisonSettings
from genome_diff.exceptions import ComparisonError, GenomeDiffError, InvalidPersonError
from genome_diff.sex import SEX_CHROMOSOME_IDX, SexChromosome, classify_stream
from genome_diff.streams import materialize
from genome_diff.telomere import trim_range

# Configure logging
log = logging.getLogger("genome-diff")

# Number of chromosomes in a valid sample
NUM_CHROMOSOMES = 23

COMPARED = "compared"
SKIPPED = "skipped"


@dataclass
class ChromosomeResult:
    """Outcome of comparing one chromosome."""

    chromosome_idx: int
    status: str
    range_a: Optional[Tuple[int, int]] = None
    range_b: Optional[Tuple[int, int]] = None
    sex_a: Optional[SexChromosome] = None
    sex_b: Optional[SexChromosome] = None
    differences: List[Difference] = field(default_factory=list)


@dataclass
class ComparisonSummary:
    """Per-chromosome outcomes of one compare() call."""

    chromosomes: List[ChromosomeResult]
    elapsed_seconds: float = 0.0

    @property
    def differences(self) -> List[Difference]:
        return [diff for result in self.chromosomes for diff in result.differences]

    @property
    def compared(self) -> List[int]:
        return [r.chromosome_idx for r in self.chromosomes if r.status == COMPARED]

    @property
    def skipped(self) -> List[int]:
        return [r.chromosome_idx for r in self.chromosomes if r.status == SKIPPED]


class Comparator:
    """
    Compares two people chromosome by chromosome.

    Chromosome comparisons share no state, so with max_workers > 1 they run on
    a thread pool. Results are always assembled in chromosome order.
    """

    def __init__(
        self,
        settings: Optional[ComparisonSettings] = None,
        engine: Optional[AlignmentEngine] = None,
        console: Optional[Console] = None,
    ):
        """
        Initialize the comparator.

        Args:
            settings: Comparison settings, defaults when omitted
            engine: Alignment engine, built from settings when omitted
            console: Optional rich Console for the progress display
        """
        self.settings = (settings or ComparisonSettings()).validate()
        self.engine = engine or AlignmentEngine.from_settings(self.settings)
        self.console = console
        self.last_summary: Optional[ComparisonSummary] = None

    def compare(self, person_a, person_b) -> List[Difference]:
        """
        Compare two people.

        Args:
            person_a: First person (chromosome_count() / chromosome(index))
            person_b: Second person

        Returns:
            Differences grouped by ascending chromosome index

        Raises:
            InvalidPersonError: If either person does not have 23 chromosomes
        """
        count_a = person_a.chromosome_count()
        count_b = person_b.chromosome_count()
        if count_a != NUM_CHROMOSOMES or count_b != NUM_CHROMOSOMES:
            error_msg = "Chromosome data does not match expected size"
            log.error(f"{error_msg}: got {count_a} and {count_b}, expected {NUM_CHROMOSOMES}")
            raise InvalidPersonError(error_msg, details=f"got {count_a} and {count_b}, expected {NUM_CHROMOSOMES}")

        start_time = time.time()
        slots: List[Optional[ChromosomeResult]] = [None] * NUM_CHROMOSOMES

        with self._progress() as progress:
            task = progress.add_task("Comparing chromosomes", total=NUM_CHROMOSOMES)

            if self.settings.max_workers > 1:
                with concurrent.futures.ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
                    futures = {
                        executor.submit(self._compare_index, person_a, person_b, idx): idx
                        for idx in range(NUM_CHROMOSOMES)
                    }
                    for future in concurrent.futures.as_completed(futures):
                        slots[futures[future]] = future.result()
                        progress.advance(task)
            else:
                for idx in range(NUM_CHROMOSOMES):
                    slots[idx] = self._compare_index(person_a, person_b, idx)
                    progress.advance(task)

        summary = ComparisonSummary(chromosomes=slots, elapsed_seconds=time.time() - start_time)
        self.last_summary = summary

        differences = summary.differences
        log.info(
            f"Compared {len(summary.compared)} chromosomes "
            f"(skipped {len(summary.skipped)}), found {len(differences):,} differences "
            f"in {summary.elapsed_seconds:.2f}s"
        )
        return differences

    def compare_chromosome(self, chromosome_idx: int, stream_a, stream_b) -> ChromosomeResult:
        """
        Compare one chromosome of two people.

        Args:
            chromosome_idx: Index of the chromosome (0-22)
            stream_a: Person A's chromosome stream
            stream_b: Person B's chromosome stream

        Returns:
            ChromosomeResult with the data ranges and differences found
        """
        sex_a = sex_b = None
        if chromosome_idx == SEX_CHROMOSOME_IDX:
            sex_a = classify_stream(stream_a)
            sex_b = classify_stream(stream_b)

            # Sex chromosomes are only compared when both are the same known type
            if sex_a != sex_b or sex_a is SexChromosome.INDETERMINATE:
                log.info(
                    f"Skipping chromosome {chromosome_idx}: "
                    f"sex chromosomes {sex_a.value} / {sex_b.value}"
                )
                return ChromosomeResult(chromosome_idx, SKIPPED, sex_a=sex_a, sex_b=sex_b)

        bases_a = materialize(stream_a)
        bases_b = materialize(stream_b)
        a_start, a_end = trim_range(bases_a)
        b_start, b_end = trim_range(bases_b)

        differences = self.engine.align(
            bases_a[a_start:a_end],
            bases_b[b_start:b_end],
            chromosome_idx=chromosome_idx,
            offset_a=a_start,
            offset_b=b_start,
        )
        log.debug(
            f"Chromosome {chromosome_idx}: A [{a_start:,}, {a_end:,}) B [{b_start:,}, {b_end:,}), "
            f"{len(differences)} differences"
        )
        return ChromosomeResult(
            chromosome_idx,
            COMPARED,
            range_a=(a_start, a_end),
            range_b=(b_start, b_end),
            sex_a=sex_a,
            sex_b=sex_b,
            differences=differences,
        )

    def _compare_index(self, person_a, person_b, chromosome_idx: int) -> ChromosomeResult:
        try:
            stream_a = person_a.chromosome(chromosome_idx)
            stream_b = person_b.chromosome(chromosome_idx)
            return self.compare_chromosome(chromosome_idx, stream_a, stream_b)
        except GenomeDiffError:
            raise
        except Exception as e:
            error_msg = f"Error comparing chromosome {chromosome_idx}"
            log.error(f"{error_msg}: {e}")
            raise ComparisonError(error_msg, details=str(e)) from e

    def _progress(self) -> Progress:
        kwargs = {"disable": not self.settings.show_progress}
        if self.console is not None:
            kwargs["console"] = self.console
        return Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
            **kwargs,
        )


def compare(person_a, person_b, settings: Optional[ComparisonSettings] = None) -> List[Difference]:
    """
    Compare two people and return the regions where they differ.

    Args:
        person_a: First person
        person_b: Second person
        settings: Optional comparison settings

    Returns:
        Differences grouped by ascending chromosome index
    """
    return Comparator(settings=settings).compare(person_a, person_b)
