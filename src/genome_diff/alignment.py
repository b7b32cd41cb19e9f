"""
Alignment module for genome-diff.

Two people share the overwhelming majority of their genome, so the engine
walks both sequences along a shared diagonal, confirming identical blocks with
a single array comparison. At the first mismatch it looks ahead for an anchor
(a run of identical bases on any diagonal within the search window), aligns
only the divergent stretch before the anchor with a banded edit-distance DP,
and emits one Difference per run of non-matching alignment columns.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from genome_diff.config import (
    DEFAULT_ANCHOR_LENGTH,
    DEFAULT_BAND_WIDTH,
    DEFAULT_BLOCK_SIZE,
    DEFAULT_SEARCH_WINDOW,
)
from genome_diff.exceptions import AlignmentError

# Configure logging
log = logging.getLogger("genome-diff")

# Alignment column operations
MATCH = 0
MISMATCH = 1
DELETE = 2   # base present in sequence A only
INSERT = 3   # base present in sequence B only

_INF = np.int64(1 << 40)

# (a_start, a_end, b_start, b_end)
Span = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Difference:
    """A region where two people's chromosome data diverge."""

    chromosome_idx: int
    # [start, end) base indices of the divergent segment in each person
    person_a: Tuple[int, int]
    person_b: Tuple[int, int]

    def __str__(self):
        return (
            f"Chromosome {self.chromosome_idx}"
            f" | first sample: [{self.person_a[0]}, {self.person_a[1]}]"
            f" second sample: [{self.person_b[0]}, {self.person_b[1]}]"
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "chromosome": self.chromosome_idx,
            "a_start": self.person_a[0],
            "a_end": self.person_a[1],
            "b_start": self.person_b[0],
            "b_end": self.person_b[1],
        }


class AlignmentEngine:
    """
    Banded, anchor-driven sequence comparison.

    Indels up to search_window bases re-synchronize on the anchor that ends
    them; the DP band is widened to the indel size when needed.
    """

    def __init__(
        self,
        block_size: int = DEFAULT_BLOCK_SIZE,
        anchor_length: int = DEFAULT_ANCHOR_LENGTH,
        band_width: int = DEFAULT_BAND_WIDTH,
        search_window: int = DEFAULT_SEARCH_WINDOW,
    ):
        """
        Initialize the alignment engine.

        Args:
            block_size: Bases compared at once while confirming identical runs
            anchor_length: Identical bases required to re-synchronize after a divergence
            band_width: Minimum half-width of the DP band
            search_window: Bases scanned ahead for an anchor
        """
        self.block_size = block_size
        self.anchor_length = anchor_length
        self.band_width = band_width
        self.search_window = search_window

    @classmethod
    def from_settings(cls, settings) -> "AlignmentEngine":
        return cls(
            block_size=settings.block_size,
            anchor_length=settings.anchor_length,
            band_width=settings.band_width,
            search_window=settings.search_window,
        )

    def align(
        self,
        seq_a,
        seq_b,
        chromosome_idx: int = 0,
        offset_a: int = 0,
        offset_b: int = 0,
    ) -> List[Difference]:
        """
        Compare two base sequences and report where they diverge.

        Args:
            seq_a: Base codes of person A's region
            seq_b: Base codes of person B's region
            chromosome_idx: Chromosome index recorded on each Difference
            offset_a: Position of seq_a[0] in person A's chromosome
            offset_b: Position of seq_b[0] in person B's chromosome

        Returns:
            Differences in ascending position order
        """
        a = np.asarray(seq_a, dtype=np.uint8)
        b = np.asarray(seq_b, dtype=np.uint8)
        n, m = len(a), len(b)

        spans: List[Span] = []
        i = j = 0
        while i < n and j < m:
            i, j = self._skip_identical(a, b, i, j)
            if i >= n or j >= m:
                break

            anchor = self._find_anchor(a, b, i, j)
            if anchor is not None:
                p, q = anchor
                spans.extend(self._divergent_spans(a, b, i, p, j, q))
                i, j = p, q
            elif n - i <= self.search_window and m - j <= self.search_window:
                # Nothing left to re-synchronize on: align the tails as a whole
                spans.extend(self._divergent_spans(a, b, i, n, j, m))
                i, j = n, m
            else:
                end_i = min(i + self.search_window, n)
                end_j = min(j + self.search_window, m)
                log.debug(
                    f"Chromosome {chromosome_idx}: no anchor within {self.search_window:,} bases "
                    f"of ({offset_a + i:,}, {offset_b + j:,})"
                )
                spans.append((i, end_i, j, end_j))
                i, j = end_i, end_j

        # One sequence ran out first: the rest of the other is divergent
        if i < n or j < m:
            spans.append((i, n, j, m))

        differences = [
            Difference(
                chromosome_idx=chromosome_idx,
                person_a=(offset_a + a0, offset_a + a1),
                person_b=(offset_b + b0, offset_b + b1),
            )
            for a0, a1, b0, b1 in _merge_adjacent(spans)
        ]
        log.debug(f"Chromosome {chromosome_idx}: {len(differences)} differences")
        return differences

    def _skip_identical(self, a: np.ndarray, b: np.ndarray, i: int, j: int) -> Tuple[int, int]:
        """Advance along the current diagonal up to the first mismatch."""
        remaining = min(len(a) - i, len(b) - j)
        pos = 0
        while pos < remaining:
            size = min(self.block_size, remaining - pos)
            block_a = a[i + pos:i + pos + size]
            block_b = b[j + pos:j + pos + size]
            if np.array_equal(block_a, block_b):
                pos += size
                continue
            pos += int(np.argmax(block_a != block_b))
            break
        return i + pos, j + pos

    def _find_anchor(self, a: np.ndarray, b: np.ndarray, i: int, j: int) -> Optional[Tuple[int, int]]:
        """
        Find the closest point after (i, j) where anchor_length bases agree.

        Every diagonal within search_window is a candidate, so indels wider
        than the DP band still re-synchronize. Candidates are ranked by the
        fewest edits that could reach them, then by smaller diagonal offset,
        then by offset sign. Diagonals are visited by increasing offset and
        the search stops once no farther diagonal can beat the best anchor.
        """
        k = self.anchor_length
        best = None
        for distance in range(self.search_window + 1):
            if best is not None and distance > best[0][0]:
                break
            for delta in ((0,) if distance == 0 else (-distance, distance)):
                if delta >= 0:
                    start_a, start_b = i, j + delta
                else:
                    start_a, start_b = i - delta, j
                length = min(self.search_window, len(a) - start_a, len(b) - start_b)
                if length < k:
                    continue

                equal = a[start_a:start_a + length] == b[start_b:start_b + length]
                counts = np.concatenate(([0], np.cumsum(equal, dtype=np.int64)))
                runs = np.flatnonzero(counts[k:] - counts[:-k] == k)
                if runs.size == 0:
                    continue

                t = int(runs[0])
                key = (t + distance, distance, delta)
                if best is None or key < best[0]:
                    best = (key, start_a + t, start_b + t)

        if best is None:
            return None
        return best[1], best[2]

    def _divergent_spans(self, a, b, a_start, a_end, b_start, b_end) -> List[Span]:
        """Align a divergent stretch and return its non-matching runs."""
        ops = self._banded_alignment(a[a_start:a_end], b[b_start:b_end])

        spans = []
        open_at = None
        ai, bj = a_start, b_start
        for op in ops:
            if op == MATCH:
                if open_at is not None:
                    spans.append((open_at[0], ai, open_at[1], bj))
                    open_at = None
            elif open_at is None:
                open_at = (ai, bj)

            if op != INSERT:
                ai += 1
            if op != DELETE:
                bj += 1

        if open_at is not None:
            spans.append((open_at[0], ai, open_at[1], bj))

        if ai != a_end or bj != b_end:
            raise AlignmentError(
                "Alignment does not cover the divergent region",
                details=f"reached ({ai}, {bj}), expected ({a_end}, {b_end})",
            )
        return spans

    def _banded_alignment(self, x: np.ndarray, y: np.ndarray) -> List[int]:
        """
        Global unit-cost alignment of x and y inside a diagonal band.

        Returns:
            Column operations from the start of both sequences
        """
        lx, ly = len(x), len(y)
        width = max(self.band_width, abs(lx - ly))

        dist = np.full((lx + 1, ly + 1), _INF, dtype=np.int64)
        first_row = min(ly, width)
        dist[0, :first_row + 1] = np.arange(first_row + 1)

        for r in range(1, lx + 1):
            lo = max(0, r - width)
            hi = min(ly, r + width)
            cols = np.arange(lo, hi + 1)

            # Best of diagonal and vertical moves, then resolve horizontal moves
            # with a running minimum along the row
            best = dist[r - 1, lo:hi + 1] + 1
            diag_lo = max(lo, 1)
            if diag_lo <= hi:
                substitution = (x[r - 1] != y[diag_lo - 1:hi]).astype(np.int64)
                diag = dist[r - 1, diag_lo - 1:hi] + substitution
                best[diag_lo - lo:] = np.minimum(best[diag_lo - lo:], diag)
            dist[r, lo:hi + 1] = np.minimum.accumulate(best - cols) + cols

        if dist[lx, ly] >= _INF:
            raise AlignmentError("Band does not reach the end of both sequences", details=f"{lx} x {ly}")

        ops = []
        r, c = lx, ly
        while r > 0 or c > 0:
            current = dist[r, c]
            if r > 0 and c > 0:
                cost = 0 if x[r - 1] == y[c - 1] else 1
                if dist[r - 1, c - 1] + cost == current:
                    ops.append(MATCH if cost == 0 else MISMATCH)
                    r -= 1
                    c -= 1
                    continue
            if r > 0 and dist[r - 1, c] + 1 == current:
                ops.append(DELETE)
                r -= 1
                continue
            if c > 0 and dist[r, c - 1] + 1 == current:
                ops.append(INSERT)
                c -= 1
                continue
            raise AlignmentError("Traceback left the alignment band", details=f"at ({r}, {c})")

        ops.reverse()
        return ops


def _merge_adjacent(spans: List[Span]) -> List[Span]:
    """Merge spans that touch in both coordinate spaces."""
    merged: List[Span] = []
    for span in spans:
        if merged and merged[-1][1] == span[0] and merged[-1][3] == span[2]:
            last = merged.pop()
            span = (last[0], span[1], last[2], span[3])
        merged.append(span)
    return merged
