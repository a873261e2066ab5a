"""
Lazy triangular enumeration of every unordered pair in an entity list.

Pairs are produced row-major: for ``i`` in ``0..N-2`` and ``j`` in
``i+1..N-1`` the sequence yields ``(entities[i], entities[j])``. Nothing is
materialized up front; each score is computed when its pair is requested.
"""

import logging
from typing import Any, Iterator, Sequence

from .errors import InvalidInputError, SequenceExhaustedError, UpstreamScoringError
from .pairs import PairScore
from .types import Scorer, resolve_scorer

logger = logging.getLogger(__name__)


class AllPairsSequence(Iterator[PairScore]):
    """
    Forward-only, single-use sequence of ``N * (N - 1) / 2`` scored pairs.

    The entity sequence is borrowed, not copied: it must not be mutated
    while the sequence is being consumed. Instances are not safe to share
    between consumers; create one per traversal.
    """

    def __init__(self, entities: Sequence[Any], scorer: Scorer) -> None:
        """
        Args:
            entities: Indexable, stable-order entity list (at least one entity)
            scorer: ``(a, b) -> float`` callable or object with ``similarity(a, b)``
        """
        size = len(entities)
        if size == 0:
            raise InvalidInputError("Cannot enumerate pairs over an empty entity list",
                                    field='entities', value=size)
        self._entities = entities
        self._score = resolve_scorer(scorer)
        self._size = size
        self._i = 0
        self._j = 1
        self._produced = 0

    def has_next(self) -> bool:
        """True while the outer cursor has not reached the last entity."""
        return self._i < self._size - 1

    def next(self) -> PairScore:
        """
        Score and return the pair under the cursors, then advance.

        Raises:
            SequenceExhaustedError: no pairs remain
            UpstreamScoringError: the scorer raised; the traversal is over
            InvalidInputError: the scorer returned NaN or a value outside [-1, 1]
        """
        if not self.has_next():
            raise SequenceExhaustedError(produced=self._produced)

        first = self._entities[self._i]
        second = self._entities[self._j]
        try:
            value = self._score(first, second)
        except Exception as exc:
            position = (self._i, self._j)
            logger.error("Scorer failed on pair (%r, %r) at position %s: %s",
                         first, second, position, exc)
            # Park the cursors so the sequence cannot resume past the failure.
            self._i = self._size
            raise UpstreamScoringError(
                f"Scorer failed for ({first!r}, {second!r})",
                entity_a=first,
                entity_b=second,
                position=position,
            ) from exc

        result = PairScore(first, second, value)
        self._produced += 1
        self._j += 1
        if self._j == self._size:
            self._i += 1
            self._j = self._i + 1
        return result

    @property
    def produced(self) -> int:
        """Number of pairs returned so far."""
        return self._produced

    def __next__(self) -> PairScore:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def __iter__(self) -> "AllPairsSequence":
        return self

    def __len__(self) -> int:
        """Number of pairs still to be produced."""
        if not self.has_next():
            return 0
        remaining_rows = self._size - 1 - self._i
        # Pairs in rows i+1.. plus what is left of row i.
        return remaining_rows * (remaining_rows - 1) // 2 + (self._size - self._j)

    def __repr__(self) -> str:
        return f"AllPairsSequence(size={self._size}, produced={self._produced}, remaining={len(self)})"
