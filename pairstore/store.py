"""
Symmetric store of precomputed pairwise similarities.

Each unordered pair is stored once, under its canonical ``(lo, hi)`` key,
in a two-level mapping ``lo -> {hi -> value}``. The same canonicalization
is applied on lookup, so ``similarity(a, b) == similarity(b, a)``.
Self-similarity is never stored: it is always 1.0.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .all_pairs import AllPairsSequence
from .errors import UnsupportedConfigurationError
from .pairs import PairScore, canonical_pair
from .topk import top_pairs
from .types import Scorer, resolve_entities

logger = logging.getLogger(__name__)

UNKNOWN = float('nan')


class SymmetricPairStore:
    """
    Read-only lookup of similarity between two entities.

    Built once from ``PairScore`` triples. When the same unordered pair is
    supplied more than once, the last value wins. After construction the
    store is never mutated and can be shared between reader threads.

    Entities must be hashable and mutually orderable with ``<``.
    """

    def __init__(self, pairs: Iterable[PairScore], max_to_keep: Optional[int] = None) -> None:
        """
        Args:
            pairs: Scored pairs to store
            max_to_keep: If given, only the strongest ``max_to_keep`` pairs are kept
        """
        if max_to_keep is not None:
            pairs = top_pairs(max_to_keep, pairs)
        self._similarity_maps: Dict[Any, Dict[Any, float]] = {}
        self._size = 0
        self._load(pairs)

    @classmethod
    def build(cls, pairs: Iterable[PairScore]) -> "SymmetricPairStore":
        """Build a store holding every supplied pair."""
        return cls(pairs)

    @classmethod
    def from_scorer(cls, scorer: Scorer, entities: Any,
                    max_to_keep: Optional[int] = None) -> "SymmetricPairStore":
        """
        Score every unordered pair of ``entities`` with ``scorer`` and store the results.

        Args:
            scorer: ``(a, b) -> float`` callable or object with ``similarity(a, b)``
            entities: Iterable of entities, or an object exposing ``entities()``
            max_to_keep: If given, only the strongest ``max_to_keep`` pairs are kept

        Raises:
            InvalidInputError: the universe is empty or the scorer returned an illegal value
            UpstreamScoringError: the scorer raised; no store is built
        """
        universe = resolve_entities(entities)
        logger.info("Scoring all pairs over %d entities", len(universe))
        return cls(AllPairsSequence(universe, scorer), max_to_keep=max_to_keep)

    def _load(self, pairs: Iterable[PairScore]) -> None:
        maps = self._similarity_maps
        skipped = 0
        overwritten = 0
        for pair in pairs:
            key = canonical_pair(pair.entity_a, pair.entity_b)
            if key is None:
                # similarity of an entity with itself is already assumed to be 1.0
                skipped += 1
                continue
            lo, hi = key
            row = maps.get(lo)
            if row is None:
                row = maps[lo] = {}
            if hi in row:
                overwritten += 1
            row[hi] = pair.value
        self._size = sum(len(row) for row in maps.values())

        if overwritten:
            logger.debug("%d pairs were supplied more than once; last value kept", overwritten)
        logger.info("Built similarity store with %d pairs (%d self-pairs skipped)",
                    self._size, skipped)

    def similarity(self, a: Any, b: Any) -> float:
        """
        Return the similarity between ``a`` and ``b``.

        1.0 when ``a`` and ``b`` are the same entity; NaN when no value was
        recorded for the pair. Test the result with ``math.isnan``.
        """
        key = canonical_pair(a, b)
        if key is None:
            return 1.0
        lo, hi = key
        row = self._similarity_maps.get(lo)
        if row is None:
            return UNKNOWN
        return row.get(hi, UNKNOWN)

    __call__ = similarity

    def set_preference_inferrer(self, inferrer: Any) -> None:
        """Not supported: this store only serves precomputed values."""
        raise UnsupportedConfigurationError(
            f"{type(self).__name__} serves precomputed similarities and cannot infer preferences",
            operation='set_preference_inferrer',
        )

    def refresh(self, already_refreshed: Optional[Iterable[Any]] = None) -> None:
        # Nothing to refresh: the store is immutable once built.
        pass

    def __len__(self) -> int:
        return self._size

    def __contains__(self, pair: Tuple[Any, Any]) -> bool:
        key = canonical_pair(*pair)
        if key is None:
            return False
        lo, hi = key
        return hi in self._similarity_maps.get(lo, {})

    def pairs(self) -> Iterator[PairScore]:
        """Yield stored pairs as ``PairScore(lo, hi, value)``."""
        for lo, row in self._similarity_maps.items():
            for hi, value in row.items():
                yield PairScore(lo, hi, value)

    def entities(self) -> List[Any]:
        """Sorted list of every entity that appears in a stored pair."""
        seen = set(self._similarity_maps)
        for row in self._similarity_maps.values():
            seen.update(row)
        return sorted(seen)

    def to_matrix(self, entities: Optional[Sequence[Any]] = None) -> np.ndarray:
        """
        Dense symmetric similarity matrix over ``entities``.

        Rows and columns follow the order of ``entities`` (default: every
        stored entity, sorted). The diagonal is 1.0 and unknown pairs are NaN.
        """
        if entities is None:
            entities = self.entities()
        n = len(entities)
        matrix = np.full((n, n), np.nan, dtype=np.float64)
        for i in range(n):
            matrix[i, i] = 1.0
            for j in range(i + 1, n):
                value = self.similarity(entities[i], entities[j])
                matrix[i, j] = value
                matrix[j, i] = value
        return matrix

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pairs={self._size})"
