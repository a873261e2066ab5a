"""
Tests for SymmetricPairStore construction and lookup.
"""

import math
import threading
from unittest.mock import Mock

import numpy as np
import pytest

from pairstore.errors import (
    InvalidInputError,
    UnsupportedConfigurationError,
    UpstreamScoringError,
)
from pairstore.pairs import PairScore
from pairstore.store import SymmetricPairStore


@pytest.fixture
def scores():
    """Similarity values for every pair over {A, B, C, D}."""
    return {
        ("A", "B"): 0.1,
        ("A", "C"): 0.7,
        ("A", "D"): -0.4,
        ("B", "C"): 0.9,
        ("B", "D"): 0.3,
        ("C", "D"): -0.9,
    }


@pytest.fixture
def table_scorer(scores):
    """Scorer that looks values up in the scores fixture, either order."""
    def scorer(a, b):
        return scores.get((a, b), scores.get((b, a)))
    return scorer


class TestBuild:
    """Tests for building a store from triples."""

    def test_lookup_is_symmetric(self):
        """A stored pair is found from either order."""
        store = SymmetricPairStore.build([PairScore("B", "A", 0.4)])
        assert store.similarity("A", "B") == 0.4
        assert store.similarity("B", "A") == 0.4

    def test_self_similarity_is_one(self):
        """similarity(X, X) is 1.0 for stored and unknown entities alike."""
        store = SymmetricPairStore.build([PairScore("A", "B", -0.5)])
        assert store.similarity("A", "A") == 1.0
        assert store.similarity("nobody", "nobody") == 1.0

    def test_unknown_pairs_are_nan(self):
        """Pairs never supplied return NaN."""
        store = SymmetricPairStore.build([PairScore("A", "B", 0.5)])
        assert math.isnan(store.similarity("A", "C"))
        assert math.isnan(store.similarity("C", "A"))
        assert math.isnan(store.similarity("X", "Y"))

    def test_no_transitive_values(self):
        """Values are not inferred through shared entities."""
        store = SymmetricPairStore.build([PairScore("A", "B", 0.5), PairScore("B", "C", 0.5)])
        assert math.isnan(store.similarity("A", "C"))

    def test_last_write_wins(self):
        """A later triple for the same unordered pair overwrites the earlier one."""
        store = SymmetricPairStore.build([PairScore("A", "B", 0.2), PairScore("B", "A", 0.9)])
        assert store.similarity("A", "B") == 0.9
        assert len(store) == 1

    def test_self_pairs_are_not_stored(self):
        """A self-pair leaves the store empty."""
        store = SymmetricPairStore.build([PairScore("A", "A", 0.5)])
        assert len(store) == 0
        assert list(store.pairs()) == []
        assert store.similarity("A", "A") == 1.0

    def test_zero_similarity_is_not_unknown(self):
        """A stored 0.0 is distinct from the NaN sentinel."""
        store = SymmetricPairStore.build([PairScore("A", "B", 0.0)])
        assert store.similarity("A", "B") == 0.0
        assert ("A", "B") in store

    def test_integer_entities(self):
        """Entities of any ordered, hashable type can be used."""
        store = SymmetricPairStore.build([PairScore(7, 3, 0.6), PairScore(3, 11, -0.1)])
        assert store.similarity(3, 7) == 0.6
        assert store.similarity(11, 3) == -0.1
        assert store.entities() == [3, 7, 11]

    def test_stores_each_pair_once_in_canonical_order(self):
        """pairs() reports (lo, hi) keys regardless of input order."""
        store = SymmetricPairStore([PairScore("C", "A", 0.3), PairScore("B", "A", 0.2)])
        assert sorted((p.entity_a, p.entity_b) for p in store.pairs()) == [("A", "B"), ("A", "C")]

    def test_empty_input(self):
        """An empty store only knows self-similarity."""
        store = SymmetricPairStore([])
        assert len(store) == 0
        assert store.similarity("A", "A") == 1.0
        assert math.isnan(store.similarity("A", "B"))

    def test_accepts_generators(self):
        """Triples may come from a one-shot generator."""
        store = SymmetricPairStore(PairScore("A", x, 0.5) for x in "BCD")
        assert len(store) == 3


class TestTopKConstruction:
    """Tests for building with max_to_keep."""

    def test_keeps_strongest_pairs_only(self, scores):
        """max_to_keep=2 retains the two highest values; the rest are unknown."""
        pairs = [PairScore(a, b, v) for (a, b), v in scores.items()]
        store = SymmetricPairStore(pairs, max_to_keep=2)

        assert len(store) == 2
        assert store.similarity("C", "B") == 0.9
        assert store.similarity("A", "C") == 0.7
        for a, b in [("A", "B"), ("A", "D"), ("B", "D"), ("C", "D")]:
            assert math.isnan(store.similarity(a, b))

    def test_invalid_max_to_keep(self, scores):
        """max_to_keep must be positive."""
        pairs = [PairScore(a, b, v) for (a, b), v in scores.items()]
        with pytest.raises(InvalidInputError):
            SymmetricPairStore(pairs, max_to_keep=0)


class TestFromScorer:
    """Tests for building from a scorer and an entity universe."""

    def test_scores_every_pair(self, scores, table_scorer):
        """All N(N-1)/2 pairs are stored with the scorer's values."""
        store = SymmetricPairStore.from_scorer(table_scorer, ["A", "B", "C", "D"])
        assert len(store) == 6
        for (a, b), value in scores.items():
            assert store.similarity(b, a) == value

    def test_with_max_to_keep(self, table_scorer):
        """Top-K filtering applies to scorer-driven construction."""
        store = SymmetricPairStore.from_scorer(table_scorer, ["A", "B", "C", "D"], max_to_keep=2)
        assert len(store) == 2
        assert store.similarity("B", "C") == 0.9
        assert math.isnan(store.similarity("B", "D"))

    def test_entity_source_object(self, table_scorer):
        """An object exposing entities() is read once."""
        source = Mock()
        source.entities.return_value = iter(["D", "A", "C", "B"])
        store = SymmetricPairStore.from_scorer(table_scorer, source)
        source.entities.assert_called_once_with()
        assert len(store) == 6

    def test_entity_source_get_entities(self, table_scorer):
        """A data-model style get_entities() is also accepted."""
        class DataModel:
            def get_entities(self):
                return ["A", "B"]

        store = SymmetricPairStore.from_scorer(table_scorer, DataModel())
        assert store.similarity("A", "B") == 0.1

    def test_store_as_scorer(self, scores):
        """One store can score the universe for another."""
        base = SymmetricPairStore(PairScore(a, b, v) for (a, b), v in scores.items())
        derived = SymmetricPairStore.from_scorer(base, ["A", "B", "C"], max_to_keep=1)
        assert derived.similarity("B", "C") == 0.9
        assert len(derived) == 1

    def test_scorer_failure_aborts_construction(self):
        """No store is returned when the scorer raises."""
        scorer = Mock(side_effect=[0.5, RuntimeError("backend down")])
        with pytest.raises(UpstreamScoringError) as exc_info:
            SymmetricPairStore.from_scorer(scorer, ["A", "B", "C"])
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_scorer_failure_aborts_top_k_construction(self):
        """Scorer failures propagate through the top-K pre-pass too."""
        scorer = Mock(side_effect=ValueError("bad"))
        with pytest.raises(UpstreamScoringError):
            SymmetricPairStore.from_scorer(scorer, ["A", "B"], max_to_keep=1)

    def test_scorer_nan_aborts_construction(self):
        """A scorer returning NaN is rejected like any invalid triple."""
        with pytest.raises(InvalidInputError):
            SymmetricPairStore.from_scorer(lambda a, b: float("nan"), ["A", "B"])

    def test_empty_universe_is_rejected(self, table_scorer):
        """There is nothing to enumerate over zero entities."""
        with pytest.raises(InvalidInputError):
            SymmetricPairStore.from_scorer(table_scorer, [])

    def test_single_entity_universe(self, table_scorer):
        """One entity yields an empty store."""
        store = SymmetricPairStore.from_scorer(table_scorer, ["A"])
        assert len(store) == 0


class TestStoreInterface:
    """Tests for the unsupported setter, refresh and read-only views."""

    @pytest.fixture
    def store(self):
        return SymmetricPairStore([
            PairScore("A", "B", 0.5),
            PairScore("C", "B", -0.2),
        ])

    def test_preference_inferrer_is_unsupported(self, store):
        """Setting an inferrer raises UnsupportedConfigurationError."""
        with pytest.raises(UnsupportedConfigurationError) as exc_info:
            store.set_preference_inferrer(object())
        assert exc_info.value.operation == "set_preference_inferrer"
        assert isinstance(exc_info.value, NotImplementedError)

    def test_refresh_is_a_no_op(self, store):
        """refresh() changes nothing."""
        before = [store.similarity(a, b) for a in "ABCD" for b in "ABCD"]
        assert store.refresh() is None
        store.refresh(already_refreshed=[store])
        after = [store.similarity(a, b) for a in "ABCD" for b in "ABCD"]
        assert np.array_equal(np.array(before), np.array(after), equal_nan=True)

    def test_callable(self, store):
        """Calling the store is the same as similarity()."""
        assert store("B", "A") == 0.5

    def test_contains(self, store):
        """Membership checks either order and excludes self-pairs."""
        assert ("B", "A") in store
        assert ("B", "C") in store
        assert ("A", "C") not in store
        assert ("A", "A") not in store

    def test_entities(self, store):
        """entities() lists every entity with a stored pair."""
        assert store.entities() == ["A", "B", "C"]

    def test_to_matrix(self, store):
        """Dense view is symmetric with a unit diagonal and NaN gaps."""
        matrix = store.to_matrix(["A", "B", "C"])
        assert matrix.shape == (3, 3)
        assert np.all(np.diag(matrix) == 1.0)
        assert matrix[0, 1] == matrix[1, 0] == 0.5
        assert matrix[1, 2] == matrix[2, 1] == -0.2
        assert np.isnan(matrix[0, 2]) and np.isnan(matrix[2, 0])

    def test_to_matrix_defaults_to_stored_entities(self, store):
        """Without arguments the matrix covers entities()."""
        assert store.to_matrix().shape == (3, 3)

    def test_repr(self, store):
        assert repr(store) == "SymmetricPairStore(pairs=2)"

    def test_concurrent_readers(self, store):
        """Lookups from several threads see the same values."""
        results = []

        def read():
            results.append([store.similarity("A", "B"), store.similarity("B", "C")])

        threads = [threading.Thread(target=read) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == [[0.5, -0.2]] * 8
