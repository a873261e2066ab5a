"""Symmetric pairwise similarity store."""

__version__ = "0.1.0"

from .all_pairs import AllPairsSequence
from .errors import (
    InvalidInputError,
    PairStoreError,
    SequenceExhaustedError,
    UnsupportedConfigurationError,
    UpstreamScoringError,
)
from .pairs import PairScore, canonical_pair
from .store import SymmetricPairStore
from .topk import top_pairs

__all__ = [
    "AllPairsSequence",
    "InvalidInputError",
    "PairScore",
    "PairStoreError",
    "SequenceExhaustedError",
    "SymmetricPairStore",
    "UnsupportedConfigurationError",
    "UpstreamScoringError",
    "canonical_pair",
    "top_pairs",
    "__version__",
]
