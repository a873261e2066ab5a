"""Top-K selection over scored pairs."""

import heapq
import logging
from operator import attrgetter
from typing import Iterable, List

from .errors import InvalidInputError
from .pairs import PairScore

logger = logging.getLogger(__name__)

_by_value = attrgetter("value")


def top_pairs(max_to_keep: int, pairs: Iterable[PairScore]) -> List[PairScore]:
    """
    Keep the ``max_to_keep`` pairs with the highest similarity.

    The input is consumed exactly once and at most ``max_to_keep`` pairs are
    held at any time, so a lazy pair sequence can be passed straight in.
    Pairs come back sorted from highest value to lowest; pairs with equal
    values keep the order in which they were supplied.

    Args:
        max_to_keep: Maximum number of pairs to retain (positive)
        pairs: Scored pairs, in any order

    Returns:
        At most ``max_to_keep`` pairs, strongest first
    """
    if isinstance(max_to_keep, bool) or not isinstance(max_to_keep, int) or max_to_keep < 1:
        raise InvalidInputError(f"max_to_keep must be a positive integer, got {max_to_keep!r}",
                                field='max_to_keep', value=max_to_keep)

    kept = heapq.nlargest(max_to_keep, pairs, key=_by_value)

    logger.debug("Kept %d pairs (max_to_keep=%d)", len(kept), max_to_keep)
    return kept
