"""
Similarity triples and canonical pair ordering.

A ``PairScore`` is validated once, when it is created, so nothing downstream
ever has to re-check it.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .errors import InvalidInputError

MIN_SIMILARITY = -1.0
MAX_SIMILARITY = 1.0


def canonical_pair(a: Any, b: Any) -> Optional[Tuple[Any, Any]]:
    """
    Order two entities so the lesser one comes first.

    Returns ``None`` when neither entity sorts before the other, i.e. when
    they are the same entity under the total order.
    """
    if a < b:
        return a, b
    if b < a:
        return b, a
    return None


@dataclass(frozen=True)
class PairScore:
    """
    Similarity ``value`` between ``entity_a`` and ``entity_b``.

    Instances order from highest similarity to lowest, so ``sorted()`` over
    a list of pairs puts the strongest relationship first. Equal values
    compare neither less nor greater.
    """
    entity_a: Any
    entity_b: Any
    value: float

    def __post_init__(self) -> None:
        if self.entity_a is None or self.entity_b is None:
            raise InvalidInputError(
                "An entity is missing",
                field='entity_a' if self.entity_a is None else 'entity_b',
            )
        value = self.value
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidInputError(f"Illegal value: {value!r}", field='value', value=value)
        value = float(value)
        if math.isnan(value) or value < MIN_SIMILARITY or value > MAX_SIMILARITY:
            raise InvalidInputError(f"Illegal value: {value}", field='value', value=value)
        object.__setattr__(self, 'value', value)

    @property
    def canonical(self) -> Optional[Tuple[Any, Any]]:
        """The ``(lo, hi)`` storage key, or ``None`` for a self-pair."""
        return canonical_pair(self.entity_a, self.entity_b)

    def __lt__(self, other: "PairScore") -> bool:
        if not isinstance(other, PairScore):
            return NotImplemented
        return self.value > other.value

    def __gt__(self, other: "PairScore") -> bool:
        if not isinstance(other, PairScore):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: "PairScore") -> bool:
        if not isinstance(other, PairScore):
            return NotImplemented
        return self.value >= other.value

    def __ge__(self, other: "PairScore") -> bool:
        if not isinstance(other, PairScore):
            return NotImplemented
        return self.value <= other.value

    def __str__(self) -> str:
        return f"PairScore[{self.entity_a},{self.entity_b}:{self.value}]"
