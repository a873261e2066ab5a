"""Collaborator protocols: scorers and entity sources."""

from typing import Any, Callable, Iterable, List, Protocol, Union, runtime_checkable


@runtime_checkable
class SimilarityProvider(Protocol):
    """Anything exposing ``similarity(a, b) -> float``."""

    def similarity(self, a: Any, b: Any) -> float:
        ...


ScoreFunction = Callable[[Any, Any], float]
Scorer = Union[ScoreFunction, SimilarityProvider]


def resolve_scorer(scorer: Scorer) -> ScoreFunction:
    """
    Normalize a scorer to a plain ``(a, b) -> float`` callable.

    Plain callables are used as-is; otherwise the object's bound
    ``similarity`` method is used.
    """
    if callable(scorer):
        return scorer
    if isinstance(scorer, SimilarityProvider):
        return scorer.similarity
    raise TypeError(f"Scorer must be callable or provide similarity(a, b), got {type(scorer).__name__}")


def resolve_entities(source: Any) -> List[Any]:
    """
    Materialize an entity source into a list, once.

    Accepts a plain iterable or a data-model style object exposing
    ``entities()`` or ``get_entities()``.
    """
    for attr in ('entities', 'get_entities'):
        getter = getattr(source, attr, None)
        if callable(getter):
            return list(getter())
    if isinstance(source, Iterable):
        return list(source)
    raise TypeError(f"Entity source must be iterable, got {type(source).__name__}")
