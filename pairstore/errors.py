"""
Error types for the pair store.

Four error kinds share one base class so callers can catch everything the
package raises with a single ``except PairStoreError``.
"""

from typing import Optional, Any, Dict


class PairStoreError(Exception):
    """
    Base exception for all pair store errors.

    Carries a structured ``details`` dict alongside the message.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize pair store error.

        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidInputError(PairStoreError, ValueError):
    """
    Raised when a pair, a parameter or a configuration value is invalid.

    Covers missing entities, NaN or out-of-range similarity values and
    empty entity universes.
    """

    def __init__(self, message: str,
                 field: Optional[str] = None,
                 value: Any = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize invalid input error.

        Args:
            message: Error message
            field: Name of the offending field or parameter
            value: The rejected value
            details: Additional error context
        """
        super().__init__(message, details)
        self.field = field
        self.value = value

        self.details.update({
            'field': field,
            'value': value
        })


class SequenceExhaustedError(PairStoreError, LookupError):
    """Raised when a pair sequence is advanced past its last pair."""

    def __init__(self, message: str = "No pairs remain",
                 produced: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.produced = produced
        self.details.update({'produced': produced})


class UpstreamScoringError(PairStoreError, RuntimeError):
    """
    Raised when the external scorer fails while pairs are being enumerated.

    The scorer's own exception is chained as ``__cause__``.
    """

    def __init__(self, message: str,
                 entity_a: Any = None,
                 entity_b: Any = None,
                 position: Optional[tuple] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize upstream scoring error.

        Args:
            message: Error message
            entity_a: First entity passed to the scorer
            entity_b: Second entity passed to the scorer
            position: ``(i, j)`` enumeration indices of the failing pair
            details: Additional error context
        """
        super().__init__(message, details)
        self.entity_a = entity_a
        self.entity_b = entity_b
        self.position = position

        self.details.update({
            'entity_a': entity_a,
            'entity_b': entity_b,
            'position': position
        })


class UnsupportedConfigurationError(PairStoreError, NotImplementedError):
    """Raised when a store is asked to accept a configuration it cannot honour."""

    def __init__(self, message: str,
                 operation: str = 'general',
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.operation = operation
        self.details.update({'operation': operation})


def is_invalid_input(error: Exception) -> bool:
    """Check if error is an input validation failure."""
    return isinstance(error, InvalidInputError)


def is_exhaustion(error: Exception) -> bool:
    """Check if error signals an exhausted pair sequence."""
    return isinstance(error, SequenceExhaustedError)


def is_upstream_failure(error: Exception) -> bool:
    """Check if error wraps a scorer failure."""
    return isinstance(error, UpstreamScoringError)


def is_unsupported(error: Exception) -> bool:
    """Check if error is an unsupported configuration request."""
    return isinstance(error, UnsupportedConfigurationError)
