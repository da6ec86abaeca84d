"""Base classes for domain layer.

Provides the value object abstraction shared by criteria, query
descriptors and product read models.
"""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class ValueObject(ABC):
    """Base class for value objects.

    Value objects are immutable and compared by their attributes,
    not by identity. Two snapshots with equal fields are
    interchangeable, which is what lets query descriptors be used
    as cache keys.

    Example:
        @dataclass(frozen=True)
        class PriceRange(ValueObject):
            minimum: float
            maximum: float
    """

    pass
