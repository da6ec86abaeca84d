"""Domain layer.

Value objects, read models, the load state machine and the
query-execution interface shared by browsing and infrastructure.
"""

from catalog_browser.domain.exceptions import (
    BrowsingError,
    InvalidCriteriaError,
    InvalidStateTransitionError,
    QueryExecutionError,
)
from catalog_browser.domain.products import ProductSummary
from catalog_browser.domain.query import (
    Ordering,
    Predicate,
    PredicateOp,
    QueryDescriptor,
    RowWindow,
    SortDirection,
)
from catalog_browser.domain.state_machines import LoadStatus, validate_load_transition
from catalog_browser.domain.store import ProductStore, QueryResult

__all__ = [
    # Exceptions
    "BrowsingError",
    "InvalidCriteriaError",
    "InvalidStateTransitionError",
    "QueryExecutionError",
    # Read model
    "ProductSummary",
    # Query
    "Ordering",
    "Predicate",
    "PredicateOp",
    "QueryDescriptor",
    "RowWindow",
    "SortDirection",
    # State machine
    "LoadStatus",
    "validate_load_transition",
    # Store interface
    "ProductStore",
    "QueryResult",
]
