"""REST product store.

HTTP client for a PostgREST-style table endpoint (the kind hosted
Postgres backends expose). Descriptors are rendered as horizontal
filter parameters; the exact count is requested with
``Prefer: count=exact`` and read back from ``Content-Range``.
"""

from typing import Any

import httpx
import structlog

from catalog_browser.domain.exceptions import QueryExecutionError
from catalog_browser.domain.products import ProductSummary
from catalog_browser.domain.query import Predicate, PredicateOp, QueryDescriptor
from catalog_browser.domain.store import QueryResult

logger = structlog.get_logger()

_RESERVED = set(',.:()"\\ ')

_OPERATORS: dict[PredicateOp, str] = {
    PredicateOp.EQ: "eq",
    PredicateOp.GT: "gt",
    PredicateOp.GTE: "gte",
    PredicateOp.LT: "lt",
    PredicateOp.LTE: "lte",
}


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _escape_like(text: str) -> str:
    # PostgREST maps every '*' to '%', so only the SQL wildcards can be escaped
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _quote(value: str) -> str:
    """Quote a value containing reserved characters."""
    if not any(ch in _RESERVED for ch in value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def to_params(descriptor: QueryDescriptor, select: str = "*") -> list[tuple[str, str]]:
    """Render a descriptor as PostgREST query parameters.

    Args:
        descriptor: Query descriptor.
        select: Column selection.

    Returns:
        Ordered list of query parameters.
    """
    params: list[tuple[str, str]] = [("select", select)]
    if descriptor.active_only:
        params.append(("is_active", "eq.true"))

    for predicate in descriptor.predicates:
        params.append(_predicate_param(predicate))

    ordering = descriptor.ordering
    order = f"{ordering.field}.{ordering.direction.value}"
    if ordering.nulls_last:
        order += ".nullslast"
    params.append(("order", f"{order},id.asc"))
    params.append(("offset", str(descriptor.window.offset)))
    params.append(("limit", str(descriptor.window.limit)))
    return params


def _predicate_param(predicate: Predicate) -> tuple[str, str]:
    if predicate.op is PredicateOp.CONTAINS_ANY:
        # ilike wildcard is '*' in URLs
        pattern = _quote(f"*{_escape_like(predicate.value)}*")
        terms = ",".join(f"{field}.ilike.{pattern}" for field in predicate.fields)
        return "or", f"({terms})"
    if predicate.op is PredicateOp.IN:
        members = ",".join(_quote(_format_value(v)) for v in predicate.value)
        return predicate.field, f"in.({members})"
    return predicate.field, f"{_OPERATORS[predicate.op]}.{_format_value(predicate.value)}"


def parse_content_range(header: str | None) -> int | None:
    """Read the total from a ``Content-Range`` header.

    Args:
        header: Header value such as ``0-35/100`` or ``*/0``.

    Returns:
        Total count, or None when the total is unknown.
    """
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1].strip()
    if not total.isdigit():
        return None
    return int(total)


class RestProductStore:
    """Product store over a PostgREST-style HTTP endpoint.

    Example usage:
        store = RestProductStore("https://db.example.com/rest/v1", api_key="...")
        result = await store.execute(descriptor)
        await store.close()
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        table: str = "products",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            base_url: REST endpoint base URL.
            api_key: API key sent as ``apikey`` and bearer token.
            table: Table path segment.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.table = table
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self.api_key:
                headers["apikey"] = self.api_key
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def execute(self, descriptor: QueryDescriptor) -> QueryResult:
        """Execute a query descriptor over HTTP.

        Args:
            descriptor: Query descriptor.

        Returns:
            Matching rows and the total count if requested.

        Raises:
            QueryExecutionError: On transport errors, non-2xx responses
                or malformed bodies.
        """
        client = await self._get_client()
        headers = {"Prefer": "count=exact"} if descriptor.with_count else {}

        try:
            logger.debug("Making store request", table=self.table, query=descriptor.cache_key())
            response = await client.get(
                f"/{self.table}",
                params=to_params(descriptor),
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.error("Store request timeout", table=self.table, error=str(e))
            raise QueryExecutionError("rest", f"Request timed out: {e}") from e
        except httpx.RequestError as e:
            logger.error("Store request failed", table=self.table, error=str(e))
            raise QueryExecutionError("rest", f"Request failed: {e}") from e

        if response.status_code >= 400:
            logger.warning(
                "Store returned error",
                table=self.table,
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise QueryExecutionError(
                "rest",
                f"Query rejected: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            rows = response.json()
        except ValueError as e:
            raise QueryExecutionError("rest", "Malformed response body", response.status_code) from e
        if not isinstance(rows, list):
            raise QueryExecutionError("rest", "Expected a JSON array of rows", response.status_code)

        try:
            items = [ProductSummary.from_mapping(row) for row in rows]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Store returned malformed row", table=self.table, error=str(e))
            raise QueryExecutionError("rest", "Malformed product row", response.status_code) from e

        total = parse_content_range(response.headers.get("Content-Range")) if descriptor.with_count else None
        return QueryResult(items=items, total_count=total)
