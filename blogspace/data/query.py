"""
BlogSpace — Table Query Builder
================================

What:  Fluent builder for one request against one backend collection.
How:   Accumulates the REST dialect's query parameters (`col=eq.value`,
       `order=col.desc`, `limit=n`, `select=...`) and sends them through the
       DataClient when awaited via `execute()`, `single()` or `maybe_single()`.

Example:
    rows = await (
        client.table("posts")
        .select("*, blog:blogs(*)")
        .eq("published", True)
        .order("published_at", desc=True)
        .limit(9)
        .execute()
    )
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from blogspace.exceptions import BackendError, NotFoundError, ValidationError

if TYPE_CHECKING:
    from blogspace.data.client import DataClient


def format_value(value: Any) -> str:
    """Render a Python value the way the REST filter grammar expects it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class TableQuery:
    """
    A single pending request against `table`.

    Reads are the default; `insert`, `update` and `delete` switch the HTTP
    method. Writes ask for the affected rows back
    (`Prefer: return=representation`) except deletes.
    """

    def __init__(self, client: "DataClient", table: str):
        self._client = client
        self.table = table
        self.method = "GET"
        self.body: Optional[Any] = None
        self._columns: Optional[str] = None
        self._filters: List[Tuple[str, str]] = []
        self._order: List[str] = []
        self._limit: Optional[int] = None

    # ── Verbs ─────────────────────────────────────────────────────────────

    def select(self, columns: str = "*") -> "TableQuery":
        # Whitespace is not significant in the select grammar; drop it so
        # multi-line embeds stay valid in a query string
        self._columns = "".join(columns.split())
        return self

    def insert(self, values: Any) -> "TableQuery":
        self.method = "POST"
        self.body = values
        return self

    def update(self, values: Dict[str, Any]) -> "TableQuery":
        self.method = "PATCH"
        self.body = values
        return self

    def delete(self) -> "TableQuery":
        self.method = "DELETE"
        return self

    # ── Modifiers ─────────────────────────────────────────────────────────

    def eq(self, column: str, value: Any) -> "TableQuery":
        self._filters.append((column, f"eq.{format_value(value)}"))
        return self

    def is_(self, column: str, value: Optional[bool]) -> "TableQuery":
        self._filters.append((column, f"is.{format_value(value)}"))
        return self

    def order(self, column: str, desc: bool = False) -> "TableQuery":
        self._order.append(f"{column}.{'desc' if desc else 'asc'}")
        return self

    def limit(self, count: int) -> "TableQuery":
        self._limit = count
        return self

    # ── Request assembly ──────────────────────────────────────────────────

    @property
    def path(self) -> str:
        return f"/rest/v1/{self.table}"

    def params(self) -> List[Tuple[str, str]]:
        """Query parameters in the order the backend receives them."""
        params: List[Tuple[str, str]] = []
        if self._columns is not None:
            params.append(("select", self._columns))
        elif self.method == "GET":
            params.append(("select", "*"))
        params.extend(self._filters)
        if self._order:
            params.append(("order", ",".join(self._order)))
        if self._limit is not None:
            params.append(("limit", str(self._limit)))
        return params

    def prefer(self) -> Optional[str]:
        if self.method in ("POST", "PATCH"):
            return "return=representation"
        if self.method == "DELETE":
            return "return=minimal"
        return None

    # ── Execution ─────────────────────────────────────────────────────────

    async def execute(self) -> List[Dict[str, Any]]:
        """
        Send the request and return the affected or selected rows.

        Raises:
            ValidationError: update/delete without any filter
            BackendError: non-2xx response or unreachable backend
        """
        if self.method in ("PATCH", "DELETE") and not self._filters:
            raise ValidationError(
                f"Refusing to {self.method.lower()} every row of '{self.table}'",
                context={"table": self.table},
            )
        data = await self._client.request(
            self.method,
            self.path,
            params=self.params(),
            json=self.body,
            prefer=self.prefer(),
        )
        if data is None:
            return []
        if isinstance(data, dict):
            return [data]
        return list(data)

    async def single(self) -> Dict[str, Any]:
        """Exactly one row, or NotFoundError / BackendError."""
        rows = await self.execute()
        if not rows:
            raise NotFoundError(resource=self.table.rstrip("s"), context={"table": self.table})
        if len(rows) > 1:
            raise BackendError(
                f"Expected a single {self.table} row, got {len(rows)}",
                context={"table": self.table, "rows": len(rows)},
            )
        return rows[0]

    async def maybe_single(self) -> Optional[Dict[str, Any]]:
        """Zero or one row; more than one is a BackendError."""
        rows = await self.execute()
        if not rows:
            return None
        if len(rows) > 1:
            raise BackendError(
                f"Expected at most one {self.table} row, got {len(rows)}",
                context={"table": self.table, "rows": len(rows)},
            )
        return rows[0]
