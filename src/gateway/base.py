# the query/command contract every backend implementation fulfils
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Sequence

from gateway.models import Identity

Row = Dict[str, Any]


class GatewayError(Exception):
    """
    A query or mutation was rejected, or the backend could not be reached.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthError(GatewayError):
    """
    Credentials were rejected by the authentication API.
    """


@dataclass(frozen=True)
class Filter:
    column: str
    op: Literal["eq", "in"]
    value: Any


@dataclass(frozen=True)
class OrderBy:
    column: str
    descending: bool = True


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def in_(column: str, values: Sequence[Any]) -> Filter:
    return Filter(column, "in", tuple(values))


def parse_columns(columns: str) -> List[str]:
    """Split a "a, b, c" column list; "*" yields an empty list (all columns)."""
    cols = [c.strip() for c in columns.split(",") if c.strip()]
    if cols == ["*"]:
        return []
    return cols


class DataGateway(ABC):
    """
    Thin client over a table store plus its authentication API.

    Rows travel as plain dicts; the crud module turns them into models.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Optional[OrderBy] = None,
    ) -> List[Row]: ...

    async def select_one(
        self, table: str, columns: str = "*", filters: Sequence[Filter] = ()
    ) -> Optional[Row]:
        """Return the first matching row or None."""
        rows = await self.select(table, columns, filters)
        return rows[0] if rows else None

    @abstractmethod
    async def select_count(self, table: str, filters: Sequence[Filter] = ()) -> int: ...

    @abstractmethod
    async def insert(self, table: str, row: Row) -> Row: ...

    @abstractmethod
    async def update(self, table: str, patch: Row, filters: Sequence[Filter]) -> None: ...

    @abstractmethod
    async def delete(self, table: str, filters: Sequence[Filter]) -> None: ...

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Identity: ...

    @abstractmethod
    async def sign_out(self) -> None: ...

    @abstractmethod
    async def get_current_identity(self) -> Optional[Identity]: ...

    async def aclose(self) -> None:
        """Release network or file resources; no-op by default."""
