import uuid
from typing import Dict, List, Optional, Sequence, Tuple

from gateway.base import AuthError, DataGateway, Filter, GatewayError, OrderBy, Row, parse_columns
from gateway.models import Identity


def _matches(row: Row, filters: Sequence[Filter]) -> bool:
    for f in filters:
        if f.op == "eq" and row.get(f.column) != f.value:
            return False
        if f.op == "in" and row.get(f.column) not in f.value:
            return False
    return True


class RecordingGateway(DataGateway):
    """
    In-memory gateway that records every call. Set ``fail[op]`` to make an
    operation ("select", "update", "sign_in", ...) raise that error.
    """

    def __init__(self, tables: Optional[Dict[str, List[Row]]] = None) -> None:
        self.tables: Dict[str, List[Row]] = {
            name: [dict(r) for r in rows] for name, rows in (tables or {}).items()
        }
        self.calls: List[Tuple[str, str]] = []
        self.fail: Dict[str, Exception] = {}
        self.accounts: Dict[str, Tuple[str, Identity]] = {}
        self.identity: Optional[Identity] = None

    def add_account(self, email: str, password: str, user_id: str) -> Identity:
        identity = Identity(user_id, email)
        self.accounts[email] = (password, identity)
        return identity

    def calls_to(self, op: str) -> List[Tuple[str, str]]:
        return [c for c in self.calls if c[0] == op]

    def _record(self, op: str, table: str = "") -> None:
        self.calls.append((op, table))
        if op in self.fail:
            raise self.fail[op]

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Optional[OrderBy] = None,
    ) -> List[Row]:
        self._record("select", table)
        rows = [r for r in self.tables.get(table, []) if _matches(r, filters)]
        if order is not None:
            rows.sort(key=lambda r: r.get(order.column) or "", reverse=order.descending)
        cols = parse_columns(columns)
        if cols:
            rows = [{c: r.get(c) for c in cols} for r in rows]
        return [dict(r) for r in rows]

    async def select_count(self, table: str, filters: Sequence[Filter] = ()) -> int:
        self._record("select_count", table)
        return len([r for r in self.tables.get(table, []) if _matches(r, filters)])

    async def insert(self, table: str, row: Row) -> Row:
        self._record("insert", table)
        stored = {"id": str(uuid.uuid4()), "created_at": "2030-01-01T00:00:00+00:00"}
        stored.update(row)
        self.tables.setdefault(table, []).append(stored)
        return dict(stored)

    async def update(self, table: str, patch: Row, filters: Sequence[Filter]) -> None:
        self._record("update", table)
        for r in self.tables.get(table, []):
            if _matches(r, filters):
                r.update(patch)

    async def delete(self, table: str, filters: Sequence[Filter]) -> None:
        self._record("delete", table)
        self.tables[table] = [
            r for r in self.tables.get(table, []) if not _matches(r, filters)
        ]

    async def sign_in(self, email: str, password: str) -> Identity:
        self._record("sign_in")
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthError("Invalid login credentials")
        self.identity = account[1]
        return self.identity

    async def sign_out(self) -> None:
        self._record("sign_out")
        self.identity = None

    async def get_current_identity(self) -> Optional[Identity]:
        self._record("get_current_identity")
        return self.identity


def network_down() -> GatewayError:
    return GatewayError("Network error: connection refused")
