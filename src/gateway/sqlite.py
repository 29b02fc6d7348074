# src/gateway/sqlite.py
from __future__ import annotations

import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from gateway.base import (
    AuthError,
    DataGateway,
    Filter,
    GatewayError,
    OrderBy,
    Row,
    parse_columns,
)
from gateway.database import connect, hash_password
from gateway.models import Identity
from utils.logger import get_logger

_logger = get_logger(__name__)

# tables reachable through the query/command interface, auth_users is private
SCHEMA: Dict[str, Tuple[str, ...]] = {
    "profiles": ("id", "email", "full_name", "role"),
    "products": (
        "id",
        "name",
        "price",
        "category",
        "description",
        "image_url",
        "stock",
        "created_at",
    ),
    "orders": (
        "id",
        "user_id",
        "total_amount",
        "status",
        "created_at",
        "shipping_address",
        "phone",
    ),
    "order_items": (
        "id",
        "order_id",
        "product_name",
        "product_image_url",
        "quantity",
        "price",
        "subtotal",
        "created_at",
    ),
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _check_table(table: str) -> Tuple[str, ...]:
    try:
        return SCHEMA[table]
    except KeyError:
        raise GatewayError(f'relation "{table}" does not exist') from None


def _check_columns(table: str, columns: Sequence[str]) -> None:
    known = _check_table(table)
    for col in columns:
        if col not in known:
            raise GatewayError(f'column {table}.{col} does not exist')


def _where(table: str, filters: Sequence[Filter]) -> Tuple[str, List[Any]]:
    """Build a WHERE clause; column names are checked, values are bound."""
    _check_columns(table, [f.column for f in filters])
    parts: List[str] = []
    params: List[Any] = []
    for f in filters:
        if f.op == "eq":
            parts.append(f"{f.column} = ?")
            params.append(f.value)
        elif f.op == "in":
            if not f.value:
                parts.append("1 = 0")
                continue
            parts.append(f"{f.column} IN ({', '.join('?' * len(f.value))})")
            params.extend(f.value)
        else:
            raise GatewayError(f"unsupported filter operator {f.op!r}")
    if not parts:
        return "", params
    return " WHERE " + " AND ".join(parts), params


class SqliteGateway(DataGateway):
    """
    Local implementation of the remote backend on an aiosqlite file.
    Used for development and by the test-suite.
    """

    def __init__(self, db_path: str, seed: bool = True) -> None:
        self.db_path = db_path
        self.seed = seed
        self._identity: Optional[Identity] = None

    # ---------------------------
    # Query / command API
    # ---------------------------

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Optional[OrderBy] = None,
    ) -> List[Row]:
        cols = parse_columns(columns) or list(_check_table(table))
        _check_columns(table, cols)
        where, params = _where(table, filters)
        sql = f"SELECT {', '.join(cols)} FROM {table}{where}"
        if order is not None:
            _check_columns(table, [order.column])
            sql += f" ORDER BY {order.column} {'DESC' if order.descending else 'ASC'}"
        _logger.debug(f"select: {sql} {params}")

        try:
            async with connect(self.db_path, self.seed) as conn:
                cur = await conn.execute(sql + ";", tuple(params))
                rows = await cur.fetchall()
                await cur.close()
        except sqlite3.Error as exc:
            raise GatewayError(str(exc)) from exc
        return [dict(row) for row in rows]

    async def select_count(self, table: str, filters: Sequence[Filter] = ()) -> int:
        _check_table(table)
        where, params = _where(table, filters)
        try:
            async with connect(self.db_path, self.seed) as conn:
                cur = await conn.execute(
                    f"SELECT COUNT(*) FROM {table}{where};", tuple(params)
                )
                row = await cur.fetchone()
                await cur.close()
        except sqlite3.Error as exc:
            raise GatewayError(str(exc)) from exc
        return int(row[0]) if row else 0

    async def insert(self, table: str, row: Row) -> Row:
        known = _check_table(table)
        values = dict(row)
        values.setdefault("id", str(uuid.uuid4()))
        if "created_at" in known and not values.get("created_at"):
            values["created_at"] = _now_iso()
        _check_columns(table, list(values))

        cols = list(values)
        sql = (
            f"INSERT INTO {table}({', '.join(cols)}) "
            f"VALUES ({', '.join('?' * len(cols))});"
        )
        try:
            async with connect(self.db_path, self.seed) as conn:
                await conn.execute(sql, tuple(values[c] for c in cols))
                await conn.commit()
        except sqlite3.Error as exc:
            raise GatewayError(str(exc)) from exc
        _logger.debug(f"inserted into {table}: {values['id']}")
        return values

    async def update(self, table: str, patch: Row, filters: Sequence[Filter]) -> None:
        if not patch:
            return
        _check_columns(table, list(patch))
        where, params = _where(table, filters)
        assignments = ", ".join(f"{c} = ?" for c in patch)
        try:
            async with connect(self.db_path, self.seed) as conn:
                await conn.execute(
                    f"UPDATE {table} SET {assignments}{where};",
                    tuple(list(patch.values()) + params),
                )
                await conn.commit()
        except sqlite3.Error as exc:
            raise GatewayError(str(exc)) from exc

    async def delete(self, table: str, filters: Sequence[Filter]) -> None:
        where, params = _where(table, filters)
        try:
            async with connect(self.db_path, self.seed) as conn:
                await conn.execute(f"DELETE FROM {table}{where};", tuple(params))
                await conn.commit()
        except sqlite3.Error as exc:
            raise GatewayError(str(exc)) from exc

    # ---------------------------
    # Auth API
    # ---------------------------

    async def sign_in(self, email: str, password: str) -> Identity:
        try:
            async with connect(self.db_path, self.seed) as conn:
                cur = await conn.execute(
                    "SELECT id, email, password_hash, password_salt FROM auth_users WHERE email = ?;",
                    ((email or "").strip().lower(),),
                )
                row = await cur.fetchone()
                await cur.close()
        except sqlite3.Error as exc:
            raise GatewayError(str(exc)) from exc

        if not row or hash_password(password, row[3])[0] != row[2]:
            raise AuthError("Invalid login credentials")

        self._identity = Identity(id=row[0], email=row[1])
        _logger.info(f"Signed in as {self._identity.email}")
        return self._identity

    async def sign_out(self) -> None:
        self._identity = None

    async def get_current_identity(self) -> Optional[Identity]:
        return self._identity

    async def register_user(
        self, email: str, password: str, full_name: str = "", role: str = "customer"
    ) -> Identity:
        """
        Create an auth account and its profile row; return the new identity.
        """
        email = email.strip().lower()
        uid = str(uuid.uuid4())
        pwd_hash, salt = hash_password(password)
        try:
            async with connect(self.db_path, self.seed) as conn:
                await conn.execute(
                    "INSERT INTO auth_users(id, email, password_hash, password_salt) VALUES (?, ?, ?, ?);",
                    (uid, email, pwd_hash, salt),
                )
                await conn.execute(
                    "INSERT INTO profiles(id, email, full_name, role) VALUES (?, ?, ?, ?);",
                    (uid, email, full_name, role),
                )
                await conn.commit()
        except sqlite3.IntegrityError as exc:
            raise GatewayError("User already registered") from exc
        return Identity(id=uid, email=email)
