# src/gateway/rest.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import httpx

from gateway.base import (
    AuthError,
    DataGateway,
    Filter,
    GatewayError,
    OrderBy,
    Row,
    parse_columns,
)
from gateway.models import Identity
from utils.logger import get_logger

_logger = get_logger(__name__)


def _encode_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _filter_params(filters: Sequence[Filter]) -> List[Tuple[str, str]]:
    """Pairs rather than a dict, so two filters on one column are both sent."""
    params: List[Tuple[str, str]] = []
    for f in filters:
        if f.op == "eq":
            params.append((f.column, f"eq.{_encode_value(f.value)}"))
        elif f.op == "in":
            inner = ",".join(f'"{_encode_value(v)}"' for v in f.value)
            params.append((f.column, f"in.({inner})"))
        else:
            raise GatewayError(f"unsupported filter operator {f.op!r}")
    return params


def _json(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        raise GatewayError(f"unexpected response from server (HTTP {resp.status_code})") from exc


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {resp.status_code}"


def _parse_content_range(value: Optional[str]) -> int:
    """'0-24/573' or '*/573' -> 573"""
    if not value or "/" not in value:
        raise GatewayError("count missing from response")
    total = value.rsplit("/", 1)[1]
    if not total.isdigit():
        raise GatewayError(f"unexpected Content-Range {value!r}")
    return int(total)


class RestGateway(DataGateway):
    """
    Hosted backend speaking the PostgREST table API under ``/rest/v1`` and
    the GoTrue auth API under ``/auth/v1``.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._api_key = api_key
        self._access_token: Optional[str] = None
        self._client = httpx.AsyncClient(
            base_url=url.rstrip("/"),
            headers={"apikey": api_key},
            transport=transport,
            timeout=timeout,
        )

    def _headers(self, **extra: str) -> Dict[str, str]:
        headers = {"Authorization": f"Bearer {self._access_token or self._api_key}"}
        headers.update(extra)
        return headers

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        _logger.debug(f"{method} {path} {kwargs.get('params', '')}")
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise GatewayError(f"Network error: {exc}") from exc
        if resp.is_error:
            raise GatewayError(_error_message(resp))
        return resp

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
        params = [("select", ",".join(parse_columns(columns)) or "*")]
        params.extend(_filter_params(filters))
        if order is not None:
            params.append(("order", f"{order.column}.{'desc' if order.descending else 'asc'}"))
        resp = await self._request(
            "GET", f"/rest/v1/{table}", params=params, headers=self._headers()
        )
        rows = _json(resp)
        if not isinstance(rows, list):
            raise GatewayError("unexpected response shape")
        return rows

    async def select_count(self, table: str, filters: Sequence[Filter] = ()) -> int:
        params = [("select", "*")]
        params.extend(_filter_params(filters))
        resp = await self._request(
            "HEAD",
            f"/rest/v1/{table}",
            params=params,
            headers=self._headers(Prefer="count=exact"),
        )
        return _parse_content_range(resp.headers.get("content-range"))

    async def insert(self, table: str, row: Row) -> Row:
        resp = await self._request(
            "POST",
            f"/rest/v1/{table}",
            json=[row],
            headers=self._headers(Prefer="return=representation"),
        )
        body = _json(resp)
        if isinstance(body, list) and body:
            return body[0]
        return dict(row)

    async def update(self, table: str, patch: Row, filters: Sequence[Filter]) -> None:
        await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=_filter_params(filters),
            json=patch,
            headers=self._headers(Prefer="return=minimal"),
        )

    async def delete(self, table: str, filters: Sequence[Filter]) -> None:
        await self._request(
            "DELETE",
            f"/rest/v1/{table}",
            params=_filter_params(filters),
            headers=self._headers(),
        )

    # ---------------------------
    # Auth API
    # ---------------------------

    async def sign_in(self, email: str, password: str) -> Identity:
        try:
            resp = await self._client.post(
                "/auth/v1/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
            )
        except httpx.HTTPError as exc:
            raise GatewayError(f"Network error: {exc}") from exc

        if resp.status_code in (400, 401, 422):
            raise AuthError(_error_message(resp))
        if resp.is_error:
            raise GatewayError(_error_message(resp))

        body = _json(resp)
        if not isinstance(body, dict):
            raise GatewayError("unexpected response shape")
        user = body.get("user") or {}
        if not isinstance(user, dict) or not body.get("access_token") or not user.get("id"):
            raise AuthError("Invalid login credentials")
        self._access_token = body["access_token"]
        return Identity(id=user["id"], email=user.get("email", email))

    async def sign_out(self) -> None:
        if self._access_token is None:
            return
        try:
            await self._client.post("/auth/v1/logout", headers=self._headers())
        except httpx.HTTPError as exc:
            _logger.warning(f"Logout request failed: {exc}")
        finally:
            self._access_token = None

    async def get_current_identity(self) -> Optional[Identity]:
        if self._access_token is None:
            return None
        try:
            resp = await self._client.get("/auth/v1/user", headers=self._headers())
        except httpx.HTTPError as exc:
            raise GatewayError(f"Network error: {exc}") from exc
        if resp.status_code in (401, 403):
            self._access_token = None
            return None
        if resp.is_error:
            raise GatewayError(_error_message(resp))
        user = _json(resp)
        if not isinstance(user, dict) or not user.get("id"):
            raise GatewayError("unexpected response shape")
        return Identity(id=user["id"], email=user.get("email", ""))

    async def aclose(self) -> None:
        await self._client.aclose()
