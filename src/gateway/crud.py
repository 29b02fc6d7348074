# src/gateway/crud.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from gateway import models
from gateway.base import DataGateway, OrderBy, Row, eq, in_

ORDER_COLUMNS = "id, user_id, total_amount, status, created_at, shipping_address, phone"
ITEM_COLUMNS = "order_id, product_name, product_image_url, quantity, price, subtotal"
NEWEST_FIRST = OrderBy("created_at", descending=True)


def _to_float(val) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return 0.0


def _to_int(val) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        return 0


def _text(val) -> str:
    return "" if val is None else str(val)


def row_to_profile(row: Row) -> models.Profile:
    return models.Profile(
        id=str(row["id"]),
        email=_text(row.get("email")),
        full_name=_text(row.get("full_name")),
        role=_text(row.get("role")),
    )


def row_to_product(row: Row) -> models.Product:
    return models.Product(
        id=str(row["id"]),
        name=_text(row.get("name")),
        price=_to_float(row.get("price")),
        category=_text(row.get("category")),
        description=_text(row.get("description")),
        image_url=_text(row.get("image_url")),
        stock=_to_int(row.get("stock")),
        created_at=row.get("created_at"),
    )


def row_to_order(row: Row) -> models.Order:
    return models.Order(
        id=str(row["id"]),
        user_id=row.get("user_id"),
        total_amount=_to_float(row.get("total_amount")),
        status=_text(row.get("status")),
        created_at=row.get("created_at"),
        shipping_address=_text(row.get("shipping_address")),
        phone=_text(row.get("phone")),
    )


def row_to_order_item(row: Row) -> models.OrderItem:
    return models.OrderItem(
        order_id=_text(row.get("order_id")),
        product_name=_text(row.get("product_name")),
        product_image_url=_text(row.get("product_image_url")),
        quantity=_to_int(row.get("quantity")),
        price=_to_float(row.get("price")),
        subtotal=_to_float(row.get("subtotal")),
    )


# ---------------------------
# Profiles & roles
# ---------------------------


async def get_profile_role(gw: DataGateway, user_id: str) -> Optional[str]:
    """Return the role tag of a profile, or None if there is no profile."""
    row = await gw.select_one("profiles", "role", [eq("id", user_id)])
    return row.get("role") if row else None


async def get_profile(gw: DataGateway, user_id: str) -> Optional[models.Profile]:
    row = await gw.select_one(
        "profiles", "id, full_name, email, role", [eq("id", user_id)]
    )
    return row_to_profile(row) if row else None


async def get_profiles(
    gw: DataGateway, user_ids: Iterable[Optional[str]]
) -> Dict[str, models.Profile]:
    """
    Fetch many profiles with a single `in` query, keyed by id.
    None ids are skipped; an empty id set issues no query.
    """
    ids = sorted({uid for uid in user_ids if uid})
    if not ids:
        return {}
    rows = await gw.select("profiles", "id, email, full_name", [in_("id", ids)])
    return {str(r["id"]): row_to_profile(r) for r in rows if r.get("id")}


async def list_users(gw: DataGateway) -> List[models.Profile]:
    rows = await gw.select("profiles", "id, email, full_name, role")
    return [row_to_profile(r) for r in rows]


async def update_user_role(gw: DataGateway, user_id: str, role: str) -> None:
    await gw.update("profiles", {"role": role}, [eq("id", user_id)])


async def count_users(gw: DataGateway) -> int:
    return await gw.select_count("profiles")


# ---------------------------
# Products
# ---------------------------


async def list_products(gw: DataGateway) -> List[models.Product]:
    """All products, newest first."""
    rows = await gw.select("products", "*", order=NEWEST_FIRST)
    return [row_to_product(r) for r in rows]


async def add_product(gw: DataGateway, row: Row) -> models.Product:
    """
    Insert a product; id and created_at are assigned by the backend.
    """
    stored = await gw.insert("products", row)
    return row_to_product(stored)


async def update_product(gw: DataGateway, product_id: str, patch: Row) -> None:
    await gw.update("products", patch, [eq("id", product_id)])


async def delete_product(gw: DataGateway, product_id: str) -> None:
    await gw.delete("products", [eq("id", product_id)])


async def count_products(gw: DataGateway) -> int:
    return await gw.select_count("products")


# ---------------------------
# Orders
# ---------------------------


async def list_orders(gw: DataGateway) -> List[models.Order]:
    """All orders, newest first."""
    rows = await gw.select("orders", ORDER_COLUMNS, order=NEWEST_FIRST)
    return [row_to_order(r) for r in rows]


async def get_order(gw: DataGateway, order_id: str) -> Optional[models.Order]:
    row = await gw.select_one("orders", ORDER_COLUMNS, [eq("id", order_id)])
    return row_to_order(row) if row else None


async def list_order_items(gw: DataGateway, order_id: str) -> List[models.OrderItem]:
    rows = await gw.select("order_items", ITEM_COLUMNS, [eq("order_id", order_id)])
    return [row_to_order_item(r) for r in rows]


async def update_order_status(gw: DataGateway, order_id: str, status: str) -> None:
    await gw.update("orders", {"status": status}, [eq("id", order_id)])
