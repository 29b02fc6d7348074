from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

# (pattern, screen name, admin only); first match wins
ROUTES: List[Tuple[str, str, bool]] = [
    ("/", "dashboard", True),
    ("/login", "login", False),
    ("/add-product", "add_product", True),
    ("/manage-products", "manage_products", True),
    ("/manage-orders", "manage_orders", True),
    ("/order/:id", "order_details", True),
    ("/manage-users", "manage_users", True),
    ("/landing", "landing", False),
    ("/error-boundary", "error", False),
]

NOT_FOUND = "not_found"

# shown in the sidebar, in this order
NAV_LINKS: Dict[str, str] = {
    "/": "Dashboard",
    "/manage-products": "Products",
    "/add-product": "Add Product",
    "/manage-orders": "Orders",
    "/manage-users": "Users",
}


@dataclass(frozen=True)
class Route:
    name: str
    path: str
    admin_only: bool = False
    params: Dict[str, str] = field(default_factory=dict)


def _segments(path: str) -> List[str]:
    return [s for s in path.split("/") if s]


def normalize(path: str) -> str:
    path = (path or "/").split("?", 1)[0].split("#", 1)[0]
    return "/" + "/".join(_segments(path))


def resolve(path: str) -> Route:
    """
    Map a path to its screen. Unknown paths resolve to the catch-all
    not-found route.
    """
    path = normalize(path)
    parts = _segments(path)
    for pattern, name, admin_only in ROUTES:
        pat_parts = _segments(pattern)
        if len(pat_parts) != len(parts):
            continue
        params: Dict[str, str] = {}
        for pat, part in zip(pat_parts, parts):
            if pat.startswith(":"):
                params[pat[1:]] = part
            elif pat != part:
                break
        else:
            return Route(name, path, admin_only, params)
    return Route(NOT_FOUND, path)


def order_path(order_id: str) -> str:
    return f"/order/{order_id}"
