# provide dataclass models

from dataclasses import dataclass
from typing import Dict, Optional

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")

STATUS_COLORS: Dict[str, str] = {
    "pending": "#ff69b4",
    "processing": "#ffa500",
    "shipped": "#4169e1",
    "delivered": "#32cd32",
    "cancelled": "#dc143c",
}

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Identity:
    id: str
    email: str


@dataclass(frozen=True)
class Profile:
    id: str
    email: str
    full_name: str = ""
    role: str = ""  # "admin" or anything else


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: float
    category: str
    description: str
    image_url: str
    stock: int
    created_at: Optional[str] = None


@dataclass(frozen=True)
class Order:
    id: str
    user_id: Optional[str]
    total_amount: float
    status: str  # one of ORDER_STATUSES, not enforced by the backend
    created_at: Optional[str]
    shipping_address: str
    phone: str


@dataclass(frozen=True)
class OrderItem:
    order_id: str
    product_name: str
    product_image_url: str
    quantity: int
    price: float  # unit price at time of order
    subtotal: float
