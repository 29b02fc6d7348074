from __future__ import annotations

import dataclasses
from typing import Dict, List, Optional

import gateway.crud as crud
from controllers.base import RemoteCollection
from gateway.base import DataGateway, GatewayError
from gateway.models import ORDER_STATUSES, Order, OrderItem, Profile
from utils.logger import get_logger

_logger = get_logger(__name__)

UNKNOWN_CUSTOMER = "Unknown"
MISSING = "-"
MSG_STATUS_FAILED = "Error updating order status"


def _valid_status(status: str) -> bool:
    return status in ORDER_STATUSES


class OrdersController:
    """
    Manage-Orders screen: every order newest first, with the owning
    customer's name and email looked up in one batch.
    """

    def __init__(self, gw: DataGateway) -> None:
        self.gw = gw
        self.orders: RemoteCollection[Order] = RemoteCollection(
            lambda: crud.list_orders(self.gw), name="orders"
        )
        self.customers: Dict[str, Profile] = {}
        self.message: Optional[str] = None

    async def _fetch_customers(self, orders: List[Order]) -> Dict[str, Profile]:
        try:
            return await crud.get_profiles(self.gw, (o.user_id for o in orders))
        except GatewayError as exc:
            _logger.warning(f"Error loading customers: {exc.message}")
            return {}

    async def load(self) -> bool:
        """
        Orders and their customers commit together, only when this load is
        still the latest one.
        """
        customers: Dict[str, Profile] = {}

        async def fetch() -> List[Order]:
            orders = await crud.list_orders(self.gw)
            customers.update(await self._fetch_customers(orders))
            return orders

        if not await self.orders.load(fetch):
            return False
        self.customers = customers
        return True

    def customer_name(self, order: Order) -> str:
        profile = self.customers.get(order.user_id or "")
        return (profile.full_name if profile else "") or UNKNOWN_CUSTOMER

    def customer_email(self, order: Order) -> str:
        profile = self.customers.get(order.user_id or "")
        return (profile.email if profile else "") or MISSING

    async def change_status(self, order_id: str, status: str) -> bool:
        """
        Any status may follow any other. Re-selecting the current status
        changes nothing and makes no remote call.
        """
        if not _valid_status(status):
            self.message = f"Unknown status {status!r}"
            return False
        current = self.orders.find(order_id)
        if current is not None and current.status == status:
            return True

        ok = await self.orders.mutate(
            order_id, lambda: crud.update_order_status(self.gw, order_id, status)
        )
        if not ok:
            self.message = MSG_STATUS_FAILED
            return False
        self.message = None
        self.orders.patch(order_id, status=status)
        return True

    def close(self) -> None:
        self.orders.close()


class OrderDetailController:
    """
    Order-Details screen. Reads run in sequence: the order, then its
    customer, then its items. Only a missing order stops the chain.
    """

    def __init__(self, gw: DataGateway, order_id: str) -> None:
        self.gw = gw
        self.order_id = order_id

        self.order: Optional[Order] = None
        self.customer: Optional[Profile] = None
        self.items: List[OrderItem] = []

        self.loading = False
        self.not_found = False
        self.updating = False
        self.message: Optional[str] = None
        self._closed = False

    async def load(self) -> None:
        self.loading = True
        try:
            try:
                order = await crud.get_order(self.gw, self.order_id)
            except GatewayError as exc:
                _logger.error(f"Loading order {self.order_id} failed: {exc.message}")
                order = None
            if self._closed:
                return
            self.order = order
            self.not_found = order is None
            if order is None:
                return

            if order.user_id:
                try:
                    customer = await crud.get_profile(self.gw, order.user_id)
                except GatewayError as exc:
                    _logger.warning(f"Loading customer {order.user_id} failed: {exc.message}")
                    customer = None
                if self._closed:
                    return
                self.customer = customer

            try:
                items = await crud.list_order_items(self.gw, self.order_id)
            except GatewayError as exc:
                _logger.warning(f"Loading items of {self.order_id} failed: {exc.message}")
                items = []
            if self._closed:
                return
            self.items = items
        finally:
            self.loading = False

    @property
    def customer_name(self) -> str:
        return (self.customer.full_name if self.customer else "") or UNKNOWN_CUSTOMER

    @property
    def customer_email(self) -> str:
        return (self.customer.email if self.customer else "") or MISSING

    @property
    def total(self) -> float:
        if self.order and self.order.total_amount:
            return self.order.total_amount
        return sum(item.subtotal for item in self.items)

    async def change_status(self, status: str) -> bool:
        if self.order is None:
            return False
        if not _valid_status(status):
            self.message = f"Unknown status {status!r}"
            return False
        if status == self.order.status:
            return True

        self.updating = True
        try:
            await crud.update_order_status(self.gw, self.order.id, status)
        except GatewayError as exc:
            _logger.error(f"Updating order {self.order.id} failed: {exc.message}")
            self.message = MSG_STATUS_FAILED
            return False
        finally:
            self.updating = False

        self.message = None
        if not self._closed:
            self.order = dataclasses.replace(self.order, status=status)
        return True

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True
