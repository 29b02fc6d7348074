from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Optional

import gateway.crud as crud
from gateway.base import DataGateway, GatewayError
from utils.logger import get_logger

_logger = get_logger(__name__)

MSG_DASHBOARD_FAILED = "Failed to load dashboard data. Please try again."


class DashboardController:
    """
    Store statistics: product count, user count and when they were read.
    """

    def __init__(self, gw: DataGateway) -> None:
        self.gw = gw
        self.products = 0
        self.users = 0
        self.last_update: Optional[datetime] = None
        self.loading = False
        self.error: Optional[str] = None

    async def load(self) -> bool:
        """Both counts are fetched concurrently and joined."""
        self.loading = True
        self.error = None
        try:
            products, users = await asyncio.gather(
                crud.count_products(self.gw), crud.count_users(self.gw)
            )
        except GatewayError as exc:
            _logger.error(f"Dashboard counts failed: {exc.message}")
            self.error = MSG_DASHBOARD_FAILED
            return False
        finally:
            self.loading = False

        self.products = products or 0
        self.users = users or 0
        self.last_update = datetime.now()
        return True
