from __future__ import annotations

from typing import Optional

import gateway.crud as crud
from controllers.base import RemoteCollection
from gateway.base import DataGateway
from gateway.models import ADMIN_ROLE, Profile
from utils.logger import get_logger

_logger = get_logger(__name__)

MSG_ROLE_FAILED = "Could not change the role. Try again."


class UsersController:
    """
    Manage-Users screen: list profiles and promote them to admin.
    """

    def __init__(self, gw: DataGateway) -> None:
        self.gw = gw
        self.users: RemoteCollection[Profile] = RemoteCollection(
            lambda: crud.list_users(gw), name="users"
        )
        self.message: Optional[str] = None

    async def load(self) -> bool:
        return await self.users.load()

    async def change_role(self, user_id: str, role: str) -> bool:
        """Write the new role, then reload the whole list."""
        ok = await self.users.mutate(
            user_id, lambda: crud.update_user_role(self.gw, user_id, role)
        )
        if not ok:
            self.message = MSG_ROLE_FAILED
            return False
        _logger.info(f"User {user_id} is now {role!r}")
        self.message = None
        await self.load()
        return True

    async def make_admin(self, user_id: str) -> bool:
        return await self.change_role(user_id, ADMIN_ROLE)

    def close(self) -> None:
        self.users.close()

