from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import gateway.crud as crud
from gateway.base import DataGateway
from gateway.models import ADMIN_ROLE, Identity
from gateway.upload import AssetUploader
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass
class GlobalState:
    """
    Centralized auth state, built once at start-up and handed to every screen.

    Fields:
      - gateway: the remote data/auth backend
      - uploader: the image host client
      - identity: the signed-in identity, None when signed out
      - role: profile role of the identity, None if unknown
    """

    gateway: DataGateway
    uploader: AssetUploader
    storefront_url: str = ""

    identity: Optional[Identity] = field(default=None)
    role: Optional[str] = field(default=None)

    @property
    def is_admin(self) -> bool:
        return self.identity is not None and self.role == ADMIN_ROLE

    async def sign_in(self, email: str, password: str) -> Identity:
        """Authenticate and remember the identity; role is looked up separately."""
        self.identity = await self.gateway.sign_in(email, password)
        self.role = None
        return self.identity

    async def load_role(self) -> Optional[str]:
        """
        Fetch and cache the role of the current identity.
        Gateway errors propagate to the caller.
        """
        if self.identity is None:
            self.role = None
            return None
        self.role = await crud.get_profile_role(self.gateway, self.identity.id)
        return self.role

    async def refresh(self) -> Optional[Identity]:
        """Re-read the current identity from the gateway."""
        identity = await self.gateway.get_current_identity()
        if identity != self.identity:
            self.role = None
        self.identity = identity
        return identity

    async def sign_out(self) -> None:
        """
        Only called upon logging out or when a non-admin signs in
        """
        if self.identity is not None:
            _logger.info(f"Signing out {self.identity.email}")
        await self.gateway.sign_out()
        self.identity = None
        self.role = None
