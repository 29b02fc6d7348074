from __future__ import annotations

from enum import Enum
from typing import Optional

from gateway.base import AuthError, GatewayError
from gateway.models import ADMIN_ROLE
from utils.logger import get_logger
from utils.state import GlobalState

_logger = get_logger(__name__)

MSG_INVALID_CREDENTIALS = "Invalid email or password. Please try again."
MSG_ROLE_UNVERIFIED = "Couldn't verify your account role. Try again later."
MSG_ADMINS_ONLY = "Access denied. Admins only."
MSG_UNEXPECTED = "An unexpected error occurred. Please try again later."


class Access(Enum):
    GRANTED = "granted"
    LOGIN = "login"  # nobody signed in
    LANDING = "landing"  # signed in, but not an admin


async def check_admin_access(state: GlobalState) -> Access:
    """
    Decide whether the current visitor may open an admin screen.
    A failed role lookup denies access; there are no retries.
    """
    try:
        identity = await state.refresh()
    except GatewayError as exc:
        _logger.warning(f"Could not read current identity: {exc.message}")
        return Access.LOGIN
    if identity is None:
        return Access.LOGIN

    try:
        role = await state.load_role()
    except GatewayError as exc:
        _logger.warning(f"Role lookup for {identity.email} failed: {exc.message}")
        return Access.LANDING

    if role != ADMIN_ROLE:
        _logger.info(f"{identity.email} has role {role!r}, access denied")
        return Access.LANDING
    return Access.GRANTED


async def admin_sign_in(state: GlobalState, email: str, password: str) -> Optional[str]:
    """
    Sign in and require the admin role.

    Returns None when the admin is signed in, otherwise the message to show
    inline on the login form.
    """
    try:
        try:
            await state.sign_in(email, password)
        except AuthError as exc:
            return exc.message or MSG_INVALID_CREDENTIALS

        try:
            role = await state.load_role()
        except GatewayError as exc:
            _logger.error(f"Role lookup after sign-in failed: {exc.message}")
            await state.sign_out()
            return MSG_ROLE_UNVERIFIED

        # a signed-in identity without a profile row has no verifiable role
        if role is None:
            await state.sign_out()
            return MSG_ROLE_UNVERIFIED
        if role != ADMIN_ROLE:
            await state.sign_out()
            return MSG_ADMINS_ONLY
    except GatewayError as exc:
        _logger.error(f"Sign-in failed: {exc.message}")
        return MSG_UNEXPECTED

    return None
