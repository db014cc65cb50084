"""FastAPI dependency guarding admin endpoints with the shared password.

Usage:
    @router.post("/reset", dependencies=[Depends(require_admin)])
"""

import hmac

from fastapi import Header

from config.settings import settings
from src.ms_common.errors import AdminAuthRequiredError


async def require_admin(
    x_admin_password: str | None = Header(None, alias="X-Admin-Password"),
) -> None:
    """Raise AdminAuthRequiredError (1003) unless the header matches."""
    if x_admin_password is None or not hmac.compare_digest(
        x_admin_password.encode(), settings.ADMIN_PASSWORD.encode()
    ):
        raise AdminAuthRequiredError()
