"""Shared dependencies for the admin routers."""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from solarwatch.database import get_session
from solarwatch.models import AdminUser
from solarwatch.services.auth import SESSION_COOKIE, read_session_token


async def get_current_admin(
    request: Request, session: AsyncSession = Depends(get_session)
) -> AdminUser:
    user_id = read_session_token(request.cookies.get(SESSION_COOKIE))
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated.")

    user = await session.get(AdminUser, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Session is no longer valid.")
    return user


async def require_superadmin(admin: AdminUser = Depends(get_current_admin)) -> AdminUser:
    if not admin.is_protected:
        raise HTTPException(status_code=403, detail="Only the protected administrator can manage accounts.")
    return admin
