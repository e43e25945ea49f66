"""Dev-only login routes.

Real sign-in is left to the host application. The /dev routes are only
available when settings.environment != "production".
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException
from fastapi.responses import RedirectResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from yzdice.config import settings
from yzdice.database import get_db
from yzdice.models import User

router = APIRouter()


def _is_dev() -> bool:
    return settings.environment != "production"


@router.get("/dev/users")
async def dev_users(db: AsyncSession = Depends(get_db)) -> list[dict]:
    """List seeded users to log in as."""
    if not _is_dev():
        raise HTTPException(status_code=404)
    result = await db.execute(select(User).order_by(User.display_name))
    return [
        {"id": user.id, "display_name": user.display_name, "is_gm": user.is_gm}
        for user in result.scalars().all()
    ]


@router.post("/dev/login")
async def dev_login(
    request: Request,
    user_id: int = Form(...),
) -> RedirectResponse:
    """Set the session to the chosen user and redirect to /chat."""
    if not _is_dev():
        raise HTTPException(status_code=404)
    request.session["user_id"] = user_id
    return RedirectResponse(url="/chat", status_code=303)


@router.post("/logout")
async def logout(request: Request) -> RedirectResponse:
    """Clear the session."""
    request.session.clear()
    return RedirectResponse(url="/dev/users", status_code=303)
