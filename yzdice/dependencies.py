"""FastAPI dependencies for yzdice."""

from __future__ import annotations

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from yzdice.database import get_db
from yzdice.models import User
from yzdice.rolls import RollTable, open_rolls


async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)) -> User:
    """Return the authenticated user from the session.

    Raises a 401 if no valid session is present.
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Not logged in")
    user = await db.get(User, user_id)
    if not user:
        request.session.clear()
        raise HTTPException(status_code=401, detail="Not logged in")
    return user


def get_roll_table() -> RollTable:
    return open_rolls
