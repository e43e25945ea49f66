"""Chat log and roll-mode preference routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from yzdice.chat import resolve_roll_mode, visible_messages
from yzdice.database import get_db
from yzdice.dependencies import get_current_user
from yzdice.models import User
from yzdice.schemas import MessageOut, RollModeIn

router = APIRouter()


@router.get("/chat", response_model=list[MessageOut])
async def chat_log(
    limit: int = 50,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[MessageOut]:
    """Return the recent messages the current user can see."""
    messages = await visible_messages(db, current_user, limit=max(1, min(limit, 200)))
    return [MessageOut.from_message(m) for m in messages]


@router.put("/profile/roll-mode")
async def update_roll_mode(
    body: RollModeIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Store the user's preferred roll mode; null resets to the server default."""
    current_user.roll_mode = body.roll_mode
    await db.commit()
    return {"roll_mode": resolve_roll_mode(current_user).value}
