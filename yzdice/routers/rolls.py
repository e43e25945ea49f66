"""Roll, push and consumable routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from yzdice.chat import post_consumable, post_roll
from yzdice.database import get_db
from yzdice.dependencies import get_current_user, get_roll_table
from yzdice.engine import InvalidRequest, RollEngine, RollRequest, roll_consumable
from yzdice.models import User
from yzdice.modifiers import (
    DiceError,
    collect_roll_modifiers,
    parse_artifacts,
    parse_bonus,
    parse_modifiers,
)
from yzdice.rolls import RollTable
from yzdice.schemas import ConsumableIn, ConsumableOut, RollIn, RollOut

logger = logging.getLogger(__name__)

router = APIRouter()


def _build_request(body: RollIn) -> RollRequest:
    """Combine explicit counts with bonus text and item roll modifiers.

    When the first item is a weapon, its gear bonus adds gear dice and its
    artifact bonus leads the artifact dice.
    """
    items = [item.to_ref() for item in body.items]

    gear = body.gear
    artifacts = []
    weapon = body.items[0] if body.items and body.items[0].kind == "weapon" else None
    if weapon is not None:
        gear += parse_bonus(weapon.bonus)
        artifacts += parse_artifacts(weapon.artifact_bonus)

    modifiers = parse_modifiers(body.bonus)
    for label in body.labels:
        modifiers = collect_roll_modifiers(label, items, modifiers)

    return RollRequest(
        roll_name=body.roll_name,
        base=body.base,
        skill=body.skill,
        gear=gear,
        artifacts=artifacts
        + [a.to_artifact() for a in body.artifacts]
        + parse_artifacts(body.artifact_notation)
        + modifiers.artifact_dice(),
        modifier=body.modifier + modifiers.modifier,
        items=items or None,
    )


@router.post("/rolls", response_model=RollOut)
async def create_roll(
    body: RollIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    table: RollTable = Depends(get_roll_table),
) -> RollOut:
    """Roll a dice pool and post the result to chat."""
    try:
        request = _build_request(body)
    except (InvalidRequest, DiceError) as exc:
        logger.warning("Rejected roll %r for user %d: %s", body.roll_name, current_user.id, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    engine = RollEngine()
    result = engine.roll(request)
    entry = table.open(current_user.id, engine, body.roll_mode)

    message = await post_roll(db, current_user, result, body.roll_mode)
    await db.commit()
    return RollOut.from_result(entry.roll_id, message, result)


@router.post("/rolls/{roll_id}/push", response_model=RollOut)
async def push_roll(
    roll_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    table: RollTable = Depends(get_roll_table),
) -> RollOut:
    """Push an open roll once and post the new result to chat."""
    entry = table.get(roll_id, current_user.id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Roll not found")
    # Rolls leave the table once pushed.
    table.close(roll_id)
    result = entry.engine.push()

    message = await post_roll(db, current_user, result, entry.roll_mode)
    await db.commit()
    return RollOut.from_result(roll_id, message, result)


@router.post("/consumables/roll", response_model=ConsumableOut)
async def roll_consumable_die(
    body: ConsumableIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ConsumableOut:
    """Roll a consumable die and post whether it held."""
    outcome = roll_consumable(body.faces)
    message = await post_consumable(db, current_user, body.name, outcome, body.roll_mode)
    await db.commit()
    return ConsumableOut(
        message_id=message.id,
        name=body.name,
        succeeded=outcome.succeeded,
        face_value=outcome.face_value,
        content=message.content,
    )
