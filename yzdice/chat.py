"""Posting roll results to the table chat.

A message is always stored once; its roll mode and whisper list decide who can
read it. Game masters see everything.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from yzdice.config import settings
from yzdice.engine import ConsumableOutcome, Die, DieCategory, RollResult
from yzdice.models import ChatMessage, MessageKind, RollMode, User
from yzdice.rendering import render_consumable, render_roll

logger = logging.getLogger(__name__)

_TERM_NAMES: dict[DieCategory, str] = {
    DieCategory.base: "BaseDie",
    DieCategory.skill: "SkillDie",
    DieCategory.gear: "GearDie",
}


def resolve_roll_mode(user: User, requested: RollMode | str | None = None) -> RollMode:
    """Return the effective roll mode: request, then user preference, then default.

    Args:
        user: The author of the message.
        requested: An explicit mode for this message, if any.

    Returns:
        The :class:`RollMode` to post with.
    """
    for candidate in (requested, user.roll_mode, settings.default_roll_mode):
        if candidate is None:
            continue
        try:
            return RollMode(candidate)
        except ValueError:
            logger.warning("Ignoring unknown roll mode %r for user %d", candidate, user.id)
    return RollMode.public


async def whisper_recipients(db: AsyncSession, mode: RollMode, author: User) -> list[int]:
    """Return the ids of the users a message is whispered to.

    GM-only and blind messages go to every game master, self-only messages go
    back to the author, public messages are not whispered.
    """
    if mode in (RollMode.gm_only, RollMode.blind):
        result = await db.execute(select(User.id).where(User.is_gm.is_(True)).order_by(User.id))
        return list(result.scalars().all())
    if mode == RollMode.self_only:
        return [author.id]
    return []


def dice_terms(dice: Iterable[Die]) -> list[dict]:
    """Summarise the physically rolled dice for third-party dice displays.

    Dice that were not rolled (automatic successes, dice kept through a push)
    are left out.
    """
    terms = []
    for die in dice:
        if not die.rolled:
            continue
        if die.category == DieCategory.artifact:
            name = f"ArtifactD{die.face_count}"
        else:
            name = _TERM_NAMES.get(die.category, "Die")
        terms.append({"term": name, "faces": die.face_count, "result": die.face_value})
    return terms


async def _post(
    db: AsyncSession,
    author: User,
    kind: MessageKind,
    content: str,
    mode: RollMode,
    dice: list[dict] | None = None,
) -> ChatMessage:
    message = ChatMessage(
        author_id=author.id,
        kind=kind,
        roll_mode=mode,
        content=content,
    )
    message.whisper_ids = await whisper_recipients(db, mode, author)
    if dice is not None:
        message.dice = dice
    db.add(message)
    await db.flush()
    logger.debug(
        "Posted %s message %d for user %d (%s)", kind.value, message.id, author.id, mode.value
    )
    return message


async def post_roll(
    db: AsyncSession,
    author: User,
    result: RollResult,
    roll_mode: RollMode | str | None = None,
) -> ChatMessage:
    """Render a roll result and add it to the chat log.

    The caller owns the transaction and must commit.
    """
    mode = resolve_roll_mode(author, roll_mode)
    return await _post(
        db, author, MessageKind.roll, render_roll(result), mode, dice=dice_terms(result.dice)
    )


async def post_consumable(
    db: AsyncSession,
    author: User,
    name: str,
    outcome: ConsumableOutcome,
    roll_mode: RollMode | str | None = None,
) -> ChatMessage:
    """Render a consumable check and add it to the chat log."""
    mode = resolve_roll_mode(author, roll_mode)
    return await _post(
        db, author, MessageKind.consumable, render_consumable(name, outcome), mode
    )


async def visible_messages(db: AsyncSession, user: User, limit: int = 50) -> list[ChatMessage]:
    """Return the most recent messages ``user`` may read, oldest first."""
    result = await db.execute(select(ChatMessage).order_by(ChatMessage.id.desc()))
    visible = []
    for message in result.scalars():
        if message.visible_to(user):
            visible.append(message)
            if len(visible) >= limit:
                break
    visible.reverse()
    return visible
