"""Pydantic request and response models for the HTTP API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from yzdice.engine import MAX_DICE, MAX_FACES, ArtifactDice, Die, ItemRef, RollResult
from yzdice.models import ChatMessage, RollMode


class RollModifierIn(BaseModel):
    name: str
    value: str | int | None = None


class ItemIn(BaseModel):
    kind: str = Field(description="Item type, e.g. 'weapon', 'spell', 'armor'.")
    name: str = ""
    damage: int = 0
    bonus: str | int | None = Field(
        default=None, description="Weapon gear bonus; its leading number is the gear dice."
    )
    artifact_bonus: str = Field(
        default="", description="Weapon artifact dice in notation, e.g. 'd8'."
    )
    roll_modifiers: list[RollModifierIn] = Field(default_factory=list)

    def to_ref(self) -> ItemRef:
        return ItemRef(
            kind=self.kind,
            name=self.name,
            damage=self.damage,
            roll_modifiers=tuple(m.model_dump() for m in self.roll_modifiers),
        )


class ArtifactIn(BaseModel):
    dice: int = Field(ge=0, le=MAX_DICE)
    faces: int = Field(ge=1, le=MAX_FACES)

    def to_artifact(self) -> ArtifactDice:
        return ArtifactDice(dice=self.dice, faces=self.faces)


class RollIn(BaseModel):
    roll_name: str = Field(min_length=1, max_length=200)
    base: int = Field(default=0, ge=0, le=MAX_DICE)
    skill: int = Field(default=0, ge=-MAX_DICE, le=MAX_DICE)
    gear: int = Field(default=0, ge=0, le=MAX_DICE)
    artifacts: list[ArtifactIn] = Field(default_factory=list)
    artifact_notation: str = Field(
        default="", description="Extra artifact dice in notation, e.g. '1d8 1d10'."
    )
    bonus: str | int | None = Field(
        default=None, description="Free-text skill bonus, e.g. '+1 d8'."
    )
    modifier: int = Field(default=0, ge=-MAX_DICE, le=MAX_DICE)
    items: list[ItemIn] = Field(default_factory=list)
    labels: list[str] = Field(
        default_factory=list,
        description="Attribute/skill/action labels whose item roll modifiers apply.",
    )
    roll_mode: RollMode | None = None


class ConsumableIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    faces: int | None = Field(default=None, ge=0, le=MAX_FACES)
    roll_mode: RollMode | None = None


class RollModeIn(BaseModel):
    roll_mode: RollMode | None = None


class DieOut(BaseModel):
    category: str
    face_count: int
    face_value: int
    success: int
    rolled: bool

    @classmethod
    def from_die(cls, die: Die) -> DieOut:
        return cls(
            category=die.category.value,
            face_count=die.face_count,
            face_value=die.face_value,
            success=die.success,
            rolled=die.rolled,
        )


class RollOut(BaseModel):
    roll_id: int
    message_id: int
    roll_name: str
    pushed: bool
    swords: int
    skulls: int
    gear: int
    dice: list[DieOut]
    effect: str | None = None
    effect_value: int | None = None
    content: str

    @classmethod
    def from_result(cls, roll_id: int, message: ChatMessage, result: RollResult) -> RollOut:
        return cls(
            roll_id=roll_id,
            message_id=message.id,
            roll_name=result.roll_name,
            pushed=result.pushed,
            swords=result.swords,
            skulls=result.skulls,
            gear=result.gear,
            dice=[DieOut.from_die(d) for d in result.dice],
            effect=result.effect.value if result.effect else None,
            effect_value=result.effect_value,
            content=message.content,
        )


class ConsumableOut(BaseModel):
    message_id: int
    name: str
    succeeded: bool
    face_value: int | None = None
    content: str


class MessageOut(BaseModel):
    id: int
    author_id: int | None
    kind: str
    roll_mode: str
    content: str
    dice: list[dict]
    created_at: datetime | None = None

    @classmethod
    def from_message(cls, message: ChatMessage) -> MessageOut:
        return cls(
            id=message.id,
            author_id=message.author_id,
            kind=message.kind.value,
            roll_mode=message.roll_mode.value,
            content=message.content,
            dice=message.dice,
            created_at=message.created_at,
        )
