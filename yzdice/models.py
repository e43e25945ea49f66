"""SQLAlchemy ORM models for users and the chat log."""

from __future__ import annotations

import enum
import json
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from yzdice.database import Base

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class RollMode(str, enum.Enum):
    """Who gets to see a posted chat message."""

    public = "public"
    gm_only = "gm_only"
    blind = "blind"
    self_only = "self_only"


class MessageKind(str, enum.Enum):
    """What produced a chat message."""

    roll = "roll"
    consumable = "consumable"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class TimestampMixin:
    """Adds created_at and updated_at columns to any model."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class User(TimestampMixin, Base):
    """A player or game master."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_gm: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # None means "use the server default".
    roll_mode: Mapped[RollMode | None] = mapped_column(
        Enum(RollMode, native_enum=False), nullable=True
    )

    messages: Mapped[list[ChatMessage]] = relationship(back_populates="author")


class ChatMessage(TimestampMixin, Base):
    """A rendered roll or consumable check posted to the table chat."""

    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    author_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    kind: Mapped[MessageKind] = mapped_column(Enum(MessageKind, native_enum=False), nullable=False)
    roll_mode: Mapped[RollMode] = mapped_column(
        Enum(RollMode, native_enum=False), nullable=False, default=RollMode.public
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # JSON-encoded list of user ids; empty for public messages.
    whisper_to: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    # JSON-encoded summary of the physically rolled dice.
    dice_json: Mapped[str | None] = mapped_column(Text, nullable=True)

    author: Mapped[User | None] = relationship(back_populates="messages")

    @property
    def whisper_ids(self) -> list[int]:
        """Return whisper recipients as a list, deserializing from JSON."""
        return json.loads(self.whisper_to or "[]")

    @whisper_ids.setter
    def whisper_ids(self, value: list[int]) -> None:
        """Serialize and store whisper recipients as a JSON string."""
        self.whisper_to = json.dumps(value)

    @property
    def dice(self) -> list[dict]:
        if self.dice_json is None:
            return []
        return json.loads(self.dice_json)

    @dice.setter
    def dice(self, value: list[dict]) -> None:
        self.dice_json = json.dumps(value)

    def visible_to(self, user: User) -> bool:
        """Return True if ``user`` may read this message."""
        if user.is_gm or self.roll_mode == RollMode.public:
            return True
        if self.author_id == user.id and self.roll_mode != RollMode.blind:
            return True
        return user.id in self.whisper_ids
