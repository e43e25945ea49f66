"""Parsing of artifact dice and free-text roll bonuses.

Items and talents describe their bonuses as short strings, for example a sword
with a skill bonus of ``"+1 d8"`` or a talent giving ``"2d10 -1"``. Tokens in
artifact notation (NdF, dF) become artifact dice; signed integers add up to a
skill modifier; anything else is ignored.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from yzdice.engine import MAX_DICE, MAX_FACES, ArtifactDice, ItemRef

logger = logging.getLogger(__name__)

_NOTATION_RE = re.compile(r"^(?P<count>\d*)d(?P<faces>\d+)$", re.IGNORECASE)
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")
_SEPARATOR_RE = re.compile(r"[\s+]+")


class DiceError(ValueError):
    """Raised when an artifact dice notation is invalid."""


@dataclass
class RollModifiers:
    """Artifact notations and the summed skill modifier gathered for a roll."""

    artifacts: list[str] = field(default_factory=list)
    modifier: int = 0

    def artifact_dice(self) -> list[ArtifactDice]:
        return [parse_artifact(notation) for notation in self.artifacts]


def is_artifact(token: str) -> bool:
    """Return True if the token is written in artifact dice notation."""
    return _NOTATION_RE.match(token.strip()) is not None


def parse_artifact(notation: str) -> ArtifactDice:
    """Parse artifact notation into an ArtifactDice.

    Args:
        notation: Notation string, e.g. "2d8" or "d12".

    Returns:
        The number of dice and faces per die.

    Raises:
        DiceError: If the notation is invalid or out of range.
    """
    m = _NOTATION_RE.match(notation.strip())
    if not m:
        raise DiceError(f"Invalid artifact dice: {notation!r}")

    count = int(m.group("count") or 1)
    faces = int(m.group("faces"))

    if count < 1:
        raise DiceError(f"Artifact dice need at least one die: {notation!r}")
    if faces < 1:
        raise DiceError(f"Artifact dice need at least one face: {notation!r}")
    if count > MAX_DICE:
        raise DiceError(f"Too many dice: {count} (max {MAX_DICE})")
    if faces > MAX_FACES:
        raise DiceError(f"Too many faces: {faces} (max {MAX_FACES})")

    return ArtifactDice(dice=count, faces=faces)


def parse_artifacts(text: str) -> list[ArtifactDice]:
    """Parse a space or plus separated list of artifact notations."""
    return [parse_artifact(token) for token in _SEPARATOR_RE.split(text) if token]


def parse_modifiers(value: str | int | None) -> RollModifiers:
    """Split a free-text bonus into artifact notations and a numeric modifier.

    Args:
        value: A bonus string such as ``"2d8 +1"``, a bare integer, or None.

    Returns:
        RollModifiers with artifacts in order of appearance.
    """
    modifiers = RollModifiers()
    if isinstance(value, bool) or value is None:
        return modifiers
    if isinstance(value, int):
        modifiers.modifier = value
        return modifiers

    for token in _SEPARATOR_RE.split(value):
        if not token:
            continue
        if is_artifact(token):
            modifiers.artifacts.append(token)
        elif _INTEGER_RE.match(token):
            modifiers.modifier += int(token)
        else:
            logger.debug("Ignoring unrecognised bonus token %r in %r", token, value)
    return modifiers


def parse_bonus(value: str | int | None) -> int:
    """Return the leading number of a gear bonus, or 0 when there is none."""
    if isinstance(value, int) and not isinstance(value, bool):
        return max(value, 0)
    if not value:
        return 0
    m = _LEADING_INT_RE.match(value)
    return int(m.group(1)) if m else 0


def collect_roll_modifiers(
    label: str,
    items: Iterable[ItemRef],
    base: RollModifiers | None = None,
) -> RollModifiers:
    """Add every item roll modifier that applies to ``label``.

    Args:
        label: Attribute, skill or action identifier being rolled.
        items: Items carried by the character.
        base: Modifiers gathered so far; extended in place when given.

    Returns:
        The combined modifiers.
    """
    modifiers = base if base is not None else RollModifiers()
    for item in items:
        for entry in item.roll_modifiers:
            if not entry or entry.get("name") != label:
                continue
            parsed = parse_modifiers(entry.get("value"))
            modifiers.modifier += parsed.modifier
            modifiers.artifacts.extend(parsed.artifacts)
    return modifiers
