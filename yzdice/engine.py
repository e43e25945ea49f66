"""Dice pool engine for Year Zero tests.

A test rolls a pool of six-sided base, skill and gear dice plus any number of
artifact dice. Each die face is worth a number of successes (swords); base and
gear dice showing a 1 are failures (skulls). A pool may be pushed once, which
rerolls every die that has neither succeeded nor, for base and gear dice,
failed.

Success bands
-------------
Thresholds are absolute face values, so an artifact d12 uses the same table
as a d6:

  12+       4 successes
  10-11     3 successes
  8-9       2 successes
  6-7       1 success (-1 on a skill penalty die)
  1         skull on base, gear and artifact dice (weight -2, no success)

The weight is only used to order dice for display.
"""

from __future__ import annotations

import copy
import enum
import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

STANDARD_FACES = 6

# Upper limits on any one pool, whichever way the request arrives.
MAX_DICE = 100
MAX_FACES = 100

# Roll names that never deal weapon damage even when a weapon is attached.
MANEUVERS: frozenset[str] = frozenset({"parry", "shove", "disarm"})

ARMOR_ROLL = "armor"


class DieCategory(str, enum.Enum):
    """Colour of a die in the pool."""

    base = "base"
    skill = "skill"
    skill_penalty = "skill_penalty"
    gear = "gear"
    artifact = "artifact"


# Categories whose 1s may be pushed and never count as skulls.
_PUSH_ANY_FAILURE = frozenset({DieCategory.artifact, DieCategory.skill, DieCategory.skill_penalty})
_SKULL_CATEGORIES = frozenset({DieCategory.base, DieCategory.gear})


class DerivedEffect(str, enum.Enum):
    """Secondary value computed from the swords of a finished roll."""

    power_level = "power_level"
    damage = "damage"
    armor = "armor"


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class RollError(ValueError):
    """Raised when the engine is driven outside its roll/push lifecycle."""


class InvalidRequest(RollError):
    """Raised when a roll request carries negative counts or bad faces."""


class AlreadyPushed(RollError):
    """Raised when a pool that has already been pushed is pushed again."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArtifactDice:
    """A group of artifact dice, e.g. 2d8 is ``ArtifactDice(dice=2, faces=8)``."""

    dice: int
    faces: int

    @property
    def notation(self) -> str:
        return f"{self.dice}d{self.faces}"


@dataclass(frozen=True)
class ItemRef:
    """The slice of an item the engine and modifier parser care about."""

    kind: str
    name: str = ""
    damage: int = 0
    roll_modifiers: Sequence[dict] = ()


@dataclass
class Die:
    face_count: int
    category: DieCategory
    face_value: int
    success: int = 0
    weight: int = 0
    rolled: bool = True

    def __post_init__(self) -> None:
        self.success, self.weight = evaluate(self.face_value, self.category)

    def set_face(self, face_value: int, *, rolled: bool = True) -> None:
        self.face_value = face_value
        self.success, self.weight = evaluate(face_value, self.category)
        self.rolled = rolled

    @property
    def is_skull(self) -> bool:
        return self.face_value == 1 and self.category in _SKULL_CATEGORIES

    @property
    def can_push(self) -> bool:
        if self.face_value >= STANDARD_FACES:
            return False
        return self.face_value > 1 or self.category in _PUSH_ANY_FAILURE


@dataclass(frozen=True)
class RollRequest:
    """Already-resolved dice counts for a single test.

    ``skill`` may be negative; together with ``modifier`` it decides whether the
    pool gets skill dice or skill penalty dice.
    """

    roll_name: str
    base: int = 0
    skill: int = 0
    gear: int = 0
    artifacts: Sequence[ArtifactDice] = ()
    modifier: int = 0
    items: Sequence[ItemRef] | None = None

    def __post_init__(self) -> None:
        if self.base < 0:
            raise InvalidRequest(f"Negative base dice: {self.base}")
        if self.gear < 0:
            raise InvalidRequest(f"Negative gear dice: {self.gear}")
        for name, count in (
            ("base", self.base),
            ("gear", self.gear),
            ("skill", abs(self.skill + self.modifier)),
        ):
            if count > MAX_DICE:
                raise InvalidRequest(f"Too many {name} dice: {count} (max {MAX_DICE})")
        for artifact in self.artifacts:
            if artifact.dice < 0:
                raise InvalidRequest(f"Negative artifact dice: {artifact.notation}")
            if artifact.faces < 1:
                raise InvalidRequest(f"Artifact die needs at least one face: {artifact.notation}")
            if artifact.dice > MAX_DICE:
                raise InvalidRequest(f"Too many artifact dice: {artifact.notation} (max {MAX_DICE})")
            if artifact.faces > MAX_FACES:
                raise InvalidRequest(f"Too many faces: {artifact.notation} (max {MAX_FACES})")
        artifact_total = sum(artifact.dice for artifact in self.artifacts)
        if artifact_total > MAX_DICE:
            raise InvalidRequest(f"Too many artifact dice: {artifact_total} (max {MAX_DICE})")

    @property
    def primary_item(self) -> ItemRef | None:
        return self.items[0] if self.items else None


@dataclass(frozen=True)
class RollResult:
    roll_name: str
    pushed: bool
    swords: int
    skulls: int
    gear: int
    dice: list[Die] = field(default_factory=list)
    effect: DerivedEffect | None = None
    effect_value: int | None = None


@dataclass(frozen=True)
class ConsumableOutcome:
    succeeded: bool
    face_value: int | None = None


# ---------------------------------------------------------------------------
# Pure rules
# ---------------------------------------------------------------------------


def evaluate(face_value: int, category: DieCategory) -> tuple[int, int]:
    """Return ``(success, weight)`` for a die face.

    Args:
        face_value: The rolled face.
        category: The die's colour.

    Returns:
        Signed success count and display weight.
    """
    if face_value == 12:
        return 4, 4
    if face_value >= 10:
        return 3, 3
    if face_value >= 8:
        return 2, 2
    if face_value >= 6:
        if category == DieCategory.skill_penalty:
            return -1, -1
        return 1, 1
    if face_value == 1 and category not in (DieCategory.skill, DieCategory.skill_penalty):
        return 0, -2
    return 0, 0


def identifier(roll_name: str) -> str:
    """Normalise a roll name to a bare lower-case identifier.

    ``ACTION.PARRY`` and ``Parry`` both become ``parry``.
    """
    return roll_name.rsplit(".", 1)[-1].strip().lower()


def derived_effect(
    roll_name: str,
    item: ItemRef | None,
    swords: int,
    skulls: int,
    gear: int,
) -> tuple[DerivedEffect | None, int | None]:
    """Pick the secondary effect of a roll; the first matching rule wins."""
    kind = item.kind if item is not None else None
    name = identifier(roll_name)
    if kind == "spell":
        return DerivedEffect.power_level, gear + swords - 1 if swords > 0 else 0
    if kind == "weapon" and name not in MANEUVERS:
        return DerivedEffect.damage, item.damage + swords - 1 if swords > 0 else 0
    if name == ARMOR_ROLL or kind == "armor":
        return DerivedEffect.armor, swords + skulls
    return None, None


def roll_consumable(faces: int | None, rng: random.Random | None = None) -> ConsumableOutcome:
    """Roll a consumable die (food, water, arrows, torches).

    A consumable with no die left fails outright. Otherwise it succeeds on
    anything above 2.
    """
    if not faces:
        return ConsumableOutcome(succeeded=False)
    face = (rng or random).randint(1, faces)
    return ConsumableOutcome(succeeded=face > 2, face_value=face)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class RollEngine:
    """Owns the pool of a single test from the first roll to the push.

    Args:
        rng: Random source; pass a seeded ``random.Random`` for repeatable rolls.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self.dice: list[Die] = []
        self.request: RollRequest | None = None
        self.pushed = False

    def roll(self, request: RollRequest) -> RollResult:
        """Build and evaluate the pool for a request."""
        if self.request is not None:
            raise RollError("This engine has already rolled; start a new one per test")
        self.request = request

        skill = request.skill + request.modifier
        if skill > 0:
            skill_category = DieCategory.skill
        else:
            skill, skill_category = -skill, DieCategory.skill_penalty

        self.roll_dice(request.base, DieCategory.base)
        self.roll_dice(skill, skill_category)
        self.roll_dice(request.gear, DieCategory.gear)
        for artifact in request.artifacts:
            self.roll_dice(artifact.dice, DieCategory.artifact, artifact.faces)

        result = self.result()
        logger.debug(
            "Rolled %r: %d dice, %d swords, %d skulls",
            request.roll_name,
            len(self.dice),
            result.swords,
            result.skulls,
        )
        return result

    def roll_dice(
        self,
        count: int,
        category: DieCategory,
        faces: int = STANDARD_FACES,
        automatic_success: int = 0,
    ) -> list[Die]:
        """Add ``count`` dice of one category to the pool.

        The first ``automatic_success`` dice are set to their top face without
        being rolled.
        """
        added = []
        for _ in range(max(count, 0)):
            if automatic_success > 0:
                die = Die(face_count=faces, category=category, face_value=faces, rolled=False)
                automatic_success -= 1
            else:
                die = Die(face_count=faces, category=category, face_value=self._rng.randint(1, faces))
            added.append(die)
        self.dice.extend(added)
        return added

    def push(self) -> RollResult:
        """Reroll every pushable die once and return the new result."""
        if self.request is None:
            raise RollError("Nothing to push: roll first")
        if self.pushed:
            raise AlreadyPushed("This roll has already been pushed")

        rerolled = 0
        for die in self.dice:
            if die.can_push:
                die.set_face(self._rng.randint(1, die.face_count))
                rerolled += 1
            else:
                die.rolled = False
        self.pushed = True

        result = self.result()
        logger.debug(
            "Pushed %r: rerolled %d of %d dice, %d swords, %d skulls",
            self.request.roll_name,
            rerolled,
            len(self.dice),
            result.swords,
            result.skulls,
        )
        return result

    @property
    def swords(self) -> int:
        return sum(die.success for die in self.dice)

    @property
    def skulls(self) -> int:
        return sum(1 for die in self.dice if die.is_skull)

    @property
    def gear(self) -> int:
        return sum(1 for die in self.dice if die.category == DieCategory.gear)

    def result(self) -> RollResult:
        """Snapshot the pool; repeated calls without a push are identical."""
        if self.request is None:
            raise RollError("Nothing to report: roll first")
        swords, skulls, gear = self.swords, self.skulls, self.gear
        effect, value = derived_effect(
            self.request.roll_name, self.request.primary_item, swords, skulls, gear
        )
        return RollResult(
            roll_name=self.request.roll_name,
            pushed=self.pushed,
            swords=swords,
            skulls=skulls,
            gear=gear,
            dice=sorted((copy.copy(die) for die in self.dice), key=lambda d: -d.weight),
            effect=effect,
            effect_value=value,
        )
