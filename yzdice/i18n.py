"""Display text for roll names, consumables and outcomes.

Callers pass identifiers such as ``ACTION.PARRY`` around; the chat templates
turn them into text through ``localize``. Unknown keys render as themselves so
free-text roll names ("Strike at the troll") pass through untouched.
"""

from __future__ import annotations

LABELS: dict[str, str] = {
    # Attributes
    "ATTRIBUTE.STRENGTH": "Strength",
    "ATTRIBUTE.AGILITY": "Agility",
    "ATTRIBUTE.WITS": "Wits",
    "ATTRIBUTE.EMPATHY": "Empathy",
    # Actions
    "ACTION.PARRY": "Parry",
    "ACTION.SHOVE": "Shove",
    "ACTION.DISARM": "Disarm",
    "ACTION.SLASH": "Slash",
    "ACTION.STAB": "Stab",
    "ACTION.PUNCH": "Punch",
    "ACTION.SHOOT": "Shoot",
    "HEADER.ARMOR": "Armor",
    # Consumables
    "CONSUMABLE.FOOD": "Food",
    "CONSUMABLE.WATER": "Water",
    "CONSUMABLE.ARROWS": "Arrows",
    "CONSUMABLE.TORCHES": "Torches",
    # Roll outcomes
    "SUCCEED": "Succeeded",
    "FAILED": "Failed",
    "ROLL.PUSHED": "Pushed",
    "ROLL.SWORDS": "Swords",
    "ROLL.SKULLS": "Skulls",
    "ROLL.POWER_LEVEL": "Power level",
    "ROLL.DAMAGE": "Damage",
    "ROLL.ARMOR": "Armor rating",
}


def localize(key: str | None) -> str:
    """Return the display text for ``key``, or the key itself when unknown."""
    if not key:
        return ""
    return LABELS.get(key, key)
