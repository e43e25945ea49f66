"""Jinja2 rendering of roll results into chat markup."""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from yzdice.engine import ConsumableOutcome, DerivedEffect, RollResult
from yzdice.i18n import localize

_env = Environment(
    loader=FileSystemLoader(Path(__file__).parent / "templates"),
    autoescape=select_autoescape(["html", "xml"]),
)
_env.filters["localize"] = localize

EFFECT_LABELS: dict[DerivedEffect, str] = {
    DerivedEffect.power_level: "ROLL.POWER_LEVEL",
    DerivedEffect.damage: "ROLL.DAMAGE",
    DerivedEffect.armor: "ROLL.ARMOR",
}


def render_roll(result: RollResult) -> str:
    """Render a roll result with its dice, totals and derived effect."""
    return _env.get_template("chat/roll.html").render(
        result=result,
        effect_label=EFFECT_LABELS.get(result.effect) if result.effect else None,
    )


def render_consumable(name: str, outcome: ConsumableOutcome) -> str:
    """Render the outcome of a consumable check."""
    return _env.get_template("chat/consumable.html").render(
        name=name,
        outcome=outcome,
        result_key="SUCCEED" if outcome.succeeded else "FAILED",
    )
