"""Tests for chat markup rendering and localization."""

from helpers import FixedRandom
from yzdice.engine import ConsumableOutcome, ItemRef, RollEngine, RollRequest
from yzdice.i18n import localize
from yzdice.rendering import render_consumable, render_roll


def _result(name="ACTION.SLASH", faces=(6, 1, 8), items=None, push_faces=None):
    rng = FixedRandom(list(faces))
    engine = RollEngine(rng)
    result = engine.roll(RollRequest(name, base=1, skill=1, gear=1, items=items))
    if push_faces is not None:
        rng.faces = list(push_faces)
        result = engine.push()
    return result


def test_localize_known_and_unknown():
    assert localize("ACTION.PARRY") == "Parry"
    assert localize("Strike at the troll") == "Strike at the troll"
    assert localize(None) == ""


def test_roll_shows_totals_and_localized_name():
    html = render_roll(_result())
    assert "Slash" in html
    assert "Swords: 3" in html
    assert "Skulls: 0" in html
    assert "Pushed" not in html


def test_roll_lists_dice_in_display_order():
    html = render_roll(_result())
    gear = html.index('data-face="8"')
    base = html.index('data-face="6"')
    skill = html.index('data-face="1"')
    assert gear < base < skill
    assert "die-skill" in html
    assert "die-gear d6" in html


def test_pushed_roll_marks_kept_dice():
    html = render_roll(_result(faces=(3, 1, 6), push_faces=(1, 6)))
    assert "(Pushed)" in html
    assert "not-rolled" in html
    assert "Skulls: 1" in html


def test_weapon_damage_line():
    html = render_roll(_result(items=[ItemRef("weapon", damage=2)]))
    assert "Damage: 4" in html


def test_no_effect_line_without_item():
    assert 'class="effect' not in render_roll(_result())


def test_roll_name_is_escaped():
    html = render_roll(_result(name="<script>alert(1)</script>"))
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_consumable_success():
    html = render_consumable("CONSUMABLE.FOOD", ConsumableOutcome(succeeded=True, face_value=5))
    assert "Food" in html
    assert "Succeeded" in html
    assert ">5<" in html


def test_consumable_without_die():
    html = render_consumable("CONSUMABLE.WATER", ConsumableOutcome(succeeded=False))
    assert "Failed" in html
    assert 'class="die"' not in html
