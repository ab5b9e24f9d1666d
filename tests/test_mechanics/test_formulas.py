"""Tests for src/creature_battle/mechanics/formulas.py and elements.py."""
from __future__ import annotations

import pytest

from creature_battle.mechanics.elements import effectiveness_multiplier, get_effectiveness
from creature_battle.mechanics.formulas import (
    DefaultFormulas,
    calculate_combo_bonus,
    get_form_multiplier,
    get_formulas,
    get_rarity_multiplier,
)
from creature_battle.models.creature import Rarity
from creature_battle.models.effect import Effect, EffectKind


class TestComboBonus:
    @pytest.mark.parametrize("level, expected", [
        (0, 1.0), (1, 1.0), (2, 1.10), (3, 1.15), (5, 1.25), (9, 1.25),
    ])
    def test_values(self, level, expected):
        assert calculate_combo_bonus(level) == pytest.approx(expected)

    def test_monotonic_and_capped(self):
        values = [calculate_combo_bonus(n) for n in range(20)]
        assert values == sorted(values)
        assert max(values) == pytest.approx(1.25)


class TestMultipliers:
    @pytest.mark.parametrize("rarity, expected", [
        ("Common", 1.0), ("Rare", 1.03), ("Epic", 1.06), ("Legendary", 1.1), ("Mythic", 1.0),
    ])
    def test_rarity(self, rarity, expected):
        assert get_rarity_multiplier(rarity) == expected

    def test_rarity_accepts_enum(self):
        assert get_rarity_multiplier(Rarity.LEGENDARY) == 1.1

    def test_form(self):
        assert get_form_multiplier(0) == 1.0
        assert get_form_multiplier(3) == pytest.approx(1.3)

    def test_default_formulas_shared(self):
        assert isinstance(get_formulas(), DefaultFormulas)
        custom = DefaultFormulas()
        assert get_formulas(custom) is custom


class TestDeriveBattleStats:
    def test_baseline_creature(self, make_creature):
        creature = make_creature(battle_stats=None)
        stats = DefaultFormulas().derive_battle_stats(creature)
        assert stats == {
            "physicalAttack": 20,
            "magicalAttack": 20,
            "physicalDefense": 13,
            "magicalDefense": 13,
            "maxHealth": 75,
            "initiative": 20,
            "criticalChance": 8,
            "dodgeChance": 5,
            "energyCost": 3,
        }

    def test_rarity_and_form_raise_stats(self, make_creature):
        common = DefaultFormulas().derive_battle_stats(make_creature())
        legend = DefaultFormulas().derive_battle_stats(make_creature(rarity="Legendary", form=2))
        assert legend["physicalAttack"] > common["physicalAttack"]
        assert legend["maxHealth"] > common["maxHealth"]
        assert legend["energyCost"] == 8


class TestDefaultDamage:
    def _pair(self, make_creature, **defender_kwargs):
        attacker = make_creature("Striker", battle_stats={"physicalAttack": 50, "magicalAttack": 10, "criticalChance": 10})
        defender = make_creature("Target", battle_stats={"physicalDefense": 20, "maxHealth": 100, "dodgeChance": 5}, **defender_kwargs)
        return attacker, defender

    def test_plain_hit(self, make_creature, scripted_rng):
        attacker, defender = self._pair(make_creature)
        roll = DefaultFormulas().calculate_damage(attacker, defender, "physical", 1.0, scripted_rng(0.999, 0.999, 0.5))
        assert roll.damage == 40
        assert not roll.is_dodged
        assert not roll.is_critical
        assert roll.effectiveness == "normal"

    def test_dodge(self, make_creature, scripted_rng):
        attacker, defender = self._pair(make_creature)
        roll = DefaultFormulas().calculate_damage(attacker, defender, "physical", 1.0, scripted_rng(0.0))
        assert roll.is_dodged
        assert roll.damage == 0

    def test_critical(self, make_creature, scripted_rng):
        attacker, defender = self._pair(make_creature)
        roll = DefaultFormulas().calculate_damage(attacker, defender, "physical", 1.0, scripted_rng(0.999, 0.0, 0.5))
        assert roll.is_critical
        assert roll.damage == 60

    def test_defending_reduces_damage(self, make_creature, scripted_rng):
        stance = Effect(name="Defensive Stance", kind=EffectKind.DEFENSE, damage_reduction=0.2)
        attacker, defender = self._pair(make_creature, is_defending=True, active_effects=[stance])
        roll = DefaultFormulas().calculate_damage(attacker, defender, "physical", 1.0, scripted_rng(0.999, 0.999, 0.5))
        assert roll.damage == 32

    def test_magical_attack_carries_element(self, make_creature, scripted_rng):
        attacker = make_creature("Tide", element="water", battle_stats={"magicalAttack": 40})
        defender = make_creature("Ember", element="fire", battle_stats={"magicalDefense": 10, "maxHealth": 100})
        roll = DefaultFormulas().calculate_damage(attacker, defender, "magical", 1.0, scripted_rng(0.5))
        assert roll.effectiveness == "effective"
        assert roll.damage_type == "water"
        assert roll.damage == 44

    def test_minimum_damage_is_one(self, make_creature, scripted_rng):
        attacker = make_creature("Weak", battle_stats={"physicalAttack": 1})
        defender = make_creature("Wall", battle_stats={"physicalDefense": 500, "maxHealth": 100})
        roll = DefaultFormulas().calculate_damage(attacker, defender, "physical", 1.0, scripted_rng(0.999, 0.0))
        assert roll.damage == 1


class TestElements:
    @pytest.mark.parametrize("attacker, defender, expected", [
        ("water", "fire", "effective"),
        ("fire", "earth", "effective"),
        ("fire", "water", "not very effective"),
        ("light", "dark", "very effective"),
        ("dark", "light", "very effective"),
        ("neutral", "fire", "normal"),
        (None, "fire", "normal"),
    ])
    def test_matchups(self, attacker, defender, expected):
        assert get_effectiveness(attacker, defender) == expected

    def test_multipliers(self):
        assert effectiveness_multiplier("very effective") == 1.5
        assert effectiveness_multiplier("not very effective") == 0.75
        assert effectiveness_multiplier("unheard of") == 1.0
