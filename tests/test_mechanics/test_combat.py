"""Tests for src/creature_battle/mechanics/combat.py."""
from __future__ import annotations

import pytest

from creature_battle.mechanics.combat import (
    INVALID_ATTACK_LOG,
    defeat_message,
    defend_creature,
    process_attack,
    resolve_attack_type,
)
from creature_battle.models.effect import EffectKind
from creature_battle.models.item import EffectTag
from creature_battle.models.results import DamageRoll


@pytest.fixture
def duelists(make_creature):
    return make_creature("A"), make_creature("D")


class TestAttackType:
    def test_auto_prefers_higher_attack(self, make_creature):
        mage = make_creature(battle_stats={"physicalAttack": 10, "magicalAttack": 30})
        assert resolve_attack_type(mage) == "magical"

    def test_auto_tie_is_physical(self, make_creature):
        even = make_creature(battle_stats={"physicalAttack": 20, "magicalAttack": 20})
        assert resolve_attack_type(even) == "physical"

    def test_explicit_type_kept(self, make_creature):
        assert resolve_attack_type(make_creature(), "magical") == "magical"


class TestProcessAttack:
    def test_plain_hit(self, duelists, stub_formulas):
        attacker, defender = duelists
        result = process_attack(attacker, defender, formulas=stub_formulas)

        assert result.is_valid
        assert result.damage == 30
        assert result.attack_type == "physical"
        assert result.updated_defender.current_health == 70
        assert not result.is_critical
        assert result.battle_log == "A used physical attack on D dealing 30 damage."

    def test_inputs_untouched(self, duelists, stub_formulas):
        attacker, defender = duelists
        result = process_attack(attacker, defender, formulas=stub_formulas)
        assert defender.current_health == 100
        assert result.updated_defender is not defender
        assert result.updated_attacker is not attacker

    def test_damage_capped_by_remaining_health(self, make_creature, stub_formulas):
        defender = make_creature("D", rarity="Legendary", health=20)
        result = process_attack(make_creature("A"), defender, formulas=stub_formulas)
        assert result.damage == 20
        assert result.updated_defender.current_health == 0
        assert result.battle_log.endswith("dealing 20 damage. D falls in battle!")

    @pytest.mark.parametrize("health, suffix", [
        (60, " D is wounded!"),
        (45, " D is critically wounded!"),
        (100, "dealing 30 damage."),
    ])
    def test_health_suffix(self, make_creature, stub_formulas, health, suffix):
        result = process_attack(make_creature("A"), make_creature("D", health=health), formulas=stub_formulas)
        assert result.battle_log.endswith(suffix)

    def test_combo(self, duelists, stub_formulas):
        result = process_attack(*duelists, combo_level=3, formulas=stub_formulas)
        assert "[Combo x3!]" in result.battle_log
        assert stub_formulas.calls[0]["combo"] == pytest.approx(1.15)
        assert result.damage_result.combo_multiplier == pytest.approx(1.15)

    def test_dodge(self, duelists, make_formulas):
        formulas = make_formulas(roll=DamageRoll(damage=0, is_dodged=True))
        result = process_attack(*duelists, formulas=formulas)
        assert result.damage == 0
        assert result.is_dodged
        assert result.updated_defender.current_health == 100
        assert result.battle_log == "A's physical attack was dodged by D!"

    def test_critical_trauma(self, duelists, make_formulas, scripted_rng):
        formulas = make_formulas(roll=DamageRoll(damage=30, is_critical=True))
        result = process_attack(*duelists, turn=2, rng=scripted_rng(0.1), formulas=formulas)

        assert "(Critical Hit!)" in result.battle_log
        assert [e.name for e in result.applied_effects] == ["Critical Strike Trauma"]
        trauma = result.updated_defender.active_effects[-1]
        assert trauma.kind is EffectKind.DEBUFF
        assert trauma.start_turn == 2
        assert result.updated_defender.battle_stats["physicalDefense"] == 38

    def test_critical_without_trauma(self, duelists, make_formulas, scripted_rng):
        formulas = make_formulas(roll=DamageRoll(damage=30, is_critical=True))
        result = process_attack(*duelists, rng=scripted_rng(0.5), formulas=formulas)
        assert result.applied_effects == []
        assert result.updated_defender.active_effects == []

    def test_elemental_weakness(self, duelists, make_formulas, scripted_rng):
        formulas = make_formulas(roll=DamageRoll(damage=30, effectiveness="effective"))
        result = process_attack(*duelists, rng=scripted_rng(0.1), formulas=formulas)
        assert " - effective!" in result.battle_log
        assert [e.name for e in result.applied_effects] == ["Elemental Weakness"]
        assert result.applied_effects[0].duration == 2

    def test_charged_attack_consumes_bonus(self, make_creature, stub_formulas):
        attacker = make_creature("A", next_attack_bonus=15)
        result = process_attack(attacker, make_creature("D"), formulas=stub_formulas)

        assert stub_formulas.calls[0]["attack"]["physicalAttack"] == 65
        assert result.updated_attacker.next_attack_bonus is None
        assert result.updated_attacker.battle_stats["physicalAttack"] == 50
        assert attacker.next_attack_bonus == 15

    def test_invalid_attack(self, make_creature, stub_formulas):
        defender = make_creature("D", battle_stats={})
        result = process_attack(make_creature("A"), defender, formulas=stub_formulas)
        assert not result.is_valid
        assert result.battle_log == INVALID_ATTACK_LOG
        assert result.updated_defender is defender
        assert stub_formulas.calls == []

    def test_legacy_view(self, duelists, stub_formulas):
        legacy = process_attack(*duelists, formulas=stub_formulas).to_legacy_dict()
        assert legacy["finalDamage"] == legacy["damageDealt"] == 30
        assert legacy["damageResult"]["isDodged"] is False
        assert legacy["attackType"] == "physical"


class TestDefend:
    def test_common_stance(self, make_creature, stub_formulas):
        creature = make_creature("Guard")
        defended = defend_creature(creature, formulas=stub_formulas)

        assert defended.is_defending
        assert defended.battle_stats["physicalDefense"] == 60
        assert defended.battle_stats["magicalDefense"] == 45
        stance = defended.active_effects[-1]
        assert stance.name == "Defensive Stance"
        assert stance.kind is EffectKind.DEFENSE
        assert stance.effect_tag is EffectTag.SHIELD
        assert stance.duration == 1
        assert stance.damage_reduction == pytest.approx(0.2)
        assert not creature.is_defending

    def test_rarity_adds_to_boost(self, make_creature, stub_formulas):
        defended = defend_creature(make_creature("Guard", rarity="Legendary"), formulas=stub_formulas)
        assert defended.active_effects[-1].stat_modifications == {"physicalDefense": 22, "magicalDefense": 17}

    @pytest.mark.parametrize("difficulty, reduction", [("easy", 0.2), ("hard", 0.4), ("expert", 0.4)])
    def test_difficulty_reduction(self, make_creature, stub_formulas, difficulty, reduction):
        defended = defend_creature(make_creature(), difficulty, formulas=stub_formulas)
        assert defended.active_effects[-1].damage_reduction == pytest.approx(reduction)

    def test_missing_defense_uses_default(self, make_creature, stub_formulas):
        creature = make_creature(battle_stats={"physicalDefense": 0, "magicalDefense": 10, "maxHealth": 100})
        defended = defend_creature(creature, formulas=stub_formulas)
        assert defended.active_effects[-1].stat_modifications["physicalDefense"] == 25
        assert defended.active_effects[-1].stat_modifications["magicalDefense"] == 5

    def test_without_stats_returns_input(self, make_creature):
        creature = make_creature(battle_stats={})
        assert defend_creature(creature) is creature


class TestDefeatMessage:
    @pytest.mark.parametrize("rarity, expected", [
        ("Legendary", "Fallen falls in battle!"),
        ("Epic", "Fallen has been defeated!"),
        ("Rare", "Fallen was defeated!"),
        ("Common", "Fallen was defeated!"),
    ])
    def test_by_rarity(self, make_creature, rarity, expected):
        assert defeat_message(make_creature("Fallen", rarity=rarity)) == expected
