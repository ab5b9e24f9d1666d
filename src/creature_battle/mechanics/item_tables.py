"""Base effect tables for tools and spells, keyed by (category, effect tag).

Balance data — pure, no I/O. Both tables cover every category/tag pair, so a
well-formed item always resolves to an entry. Spell entries scale with the
caster's magic power and are therefore built on demand.
"""
from __future__ import annotations

from typing import Callable

from creature_battle.models.item import (
    ChargeSpec,
    EffectTag,
    ItemCategory,
    PrepareSpec,
    SpellEffect,
    ToolEffect,
)
from creature_battle.utils import round_half_up

E = ItemCategory.ENERGY
ST = ItemCategory.STRENGTH
MA = ItemCategory.MAGIC
SA = ItemCategory.STAMINA
SP = ItemCategory.SPEED

_SHIELD_STATS = {"physicalDefense": 10, "magicalDefense": 10, "maxHealth": 15}
_DRAIN_STATS = {"physicalAttack": 8, "magicalAttack": 8, "physicalDefense": -3, "magicalDefense": -3}


def _charge(target: str, final_burst: int = 15) -> ChargeSpec:
    return ChargeSpec(target_stat=target, per_turn_bonus=3, max_turns=3, final_burst=final_burst)


TOOL_EFFECTS: dict[tuple[ItemCategory, EffectTag], ToolEffect] = {
    # Surge: doubled base stats, 1.5x base healing, one turn.
    (E, EffectTag.SURGE): ToolEffect(stat_changes={"energyCost": -1}, energy_gain=2, duration=1),
    (ST, EffectTag.SURGE): ToolEffect(stat_changes={"physicalAttack": 10, "physicalDefense": 5}, duration=2),
    (MA, EffectTag.SURGE): ToolEffect(
        stat_changes={"physicalDefense": 20, "magicalDefense": 20, "maxHealth": 30},
        health_change=7.5,
        duration=1,
    ),
    (SA, EffectTag.SURGE): ToolEffect(stat_changes={"physicalDefense": 10}, health_change=15, duration=1),
    (SP, EffectTag.SURGE): ToolEffect(
        stat_changes={"physicalAttack": 16, "magicalAttack": 16, "physicalDefense": -4, "magicalDefense": -4},
        health_change=7.5,
        duration=1,
    ),
    # Shield
    (E, EffectTag.SHIELD): ToolEffect(stat_changes=dict(_SHIELD_STATS), health_change=8, duration=3),
    (ST, EffectTag.SHIELD): ToolEffect(stat_changes=dict(_SHIELD_STATS), health_change=8, duration=3),
    (MA, EffectTag.SHIELD): ToolEffect(stat_changes=dict(_SHIELD_STATS), health_change=5, duration=2),
    (SA, EffectTag.SHIELD): ToolEffect(stat_changes=dict(_SHIELD_STATS), health_change=8, duration=3),
    (SP, EffectTag.SHIELD): ToolEffect(stat_changes=dict(_SHIELD_STATS), health_change=8, duration=3),
    # Echo: 70% of base stats, a quarter of base healing every turn, five turns.
    (E, EffectTag.ECHO): ToolEffect(stat_changes={"energyCost": -0.5}, health_over_time=2, duration=3),
    (ST, EffectTag.ECHO): ToolEffect(stat_changes={"physicalAttack": 7, "physicalDefense": 4}, duration=5),
    (MA, EffectTag.ECHO): ToolEffect(
        stat_changes={"physicalDefense": 7, "magicalDefense": 7, "maxHealth": 11},
        health_change=5,
        health_over_time=1,
        duration=5,
    ),
    (SA, EffectTag.ECHO): ToolEffect(
        stat_changes={"physicalDefense": 4},
        health_change=10,
        health_over_time=3,
        duration=5,
    ),
    (SP, EffectTag.ECHO): ToolEffect(
        stat_changes={"physicalAttack": 6, "magicalAttack": 6, "physicalDefense": -1, "magicalDefense": -1},
        health_change=5,
        health_over_time=1,
        duration=5,
    ),
    # Drain: trade defense for offense.
    (E, EffectTag.DRAIN): ToolEffect(stat_changes=dict(_DRAIN_STATS), health_change=5, duration=3),
    (ST, EffectTag.DRAIN): ToolEffect(stat_changes=dict(_DRAIN_STATS), health_change=5, duration=3),
    (MA, EffectTag.DRAIN): ToolEffect(stat_changes=dict(_DRAIN_STATS), health_change=5, duration=3),
    (SA, EffectTag.DRAIN): ToolEffect(stat_changes=dict(_DRAIN_STATS), health_change=5, duration=3),
    (SP, EffectTag.DRAIN): ToolEffect(
        stat_changes={"physicalAttack": 8, "magicalAttack": 8, "physicalDefense": -2, "magicalDefense": -2},
        health_change=5,
        duration=3,
    ),
    # Charge: ramps the category's lead stat, then releases a burst.
    (E, EffectTag.CHARGE): ToolEffect(charge_effect=_charge("energyCost"), duration=3),
    (ST, EffectTag.CHARGE): ToolEffect(charge_effect=_charge("physicalAttack"), duration=3),
    (MA, EffectTag.CHARGE): ToolEffect(charge_effect=_charge("physicalDefense"), duration=3),
    (SA, EffectTag.CHARGE): ToolEffect(
        stat_changes={"physicalDefense": 3},
        charge_effect=_charge("physicalDefense", final_burst=25),
        duration=3,
    ),
    (SP, EffectTag.CHARGE): ToolEffect(charge_effect=_charge("physicalAttack"), duration=3),
}


def magic_power(caster_magic: float) -> float:
    return 1 + caster_magic * 0.15


def _surge(damage: float) -> SpellEffect:
    return SpellEffect(damage=damage, critical_chance=15, armor_piercing=True, duration=0)


def _shield(defense: int, max_health: int, reduction: float, mp: float) -> SpellEffect:
    return SpellEffect(
        stat_changes={"physicalDefense": defense, "magicalDefense": defense, "maxHealth": max_health},
        healing=15 * mp,
        damage_reduction=reduction,
        duration=3,
    )


def _drain(mp: float) -> SpellEffect:
    return SpellEffect(
        damage=18 * mp,
        self_heal=10 * mp,
        stat_drain={"physicalAttack": -3, "magicalAttack": -3},
        stat_gain={"physicalAttack": 2, "magicalAttack": 2},
        duration=2,
    )


def _charge_spell(mp: float) -> SpellEffect:
    return SpellEffect(
        prepare_effect=PrepareSpec(name="Charging Spell", turns=1, damage=35 * mp, area_effect=True, stun_chance=0.2),
        charge_bonus=5 * mp,
        duration=1,
    )


def _echo_drain(base_damage: float, mp: float) -> SpellEffect:
    return SpellEffect(health_over_time=round_half_up(-(base_damage / 3) * mp), duration=3)


SpellBuilder = Callable[[float], SpellEffect]

SPELL_EFFECTS: dict[tuple[ItemCategory, EffectTag], SpellBuilder] = {
    (E, EffectTag.SURGE): lambda mp: _surge(25 * mp),
    (ST, EffectTag.SURGE): lambda mp: _surge(18 * mp * 2.5),
    (MA, EffectTag.SURGE): lambda mp: _surge(15 * 2.5),
    (SA, EffectTag.SURGE): lambda mp: _surge(15 * 2.5),
    (SP, EffectTag.SURGE): lambda mp: _surge(15 * 2.5),
    (E, EffectTag.SHIELD): lambda mp: _shield(12, 20, 0.2, mp),
    (ST, EffectTag.SHIELD): lambda mp: _shield(12, 20, 0.2, mp),
    (MA, EffectTag.SHIELD): lambda mp: _shield(12, 20, 0.2, mp),
    (SA, EffectTag.SHIELD): lambda mp: _shield(8, 15, 0.15, mp),
    (SP, EffectTag.SHIELD): lambda mp: _shield(12, 20, 0.2, mp),
    # Echo turns the category's base damage or healing into a per-turn pulse.
    (E, EffectTag.ECHO): lambda mp: _echo_drain(20 * mp, mp),
    (ST, EffectTag.ECHO): lambda mp: _echo_drain(18 * mp, mp),
    (MA, EffectTag.ECHO): lambda mp: SpellEffect(duration=3),
    (SA, EffectTag.ECHO): lambda mp: SpellEffect(
        health_over_time=round_half_up((15 * mp / 3) * mp),
        stat_changes={"physicalDefense": 2, "magicalDefense": 2, "maxHealth": 5},
        duration=3,
    ),
    (SP, EffectTag.ECHO): lambda mp: SpellEffect(
        stat_changes={"initiative": 5, "dodgeChance": 3, "criticalChance": 3},
        health_over_time=3,
        duration=3,
    ),
    (E, EffectTag.DRAIN): _drain,
    (ST, EffectTag.DRAIN): _drain,
    (MA, EffectTag.DRAIN): _drain,
    (SA, EffectTag.DRAIN): _drain,
    (SP, EffectTag.DRAIN): _drain,
    (E, EffectTag.CHARGE): _charge_spell,
    (ST, EffectTag.CHARGE): _charge_spell,
    (MA, EffectTag.CHARGE): _charge_spell,
    (SA, EffectTag.CHARGE): _charge_spell,
    (SP, EffectTag.CHARGE): _charge_spell,
}


def get_tool_effect(category: ItemCategory, tag: EffectTag) -> ToolEffect:
    return TOOL_EFFECTS[(ItemCategory(category), EffectTag(tag))]


def get_spell_effect(category: ItemCategory, tag: EffectTag, caster_magic: float = 5) -> SpellEffect:
    return SPELL_EFFECTS[(ItemCategory(category), EffectTag(tag))](magic_power(caster_magic))
