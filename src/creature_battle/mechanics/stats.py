"""Effective battle stats from base stats, effects and permanent modifications."""
from __future__ import annotations

import logging

from creature_battle.mechanics.formulas import BattleFormulas, get_formulas
from creature_battle.models.creature import Creature
from creature_battle.utils import round_half_up

logger = logging.getLogger(__name__)

COMBINATION_BONUS_PER_LEVEL = 0.08


def clamp_stat(stat: str, value: float) -> float:
    """Floor a stat by family: attacks/defenses 1, maxHealth 10, initiative/chances 0."""
    if "Attack" in stat or "Defense" in stat:
        return max(1, value)
    if stat == "maxHealth":
        return max(10, value)
    if stat == "initiative" or "Chance" in stat:
        return max(0, value)
    return value


def sum_effect_modifications(creature: Creature) -> dict[str, float]:
    totals: dict[str, float] = {}
    for effect in creature.active_effects:
        if effect is None:
            continue
        for stat, value in effect.active_modifications().items():
            totals[stat] = totals.get(stat, 0) + value
    return totals


def recalculate_battle_stats(creature: Creature, formulas: BattleFormulas | None = None) -> dict[str, float]:
    """Derive the creature's effective battle stats. Pure and idempotent."""
    if creature is None or not creature.stats:
        logger.error("Cannot recalculate stats for creature without base stats: %r", getattr(creature, "id", None))
        return dict(creature.battle_stats or {}) if creature is not None else {}

    stats = dict(get_formulas(formulas).derive_battle_stats(creature))

    for stat, delta in sum_effect_modifications(creature).items():
        if stat in stats:
            stats[stat] = clamp_stat(stat, stats[stat] + delta)

    for stat, delta in creature.permanent_modifications.items():
        if stat in stats:
            stats[stat] += delta

    if creature.combination_level > 0:
        multiplier = 1 + creature.combination_level * COMBINATION_BONUS_PER_LEVEL
        for stat, value in stats.items():
            if isinstance(value, (int, float)) and "Chance" not in stat and stat != "energyCost":
                stats[stat] = round_half_up(value * multiplier)

    return stats


def refresh_battle_stats(creature: Creature, formulas: BattleFormulas | None = None) -> Creature:
    """Recalculate stats in place on a creature the caller owns.

    Health is clamped down to the new maximum, never raised.
    """
    creature.battle_stats = recalculate_battle_stats(creature, formulas)
    max_health = creature.battle_stats.get("maxHealth")
    if max_health is not None and creature.current_health > max_health:
        creature.current_health = int(max_health)
    return creature
