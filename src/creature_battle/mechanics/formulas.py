"""Stat derivation and damage formulas the engine calls into.

The resolvers depend only on the ``BattleFormulas`` interface. ``DefaultFormulas``
is the reference balance; tests and alternative rule sets inject their own.
"""
from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from creature_battle.mechanics.dice import roll_percent, roll_variance
from creature_battle.mechanics.elements import effectiveness_multiplier, get_effectiveness
from creature_battle.models.results import DamageRoll
from creature_battle.utils import round_half_up, safe_number

if TYPE_CHECKING:
    from creature_battle.models.creature import Creature

RARITY_MULTIPLIERS: dict[str, float] = {
    "Common": 1.0,
    "Rare": 1.03,
    "Epic": 1.06,
    "Legendary": 1.1,
}

RARITY_ENERGY_COST: dict[str, int] = {
    "Common": 3,
    "Rare": 4,
    "Epic": 5,
    "Legendary": 6,
}

COMBO_BONUS_PER_ACTION = 0.05
COMBO_MAX_BONUS = 0.25
CRITICAL_MULTIPLIER = 1.5


def _rarity_key(rarity) -> str:
    return str(getattr(rarity, "value", rarity))


def get_rarity_multiplier(rarity: str) -> float:
    return RARITY_MULTIPLIERS.get(_rarity_key(rarity), 1.0)


def get_form_multiplier(form: int) -> float:
    """Each evolution form adds 10%."""
    return 1.0 + max(0, int(safe_number(form))) * 0.1


def calculate_combo_bonus(combo_level: int) -> float:
    """Damage multiplier for consecutive actions: +5% each, capped at +25%.

    A single action (or none) is no combo.
    """
    if combo_level <= 1:
        return 1.0
    return 1.0 + min(combo_level * COMBO_BONUS_PER_ACTION, COMBO_MAX_BONUS)


class BattleFormulas(ABC):
    """External collaborators of the battle core."""

    @abstractmethod
    def derive_battle_stats(self, creature: Creature) -> dict[str, float]: ...

    @abstractmethod
    def calculate_damage(
        self,
        attacker: Creature,
        defender: Creature,
        attack_type: str,
        combo_multiplier: float,
        rng: random.Random | None = None,
    ) -> DamageRoll: ...

    def combo_bonus(self, combo_level: int) -> float:
        return calculate_combo_bonus(combo_level)

    def rarity_multiplier(self, rarity: str) -> float:
        return get_rarity_multiplier(rarity)

    def form_multiplier(self, form: int) -> float:
        return get_form_multiplier(form)


class DefaultFormulas(BattleFormulas):
    """Reference balance for stat derivation and attack damage."""

    def derive_battle_stats(self, creature: Creature) -> dict[str, float]:
        stats = creature.stats or {}

        def base(name: str) -> float:
            return safe_number(stats.get(name), 5) or 5

        energy = base("energy")
        strength = base("strength")
        magic = base("magic")
        stamina = base("stamina")
        speed = base("speed")

        mult = self.rarity_multiplier(creature.rarity) * self.form_multiplier(creature.form)

        return {
            "physicalAttack": round_half_up((10 + strength * 2) * mult),
            "magicalAttack": round_half_up((10 + magic * 2) * mult),
            "physicalDefense": round_half_up((5 + stamina + strength * 0.5) * mult),
            "magicalDefense": round_half_up((5 + magic + energy * 0.5) * mult),
            "maxHealth": round_half_up((50 + stamina * 5) * mult),
            "initiative": round_half_up((10 + speed * 2) * mult),
            "criticalChance": round_half_up(5 + speed * 0.5),
            "dodgeChance": round_half_up(3 + speed * 0.3),
            "energyCost": RARITY_ENERGY_COST.get(_rarity_key(creature.rarity), 3) + min(creature.form, 2),
        }

    def calculate_damage(
        self,
        attacker: Creature,
        defender: Creature,
        attack_type: str,
        combo_multiplier: float,
        rng: random.Random | None = None,
    ) -> DamageRoll:
        a_stats = attacker.battle_stats or {}
        d_stats = defender.battle_stats or {}

        if attack_type == "magical":
            attack = safe_number(a_stats.get("magicalAttack"))
            defense = safe_number(d_stats.get("magicalDefense"))
        else:
            attack = safe_number(a_stats.get("physicalAttack"))
            defense = safe_number(d_stats.get("physicalDefense"))

        dodge_chance = safe_number(d_stats.get("dodgeChance"))
        if dodge_chance > 0 and roll_percent(dodge_chance, rng):
            return DamageRoll(
                damage=0,
                is_dodged=True,
                combo_multiplier=combo_multiplier,
            )

        crit_chance = safe_number(a_stats.get("criticalChance"))
        is_critical = crit_chance > 0 and roll_percent(crit_chance, rng)
        effectiveness = get_effectiveness(attacker.element, defender.element)

        raw = max(1.0, attack - defense * 0.5)
        raw *= combo_multiplier * effectiveness_multiplier(effectiveness)
        raw *= roll_variance(0.9, 1.1, rng)
        if is_critical:
            raw *= CRITICAL_MULTIPLIER

        if defender.is_defending:
            reduction = sum(
                e.damage_reduction or 0
                for e in defender.active_effects
                if e is not None and e.damage_reduction
            )
            raw *= max(0.0, 1.0 - min(reduction, 0.8))

        damage_type = "normal"
        if attack_type == "magical" and attacker.element and attacker.element != "neutral":
            damage_type = attacker.element

        return DamageRoll(
            damage=max(1, round_half_up(raw)),
            is_dodged=False,
            is_critical=is_critical,
            effectiveness=effectiveness,
            damage_type=damage_type,
            combo_multiplier=combo_multiplier,
        )


_default_formulas = DefaultFormulas()


def get_formulas(formulas: BattleFormulas | None = None) -> BattleFormulas:
    return formulas if formulas is not None else _default_formulas
