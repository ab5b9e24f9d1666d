"""Structured results returned by the resolvers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from creature_battle.models.creature import Creature
from creature_battle.models.effect import Effect
from creature_battle.models.item import SpellEffect, ToolEffect


@dataclass
class DamageRoll:
    damage: int = 0
    is_dodged: bool = False
    is_critical: bool = False
    effectiveness: str = "normal"
    damage_type: str = "normal"
    combo_multiplier: float = 1.0


@dataclass
class AttackResult:
    updated_attacker: Creature | None
    updated_defender: Creature | None
    battle_log: str = ""
    damage: int = 0
    attack_type: str = "physical"
    damage_result: DamageRoll = field(default_factory=DamageRoll)
    applied_effects: list[Effect] = field(default_factory=list)
    is_valid: bool = True

    @property
    def is_critical(self) -> bool:
        return self.damage_result.is_critical

    @property
    def is_dodged(self) -> bool:
        return self.damage_result.is_dodged

    # Aliases kept for consumers that read the older field names.
    @property
    def final_damage(self) -> int:
        return self.damage

    @property
    def total_damage(self) -> int:
        return self.damage

    @property
    def damage_dealt(self) -> int:
        return self.damage

    @property
    def actual_damage(self) -> int:
        return self.damage

    @property
    def is_blocked(self) -> bool:
        return self.damage_result.is_dodged

    def to_legacy_dict(self) -> dict[str, Any]:
        """Flat mapping using the presentation layer's camelCase names."""
        roll = self.damage_result
        return {
            "updatedAttacker": self.updated_attacker,
            "updatedDefender": self.updated_defender,
            "battleLog": self.battle_log,
            "damage": self.damage,
            "finalDamage": self.damage,
            "totalDamage": self.damage,
            "damageDealt": self.damage,
            "actualDamage": self.damage,
            "isCritical": roll.is_critical,
            "attackType": self.attack_type,
            "isBlocked": roll.is_dodged,
            "damageResult": {
                "damage": self.damage,
                "isDodged": roll.is_dodged,
                "isCritical": roll.is_critical,
                "effectiveness": roll.effectiveness,
                "damageType": roll.damage_type,
                "comboMultiplier": roll.combo_multiplier,
            },
        }


@dataclass
class ToolResult:
    updated_creature: Creature | None
    effect: ToolEffect | None = None
    active_effect: Effect | None = None
    battle_log: str = ""


@dataclass
class SpellResult:
    updated_caster: Creature | None
    updated_target: Creature | None
    effect: SpellEffect | None = None
    active_effect: Effect | None = None
    battle_log: str = ""


@dataclass
class DefeatOutcome:
    survivors: list[Creature] = field(default_factory=list)
    opponents: list[Creature] = field(default_factory=list)
    defeated: list[Creature] = field(default_factory=list)
    log: list[str] = field(default_factory=list)
