from __future__ import annotations

from creature_battle.models.creature import CATEGORY_STATS, Creature, Rarity
from creature_battle.models.effect import ChargeEffect, Effect, EffectKind, PowerLevel, PrepareEffect
from creature_battle.models.game_state import Card, Difficulty, GameState, Side
from creature_battle.models.item import (
    ChargeSpec,
    EffectTag,
    ItemCategory,
    PrepareSpec,
    SpellDef,
    SpellEffect,
    ToolDef,
    ToolEffect,
)
from creature_battle.models.results import AttackResult, DamageRoll, DefeatOutcome, SpellResult, ToolResult

__all__ = [
    "AttackResult",
    "CATEGORY_STATS",
    "Card",
    "ChargeEffect",
    "ChargeSpec",
    "Creature",
    "DamageRoll",
    "DefeatOutcome",
    "Difficulty",
    "Effect",
    "EffectKind",
    "EffectTag",
    "GameState",
    "ItemCategory",
    "PowerLevel",
    "PrepareEffect",
    "PrepareSpec",
    "Rarity",
    "Side",
    "SpellDef",
    "SpellEffect",
    "SpellResult",
    "ToolDef",
    "ToolEffect",
    "ToolResult",
]
