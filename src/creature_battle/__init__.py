from __future__ import annotations

from creature_battle.engine.session import BattleSession
from creature_battle.engine.turn import apply_ongoing_effects, process_turn
from creature_battle.mechanics.combat import defend_creature, process_attack
from creature_battle.mechanics.death import process_defeated_creatures
from creature_battle.mechanics.formulas import BattleFormulas, DefaultFormulas
from creature_battle.mechanics.items import apply_spell, apply_tool
from creature_battle.mechanics.stats import recalculate_battle_stats

__version__ = "0.1.0"

__all__ = [
    "BattleFormulas",
    "BattleSession",
    "DefaultFormulas",
    "apply_ongoing_effects",
    "apply_spell",
    "apply_tool",
    "defend_creature",
    "process_attack",
    "process_defeated_creatures",
    "process_turn",
    "recalculate_battle_stats",
]
