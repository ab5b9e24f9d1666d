"""Death triggers: blessings for surviving allies, revenge debuffs for the victors."""
from __future__ import annotations

import logging

from creature_battle.mechanics.formulas import BattleFormulas
from creature_battle.mechanics.stats import refresh_battle_stats
from creature_battle.models.creature import Creature
from creature_battle.models.effect import Effect, EffectKind
from creature_battle.models.results import DefeatOutcome

logger = logging.getLogger(__name__)


def _rarity(creature: Creature) -> str:
    return str(getattr(creature.rarity, "value", creature.rarity))


def final_gift(fallen: Creature, turn: int = 0) -> Effect:
    return Effect(
        name=f"{fallen.species_name}'s Final Gift",
        icon="👑",
        kind=EffectKind.LEGENDARY_BLESSING,
        description="Empowered by a fallen legendary creature",
        duration=5,
        start_turn=turn,
        stat_modifications={"physicalAttack": 2, "magicalAttack": 2},
    )


def energy_release(turn: int = 0) -> Effect:
    return Effect(
        name="Energy Release",
        icon="⚡",
        kind=EffectKind.ENERGY_BURST,
        description="Energized by released power",
        duration=2,
        start_turn=turn,
        stat_modifications={"energyCost": -1},
    )


def epic_essence(turn: int = 0) -> Effect:
    return Effect(
        name="Epic Essence",
        icon="💜",
        kind=EffectKind.EPIC_BLESSING,
        description="Blessed by epic essence",
        duration=3,
        start_turn=turn,
        stat_modifications={"physicalAttack": 1, "magicalAttack": 1},
    )


def guilty_conscience(turn: int = 0) -> Effect:
    return Effect(
        name="Guilty Conscience",
        icon="😰",
        kind=EffectKind.DEBUFF,
        description="Shaken by defeating a powerful foe",
        duration=2,
        start_turn=turn,
        stat_modifications={"initiative": -2, "dodgeChance": -1},
    )


def ally_blessing(fallen: Creature, turn: int = 0) -> Effect | None:
    """The single blessing a fallen creature leaves its allies, if any.

    Legendary beats energy specialty, which beats Epic.
    """
    rarity = _rarity(fallen)
    if rarity == "Legendary":
        return final_gift(fallen, turn)
    if fallen.has_specialty("energy"):
        return energy_release(turn)
    if rarity == "Epic":
        return epic_essence(turn)
    return None


def triggers_revenge(fallen: Creature) -> bool:
    return _rarity(fallen) in ("Legendary", "Epic")


def process_defeated_creatures(
    field: list[Creature],
    opposing_field: list[Creature] | None = None,
    *,
    turn: int = 0,
    formulas: BattleFormulas | None = None,
) -> DefeatOutcome:
    """Remove defeated creatures from a field and fire their death triggers.

    Every survivor of ``field`` receives each fallen ally's blessing, whatever
    their position. Powerful fallen creatures also debuff every creature in
    ``opposing_field``. Affected creatures are returned as refreshed copies.
    """
    opposing_field = opposing_field or []
    survivors = [c.model_copy(deep=True) for c in field if c is not None and c.current_health > 0]
    defeated = [c for c in field if c is not None and c.current_health <= 0]
    opponents = list(opposing_field)
    if any(triggers_revenge(c) for c in defeated):
        opponents = [c.model_copy(deep=True) if c is not None else None for c in opponents]

    if not defeated:
        return DefeatOutcome(survivors=survivors, opponents=opponents)

    foes = [c for c in opponents if c is not None]
    log: list[str] = []
    blessed = False
    shaken = False
    for fallen in defeated:
        blessing = ally_blessing(fallen, turn)
        if blessing is not None and survivors:
            for ally in survivors:
                ally.active_effects = [*ally.active_effects, ally_blessing(fallen, turn)]
            blessed = True
            log.append(f"{fallen.species_name} was defeated! {blessing.name} empowers its allies.")
        else:
            log.append(f"{fallen.species_name} was defeated!")
        logger.info(f"{fallen.species_name} ({_rarity(fallen)}) defeated")

        if triggers_revenge(fallen) and foes:
            for enemy in foes:
                enemy.active_effects = [*enemy.active_effects, guilty_conscience(turn)]
            shaken = True
            log.append(f"Defeating {fallen.species_name} shakes its foes.")

    if blessed:
        for ally in survivors:
            refresh_battle_stats(ally, formulas)
    if shaken:
        for enemy in foes:
            refresh_battle_stats(enemy, formulas)

    return DefeatOutcome(survivors=survivors, opponents=opponents, defeated=defeated, log=log)
