"""Combat resolution: attacks, on-hit debuffs, defensive stances and log lines."""
from __future__ import annotations

import logging
import random

from creature_battle.mechanics.dice import roll_chance
from creature_battle.mechanics.formulas import BattleFormulas, get_formulas
from creature_battle.mechanics.stats import refresh_battle_stats
from creature_battle.models.creature import Creature, Rarity
from creature_battle.models.effect import Effect, EffectKind
from creature_battle.models.item import EffectTag
from creature_battle.models.results import AttackResult, DamageRoll
from creature_battle.utils import round_half_up, safe_number

logger = logging.getLogger(__name__)

CRIT_TRAUMA_CHANCE = 0.2
ELEMENTAL_WEAKNESS_CHANCE = 0.25
DEFENSE_BOOST_FRACTION = 0.5
DEFAULT_DEFENSE = 50

INVALID_ATTACK_LOG = "Invalid attack - missing stats"

DEFEAT_MESSAGES: dict[str, str] = {
    "Legendary": "falls in battle!",
    "Epic": "has been defeated!",
}


def critical_strike_trauma(turn: int = 0) -> Effect:
    return Effect(
        name="Critical Strike Trauma",
        icon="💥",
        kind=EffectKind.DEBUFF,
        description="Suffering from critical strike",
        duration=1,
        start_turn=turn,
        stat_modifications={"physicalDefense": -2, "magicalDefense": -2},
    )


def elemental_weakness(turn: int = 0) -> Effect:
    return Effect(
        name="Elemental Weakness",
        icon="⚡",
        kind=EffectKind.DEBUFF,
        description="Vulnerable to attacks",
        duration=2,
        start_turn=turn,
        stat_modifications={"physicalDefense": -1, "magicalDefense": -1},
    )


def resolve_attack_type(attacker: Creature, attack_type: str = "auto") -> str:
    """Pick physical or magical for an ``auto`` attack; physical wins ties."""
    if attack_type != "auto":
        return attack_type
    stats = attacker.battle_stats or {}
    physical = safe_number(stats.get("physicalAttack"))
    magical = safe_number(stats.get("magicalAttack"))
    return "physical" if physical >= magical else "magical"


def format_attack_log(
    attacker: Creature,
    defender: Creature,
    attack_type: str,
    roll: DamageRoll,
    damage: int,
    combo_level: int,
) -> str:
    if roll.is_dodged:
        return f"{attacker.species_name}'s {attack_type} attack was dodged by {defender.species_name}!"

    message = f"{attacker.species_name} used {attack_type} attack on {defender.species_name}"
    if roll.is_critical:
        message += " (Critical Hit!)"
    if combo_level > 1:
        message += f" [Combo x{combo_level}!]"
    if roll.effectiveness != "normal":
        message += f" - {roll.effectiveness}!"
    if roll.damage_type and roll.damage_type != "normal":
        message += f" [{roll.damage_type}]"
    message += f" dealing {damage} damage."

    name = defender.species_name
    max_health = defender.max_health
    if defender.current_health <= 0:
        message += f" {defeat_message(defender)}"
    elif defender.current_health < max_health * 0.2:
        message += f" {name} is critically wounded!"
    elif defender.current_health < max_health * 0.5:
        message += f" {name} is wounded!"
    return message


def process_attack(
    attacker: Creature,
    defender: Creature,
    attack_type: str = "auto",
    combo_level: int = 0,
    *,
    turn: int = 0,
    rng: random.Random | None = None,
    formulas: BattleFormulas | None = None,
) -> AttackResult:
    """Resolve one attack from ``attacker`` against ``defender``.

    Returns new creature snapshots; neither input is modified. A pending
    ``next_attack_bonus`` boosts the chosen attack stat for this strike only
    and is cleared on the returned attacker.
    """
    if attacker is None or defender is None or not attacker.battle_stats or not defender.battle_stats:
        logger.warning("Invalid attack: attacker or defender missing battle stats")
        return AttackResult(
            updated_attacker=attacker,
            updated_defender=defender,
            battle_log=INVALID_ATTACK_LOG,
            is_valid=False,
        )

    formulas = get_formulas(formulas)
    updated_attacker = attacker.model_copy(deep=True)
    updated_defender = defender.model_copy(deep=True)
    attack_type = resolve_attack_type(updated_attacker, attack_type)

    striker = updated_attacker
    if updated_attacker.next_attack_bonus:
        stat = "physicalAttack" if attack_type == "physical" else "magicalAttack"
        striker = updated_attacker.model_copy(deep=True)
        striker.battle_stats[stat] = safe_number(striker.battle_stats.get(stat)) + updated_attacker.next_attack_bonus
        logger.info(f"{attacker.species_name} unleashes a charged attack (+{updated_attacker.next_attack_bonus})")
        updated_attacker.next_attack_bonus = None

    combo = formulas.combo_bonus(combo_level)
    roll = formulas.calculate_damage(striker, updated_defender, attack_type, combo, rng)

    damage = 0
    applied: list[Effect] = []
    if not roll.is_dodged:
        before = updated_defender.current_health
        updated_defender.current_health = max(0, before - int(roll.damage))
        damage = before - updated_defender.current_health

        if roll.is_critical and roll_chance(CRIT_TRAUMA_CHANCE, rng):
            applied.append(critical_strike_trauma(turn))
        if roll.effectiveness in ("very effective", "effective") and roll_chance(ELEMENTAL_WEAKNESS_CHANCE, rng):
            applied.append(elemental_weakness(turn))

        if applied:
            updated_defender.active_effects = [*updated_defender.active_effects, *applied]
            refresh_battle_stats(updated_defender, formulas)

        logger.debug(
            f"{attacker.species_name} hit {defender.species_name} for {damage}: "
            f"{before} -> {updated_defender.current_health}"
        )

    log = format_attack_log(updated_attacker, updated_defender, attack_type, roll, damage, combo_level)

    return AttackResult(
        updated_attacker=updated_attacker,
        updated_defender=updated_defender,
        battle_log=log,
        damage=damage,
        attack_type=attack_type,
        damage_result=DamageRoll(
            damage=damage,
            is_dodged=roll.is_dodged,
            is_critical=roll.is_critical,
            effectiveness=roll.effectiveness,
            damage_type=roll.damage_type,
            combo_multiplier=combo,
        ),
        applied_effects=applied,
    )


def defend_creature(
    creature: Creature,
    difficulty: str = "medium",
    turn: int = 0,
    formulas: BattleFormulas | None = None,
) -> Creature:
    """Put a creature into a one-turn defensive stance.

    Both defenses rise by half their current value, plus the rarity share of
    that boost. Hard and expert stances also absorb more incoming damage.
    """
    if creature is None or not creature.battle_stats:
        logger.warning("Cannot defend with a creature missing battle stats")
        return creature

    formulas = get_formulas(formulas)
    updated = creature.model_copy(deep=True)
    updated.is_defending = True

    rarity_bonus = formulas.rarity_multiplier(updated.rarity) - 1
    modifications = {}
    for stat in ("physicalDefense", "magicalDefense"):
        current = safe_number(updated.battle_stats.get(stat)) or DEFAULT_DEFENSE
        boost = round_half_up(current * DEFENSE_BOOST_FRACTION)
        modifications[stat] = boost + round_half_up(boost * rarity_bonus)

    difficulty = str(getattr(difficulty, "value", difficulty))
    updated.active_effects = [
        *updated.active_effects,
        Effect(
            name="Defensive Stance",
            icon="🛡️",
            kind=EffectKind.DEFENSE,
            description="Braced against the next attack",
            duration=1,
            start_turn=turn,
            stat_modifications=modifications,
            effect_tag=EffectTag.SHIELD,
            damage_reduction=0.4 if difficulty in ("hard", "expert") else 0.2,
        ),
    ]
    refresh_battle_stats(updated, formulas)
    logger.info(f"{updated.species_name} is defending")
    return updated


def defeat_message(creature: Creature) -> str:
    rarity = creature.rarity.value if isinstance(creature.rarity, Rarity) else str(creature.rarity)
    return f"{creature.species_name} {DEFEAT_MESSAGES.get(rarity, 'was defeated!')}"
