"""Item resolution: tools and spells applied to creatures as capped, scaled effects."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field, replace

from creature_battle.mechanics.dice import roll_percent
from creature_battle.mechanics.formulas import BattleFormulas
from creature_battle.mechanics.item_tables import get_spell_effect, get_tool_effect
from creature_battle.mechanics.stats import refresh_battle_stats
from creature_battle.models.creature import Creature
from creature_battle.models.effect import ChargeEffect, Effect, EffectKind, PowerLevel, PrepareEffect
from creature_battle.models.item import EffectTag, Number, SpellDef, SpellEffect, ToolDef, ToolEffect
from creature_battle.models.results import SpellResult, ToolResult
from creature_battle.utils import round_half_up, safe_number, sign

logger = logging.getLogger(__name__)

DIFFICULTY_POWER: dict[str, float] = {
    "easy": 0.9,
    "medium": 1.0,
    "hard": 1.1,
    "expert": 1.2,
}

MAX_STAT_MULTIPLIER = 1.5
TOOL_STAT_CAP = 10
TOOL_HEAL_CAP = 50
SPELL_STAT_CAP = 12
SPELL_DAMAGE_CAP = 100
SPELL_HEAL_CAP = 80
SPELL_SELF_HEAL_CAP = 40
SPELL_CRIT_MULTIPLIER = 1.5
ARMOR_PIERCE_FRACTION = 0.2
DEFAULT_CASTER_MAGIC = 5

TOOL_ICONS: dict[str, str] = {
    "Surge": "⚡",
    "Shield": "🛡️",
    "Echo": "🔊",
    "Drain": "🩸",
    "Charge": "🔋",
}

SPELL_ICONS: dict[str, str] = {
    "Surge": "💥",
    "Shield": "✨",
    "Echo": "🌊",
    "Drain": "🌙",
    "Charge": "☄️",
}

EFFECT_DESCRIPTIONS: dict[str, dict[str, str]] = {
    "Surge": {
        "weak": "Minor surge of power",
        "normal": "Surge of enhanced abilities",
        "strong": "Powerful surge of overwhelming might",
    },
    "Shield": {
        "weak": "Basic protective barrier",
        "normal": "Solid defensive enhancement",
        "strong": "Powerful defensive fortress",
    },
    "Echo": {
        "weak": "Faint repeating effect",
        "normal": "Resonating enhancement",
        "strong": "Powerful echoing phenomenon",
    },
    "Drain": {
        "weak": "Minor energy drain",
        "normal": "Life force absorption",
        "strong": "Powerful vampiric drain",
    },
    "Charge": {
        "weak": "Slow power buildup",
        "normal": "Steady power accumulation",
        "strong": "Rapid power concentration",
    },
}

# Item-tag pairs that reinforce each other when used together.
SYNERGY_PAIRS: tuple[tuple[str, str], ...] = (
    ("Surge", "Drain"),
    ("Shield", "Echo"),
    ("Charge", "Surge"),
    ("Drain", "Echo"),
    ("Shield", "Charge"),
)


def _key(value) -> str:
    return str(getattr(value, "value", value))


def calculate_effect_power(item: ToolDef | SpellDef, caster_stats: dict | None, difficulty: str = "medium") -> float:
    """Power multiplier for an item use.

    Difficulty sets the baseline. Spells also scale by 5% per point of the
    caster's stat in the spell's category above 5 (or below it).
    """
    multiplier = DIFFICULTY_POWER.get(_key(difficulty), 1.0)
    spell_type = getattr(item, "spell_type", None)
    if caster_stats and spell_type is not None:
        relevant = safe_number(caster_stats.get(_key(spell_type))) or 5
        multiplier *= 1 + (relevant - 5) * 0.05
    return multiplier


def power_level_for(multiplier: float) -> PowerLevel:
    if multiplier >= 1.3:
        return PowerLevel.STRONG
    if multiplier >= 1.1:
        return PowerLevel.NORMAL
    return PowerLevel.WEAK


def get_effect_description(tag: str, level: PowerLevel | str = PowerLevel.NORMAL) -> str:
    tag = _key(tag)
    description = EFFECT_DESCRIPTIONS.get(tag, {}).get(_key(level))
    return description or f"{tag.lower()} effect"


def get_tool_icon(tag) -> str:
    return TOOL_ICONS.get(_key(tag), "🔧")


def get_spell_icon(tag) -> str:
    return SPELL_ICONS.get(_key(tag), "✨")


def describe_item(item: ToolDef | SpellDef, effect_power: float = 1.0) -> str:
    """Player-facing sentence describing what an item does at a given power."""
    is_spell = isinstance(item, SpellDef)
    tag = item.spell_effect if is_spell else item.tool_effect
    category = item.spell_type if is_spell else item.tool_type
    category = _key(category) if category is not None else "general"

    if effect_power >= 1.3:
        power = "powerful"
    elif effect_power >= 1.1:
        power = "effective"
    elif effect_power >= 1.0:
        power = "standard"
    else:
        power = "weak"

    match _key(tag) if tag is not None else None:
        case "Surge":
            if is_spell:
                return f"Unleashes a {power} burst of {category} energy, dealing immediate damage."
            return f"Provides a {power} but short-lived boost to {category} capabilities."
        case "Shield":
            if is_spell:
                return f"Creates a {power} magical barrier that absorbs damage and heals."
            return f"Grants {power} defensive protection and resilience."
        case "Echo":
            if is_spell:
                return f"Applies {power} effects that repeat over multiple turns."
            return f"Creates a {power} repeating effect with extended duration."
        case "Drain":
            if is_spell:
                return f"Steals life force from the target with {power} efficiency."
            return f"Converts defensive power to offense in a {power} way."
        case "Charge":
            if is_spell:
                return f"Requires preparation but delivers a {power} delayed effect."
            return f"Builds up power over time for a {power} payoff."
        case _:
            if is_spell:
                return f"A {power} magical effect affecting {category}."
            return f"Enhances {category} attributes in a {power} way."


@dataclass
class ComboBonus:
    stat_changes: dict[str, int] = field(default_factory=dict)
    damage: int = 0
    healing: int = 0
    duration: int = 0


def _is_synergy_pair(first: str, second: str) -> bool:
    return (first, second) in SYNERGY_PAIRS or (second, first) in SYNERGY_PAIRS


def calculate_combo_effect(effects: list[Effect]) -> ComboBonus | None:
    """Bonus earned by item effects used together, or None without a synergy.

    Every synergistic pair adds flat damage, healing and duration, plus one
    point to each stat the first effect of the pair modifies.
    """
    if not effects or len(effects) < 2:
        return None

    bonus = ComboBonus()
    for index, effect in enumerate(effects):
        for other in effects[index + 1:]:
            if effect.effect_tag is None or other.effect_tag is None:
                continue
            if not _is_synergy_pair(_key(effect.effect_tag), _key(other.effect_tag)):
                continue
            bonus.damage += 5
            bonus.healing += 3
            bonus.duration += 1
            for stat in effect.stat_modifications:
                bonus.stat_changes[stat] = bonus.stat_changes.get(stat, 0) + 1

    if bonus.stat_changes or bonus.damage > 0 or bonus.healing > 0:
        return bonus
    return None


def _scale_stat_changes(changes: dict[str, Number], cap: int, multiplier: float) -> dict[str, int]:
    factor = min(multiplier, MAX_STAT_MULTIPLIER)
    return {
        stat: round_half_up(min(abs(value), cap) * sign(value) * factor)
        for stat, value in changes.items()
    }


def _apply_stat_deltas(creature: Creature, deltas: dict[str, Number]) -> None:
    stats = creature.battle_stats or {}
    for stat, value in deltas.items():
        if stat in stats:
            stats[stat] = max(0, stats[stat] + value)


def _heal(creature: Creature, amount: int) -> int:
    before = creature.current_health
    max_health = (creature.battle_stats or {}).get("maxHealth")
    creature.current_health = int(before + amount if max_health is None else min(before + amount, max_health))
    return creature.current_health - before


def scale_tool_effect(base: ToolEffect, multiplier: float) -> ToolEffect:
    return replace(
        base,
        stat_changes=_scale_stat_changes(base.stat_changes, TOOL_STAT_CAP, multiplier),
        health_change=round_half_up(min(base.health_change * multiplier, TOOL_HEAL_CAP)) if base.health_change else 0,
        health_over_time=round_half_up(base.health_over_time * multiplier) if base.health_over_time else 0,
        duration=base.duration or 1,
    )


def _tool_kind(tag: EffectTag) -> EffectKind:
    if tag == EffectTag.CHARGE:
        return EffectKind.CHARGE
    if tag == EffectTag.ECHO:
        return EffectKind.ECHO
    return EffectKind.ENHANCEMENT


def apply_tool(
    creature: Creature,
    tool: ToolDef,
    difficulty: str = "medium",
    turn: int = 0,
    *,
    formulas: BattleFormulas | None = None,
) -> ToolResult:
    """Use a tool on a creature.

    Returns a new creature carrying the scaled effect. Invalid input is a
    soft failure: the original creature comes back with ``effect`` None.
    """
    if creature is None or tool is None:
        logger.warning("Tool application failed: missing creature or tool")
        return ToolResult(updated_creature=creature)
    if not creature.battle_stats:
        logger.warning(f"Tool application failed: {creature.species_name} has no battle stats")
        return ToolResult(updated_creature=creature)
    if tool.tool_type is None or tool.tool_effect is None:
        logger.warning(f"Tool application failed: {tool.name or tool.id} has no type or effect")
        return ToolResult(updated_creature=creature)

    multiplier = calculate_effect_power(tool, creature.stats, difficulty)
    base = get_tool_effect(tool.tool_type, tool.tool_effect)
    scaled = scale_tool_effect(base, multiplier)

    updated = creature.model_copy(deep=True)
    _apply_stat_deltas(updated, scaled.stat_changes)

    active: Effect | None = None
    if scaled.duration > 0:
        level = power_level_for(multiplier)
        active = Effect(
            name=f"{tool.name or 'Tool'} Effect",
            icon=get_tool_icon(tool.tool_effect),
            kind=_tool_kind(tool.tool_effect),
            description=get_effect_description(tool.tool_effect, level),
            duration=scaled.duration,
            start_turn=turn,
            stat_modifications=dict(scaled.stat_changes),
            health_over_time=int(scaled.health_over_time),
            power_level=level,
            effect_tag=tool.tool_effect,
        )
        if tool.tool_effect == EffectTag.CHARGE and base.charge_effect is not None:
            spec = base.charge_effect
            active.charge_effect = ChargeEffect(
                target_stat=spec.target_stat,
                per_turn_bonus=round_half_up(spec.per_turn_bonus * multiplier),
                max_turns=spec.max_turns,
                final_burst=round_half_up(spec.final_burst * multiplier),
            )
        updated.active_effects = [*updated.active_effects, active]

    parts = [f"{updated.species_name} used {tool.name or 'a tool'}"]
    if scaled.health_change > 0:
        healed = _heal(updated, int(scaled.health_change))
        if healed:
            parts.append(f"recovering {healed} health")
            logger.debug(f"{tool.name} healed {updated.species_name} for {healed}")

    refresh_battle_stats(updated, formulas)

    return ToolResult(
        updated_creature=updated,
        effect=scaled,
        active_effect=active,
        battle_log=", ".join(parts) + ".",
    )


def scale_spell_effect(base: SpellEffect, multiplier: float) -> SpellEffect:
    return replace(
        base,
        damage=round_half_up(min(base.damage * multiplier, SPELL_DAMAGE_CAP)) if base.damage else 0,
        healing=round_half_up(min(base.healing * multiplier, SPELL_HEAL_CAP)) if base.healing else 0,
        self_heal=round_half_up(min(base.self_heal * multiplier, SPELL_SELF_HEAL_CAP)) if base.self_heal else 0,
        health_over_time=round_half_up(base.health_over_time * multiplier) if base.health_over_time else 0,
        stat_changes=_scale_stat_changes(base.stat_changes, SPELL_STAT_CAP, multiplier),
    )


def spell_crit_chance(caster_magic: float) -> int:
    """Percent chance for a spell to crit: 3 + 0.3 per magic point, at most 15."""
    return min(3 + int(caster_magic * 0.3), 15)


def _spell_kind(tag: EffectTag) -> EffectKind:
    if tag == EffectTag.CHARGE:
        return EffectKind.CHARGE
    if tag == EffectTag.ECHO:
        return EffectKind.ECHO
    return EffectKind.MAGIC


def apply_spell(
    caster: Creature,
    target: Creature,
    spell: SpellDef,
    difficulty: str = "medium",
    turn: int = 0,
    *,
    rng: random.Random | None = None,
    formulas: BattleFormulas | None = None,
) -> SpellResult:
    """Cast a spell from ``caster`` at ``target``.

    Damage, drain and the lasting effect land on the target. Healing only
    applies to a self-cast; self-heal only when casting at someone else.
    When caster and target are the same creature, the returned caster is the
    updated target.
    """
    if caster is None or target is None or spell is None:
        logger.warning("Spell application failed: missing caster, target or spell")
        return SpellResult(updated_caster=caster, updated_target=target)
    if not caster.stats or not target.battle_stats:
        logger.warning(f"Spell application failed: {caster.species_name} -> {target.species_name} missing stats")
        return SpellResult(updated_caster=caster, updated_target=target)
    if spell.spell_type is None or spell.spell_effect is None:
        logger.warning(f"Spell application failed: {spell.name or spell.id} has no type or effect")
        return SpellResult(updated_caster=caster, updated_target=target)

    self_cast = caster.id == target.id
    updated_target = target.model_copy(deep=True)
    updated_caster = caster.model_copy(deep=True)

    caster_magic = safe_number(caster.stats.get("magic")) or DEFAULT_CASTER_MAGIC
    multiplier = calculate_effect_power(spell, caster.stats, difficulty)
    base = get_spell_effect(spell.spell_type, spell.spell_effect, caster_magic)
    scaled = scale_spell_effect(base, multiplier)

    name = spell.name or "The spell"
    log: list[str] = [f"{caster.species_name} cast {name} on {target.species_name}"]

    if scaled.damage:
        final_damage = int(scaled.damage)
        is_critical = roll_percent(spell_crit_chance(caster_magic), rng)
        if is_critical:
            final_damage = round_half_up(final_damage * SPELL_CRIT_MULTIPLIER)
            log.append("critical hit")
        if scaled.armor_piercing or multiplier >= 1.3:
            final_damage += round_half_up(final_damage * ARMOR_PIERCE_FRACTION)
        updated_target.current_health = max(0, updated_target.current_health - final_damage)
        scaled = replace(scaled, actual_damage=final_damage, was_critical=is_critical)
        log.append(f"dealing {final_damage} damage")
        logger.debug(f"{name} hit {target.species_name} for {final_damage} (critical={is_critical})")

    if scaled.healing and self_cast:
        healed = _heal(updated_target, int(scaled.healing))
        log.append(f"restoring {healed} health")

    if scaled.self_heal and not self_cast and updated_caster.battle_stats:
        drained = _heal(updated_caster, int(scaled.self_heal))
        log.append(f"draining {drained} health")

    if scaled.stat_changes:
        _apply_stat_deltas(updated_target, scaled.stat_changes)

    if scaled.stat_drain and scaled.stat_gain and updated_caster.battle_stats:
        target_stats = updated_target.battle_stats
        caster_stats = updated_caster.battle_stats
        for stat, value in scaled.stat_drain.items():
            if stat in target_stats and stat in caster_stats:
                target_stats[stat] = max(0, target_stats[stat] + value)
                caster_stats[stat] = caster_stats[stat] + scaled.stat_gain.get(stat, 0)

    active: Effect | None = None
    if base.duration > 0:
        level = power_level_for(multiplier)
        active = Effect(
            name=f"{spell.name or 'Spell'} Effect",
            icon=get_spell_icon(spell.spell_effect),
            kind=_spell_kind(spell.spell_effect),
            description=get_effect_description(spell.spell_effect, level),
            duration=base.duration,
            start_turn=turn,
            stat_modifications=dict(scaled.stat_changes),
            health_over_time=int(scaled.health_over_time),
            caster_magic=caster_magic,
            power_level=level,
            effect_tag=spell.spell_effect,
            damage_reduction=scaled.damage_reduction or None,
        )
        if spell.spell_effect == EffectTag.CHARGE and base.prepare_effect is not None:
            prep = base.prepare_effect
            active.prepare_effect = PrepareEffect(
                name=prep.name,
                turns=prep.turns,
                damage=round_half_up(prep.damage * multiplier),
                area_effect=prep.area_effect,
                stun_chance=prep.stun_chance,
            )
        updated_target.active_effects = [*updated_target.active_effects, active]

    if scaled.stat_changes:
        refresh_battle_stats(updated_target, formulas)

    return SpellResult(
        updated_caster=updated_target if self_cast else updated_caster,
        updated_target=updated_target,
        effect=scaled,
        active_effect=active,
        battle_log=", ".join(log) + ".",
    )
