"""Field-wide team bonuses.

Synergies are derived from the current field on every query and never stored
on a creature. ``apply_synergy_modifiers`` returns boosted copies for a caller
that wants to display or simulate with them.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from creature_battle.models.creature import Creature
from creature_battle.utils import round_half_up

logger = logging.getLogger(__name__)

SPECIES_BASE_BONUS = 0.1
SPECIES_BONUS_PER_EXTRA = 0.05
SPECIES_MAX_BONUS = 0.2
STAT_SYNERGY_BONUS = 0.05
LEGENDARY_PRESENCE_BONUS = 0.1
FORM_PROTECTION_BONUS = 0.1
FORM_PROTECTION_MIN_FORM = 3
BALANCED_TEAM_BONUS = 0.05
BALANCED_TEAM_MIN_SPECIALTIES = 3
FULL_FIELD_BONUS = 0.05
FULL_FIELD_SIZE = 5

SCALED_STATS = (
    "physicalAttack",
    "magicalAttack",
    "physicalDefense",
    "magicalDefense",
    "maxHealth",
    "initiative",
)
DEFENSE_STATS = ("physicalDefense", "magicalDefense")

SYNERGY_COLORS: dict[str, str] = {
    "species": "#4CAF50",
    "legendary_presence": "#FFD700",
    "stat_synergy": "#2196F3",
    "form_protection": "#9C27B0",
    "balanced_team": "#00BCD4",
    "full_field": "#FF5722",
}


@dataclass
class Synergy:
    type: str
    name: str
    bonus: float
    species: str | None = None
    count: int = 0
    stats: list[str] = field(default_factory=list)
    color: str | None = None


def _rarity(creature: Creature) -> str:
    return str(getattr(creature.rarity, "value", creature.rarity))


def check_field_synergies(creatures: list[Creature]) -> list[Synergy]:
    creatures = [c for c in creatures or [] if c is not None]
    if not creatures:
        return []

    synergies: list[Synergy] = []

    for species, count in Counter(c.species_name for c in creatures).items():
        if count >= 2:
            bonus = min(SPECIES_BASE_BONUS + (count - 2) * SPECIES_BONUS_PER_EXTRA, SPECIES_MAX_BONUS)
            synergies.append(Synergy(type="species", name=f"{species} Synergy", bonus=bonus, species=species, count=count))

    specialty_counts = Counter(stat for c in creatures for stat in set(c.specialty_stats))
    shared = sorted(stat for stat, count in specialty_counts.items() if count >= 2)
    if shared:
        synergies.append(Synergy(
            type="stat_synergy",
            name=f"{' & '.join(s.capitalize() for s in shared)} Synergy",
            bonus=STAT_SYNERGY_BONUS,
            stats=shared,
        ))

    legendaries = sum(1 for c in creatures if _rarity(c) == "Legendary")
    if legendaries:
        synergies.append(Synergy(
            type="legendary_presence",
            name="Legendary Presence",
            bonus=LEGENDARY_PRESENCE_BONUS,
            count=legendaries,
        ))

    guardians = sum(1 for c in creatures if c.form >= FORM_PROTECTION_MIN_FORM)
    if guardians:
        synergies.append(Synergy(
            type="form_protection",
            name="Guardian Presence",
            bonus=FORM_PROTECTION_BONUS,
            count=guardians,
        ))

    if len(specialty_counts) >= BALANCED_TEAM_MIN_SPECIALTIES:
        synergies.append(Synergy(
            type="balanced_team",
            name="Balanced Formation",
            bonus=BALANCED_TEAM_BONUS,
            stats=sorted(specialty_counts),
        ))

    if len(creatures) >= FULL_FIELD_SIZE:
        synergies.append(Synergy(
            type="full_field",
            name="Full Force",
            bonus=FULL_FIELD_BONUS,
            count=len(creatures),
        ))

    return synergies


def _affected_stats(synergy: Synergy, creature: Creature) -> tuple[str, ...]:
    if synergy.type == "species":
        return SCALED_STATS if creature.species_name == synergy.species else ()
    if synergy.type == "stat_synergy":
        return SCALED_STATS if set(creature.specialty_stats) & set(synergy.stats) else ()
    if synergy.type == "form_protection":
        return DEFENSE_STATS
    return SCALED_STATS


def apply_synergy_modifiers(creatures: list[Creature], synergies: list[Synergy]) -> list[Creature]:
    """Boosted copies of ``creatures``; bonuses from several synergies add up."""
    boosted: list[Creature] = []
    for creature in creatures:
        if creature is None or not creature.battle_stats:
            boosted.append(creature)
            continue
        totals: dict[str, float] = {}
        for synergy in synergies:
            for stat in _affected_stats(synergy, creature):
                totals[stat] = totals.get(stat, 0.0) + synergy.bonus
        updated = creature.model_copy(deep=True)
        for stat, bonus in totals.items():
            if stat in updated.battle_stats:
                updated.battle_stats[stat] = round_half_up(updated.battle_stats[stat] * (1 + bonus))
        boosted.append(updated)
    return boosted


def apply_field_synergies(creatures: list[Creature]) -> list[Creature]:
    if not creatures:
        return creatures
    synergies = check_field_synergies(creatures)
    if not synergies:
        return creatures
    logger.debug(f"Applying {len(synergies)} synergies to field")
    return apply_synergy_modifiers(creatures, synergies)


def _percent(bonus: float) -> int:
    return round_half_up(bonus * 100)


def create_synergy_effect_data(synergies: list[Synergy]) -> list[dict[str, Any]]:
    """Display payloads (type, message, color) for active synergies."""
    data: list[dict[str, Any]] = []
    for synergy in synergies:
        color = synergy.color or SYNERGY_COLORS.get(synergy.type, "#2196F3")
        pct = _percent(synergy.bonus)
        if synergy.type == "species":
            data.append({
                "type": "species-synergy",
                "species": synergy.species,
                "count": synergy.count,
                "bonus": synergy.bonus,
                "message": f"{synergy.species} Synergy x{synergy.count}! (+{pct}% stats)",
                "color": color,
            })
        elif synergy.type in ("stats", "stat_synergy"):
            data.append({
                "type": "stat-synergy",
                "stats": list(synergy.stats),
                "bonus": synergy.bonus,
                "message": synergy.name or f"Stat Synergy! (+{pct}% stats)",
                "color": color,
            })
        elif synergy.type == "legendary_presence":
            data.append({
                "type": "legendary-presence",
                "bonus": synergy.bonus,
                "message": synergy.name or f"Legendary Presence! (+{pct}% stats)",
                "color": color,
            })
        elif synergy.type == "form_protection":
            data.append({
                "type": "form-protection",
                "bonus": synergy.bonus,
                "message": synergy.name or f"Guardian Presence! (+{pct}% defense)",
                "color": color,
            })
        elif synergy.type == "balanced_team":
            data.append({
                "type": "balanced-team",
                "bonus": synergy.bonus,
                "message": synergy.name or f"Balanced Formation! (+{pct}% all stats)",
                "color": color,
            })
        elif synergy.type == "full_field":
            data.append({
                "type": "full-field",
                "bonus": synergy.bonus,
                "message": synergy.name or f"Full Force! (+{pct}% all stats)",
                "color": color,
            })
        else:
            data.append({
                "type": synergy.type or "unknown",
                "bonus": synergy.bonus or 0,
                "message": synergy.name or f"{synergy.type} Synergy!",
                "color": color,
            })
    return data
